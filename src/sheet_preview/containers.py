class ItemsList:
    """
    A read-only list of document items addressable by position or by name.

    Items are constructed by calling ``item_class`` on each of ``refs``.
    """

    def __init__(self, refs, item_class):
        self._item_name = item_class.__name__.lower()
        self._items = [item_class(ref) for ref in refs]

    def __getitem__(self, key):
        if isinstance(key, int):
            if key < 0:
                key += len(self._items)
            if key >= len(self._items) or key < 0:
                raise IndexError(f"index {key} out of range")
            return self._items[key]
        elif isinstance(key, str):
            for item in self._items:
                if item.name == key:
                    return item
            raise KeyError(f"no {self._item_name} named '{key}'")
        else:
            t = type(key).__name__
            raise LookupError(f"invalid index type {t}")

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key) -> bool:
        return any(item.name == key for item in self._items)

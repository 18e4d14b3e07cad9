import logging
from typing import List, Optional

from bs4 import Tag

from sheet_preview import __name__ as sheet_preview_name
from sheet_preview.constants import (
    ADDRESS_ATTR,
    COL_ATTR,
    FORMAT_SEPARATOR_ATTR,
    FORMAT_SEPARATOR_VALUE,
    FORMULA_ATTR,
    ORIGINAL_TITLE_ATTR,
    ROW_ATTR,
    TITLE_ATTR,
    TOOLTIP_ATTR,
)
from sheet_preview.grid import parse_number
from sheet_preview.utils import format_style, parse_style
from sheet_preview.xref_utils import xl_rowcol_to_cell

logger = logging.getLogger(sheet_preview_name)
debug = logger.debug

__all__ = ["Cell"]


def _span(value) -> int:
    try:
        span = int(value)
    except (TypeError, ValueError):
        return 1
    return span if span > 0 else 1


def _int_attr(tag: Tag, name: str) -> Optional[int]:
    try:
        return int(tag[name])
    except (KeyError, ValueError):
        return None


class Cell:
    """
    A ``<td>`` or ``<th>`` node of a table in a :class:`Document`.

    .. NOTE::
       Do not instantiate directly. Cells are created by :py:class:`~sheet_preview.Table`.

    Cells are thin views onto the document tree: all state is read from and
    written to the node's attributes and text, so two ``Cell`` objects for
    the same node compare equal.
    """

    def __init__(self, tag: Tag):
        self._tag = tag

    def __eq__(self, other) -> bool:
        return isinstance(other, Cell) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"<Cell {self.address or '?'} text={self.text!r}>"

    @property
    def tag(self) -> Tag:
        """Tag: The document node for the cell."""
        return self._tag

    @property
    def row(self) -> Optional[int]:
        """int: The zero indexed row of the cell's top-left corner, or ``None`` before mapping."""
        return _int_attr(self._tag, ROW_ATTR)

    @property
    def col(self) -> Optional[int]:
        """int: The zero indexed column of the cell's top-left corner, or ``None`` before mapping."""
        return _int_attr(self._tag, COL_ATTR)

    @property
    def row_span(self) -> int:
        return _span(self._tag.get("rowspan"))

    @property
    def col_span(self) -> int:
        return _span(self._tag.get("colspan"))

    @property
    def address(self) -> Optional[str]:
        """str: The cell's A1 address, e.g. ``B3``, or ``None`` before mapping."""
        if self.row is None or self.col is None:
            return None
        return xl_rowcol_to_cell(self.row, self.col)

    def set_coordinates(self, row: int, col: int) -> None:
        self._tag[ROW_ATTR] = str(row)
        self._tag[COL_ATTR] = str(col)
        self._tag[ADDRESS_ATTR] = xl_rowcol_to_cell(row, col)

    @property
    def text(self) -> str:
        """
        str: The visible text of the cell, without surrounding whitespace.

        Setting the text replaces the contents of the cell's first ``<p>``,
        or of the cell itself if it has no paragraph.
        """
        return self._tag.get_text().strip()

    @text.setter
    def text(self, value: str):
        target = self._tag.find("p") or self._tag
        target.clear()
        if value:
            target.append(value)

    @property
    def raw_value(self) -> float:
        """float: The numeric value of the cell's text; 0 if it isn't a number."""
        return parse_number(self.text)

    @property
    def is_formula(self) -> bool:
        """bool: ``True`` if the cell's text is computed from a formula."""
        return FORMULA_ATTR in self._tag.attrs

    @property
    def formula(self) -> Optional[str]:
        """str: The formula text, or ``None`` if the cell has no formula."""
        return self._tag.get(FORMULA_ATTR)

    @property
    def format_separator(self) -> bool:
        """bool: ``True`` if formula results are grouped in thousands."""
        return self._tag.get(FORMAT_SEPARATOR_ATTR) == FORMAT_SEPARATOR_VALUE

    @property
    def tooltip(self) -> Optional[str]:
        return self._tag.get(TOOLTIP_ATTR)

    @tooltip.setter
    def tooltip(self, value: Optional[str]):
        if value:
            self._tag[TOOLTIP_ATTR] = value
        elif TOOLTIP_ATTR in self._tag.attrs:
            del self._tag[TOOLTIP_ATTR]

    @property
    def title(self) -> Optional[str]:
        """str: The cell's original ``title``, even after the tooltip has displaced it."""
        return self._tag.get(ORIGINAL_TITLE_ATTR) or self._tag.get(TITLE_ATTR)

    def preserve_title(self) -> None:
        """Move a live ``title`` aside so a renderer shows the tooltip instead."""
        if TITLE_ATTR in self._tag.attrs:
            self._tag[ORIGINAL_TITLE_ATTR] = self._tag[TITLE_ATTR]
            del self._tag[TITLE_ATTR]

    @property
    def classes(self) -> List[str]:
        classes = self._tag.get("class", [])
        if isinstance(classes, str):
            classes = classes.split()
        return list(classes)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, name: str) -> None:
        classes = self.classes
        if name not in classes:
            self._tag["class"] = [*classes, name]

    def remove_class(self, name: str) -> None:
        classes = [x for x in self.classes if x != name]
        if classes:
            self._tag["class"] = classes
        elif "class" in self._tag.attrs:
            del self._tag["class"]

    def style(self, name: str) -> Optional[str]:
        """Return the value of one inline style property, or ``None``."""
        return parse_style(self._tag.get("style", "")).get(name)

    def set_size(self, name: str, value: str) -> None:
        """
        Set ``width`` or ``height`` both as an inline style and as the
        legacy presentation attribute.
        """
        _set_size(self._tag, name, value)


def _set_size(tag: Tag, name: str, value: str) -> None:
    declarations = parse_style(tag.get("style", ""))
    declarations[name] = value
    tag["style"] = format_style(declarations)
    tag[name] = value
    debug("set_size: <%s> %s=%s", tag.name, name, value)

import logging
from dataclasses import dataclass
from typing import List, Optional

from sheet_preview import __name__ as sheet_preview_name
from sheet_preview.cell import Cell
from sheet_preview.constants import (
    CONTENT_EDITABLE_ATTR,
    EDITING_CLASS,
    HISTORY_CAPACITY,
    MIN_RESIZE_SIZE,
    RECALC_PASSES,
    RESIZE_COL_ATTR,
    RESIZE_EDGE_THRESHOLD,
    RESIZE_ROW_ATTR,
    SELECTED_CLASS,
    Command,
    InteractionState,
    ResizeAxis,
    SizeUnit,
)
from sheet_preview.document import Document, Table
from sheet_preview.exceptions import EditRejectedError
from sheet_preview.history import EditHistory
from sheet_preview.utils import format_size

logger = logging.getLogger(sheet_preview_name)
debug = logger.debug

__all__ = ["EditorSession", "Rect", "key_command"]

RESIZING_STATES = (InteractionState.RESIZING_COLUMN, InteractionState.RESIZING_ROW)


@dataclass
class Rect:
    """The rendered position and size of a cell or table, in pixels."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class _Resize:
    axis: ResizeAxis
    cell: Cell
    table: Table
    start_pos: float
    start_size: float
    unit: SizeUnit
    parent_size: float


@dataclass
class _Edit:
    cell: Cell
    text: str
    replace_all: bool = True


def key_command(key: str, ctrl: bool = False, shift: bool = False, meta: bool = False):
    """
    Map a key press to a :class:`Command`.

    Returns
    -------
    Command | None:
        ``None`` if the key has no editor binding.
    """
    modifier = ctrl or meta
    if modifier and key.lower() == "z":
        return Command.REDO if shift else Command.UNDO
    if modifier and key.lower() == "y":
        return Command.REDO
    if key == "Delete":
        return Command.DELETE
    if key == "Enter":
        return Command.COMMIT
    return None


class EditorSession:
    """
    Pointer and keyboard interaction with the tables of a document.

    A session owns the live :class:`Document` and its :class:`EditHistory`.
    Every edit, deletion and resize recalculates the document and records
    one snapshot. There is no layout engine: callers pass the rendered
    geometry of the cell and table under the pointer.

    Parameters
    ----------
    html: str, optional
        Markup to load, see :py:meth:`load`.
    history_capacity: int, optional, default: 50
        The number of snapshots kept for undo.
    edge_threshold: float, optional, default: 5
        How close, in pixels, a press must be to a cell's right or bottom
        border to start a resize.
    min_size: float, optional, default: 10
        The smallest size, in pixels, a resize can produce.
    passes: int, optional, default: 2
        The number of recalculation sweeps after each change.

    Example
    -------

    .. code-block:: python

        session = EditorSession(html)
        cell = session.document.tables[0].cell("B2")
        session.activate_edit(cell)
        session.commit_edit("1,500")
        session.undo()
    """

    def __init__(  # noqa: PLR0913
        self,
        html: Optional[str] = None,
        *,
        history_capacity: int = HISTORY_CAPACITY,
        edge_threshold: float = RESIZE_EDGE_THRESHOLD,
        min_size: float = MIN_RESIZE_SIZE,
        passes: int = RECALC_PASSES,
    ):
        self.history = EditHistory(history_capacity)
        self.edge_threshold = edge_threshold
        self.min_size = min_size
        self.passes = passes
        self.document = Document()
        self._reset_interaction()
        if html is not None:
            self.load(html)

    def _reset_interaction(self) -> None:
        self.state = InteractionState.IDLE
        self._selection: List[Cell] = []
        self._anchor: Optional[Cell] = None
        self._anchor_table: Optional[Table] = None
        self._hovered: Optional[Cell] = None
        self._resize: Optional[_Resize] = None
        self._edit: Optional[_Edit] = None

    def _set_state(self, state: InteractionState) -> None:
        if state != self.state:
            debug("state: %s -> %s", self.state.name, state.name)
        self.state = state

    @property
    def selection(self) -> List[Cell]:
        """List[Cell]: The selected cells in source order."""
        return list(self._selection)

    @property
    def anchor(self) -> Optional[Cell]:
        """Cell: The cell a range selection started from."""
        return self._anchor

    @property
    def editing_cell(self) -> Optional[Cell]:
        return self._edit.cell if self._edit is not None else None

    def load(self, html: str) -> None:
        """
        Replace the document with new markup.

        Coordinates are mapped, formulas recalculated and the history
        restarted with the loaded document as its only snapshot.
        """
        self._reset_interaction()
        self.document = Document(html)
        self.document.recalculate(self.passes)
        self.history.reset()
        self.history.record(self.document.snapshot())

    def clean_html(self) -> str:
        """str: The document markup without editor metadata, for export."""
        return self.document.clean_html()

    def _after_mutation(self) -> None:
        self.document.recalculate(self.passes)
        self.history.record(self.document.snapshot())

    def _select(self, cells: List[Cell]) -> None:
        for cell in self._selection:
            cell.remove_class(SELECTED_CLASS)
        for cell in cells:
            cell.add_class(SELECTED_CLASS)
        self._selection = list(cells)

    def _edge(self, x: float, y: float, rect: Rect) -> Optional[ResizeAxis]:
        if abs(rect.right - x) <= self.edge_threshold:
            return ResizeAxis.COLUMN
        if abs(rect.bottom - y) <= self.edge_threshold:
            return ResizeAxis.ROW
        return None

    def hover(self, cell: Cell, x: float, y: float, rect: Rect) -> Optional[ResizeAxis]:
        """
        Mark the resize affordance of the cell under the pointer.

        Returns
        -------
        ResizeAxis | None:
            The edge a press at this position would resize, if any.
        """
        if self.state in RESIZING_STATES:
            return None
        for marked in (self._hovered, cell):
            if marked is not None:
                for attr in (RESIZE_COL_ATTR, RESIZE_ROW_ATTR):
                    if attr in marked.tag.attrs:
                        del marked.tag[attr]
        self._hovered = cell
        axis = self._edge(x, y, rect)
        if axis == ResizeAxis.COLUMN:
            cell.tag[RESIZE_COL_ATTR] = "true"
        elif axis == ResizeAxis.ROW:
            cell.tag[RESIZE_ROW_ATTR] = "true"
        return axis

    def pointer_down(
        self,
        cell: Optional[Cell],
        x: float = 0,
        y: float = 0,
        rect: Optional[Rect] = None,
        table_rect: Optional[Rect] = None,
    ) -> None:
        """
        Press the pointer button over a cell, or outside any cell if ``cell`` is ``None``.

        A press near the cell's right or bottom border starts a resize;
        anywhere else it selects the cell and starts a range selection. An
        edit in progress in another cell is committed first.

        Raises
        ------
        ValueError:
            If a percentage-sized cell is resized without ``table_rect``.
        """
        if self.state == InteractionState.EDITING:
            if cell is not None and cell == self._edit.cell:
                return
            self._commit()
        if cell is None or self.state in RESIZING_STATES:
            return

        axis = self._edge(x, y, rect) if rect is not None else None
        if axis is not None:
            self._start_resize(cell, axis, x, y, rect, table_rect)
            return

        self._anchor = cell
        self._anchor_table = self.document.table_of(cell)
        self._select([cell])
        self._set_state(InteractionState.RANGE_SELECTING)

    def pointer_move(self, x: float = 0, y: float = 0, cell: Optional[Cell] = None) -> None:
        """Move the pointer with the button held, over ``cell`` if it is over one."""
        if self.state in RESIZING_STATES:
            self._apply_resize(x, y)
        elif (
            self.state == InteractionState.RANGE_SELECTING
            and cell is not None
            and self._anchor_table.contains(cell)
        ):
            self._select(self._anchor_table.cell_range(self._anchor, cell))

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        """Release the pointer button, finishing a resize or range selection."""
        if self.state in RESIZING_STATES:
            if x is not None and y is not None:
                self._apply_resize(x, y)
            debug("resize: %s committed", self._resize.cell.address)
            self._resize = None
            self._set_state(InteractionState.IDLE)
            self.history.record(self.document.snapshot())
        elif self.state == InteractionState.RANGE_SELECTING:
            self._set_state(InteractionState.IDLE)

    def _start_resize(
        self,
        cell: Cell,
        axis: ResizeAxis,
        x: float,
        y: float,
        rect: Rect,
        table_rect: Optional[Rect],
    ) -> None:
        prop = "width" if axis == ResizeAxis.COLUMN else "height"
        size = cell.style(prop)
        unit = SizeUnit.PERCENT if size is not None and "%" in size else SizeUnit.PIXELS
        parent_size = 0.0
        if unit == SizeUnit.PERCENT:
            if table_rect is None:
                raise ValueError(f"table size is required to resize a percentage {prop}")
            parent_size = table_rect.width if axis == ResizeAxis.COLUMN else table_rect.height
            if parent_size <= 0:
                raise ValueError(f"table {prop} must be positive")

        self._resize = _Resize(
            axis=axis,
            cell=cell,
            table=self.document.table_of(cell),
            start_pos=x if axis == ResizeAxis.COLUMN else y,
            start_size=rect.width if axis == ResizeAxis.COLUMN else rect.height,
            unit=unit,
            parent_size=parent_size,
        )
        if axis == ResizeAxis.COLUMN:
            self._set_state(InteractionState.RESIZING_COLUMN)
        else:
            self._set_state(InteractionState.RESIZING_ROW)

    def _apply_resize(self, x: float, y: float) -> None:
        resize = self._resize
        pos = x if resize.axis == ResizeAxis.COLUMN else y
        size = max(self.min_size, resize.start_size + pos - resize.start_pos)
        if resize.unit == SizeUnit.PERCENT:
            value = format_size(size / resize.parent_size * 100, SizeUnit.PERCENT)
        else:
            value = format_size(size, SizeUnit.PIXELS)
        if resize.axis == ResizeAxis.COLUMN:
            resize.table.set_column_width(resize.cell, value)
        else:
            resize.table.set_row_height(resize.cell, value)

    def activate_edit(self, cell: Cell) -> str:
        """
        Start editing a cell, with all of its text selected for replacement.

        Returns
        -------
        str:
            The cell's current text.

        Raises
        ------
        EditRejectedError:
            If the cell holds a formula.
        """
        if cell.is_formula:
            raise EditRejectedError(f"{cell.address}: formula cells cannot be edited")
        if self.state in RESIZING_STATES:
            return cell.text
        if self.state == InteractionState.EDITING:
            if cell == self._edit.cell:
                return cell.text
            self._commit()

        self._select([])
        cell.add_class(EDITING_CLASS)
        cell.tag[CONTENT_EDITABLE_ATTR] = "true"
        self._edit = _Edit(cell=cell, text=cell.text)
        self._set_state(InteractionState.EDITING)
        return cell.text

    def type_text(self, text: str) -> None:
        """
        Type into the cell being edited.

        The first keystrokes replace the selected text; later ones are
        appended. Does nothing if no cell is being edited.
        """
        if self._edit is None:
            return
        if self._edit.replace_all:
            self._edit.text = text
            self._edit.replace_all = False
        else:
            self._edit.text += text
        self._edit.cell.text = self._edit.text

    def commit_edit(self, text: Optional[str] = None) -> bool:
        """
        Finish the edit in progress, optionally replacing the cell's text.

        Returns
        -------
        bool:
            ``True`` if an edit was committed.
        """
        if self.state != InteractionState.EDITING:
            return False
        if text is not None:
            self._edit.cell.text = text
        self._commit()
        return True

    def blur(self) -> bool:
        """The edited cell lost focus; commits like :py:meth:`commit_edit`."""
        return self.commit_edit()

    def _commit(self) -> None:
        cell = self._edit.cell
        cell.remove_class(EDITING_CLASS)
        if CONTENT_EDITABLE_ATTR in cell.tag.attrs:
            del cell.tag[CONTENT_EDITABLE_ATTR]
        self._edit = None
        self._set_state(InteractionState.IDLE)
        debug("commit: %s='%s'", cell.address, cell.text)
        self._after_mutation()

    def delete_selection(self) -> int:
        """
        Clear the text of every selected cell that doesn't hold a formula.

        Returns
        -------
        int:
            The number of cells cleared. Nothing happens, and 0 is returned,
            while editing or resizing, or with nothing selected.
        """
        if (
            self.state == InteractionState.EDITING
            or self.state in RESIZING_STATES
            or not self._selection
        ):
            return 0
        cleared = 0
        for cell in self._selection:
            if not cell.is_formula:
                cell.text = ""
                cleared += 1
        self._after_mutation()
        return cleared

    def _history_allowed(self) -> bool:
        if self.state == InteractionState.EDITING or self.state in RESIZING_STATES:
            debug("history ignored while %s", self.state.name)
            return False
        return True

    def _restore(self, snapshot: str) -> None:
        with self.history.restoring():
            self._reset_interaction()
            self.document.restore(snapshot)

    def undo(self) -> bool:
        """
        Restore the previous snapshot.

        Returns
        -------
        bool:
            ``False`` if there is nothing to undo or an edit or resize is in
            progress.
        """
        if not self._history_allowed():
            return False
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        """Restore the next snapshot; see :py:meth:`undo`."""
        if not self._history_allowed():
            return False
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def execute(self, command: Command):
        if command == Command.UNDO:
            return self.undo()
        elif command == Command.REDO:
            return self.redo()
        elif command == Command.DELETE:
            return self.delete_selection()
        else:
            return self.commit_edit()

    def handle_key(
        self, key: str, ctrl: bool = False, shift: bool = False, meta: bool = False
    ) -> Optional[Command]:
        """
        Run the command bound to a key press.

        Returns
        -------
        Command | None:
            The command that was run, or ``None`` if the key is unbound.
        """
        command = key_command(key, ctrl=ctrl, shift=shift, meta=meta)
        if command is not None:
            self.execute(command)
        return command

import copy
import logging
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from sheet_preview import __name__ as sheet_preview_name
from sheet_preview.cell import Cell, _set_size
from sheet_preview.constants import (
    CELL_TAGS,
    DERIVED_ATTRS,
    INTERACTION_ATTRS,
    INTERACTION_CLASSES,
    ORIGINAL_TITLE_ATTR,
    RECALC_PASSES,
    TITLE_ATTR,
    TOOLTIP_FORMULA_FORMAT,
    TOOLTIP_HEADER_FORMAT,
    TOOLTIP_TITLE_FORMAT,
)
from sheet_preview.containers import ItemsList
from sheet_preview.exceptions import FormulaError
from sheet_preview.formula import evaluate_formula, format_result
from sheet_preview.grid import Grid, assign_coordinates
from sheet_preview.xref_utils import xl_cell_to_rowcol

logger = logging.getLogger(sheet_preview_name)
debug = logger.debug

__all__ = ["Document", "Table"]

HTML_PARSER = "html.parser"


class Table:
    """
    One ``<table>`` of a :class:`Document`.

    .. NOTE::
       Do not instantiate directly. Tables are created by :py:class:`~sheet_preview.Document`.
    """

    def __init__(self, tag: Tag):
        self._tag = tag

    def __eq__(self, other) -> bool:
        return isinstance(other, Table) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    @property
    def tag(self) -> Tag:
        return self._tag

    @property
    def name(self) -> Optional[str]:
        """str: The table's ``id`` attribute, or ``None``."""
        return self._tag.get("id")

    def rows(self, values_only: bool = False) -> Union[List[List[Cell]], List[List[str]]]:
        """Return all rows of cells for the table.

        Only rows that belong to this table are returned; rows of nested
        tables are not.

        Parameters
        ----------
        values_only:
            If ``True``, return the cells' text instead of :class:`Cell` objects

        Returns
        -------
        List[List[Cell]] | List[List[str]]:
            List of rows in source order; each row is a list of cells in source order.
        """
        rows = []
        for tr in self._tag.find_all("tr"):
            if tr.find_parent("table") is not self._tag:
                continue
            cells = [Cell(tag) for tag in tr.find_all(list(CELL_TAGS), recursive=False)]
            rows.append([cell.text for cell in cells] if values_only else cells)
        return rows

    def cells(self) -> List[Cell]:
        """List[Cell]: Every cell of the table in source order."""
        return [cell for row in self.rows() for cell in row]

    def formula_cells(self) -> List[Cell]:
        return [cell for cell in self.cells() if cell.is_formula]

    def cell(self, *args) -> Cell:
        """
        Return a single cell in the table by its mapped coordinates.

        .. code-block:: python

            (0, 0)      # Row-column notation.
            ("A1")      # The same cell in A1 notation.

        Raises
        ------
        IndexError:
            If no cell starts at the given position.
        """
        if isinstance(args[0], str):
            coords = xl_cell_to_rowcol(args[0])
            if coords is None:
                raise IndexError(f"invalid cell reference {args[0]}")
            (row, col) = coords
        elif len(args) != 2:
            raise IndexError("invalid cell reference " + str(args))
        else:
            (row, col) = args

        for cell in self.cells():
            if cell.row == row and cell.col == col:
                return cell
        raise IndexError(f"no cell at [{row},{col}]")

    def cell_range(self, first: Cell, last: Cell) -> List[Cell]:
        """
        Return the cells whose top-left corner lies in the rectangle spanned
        by two cells, in source order. The corners may be given in any order.
        """
        min_row, max_row = sorted((first.row, last.row))
        min_col, max_col = sorted((first.col, last.col))
        return [
            cell
            for cell in self.cells()
            if min_row <= cell.row <= max_row and min_col <= cell.col <= max_col
        ]

    def contains(self, cell: Cell) -> bool:
        return cell.tag.find_parent("table") is self._tag

    def map_coordinates(self) -> None:
        """Write the row, column and address of every cell onto the cell."""
        rows = self.rows()
        layout = assign_coordinates([[(c.row_span, c.col_span) for c in row] for row in rows])
        for cells, coords in zip(rows, layout):
            for cell, (row, col) in zip(cells, coords):
                cell.set_coordinates(row, col)

    def grid(self) -> Grid:
        return Grid.from_cells(self.cells())

    def calculation_pass(self) -> int:
        """
        Evaluate every formula cell once, in source order.

        Each result is written to the cell's text and to the pass's grid, so
        later formulas in the same pass see it. Formulas that fail to
        evaluate leave their cell unchanged.

        Returns
        -------
        int:
            The number of formulas that failed.
        """
        self.map_coordinates()
        grid = self.grid()
        failures = 0
        for cell in self.formula_cells():
            try:
                value = evaluate_formula(cell.formula, grid)
            except FormulaError as e:
                failures += 1
                debug("calculation_pass: %s: '%s' failed: %s", cell.address, cell.formula, e)
                continue
            cell.text = format_result(value, cell.format_separator)
            grid[cell.address] = value
        return failures

    def update_tooltips(self) -> None:
        rows = self.rows()
        if not rows:
            return
        headers = {cell.col: cell.text for cell in rows[0]}
        for cell in self.cells():
            if cell.row == 0:
                continue
            lines = []
            if headers.get(cell.col):
                lines.append(TOOLTIP_HEADER_FORMAT.format(headers[cell.col]))
            if cell.title:
                lines.append(TOOLTIP_TITLE_FORMAT.format(cell.title))
            if cell.formula:
                lines.append(TOOLTIP_FORMULA_FORMAT.format(cell.formula))
            if lines:
                cell.tooltip = "\n".join(lines)
                cell.preserve_title()
            else:
                cell.tooltip = None

    def col_element(self, col: int) -> Optional[Tag]:
        """Return the ``<col>`` at a column index in the table's ``<colgroup>``, if any."""
        colgroup = self._tag.find("colgroup")
        if colgroup is None:
            return None
        cols = colgroup.find_all("col")
        return cols[col] if col < len(cols) else None

    def set_column_width(self, cell: Cell, value: str) -> None:
        cell.set_size("width", value)
        col = self.col_element(cell.col)
        if col is not None:
            _set_size(col, "width", value)

    def set_row_height(self, cell: Cell, value: str) -> None:
        cell.set_size("height", value)
        tr = cell.tag.find_parent("tr")
        if tr is not None:
            _set_size(tr, "height", value)


class Document:
    """
    An HTML fragment whose tables behave like spreadsheets.

    Parsing maps the coordinates of every table cell and annotates tooltips;
    formula results are only computed by :py:meth:`recalculate`.

    Parameters
    ----------
    html: str, optional
        The markup to parse. Markup is parsed with the forgiving
        ``html.parser`` so malformed fragments never fail to load.
    """

    def __init__(self, html: Optional[str] = None):
        self._soup = BeautifulSoup(html or "", HTML_PARSER)
        self._attach()

    def _attach(self) -> None:
        self._tables = ItemsList(self._soup.find_all("table"), Table)
        self.map_coordinates()
        self.update_tooltips()

    @property
    def tables(self) -> List[Table]:
        """List[:class:`Table`]: The tables of the document in source order."""
        return self._tables

    @property
    def html(self) -> str:
        """str: The live markup, including editor metadata."""
        return str(self._soup)

    @property
    def is_empty(self) -> bool:
        return not self.html.strip()

    def table_of(self, cell: Cell) -> Table:
        """Return the table a cell belongs to."""
        for table in self._tables:
            if table.contains(cell):
                return table
        raise LookupError(f"{cell!r} is not in this document")

    def map_coordinates(self) -> None:
        for table in self._tables:
            table.map_coordinates()

    def recalculate(self, passes: int = RECALC_PASSES) -> int:
        """
        Recompute every formula cell of every table, then refresh tooltips.

        Each pass sees the results of the previous one, so a formula that
        refers to a formula later in the table settles on the second pass.
        Longer chains of forward references need more passes.

        Parameters
        ----------
        passes: int, optional, default: 2
            The number of evaluation sweeps.

        Returns
        -------
        int:
            The number of formulas that failed in the last pass.
        """
        failures = 0
        for _ in range(passes):
            failures = sum(table.calculation_pass() for table in self._tables)
        self.update_tooltips()
        if failures:
            debug("recalculate: %d formula(s) failed", failures)
        return failures

    def update_tooltips(self) -> None:
        for table in self._tables:
            table.update_tooltips()

    def snapshot(self) -> str:
        """
        Serialize the document for the edit history.

        Selection, editing and resize markers are not part of a snapshot.
        """
        soup = copy.copy(self._soup)
        _strip_interaction(soup)
        return str(soup)

    def restore(self, snapshot: str) -> None:
        """Replace the whole document with a snapshot."""
        self._soup = BeautifulSoup(snapshot, HTML_PARSER)
        self._attach()

    def clean_copy(self) -> BeautifulSoup:
        """
        Return a copy of the document for export.

        All editor metadata is removed and original ``title`` attributes are
        put back.
        """
        soup = copy.copy(self._soup)
        _strip_interaction(soup)
        for tag in soup.find_all(True):
            if ORIGINAL_TITLE_ATTR in tag.attrs:
                tag[TITLE_ATTR] = tag[ORIGINAL_TITLE_ATTR]
                del tag[ORIGINAL_TITLE_ATTR]
            for attr in DERIVED_ATTRS:
                if attr in tag.attrs:
                    del tag[attr]
            if "style" in tag.attrs and not tag["style"].strip():
                del tag["style"]
        return soup

    def clean_html(self) -> str:
        """str: The markup of :py:meth:`clean_copy`."""
        return str(self.clean_copy()).strip()


def _strip_interaction(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(True):
        if "class" in tag.attrs:
            classes = tag["class"]
            if isinstance(classes, str):
                classes = classes.split()
            classes = [x for x in classes if x not in INTERACTION_CLASSES]
            if classes:
                tag["class"] = classes
            else:
                del tag["class"]
        for attr in INTERACTION_ATTRS:
            if attr in tag.attrs:
                del tag[attr]

import re
from typing import Iterable, List, Tuple

from sheet_preview.xref_utils import xl_cell_to_rowcol, xl_range_to_rowcols

__all__ = ["Grid", "assign_coordinates", "parse_number"]

NUMBER_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def assign_coordinates(rows: Iterable[Iterable[Tuple[int, int]]]) -> List[List[Tuple[int, int]]]:
    """
    Lay out table cells using HTML table layout rules.

    Parameters
    ----------
    rows:
        One entry per table row in source order, each a sequence of
        ``(row_span, col_span)`` pairs in source order.

    Returns
    -------
    List[List[Tuple[int, int]]]:
        The zero indexed ``(row, col)`` of each cell's top-left corner,
        shaped like ``rows``.

    Each cell takes the first column in its row not covered by a span from
    an earlier cell, then reserves every position its spans cover. Spans
    that run past the table edge simply reserve positions that no cell uses.
    """
    occupied = set()
    coords = []
    for row_num, spans in enumerate(rows):
        col = 0
        row_coords = []
        for row_span, col_span in spans:
            while (row_num, col) in occupied:
                col += 1
            row_coords.append((row_num, col))
            for i in range(row_span):
                for j in range(col_span):
                    occupied.add((row_num + i, col + j))
            col += col_span
        coords.append(row_coords)
    return coords


def parse_number(text: str) -> float:
    """
    Parse the numeric value of a cell's text.

    Thousands separators are removed and the longest leading number is
    used, so ``"1,200 kg"`` is ``1200.0``. Empty or non-numeric text is 0.
    """
    text = text.replace(",", "").strip()
    match = NUMBER_PREFIX_RE.match(text)
    if match is None:
        return 0.0
    return float(match.group(0))


class Grid(dict):
    """
    Values of a table's cells keyed by A1 address.

    A grid is rebuilt at the start of every recalculation pass and is the
    only view of cell values formulas see. Addresses with no cell read as 0.
    """

    def __missing__(self, key: str) -> float:
        return 0.0

    @classmethod
    def from_cells(cls, cells) -> "Grid":
        """Build a grid from cells that already carry an address."""
        grid = cls()
        for cell in cells:
            grid[cell.address] = cell.raw_value
        return grid

    def range_sum(self, range_str: str) -> float:
        """
        Sum every address in an inclusive ``A1:B2`` rectangle.

        Only addresses held by the grid are visited, so the cost does not
        depend on the size of the rectangle. Malformed ranges sum to 0.
        """
        bounds = xl_range_to_rowcols(range_str)
        if bounds is None:
            return 0.0
        min_row, min_col, max_row, max_col = bounds
        total = 0.0
        for address, value in self.items():
            coords = xl_cell_to_rowcol(address)
            if coords is None:
                continue
            (row, col) = coords
            if min_row <= row <= max_row and min_col <= col <= max_col:
                total += value
        return total

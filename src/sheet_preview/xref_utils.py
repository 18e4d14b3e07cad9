import re
from typing import Optional, Tuple

__all__ = [
    "xl_cell_to_rowcol",
    "xl_col_to_name",
    "xl_name_to_col",
    "xl_range",
    "xl_range_to_rowcols",
    "xl_rowcol_to_cell",
]

# Column letters use bijective base-26: A..Z, AA..AZ, BA.. with no zero digit
CELL_REF_RE = re.compile(r"^\s*([A-Z]+)(\d+)\s*$")


def xl_col_to_name(col: int) -> str:
    """
    Convert a zero indexed column number to its column letters.

    Parameters
    ----------
    col: int
        The column number (zero indexed).

    Returns
    -------
    str:
        Column letters, e.g. ``A`` for 0 and ``AA`` for 26.

    Raises
    ------
    IndexError:
        If the column is negative.
    """
    if col < 0:
        raise IndexError(f"column reference {col} below zero")

    letters = ""
    while col >= 0:
        letters = chr(ord("A") + col % 26) + letters
        col = col // 26 - 1
    return letters


def xl_name_to_col(name: str) -> int:
    """Convert column letters to a zero indexed column number."""
    col = 0
    for char in name:
        col = col * 26 + (ord(char) - ord("A") + 1)
    return col - 1


def xl_rowcol_to_cell(row: int, col: int) -> str:
    """
    Convert a zero indexed row and column to an A1 address.

    Parameters
    ----------
    row: int
        The cell row (zero indexed).
    col: int
        The cell column (zero indexed).

    Returns
    -------
    str:
        A1 style address.

    Raises
    ------
    IndexError:
        If the row or column is negative.
    """
    if row < 0:
        raise IndexError(f"row reference {row} below zero")
    return xl_col_to_name(col) + str(row + 1)


def xl_cell_to_rowcol(cell_str: str) -> Optional[Tuple[int, int]]:
    """
    Convert an A1 address to a zero indexed row and column.

    Returns ``None`` if ``cell_str`` is not a plain A1 reference or names
    row zero.
    """
    match = CELL_REF_RE.match(cell_str)
    if not match or int(match.group(2)) < 1:
        return None
    return int(match.group(2)) - 1, xl_name_to_col(match.group(1))


def xl_range(first_row: int, first_col: int, last_row: int, last_col: int) -> str:
    """Convert zero indexed corners to an ``A1:B2`` range, or ``A1`` for one cell."""
    range1 = xl_rowcol_to_cell(first_row, first_col)
    range2 = xl_rowcol_to_cell(last_row, last_col)
    if range1 == range2:
        return range1
    return f"{range1}:{range2}"


def xl_range_to_rowcols(range_str: str) -> Optional[Tuple[int, int, int, int]]:
    """
    Convert an ``A1:B2`` range to its zero indexed bounds.

    The corners may be given in any order; rows and columns are each
    normalised independently.

    Parameters
    ----------
    range_str: str
        Two A1 addresses separated by a colon.

    Returns
    -------
    Tuple[int, int, int, int] | None:
        ``(min_row, min_col, max_row, max_col)``, or ``None`` if either
        corner is malformed.
    """
    parts = range_str.split(":")
    if len(parts) != 2:
        return None
    start = xl_cell_to_rowcol(parts[0])
    end = xl_cell_to_rowcol(parts[1])
    if start is None or end is None:
        return None
    return (
        min(start[0], end[0]),
        min(start[1], end[1]),
        max(start[0], end[0]),
        max(start[1], end[1]),
    )

import csv
import io
import re
from typing import List

from sheet_preview.document import Document
from sheet_preview.exceptions import ExportError

__all__ = ["html_lines", "to_csharp", "to_csv"]

TAG_BOUNDARY_RE = re.compile(r"><")


def html_lines(html: str) -> List[str]:
    """
    Break markup into lines between adjacent tags.

    Raises
    ------
    ExportError:
        If there is no markup.
    """
    html = html.strip()
    if not html:
        raise ExportError("nothing to export")
    return TAG_BOUNDARY_RE.sub(">\n<", html).split("\n")


def to_csharp(html: str) -> str:
    """
    Render markup as C# that rebuilds it with a ``StringBuilder``.

    Each non-blank line becomes one verbatim interpolated
    ``sb.AppendLine($@"...");`` with double quotes doubled. Braces are
    left as they are; markup containing ``{`` or ``}`` needs them doubled
    before it compiles.
    """
    code = ["StringBuilder sb = new StringBuilder();"]
    for line in html_lines(html):
        if not line.strip():
            continue
        line = line.replace('"', '""').replace("\r", "")
        code.append(f'sb.AppendLine($@"{line}");')
    return "\n".join(code) + "\n"


def to_csv(document: Document, formulas: bool = False) -> str:
    """
    Write the displayed text of every table, one CSV row per table row.

    Tables are separated by a blank line. With ``formulas``, formula cells
    are written as their formula text instead of their result.
    """
    if not len(document.tables):
        raise ExportError("no tables to export")
    output = io.StringIO()
    writer = csv.writer(output, dialect="excel", lineterminator="\n")
    for index, table in enumerate(document.tables):
        if index > 0:
            output.write("\n")
        for row in table.rows():
            writer.writerow(
                [cell.formula if formulas and cell.is_formula else cell.text for cell in row]
            )
    return output.getvalue()

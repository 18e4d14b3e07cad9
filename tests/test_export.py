import pytest

from sheet_preview import Document, ExportError
from sheet_preview.export import html_lines, to_csharp, to_csv

BUDGET_CSV = (
    "Item,Q1,Q2,Total\n"
    'Rent,"1,200","1,200","2,400"\n'
    "Travel,350,-125.5,225\n"
    'Total,1550,1075,"2,625"\n'
)

BUDGET_FORMULAS_CSV = (
    "Item,Q1,Q2,Total\n"
    'Rent,"1,200","1,200",=B2+C2\n'
    "Travel,350,-125.5,=B3+C3\n"
    "Total,=SUM(B2:B3),=SUM(C3:C2),=SUM(D2:D3)\n"
)


def test_clean_html(budget_html):
    doc = Document(budget_html)
    doc.recalculate()
    html = doc.clean_html()
    assert '<td title="Office lease">1,200</td>' in html
    assert 'data-dze-formula="=B2+C2" dze_format_separator=","><p>2,400</p>' in html
    for attr in ["data-row", "data-col", "data-addr", "data-tooltip", "data-org-title"]:
        assert attr not in html
    assert html.startswith("<h2>Quarterly budget</h2>")

    # The live document keeps its metadata
    assert "data-tooltip" in doc.html
    assert "data-org-title" in doc.html


def test_clean_html_removes_interaction_markers():
    html = (
        '<table><tr><td class="selected-cell note" contenteditable="true" spellcheck="false"'
        ' style=" ">1</td><td class="editing-cell drag-over">2</td></tr></table>'
    )
    doc = Document(html)
    assert doc.clean_html() == '<table><tr><td class="note">1</td><td>2</td></tr></table>'


def test_clean_html_without_tables():
    doc = Document("<p>Nothing to see</p>")
    assert doc.clean_html() == "<p>Nothing to see</p>"
    assert Document().clean_html() == ""


def test_html_lines():
    assert html_lines("<table><tr><td>1</td></tr></table>") == [
        "<table>",
        "<tr>",
        "<td>1</td>",
        "</tr>",
        "</table>",
    ]
    assert html_lines("  <p>a</p>\n") == ["<p>a</p>"]
    with pytest.raises(ExportError, match="nothing to export"):
        html_lines(" \n ")


def test_to_csharp():
    html = '<table class="grid"><tr><td title="say ""hi""">1</td></tr>\r\n\n</table>'
    code = to_csharp(html)
    assert code == (
        "StringBuilder sb = new StringBuilder();\n"
        'sb.AppendLine($@"<table class=""grid"">");\n'
        'sb.AppendLine($@"<tr>");\n'
        'sb.AppendLine($@"<td title=""say """"hi"""""">1</td>");\n'
        'sb.AppendLine($@"</tr>");\n'
        'sb.AppendLine($@"</table>");\n'
    )


def test_to_csharp_clean(budget_html):
    doc = Document(budget_html)
    code = to_csharp(doc.clean_html())
    assert code.startswith("StringBuilder sb = new StringBuilder();\n")
    assert 'sb.AppendLine($@"<td title=""Office lease"">1,200</td>");' in code
    assert "data-tooltip" not in code

    with pytest.raises(ExportError):
        to_csharp("")


def test_to_csv(budget_html):
    doc = Document(budget_html)
    doc.recalculate()
    assert to_csv(doc) == BUDGET_CSV
    assert to_csv(doc, formulas=True) == BUDGET_FORMULAS_CSV


def test_to_csv_tables(chain_html):
    doc = Document(chain_html)
    doc.recalculate(passes=3)
    assert to_csv(doc) == "Value,Result\n62,31\n10,30\n\n8,7,6,5\n"


def test_to_csv_no_tables():
    with pytest.raises(ExportError, match="no tables to export"):
        to_csv(Document("<p>text</p>"))

import pytest
from bs4 import BeautifulSoup

from sheet_preview import Cell, Document


def test_table_lookup(chain_html):
    doc = Document(chain_html)
    assert len(doc.tables) == 2
    assert doc.tables[0].name == "chain"
    assert doc.tables[-1].name == "deep"
    assert doc.tables["deep"] == doc.tables[1]
    assert "chain" in doc.tables
    assert "missing" not in doc.tables
    assert [table.name for table in doc.tables] == ["chain", "deep"]

    with pytest.raises(IndexError, match="index 2 out of range"):
        doc.tables[2]
    with pytest.raises(KeyError, match="no table named 'missing'"):
        doc.tables["missing"]
    with pytest.raises(LookupError, match="invalid index type float"):
        doc.tables[1.0]


def test_table_of(chain_html, budget_html):
    doc = Document(chain_html)
    cell = doc.tables["deep"].cell("D1")
    assert doc.table_of(cell) == doc.tables["deep"]

    other = Document(budget_html).tables[0].cell("A1")
    with pytest.raises(LookupError, match="not in this document"):
        doc.table_of(other)


def test_cells_are_views(budget_html):
    doc = Document(budget_html)
    table = doc.tables[0]
    cell = table.cell("A2")
    assert cell == table.cell(1, 0)
    assert len({cell, table.cell("A2")}) == 1
    assert isinstance(cell, Cell)
    assert repr(cell) == "<Cell A2 text='Rent'>"

    cell.text = "Lodging"
    assert table.cell("A2").text == "Lodging"
    assert "Lodging" in doc.html


def test_cell_properties(budget_html):
    doc = Document(budget_html)
    table = doc.tables[0]
    cell = table.cell("D2")
    assert cell.is_formula
    assert cell.formula == "=B2+C2"
    assert cell.format_separator
    assert not table.cell("D3").format_separator
    assert table.cell("B2").raw_value == 1200.0
    assert table.cell("A2").formula is None
    assert [c.address for c in table.formula_cells()] == ["D2", "D3", "B4", "C4", "D4"]


def test_cell_classes(budget_html):
    cell = Document(budget_html).tables[0].cell("B3")
    assert cell.classes == []
    cell.add_class("note")
    cell.add_class("note")
    cell.add_class("total")
    assert cell.classes == ["note", "total"]
    assert cell.has_class("total")
    cell.remove_class("note")
    cell.remove_class("total")
    assert "class" not in cell.tag.attrs


def test_cell_range(budget_html):
    table = Document(budget_html).tables[0]
    cells = table.cell_range(table.cell("C3"), table.cell("B2"))
    assert [cell.address for cell in cells] == ["B2", "C2", "B3", "C3"]


def test_unmapped_cell():
    cell = Cell(BeautifulSoup("<td>1</td>", "html.parser").td)
    assert cell.row is None
    assert cell.address is None
    assert repr(cell) == "<Cell ? text='1'>"


def test_restore(budget_html):
    doc = Document(budget_html)
    snapshot = doc.snapshot()
    doc.tables[0].cell("A2").text = "Changed"
    doc.restore(snapshot)
    assert doc.tables[0].cell("A2").text == "Rent"
    assert doc.snapshot() == snapshot

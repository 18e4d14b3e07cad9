import pytest
import pytest_check as check

from sheet_preview import Formula, FormulaError, evaluate_formula, format_result
from sheet_preview.formula import ExpressionParser
from sheet_preview.grid import Grid

GRID_VALUES = {
    "A1": 1.0,
    "B1": 2.0,
    "A2": 3.0,
    "B2": 4.0,
    "C1": 5.0,
    "C2": -3.0,
    "D1": 0.0,
}

FORMULA_RESULTS = [
    ("=SUM(A1:B2)", 10.0),
    ("=SUM(B2:A1)", 10.0),
    ("=SUM(A2:B1)", 10.0),
    ("SUM(A1:B2)", 10.0),
    ("=C1+C2", 2.0),
    ("=C1-C2", 8.0),
    ("=-C2", 3.0),
    ("=C2*C2", 9.0),
    ("=A1+B1*A2", 7.0),
    ("=(A1+B1)*A2", 9.0),
    ("=B2/B1", 2.0),
    ("=A2/B2", 0.75),
    ("=50%", 0.5),
    ("=B2*25%", 1.0),
    ("=PRODUCT(A2,B2)", 12.0),
    ("=PRODUCT(A2,C2,2)", -18.0),
    ("=SUM(A1,B1,C2)", 0.0),
    ("=SUM(A1:A2)+PRODUCT(B1,B2)", 12.0),
    ("=SUM(A1:B2)-SUM(C1:C2)", 8.0),
    ("=ZZ99+1", 1.0),
    ("=A1+SUM(X1:Z9)", 1.0),
    ("=1e3+A1", 1001.0),
]


def test_formula_results():
    grid = Grid(GRID_VALUES)
    for formula, value in FORMULA_RESULTS:
        check.equal(evaluate_formula(formula, grid), value, formula)


def test_negative_references_are_parenthesised():
    grid = Grid(GRID_VALUES)
    assert Formula("=C1+C2").expand(grid) == "5.0+(-3.0)"
    assert Formula("=C1-C2").expand(grid) == "5.0-(-3.0)"
    assert Formula("=SUM(C2:C2)*2").expand(grid) == "(-3.0)*2"


def test_expansion_order():
    grid = Grid(GRID_VALUES)
    assert Formula("=SUM(A1:B2)").expand(grid) == "10.0"
    assert Formula("=SUM(A1,B1)").expand(grid) == "3.0"
    assert Formula("=A1*10%").expand(grid) == "1.0*10*0.01"
    assert Formula("=PRODUCT(B1,B2)+1").expand(grid) == "8.0+1"


def test_fractions_are_kept():
    grid = Grid({"A1": 0.1, "A2": 0.2})
    assert evaluate_formula("=A1+A2", grid) == 0.3
    assert evaluate_formula("=A1*3", grid) == 0.3


@pytest.mark.parametrize(
    "formula",
    [
        "=A1/D1",
        "=1/0",
        "=A1+",
        "=(A1",
        "=",
        "",
        "=AVERAGE(A1:A2)",
        "=PRODUCT(A1,)",
        "=sum(a1:a2)",
        "=1e308*1e308",
        "=A1&B1",
    ],
)
def test_formula_errors(formula):
    with pytest.raises(FormulaError):
        _ = evaluate_formula(formula, Grid(GRID_VALUES))


def test_expression_parser():
    assert ExpressionParser("2+3*4").evaluate() == 14.0
    assert ExpressionParser("(2+3)*4").evaluate() == 20.0
    assert ExpressionParser("8/4/2").evaluate() == 1.0
    assert ExpressionParser("8-4-2").evaluate() == 2.0
    assert ExpressionParser("--2").evaluate() == 2.0
    assert ExpressionParser("-(1+2)*+3").evaluate() == -9.0
    with pytest.raises(FormulaError) as e:
        _ = ExpressionParser("2*").evaluate()
    assert "unexpected end of expression" in str(e.value)


def test_format_result():
    assert format_result(2.0) == "2"
    assert format_result(224.5) == "225"
    assert format_result(224.49) == "224"
    assert format_result(-2.5) == "-2"
    assert format_result(-2.6) == "-3"
    assert format_result(1234567.0) == "1234567"
    assert format_result(1234567.0, separator=True) == "1,234,567"
    assert format_result(-1234.4, separator=True) == "-1,234"
    assert format_result(999.0, separator=True) == "999"


def test_formula_repr():
    formula = Formula("=A1+B1")
    assert str(formula) == "=A1+B1"
    assert repr(formula) == "Formula('=A1+B1')"

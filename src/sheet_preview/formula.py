import math
import re
from typing import List, Optional

import sigfig

from sheet_preview.constants import MAX_SIGNIFICANT_DIGITS
from sheet_preview.exceptions import FormulaError
from sheet_preview.grid import Grid
from sheet_preview.tokenizer import Token, Tokenizer

__all__ = ["ExpressionParser", "Formula", "evaluate_formula", "format_result"]

# Function arguments may hold one level of parentheses, e.g. a negative "(-3.0)"
FUNCTION_ARGS = r"\(((?:[^()]|\([^()]*\))+)\)"
SUM_RE = re.compile(r"SUM" + FUNCTION_ARGS)
CELL_REF_RE = re.compile(r"\b[A-Z]+[0-9]+\b")
PERCENT_RE = re.compile(r"([0-9.]+)%")
PRODUCT_RE = re.compile(r"PRODUCT" + FUNCTION_ARGS)


def _operand(value: float) -> str:
    """Expression text for a number; negatives are parenthesised so ``5--3`` can't occur."""
    text = repr(float(value))
    return f"({text})" if value < 0 else text


class ExpressionParser:
    """
    Recursive-descent evaluator for ``+ - * / ( )`` over numeric literals.

    .. code-block:: text

        expression := term (("+" | "-") term)*
        term       := unary (("*" | "/") unary)*
        unary      := ("+" | "-") unary | primary
        primary    := NUMBER | "(" expression ")"
    """

    def __init__(self, expression: str):
        self._tokens = Tokenizer(expression).items
        self._pos = 0

    def evaluate(self) -> float:
        if not self._tokens:
            raise FormulaError("empty expression")
        value = self._expression()
        if self._pos != len(self._tokens):
            raise FormulaError(f"unexpected token {self._tokens[self._pos]!r}")
        return value

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise FormulaError("unexpected end of expression")
        self._pos += 1
        return token

    def _expression(self) -> float:
        value = self._term()
        while (token := self._peek()) is not None and token.type == Token.OP_IN:
            if token.value not in "+-":
                break
            self._pos += 1
            rhs = self._term()
            value = value + rhs if token.value == "+" else value - rhs
        return value

    def _term(self) -> float:
        value = self._unary()
        while (token := self._peek()) is not None and token.type == Token.OP_IN:
            if token.value not in "*/":
                break
            self._pos += 1
            rhs = self._unary()
            if token.value == "*":
                value *= rhs
            elif rhs == 0:
                raise FormulaError("division by zero")
            else:
                value /= rhs
        return value

    def _unary(self) -> float:
        token = self._peek()
        if token is not None and token.type == Token.OP_PRE:
            self._pos += 1
            value = self._unary()
            return -value if token.value == "-" else value
        return self._primary()

    def _primary(self) -> float:
        token = self._next()
        if token.type == Token.OPERAND:
            return token.value
        if token.subtype == Token.OPEN:
            value = self._expression()
            if self._next().subtype != Token.CLOSE:
                raise FormulaError("expected ')'")
            return value
        raise FormulaError(f"unexpected token {token!r}")


def _evaluate_list(args: str) -> List[float]:
    return [ExpressionParser(arg).evaluate() for arg in args.split(",")]


class Formula:
    """
    A cell formula such as ``=SUM(A1:B2)*10%``.

    Supported syntax is cell references, ``SUM`` over a range or a list,
    ``PRODUCT`` over a list, percent literals and ``+ - * / ( )``.
    """

    def __init__(self, text: str):
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Formula({self.text!r})"

    def expand(self, grid: Grid) -> str:
        """
        Substitute grid values into the formula.

        Ranges are summed before single references are replaced so the
        corners of a range are never substituted on their own. Percent,
        ``PRODUCT`` and list ``SUM`` work on the reference-free text.

        Returns
        -------
        str:
            An arithmetic expression with no references or functions.

        Raises
        ------
        FormulaError:
            If the arguments of ``PRODUCT`` or a list ``SUM`` don't evaluate.
        """
        expression = self.text.strip()
        if expression.startswith("="):
            expression = expression[1:]

        def range_sum(match: re.Match) -> str:
            if ":" not in match.group(1):
                return match.group(0)
            return _operand(grid.range_sum(match.group(1)))

        expression = SUM_RE.sub(range_sum, expression)
        expression = CELL_REF_RE.sub(lambda m: _operand(grid[m.group(0)]), expression)
        expression = PERCENT_RE.sub(r"\1*0.01", expression)
        expression = PRODUCT_RE.sub(
            lambda m: _operand(math.prod(_evaluate_list(m.group(1)))), expression
        )
        expression = SUM_RE.sub(lambda m: _operand(sum(_evaluate_list(m.group(1)))), expression)
        return expression

    def evaluate(self, grid: Grid) -> float:
        """
        Compute the formula's value against a grid.

        Raises
        ------
        FormulaError:
            If the formula is malformed, divides by zero or the result is
            not finite.
        """
        value = ExpressionParser(self.expand(grid)).evaluate()
        if not math.isfinite(value):
            raise FormulaError(f"non-finite result for '{self.text}'")
        if value == 0:
            return 0.0
        return sigfig.round(value, sigfigs=MAX_SIGNIFICANT_DIGITS, warn=False)


def evaluate_formula(formula: str, grid: Grid) -> float:
    """Evaluate a formula string against ``grid``; see :class:`Formula`."""
    return Formula(formula).evaluate(grid)


def format_result(value: float, separator: bool = False) -> str:
    """
    Display text for a formula result.

    The value is rounded half up to an integer and, if ``separator`` is
    ``True``, grouped in thousands with commas.
    """
    rounded = math.floor(value + 0.5)
    if separator:
        return f"{rounded:,}"
    return str(rounded)

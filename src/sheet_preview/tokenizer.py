import re

from sheet_preview.exceptions import TokenizerError

__all__ = ["Token", "Tokenizer"]


class Tokenizer:
    """
    A tokenizer for arithmetic expressions.

    Converts a string containing only numeric literals, parentheses and the
    operators ``+ - * /`` into a sequence of :class:`Token` objects. Formula
    references and functions must already have been replaced with numbers.

    `expression`: The string to tokenize

    Tokens are available through the `.items` attribute once the tokenizer
    has been constructed.
    """

    NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
    WSPACE_RE = re.compile(r"\s+")

    def __init__(self, expression: str):
        self.expression = expression
        self.items = []
        self.depth = 0  # Open parentheses not yet closed
        self.offset = 0  # How many chars have we read
        self.parse()

    def __repr__(self):
        item_str = ",".join([repr(token) for token in self.items])
        return f"[{item_str}]"

    def parse(self):
        """Populate self.items with the tokens from the expression."""
        consumers = (
            ("0123456789.", self.parse_number),
            ("+-*/", self.parse_operator),
            ("(", self.parse_opener),
            (")", self.parse_closer),
        )
        dispatcher = {}  # maps chars to the specific parsing function
        for chars, consumer in consumers:
            dispatcher.update(dict.fromkeys(chars, consumer))
        while self.offset < len(self.expression):
            match = self.WSPACE_RE.match(self.expression, self.offset)
            if match:
                self.offset = match.end()
                continue
            curr_char = self.expression[self.offset]
            if curr_char not in dispatcher:
                msg = f"Unexpected character '{curr_char}' at position {self.offset}"
                raise TokenizerError(msg)
            self.offset += dispatcher[curr_char]()
        if self.depth:
            msg = f"Unmatched '(' in '{self.expression}'"
            raise TokenizerError(msg)

    def parse_number(self):
        """
        Consume a numeric literal, including any exponent.

        Returns the number of characters matched. (Does not update
        self.offset)
        """
        match = self.NUMBER_RE.match(self.expression, self.offset)
        if match is None:
            msg = f"Invalid number at position {self.offset} in '{self.expression}'"
            raise TokenizerError(msg)
        if self.items and self.items[-1].is_operand():
            msg = f"Missing operator before position {self.offset} in '{self.expression}'"
            raise TokenizerError(msg)
        self.items.append(Token(float(match.group(0)), Token.OPERAND, Token.NUMBER))
        return len(match.group(0))

    def parse_operator(self):
        """
        Consume one operator character.

        ``+`` and ``-`` are prefix operators unless they follow an operand
        or a closing parenthesis.
        """
        curr_char = self.expression[self.offset]
        if curr_char in "*/":
            token = Token(curr_char, Token.OP_IN)
        elif self.items and self.items[-1].is_operand():
            token = Token(curr_char, Token.OP_IN)
        else:
            token = Token(curr_char, Token.OP_PRE)
        self.items.append(token)
        return 1

    def parse_opener(self):
        if self.items and self.items[-1].is_operand():
            msg = f"Missing operator before position {self.offset} in '{self.expression}'"
            raise TokenizerError(msg)
        self.depth += 1
        self.items.append(Token("(", Token.PAREN, Token.OPEN))
        return 1

    def parse_closer(self):
        if self.depth == 0:
            msg = f"Unmatched ')' at position {self.offset} in '{self.expression}'"
            raise TokenizerError(msg)
        self.depth -= 1
        self.items.append(Token(")", Token.PAREN, Token.CLOSE))
        return 1


class Token:
    """
    A token in an arithmetic expression.

    Tokens have three attributes:

    * `value`: The operator or parenthesis character, or the float value
      of a number
    * `type`: A string identifying the type of token
    * `subtype`: A string identifying subtype of the token (optional, and
                 defaults to "")
    """

    __slots__ = ["subtype", "type", "value"]

    OPERAND = "OPERAND"
    PAREN = "PAREN"
    OP_PRE = "OPERATOR-PREFIX"
    OP_IN = "OPERATOR-INFIX"

    NUMBER = "NUMBER"
    OPEN = "OPEN"
    CLOSE = "CLOSE"

    def __init__(self, value, type_, subtype=""):
        self.value = value
        self.type = type_
        self.subtype = subtype

    def __repr__(self):
        return f"{self.type}({self.subtype},'{self.value}')"

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.value, self.type, self.subtype) == (other.value, other.type, other.subtype)

    def is_operand(self) -> bool:
        """``True`` if the token ends an operand: a number or a closing parenthesis."""
        return self.type == Token.OPERAND or self.subtype == Token.CLOSE

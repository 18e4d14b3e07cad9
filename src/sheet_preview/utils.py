from typing import Dict

from sheet_preview.constants import PERCENT_DECIMAL_PLACES, SizeUnit


def parse_style(style: str) -> Dict[str, str]:
    """
    Split an inline ``style`` attribute into its declarations.

    Args:
        style: CSS declarations, e.g. ``"width: 25%; color: red"``

    Returns:
        declarations: property names (lower case) mapped to their values,
            in source order
    """
    declarations = {}
    for declaration in style.split(";"):
        name, sep, value = declaration.partition(":")
        if sep and name.strip():
            declarations[name.strip().lower()] = value.strip()
    return declarations


def format_style(declarations: Dict[str, str]) -> str:
    """Join declarations back into an inline ``style`` attribute."""
    return " ".join(f"{name}: {value};" for name, value in declarations.items())


def format_size(value: float, unit: SizeUnit) -> str:
    """Format a size for a style declaration, e.g. ``"120px"`` or ``"37.50%"``."""
    if unit == SizeUnit.PERCENT:
        return f"{value:.{PERCENT_DECIMAL_PLACES}f}%"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}px"

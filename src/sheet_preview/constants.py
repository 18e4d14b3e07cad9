from enum import Enum, IntEnum

import enum_tools.documentation

__all__ = [
    "Command",
    "InteractionState",
    "ResizeAxis",
    "SizeUnit",
]

# Editor limits
HISTORY_CAPACITY = 50
RESIZE_EDGE_THRESHOLD = 5
MIN_RESIZE_SIZE = 10
RECALC_PASSES = 2
MAX_SIGNIFICANT_DIGITS = 15
PERCENT_DECIMAL_PLACES = 2

# Metadata carried on document nodes by authoring tools
FORMULA_ATTR = "data-dze-formula"
FORMAT_SEPARATOR_ATTR = "dze_format_separator"
FORMAT_SEPARATOR_VALUE = ","

# Derived metadata written by the editor
ROW_ATTR = "data-row"
COL_ATTR = "data-col"
ADDRESS_ATTR = "data-addr"
TOOLTIP_ATTR = "data-tooltip"
ORIGINAL_TITLE_ATTR = "data-org-title"
TITLE_ATTR = "title"

# Interaction markers
RESIZE_COL_ATTR = "data-resize-col"
RESIZE_ROW_ATTR = "data-resize-row"
CONTENT_EDITABLE_ATTR = "contenteditable"
SPELLCHECK_ATTR = "spellcheck"
SELECTED_CLASS = "selected-cell"
EDITING_CLASS = "editing-cell"
DRAG_OVER_CLASS = "drag-over"

INTERACTION_CLASSES = (SELECTED_CLASS, EDITING_CLASS, DRAG_OVER_CLASS)
INTERACTION_ATTRS = (
    CONTENT_EDITABLE_ATTR,
    SPELLCHECK_ATTR,
    RESIZE_COL_ATTR,
    RESIZE_ROW_ATTR,
)
DERIVED_ATTRS = (ROW_ATTR, COL_ATTR, ADDRESS_ATTR, TOOLTIP_ATTR)

# Tooltip line templates
TOOLTIP_HEADER_FORMAT = "[{}]"
TOOLTIP_TITLE_FORMAT = "Title: {}"
TOOLTIP_FORMULA_FORMAT = "𝑓𝑥  {}"

CELL_TAGS = ("td", "th")


@enum_tools.documentation.document_enum
class InteractionState(IntEnum):
    """The pointer interaction state of an editor session."""

    IDLE = 1
    """No gesture in progress."""
    RANGE_SELECTING = 2
    """Button held after pressing a cell; hovering extends the selection."""
    EDITING = 3
    """One cell's text is being edited."""
    RESIZING_COLUMN = 4
    """Dragging the right edge of a cell."""
    RESIZING_ROW = 5
    """Dragging the bottom edge of a cell."""


@enum_tools.documentation.document_enum
class ResizeAxis(IntEnum):
    """The edge of a cell that is being resized."""

    COLUMN = 1
    """Right edge; changes the width."""
    ROW = 2
    """Bottom edge; changes the height."""


@enum_tools.documentation.document_enum
class SizeUnit(Enum):
    """Units of a cell's width or height."""

    PIXELS = "px"
    """Absolute size."""
    PERCENT = "%"
    """Size relative to the table."""


@enum_tools.documentation.document_enum
class Command(IntEnum):
    """
    Logical keyboard commands understood by an editor session.

    Key bindings are mapped to commands by :py:meth:`EditorSession.handle_key`.
    """

    UNDO = 1
    """Step back one snapshot."""
    REDO = 2
    """Step forward one snapshot."""
    DELETE = 3
    """Clear the text of the selected cells."""
    COMMIT = 4
    """Finish the active edit."""

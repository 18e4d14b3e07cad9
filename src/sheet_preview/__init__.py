"""Edit the tables of an HTML fragment as lightweight spreadsheets."""

import importlib.metadata

from sheet_preview.cell import *  # noqa: F403
from sheet_preview.constants import *  # noqa: F403
from sheet_preview.document import *  # noqa: F403
from sheet_preview.exceptions import *  # noqa: F403
from sheet_preview.formula import *  # noqa: F403
from sheet_preview.history import *  # noqa: F403
from sheet_preview.session import *  # noqa: F403

__version__ = importlib.metadata.version("sheet-preview")


def _get_version() -> str:
    return __version__

"""notmuch-tui - a terminal client for notmuch mail.

This package provides a threaded index, a message reader with attachment
viewing and an editor-based composer on top of the notmuch command line.
"""

__version__ = "0.1.0"

from notmuch_tui.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]

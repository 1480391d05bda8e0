"""Thread index.

This package turns the message trees of a search into the flat, indented list
shown in the index view.
"""

from .flatten import DisplayRow, flatten_threads, format_row, format_tags

__all__ = ["DisplayRow", "flatten_threads", "format_row", "format_tags"]

"""notmuch integration.

This package runs the notmuch executable and turns its JSON thread output into
message trees.
"""

from .client import NotmuchClient
from .parsing import parse_show_output, parse_thread, parse_thread_sets

__all__ = ["NotmuchClient", "parse_show_output", "parse_thread", "parse_thread_sets"]

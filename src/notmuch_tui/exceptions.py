"""Custom exceptions for notmuch-tui."""


class NotmuchTuiError(Exception):
    """Base exception for all notmuch-tui errors."""


class SearchFailed(NotmuchTuiError):
    """Exception raised when `notmuch show` could not be run or exited non-zero."""


class MalformedThread(NotmuchTuiError):
    """Exception raised when notmuch output does not have the thread shape."""


class ConversionFailed(NotmuchTuiError):
    """Exception raised when the HTML-to-text dump command is unavailable or fails."""


class AttachmentFetchFailed(NotmuchTuiError):
    """Exception raised when the raw bytes of a part could not be fetched."""


class ExternalToolFailed(NotmuchTuiError):
    """Exception raised for editor, viewer and `notmuch insert` failures."""


class EmptySelection(NotmuchTuiError):
    """Exception raised when an operation needs a selected message but the list is empty."""


class ConfigurationError(NotmuchTuiError):
    """Exception raised for configuration related errors."""

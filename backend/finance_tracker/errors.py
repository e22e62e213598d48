"""
Error taxonomy for the finance core.

ValidationError and ParseError are recoverable: stores reject the offending
record and the importer records the row in its result. StorageError is the
only failure that propagates out of the core untouched; AuthenticationError
is raised by the session layer when a login is refused.
"""


class FinanceError(Exception):
    """Base class for all finance tracker errors."""


class ValidationError(FinanceError, ValueError):
    """A transaction or budget field is malformed."""


class ParseError(FinanceError, ValueError):
    """A date, amount or type cell in an import row could not be understood."""


class ConfigurationError(FinanceError):
    """The column mapping points outside the bounds of a row."""


class StorageError(FinanceError):
    """The per-user book could not be read or written."""


class AuthenticationError(FinanceError):
    """Unknown user or wrong password."""

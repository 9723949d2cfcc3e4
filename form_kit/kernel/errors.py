# form_kit/kernel/errors.py
"""
ERROR TAXONOMY
==============

Every failure the package raises derives from FormKitError, so callers can
catch the whole family in one place.

    InvalidParameter        malformed / out-of-range numeric input
    NotFound                named level, type, room or file is absent
    ElementCreationFailure  the host rejected one specific element
    ImportParseError        one row of tabular input could not be parsed

Validation errors and lookups abort a workflow before its transaction opens.
ElementCreationFailure and ImportParseError are per-item: the batch catches
them, counts them and carries on.
"""


class FormKitError(Exception):
    """Base class for all form_kit errors."""
    pass


class InvalidParameter(FormKitError, ValueError):
    """Raised when an input parameter would produce degenerate geometry."""
    pass


class NotFound(FormKitError, LookupError):
    """Raised when a named model object cannot be resolved."""
    pass


class ElementCreationFailure(FormKitError, RuntimeError):
    """Raised when the model repository rejects a single element."""
    pass


class ImportParseError(FormKitError, ValueError):
    """Raised for one malformed row of tabular input."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.message = message

"""Editable grid exceptions."""


class EditGridError(Exception):
    """Base class for errors raised by the grid engine."""


class DescriptorError(EditGridError):
    """Raised when a column's edit descriptor resolves to something unusable."""


class HandleNotBoundError(EditGridError):
    """Raised when a TableHandle operation is called before a table binds it."""

"""
Exceptions raised by the risk core.

Suspicious input never raises. These are reserved for caller bugs
and broken reference files.
"""


class InvalidArgumentError(ValueError):
    """Raised when the caller violates an evaluation precondition."""

    pass


class ReferenceDataError(Exception):
    """Raised when reference data cannot be loaded or is malformed."""

    pass

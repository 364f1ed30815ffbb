"""
Core Component: Error Taxonomy

Every failure raised by the codec itself derives from ConversionError.
User converter exceptions and numeric/duration parse errors (ValueError,
OverflowError) are never wrapped at the top level and do not appear here.
"""

from typing import Any


class ConversionError(Exception):
    """Base class for errors raised by stringify/parse."""
    pass


class RegistrationError(ConversionError):
    """
    Raised at the start of a call when option building rejected a
    registration (or a separator).

    Attributes:
        errors: Individual rejection messages, in the order they were recorded.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class InvalidParseTargetError(ConversionError, TypeError):
    """Raised when the parse target is not a writable handle."""

    def __init__(self, target: Any):
        self.target = target
        super().__init__(
            f"invalid parse target: {type(target).__name__} is not a writable handle"
        )


class UnsupportedKindError(ConversionError, TypeError):
    """Raised when no precedence step can handle a kind."""

    def __init__(self, kind: str, type_name: str | None = None):
        self.kind = kind
        self.type_name = type_name
        msg = f"unsupported field type {kind}"
        if type_name and type_name != kind:
            msg += f" ({type_name})"
        super().__init__(msg)


class MalformedInputError(ConversionError, ValueError):
    """Raised for container text that does not fit the target shape."""

    def __init__(self, message: str, segment: str | None = None):
        self.segment = segment
        super().__init__(message)


class ElementError(ConversionError):
    """
    Wraps a failure while stringifying one element of a container.

    The original exception is chained as __cause__.
    """

    def __init__(self, message: str, index: int | None = None, key: Any = None):
        self.index = index
        self.key = key
        super().__init__(message)

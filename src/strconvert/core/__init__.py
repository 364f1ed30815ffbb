"""
Core foundation: frozen defaults and the error taxonomy.
"""

from .registry import param_registry
from .errors import (
    ConversionError,
    RegistrationError,
    InvalidParseTargetError,
    UnsupportedKindError,
    MalformedInputError,
    ElementError
)

__all__ = [
    # Registry
    "param_registry",

    # Errors
    "ConversionError",
    "RegistrationError",
    "InvalidParseTargetError",
    "UnsupportedKindError",
    "MalformedInputError",
    "ElementError",
]

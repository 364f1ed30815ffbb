"""
strconvert: type-directed flat string codec

Converts scalars, containers of scalars and custom types to a single
delimited string and back, without a document format.

    >>> stringify({"key2": "value2", "key1": "value1"})
    'key1:value1;key2:value2'
    >>> parse_as("item1;item2", list[str])
    ['item1', 'item2']
"""

__version__ = "1.0.0"

from .stringify import stringify
from .parse import parse, parse_as
from .options import (
    Options,
    build_options,
    with_stringifier,
    with_parser,
    with_element_separator,
    with_key_separator
)
from .handles import Handle, Ref, FieldRef, ItemRef, ValueView
from .kinds import Kind, TypeInfo, ArrayType, FixedArray, type_info, value_info, zero_value
from .probe import (
    TextMarshaler,
    TextUnmarshaler,
    BinaryMarshaler,
    BinaryUnmarshaler,
    capability
)
from .durations import format_duration, parse_duration
from .core import (
    ConversionError,
    RegistrationError,
    InvalidParseTargetError,
    UnsupportedKindError,
    MalformedInputError,
    ElementError
)

__all__ = [
    # Engines
    "stringify",
    "parse",
    "parse_as",

    # Options
    "Options",
    "build_options",
    "with_stringifier",
    "with_parser",
    "with_element_separator",
    "with_key_separator",

    # Handles
    "Handle",
    "Ref",
    "FieldRef",
    "ItemRef",
    "ValueView",

    # Kinds
    "Kind",
    "TypeInfo",
    "ArrayType",
    "FixedArray",
    "type_info",
    "value_info",
    "zero_value",

    # Capabilities
    "TextMarshaler",
    "TextUnmarshaler",
    "BinaryMarshaler",
    "BinaryUnmarshaler",
    "capability",

    # Durations
    "format_duration",
    "parse_duration",

    # Errors
    "ConversionError",
    "RegistrationError",
    "InvalidParseTargetError",
    "UnsupportedKindError",
    "MalformedInputError",
    "ElementError",
]

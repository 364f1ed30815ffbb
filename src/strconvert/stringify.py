"""
Stringify Engine

Recursive value -> string conversion.

Precedence per recursive step (highest first):
  1. stringifier registered for the value's exact type
  2. marshal_text()
  3. marshal_binary()
  4. built-in handling by kind

Built-in handling:
  - None -> "" (lossy: parse never turns "" back into None)
  - str as is; ints base 10; timedelta in duration notation
  - floats positional with shortest round-trip digits; complex as "(re+imi)"
  - bools "true"/"false"; bytes decoded as text
  - sequences/arrays: items joined by the element separator (all
    numpy.uint8 items take the bytes path); arrays emit every slot
  - maps: "key<keysep>value" pairs, sorted, joined by the element separator
"""

from typing import Any

import numpy as np

from .core.errors import ElementError, UnsupportedKindError
from .core.registry import param_registry
from .durations import format_duration
from .handles import ValueView
from .kinds import Kind, TypeInfo, type_info, type_name, type_of, value_info
from .numbers import format_bool, format_complex, format_float
from .options import Options, build_options
from .probe import BINARY_MARSHAL, TEXT_MARSHAL, capability

_REGISTRY = param_registry()
_ENCODING = _REGISTRY["text_encoding"]
_ERRORS = _REGISTRY["text_errors"]


def stringify(value: Any, *option_fns) -> str:
    """
    Convert value to a string.

    Supported:
      - types registered with with_stringifier
      - types with marshal_text() or marshal_binary()
      - str, int, numpy integer types, timedelta
      - float, complex, numpy floating/complex types
      - bool, numpy.bool_, bytes, bytearray
      - None (optional with no value)
      - list, tuple, FixedArray and dict of the above

    Args:
        value: Value to convert.
        option_fns: Configuration functions (with_stringifier,
            with_element_separator, with_key_separator, ...).

    Returns:
        str: Flat string representation.

    Raises:
        RegistrationError: A configuration function rejected a registration;
            raised before anything is converted.
        UnsupportedKindError: A value (or element) has no conversion.
        ElementError: An element of a container failed; original chained.
        Exception: Whatever a registered stringifier or marshal method raises.
    """
    opts = build_options(option_fns)
    opts.check()
    return _stringify(value, opts)


def _stringify(value: Any, opts: Options) -> str:
    fn = opts.stringifiers.get(type_of(value))
    if fn is not None:
        out = fn(value)
        if not isinstance(out, str):
            raise TypeError(
                f"stringifier for {type_name(type_of(value))} returned "
                f"{type(out).__name__}, expected str"
            )
        return out

    view = ValueView(value)

    marshal = capability(view, TEXT_MARSHAL)
    if marshal is not None:
        return _as_text(marshal())

    marshal = capability(view, BINARY_MARSHAL)
    if marshal is not None:
        return _as_text(marshal())

    if value is None:
        return ""

    return _builtin(value, value_info(value), opts)


def _builtin(value: Any, info: TypeInfo, opts: Options) -> str:
    kind = info.kind

    if kind is Kind.STRING:
        return str.__str__(value)

    if kind in (Kind.INT, Kind.UINT):
        return str(int(value))

    if kind is Kind.DURATION:
        return format_duration(value)

    if kind is Kind.FLOAT:
        return format_float(value, info.bits)

    if kind is Kind.COMPLEX:
        return format_complex(value, info.bits)

    if kind is Kind.BOOL:
        return format_bool(value)

    if kind is Kind.BYTES:
        return bytes(value).decode(_ENCODING, _ERRORS)

    if kind in (Kind.SEQUENCE, Kind.ARRAY):
        if _holds_bytes(value, info):
            return bytes(int(b) for b in value).decode(_ENCODING, _ERRORS)

        parts = []
        for i, item in enumerate(value):
            try:
                parts.append(_stringify(item, opts))
            except Exception as err:
                raise ElementError(
                    f"error stringifying sequence item of index {i}: {err}", index=i
                ) from err
        return opts.element_separator.join(parts)

    if kind is Kind.MAP:
        pairs = []
        for k, v in value.items():
            try:
                sk = _stringify(k, opts)
            except Exception as err:
                raise ElementError(
                    f"error stringifying key {k!r} of map: {err}", key=k
                ) from err
            try:
                sv = _stringify(v, opts)
            except Exception as err:
                raise ElementError(
                    f"error stringifying map value with key {sk}: {err}", key=k
                ) from err
            pairs.append(sk + opts.key_separator + sv)
        # Sort to get predictable output.
        pairs.sort()
        return opts.element_separator.join(pairs)

    raise UnsupportedKindError(kind.value, type_name(info.type))


def _holds_bytes(value: Any, info: TypeInfo) -> bool:
    if info.kind is Kind.ARRAY:
        elem = type_info(info.elem)
        return elem.kind is Kind.UINT and elem.bits == 8
    return len(value) > 0 and all(isinstance(b, np.uint8) for b in value)


def _as_text(out: Any) -> str:
    if isinstance(out, (bytes, bytearray)):
        return bytes(out).decode(_ENCODING, _ERRORS)
    if isinstance(out, str):
        return out
    raise TypeError(f"marshal method returned {type(out).__name__}, expected bytes or str")

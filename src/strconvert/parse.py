"""
Parse Engine

Recursive string -> value conversion, the mirror of the stringify engine.

Precedence per recursive step (highest first):
  1. parser registered for the target's exact declared type
  2. unmarshal_text(data)
  3. unmarshal_binary(data)
  4. built-in handling by kind

Optional targets allocate the pointee and parse into it: "" into
Optional[str] gives "", not None, and "" into Optional[int] fails.
"""

from typing import Any

from .core.errors import InvalidParseTargetError, MalformedInputError, UnsupportedKindError
from .core.registry import param_registry
from .durations import parse_duration
from .handles import Handle, ItemRef, Ref
from .kinds import FixedArray, Kind, TypeInfo, type_info, type_name, underlying_class, zero_value
from .numbers import parse_bool, parse_complex, parse_float, parse_int, parse_uint
from .options import Options, build_options
from .probe import BINARY_UNMARSHAL, TEXT_UNMARSHAL, capability

_REGISTRY = param_registry()
_ENCODING = _REGISTRY["text_encoding"]
_ERRORS = _REGISTRY["text_errors"]


def parse(s: str, target: Handle, *option_fns) -> None:
    """
    Parse s and store the result through target.

    Parse is the inverse of stringify with the same options and
    complementary parsers/stringifiers. Supported declared types:

      - types registered with with_parser
      - classes with unmarshal_text(data) or unmarshal_binary(data)
      - str, int, numpy integer types, timedelta
      - float, complex, numpy floating/complex types
      - bool, numpy.bool_, bytes, bytearray
      - Optional[T] of the above
      - list[T], tuple[T, ...], FixedArray[T, n] and dict[K, V] of the above

    Args:
        s: Text to parse.
        target: Writable handle (Ref, FieldRef, ...).
        option_fns: Configuration functions.

    Raises:
        InvalidParseTargetError: target is not a writable handle; checked first.
        RegistrationError: A configuration function rejected a registration.
        MalformedInputError: Bad map pair or too many array elements.
        UnsupportedKindError: Declared type has no conversion.
        ValueError, OverflowError: Malformed or out-of-range scalar text.
        Exception: Whatever a registered parser or unmarshal method raises.
    """
    if not isinstance(target, Handle) or not target.writable:
        raise InvalidParseTargetError(target)

    opts = build_options(option_fns)
    opts.check()
    _parse(s, target, opts)


def parse_as(s: str, tp: Any, *option_fns) -> Any:
    """
    Parse s as type tp and return the value.

    Example:
        >>> parse_as("key1:value1;key2:value2", dict[str, str])
        {'key1': 'value1', 'key2': 'value2'}
    """
    ref = Ref(tp)
    parse(s, ref, *option_fns)
    return ref.value


def _parse(s: str, handle: Handle, opts: Options) -> None:
    tp = handle.type

    fn = opts.parsers.get(tp)
    if fn is not None:
        handle.set(fn(s))
        return

    unmarshal = capability(handle, TEXT_UNMARSHAL)
    if unmarshal is not None:
        unmarshal(s.encode(_ENCODING, _ERRORS))
        return

    unmarshal = capability(handle, BINARY_UNMARSHAL)
    if unmarshal is not None:
        unmarshal(s.encode(_ENCODING, _ERRORS))
        return

    _builtin(s, handle, type_info(tp), opts)


def _builtin(s: str, handle: Handle, info: TypeInfo, opts: Options) -> None:
    kind = info.kind

    if kind is Kind.OPTIONAL:
        if info.elem is None:
            raise UnsupportedKindError(kind.value, type_name(info.type))
        current = handle.get()
        inner = Ref(info.elem, zero_value(info.elem) if current is None else current)
        _parse(s, inner, opts)
        handle.set(inner.value)

    elif kind is Kind.STRING:
        handle.set(_coerce(info.type, s))

    elif kind is Kind.INT:
        handle.set(_coerce(info.type, parse_int(s, info.bits)))

    elif kind is Kind.UINT:
        handle.set(_coerce(info.type, parse_uint(s, info.bits)))

    elif kind is Kind.DURATION:
        d = parse_duration(s)
        cls = underlying_class(info.type)
        handle.set(d if type(d) is cls else cls(days=d.days, seconds=d.seconds,
                                                  microseconds=d.microseconds))

    elif kind is Kind.FLOAT:
        handle.set(_coerce(info.type, parse_float(s, info.bits)))

    elif kind is Kind.COMPLEX:
        handle.set(_coerce(info.type, parse_complex(s, info.bits)))

    elif kind is Kind.BOOL:
        handle.set(_coerce(info.type, parse_bool(s)))

    elif kind is Kind.BYTES:
        handle.set(_coerce(info.type, s.encode(_ENCODING, _ERRORS)))

    elif kind is Kind.SEQUENCE:
        if _is_byte(info.elem):
            items = _byte_items(s, info.elem)
        else:
            pieces = s.split(opts.element_separator)
            items = [zero_value(info.elem) for _ in pieces]
            for i, piece in enumerate(pieces):
                _parse(piece, ItemRef(items, i, info.elem), opts)
        handle.set(items if info.origin is list else info.origin(items))

    elif kind is Kind.ARRAY:
        capacity = info.capacity or 0
        if _is_byte(info.elem):
            pieces = _byte_items(s, info.elem)
        else:
            pieces = s.split(opts.element_separator)
        if len(pieces) > capacity:
            raise MalformedInputError(
                f"number of elements ({len(pieces)}) exceeds array capacity ({capacity})",
                segment=s,
            )
        arr = FixedArray(info.elem, capacity)
        for i, piece in enumerate(pieces):
            if isinstance(piece, str):
                _parse(piece, ItemRef(arr, i, info.elem), opts)
            else:
                arr[i] = piece
        handle.set(arr)

    elif kind is Kind.MAP:
        result = info.origin()
        if s.strip():
            for pair in s.split(opts.element_separator):
                parts = pair.split(opts.key_separator)
                if len(parts) != 2:
                    raise MalformedInputError(
                        f"invalid map item: {pair!r} (expected 2 parts separated by "
                        f"{opts.key_separator!r}, got {len(parts)})",
                        segment=pair,
                    )
                key = Ref(info.key)
                _parse(parts[0], key, opts)
                value = Ref(info.elem)
                _parse(parts[1], value, opts)
                result[key.value] = value.value
        handle.set(result)

    else:
        raise UnsupportedKindError(kind.value, type_name(info.type))


def _coerce(tp: Any, value: Any) -> Any:
    cls = underlying_class(tp)
    return value if type(value) is cls else cls(value)


def _is_byte(tp: Any) -> bool:
    info = type_info(tp)
    return info.kind is Kind.UINT and info.bits == 8


def _byte_items(s: str, elem: Any) -> list:
    cls = underlying_class(elem)
    return [cls(b) for b in s.encode(_ENCODING, _ERRORS)]

"""
Kind Model: Type Tokens → Tagged Kinds

Closed set of kinds the engines dispatch on, resolved from Python type
tokens (classes, typing generics, Optional/unions, FixedArray[T, n]).

Fixed-width numbers are numpy scalar types; plain int is unbounded,
float is 64-bit, complex is 128-bit.
"""

import abc
import asyncio
import collections.abc
import ctypes
import datetime
import enum
import functools
import inspect
import queue
import types
import typing
from dataclasses import dataclass
from typing import Any

import numpy as np


class Kind(enum.Enum):
    """Structural category of a type, independent of its exact identity."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    COMPLEX = "complex"
    BOOL = "bool"
    BYTES = "bytes"
    DURATION = "duration"
    OPTIONAL = "optional"
    SEQUENCE = "sequence"
    ARRAY = "array"
    MAP = "map"
    STRUCT = "struct"
    INTERFACE = "interface"
    CHANNEL = "channel"
    FUNCTION = "function"
    POINTER = "pointer"


@dataclass(frozen=True)
class TypeInfo:
    """
    Resolved shape of a type token.

    Attributes:
        kind: Dispatch kind.
        type: The exact type token (registry key).
        bits: Numeric width; None for unbounded int and non-numeric kinds.
        elem: Element / pointee / value type for containers and optionals.
        key: Key type for maps.
        capacity: Fixed capacity for arrays.
        origin: Concrete container class to build (list, tuple, dict).
    """

    kind: Kind
    type: Any
    bits: int | None = None
    elem: Any = None
    key: Any = None
    capacity: int | None = None
    origin: Any = None


@dataclass(frozen=True)
class ArrayType:
    """Type token for a fixed-capacity array: FixedArray[elem, capacity]."""

    elem: Any
    capacity: int

    def __repr__(self) -> str:
        return f"FixedArray[{type_name(self.elem)}, {self.capacity}]"


class FixedArray(list):
    """
    List with a fixed capacity and a declared element type.

    Slots not given at construction hold the element type's zero value.
    Length-changing list methods raise TypeError.
    """

    def __init__(self, elem_type: Any, capacity: int, items=()):
        items = list(items)
        if capacity < 0 or len(items) > capacity:
            raise ValueError(
                f"number of elements ({len(items)}) exceeds array capacity ({capacity})"
            )
        super().__init__(items)
        super().extend(zero_value(elem_type) for _ in range(capacity - len(items)))
        self.elem_type = elem_type
        self.capacity = capacity

    def __class_getitem__(cls, params):
        elem, capacity = params
        return ArrayType(elem, capacity)

    @property
    def type_token(self) -> ArrayType:
        return ArrayType(self.elem_type, self.capacity)

    def _resize(self, *args, **kwargs):
        raise TypeError(f"{self.type_token!r} has a fixed capacity")

    append = extend = insert = pop = remove = clear = _resize
    __delitem__ = __iadd__ = __imul__ = _resize

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            value = list(value)
            if len(range(*index.indices(len(self)))) != len(value):
                self._resize()
        super().__setitem__(index, value)

    def __reduce__(self):
        # copy, deepcopy and pickle rebuild through the constructor, never append
        return (type(self), (self.elem_type, self.capacity, list(self)))

    def __repr__(self) -> str:
        return f"{self.type_token!r}({list.__repr__(self)})"


# Pointer-shaped ctypes classes share this metaclass
_POINTER_META = type(ctypes.POINTER(ctypes.c_char))
_POINTER_TYPES = (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_wchar_p, memoryview)
_CHANNEL_TYPES = (queue.Queue, queue.SimpleQueue, asyncio.Queue)
_FUNCTION_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    functools.partial,
)
_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_MAP_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def type_info(tp: Any) -> TypeInfo:
    """
    Resolve a type token to its kind and shape.

    Args:
        tp: A class, typing generic alias, Optional/union, NewType,
            Annotated alias or ArrayType token.

    Returns:
        TypeInfo: Never raises; unknown non-class tokens resolve to INTERFACE.
    """
    if isinstance(tp, ArrayType):
        return TypeInfo(Kind.ARRAY, tp, elem=tp.elem, capacity=tp.capacity, origin=FixedArray)

    if tp is Any or tp is object:
        return TypeInfo(Kind.INTERFACE, tp)

    if tp is None or tp is type(None):
        return TypeInfo(Kind.OPTIONAL, type(None))

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Union or origin is types.UnionType:
        non_none = [a for a in args if a is not type(None)]
        if len(args) == 2 and len(non_none) == 1:
            return TypeInfo(Kind.OPTIONAL, tp, elem=non_none[0])
        # General unions are dynamically typed
        return TypeInfo(Kind.INTERFACE, tp)

    if origin is typing.Annotated:
        base = type_info(args[0])
        return TypeInfo(base.kind, tp, base.bits, base.elem, base.key, base.capacity, base.origin)

    if origin is not None:
        return _generic_info(tp, origin, args)

    if not isinstance(tp, type):
        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None:
            # NewType keeps its own identity but the kind of its supertype
            base = type_info(supertype)
            return TypeInfo(base.kind, tp, base.bits, base.elem, base.key, base.capacity, base.origin)
        return TypeInfo(Kind.INTERFACE, tp)

    return _class_info(tp)


def _generic_info(tp: Any, origin: Any, args: tuple) -> TypeInfo:
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeInfo(Kind.SEQUENCE, tp, elem=args[0], origin=tuple)
        return TypeInfo(Kind.STRUCT, tp)

    if origin in _SEQUENCE_ORIGINS or (isinstance(origin, type) and issubclass(origin, list)):
        concrete = origin if isinstance(origin, type) and issubclass(origin, list) else list
        return TypeInfo(Kind.SEQUENCE, tp, elem=args[0] if args else Any, origin=concrete)

    if origin in _MAP_ORIGINS or (isinstance(origin, type) and issubclass(origin, dict)):
        concrete = origin if isinstance(origin, type) and issubclass(origin, dict) else dict
        key, value = args if len(args) == 2 else (Any, Any)
        return TypeInfo(Kind.MAP, tp, key=key, elem=value, origin=concrete)

    if origin is collections.abc.Callable:
        return TypeInfo(Kind.FUNCTION, tp)

    base = type_info(origin)
    return TypeInfo(base.kind, tp, base.bits, base.elem, base.key, base.capacity, base.origin)


def _class_info(tp: type) -> TypeInfo:
    # numpy first: np.float64 and np.complex128 subclass float and complex
    if issubclass(tp, np.bool_):
        return TypeInfo(Kind.BOOL, tp)
    if issubclass(tp, np.signedinteger):
        return TypeInfo(Kind.INT, tp, bits=np.iinfo(tp).bits)
    if issubclass(tp, np.unsignedinteger):
        return TypeInfo(Kind.UINT, tp, bits=np.iinfo(tp).bits)
    if issubclass(tp, np.floating):
        return TypeInfo(Kind.FLOAT, tp, bits=np.finfo(tp).bits)
    if issubclass(tp, np.complexfloating):
        return TypeInfo(Kind.COMPLEX, tp, bits=np.dtype(tp).itemsize * 8)

    if issubclass(tp, bool):
        return TypeInfo(Kind.BOOL, tp)
    if issubclass(tp, int):
        return TypeInfo(Kind.INT, tp)
    if issubclass(tp, float):
        return TypeInfo(Kind.FLOAT, tp, bits=64)
    if issubclass(tp, complex):
        return TypeInfo(Kind.COMPLEX, tp, bits=128)
    if issubclass(tp, str):
        return TypeInfo(Kind.STRING, tp)
    if issubclass(tp, (bytes, bytearray)):
        return TypeInfo(Kind.BYTES, tp)
    if issubclass(tp, datetime.timedelta):
        return TypeInfo(Kind.DURATION, tp)

    if isinstance(tp, _POINTER_META) or issubclass(tp, _POINTER_TYPES):
        return TypeInfo(Kind.POINTER, tp)
    if issubclass(tp, _CHANNEL_TYPES):
        return TypeInfo(Kind.CHANNEL, tp)
    if issubclass(tp, _FUNCTION_TYPES) or tp is collections.abc.Callable:
        return TypeInfo(Kind.FUNCTION, tp)

    if issubclass(tp, FixedArray):
        return TypeInfo(Kind.ARRAY, tp, elem=Any, origin=FixedArray)
    if issubclass(tp, dict) or tp in _MAP_ORIGINS:
        return TypeInfo(Kind.MAP, tp, key=Any, elem=Any,
                        origin=tp if issubclass(tp, dict) else dict)
    if issubclass(tp, (list, tuple)):
        return TypeInfo(Kind.SEQUENCE, tp, elem=Any, origin=tp)

    if getattr(tp, "_is_protocol", False) or inspect.isabstract(tp) or tp is abc.ABC:
        return TypeInfo(Kind.INTERFACE, tp)

    return TypeInfo(Kind.STRUCT, tp)


def type_of(value: Any) -> Any:
    """Exact type token of a runtime value (ArrayType for FixedArray)."""
    if isinstance(value, FixedArray):
        return value.type_token
    return type(value)


def value_info(value: Any) -> TypeInfo:
    """Resolve the kind of a runtime value."""
    return type_info(type_of(value))


def zero_value(tp: Any) -> Any:
    """
    Zero value of a type token.

    Optional, struct-shaped and dynamically typed tokens have no allocated
    zero and return None, as do scalar types that reject their zero
    (an IntEnum without a 0 member).
    """
    info = type_info(tp)
    kind = info.kind

    if kind in (Kind.INT, Kind.UINT, Kind.FLOAT, Kind.COMPLEX, Kind.BOOL):
        return _construct(underlying_class(info.type), 0)
    if kind in (Kind.STRING, Kind.BYTES, Kind.DURATION):
        return _construct(underlying_class(info.type))
    if kind in (Kind.SEQUENCE, Kind.MAP):
        return info.origin()
    if kind is Kind.ARRAY:
        return FixedArray(info.elem, info.capacity or 0)
    return None


def _construct(cls: type, *args) -> Any:
    try:
        return cls(*args)
    except (TypeError, ValueError):
        return None


def underlying_class(tp: Any) -> Any:
    """Concrete class behind a NewType or Annotated token (or tp itself)."""
    while typing.get_origin(tp) is typing.Annotated or hasattr(tp, "__supertype__"):
        if hasattr(tp, "__supertype__"):
            tp = tp.__supertype__
        else:
            tp = typing.get_args(tp)[0]
    return tp


def type_name(tp: Any) -> str:
    """Readable name of a type token for error messages."""
    if isinstance(tp, ArrayType):
        return repr(tp)
    if isinstance(tp, type) and typing.get_origin(tp) is None:
        return tp.__name__
    return repr(tp).replace("typing.", "")

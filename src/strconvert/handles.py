"""
Value Handles

Parse writes through a handle: a typed slot that knows its declared type
and whether it may be written. Stringify reads through a read-only view.
"""

import dataclasses
import typing
from typing import Any

from .kinds import type_name, type_of, zero_value

_ZERO = object()


class Handle:
    """Typed slot. Subclasses define get/set and writability."""

    type: Any = Any
    writable: bool = False

    def get(self) -> Any:
        raise NotImplementedError

    def set(self, value: Any) -> None:
        raise NotImplementedError


class Ref(Handle):
    """
    Standalone writable slot.

    Example:
        >>> ref = Ref(int)
        >>> parse("42", ref)
        >>> ref.value
        42
    """

    writable = True

    def __init__(self, tp: Any, value: Any = _ZERO):
        self.type = tp
        self.value = zero_value(tp) if value is _ZERO else value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref[{type_name(self.type)}]({self.value!r})"


class FieldRef(Handle):
    """
    View of one attribute of an object.

    The declared type comes from tp or the class annotations. The view is
    read-only when neither names a type, or when the object is a frozen
    dataclass.
    """

    def __init__(self, obj: Any, name: str, tp: Any = None):
        self.obj = obj
        self.name = name
        if tp is None:
            tp = _annotations(type(obj)).get(name)
        self.type = tp if tp is not None else Any
        frozen = (
            dataclasses.is_dataclass(obj)
            and obj.__dataclass_params__.frozen
        )
        self.writable = tp is not None and not frozen

    def get(self) -> Any:
        return getattr(self.obj, self.name, None)

    def set(self, value: Any) -> None:
        setattr(self.obj, self.name, value)

    def __repr__(self) -> str:
        return f"FieldRef[{type_name(self.type)}]({type(self.obj).__name__}.{self.name})"


class ItemRef(Handle):
    """View of container[index] (list, FixedArray or dict slot)."""

    writable = True

    def __init__(self, container: Any, index: Any, tp: Any):
        self.container = container
        self.index = index
        self.type = tp

    def get(self) -> Any:
        return self.container[self.index]

    def set(self, value: Any) -> None:
        self.container[self.index] = value


class ValueView(Handle):
    """Read-only view of a value; its type is the value's exact type."""

    def __init__(self, value: Any):
        self.value = value
        self.type = type_of(value)

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        raise TypeError(f"{type_name(self.type)} view is read-only")


def _annotations(cls: type) -> dict:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        hints = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints

"""
Capability Probe

Finds custom marshal/unmarshal methods on a handle's value.

Probe order:
  1. the current value of the handle
  2. if the handle is writable and its declared type is a plain class that
     has the method: a fresh instance built with no arguments (or, when the
     constructor requires arguments, allocated without ``__init__``), stored
     into the handle before returning

Step 2 is what lets an empty slot (None) of a custom type be unmarshalled
into. Exceptions other than TypeError from the constructor propagate.
"""

import logging
from typing import Any, Callable, Protocol, runtime_checkable

from .core.registry import param_registry
from .handles import Handle
from .kinds import Kind, type_info

logger = logging.getLogger(__name__)

_METHODS = param_registry()["capability_methods"]

TEXT_MARSHAL = _METHODS["text_marshal"]
TEXT_UNMARSHAL = _METHODS["text_unmarshal"]
BINARY_MARSHAL = _METHODS["binary_marshal"]
BINARY_UNMARSHAL = _METHODS["binary_unmarshal"]


@runtime_checkable
class TextMarshaler(Protocol):
    def marshal_text(self) -> bytes | str: ...


@runtime_checkable
class TextUnmarshaler(Protocol):
    def unmarshal_text(self, data: bytes) -> None: ...


@runtime_checkable
class BinaryMarshaler(Protocol):
    def marshal_binary(self) -> bytes: ...


@runtime_checkable
class BinaryUnmarshaler(Protocol):
    def unmarshal_binary(self, data: bytes) -> None: ...


def capability(handle: Handle, name: str) -> Callable | None:
    """
    Return the bound capability method for handle, or None.

    Args:
        handle: Slot to probe (ValueView for stringify, any writable handle
            for parse).
        name: One of TEXT_MARSHAL, TEXT_UNMARSHAL, BINARY_MARSHAL,
            BINARY_UNMARSHAL.
    """
    method = _bound(handle.get(), name)
    if method is not None or not handle.writable:
        return method

    tp = handle.type
    if not isinstance(tp, type) or type_info(tp).kind is not Kind.STRUCT:
        return None
    if not callable(getattr(tp, name, None)):
        return None

    fresh = _allocate(tp)
    if fresh is None:
        return None
    logger.debug("allocated %s to satisfy %s", tp.__name__, name)
    handle.set(fresh)
    return getattr(fresh, name)


_PROTOCOLS = {
    TEXT_MARSHAL: TextMarshaler,
    TEXT_UNMARSHAL: TextUnmarshaler,
    BINARY_MARSHAL: BinaryMarshaler,
    BINARY_UNMARSHAL: BinaryUnmarshaler,
}


def _allocate(tp: type) -> Any:
    # No-argument construction first; __new__ alone for classes that need arguments
    try:
        return tp()
    except TypeError:
        pass
    try:
        return tp.__new__(tp)
    except TypeError:
        return None


def _bound(value: Any, name: str) -> Callable | None:
    if value is None or isinstance(value, type):
        return None
    if isinstance(value, _PROTOCOLS[name]):
        return getattr(value, name)
    return None

"""
Options: Separators & Converter Registry

Options are built fresh for every stringify/parse call from configuration
functions, each taking an Options and returning a new one. Nothing is
shared or mutated between calls.

Rejected registrations do not raise while building; they accumulate in
Options.errors and surface as one RegistrationError when the call starts.
"""

import inspect
import logging
import typing
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .core.errors import RegistrationError
from .core.registry import param_registry
from .kinds import type_info, type_name

logger = logging.getLogger(__name__)

StringifierFn = Callable[[Any], str]
ParserFn = Callable[[str], Any]
OptionFn = Callable[["Options"], "Options"]

_REJECTED_KINDS = frozenset(param_registry()["rejected_registration_kinds"])
_UNSET = inspect.Parameter.empty


def _empty_mapping() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class Options:
    """
    Per-call configuration.

    Attributes:
        element_separator: Separates sequence items and map pairs.
        key_separator: Separates a map key from its value.
        stringifiers: Exact type token -> stringifier.
        parsers: Exact type token -> parser.
        errors: Accumulated registration rejections.
    """

    element_separator: str = ";"
    key_separator: str = ":"
    stringifiers: Mapping[Any, StringifierFn] = field(default_factory=_empty_mapping)
    parsers: Mapping[Any, ParserFn] = field(default_factory=_empty_mapping)
    errors: tuple[str, ...] = ()

    def check(self) -> None:
        """Raise the accumulated RegistrationError, if any."""
        if self.errors:
            raise RegistrationError(list(self.errors))


def build_options(option_fns) -> Options:
    """Apply configuration functions in order over the registry defaults."""
    registry = param_registry()
    opts = Options(
        element_separator=registry["element_separator"],
        key_separator=registry["key_separator"],
    )
    for fn in option_fns:
        opts = fn(opts)
    return opts


def with_stringifier(fn: StringifierFn, tp: Any = _UNSET) -> OptionFn:
    """
    Register a stringifier for one exact type.

    The type is tp, or the annotation of fn's first parameter. It is
    rejected if its kind is interface, channel, function, pointer or map.

    Example:
        >>> stringify(3.14159, with_stringifier(lambda f: f"{f:.3E}", float))
        '3.142E+00'
    """
    def apply(opts: Options) -> Options:
        arg_type = tp if tp is not _UNSET else _first_param_type(fn)
        if arg_type is _UNSET:
            return _reject(opts, f"cannot determine stringifier argument type of {_fn_name(fn)}")

        kind = type_info(arg_type).kind
        if kind.value in _REJECTED_KINDS:
            return _reject(opts, f"{kind.value} is not a valid stringifier argument type")

        return replace(opts, stringifiers=MappingProxyType({**opts.stringifiers, arg_type: fn}))

    return apply


def with_parser(fn: ParserFn, tp: Any = _UNSET) -> OptionFn:
    """
    Register a parser for one exact type.

    The type is tp, or fn's return annotation. It is rejected if its kind
    is interface, channel, function, pointer or map.
    """
    def apply(opts: Options) -> Options:
        ret_type = tp if tp is not _UNSET else _return_type(fn)
        if ret_type is _UNSET:
            return _reject(opts, f"cannot determine parser return type of {_fn_name(fn)}")

        kind = type_info(ret_type).kind
        if kind.value in _REJECTED_KINDS:
            return _reject(opts, f"{kind.value} is not a valid parser return type")

        return replace(opts, parsers=MappingProxyType({**opts.parsers, ret_type: fn}))

    return apply


def with_element_separator(sep: str) -> OptionFn:
    """Override the separator between sequence items and map pairs."""
    def apply(opts: Options) -> Options:
        if not isinstance(sep, str) or len(sep) != 1:
            return _reject(opts, f"element separator must be a single character, got {sep!r}")
        return replace(opts, element_separator=sep)

    return apply


def with_key_separator(sep: str) -> OptionFn:
    """Override the separator between a map key and its value."""
    def apply(opts: Options) -> Options:
        if not isinstance(sep, str) or len(sep) != 1:
            return _reject(opts, f"key separator must be a single character, got {sep!r}")
        return replace(opts, key_separator=sep)

    return apply


def _reject(opts: Options, message: str) -> Options:
    logger.debug("rejected option: %s", message)
    return replace(opts, errors=opts.errors + (message,))


def _hints(fn: Callable) -> dict:
    try:
        return typing.get_type_hints(fn)
    except (NameError, TypeError):
        return dict(getattr(fn, "__annotations__", {}))


def _first_param_type(fn: Callable) -> Any:
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return _UNSET
    if not params:
        return _UNSET
    return _hints(fn).get(params[0].name, _UNSET)


def _return_type(fn: Callable) -> Any:
    return _hints(fn).get("return", _UNSET)


def _fn_name(fn: Callable) -> str:
    return getattr(fn, "__qualname__", None) or type_name(type(fn))

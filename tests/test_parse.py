#!/usr/bin/env python3
"""
Parse Engine - Unit Tests

Verifies:
  - built-in kinds sized to their declared type
  - sequences, fixed arrays, maps (malformed pairs, duplicates, blank input)
  - optional targets (allocation, "" asymmetry)
  - unmarshal_text / unmarshal_binary and slot allocation
  - registered parsers, rejected registrations, invalid targets
  - unsupported kinds raise instead of silently skipping
"""

import ctypes
import queue
from dataclasses import dataclass, field
from datetime import timedelta
from enum import IntEnum
from typing import Any, Callable, Optional

import numpy as np
import pytest

from strconvert import (
    FieldRef,
    FixedArray,
    InvalidParseTargetError,
    MalformedInputError,
    Ref,
    RegistrationError,
    UnsupportedKindError,
    ValueView,
    parse,
    parse_as,
    with_element_separator,
    with_key_separator,
    with_parser,
)

from capability_types import BinaryStruct, Plain, Prefixed, TextStruct


@pytest.mark.parametrize("text, tp, want", [
    ("0", np.uint8, np.uint8(0)),
    ("3", np.uint16, np.uint16(3)),
    ("4", np.uint32, np.uint32(4)),
    ("5", np.uint64, np.uint64(5)),
    ("6", int, 6),
    ("7", np.int8, np.int8(7)),
    ("8", np.int16, np.int16(8)),
    ("9", np.int32, np.int32(9)),
    ("10", np.int64, np.int64(10)),
    ("3.14159", np.float32, np.float32(3.14159)),
    ("2.71828", float, 2.71828),
    ("(3+2i)", np.complex64, np.complex64(3 + 2j)),
    ("5+20.3i", complex, complex(5, 20.3)),
    ("false", bool, False),
    ("true", bool, True),
    ("T", np.bool_, np.bool_(True)),
    ("whatever", str, "whatever"),
    ("whatever", bytes, b"whatever"),
    ("whatever", bytearray, bytearray(b"whatever")),
    ("5h0m0s", timedelta, timedelta(hours=5)),
])
def test_builtin(text, tp, want):
    """Built-in kinds parse into their declared type."""
    got = parse_as(text, tp)
    assert got == want, f"parse_as({text!r}, {tp}) = {got!r}, want {want!r}"
    assert type(got) is type(want), f"type {type(got)} != {type(want)}"


def test_containers():
    got = parse_as("key1:value1;key2:value2", dict[str, str])
    assert got == {"key1": "value1", "key2": "value2"}

    assert parse_as("item1;item2", list[str]) == ["item1", "item2"]
    assert parse_as("1;2;3", tuple[int, ...]) == (1, 2, 3)

    arr = parse_as("item1;item2", FixedArray[str, 10])
    assert isinstance(arr, FixedArray)
    assert arr == ["item1", "item2"] + [""] * 8
    assert arr.capacity == 10

    got = parse_as("0:1.2;1:3.4", dict[int, float])
    assert got == {0: 1.2, 1: 3.4}

    print("✓ Containers parsed")


def test_integer_prefixes():
    assert parse_as("0x1f", int) == 31
    assert parse_as("0b101", np.int8) == 5
    assert parse_as("0o17", np.uint16) == 15
    assert parse_as("010", np.int16) == 8
    assert parse_as("-0x10", np.int32) == -16
    assert parse_as("1_000", int) == 1000


@pytest.mark.parametrize("text, tp, exc", [
    ("128", np.int8, OverflowError),
    ("-129", np.int8, OverflowError),
    ("256", np.uint8, OverflowError),
    ("-1", np.uint8, ValueError),
    ("abc", int, ValueError),
    ("", int, ValueError),
    (" 1", int, ValueError),
    ("1.5", np.int64, ValueError),
    ("1e40", np.float32, OverflowError),
    ("1e400", float, OverflowError),
    ("nope", float, ValueError),
    ("1+", complex, ValueError),
    ("i", complex, ValueError),
    ("1+j", complex, ValueError),
    ("( 1+2i)", complex, ValueError),
    ("(1+2i )", np.complex64, ValueError),
    ("1_0+2i", complex, ValueError),
    ("yes", bool, ValueError),
    ("5", timedelta, ValueError),
    ("5x", timedelta, ValueError),
])
def test_bad_scalars(text, tp, exc):
    """Malformed or out-of-range text raises the underlying numeric error."""
    with pytest.raises(exc):
        parse_as(text, tp)


def test_float_specials():
    assert parse_as("+Inf", float) == float("inf")
    assert parse_as("-inf", np.float32) == np.float32("-inf")
    assert np.isnan(parse_as("NaN", float))


def test_byte_sequences():
    got = parse_as("hi", list[np.uint8])
    assert got == [104, 105]
    assert all(type(b) is np.uint8 for b in got)

    arr = parse_as("hi", FixedArray[np.uint8, 4])
    assert arr == [104, 105, 0, 0]


def test_separators():
    assert parse_as("a,b", list[str], with_element_separator(",")) == ["a", "b"]
    got = parse_as("a=1&b=2", dict[str, int], with_element_separator("&"), with_key_separator("="))
    assert got == {"a": 1, "b": 2}


def test_map_malformed_pair():
    """A pair with more than two parts names the offending piece."""
    with pytest.raises(MalformedInputError) as exc_info:
        parse_as("a:b:c", dict[str, str])
    assert exc_info.value.segment == "a:b:c"
    assert "'a:b:c'" in str(exc_info.value)

    with pytest.raises(MalformedInputError) as exc_info:
        parse_as("ok:1;missing", dict[str, str])
    assert exc_info.value.segment == "missing"


def test_map_blank_and_duplicates():
    assert parse_as("", dict[str, int]) == {}
    assert parse_as("   ", dict[str, int]) == {}
    assert parse_as("a:1;a:2", dict[str, int]) == {"a": 2}


def test_array_capacity_exceeded():
    with pytest.raises(MalformedInputError) as exc_info:
        parse_as("a;b;c", FixedArray[str, 2])
    assert "exceeds array capacity (2)" in str(exc_info.value)


def test_optional_targets():
    """Optional targets allocate; '' never comes back as None."""
    assert parse_as("5", Optional[int]) == 5
    assert parse_as("5", int | None) == 5
    assert parse_as("", Optional[str]) == ""
    with pytest.raises(ValueError):
        parse_as("", Optional[int])

    got = parse_as("some text", Optional[TextStruct])
    assert got == TextStruct("some text")


class Collector:
    """Unmarshaler whose state is set up by __init__."""

    def __init__(self):
        self.parts = []

    def unmarshal_text(self, data: bytes) -> None:
        self.parts.extend(data.decode("utf-8").split(","))


class Color(IntEnum):
    RED = 1
    BLUE = 2


def test_unmarshaler_slot_is_constructed():
    """An empty slot is built with its constructor before unmarshalling."""
    got = parse_as("a,b", Collector)
    assert got.parts == ["a", "b"]

    got = parse_as("x;y,z", list[Collector])
    assert [c.parts for c in got] == [["x"], ["y", "z"]]


def test_named_int_without_zero():
    """Integer types that reject 0 still parse."""
    assert parse_as("2", Color) is Color.BLUE
    assert parse_as("1;2", list[Color]) == [Color.RED, Color.BLUE]
    assert parse_as("2:1", dict[Color, Color]) == {Color.BLUE: Color.RED}
    assert parse_as("1", Optional[Color]) is Color.RED

    with pytest.raises(ValueError):
        parse_as("3", Color)


def test_complex_forms():
    assert parse_as("(1+2i)", complex) == complex(1, 2)
    assert parse_as("-2.5i", complex) == complex(0, -2.5)
    assert parse_as("1-2j", complex) == complex(1, -2)
    assert parse_as("3", complex) == complex(3, 0)


def test_text_unmarshaler():
    assert parse_as("some text", TextStruct) == TextStruct("some text")


def test_binary_unmarshaler():
    assert parse_as("some data", BinaryStruct) == BinaryStruct("some data")


def test_unmarshal_into_existing_value():
    existing = TextStruct("old")
    ref = Ref(TextStruct, existing)
    parse("new", ref)
    assert ref.value is existing
    assert existing.value == "new"


def test_unmarshaler_elements():
    got = parse_as("a;b", list[TextStruct])
    assert got == [TextStruct("a"), TextStruct("b")]

    got = parse_as("k:v", dict[str, BinaryStruct])
    assert got == {"k": BinaryStruct("v")}


def test_custom_parser():
    def parse_prefixed(s: str) -> Prefixed:
        prefix = "--"
        if not s.startswith(prefix):
            raise ValueError(f"failed to parse Prefixed from {s!r}")
        return Prefixed(s[len(prefix):], prefix)

    assert parse_as("--value", Prefixed, with_parser(parse_prefixed)) == Prefixed("value", "--")
    with pytest.raises(ValueError, match="failed to parse Prefixed"):
        parse_as("value", Prefixed, with_parser(parse_prefixed))

    got = parse_as("3,14159", float, with_parser(lambda s: float(s.replace(",", ".", 1)), float))
    assert got == 3.14159


def test_custom_parser_beats_unmarshaler():
    got = parse_as("x", TextStruct, with_parser(lambda s: TextStruct("parsed " + s), TextStruct))
    assert got == TextStruct("parsed x")


def test_parser_error_propagates_verbatim():
    class Boom(Exception):
        pass

    err = Boom("no")

    def explode(s: str) -> Prefixed:
        raise err

    with pytest.raises(Boom) as exc_info:
        parse_as("x", list[Prefixed], with_parser(explode))
    assert exc_info.value is err


@pytest.mark.parametrize("tp, kind", [
    (Any, "interface"),
    (queue.Queue, "channel"),
    (dict[str, int], "map"),
    (dict[float, Any], "map"),
    (Callable[[], None], "function"),
    (ctypes.c_void_p, "pointer"),
    (memoryview, "pointer"),
])
def test_bad_parser_types(tp, kind):
    with pytest.raises(RegistrationError) as exc_info:
        parse_as("", str, with_parser(lambda s: None, tp))
    assert str(exc_info.value) == f"{kind} is not a valid parser return type"


def test_parser_without_return_annotation():
    with pytest.raises(RegistrationError, match="cannot determine parser return type"):
        parse_as("", str, with_parser(lambda s: s))


@dataclass
class Settings:
    got: float = 0.0
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FrozenSettings:
    got: float = 0.0


def test_field_ref():
    """Attributes are writable targets through FieldRef."""
    settings = Settings()
    parse("42.37", FieldRef(settings, "got"))
    assert settings.got == 42.37

    parse("a;b", FieldRef(settings, "tags"))
    assert settings.tags == ["a", "b"]


@pytest.mark.parametrize("target", [
    123,
    None,
    "target",
    ValueView(5),
    FieldRef(FrozenSettings(), "got"),
    FieldRef(Settings(), "unknown"),
])
def test_invalid_target(target):
    with pytest.raises(InvalidParseTargetError):
        parse("123", target)


def test_invalid_target_checked_first():
    """An invalid target wins over a rejected registration."""
    with pytest.raises(InvalidParseTargetError):
        parse("1", 5, with_parser(lambda s: None, Any))


@pytest.mark.parametrize("tp, kind", [
    (Any, "interface"),
    (Plain, "struct"),
    (Callable[[], None], "function"),
    (queue.Queue, "channel"),
    (dict, "interface"),
])
def test_unsupported_kinds_raise(tp, kind):
    """Kinds without a conversion raise instead of leaving the target alone."""
    with pytest.raises(UnsupportedKindError) as exc_info:
        parse_as("x:y", tp)
    assert exc_info.value.kind == kind


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

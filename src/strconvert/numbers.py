"""
Numeric & Boolean Text

Formatting and parsing of integers, floats, complex numbers and booleans,
sized to a bit width.

Floats are written positionally (never exponent notation) with the fewest
digits that read back to the same value at that width. Integers accept
base prefixes (0x, 0o, 0b, legacy leading-zero octal) and underscores.
Out-of-range input raises OverflowError; malformed input raises ValueError.
"""

import math
import re

import numpy as np

from .core.registry import param_registry

_FLOAT_TYPES = {16: np.float16, 32: np.float32, 64: np.float64}
_COMPLEX_TYPES = {64: np.complex64, 128: np.complex128}
_LEGACY_OCTAL = re.compile(r"0[0-7_]+")
# An imaginary unit with no digits before it: "i", "+j", "1-i"
_BARE_IMAGINARY = re.compile(r"(?:^|[+-])[ij]$", re.IGNORECASE)

_REGISTRY = param_registry()
_SPECIALS = _REGISTRY["float_specials"]
_TRUE = frozenset(_REGISTRY["bool_true"])
_FALSE = frozenset(_REGISTRY["bool_false"])


def format_float(x, bits: int = 64) -> str:
    """
    Format a float positionally with shortest round-trip digits.

    Args:
        x: Any real number (float, numpy floating, int).
        bits: Width the digits must round-trip at (16, 32, 64; wider
            widths use numpy longdouble).

    Returns:
        str: e.g. "3.14159", "3", "-0", "+Inf", "NaN".
    """
    ftype = _FLOAT_TYPES.get(bits, np.longdouble)
    scalar = ftype(x)
    if np.isnan(scalar):
        return _SPECIALS["nan"]
    if np.isinf(scalar):
        return _SPECIALS["inf"] if scalar > 0 else _SPECIALS["-inf"]
    return np.format_float_positional(scalar, unique=True, trim="-")


def format_complex(z, bits: int = 128) -> str:
    """
    Format a complex number as "(re+imi)".

    Each part follows format_float at half the complex width; the imaginary
    part always carries an explicit sign.
    """
    z = complex(z)
    half = bits // 2
    re_text = format_float(z.real, half)
    im_text = format_float(z.imag, half)
    if im_text[0] not in "+-":
        im_text = "+" + im_text
    return f"({re_text}{im_text}i)"


def format_bool(b) -> str:
    return "true" if b else "false"


def parse_bool(s: str) -> bool:
    """Accepts 1, t, T, TRUE, true, True, 0, f, F, FALSE, false, False."""
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"parsing {s!r}: invalid syntax")


def parse_int(s: str, bits: int | None = None) -> int:
    """
    Parse a signed integer.

    Args:
        s: Text with optional sign and base prefix.
        bits: Width to range-check against; None for unbounded.

    Raises:
        ValueError: Malformed text.
        OverflowError: Value does not fit in bits.
    """
    value = _parse_integer(s)
    if bits is not None:
        lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        if not lo <= value <= hi:
            raise OverflowError(f"parsing {s!r}: value out of range for int{bits}")
    return value


def parse_uint(s: str, bits: int | None = None) -> int:
    """Parse an unsigned integer; signs are rejected as invalid syntax."""
    if s[:1] in ("+", "-"):
        raise ValueError(f"parsing {s!r}: invalid syntax")
    value = _parse_integer(s)
    if bits is not None and value > (1 << bits) - 1:
        raise OverflowError(f"parsing {s!r}: value out of range for uint{bits}")
    return value


def _parse_integer(s: str) -> int:
    if not s or s != s.strip():
        raise ValueError(f"parsing {s!r}: invalid syntax")
    try:
        return int(s, 0)
    except ValueError:
        sign, body = (s[0], s[1:]) if s[0] in "+-" else ("", s)
        if _LEGACY_OCTAL.fullmatch(body):
            value = int(body, 8)
            return -value if sign == "-" else value
        raise ValueError(f"parsing {s!r}: invalid syntax") from None


def parse_float(s: str, bits: int = 64):
    """
    Parse a float sized to bits.

    Accepts decimal and hex ("0x1p-2") notation, inf/infinity/nan in any case.

    Returns:
        float for 64 bits, the numpy scalar type otherwise.

    Raises:
        ValueError: Malformed text.
        OverflowError: Finite text that overflows the width.
    """
    if not s or s != s.strip():
        raise ValueError(f"parsing {s!r}: invalid syntax")
    try:
        if "0x" in s.lower():
            value = float.fromhex(s)
        else:
            value = float(s)
    except ValueError:
        raise ValueError(f"parsing {s!r}: invalid syntax") from None

    if math.isinf(value) and not _names_infinity(s):
        raise OverflowError(f"parsing {s!r}: value out of range for float{bits}")
    if bits == 64:
        return value

    return _narrow(value, bits, s)


def parse_complex(s: str, bits: int = 128):
    """
    Parse "(re+imi)", "re+imi", "re" or "imi"; 'j' is accepted for 'i'.

    Returns:
        complex for 128 bits, the numpy scalar type otherwise.
    """
    if not s or s != s.strip():
        raise ValueError(f"parsing {s!r}: invalid syntax")
    text = s
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1]
    if not text or text != text.strip() or "_" in text or _BARE_IMAGINARY.search(text):
        raise ValueError(f"parsing {s!r}: invalid syntax")
    if text.endswith("i"):
        text = text[:-1] + "j"
    try:
        value = complex(text)
    except ValueError:
        raise ValueError(f"parsing {s!r}: invalid syntax") from None

    if bits == 128:
        return value

    half = bits // 2
    real = _narrow(value.real, half, s)
    imag = _narrow(value.imag, half, s)
    return _COMPLEX_TYPES.get(bits, np.clongdouble)(complex(real, imag))


def _names_infinity(s: str) -> bool:
    return s.lstrip("+-").lower() in ("inf", "infinity")


def _narrow(value: float, bits: int, s: str):
    ftype = _FLOAT_TYPES.get(bits, np.longdouble)
    with np.errstate(over="ignore"):
        narrowed = ftype(value)
    if np.isinf(narrowed) and not math.isinf(value):
        raise OverflowError(f"parsing {s!r}: value out of range for float{bits}")
    return narrowed

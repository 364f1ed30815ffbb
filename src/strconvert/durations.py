"""
Duration Notation

timedelta <-> "72h3m0.5s" style text.

Format rules:
  - zero is "0s"
  - under one second: a single unit, "ns", "µs" or "ms", with a decimal
    fraction where needed ("1.5ms")
  - otherwise hours, minutes and (fractional) seconds, leading zero units
    omitted: "5h0m0s", "1m30s", "36s", "2.000004s"
  - negative durations get a leading "-"

Parsing accepts an optional sign, "0", and any sequence of
<decimal><unit> groups with units ns, us, µs, μs, ms, s, m, h.
timedelta resolution is one microsecond; finer fractions truncate toward zero.
"""

import re
from datetime import timedelta

from .core.registry import param_registry

_UNITS = param_registry()["duration_units"]

_MICROSECOND = _UNITS["us"]
_MILLISECOND = _UNITS["ms"]
_SECOND = _UNITS["s"]
_MINUTE = _UNITS["m"]

_GROUP = re.compile(r"(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>[^0-9.]*)")


def format_duration(td: timedelta) -> str:
    """
    Render a timedelta in duration notation.

    Example:
        >>> format_duration(timedelta(hours=5))
        '5h0m0s'
    """
    ns = _total_microseconds(td) * _MICROSECOND
    if ns == 0:
        return "0s"

    negative = ns < 0
    u = -ns if negative else ns

    if u < _SECOND:
        if u < _MICROSECOND:
            text = f"{u}ns"
        elif u < _MILLISECOND:
            text = _decimal(u, 3) + "µs"
        else:
            text = _decimal(u, 6) + "ms"
    else:
        text = _decimal(u % _MINUTE, 9) + "s"
        minutes = u // _MINUTE
        if minutes:
            text = f"{minutes % 60}m" + text
            hours = minutes // 60
            if hours:
                text = f"{hours}h" + text

    return "-" + text if negative else text


def parse_duration(s: str) -> timedelta:
    """
    Parse duration notation into a timedelta.

    Raises:
        ValueError: Empty text, a group without digits, a missing or unknown unit.
        OverflowError: Result exceeds the timedelta range.
    """
    orig = s
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]

    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"time: invalid duration {orig!r}")

    total = 0
    pos = 0
    while pos < len(s):
        match = _GROUP.match(s, pos)
        whole, frac, unit = match["whole"], match["frac"] or "", match["unit"]
        if not whole and not frac:
            raise ValueError(f"time: invalid duration {orig!r}")
        if not unit:
            raise ValueError(f"time: missing unit in duration {orig!r}")
        if unit not in _UNITS:
            raise ValueError(f"time: unknown unit {unit!r} in duration {orig!r}")

        scale = _UNITS[unit]
        total += int(whole or "0") * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        pos = match.end()

    result = timedelta(microseconds=total // _MICROSECOND)
    return -result if negative else result


def _total_microseconds(td: timedelta) -> int:
    return (td.days * 86400 + td.seconds) * 1_000_000 + td.microseconds


def _decimal(value: int, places: int) -> str:
    # value is an integer count of 10**-places units
    whole, frac = divmod(value, 10 ** places)
    if not frac:
        return str(whole)
    return f"{whole}." + str(frac).rjust(places, "0").rstrip("0")

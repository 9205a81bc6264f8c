"""Duration parsing and coercion for configuration values.

Durations are written the way Go's ``time.ParseDuration`` reads them: an
optional sign followed by one or more decimal numbers, each with an
optional fraction and a mandatory unit, such as ``"300ms"``, ``"-1.5h"``
or ``"2h45m"``. Valid units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``,
``m`` and ``h``.

Numeric configuration values are raw ticks of :class:`datetime.timedelta`,
that is microseconds.
"""

from __future__ import annotations

import re
from datetime import timedelta
from fractions import Fraction
from typing import Any

from yamlconfig.errors import DurationParseError
from yamlconfig.node import NodeKind, kind_of

__all__ = ["INVALID_DURATION", "parse_duration", "coerce_duration"]

# Returned when a value cannot be read as a duration; zero is a legal value.
INVALID_DURATION = timedelta(microseconds=-1)

_NANOS_PER_UNIT: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

# Fraction digits past this are below a nanosecond for every unit.
_MAX_FRACTION_DIGITS = 18
# Durations are capped at a signed 64-bit nanosecond count.
_MAX_NANOS = 2**63 - 1

_COMPONENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]+)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Raises:
        DurationParseError: If ``text`` does not follow the duration grammar.
    """
    rest = text
    negative = False
    if rest[:1] in ("-", "+"):
        negative = rest[0] == "-"
        rest = rest[1:]

    if rest == "0":
        return timedelta(0)
    if not rest:
        raise DurationParseError(text, "empty duration")

    total = Fraction(0)
    pos = 0
    while pos < len(rest):
        match = _COMPONENT.match(rest, pos)
        if match is None:
            raise DurationParseError(text, "missing unit")
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise DurationParseError(text, "missing number")
        if unit not in _NANOS_PER_UNIT:
            raise DurationParseError(text, f"unknown unit {unit!r}")
        whole = whole.lstrip("0")
        if len(whole) > len(str(_MAX_NANOS)):
            raise DurationParseError(text, "invalid duration")
        magnitude = Fraction(int(whole or "0"))
        frac = (frac or "")[:_MAX_FRACTION_DIGITS]
        if frac:
            magnitude += Fraction(int(frac), 10 ** len(frac))
        total += magnitude * _NANOS_PER_UNIT[unit]
        if total > _MAX_NANOS:
            raise DurationParseError(text, "invalid duration")
        pos = match.end()

    micros = round(total / 1000)
    return timedelta(microseconds=-micros if negative else micros)


def coerce_duration(value: Any) -> timedelta:
    """Read a configuration value as a duration, never raising.

    Integers and floats are microseconds, strings are parsed with
    :func:`parse_duration`. Anything else yields :data:`INVALID_DURATION`.
    """
    kind = kind_of(value)
    if kind in (NodeKind.INT, NodeKind.FLOAT):
        try:
            return timedelta(microseconds=value)
        except (OverflowError, ValueError):
            return INVALID_DURATION
    if kind is NodeKind.STRING:
        try:
            return parse_duration(value)
        except (DurationParseError, OverflowError, ValueError):
            return INVALID_DURATION
    return INVALID_DURATION

"""Duration text for ``@every`` descriptors.

Accepts the compact form used by Go-style tooling: an optional sign followed
by one or more ``<number><unit>`` groups, e.g. ``"90s"``, ``"1h30m"``,
``"1.5h"``, ``"300ms"``. Units: ``ns``, ``us`` (or ``µs``), ``ms``, ``s``,
``m``, ``h``. A bare ``"0"`` is also accepted.
"""

from __future__ import annotations

import re
from datetime import timedelta

from cronmask.exceptions import DurationParseError

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

_GROUP_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]+)")

# Durations are bounded by a signed 64-bit nanosecond count (about 292 years).
_MAX_NANOS = 2**63 - 1
_MAX_WHOLE_DIGITS = 19
_MAX_FRAC_DIGITS = 18


def parse_duration(text: str) -> timedelta:
    """Parse duration text into a timedelta.

    Args:
        text: Duration such as ``"5m"`` or ``"-1h15m30.5s"``.

    Returns:
        The duration. Precision finer than a microsecond is truncated.

    Raises:
        DurationParseError: If the text is not a valid duration.
    """
    original = text
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise DurationParseError(original, "invalid duration")

    total = 0
    pos = 0
    while pos < len(text):
        match = _GROUP_RE.match(text, pos)
        if match is None:
            raise DurationParseError(original, "invalid duration")
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise DurationParseError(original, "invalid duration")
        scale = _NANOS_PER_UNIT.get(unit)
        if scale is None:
            raise DurationParseError(original, f"unknown unit {unit!r}")

        if len(whole.lstrip("0")) > _MAX_WHOLE_DIGITS:
            raise DurationParseError(original, "invalid duration")
        total += int(whole or "0") * scale
        if frac:
            # precision beyond nanoseconds is dropped
            frac = frac[:_MAX_FRAC_DIGITS]
            total += int(frac) * scale // 10 ** len(frac)
        if total > _MAX_NANOS:
            raise DurationParseError(original, "invalid duration")
        pos = match.end()

    if negative:
        total = -total
    # timedelta stops at microseconds; drop the nanosecond remainder toward zero.
    micros = abs(total) // 1_000
    return timedelta(microseconds=-micros if negative else micros)

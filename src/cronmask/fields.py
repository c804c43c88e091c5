"""Compilation of a single cron field into a bit-mask.

A field is a comma-separated list of range expressions::

    range_expr := atom ["-" atom] ["/" step]
    atom       := "*" | "?" | integer | name

Each range expression is turned into a set of permitted values, and the
results are unioned into a FieldMask. Bit ``i`` of the mask is set when value
``i`` is permitted. Bare ``*``/``?`` additionally set the wildcard flag,
which only the day-of-month/day-of-week rule looks at.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from cronmask.bounds import Bounds
from cronmask.exceptions import (
    AboveMaximumError,
    BelowMinimumError,
    CronSyntaxError,
    InvalidNumberError,
    InvalidStepError,
    NegativeNumberError,
    RangeOrderError,
    TooManyHyphensError,
    TooManySlashesError,
)

# Reserved bit of the packed 64-bit form; no field value reaches it.
STAR_BIT = 1 << 63

_WILDCARDS = ("*", "?")
_INT_RE = re.compile(r"[+-]?[0-9]+")


# =============================================================================
# Field Mask
# =============================================================================


@dataclass(frozen=True)
class FieldMask:
    """Permitted values of one field plus the wildcard flag.

    Attributes:
        bits: Bit ``i`` set means value ``i`` is permitted.
        wildcard: True if the source text was a bare ``*`` or ``?``.
    """

    bits: int
    wildcard: bool = False

    @classmethod
    def from_packed(cls, packed: int) -> "FieldMask":
        """Build a mask from its 64-bit form (value bits plus STAR_BIT)."""
        return cls(packed & ~STAR_BIT, bool(packed & STAR_BIT))

    @property
    def packed(self) -> int:
        """64-bit form with the wildcard flag stored in STAR_BIT."""
        return self.bits | STAR_BIT if self.wildcard else self.bits

    def __or__(self, other: "FieldMask") -> "FieldMask":
        if not isinstance(other, FieldMask):
            return NotImplemented
        return FieldMask(self.bits | other.bits, self.wildcard or other.wildcard)

    def matches(self, value: int) -> bool:
        return value >= 0 and bool(self.bits >> value & 1)

    def values(self) -> Iterator[int]:
        """Yield permitted values in ascending order."""
        bits = self.bits
        value = 0
        while bits:
            if bits & 1:
                yield value
            bits >>= 1
            value += 1

    def next_value(self, start: int) -> int | None:
        """Smallest permitted value >= start, or None."""
        remaining = self.bits >> start
        if not remaining:
            return None
        return start + ((remaining & -remaining).bit_length() - 1)

    def first(self) -> int | None:
        return self.next_value(0)

    def __repr__(self) -> str:
        values = ",".join(str(v) for v in self.values())
        star = ", wildcard" if self.wildcard else ""
        return f"FieldMask({{{values}}}{star})"


# =============================================================================
# Bit Helpers
# =============================================================================


def get_bits(low: int, high: int, step: int) -> int:
    """Set every bit in [low, high] that lies on the step progression from low."""
    if step == 1:
        return ((1 << (high + 1)) - 1) & ~((1 << low) - 1)

    bits = 0
    for value in range(low, high + 1, step):
        bits |= 1 << value
    return bits


def all_bits(bounds: Bounds) -> FieldMask:
    """Every value within bounds, flagged as wildcard."""
    return FieldMask(get_bits(bounds.min_value, bounds.max_value, 1), wildcard=True)


def single_bit(value: int) -> FieldMask:
    return FieldMask(1 << value)


# =============================================================================
# Parsing
# =============================================================================


def parse_field(text: str, bounds: Bounds) -> FieldMask:
    """Compile a comma-separated field into a FieldMask.

    Args:
        text: Field text, e.g. ``"1,5-7/2,MON"``.
        bounds: Range and names of the field.

    Returns:
        Union of all range expressions in the list.

    Raises:
        CronParseError: On the first range expression that fails.
    """
    mask = FieldMask(0)
    for expr in text.split(","):
        if not expr:
            continue
        mask |= parse_range(expr, bounds)
    if not mask.bits:
        raise CronSyntaxError(f"empty field: {text!r}", text)
    return mask


def parse_range(expr: str, bounds: Bounds) -> FieldMask:
    """Compile one ``atom[-atom][/step]`` expression.

    A single atom followed by a step means "from atom through the field's
    maximum". A step greater than one drops the wildcard flag.
    """
    range_and_step = expr.split("/")
    low_and_high = range_and_step[0].split("-")
    single = len(low_and_high) == 1
    wildcard = False

    if low_and_high[0] in _WILDCARDS:
        if not single:
            raise CronSyntaxError(f"wildcard cannot start a range: {expr}", expr)
        start, end = bounds.min_value, bounds.max_value
        wildcard = True
    else:
        start = parse_int_or_name(low_and_high[0], bounds.names)
        if len(low_and_high) == 1:
            end = start
        elif len(low_and_high) == 2:
            end = parse_int_or_name(low_and_high[1], bounds.names)
        else:
            raise TooManyHyphensError(expr)

    if len(range_and_step) == 1:
        step = 1
    elif len(range_and_step) == 2:
        step = parse_int(range_and_step[1])
        if single:
            end = bounds.max_value
        if step > 1:
            wildcard = False
    else:
        raise TooManySlashesError(expr)

    if start < bounds.min_value:
        raise BelowMinimumError(start, bounds.min_value, expr)
    if end > bounds.max_value:
        raise AboveMaximumError(end, bounds.max_value, expr)
    if start > end:
        raise RangeOrderError(start, end, expr)
    if step == 0:
        raise InvalidStepError(expr)

    return FieldMask(get_bits(start, end, step), wildcard)


def parse_int_or_name(expr: str, names: dict[str, int]) -> int:
    """Resolve a month/weekday name (any case) or a plain integer."""
    if names:
        named = names.get(expr.lower())
        if named is not None:
            return named
    return parse_int(expr)


def parse_int(expr: str) -> int:
    """Parse a non-negative decimal integer."""
    if not _INT_RE.fullmatch(expr):
        raise InvalidNumberError(expr, "invalid syntax")
    try:
        num = int(expr)
    except ValueError as e:
        # CPython refuses very long digit strings
        raise InvalidNumberError(expr, str(e)) from e
    if num < 0:
        raise NegativeNumberError(num, expr)
    return num

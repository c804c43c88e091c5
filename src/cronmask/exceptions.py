"""Exceptions raised while compiling cron expressions.

Errors fall into two families:

    CronSyntaxError   the text cannot be read (field count, hyphens, slashes,
                      integers, steps, descriptors, durations)
    CronBoundsError   the text reads fine but names a value outside the
                      field's range, or a range whose start is after its end

Both derive from CronParseError, which is a ValueError so callers that only
care about "bad input" can catch that.
"""

from __future__ import annotations

from typing import Sequence


# =============================================================================
# Base
# =============================================================================


class CronParseError(ValueError):
    """Raised when a cron expression cannot be compiled."""

    def __init__(self, message: str, expression: str = "") -> None:
        self.expression = expression
        super().__init__(message)


# =============================================================================
# Syntax Errors
# =============================================================================


class CronSyntaxError(CronParseError):
    """The expression text does not follow the grammar."""


class EmptyExpressionError(CronSyntaxError):
    def __init__(self) -> None:
        super().__init__("empty spec string")


class FieldCountError(CronSyntaxError):
    """Wrong number of whitespace-separated fields."""

    def __init__(self, expected: int, fields: Sequence[str], expression: str = "") -> None:
        self.expected = expected
        self.found = len(fields)
        self.fields = tuple(fields)
        super().__init__(
            f"expected exactly {expected} fields, found {self.found}: "
            f"[{' '.join(fields)}]",
            expression,
        )


class TooManyHyphensError(CronSyntaxError):
    def __init__(self, expression: str) -> None:
        super().__init__(f"too many hyphens: {expression}", expression)


class TooManySlashesError(CronSyntaxError):
    def __init__(self, expression: str) -> None:
        super().__init__(f"too many slashes: {expression}", expression)


class InvalidNumberError(CronSyntaxError):
    def __init__(self, expression: str, reason: str = "") -> None:
        message = f"failed to parse int from {expression}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, expression)


class NegativeNumberError(CronSyntaxError):
    def __init__(self, value: int, expression: str) -> None:
        self.value = value
        super().__init__(f"negative number ({value}) not allowed: {expression}", expression)


class InvalidStepError(CronSyntaxError):
    def __init__(self, expression: str) -> None:
        super().__init__(f"step of range should be a positive number: {expression}", expression)


class UnknownDescriptorError(CronSyntaxError):
    def __init__(self, expression: str) -> None:
        super().__init__(f"unrecognized descriptor: {expression}", expression)


class DurationParseError(CronSyntaxError):
    def __init__(self, expression: str, reason: str = "") -> None:
        self.reason = reason
        message = f"failed to parse duration {expression}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, expression)


# =============================================================================
# Bounds Errors
# =============================================================================


class CronBoundsError(CronParseError):
    """A value lies outside its field's range.

    Attributes:
        value: The offending value.
        bound: The limit it violated.
    """

    def __init__(self, message: str, value: int, bound: int, expression: str) -> None:
        self.value = value
        self.bound = bound
        super().__init__(message, expression)


class BelowMinimumError(CronBoundsError):
    def __init__(self, value: int, bound: int, expression: str) -> None:
        super().__init__(
            f"beginning of range ({value}) below minimum ({bound}): {expression}",
            value, bound, expression,
        )


class AboveMaximumError(CronBoundsError):
    def __init__(self, value: int, bound: int, expression: str) -> None:
        super().__init__(
            f"end of range ({value}) above maximum ({bound}): {expression}",
            value, bound, expression,
        )


class RangeOrderError(CronBoundsError):
    def __init__(self, value: int, bound: int, expression: str) -> None:
        super().__init__(
            f"beginning of range ({value}) beyond end of range ({bound}): {expression}",
            value, bound, expression,
        )

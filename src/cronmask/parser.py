"""Cron expression compiler.

Turns an expression into a Schedule:

    "second minute hour day-of-month month day-of-week"   -> SpecSchedule
    "@yearly" / "@annually" / "@monthly" / "@weekly" /
    "@daily" / "@midnight" / "@hourly"                    -> SpecSchedule
    "@every <duration>"                                   -> IntervalSchedule

Compilation stops at the first error; no partial schedule is ever returned.
"""

from __future__ import annotations

import logging
from datetime import tzinfo

from cronmask.bounds import (
    Bounds,
    DAYS_OF_MONTH,
    DAYS_OF_WEEK,
    FIELD_BOUNDS,
    HOURS,
    MINUTES,
    MONTHS,
    SECONDS,
    CronFieldType,
)
from cronmask.config import get_config, resolve_timezone
from cronmask.durations import parse_duration
from cronmask.exceptions import (
    CronParseError,
    DurationParseError,
    EmptyExpressionError,
    FieldCountError,
    UnknownDescriptorError,
)
from cronmask.fields import FieldMask, all_bits, parse_field, single_bit
from cronmask.schedule import Schedule, SpecSchedule, every

logger = logging.getLogger(__name__)

FIELD_COUNT = 6
EVERY_PREFIX = "@every "


class CronParser:
    """Compiles one expression against a fixed time zone.

    Example:
        >>> parser = CronParser("0 */5 * * * *", "UTC")
        >>> schedule = parser.parse()
    """

    def __init__(self, expression: str, tz: tzinfo | str | None = None) -> None:
        """Initialize parser.

        Args:
            expression: Cron expression or descriptor.
            tz: Zone for the schedule (tzinfo or IANA name). None uses the
                configured default.
        """
        self._expression = expression
        self._tz = tz

    @property
    def expression(self) -> str:
        return self._expression

    def parse(self) -> Schedule:
        """Compile the expression.

        Raises:
            CronParseError: If the expression is invalid.
        """
        if not self._expression:
            raise EmptyExpressionError()

        tz = resolve_timezone(self._tz)

        if self._expression.startswith("@"):
            return parse_descriptor(self._expression, tz)

        fields = self._expression.split()
        if len(fields) != FIELD_COUNT:
            raise FieldCountError(FIELD_COUNT, fields, self._expression)

        masks = [
            parse_field(text, FIELD_BOUNDS[field_type])
            for text, field_type in zip(fields, CronFieldType)
        ]
        schedule = SpecSchedule(*masks, tz=tz, horizon_years=get_config().search_horizon_years)

        logger.debug(
            "Compiled cron expression",
            extra={"expression": self._expression, "tz": str(tz)},
        )
        return schedule


def parse(expression: str, tz: tzinfo | str | None = None) -> Schedule:
    """Compile a cron expression or descriptor.

    Args:
        expression: Six-field expression or ``@`` descriptor.
        tz: Zone for the schedule (tzinfo or IANA name). None uses the
            configured default, falling back to the system's local zone.

    Returns:
        A SpecSchedule, or an IntervalSchedule for ``@every``.

    Raises:
        CronParseError: If the expression is invalid.
    """
    return CronParser(expression, tz).parse()


def parse_descriptor(descriptor: str, tz: tzinfo | str | None = None) -> Schedule:
    """Resolve an ``@`` descriptor to a schedule.

    Raises:
        UnknownDescriptorError: Descriptor is not recognised.
        DurationParseError: ``@every`` with an unreadable duration.
    """
    if descriptor.startswith(EVERY_PREFIX):
        text = descriptor[len(EVERY_PREFIX):]
        try:
            duration = parse_duration(text)
        except DurationParseError as e:
            raise DurationParseError(descriptor, e.reason) from e
        return every(duration)

    fields = _DESCRIPTORS.get(descriptor)
    if fields is None:
        raise UnknownDescriptorError(descriptor)

    tz = resolve_timezone(tz)
    return SpecSchedule(*fields, tz=tz, horizon_years=get_config().search_horizon_years)


def _minimum(bounds: Bounds) -> FieldMask:
    return single_bit(bounds.min_value)


_DESCRIPTORS: dict[str, tuple[FieldMask, ...]] = {
    "@yearly": (
        _minimum(SECONDS), _minimum(MINUTES), _minimum(HOURS),
        _minimum(DAYS_OF_MONTH), _minimum(MONTHS), all_bits(DAYS_OF_WEEK),
    ),
    "@monthly": (
        _minimum(SECONDS), _minimum(MINUTES), _minimum(HOURS),
        _minimum(DAYS_OF_MONTH), all_bits(MONTHS), all_bits(DAYS_OF_WEEK),
    ),
    "@weekly": (
        _minimum(SECONDS), _minimum(MINUTES), _minimum(HOURS),
        all_bits(DAYS_OF_MONTH), all_bits(MONTHS), _minimum(DAYS_OF_WEEK),
    ),
    "@daily": (
        _minimum(SECONDS), _minimum(MINUTES), _minimum(HOURS),
        all_bits(DAYS_OF_MONTH), all_bits(MONTHS), all_bits(DAYS_OF_WEEK),
    ),
    "@hourly": (
        _minimum(SECONDS), _minimum(MINUTES), all_bits(HOURS),
        all_bits(DAYS_OF_MONTH), all_bits(MONTHS), all_bits(DAYS_OF_WEEK),
    ),
}
_DESCRIPTORS["@annually"] = _DESCRIPTORS["@yearly"]
_DESCRIPTORS["@midnight"] = _DESCRIPTORS["@daily"]


# =============================================================================
# Validation Functions
# =============================================================================


def validate_expression(expression: str, tz: tzinfo | str | None = None) -> list[str]:
    """Compile an expression and report the failure instead of raising.

    Compilation stops at the first error, so the list holds at most one
    message. An unknown zone name is reported the same way.
    """
    try:
        parse(expression, tz)
    except CronParseError as e:
        return [str(e)]
    return []


def is_valid_expression(expression: str, tz: tzinfo | str | None = None) -> bool:
    return not validate_expression(expression, tz)

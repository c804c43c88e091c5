"""cronmask - compile cron expressions into reusable schedules.

A schedule answers one question: given an instant, when does it next fire?
Running jobs is left to the caller, who keeps the last firing time and feeds
it back into ``next``.

Syntax Reference:
    Field         Values            Special Characters
    ─────────────────────────────────────────────────
    Second        0-59              * ? / , -
    Minute        0-59              * ? / , -
    Hour          0-23              * ? / , -
    Day of Month  1-31              * ? / , -
    Month         1-12 or JAN-DEC   * ? / , -
    Day of Week   0-6 or SUN-SAT    * ? / , -

Descriptors:
    @yearly, @annually   0 0 0 1 1 *
    @monthly             0 0 0 1 * *
    @weekly              0 0 0 * * 0
    @daily, @midnight    0 0 0 * * *
    @hourly              0 0 * * * *
    @every <duration>    fixed interval, e.g. "@every 1h30m"

When both day-of-month and day-of-week are restricted (neither is ``*`` or
``?``), a day matching either one fires.

Usage:
    >>> from cronmask import parse
    >>>
    >>> schedule = parse("0 30 9 * * MON-FRI", "Europe/Paris")
    >>> next_run = schedule.next()
    >>> next_5 = schedule.next_n(5)
"""

from cronmask.bounds import (
    DAYS_OF_MONTH,
    DAYS_OF_WEEK,
    FIELD_BOUNDS,
    HOURS,
    MINUTES,
    MONTHS,
    SECONDS,
    Bounds,
    CronFieldType,
)
from cronmask.config import CronConfig, get_config, reset_config, set_config
from cronmask.durations import parse_duration
from cronmask.exceptions import (
    AboveMaximumError,
    BelowMinimumError,
    CronBoundsError,
    CronParseError,
    CronSyntaxError,
    DurationParseError,
    EmptyExpressionError,
    FieldCountError,
    InvalidNumberError,
    InvalidStepError,
    NegativeNumberError,
    RangeOrderError,
    TooManyHyphensError,
    TooManySlashesError,
    UnknownDescriptorError,
)
from cronmask.fields import STAR_BIT, FieldMask, all_bits, get_bits, parse_field
from cronmask.parser import (
    CronParser,
    is_valid_expression,
    parse,
    parse_descriptor,
    validate_expression,
)
from cronmask.schedule import (
    IntervalSchedule,
    Schedule,
    ScheduleIterator,
    SpecSchedule,
    every,
)

__version__ = "0.1.0"

__all__ = [
    # Bounds
    "Bounds",
    "CronFieldType",
    "FIELD_BOUNDS",
    "SECONDS",
    "MINUTES",
    "HOURS",
    "DAYS_OF_MONTH",
    "MONTHS",
    "DAYS_OF_WEEK",
    # Fields
    "FieldMask",
    "STAR_BIT",
    "all_bits",
    "get_bits",
    "parse_field",
    # Parser
    "CronParser",
    "parse",
    "parse_descriptor",
    "parse_duration",
    # Schedules
    "Schedule",
    "SpecSchedule",
    "IntervalSchedule",
    "ScheduleIterator",
    "every",
    # Validation
    "validate_expression",
    "is_valid_expression",
    # Config
    "CronConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Errors
    "CronParseError",
    "CronSyntaxError",
    "CronBoundsError",
    "EmptyExpressionError",
    "FieldCountError",
    "TooManyHyphensError",
    "TooManySlashesError",
    "InvalidNumberError",
    "NegativeNumberError",
    "InvalidStepError",
    "UnknownDescriptorError",
    "DurationParseError",
    "BelowMinimumError",
    "AboveMaximumError",
    "RangeOrderError",
]

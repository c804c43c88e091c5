"""Per-field value ranges and name tables.

Each of the six cron fields has a fixed inclusive range and, for month and
day-of-week, a table of case-insensitive names. These are module constants
and are never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CronFieldType(Enum):
    """Cron fields in expression order."""

    SECOND = 0
    MINUTE = 1
    HOUR = 2
    DAY_OF_MONTH = 3
    MONTH = 4
    DAY_OF_WEEK = 5


@dataclass(frozen=True)
class Bounds:
    """Inclusive value range for a cron field.

    Attributes:
        min_value: Smallest permitted value.
        max_value: Largest permitted value.
        names: Lowercase name to value mapping (empty if the field has none).
    """

    min_value: int
    max_value: int
    names: dict[str, int] = field(default_factory=dict, hash=False)


SECONDS = Bounds(0, 59)
MINUTES = Bounds(0, 59)
HOURS = Bounds(0, 23)
DAYS_OF_MONTH = Bounds(1, 31)
MONTHS = Bounds(
    1, 12,
    names={
        "jan": 1, "feb": 2, "mar": 3, "apr": 4,
        "may": 5, "jun": 6, "jul": 7, "aug": 8,
        "sep": 9, "oct": 10, "nov": 11, "dec": 12,
    },
)
DAYS_OF_WEEK = Bounds(
    0, 6,
    names={
        "sun": 0, "mon": 1, "tue": 2, "wed": 3,
        "thu": 4, "fri": 5, "sat": 6,
    },
)


FIELD_BOUNDS: dict[CronFieldType, Bounds] = {
    CronFieldType.SECOND: SECONDS,
    CronFieldType.MINUTE: MINUTES,
    CronFieldType.HOUR: HOURS,
    CronFieldType.DAY_OF_MONTH: DAYS_OF_MONTH,
    CronFieldType.MONTH: MONTHS,
    CronFieldType.DAY_OF_WEEK: DAYS_OF_WEEK,
}

"""Tests for expression and descriptor compilation."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cronmask import (
    DAYS_OF_MONTH,
    DAYS_OF_WEEK,
    HOURS,
    MONTHS,
    SECONDS,
    AboveMaximumError,
    CronConfig,
    CronParseError,
    CronParser,
    DurationParseError,
    EmptyExpressionError,
    FieldCountError,
    FieldMask,
    IntervalSchedule,
    InvalidNumberError,
    SpecSchedule,
    UnknownDescriptorError,
    all_bits,
    is_valid_expression,
    parse,
    parse_descriptor,
    set_config,
    validate_expression,
)

UTC = timezone.utc
TOKYO = ZoneInfo("Asia/Tokyo")


def every_5_min(tz) -> SpecSchedule:
    return SpecSchedule(
        FieldMask(1 << 0), FieldMask(1 << 5), all_bits(HOURS),
        all_bits(DAYS_OF_MONTH), all_bits(MONTHS), all_bits(DAYS_OF_WEEK),
        tz=tz,
    )


def midnight(tz) -> SpecSchedule:
    return SpecSchedule(
        FieldMask(1), FieldMask(1), FieldMask(1),
        all_bits(DAYS_OF_MONTH), all_bits(MONTHS), all_bits(DAYS_OF_WEEK),
        tz=tz,
    )


def annual(tz) -> SpecSchedule:
    return SpecSchedule(
        FieldMask(1), FieldMask(1), FieldMask(1),
        FieldMask(1 << 1), FieldMask(1 << 1), all_bits(DAYS_OF_WEEK),
        tz=tz,
    )


# =============================================================================
# Expression Tests
# =============================================================================


class TestParseExpression:
    """Tests for six-field expressions."""

    @pytest.mark.parametrize("tz", ["UTC", "Asia/Tokyo"])
    def test_every_5_min(self, tz):
        assert parse("0 5 * * * *", tz) == every_5_min(ZoneInfo(tz))

    def test_tzinfo_argument(self):
        assert parse("0 5 * * * *", UTC) == every_5_min(UTC)

    def test_wildcard_second(self):
        schedule = parse("* 5 * * * *", "UTC")
        assert schedule.second == all_bits(SECONDS)
        assert schedule.minute == FieldMask(1 << 5)

    def test_extra_whitespace(self):
        assert parse("  0   5 *\t* * *  ", "UTC") == every_5_min(ZoneInfo("UTC"))

    def test_named_fields(self):
        schedule = parse("0 0 0 * jan-Mar mon,WED", "UTC")
        assert list(schedule.month.values()) == [1, 2, 3]
        assert list(schedule.day_of_week.values()) == [1, 3]
        assert not schedule.day_of_week.wildcard

    def test_question_mark_is_wildcard(self):
        schedule = parse("0 0 9 ? * MON", "UTC")
        assert schedule.day_of_month.wildcard

    def test_parser_class(self):
        parser = CronParser("0 5 * * * *", "UTC")
        assert parser.expression == "0 5 * * * *"
        assert parser.parse() == every_5_min(ZoneInfo("UTC"))

    def test_schedules_are_hashable(self):
        assert len({parse("0 5 * * * *", "UTC"), parse("0 5 * * * *", "UTC")}) == 1


# =============================================================================
# Default Time Zone Tests
# =============================================================================


class TestDefaultTimezone:
    """Tests for the zone used when none is passed."""

    def test_configured_default(self):
        set_config(CronConfig(default_timezone="Asia/Tokyo"))
        assert parse("0 5 * * * *").tz == TOKYO

    def test_environment_default(self, monkeypatch):
        monkeypatch.setenv("CRONMASK_TIMEZONE", "Asia/Tokyo")
        assert parse("@midnight") == midnight(TOKYO)

    def test_system_default(self, monkeypatch):
        berlin = ZoneInfo("Europe/Berlin")
        monkeypatch.setattr("cronmask.config.get_localzone", lambda: berlin)
        assert parse("0 5 * * * *").tz == berlin

    def test_unknown_zone(self):
        with pytest.raises(CronParseError, match="unknown time zone"):
            parse("0 5 * * * *", "Not/AZone")

    def test_horizon_comes_from_config(self):
        set_config(CronConfig(search_horizon_years=2))
        assert parse("0 5 * * * *", "UTC").horizon_years == 2


# =============================================================================
# Descriptor Tests
# =============================================================================


class TestDescriptors:
    """Tests for @ descriptors."""

    @pytest.mark.parametrize("tz", ["UTC", "Asia/Tokyo"])
    def test_midnight(self, tz):
        assert parse("@midnight", tz) == midnight(ZoneInfo(tz))
        assert parse("@daily", tz) == midnight(ZoneInfo(tz))

    def test_yearly_and_annually(self):
        assert parse("@yearly", "UTC") == annual(ZoneInfo("UTC"))
        assert parse("@annually", "UTC") == annual(ZoneInfo("UTC"))

    def test_monthly(self):
        schedule = parse("@monthly", "UTC")
        assert schedule.day_of_month == FieldMask(1 << 1)
        assert schedule.month == all_bits(MONTHS)
        assert schedule.day_of_week == all_bits(DAYS_OF_WEEK)

    def test_weekly(self):
        """Test @weekly fires on Sunday with day-of-month unconstrained."""
        schedule = parse("@weekly", "UTC")
        assert schedule.day_of_month == all_bits(DAYS_OF_MONTH)
        assert schedule.day_of_week == FieldMask(1 << 0)

    def test_hourly(self):
        schedule = parse("@hourly", "UTC")
        assert schedule.second == FieldMask(1)
        assert schedule.minute == FieldMask(1)
        assert schedule.hour == all_bits(HOURS)

    def test_every(self):
        assert parse("@every 5m", "UTC") == IntervalSchedule(timedelta(minutes=5))

    def test_every_rounds_to_seconds(self):
        assert parse("@every 1500ms").delay == timedelta(seconds=1)
        assert parse("@every 10ms").delay == timedelta(seconds=1)
        assert parse("@every 1h30m45.9s").delay == timedelta(hours=1, minutes=30, seconds=45)

    def test_parse_descriptor_directly(self):
        assert parse_descriptor("@daily", "UTC") == midnight(ZoneInfo("UTC"))

    def test_descriptors_are_case_sensitive(self):
        with pytest.raises(UnknownDescriptorError):
            parse("@DAILY", "UTC")


# =============================================================================
# Error Tests
# =============================================================================


class TestParseErrors:
    """Tests for compile failures."""

    @pytest.mark.parametrize(
        "expr, error, message",
        [
            ("* 5 j * * *", InvalidNumberError, "failed to parse int from"),
            ("@every Xm", DurationParseError, "failed to parse duration"),
            ("@every ", DurationParseError, "failed to parse duration"),
            ("@every 30000000000h", DurationParseError, "failed to parse duration"),
            ("@unrecognized", UnknownDescriptorError, "unrecognized descriptor"),
            ("@bogus", UnknownDescriptorError, "unrecognized descriptor"),
            ("* * * *", FieldCountError, "expected exactly 6 fields, found 4: [* * * *]"),
            ("", EmptyExpressionError, "empty spec string"),
        ],
    )
    def test_errors(self, expr, error, message):
        with pytest.raises(error) as exc:
            parse(expr, "UTC")
        assert message in str(exc.value)

    def test_field_count_details(self):
        with pytest.raises(FieldCountError) as exc:
            parse("0 0 9 * * * 2024", "UTC")
        assert exc.value.expected == 6
        assert exc.value.found == 7
        assert exc.value.fields == ("0", "0", "9", "*", "*", "*", "2024")

    def test_five_field_expression_is_rejected(self):
        with pytest.raises(FieldCountError):
            parse("0 9 * * *", "UTC")

    def test_first_field_error_wins(self):
        """Test the earliest failing field is reported."""
        with pytest.raises(AboveMaximumError) as exc:
            parse("99 99 * * * x", "UTC")
        assert exc.value.expression == "99"
        assert exc.value.bound == 59

    def test_all_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse("* * * *", "UTC")


# =============================================================================
# Validation Function Tests
# =============================================================================


class TestValidation:
    """Tests for validate_expression and is_valid_expression."""

    def test_validate_valid(self):
        assert validate_expression("0 */5 * * * *") == []

    def test_validate_invalid(self):
        errors = validate_expression("0 */5 * *")
        assert len(errors) == 1
        assert "expected exactly 6 fields" in errors[0]

    def test_is_valid(self):
        assert is_valid_expression("@hourly")
        assert is_valid_expression("0 0 0 30 2 *")
        assert not is_valid_expression("0 0 0 32 * *")
        assert not is_valid_expression("@every soon")

    def test_unknown_zone_is_reported(self):
        assert validate_expression("@hourly", "Not/AZone") == ["unknown time zone: Not/AZone"]
        assert not is_valid_expression("@hourly", "Not/AZone")

    def test_oversized_number_is_invalid(self):
        """Test digit strings too long for int() are reported, not raised."""
        expression = "9" * 5000 + " * * * * *"
        assert not is_valid_expression(expression)
        assert "failed to parse int from" in validate_expression(expression)[0]


def test_unreachable_expression_compiles():
    """Feb 30 is valid syntax; it simply never fires."""
    schedule = parse("0 0 0 30 2 *", "UTC")
    assert schedule.next(datetime(2024, 1, 1, tzinfo=UTC)) is None

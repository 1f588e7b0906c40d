"""Tests for calendar arithmetic helpers."""

from datetime import date, datetime, timedelta, timezone

from case_alerts.foundation.calendar import (
    calendar_date,
    ceil_days,
    days_between,
    localize,
    shift_days,
)

_MINUS_FIVE = timezone(timedelta(hours=-5))


class TestCalendarDate:
    def test_naive_values_are_local_wall_clock(self) -> None:
        assert calendar_date(datetime(2026, 3, 10, 23, 59), _MINUS_FIVE) == date(2026, 3, 10)

    def test_aware_values_are_converted(self) -> None:
        # 03:00 UTC is 22:00 the previous evening at UTC-5
        value = datetime(2026, 3, 10, 3, 0, tzinfo=timezone.utc)
        assert calendar_date(value, _MINUS_FIVE) == date(2026, 3, 9)
        assert calendar_date(value, timezone.utc) == date(2026, 3, 10)

    def test_localize_attaches_zone_to_naive(self) -> None:
        assert localize(datetime(2026, 1, 1, 8), _MINUS_FIVE).tzinfo is _MINUS_FIVE


class TestDayArithmetic:
    def test_days_between_signed(self) -> None:
        today = date(2026, 3, 10)
        assert days_between(today, date(2026, 3, 12)) == 2
        assert days_between(today, today) == 0
        assert days_between(today, date(2026, 3, 1)) == -9

    def test_shift_days_crosses_month(self) -> None:
        assert shift_days(date(2026, 1, 9), 60) == date(2026, 3, 10)

    def test_ceil_days_rounds_up(self) -> None:
        assert ceil_days(timedelta(hours=1)) == 1
        assert ceil_days(timedelta(hours=36)) == 2
        assert ceil_days(timedelta(days=3)) == 3
        assert ceil_days(timedelta(0)) == 0

    def test_ceil_days_negative_rounds_toward_zero(self) -> None:
        assert ceil_days(timedelta(hours=-23)) == 0
        assert ceil_days(timedelta(days=-7)) == -7
        assert ceil_days(timedelta(days=-7, hours=-1)) == -7
        assert ceil_days(timedelta(days=-8)) == -8

"""Tests for reporting window resolution."""
from datetime import date, datetime, timezone

import pytest

from vendops.core.periods import resolve_window, custom_window


def midnight(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


class TestResolveWindow:
    @pytest.mark.parametrize("period,days", [
        ("last_7_days", 7),
        ("last_30_days", 30),
        ("last_90_days", 90),
    ])
    def test_rolling_windows_end_with_today(self, period, days):
        window = resolve_window(period, today=date(2026, 10, 19))
        assert window.end == midnight(2026, 10, 20)
        assert window.window_days == days
        assert window.end_date == date(2026, 10, 19)

    def test_last_7_days_bounds(self):
        window = resolve_window("last_7_days", today=date(2026, 10, 19))
        assert window.start == midnight(2026, 10, 13)
        assert window.label == "Last 7 Days"

    def test_last_month_is_full_calendar_month(self):
        window = resolve_window("last_month", today=date(2026, 3, 15))
        assert window.start == midnight(2026, 2, 1)
        assert window.end == midnight(2026, 3, 1)
        assert window.window_days == 28
        assert window.end_date == date(2026, 2, 28)
        assert window.label == "February 2026"

    def test_last_month_in_january(self):
        window = resolve_window("last_month", today=date(2026, 1, 10))
        assert window.start_date == date(2025, 12, 1)
        assert window.end_date == date(2025, 12, 31)
        assert window.window_days == 31

    def test_this_month_includes_today(self):
        window = resolve_window("this_month", today=date(2026, 10, 19))
        assert window.start == midnight(2026, 10, 1)
        assert window.window_days == 19

    def test_this_month_on_the_first(self):
        window = resolve_window("this_month", today=date(2026, 10, 1))
        assert window.window_days == 1

    def test_last_3_months_crosses_year(self):
        window = resolve_window("last_3_months", today=date(2026, 2, 10))
        assert window.start_date == date(2025, 11, 1)
        assert window.end_date == date(2026, 2, 10)

    def test_year_to_date(self):
        window = resolve_window("year_to_date", today=date(2026, 10, 19))
        assert window.start == midnight(2026, 1, 1)
        assert window.window_days == 292

    def test_unknown_period(self):
        with pytest.raises(ValueError, match="Unknown reporting period"):
            resolve_window("fortnight")

    def test_defaults_to_today(self):
        window = resolve_window("last_7_days")
        today = datetime.now(timezone.utc).date()
        assert window.end_date == today


class TestCustomWindow:
    def test_dates_are_inclusive(self):
        window = custom_window(date(2026, 9, 1), date(2026, 9, 30))
        assert window.start == midnight(2026, 9, 1)
        assert window.end == midnight(2026, 10, 1)
        assert window.window_days == 30
        assert window.label == "2026-09-01 to 2026-09-30"

    def test_single_day(self):
        assert custom_window(date(2026, 9, 1), date(2026, 9, 1)).window_days == 1

    def test_reversed_dates(self):
        with pytest.raises(ValueError):
            custom_window(date(2026, 9, 30), date(2026, 9, 1))

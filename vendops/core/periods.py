"""Reporting windows for commission reports.

Windows are half-open [start, end) and aligned to UTC midnight, so
window_days is always a whole number of calendar days.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


@dataclass(frozen=True)
class ReportingWindow:
    start: datetime
    end: datetime
    label: str

    @property
    def window_days(self) -> int:
        return (self.end - self.start).days

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        """Last calendar day inside the window."""
        return (self.end - timedelta(days=1)).date()


ROLLING_PERIODS = {
    "last_7_days": 7,
    "last_30_days": 30,
    "last_90_days": 90,
}

PERIOD_LABELS = {
    "last_7_days": "Last 7 Days",
    "last_30_days": "Last 30 Days",
    "last_90_days": "Last 90 Days",
    "this_month": "Month to Date",
    "last_month": "Last Full Month",
    "last_3_months": "Last 3 Months",
    "year_to_date": "Year to Date",
}


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _shift_months(day: date, months: int) -> date:
    """First day of the month `months` away from `day`'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def resolve_window(period: str, today: Optional[date] = None) -> ReportingWindow:
    """Resolve a period key to a reporting window ending today (inclusive)."""
    today = today or datetime.now(timezone.utc).date()
    tomorrow = today + timedelta(days=1)

    if period in ROLLING_PERIODS:
        days = ROLLING_PERIODS[period]
        start = tomorrow - timedelta(days=days)
        end = tomorrow
    elif period == "this_month":
        start = today.replace(day=1)
        end = tomorrow
    elif period == "last_month":
        end = today.replace(day=1)
        start = _shift_months(end, -1)
        return ReportingWindow(
            start=_midnight(start),
            end=_midnight(end),
            label=start.strftime("%B %Y"),
        )
    elif period == "last_3_months":
        start = _shift_months(today, -3)
        end = tomorrow
    elif period == "year_to_date":
        start = date(today.year, 1, 1)
        end = tomorrow
    else:
        raise ValueError(
            f"Unknown reporting period '{period}'. "
            f"Expected one of: {', '.join(PERIOD_LABELS)}"
        )

    return ReportingWindow(start=_midnight(start), end=_midnight(end), label=PERIOD_LABELS[period])


def custom_window(start_date: date, end_date: date) -> ReportingWindow:
    """Window covering start_date through end_date, both inclusive."""
    if end_date < start_date:
        raise ValueError("end_date must not be before start_date")
    return ReportingWindow(
        start=_midnight(start_date),
        end=_midnight(end_date + timedelta(days=1)),
        label=f"{start_date.isoformat()} to {end_date.isoformat()}",
    )

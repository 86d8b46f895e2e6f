"""
Date window resolution for reports.

Turns a period selector (today / week / month / custom) into an inclusive
[start, end] window in local time. Every window spans whole days: start is
midnight of the first day and end is the last microsecond of the last day.
"""
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, field_validator


class InvalidRangeError(ValueError):
    """Raised when a custom period has no usable date range"""


class Period(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


# Trailing days covered by each rolling period, today included
PERIOD_DAYS = {
    Period.TODAY: 1,
    Period.WEEK: 7,
    Period.MONTH: 30,
}


class DateRange(BaseModel):
    """Caller-supplied range for the custom period"""
    start: date
    end: date

    @field_validator("start", "end", mode="before")
    @classmethod
    def _truncate_to_day(cls, value):
        if isinstance(value, datetime):
            return value.date()
        return value


class DateWindow(BaseModel):
    start: datetime
    end: datetime

    def contains(self, moment: Optional[datetime]) -> bool:
        if moment is None:
            return False
        return self.start <= moment <= self.end


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def day_window(day: Union[date, datetime]) -> DateWindow:
    """Window covering exactly one calendar day"""
    if isinstance(day, datetime):
        day = day.date()
    return DateWindow(start=start_of_day(day), end=end_of_day(day))


def resolve_window(
    period: Union[Period, str],
    custom_range: Optional[DateRange] = None,
    today: Optional[date] = None,
) -> DateWindow:
    """
    Resolve a period selector into a concrete window.

    Args:
        period: today, week, month or custom
        custom_range: required when period is custom, ignored otherwise
        today: reference day, defaults to the local date

    Raises:
        InvalidRangeError: custom period without a range, or with a range
            whose start falls after its end
    """
    period = Period(period)
    if today is None:
        today = date.today()

    if period == Period.CUSTOM:
        if custom_range is None:
            raise InvalidRangeError("Custom date range is required")
        if custom_range.start > custom_range.end:
            raise InvalidRangeError(
                f"Start date {custom_range.start} is after end date {custom_range.end}"
            )
        return DateWindow(
            start=start_of_day(custom_range.start),
            end=end_of_day(custom_range.end),
        )

    first_day = today - timedelta(days=PERIOD_DAYS[period] - 1)
    return DateWindow(start=start_of_day(first_day), end=end_of_day(today))

"""
Date and time helpers for utterance interpretation.

Relative-day arithmetic, "at H[:MM][am|pm]" time-of-day parsing with 12-hour conversion,
and "on <Month> <day>" absolute dates. Every parser returns None instead of raising.
"""

import calendar
import re
from datetime import datetime, timedelta
from typing import NamedTuple, Optional

TIME_OF_DAY_PATTERN = re.compile(r"\bat (\d{1,2}):?(\d{2})?\s*(am|pm)?\b", re.IGNORECASE)
ABSOLUTE_DATE_PATTERN = re.compile(r"\bon (\w+) (\d{1,2})(?:st|nd|rd|th)?\b", re.IGNORECASE)

MONTHS = {name.lower(): number for number, name in enumerate(calendar.month_name) if name}
MONTHS.update({name.lower(): number for number, name in enumerate(calendar.month_abbr) if name})


class TimeOfDay(NamedTuple):
    hour: int
    minute: int
    matched: str


class AbsoluteDate(NamedTuple):
    value: datetime
    matched: str


def to_24_hour(hour: int, period: Optional[str]) -> int:
    """
    Convert a 12-hour clock reading to a 24-hour hour.

    "pm" adds 12 to hours below 12; "12am" becomes 0. Without a period the hour is kept.
    """
    period = period.lower() if period else None
    if period == "pm" and hour < 12:
        hour += 12
    if period == "am" and hour == 12:
        hour = 0
    return hour


def shift_days(now: datetime, days: int) -> datetime:
    """Return now moved by a number of whole days, keeping the time of day."""
    return now + timedelta(days=days)


def parse_time_of_day(text: str) -> Optional[TimeOfDay]:
    """
    Find an "at H[:MM][am|pm]" expression in text.

    Args:
        text: Lowercased text

    Returns:
        TimeOfDay with the 24-hour hour, minute and the matched phrase, or None when
        absent or out of range (e.g. "at 27")
    """
    match = TIME_OF_DAY_PATTERN.search(text)
    if not match:
        return None

    hour = to_24_hour(int(match.group(1)), match.group(3))
    minute = int(match.group(2)) if match.group(2) else 0
    if hour > 23 or minute > 59:
        return None
    return TimeOfDay(hour, minute, match.group(0))


def apply_time_of_day(moment: datetime, time_of_day: TimeOfDay) -> datetime:
    """Set the hour and minute on moment, zeroing seconds."""
    return moment.replace(hour=time_of_day.hour, minute=time_of_day.minute, second=0, microsecond=0)


def parse_absolute_date(text: str, now: datetime) -> Optional[AbsoluteDate]:
    """
    Find an "on <Month> <day>[st|nd|rd|th]" expression and resolve it in the current year.

    Month names may be full ("march") or abbreviated ("mar"). Impossible dates such as
    "on february 30" or unknown months yield None.

    Args:
        text: Lowercased text
        now: Reference moment supplying the year

    Returns:
        AbsoluteDate at midnight with the matched phrase, or None
    """
    match = ABSOLUTE_DATE_PATTERN.search(text)
    if not match:
        return None

    month = MONTHS.get(match.group(1).lower())
    if month is None:
        return None

    try:
        value = datetime(now.year, month, int(match.group(2)))
    except ValueError:
        return None
    return AbsoluteDate(value, match.group(0))

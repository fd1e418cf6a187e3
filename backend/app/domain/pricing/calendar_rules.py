"""
Calendar Rules.

Pure date/time rules used by the pricing calculator:
1. After-hours window (before 08:00 or from 18:00 local time)
2. Weekend (Saturday/Sunday local time)
3. Holidays - fixed-date first, then floating (Easter, Memorial Day,
   Labor Day, Thanksgiving). First match wins.

All floating-holiday helpers are computed, so they hold for any year.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import List, Tuple
from zoneinfo import ZoneInfo

from backend.app.core.pricing_config import PricingConfig
from backend.app.schemas.pricing import HolidayEntry, HolidayInfo

EASTER_SUNDAY = "Easter Sunday"
MEMORIAL_DAY = "Memorial Day"
LABOR_DAY = "Labor Day"
THANKSGIVING = "Thanksgiving"


def to_local(instant: datetime, config: PricingConfig) -> datetime:
    """
    Express an instant in the configured local timezone.

    Naive datetimes are taken to already be local wall-clock time.
    """
    tz = ZoneInfo(config.local_timezone)
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def is_after_hours(instant: datetime, config: PricingConfig) -> bool:
    hour = to_local(instant, config).hour
    return hour < config.after_hours_end or hour >= config.after_hours_start


def is_weekend(instant: datetime, config: PricingConfig) -> bool:
    return to_local(instant, config).weekday() >= calendar.SATURDAY


def easter_sunday(year: int) -> date:
    """Easter Sunday by the anonymous Gregorian (Meeus/Jones/Butcher) algorithm."""
    a = year % 19  # Metonic cycle position
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)  # Leap century correction
    f = (b + 8) // 25
    g = (b - f + 1) // 3  # Lunar orbit correction
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date:
    """The n-th (1-based) given weekday of a month, e.g. the 4th Thursday."""
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    return first + timedelta(days=offset + 7 * (n - 1))


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    last = date(year, month, calendar.monthrange(year, month)[1])
    return last - timedelta(days=(last.weekday() - weekday) % 7)


def memorial_day(year: int) -> date:
    return last_weekday_of_month(year, 5, calendar.MONDAY)


def labor_day(year: int) -> date:
    return nth_weekday_of_month(year, 9, calendar.MONDAY, 1)


def thanksgiving(year: int) -> date:
    return nth_weekday_of_month(year, 11, calendar.THURSDAY, 4)


def floating_holidays(year: int) -> List[Tuple[date, str]]:
    """Floating holidays of a year, in rule-priority order."""
    return [
        (easter_sunday(year), EASTER_SUNDAY),
        (memorial_day(year), MEMORIAL_DAY),
        (labor_day(year), LABOR_DAY),
        (thanksgiving(year), THANKSGIVING),
    ]


def holiday_for_date(day: date, config: PricingConfig) -> HolidayInfo:
    """Resolve the holiday (if any) falling on a calendar date."""
    for holiday in config.fixed_holidays:
        if holiday.month == day.month and holiday.day == day.day:
            return HolidayInfo(is_holiday=True, name=holiday.name, surcharge=config.holiday_surcharge)

    for holiday_date, name in floating_holidays(day.year):
        if holiday_date == day:
            return HolidayInfo(is_holiday=True, name=name, surcharge=config.holiday_surcharge)

    return HolidayInfo()


def resolve_holiday(instant: datetime, config: PricingConfig) -> HolidayInfo:
    return holiday_for_date(to_local(instant, config).date(), config)


def holidays_for_year(year: int, config: PricingConfig) -> List[HolidayEntry]:
    """
    Every priced holiday in a year, sorted by date.

    A floating holiday landing on a fixed holiday's date is reported under
    the fixed holiday's name, matching resolve_holiday.
    """
    by_date = {}
    for holiday in config.fixed_holidays:
        try:
            holiday_date = date(year, holiday.month, holiday.day)
        except ValueError:
            # Feb 29 outside a leap year
            continue
        by_date.setdefault(holiday_date, holiday.name)

    for holiday_date, name in floating_holidays(year):
        by_date.setdefault(holiday_date, name)

    return [
        HolidayEntry(holiday_date=holiday_date, name=name)
        for holiday_date, name in sorted(by_date.items())
    ]

"""Calendar helpers bound to the configured application timezone."""

from __future__ import annotations

import calendar
from datetime import date, datetime
from zoneinfo import ZoneInfo

from conciliacao_fiscal.core.settings import get_settings


def app_timezone() -> ZoneInfo:
    """Return the timezone used for business dates."""

    return ZoneInfo(get_settings().app_timezone)


def now_local() -> datetime:
    """Return the current timestamp in the application timezone."""

    return datetime.now(tz=app_timezone())


def today_local() -> date:
    """Return the current calendar date in the application timezone."""

    return now_local().date()


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the month end."""

    absolute_month = ((value.year - 1) * 12 + value.month - 1) + months
    if absolute_month < 0:
        msg = "Resulting date is before year 0001."
        raise ValueError(msg)

    target_year = absolute_month // 12 + 1
    target_month = absolute_month % 12 + 1
    _, month_last_day = calendar.monthrange(target_year, target_month)
    return date(year=target_year, month=target_month, day=min(value.day, month_last_day))

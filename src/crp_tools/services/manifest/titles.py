"""Run title formatting."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ...config import settings

# Fixed English names; calendar.day_name follows the process locale.
_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _now() -> datetime:
    if settings.manifest_timezone:
        return datetime.now(ZoneInfo(settings.manifest_timezone))
    return datetime.now()


def get_run_title(moment: date | None = None) -> str:
    """Return e.g. ``"Monday Run 4/7/25"`` for Monday, April 7, 2025."""
    moment = moment or _now()
    return f"{_DAY_NAMES[moment.weekday()]} Run {moment.month}/{moment.day}/{moment.year % 100}"

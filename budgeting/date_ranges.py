from datetime import date, timedelta
from typing import Callable, Optional

DateRange = tuple[date, date]


def _today(today: date) -> DateRange:
    return today, today


def _this_week(today: date) -> DateRange:
    # weeks start on Sunday
    days_since_sunday = (today.weekday() + 1) % 7
    return today - timedelta(days=days_since_sunday), today


def _this_month(today: date) -> DateRange:
    return today.replace(day=1), today


def _last_month(today: date) -> DateRange:
    end = today.replace(day=1) - timedelta(days=1)
    return end.replace(day=1), end


PRESETS: dict[str, tuple[str, Optional[Callable[[date], DateRange]]]] = {
    "today": ("Hari Ini", _today),
    "thisWeek": ("Minggu Ini", _this_week),
    "thisMonth": ("Bulan Ini", _this_month),
    "lastMonth": ("Bulan Lalu", _last_month),
    "custom": ("Kustom", None),
}


def preset_range(preset_id: str, today: Optional[date] = None) -> Optional[DateRange]:
    """Resolve a preset id to (start, end); ``custom`` leaves the choice to the user."""
    _, resolver = PRESETS[preset_id]
    if resolver is None:
        return None
    return resolver(today or date.today())


def default_range(today: Optional[date] = None) -> DateRange:
    return _this_month(today or date.today())

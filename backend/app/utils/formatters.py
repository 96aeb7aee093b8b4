from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings


def _display_zone():
    try:
        return ZoneInfo(settings.DISPLAY_TIMEZONE)
    except ZoneInfoNotFoundError:
        return timezone.utc


def format_timestamp(value: Optional[datetime], fallback: str = "an earlier time") -> str:
    """Render a stored timestamp in the event's local time, e.g. 18/05/2025, 09:15:02 AM"""
    if value is None:
        return fallback
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(_display_zone()).strftime("%d/%m/%Y, %I:%M:%S %p")


def format_rating(rating: int) -> str:
    """Survey star rating, 0-5"""
    rating = max(0, min(5, int(rating or 0)))
    return "★" * rating + "☆" * (5 - rating)


def format_marketing(answer: int) -> str:
    return "Yes" if answer == 1 else "No"

"""Resolve the dates people type when logging a template."""
from datetime import date, datetime, time, timedelta

from dateutil import parser

TODAY_WORDS = {"", "today", "now", "сегодня"}
YESTERDAY_WORDS = {"yesterday", "вчера"}
TOMORROW_WORDS = {"tomorrow", "завтра"}


def resolve_date(value: str, today: date | None = None) -> str:
    """Turn "today", "yesterday", ISO or free-form text into YYYY-MM-DD.

    Raises ValueError (or OverflowError) when nothing date-like is found.
    """
    today = today or date.today()
    v = value.lower().strip()
    if v in TODAY_WORDS:
        return today.isoformat()
    if v in YESTERDAY_WORDS:
        return (today - timedelta(days=1)).isoformat()
    if v in TOMORROW_WORDS:
        return (today + timedelta(days=1)).isoformat()
    try:
        return datetime.fromisoformat(v).date().isoformat()
    except ValueError:
        pass
    parsed = parser.parse(value, fuzzy=True, default=datetime.combine(today, time()))
    return parsed.date().isoformat()


def validate_date_text(value: str) -> bool | str:
    try:
        resolve_date(value)
    except (ValueError, OverflowError):
        return "Enter a date like 2024-05-31, today or yesterday"
    return True

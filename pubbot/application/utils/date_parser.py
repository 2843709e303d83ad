from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

MONTH_NAMES = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}

_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_DAY_MONTH_RE = re.compile(r"^(\d{1,2})[./-](\d{1,2})(?:[./-](\d{2}|\d{4}))?$")
_DAY_NAME_RE = re.compile(r"^(\d{1,2})\.?\s+([a-z]+)\.?(?:\s+(\d{2}|\d{4}))?$")
_NAME_DAY_RE = re.compile(r"^([a-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?(?:\s+(\d{2}|\d{4}))?$")
_TIME_AMPM_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm)$")
_TIME_24H_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?$")
_PARTY_SIZE_RE = re.compile(r"^\s*(\d+)")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 50


def today_in(timezone: ZoneInfo) -> date:
    return datetime.now(timezone).date()


def is_valid_ymd(year: int, month: int, day: int) -> bool:
    """True when year/month/day name a real calendar day (1900 onwards)."""
    if year < 1900 or not 1 <= month <= 12 or not 1 <= day <= 31:
        return False
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def normalize_date(text: str, timezone: ZoneInfo, reference_date: date | None = None) -> str | None:
    """
    Normalize loosely formatted date text to YYYY-MM-DD.

    Accepts today/tomorrow, ISO dates, DD.MM / DD/MM / DD-MM with an optional
    year, and "8 aug" / "aug 8" with an optional year. Without a year the
    nearest occurrence on or after reference_date is used. Does not reject
    past dates; see is_not_past.
    """
    if reference_date is None:
        reference_date = today_in(timezone)

    normalized = text.strip().lower()

    if normalized == "today":
        return reference_date.isoformat()
    if normalized == "tomorrow":
        return (reference_date + timedelta(days=1)).isoformat()

    match = _ISO_RE.match(normalized)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _format_ymd(year, month, day)

    match = _DAY_MONTH_RE.match(normalized)
    if match:
        day, month = int(match.group(1)), int(match.group(2))
        year = _resolve_year(match.group(3), month, day, reference_date)
        return _format_ymd(year, month, day)

    match = _DAY_NAME_RE.match(normalized)
    if match:
        day = int(match.group(1))
        month = MONTH_NAMES.get(match.group(2))
        if month:
            year = _resolve_year(match.group(3), month, day, reference_date)
            return _format_ymd(year, month, day)

    match = _NAME_DAY_RE.match(normalized)
    if match:
        month = MONTH_NAMES.get(match.group(1))
        day = int(match.group(2))
        if month:
            year = _resolve_year(match.group(3), month, day, reference_date)
            return _format_ymd(year, month, day)

    return None


def is_not_past(iso_date: str, timezone: ZoneInfo, reference_date: date | None = None) -> bool:
    if reference_date is None:
        reference_date = today_in(timezone)
    try:
        return date.fromisoformat(iso_date) >= reference_date
    except ValueError:
        return False


def normalize_time(text: str) -> str | None:
    """Normalize "7pm", "7:30 pm", "19", "19:00" to HH:MM (24h). None when invalid."""
    normalized = text.strip().lower()

    match = _TIME_AMPM_RE.match(normalized)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        if hour < 1 or hour > 12:
            return None
        if match.group(3) == "pm" and hour != 12:
            hour += 12
        elif match.group(3) == "am" and hour == 12:
            hour = 0
        return _format_hm(hour, minute)

    match = _TIME_24H_RE.match(normalized)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        return _format_hm(hour, minute)

    return None


def parse_party_size(text: str) -> int | None:
    match = _PARTY_SIZE_RE.match(text)
    if not match:
        return None
    size = int(match.group(1))
    if size < MIN_PARTY_SIZE or size > MAX_PARTY_SIZE:
        return None
    return size


def is_valid_name(text: str) -> bool:
    return len(text.strip()) >= 2


def is_valid_email(text: str) -> bool:
    return bool(_EMAIL_RE.match(text.strip()))


def is_valid_phone(text: str) -> bool:
    return len(text.strip()) >= 5


def _resolve_year(raw_year: str | None, month: int, day: int, reference_date: date) -> int:
    if raw_year:
        year = int(raw_year)
        return year + 2000 if len(raw_year) == 2 else year
    year = reference_date.year
    if (month, day) < (reference_date.month, reference_date.day):
        year += 1
    # 29 February only exists in leap years
    for candidate in range(year, year + 4):
        if is_valid_ymd(candidate, month, day):
            return candidate
    return year


def _format_ymd(year: int, month: int, day: int) -> str | None:
    if not is_valid_ymd(year, month, day):
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"


def _format_hm(hour: int, minute: int) -> str | None:
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        return None
    return f"{hour:02d}:{minute:02d}"

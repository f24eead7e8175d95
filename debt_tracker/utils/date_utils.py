"""Date helpers shared by commands and report rendering"""

from datetime import date, datetime, timezone

# es-ES short month names, as printed on tickets
_MONTHS_ES = ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_calendar_date(value: date | str) -> date:
    """
    Accept a date or an ISO YYYY-MM-DD string.

    Raises:
        ValueError: When the string is not an ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def format_date_es(value: date) -> str:
    """1 feb 2024"""
    return f"{value.day} {_MONTHS_ES[value.month - 1]} {value.year}"


def format_time_es(value: datetime) -> str:
    """12-hour clock, upper case: 09:05 PM"""
    return value.strftime("%I:%M %p").upper()

"""
Spanish (es-ES) date/time formatting and download filenames for maintenance documents.
"""

import re
import unicodedata
from datetime import date, datetime
from typing import Optional, Union
from urllib.parse import quote
from zoneinfo import ZoneInfo

from settings_helper import APP_TIMEZONE

MONTH_NAMES = [
    'Enero', 'Febrero', 'Marzo', 'Abril', 'Mayo', 'Junio',
    'Julio', 'Agosto', 'Septiembre', 'Octubre', 'Noviembre', 'Diciembre',
]

PLACEHOLDER = "N/A"


def month_name(month: int) -> str:
    """Spanish month name for 1-12; out-of-range months fall back to the number."""
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return str(month)


def to_local(value: datetime) -> datetime:
    """Convert an aware datetime to the app timezone (naive values are left alone)."""
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(APP_TIMEZONE))


def format_date_es(value: Optional[Union[date, datetime]]) -> str:
    """5/1/2024 style (day/month/year, no zero padding)."""
    if value is None:
        return PLACEHOLDER
    if isinstance(value, datetime):
        value = to_local(value)
    return f"{value.day}/{value.month}/{value.year}"


def format_time_es(value: Optional[datetime]) -> str:
    if value is None:
        return PLACEHOLDER
    return to_local(value).strftime("%H:%M:%S")


def format_datetime_es(value: Optional[datetime]) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{format_date_es(value)}, {format_time_es(value)}"


def strip_diacritics(value: str) -> str:
    """'Ñandú' -> 'Nandu'"""
    decomposed = unicodedata.normalize('NFD', value)
    return ''.join(c for c in decomposed if not unicodedata.combining(c))


def ascii_filename(file_name: str) -> str:
    """Latin-1 safe filename: accents stripped, other symbols collapsed to '_'."""
    return re.sub(r'[^A-Za-z0-9._-]+', '_', strip_diacritics(file_name or '')).strip('_') or 'archivo'


def attachment_disposition(file_name: str) -> str:
    """Content-Disposition value with an ASCII filename plus the UTF-8 original (RFC 5987)."""
    fallback = ascii_filename(file_name)
    if fallback == file_name:
        return f"attachment; filename={fallback}"
    return f"attachment; filename={fallback}; filename*=UTF-8''{quote(file_name, safe='')}"

# referent/dates.py
import re
import logging
from datetime import datetime
from typing import Optional

from dateutil import parser as dateparser

from .config import DATE_LOCALE

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# genitive forms, as used after a day number
MONTHS = {
    "ru": ("января", "февраля", "марта", "апреля", "мая", "июня",
           "июля", "августа", "сентября", "октября", "ноября", "декабря"),
    "en": ("January", "February", "March", "April", "May", "June",
           "July", "August", "September", "October", "November", "December"),
}

LONG_DATE_FORMATS = {
    "ru": "{day} {month} {year} г.",
    "en": "{day} {month} {year}",
}

DATE_PATTERNS = [
    re.compile(r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}"),
    re.compile(r"\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2}"),
    re.compile(r"\w+\s+\d{1,2},?\s+\d{4}"),
    re.compile(r"\d{1,2}\s+\w+\s+\d{4}"),
]

MAX_DATE_TEXT_LENGTH = 50

# parsing against two defaults that differ in every date field shows which
# fields the text actually supplied
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def looks_like_date(text: str) -> bool:
    """Cheap gate for free-text date candidates."""
    if not text or len(text) >= MAX_DATE_TEXT_LENGTH:
        return False
    return any(p.search(text) for p in DATE_PATTERNS)


def format_date(raw: str, locale: Optional[str] = None) -> str:
    """
    Render a parseable date string as a long date, e.g. "1 марта 2024 г.".
    Unparseable input, and input missing the day, month or year, comes back
    unchanged.
    """
    locale = (locale or DATE_LOCALE).lower()
    if locale not in MONTHS:
        locale = "ru"
    try:
        parsed, other = (dateparser.parse(raw, default=d) for d in _FILL_DEFAULTS)
    except (ValueError, OverflowError, TypeError) as e:
        logger.debug("format_date: cannot parse %r: %s", raw, e)
        return raw
    if (parsed.year, parsed.month, parsed.day) != (other.year, other.month, other.day):
        logger.debug("format_date: %r is not a full calendar date", raw)
        return raw
    return LONG_DATE_FORMATS[locale].format(
        day=parsed.day,
        month=MONTHS[locale][parsed.month - 1],
        year=parsed.year,
    )

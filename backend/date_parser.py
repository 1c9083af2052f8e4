"""
Date Parser - lexical conversion of OCR dates to ISO ``YYYY-MM-DD``

Two shapes show up on work permits and certificates:
    16-06-1988, 16/06/1988, 1.6.1988      (day / month / year)
    13 FEB 2022, 13-February-2022         (day, month name, year)

Nothing here builds a ``datetime``: the parts are only re-ordered and zero-padded,
so OCR output such as 31/02/2022 is passed through rather than rejected.
"""
import re
from typing import List, Optional, Tuple

from config import MONTHS

_MONTH_ALTERNATION = "|".join(sorted(MONTHS, key=len, reverse=True))

NUMERIC_DATE = r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{4}"
TEXT_DATE = r"\d{1,2}\s*[\s\-/.,]?\s*(?:%s)\.?\s*[\s\-/.,]?\s*\d{4}" % _MONTH_ALTERNATION
ANY_DATE = r"(?:%s|%s)" % (NUMERIC_DATE, TEXT_DATE)

_NUMERIC_RE = re.compile(r"(?<!\d)(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})(?!\d)")
_TEXT_RE = re.compile(
    r"(?<!\d)(\d{1,2})\s*[\s\-/.,]?\s*(%s)\.?\s*[\s\-/.,]?\s*(\d{4})(?!\d)" % _MONTH_ALTERNATION,
    re.IGNORECASE,
)
_ANY_RE = re.compile(r"(?<!\d)%s(?!\d)" % ANY_DATE, re.IGNORECASE)


def _canonical(day: str, month: int, year: str) -> str:
    return f"{year}-{month:02d}-{int(day):02d}"


def parse_numeric_date(value: str) -> Optional[str]:
    """``16-06-1988`` -> ``1988-06-16``; ``None`` when no numeric date is present."""
    if not value:
        return None
    match = _NUMERIC_RE.search(value)
    if not match:
        return None
    day, month, year = match.groups()
    return _canonical(day, int(month), year)


def parse_text_date(value: str) -> Optional[str]:
    """``13 Feb 2022`` / ``13 FEBRUARY 2022`` -> ``2022-02-13``."""
    if not value:
        return None
    match = _TEXT_RE.search(value)
    if not match:
        return None
    day, month_name, year = match.groups()
    month = MONTHS.get(month_name.upper())
    if month is None:
        return None
    return _canonical(day, month, year)


def parse_date(value: str) -> Optional[str]:
    """Whichever of the two shapes appears first in ``value``."""
    if not value:
        return None
    match = _ANY_RE.search(value)
    if not match:
        return None
    token = match.group(0)
    return parse_numeric_date(token) or parse_text_date(token)


def find_all_dates(text: str) -> List[Tuple[int, str]]:
    """Every date in ``text`` as ``(offset, iso_date)``, in document order."""
    if not text:
        return []
    found = []
    for match in _ANY_RE.finditer(text):
        iso = parse_numeric_date(match.group(0)) or parse_text_date(match.group(0))
        if iso:
            found.append((match.start(), iso))
    return found

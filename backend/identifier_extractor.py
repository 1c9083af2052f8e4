"""
FIN / NRIC identifier and work permit number extraction

FIN format: F/G/M + 7 digits + check letter (e.g. G6550858W)
    F = issued before 2000
    G = issued 2000-2021
    M = issued from 2022 onwards
NRIC format: S/T + 7 digits + check letter

The work permit number is a different thing: 8-9 plain digits, often printed
with a gap ("0 34773262"), on the front of the card.
"""
import logging
import re
from typing import Optional, Tuple

from config import IDENTIFIER_PATTERN
from text_normalizer import NormalizedText, clean_name, is_valid_name, run_cascade

logger = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"\b(%s)\b" % IDENTIFIER_PATTERN)
IDENTIFIER_LINE_RE = re.compile(r"^%s$" % IDENTIFIER_PATTERN)

_IC_LABEL_RE = re.compile(r"IDENTITY\s*CARD\s*(?:NO\.?|NUMBER)\s*[:\-]?\s*(%s)\b" % IDENTIFIER_PATTERN)
_NRIC_LABEL_RE = re.compile(r"NRIC\s*(?:NO\.?|NUMBER)?\s*[:\-]?\s*(%s)\b" % IDENTIFIER_PATTERN)
_GENERIC_LABEL_RE = re.compile(r"\b(?:FIN|ID\s*NO\.?|ID\s*NUMBER)\s*[:\-]?\s*(%s)\b" % IDENTIFIER_PATTERN)
_NAME_WITH_ID_RE = re.compile(r"([A-Z][A-Z .'\-/]{2,}?)\s*\(\s*(%s)\s*\)" % IDENTIFIER_PATTERN)

_WP_LABEL_PATTERNS = (
    re.compile(r"WORK\s*PERMIT\s*(?:NO|NUMBER)\.?\s*:?\s*(\d[\d ]{6,})"),
    re.compile(r"\bWP\s*NO\.?\s*:?\s*(\d[\d ]{6,})"),
    re.compile(r"\bPERMIT\s*NO\.?\s*:?\s*(\d[\d ]{6,})"),
)
_WP_LABEL_LINE_RE = re.compile(r"(?:WORK\s*PERMIT|\bWP|\bPERMIT)\s*(?:NO|NUMBER)\b")
_LEADING_DIGITS_RE = re.compile(r"^(\d[\d ]{5,})")


def _work_permit_digits(raw: str) -> Optional[str]:
    digits = re.sub(r"\s+", "", raw or "")
    if digits.isdigit() and 8 <= len(digits) <= 9:
        return digits
    return None


def name_with_identifier(doc: NormalizedText) -> Tuple[Optional[str], Optional[str]]:
    """``JOHN TAN (G1234567A)`` -> (name, identifier), taken from a single line."""
    for line in doc.upper_lines:
        match = _NAME_WITH_ID_RE.search(line)
        if match:
            name = clean_name(match.group(1))
            return (name if is_valid_name(name) else None), match.group(2)
    return None, None


# Identifier strategies, highest priority first
def identity_card_label(doc: NormalizedText, flags) -> Optional[str]:
    match = _IC_LABEL_RE.search(doc.upper)
    return match.group(1) if match else None


def nric_label(doc: NormalizedText, flags) -> Optional[str]:
    match = _NRIC_LABEL_RE.search(doc.upper)
    return match.group(1) if match else None


def generic_id_label(doc: NormalizedText, flags) -> Optional[str]:
    match = _GENERIC_LABEL_RE.search(doc.upper)
    return match.group(1) if match else None


def name_adjacent(doc: NormalizedText, flags) -> Optional[str]:
    return name_with_identifier(doc)[1]


def bare_identifier(doc: NormalizedText, flags) -> Optional[str]:
    match = IDENTIFIER_RE.search(doc.upper)
    return match.group(1) if match else None


IDENTIFIER_STRATEGIES = (
    identity_card_label,
    nric_label,
    generic_id_label,
    name_adjacent,
    bare_identifier,
)


def extract_identifier(doc: NormalizedText, flags) -> Tuple[Optional[str], Optional[str]]:
    """
    Resolve the FIN/NRIC identifier.

    Returns:
        (identifier, seeded_name). ``seeded_name`` is only set when the
        identifier came from the ``NAME (IDENTIFIER)`` layout.
    """
    for strategy in IDENTIFIER_STRATEGIES:
        value = strategy(doc, flags)
        if not value:
            continue
        logger.debug("fin_number resolved by %s: %s", strategy.__name__, value)
        if strategy is name_adjacent:
            return value, name_with_identifier(doc)[0]
        return value, None
    return None, None


def find_identifier_line(doc: NormalizedText) -> int:
    """Index of the first line carrying an identifier-shaped token, else -1."""
    return doc.find_line(lambda line: IDENTIFIER_RE.search(line) is not None)


def labeled_work_permit_no(doc: NormalizedText, flags) -> Optional[str]:
    for pattern in _WP_LABEL_PATTERNS:
        match = pattern.search(doc.upper)
        if match:
            value = _work_permit_digits(match.group(1))
            if value:
                return value
    return None


def next_line_work_permit_no(doc: NormalizedText, flags) -> Optional[str]:
    """Label on one line, number at the start of the next."""
    index = doc.find_line(lambda line: _WP_LABEL_LINE_RE.search(line) is not None)
    if index < 0 or index + 1 >= len(doc):
        return None
    match = _LEADING_DIGITS_RE.match(doc.upper_lines[index + 1])
    return _work_permit_digits(match.group(1)) if match else None


WORK_PERMIT_STRATEGIES = (
    labeled_work_permit_no,
    next_line_work_permit_no,
)


def extract_work_permit_no(doc: NormalizedText, flags) -> Optional[str]:
    return run_cascade(WORK_PERMIT_STRATEGIES, doc, flags, "work_permit_no")

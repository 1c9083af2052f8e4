"""
Course title, provider, serial number and duration from training certificates

Typical certificate:
    Avanta
    Global
    An Accredited Training Provider
    THIS IS TO CERTIFY THAT
    JOHN TAN
    G1234567A
    Work-At-Height Rescue Course (WAHRC)
    COURSE DATE: 13/02/2022
    S/N WAHRC-2025-B134P-659

Only runs when the certification flag is set. Title, provider and duration keep
the original casing of the capture; the serial number is upper-cased.
"""
import logging
import re
from typing import Optional

from config import COURSE_KEYWORDS, FIELD_LABELS, INSTITUTION_KEYWORDS, NARRATIVE_FILLER
from date_parser import ANY_DATE
from identifier_extractor import IDENTIFIER_RE
from text_normalizer import NormalizedText, collapse_spaces, run_cascade, split_words, starts_with_label

logger = logging.getLogger(__name__)

_MIN_TITLE_LENGTH = 10
_TOP_LINES = 6

_DATE_RE = re.compile(ANY_DATE)

# Lines that are never a course title
_TITLE_EXCLUDED_PREFIX_RE = re.compile(
    r"^(?:NAME|ID\s*NO|FIN|NRIC|COURSE\s*DATE|COURSE\s*VENUE|VENUE|VALIDITY|S/N|SERIAL|CERT\s*NO|"
    r"COURSE\s*(?:TITLE|NAME)|DATE|DOB|DURATION|ISSUED|PROVIDER|TRAINING\s+PROVIDER|COURSE\s+PROVIDER)"
)
_TITLE_EXCLUDED_RE = re.compile(
    r"\b(?:SINGAPORE|PIONEER|STREET|AVENUE|ROAD|BLOCK)\b|^(?:MR|MS|MRS|MDM)\.?\s|"
    r"\b(?:DIRECTOR|PRINCIPAL|TRAINER|DIVISION|SIGNATURE)\b|"
    r"ACCREDITED\s+TRAINING\s+PROVIDER|THIS\s+IS\s+TO\s+CERTIFY|\bPTE\.?\s*LTD\b"
)
_GENERIC_HEADING_RE = re.compile(
    r"^CERTIFICATE(?:\s+OF\s+(?:SUCCESSFUL\s+)?[A-Z]+)?$"
)
_TITLE_LABEL_RE = re.compile(r"^COURSE\s*(?:TITLE|NAME)?\s*[:\-]\s*(.{5,})$")
_CERTIFICATE_IN_RE = re.compile(r"\bCERTIFICATE\s+(?:IN|OF|FOR)\s*[:\-]?\s*(.{5,})$")
_BARE_TITLE_LABEL_RE = re.compile(r"^COURSE\s*(?:TITLE|NAME)\s*[:\-]?$")
_COMPLETED_RE = re.compile(r"\bHAS\s+(?:SUCCESSFULLY\s+)?(?:COMPLETED|ATTENDED)\b(?:\s+THE)?")
_NARRATIVE_RE = re.compile(r"THIS\s+IS\s+TO\s+CERTIFY|\bHAS\s+(?:SUCCESSFULLY\s+)?(?:COMPLETED|ATTENDED)\b")

_PROVIDER_LABEL_RE = re.compile(
    r"^(?:TRAINING\s+PROVIDER|COURSE\s+PROVIDER|PROVIDER|ISSUED\s+BY|ISSUING\s+(?:BODY|ORGANI[SZ]ATION))"
    r"\s*[:\-]?\s*"
)
_ACCREDITED_RE = re.compile(r"\b(?:AN\s+|A\s+)?ACCREDITED\s+TRAINING\s+PROVIDER\b")
_COMPANY_LINE_RE = re.compile(r"\b(?:PTE\.?\s*LTD|SDN\.?\s*BHD|LLP)\b")
_NOT_PROVIDER_PREFIX_RE = re.compile(r"^(?:S/N|CERTIFICATE|COURSE|NAME|ID\b|FIN\b|DATE|VALID|THIS\s+IS)")

_SERIAL_LABEL = r"(?:S/N|SERIAL\s*(?:NO|NUMBER)|CERT(?:IFICATE)?\s*(?:NO|NUMBER))\.?"
_SERIAL_RE = re.compile(_SERIAL_LABEL + r"[ \t]*[:\-]?[ \t]*([A-Z0-9][A-Z0-9\-/]+)")
_BARE_SERIAL_LABEL_RE = re.compile(r"^" + _SERIAL_LABEL + r"\s*[:\-]?$")
_SERIAL_VALUE_RE = re.compile(r"^[A-Z0-9][A-Z0-9\-/]+$")
_SERIAL_TOKEN_RE = re.compile(r"\b([A-Z]{2,}[A-Z0-9]*(?:-[A-Z0-9]+){2,})\b")

_DURATION_LABEL_RE = re.compile(r"^(?:COURSE\s+)?DURATION(?:\s+OF\s+COURSE)?\s*[:\-]?\s*")
_DURATION_RE = re.compile(
    r"\b(\d+(?:\.\d+)?(?:\s*(?:-|TO)\s*\d+(?:\.\d+)?)?\s*(?:HOURS?|HRS?|DAYS?|WEEKS?))\b"
)

_INSTITUTION_RES = tuple(re.compile(r"\b%s\b" % re.escape(keyword)) for keyword in INSTITUTION_KEYWORDS)


def _has_digit(value: str) -> bool:
    return any(c.isdigit() for c in value)


def _tail(doc: NormalizedText, index: int, start: int) -> str:
    """Original-case remainder of a line from ``start``."""
    return collapse_spaces(doc.original(index, start)).strip(" :-,")


def _is_title_candidate(line: str) -> bool:
    if len(line) < _MIN_TITLE_LENGTH:
        return False
    if _TITLE_EXCLUDED_PREFIX_RE.match(line) or _TITLE_EXCLUDED_RE.search(line):
        return False
    if _DATE_RE.search(line) or IDENTIFIER_RE.search(line):
        return False
    if _GENERIC_HEADING_RE.match(line):
        return False
    # Institution names are providers even when they carry a course keyword
    if any(pattern.search(line) for pattern in _INSTITUTION_RES):
        return False
    if _NARRATIVE_RE.search(line):
        return False
    return True


def _keyword_score(line: str) -> int:
    return sum(1 for keyword in COURSE_KEYWORDS if keyword in line)


def _title_index(doc: NormalizedText) -> int:
    return doc.find_line(lambda line: _is_title_candidate(line) and _keyword_score(line) > 0)


def keyword_title(doc: NormalizedText, flags) -> Optional[str]:
    """First long-enough line carrying a course keyword."""
    index = _title_index(doc)
    return collapse_spaces(doc.lines[index]) if index >= 0 else None


def labeled_title(doc: NormalizedText, flags) -> Optional[str]:
    """``COURSE TITLE: ...`` or ``CERTIFICATE IN ...``."""
    for pattern in (_TITLE_LABEL_RE, _CERTIFICATE_IN_RE):
        for i, line in enumerate(doc.upper_lines):
            if _GENERIC_HEADING_RE.match(line):
                continue
            match = pattern.search(line)
            if match and not _DATE_RE.search(match.group(1)):
                return _tail(doc, i, match.start(1))
    return None


def title_above_label(doc: NormalizedText, flags) -> Optional[str]:
    """Title printed on the line above a bare ``COURSE TITLE`` label."""
    index = doc.find_line(lambda line: _BARE_TITLE_LABEL_RE.match(line) is not None)
    if index <= 0:
        return None
    line = doc.upper_lines[index - 1]
    if len(line) < 5 or starts_with_label(line, FIELD_LABELS) or _DATE_RE.search(line):
        return None
    return collapse_spaces(doc.lines[index - 1])


def _is_filler_only(line: str) -> bool:
    return all(word in NARRATIVE_FILLER for word in split_words(line))


def completed_course_title(doc: NormalizedText, flags) -> Optional[str]:
    """"... has successfully completed <title>", on the same or a following line."""
    index = doc.find_line(lambda line: _COMPLETED_RE.search(line) is not None)
    if index < 0:
        return None

    match = _COMPLETED_RE.search(doc.upper_lines[index])
    remainder = doc.upper_lines[index][match.end():].strip(" :,")
    if len(remainder) >= 5 and not _is_filler_only(remainder):
        return _tail(doc, index, match.end())

    for i in range(index + 1, min(index + 4, len(doc))):
        line = doc.upper_lines[i]
        if _is_filler_only(line) or len(line) < 5:
            continue
        if _DATE_RE.search(line) or IDENTIFIER_RE.search(line):
            continue
        return collapse_spaces(doc.lines[i])
    return None


TITLE_STRATEGIES = (
    keyword_title,
    labeled_title,
    title_above_label,
    completed_course_title,
)


def labeled_provider(doc: NormalizedText, flags) -> Optional[str]:
    for i, line in enumerate(doc.upper_lines):
        match = _PROVIDER_LABEL_RE.match(line)
        if not match:
            continue
        value = _tail(doc, i, match.end())
        if len(value) >= 3:
            return value
        if i + 1 < len(doc) and not starts_with_label(doc.upper_lines[i + 1], FIELD_LABELS):
            value = collapse_spaces(doc.lines[i + 1])
            if len(value) >= 3:
                return value
        return None
    return None


def institution_provider(doc: NormalizedText, flags) -> Optional[str]:
    """A line naming an academy / institute / training centre."""
    for i, line in enumerate(doc.upper_lines):
        if "COURSE" in line or "CERTIF" in line or _ACCREDITED_RE.search(line):
            continue
        if _DATE_RE.search(line) or IDENTIFIER_RE.search(line):
            continue
        if any(pattern.search(line) for pattern in _INSTITUTION_RES):
            return collapse_spaces(doc.lines[i])
    return None


def company_provider(doc: NormalizedText, flags) -> Optional[str]:
    for i, line in enumerate(doc.upper_lines):
        if _COMPANY_LINE_RE.search(line) and not starts_with_label(line, FIELD_LABELS):
            return collapse_spaces(doc.lines[i])
    return None


def _provider_shaped(line: str) -> bool:
    if not 3 <= len(line) <= 30 or not line[0].isalpha():
        return False
    if _NOT_PROVIDER_PREFIX_RE.match(line) or starts_with_label(line, FIELD_LABELS):
        return False
    return not _DATE_RE.search(line) and not IDENTIFIER_RE.search(line)


def accredited_provider(doc: NormalizedText, flags) -> Optional[str]:
    """Name printed right before "(An) Accredited Training Provider".

    Providers often wrap their name over two short lines ("Avanta" / "Global").
    """
    index = doc.find_line(lambda line: _ACCREDITED_RE.search(line) is not None)
    if index < 0:
        return None

    match = _ACCREDITED_RE.search(doc.upper_lines[index])
    prefix = doc.original(index, 0, match.start()).strip(" -,:")
    if len(prefix) >= 3:
        return collapse_spaces(prefix)

    parts = []
    for i in range(index - 1, max(index - 3, -1), -1):
        if not _provider_shaped(doc.upper_lines[i]):
            break
        parts.insert(0, doc.lines[i])
    return collapse_spaces(" ".join(parts)) or None


def top_lines_provider(doc: NormalizedText, flags) -> Optional[str]:
    """Short lines at the top of the certificate, above the title and the holder's name."""
    limit = min(len(doc), _TOP_LINES)
    for index in (_title_index(doc), doc.find_line(lambda line: _NARRATIVE_RE.search(line) is not None)):
        if index >= 0:
            limit = min(limit, index)
    parts = [doc.lines[i] for i in range(limit) if _provider_shaped(doc.upper_lines[i])]
    return collapse_spaces(" ".join(parts)) or None


PROVIDER_STRATEGIES = (
    labeled_provider,
    institution_provider,
    company_provider,
    accredited_provider,
    top_lines_provider,
)


def labeled_serial(doc: NormalizedText, flags) -> Optional[str]:
    for match in _SERIAL_RE.finditer(doc.upper):
        if _has_digit(match.group(1)):
            return match.group(1)
    return None


def next_line_serial(doc: NormalizedText, flags) -> Optional[str]:
    index = doc.find_line(lambda line: _BARE_SERIAL_LABEL_RE.match(line) is not None)
    if index < 0 or index + 1 >= len(doc):
        return None
    value = doc.upper_lines[index + 1]
    if _SERIAL_VALUE_RE.match(value) and _has_digit(value):
        return value
    return None


def serial_token(doc: NormalizedText, flags) -> Optional[str]:
    """Hyphenated code such as ``WAHRC-2025-B134P-659``."""
    for match in _SERIAL_TOKEN_RE.finditer(doc.upper):
        if _has_digit(match.group(1)):
            return match.group(1)
    return None


SERIAL_STRATEGIES = (labeled_serial, next_line_serial, serial_token)


def labeled_duration(doc: NormalizedText, flags) -> Optional[str]:
    for i, line in enumerate(doc.upper_lines):
        match = _DURATION_LABEL_RE.match(line)
        if not match:
            continue
        value = _tail(doc, i, match.end())
        if value:
            return value
        if i + 1 < len(doc) and not starts_with_label(doc.upper_lines[i + 1], FIELD_LABELS):
            return collapse_spaces(doc.lines[i + 1])
        return None
    return None


def duration_pattern(doc: NormalizedText, flags) -> Optional[str]:
    for i, line in enumerate(doc.upper_lines):
        match = _DURATION_RE.search(line)
        if match:
            return collapse_spaces(doc.original(i, match.start(1), match.end(1)))
    return None


DURATION_STRATEGIES = (labeled_duration, duration_pattern)


def extract_certification(doc: NormalizedText, flags) -> dict:
    """Course metadata; all ``None`` unless the capture is a certificate."""
    if not flags.is_certification:
        return dict.fromkeys(("course_title", "course_provider", "cert_serial_no", "course_duration"))
    return {
        "course_title": run_cascade(TITLE_STRATEGIES, doc, flags, "course_title"),
        "course_provider": run_cascade(PROVIDER_STRATEGIES, doc, flags, "course_provider"),
        "cert_serial_no": run_cascade(SERIAL_STRATEGIES, doc, flags, "cert_serial_no"),
        "course_duration": run_cascade(DURATION_STRATEGIES, doc, flags, "course_duration"),
    }

"""
Employer, nationality, sex, race, address, country of birth and sector

Each field is a label scan first ("LABEL: value" or the value on the next line)
and a vocabulary / pattern fallback second.
"""
import logging
import re
from typing import Optional, Sequence

from config import (
    ADDRESS_KEYWORDS,
    FIELD_LABELS,
    KNOWN_NATIONALITIES,
    KNOWN_RACES,
    KNOWN_SECTORS,
)
from text_normalizer import NormalizedText, collapse_spaces, run_cascade, split_words, starts_with_label

logger = logging.getLogger(__name__)

_TRAILING_LABEL_RE = re.compile(
    r"\s+(?:%s)\b[A-Z ./]{0,20}?(?:\s*:|\s+-).*$" % "|".join(re.escape(label) for label in FIELD_LABELS)
)

_EMPLOYER_LABEL_RE = re.compile(r"^EMPLOYER(?:'S)?(?:\s+NAME)?\b")
_COMPANY_RE = re.compile(
    r"([A-Z0-9][A-Z0-9 &.,()'\-]*?\b(?:PTE\.?\s*LTD|SDN\.?\s*BHD|LLP|LIMITED|LTD)\b\.?)"
)
_NATIONALITY_LABEL_RE = re.compile(r"^(?:NATIONALITY|CITIZENSHIP|COUNTRY\s+OF\s+ORIGIN)\b")
_RACE_LABEL_RE = re.compile(r"^RACE\b")
_SEX_RE = re.compile(r"\b(?:SEX|GENDER)\s*[:\-]?\s*(MALE|FEMALE|M|F)\b")
_SEX_LINE_RE = re.compile(r"^(MALE|FEMALE)$")
_ADDRESS_LABEL_RE = re.compile(r"^(?:RESIDENTIAL\s+)?ADDRESS\b")
_UNIT_RE = re.compile(r"#\s*\d{1,3}\s*-\s*\d{1,5}")
_POSTAL_RE = re.compile(r"SINGAPORE\s*\(?\d{6}\)?|^S?\(?\d{6}\)?$")
_BIRTH_PLACE_LABEL_RE = re.compile(
    r"^(?:COUNTRY\s*/\s*PLACE\s+OF\s+BIRTH|COUNTRY\s+OF\s+BIRTH|PLACE\s+OF\s+BIRTH)\b"
)
_SECTOR_RE = re.compile(r"\bSECTOR\s*[:\-]?\s*([A-Z][A-Z &]*)$")
_ALPHA_VALUE_RE = re.compile(r"^[A-Z][A-Z\s\-/]+$")

_ADDRESS_WORDS = frozenset(ADDRESS_KEYWORDS)


def _trim_value(value: str) -> str:
    return collapse_spaces(_TRAILING_LABEL_RE.sub("", value).strip(" :-,"))


def scan_label(doc: NormalizedText, label_re: re.Pattern, min_length: int = 2) -> Optional[str]:
    """Value after a label at the start of a line, else the next non-label line."""
    for i, line in enumerate(doc.upper_lines):
        match = label_re.match(line)
        if not match:
            continue

        same_line = _trim_value(line[match.end():])
        if len(same_line) >= min_length:
            return same_line

        if i + 1 < len(doc):
            following = doc.upper_lines[i + 1]
            if not starts_with_label(following, FIELD_LABELS):
                value = _trim_value(following)
                if len(value) >= min_length:
                    return value
        return None
    return None


def scan_vocabulary(text: str, vocabulary: Sequence[str]) -> Optional[str]:
    """First vocabulary entry (in vocabulary order) present as a whole word."""
    for entry in vocabulary:
        if re.search(r"\b%s\b" % re.escape(entry), text):
            return entry
    return None


def labeled_employer(doc: NormalizedText, flags) -> Optional[str]:
    return scan_label(doc, _EMPLOYER_LABEL_RE, min_length=3)


def company_suffix_employer(doc: NormalizedText, flags) -> Optional[str]:
    for line in doc.upper_lines:
        match = _COMPANY_RE.search(line)
        if match:
            return collapse_spaces(match.group(1))
    return None


EMPLOYER_STRATEGIES = (labeled_employer, company_suffix_employer)


def labeled_nationality(doc: NormalizedText, flags) -> Optional[str]:
    value = scan_label(doc, _NATIONALITY_LABEL_RE)
    return value if value and _ALPHA_VALUE_RE.match(value) else None


def _race_line_indexes(doc: NormalizedText) -> set:
    """Lines holding a RACE label or the value printed under a bare one."""
    indexes = set()
    for i, line in enumerate(doc.upper_lines):
        match = _RACE_LABEL_RE.match(line)
        if not match:
            continue
        indexes.add(i)
        if not _trim_value(line[match.end():]) and i + 1 < len(doc):
            indexes.add(i + 1)
    return indexes


def known_nationality(doc: NormalizedText, flags) -> Optional[str]:
    # CHINESE under a RACE label is the race, not the nationality
    race_lines = _race_line_indexes(doc)
    text = "\n".join(line for i, line in enumerate(doc.upper_lines) if i not in race_lines)
    return scan_vocabulary(text, KNOWN_NATIONALITIES)


NATIONALITY_STRATEGIES = (labeled_nationality, known_nationality)


def labeled_sex(doc: NormalizedText, flags) -> Optional[str]:
    match = _SEX_RE.search(doc.upper)
    return match.group(1)[0] if match else None


def standalone_sex(doc: NormalizedText, flags) -> Optional[str]:
    for line in doc.upper_lines:
        match = _SEX_LINE_RE.match(line)
        if match:
            return match.group(1)[0]
    return None


SEX_STRATEGIES = (labeled_sex, standalone_sex)


# Race (identity cards)
def labeled_race(doc: NormalizedText, flags) -> Optional[str]:
    value = scan_label(doc, _RACE_LABEL_RE)
    return value if value and _ALPHA_VALUE_RE.match(value) else None


def known_race(doc: NormalizedText, flags) -> Optional[str]:
    # Only identity cards print race; elsewhere INDIAN/CHINESE is a nationality
    if not flags.is_identity_card:
        return None
    return scan_vocabulary(doc.upper, KNOWN_RACES)


RACE_STRATEGIES = (labeled_race, known_race)


# Address (identity cards)
def _is_address_line(line: str) -> bool:
    if starts_with_label(line, FIELD_LABELS):
        return False
    if _UNIT_RE.search(line) or _POSTAL_RE.search(line):
        return True
    return any(word in _ADDRESS_WORDS for word in split_words(line))


def _join_address(parts) -> Optional[str]:
    value = collapse_spaces(" ".join(p.strip(" ,") for p in parts if p.strip(" ,")))
    return value or None


def labeled_address(doc: NormalizedText, flags) -> Optional[str]:
    if not flags.is_identity_card:
        return None
    index = doc.find_line(lambda line: _ADDRESS_LABEL_RE.match(line) is not None)
    if index < 0:
        return None

    label_line = doc.upper_lines[index]
    parts = []
    remainder = _trim_value(label_line[_ADDRESS_LABEL_RE.match(label_line).end():])
    if remainder:
        parts.append(remainder)
    for line in doc.upper_lines[index + 1:]:
        if starts_with_label(line, FIELD_LABELS):
            break
        if not parts or _is_address_line(line):
            parts.append(line)
        else:
            break
    return _join_address(parts)


def address_block(doc: NormalizedText, flags) -> Optional[str]:
    if not flags.is_identity_card:
        return None
    start = doc.find_line(_is_address_line)
    if start < 0:
        return None

    parts = []
    for line in doc.upper_lines[start:]:
        if not _is_address_line(line):
            break
        parts.append(line)
    return _join_address(parts)


ADDRESS_STRATEGIES = (labeled_address, address_block)


def labeled_birth_place(doc: NormalizedText, flags) -> Optional[str]:
    value = scan_label(doc, _BIRTH_PLACE_LABEL_RE)
    return value if value and _ALPHA_VALUE_RE.match(value) else None


COUNTRY_OF_BIRTH_STRATEGIES = (labeled_birth_place,)


# Sector (work permits)
def labeled_sector(doc: NormalizedText, flags) -> Optional[str]:
    if not flags.is_work_permit:
        return None
    for i, line in enumerate(doc.upper_lines):
        match = _SECTOR_RE.search(line)
        if match:
            return collapse_spaces(match.group(1))
        if line.rstrip(" :") == "SECTOR" and i + 1 < len(doc):
            following = doc.upper_lines[i + 1]
            if _ALPHA_VALUE_RE.match(following) and not starts_with_label(following, FIELD_LABELS):
                return following
    return None


def known_sector(doc: NormalizedText, flags) -> Optional[str]:
    if not flags.is_work_permit:
        return None
    return scan_vocabulary(doc.upper, KNOWN_SECTORS)


SECTOR_STRATEGIES = (labeled_sector, known_sector)


def extract_attributes(doc: NormalizedText, flags) -> dict:
    """All attribute fields for one capture."""
    return {
        "employer_name": run_cascade(EMPLOYER_STRATEGIES, doc, flags, "employer_name"),
        "nationality": run_cascade(NATIONALITY_STRATEGIES, doc, flags, "nationality"),
        "sex": run_cascade(SEX_STRATEGIES, doc, flags, "sex"),
        "race": run_cascade(RACE_STRATEGIES, doc, flags, "race"),
        "address": run_cascade(ADDRESS_STRATEGIES, doc, flags, "address"),
        "country_of_birth": run_cascade(COUNTRY_OF_BIRTH_STRATEGIES, doc, flags, "country_of_birth"),
        "sector": run_cascade(SECTOR_STRATEGIES, doc, flags, "sector"),
    }

"""
Holder name extraction

Layouts seen in the field:
    NAME                      Name: JOHN TAN          JOHN TAN
    JOHN TAN                                          NAME
and on certificates the name sits above the ID line or after
"This is to certify that".
"""
import logging
import re
from typing import Optional

from config import COMPANY_MARKERS, FIELD_LABELS, NARRATIVE_FILLER, NON_NAME_WORDS
from identifier_extractor import IDENTIFIER_LINE_RE, find_identifier_line
from text_normalizer import NormalizedText, clean_name, is_valid_name, run_cascade, split_words, starts_with_label

logger = logging.getLogger(__name__)

_NAME_LABEL_RE = re.compile(r"^NAME(?:\s+OF\s+(?:WORKER|HOLDER))?\s*(?:[:\-]|$)|^NAME\s+OF\s+(?:WORKER|HOLDER)")
_BARE_NAME_LABEL_RE = re.compile(r"^NAME(?:\s+OF\s+(?:WORKER|HOLDER))?\s*[:\-]?\s*$")
_SAME_LINE_VALUE_RE = re.compile(r"^NAME\s*(?:OF\s+(?:WORKER|HOLDER))?\s*[:\-]?\s+([A-Z][A-Z\s.'\-/]{2,})")
_INLINE_NAME_RE = re.compile(r"\bNAME\s*[:\-]\s*([A-Z][A-Z .'\-]{2,})")
_NAME_SHAPED_RE = re.compile(r"^[A-Z][A-Z\s.'\-/]{2,}$")
_CERTIFY_RE = re.compile(r"THIS\s+IS\s+TO\s+CERTIFY")

# Labels whose own "NAME" is not the holder's name
_OTHER_NAME_LABELS = frozenset({"EMPLOYER", "COMPANY", "COURSE", "PROVIDER", "FATHER", "MOTHER", "SPOUSE", "BUSINESS"})
_OTHER_FIELD_LABELS = tuple(label for label in FIELD_LABELS if label != "NAME")


def _is_company(line: str) -> bool:
    return any(word in COMPANY_MARKERS for word in split_words(line))


def _has_non_name_words(line: str) -> bool:
    return any(word in NON_NAME_WORDS for word in split_words(line))


def _is_other_label(line: str) -> bool:
    return starts_with_label(line, _OTHER_FIELD_LABELS)


def _accept(candidate: str) -> Optional[str]:
    name = clean_name(candidate)
    return name if is_valid_name(name) else None


def _strip_filler(line: str) -> str:
    words = line.split()
    while words and words[0].rstrip(".") in NARRATIVE_FILLER:
        words.pop(0)
    while words and words[-1].rstrip(".") in NARRATIVE_FILLER:
        words.pop()
    return " ".join(words)


def _name_label_index(doc: NormalizedText) -> int:
    return doc.find_line(lambda line: _NAME_LABEL_RE.match(line) is not None)


# Strategies, highest priority first
def labeled_name(doc: NormalizedText, flags) -> Optional[str]:
    """``NAME`` label line: value on the same line or within the next three."""
    index = _name_label_index(doc)
    if index < 0:
        return None

    match = _SAME_LINE_VALUE_RE.match(doc.upper_lines[index])
    if match:
        name = _accept(match.group(1))
        if name:
            return name

    for line in doc.upper_lines[index + 1:index + 4]:
        if IDENTIFIER_LINE_RE.match(line) or line.isdigit():
            continue
        if _is_other_label(line):
            break
        if _NAME_SHAPED_RE.match(line) and not _is_company(line):
            name = _accept(line)
            if name:
                return name
    return None


def inline_name(doc: NormalizedText, flags) -> Optional[str]:
    """``NAME: value`` anywhere, unless it is EMPLOYER NAME, COURSE NAME, ..."""
    for match in _INLINE_NAME_RE.finditer(doc.upper):
        preceding = doc.upper[:match.start()].split()
        if preceding and preceding[-1] in _OTHER_NAME_LABELS:
            continue
        name = _accept(match.group(1))
        if name:
            return name
    return None


def name_above_identifier(doc: NormalizedText, flags) -> Optional[str]:
    """Certificates without a name label print the name just above the ID."""
    if not flags.is_certification or _name_label_index(doc) >= 0:
        return None
    id_index = find_identifier_line(doc)
    if id_index <= 0:
        return None

    for i in range(id_index - 1, max(id_index - 4, -1), -1):
        line = doc.upper_lines[i]
        if _has_non_name_words(line) or _is_company(line) or _is_other_label(line):
            continue
        if _NAME_SHAPED_RE.match(line):
            name = _accept(line)
            if name:
                return name
    return None


def certified_name(doc: NormalizedText, flags) -> Optional[str]:
    """Name following "THIS IS TO CERTIFY (THAT)"."""
    index = doc.find_line(lambda line: _CERTIFY_RE.search(line) is not None)
    if index < 0:
        return None

    remainder = _CERTIFY_RE.split(doc.upper_lines[index], maxsplit=1)[-1]
    candidates = [remainder] + list(doc.upper_lines[index + 1:index + 4])
    for line in candidates:
        line = _strip_filler(line.strip(" :,"))
        if not line:
            continue
        if _has_non_name_words(line) or _is_company(line):
            continue
        if _NAME_SHAPED_RE.match(line):
            name = _accept(line)
            if name:
                return name
    return None


def name_above_label(doc: NormalizedText, flags) -> Optional[str]:
    """Value printed above a bare ``NAME`` label."""
    index = doc.find_line(lambda line: _BARE_NAME_LABEL_RE.match(line) is not None)
    if index <= 0:
        return None
    line = doc.upper_lines[index - 1]
    if _is_other_label(line) or _is_company(line) or _has_non_name_words(line):
        return None
    if _NAME_SHAPED_RE.match(line):
        return _accept(line)
    return None


NAME_STRATEGIES = (
    labeled_name,
    inline_name,
    name_above_identifier,
    certified_name,
    name_above_label,
)


def extract_name(doc: NormalizedText, flags) -> Optional[str]:
    return run_cascade(NAME_STRATEGIES, doc, flags, "worker_name")

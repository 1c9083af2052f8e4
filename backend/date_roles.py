"""
Date-role assignment

Context-aware routing of every date on the capture:
    "Course Date"                 -> issue_date (NOT date of birth)
    "Date of Birth" / "DOB"       -> date_of_birth
    "Issue Date" / "Issued"       -> issue_date
    "Expiry" / "Valid Until"      -> expiry_date
    "Validity: No Expiry"         -> expiry_date = "No Expiry"
Unlabeled dates are then distributed by sort order.

Rules run in a fixed order and a role, once written, is never overwritten.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import NO_EXPIRY
from date_parser import ANY_DATE, TEXT_DATE, find_all_dates, parse_date, parse_text_date
from text_normalizer import NormalizedText

logger = logging.getLogger(__name__)

_SEP = r"\s*[:\-]?\s*"

_COURSE_DATE_RE = re.compile(r"COURSE\s*DATES?" + _SEP + "(" + ANY_DATE + ")")
_BIRTH_RE = re.compile(
    r"(?:DATE\s*OF\s*BIRTH|BIRTH\s*DATE|\bD\.?\s*O\.?\s*B\.?|\bBORN(?:\s*ON)?)" + _SEP + "(" + ANY_DATE + ")"
)
_ISSUE_LABEL = r"(?:DATE\s*OF\s*ISSUE|ISSUED?\s*DATE|DATE\s*ISSUED|ISSUED\s*ON|ISSUED|\bISSUE)"
_ISSUE_RE = re.compile(_ISSUE_LABEL + _SEP + r"(\d{1,2}[/\-.]\d{1,2}[/\-.]\d{4})")
_ISSUE_TEXT_RE = re.compile(_ISSUE_LABEL + _SEP + "(" + TEXT_DATE + ")")
_RANGE_RE = re.compile("(" + ANY_DATE + r")\s*(?:TO|UNTIL|TILL)\s*(" + ANY_DATE + ")")
_CONDUCTED_RE = re.compile(r"CONDUCTED\s*(?:ON|FROM)?" + _SEP + "(" + ANY_DATE + ")")
_EXPIRY_RE = re.compile(
    r"(?:DATE\s*OF\s*EXPIRY|EXPIR[A-Z]*(?:\s*DATE)?(?:\s*ON)?|\bEXP\.?|VALID\s*(?:UNTIL|TILL|TO|THRU|THROUGH))"
    + _SEP + "(" + ANY_DATE + ")"
)
_NO_EXPIRY_RE = re.compile(
    r"(?:VALIDITY|EXPIRY(?:\s*DATE)?|VALID\s*(?:UNTIL|TILL|TO))" + _SEP + r"(?:NO\s*EXPIRY|NIL|NONE|LIFETIME)\b"
    r"|\bNO\s*EXPIRY\b|\bLIFETIME\s*VALIDITY\b"
)


@dataclass
class DateRoles:
    """date_of_birth / issue_date / expiry_date; first writer wins per role."""
    date_of_birth: Optional[str] = None
    issue_date: Optional[str] = None
    expiry_date: Optional[str] = None
    sources: Dict[str, str] = field(default_factory=dict)

    def assign(self, role: str, value: Optional[str], source: str) -> bool:
        if not value or getattr(self, role) is not None:
            return False
        setattr(self, role, value)
        self.sources[role] = source
        logger.debug("%s = %s (%s)", role, value, source)
        return True

    def assigned_values(self) -> set:
        return {v for v in (self.date_of_birth, self.issue_date, self.expiry_date) if v}


def _labeled(pattern, doc: NormalizedText) -> Optional[str]:
    match = pattern.search(doc.upper)
    return parse_date(match.group(1)) if match else None


# Rules, in priority order; signature (doc, flags, dates, roles)
def course_date_rule(doc, flags, dates, roles):
    # A course date is when training ran, never a birth date
    roles.assign("issue_date", _labeled(_COURSE_DATE_RE, doc), "course_date")


def birth_date_rule(doc, flags, dates, roles):
    roles.assign("date_of_birth", _labeled(_BIRTH_RE, doc), "birth_label")


def issue_date_rule(doc, flags, dates, roles):
    if roles.issue_date:
        return
    value = _labeled(_ISSUE_RE, doc)
    source = "issue_label"
    if not value:
        match = _ISSUE_TEXT_RE.search(doc.upper)
        value = parse_text_date(match.group(1)) if match else None
        source = "issue_label_text"
    if not value:
        match = _RANGE_RE.search(doc.upper)
        value = parse_date(match.group(2)) if match else None
        source = "date_range_end"
    if not value:
        value = _labeled(_CONDUCTED_RE, doc)
        source = "conducted_on"
    roles.assign("issue_date", value, source)


def expiry_date_rule(doc, flags, dates, roles):
    roles.assign("expiry_date", _labeled(_EXPIRY_RE, doc), "expiry_label")
    if _NO_EXPIRY_RE.search(doc.upper):
        roles.assign("expiry_date", NO_EXPIRY, "no_expiry")


def earliest_birth_date_rule(doc, flags, dates, roles):
    if flags.is_certification or roles.date_of_birth or not dates:
        return
    roles.assign("date_of_birth", min(dates), "earliest_date")


def positional_rule(doc, flags, dates, roles):
    """Spread unassigned dates over issue/expiry when no label placed either.

    A single leftover date goes to expiry, except on certifications where it is
    taken as the issue date. This is a heuristic from observed layouts, not a
    property of the documents themselves.
    """
    if roles.issue_date or roles.expiry_date:
        return
    taken = roles.assigned_values()
    remaining = sorted({d for d in dates if d not in taken})
    if len(remaining) >= 2:
        roles.assign("issue_date", remaining[0], "earliest_unassigned")
        roles.assign("expiry_date", remaining[-1], "latest_unassigned")
    elif len(remaining) == 1:
        role = "issue_date" if flags.is_certification else "expiry_date"
        roles.assign(role, remaining[0], "single_unassigned")


DATE_RULES = (
    course_date_rule,
    birth_date_rule,
    issue_date_rule,
    expiry_date_rule,
    earliest_birth_date_rule,
    positional_rule,
)


def collect_dates(doc: NormalizedText) -> List[str]:
    """Every date on the capture, in document order."""
    return [iso for _, iso in find_all_dates(doc.upper)]


def assign_date_roles(doc: NormalizedText, flags) -> DateRoles:
    roles = DateRoles()
    dates = collect_dates(doc)
    for rule in DATE_RULES:
        rule(doc, flags, dates, roles)
    return roles

"""
Configuration for document types, keyword vocabularies and runtime settings
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Accepted values for the caller-supplied document type hint
DOCUMENT_TYPE_HINTS = {
    "auto": "Auto-detect",
    "work_permit": "Work Permit / Identity Card",
    "certification": "Training Certification",
}

# Keyword phrases that switch on each document flag (matched on upper-cased text)
DOCUMENT_KEYWORDS = {
    "work_permit": (
        "WORK PERMIT",
        "EMPLOYMENT OF FOREIGN MANPOWER",
        "WORK PASS",
    ),
    "identity_card": (
        "IDENTITY CARD",
        "REPUBLIC OF SINGAPORE",
        "NRIC NO",
        "COUNTRY/PLACE OF BIRTH",
    ),
    "certification": (
        "CERTIFICATE",
        "CERTIFICATION",
        "TRAINING",
        "COURSE DATE",
        "COURSE VENUE",
        "COURSE TITLE",
        "SERIAL NUMBER",
        "VALIDITY",
        "THIS IS TO CERTIFY",
        "ACCREDITED TRAINING PROVIDER",
    ),
}

# FIN / NRIC: S, T (citizens) or F, G, M (foreigners) + 7 digits + check letter
IDENTIFIER_PREFIXES = "STFGM"
IDENTIFIER_PATTERN = r"[%s]\d{7}[A-Z]" % IDENTIFIER_PREFIXES

NO_EXPIRY = "No Expiry"

MONTHS = {
    "JAN": 1, "JANUARY": 1,
    "FEB": 2, "FEBRUARY": 2,
    "MAR": 3, "MARCH": 3,
    "APR": 4, "APRIL": 4,
    "MAY": 5,
    "JUN": 6, "JUNE": 6,
    "JUL": 7, "JULY": 7,
    "AUG": 8, "AUGUST": 8,
    "SEP": 9, "SEPT": 9, "SEPTEMBER": 9,
    "OCT": 10, "OCTOBER": 10,
    "NOV": 11, "NOVEMBER": 11,
    "DEC": 12, "DECEMBER": 12,
}

# Order matters: longer forms before their prefixes
KNOWN_NATIONALITIES = (
    "INDIAN", "INDIA", "BANGLADESHI", "BANGLADESH", "CHINESE", "CHINA", "PRC",
    "NEPALESE", "NEPAL", "VIETNAMESE", "VIETNAM", "THAI", "THAILAND",
    "MYANMAR", "BURMESE", "FILIPINO", "PHILIPPINES", "INDONESIAN", "INDONESIA",
    "SRI LANKAN", "SRI LANKA", "MALAYSIAN", "MALAYSIA", "PAKISTANI", "PAKISTAN",
    "SINGAPOREAN", "SINGAPORE CITIZEN",
)

KNOWN_RACES = (
    "CHINESE", "MALAY", "INDIAN", "EURASIAN", "JAVANESE", "BOYANESE",
    "SIKH", "TAMIL", "FILIPINO", "CAUCASIAN",
)

KNOWN_SECTORS = (
    "CONSTRUCTION", "MARINE SHIPYARD", "MARINE", "MANUFACTURING", "PROCESS",
    "SERVICES", "DOMESTIC",
)

# Line prefixes that mark another field's label, not a value
FIELD_LABELS = (
    "NAME", "FIN", "ID NO", "NRIC", "IDENTITY CARD", "WORK PERMIT", "WP NO",
    "PERMIT NO", "SECTOR", "DOB", "DATE", "SEX", "GENDER", "RACE", "EMPLOYER",
    "NATIONALITY", "OCCUPATION", "ADDRESS", "COUNTRY", "PLACE OF BIRTH",
    "EXPIRY", "ISSUE", "VALID", "BLOOD GROUP",
)

COMPANY_MARKERS = frozenset({"PTE", "LTD", "SDN", "BHD", "CORP", "INC", "COMPANY", "LLP", "LIMITED"})

# Words that rule a line out as a person's name
NON_NAME_WORDS = frozenset({
    "CERTIFICATE", "CERTIFICATION", "CERTIFY", "COURSE", "TRAINING", "PROVIDER",
    "ACADEMY", "INSTITUTE", "CENTRE", "CENTER", "COLLEGE", "SCHOOL", "UNIVERSITY",
    "MINISTRY", "REPUBLIC", "SINGAPORE", "ACCREDITED", "SAFETY", "PTE", "LTD",
    "COMPLETED", "ATTENDED", "SUCCESSFULLY", "AWARDED", "VALIDITY", "VENUE",
    "PARTICIPATION", "ACHIEVEMENT", "COMPLETION", "PERMIT", "IDENTITY", "CARD",
    "DIRECTOR", "PRINCIPAL", "TRAINER", "MANAGER", "DIVISION", "SIGNATURE",
})

NARRATIVE_FILLER = frozenset({"THAT", "HAS", "HAVE", "WHO", "IS", "THE", "OF", "MR", "MS", "MRS", "MDM"})

COURSE_KEYWORDS = (
    "COURSE", "CERTIFICATE", "CERTIFICATION", "TRAINING",
    "SAFETY", "RESCUE", "WELDING", "RIGGING", "SCAFFOLD",
    "ELECTRICAL", "PLUMBING", "CRANE", "FORKLIFT", "HEIGHT",
    "CORETRADE", "MULTI-SKILL", "SEC(K)", "FIRST AID", "SUPERVISOR",
    "CONFINED SPACE", "LIFTING",
)

INSTITUTION_KEYWORDS = (
    "ACADEMY", "INSTITUTE", "COLLEGE", "SCHOOL", "UNIVERSITY", "POLYTECHNIC",
    "TRAINING CENTRE", "TRAINING CENTER", "CENTRE", "CENTER",
)

ADDRESS_KEYWORDS = (
    "BLK", "BLOCK", "STREET", "ST", "AVENUE", "AVE", "ROAD", "RD", "DRIVE",
    "CRESCENT", "LANE", "LORONG", "JALAN", "TERRACE",
)

# Runtime settings
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./workpass.db")
OCR_LANGUAGES = [lang.strip() for lang in os.getenv("OCR_LANGUAGES", "en").split(",") if lang.strip()]
OCR_USE_GPU = os.getenv("OCR_USE_GPU", "false").lower() in ("1", "true", "yes")
MAX_BATCH_IMAGES = int(os.getenv("MAX_BATCH_IMAGES", "4"))

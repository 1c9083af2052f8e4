"""
Fixed-shape record produced for each capture
"""
from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional


def clean_value(value) -> Optional[str]:
    """Non-empty trimmed string, or None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass
class ExtractedRecord:
    """Structured fields of a work permit, identity card or certificate.

    Every field is optional; ``None`` means "not found".
    """
    fin_number: Optional[str] = None
    work_permit_no: Optional[str] = None
    worker_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    nationality: Optional[str] = None
    sex: Optional[str] = None
    race: Optional[str] = None
    address: Optional[str] = None
    country_of_birth: Optional[str] = None
    employer_name: Optional[str] = None
    sector: Optional[str] = None
    course_title: Optional[str] = None
    course_provider: Optional[str] = None
    cert_serial_no: Optional[str] = None
    course_duration: Optional[str] = None
    issue_date: Optional[str] = None
    expiry_date: Optional[str] = None
    wp_expiry_date: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            setattr(self, f.name, clean_value(getattr(self, f.name)))

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Dict) -> "ExtractedRecord":
        """Build from a mapping, ignoring keys that are not record fields."""
        data = data or {}
        return cls(**{name: data.get(name) for name in cls.field_names()})

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)

    def found_fields(self):
        return [name for name, value in self.to_dict().items() if value is not None]

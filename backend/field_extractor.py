"""
Field extraction pipeline

raw text -> normalize -> classify -> identifier / name / attributes / dates /
certification -> ExtractedRecord

Every extractor reads the same normalized lines and the flags computed once
here. Nothing in this pipeline raises for content: a field that can't be
found is left as None.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from attribute_extractors import extract_attributes
from certification_extractor import extract_certification
from config import NO_EXPIRY
from date_roles import assign_date_roles
from document_classifier import DocumentClassifier, DocumentFlags
from extracted_record import ExtractedRecord
from identifier_extractor import extract_identifier, extract_work_permit_no
from name_extractor import extract_name
from text_normalizer import normalize_text

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    record: ExtractedRecord
    flags: DocumentFlags


class FieldExtractor:
    """Turns the raw text of one capture into an ExtractedRecord."""

    def __init__(self, classifier: Optional[DocumentClassifier] = None):
        self.classifier = classifier or DocumentClassifier()

    def extract(self, raw_text, document_type: Optional[str] = "auto") -> ExtractionResult:
        """
        Extract structured fields from OCR text.

        Args:
            raw_text: Text of one image, lines in reading order
            document_type: ``auto``, ``work_permit`` or ``certification``

        Returns:
            ExtractionResult with the record and the flags that shaped it
        """
        doc = normalize_text(raw_text)
        flags = self.classifier.classify(doc.upper, document_type)
        if doc.is_empty:
            logger.info("No text to extract from (requested %s)", document_type)
            return ExtractionResult(record=ExtractedRecord(), flags=flags)

        fin_number, seeded_name = extract_identifier(doc, flags)
        # A name read off "NAME (FIN)" is already settled; the cascade can't override it
        worker_name = seeded_name or extract_name(doc, flags)

        roles = assign_date_roles(doc, flags)
        wp_expiry_date = None
        if flags.is_work_permit and roles.expiry_date and roles.expiry_date != NO_EXPIRY:
            wp_expiry_date = roles.expiry_date

        record = ExtractedRecord(
            fin_number=fin_number,
            work_permit_no=extract_work_permit_no(doc, flags),
            worker_name=worker_name,
            date_of_birth=roles.date_of_birth,
            issue_date=roles.issue_date,
            expiry_date=roles.expiry_date,
            wp_expiry_date=wp_expiry_date,
            **extract_attributes(doc, flags),
            **extract_certification(doc, flags),
        )

        logger.info(
            "Extracted %d field(s) from %d line(s) (flags=%s)",
            len(record.found_fields()), len(doc), flags.as_dict(),
        )
        return ExtractionResult(record=record, flags=flags)


_default_extractor = FieldExtractor()


def extract_record(raw_text, document_type: Optional[str] = "auto") -> ExtractedRecord:
    """Shortcut for ``FieldExtractor().extract(...).record``."""
    return _default_extractor.extract(raw_text, document_type).record

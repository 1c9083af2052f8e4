"""
Document Type Classifier
Flags which known layout families a capture resembles, using keyword matching.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from config import DOCUMENT_KEYWORDS, DOCUMENT_TYPE_HINTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentFlags:
    """Independent layout flags; a capture may carry several at once."""
    hint: str = "auto"
    is_work_permit: bool = False
    is_identity_card: bool = False
    is_certification: bool = False

    def as_dict(self) -> Dict[str, bool]:
        return {
            "is_work_permit": self.is_work_permit,
            "is_identity_card": self.is_identity_card,
            "is_certification": self.is_certification,
        }


def normalize_hint(document_type: Optional[str]) -> str:
    """Map a caller hint onto ``auto | work_permit | certification``."""
    if not isinstance(document_type, str):
        return "auto"
    hint = document_type.strip().lower().replace("-", "_").replace(" ", "_")
    return hint if hint in DOCUMENT_TYPE_HINTS else "auto"


class DocumentClassifier:
    """Classify OCR text into work permit / identity card / certification flags."""

    def __init__(self, keywords: Optional[Dict[str, Sequence[str]]] = None):
        self.keywords = keywords or DOCUMENT_KEYWORDS

    def _matches(self, text_upper: str, flag: str) -> bool:
        return any(keyword in text_upper for keyword in self.keywords.get(flag, ()))

    def classify(self, text_upper: str, document_type: Optional[str] = "auto") -> DocumentFlags:
        """
        Compute document flags.

        Args:
            text_upper: Upper-cased OCR text of one capture
            document_type: Caller hint; anything but ``auto`` forces its flag on

        Returns:
            DocumentFlags; all flags off with hint ``auto`` when there is no text
        """
        if not isinstance(text_upper, str) or not text_upper.strip():
            logger.debug("No text to classify, ignoring hint %r", document_type)
            return DocumentFlags()

        hint = normalize_hint(document_type)

        flags = DocumentFlags(
            hint=hint,
            is_work_permit=hint == "work_permit" or self._matches(text_upper, "work_permit"),
            is_identity_card=self._matches(text_upper, "identity_card"),
            is_certification=hint == "certification" or self._matches(text_upper, "certification"),
        )

        logger.debug("Classified capture (hint=%s): %s", hint, flags.as_dict())
        return flags

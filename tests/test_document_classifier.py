"""
Tests for document flag classification.
"""
import pytest

from document_classifier import DocumentClassifier, DocumentFlags, normalize_hint


class TestNormalizeHint:

    def test_known_hints(self):
        assert normalize_hint("work_permit") == "work_permit"
        assert normalize_hint("Certification") == "certification"
        assert normalize_hint("work-permit") == "work_permit"

    def test_unknown_or_missing_hint_is_auto(self):
        assert normalize_hint("passport") == "auto"
        assert normalize_hint(None) == "auto"
        assert normalize_hint(42) == "auto"


class TestClassify:
    """Keyword flags are independent; a hint forces its flag on."""

    def setup_method(self):
        self.classifier = DocumentClassifier()

    def test_work_permit_keywords(self):
        flags = self.classifier.classify("MINISTRY OF MANPOWER\nWORK PERMIT")
        assert flags.is_work_permit
        assert not flags.is_identity_card
        assert not flags.is_certification

    def test_identity_card_keywords(self):
        flags = self.classifier.classify("REPUBLIC OF SINGAPORE\nIDENTITY CARD NO. S1234567D")
        assert flags.is_identity_card
        assert not flags.is_work_permit

    def test_certification_keywords(self):
        flags = self.classifier.classify("THIS IS TO CERTIFY THAT\nCOURSE DATE: 13/02/2022")
        assert flags.is_certification

    def test_flags_can_combine(self):
        flags = self.classifier.classify("WORK PERMIT\nSAFETY TRAINING CERTIFICATE")
        assert flags.is_work_permit and flags.is_certification

    def test_no_keywords(self):
        flags = self.classifier.classify("JOHN TAN\nG1234567A")
        assert flags.as_dict() == {
            "is_work_permit": False,
            "is_identity_card": False,
            "is_certification": False,
        }
        assert flags.hint == "auto"

    def test_hint_forces_flag(self):
        assert self.classifier.classify("JOHN TAN", "certification").is_certification
        assert self.classifier.classify("JOHN TAN", "work_permit").is_work_permit

    @pytest.mark.parametrize("text", [None, "", "  \n "])
    def test_no_text_ignores_hint(self, text):
        flags = self.classifier.classify(text, "work_permit")
        assert flags == DocumentFlags()
        assert flags.hint == "auto"
        assert not flags.is_work_permit

    def test_custom_keywords(self):
        classifier = DocumentClassifier(keywords={"certification": ("DIPLOMA",)})
        assert classifier.classify("DIPLOMA IN WELDING").is_certification
        assert not classifier.classify("WORK PERMIT").is_work_permit

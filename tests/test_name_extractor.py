"""
Tests for holder name extraction.
"""
from name_extractor import (
    certified_name,
    extract_name,
    inline_name,
    labeled_name,
    name_above_identifier,
    name_above_label,
)


class TestLabeledName:

    def test_value_on_next_line(self, doc, flags):
        assert labeled_name(doc("NAME\nJOHN TAN"), flags()) == "JOHN TAN"

    def test_value_on_same_line(self, doc, flags):
        assert labeled_name(doc("Name: Rahman Mohammed"), flags()) == "RAHMAN MOHAMMED"

    def test_skips_identifier_line(self, doc, flags):
        assert labeled_name(doc("NAME\nG1234567A\nJOHN TAN"), flags()) == "JOHN TAN"

    def test_stops_at_another_label(self, doc, flags):
        assert labeled_name(doc("NAME\nNATIONALITY: INDIAN\nJOHN TAN"), flags()) is None

    def test_rejects_company(self, doc, flags):
        assert labeled_name(doc("NAME\nABC TRADING PTE LTD"), flags()) is None

    def test_single_long_word_is_a_name(self, doc, flags):
        assert labeled_name(doc("NAME: SUBRAMANIAM"), flags()) == "SUBRAMANIAM"

    def test_short_single_word_is_not(self, doc, flags):
        assert extract_name(doc("NAME: ALI"), flags()) is None


class TestInlineName:

    def test_skips_other_name_labels(self, doc, flags):
        text = doc("EMPLOYER NAME: ABC PTE LTD\nWORKER NAME: RAJ KUMAR")
        assert inline_name(text, flags()) == "RAJ KUMAR"


class TestCertificateNames:
    """Layouts without a NAME label."""

    def test_name_above_identifier(self, doc, flags):
        text = doc("SAFETY COURSE CERTIFICATE\nJOHN TAN\nG1234567A")
        assert name_above_identifier(text, flags(certification=True)) == "JOHN TAN"

    def test_name_above_identifier_needs_certification(self, doc, flags):
        text = doc("SAFETY COURSE CERTIFICATE\nJOHN TAN\nG1234567A")
        assert name_above_identifier(text, flags()) is None

    def test_name_above_identifier_skips_when_labeled(self, doc, flags):
        text = doc("NAME\nPETER LIM\nJOHN TAN\nG1234567A")
        assert name_above_identifier(text, flags(certification=True)) is None

    def test_certify_narrative_same_line(self, doc, flags):
        text = doc("This is to certify that Mr. John Tan")
        assert certified_name(text, flags(certification=True)) == "JOHN TAN"

    def test_certify_narrative_next_line(self, doc, flags):
        text = doc("THIS IS TO CERTIFY THAT\nMARY LIM\nhas successfully completed")
        assert extract_name(text, flags(certification=True)) == "MARY LIM"


class TestNameAboveLabel:

    def test_value_printed_above_label(self, doc, flags):
        assert name_above_label(doc("JOHN TAN\nNAME"), flags()) == "JOHN TAN"
        assert extract_name(doc("JOHN TAN\nNAME"), flags()) == "JOHN TAN"

    def test_label_on_first_line(self, doc, flags):
        assert name_above_label(doc("NAME\nJOHN TAN"), flags()) is None


class TestCascadeOrder:

    def test_label_beats_narrative(self, doc, flags):
        text = doc("THIS IS TO CERTIFY THAT\nMARY LIM\nNAME: JOHN TAN")
        assert extract_name(text, flags(certification=True)) == "JOHN TAN"

    def test_nothing_found(self, doc, flags):
        assert extract_name(doc(""), flags()) is None
        assert extract_name(doc("12345\n67890"), flags()) is None

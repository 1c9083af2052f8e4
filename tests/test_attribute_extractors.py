"""
Tests for label-scan-with-fallback attribute extraction.
"""
from attribute_extractors import (
    address_block,
    extract_attributes,
    labeled_address,
    labeled_employer,
    scan_vocabulary,
)


class TestEmployer:

    def test_label_same_line_trims_following_label(self, doc, flags):
        text = doc("EMPLOYER: ABC PTE LTD   SECTOR: MARINE")
        assert labeled_employer(text, flags()) == "ABC PTE LTD"

    def test_hyphenated_word_is_not_a_label(self, doc, flags):
        text = doc("EMPLOYER: SUNRISE DATE-PALM TRADING PTE LTD")
        assert labeled_employer(text, flags()) == "SUNRISE DATE-PALM TRADING PTE LTD"

    def test_label_followed_by_spaced_dash_is_trimmed(self, doc, flags):
        text = doc("NATIONALITY: INDIAN   DATE OF BIRTH - 01/01/1990")
        assert extract_attributes(text, flags())["nationality"] == "INDIAN"

    def test_label_next_line(self, doc, flags):
        text = doc("EMPLOYER\nGOLDEN BUILDERS")
        assert extract_attributes(text, flags())["employer_name"] == "GOLDEN BUILDERS"

    def test_company_suffix_fallback(self, doc, flags):
        text = doc("JOHN TAN\nSunrise Marine Pte Ltd")
        assert extract_attributes(text, flags())["employer_name"] == "SUNRISE MARINE PTE LTD"


class TestNationality:

    def test_label(self, doc, flags):
        assert extract_attributes(doc("NATIONALITY: BANGLADESHI"), flags())["nationality"] == "BANGLADESHI"

    def test_vocabulary_fallback(self, doc, flags):
        assert extract_attributes(doc("JOHN TAN\nMYANMAR"), flags())["nationality"] == "MYANMAR"

    def test_vocabulary_needs_whole_word(self):
        assert scan_vocabulary("THAILANDER", ("THAI",)) is None
        assert scan_vocabulary("FROM THAI LAND", ("THAI",)) == "THAI"


class TestSex:

    def test_letter(self, doc, flags):
        assert extract_attributes(doc("SEX: F"), flags())["sex"] == "F"

    def test_full_word_across_lines(self, doc, flags):
        assert extract_attributes(doc("GENDER\nMALE"), flags())["sex"] == "M"

    def test_standalone_word(self, doc, flags):
        assert extract_attributes(doc("JOHN TAN\nFEMALE"), flags())["sex"] == "F"


class TestRace:

    def test_label_next_line(self, doc, flags):
        assert extract_attributes(doc("RACE\nMALAY"), flags())["race"] == "MALAY"

    def test_vocabulary_only_on_identity_cards(self, doc, flags):
        text = doc("JOHN TAN\nINDIAN")
        assert extract_attributes(text, flags())["race"] is None
        assert extract_attributes(text, flags())["nationality"] == "INDIAN"
        assert extract_attributes(text, flags(identity_card=True))["race"] == "INDIAN"

    def test_race_value_is_not_read_as_nationality(self, doc, flags):
        text = doc("IDENTITY CARD NO. S1234567D\nRace\nCHINESE")
        fields = extract_attributes(text, flags(identity_card=True))
        assert fields["race"] == "CHINESE"
        assert fields["nationality"] is None


class TestAddress:

    def test_labeled_with_continuation_lines(self, doc, flags):
        text = doc("ADDRESS\nBLK 123 ANG MO KIO AVE 3\n#05-67\nSINGAPORE 560123\nRACE: CHINESE")
        assert labeled_address(text, flags(identity_card=True)) == (
            "BLK 123 ANG MO KIO AVE 3 #05-67 SINGAPORE 560123"
        )

    def test_block_without_label(self, doc, flags):
        text = doc("TAN AH KOW\nBLK 45 JURONG WEST STREET 41\n#12-345\nSINGAPORE 640045")
        assert address_block(text, flags(identity_card=True)) == (
            "BLK 45 JURONG WEST STREET 41 #12-345 SINGAPORE 640045"
        )

    def test_only_on_identity_cards(self, doc, flags):
        text = doc("ADDRESS\nBLK 123 ANG MO KIO AVE 3")
        assert extract_attributes(text, flags(work_permit=True))["address"] is None


class TestCountryOfBirth:

    def test_combined_label(self, doc, flags):
        text = doc("COUNTRY/PLACE OF BIRTH\nSINGAPORE")
        assert extract_attributes(text, flags())["country_of_birth"] == "SINGAPORE"

    def test_place_of_birth_same_line(self, doc, flags):
        text = doc("PLACE OF BIRTH: DHAKA")
        assert extract_attributes(text, flags())["country_of_birth"] == "DHAKA"


class TestSector:

    def test_label_same_line(self, doc, flags):
        assert extract_attributes(doc("SECTOR: CONSTRUCTION"), flags(work_permit=True))["sector"] == "CONSTRUCTION"

    def test_label_next_line(self, doc, flags):
        text = doc("SECTOR\nMARINE SHIPYARD")
        assert extract_attributes(text, flags(work_permit=True))["sector"] == "MARINE SHIPYARD"

    def test_only_on_work_permits(self, doc, flags):
        assert extract_attributes(doc("SECTOR: CONSTRUCTION"), flags())["sector"] is None


class TestAllFields:

    def test_keys_always_present(self, doc, flags):
        assert set(extract_attributes(doc(""), flags())) == {
            "employer_name", "nationality", "sex", "race", "address", "country_of_birth", "sector",
        }

"""
Pytest fixtures and configuration for the extraction engine and API tests.
Provides sample captures, flag helpers, an in-memory database and a fake OCR service.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from document_classifier import DocumentFlags
from field_extractor import FieldExtractor
from models import Base
from ocr_service import OCRService, RecognitionError
from text_normalizer import normalize_text


WORK_PERMIT_TEXT = """
WORK PERMIT
Employer: ABC CONSTRUCTION PTE LTD
Name: RAHMAN MOHAMMED
Work Permit No: 0 34773262
FIN: G6550858W
Sex: M
Nationality: BANGLADESHI
Date of Birth: 16-06-1988
Date of Expiry: 15/03/2026
Sector: CONSTRUCTION
"""

IDENTITY_CARD_TEXT = """
IDENTITY CARD NO. S1234567D
Name
TAN AH KOW
Race
CHINESE
Date of birth
01-02-1975
Sex
M
Country/Place of birth
SINGAPORE
Address
BLK 123 ANG MO KIO AVE 3
#05-67
SINGAPORE 560123
"""

CERTIFICATE_TEXT = """
Avanta
Global
An Accredited Training Provider
THIS IS TO CERTIFY THAT
JOHN TAN
G1234567A
has successfully completed the
Work-At-Height Rescue Course (WAHRC)
Course Date: 13/02/2022
Duration: 16 Hours
Validity: No Expiry
S/N WAHRC-2025-B134P-659
"""

# Text the fake OCR service "recognizes" for each uploaded payload
FAKE_PAGES = {
    b"front": "NAME\nJOHN TAN\nWORK PERMIT NO\n0 34773262\nFIN G1234567A",
    b"back": "EMPLOYER: ABC MARINE PTE LTD\nNAME: SOMEONE ELSE\nDATE OF BIRTH: 02/03/1985\nDATE OF EXPIRY: 01/12/2026",
    b"blank": "",
}


def make_flags(work_permit=False, identity_card=False, certification=False, hint="auto"):
    return DocumentFlags(
        hint=hint,
        is_work_permit=work_permit,
        is_identity_card=identity_card,
        is_certification=certification,
    )


class FakeOCRService(OCRService):
    """OCR service whose recognition step is a lookup table"""

    def extract_text_from_image(self, image_bytes):
        if image_bytes == b"broken":
            raise RecognitionError("model crashed")
        return FAKE_PAGES.get(image_bytes, ""), 91.5


@pytest.fixture
def doc():
    """Normalize a raw string into lines."""
    return normalize_text


@pytest.fixture
def flags():
    """Build DocumentFlags by keyword."""
    return make_flags


@pytest.fixture
def extractor():
    return FieldExtractor()


@pytest.fixture
def db_session():
    """In-memory SQLite session shared across threads for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """TestClient with the database and OCR service overridden."""
    from database import get_db
    from main import app, get_ocr_service

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ocr_service] = lambda: FakeOCRService()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

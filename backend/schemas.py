"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict
from datetime import datetime


class DocumentTypeResponse(BaseModel):
    """Response model for document type hints"""
    key: str = Field(..., description="Hint value to send as document_type")
    name: str = Field(..., description="Human-readable document name")

    class Config:
        from_attributes = True


class ExtractedRecordSchema(BaseModel):
    """Structured fields read from one or more images; null means not found"""
    fin_number: Optional[str] = Field(None, description="FIN / NRIC identifier")
    work_permit_no: Optional[str] = Field(None, description="Work permit number (8-9 digits)")
    worker_name: Optional[str] = Field(None, description="Holder's full name")
    date_of_birth: Optional[str] = Field(None, description="Date of birth (YYYY-MM-DD)")
    nationality: Optional[str] = Field(None, description="Nationality")
    sex: Optional[str] = Field(None, description="M or F")
    race: Optional[str] = Field(None, description="Race (identity cards)")
    address: Optional[str] = Field(None, description="Residential address (identity cards)")
    country_of_birth: Optional[str] = Field(None, description="Country / place of birth")
    employer_name: Optional[str] = Field(None, description="Employer")
    sector: Optional[str] = Field(None, description="Work permit sector")
    course_title: Optional[str] = Field(None, description="Course title (certificates)")
    course_provider: Optional[str] = Field(None, description="Training provider (certificates)")
    cert_serial_no: Optional[str] = Field(None, description="Certificate serial number")
    course_duration: Optional[str] = Field(None, description="Course duration")
    issue_date: Optional[str] = Field(None, description="Issue / course date (YYYY-MM-DD)")
    expiry_date: Optional[str] = Field(None, description="Expiry date (YYYY-MM-DD) or 'No Expiry'")
    wp_expiry_date: Optional[str] = Field(None, description="Work permit expiry date (YYYY-MM-DD)")

    class Config:
        from_attributes = True


class ParseRequest(BaseModel):
    """Already-recognized text to run through field extraction"""
    text: str = Field("", description="Raw OCR text, one line per recognized line")
    document_type: str = Field("auto", description="auto, work_permit or certification")


class MergeRequest(BaseModel):
    """Per-image records of one submission, front image first"""
    records: List[ExtractedRecordSchema] = Field(..., description="Records in priority order")


class OCRResultResponse(BaseModel):
    """Extraction result for one image or text"""
    success: bool = Field(..., description="Whether the request was handled")
    raw_text: str = Field("", description="Recognized text")
    extracted: ExtractedRecordSchema = Field(..., description="Extracted fields")
    document_type: str = Field(..., description="Document type hint that was applied")
    flags: Dict[str, bool] = Field(default_factory=dict, description="Detected layout flags")
    confidence: Optional[float] = Field(None, description="Average recognition confidence (0-100)")
    filename: Optional[str] = Field(None, description="Uploaded file name")
    message: Optional[str] = Field(None, description="Status message")


class BatchOCRResponse(BaseModel):
    """Per-image results plus the merged record"""
    success: bool = Field(..., description="Whether the request was handled")
    document_type: str = Field(..., description="Document type hint that was applied")
    results: List[OCRResultResponse] = Field(..., description="Results in upload order")
    merged: ExtractedRecordSchema = Field(..., description="First non-empty value per field")


class MergeResponse(BaseModel):
    success: bool = Field(..., description="Whether the request was handled")
    merged: ExtractedRecordSchema = Field(..., description="First non-empty value per field")


class WorkerCreate(BaseModel):
    """Worker details to create or update, keyed by FIN"""
    fin_number: Optional[str] = Field(None, description="FIN / NRIC (required)")
    worker_name: Optional[str] = Field(None, description="Full name (required)")
    date_of_birth: Optional[str] = Field(None, description="Date of birth (YYYY-MM-DD)")
    nationality: Optional[str] = None
    sex: Optional[str] = None
    race: Optional[str] = None
    address: Optional[str] = None
    country_of_birth: Optional[str] = None
    employer_name: Optional[str] = None
    work_permit_no: Optional[str] = None
    sector: Optional[str] = None
    wp_expiry_date: Optional[str] = None


class CertificationCreate(BaseModel):
    """Certification to attach to a worker given by FIN or id"""
    fin_number: Optional[str] = Field(None, description="Worker FIN / NRIC")
    worker_id: Optional[int] = Field(None, description="Worker id, used when no FIN is given")
    course_title: Optional[str] = Field(None, description="Course title (required)")
    course_provider: Optional[str] = None
    cert_serial_no: Optional[str] = None
    course_duration: Optional[str] = None
    issue_date: Optional[str] = None
    expiry_date: Optional[str] = None


class CertificationResponse(BaseModel):
    """Response model for a stored certification"""
    id: int = Field(..., description="Certification identifier")
    worker_id: int = Field(..., description="Owning worker")
    course_title: str = Field(..., description="Course title")
    course_provider: Optional[str] = None
    cert_serial_no: Optional[str] = None
    course_duration: Optional[str] = None
    issue_date: Optional[str] = None
    expiry_date: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkerResponse(BaseModel):
    """Response model for a stored worker"""
    id: int = Field(..., description="Worker identifier")
    fin_number: str = Field(..., description="FIN / NRIC, upper-cased")
    worker_name: str = Field(..., description="Full name")
    date_of_birth: Optional[str] = None
    nationality: Optional[str] = None
    sex: Optional[str] = None
    race: Optional[str] = None
    address: Optional[str] = None
    country_of_birth: Optional[str] = None
    employer_name: Optional[str] = None
    work_permit_no: Optional[str] = None
    sector: Optional[str] = None
    wp_expiry_date: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    certifications: List[CertificationResponse] = Field(
        default_factory=list,
        description="Certifications held"
    )

    class Config:
        from_attributes = True


class ErrorResponse(BaseModel):
    """Standard error response model"""
    detail: str = Field(..., description="Error message")

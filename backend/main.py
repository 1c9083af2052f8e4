"""
FastAPI application - Work pass & certification OCR extraction
"""
from fastapi import FastAPI, UploadFile, File, Form, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from typing import List
from contextlib import asynccontextmanager
import logging
import os

from dotenv import load_dotenv

from config import DOCUMENT_TYPE_HINTS, MAX_BATCH_IMAGES
from crud import create_certification, get_worker, get_worker_by_fin, normalize_fin, upsert_worker
from database import get_db, init_db
from document_classifier import normalize_hint
from extracted_record import ExtractedRecord
from field_extractor import FieldExtractor
from ocr_service import OCRService, RecognitionError
from record_merger import merge_records
from schemas import (
    BatchOCRResponse, CertificationCreate, CertificationResponse, DocumentTypeResponse,
    ErrorResponse, ExtractedRecordSchema, MergeRequest, MergeResponse, OCRResultResponse,
    ParseRequest, WorkerCreate, WorkerResponse
)

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "webp", "bmp", "tif", "tiff"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    # Startup
    init_db()
    print("✅ Database initialized")
    print("✅ Field extractor ready (EasyOCR loads on first image)")
    yield


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="WorkPass OCR Extraction API",
    description="API for extracting worker and certification details from work permits, "
                "identity cards and training certificates",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware - Allow frontend from different ports
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

field_extractor = FieldExtractor()
_ocr_service = None


def get_ocr_service() -> OCRService:
    """Shared OCR service; the EasyOCR model itself loads lazily"""
    global _ocr_service
    if _ocr_service is None:
        _ocr_service = OCRService(extractor=field_extractor)
    return _ocr_service


def _record_schema(record: ExtractedRecord) -> ExtractedRecordSchema:
    return ExtractedRecordSchema(**record.to_dict())


def _is_image_upload(file: UploadFile) -> bool:
    if file.content_type and file.content_type.startswith("image/"):
        return True
    ext = os.path.splitext(file.filename or "")[1].lstrip(".").lower()
    return ext in IMAGE_EXTENSIONS


async def _recognize(ocr_service: OCRService, file: UploadFile, document_type: str) -> OCRResultResponse:
    """Read one upload through OCR and extraction, mapping failures to HTTP errors"""
    if not _is_image_upload(file):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type for {file.filename}. Allowed: {', '.join(sorted(IMAGE_EXTENSIONS))}"
        )

    image_bytes = await file.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail=f"Empty file: {file.filename}")

    try:
        result = await run_in_threadpool(ocr_service.process_image, image_bytes, document_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecognitionError as e:
        logger.error("Recognition failed for %s: %s", file.filename, e)
        raise HTTPException(status_code=502, detail=f"Text recognition failed: {e}")

    message = None if result["raw_text"] else "No text detected in image"
    return OCRResultResponse(
        success=True,
        raw_text=result["raw_text"],
        extracted=_record_schema(result["extracted"]),
        document_type=result["document_type"],
        flags=result["flags"],
        confidence=result["confidence"],
        filename=file.filename,
        message=message,
    )


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "WorkPass OCR Extraction API is running",
        "version": "1.0.0"
    }


@app.get("/api/document-types", response_model=List[DocumentTypeResponse])
async def get_document_types():
    """Document type hints accepted by the OCR endpoints"""
    return [DocumentTypeResponse(key=key, name=name) for key, name in DOCUMENT_TYPE_HINTS.items()]


@app.post("/api/ocr/parse", response_model=OCRResultResponse)
async def parse_text(request: ParseRequest):
    """
    Extract fields from text that was already recognized elsewhere
    """
    document_type = normalize_hint(request.document_type)
    result = field_extractor.extract(request.text, document_type)
    return OCRResultResponse(
        success=True,
        raw_text=request.text,
        extracted=_record_schema(result.record),
        document_type=result.flags.hint,
        flags=result.flags.as_dict(),
    )


@app.post("/api/ocr/merge", response_model=MergeResponse)
async def merge(request: MergeRequest):
    """
    Merge per-image records; the first non-empty value per field wins,
    so send the front image's record before the back's
    """
    merged = merge_records(record.model_dump() for record in request.records)
    return MergeResponse(success=True, merged=_record_schema(merged))


@app.post(
    "/api/ocr/process",
    response_model=OCRResultResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def process_image(
    file: UploadFile = File(...),
    document_type: str = Form("auto"),
    ocr_service: OCRService = Depends(get_ocr_service)
):
    """
    Recognize one image and extract its fields
    """
    return await _recognize(ocr_service, file, normalize_hint(document_type))


@app.post(
    "/api/ocr/process-batch",
    response_model=BatchOCRResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def process_batch(
    files: List[UploadFile] = File(...),
    document_type: str = Form("auto"),
    ocr_service: OCRService = Depends(get_ocr_service)
):
    """
    Recognize several images of one document (front first, then back)
    and merge them into one record
    """
    if not files or len(files) > MAX_BATCH_IMAGES:
        raise HTTPException(
            status_code=400,
            detail=f"Upload between 1 and {MAX_BATCH_IMAGES} images"
        )

    hint = normalize_hint(document_type)
    results = []
    # Upload order is merge priority
    for file in files:
        results.append(await _recognize(ocr_service, file, hint))

    merged = merge_records(result.extracted.model_dump() for result in results)
    return BatchOCRResponse(
        success=True,
        document_type=hint,
        results=results,
        merged=_record_schema(merged),
    )


@app.post("/api/workers", response_model=WorkerResponse, responses={400: {"model": ErrorResponse}})
async def save_worker(worker: WorkerCreate, db: Session = Depends(get_db)):
    """
    Create a worker, or update the one with the same FIN (case-insensitive)
    """
    fin = normalize_fin(worker.fin_number)
    if not fin or not (worker.worker_name or "").strip():
        raise HTTPException(status_code=400, detail="fin_number and worker_name are required")

    data = worker.model_dump(exclude={"fin_number"})
    return upsert_worker(db, fin, data)


@app.get("/api/workers/{fin_number}", response_model=WorkerResponse, responses={404: {"model": ErrorResponse}})
async def read_worker(fin_number: str, db: Session = Depends(get_db)):
    """
    Get a worker with all certifications
    """
    worker = get_worker_by_fin(db, fin_number)
    if not worker:
        raise HTTPException(status_code=404, detail="Worker not found")
    return worker


@app.post(
    "/api/certifications",
    response_model=CertificationResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def save_certification(certification: CertificationCreate, db: Session = Depends(get_db)):
    """
    Attach a certification to a worker given by FIN or worker id
    """
    if not (certification.course_title or "").strip():
        raise HTTPException(status_code=400, detail="course_title is required")

    if normalize_fin(certification.fin_number):
        worker = get_worker_by_fin(db, certification.fin_number)
    elif certification.worker_id is not None:
        worker = get_worker(db, certification.worker_id)
    else:
        raise HTTPException(status_code=400, detail="fin_number or worker_id is required")

    if not worker:
        raise HTTPException(status_code=404, detail="Worker not found")

    data = certification.model_dump(exclude={"fin_number", "worker_id"})
    return create_certification(db, worker, data)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

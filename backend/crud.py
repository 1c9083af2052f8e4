"""
Persistence operations for workers and certifications
"""
import logging
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Certification, Worker

logger = logging.getLogger(__name__)

WORKER_FIELDS = (
    "worker_name", "date_of_birth", "nationality", "sex", "race", "address",
    "country_of_birth", "employer_name", "work_permit_no", "sector", "wp_expiry_date",
)
CERTIFICATION_FIELDS = (
    "course_title", "course_provider", "cert_serial_no", "course_duration",
    "issue_date", "expiry_date",
)


def normalize_fin(fin_number: Optional[str]) -> str:
    return (fin_number or "").strip().upper()


def get_worker_by_fin(db: Session, fin_number: str) -> Optional[Worker]:
    """Case-insensitive exact match on FIN / NRIC."""
    fin = normalize_fin(fin_number)
    if not fin:
        return None
    return db.query(Worker).filter(func.upper(Worker.fin_number) == fin).first()


def get_worker(db: Session, worker_id: int) -> Optional[Worker]:
    return db.query(Worker).filter(Worker.id == worker_id).first()


def upsert_worker(db: Session, fin_number: str, data: Dict) -> Worker:
    """
    Create the worker, or update the one with the same FIN.

    On update only non-empty incoming values replace stored ones, so a back-of-card
    submission can't blank out what the front already filled in.
    """
    fin = normalize_fin(fin_number)
    worker = get_worker_by_fin(db, fin)
    created = worker is None
    if created:
        worker = Worker(fin_number=fin)
        db.add(worker)

    for name in WORKER_FIELDS:
        value = data.get(name)
        if value:
            setattr(worker, name, value)

    db.commit()
    db.refresh(worker)
    logger.info("%s worker %s", "Created" if created else "Updated", fin)
    return worker


def create_certification(db: Session, worker: Worker, data: Dict) -> Certification:
    certification = Certification(
        worker_id=worker.id,
        **{name: data.get(name) for name in CERTIFICATION_FIELDS},
    )
    db.add(certification)
    db.commit()
    db.refresh(certification)
    logger.info("Added certification %r for worker %s", certification.course_title, worker.fin_number)
    return certification

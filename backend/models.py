"""
Database models for worker identity and certification records
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()


class Worker(Base):
    """One worker, keyed by FIN / NRIC (stored upper-cased)"""
    __tablename__ = "workers"

    id = Column(Integer, primary_key=True, index=True)
    fin_number = Column(String(20), unique=True, nullable=False, index=True)
    worker_name = Column(String(255), nullable=False)
    date_of_birth = Column(String(10), nullable=True)  # YYYY-MM-DD
    nationality = Column(String(100), nullable=True)
    sex = Column(String(1), nullable=True)
    race = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    country_of_birth = Column(String(100), nullable=True)
    employer_name = Column(String(255), nullable=True)
    work_permit_no = Column(String(20), nullable=True)
    sector = Column(String(100), nullable=True)
    wp_expiry_date = Column(String(10), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship to certifications
    certifications = relationship("Certification", back_populates="worker", cascade="all, delete-orphan")


class Certification(Base):
    """Training certificate held by a worker"""
    __tablename__ = "certifications"

    id = Column(Integer, primary_key=True, index=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    course_title = Column(String(500), nullable=False)
    course_provider = Column(String(255), nullable=True)
    cert_serial_no = Column(String(100), nullable=True)
    course_duration = Column(String(100), nullable=True)
    issue_date = Column(String(10), nullable=True)
    expiry_date = Column(String(20), nullable=True)  # YYYY-MM-DD or "No Expiry"
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationship
    worker = relationship("Worker", back_populates="certifications")

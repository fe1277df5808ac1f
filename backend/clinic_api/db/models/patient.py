# clinic_api/db/models/patient.py
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, Text, DateTime, func
from clinic_api.db.base import Base
from .user import new_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PatientModel(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=new_id)
    date_of_appointment = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    name = Column(String(200), nullable=False, index=True)
    address = Column(Text)
    aadhar_no = Column(String(12), unique=True, nullable=False, index=True)
    contact_no = Column(String(15), nullable=False)
    diseases = Column(Text)
    doctor_name = Column(String(200))

    # vitals / body composition
    body_weight_kg = Column(Float)
    height_cm = Column(Float)
    hemoglobin = Column(Float)
    blood_group = Column(String(10))
    sbp = Column(Float)  # systolic blood pressure
    dbp = Column(Float)  # diastolic blood pressure
    wbc = Column(Float)
    rbc = Column(Float)
    platelet = Column(Float)
    bmi = Column(Float)  # derived from weight/height unless set explicitly
    bfr_percent = Column(Float)  # body fat rate
    body_water_percent = Column(Float)
    bone_mass_kg = Column(Float)
    metabolic_age = Column(Float)
    v_fat_percent = Column(Float)  # visceral fat
    protein_mass_kg = Column(Float)
    muscle_mass_kg = Column(Float)

    diabetes = Column(String(20), default="None")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

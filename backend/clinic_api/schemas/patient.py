# clinic_api/schemas/patient.py
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Diabetes(str, Enum):
    none = "None"
    type_1 = "Type 1"
    type_2 = "Type 2"
    gestational = "Gestational"
    pre_diabetes = "Pre-diabetes"
    other = "Other"


NUMERIC_FIELDS = (
    "body_weight_kg", "height_cm", "hemoglobin", "sbp", "dbp", "wbc", "rbc",
    "platelet", "bmi", "bfr_percent", "body_water_percent", "bone_mass_kg",
    "metabolic_age", "v_fat_percent", "protein_mass_kg", "muscle_mass_kg",
)

_wire_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    coerce_numbers_to_str=True,
    allow_inf_nan=False,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # naive datetimes are taken to be UTC already
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PatientPayload(BaseModel):
    """
    Create/update body. Types only: every field is optional here and the
    record rules are applied to the merged record by PatientRecord.
    """
    model_config = _wire_config

    date_of_appointment: Optional[datetime] = None
    name: Optional[str] = None
    address: Optional[str] = None
    aadhar_no: Optional[str] = None
    contact_no: Optional[str] = None
    diseases: Optional[str] = None
    doctor_name: Optional[str] = None
    body_weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    hemoglobin: Optional[float] = None
    blood_group: Optional[str] = None
    sbp: Optional[float] = None
    dbp: Optional[float] = None
    wbc: Optional[float] = None
    rbc: Optional[float] = None
    platelet: Optional[float] = None
    bmi: Optional[float] = None
    bfr_percent: Optional[float] = None
    body_water_percent: Optional[float] = None
    bone_mass_kg: Optional[float] = None
    metabolic_age: Optional[float] = None
    v_fat_percent: Optional[float] = None
    protein_mass_kg: Optional[float] = None
    muscle_mass_kg: Optional[float] = None
    diabetes: Optional[str] = None

    @field_validator("date_of_appointment", *NUMERIC_FIELDS, mode="before")
    @classmethod
    def _blank_is_null(cls, value: Any) -> Any:
        # HTML forms post "" for an empty number/date input
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("date_of_appointment")
    @classmethod
    def _date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    def present_fields(self) -> dict:
        """Only the fields the caller actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PatientRecord(BaseModel):
    """Full-record rules, checked before every insert and update."""
    model_config = ConfigDict(**_wire_config, use_enum_values=True)

    date_of_appointment: datetime = Field(default_factory=_utcnow)
    name: str = Field(min_length=1)
    address: Optional[str] = None
    aadhar_no: str = Field(pattern=r"^\d{12}$")
    contact_no: str = Field(pattern=r"^\d{10,15}$")
    diseases: Optional[str] = None
    doctor_name: Optional[str] = None
    body_weight_kg: Optional[float] = Field(None, ge=0)
    height_cm: Optional[float] = Field(None, ge=0)
    hemoglobin: Optional[float] = Field(None, ge=0)
    blood_group: Optional[str] = None
    sbp: Optional[float] = Field(None, ge=0)
    dbp: Optional[float] = Field(None, ge=0)
    wbc: Optional[float] = Field(None, ge=0)
    rbc: Optional[float] = Field(None, ge=0)
    platelet: Optional[float] = Field(None, ge=0)
    bmi: Optional[float] = Field(None, ge=0)
    bfr_percent: Optional[float] = Field(None, ge=0, le=100)
    body_water_percent: Optional[float] = Field(None, ge=0, le=100)
    bone_mass_kg: Optional[float] = Field(None, ge=0)
    metabolic_age: Optional[float] = Field(None, ge=0)
    v_fat_percent: Optional[float] = Field(None, ge=0, le=100)
    protein_mass_kg: Optional[float] = Field(None, ge=0)
    muscle_mass_kg: Optional[float] = Field(None, ge=0)
    diabetes: Optional[Diabetes] = Diabetes.none

    @field_validator("date_of_appointment")
    @classmethod
    def _date_in_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class PatientOut(PatientPayload):
    model_config = ConfigDict(**_wire_config, from_attributes=True)

    id: str
    date_of_appointment: datetime
    name: str
    aadhar_no: str
    contact_no: str
    created_at: Optional[datetime] = None

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from clinic_api.core.errors import Conflict, NotFound
from clinic_api.core.records import derive_fields, validate_record
from clinic_api.db.models.patient import PatientModel
from clinic_api.schemas.patient import PatientRecord

logger = logging.getLogger(__name__)

PATIENT_NOT_FOUND = "Patient not found."
INVALID_PATIENT_ID = "Patient not found (invalid ID format)."
DUPLICATE_AADHAR = "Patient with this Aadhar No. already exists."
DUPLICATE_AADHAR_ON_UPDATE = "Another patient with this Aadhar No. already exists."

RECORD_FIELDS = tuple(PatientRecord.model_fields)


def parse_patient_id(raw_id: str) -> str:
    """Normalise a path id; anything that is not a UUID cannot name a record."""
    try:
        return str(uuid.UUID(str(raw_id)))
    except ValueError:
        raise NotFound(INVALID_PATIENT_ID)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _snapshot(patient: PatientModel) -> Dict[str, Any]:
    return {name: getattr(patient, name) for name in RECORD_FIELDS}


async def list_patients(db: AsyncSession, search: Optional[str] = None) -> List[PatientModel]:
    """
    List patients, most recent appointment first.

    Args:
        db (AsyncSession): the database session
        search (Optional[str]): case-insensitive substring matched against
            the patient name or Aadhar number

    Returns:
        List[PatientModel]: the matching records
    """
    query = select(PatientModel)
    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.where(
            or_(
                PatientModel.name.ilike(pattern, escape="\\"),
                PatientModel.aadhar_no.ilike(pattern, escape="\\"),
            )
        )
    query = query.order_by(PatientModel.date_of_appointment.desc())

    result = await db.execute(query)
    patients = result.scalars().all()
    logger.debug(f"CRUD: Found {len(patients)} patients for search={search!r}")
    return list(patients)


async def get_patient_by_aadhar(db: AsyncSession, aadhar_no: str) -> Optional[PatientModel]:
    result = await db.execute(select(PatientModel).where(PatientModel.aadhar_no == aadhar_no))
    return result.scalar_one_or_none()


async def get_patient(db: AsyncSession, patient_id: str) -> PatientModel:
    patient = await db.get(PatientModel, parse_patient_id(patient_id))
    if not patient:
        raise NotFound(PATIENT_NOT_FOUND)
    return patient


async def create_patient(db: AsyncSession, fields: Dict[str, Any]) -> PatientModel:
    """
    Insert a new patient record.

    Raises Conflict when the Aadhar number is already on file and
    ValidationFailed listing every violated field rule.
    """
    aadhar_no = fields.get("aadhar_no")
    if aadhar_no and await get_patient_by_aadhar(db, aadhar_no):
        logger.info("CRUD: Create refused, Aadhar number already on file")
        raise Conflict(DUPLICATE_AADHAR)

    incoming = dict(fields)
    if incoming.get("date_of_appointment") is None:
        incoming.pop("date_of_appointment", None)

    record = validate_record(derive_fields(None, incoming))
    patient = PatientModel(**record)
    db.add(patient)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict(DUPLICATE_AADHAR)
    await db.refresh(patient)

    logger.info(f"CRUD: Created patient id={patient.id}")
    return patient


async def update_patient(db: AsyncSession, patient_id: str, fields: Dict[str, Any]) -> PatientModel:
    """
    Apply a partial update: only keys present in ``fields`` are written.

    The merged record is re-validated and the BMI rule re-applied before a
    single ``UPDATE ... SET`` of the changed columns.
    """
    patient = await get_patient(db, patient_id)

    new_aadhar = fields.get("aadhar_no")
    if new_aadhar and new_aadhar != patient.aadhar_no:
        if await get_patient_by_aadhar(db, new_aadhar):
            logger.info(f"CRUD: Update of patient id={patient.id} refused, Aadhar number taken")
            raise Conflict(DUPLICATE_AADHAR_ON_UPDATE)

    incoming = dict(fields)
    # same as create: a null date means "keep the default", here the stored date
    if "date_of_appointment" in incoming and incoming["date_of_appointment"] is None:
        incoming.pop("date_of_appointment")

    previous = _snapshot(patient)
    changes = derive_fields(previous, incoming)
    if not changes:
        return patient

    record = validate_record({**previous, **changes})
    values = {name: record[name] for name in changes}

    try:
        await db.execute(
            update(PatientModel).where(PatientModel.id == patient.id).values(**values)
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict(DUPLICATE_AADHAR_ON_UPDATE)
    await db.refresh(patient)

    logger.info(f"CRUD: Updated patient id={patient.id} fields={sorted(values)}")
    return patient


async def delete_patient(db: AsyncSession, patient_id: str) -> None:
    patient = await get_patient(db, patient_id)
    await db.delete(patient)
    await db.commit()
    logger.info(f"CRUD: Deleted patient id={patient.id}")

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.middleware import get_db, require_roles
from clinic_api.db.crud.patient import (
    list_patients,
    get_patient,
    create_patient,
    update_patient,
    delete_patient,
)
from clinic_api.schemas.patient import PatientOut, PatientPayload
from clinic_api.schemas.shared import MessageResponse, Role, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["patients"])

admin_only = require_roles(Role.admin)


@router.get("", response_model=List[PatientOut])
async def list_patients_route(
    search: Optional[str] = Query(None, description="Substring of the name or Aadhar number"),
    db: AsyncSession = Depends(get_db),
    current_user: UserOut = Depends(admin_only),
):
    """All patients, or those matching ``search``; most recent appointment first."""
    return await list_patients(db, search)


@router.post("", response_model=PatientOut, status_code=status.HTTP_201_CREATED)
async def create_patient_route(
    payload: PatientPayload,
    db: AsyncSession = Depends(get_db),
    current_user: UserOut = Depends(admin_only),
):
    patient = await create_patient(db, payload.present_fields())
    logger.info(f"Patient {patient.id} created by user {current_user.id}")
    return patient


@router.get("/{patient_id}", response_model=PatientOut)
async def get_patient_route(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserOut = Depends(admin_only),
):
    return await get_patient(db, patient_id)


@router.put("/{patient_id}", response_model=PatientOut)
async def update_patient_route(
    patient_id: str,
    payload: PatientPayload,
    db: AsyncSession = Depends(get_db),
    current_user: UserOut = Depends(admin_only),
):
    """Partial update: fields absent from the body are left untouched."""
    patient = await update_patient(db, patient_id, payload.present_fields())
    logger.info(f"Patient {patient.id} updated by user {current_user.id}")
    return patient


@router.delete("/{patient_id}", response_model=MessageResponse)
async def delete_patient_route(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: UserOut = Depends(admin_only),
):
    await delete_patient(db, patient_id)
    logger.info(f"Patient {patient_id} deleted by user {current_user.id}")
    return MessageResponse(msg="Patient removed successfully.")

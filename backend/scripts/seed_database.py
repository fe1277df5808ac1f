# backend/scripts/seed_database.py
import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone as TZ
from typing import Any, Dict

from sqlalchemy import delete

# Add project root to sys.path to allow importing from clinic_api
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from clinic_api.config.settings import settings as app_settings
from clinic_api.core.errors import ApiError
from clinic_api.db.base import create_schema, get_engine, get_session_factory
from clinic_api.db.crud.auth import register_user
from clinic_api.db.crud.patient import create_patient
from clinic_api.db.crud.user import get_user_by_email
from clinic_api.db.models import PatientModel
from clinic_api.db.session import standalone_session
from clinic_api.schemas.patient import Diabetes
from clinic_api.schemas.register_request import RegisterRequest

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

# --- Configuration for Seed Data ---
NUM_PATIENTS = 40
ADMIN_NAME = "Clinic Admin"
ADMIN_EMAIL = "admin@clinic.org"
ADMIN_PASSWORD = "ChangeMe123!"

FIRST_NAMES = [
    "Aarav", "Vivaan", "Aditya", "Arjun", "Sai", "Ishaan", "Reyansh", "Kabir",
    "Ananya", "Diya", "Saanvi", "Aadhya", "Meera", "Kavya", "Riya", "Priya",
]
LAST_NAMES = [
    "Sharma", "Verma", "Gupta", "Iyer", "Nair", "Reddy", "Patel", "Singh",
    "Kumar", "Das", "Menon", "Joshi",
]
DOCTORS = ["Dr. Rao", "Dr. Mehta", "Dr. Pillai", "Dr. Banerjee"]
DISEASES = ["", "Hypertension", "Anaemia", "Thyroid", "Asthma", "Migraine"]
BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "O+", "O-", "AB+", "AB-"]


def random_aadhar() -> str:
    return str(random.randint(2, 9)) + "".join(str(random.randint(0, 9)) for _ in range(11))


def random_phone() -> str:
    return str(random.randint(6, 9)) + "".join(str(random.randint(0, 9)) for _ in range(9))


def random_patient(i: int) -> Dict[str, Any]:
    visited = datetime.now(TZ.utc) - timedelta(days=random.randint(0, 365))
    return {
        "date_of_appointment": visited,
        "name": f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
        "address": f"{random.randint(1, 300)} MG Road, Ward {i % 12 + 1}",
        "aadhar_no": random_aadhar(),
        "contact_no": random_phone(),
        "diseases": random.choice(DISEASES) or None,
        "doctor_name": random.choice(DOCTORS),
        "body_weight_kg": round(random.uniform(40, 110), 1),
        "height_cm": round(random.uniform(145, 190), 1),
        "hemoglobin": round(random.uniform(9, 17), 1),
        "blood_group": random.choice(BLOOD_GROUPS),
        "sbp": random.randint(95, 160),
        "dbp": random.randint(60, 100),
        "bfr_percent": round(random.uniform(8, 40), 1),
        "body_water_percent": round(random.uniform(45, 65), 1),
        "diabetes": random.choice(list(Diabetes)).value,
    }


async def seed_admin(db) -> None:
    if await get_user_by_email(db, ADMIN_EMAIL):
        logger.info(f"Admin {ADMIN_EMAIL} already exists, skipping.")
        return
    await register_user(
        db,
        RegisterRequest(name=ADMIN_NAME, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, role="admin"),
    )
    logger.info(f"Created admin {ADMIN_EMAIL}. Change the default password after first login.")


async def seed_patients(db) -> None:
    logger.info(f"Seeding {NUM_PATIENTS} patients...")
    created = 0
    for i in range(NUM_PATIENTS):
        try:
            await create_patient(db, random_patient(i))
            created += 1
        except ApiError as e:
            # random Aadhar collisions are possible; skip that row
            logger.warning(f"Skipped patient #{i}: {e}")
    logger.info(f"Seeded {created} patients.")


async def main(should_clear: bool):
    logger.info(f"Connecting to database at: {app_settings.database_url}")
    engine = await get_engine(app_settings.database_url)
    await create_schema(engine)
    session_factory = await get_session_factory(engine)

    async with standalone_session(session_factory) as db:
        if should_clear:
            logger.warning("Clearing existing patient records...")
            await db.execute(delete(PatientModel))
            await db.commit()
        await seed_admin(db)
        await seed_patients(db)

    await engine.dispose()
    logger.info("Database connection closed.")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Seed the database with an admin account and demo patients."
    )
    parser.add_argument(
        "--clear", action="store_true", help="Delete existing patient records before seeding."
    )
    args = parser.parse_args()
    asyncio.run(main(should_clear=args.clear))

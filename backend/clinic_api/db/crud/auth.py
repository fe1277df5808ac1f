import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from clinic_api.core.auth import hash_password, check_password
from clinic_api.core.errors import Conflict
from clinic_api.db.crud.user import create_user, get_user_by_email
from clinic_api.db.models.user import UserModel
from clinic_api.schemas.register_request import RegisterRequest

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "User already exists with this email."


async def register_user(db: AsyncSession, data: RegisterRequest) -> UserModel:
    """Insert a new user; the plaintext password never leaves this function."""
    if await get_user_by_email(db, data.email):
        logger.info("CRUD: Registration refused, email already registered")
        raise Conflict(DUPLICATE_EMAIL)

    hashed = await hash_password(data.password)
    try:
        return await create_user(
            db,
            name=data.name,
            email=data.email,
            password_hash=hashed,
            role=data.resolved_role().value,
        )
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        await db.rollback()
        raise Conflict(DUPLICATE_EMAIL)


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[UserModel]:
    user = await get_user_by_email(db, email)
    if not user:
        return None
    if not await check_password(password, user.password_hash):
        return None
    return user

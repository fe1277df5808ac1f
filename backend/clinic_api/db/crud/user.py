# clinic_api/db/crud/user.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.db.models.user import UserModel

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: str) -> Optional[UserModel]:
    """
    Fetch a user by primary key.

    Args:
        db (AsyncSession): the database session
        user_id (str): the user's id, as carried in a token subject

    Returns:
        Optional[UserModel]: the user, or None if no such user exists
    """
    return await db.get(UserModel, str(user_id))


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[UserModel]:
    """Case-insensitive lookup; emails are stored lower-cased."""
    result = await db.execute(
        select(UserModel).where(UserModel.email == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession, name: str, email: str, password_hash: str, role: str
) -> UserModel:
    user = UserModel(
        name=name,
        email=email.strip().lower(),
        password_hash=password_hash,
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"CRUD: Created user id={user.id} role={user.role}")
    return user

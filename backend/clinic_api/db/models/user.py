# clinic_api/db/models/user.py
import uuid

from sqlalchemy import Column, String, DateTime, func
from clinic_api.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)  # stored lower-cased
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="user")  # 'user', 'admin'
    created_at = Column(DateTime(timezone=True), server_default=func.now())

# clinic_api/schemas/shared.py
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

class Role(str, Enum):
    user = "user"
    admin = "admin"

class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: Role

class UserOut(UserPublic):
    created_at: Optional[datetime] = None

class MessageResponse(BaseModel):
    msg: str

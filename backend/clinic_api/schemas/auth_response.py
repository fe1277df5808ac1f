from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from clinic_api.schemas.shared import UserPublic

class AuthResponse(BaseModel):
    model_config = ConfigDict(
        extra='forbid',
    )
    token: str
    user: UserPublic
    msg: str

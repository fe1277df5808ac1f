from __future__ import annotations
from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    # presence is checked by the route so the caller gets a single message
    email: Optional[str] = None
    password: Optional[str] = None

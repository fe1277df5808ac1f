# clinic_api/schemas/register_request.py
from pydantic import BaseModel, EmailStr, Field, StringConstraints, field_validator
from typing    import Any, Annotated

from clinic_api.schemas.shared import Role


class RegisterRequest(BaseModel):
    name:     Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    email:    EmailStr
    password: Annotated[str, Field(min_length=6, max_length=128)]
    # anything other than exactly "admin" / "user" falls back to the default
    role: Any = None

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.lower()

    def resolved_role(self) -> Role:
        if self.role in (Role.admin.value, Role.user.value):
            return Role(self.role)
        return Role.user

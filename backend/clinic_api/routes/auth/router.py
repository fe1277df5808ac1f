import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.auth import TokenConfigError, create_access_token
from clinic_api.core.errors import BadRequest, InternalError, InvalidCredentials
from clinic_api.core.middleware import get_db, get_current_user
from clinic_api.db.crud.auth import register_user, authenticate_user
from clinic_api.db.models.user import UserModel
from clinic_api.schemas.auth_response import AuthResponse
from clinic_api.schemas.login_request import LoginRequest
from clinic_api.schemas.register_request import RegisterRequest
from clinic_api.schemas.shared import UserOut, UserPublic

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


def build_auth_response(user: UserModel, msg: str) -> AuthResponse:
    try:
        token = create_access_token(user.id, user.role)
    except TokenConfigError:
        logger.error("SECRET_KEY is not defined. Cannot generate token.")
        raise InternalError(
            "Server configuration error for token generation.", as_errors=True
        )
    return AuthResponse(token=token, user=UserPublic.model_validate(user), msg=msg)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Create an account. Send ``"role": "admin"`` for the initial admin setup."""
    new_user = await register_user(db, user_data)
    return build_auth_response(new_user, "User registered successfully.")


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    if not login_data.email or not login_data.password:
        raise BadRequest("Please provide both email and password.")

    user = await authenticate_user(db, login_data.email, login_data.password)
    if not user:
        # same answer for unknown email and wrong password
        raise InvalidCredentials("Invalid credentials.")
    return build_auth_response(user, "Logged in successfully.")


@router.get("/me", response_model=UserOut)
async def me(current_user: UserOut = Depends(get_current_user)):
    return current_user

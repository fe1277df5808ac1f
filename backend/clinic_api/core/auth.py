from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext
from jose import ExpiredSignatureError, JWTError, jwt

from clinic_api.config.settings import settings

# Explicit bcrypt identifier suppresses passlib's warning about '__about__'
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
    bcrypt__rounds=settings.bcrypt_rounds,
)


class TokenError(Exception):
    pass


class TokenInvalid(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class TokenConfigError(TokenError):
    """The signing secret is not configured."""


@dataclass(frozen=True)
class TokenClaims:
    subject_id: str
    role: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


async def hash_password(password: str) -> str:
    # bcrypt is CPU-bound; keep it off the event loop
    return await run_in_threadpool(get_password_hash, password)


async def check_password(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


def _signing_key() -> str:
    if not settings.secret_key:
        raise TokenConfigError("SECRET_KEY is not defined. Cannot sign or verify tokens.")
    return settings.secret_key


def create_access_token(
    subject_id: str, role: str, expires_delta: Optional[timedelta] = None
) -> str:
    key = _signing_key()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": str(subject_id), "role": role, "exp": expire}
    return jwt.encode(to_encode, key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify a token and return its claims.

    Raises TokenExpired once ``exp`` has passed, TokenInvalid for a bad
    signature, a malformed token or missing claims, and TokenConfigError when
    no secret is configured.
    """
    key = _signing_key()
    try:
        payload = jwt.decode(token, key, algorithms=[settings.algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except JWTError as e:
        raise TokenInvalid(str(e)) from e

    subject_id = payload.get("sub")
    role = payload.get("role")
    if not subject_id or not role or "exp" not in payload:
        raise TokenInvalid("Token is missing required claims")
    return TokenClaims(subject_id=str(subject_id), role=str(role))

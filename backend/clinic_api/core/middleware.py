"""
Request-level auth gate.

``get_current_user`` verifies the bearer token and resolves the caller;
``require_roles`` layers a role allow-list on top of it. The resolved identity
is returned from the dependency and handed to the route as an argument.
"""
import logging
from typing import Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import TokenConfigError, TokenExpired, TokenInvalid, decode_access_token
from .errors import Forbidden, InternalError, Unauthorized
from clinic_api.db.crud.user import get_user
from clinic_api.db.session import get_db_session
from clinic_api.schemas.shared import Role, UserOut

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# Get a database session dependency
get_db = get_db_session


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> UserOut:
    """
    Dependency to use in route functions that require authentication.
    Raises Unauthorized unless a valid token names an existing user.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authorized, no token provided.")

    try:
        claims = decode_access_token(credentials.credentials)
    except TokenExpired:
        logger.warning("Token verification failed: expired")
        raise Unauthorized("Not authorized, token expired.")
    except TokenInvalid as e:
        logger.warning(f"Token verification failed: {e}")
        raise Unauthorized("Not authorized, invalid token.")
    except TokenConfigError:
        logger.error("SECRET_KEY is not defined. Please check your environment.")
        raise InternalError("Server configuration error.")

    user = await get_user(db, claims.subject_id)
    if not user:
        raise Unauthorized("Not authorized, user not found for this token.")
    return UserOut.model_validate(user)


def check_role(user: Optional[UserOut], allowed: Iterable[Role]) -> UserOut:
    """Raise unless ``user`` is present and holds one of the ``allowed`` roles."""
    allowed = tuple(allowed)
    if user is None:
        # the token check must run first
        raise Unauthorized("Not authorized, user data missing.")
    if user.role not in allowed:
        required = ", ".join(role.value for role in allowed)
        raise Forbidden(
            f"User role '{user.role.value}' is not authorized to access this resource. "
            f"Required roles: {required}."
        )
    return user


def require_roles(*roles: Role):
    """
    Factory function to create a dependency that requires specific roles.
    Usage: current_user: UserOut = Depends(require_roles(Role.admin))
    """
    def _require_roles(user: UserOut = Depends(get_current_user)) -> UserOut:
        return check_role(user, roles)

    return _require_roles

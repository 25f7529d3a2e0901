"""FastAPI dependencies: get_current_user / get_current_actor / require_admin.

Usage in any protected router:
    from src.sh_gateway.auth.dependencies import get_current_actor

    @router.get("/protected")
    async def protected(actor: Actor = Depends(get_current_actor)):
        ...
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.sh_common.database import get_db_session
from src.sh_common.errors import AccountDisabledError, AdminRequiredError, InvalidCredentialsError
from src.sh_gateway.auth.jwt_handler import decode_access_token
from src.sh_gateway.user.db_models import UserModel
from src.sh_negotiation.domain.models import Actor

_bearer = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (RFC 6750)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def load_user_for_token(token: str, db: AsyncSession) -> UserModel:
    """Resolve a raw bearer token to an active user.

    Shared by the HTTP dependency and the WebSocket handshake.

    Raises:
        InvalidCredentialsError: bad token or unknown user.
        AccountDisabledError: user exists but is deactivated.
    """
    try:
        user_id = uuid.UUID(decode_access_token(token))
    except ValueError:
        raise InvalidCredentialsError() from None
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise InvalidCredentialsError()
    if not user.is_active:
        raise AccountDisabledError()
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Extract and validate the Bearer token, return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    Raises HTTP 403 (AccountDisabledError) if the user account is disabled.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        return await load_user_for_token(credentials.credentials, db)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None


async def get_current_actor(
    current_user: UserModel = Depends(get_current_user),
) -> Actor:
    return Actor.from_user(current_user)


async def require_admin(
    actor: Actor = Depends(get_current_actor),
) -> Actor:
    """Raises HTTP 403 (AdminRequiredError) unless the caller has the admin role."""
    if not actor.is_admin:
        raise AdminRequiredError()
    return actor

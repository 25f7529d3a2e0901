"""JWT access-token verification.

Tokens are issued by the upstream auth service with a shared HS256 secret.
This service only verifies them; ``create_access_token`` exists for
service-to-service calls and tests.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.sh_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(user_id: str) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> str:
    """Decode and validate an access token, returning the user id (``sub``).

    Raises:
        InvalidCredentialsError: signature/expiry invalid, wrong token type,
            or missing subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    # Tokens minted by the upstream auth service carry "userId" and no "type".
    if payload.get("type", "access") != "access":
        raise InvalidCredentialsError()
    user_id = payload.get("sub") or payload.get("userId")
    if not user_id:
        raise InvalidCredentialsError()
    return str(user_id)

"""Bearer Authentication — resolves the request principal from a signed JWT.

Invariants:
    - Missing, malformed, expired or unknown-subject tokens raise AuthenticationError (401)
    - The JWT "sub" claim is the user's UUID
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.config import get_settings
from taskboard.core.errors import AuthenticationError
from taskboard.infrastructure.database import get_db
from taskboard.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: UUID, expires_delta: timedelta = timedelta(days=7)) -> str:
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_subject(token: str) -> UUID:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
        return UUID(payload["sub"])
    except (JWTError, KeyError, ValueError, TypeError):
        raise AuthenticationError("Could not validate credentials")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """FastAPI dependency returning the authenticated User."""
    if credentials is None:
        raise AuthenticationError()
    user = await db.get(User, decode_subject(credentials.credentials))
    if user is None:
        logger.warning("Token subject does not match any user")
        raise AuthenticationError("User not found")
    return user

"""JWT bearer authentication

Tokens are HS256 JWTs carrying the user's id, email and name. Issuing tokens
belongs to the account service; create_access_token exists for tooling and
tests.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ANONYMOUS_USER_ID = 1


class AuthenticatedUser(BaseModel):
    """Claims of a validated access token"""

    id: int
    email: str
    name: str


def _unauthorized(message: str) -> ClientError:
    return ClientError(
        Error(code="UNAUTHORIZED", message=message),
        status_code=status.HTTP_401_UNAUTHORIZED,
    )


def create_access_token(user_id: int, email: str, name: str, expires_in: Optional[timedelta] = None) -> str:
    expires_in = expires_in or timedelta(hours=ApplicationConfig.JWT_EXPIRATION_HOURS)
    payload = {
        "id": user_id,
        "email": email,
        "name": name,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm=ApplicationConfig.JWT_ALGORITHM)


def decode_access_token(token: str) -> AuthenticatedUser:
    """
    Validate a token and extract its claims

    Raises:
        ClientError: 401 when the token is expired, malformed or incomplete
    """
    try:
        claims = jwt.decode(
            token,
            ApplicationConfig.JWT_SECRET,
            algorithms=[ApplicationConfig.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"cannot validate token: {e}")

    user_id = claims.get("id")
    if not isinstance(user_id, int) or user_id <= 0:
        raise _unauthorized("user id not found in claims")

    return AuthenticatedUser(
        id=user_id,
        email=claims.get("email", ""),
        name=claims.get("name", ""),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    if ApplicationConfig.AUTH_DISABLED:
        return AuthenticatedUser(id=ANONYMOUS_USER_ID, email="", name="anonymous")

    if credentials is None:
        raise _unauthorized("authorization token is required")

    if credentials.scheme.lower() != "bearer":
        raise _unauthorized("token is malformed")

    return decode_access_token(credentials.credentials)

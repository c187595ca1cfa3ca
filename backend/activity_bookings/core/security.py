"""
JWT issuance and verification for the API layer.

Tokens carry the user id in `sub` plus the email. Services only ever see the
resulting principal id, which they treat as an opaque string.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from activity_bookings.core.config import get_settings
from activity_bookings.core.exceptions import AuthenticationRequired
from activity_bookings.core.logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    id: str
    email: str


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": user_id, "email": email, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Principal:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError as e:
        logger.warning("invalid_token", error=str(e))
        raise AuthenticationRequired("Invalid or expired token. Please login again.")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationRequired("Invalid or expired token. Please login again.")
    return Principal(id=str(user_id), email=payload.get("email", ""))


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        logger.warning("missing_token")
        raise AuthenticationRequired("Authentication required. Please provide a valid token.")
    return decode_access_token(credentials.credentials)


def get_current_user_id(principal: Principal = Depends(get_current_principal)) -> str:
    return principal.id

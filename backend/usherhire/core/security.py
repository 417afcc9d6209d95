"""
Password hashing, JWT issuing/validation and the current-user dependency.

The dependency is the only place a request's identity is resolved; services
receive it as an explicit ``actor_id`` argument.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from usherhire.core.config import get_settings
from usherhire.core.exceptions import AuthenticationError
from usherhire.schemas.user import CurrentUser
from usherhire.services.cache_service import is_token_revoked

settings = get_settings()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a token. Raises AuthenticationError on any defect."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationError("Could not validate credentials")

    if not payload.get("sub") or not payload.get("jti"):
        raise AuthenticationError("Could not validate credentials")
    return payload


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError()
    return credentials.credentials


async def get_current_user(token: str = Depends(get_bearer_token)) -> CurrentUser:
    payload = decode_access_token(token)

    if await is_token_revoked(payload["jti"]):
        raise AuthenticationError("Session has been signed out")

    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        raise AuthenticationError("Could not validate credentials")

    return CurrentUser(id=user_id, email=payload.get("email", ""))


async def get_current_user_id(user: CurrentUser = Depends(get_current_user)) -> uuid.UUID:
    return user.id

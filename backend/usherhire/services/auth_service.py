"""
Identity service: sign-up, sign-in, sign-out.

Sign-up writes the credential row, the Profile and (for ushers) the
UsherProfile in the request's single transaction.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.models.user import User, Profile
from usherhire.models.usher_profile import UsherProfile
from usherhire.models.enums import AvailabilityStatus, UserType
from usherhire.schemas.user import SignUpRequest, SignInRequest
from usherhire.core.exceptions import AuthenticationError, ConflictError, UnauthorizedError
from usherhire.core.security import hash_password, verify_password, create_access_token, decode_access_token
from usherhire.services.cache_service import revoke_token
from usherhire.core.logging import get_logger

logger = get_logger(__name__)


async def sign_up(db: AsyncSession, data: SignUpRequest) -> Profile:
    """
    Register credentials and create the marketplace profile.
    Raises 409 if the email is already registered.
    """
    email = data.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        logger.warning("signup_failed", reason="email_exists", email=email)
        raise ConflictError("Sign up failed: email already registered")

    user = User(email=email, hashed_password=hash_password(data.password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        logger.warning("signup_failed", reason="email_race", email=email)
        raise ConflictError("Sign up failed: email already registered")

    profile = Profile(
        id=user.id,
        user_type=data.user_type.value,
        full_name=data.full_name,
        email=email,
        phone=data.phone or None,
    )
    db.add(profile)
    # Flush the profile before its usher extension row references it
    await db.flush()

    if data.user_type == UserType.USHER:
        db.add(
            UsherProfile(
                user_id=user.id,
                experience_years=0,
                skills=[],
                availability={},
                availability_status=AvailabilityStatus.AVAILABLE.value,
                rating=0,
                total_events=0,
            )
        )
        await db.flush()

    await db.refresh(profile)
    logger.info("user_signed_up", user_id=str(user.id), user_type=profile.user_type)
    return profile


async def sign_in(db: AsyncSession, data: SignInRequest) -> tuple[str, User]:
    """
    Authenticate and return a JWT access token with its user.
    Raises 401 if credentials are invalid.
    """
    email = data.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning("signin_failed", email=email)
        raise AuthenticationError("Sign in failed: invalid email or password")

    if not user.is_active:
        raise UnauthorizedError("Sign in failed: account is deactivated")

    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    logger.info("user_signed_in", user_id=str(user.id))
    return token, user


async def sign_out(token: str) -> bool:
    """Revoke ``token`` for the rest of its lifetime. Returns False if revocation was unavailable."""
    payload = decode_access_token(token)
    remaining = int(payload["exp"] - datetime.now(timezone.utc).timestamp())
    revoked = await revoke_token(payload["jti"], remaining)
    logger.info("user_signed_out", user_id=payload["sub"], revoked=revoked)
    return revoked

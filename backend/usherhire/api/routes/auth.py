"""
Identity endpoints: sign up, sign in, sign out, current user.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.db.session import get_db
from usherhire.schemas.user import SignUpRequest, SignInRequest, Token, CurrentUser, ProfileResponse
from usherhire.services.auth_service import sign_up, sign_in, sign_out
from usherhire.core.security import get_bearer_token, get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignUpRequest, db: AsyncSession = Depends(get_db)):
    """Create an usher or planner account."""
    return await sign_up(db, data)


@router.post("/signin", response_model=Token)
async def signin(data: SignInRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    token, user = await sign_in(db, data)
    return Token(access_token=token, user_id=user.id)


@router.post("/signout")
async def signout(
    token: str = Depends(get_bearer_token),
    user: CurrentUser = Depends(get_current_user),
):
    """Revoke the presented token."""
    revoked = await sign_out(token)
    return {"message": "Signed out", "revoked": revoked}


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_current_user)):
    return user

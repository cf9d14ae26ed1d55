from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.orm import Session

from murabaat.core.config import settings
from murabaat.core.rate_limit import rate_limit
from murabaat.core.security import create_access_token, get_password_hash, verify_password
from murabaat.db.session import get_db
from murabaat.models.users import UserAuth
from murabaat.schemas.auth import RegisterRequest, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> TokenResponse:
    existing = db.scalar(select(UserAuth).where(UserAuth.email == payload.email))
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = UserAuth(
        email=payload.email,
        name=(payload.name or "").strip() or None,
        password_hash=get_password_hash(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User registered: %s", user.id)

    return TokenResponse(access_token=create_access_token(user.id, role=user.role))


@router.post(
    "/token",
    response_model=TokenResponse,
    dependencies=[rate_limit("login", limit=settings.login_rate_limit)],
)
def login(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)) -> TokenResponse:
    user = db.scalar(select(UserAuth).where(UserAuth.email == form.username))
    if not user or not verify_password(form.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User inactive")

    return TokenResponse(access_token=create_access_token(user.id, role=user.role))

from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from murabaat.core.config import settings
from murabaat.services.errors import Unauthorized

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_temp_password() -> str:
    """Throwaway password for accounts created on someone's behalf."""
    return secrets.token_urlsafe(9)


def create_access_token(user_id: str, *, role: str | None = None, expires_minutes: int | None = None) -> str:
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes or settings.access_token_exp_minutes)
    claims: dict = {"sub": user_id, "typ": TOKEN_TYPE, "exp": expire}
    # Informational only: authorization re-reads the role from the database.
    if role:
        claims["role"] = role
    return jwt.encode(claims, settings.app_secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by a valid access token."""
    try:
        claims = jwt.decode(token, settings.app_secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise Unauthorized("Invalid token")

    user_id = claims.get("sub")
    if not user_id or claims.get("typ", TOKEN_TYPE) != TOKEN_TYPE:
        raise Unauthorized("Invalid token")
    return user_id

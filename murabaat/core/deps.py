from __future__ import annotations

import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from murabaat.core.security import decode_access_token
from murabaat.db.session import get_db
from murabaat.models.enums import UserRole
from murabaat.models.users import UserAuth
from murabaat.services.errors import Unauthorized
from murabaat.services.permissions import ANONYMOUS, Principal, ensure_role

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def _user_from_token(token: str, db: Session) -> UserAuth:
    user = db.get(UserAuth, decode_access_token(token))
    if not user or not user.is_active:
        raise Unauthorized("User inactive or not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserAuth:
    return _user_from_token(token, db)


def get_principal(
    token: str | None = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """Anonymous when no bearer token is sent; a bad token is still a 401."""
    if not token:
        return ANONYMOUS
    user = _user_from_token(token, db)
    return Principal(user_id=user.id, role=UserRole(user.role))


def require_role(*allowed: UserRole):
    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        ensure_role(principal, *allowed)
        return principal

    return _dep

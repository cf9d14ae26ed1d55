from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from murabaat.models.companies import CompanyOwner
from murabaat.models.enums import UserRole
from murabaat.services.errors import Unauthorized

MODERATOR_ROLES = (UserRole.admin, UserRole.super_admin)


@dataclass(frozen=True)
class Principal:
    """Who is calling: resolved once per request and passed into services."""

    user_id: str | None
    role: UserRole

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None and self.role is not UserRole.anonymous

    @property
    def is_moderator(self) -> bool:
        return self.role in MODERATOR_ROLES


ANONYMOUS = Principal(user_id=None, role=UserRole.anonymous)


def ensure_role(principal: Principal, *allowed: UserRole) -> None:
    if principal.role not in allowed:
        raise Unauthorized("Insufficient permissions")


def ensure_authenticated(principal: Principal) -> str:
    if not principal.is_authenticated:
        raise Unauthorized("Authentication required")
    return principal.user_id  # type: ignore[return-value]


def owns_company(db: Session, *, user_id: str | None, company_id: str) -> bool:
    if not user_id:
        return False
    stmt = select(CompanyOwner.id).where(
        CompanyOwner.company_id == company_id,
        CompanyOwner.user_id == user_id,
    )
    return db.scalar(stmt) is not None


def owned_company_ids(db: Session, *, user_id: str) -> list[str]:
    return list(db.scalars(select(CompanyOwner.company_id).where(CompanyOwner.user_id == user_id)).all())


def dashboard_company_ids(db: Session, principal: Principal) -> list[str] | None:
    """Companies whose dashboard data the caller may see. ``None`` means all of them."""
    if principal.is_moderator:
        return None
    if not principal.user_id:
        return []
    return owned_company_ids(db, user_id=principal.user_id)

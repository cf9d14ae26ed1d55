from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from murabaat.core.security import generate_temp_password, get_password_hash
from murabaat.models.companies import Company
from murabaat.models.company_requests import CompanyRequest
from murabaat.models.enums import CompanyRequestAction, CompanyRequestStatus, UserRole
from murabaat.models.taxonomy import Category, City, Country
from murabaat.models.users import UserAuth
from murabaat.services.companies import add_company_owner, create_company
from murabaat.services.errors import InvalidStateError, NotFoundError, ValidationError
from murabaat.services.permissions import MODERATOR_ROLES, Principal, ensure_role

logger = logging.getLogger(__name__)

# NEEDS_INFO waits on the applicant, so an admin may still decide it.
OPEN_STATUSES = (CompanyRequestStatus.pending.value, CompanyRequestStatus.needs_info.value)
_BLOCKING_STATUSES = (CompanyRequestStatus.pending.value, CompanyRequestStatus.approved.value)


def submit_company_request(
    db: Session,
    *,
    company_name: str,
    description: str,
    country_id: str,
    city_id: str,
    category_id: str,
    phone: str,
    email: str,
    owner_name: str,
    owner_email: str,
    owner_phone: str,
    website: str | None = None,
    address: str | None = None,
    services: str | None = None,
) -> CompanyRequest:
    company_name = (company_name or "").strip()
    if not company_name:
        raise ValidationError("Company name is required")

    city = db.get(City, city_id)
    if not db.get(Country, country_id):
        raise ValidationError("Country not found")
    if not city or city.country_id != country_id:
        raise ValidationError("City not found in country")
    if not db.get(Category, category_id):
        raise ValidationError("Category not found")

    duplicate = db.scalar(
        select(CompanyRequest.id).where(
            CompanyRequest.status.in_(_BLOCKING_STATUSES),
            or_(
                func.lower(CompanyRequest.company_name) == company_name.lower(),
                CompanyRequest.owner_email == owner_email,
                CompanyRequest.email == email,
            ),
        )
    )
    if duplicate:
        raise InvalidStateError("A request for this company or email is already pending or approved")

    request = CompanyRequest(
        company_name=company_name,
        description=description.strip(),
        services=(services or "").strip() or None,
        country_id=country_id,
        city_id=city_id,
        category_id=category_id,
        phone=phone.strip(),
        email=email,
        website=(website or "").strip() or None,
        address=(address or "").strip() or None,
        owner_name=owner_name.strip(),
        owner_email=owner_email,
        owner_phone=owner_phone.strip(),
        status=CompanyRequestStatus.pending.value,
    )
    db.add(request)
    db.commit()
    db.refresh(request)

    logger.info("Company request submitted: request=%s name=%s", request.id, request.company_name)
    return request


def requests_for_email(db: Session, *, email: str) -> list[CompanyRequest]:
    stmt = (
        select(CompanyRequest)
        .where(or_(CompanyRequest.email == email, CompanyRequest.owner_email == email))
        .order_by(CompanyRequest.created_at.desc())
    )
    return list(db.scalars(stmt).all())


def list_company_requests(
    db: Session,
    *,
    status: CompanyRequestStatus | None = None,
    q: str | None = None,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[CompanyRequest], int]:
    stmt = select(CompanyRequest)
    if status is not None:
        stmt = stmt.where(CompanyRequest.status == status.value)
    if q:
        pattern = f"%{q.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(CompanyRequest.company_name).like(pattern),
                func.lower(CompanyRequest.owner_name).like(pattern),
                func.lower(CompanyRequest.owner_email).like(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(stmt.subquery()))
    items = list(db.scalars(stmt.order_by(CompanyRequest.created_at.desc()).limit(limit).offset(offset)).all())
    return items, int(total or 0)


def get_company_request(db: Session, request_id: str) -> CompanyRequest:
    request = db.get(CompanyRequest, request_id)
    if not request:
        raise NotFoundError("Company request not found")
    return request


@dataclass
class CompanyRequestOutcome:
    request: CompanyRequest
    company: Company | None = None
    owner: UserAuth | None = None
    # Set only when the owner account was created by the approval.
    temp_password: str | None = None


def _owner_account(db: Session, request: CompanyRequest) -> tuple[UserAuth, str | None]:
    user = db.scalar(select(UserAuth).where(UserAuth.email == request.owner_email))
    if user:
        return user, None

    temp_password = generate_temp_password()
    user = UserAuth(
        email=request.owner_email,
        name=request.owner_name,
        password_hash=get_password_hash(temp_password),
        role=UserRole.company_owner.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Owner account created: user=%s request=%s", user.id, request.id)
    return user, temp_password


def adjudicate_company_request(
    db: Session,
    principal: Principal,
    *,
    request_id: str,
    action: CompanyRequestAction | str,
    admin_notes: str | None = None,
) -> CompanyRequestOutcome:
    """Approve (create the company and link its owner), reject, or ask for more info."""

    ensure_role(principal, *MODERATOR_ROLES)
    try:
        action = CompanyRequestAction(action)
    except ValueError:
        raise ValidationError(f"Unknown action: {action}")

    request = get_company_request(db, request_id)
    if request.status not in OPEN_STATUSES:
        raise InvalidStateError(f"Company request already {request.status.lower()}")

    outcome = CompanyRequestOutcome(request=request)
    if action is CompanyRequestAction.approve:
        company = create_company(
            db,
            name=request.company_name,
            country_id=request.country_id,
            city_id=request.city_id,
            category_id=request.category_id,
            description=request.description,
            phone=request.phone,
            email=request.email,
            website=request.website,
            address=request.address,
        )
        owner, temp_password = _owner_account(db, request)
        add_company_owner(db, company_id=company.id, user_id=owner.id, is_primary=True)

        request.status = CompanyRequestStatus.approved.value
        request.company_id = company.id
        outcome.company, outcome.owner, outcome.temp_password = company, owner, temp_password
    elif action is CompanyRequestAction.reject:
        request.status = CompanyRequestStatus.rejected.value
    else:
        request.status = CompanyRequestStatus.needs_info.value

    request.admin_notes = (admin_notes or "").strip() or request.admin_notes
    request.reviewed_by = principal.user_id
    request.reviewed_at = datetime.utcnow()
    db.add(request)
    db.commit()
    db.refresh(request)
    if outcome.owner is not None:
        db.refresh(outcome.owner)

    logger.info("Company request %s: request=%s by=%s", request.status.lower(), request.id, principal.user_id)
    return outcome

from __future__ import annotations

import logging
import re

from sqlalchemy import select
from sqlalchemy.orm import Session

from murabaat.models.companies import Company, CompanyOwner
from murabaat.models.enums import UserRole
from murabaat.models.taxonomy import Category, City, Country
from murabaat.models.users import UserAuth
from murabaat.services.errors import InvalidStateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^\w\s-]", flags=re.UNICODE)
_SLUG_DASH = re.compile(r"[\s_-]+")


def slugify(value: str) -> str:
    """Lowercase, dash-separated slug. Arabic letters are kept as-is."""
    value = _SLUG_STRIP.sub("", value.strip().lower())
    return _SLUG_DASH.sub("-", value).strip("-")


def create_company(
    db: Session,
    *,
    name: str,
    country_id: str,
    city_id: str,
    category_id: str,
    slug: str | None = None,
    **fields,
) -> Company:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Company name is required")

    slug = slugify(slug or name)
    if not slug:
        raise ValidationError("Company slug is empty")
    if db.scalar(select(Company.id).where(Company.slug == slug)):
        raise InvalidStateError(f"Slug already in use: {slug}")

    city = db.get(City, city_id)
    if not db.get(Country, country_id) or not city:
        raise NotFoundError("Country or city not found")
    if city.country_id != country_id:
        raise ValidationError("City does not belong to country")
    if not db.get(Category, category_id):
        raise NotFoundError("Category not found")

    company = Company(
        name=name,
        slug=slug,
        country_id=country_id,
        city_id=city_id,
        category_id=category_id,
        rating=0.0,
        reviews_count=0,
        **fields,
    )
    db.add(company)
    db.commit()
    db.refresh(company)
    logger.info("Company created: company=%s slug=%s", company.id, company.slug)
    return company


def deactivate_company(db: Session, *, company_id: str) -> Company:
    company = db.get(Company, company_id)
    if not company:
        raise NotFoundError("Company not found")
    company.is_active = False
    db.add(company)
    db.commit()
    db.refresh(company)
    logger.info("Company deactivated: company=%s", company.id)
    return company


def add_company_owner(db: Session, *, company_id: str, user_id: str, is_primary: bool = True) -> CompanyOwner:
    company = db.get(Company, company_id)
    if not company:
        raise NotFoundError("Company not found")
    user = db.get(UserAuth, user_id)
    if not user:
        raise NotFoundError("User not found")

    existing = db.scalar(
        select(CompanyOwner).where(CompanyOwner.company_id == company_id, CompanyOwner.user_id == user_id)
    )
    if existing:
        return existing

    owner = CompanyOwner(company_id=company_id, user_id=user_id, is_primary=is_primary)
    db.add(owner)
    if user.role == UserRole.user.value:
        user.role = UserRole.company_owner.value
        db.add(user)
    db.commit()
    db.refresh(owner)
    logger.info("Company owner added: company=%s user=%s", company_id, user_id)
    return owner

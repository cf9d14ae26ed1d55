from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from murabaat.db.session import get_db
from murabaat.models.companies import Company
from murabaat.models.taxonomy import Category, City, Country
from murabaat.schemas.companies import CompanyListResponse, CompanyResponse

router = APIRouter(prefix="/companies", tags=["companies"])


def _to_company_response(company: Company) -> CompanyResponse:
    return CompanyResponse(
        id=company.id,
        slug=company.slug,
        name=company.name,
        description=company.description,
        country=company.country.slug,
        city=company.city.slug,
        category=company.category.slug,
        phone=company.phone,
        email=company.email,
        website=company.website,
        address=company.address,
        rating=company.rating,
        reviews_count=company.reviews_count,
        is_verified=company.is_verified,
        is_featured=company.is_featured,
        created_at=company.created_at,
    )


@router.get("", response_model=CompanyListResponse)
def list_companies(
    db: Session = Depends(get_db),
    q: str | None = Query(default=None, max_length=200),
    country: str | None = Query(default=None, max_length=120),
    city: str | None = Query(default=None, max_length=120),
    category: str | None = Query(default=None, max_length=120),
    min_rating: float | None = Query(default=None, ge=0, le=5),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> CompanyListResponse:
    stmt = select(Company).where(Company.is_active.is_(True))

    if q:
        stmt = stmt.where(func.lower(Company.name).like(f"%{q.strip().lower()}%"))
    if country:
        stmt = stmt.join(Country, Country.id == Company.country_id).where(Country.slug == country.strip())
    if city:
        stmt = stmt.join(City, City.id == Company.city_id).where(City.slug == city.strip())
    if category:
        stmt = stmt.join(Category, Category.id == Company.category_id).where(Category.slug == category.strip())
    if min_rating is not None:
        stmt = stmt.where(Company.rating >= min_rating)

    total = db.scalar(select(func.count()).select_from(stmt.subquery()))
    items = list(
        db.scalars(
            stmt.options(joinedload(Company.country), joinedload(Company.city), joinedload(Company.category))
            .order_by(Company.rating.desc(), Company.reviews_count.desc(), Company.name)
            .limit(limit)
            .offset(offset)
        ).all()
    )
    return CompanyListResponse(items=[_to_company_response(c) for c in items], total=int(total or 0))


@router.get("/{slug}", response_model=CompanyResponse)
def get_company(slug: str, db: Session = Depends(get_db)) -> CompanyResponse:
    company = db.scalar(select(Company).where(Company.slug == slug, Company.is_active.is_(True)))
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return _to_company_response(company)

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from murabaat.db.base import Base


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    country_id: Mapped[str] = mapped_column(String(36), ForeignKey("countries.id"), nullable=False, index=True)
    city_id: Mapped[str] = mapped_column(String(36), ForeignKey("cities.id"), nullable=False, index=True)
    category_id: Mapped[str] = mapped_column(String(36), ForeignKey("categories.id"), nullable=False, index=True)

    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    website: Mapped[str | None] = mapped_column(String(300), nullable=True)
    address: Mapped[str | None] = mapped_column(String(250), nullable=True)

    # Denormalized from approved reviews; written only by services.ratings.
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, index=True)
    reviews_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    country: Mapped["Country"] = relationship()
    city: Mapped["City"] = relationship()
    category: Mapped["Category"] = relationship()

    reviews: Mapped[list["Review"]] = relationship(back_populates="company", cascade="all, delete-orphan")
    owners: Mapped[list["CompanyOwner"]] = relationship(back_populates="company", cascade="all, delete-orphan")


class CompanyOwner(Base):
    __tablename__ = "company_owners"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id: Mapped[str] = mapped_column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users_auth.id"), nullable=False, index=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    company: Mapped[Company] = relationship(back_populates="owners")
    user: Mapped["UserAuth"] = relationship(back_populates="owned_companies")

    __table_args__ = (UniqueConstraint("company_id", "user_id", name="uq_company_owners_company_user"),)


Index("ix_companies_country_city_category", Company.country_id, Company.city_id, Company.category_id)

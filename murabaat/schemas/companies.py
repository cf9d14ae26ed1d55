from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class CompanyResponse(BaseModel):
    id: str
    slug: str
    name: str
    description: str | None
    country: str
    city: str
    category: str
    phone: str | None
    email: str | None
    website: str | None
    address: str | None
    rating: float
    reviews_count: int
    is_verified: bool
    is_featured: bool
    created_at: datetime


class CompanyListResponse(BaseModel):
    items: list[CompanyResponse]
    total: int


class CompanyCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    slug: str | None = Field(default=None, max_length=200)
    country_id: str
    city_id: str
    category_id: str
    description: str | None = Field(default=None, max_length=2000)
    phone: str | None = Field(default=None, max_length=40)
    email: EmailStr | None = None
    website: str | None = Field(default=None, max_length=300)
    address: str | None = Field(default=None, max_length=250)
    is_verified: bool = False
    is_featured: bool = False


class CompanyOwnerCreate(BaseModel):
    user_id: str
    is_primary: bool = True


class CompanyOwnerResponse(BaseModel):
    id: str
    company_id: str
    user_id: str
    is_primary: bool

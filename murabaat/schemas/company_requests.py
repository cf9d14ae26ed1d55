from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from murabaat.models.enums import CompanyRequestAction
from murabaat.schemas.companies import CompanyResponse


class CompanyRequestCreate(BaseModel):
    company_name: str = Field(min_length=2, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    services: str | None = Field(default=None, max_length=2000)
    country_id: str
    city_id: str
    category_id: str
    address: str | None = Field(default=None, max_length=250)
    phone: str = Field(min_length=1, max_length=40)
    email: EmailStr
    website: str | None = Field(default=None, max_length=300)
    owner_name: str = Field(min_length=2, max_length=120)
    owner_email: EmailStr
    owner_phone: str = Field(min_length=1, max_length=40)


class CompanyRequestSubmittedResponse(BaseModel):
    message: str
    request_id: str


class CompanyRequestStatusItem(BaseModel):
    id: str
    company_name: str
    status: str
    created_at: datetime
    reviewed_at: datetime | None
    admin_notes: str | None


class CompanyRequestResponse(CompanyRequestStatusItem):
    description: str
    services: str | None
    country_id: str
    city_id: str
    category_id: str
    address: str | None
    phone: str
    email: str
    website: str | None
    owner_name: str
    owner_email: str
    owner_phone: str
    reviewed_by: str | None
    company_id: str | None


class CompanyRequestListResponse(BaseModel):
    items: list[CompanyRequestResponse]
    total: int


class CompanyRequestAdjudication(BaseModel):
    action: CompanyRequestAction
    admin_notes: str | None = Field(default=None, max_length=1000)


class CompanyRequestAdjudicationResponse(BaseModel):
    message: str
    request: CompanyRequestResponse
    company: CompanyResponse | None = None
    owner_id: str | None = None
    temp_password: str | None = None

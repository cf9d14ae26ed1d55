from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from murabaat.core.config import settings
from murabaat.core.rate_limit import rate_limit
from murabaat.db.session import get_db
from murabaat.models.company_requests import CompanyRequest
from murabaat.schemas.company_requests import (
    CompanyRequestCreate,
    CompanyRequestResponse,
    CompanyRequestStatusItem,
    CompanyRequestSubmittedResponse,
)
from murabaat.services.company_requests import requests_for_email, submit_company_request

router = APIRouter(prefix="/company-requests", tags=["company-requests"])


def _to_request_response(r: CompanyRequest) -> CompanyRequestResponse:
    return CompanyRequestResponse.model_validate(r, from_attributes=True)


@router.post(
    "",
    response_model=CompanyRequestSubmittedResponse,
    status_code=201,
    dependencies=[rate_limit("company-requests", limit=settings.company_request_rate_limit)],
)
def create_company_request(
    payload: CompanyRequestCreate,
    db: Session = Depends(get_db),
) -> CompanyRequestSubmittedResponse:
    request = submit_company_request(db, **payload.model_dump())
    return CompanyRequestSubmittedResponse(message="تم إرسال طلب إضافة الشركة بنجاح", request_id=request.id)


@router.get("", response_model=list[CompanyRequestStatusItem])
def company_request_status(
    email: str = Query(min_length=3, max_length=320),
    db: Session = Depends(get_db),
) -> list[CompanyRequestStatusItem]:
    items = requests_for_email(db, email=email.strip())
    return [CompanyRequestStatusItem.model_validate(r, from_attributes=True) for r in items]

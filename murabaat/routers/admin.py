from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from murabaat.core.config import settings
from murabaat.core.deps import get_principal, require_role
from murabaat.db.session import get_db
from murabaat.models.enums import (
    CompanyRequestAction,
    CompanyRequestStatus,
    ModerationAction,
    ReportReason,
    ReportStatus,
    ReportStatusFilter,
    ReviewStatusFilter,
    UserRole,
)
from murabaat.models.reviews import ReviewReport
from murabaat.routers.companies import _to_company_response
from murabaat.routers.company_requests import _to_request_response
from murabaat.routers.reviews import _to_review_response
from murabaat.schemas.common import MessageResponse
from murabaat.schemas.companies import CompanyCreate, CompanyOwnerCreate, CompanyOwnerResponse, CompanyResponse
from murabaat.schemas.company_requests import (
    CompanyRequestAdjudication,
    CompanyRequestAdjudicationResponse,
    CompanyRequestListResponse,
    CompanyRequestResponse,
)
from murabaat.schemas.reports import (
    ReportAdjudication,
    ReportAdjudicationResponse,
    ReportListResponse,
    ReportResponse,
    ReportStatsResponse,
)
from murabaat.schemas.reviews import (
    ModerationRequest,
    ModerationResponse,
    RecalculateResponse,
    ReviewListResponse,
    ReviewStatsResponse,
)
from murabaat.services import companies as company_service
from murabaat.services import company_requests, moderation, reports
from murabaat.services.permissions import Principal
from murabaat.services.ratings import recompute_all_company_ratings
from murabaat.services.reviews import list_reviews_for_admin
from murabaat.services.stats import review_stats

admin_only = require_role(UserRole.admin, UserRole.super_admin)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_only)])


def _to_report_response(r: ReviewReport) -> ReportResponse:
    review = r.review
    return ReportResponse(
        id=r.id,
        review_id=r.review_id,
        company_id=review.company_id if review else None,
        company_name=review.company.name if review else None,
        reason=ReportReason(r.reason),
        description=r.description,
        reporter_email=r.reporter_email,
        status=r.status,
        created_at=r.created_at,
        resolved_at=r.resolved_at,
    )


# Reviews


@router.get("/reviews", response_model=ReviewListResponse)
def admin_reviews(
    db: Session = Depends(get_db),
    status: ReviewStatusFilter = Query(default=ReviewStatusFilter.pending),
    rating: int | None = Query(default=None, ge=1, le=5),
    company_id: str | None = Query(default=None),
    q: str | None = Query(default=None, max_length=200),
    limit: int = Query(default=settings.default_page_size, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReviewListResponse:
    items, total = list_reviews_for_admin(
        db,
        status=status,
        rating=rating,
        company_ids=[company_id] if company_id else None,
        q=q,
        limit=limit,
        offset=offset,
    )
    return ReviewListResponse(items=[_to_review_response(r) for r in items], total=total)


@router.get("/reviews/stats", response_model=ReviewStatsResponse)
def admin_review_stats(db: Session = Depends(get_db)) -> ReviewStatsResponse:
    stats = review_stats(db)
    return ReviewStatsResponse(**stats.__dict__)


@router.patch("/reviews/{review_id}", response_model=ModerationResponse)
def moderate_review(
    review_id: str,
    payload: ModerationRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> ModerationResponse:
    if payload.action is ModerationAction.approve:
        review = moderation.approve_review(db, principal, review_id=review_id)
        return ModerationResponse(message="تم الموافقة على التقييم بنجاح", data=_to_review_response(review))

    moderation.reject_review(db, principal, review_id=review_id)
    return ModerationResponse(message="تم رفض وحذف التقييم بنجاح")


@router.post("/recalculate-ratings", response_model=RecalculateResponse)
def recalculate_ratings(db: Session = Depends(get_db)) -> RecalculateResponse:
    return RecalculateResponse(companies=recompute_all_company_ratings(db))


# Reports


@router.get("/reports", response_model=ReportListResponse)
def admin_reports(
    db: Session = Depends(get_db),
    status: ReportStatusFilter = Query(default=ReportStatusFilter.all),
    reason: ReportReason | None = Query(default=None),
    limit: int = Query(default=settings.default_page_size, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReportListResponse:
    status_filter = None if status is ReportStatusFilter.all else ReportStatus(status.value.upper())
    items, total = reports.list_reports(db, status=status_filter, reason=reason, limit=limit, offset=offset)
    return ReportListResponse(items=[_to_report_response(r) for r in items], total=total)


@router.get("/reports/stats", response_model=ReportStatsResponse)
def admin_report_stats(db: Session = Depends(get_db)) -> ReportStatsResponse:
    stats = reports.report_stats(db)
    return ReportStatsResponse(**stats.__dict__)


@router.patch("/reports/{report_id}", response_model=ReportAdjudicationResponse)
def adjudicate_report(
    report_id: str,
    payload: ReportAdjudication,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> ReportAdjudicationResponse:
    report = reports.adjudicate_report(db, principal, report_id=report_id, decision=payload.action)
    if payload.action is ModerationAction.approve:
        message = "تم قبول البلاغ وحذف التقييم بنجاح"
    else:
        message = "تم رفض البلاغ. التقييم سيبقى منشوراً."
    return ReportAdjudicationResponse(message=message, data=_to_report_response(report))


# Companies


@router.post("/companies", response_model=CompanyResponse, status_code=201)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db)) -> CompanyResponse:
    company = company_service.create_company(db, **payload.model_dump())
    return _to_company_response(company)


@router.delete("/companies/{company_id}", response_model=MessageResponse)
def deactivate_company(company_id: str, db: Session = Depends(get_db)) -> MessageResponse:
    company_service.deactivate_company(db, company_id=company_id)
    return MessageResponse(message="تم إلغاء تفعيل الشركة")


@router.post("/companies/{company_id}/owners", response_model=CompanyOwnerResponse, status_code=201)
def add_company_owner(
    company_id: str,
    payload: CompanyOwnerCreate,
    db: Session = Depends(get_db),
) -> CompanyOwnerResponse:
    owner = company_service.add_company_owner(
        db, company_id=company_id, user_id=payload.user_id, is_primary=payload.is_primary
    )
    return CompanyOwnerResponse(
        id=owner.id, company_id=owner.company_id, user_id=owner.user_id, is_primary=owner.is_primary
    )


# Company requests

_REQUEST_MESSAGES = {
    CompanyRequestAction.approve: "تم الموافقة على الطلب وإنشاء الشركة بنجاح",
    CompanyRequestAction.reject: "تم رفض الطلب",
    CompanyRequestAction.needs_info: "تم تحديث حالة الطلب",
}


@router.get("/company-requests", response_model=CompanyRequestListResponse)
def admin_company_requests(
    db: Session = Depends(get_db),
    status: CompanyRequestStatus | None = Query(default=None),
    q: str | None = Query(default=None, max_length=200),
    limit: int = Query(default=settings.default_page_size, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> CompanyRequestListResponse:
    items, total = company_requests.list_company_requests(db, status=status, q=q, limit=limit, offset=offset)
    return CompanyRequestListResponse(items=[_to_request_response(r) for r in items], total=total)


@router.get("/company-requests/{request_id}", response_model=CompanyRequestResponse)
def admin_company_request(request_id: str, db: Session = Depends(get_db)) -> CompanyRequestResponse:
    return _to_request_response(company_requests.get_company_request(db, request_id))


@router.patch("/company-requests/{request_id}", response_model=CompanyRequestAdjudicationResponse)
def adjudicate_company_request(
    request_id: str,
    payload: CompanyRequestAdjudication,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> CompanyRequestAdjudicationResponse:
    outcome = company_requests.adjudicate_company_request(
        db, principal, request_id=request_id, action=payload.action, admin_notes=payload.admin_notes
    )
    return CompanyRequestAdjudicationResponse(
        message=_REQUEST_MESSAGES[payload.action],
        request=_to_request_response(outcome.request),
        company=_to_company_response(outcome.company) if outcome.company else None,
        owner_id=outcome.owner.id if outcome.owner else None,
        temp_password=outcome.temp_password,
    )

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from murabaat.core.config import settings
from murabaat.core.deps import get_principal
from murabaat.core.rate_limit import rate_limit
from murabaat.db.session import get_db
from murabaat.models.enums import REPORT_REASON_LABELS, ReportReason, ReviewSort
from murabaat.models.reviews import Review, ReviewReply
from murabaat.models.users import UserAuth
from murabaat.schemas.reports import ReportCreate, ReportSubmittedResponse
from murabaat.schemas.reviews import (
    HelpfulResponse,
    ReplyCreate,
    ReplyResponse,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
)
from murabaat.services import replies as reply_service
from murabaat.services import reviews as review_service
from murabaat.services.permissions import Principal
from murabaat.services.reports import submit_report

router = APIRouter(tags=["reviews"])


def _to_reply_response(r: ReviewReply) -> ReplyResponse:
    return ReplyResponse(
        id=r.id,
        review_id=r.review_id,
        user_id=r.user_id,
        content=r.content,
        is_from_owner=r.is_from_owner,
        created_at=r.created_at,
    )


def _to_review_response(r: Review) -> ReviewResponse:
    return ReviewResponse(
        id=r.id,
        company_id=r.company_id,
        user_id=r.user_id,
        user_name=r.user_name,
        rating=r.rating,
        title=r.title,
        comment=r.comment,
        is_approved=r.is_approved,
        helpful_count=r.helpful_count,
        not_helpful_count=r.not_helpful_count,
        images=[img.image_url for img in r.images],
        replies=[_to_reply_response(x) for x in r.replies],
        created_at=r.created_at,
    )


@router.get("/companies/{company_id}/reviews", response_model=ReviewListResponse)
def list_reviews(
    company_id: str,
    db: Session = Depends(get_db),
    sort: ReviewSort = Query(default=ReviewSort.newest),
    limit: int = Query(default=settings.default_page_size, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReviewListResponse:
    items, total = review_service.list_public_reviews(db, company_id=company_id, sort=sort, limit=limit, offset=offset)
    return ReviewListResponse(items=[_to_review_response(r) for r in items], total=total)


@router.post(
    "/companies/{company_id}/reviews",
    response_model=ReviewResponse,
    status_code=201,
    dependencies=[rate_limit("reviews", limit=settings.review_rate_limit)],
)
def create_review(
    company_id: str,
    payload: ReviewCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    user_email = payload.user_email
    if principal.is_authenticated and not user_email:
        user = db.get(UserAuth, principal.user_id)
        user_email = user.email if user else None

    review = review_service.submit_review(
        db,
        company_id=company_id,
        rating=payload.rating,
        comment=payload.comment,
        user_name=payload.user_name,
        user_email=user_email,
        title=payload.title,
        images=payload.images,
        user_id=principal.user_id,
    )
    return _to_review_response(review)


@router.post("/reviews/{review_id}/helpful", response_model=HelpfulResponse)
def mark_helpful(review_id: str, db: Session = Depends(get_db)) -> HelpfulResponse:
    counts = review_service.mark_helpful(db, review_id=review_id, helpful=True)
    return HelpfulResponse(helpful=counts.helpful, not_helpful=counts.not_helpful)


@router.delete("/reviews/{review_id}/helpful", response_model=HelpfulResponse)
def unmark_helpful(review_id: str, db: Session = Depends(get_db)) -> HelpfulResponse:
    counts = review_service.unmark_helpful(db, review_id=review_id, helpful=True)
    return HelpfulResponse(helpful=counts.helpful, not_helpful=counts.not_helpful)


@router.post("/reviews/{review_id}/not-helpful", response_model=HelpfulResponse)
def mark_not_helpful(review_id: str, db: Session = Depends(get_db)) -> HelpfulResponse:
    counts = review_service.mark_helpful(db, review_id=review_id, helpful=False)
    return HelpfulResponse(helpful=counts.helpful, not_helpful=counts.not_helpful)


@router.delete("/reviews/{review_id}/not-helpful", response_model=HelpfulResponse)
def unmark_not_helpful(review_id: str, db: Session = Depends(get_db)) -> HelpfulResponse:
    counts = review_service.unmark_helpful(db, review_id=review_id, helpful=False)
    return HelpfulResponse(helpful=counts.helpful, not_helpful=counts.not_helpful)


@router.get("/reviews/{review_id}/replies", response_model=list[ReplyResponse])
def list_replies(review_id: str, db: Session = Depends(get_db)) -> list[ReplyResponse]:
    return [_to_reply_response(r) for r in reply_service.list_replies(db, review_id=review_id)]


@router.post("/reviews/{review_id}/replies", response_model=ReplyResponse, status_code=201)
def create_reply(
    review_id: str,
    payload: ReplyCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
) -> ReplyResponse:
    reply = reply_service.add_reply(
        db,
        principal,
        review_id=review_id,
        content=payload.content,
        as_owner=payload.as_owner,
    )
    return _to_reply_response(reply)


@router.post(
    "/reviews/{review_id}/report",
    response_model=ReportSubmittedResponse,
    status_code=201,
    dependencies=[rate_limit("reports", limit=settings.report_rate_limit)],
)
def report_review(review_id: str, payload: ReportCreate, db: Session = Depends(get_db)) -> ReportSubmittedResponse:
    report = submit_report(
        db,
        review_id=review_id,
        reason=payload.reason,
        description=payload.description,
        reporter_email=payload.reporter_email,
    )
    return ReportSubmittedResponse(
        report_id=report.id,
        reason=REPORT_REASON_LABELS[ReportReason(report.reason)],
        status=report.status,
    )

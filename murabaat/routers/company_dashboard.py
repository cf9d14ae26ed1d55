from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from murabaat.core.config import settings
from murabaat.core.deps import require_role
from murabaat.db.session import get_db
from murabaat.models.enums import ReviewStatusFilter, UserRole
from murabaat.models.notifications import Notification
from murabaat.routers.reviews import _to_review_response
from murabaat.schemas.notifications import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    NotificationStatsResponse,
)
from murabaat.schemas.reviews import ReviewListResponse
from murabaat.services import notifications
from murabaat.services.permissions import Principal, dashboard_company_ids
from murabaat.services.reviews import list_reviews_for_admin

router = APIRouter(prefix="/company", tags=["company-dashboard"])

dashboard_user = require_role(UserRole.company_owner, UserRole.admin, UserRole.super_admin)


def _to_notification_response(n: Notification) -> NotificationResponse:
    return NotificationResponse.model_validate(n, from_attributes=True)


@router.get("/reviews", response_model=ReviewListResponse)
def my_company_reviews(
    principal: Principal = Depends(dashboard_user),
    db: Session = Depends(get_db),
    status: ReviewStatusFilter = Query(default=ReviewStatusFilter.all),
    limit: int = Query(default=settings.default_page_size, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReviewListResponse:
    # Owners see their own companies; admins see every company.
    items, total = list_reviews_for_admin(
        db, status=status, company_ids=dashboard_company_ids(db, principal), limit=limit, offset=offset
    )
    return ReviewListResponse(items=[_to_review_response(r) for r in items], total=total)


@router.get("/notifications", response_model=NotificationListResponse)
def my_notifications(
    principal: Principal = Depends(dashboard_user),
    db: Session = Depends(get_db),
    unread_only: bool = Query(default=False),
    limit: int = Query(default=notifications.MAX_NOTIFICATIONS, ge=1, le=notifications.MAX_NOTIFICATIONS),
) -> NotificationListResponse:
    items, stats = notifications.list_notifications(db, principal, unread_only=unread_only, limit=limit)
    return NotificationListResponse(
        items=[_to_notification_response(n) for n in items],
        stats=NotificationStatsResponse(unread_count=stats.unread_count, by_type=stats.by_type),
    )


@router.patch("/notifications/read-all", response_model=MarkAllReadResponse)
def mark_all_notifications_read(
    principal: Principal = Depends(dashboard_user),
    db: Session = Depends(get_db),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=notifications.mark_all_read(db, principal))


@router.patch("/notifications/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: str,
    principal: Principal = Depends(dashboard_user),
    db: Session = Depends(get_db),
) -> NotificationResponse:
    return _to_notification_response(notifications.mark_read(db, principal, notification_id=notification_id))

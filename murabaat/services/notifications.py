from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from murabaat.models.enums import NotificationType
from murabaat.models.notifications import Notification
from murabaat.models.reviews import Review
from murabaat.services.errors import NotFoundError
from murabaat.services.permissions import Principal, dashboard_company_ids, ensure_authenticated

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 50


def notify_new_review(db: Session, review: Review) -> Notification:
    """Tell every owner of the reviewed company that a review is waiting."""

    notification = Notification(
        company_id=review.company_id,
        type=NotificationType.review.value,
        title="مراجعة جديدة",
        message=f"تم إضافة مراجعة جديدة من {review.user_name} لشركة {review.company.name}",
        data={"review_id": review.id},
        is_read=False,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.info("Notification created: notification=%s company=%s", notification.id, notification.company_id)
    return notification


def _visible_to(db: Session, principal: Principal):
    user_id = ensure_authenticated(principal)
    stmt = select(Notification)
    company_ids = dashboard_company_ids(db, principal)
    if company_ids is not None:
        stmt = stmt.where(
            Notification.company_id.in_(company_ids),
            or_(Notification.user_id == user_id, Notification.user_id.is_(None)),
        )
    return stmt


@dataclass
class NotificationStats:
    unread_count: int
    by_type: dict[str, int] = field(default_factory=dict)


def list_notifications(
    db: Session,
    principal: Principal,
    *,
    unread_only: bool = False,
    limit: int = MAX_NOTIFICATIONS,
) -> tuple[list[Notification], NotificationStats]:
    stmt = _visible_to(db, principal)
    unread = stmt.where(Notification.is_read.is_(False)).subquery()
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))

    items = list(db.scalars(stmt.order_by(Notification.created_at.desc()).limit(limit)).all())

    by_type = {t.value: 0 for t in NotificationType}
    for type_, cnt in db.execute(select(unread.c.type, func.count()).group_by(unread.c.type)).all():
        by_type[type_] = cnt
    return items, NotificationStats(unread_count=sum(by_type.values()), by_type=by_type)


def mark_read(db: Session, principal: Principal, *, notification_id: str) -> Notification:
    stmt = _visible_to(db, principal).where(Notification.id == notification_id)
    notification = db.scalar(stmt)
    if not notification:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, principal: Principal) -> int:
    unread = _visible_to(db, principal).where(Notification.is_read.is_(False))
    ids = [n.id for n in db.scalars(unread).all()]
    if ids:
        db.execute(update(Notification).where(Notification.id.in_(ids)).values(is_read=True))
        db.commit()
    logger.info("Notifications marked read: user=%s count=%s", principal.user_id, len(ids))
    return len(ids)

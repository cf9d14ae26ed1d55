from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from murabaat.models.enums import ModerationAction, ReportReason, ReportStatus
from murabaat.models.reviews import Review, ReviewReport
from murabaat.services.errors import InvalidStateError, NotFoundError, ValidationError
from murabaat.services.moderation import delete_review
from murabaat.services.permissions import MODERATOR_ROLES, Principal, ensure_role
from murabaat.services.reviews import get_public_review
from murabaat.services.stats import percent

logger = logging.getLogger(__name__)


def submit_report(
    db: Session,
    *,
    review_id: str,
    reason: ReportReason | str,
    description: str,
    reporter_email: str | None = None,
) -> ReviewReport:
    try:
        reason = ReportReason(reason)
    except ValueError:
        raise ValidationError(f"Unknown report reason: {reason}")

    description = (description or "").strip()
    if not description:
        raise ValidationError("Report description is required")

    review = get_public_review(db, review_id)

    report = ReviewReport(
        review_id=review.id,
        reason=reason.value,
        description=description,
        reporter_email=(reporter_email or "").strip() or None,
        status=ReportStatus.pending.value,
    )
    db.add(report)
    db.commit()
    db.refresh(report)

    logger.info("Report submitted: report=%s review=%s reason=%s", report.id, review.id, reason.value)
    return report


def adjudicate_report(
    db: Session,
    principal: Principal,
    *,
    report_id: str,
    decision: ModerationAction | str,
) -> ReviewReport:
    """Approve (delete the reported review) or reject (keep it) a pending report."""

    ensure_role(principal, *MODERATOR_ROLES)
    try:
        decision = ModerationAction(decision)
    except ValueError:
        raise ValidationError(f"Unknown action: {decision}")

    report = db.get(ReviewReport, report_id)
    if not report:
        raise NotFoundError("Report not found")
    if report.status != ReportStatus.pending.value:
        raise InvalidStateError(f"Report already {report.status.lower()}")

    report.resolved_at = datetime.utcnow()

    if decision is ModerationAction.reject:
        report.status = ReportStatus.rejected.value
        db.add(report)
        db.commit()
        logger.info("Report rejected: report=%s by=%s", report.id, principal.user_id)
        db.refresh(report)
        return report

    report.status = ReportStatus.approved.value
    db.add(report)
    review = report.review
    if review is None:
        # The review was already removed (another report or a rejection).
        db.commit()
    else:
        delete_review(db, review)

    logger.info("Report approved: report=%s by=%s", report_id, principal.user_id)
    db.refresh(report)
    return report


def list_reports(
    db: Session,
    *,
    status: ReportStatus | None = None,
    reason: ReportReason | None = None,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[ReviewReport], int]:
    stmt = select(ReviewReport)
    if status is not None:
        stmt = stmt.where(ReviewReport.status == status.value)
    if reason is not None:
        stmt = stmt.where(ReviewReport.reason == reason.value)

    total = db.scalar(select(func.count()).select_from(stmt.subquery()))
    items = list(
        db.scalars(
            stmt.options(selectinload(ReviewReport.review).selectinload(Review.company))
            .order_by(ReviewReport.created_at.desc())
            .limit(limit)
            .offset(offset)
        ).all()
    )
    return items, int(total or 0)


@dataclass
class ReportStats:
    total: int
    pending: int
    approved: int
    rejected: int
    processing_rate: int
    by_reason: list[dict]


def report_stats(db: Session) -> ReportStats:
    by_status = dict(db.execute(select(ReviewReport.status, func.count()).group_by(ReviewReport.status)).all())
    total = sum(by_status.values())
    approved = by_status.get(ReportStatus.approved.value, 0)
    rejected = by_status.get(ReportStatus.rejected.value, 0)

    reason_rows = db.execute(
        select(ReviewReport.reason, func.count().label("cnt"))
        .group_by(ReviewReport.reason)
        .order_by(func.count().desc(), ReviewReport.reason)
    ).all()

    return ReportStats(
        total=total,
        pending=by_status.get(ReportStatus.pending.value, 0),
        approved=approved,
        rejected=rejected,
        processing_rate=percent(approved + rejected, total),
        by_reason=[
            {"reason": reason, "count": cnt, "percentage": percent(cnt, total)} for reason, cnt in reason_rows
        ],
    )

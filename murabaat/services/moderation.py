from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from murabaat.models.reviews import Review
from murabaat.services.errors import NotFoundError
from murabaat.services.permissions import MODERATOR_ROLES, Principal, ensure_role
from murabaat.services.ratings import recompute_company_rating

logger = logging.getLogger(__name__)


def _get_review(db: Session, review_id: str) -> Review:
    review = db.get(Review, review_id)
    if not review:
        raise NotFoundError("Review not found")
    return review


def refresh_company_rating(db: Session, *, company_id: str) -> None:
    """Recompute the aggregate after a moderation write that already committed.

    A failure here is logged and left for the next recompute; the moderation
    write itself is not undone.
    """
    try:
        recompute_company_rating(db, company_id=company_id)
    except (NotFoundError, SQLAlchemyError):
        db.rollback()
        logger.exception("Rating recompute failed for company %s; aggregate is stale", company_id)


def approve_review(db: Session, principal: Principal, *, review_id: str) -> Review:
    """PENDING -> APPROVED. Re-approving an approved review only re-runs the aggregator."""

    ensure_role(principal, *MODERATOR_ROLES)
    review = _get_review(db, review_id)

    was_approved = review.is_approved
    review.is_approved = True
    db.add(review)
    db.commit()

    logger.info(
        "Review approved: review=%s company=%s by=%s%s",
        review.id,
        review.company_id,
        principal.user_id,
        " (already approved)" if was_approved else "",
    )
    refresh_company_rating(db, company_id=review.company_id)
    db.refresh(review)
    return review


def delete_review(db: Session, review: Review) -> str:
    """Remove a review row and bring its company's aggregate back in line."""

    review_id, company_id, was_approved = review.id, review.company_id, review.is_approved
    db.delete(review)
    db.commit()
    logger.info("Review deleted: review=%s company=%s approved=%s", review_id, company_id, was_approved)

    refresh_company_rating(db, company_id=company_id)
    return company_id


def reject_review(db: Session, principal: Principal, *, review_id: str) -> None:
    """Rejection is a hard delete, from either PENDING or APPROVED."""

    ensure_role(principal, *MODERATOR_ROLES)
    review = _get_review(db, review_id)
    delete_review(db, review)
    logger.info("Review rejected: review=%s by=%s", review_id, principal.user_id)

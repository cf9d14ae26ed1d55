from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from murabaat.models.companies import Company
from murabaat.models.enums import ReviewSort, ReviewStatusFilter
from murabaat.models.reviews import Review, ReviewImage
from murabaat.services.errors import NotFoundError, ValidationError
from murabaat.services.notifications import notify_new_review

logger = logging.getLogger(__name__)

MAX_REVIEW_IMAGES = 3

_SORTS = {
    ReviewSort.newest: (Review.created_at.desc(),),
    ReviewSort.oldest: (Review.created_at.asc(),),
    ReviewSort.highest: (Review.rating.desc(), Review.created_at.desc()),
    ReviewSort.lowest: (Review.rating.asc(), Review.created_at.desc()),
    ReviewSort.helpful: (Review.helpful_count.desc(), Review.created_at.desc()),
}


def get_active_company(db: Session, company_id: str) -> Company:
    company = db.get(Company, company_id)
    if not company or not company.is_active:
        raise NotFoundError("Company not found")
    return company


def get_public_review(db: Session, review_id: str) -> Review:
    """Pending reviews, and reviews of deactivated companies, are hidden from the public."""
    review = db.get(Review, review_id)
    if not review or not review.is_approved or not review.company.is_active:
        raise NotFoundError("Review not found")
    return review


def submit_review(
    db: Session,
    *,
    company_id: str,
    rating: int,
    comment: str,
    user_name: str,
    user_email: str | None = None,
    title: str | None = None,
    images: Sequence[str] = (),
    user_id: str | None = None,
) -> Review:
    """Create a review awaiting moderation and notify the company owners.

    The company aggregate is not touched. A failed notification does not undo
    the review.
    """

    if not 1 <= int(rating) <= 5:
        raise ValidationError("Rating must be between 1 and 5")
    comment = (comment or "").strip()
    if not comment:
        raise ValidationError("Comment is required")
    user_name = (user_name or "").strip()
    if not user_name:
        raise ValidationError("Reviewer name is required")
    if len(images) > MAX_REVIEW_IMAGES:
        raise ValidationError(f"At most {MAX_REVIEW_IMAGES} images per review")

    company = get_active_company(db, company_id)

    review = Review(
        company_id=company.id,
        user_id=user_id,
        user_name=user_name,
        user_email=(user_email or "").strip() or None,
        rating=int(rating),
        title=(title or "").strip(),
        comment=comment,
        is_approved=False,
        helpful_count=0,
        not_helpful_count=0,
    )
    review.images = [ReviewImage(image_url=url, sort_order=i) for i, url in enumerate(images)]
    db.add(review)
    db.commit()
    db.refresh(review)

    logger.info("Review submitted: review=%s company=%s rating=%s", review.id, company.id, review.rating)

    try:
        notify_new_review(db, review)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Owner notification failed for review %s; review kept", review.id)
    return review


def list_public_reviews(
    db: Session,
    *,
    company_id: str,
    sort: ReviewSort = ReviewSort.newest,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Review], int]:
    get_active_company(db, company_id)

    stmt = select(Review).where(Review.company_id == company_id, Review.is_approved.is_(True))
    total = db.scalar(select(func.count()).select_from(stmt.subquery()))
    items = list(
        db.scalars(
            stmt.options(selectinload(Review.images), selectinload(Review.replies))
            .order_by(*_SORTS[sort])
            .limit(limit)
            .offset(offset)
        ).all()
    )
    return items, int(total or 0)


def list_reviews_for_admin(
    db: Session,
    *,
    status: ReviewStatusFilter = ReviewStatusFilter.all,
    rating: int | None = None,
    company_ids: Sequence[str] | None = None,
    q: str | None = None,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Review], int]:
    stmt = select(Review)

    if status is ReviewStatusFilter.pending:
        stmt = stmt.where(Review.is_approved.is_(False))
    elif status is ReviewStatusFilter.approved:
        stmt = stmt.where(Review.is_approved.is_(True))
    if rating:
        stmt = stmt.where(Review.rating == rating)
    if company_ids is not None:
        stmt = stmt.where(Review.company_id.in_(list(company_ids)))
    if q:
        pattern = f"%{q.lower()}%"
        stmt = stmt.join(Company, Company.id == Review.company_id).where(
            or_(
                func.lower(Review.title).like(pattern),
                func.lower(Review.comment).like(pattern),
                func.lower(Review.user_name).like(pattern),
                func.lower(Company.name).like(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(stmt.subquery()))
    items = list(
        db.scalars(
            stmt.options(selectinload(Review.images), selectinload(Review.replies))
            .order_by(Review.created_at.desc())
            .limit(limit)
            .offset(offset)
        ).all()
    )
    return items, int(total or 0)


@dataclass(frozen=True)
class HelpfulCounts:
    helpful: int
    not_helpful: int


def _read_counts(db: Session, review_id: str) -> HelpfulCounts:
    row = db.execute(
        select(Review.helpful_count, Review.not_helpful_count).where(Review.id == review_id)
    ).one()
    return HelpfulCounts(helpful=row[0], not_helpful=row[1])


def mark_helpful(db: Session, *, review_id: str, helpful: bool = True) -> HelpfulCounts:
    """Bump the helpful / not-helpful counter. Repeated calls count every time."""

    get_public_review(db, review_id)
    column = Review.helpful_count if helpful else Review.not_helpful_count
    db.execute(update(Review).where(Review.id == review_id).values({column: column + 1}))
    db.commit()
    return _read_counts(db, review_id)


def unmark_helpful(db: Session, *, review_id: str, helpful: bool = True) -> HelpfulCounts:
    get_public_review(db, review_id)
    column = Review.helpful_count if helpful else Review.not_helpful_count
    db.execute(update(Review).where(Review.id == review_id, column > 0).values({column: column - 1}))
    db.commit()
    return _read_counts(db, review_id)

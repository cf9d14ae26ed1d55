from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from murabaat.models.companies import Company
from murabaat.models.reviews import Review
from murabaat.services.errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingSummary:
    company_id: str
    rating: float
    reviews_count: int


def round_half_up(value: Decimal, places: int = 1) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def average_rating(ratings: list[int]) -> float:
    """Mean of ``ratings`` to one decimal, halves rounded up; 0 for no ratings."""
    if not ratings:
        return 0.0
    return round_half_up(Decimal(sum(ratings)) / Decimal(len(ratings)))


def recompute_company_rating(db: Session, *, company_id: str) -> RatingSummary:
    """Recompute ``rating``/``reviews_count`` of a company from its approved reviews.

    One read of the approved ratings, one update of the company row. No lock is
    taken: concurrent recomputes race and the last write wins, which is fine
    because calling this again always converges on the current review set.
    """

    ratings = list(
        db.scalars(
            select(Review.rating).where(Review.company_id == company_id, Review.is_approved.is_(True))
        ).all()
    )
    summary = RatingSummary(company_id=company_id, rating=average_rating(ratings), reviews_count=len(ratings))

    res = db.execute(
        update(Company)
        .where(Company.id == company_id)
        .values(rating=summary.rating, reviews_count=summary.reviews_count)
    )
    if not res.rowcount:
        db.rollback()
        raise NotFoundError(f"Company {company_id} not found")
    db.commit()

    logger.info(
        "Company rating recomputed: company=%s rating=%s reviews=%s",
        company_id,
        summary.rating,
        summary.reviews_count,
    )
    return summary


def recompute_all_company_ratings(db: Session) -> int:
    """Run :func:`recompute_company_rating` for every company, one at a time.

    Not transactional across companies; a failure leaves earlier companies
    updated. Safe to re-run.
    """

    company_ids = list(db.scalars(select(Company.id).order_by(Company.created_at)).all())
    for company_id in company_ids:
        recompute_company_rating(db, company_id=company_id)

    logger.info("Recomputed ratings for %s companies", len(company_ids))
    return len(company_ids)

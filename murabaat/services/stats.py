from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from murabaat.models.reviews import Review
from murabaat.services.ratings import round_half_up


def percent(part: int, total: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when ``total`` is 0."""
    if not total:
        return 0
    return int((Decimal(part) * 100 / Decimal(total)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass
class ReviewStats:
    total: int
    pending: int
    approved: int
    average_rating: float
    approval_rate: int
    distribution: list[dict]
    recent: int


def review_stats(db: Session, *, recent_days: int = 7) -> ReviewStats:
    total = int(db.scalar(select(func.count(Review.id))) or 0)
    approved = int(db.scalar(select(func.count(Review.id)).where(Review.is_approved.is_(True))) or 0)

    rating_sum = db.scalar(select(func.sum(Review.rating)).where(Review.is_approved.is_(True))) or 0
    avg = round_half_up(Decimal(int(rating_sum)) / Decimal(approved)) if approved else 0.0

    rows = db.execute(
        select(Review.rating, func.count(Review.id))
        .where(Review.is_approved.is_(True))
        .group_by(Review.rating)
        .order_by(Review.rating.desc())
    ).all()

    since = datetime.utcnow() - timedelta(days=recent_days)
    recent = int(db.scalar(select(func.count(Review.id)).where(Review.created_at >= since)) or 0)

    return ReviewStats(
        total=total,
        pending=total - approved,
        approved=approved,
        average_rating=avg,
        approval_rate=percent(approved, total),
        distribution=[
            {"rating": rating, "count": cnt, "percentage": percent(cnt, approved)} for rating, cnt in rows
        ],
        recent=recent,
    )

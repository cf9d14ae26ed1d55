from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from murabaat.models.reviews import ReviewReply
from murabaat.services.errors import InvalidStateError, Unauthorized, ValidationError
from murabaat.services.permissions import Principal, ensure_authenticated, owns_company
from murabaat.services.reviews import get_public_review

logger = logging.getLogger(__name__)


def list_replies(db: Session, *, review_id: str) -> list[ReviewReply]:
    get_public_review(db, review_id)
    stmt = select(ReviewReply).where(ReviewReply.review_id == review_id).order_by(ReviewReply.created_at.asc())
    return list(db.scalars(stmt).all())


def add_reply(
    db: Session,
    principal: Principal,
    *,
    review_id: str,
    content: str,
    as_owner: bool = False,
) -> ReviewReply:
    """Attach a reply to an approved review.

    ``is_from_owner`` comes from the company-ownership table, never from the
    caller. Each review takes at most one owner reply.
    """

    user_id = ensure_authenticated(principal)
    content = (content or "").strip()
    if not content:
        raise ValidationError("Reply content is required")

    review = get_public_review(db, review_id)

    is_owner = owns_company(db, user_id=user_id, company_id=review.company_id)
    if as_owner and not is_owner:
        raise Unauthorized("Only an owner of this company can reply on its behalf")

    is_from_owner = as_owner and is_owner
    if is_from_owner:
        existing = db.scalar(
            select(ReviewReply.id).where(ReviewReply.review_id == review.id, ReviewReply.is_from_owner.is_(True))
        )
        if existing:
            raise InvalidStateError("This review already has an owner reply")

    reply = ReviewReply(review_id=review.id, user_id=user_id, content=content, is_from_owner=is_from_owner)
    db.add(reply)
    db.commit()
    db.refresh(reply)

    logger.info("Reply added: reply=%s review=%s owner=%s", reply.id, review.id, is_from_owner)
    return reply

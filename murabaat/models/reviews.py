from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from murabaat.db.base import Base
from murabaat.models.enums import ReportStatus


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    company_id: Mapped[str] = mapped_column(String(36), ForeignKey("companies.id"), nullable=False, index=True)
    # Registered authors are linked; anonymous ones only leave name/email.
    user_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("users_auth.id"), nullable=True, index=True)
    user_name: Mapped[str] = mapped_column(String(120), nullable=False)
    user_email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    comment: Mapped[str] = mapped_column(String(2000), nullable=False)

    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    helpful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    not_helpful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    company: Mapped["Company"] = relationship(back_populates="reviews")
    images: Mapped[list["ReviewImage"]] = relationship(
        back_populates="review", cascade="all, delete-orphan", order_by="ReviewImage.sort_order"
    )
    replies: Mapped[list["ReviewReply"]] = relationship(
        back_populates="review", cascade="all, delete-orphan", order_by="ReviewReply.created_at"
    )
    # No delete cascade: reports outlive the review, their review_id is nulled.
    reports: Mapped[list["ReviewReport"]] = relationship(back_populates="review")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        CheckConstraint("helpful_count >= 0 AND not_helpful_count >= 0", name="ck_reviews_counters"),
    )


class ReviewImage(Base):
    __tablename__ = "review_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    review_id: Mapped[str] = mapped_column(String(36), ForeignKey("reviews.id"), nullable=False, index=True)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    review: Mapped[Review] = relationship(back_populates="images")


class ReviewReply(Base):
    __tablename__ = "review_replies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    review_id: Mapped[str] = mapped_column(String(36), ForeignKey("reviews.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users_auth.id"), nullable=False, index=True)
    content: Mapped[str] = mapped_column(String(1000), nullable=False)
    is_from_owner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    review: Mapped[Review] = relationship(back_populates="replies")


class ReviewReport(Base):
    __tablename__ = "review_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    review_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("reviews.id", ondelete="SET NULL"), nullable=True, index=True
    )
    reason: Mapped[str] = mapped_column(String(40), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    reporter_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ReportStatus.pending.value, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    review: Mapped[Review | None] = relationship(back_populates="reports")


Index("ix_reviews_company_approved_created_at", Review.company_id, Review.is_approved, Review.created_at)

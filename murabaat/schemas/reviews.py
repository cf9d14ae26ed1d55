from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from murabaat.models.enums import ModerationAction


class ReviewCreate(BaseModel):
    user_name: str = Field(min_length=2, max_length=120)
    user_email: EmailStr | None = None
    rating: int = Field(ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str = Field(min_length=10, max_length=1000)
    images: list[str] = Field(default_factory=list, max_length=3)


class ReplyCreate(BaseModel):
    content: str = Field(min_length=1, max_length=1000)
    as_owner: bool = False


class ReplyResponse(BaseModel):
    id: str
    review_id: str
    user_id: str
    content: str
    is_from_owner: bool
    created_at: datetime


class ReviewResponse(BaseModel):
    id: str
    company_id: str
    user_id: str | None
    user_name: str
    rating: int
    title: str
    comment: str
    is_approved: bool
    helpful_count: int
    not_helpful_count: int
    images: list[str]
    replies: list[ReplyResponse]
    created_at: datetime


class ReviewListResponse(BaseModel):
    items: list[ReviewResponse]
    total: int


class HelpfulResponse(BaseModel):
    helpful: int
    not_helpful: int


class ModerationRequest(BaseModel):
    action: ModerationAction


class ModerationResponse(BaseModel):
    success: bool = True
    message: str
    data: ReviewResponse | None = None


class RatingDistributionItem(BaseModel):
    rating: int
    count: int
    percentage: int


class ReviewStatsResponse(BaseModel):
    total: int
    pending: int
    approved: int
    average_rating: float
    approval_rate: int
    distribution: list[RatingDistributionItem]
    recent: int


class RecalculateResponse(BaseModel):
    success: bool = True
    companies: int

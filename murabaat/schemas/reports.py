from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from murabaat.models.enums import ModerationAction, ReportReason


class ReportCreate(BaseModel):
    reason: ReportReason
    description: str = Field(min_length=10, max_length=500)
    reporter_email: EmailStr | None = None


class ReportSubmittedResponse(BaseModel):
    report_id: str
    reason: str
    status: str


class ReportResponse(BaseModel):
    id: str
    review_id: str | None
    company_id: str | None
    company_name: str | None
    reason: ReportReason
    description: str
    reporter_email: str | None
    status: str
    created_at: datetime
    resolved_at: datetime | None


class ReportListResponse(BaseModel):
    items: list[ReportResponse]
    total: int


class ReportAdjudication(BaseModel):
    action: ModerationAction


class ReportAdjudicationResponse(BaseModel):
    success: bool = True
    message: str
    data: ReportResponse


class ReasonBreakdownItem(BaseModel):
    reason: str
    count: int
    percentage: int


class ReportStatsResponse(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
    processing_rate: int
    by_reason: list[ReasonBreakdownItem]

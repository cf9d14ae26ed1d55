from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    company_id: str
    type: str
    title: str
    message: str
    data: dict | None
    is_read: bool
    created_at: datetime


class NotificationStatsResponse(BaseModel):
    unread_count: int
    by_type: dict[str, int]


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    stats: NotificationStatsResponse


class MarkAllReadResponse(BaseModel):
    updated: int

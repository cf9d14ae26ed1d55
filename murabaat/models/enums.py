from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    anonymous = "anonymous"
    user = "user"
    company_owner = "company_owner"
    admin = "admin"
    super_admin = "super_admin"


class ReportReason(str, Enum):
    spam = "SPAM"
    inappropriate_language = "INAPPROPRIATE_LANGUAGE"
    fake_review = "FAKE_REVIEW"
    harassment = "HARASSMENT"
    copyright_violation = "COPYRIGHT_VIOLATION"
    other = "OTHER"


class ReportStatus(str, Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"


class ModerationAction(str, Enum):
    approve = "approve"
    reject = "reject"


class ReviewStatusFilter(str, Enum):
    pending = "pending"
    approved = "approved"
    all = "all"


class ReportStatusFilter(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    all = "all"


class ReviewSort(str, Enum):
    newest = "newest"
    oldest = "oldest"
    highest = "highest"
    lowest = "lowest"
    helpful = "helpful"


# Arabic labels shown to the reporter.
REPORT_REASON_LABELS = {
    ReportReason.spam: "رسائل مزعجة",
    ReportReason.inappropriate_language: "لغة غير لائقة",
    ReportReason.fake_review: "تقييم مزيف",
    ReportReason.harassment: "تحرش",
    ReportReason.copyright_violation: "انتهاك حقوق الطبع",
    ReportReason.other: "أخرى",
}


class NotificationType(str, Enum):
    review = "review"
    message = "message"
    system = "system"
    award = "award"


class CompanyRequestStatus(str, Enum):
    pending = "PENDING"
    approved = "APPROVED"
    rejected = "REJECTED"
    needs_info = "NEEDS_INFO"


class CompanyRequestAction(str, Enum):
    approve = "approve"
    reject = "reject"
    needs_info = "needs_info"

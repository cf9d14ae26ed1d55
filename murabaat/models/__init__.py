from murabaat.models.users import UserAuth
from murabaat.models.taxonomy import Category, City, Country
from murabaat.models.companies import Company, CompanyOwner
from murabaat.models.reviews import Review, ReviewImage, ReviewReply, ReviewReport
from murabaat.models.notifications import Notification
from murabaat.models.company_requests import CompanyRequest

__all__ = [
    "UserAuth",
    "Country",
    "City",
    "Category",
    "Company",
    "CompanyOwner",
    "Review",
    "ReviewImage",
    "ReviewReply",
    "ReviewReport",
    "Notification",
    "CompanyRequest",
]

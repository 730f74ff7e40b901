"""Application models package."""

from app.models.audit_log import AuditLog
from app.models.company import Company, Organization, Place
from app.models.delivery import CompanyDelivery, DeliveryZone
from app.models.schedule import CompanySchedule, CompanyScheduleHour
from app.models.user import User

__all__ = [
    "AuditLog", "Organization", "Place", "Company", "CompanyDelivery", "DeliveryZone",
    "CompanySchedule", "CompanyScheduleHour", "User",
]

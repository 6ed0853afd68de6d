"""
Service layer - one service per aggregate, each constructed with a Session
"""
from pms.services.tax_service import TaxService
from pms.services.room_service import RoomService
from pms.services.guest_service import GuestService
from pms.services.reservation_service import ReservationService
from pms.services.billing_service import BillingService
from pms.services.checkin_service import CheckInService
from pms.services.document_service import DocumentService
from pms.services.checkout_service import CheckOutService
from pms.services.night_audit_service import NightAuditService
from pms.services.report_service import ReportService

__all__ = [
    "TaxService", "RoomService", "GuestService", "ReservationService",
    "BillingService", "CheckInService", "DocumentService",
    "CheckOutService", "NightAuditService", "ReportService",
]

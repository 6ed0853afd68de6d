"""
Checkout service
Settles the folio, archives the invoice and GRC, then closes the booking.

Order of a checkout:
1. load the open booking
2. record the final payment (committed on its own, never lost)
3. recompute the totals including that payment
4-5. archive invoice + GRC (one transaction)
6. close the booking
7. room -> vacant_dirty

A booking is never closed unless both documents are stored. When a previous
attempt archived the documents but failed afterwards, a retry skips straight
to steps 6-7.
"""
import logging
from datetime import datetime, date
from typing import List, Optional
from sqlalchemy.orm import Session
from pms.domain.billing import FolioTotals, compute_totals
from pms.errors import ConflictError
from pms.models.ontology import (
    Booking, BookingStatus, RoomStatus, DocumentType
)
from pms.models.schemas import CheckOutRequest, PaymentCreate
from pms.services.billing_service import BillingService
from pms.services.document_service import DocumentService
from pms.services.tax_service import TaxService

logger = logging.getLogger(__name__)


class CheckOutService:
    """Checkout service"""

    def __init__(self, db: Session):
        self.db = db
        self.billing_service = BillingService(db)
        self.document_service = DocumentService(db)
        self.tax_service = TaxService(db)

    def get_today_expected_checkouts(self, today: Optional[date] = None) -> List[Booking]:
        """In-house bookings due to leave today"""
        today = today or date.today()
        return self.db.query(Booking).filter(
            Booking.status == BookingStatus.CHECKED_IN,
            Booking.expected_check_out_date == today
        ).order_by(Booking.id).all()

    def get_overdue_stays(self, today: Optional[date] = None) -> List[Booking]:
        """In-house bookings past their expected checkout"""
        today = today or date.today()
        return self.db.query(Booking).filter(
            Booking.status == BookingStatus.CHECKED_IN,
            Booking.expected_check_out_date < today
        ).order_by(Booking.expected_check_out_date).all()

    def preview_checkout(self, booking_id: int) -> dict:
        """Totals and the amount to collect; writes nothing"""
        booking = self.billing_service.get_open_booking(booking_id)
        rates = self.tax_service.get_active_rates()
        totals = self.billing_service.compute_totals(booking.id, rates)
        return {
            'booking_id': booking.id,
            'taxes': rates.to_dict(),
            'totals': totals.to_dict(),
            'settlement_due': totals.settlement_due,
        }

    def check_out(self, data: CheckOutRequest, operator_id: Optional[int] = None) -> dict:
        booking = self.billing_service.get_booking(data.booking_id)
        if booking.status != BookingStatus.CHECKED_IN:
            raise ConflictError(f"Booking {booking.id} is already checked out")

        if self.document_service.has_documents(booking.id):
            # Retry after a failure that happened past archival
            if data.payment_amount > 0:
                raise ConflictError(
                    f"Booking {booking.id} already has an archived invoice; "
                    f"a new payment would not match it"
                )
            logger.warning(f"Booking {booking.id}: documents already archived, completing checkout")
            documents = {d.document_type: d for d in self.document_service.get_documents_by_booking(booking.id)}
            invoice = documents[DocumentType.INVOICE]
            grc = documents[DocumentType.GRC]
            totals = FolioTotals.from_dict(invoice.document_data["totals"])
        else:
            if data.payment_amount > 0:
                self.billing_service.add_payment(
                    booking.id,
                    PaymentCreate(amount=data.payment_amount, payment_mode=data.payment_mode,
                                  notes="Settlement at checkout"),
                    operator_id
                )

            rates = self.tax_service.get_active_rates()
            charges = self.billing_service.get_charges(booking.id)
            payments = self.billing_service.get_payments(booking.id)
            totals = compute_totals(
                (c.amount for c in charges), (p.amount for p in payments), rates
            )
            logger.info(
                f"Checkout booking {booking.id}: grand total {totals.grand_total}, "
                f"paid {totals.total_paid}, balance {totals.balance}"
            )
            invoice, grc = self.document_service.archive_checkout_documents(
                booking, charges, payments, rates, totals
            )

        booking.status = BookingStatus.CHECKED_OUT
        booking.actual_check_out_date = datetime.now()
        booking.checked_out_by = operator_id
        booking.room.status = RoomStatus.VACANT_DIRTY
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} checked out of room {booking.room.room_number}")

        return {
            'booking_id': booking.id,
            'status': booking.status,
            'actual_check_out_date': booking.actual_check_out_date,
            'invoice_number': invoice.document_number,
            'grc_number': grc.document_number,
            'totals': totals.to_dict(),
        }

"""
Billing service - folio operations
Appends FolioCharge and Payment rows to a booking and derives its totals.
Both ledgers are append-only: nothing here updates or deletes a posted row.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from pms.domain.billing import FolioTotals, TaxRates, compute_totals
from pms.errors import ConflictError, NotFoundError
from pms.models.ontology import (
    Booking, BookingStatus, FolioCharge, ChargeType, Payment
)
from pms.models.schemas import ChargeCreate, PaymentCreate
from pms.services.tax_service import TaxService

logger = logging.getLogger(__name__)


def room_rent_description(booking: Booking) -> str:
    room = booking.room
    return f"Room Rent - {room.room_number} ({room.room_type.name})"


class BillingService:
    """Folio / billing service"""

    def __init__(self, db: Session):
        self.db = db
        self.tax_service = TaxService(db)

    # ============== Lookups ==============

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def get_open_booking(self, booking_id: int) -> Booking:
        """Booking that still accepts charges and payments"""
        booking = self.get_booking(booking_id)
        if booking.status != BookingStatus.CHECKED_IN:
            raise ConflictError(f"Booking {booking_id} is {booking.status.value}; folio is closed")
        return booking

    def get_charges(self, booking_id: int) -> List[FolioCharge]:
        return self.db.query(FolioCharge).filter(
            FolioCharge.booking_id == booking_id
        ).order_by(FolioCharge.charge_date, FolioCharge.id).all()

    def get_payments(self, booking_id: int) -> List[Payment]:
        return self.db.query(Payment).filter(
            Payment.booking_id == booking_id
        ).order_by(Payment.payment_date, Payment.id).all()

    def has_room_rent(self, booking_id: int, charge_date: date) -> bool:
        """Whether the night of charge_date is already on the folio"""
        return self.db.query(FolioCharge.id).filter(
            FolioCharge.booking_id == booking_id,
            FolioCharge.charge_date == charge_date,
            FolioCharge.charge_type == ChargeType.ROOM_RENT
        ).first() is not None

    # ============== Posting ==============

    def post_charge(self, booking_id: int, data: ChargeCreate,
                    operator_id: Optional[int] = None) -> FolioCharge:
        """
        Post a charge to an open folio
        A second room_rent for the same night is refused
        """
        booking = self.get_open_booking(booking_id)

        if data.charge_type == ChargeType.ROOM_RENT and self.has_room_rent(booking.id, data.charge_date):
            logger.warning(f"Duplicate room rent refused: booking {booking.id} night {data.charge_date}")
            raise ConflictError(f"Room rent for {data.charge_date.isoformat()} is already posted")

        charge = FolioCharge(
            booking_id=booking.id,
            charge_date=data.charge_date,
            description=data.description,
            amount=data.amount,
            charge_type=data.charge_type,
            posted_by=operator_id
        )
        self.db.add(charge)
        self.db.commit()
        self.db.refresh(charge)
        logger.info(f"Posted {charge.charge_type.value} {charge.amount} to booking {booking.id}")
        return charge

    def post_room_rent(self, booking: Booking, charge_date: date,
                       operator_id: Optional[int] = None,
                       description: Optional[str] = None) -> Optional[FolioCharge]:
        """
        Add one night of room rent at the room type's base rate.
        Returns None when that night is already posted. Does not commit;
        callers commit together with the rest of their unit of work.
        """
        if self.has_room_rent(booking.id, charge_date):
            return None

        charge = FolioCharge(
            booking_id=booking.id,
            charge_date=charge_date,
            description=description or room_rent_description(booking),
            amount=booking.room.room_type.base_rate,
            charge_type=ChargeType.ROOM_RENT,
            posted_by=operator_id
        )
        self.db.add(charge)
        self.db.flush()
        return charge

    def add_payment(self, booking_id: int, data: PaymentCreate,
                    operator_id: Optional[int] = None,
                    payment_date: Optional[datetime] = None) -> Payment:
        """Record a payment against an open folio (committed immediately)"""
        booking = self.get_open_booking(booking_id)

        payment = Payment(
            booking_id=booking.id,
            payment_date=payment_date or datetime.now(),
            amount=data.amount,
            payment_mode=data.payment_mode,
            reference_number=data.reference_number,
            notes=data.notes,
            received_by=operator_id
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"Payment {payment.amount} ({payment.payment_mode.value}) recorded on booking {booking.id}")
        return payment

    # ============== Totals ==============

    def compute_totals(self, booking_id: int, rates: Optional[TaxRates] = None) -> FolioTotals:
        """Re-derive totals from the current charge and payment rows"""
        rates = rates or self.tax_service.get_active_rates()
        return compute_totals(
            (c.amount for c in self.get_charges(booking_id)),
            (p.amount for p in self.get_payments(booking_id)),
            rates
        )

    def get_folio(self, booking_id: int) -> dict:
        """Charges, payments, rates and totals of a booking"""
        booking = self.get_booking(booking_id)
        rates = self.tax_service.get_active_rates()
        charges = self.get_charges(booking.id)
        payments = self.get_payments(booking.id)
        totals = compute_totals(
            (c.amount for c in charges), (p.amount for p in payments), rates
        )
        return {
            'booking_id': booking.id,
            'charges': charges,
            'payments': payments,
            'taxes': {'cgst': rates.cgst, 'sgst': rates.sgst},
            'totals': {
                'subtotal': totals.subtotal,
                'cgst_amount': totals.cgst_amount,
                'sgst_amount': totals.sgst_amount,
                'grand_total': totals.grand_total,
                'total_paid': totals.total_paid,
                'balance': totals.balance,
            },
        }

    def revenue_between(self, start: datetime, end: datetime) -> Decimal:
        """Sum of payments received in [start, end)"""
        payments = self.db.query(Payment).filter(
            Payment.payment_date >= start,
            Payment.payment_date < end
        ).all()
        return sum((Decimal(p.amount) for p in payments), Decimal("0"))

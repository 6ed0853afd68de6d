"""
Night audit service
Posts one night of room rent for every stayover and reports the day's figures.
Running the audit again for the same date posts nothing new.
"""
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func
from pms.models.ontology import Booking, BookingStatus, Room, RoomStatus
from pms.services.billing_service import BillingService

logger = logging.getLogger(__name__)


def _day_bounds(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class NightAuditService:
    """Night audit service"""

    def __init__(self, db: Session):
        self.db = db
        self.billing_service = BillingService(db)

    def get_stayovers(self, audit_date: date) -> List[Booking]:
        """Checked-in bookings that arrived before the audit date"""
        start, _ = _day_bounds(audit_date)
        return self.db.query(Booking).filter(
            Booking.status == BookingStatus.CHECKED_IN,
            Booking.check_in_date < start
        ).order_by(Booking.id).all()

    def run(self, audit_date: Optional[date] = None, operator_id: Optional[int] = None) -> dict:
        """
        Post room rent dated audit_date for each stayover that does not have it yet
        Same-day check-ins already carry their first night from check-in
        """
        audit_date = audit_date or date.today()
        posted = []
        skipped = []

        for booking in self.get_stayovers(audit_date):
            charge = self.billing_service.post_room_rent(booking, audit_date, operator_id)
            if charge is None:
                skipped.append(booking.id)
            else:
                posted.append(charge)

        self.db.commit()

        total = sum((Decimal(c.amount) for c in posted), Decimal("0"))
        logger.info(
            f"Night audit {audit_date}: posted {len(posted)} charge(s) totalling {total}, "
            f"{len(skipped)} already posted"
        )
        return {
            'audit_date': audit_date,
            'charges_posted': len(posted),
            'total_amount': total,
            'skipped_booking_ids': skipped,
        }

    def summary(self, audit_date: Optional[date] = None) -> dict:
        """Room status counts and movement figures for a business date (read-only)"""
        audit_date = audit_date or date.today()
        start, end = _day_bounds(audit_date)

        status_counts = dict(
            self.db.query(Room.status, func.count(Room.id)).group_by(Room.status).all()
        )

        check_ins = self.db.query(func.count(Booking.id)).filter(
            Booking.check_in_date >= start,
            Booking.check_in_date < end
        ).scalar()
        check_outs = self.db.query(func.count(Booking.id)).filter(
            Booking.actual_check_out_date >= start,
            Booking.actual_check_out_date < end
        ).scalar()

        stayovers = self.get_stayovers(audit_date)
        pending = [
            b for b in stayovers
            if not self.billing_service.has_room_rent(b.id, audit_date)
        ]

        return {
            'audit_date': audit_date,
            'total_rooms': sum(status_counts.values()),
            'occupied_rooms': status_counts.get(RoomStatus.OCCUPIED, 0),
            'vacant_clean': status_counts.get(RoomStatus.VACANT_CLEAN, 0),
            'vacant_dirty': status_counts.get(RoomStatus.VACANT_DIRTY, 0),
            'out_of_order': status_counts.get(RoomStatus.OUT_OF_ORDER, 0),
            'check_ins': check_ins or 0,
            'check_outs': check_outs or 0,
            'stayovers': len(stayovers),
            'revenue': self.billing_service.revenue_between(start, end),
            'pending_charges': len(pending),
        }

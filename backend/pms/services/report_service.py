"""
Report service - front-office figures for one business date
Arrivals, departures, in-house count, occupancy and revenue received
"""
from datetime import date, datetime, time, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from pms.models.ontology import (
    Booking, BookingStatus, Reservation, ReservationStatus, Room
)
from pms.services.billing_service import BillingService


class ReportService:
    """Report service"""

    def __init__(self, db: Session):
        self.db = db
        self.billing_service = BillingService(db)

    def summary(self, report_date: Optional[date] = None) -> dict:
        report_date = report_date or date.today()
        day_start = datetime.combine(report_date, time.min)
        day_end = day_start + timedelta(days=1)
        month_start = datetime.combine(report_date.replace(day=1), time.min)

        total_rooms = self.db.query(func.count(Room.id)).scalar() or 0

        # Stays that were still open at the end of the day
        in_house = self.db.query(func.count(Booking.id)).filter(
            Booking.check_in_date < day_end,
            or_(Booking.actual_check_out_date.is_(None), Booking.actual_check_out_date >= day_end)
        ).scalar() or 0

        arrivals = self.db.query(func.count(Reservation.id)).filter(
            Reservation.check_in_date == report_date,
            Reservation.status == ReservationStatus.CONFIRMED
        ).scalar() or 0

        departures = self.db.query(func.count(Booking.id)).filter(
            Booking.expected_check_out_date == report_date,
            Booking.status == BookingStatus.CHECKED_IN
        ).scalar() or 0

        occupancy_rate = (in_house / total_rooms * 100) if total_rooms > 0 else 0

        return {
            'report_date': report_date,
            'total_rooms': total_rooms,
            'in_house': in_house,
            'occupancy_rate': round(occupancy_rate, 1),
            'today_arrivals': arrivals,
            'today_departures': departures,
            'today_revenue': self.billing_service.revenue_between(day_start, day_end),
            'month_revenue': self.billing_service.revenue_between(month_start, day_end),
        }

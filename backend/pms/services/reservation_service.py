"""
Reservation service
Manages Reservation rows until they are checked in or cancelled
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from pms.errors import ConflictError, NotFoundError
from pms.models.ontology import Reservation, ReservationStatus, RoomType, Guest
from pms.models.schemas import ReservationCreate
from pms.services.guest_service import GuestService

logger = logging.getLogger(__name__)


class ReservationService:
    """Reservation service"""

    def __init__(self, db: Session):
        self.db = db
        self.guest_service = GuestService(db)

    def get_reservations(self, status: Optional[ReservationStatus] = None,
                         check_in_date: Optional[date] = None,
                         guest_name: Optional[str] = None) -> List[Reservation]:
        query = self.db.query(Reservation)
        if status:
            query = query.filter(Reservation.status == status)
        if check_in_date:
            query = query.filter(Reservation.check_in_date == check_in_date)
        if guest_name:
            query = query.join(Guest).filter(Guest.full_name.ilike(f"%{guest_name}%"))
        return query.order_by(Reservation.check_in_date, Reservation.id).all()

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def require_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def get_today_arrivals(self, today: Optional[date] = None) -> List[Reservation]:
        """Confirmed reservations arriving today"""
        today = today or date.today()
        return self.db.query(Reservation).filter(
            Reservation.check_in_date == today,
            Reservation.status == ReservationStatus.CONFIRMED
        ).order_by(Reservation.id).all()

    def get_pending_arrivals(self, today: Optional[date] = None) -> List[Reservation]:
        """Confirmed reservations whose arrival date has passed without a check-in"""
        today = today or date.today()
        return self.db.query(Reservation).filter(
            Reservation.check_in_date < today,
            Reservation.status == ReservationStatus.CONFIRMED
        ).order_by(Reservation.check_in_date).all()

    def create_reservation(self, data: ReservationCreate,
                           created_by: Optional[int] = None) -> Reservation:
        room_type = self.db.query(RoomType).filter(RoomType.id == data.room_type_id).first()
        if not room_type:
            raise NotFoundError(f"Room type {data.room_type_id} not found")

        guest = self.guest_service.get_or_create_guest(data.guest)

        reservation = Reservation(
            guest_id=guest.id,
            room_type_id=room_type.id,
            check_in_date=data.check_in_date,
            check_out_date=data.check_out_date,
            number_of_guests=data.number_of_guests,
            notes=data.notes,
            status=ReservationStatus.CONFIRMED,
            created_by=created_by
        )
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        logger.info(f"Reservation {reservation.id} created for guest {guest.id}")
        return reservation

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.require_reservation(reservation_id)
        if reservation.status != ReservationStatus.CONFIRMED:
            raise ConflictError(
                f"Reservation {reservation_id} is {reservation.status.value} and cannot be cancelled"
            )
        reservation.status = ReservationStatus.CANCELLED
        self.db.commit()
        self.db.refresh(reservation)
        logger.info(f"Reservation {reservation.id} cancelled")
        return reservation

    def get_reservation_detail(self, reservation: Reservation) -> dict:
        return {
            'id': reservation.id,
            'guest_id': reservation.guest_id,
            'guest_name': reservation.guest.full_name,
            'guest_mobile': reservation.guest.mobile,
            'room_type_id': reservation.room_type_id,
            'room_type_name': reservation.room_type.name,
            'check_in_date': reservation.check_in_date,
            'check_out_date': reservation.check_out_date,
            'number_of_guests': reservation.number_of_guests,
            'status': reservation.status,
            'notes': reservation.notes,
            'created_at': reservation.created_at
        }

"""
Check-in service
Creates Booking rows (from a reservation or as a walk-in) and handles the
in-stay changes: extending the stay and moving the guest to another room
"""
import logging
from datetime import datetime, date, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from pms.domain.billing import nights_between
from pms.errors import ConflictError, NotFoundError, ValidationFailure
from pms.models.ontology import (
    Booking, BookingStatus, Reservation, ReservationStatus,
    Room, RoomStatus, Guest, Payment, PaymentMode
)
from pms.models.schemas import CheckInFromReservation, WalkInCheckIn, ExtendStay, ChangeRoom
from pms.services.billing_service import BillingService
from pms.services.guest_service import GuestService
from pms.services.room_service import RoomService

logger = logging.getLogger(__name__)


class CheckInService:
    """Check-in service"""

    def __init__(self, db: Session):
        self.db = db
        self.room_service = RoomService(db)
        self.guest_service = GuestService(db)
        self.billing_service = BillingService(db)

    def get_in_house(self) -> List[Booking]:
        """All checked-in bookings"""
        return self.db.query(Booking).filter(
            Booking.status == BookingStatus.CHECKED_IN
        ).order_by(Booking.id).all()

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def get_booking_by_room(self, room_id: int) -> Optional[Booking]:
        """Active booking of a room"""
        return self.room_service.get_current_booking(room_id)

    def search_in_house(self, keyword: str) -> List[Booking]:
        """In-house guests by guest name or room number"""
        return self.db.query(Booking).join(Guest).join(Room).filter(
            Booking.status == BookingStatus.CHECKED_IN
        ).filter(
            (Guest.full_name.ilike(f"%{keyword}%")) | (Room.room_number.contains(keyword))
        ).all()

    def _claim_room(self, room: Room) -> None:
        """vacant_clean -> occupied, or ConflictError when the room is not free"""
        if not self.room_service.occupy_if_vacant(room.id):
            self.db.rollback()
            self.db.refresh(room)
            logger.warning(f"Check-in refused: room {room.room_number} is {room.status.value}")
            raise ConflictError(f"Room {room.room_number} is {room.status.value}, not available")

    def _check_occupancy(self, room: Room, number_of_guests: int) -> None:
        if number_of_guests > room.room_type.max_occupancy:
            raise ValidationFailure(
                f"Room {room.room_number} takes at most {room.room_type.max_occupancy} guests"
            )

    def _open_booking(self, guest: Guest, room: Room, expected_check_out: date,
                      number_of_guests: int, advance_payment: Decimal,
                      payment_mode: PaymentMode, operator_id: Optional[int],
                      reservation: Optional[Reservation] = None) -> Booking:
        """Insert the booking, its first night of rent and the advance payment (no commit)"""
        now = datetime.now()
        booking = Booking(
            reservation_id=reservation.id if reservation else None,
            guest_id=guest.id,
            room_id=room.id,
            check_in_date=now,
            expected_check_out_date=expected_check_out,
            number_of_guests=number_of_guests,
            advance_payment=advance_payment,
            status=BookingStatus.CHECKED_IN,
            checked_in_by=operator_id
        )
        self.db.add(booking)
        self.db.flush()

        self.billing_service.post_room_rent(booking, now.date(), operator_id)

        if advance_payment > 0:
            self.db.add(Payment(
                booking_id=booking.id,
                payment_date=now,
                amount=advance_payment,
                payment_mode=payment_mode,
                notes="Advance at check-in",
                received_by=operator_id
            ))
        return booking

    def check_in_from_reservation(self, data: CheckInFromReservation,
                                  operator_id: Optional[int] = None) -> Booking:
        """
        Check in a confirmed reservation
        - room must be vacant_clean and of the reserved type
        - first night's rent is posted on the check-in date
        - reservation becomes checked_in
        """
        reservation = self.db.query(Reservation).filter(
            Reservation.id == data.reservation_id
        ).first()
        if not reservation:
            raise NotFoundError(f"Reservation {data.reservation_id} not found")
        if reservation.status != ReservationStatus.CONFIRMED:
            raise ConflictError(
                f"Reservation {reservation.id} is {reservation.status.value}, cannot check in"
            )

        room = self.room_service.require_room(data.room_id)
        if room.room_type_id != reservation.room_type_id:
            raise ValidationFailure(
                f"Room {room.room_number} is a {room.room_type.name}, "
                f"reservation is for {reservation.room_type.name}"
            )
        self._check_occupancy(room, reservation.number_of_guests)

        today = date.today()
        expected_check_out = reservation.check_out_date
        if expected_check_out <= today:
            expected_check_out = today + timedelta(days=1)

        self._claim_room(room)
        booking = self._open_booking(
            reservation.guest, room, expected_check_out,
            reservation.number_of_guests, data.advance_payment, data.payment_mode,
            operator_id, reservation=reservation
        )
        reservation.status = ReservationStatus.CHECKED_IN

        self.db.commit()
        self.db.refresh(booking)
        logger.info(
            f"Booking {booking.id}: reservation {reservation.id} checked in to room {room.room_number}"
        )
        return booking

    def walk_in_check_in(self, data: WalkInCheckIn, operator_id: Optional[int] = None) -> Booking:
        """
        Walk-in check-in
        Guest is found by mobile or registered; expected checkout is today + nights
        """
        room = self.room_service.require_room(data.room_id)
        self._check_occupancy(room, data.number_of_guests)

        self._claim_room(room)
        guest = self.guest_service.get_or_create_guest(data.guest)
        booking = self._open_booking(
            guest, room, date.today() + timedelta(days=data.nights),
            data.number_of_guests, data.advance_payment, data.payment_mode, operator_id
        )

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id}: walk-in {guest.mobile} checked in to room {room.room_number}")
        return booking

    def extend_stay(self, booking_id: int, data: ExtendStay,
                    operator_id: Optional[int] = None) -> Booking:
        """
        Move the expected checkout later; rent for each added night is posted
        starting from the previous expected checkout date
        """
        booking = self.billing_service.get_open_booking(booking_id)
        old_check_out = booking.expected_check_out_date
        if data.new_check_out_date <= old_check_out:
            raise ValidationFailure("New check-out date must be after the current one")

        posted = 0
        for offset in range(nights_between(old_check_out, data.new_check_out_date)):
            night = old_check_out + timedelta(days=offset)
            if self.billing_service.post_room_rent(booking, night, operator_id):
                posted += 1

        booking.expected_check_out_date = data.new_check_out_date
        self.db.commit()
        self.db.refresh(booking)
        logger.info(
            f"Booking {booking.id} extended {old_check_out} -> {data.new_check_out_date}, "
            f"{posted} night(s) posted"
        )
        return booking

    def change_room(self, booking_id: int, data: ChangeRoom) -> Booking:
        """Move an in-house guest; the old room is left vacant_dirty"""
        booking = self.billing_service.get_open_booking(booking_id)
        old_room = booking.room
        if data.new_room_id == old_room.id:
            raise ValidationFailure("New room is the current room")

        new_room = self.room_service.require_room(data.new_room_id)
        self._check_occupancy(new_room, booking.number_of_guests)
        self._claim_room(new_room)

        old_room.status = RoomStatus.VACANT_DIRTY
        booking.room = new_room

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} moved {old_room.room_number} -> {new_room.room_number}")
        return booking

    def get_booking_detail(self, booking: Booking) -> dict:
        return {
            'id': booking.id,
            'reservation_id': booking.reservation_id,
            'guest_id': booking.guest_id,
            'guest_name': booking.guest.full_name,
            'room_id': booking.room_id,
            'room_number': booking.room.room_number,
            'room_type_name': booking.room.room_type.name,
            'check_in_date': booking.check_in_date,
            'expected_check_out_date': booking.expected_check_out_date,
            'actual_check_out_date': booking.actual_check_out_date,
            'number_of_guests': booking.number_of_guests,
            'advance_payment': booking.advance_payment,
            'status': booking.status
        }

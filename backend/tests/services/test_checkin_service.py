"""
Tests for pms/services/checkin_service.py
Covers: walk-in, check-in from reservation, room compare-and-swap,
        extend_stay, change_room, in-house lookups
"""
import pytest
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

from pms.errors import ConflictError, NotFoundError, ValidationFailure
from pms.models.ontology import (
    Booking, BookingStatus, Guest, Payment, PaymentMode, Reservation,
    ReservationStatus, RoomStatus, ChargeType, FolioCharge
)
from pms.models.schemas import (
    CheckInFromReservation, WalkInCheckIn, ExtendStay, ChangeRoom, GuestCreate
)
from pms.services.checkin_service import CheckInService
from pms.services.room_service import RoomService


# ── helpers ──────────────────────────────────────────────────────────

def _walk_in(room, mobile="9876500099", nights=1, advance=Decimal("0"), **guest_fields):
    return WalkInCheckIn(
        guest=GuestCreate(full_name=guest_fields.pop("full_name", "Anita Sharma"), mobile=mobile, **guest_fields),
        room_id=room.id,
        nights=nights,
        advance_payment=advance,
        payment_mode=PaymentMode.UPI,
    )


def _reservation(db, guest, room_type, status=ReservationStatus.CONFIRMED, nights=2):
    r = Reservation(
        guest_id=guest.id,
        room_type_id=room_type.id,
        check_in_date=date.today(),
        check_out_date=date.today() + timedelta(days=nights),
        number_of_guests=2,
        status=status,
    )
    db.add(r)
    db.commit()
    db.refresh(r)
    return r


def _room_rent(db, booking_id):
    return db.query(FolioCharge).filter(
        FolioCharge.booking_id == booking_id,
        FolioCharge.charge_type == ChargeType.ROOM_RENT
    ).order_by(FolioCharge.charge_date).all()


class TestWalkIn:

    def test_walk_in_opens_booking(self, db_session, sample_room, operator):
        booking = CheckInService(db_session).walk_in_check_in(_walk_in(sample_room, nights=2), operator.id)

        assert booking.status == BookingStatus.CHECKED_IN
        assert booking.reservation_id is None
        assert booking.checked_in_by == operator.id
        assert booking.expected_check_out_date == date.today() + timedelta(days=2)
        assert sample_room.status == RoomStatus.OCCUPIED
        assert booking.guest.full_name == "Anita Sharma"

    def test_first_night_posted_at_check_in(self, db_session, sample_room):
        booking = CheckInService(db_session).walk_in_check_in(_walk_in(sample_room, nights=3))

        charges = _room_rent(db_session, booking.id)
        assert len(charges) == 1
        assert charges[0].charge_date == date.today()
        assert charges[0].amount == Decimal("1500.00")
        assert charges[0].description == "Room Rent - 101 (Standard)"

    def test_existing_guest_reused_by_mobile(self, db_session, sample_room, sample_room_102, sample_guest):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(
            _walk_in(sample_room, mobile=sample_guest.mobile, full_name="R. Kumar", email="ravi@example.com")
        )

        assert booking.guest_id == sample_guest.id
        assert db_session.query(Guest).count() == 1
        # name kept, blank email filled in
        assert sample_guest.full_name == "Ravi Kumar"
        assert sample_guest.email == "ravi@example.com"

    def test_advance_payment_recorded(self, db_session, sample_room, operator):
        booking = CheckInService(db_session).walk_in_check_in(
            _walk_in(sample_room, advance=Decimal("1000")), operator.id
        )

        payments = db_session.query(Payment).filter(Payment.booking_id == booking.id).all()
        assert booking.advance_payment == Decimal("1000.00")
        assert len(payments) == 1
        assert payments[0].amount == Decimal("1000.00")
        assert payments[0].payment_mode == PaymentMode.UPI
        assert payments[0].received_by == operator.id

    def test_no_payment_without_advance(self, db_session, sample_room):
        booking = CheckInService(db_session).walk_in_check_in(_walk_in(sample_room))
        assert db_session.query(Payment).filter(Payment.booking_id == booking.id).count() == 0

    @pytest.mark.parametrize("status", [RoomStatus.OCCUPIED, RoomStatus.VACANT_DIRTY, RoomStatus.OUT_OF_ORDER])
    def test_room_not_vacant_clean_is_refused(self, db_session, sample_room, status):
        sample_room.status = status
        db_session.commit()

        with pytest.raises(ConflictError):
            CheckInService(db_session).walk_in_check_in(_walk_in(sample_room))

        assert db_session.query(Booking).count() == 0
        assert db_session.query(Guest).count() == 0

    def test_lost_race_writes_nothing(self, db_session, sample_room):
        with patch.object(RoomService, "occupy_if_vacant", return_value=False):
            with pytest.raises(ConflictError):
                CheckInService(db_session).walk_in_check_in(_walk_in(sample_room))

        assert db_session.query(Booking).count() == 0
        assert db_session.query(FolioCharge).count() == 0

    def test_second_check_in_into_same_room_fails(self, db_session, sample_room):
        service = CheckInService(db_session)
        service.walk_in_check_in(_walk_in(sample_room))
        with pytest.raises(ConflictError):
            service.walk_in_check_in(_walk_in(sample_room, mobile="9876500100"))
        assert db_session.query(Booking).count() == 1

    def test_too_many_guests(self, db_session, sample_room):
        data = _walk_in(sample_room)
        data.number_of_guests = 3
        with pytest.raises(ValidationFailure):
            CheckInService(db_session).walk_in_check_in(data)
        assert sample_room.status == RoomStatus.VACANT_CLEAN

    def test_unknown_room(self, db_session):
        data = WalkInCheckIn(guest=GuestCreate(full_name="A", mobile="9876500099"), room_id=42)
        with pytest.raises(NotFoundError):
            CheckInService(db_session).walk_in_check_in(data)

    def test_blank_guest_name_rejected_by_schema(self):
        with pytest.raises(ValueError):
            GuestCreate(full_name="   ", mobile="9876500099")

    def test_zero_nights_rejected_by_schema(self, sample_room):
        with pytest.raises(ValueError):
            WalkInCheckIn(guest=GuestCreate(full_name="A", mobile="9876500099"), room_id=sample_room.id, nights=0)


class TestCheckInFromReservation:

    def test_check_in(self, db_session, sample_room, sample_guest, standard_type, operator):
        reservation = _reservation(db_session, sample_guest, standard_type)
        booking = CheckInService(db_session).check_in_from_reservation(
            CheckInFromReservation(reservation_id=reservation.id, room_id=sample_room.id), operator.id
        )

        assert booking.reservation_id == reservation.id
        assert booking.guest_id == sample_guest.id
        assert booking.number_of_guests == 2
        assert booking.expected_check_out_date == reservation.check_out_date
        assert reservation.status == ReservationStatus.CHECKED_IN
        assert sample_room.status == RoomStatus.OCCUPIED
        assert len(_room_rent(db_session, booking.id)) == 1

    def test_room_type_must_match(self, db_session, deluxe_room, sample_guest, standard_type):
        reservation = _reservation(db_session, sample_guest, standard_type)
        with pytest.raises(ValidationFailure):
            CheckInService(db_session).check_in_from_reservation(
                CheckInFromReservation(reservation_id=reservation.id, room_id=deluxe_room.id)
            )
        assert reservation.status == ReservationStatus.CONFIRMED

    def test_cancelled_reservation(self, db_session, sample_room, sample_guest, standard_type):
        reservation = _reservation(db_session, sample_guest, standard_type, status=ReservationStatus.CANCELLED)
        with pytest.raises(ConflictError):
            CheckInService(db_session).check_in_from_reservation(
                CheckInFromReservation(reservation_id=reservation.id, room_id=sample_room.id)
            )

    def test_unknown_reservation(self, db_session, sample_room):
        with pytest.raises(NotFoundError):
            CheckInService(db_session).check_in_from_reservation(
                CheckInFromReservation(reservation_id=999, room_id=sample_room.id)
            )

    def test_occupied_room_keeps_reservation_confirmed(self, db_session, sample_room, sample_guest, standard_type):
        reservation = _reservation(db_session, sample_guest, standard_type)
        sample_room.status = RoomStatus.OCCUPIED
        db_session.commit()

        with pytest.raises(ConflictError):
            CheckInService(db_session).check_in_from_reservation(
                CheckInFromReservation(reservation_id=reservation.id, room_id=sample_room.id)
            )
        db_session.refresh(reservation)
        assert reservation.status == ReservationStatus.CONFIRMED


class TestExtendStay:

    def test_extend_posts_each_added_night(self, db_session, sample_room, operator):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(_walk_in(sample_room, nights=1))

        booking = service.extend_stay(
            booking.id, ExtendStay(new_check_out_date=date.today() + timedelta(days=3)), operator.id
        )

        assert booking.expected_check_out_date == date.today() + timedelta(days=3)
        nights = [c.charge_date for c in _room_rent(db_session, booking.id)]
        assert nights == [date.today() + timedelta(days=i) for i in range(3)]

    def test_extend_must_move_later(self, db_session, sample_room):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(_walk_in(sample_room, nights=2))
        with pytest.raises(ValidationFailure):
            service.extend_stay(booking.id, ExtendStay(new_check_out_date=date.today() + timedelta(days=2)))

    def test_extend_skips_nights_already_posted(self, db_session, sample_room):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(_walk_in(sample_room, nights=1))
        service.billing_service.post_room_rent(booking, date.today() + timedelta(days=1))
        db_session.commit()

        service.extend_stay(booking.id, ExtendStay(new_check_out_date=date.today() + timedelta(days=2)))
        assert len(_room_rent(db_session, booking.id)) == 2


class TestChangeRoom:

    def test_change_room(self, db_session, sample_room, sample_room_102):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(_walk_in(sample_room))

        booking = service.change_room(booking.id, ChangeRoom(new_room_id=sample_room_102.id))

        assert booking.room_id == sample_room_102.id
        assert sample_room.status == RoomStatus.VACANT_DIRTY
        assert sample_room_102.status == RoomStatus.OCCUPIED
        assert service.get_booking_by_room(sample_room_102.id).id == booking.id
        assert service.get_booking_by_room(sample_room.id) is None

    def test_target_must_be_vacant_clean(self, db_session, sample_room, sample_room_102):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(_walk_in(sample_room))
        sample_room_102.status = RoomStatus.VACANT_DIRTY
        db_session.commit()

        with pytest.raises(ConflictError):
            service.change_room(booking.id, ChangeRoom(new_room_id=sample_room_102.id))

        db_session.refresh(booking)
        assert booking.room_id == sample_room.id
        assert sample_room.status == RoomStatus.OCCUPIED

    def test_same_room(self, db_session, sample_room):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(_walk_in(sample_room))
        with pytest.raises(ValidationFailure):
            service.change_room(booking.id, ChangeRoom(new_room_id=sample_room.id))


class TestInHouse:

    def test_in_house_and_search(self, db_session, sample_room, sample_room_102):
        service = CheckInService(db_session)
        service.walk_in_check_in(_walk_in(sample_room, full_name="Anita Sharma"))
        service.walk_in_check_in(_walk_in(sample_room_102, mobile="9876500100", full_name="Vikram Rao"))

        assert len(service.get_in_house()) == 2
        assert [b.room.room_number for b in service.search_in_house("vikram")] == ["102"]
        assert [b.guest.full_name for b in service.search_in_house("101")] == ["Anita Sharma"]

    def test_booking_detail(self, db_session, sample_room):
        service = CheckInService(db_session)
        booking = service.walk_in_check_in(_walk_in(sample_room))
        detail = service.get_booking_detail(booking)
        assert detail["room_number"] == "101"
        assert detail["room_type_name"] == "Standard"
        assert detail["guest_name"] == "Anita Sharma"

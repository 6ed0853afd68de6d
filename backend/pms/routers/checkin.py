"""
Check-in routes - arrivals, extensions and room moves
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.errors import NotFoundError
from pms.models.ontology import Employee
from pms.models.schemas import (
    CheckInFromReservation, WalkInCheckIn, ExtendStay, ChangeRoom, BookingResponse
)
from pms.services.checkin_service import CheckInService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/checkin", tags=["Check-in"])


@router.get("/in-house", response_model=List[BookingResponse])
def list_in_house(keyword: Optional[str] = None, db: Session = Depends(get_db)):
    """Checked-in bookings, optionally filtered by guest name or room number"""
    service = CheckInService(db)
    bookings = service.search_in_house(keyword) if keyword else service.get_in_house()
    return [BookingResponse(**service.get_booking_detail(b)) for b in bookings]


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    service = CheckInService(db)
    booking = service.get_booking(booking_id)
    if not booking:
        raise NotFoundError(f"Booking {booking_id} not found")
    return BookingResponse(**service.get_booking_detail(booking))


@router.post("/from-reservation", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def check_in_from_reservation(
    data: CheckInFromReservation,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = CheckInService(db)
    booking = service.check_in_from_reservation(data, current_user.id)
    return BookingResponse(**service.get_booking_detail(booking))


@router.post("/walk-in", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def walk_in_check_in(
    data: WalkInCheckIn,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = CheckInService(db)
    booking = service.walk_in_check_in(data, current_user.id)
    return BookingResponse(**service.get_booking_detail(booking))


@router.post("/bookings/{booking_id}/extend", response_model=BookingResponse)
def extend_stay(
    booking_id: int,
    data: ExtendStay,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = CheckInService(db)
    booking = service.extend_stay(booking_id, data, current_user.id)
    return BookingResponse(**service.get_booking_detail(booking))


@router.post("/bookings/{booking_id}/change-room", response_model=BookingResponse)
def change_room(
    booking_id: int,
    data: ChangeRoom,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = CheckInService(db)
    booking = service.change_room(booking_id, data)
    return BookingResponse(**service.get_booking_detail(booking))

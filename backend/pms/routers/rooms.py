"""
Room inventory routes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.errors import NotFoundError
from pms.models.ontology import Employee, RoomStatus
from pms.models.schemas import (
    RoomTypeCreate, RoomTypeUpdate, RoomTypeResponse,
    RoomCreate, RoomUpdate, RoomResponse, RoomStatusUpdate, BookingResponse
)
from pms.services.room_service import RoomService
from pms.services.checkin_service import CheckInService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/rooms", tags=["Rooms"])


# ============== Room types ==============

@router.get("/types", response_model=List[RoomTypeResponse])
def list_room_types(db: Session = Depends(get_db)):
    """List room types with their room counts"""
    service = RoomService(db)
    return [RoomTypeResponse(**service.get_room_type_with_count(rt.id)) for rt in service.get_room_types()]


@router.post("/types", response_model=RoomTypeResponse, status_code=status.HTTP_201_CREATED)
def create_room_type(
    data: RoomTypeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = RoomService(db)
    room_type = service.create_room_type(data)
    return RoomTypeResponse(**service.get_room_type_with_count(room_type.id))


@router.put("/types/{room_type_id}", response_model=RoomTypeResponse)
def update_room_type(
    room_type_id: int,
    data: RoomTypeUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = RoomService(db)
    service.update_room_type(room_type_id, data)
    return RoomTypeResponse(**service.get_room_type_with_count(room_type_id))


@router.delete("/types/{room_type_id}")
def delete_room_type(
    room_type_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Delete a room type that has no rooms or reservations"""
    RoomService(db).delete_room_type(room_type_id)
    return {"message": f"Room type {room_type_id} deleted"}


# ============== Rooms ==============

@router.get("", response_model=List[RoomResponse])
def list_rooms(
    status: Optional[RoomStatus] = None,
    floor: Optional[int] = None,
    room_type_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """List rooms, optionally filtered by status, floor or type"""
    service = RoomService(db)
    return [RoomResponse(**service.get_room_detail(r)) for r in service.get_rooms(status, floor, room_type_id)]


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(room_type_id: Optional[int] = None, db: Session = Depends(get_db)):
    """Rooms ready for check-in (vacant_clean)"""
    service = RoomService(db)
    return [RoomResponse(**service.get_room_detail(r)) for r in service.get_available_rooms(room_type_id)]


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db)):
    service = RoomService(db)
    return RoomResponse(**service.get_room_detail(service.require_room(room_id)))


@router.get("/{room_id}/booking", response_model=BookingResponse)
def get_room_booking(room_id: int, db: Session = Depends(get_db)):
    """Active booking of a room"""
    RoomService(db).require_room(room_id)
    service = CheckInService(db)
    booking = service.get_booking_by_room(room_id)
    if not booking:
        raise NotFoundError(f"Room {room_id} has no active booking")
    return BookingResponse(**service.get_booking_detail(booking))


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = RoomService(db)
    return RoomResponse(**service.get_room_detail(service.create_room(data)))


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    data: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = RoomService(db)
    return RoomResponse(**service.get_room_detail(service.update_room(room_id, data)))


@router.delete("/{room_id}")
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Delete a room that was never booked"""
    RoomService(db).delete_room(room_id)
    return {"message": f"Room {room_id} deleted"}


@router.patch("/{room_id}/status", response_model=RoomResponse)
def update_room_status(
    room_id: int,
    data: RoomStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Housekeeping / maintenance status change"""
    service = RoomService(db)
    return RoomResponse(**service.get_room_detail(service.update_status(room_id, data.status)))

"""
Room service
Manages RoomType and Room rows and the room status transitions the
front desk and housekeeping perform
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func
from pms.errors import ConflictError, NotFoundError
from pms.models.ontology import Room, RoomType, RoomStatus, Booking, BookingStatus, Reservation
from pms.models.schemas import RoomCreate, RoomUpdate, RoomTypeCreate, RoomTypeUpdate

logger = logging.getLogger(__name__)

# Statuses an operator may set by hand; OCCUPIED only follows check-in / checkout
MANUAL_STATUSES = {RoomStatus.VACANT_CLEAN, RoomStatus.VACANT_DIRTY, RoomStatus.OUT_OF_ORDER}


class RoomService:
    """Room service"""

    def __init__(self, db: Session):
        self.db = db

    # ============== Room types ==============

    def get_room_types(self) -> List[RoomType]:
        return self.db.query(RoomType).order_by(RoomType.name).all()

    def get_room_type(self, room_type_id: int) -> Optional[RoomType]:
        return self.db.query(RoomType).filter(RoomType.id == room_type_id).first()

    def get_room_type_by_name(self, name: str) -> Optional[RoomType]:
        return self.db.query(RoomType).filter(RoomType.name == name).first()

    def create_room_type(self, data: RoomTypeCreate) -> RoomType:
        if self.get_room_type_by_name(data.name):
            raise ConflictError(f"Room type '{data.name}' already exists")

        room_type = RoomType(**data.model_dump())
        self.db.add(room_type)
        self.db.commit()
        self.db.refresh(room_type)
        return room_type

    def update_room_type(self, room_type_id: int, data: RoomTypeUpdate) -> RoomType:
        room_type = self.get_room_type(room_type_id)
        if not room_type:
            raise NotFoundError(f"Room type {room_type_id} not found")

        update_data = data.model_dump(exclude_unset=True)
        if 'name' in update_data:
            existing = self.get_room_type_by_name(update_data['name'])
            if existing and existing.id != room_type_id:
                raise ConflictError(f"Room type '{update_data['name']}' already exists")

        for key, value in update_data.items():
            setattr(room_type, key, value)

        self.db.commit()
        self.db.refresh(room_type)
        return room_type

    def delete_room_type(self, room_type_id: int) -> None:
        """Delete a room type that no room or reservation refers to"""
        room_type = self.get_room_type(room_type_id)
        if not room_type:
            raise NotFoundError(f"Room type {room_type_id} not found")

        room_count = self.db.query(Room).filter(Room.room_type_id == room_type_id).count()
        if room_count > 0:
            raise ConflictError(f"Room type '{room_type.name}' still has {room_count} room(s)")
        reservation_count = self.db.query(Reservation).filter(
            Reservation.room_type_id == room_type_id
        ).count()
        if reservation_count > 0:
            raise ConflictError(
                f"Room type '{room_type.name}' is referenced by {reservation_count} reservation(s)"
            )

        name = room_type.name
        self.db.delete(room_type)
        self.db.commit()
        logger.info(f"Room type '{name}' deleted")

    def get_room_type_with_count(self, room_type_id: int) -> dict:
        room_type = self.get_room_type(room_type_id)
        if not room_type:
            raise NotFoundError(f"Room type {room_type_id} not found")
        room_count = self.db.query(func.count(Room.id)).filter(
            Room.room_type_id == room_type_id
        ).scalar()
        return {
            'id': room_type.id,
            'name': room_type.name,
            'base_rate': room_type.base_rate,
            'max_occupancy': room_type.max_occupancy,
            'description': room_type.description,
            'is_active': room_type.is_active,
            'room_count': room_count or 0
        }

    # ============== Rooms ==============

    def get_rooms(self, status: Optional[RoomStatus] = None, floor: Optional[int] = None,
                  room_type_id: Optional[int] = None) -> List[Room]:
        query = self.db.query(Room)
        if status:
            query = query.filter(Room.status == status)
        if floor is not None:
            query = query.filter(Room.floor == floor)
        if room_type_id:
            query = query.filter(Room.room_type_id == room_type_id)
        return query.order_by(Room.room_number).all()

    def get_room(self, room_id: int) -> Optional[Room]:
        return self.db.query(Room).filter(Room.id == room_id).first()

    def require_room(self, room_id: int) -> Room:
        room = self.get_room(room_id)
        if not room:
            raise NotFoundError(f"Room {room_id} not found")
        return room

    def get_room_by_number(self, room_number: str) -> Optional[Room]:
        return self.db.query(Room).filter(Room.room_number == room_number).first()

    def get_available_rooms(self, room_type_id: Optional[int] = None) -> List[Room]:
        """Rooms that can take a check-in right now"""
        return self.get_rooms(status=RoomStatus.VACANT_CLEAN, room_type_id=room_type_id)

    def create_room(self, data: RoomCreate) -> Room:
        if self.get_room_by_number(data.room_number):
            raise ConflictError(f"Room {data.room_number} already exists")
        if not self.get_room_type(data.room_type_id):
            raise NotFoundError(f"Room type {data.room_type_id} not found")

        room = Room(**data.model_dump(), status=RoomStatus.VACANT_CLEAN)
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        return room

    def update_room(self, room_id: int, data: RoomUpdate) -> Room:
        room = self.require_room(room_id)
        update_data = data.model_dump(exclude_unset=True)
        if 'room_type_id' in update_data and not self.get_room_type(update_data['room_type_id']):
            raise NotFoundError(f"Room type {update_data['room_type_id']} not found")

        for key, value in update_data.items():
            setattr(room, key, value)

        self.db.commit()
        self.db.refresh(room)
        return room

    def delete_room(self, room_id: int) -> None:
        """
        Delete a room with no stay history
        Rooms that were ever booked stay for the folio and document records;
        take them out of service with out_of_order instead
        """
        room = self.require_room(room_id)
        if room.status == RoomStatus.OCCUPIED:
            raise ConflictError(f"Room {room.room_number} is occupied")
        booking_count = self.db.query(Booking).filter(Booking.room_id == room_id).count()
        if booking_count > 0:
            raise ConflictError(
                f"Room {room.room_number} has {booking_count} booking(s); set it out_of_order instead"
            )

        room_number = room.room_number
        self.db.delete(room)
        self.db.commit()
        logger.info(f"Room {room_number} deleted")

    def update_status(self, room_id: int, status: RoomStatus) -> Room:
        """
        Housekeeping / maintenance status change
        Occupied rooms are released only by checkout or room change
        """
        room = self.require_room(room_id)
        if status not in MANUAL_STATUSES:
            raise ConflictError("A room becomes occupied only through check-in")
        if room.status == RoomStatus.OCCUPIED:
            raise ConflictError(f"Room {room.room_number} is occupied; check the guest out first")

        old_status = room.status
        room.status = status
        self.db.commit()
        self.db.refresh(room)
        logger.info(f"Room {room.room_number}: {old_status.value} -> {status.value}")
        return room

    def occupy_if_vacant(self, room_id: int) -> bool:
        """
        Compare-and-swap vacant_clean -> occupied
        Returns False when another terminal took the room first. Does not commit.
        """
        updated = self.db.query(Room).filter(
            Room.id == room_id,
            Room.status == RoomStatus.VACANT_CLEAN
        ).update({Room.status: RoomStatus.OCCUPIED}, synchronize_session="fetch")
        return updated == 1

    def get_current_booking(self, room_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.status == BookingStatus.CHECKED_IN
        ).first()

    def get_room_detail(self, room: Room) -> dict:
        booking = self.get_current_booking(room.id) if room.status == RoomStatus.OCCUPIED else None
        return {
            'id': room.id,
            'room_number': room.room_number,
            'floor': room.floor,
            'room_type_id': room.room_type_id,
            'status': room.status,
            'room_type_name': room.room_type.name if room.room_type else None,
            'current_guest': booking.guest.full_name if booking else None
        }

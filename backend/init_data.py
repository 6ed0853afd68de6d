"""
Seed data script
Creates the room types, rooms 101-105 / 201-205, the tax rows and a
front-desk operator. Safe to run more than once.

  Standard       1500 / night   101, 102, 201, 202
  Deluxe         2500 / night   103, 104, 203, 204
  Family Suite   4000 / night   105, 205

Default operator: frontdesk (send its id as X-Operator-Id)
"""
from decimal import Decimal
from pms.database import SessionLocal, init_db
from pms.logging_config import setup_logging
from pms.models.ontology import RoomType, Room, RoomStatus, Employee, EmployeeRole

ROOM_TYPES = [
    {"name": "Standard", "base_rate": Decimal("1500.00"), "max_occupancy": 2,
     "description": "Standard room with a double bed"},
    {"name": "Deluxe", "base_rate": Decimal("2500.00"), "max_occupancy": 2,
     "description": "Deluxe room with a king bed"},
    {"name": "Family Suite", "base_rate": Decimal("4000.00"), "max_occupancy": 4,
     "description": "Suite for families of up to four"},
]

# room number suffix -> room type
ROOM_LAYOUT = {
    "01": "Standard",
    "02": "Standard",
    "03": "Deluxe",
    "04": "Deluxe",
    "05": "Family Suite",
}

FLOORS = [1, 2]

OPERATORS = [
    {"username": "manager", "name": "Front Office Manager", "role": EmployeeRole.MANAGER},
    {"username": "frontdesk", "name": "Front Desk", "role": EmployeeRole.STAFF},
]


def init_room_types(db):
    """Room types, keyed by name"""
    created = []
    for data in ROOM_TYPES:
        if not db.query(RoomType).filter(RoomType.name == data["name"]).first():
            db.add(RoomType(**data))
            created.append(data["name"])
    db.flush()
    print(f"Room types: {len(created)} created")
    return {rt.name: rt for rt in db.query(RoomType).all()}


def init_rooms(db, room_types):
    created = 0
    for floor in FLOORS:
        for suffix, type_name in ROOM_LAYOUT.items():
            room_number = f"{floor}{suffix}"
            if db.query(Room).filter(Room.room_number == room_number).first():
                continue
            db.add(Room(
                room_number=room_number,
                floor=floor,
                room_type_id=room_types[type_name].id,
                status=RoomStatus.VACANT_CLEAN
            ))
            created += 1
    db.flush()
    print(f"Rooms: {created} created, {db.query(Room).count()} total")


def init_operators(db):
    created = []
    for data in OPERATORS:
        if not db.query(Employee).filter(Employee.username == data["username"]).first():
            db.add(Employee(**data))
            created.append(data["username"])
    db.flush()
    print(f"Operators: {', '.join(created) if created else 'already present'}")


def main():
    setup_logging()
    print("=" * 50)
    print("Front-office PMS seed data")
    print("=" * 50)

    init_db()

    db = SessionLocal()
    try:
        room_types = init_room_types(db)
        init_rooms(db, room_types)
        init_operators(db)
        db.commit()

        for employee in db.query(Employee).order_by(Employee.id).all():
            print(f"  X-Operator-Id: {employee.id:<4} {employee.username}")
        print("=" * 50)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == '__main__':
    main()

"""
Pytest configuration and shared fixtures
"""
import os

# The app's own engine must never touch a real database file during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from pms.database import Base, get_db
from pms.models import ontology  # noqa: F401
from pms.models.ontology import (
    Employee, EmployeeRole, RoomType, Room, RoomStatus, Guest, IdProofType
)
from pms.services.tax_service import TaxService
from pms.main import app


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Database session with the default CGST / SGST rows"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    TaxService(session).seed_defaults()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client bound to the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Operator Fixtures ==============

@pytest.fixture
def operator(db_session):
    """Front desk operator"""
    employee = Employee(username="frontdesk", name="Front Desk", role=EmployeeRole.STAFF, is_active=True)
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee


@pytest.fixture
def operator_headers(operator):
    return {"X-Operator-Id": str(operator.id)}


# ============== Entity Fixtures ==============

@pytest.fixture
def standard_type(db_session):
    room_type = RoomType(name="Standard", base_rate=Decimal("1500.00"), max_occupancy=2)
    db_session.add(room_type)
    db_session.commit()
    db_session.refresh(room_type)
    return room_type


@pytest.fixture
def deluxe_type(db_session):
    room_type = RoomType(name="Deluxe", base_rate=Decimal("2500.00"), max_occupancy=2)
    db_session.add(room_type)
    db_session.commit()
    db_session.refresh(room_type)
    return room_type


@pytest.fixture
def sample_room(db_session, standard_type):
    """Room 101, Standard, vacant_clean"""
    room = Room(room_number="101", floor=1, room_type_id=standard_type.id, status=RoomStatus.VACANT_CLEAN)
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_room_102(db_session, standard_type):
    room = Room(room_number="102", floor=1, room_type_id=standard_type.id, status=RoomStatus.VACANT_CLEAN)
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def deluxe_room(db_session, deluxe_type):
    """Room 103, Deluxe, vacant_clean"""
    room = Room(room_number="103", floor=1, room_type_id=deluxe_type.id, status=RoomStatus.VACANT_CLEAN)
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_guest(db_session):
    guest = Guest(
        full_name="Ravi Kumar",
        mobile="9876500001",
        address="12 Temple Road, Mathura",
        id_proof_type=IdProofType.AADHAAR,
        id_proof_number="1234-5678-9012"
    )
    db_session.add(guest)
    db_session.commit()
    db_session.refresh(guest)
    return guest

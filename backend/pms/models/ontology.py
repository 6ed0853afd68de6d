"""
Front-office entities
Rooms, guests, reservations, bookings and their folio (charges + payments),
tax configuration and the write-once archived documents produced at checkout
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, ForeignKey, Text,
    Enum as SQLEnum, Boolean, Numeric, JSON, UniqueConstraint, event
)
from sqlalchemy.orm import relationship
from pms.database import Base
from pms.errors import ImmutableRecordError


# ============== Enums ==============

class RoomStatus(str, Enum):
    """Room status"""
    VACANT_CLEAN = "vacant_clean"
    VACANT_DIRTY = "vacant_dirty"
    OCCUPIED = "occupied"
    OUT_OF_ORDER = "out_of_order"


class ReservationStatus(str, Enum):
    """Reservation status"""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    CHECKED_IN = "checked_in"


class BookingStatus(str, Enum):
    """Booking (stay) status"""
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


class ChargeType(str, Enum):
    """Folio charge category"""
    ROOM_RENT = "room_rent"
    EXTRA_BED = "extra_bed"
    EARLY_CHECKIN = "early_checkin"
    LATE_CHECKOUT = "late_checkout"
    MISCELLANEOUS = "miscellaneous"


class PaymentMode(str, Enum):
    """Payment mode"""
    CASH = "cash"
    UPI = "upi"
    CARD = "card"


class IdProofType(str, Enum):
    """Identity document accepted at registration"""
    AADHAAR = "aadhaar"
    PASSPORT = "passport"
    DRIVING_LICENSE = "driving_license"
    OTHER = "other"


class DocumentType(str, Enum):
    """Archived document type"""
    INVOICE = "invoice"
    GRC = "grc"


class EmployeeRole(str, Enum):
    """Operator role (recorded, not enforced)"""
    MANAGER = "manager"
    STAFF = "staff"


# ============== Entities ==============

class RoomType(Base):
    """Room type with its nightly base rate"""
    __tablename__ = "room_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    base_rate = Column(Numeric(10, 2), nullable=False)
    max_occupancy = Column(Integer, nullable=False, default=2)
    description = Column(Text)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    rooms = relationship("Room", back_populates="room_type")


class Room(Base):
    """
    Room
    status is OCCUPIED iff exactly one checked-in booking references the room
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, nullable=False)
    floor = Column(Integer, nullable=False)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False)
    status = Column(SQLEnum(RoomStatus), nullable=False, default=RoomStatus.VACANT_CLEAN, index=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    room_type = relationship("RoomType", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room")


class Guest(Base):
    """Guest identity and KYC fields, keyed by mobile number"""
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    mobile = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(100))
    address = Column(Text)
    id_proof_type = Column(SQLEnum(IdProofType))
    id_proof_number = Column(String(50))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    reservations = relationship("Reservation", back_populates="guest")
    bookings = relationship("Booking", back_populates="guest")
    documents = relationship("ArchivedDocument", back_populates="guest")


class Reservation(Base):
    """Future intent to stay; becomes checked_in when a Booking is created from it"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False)
    check_in_date = Column(Date, nullable=False, index=True)
    check_out_date = Column(Date, nullable=False)
    number_of_guests = Column(Integer, nullable=False, default=1)
    status = Column(SQLEnum(ReservationStatus), nullable=False, default=ReservationStatus.CONFIRMED)
    notes = Column(Text)
    created_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    guest = relationship("Guest", back_populates="reservations")
    room_type = relationship("RoomType")
    bookings = relationship("Booking", back_populates="reservation")


class Booking(Base):
    """
    An active or completed stay - owns the folio (charges and payments)
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=True)  # None for walk-ins
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    check_in_date = Column(DateTime, nullable=False, default=datetime.now)
    expected_check_out_date = Column(Date, nullable=False)
    actual_check_out_date = Column(DateTime)
    number_of_guests = Column(Integer, nullable=False, default=1)
    advance_payment = Column(Numeric(10, 2), default=0)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.CHECKED_IN, index=True)
    checked_in_by = Column(Integer, ForeignKey("employees.id"))
    checked_out_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    reservation = relationship("Reservation", back_populates="bookings")
    guest = relationship("Guest", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")
    charges = relationship("FolioCharge", back_populates="booking",
                           order_by="FolioCharge.id")
    payments = relationship("Payment", back_populates="booking",
                            order_by="Payment.id")
    documents = relationship("ArchivedDocument", back_populates="booking")
    checked_in_operator = relationship("Employee", foreign_keys=[checked_in_by])
    checked_out_operator = relationship("Employee", foreign_keys=[checked_out_by])


class FolioCharge(Base):
    """Dated, typed line item against a booking; append-only"""
    __tablename__ = "folio_charges"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    charge_date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    charge_type = Column(SQLEnum(ChargeType), nullable=False)
    posted_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)

    booking = relationship("Booking", back_populates="charges")


class Payment(Base):
    """Dated, mode-tagged credit against a booking; append-only"""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    payment_date = Column(DateTime, nullable=False, default=datetime.now)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_mode = Column(SQLEnum(PaymentMode), nullable=False)
    reference_number = Column(String(100))
    notes = Column(Text)
    received_by = Column(Integer, ForeignKey("employees.id"))
    created_at = Column(DateTime, default=datetime.now)

    booking = relationship("Booking", back_populates="payments")
    receiver = relationship("Employee")


class TaxConfig(Base):
    """Flat tax percentage applied to the folio subtotal (CGST / SGST)"""
    __tablename__ = "tax_config"

    id = Column(Integer, primary_key=True, index=True)
    tax_name = Column(String(20), unique=True, nullable=False)
    tax_percentage = Column(Numeric(5, 2), nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class ArchivedDocument(Base):
    """
    Frozen invoice / guest registration card produced at checkout
    Legal record: inserted once, never updated or deleted
    """
    __tablename__ = "archived_documents"
    __table_args__ = (
        UniqueConstraint("booking_id", "document_type", name="uq_archived_document_booking_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    document_type = Column(SQLEnum(DocumentType), nullable=False)
    document_number = Column(String(40), unique=True, nullable=False)
    document_html = Column(Text, nullable=False)
    document_data = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    booking = relationship("Booking", back_populates="documents")
    guest = relationship("Guest", back_populates="documents")


class Employee(Base):
    """Front-office operator; identity recorded on bookings, charges and payments"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    role = Column(SQLEnum(EmployeeRole), nullable=False, default=EmployeeRole.STAFF)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)


# ============== Write-once guards ==============

@event.listens_for(ArchivedDocument, "before_update")
def _reject_document_update(mapper, connection, target):
    raise ImmutableRecordError(f"Archived document {target.document_number} cannot be modified")


@event.listens_for(ArchivedDocument, "before_delete")
def _reject_document_delete(mapper, connection, target):
    raise ImmutableRecordError(f"Archived document {target.document_number} cannot be deleted")

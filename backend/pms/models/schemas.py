"""
Pydantic schemas
API request / response validation
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from pms.models.ontology import (
    RoomStatus, ReservationStatus, BookingStatus, ChargeType,
    PaymentMode, IdProofType, DocumentType
)


# ============== Room type Schemas ==============

class RoomTypeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    base_rate: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    max_occupancy: int = Field(default=2, ge=1)
    description: Optional[str] = None


class RoomTypeCreate(RoomTypeBase):
    pass


class RoomTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    base_rate: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_occupancy: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class RoomTypeResponse(RoomTypeBase):
    id: int
    is_active: bool
    room_count: int = 0
    model_config = ConfigDict(from_attributes=True)


# ============== Room Schemas ==============

class RoomBase(BaseModel):
    room_number: str = Field(..., min_length=1, max_length=10)
    floor: int
    room_type_id: int


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    floor: Optional[int] = None
    room_type_id: Optional[int] = None


class RoomResponse(RoomBase):
    id: int
    status: RoomStatus
    room_type_name: Optional[str] = None
    current_guest: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class RoomStatusUpdate(BaseModel):
    status: RoomStatus


# ============== Guest Schemas ==============

class GuestBase(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    mobile: str = Field(..., min_length=6, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    id_proof_type: Optional[IdProofType] = None
    id_proof_number: Optional[str] = Field(None, max_length=50)

    @field_validator('full_name', 'mobile')
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('must not be blank')
        return v


class GuestCreate(GuestBase):
    pass


class GuestUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    id_proof_type: Optional[IdProofType] = None
    id_proof_number: Optional[str] = Field(None, max_length=50)


class GuestResponse(GuestBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== Reservation Schemas ==============

class ReservationCreate(BaseModel):
    guest: GuestCreate
    room_type_id: int
    check_in_date: date
    check_out_date: date
    number_of_guests: int = Field(default=1, ge=1)
    notes: Optional[str] = None

    @model_validator(mode='after')
    def check_dates(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError('check_out_date must be after check_in_date')
        return self


class ReservationResponse(BaseModel):
    id: int
    guest_id: int
    guest_name: str
    guest_mobile: str
    room_type_id: int
    room_type_name: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    status: ReservationStatus
    notes: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== Check-in Schemas ==============

class CheckInFromReservation(BaseModel):
    reservation_id: int
    room_id: int
    advance_payment: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    payment_mode: PaymentMode = PaymentMode.CASH


class WalkInCheckIn(BaseModel):
    guest: GuestCreate
    room_id: int
    nights: int = Field(default=1, ge=1)
    number_of_guests: int = Field(default=1, ge=1)
    advance_payment: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    payment_mode: PaymentMode = PaymentMode.CASH


class ExtendStay(BaseModel):
    new_check_out_date: date


class ChangeRoom(BaseModel):
    new_room_id: int


class BookingResponse(BaseModel):
    id: int
    reservation_id: Optional[int] = None
    guest_id: int
    guest_name: str
    room_id: int
    room_number: str
    room_type_name: str
    check_in_date: datetime
    expected_check_out_date: date
    actual_check_out_date: Optional[datetime] = None
    number_of_guests: int
    advance_payment: Decimal
    status: BookingStatus


# ============== Folio Schemas ==============

class ChargeCreate(BaseModel):
    charge_date: date = Field(default_factory=date.today)
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    charge_type: ChargeType


class ChargeResponse(BaseModel):
    id: int
    booking_id: int
    charge_date: date
    description: str
    amount: Decimal
    charge_type: ChargeType
    posted_by: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class PaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    payment_mode: PaymentMode
    reference_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    booking_id: int
    payment_date: datetime
    amount: Decimal
    payment_mode: PaymentMode
    reference_number: Optional[str] = None
    received_by: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)


class TaxRatesResponse(BaseModel):
    cgst: Decimal
    sgst: Decimal


class FolioTotalsResponse(BaseModel):
    subtotal: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    grand_total: Decimal
    total_paid: Decimal
    balance: Decimal


class FolioResponse(BaseModel):
    booking_id: int
    charges: List[ChargeResponse]
    payments: List[PaymentResponse]
    taxes: TaxRatesResponse
    totals: FolioTotalsResponse


# ============== Checkout Schemas ==============

class CheckOutRequest(BaseModel):
    booking_id: int
    payment_amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    payment_mode: PaymentMode = PaymentMode.CASH


class CheckOutPreview(BaseModel):
    booking_id: int
    taxes: TaxRatesResponse
    totals: FolioTotalsResponse
    settlement_due: Decimal


class CheckOutResult(BaseModel):
    booking_id: int
    status: BookingStatus
    actual_check_out_date: Optional[datetime] = None
    invoice_number: str
    grc_number: str
    totals: FolioTotalsResponse


# ============== Night audit Schemas ==============

class NightAuditResult(BaseModel):
    audit_date: date
    charges_posted: int
    total_amount: Decimal
    skipped_booking_ids: List[int] = []


class NightAuditSummary(BaseModel):
    audit_date: date
    total_rooms: int
    occupied_rooms: int
    vacant_clean: int
    vacant_dirty: int
    out_of_order: int
    check_ins: int
    check_outs: int
    stayovers: int
    revenue: Decimal
    pending_charges: int


# ============== Report Schemas ==============

class ReportSummary(BaseModel):
    report_date: date
    total_rooms: int
    in_house: int
    occupancy_rate: float
    today_arrivals: int
    today_departures: int
    today_revenue: Decimal
    month_revenue: Decimal


# ============== Document Schemas ==============

class DocumentResponse(BaseModel):
    id: int
    booking_id: int
    guest_id: int
    document_type: DocumentType
    document_number: str
    document_data: Dict[str, Any]
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class DocumentVerification(BaseModel):
    document_number: str
    consistent: bool


# ============== Settings Schemas ==============

class TaxRateUpdate(BaseModel):
    cgst: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)
    sgst: Optional[Decimal] = Field(None, ge=0, le=100, max_digits=5, decimal_places=2)

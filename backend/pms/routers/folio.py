"""
Folio routes - charges, payments and running totals of a booking
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.ontology import Employee
from pms.models.schemas import (
    ChargeCreate, ChargeResponse, PaymentCreate, PaymentResponse, FolioResponse
)
from pms.services.billing_service import BillingService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/folio", tags=["Folio"])


@router.get("/{booking_id}", response_model=FolioResponse)
def get_folio(booking_id: int, db: Session = Depends(get_db)):
    """Charges, payments, tax rates and totals"""
    return BillingService(db).get_folio(booking_id)


@router.get("/{booking_id}/charges", response_model=List[ChargeResponse])
def list_charges(booking_id: int, db: Session = Depends(get_db)):
    service = BillingService(db)
    service.get_booking(booking_id)
    return service.get_charges(booking_id)


@router.post("/{booking_id}/charges", response_model=ChargeResponse, status_code=status.HTTP_201_CREATED)
def post_charge(
    booking_id: int,
    data: ChargeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    return BillingService(db).post_charge(booking_id, data, current_user.id)


@router.get("/{booking_id}/payments", response_model=List[PaymentResponse])
def list_payments(booking_id: int, db: Session = Depends(get_db)):
    service = BillingService(db)
    service.get_booking(booking_id)
    return service.get_payments(booking_id)


@router.post("/{booking_id}/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def add_payment(
    booking_id: int,
    data: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    return BillingService(db).add_payment(booking_id, data, current_user.id)

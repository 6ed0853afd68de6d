"""
Checkout routes
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.ontology import Employee
from pms.models.schemas import CheckOutRequest, CheckOutPreview, CheckOutResult, BookingResponse
from pms.services.checkout_service import CheckOutService
from pms.services.checkin_service import CheckInService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/checkout", tags=["Checkout"])


@router.get("/expected-today", response_model=List[BookingResponse])
def list_expected_checkouts(db: Session = Depends(get_db)):
    checkin_service = CheckInService(db)
    return [
        BookingResponse(**checkin_service.get_booking_detail(b))
        for b in CheckOutService(db).get_today_expected_checkouts()
    ]


@router.get("/overdue", response_model=List[BookingResponse])
def list_overdue_stays(db: Session = Depends(get_db)):
    checkin_service = CheckInService(db)
    return [
        BookingResponse(**checkin_service.get_booking_detail(b))
        for b in CheckOutService(db).get_overdue_stays()
    ]


@router.get("/{booking_id}/preview", response_model=CheckOutPreview)
def preview_checkout(booking_id: int, db: Session = Depends(get_db)):
    """Totals and the amount still to collect"""
    return CheckOutService(db).preview_checkout(booking_id)


@router.post("", response_model=CheckOutResult)
def check_out(
    data: CheckOutRequest,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Settle, archive invoice + GRC and close the booking"""
    return CheckOutService(db).check_out(data, current_user.id)

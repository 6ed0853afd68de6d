"""
Reservation routes
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.ontology import Employee, ReservationStatus
from pms.models.schemas import ReservationCreate, ReservationResponse
from pms.services.reservation_service import ReservationService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.get("", response_model=List[ReservationResponse])
def list_reservations(
    status: Optional[ReservationStatus] = None,
    check_in_date: Optional[date] = None,
    guest_name: Optional[str] = None,
    db: Session = Depends(get_db)
):
    service = ReservationService(db)
    reservations = service.get_reservations(status, check_in_date, guest_name)
    return [ReservationResponse(**service.get_reservation_detail(r)) for r in reservations]


@router.get("/today-arrivals", response_model=List[ReservationResponse])
def list_today_arrivals(db: Session = Depends(get_db)):
    service = ReservationService(db)
    return [ReservationResponse(**service.get_reservation_detail(r)) for r in service.get_today_arrivals()]


@router.get("/pending-arrivals", response_model=List[ReservationResponse])
def list_pending_arrivals(db: Session = Depends(get_db)):
    """Confirmed reservations whose arrival date has passed"""
    service = ReservationService(db)
    return [ReservationResponse(**service.get_reservation_detail(r)) for r in service.get_pending_arrivals()]


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
    service = ReservationService(db)
    return ReservationResponse(**service.get_reservation_detail(service.require_reservation(reservation_id)))


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = ReservationService(db)
    reservation = service.create_reservation(data, current_user.id)
    return ReservationResponse(**service.get_reservation_detail(reservation))


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    service = ReservationService(db)
    return ReservationResponse(**service.get_reservation_detail(service.cancel_reservation(reservation_id)))

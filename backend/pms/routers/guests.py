"""
Guest routes - lookup, KYC updates and data export
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.ontology import Employee
from pms.models.schemas import GuestUpdate, GuestResponse, BookingResponse, DocumentResponse
from pms.services.guest_service import GuestService
from pms.services.checkin_service import CheckInService
from pms.services.document_service import DocumentService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/guests", tags=["Guests"])


@router.get("", response_model=List[GuestResponse])
def list_guests(search: Optional[str] = None, limit: int = 100, db: Session = Depends(get_db)):
    """Search guests by name or mobile"""
    return GuestService(db).get_guests(search, limit)


@router.get("/export")
def export_all_guests(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Bulk backup of every guest record"""
    return GuestService(db).export_all_guests()


@router.get("/export.csv")
def export_guests_csv(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    content = GuestService(db).export_guests_csv()
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=guests.csv"},
    )


@router.get("/{guest_id}", response_model=GuestResponse)
def get_guest(guest_id: int, db: Session = Depends(get_db)):
    return GuestService(db).require_guest(guest_id)


@router.put("/{guest_id}", response_model=GuestResponse)
def update_guest(
    guest_id: int,
    data: GuestUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    return GuestService(db).update_guest(guest_id, data)


@router.get("/{guest_id}/stays", response_model=List[BookingResponse])
def get_guest_stays(guest_id: int, db: Session = Depends(get_db)):
    service = GuestService(db)
    service.require_guest(guest_id)
    checkin_service = CheckInService(db)
    return [
        BookingResponse(**checkin_service.get_booking_detail(b))
        for b in service.get_guest_stay_history(guest_id)
    ]


@router.get("/{guest_id}/documents", response_model=List[DocumentResponse])
def get_guest_documents(guest_id: int, db: Session = Depends(get_db)):
    GuestService(db).require_guest(guest_id)
    return DocumentService(db).get_documents_by_guest(guest_id)


@router.get("/{guest_id}/export")
def export_guest_record(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Full record of one guest as JSON"""
    return GuestService(db).export_guest_record(guest_id)

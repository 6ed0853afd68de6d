"""
Archived document routes (read-only)
"""
from typing import List
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.schemas import DocumentResponse, DocumentVerification
from pms.services.billing_service import BillingService
from pms.services.document_service import DocumentService

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get("/booking/{booking_id}", response_model=List[DocumentResponse])
def list_booking_documents(booking_id: int, db: Session = Depends(get_db)):
    BillingService(db).get_booking(booking_id)
    return DocumentService(db).get_documents_by_booking(booking_id)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(document_id: int, db: Session = Depends(get_db)):
    return DocumentService(db).get_document(document_id)


@router.get("/{document_id}/html", response_class=HTMLResponse)
def get_document_html(document_id: int, db: Session = Depends(get_db)):
    """The archived copy exactly as rendered at checkout"""
    return HTMLResponse(DocumentService(db).get_document(document_id).document_html)


@router.get("/number/{document_number}/verify", response_model=DocumentVerification)
def verify_document(document_number: str, db: Session = Depends(get_db)):
    """Recompute totals from the stored payload and compare"""
    return DocumentService(db).verify(document_number)

"""
Document service - archived billing records
Builds the frozen invoice / GRC payloads, renders them to HTML and stores
them as write-once ArchivedDocument rows
"""
import logging
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple
from jinja2 import Environment, PackageLoader, StrictUndefined
from sqlalchemy.orm import Session
from pms.config import settings
from pms.domain.billing import (
    FolioTotals, TaxRates, compute_totals, format_money, snapshot_is_consistent
)
from pms.errors import ArchivalError, NotFoundError
from pms.models.ontology import (
    ArchivedDocument, Booking, DocumentType, FolioCharge, Payment
)

logger = logging.getLogger(__name__)

ID_PROOF_LABELS = {
    "aadhaar": "Aadhaar Card",
    "passport": "Passport",
    "driving_license": "Driving License",
    "other": "Other",
}

TEMPLATES = {
    DocumentType.INVOICE: "invoice.html.j2",
    DocumentType.GRC: "grc.html.j2",
}


# ============== Rendering ==============

def _display_date(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    return date.fromisoformat(value[:10]).strftime("%d %b %Y")


def _display_datetime(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    return datetime.fromisoformat(value).strftime("%d %b %Y, %I:%M %p")


def _id_proof_label(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    return ID_PROOF_LABELS.get(value, value)


def _build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("pms", "templates"),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["money"] = lambda value: format_money(value, settings.CURRENCY_SYMBOL)
    env.filters["display_date"] = _display_date
    env.filters["display_datetime"] = _display_datetime
    env.filters["id_proof_label"] = _id_proof_label
    return env


_env = _build_environment()


def render_document(document_type: DocumentType, document_number: str, data: dict) -> str:
    """Render an archived payload to standalone HTML"""
    template = _env.get_template(TEMPLATES[document_type])
    return template.render(
        **data,
        document_number=document_number,
        currency=settings.CURRENCY_SYMBOL,
        balance_due=FolioTotals.from_dict(data["totals"]).balance > 0,
    )


def document_number(document_type: DocumentType, booking_id: int, issued_on: date) -> str:
    """<PREFIX>-<YYYYMMDD>-<booking id>"""
    prefix = settings.INVOICE_PREFIX if document_type == DocumentType.INVOICE else settings.GRC_PREFIX
    return f"{prefix}-{issued_on:%Y%m%d}-{booking_id:05d}"


def hotel_details() -> dict:
    return {
        "name": settings.HOTEL_NAME,
        "address": settings.HOTEL_ADDRESS,
        "phone": settings.HOTEL_PHONE,
        "email": settings.HOTEL_EMAIL,
        "gstin": settings.HOTEL_GSTIN,
    }


def build_payload(booking: Booking, charges: Sequence[FolioCharge], payments: Sequence[Payment],
                  rates: TaxRates, totals: FolioTotals, issued_at: datetime) -> dict:
    """
    Frozen, JSON-safe snapshot of a stay. Amounts are exact decimal strings so
    the totals can be recomputed from the payload alone.
    """
    guest = booking.guest
    room = booking.room
    return {
        "guest": {
            "id": guest.id,
            "full_name": guest.full_name,
            "mobile": guest.mobile,
            "email": guest.email,
            "address": guest.address,
            "id_proof_type": guest.id_proof_type.value if guest.id_proof_type else None,
            "id_proof_number": guest.id_proof_number,
        },
        "room": {
            "room_number": room.room_number,
            "room_type": room.room_type.name,
            "base_rate": str(room.room_type.base_rate),
        },
        "stay": {
            "check_in_date": booking.check_in_date.isoformat(),
            "check_out_date": issued_at.isoformat(),
            "expected_check_out_date": booking.expected_check_out_date.isoformat(),
            "number_of_guests": booking.number_of_guests,
        },
        "charges": [
            {
                "id": c.id,
                "charge_date": c.charge_date.isoformat(),
                "description": c.description,
                "amount": str(c.amount),
                "charge_type": c.charge_type.value,
            }
            for c in charges
        ],
        "payments": [
            {
                "id": p.id,
                "payment_date": p.payment_date.isoformat(),
                "amount": str(p.amount),
                "payment_mode": p.payment_mode.value,
                "reference_number": p.reference_number,
            }
            for p in payments
        ],
        "taxes": rates.to_dict(),
        "totals": totals.to_dict(),
        "hotel": hotel_details(),
        "document_date": issued_at.date().isoformat(),
    }


class DocumentService:
    """Archived document service"""

    def __init__(self, db: Session):
        self.db = db

    def get_documents_by_booking(self, booking_id: int) -> List[ArchivedDocument]:
        return self.db.query(ArchivedDocument).filter(
            ArchivedDocument.booking_id == booking_id
        ).order_by(ArchivedDocument.id).all()

    def get_documents_by_guest(self, guest_id: int) -> List[ArchivedDocument]:
        return self.db.query(ArchivedDocument).filter(
            ArchivedDocument.guest_id == guest_id
        ).order_by(ArchivedDocument.created_at.desc(), ArchivedDocument.id.desc()).all()

    def get_document(self, document_id: int) -> ArchivedDocument:
        document = self.db.query(ArchivedDocument).filter(ArchivedDocument.id == document_id).first()
        if not document:
            raise NotFoundError(f"Document {document_id} not found")
        return document

    def get_document_by_number(self, number: str) -> ArchivedDocument:
        document = self.db.query(ArchivedDocument).filter(
            ArchivedDocument.document_number == number
        ).first()
        if not document:
            raise NotFoundError(f"Document {number} not found")
        return document

    def has_documents(self, booking_id: int) -> bool:
        """Whether both the invoice and the GRC of a booking are archived"""
        types = {d.document_type for d in self.get_documents_by_booking(booking_id)}
        return types >= {DocumentType.INVOICE, DocumentType.GRC}

    def verify(self, number: str) -> dict:
        """Recompute the totals from the document's own payload and compare with the stored ones"""
        document = self.get_document_by_number(number)
        return {
            "document_number": document.document_number,
            "consistent": snapshot_is_consistent(document.document_data),
        }

    def archive_checkout_documents(self, booking: Booking, charges: Sequence[FolioCharge],
                                   payments: Sequence[Payment], rates: TaxRates,
                                   totals: FolioTotals,
                                   issued_at: Optional[datetime] = None
                                   ) -> Tuple[ArchivedDocument, ArchivedDocument]:
        """
        Persist the invoice and the GRC of a booking in one transaction.
        Either both are stored or neither is; failures surface as ArchivalError.
        """
        issued_at = issued_at or datetime.now()
        invoice_data = build_payload(booking, charges, payments, rates, totals, issued_at)
        grc_data = build_payload(booking, [], [], rates, compute_totals([], [], rates), issued_at)

        try:
            invoice = self._new_document(booking, DocumentType.INVOICE, invoice_data, issued_at)
            grc = self._new_document(booking, DocumentType.GRC, grc_data, issued_at)
            self.db.add_all([invoice, grc])
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Archiving documents for booking {booking.id} failed")
            raise ArchivalError(f"Could not archive checkout documents for booking {booking.id}: {e}") from e

        self.db.refresh(invoice)
        self.db.refresh(grc)
        logger.info(f"Archived {invoice.document_number} and {grc.document_number}")
        return invoice, grc

    def _new_document(self, booking: Booking, document_type: DocumentType,
                      data: dict, issued_at: datetime) -> ArchivedDocument:
        number = document_number(document_type, booking.id, issued_at.date())
        return ArchivedDocument(
            booking_id=booking.id,
            guest_id=booking.guest_id,
            document_type=document_type,
            document_number=number,
            document_html=render_document(document_type, number, data),
            document_data=data,
            created_at=issued_at
        )

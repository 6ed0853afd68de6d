"""
Guest service
Manages Guest rows (keyed by mobile) and the guest data exports
"""
import csv
import io
import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import or_, desc
from pms.errors import NotFoundError
from pms.models.ontology import Guest, Booking, ArchivedDocument
from pms.models.schemas import GuestCreate, GuestUpdate

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "id", "full_name", "mobile", "email", "address",
    "id_proof_type", "id_proof_number", "created_at",
]


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _enum_value(value) -> Optional[str]:
    return value.value if value is not None else None


class GuestService:
    """Guest service"""

    def __init__(self, db: Session):
        self.db = db

    def get_guests(self, search: Optional[str] = None, limit: int = 100) -> List[Guest]:
        """List guests, optionally filtered by name or mobile fragment"""
        query = self.db.query(Guest)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Guest.full_name.ilike(pattern), Guest.mobile.like(pattern)))
        return query.order_by(desc(Guest.created_at), desc(Guest.id)).limit(limit).all()

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.id == guest_id).first()

    def require_guest(self, guest_id: int) -> Guest:
        guest = self.get_guest(guest_id)
        if not guest:
            raise NotFoundError(f"Guest {guest_id} not found")
        return guest

    def get_guest_by_mobile(self, mobile: str) -> Optional[Guest]:
        return self.db.query(Guest).filter(Guest.mobile == mobile).first()

    def get_or_create_guest(self, data: GuestCreate) -> Guest:
        """
        Find the guest by mobile or register a new one. Does not commit.
        An existing guest keeps their details; only blank KYC fields are filled in.
        """
        guest = self.get_guest_by_mobile(data.mobile)
        if guest:
            for field in ("email", "address", "id_proof_type", "id_proof_number"):
                value = getattr(data, field)
                if value and not getattr(guest, field):
                    setattr(guest, field, value)
            return guest

        guest = Guest(**data.model_dump())
        self.db.add(guest)
        self.db.flush()
        logger.info(f"Registered guest {guest.id} ({guest.mobile})")
        return guest

    def update_guest(self, guest_id: int, data: GuestUpdate) -> Guest:
        guest = self.require_guest(guest_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(guest, key, value)
        self.db.commit()
        self.db.refresh(guest)
        return guest

    def get_guest_stay_history(self, guest_id: int) -> List[Booking]:
        return self.db.query(Booking).filter(
            Booking.guest_id == guest_id
        ).order_by(desc(Booking.check_in_date)).all()

    # ============== Exports ==============

    def _guest_dict(self, guest: Guest) -> dict:
        return {
            "id": guest.id,
            "full_name": guest.full_name,
            "mobile": guest.mobile,
            "email": guest.email,
            "address": guest.address,
            "id_proof_type": _enum_value(guest.id_proof_type),
            "id_proof_number": guest.id_proof_number,
            "created_at": _iso(guest.created_at),
        }

    def _stay_dict(self, booking: Booking) -> dict:
        room = booking.room
        return {
            "id": booking.id,
            "reservation_id": booking.reservation_id,
            "room_number": room.room_number,
            "room_type": room.room_type.name,
            "base_rate": str(room.room_type.base_rate),
            "check_in_date": _iso(booking.check_in_date),
            "expected_check_out_date": _iso(booking.expected_check_out_date),
            "actual_check_out_date": _iso(booking.actual_check_out_date),
            "number_of_guests": booking.number_of_guests,
            "advance_payment": str(booking.advance_payment or 0),
            "status": booking.status.value,
            "charges": [
                {
                    "id": c.id,
                    "charge_date": _iso(c.charge_date),
                    "description": c.description,
                    "amount": str(c.amount),
                    "charge_type": c.charge_type.value,
                }
                for c in booking.charges
            ],
            "payments": [
                {
                    "id": p.id,
                    "payment_date": _iso(p.payment_date),
                    "amount": str(p.amount),
                    "payment_mode": p.payment_mode.value,
                    "reference_number": p.reference_number,
                }
                for p in booking.payments
            ],
        }

    def export_guest_record(self, guest_id: int) -> dict:
        """Full record of one guest: profile, stays with folio, archived documents"""
        guest = self.require_guest(guest_id)

        documents = self.db.query(ArchivedDocument).filter(
            ArchivedDocument.guest_id == guest.id
        ).order_by(desc(ArchivedDocument.created_at), desc(ArchivedDocument.id)).all()

        return {
            "export_date": datetime.now().isoformat(),
            "export_type": "guest_full_record",
            "guest": self._guest_dict(guest),
            "stay_history": [self._stay_dict(b) for b in self.get_guest_stay_history(guest.id)],
            "archived_documents": [
                {
                    "document_type": d.document_type.value,
                    "document_number": d.document_number,
                    "document_data": d.document_data,
                    "created_at": _iso(d.created_at),
                }
                for d in documents
            ],
        }

    def export_all_guests(self) -> dict:
        """Bulk backup of every guest record"""
        guests = self.db.query(Guest).order_by(desc(Guest.created_at), desc(Guest.id)).all()
        records = [self.export_guest_record(g.id) for g in guests]
        logger.info(f"Exported {len(records)} guest records")
        return {
            "export_date": datetime.now().isoformat(),
            "export_type": "bulk_guest_records",
            "total_guests": len(records),
            "guests": records,
        }

    def export_guests_csv(self) -> str:
        """Guest list as CSV text"""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_FIELDS, quoting=csv.QUOTE_ALL)
        writer.writeheader()
        for guest in self.db.query(Guest).order_by(Guest.id).all():
            writer.writerow(self._guest_dict(guest))
        return output.getvalue()

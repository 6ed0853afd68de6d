# Front-office models
from pms.models.ontology import (
    RoomType, Room, Guest, Reservation, Booking,
    FolioCharge, Payment, TaxConfig, ArchivedDocument, Employee
)

__all__ = [
    'RoomType', 'Room', 'Guest', 'Reservation', 'Booking',
    'FolioCharge', 'Payment', 'TaxConfig', 'ArchivedDocument', 'Employee'
]

# API Routers
from pms.routers import (
    rooms, guests, reservations, checkin, folio, checkout, night_audit, documents, reports, settings
)

__all__ = [
    'rooms', 'guests', 'reservations', 'checkin', 'folio',
    'checkout', 'night_audit', 'documents', 'reports', 'settings'
]

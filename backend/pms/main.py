"""
Front-office PMS application entry
Rooms, reservations, check-in/out, folio billing, night audit, reports and archived documents
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pms import __version__
from pms.config import settings
from pms.database import init_db
from pms.errors import register_exception_handlers
from pms.logging_config import setup_logging
from pms.routers import (
    rooms, guests, reservations, checkin, folio, checkout, night_audit, documents, reports,
    settings as settings_router
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and make sure the schema and tax rows exist"""
    setup_logging(settings.LOG_LEVEL)
    init_db()
    logger.info(f"{settings.APP_NAME} {__version__} started for {settings.HOTEL_NAME}")

    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Hotel front-office property management",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(rooms.router)
app.include_router(guests.router)
app.include_router(reservations.router)
app.include_router(checkin.router)
app.include_router(folio.router)
app.include_router(checkout.router)
app.include_router(night_audit.router)
app.include_router(documents.router)
app.include_router(reports.router)
app.include_router(settings_router.router)


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "hotel": settings.HOTEL_NAME,
        "version": __version__
    }


@app.get("/health")
def health_check():
    """Health check"""
    return {"status": "healthy"}

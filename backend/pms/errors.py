"""
Front-office error taxonomy and their HTTP mappings

Services raise these; all of them are ValueError subclasses so callers that
only care about "the operation was refused" can keep catching ValueError.
"""
import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)


class FrontOfficeError(ValueError):
    """Base class for refused front-office operations"""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailure(FrontOfficeError):
    """Missing or invalid guest/room/booking fields"""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FrontOfficeError):
    """Referenced row does not exist"""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(FrontOfficeError):
    """Row state forbids the operation (room not vacant, duplicate charge, ...)"""

    status_code = status.HTTP_409_CONFLICT


class ArchivalError(FrontOfficeError):
    """Archived documents could not be persisted; checkout stays open"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ImmutableRecordError(FrontOfficeError):
    """Attempt to modify or delete a write-once record"""

    status_code = status.HTTP_409_CONFLICT


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions and backend outages to JSON responses"""

    @app.exception_handler(FrontOfficeError)
    async def front_office_error_handler(request: Request, exc: FrontOfficeError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.exception_handler(OperationalError)
    async def backend_unavailable_handler(request: Request, exc: OperationalError):
        logger.error(f"Database unavailable on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Database unavailable, please try again"}
        )

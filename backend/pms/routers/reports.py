"""
Report routes
"""
from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.schemas import ReportSummary
from pms.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/summary", response_model=ReportSummary)
def get_report_summary(report_date: Optional[date] = None, db: Session = Depends(get_db)):
    """Arrivals, departures, occupancy and revenue for a date (default today)"""
    return ReportService(db).summary(report_date)

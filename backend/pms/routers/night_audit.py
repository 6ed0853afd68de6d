"""
Night audit routes
"""
from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.ontology import Employee
from pms.models.schemas import NightAuditResult, NightAuditSummary
from pms.services.night_audit_service import NightAuditService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/night-audit", tags=["Night audit"])


@router.get("/summary", response_model=NightAuditSummary)
def get_summary(audit_date: Optional[date] = None, db: Session = Depends(get_db)):
    return NightAuditService(db).summary(audit_date)


@router.post("/run", response_model=NightAuditResult)
def run_night_audit(
    audit_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Post tonight's room rent for every stayover"""
    return NightAuditService(db).run(audit_date, current_user.id)

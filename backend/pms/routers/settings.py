"""
Tax configuration routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.ontology import Employee
from pms.models.schemas import TaxRatesResponse, TaxRateUpdate
from pms.services.tax_service import TaxService
from pms.security.operator import get_current_operator

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/taxes", response_model=TaxRatesResponse)
def get_tax_rates(db: Session = Depends(get_db)):
    rates = TaxService(db).get_active_rates()
    return TaxRatesResponse(cgst=rates.cgst, sgst=rates.sgst)


@router.put("/taxes", response_model=TaxRatesResponse)
def update_tax_rates(
    data: TaxRateUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_operator)
):
    """Change CGST / SGST; invoices already archived keep their rates"""
    rates = TaxService(db).update_rates(data.cgst, data.sgst)
    return TaxRatesResponse(cgst=rates.cgst, sgst=rates.sgst)

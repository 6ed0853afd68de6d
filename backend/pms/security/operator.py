"""
Operator identity
The front desk terminal sends the acting employee's id in X-Operator-Id.
This only records who did what; it does not authenticate anyone.
"""
import logging
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from pms.database import get_db
from pms.models.ontology import Employee

logger = logging.getLogger(__name__)

OPERATOR_HEADER = "X-Operator-Id"


def get_current_operator(
    x_operator_id: Optional[str] = Header(None, alias=OPERATOR_HEADER),
    db: Session = Depends(get_db)
) -> Employee:
    """Resolve the X-Operator-Id header to an active employee"""
    if not x_operator_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{OPERATOR_HEADER} header is required"
        )
    try:
        operator_id = int(x_operator_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{OPERATOR_HEADER} must be an employee id"
        )

    operator = db.query(Employee).filter(
        Employee.id == operator_id,
        Employee.is_active == True  # noqa: E712
    ).first()
    if not operator:
        logger.warning(f"Unknown operator id {operator_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Operator {operator_id} not found"
        )
    return operator

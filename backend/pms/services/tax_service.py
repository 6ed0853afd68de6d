"""
Tax service
Reads and maintains the CGST / SGST rows of tax_config
"""
import logging
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from pms.config import settings
from pms.domain.billing import TaxRates
from pms.models.ontology import TaxConfig

logger = logging.getLogger(__name__)

CGST = "CGST"
SGST = "SGST"


class TaxService:
    """Tax configuration service"""

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, tax_name: str) -> Optional[TaxConfig]:
        return self.db.query(TaxConfig).filter(TaxConfig.tax_name == tax_name).first()

    def seed_defaults(self) -> List[str]:
        """Insert missing CGST / SGST rows with the configured defaults"""
        created = []
        for name, rate in ((CGST, settings.DEFAULT_CGST_RATE), (SGST, settings.DEFAULT_SGST_RATE)):
            if not self._get_row(name):
                self.db.add(TaxConfig(tax_name=name, tax_percentage=rate, is_active=True))
                created.append(name)
        if created:
            self.db.commit()
        return created

    def get_active_rates(self) -> TaxRates:
        """
        Current rates; a missing or inactive row falls back to the configured default
        """
        rows = self.db.query(TaxConfig).filter(TaxConfig.is_active == True).all()  # noqa: E712
        by_name = {row.tax_name: Decimal(row.tax_percentage) for row in rows}
        return TaxRates(
            cgst=by_name.get(CGST, settings.DEFAULT_CGST_RATE),
            sgst=by_name.get(SGST, settings.DEFAULT_SGST_RATE),
        )

    def update_rates(self, cgst: Optional[Decimal] = None, sgst: Optional[Decimal] = None) -> TaxRates:
        """Change one or both rates; already archived invoices keep the rates they froze"""
        for name, rate in ((CGST, cgst), (SGST, sgst)):
            if rate is None:
                continue
            row = self._get_row(name)
            if row:
                row.tax_percentage = rate
                row.is_active = True
            else:
                self.db.add(TaxConfig(tax_name=name, tax_percentage=rate, is_active=True))
            logger.info(f"Tax rate {name} set to {rate}%")
        self.db.commit()
        return self.get_active_rates()

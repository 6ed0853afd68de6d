"""
Tests for pms/services/tax_service.py
"""
from decimal import Decimal

from pms.domain.billing import TaxRates
from pms.models.ontology import TaxConfig
from pms.services.tax_service import TaxService


def test_seed_defaults_is_idempotent(db_session):
    # db_session already seeded both rows
    assert TaxService(db_session).seed_defaults() == []
    assert db_session.query(TaxConfig).count() == 2


def test_active_rates(db_session):
    assert TaxService(db_session).get_active_rates() == TaxRates(Decimal("6"), Decimal("6"))


def test_missing_or_inactive_row_falls_back_to_default(db_session):
    row = db_session.query(TaxConfig).filter(TaxConfig.tax_name == "SGST").one()
    row.is_active = False
    db_session.query(TaxConfig).filter(TaxConfig.tax_name == "CGST").delete()
    db_session.commit()

    assert TaxService(db_session).get_active_rates() == TaxRates(Decimal("6"), Decimal("6"))


def test_update_rates(db_session):
    service = TaxService(db_session)
    rates = service.update_rates(cgst=Decimal("9"))
    assert rates == TaxRates(Decimal("9"), Decimal("6"))

    rates = service.update_rates(sgst=Decimal("2.5"))
    assert rates == TaxRates(Decimal("9"), Decimal("2.5"))


def test_update_recreates_missing_row(db_session):
    db_session.query(TaxConfig).delete()
    db_session.commit()

    rates = TaxService(db_session).update_rates(cgst=Decimal("5"), sgst=Decimal("5"))
    assert rates == TaxRates(Decimal("5"), Decimal("5"))
    assert db_session.query(TaxConfig).count() == 2

"""
pms/domain/billing.py

Folio arithmetic - pure functions, no database access

- subtotal = sum of charge amounts
- cgst / sgst = subtotal * rate / 100
- grand_total = subtotal + cgst + sgst
- balance = grand_total - sum of payments

Everything is Decimal and exact; rounding happens only in quantize_money(),
which the renderers call when displaying a value.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Mapping

HUNDRED = Decimal("100")
ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored/serialized amount to Decimal without float artefacts"""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    return Decimal(str(value))


def quantize_money(value: Any) -> Decimal:
    """Round to paise for display"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Any, symbol: str = "") -> str:
    return f"{symbol}{quantize_money(value):.2f}"


@dataclass(frozen=True)
class TaxRates:
    """CGST / SGST percentages in effect for a folio"""
    cgst: Decimal
    sgst: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {"cgst": str(self.cgst), "sgst": str(self.sgst)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaxRates":
        return cls(cgst=to_decimal(data["cgst"]), sgst=to_decimal(data["sgst"]))


@dataclass(frozen=True)
class FolioTotals:
    """Unrounded folio totals"""
    subtotal: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    grand_total: Decimal
    total_paid: Decimal
    balance: Decimal

    @property
    def settlement_due(self) -> Decimal:
        """Amount to collect at checkout, in paise (never negative)"""
        return quantize_money(self.balance) if self.balance > ZERO else ZERO

    def to_dict(self) -> Dict[str, str]:
        """Serialize as exact decimal strings (used in archived payloads)"""
        return {
            "subtotal": str(self.subtotal),
            "cgst_amount": str(self.cgst_amount),
            "sgst_amount": str(self.sgst_amount),
            "grand_total": str(self.grand_total),
            "total_paid": str(self.total_paid),
            "balance": str(self.balance),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FolioTotals":
        return cls(**{key: to_decimal(data[key]) for key in (
            "subtotal", "cgst_amount", "sgst_amount",
            "grand_total", "total_paid", "balance",
        )})


def compute_totals(charge_amounts: Iterable[Any], payment_amounts: Iterable[Any],
                   rates: TaxRates) -> FolioTotals:
    """Compute folio totals from raw amounts and tax rates"""
    subtotal = sum((to_decimal(a) for a in charge_amounts), ZERO)
    cgst_amount = subtotal * rates.cgst / HUNDRED
    sgst_amount = subtotal * rates.sgst / HUNDRED
    grand_total = subtotal + cgst_amount + sgst_amount
    total_paid = sum((to_decimal(a) for a in payment_amounts), ZERO)
    return FolioTotals(
        subtotal=subtotal,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        grand_total=grand_total,
        total_paid=total_paid,
        balance=grand_total - total_paid,
    )


def totals_from_snapshot(document_data: Mapping[str, Any]) -> FolioTotals:
    """Recompute totals from the charges/payments/taxes embedded in an archived payload"""
    return compute_totals(
        (c["amount"] for c in document_data.get("charges", [])),
        (p["amount"] for p in document_data.get("payments", [])),
        TaxRates.from_dict(document_data["taxes"]),
    )


def snapshot_is_consistent(document_data: Mapping[str, Any]) -> bool:
    """True when the stored totals equal the totals recomputed from the payload itself"""
    return totals_from_snapshot(document_data) == FolioTotals.from_dict(document_data["totals"])


def nights_between(start: date, end: date) -> int:
    """Calendar nights between two business dates (no time-of-day component)"""
    return (end - start).days

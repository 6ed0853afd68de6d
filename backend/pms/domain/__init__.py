# Pure front-office rules
from pms.domain.billing import (
    TaxRates, FolioTotals, compute_totals, totals_from_snapshot,
    snapshot_is_consistent, quantize_money, format_money, to_decimal, nights_between
)

__all__ = [
    'TaxRates', 'FolioTotals', 'compute_totals', 'totals_from_snapshot',
    'snapshot_is_consistent', 'quantize_money', 'format_money', 'to_decimal', 'nights_between'
]

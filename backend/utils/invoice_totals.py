from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from utils.matching import canonical_price

HUNDRED = Decimal("100")


@dataclass
class InvoiceTotals:
    subtotal: Decimal
    claim_amount: Decimal
    vat_amount: Decimal
    gross_total: Decimal


def line_total(quantity, unit_price) -> Decimal:
    return (canonical_price(quantity) or Decimal("0")) * (canonical_price(unit_price) or Decimal("0"))


def compute_invoice_totals(line_totals: Iterable[Decimal], claim_percentage, vat_rate: Decimal) -> InvoiceTotals:
    """subtotal -> claim (subtotal x claim% / 100) -> VAT on the claim -> gross."""
    subtotal = sum((Decimal(t) for t in line_totals), Decimal("0"))
    claim_pct = canonical_price(claim_percentage)
    if claim_pct is None:
        claim_pct = HUNDRED
    claim_amount = subtotal * claim_pct / HUNDRED
    vat_amount = claim_amount * vat_rate
    return InvoiceTotals(
        subtotal=subtotal,
        claim_amount=claim_amount,
        vat_amount=vat_amount,
        gross_total=claim_amount + vat_amount,
    )

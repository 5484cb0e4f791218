"""
Unit tests for the delivered rollup calculation.
"""
from decimal import Decimal

import pytest

from crud.delivered_rollup import InvoiceLine, compute_rollup, group_by_key
from utils.matching import delivery_key


def line(invoice_id, line_id, quantity, price=None, number=None, part_no="P-1", material_no="M-1", po_number="PO-1"):
    return InvoiceLine(
        invoice_id=invoice_id,
        line_id=line_id,
        invoice_number=number or f"INV-{invoice_id}",
        po_number=po_number,
        part_no=part_no,
        material_no=material_no,
        quantity=Decimal(quantity),
        unit_price=None if price is None else Decimal(price),
    )


@pytest.mark.unit
class TestComputeRollup:

    def test_no_lines(self):
        rollup = compute_rollup(Decimal("100"), None, [])
        assert rollup.delivered_quantity == 0
        assert rollup.delivered_unit_price is None
        assert rollup.delivered_total_price == 0
        assert rollup.balance_quantity_undelivered == Decimal("100")
        assert rollup.penalty_amount is None
        assert rollup.invoice_no is None

    def test_sums_quantities_and_takes_first_price(self):
        lines = [line(1, 1, "40", None), line(2, 2, "30", "9.5"), line(3, 3, "10", "11")]
        rollup = compute_rollup(Decimal("100"), None, lines)
        assert rollup.delivered_quantity == Decimal("80")
        assert rollup.delivered_unit_price == Decimal("9.5")
        assert rollup.delivered_total_price == Decimal("760")
        assert rollup.balance_quantity_undelivered == Decimal("20")

    def test_invoice_numbers_distinct_in_encounter_order(self):
        lines = [line(2, 5, "1", "1", number="B"), line(2, 6, "1", "1", number="B"), line(7, 9, "1", "1", number="A")]
        assert compute_rollup(Decimal("3"), None, lines).invoice_no == "B, A"

    def test_penalty_amount(self):
        rollup = compute_rollup(Decimal("100"), Decimal("5"), [line(1, 1, "40", "10")])
        assert rollup.penalty_amount == Decimal("20")

    def test_penalty_disabled(self):
        rollup = compute_rollup(Decimal("100"), Decimal("5"), [line(1, 1, "40", "10")], penalty_enabled=False)
        assert rollup.penalty_amount is None

    def test_penalty_needs_a_delivered_total(self):
        rollup = compute_rollup(Decimal("100"), Decimal("5"), [line(1, 1, "40", None)])
        assert rollup.penalty_amount is None

    def test_over_delivery_gives_negative_balance(self):
        rollup = compute_rollup(Decimal("10"), None, [line(1, 1, "12", "1")])
        assert rollup.balance_quantity_undelivered == Decimal("-2")


@pytest.mark.unit
def test_group_by_key_separates_material_numbers():
    lines = [line(1, 1, "1", material_no=None), line(1, 2, "2", material_no=""), line(1, 3, "4", material_no="M-9")]
    grouped = group_by_key(lines)
    assert [l.line_id for l in grouped[delivery_key("PO-1", "P-1", None)]] == [1, 2]
    assert [l.line_id for l in grouped[delivery_key("PO-1", "P-1", "M-9")]] == [3]

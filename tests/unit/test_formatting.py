"""
Unit tests for invoice totals and amount formatting.
"""
from decimal import Decimal

import pytest

from utils.formatting import amount_in_words, amount_to_words
from utils.invoice_totals import compute_invoice_totals, line_total


@pytest.mark.unit
class TestAmountToWords:

    @pytest.mark.parametrize("amount,words", [
        (0, "zero"),
        (7, "seven"),
        (15, "fifteen"),
        (40, "forty"),
        (105, "one hundred five"),
        (1050, "one thousand fifty"),
        (2000000, "two million"),
        (1234567, "one million two hundred thirty four thousand five hundred sixty seven"),
    ])
    def test_words(self, amount, words):
        assert amount_to_words(amount) == words

    def test_amount_in_words_with_fils(self):
        assert amount_in_words(Decimal("1050.50")) == "AED one thousand fifty and 50/100 Only"

    def test_amount_in_words_whole_amount(self):
        assert amount_in_words(Decimal("12")) == "AED twelve and 00/100 Only"


@pytest.mark.unit
class TestInvoiceTotals:

    def test_full_claim(self):
        totals = compute_invoice_totals([Decimal("100"), Decimal("50")], Decimal("100"), Decimal("0.05"))
        assert totals.subtotal == Decimal("150")
        assert totals.claim_amount == Decimal("150")
        assert totals.vat_amount == Decimal("7.5")
        assert totals.gross_total == Decimal("157.5")

    def test_partial_claim(self):
        totals = compute_invoice_totals([Decimal("200")], Decimal("40"), Decimal("0.05"))
        assert totals.claim_amount == Decimal("80")
        assert totals.gross_total == Decimal("84")

    def test_missing_claim_defaults_to_full(self):
        totals = compute_invoice_totals([Decimal("10")], None, Decimal("0"))
        assert totals.gross_total == Decimal("10")

    def test_line_total_without_price(self):
        assert line_total(Decimal("3"), None) == 0

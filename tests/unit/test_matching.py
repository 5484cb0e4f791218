"""
Unit tests for the compound matching keys.
"""
from decimal import Decimal

import pytest

from utils.matching import (
    EMPTY,
    canonical_price,
    canonical_text,
    delivery_key,
    inventory_key,
    sale_key,
)


@pytest.mark.unit
class TestCanonicalValues:

    @pytest.mark.parametrize("value", [None, "", "   ", "\t"])
    def test_blank_values_collapse_to_empty(self, value):
        assert canonical_text(value) == EMPTY

    def test_non_blank_text_is_kept_as_is(self):
        assert canonical_text("PRJ-7") == "PRJ-7"

    def test_price_from_float_keeps_printed_value(self):
        assert canonical_price(12.1) == Decimal("12.1")

    def test_missing_price(self):
        assert canonical_price(None) is None
        assert canonical_price("") is None


@pytest.mark.unit
class TestInventoryKey:

    def test_null_and_empty_project_match_each_other(self):
        assert inventory_key(None, "P-1", None, "5") == inventory_key("", "P-1", "  ", "5")

    def test_blank_never_matches_filled_value(self):
        assert inventory_key(None, "P-1", "Bolt", "5") != inventory_key("PRJ-1", "P-1", "Bolt", "5")

    def test_price_compared_as_decimal_value(self):
        assert inventory_key("X", "P-1", "Bolt", "12.5") == inventory_key("X", "P-1", "Bolt", Decimal("12.50"))

    def test_different_price_is_a_different_lineage(self):
        assert inventory_key("X", "P-1", "Bolt", "12.5") != inventory_key("X", "P-1", "Bolt", "12.6")

    def test_sale_key_drops_price(self):
        key = inventory_key("X", "P-1", "Bolt", "12.5")
        assert key.sale_key == sale_key("X", "P-1", "Bolt")


@pytest.mark.unit
class TestDeliveryKey:

    def test_missing_material_numbers_match(self):
        assert delivery_key("PO-1", "P-1", None) == delivery_key("PO-1", "P-1", "")

    def test_all_three_fields_must_match(self):
        base = delivery_key("PO-1", "P-1", "M-1")
        assert base != delivery_key("PO-2", "P-1", "M-1")
        assert base != delivery_key("PO-1", "P-2", "M-1")
        assert base != delivery_key("PO-1", "P-1", "M-2")
        assert base != delivery_key("PO-1", "P-1", None)

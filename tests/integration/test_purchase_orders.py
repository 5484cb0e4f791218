"""
Integration tests for purchase order write paths.
"""
from decimal import Decimal

import pytest

from crud import purchase_orders as crud_po
from crud.audit_log import get_audit_logs
from exceptions import DuplicateNumber, InvalidLinkage, InvalidStatus
from models.purchase_orders import OrderType, PurchaseOrderStatus
from schemas.purchase_order_items import PurchaseOrderItemCreateRequest
from schemas.purchase_orders import PurchaseOrderUpdate
from utils import local_now


@pytest.mark.integration
class TestNumbering:

    def test_generated_numbers_follow_the_highest_existing(self, db, make_order):
        year = local_now().year
        assert crud_po.next_po_number(db) == f"PO-{year}-001"

        first = make_order(po_number=None)
        second = make_order(po_number=None)
        assert first.po_number == f"PO-{year}-001"
        assert second.po_number == f"PO-{year}-002"

        make_order(po_number=f"PO-{year}-010")
        assert crud_po.next_po_number(db) == f"PO-{year}-011"

    def test_other_years_and_manual_numbers_are_ignored(self, db, make_order):
        make_order(po_number="PO-1999-123")
        make_order(po_number="CUSTOMER-REF-77")
        assert crud_po.next_po_number(db, year=2030) == "PO-2030-001"

    def test_duplicate_number(self, db, make_order):
        make_order(po_number="PO-X")
        with pytest.raises(DuplicateNumber):
            make_order(po_number="PO-X")


@pytest.mark.integration
class TestCreate:

    def test_totals_and_defaults(self, db, make_order):
        order = make_order(items=[
            {"part_no": "A", "quantity": "2", "unit_price": "7.5"},
            {"part_no": "B", "quantity": "1", "unit_price": "3", "total_price": "2.5"},
            {"part_no": "  ", "quantity": "9", "unit_price": "9"},
        ])
        assert order.status == PurchaseOrderStatus.APPROVED
        assert len(order.items) == 2
        assert order.items[0].total_price == Decimal("15")
        assert order.total_amount == Decimal("17.5")

    @pytest.mark.parametrize("legacy,expected", [
        ("pending", PurchaseOrderStatus.APPROVED),
        ("draft", PurchaseOrderStatus.APPROVED),
        ("completed", PurchaseOrderStatus.DELIVERED_COMPLETED),
    ])
    def test_legacy_status_is_normalized(self, db, make_order, legacy, expected):
        assert make_order(status=legacy).status == expected

    def test_unknown_status_rejected(self, db, make_order):
        with pytest.raises(InvalidStatus):
            make_order(status="shipped")


@pytest.mark.integration
class TestUpdate:

    def test_status_must_be_a_current_value(self, db, make_order):
        order = make_order()
        with pytest.raises(InvalidStatus):
            crud_po.update_purchase_order(db, order.id, PurchaseOrderUpdate(status="draft"), "tester")

        updated = crud_po.update_purchase_order(db, order.id, PurchaseOrderUpdate(status="partially_delivered"), "tester")
        assert updated.status == PurchaseOrderStatus.PARTIALLY_DELIVERED

    def test_penalty_applies_to_every_item_and_reconciles(self, db, make_order, post_supplier_invoice):
        order = make_order(items=[
            {"part_no": "P-100", "material_no": "M-1", "quantity": "100", "unit_price": "10"},
            {"part_no": "P-200", "quantity": "5", "unit_price": "2"},
        ])
        post_supplier_invoice("SUP-1", [{"part_no": "P-100", "material_no": "M-1", "quantity": "50", "supplier_unit_price": "10"}])

        updated = crud_po.update_purchase_order(db, order.id, PurchaseOrderUpdate(penalty_percentage=Decimal("2")), "tester")

        assert [item.penalty_percentage for item in updated.items] == [Decimal("2"), Decimal("2")]
        assert updated.items[0].penalty_amount == Decimal("10")
        assert updated.items[1].penalty_amount is None

    def test_update_is_audited(self, db, make_order):
        order = make_order()
        crud_po.update_purchase_order(db, order.id, PurchaseOrderUpdate(notes="rush"), "alice")

        logs = get_audit_logs(db, "purchase_orders", order.id)
        assert logs[-1].action == "UPDATE"
        assert logs[-1].changed_by == "alice"
        assert logs[-1].new_values["notes"] == "rush"

    def test_missing_order(self, db):
        assert crud_po.update_purchase_order(db, 404, PurchaseOrderUpdate(notes="x"), "tester") is None


@pytest.mark.integration
class TestReplaceItems:

    def test_items_replaced_and_reconciled(self, db, make_order, post_supplier_invoice):
        order = make_order()
        post_supplier_invoice("SUP-1", [{"part_no": "P-300", "quantity": "4", "supplier_unit_price": "1"}])

        items = [
            PurchaseOrderItemCreateRequest(part_no="P-300", quantity=Decimal("4"), unit_price=Decimal("1")),
            PurchaseOrderItemCreateRequest(part_no="", quantity=Decimal("1"), unit_price=Decimal("1")),
        ]
        updated = crud_po.replace_purchase_order_items(db, order.id, items, "tester")

        assert [item.part_no for item in updated.items] == ["P-300"]
        assert updated.total_amount == Decimal("4")
        assert updated.items[0].delivered_quantity == Decimal("4")
        assert updated.status == PurchaseOrderStatus.DELIVERED_COMPLETED


@pytest.mark.integration
class TestLinkage:

    def test_link_and_unlink(self, db, make_order):
        customer = make_order(po_number="CPO-1", order_type=OrderType.CUSTOMER)
        supplier = make_order(po_number="SPO-1")

        linked = crud_po.link_supplier_po(db, supplier.id, customer.id, "tester")
        assert linked.linked_customer_po_id == customer.id

        unlinked = crud_po.link_supplier_po(db, supplier.id, None, "tester")
        assert unlinked.linked_customer_po_id is None

    def test_link_on_create(self, db, make_order):
        customer = make_order(po_number="CPO-1", order_type=OrderType.CUSTOMER)
        supplier = make_order(po_number="SPO-1", linked_customer_po_id=customer.id)
        assert supplier.linked_customer_po_id == customer.id

    def test_only_supplier_to_customer(self, db, make_order):
        customer = make_order(po_number="CPO-1", order_type=OrderType.CUSTOMER)
        other_customer = make_order(po_number="CPO-2", order_type=OrderType.CUSTOMER)
        supplier = make_order(po_number="SPO-1")
        other_supplier = make_order(po_number="SPO-2")

        with pytest.raises(InvalidLinkage):
            crud_po.link_supplier_po(db, other_customer.id, customer.id, "tester")
        with pytest.raises(InvalidLinkage):
            crud_po.link_supplier_po(db, supplier.id, other_supplier.id, "tester")
        with pytest.raises(InvalidLinkage):
            crud_po.link_supplier_po(db, supplier.id, 12345, "tester")

    def test_customer_order_takes_one_supplier_order(self, db, make_order):
        customer = make_order(po_number="CPO-1", order_type=OrderType.CUSTOMER)
        first = make_order(po_number="SPO-1")
        second = make_order(po_number="SPO-2")

        crud_po.link_supplier_po(db, first.id, customer.id, "tester")
        with pytest.raises(InvalidLinkage):
            crud_po.link_supplier_po(db, second.id, customer.id, "tester")
        # Re-linking the same pair is fine
        assert crud_po.link_supplier_po(db, first.id, customer.id, "tester").linked_customer_po_id == customer.id

    def test_deleting_customer_order_clears_link(self, db, make_order):
        customer = make_order(po_number="CPO-1", order_type=OrderType.CUSTOMER)
        supplier = make_order(po_number="SPO-1", linked_customer_po_id=customer.id)

        assert crud_po.delete_purchase_order(db, customer.id, "tester")
        assert crud_po.get_purchase_order(db, supplier.id).linked_customer_po_id is None
        assert crud_po.get_purchase_order(db, customer.id) is None


@pytest.mark.integration
def test_status_edit_yields_to_recorded_deliveries(db, make_order, post_supplier_invoice):
    order = make_order()
    post_supplier_invoice("INV-1", [{"part_no": "P-100", "material_no": "M-1", "quantity": "100"}])

    updated = crud_po.update_purchase_order(db, order.id, PurchaseOrderUpdate(status="approved"), "tester")

    assert updated.status == PurchaseOrderStatus.DELIVERED_COMPLETED

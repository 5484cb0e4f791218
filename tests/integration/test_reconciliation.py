"""
Integration tests for delivered rollup and status reconciliation.
"""
from decimal import Decimal

import pytest

from crud import reconciliation
from crud.app_config import PENALTY_AMOUNT_ENABLED, RECONCILE_LOCK_ORDERS, set_config
from crud.inventory import get_inventory_records
from crud.purchase_tax_invoices import delete_purchase_tax_invoice, get_purchase_tax_invoice
from crud.purchase_orders import get_purchase_order
from models.purchase_orders import OrderType, PurchaseOrderStatus
from models.purchase_tax_invoices import PurchaseTaxInvoice

STATUS_ORDER = [
    PurchaseOrderStatus.APPROVED,
    PurchaseOrderStatus.PARTIALLY_DELIVERED,
    PurchaseOrderStatus.DELIVERED_COMPLETED,
]


def supplier_line(quantity, price="10", part_no="P-100", material_no="M-1"):
    return {"part_no": part_no, "material_no": material_no, "quantity": quantity, "supplier_unit_price": price}


@pytest.mark.integration
class TestDeliveryScenarios:

    def test_no_invoices(self, db, make_order):
        order = make_order()
        item = order.items[0]

        assert order.status == PurchaseOrderStatus.APPROVED
        assert item.delivered_quantity == 0
        assert item.balance_quantity_undelivered == Decimal("100")

    def test_partial_then_complete_then_delete(self, db, make_order, post_supplier_invoice):
        order = make_order()

        invoice_b = post_supplier_invoice("SUP-B", [supplier_line("40")])
        order = get_purchase_order(db, order.id)
        assert order.items[0].delivered_quantity == Decimal("40")
        assert order.items[0].balance_quantity_undelivered == Decimal("60")
        assert order.status == PurchaseOrderStatus.PARTIALLY_DELIVERED

        post_supplier_invoice("SUP-C", [supplier_line("60")])
        order = get_purchase_order(db, order.id)
        assert order.items[0].delivered_quantity == Decimal("100")
        assert order.items[0].balance_quantity_undelivered == Decimal("0")
        assert order.items[0].invoice_no == "SUP-B, SUP-C"
        assert order.status == PurchaseOrderStatus.DELIVERED_COMPLETED

        assert delete_purchase_tax_invoice(db, invoice_b.id, user_id="tester")
        order = get_purchase_order(db, order.id)
        assert order.items[0].delivered_quantity == Decimal("60")
        assert order.items[0].invoice_no == "SUP-C"
        assert order.status == PurchaseOrderStatus.PARTIALLY_DELIVERED

    def test_lines_for_other_material_or_order_do_not_count(self, db, make_order, post_supplier_invoice):
        order = make_order()
        post_supplier_invoice("SUP-1", [supplier_line("10", material_no="M-2")])
        post_supplier_invoice("SUP-2", [supplier_line("10")], po_number="PO-OTHER")

        order = get_purchase_order(db, order.id)
        assert order.items[0].delivered_quantity == 0
        assert order.status == PurchaseOrderStatus.APPROVED

    def test_customer_orders_are_fed_by_sales_invoices_only(self, db, make_order, post_supplier_invoice, post_sales_invoice):
        order = make_order(po_number="CPO-1", order_type=OrderType.CUSTOMER,
                           items=[{"part_no": "P-100", "quantity": "5", "unit_price": "20"}])
        post_supplier_invoice("SUP-1", [supplier_line("10", material_no=None)], po_number="CPO-1")
        assert get_purchase_order(db, order.id).items[0].delivered_quantity == 0

        post_sales_invoice([{"part_no": "P-100", "quantity": "5", "unit_price": "20"}], customer_po_number="CPO-1")
        order = get_purchase_order(db, order.id)
        assert order.items[0].delivered_quantity == Decimal("5")
        assert order.items[0].delivered_unit_price == Decimal("20")
        assert order.status == PurchaseOrderStatus.DELIVERED_COMPLETED

    def test_invoice_posted_before_order_exists(self, db, make_order, post_supplier_invoice):
        post_supplier_invoice("SUP-EARLY", [supplier_line("25")])
        order = make_order()
        assert order.items[0].delivered_quantity == Decimal("25")
        assert order.status == PurchaseOrderStatus.PARTIALLY_DELIVERED


@pytest.mark.integration
class TestReconcileProperties:

    def test_idempotent(self, db, make_order, post_supplier_invoice):
        order = make_order()
        post_supplier_invoice("SUP-1", [supplier_line("30")])

        first = reconciliation.reconcile_purchase_order(db, order.id)
        snapshot = (first.status, first.items[0].delivered_quantity, first.items[0].balance_quantity_undelivered)
        second = reconciliation.reconcile_purchase_order(db, order.id)

        assert (second.status, second.items[0].delivered_quantity, second.items[0].balance_quantity_undelivered) == snapshot

    def test_delivery_never_regresses_while_invoices_only_grow(self, db, make_order, post_supplier_invoice):
        order = make_order()
        seen = []
        for n, qty in enumerate(["10", "20", "30", "40"]):
            post_supplier_invoice(f"SUP-{n}", [supplier_line(qty)])
            seen.append(get_purchase_order(db, order.id).items[0].delivered_quantity)
        assert seen == sorted(seen)

    def test_status_never_regresses_while_invoices_only_grow(self, db, make_order, post_supplier_invoice):
        order = make_order(items=[
            {"part_no": "P-100", "material_no": "M-1", "quantity": "100", "unit_price": "10"},
            {"part_no": "P-200", "quantity": "10", "unit_price": "3"},
        ])
        statuses = [order.status]
        postings = [
            [supplier_line("30")],
            [supplier_line("5", price="3", part_no="P-200", material_no=None)],
            [supplier_line("70")],
            [supplier_line("5", price="3", part_no="P-200", material_no=None)],
        ]
        for n, lines in enumerate(postings):
            post_supplier_invoice(f"SUP-{n}", lines)
            statuses.append(get_purchase_order(db, order.id).status)

        ranks = [STATUS_ORDER.index(status) for status in statuses]
        assert ranks == sorted(ranks)
        assert statuses[0] == PurchaseOrderStatus.APPROVED
        assert statuses[-1] == PurchaseOrderStatus.DELIVERED_COMPLETED

    def test_removing_every_invoice_keeps_completed_status(self, db, make_order, post_supplier_invoice):
        order = make_order()
        first = post_supplier_invoice("SUP-1", [supplier_line("40")])
        second = post_supplier_invoice("SUP-2", [supplier_line("60")])
        assert get_purchase_order(db, order.id).status == PurchaseOrderStatus.DELIVERED_COMPLETED

        delete_purchase_tax_invoice(db, first.id, user_id="tester")
        delete_purchase_tax_invoice(db, second.id, user_id="tester")

        order = get_purchase_order(db, order.id)
        assert order.items[0].delivered_quantity == 0
        # Nothing delivered leaves the stored status as it was
        assert order.status == PurchaseOrderStatus.DELIVERED_COMPLETED

    def test_delivery_invariant(self, db, make_order, post_supplier_invoice):
        order = make_order(items=[
            {"part_no": "P-100", "material_no": "M-1", "quantity": "100", "unit_price": "10"},
            {"part_no": "P-200", "quantity": "8", "unit_price": "3"},
        ])
        post_supplier_invoice("SUP-1", [supplier_line("45"), supplier_line("3", price="3", part_no="P-200", material_no=None)])

        for item in get_purchase_order(db, order.id).items:
            assert item.balance_quantity_undelivered == item.quantity - item.delivered_quantity

    def test_missing_order_returns_none(self, db):
        assert reconciliation.reconcile_purchase_order(db, 999) is None

    def test_unknown_po_number_is_a_no_op(self, db):
        assert reconciliation.reconcile_po_number(db, "PO-NOPE", OrderType.SUPPLIER) == []
        assert reconciliation.reconcile_po_number(db, None, OrderType.SUPPLIER) == []

    def test_failure_is_logged_and_swallowed(self, db, make_order, monkeypatch, caplog):
        order = make_order()

        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(reconciliation, "rollup_items", explode)
        assert reconciliation.reconcile_purchase_order(db, order.id) is None
        assert "boom" in caplog.text
        # Session is still usable afterwards
        assert get_purchase_order(db, order.id).id == order.id

    def test_failed_run_leaves_invoice_write_committed(self, db, make_order, post_supplier_invoice, monkeypatch, caplog):
        order = make_order()

        def explode(*args, **kwargs):
            raise RuntimeError("rollup unavailable")

        monkeypatch.setattr(reconciliation, "rollup_items", explode)
        invoice = post_supplier_invoice("SUP-1", [supplier_line("40")])

        assert "rollup unavailable" in caplog.text
        assert get_purchase_tax_invoice(db, invoice.id).invoice_number == "SUP-1"
        assert db.query(PurchaseTaxInvoice).count() == 1
        records = get_inventory_records(db, part_no="P-100")
        assert [r.quantity for r in records] == [Decimal("40")]
        # Derived figures are stale until the next run
        assert get_purchase_order(db, order.id).items[0].delivered_quantity == 0

        monkeypatch.undo()
        reconciled = reconciliation.reconcile_purchase_order(db, order.id)
        assert reconciled.items[0].delivered_quantity == Decimal("40")
        assert reconciled.status == PurchaseOrderStatus.PARTIALLY_DELIVERED

    def test_lock_hook_enabled(self, db, make_order, post_supplier_invoice):
        set_config(db, RECONCILE_LOCK_ORDERS, "true", "tester")
        order = make_order()
        post_supplier_invoice("SUP-1", [supplier_line("100")])
        assert get_purchase_order(db, order.id).status == PurchaseOrderStatus.DELIVERED_COMPLETED


@pytest.mark.integration
class TestPenalty:

    def test_penalty_amount_from_percentage(self, db, make_order, post_supplier_invoice):
        order = make_order(items=[{"part_no": "P-100", "material_no": "M-1", "quantity": "100",
                                   "unit_price": "10", "penalty_percentage": "5"}])
        post_supplier_invoice("SUP-1", [supplier_line("40")])

        item = get_purchase_order(db, order.id).items[0]
        assert item.delivered_total_price == Decimal("400")
        assert item.penalty_amount == Decimal("20")

    def test_penalty_disabled_by_setting(self, db, make_order, post_supplier_invoice):
        set_config(db, PENALTY_AMOUNT_ENABLED, "false", "tester")
        order = make_order(items=[{"part_no": "P-100", "material_no": "M-1", "quantity": "100",
                                   "unit_price": "10", "penalty_percentage": "5"}])
        post_supplier_invoice("SUP-1", [supplier_line("40")])

        assert get_purchase_order(db, order.id).items[0].penalty_amount is None

    def test_penalty_disabled_by_environment(self, db, make_order, post_supplier_invoice, monkeypatch):
        monkeypatch.setenv(PENALTY_AMOUNT_ENABLED, "0")
        order = make_order(items=[{"part_no": "P-100", "material_no": "M-1", "quantity": "100",
                                   "unit_price": "10", "penalty_percentage": "5"}])
        post_supplier_invoice("SUP-1", [supplier_line("40")])

        assert get_purchase_order(db, order.id).items[0].penalty_amount is None

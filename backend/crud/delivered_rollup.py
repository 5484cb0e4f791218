"""
Delivered rollup for purchase order items.

An item's delivered figures are always recomputed from the full current set
of invoice lines that reference it, so deleting or editing an invoice needs no
special handling: the next run simply sees fewer (or different) lines.

Supplier orders are fed by purchase tax invoices, customer orders by sales
tax invoices. A line contributes to an item when the invoice header's PO
number equals the order's po_number and the line's (part_no, material_no)
equals the item's.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from models.purchase_order_items import PurchaseOrderItem
from models.purchase_orders import OrderType
from models.purchase_tax_invoice_items import PurchaseTaxInvoiceItem
from models.purchase_tax_invoices import PurchaseTaxInvoice
from models.sales_tax_invoice_items import SalesTaxInvoiceItem
from models.sales_tax_invoices import SalesTaxInvoice
from utils.matching import DeliveryKey, canonical_price, delivery_key

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass
class InvoiceLine:
    invoice_id: int
    line_id: int
    invoice_number: Optional[str]
    po_number: Optional[str]
    part_no: Optional[str]
    material_no: Optional[str]
    quantity: Optional[Decimal]
    unit_price: Optional[Decimal]

    @property
    def key(self) -> DeliveryKey:
        return delivery_key(self.po_number, self.part_no, self.material_no)


@dataclass
class DeliveredRollup:
    delivered_quantity: Decimal
    delivered_unit_price: Optional[Decimal]
    delivered_total_price: Decimal
    balance_quantity_undelivered: Decimal
    penalty_amount: Optional[Decimal]
    invoice_no: Optional[str]


def compute_rollup(
    quantity,
    penalty_percentage,
    lines: Iterable[InvoiceLine],
    penalty_enabled: bool = True,
) -> DeliveredRollup:
    """Pure calculation over lines already filtered to one item, in (invoice id, line id) order."""
    delivered_quantity = ZERO
    delivered_unit_price = None
    invoice_numbers: List[str] = []

    for line in lines:
        delivered_quantity += canonical_price(line.quantity) or ZERO
        price = canonical_price(line.unit_price)
        if delivered_unit_price is None and price is not None:
            delivered_unit_price = price
        if line.invoice_number and line.invoice_number not in invoice_numbers:
            invoice_numbers.append(line.invoice_number)

    delivered_total_price = ZERO
    if delivered_unit_price is not None:
        delivered_total_price = delivered_quantity * delivered_unit_price

    penalty_amount = None
    pct = canonical_price(penalty_percentage)
    if penalty_enabled and pct is not None and delivered_total_price != ZERO:
        penalty_amount = pct * delivered_total_price / HUNDRED

    return DeliveredRollup(
        delivered_quantity=delivered_quantity,
        delivered_unit_price=delivered_unit_price,
        delivered_total_price=delivered_total_price,
        balance_quantity_undelivered=(canonical_price(quantity) or ZERO) - delivered_quantity,
        penalty_amount=penalty_amount,
        invoice_no=", ".join(invoice_numbers) or None,
    )


def fetch_invoice_lines(db: Session, po_number: str, order_type: OrderType) -> List[InvoiceLine]:
    """Every invoice line of the invoice type that feeds order_type and references po_number."""
    if order_type == OrderType.SUPPLIER:
        header, line, header_po, price = (
            PurchaseTaxInvoice, PurchaseTaxInvoiceItem,
            PurchaseTaxInvoice.po_number, PurchaseTaxInvoiceItem.supplier_unit_price,
        )
    else:
        header, line, header_po, price = (
            SalesTaxInvoice, SalesTaxInvoiceItem,
            SalesTaxInvoice.customer_po_number, SalesTaxInvoiceItem.unit_price,
        )

    rows = (
        db.query(
            header.id, line.id, header.invoice_number, header_po,
            line.part_no, line.material_no, line.quantity, price,
        )
        .join(line, line.invoice_id == header.id)
        .filter(header_po == po_number)
        .order_by(header.id.asc(), line.id.asc())
        .all()
    )
    return [InvoiceLine(*row) for row in rows]


def group_by_key(lines: Iterable[InvoiceLine]) -> Dict[DeliveryKey, List[InvoiceLine]]:
    grouped: Dict[DeliveryKey, List[InvoiceLine]] = defaultdict(list)
    for line in lines:
        grouped[line.key].append(line)
    return grouped


def apply_rollup(item: PurchaseOrderItem, rollup: DeliveredRollup):
    item.delivered_quantity = rollup.delivered_quantity
    item.delivered_unit_price = rollup.delivered_unit_price
    item.delivered_total_price = rollup.delivered_total_price
    item.balance_quantity_undelivered = rollup.balance_quantity_undelivered
    item.penalty_amount = rollup.penalty_amount
    item.invoice_no = rollup.invoice_no


def rollup_items(
    db: Session,
    po_number: str,
    order_type: OrderType,
    items: Iterable[PurchaseOrderItem],
    penalty_enabled: bool = True,
) -> List[DeliveredRollup]:
    """Recompute and write the derived fields of every item. Writes item rows only."""
    grouped = group_by_key(fetch_invoice_lines(db, po_number, order_type))
    results = []
    for item in items:
        item_lines = grouped.get(delivery_key(po_number, item.part_no, item.material_no), [])
        rollup = compute_rollup(item.quantity, item.penalty_percentage, item_lines, penalty_enabled)
        apply_rollup(item, rollup)
        results.append(rollup)
        logger.debug(
            f"Item {item.id} (part {item.part_no}, material {item.material_no or '-'}): "
            f"{len(item_lines)} line(s), delivered {rollup.delivered_quantity}, "
            f"balance {rollup.balance_quantity_undelivered}"
        )
    return results

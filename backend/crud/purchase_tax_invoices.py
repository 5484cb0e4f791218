import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from crud import inventory as inventory_ledger
from crud.app_config import VAT_RATE, get_decimal_setting
from crud.audit_log import create_audit_log
from crud.reconciliation import reconcile_po_number
from exceptions import DuplicateNumber
from models.purchase_orders import OrderType
from models.purchase_tax_invoice_items import PurchaseTaxInvoiceItem
from models.purchase_tax_invoices import PurchaseTaxInvoice
from schemas.audit_log import AuditLogCreate
from schemas.purchase_tax_invoices import (
    PurchaseTaxInvoiceCreate,
    PurchaseTaxInvoiceItemCreate,
    PurchaseTaxInvoiceUpdate,
)
from utils import local_now, sqlalchemy_to_dict
from utils.invoice_totals import compute_invoice_totals, line_total
from utils.matching import canonical_text, inventory_key

logger = logging.getLogger(__name__)


def _snapshot(db_invoice: PurchaseTaxInvoice) -> dict:
    values = sqlalchemy_to_dict(db_invoice)
    values["items"] = [sqlalchemy_to_dict(item) for item in db_invoice.items]
    return values


def _build_items(items: List[PurchaseTaxInvoiceItemCreate]) -> List[PurchaseTaxInvoiceItem]:
    return [
        PurchaseTaxInvoiceItem(**item.model_dump(), total_price=line_total(item.quantity, item.supplier_unit_price))
        for item in items
    ]


def _apply_totals(db: Session, db_invoice: PurchaseTaxInvoice):
    totals = compute_invoice_totals(
        [item.total_price for item in db_invoice.items],
        db_invoice.claim_percentage,
        get_decimal_setting(db, VAT_RATE),
    )
    db_invoice.subtotal = totals.subtotal
    db_invoice.claim_amount = totals.claim_amount
    db_invoice.vat_amount = totals.vat_amount
    db_invoice.gross_total = totals.gross_total


def _ensure_unique_number(db: Session, invoice_number: str, exclude_id: Optional[int] = None):
    query = db.query(PurchaseTaxInvoice.id).filter(PurchaseTaxInvoice.invoice_number == invoice_number)
    if exclude_id is not None:
        query = query.filter(PurchaseTaxInvoice.id != exclude_id)
    if query.first():
        raise DuplicateNumber(f"Supplier invoice number {invoice_number} already exists")


def get_purchase_tax_invoice(db: Session, invoice_id: int):
    return db.query(PurchaseTaxInvoice).options(selectinload(PurchaseTaxInvoice.items)).filter(
        PurchaseTaxInvoice.id == invoice_id
    ).first()


def get_purchase_tax_invoices(db: Session, skip: int = 0, limit: int = 100, po_number: Optional[str] = None):
    query = db.query(PurchaseTaxInvoice).options(selectinload(PurchaseTaxInvoice.items))
    if po_number:
        query = query.filter(PurchaseTaxInvoice.po_number == po_number)
    return query.order_by(PurchaseTaxInvoice.id.desc()).offset(skip).limit(limit).all()


def create_purchase_tax_invoice(db: Session, invoice: PurchaseTaxInvoiceCreate, user_id: str) -> PurchaseTaxInvoice:
    """Save the invoice and receive every line into stock in one transaction, then reconcile its PO."""
    invoice_number = invoice.invoice_number.strip()
    _ensure_unique_number(db, invoice_number)

    try:
        db_invoice = PurchaseTaxInvoice(
            **invoice.model_dump(exclude={"items", "invoice_number"}),
            invoice_number=invoice_number,
            created_by=user_id,
            updated_by=user_id,
        )
        db_invoice.items = _build_items(invoice.items)
        _apply_totals(db, db_invoice)
        db.add(db_invoice)
        db.flush()

        for item in db_invoice.items:
            # A line without its own project number belongs to the invoice's project
            project_no = canonical_text(item.project_no) or invoice.project_number
            inventory_ledger.receive(
                db,
                inventory_key(project_no, item.part_no, item.description, item.supplier_unit_price),
                item.quantity,
                received_fields={
                    "serial_no": item.serial_no,
                    "material_no": item.material_no,
                    "uom": item.uom,
                    "date_po": db_invoice.invoice_date,
                },
                changed_by=user_id,
                note=f"Received on supplier invoice {invoice_number}",
            )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to create supplier invoice {invoice_number}")
        raise

    invoice_id = db_invoice.id
    logger.info(f"Supplier invoice {invoice_number} (ID: {invoice_id}) created by user {user_id}")
    reconcile_po_number(db, invoice.po_number, OrderType.SUPPLIER)
    return get_purchase_tax_invoice(db, invoice_id)


def update_purchase_tax_invoice(db: Session, invoice_id: int, invoice: PurchaseTaxInvoiceUpdate, user_id: str):
    """Update the header and optionally replace the lines.

    Stock is not adjusted: receipts already posted stay in inventory.
    """
    db_invoice = get_purchase_tax_invoice(db, invoice_id)
    if db_invoice is None:
        return None

    old_values = _snapshot(db_invoice)
    old_po_number = db_invoice.po_number
    update_data = invoice.model_dump(exclude_unset=True, exclude={"items"})

    if update_data.get("invoice_number"):
        update_data["invoice_number"] = update_data["invoice_number"].strip()
        _ensure_unique_number(db, update_data["invoice_number"], exclude_id=invoice_id)

    try:
        for key, value in update_data.items():
            setattr(db_invoice, key, value)
        if invoice.items is not None:
            db_invoice.items = _build_items(invoice.items)
        _apply_totals(db, db_invoice)
        db_invoice.updated_at = local_now()
        db_invoice.updated_by = user_id
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to update supplier invoice {invoice_id}")
        raise
    db.refresh(db_invoice)

    create_audit_log(db, AuditLogCreate(
        table_name='purchase_tax_invoices',
        record_id=invoice_id,
        changed_by=user_id,
        action='UPDATE',
        old_values=old_values,
        new_values=_snapshot(db_invoice),
    ))
    logger.info(f"Supplier invoice (ID: {invoice_id}) updated by user {user_id}")

    new_po_number = db_invoice.po_number
    reconcile_po_number(db, new_po_number, OrderType.SUPPLIER)
    if old_po_number != new_po_number:
        reconcile_po_number(db, old_po_number, OrderType.SUPPLIER)
    return get_purchase_tax_invoice(db, invoice_id)


def delete_purchase_tax_invoice(db: Session, invoice_id: int, user_id: str) -> bool:
    """Delete the invoice; the order it delivered against is re-derived from the remaining invoices."""
    db_invoice = get_purchase_tax_invoice(db, invoice_id)
    if db_invoice is None:
        return False

    old_values = _snapshot(db_invoice)
    po_number = db_invoice.po_number
    try:
        db.delete(db_invoice)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to delete supplier invoice {invoice_id}")
        raise

    create_audit_log(db, AuditLogCreate(
        table_name='purchase_tax_invoices',
        record_id=invoice_id,
        changed_by=user_id,
        action='DELETE',
        old_values=old_values,
        new_values=None,
    ))
    logger.info(f"Supplier invoice (ID: {invoice_id}) deleted by user {user_id}")

    reconcile_po_number(db, po_number, OrderType.SUPPLIER)
    return True

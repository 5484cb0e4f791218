import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from crud import inventory as inventory_ledger
from crud.app_config import VAT_RATE, get_decimal_setting
from crud.audit_log import create_audit_log
from crud.reconciliation import reconcile_po_number
from exceptions import ClaimLimitExceeded, DuplicateNumber
from models.purchase_orders import OrderType
from models.sales_tax_invoice_items import SalesTaxInvoiceItem
from models.sales_tax_invoices import SalesTaxInvoice
from schemas.audit_log import AuditLogCreate
from schemas.sales_tax_invoices import SalesTaxInvoiceCreate, SalesTaxInvoiceItemCreate, SalesTaxInvoiceUpdate
from utils import local_now, sqlalchemy_to_dict
from utils.formatting import amount_in_words
from utils.invoice_totals import HUNDRED, compute_invoice_totals, line_total
from utils.matching import canonical_price, canonical_text, sale_key
from utils.numbering import next_document_number

logger = logging.getLogger(__name__)


def _snapshot(db_invoice: SalesTaxInvoice) -> dict:
    values = sqlalchemy_to_dict(db_invoice)
    values["items"] = [sqlalchemy_to_dict(item) for item in db_invoice.items]
    return values


def _apply_totals(db: Session, db_invoice: SalesTaxInvoice):
    totals = compute_invoice_totals(
        [item.total_amount for item in db_invoice.items],
        db_invoice.claim_percentage,
        get_decimal_setting(db, VAT_RATE),
    )
    db_invoice.subtotal = totals.subtotal
    db_invoice.claim_amount = totals.claim_amount
    db_invoice.vat_amount = totals.vat_amount
    db_invoice.gross_total = totals.gross_total
    db_invoice.amount_in_words = amount_in_words(totals.gross_total)


def _ensure_unique_number(db: Session, invoice_number: str, exclude_id: Optional[int] = None):
    query = db.query(SalesTaxInvoice.id).filter(SalesTaxInvoice.invoice_number == invoice_number)
    if exclude_id is not None:
        query = query.filter(SalesTaxInvoice.id != exclude_id)
    if query.first():
        raise DuplicateNumber(f"Sales invoice number {invoice_number} already exists")


def _consume_lines(db: Session, db_invoice: SalesTaxInvoice, items: List[SalesTaxInvoiceItemCreate], user_id: str):
    """Add the lines to the invoice and take each one out of stock."""
    for item in items:
        db_item = SalesTaxInvoiceItem(**item.model_dump(), total_amount=line_total(item.quantity, item.unit_price))
        record = inventory_ledger.consume(
            db,
            sale_key(item.project_no, item.part_no, item.description),
            item.quantity,
            changed_by=user_id,
            note=f"Sold on sales invoice {db_invoice.invoice_number}",
        )
        db_item.inventory_id = record.id
        db_invoice.items.append(db_item)
    db.flush()


def _release_lines(db: Session, db_invoice: SalesTaxInvoice, user_id: str, reason: str):
    for item in db_invoice.items:
        inventory_ledger.release(
            db,
            sale_key(item.project_no, item.part_no, item.description),
            item.quantity,
            inventory_id=item.inventory_id,
            changed_by=user_id,
            note=f"{reason} sales invoice {db_invoice.invoice_number}",
        )


def claimed_percentage(db: Session, customer_po_number: str, exclude_id: Optional[int] = None) -> Decimal:
    query = db.query(func.coalesce(func.sum(SalesTaxInvoice.claim_percentage), 0)).filter(
        SalesTaxInvoice.customer_po_number == customer_po_number
    )
    if exclude_id is not None:
        query = query.filter(SalesTaxInvoice.id != exclude_id)
    return canonical_price(query.scalar()) or Decimal("0")


def check_claim_limit(db: Session, customer_po_number: Optional[str], claim_percentage, exclude_id: Optional[int] = None):
    """Claims against one customer PO may not add up to more than 100%."""
    if not canonical_text(customer_po_number):
        return
    requested = canonical_price(claim_percentage)
    if requested is None:
        requested = HUNDRED
    already_claimed = claimed_percentage(db, customer_po_number, exclude_id)
    if already_claimed + requested > HUNDRED:
        logger.warning(
            f"Claim rejected for customer PO {customer_po_number}: "
            f"{already_claimed}% already claimed, {requested}% requested"
        )
        raise ClaimLimitExceeded(customer_po_number, already_claimed, requested)


def next_invoice_number(db: Session, year: Optional[int] = None) -> str:
    return next_document_number(db, SalesTaxInvoice.invoice_number, "AT-INV", year)


def get_sales_tax_invoice(db: Session, invoice_id: int):
    return db.query(SalesTaxInvoice).options(selectinload(SalesTaxInvoice.items)).filter(
        SalesTaxInvoice.id == invoice_id
    ).first()


def get_sales_tax_invoices(db: Session, skip: int = 0, limit: int = 100, customer_po_number: Optional[str] = None):
    query = db.query(SalesTaxInvoice).options(selectinload(SalesTaxInvoice.items))
    if customer_po_number:
        query = query.filter(SalesTaxInvoice.customer_po_number == customer_po_number)
    return query.order_by(SalesTaxInvoice.id.desc()).offset(skip).limit(limit).all()


def create_sales_tax_invoice(db: Session, invoice: SalesTaxInvoiceCreate, user_id: str) -> SalesTaxInvoice:
    """Validate claim and stock for every line, then save the invoice and consume stock in one transaction."""
    check_claim_limit(db, invoice.customer_po_number, invoice.claim_percentage)
    # Nothing is written unless every line can be satisfied
    inventory_ledger.validate_sale_lines(db, invoice.items)

    invoice_number = canonical_text(invoice.invoice_number).strip() or next_invoice_number(db)
    _ensure_unique_number(db, invoice_number)

    try:
        db_invoice = SalesTaxInvoice(
            **invoice.model_dump(exclude={"items", "invoice_number"}),
            invoice_number=invoice_number,
            created_by=user_id,
            updated_by=user_id,
        )
        db.add(db_invoice)
        db.flush()
        _consume_lines(db, db_invoice, invoice.items, user_id)
        _apply_totals(db, db_invoice)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to create sales invoice {invoice_number}")
        raise

    invoice_id = db_invoice.id
    logger.info(f"Sales invoice {invoice_number} (ID: {invoice_id}) created by user {user_id}")
    reconcile_po_number(db, invoice.customer_po_number, OrderType.CUSTOMER)
    return get_sales_tax_invoice(db, invoice_id)


def update_sales_tax_invoice(db: Session, invoice_id: int, invoice: SalesTaxInvoiceUpdate, user_id: str):
    """Update the header and optionally replace the lines.

    Replacing lines gives the old lines' stock back before the new lines are
    validated and consumed, all in one transaction.
    """
    db_invoice = get_sales_tax_invoice(db, invoice_id)
    if db_invoice is None:
        return None

    old_values = _snapshot(db_invoice)
    old_po_number = db_invoice.customer_po_number
    update_data = invoice.model_dump(exclude_unset=True, exclude={"items"})

    if "claim_percentage" in update_data or "customer_po_number" in update_data:
        check_claim_limit(
            db,
            update_data.get("customer_po_number", db_invoice.customer_po_number),
            update_data.get("claim_percentage", db_invoice.claim_percentage),
            exclude_id=invoice_id,
        )

    try:
        for key, value in update_data.items():
            setattr(db_invoice, key, value)
        if invoice.items is not None:
            _release_lines(db, db_invoice, user_id, "Replaced lines of")
            db_invoice.items = []
            db.flush()
            inventory_ledger.validate_sale_lines(db, invoice.items)
            _consume_lines(db, db_invoice, invoice.items, user_id)
        _apply_totals(db, db_invoice)
        db_invoice.updated_at = local_now()
        db_invoice.updated_by = user_id
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to update sales invoice {invoice_id}")
        raise
    db.refresh(db_invoice)

    create_audit_log(db, AuditLogCreate(
        table_name='sales_tax_invoices',
        record_id=invoice_id,
        changed_by=user_id,
        action='UPDATE',
        old_values=old_values,
        new_values=_snapshot(db_invoice),
    ))
    logger.info(f"Sales invoice (ID: {invoice_id}) updated by user {user_id}")

    new_po_number = db_invoice.customer_po_number
    reconcile_po_number(db, new_po_number, OrderType.CUSTOMER)
    if old_po_number != new_po_number:
        reconcile_po_number(db, old_po_number, OrderType.CUSTOMER)
    return get_sales_tax_invoice(db, invoice_id)


def delete_sales_tax_invoice(db: Session, invoice_id: int, user_id: str) -> bool:
    """Delete the invoice, give its stock back and re-derive the customer order."""
    db_invoice = get_sales_tax_invoice(db, invoice_id)
    if db_invoice is None:
        return False

    old_values = _snapshot(db_invoice)
    po_number = db_invoice.customer_po_number
    try:
        _release_lines(db, db_invoice, user_id, "Deleted")
        db.delete(db_invoice)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to delete sales invoice {invoice_id}")
        raise

    create_audit_log(db, AuditLogCreate(
        table_name='sales_tax_invoices',
        record_id=invoice_id,
        changed_by=user_id,
        action='DELETE',
        old_values=old_values,
        new_values=None,
    ))
    logger.info(f"Sales invoice (ID: {invoice_id}) deleted by user {user_id}")

    reconcile_po_number(db, po_number, OrderType.CUSTOMER)
    return True

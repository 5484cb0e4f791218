from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from utils.actor import get_actor
from database import get_db
from crud import sales_tax_invoices as crud_invoices
from exceptions import ReconciliationError, http_status_for
from schemas.sales_tax_invoices import (
    SalesTaxInvoice as SalesTaxInvoiceSchema,
    SalesTaxInvoiceCreate,
    SalesTaxInvoiceUpdate,
)

router = APIRouter(prefix="/sales-tax-invoices", tags=["Sales Tax Invoices"])
logger = logging.getLogger("sales_tax_invoices")


@router.post("/", response_model=SalesTaxInvoiceSchema, status_code=status.HTTP_201_CREATED)
def create_sales_tax_invoice(
    invoice: SalesTaxInvoiceCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    """Record a customer invoice.

    Every line must be covered by a single inventory record; when any line is
    not, the response lists each failing line and nothing is saved.
    """
    if not invoice.items:
        raise HTTPException(status_code=400, detail="Sales invoice must contain at least one item.")
    try:
        return crud_invoices.create_sales_tax_invoice(db, invoice, user_id)
    except ReconciliationError as e:
        logger.warning(f"Sales invoice for customer PO {invoice.customer_po_number} rejected: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.to_dict())

@router.get("/", response_model=List[SalesTaxInvoiceSchema])
def read_sales_tax_invoices(
    skip: int = 0,
    limit: int = 100,
    customer_po_number: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return crud_invoices.get_sales_tax_invoices(db, skip=skip, limit=limit, customer_po_number=customer_po_number)

@router.get("/{invoice_id}", response_model=SalesTaxInvoiceSchema)
def read_sales_tax_invoice(invoice_id: int, db: Session = Depends(get_db)):
    db_invoice = crud_invoices.get_sales_tax_invoice(db, invoice_id)
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Sales invoice not found")
    return db_invoice

@router.put("/{invoice_id}", response_model=SalesTaxInvoiceSchema)
def update_sales_tax_invoice(
    invoice_id: int,
    invoice: SalesTaxInvoiceUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    if invoice.items is not None and not invoice.items:
        raise HTTPException(status_code=400, detail="Sales invoice must contain at least one item.")
    try:
        db_invoice = crud_invoices.update_sales_tax_invoice(db, invoice_id, invoice, user_id)
    except ReconciliationError as e:
        logger.warning(f"Update of sales invoice {invoice_id} rejected: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.to_dict())
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Sales invoice not found")
    return db_invoice

@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sales_tax_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    """Delete the invoice and return its quantities to stock."""
    if not crud_invoices.delete_sales_tax_invoice(db, invoice_id, user_id):
        raise HTTPException(status_code=404, detail="Sales invoice not found")
    return None

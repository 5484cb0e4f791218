from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from utils.actor import get_actor
from database import get_db
from crud import purchase_tax_invoices as crud_invoices
from exceptions import ReconciliationError, http_status_for
from schemas.purchase_tax_invoices import (
    PurchaseTaxInvoice as PurchaseTaxInvoiceSchema,
    PurchaseTaxInvoiceCreate,
    PurchaseTaxInvoiceUpdate,
)

router = APIRouter(prefix="/purchase-tax-invoices", tags=["Purchase Tax Invoices"])
logger = logging.getLogger("purchase_tax_invoices")


@router.post("/", response_model=PurchaseTaxInvoiceSchema, status_code=status.HTTP_201_CREATED)
def create_purchase_tax_invoice(
    invoice: PurchaseTaxInvoiceCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    """Record a supplier invoice. Every line is received into inventory and the supplier PO is reconciled."""
    if not invoice.items:
        raise HTTPException(status_code=400, detail="Supplier invoice must contain at least one item.")
    try:
        return crud_invoices.create_purchase_tax_invoice(db, invoice, user_id)
    except ReconciliationError as e:
        logger.warning(f"Supplier invoice {invoice.invoice_number} rejected: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.to_dict())

@router.get("/", response_model=List[PurchaseTaxInvoiceSchema])
def read_purchase_tax_invoices(
    skip: int = 0,
    limit: int = 100,
    po_number: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return crud_invoices.get_purchase_tax_invoices(db, skip=skip, limit=limit, po_number=po_number)

@router.get("/{invoice_id}", response_model=PurchaseTaxInvoiceSchema)
def read_purchase_tax_invoice(invoice_id: int, db: Session = Depends(get_db)):
    db_invoice = crud_invoices.get_purchase_tax_invoice(db, invoice_id)
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Supplier invoice not found")
    return db_invoice

@router.put("/{invoice_id}", response_model=PurchaseTaxInvoiceSchema)
def update_purchase_tax_invoice(
    invoice_id: int,
    invoice: PurchaseTaxInvoiceUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    if invoice.items is not None and not invoice.items:
        raise HTTPException(status_code=400, detail="Supplier invoice must contain at least one item.")
    try:
        db_invoice = crud_invoices.update_purchase_tax_invoice(db, invoice_id, invoice, user_id)
    except ReconciliationError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.to_dict())
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Supplier invoice not found")
    return db_invoice

@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase_tax_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    if not crud_invoices.delete_purchase_tax_invoice(db, invoice_id, user_id):
        raise HTTPException(status_code=404, detail="Supplier invoice not found")
    return None

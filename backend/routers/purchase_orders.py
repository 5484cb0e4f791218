# backend/routers/purchase_orders.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from utils.actor import get_actor
from database import get_db
from crud import purchase_orders as crud_purchase_orders
from crud.reconciliation import reconcile_purchase_order
from exceptions import ReconciliationError, http_status_for
from models.purchase_orders import OrderType, PurchaseOrderStatus
from schemas.purchase_orders import (
    NextPONumber,
    PurchaseOrder as PurchaseOrderSchema,
    PurchaseOrderCreate,
    PurchaseOrderItemsReplace,
    PurchaseOrderLinkRequest,
    PurchaseOrderSummary,
    PurchaseOrderUpdate,
)

router = APIRouter(prefix="/purchase-orders", tags=["Purchase Orders"])
logger = logging.getLogger("purchase_orders")


@router.get("/next-po-number", response_model=NextPONumber)
def get_next_po_number(year: Optional[int] = None, db: Session = Depends(get_db)):
    """Preview the number a new purchase order would receive."""
    return NextPONumber(po_number=crud_purchase_orders.next_po_number(db, year))

@router.post("/", response_model=PurchaseOrderSchema, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    po: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    try:
        return crud_purchase_orders.create_purchase_order(db, po, user_id)
    except ReconciliationError as e:
        logger.warning(f"Purchase order rejected: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.to_dict())

@router.get("/", response_model=List[PurchaseOrderSummary])
def read_purchase_orders(
    skip: int = 0,
    limit: int = 100,
    order_type: Optional[OrderType] = None,
    status: Optional[PurchaseOrderStatus] = None,
    db: Session = Depends(get_db),
):
    """Retrieve a list of purchase orders, newest first."""
    return crud_purchase_orders.get_purchase_orders(db, skip=skip, limit=limit, order_type=order_type, status=status)

@router.get("/{po_id}", response_model=PurchaseOrderSchema)
def read_purchase_order(po_id: int, db: Session = Depends(get_db)):
    db_po = crud_purchase_orders.get_purchase_order(db, po_id)
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po

@router.patch("/{po_id}", response_model=PurchaseOrderSchema)
def update_purchase_order(
    po_id: int,
    po_update: PurchaseOrderUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    """Update header fields. A penalty_percentage is applied to every item and the order is reconciled."""
    try:
        db_po = crud_purchase_orders.update_purchase_order(db, po_id, po_update, user_id)
    except ReconciliationError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.to_dict())
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po

@router.put("/{po_id}/items", response_model=PurchaseOrderSchema)
def replace_purchase_order_items(
    po_id: int,
    payload: PurchaseOrderItemsReplace,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    """Replace all items of the order. Lines without a part number are skipped."""
    db_po = crud_purchase_orders.replace_purchase_order_items(db, po_id, payload.items, user_id)
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po

@router.post("/{po_id}/link", response_model=PurchaseOrderSchema)
def link_purchase_order(
    po_id: int,
    payload: PurchaseOrderLinkRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    """Link a supplier purchase order to the customer purchase order it fulfils."""
    try:
        db_po = crud_purchase_orders.link_supplier_po(db, po_id, payload.customer_po_id, user_id)
    except ReconciliationError as e:
        logger.warning(f"Link of purchase order {po_id} rejected: {e.message}")
        raise HTTPException(status_code=http_status_for(e), detail=e.to_dict())
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po

@router.post("/{po_id}/reconcile", response_model=PurchaseOrderSchema)
def reconcile(po_id: int, db: Session = Depends(get_db)):
    """Recompute delivered figures and status from the current invoices."""
    if crud_purchase_orders.get_purchase_order(db, po_id) is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    if reconcile_purchase_order(db, po_id) is None:
        raise HTTPException(status_code=500, detail="Reconciliation failed; see server log")
    return crud_purchase_orders.get_purchase_order(db, po_id)

@router.delete("/{po_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_actor),
):
    if not crud_purchase_orders.delete_purchase_order(db, po_id, user_id):
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return None

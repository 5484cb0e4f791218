"""
Reconciliation orchestrator.

Runs after an invoice or purchase order write has committed: recomputes the
delivered figures of every item on the affected order, then its status.
Reconciliation is a derived-data refresh. A failure is logged and swallowed
so the caller's already committed write stands; the next trigger converges.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from crud.app_config import PENALTY_AMOUNT_ENABLED, RECONCILE_LOCK_ORDERS, get_bool_setting
from crud.delivered_rollup import rollup_items
from crud.po_status import derive_po_status
from exceptions import ReconciliationFailure
from models.purchase_orders import OrderType, PurchaseOrder, PurchaseOrderStatus

logger = logging.getLogger(__name__)


def _load_order(db: Session, po_id: int, lock: bool) -> Optional[PurchaseOrder]:
    query = db.query(PurchaseOrder).filter(PurchaseOrder.id == po_id)
    if lock:
        # Serializes concurrent runs for the same order where the backend supports row locks
        query = query.with_for_update()
    return query.options(selectinload(PurchaseOrder.items)).first()


def _reconcile(db: Session, po_id: int) -> Optional[PurchaseOrder]:
    order = _load_order(db, po_id, lock=get_bool_setting(db, RECONCILE_LOCK_ORDERS))
    if order is None:
        logger.warning(f"Purchase order {po_id} not found; nothing to reconcile")
        return None
    if not order.items:
        logger.info(f"Purchase order {po_id} has no items; nothing to reconcile")
        return order

    rollup_items(
        db,
        order.po_number,
        order.order_type,
        order.items,
        penalty_enabled=get_bool_setting(db, PENALTY_AMOUNT_ENABLED),
    )

    new_status = derive_po_status(order.status, order.items)
    if new_status != order.status and isinstance(new_status, PurchaseOrderStatus):
        logger.info(
            f"Purchase order {order.po_number} (ID: {po_id}) status "
            f"{order.status.value if order.status else None} -> {new_status.value}"
        )
        order.status = new_status

    db.commit()
    db.refresh(order)
    return order


def reconcile_purchase_order(db: Session, po_id: int) -> Optional[PurchaseOrder]:
    """Recompute one order. Returns the refreshed order, or None when it is missing or the run failed."""
    try:
        return _reconcile(db, po_id)
    except Exception as e:
        db.rollback()
        failure = ReconciliationFailure(po_id, e)
        logger.exception(failure.message)
        return None


def reconcile_po_number(db: Session, po_number: Optional[str], order_type: OrderType) -> List[PurchaseOrder]:
    """Reconcile the order(s) of a type carrying po_number. A missing or unknown number is a no-op."""
    if not po_number or not po_number.strip():
        return []
    try:
        po_ids = [
            po_id for (po_id,) in db.query(PurchaseOrder.id)
            .filter(PurchaseOrder.po_number == po_number, PurchaseOrder.order_type == order_type)
            .all()
        ]
    except Exception:
        db.rollback()
        logger.exception(f"Could not look up purchase orders for PO number {po_number}")
        return []

    if not po_ids:
        logger.info(f"No {order_type.value} purchase order with number {po_number}; nothing to reconcile")
    reconciled = []
    for po_id in po_ids:
        order = reconcile_purchase_order(db, po_id)
        if order is not None:
            reconciled.append(order)
    return reconciled

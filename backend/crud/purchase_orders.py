import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from crud.audit_log import create_audit_log
from crud.po_status import normalize_legacy_status
from crud.reconciliation import reconcile_purchase_order
from exceptions import DuplicateNumber, InvalidLinkage, InvalidStatus
from models.purchase_order_items import PurchaseOrderItem
from models.purchase_orders import OrderType, PurchaseOrder, PurchaseOrderStatus
from schemas.audit_log import AuditLogCreate
from schemas.purchase_order_items import PurchaseOrderItemCreateRequest
from schemas.purchase_orders import PurchaseOrderCreate, PurchaseOrderUpdate
from utils import local_now, sqlalchemy_to_dict
from utils.invoice_totals import line_total
from utils.matching import canonical_text
from utils.numbering import next_document_number

logger = logging.getLogger(__name__)


def _snapshot(db_po: PurchaseOrder) -> dict:
    values = sqlalchemy_to_dict(db_po)
    values["items"] = [sqlalchemy_to_dict(item) for item in db_po.items]
    return values


def _log(db: Session, db_po: PurchaseOrder, action: str, user_id: str, old_values, new_values):
    create_audit_log(db, AuditLogCreate(
        table_name='purchase_orders',
        record_id=db_po.id,
        changed_by=user_id,
        action=action,
        old_values=old_values,
        new_values=new_values,
    ))


def _build_items(items: List[PurchaseOrderItemCreateRequest], user_id: str) -> List[PurchaseOrderItem]:
    db_items = []
    for item in items:
        if not canonical_text(item.part_no):
            logger.warning("Skipping purchase order line without a part number")
            continue
        data = item.model_dump()
        if data.get("total_price") is None:
            data["total_price"] = line_total(item.quantity, item.unit_price)
        db_items.append(PurchaseOrderItem(**data, created_by=user_id, updated_by=user_id))
    return db_items


def _total_amount(items) -> Decimal:
    return sum((Decimal(item.total_price or 0) for item in items), Decimal("0"))


def _validate_link(db: Session, supplier_po: PurchaseOrder, customer_po_id: int) -> PurchaseOrder:
    if supplier_po.order_type != OrderType.SUPPLIER:
        raise InvalidLinkage("Only supplier purchase orders can be linked to a customer purchase order")
    customer_po = db.query(PurchaseOrder).filter(PurchaseOrder.id == customer_po_id).first()
    if customer_po is None:
        raise InvalidLinkage(f"Customer purchase order {customer_po_id} not found")
    if customer_po.order_type != OrderType.CUSTOMER:
        raise InvalidLinkage(f"Purchase order {customer_po.po_number} is not a customer purchase order")
    already_linked = db.query(PurchaseOrder).filter(
        PurchaseOrder.linked_customer_po_id == customer_po_id,
        PurchaseOrder.id != supplier_po.id,
    ).first()
    if already_linked is not None:
        raise InvalidLinkage(
            f"Customer purchase order {customer_po.po_number} is already linked to supplier purchase order {already_linked.po_number}"
        )
    return customer_po


def next_po_number(db: Session, year: Optional[int] = None) -> str:
    return next_document_number(db, PurchaseOrder.po_number, "PO", year)


def get_purchase_order(db: Session, po_id: int):
    return db.query(PurchaseOrder).options(selectinload(PurchaseOrder.items)).filter(PurchaseOrder.id == po_id).first()


def get_purchase_order_by_number(db: Session, po_number: str):
    return db.query(PurchaseOrder).filter(PurchaseOrder.po_number == po_number).first()


def get_purchase_orders(db: Session, skip: int = 0, limit: int = 100, order_type: Optional[OrderType] = None,
                        status: Optional[PurchaseOrderStatus] = None):
    query = db.query(PurchaseOrder)
    if order_type:
        query = query.filter(PurchaseOrder.order_type == order_type)
    if status:
        query = query.filter(PurchaseOrder.status == status)
    return query.order_by(PurchaseOrder.id.desc()).offset(skip).limit(limit).all()


def create_purchase_order(db: Session, po: PurchaseOrderCreate, user_id: str) -> PurchaseOrder:
    po_number = canonical_text(po.po_number).strip() or next_po_number(db)
    if get_purchase_order_by_number(db, po_number):
        raise DuplicateNumber(f"Purchase order number {po_number} already exists")

    status = PurchaseOrderStatus.APPROVED
    if po.status is not None:
        status = normalize_legacy_status(po.status)
        if status is None:
            raise InvalidStatus(f"Invalid purchase order status: {po.status}")

    db_po = PurchaseOrder(
        po_number=po_number,
        order_type=po.order_type,
        status=status,
        customer_supplier_name=po.customer_supplier_name,
        notes=po.notes,
        created_by=user_id,
        updated_by=user_id,
    )
    if po.linked_customer_po_id is not None:
        _validate_link(db, db_po, po.linked_customer_po_id)
        db_po.linked_customer_po_id = po.linked_customer_po_id

    db_po.items = _build_items(po.items, user_id)
    db_po.total_amount = _total_amount(db_po.items)
    db.add(db_po)
    db.commit()
    db.refresh(db_po)
    logger.info(f"Purchase Order {db_po.po_number} (ID: {db_po.id}, {db_po.order_type.value}) created by user {user_id}")

    # Invoices may already reference this number
    reconcile_purchase_order(db, db_po.id)
    return get_purchase_order(db, db_po.id)


def update_purchase_order(db: Session, po_id: int, po: PurchaseOrderUpdate, user_id: str):
    db_po = get_purchase_order(db, po_id)
    if db_po is None:
        return None

    old_values = _snapshot(db_po)
    update_data = po.model_dump(exclude_unset=True)

    if "status" in update_data:
        try:
            # Header edits accept only the current three values
            update_data["status"] = PurchaseOrderStatus(str(update_data["status"]).strip())
        except ValueError:
            raise InvalidStatus(
                f"Invalid status: {update_data['status']}. Must be one of: "
                + ", ".join(s.value for s in PurchaseOrderStatus)
            )

    penalty_changed = "penalty_percentage" in update_data
    penalty_percentage = update_data.pop("penalty_percentage", None)
    if penalty_changed:
        for item in db_po.items:
            item.penalty_percentage = penalty_percentage
            item.updated_by = user_id

    for key, value in update_data.items():
        setattr(db_po, key, value)
    db_po.updated_at = local_now()
    db_po.updated_by = user_id
    db.commit()
    db.refresh(db_po)

    _log(db, db_po, 'UPDATE', user_id, old_values, _snapshot(db_po))
    logger.info(f"Purchase Order (ID: {po_id}) updated by user {user_id}")

    # Once items carry deliveries their state decides the status, not the edit
    if penalty_changed or "status" in update_data:
        reconcile_purchase_order(db, po_id)
    return get_purchase_order(db, po_id)


def replace_purchase_order_items(db: Session, po_id: int, items: List[PurchaseOrderItemCreateRequest], user_id: str):
    """Replace every item of the order, recompute total_amount, then reconcile."""
    db_po = get_purchase_order(db, po_id)
    if db_po is None:
        return None

    old_values = _snapshot(db_po)
    db_po.items = _build_items(items, user_id)
    db_po.total_amount = _total_amount(db_po.items)
    db_po.updated_at = local_now()
    db_po.updated_by = user_id
    db.commit()
    db.refresh(db_po)

    _log(db, db_po, 'UPDATE', user_id, old_values, _snapshot(db_po))
    logger.info(f"Purchase Order (ID: {po_id}) items replaced ({len(db_po.items)} line(s)) by user {user_id}")

    reconcile_purchase_order(db, po_id)
    return get_purchase_order(db, po_id)


def link_supplier_po(db: Session, po_id: int, customer_po_id: Optional[int], user_id: str):
    """Link a supplier PO to a customer PO, or unlink it when customer_po_id is None."""
    db_po = get_purchase_order(db, po_id)
    if db_po is None:
        return None

    old_values = sqlalchemy_to_dict(db_po)
    if customer_po_id is not None:
        _validate_link(db, db_po, customer_po_id)
    db_po.linked_customer_po_id = customer_po_id
    db_po.updated_at = local_now()
    db_po.updated_by = user_id
    db.commit()
    db.refresh(db_po)

    _log(db, db_po, 'UPDATE', user_id, old_values, sqlalchemy_to_dict(db_po))
    if customer_po_id is None:
        logger.info(f"Supplier Purchase Order (ID: {po_id}) unlinked by user {user_id}")
    else:
        logger.info(f"Supplier Purchase Order (ID: {po_id}) linked to customer Purchase Order (ID: {customer_po_id}) by user {user_id}")
    return db_po


def delete_purchase_order(db: Session, po_id: int, user_id: str) -> bool:
    db_po = get_purchase_order(db, po_id)
    if db_po is None:
        return False

    old_values = _snapshot(db_po)
    # Supplier orders pointing at this one lose their link
    db.query(PurchaseOrder).filter(PurchaseOrder.linked_customer_po_id == po_id).update(
        {PurchaseOrder.linked_customer_po_id: None}, synchronize_session=False
    )
    db.delete(db_po)
    db.commit()

    create_audit_log(db, AuditLogCreate(
        table_name='purchase_orders',
        record_id=po_id,
        changed_by=user_id,
        action='DELETE',
        old_values=old_values,
        new_values=None,
    ))
    logger.info(f"Purchase Order (ID: {po_id}) deleted by user {user_id}")
    return True

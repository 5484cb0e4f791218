"""
Inventory ledger.

Supplier invoice lines are received into stock (match-or-create on the full
inventory key), customer invoice lines consume stock from a single record
picked FIFO by sale key. Every movement keeps

    balance        = quantity - sold_quantity
    balance_amount = balance * unit_price
    total_price    = quantity * unit_price

and writes an InventoryAudit row. Functions here only flush; the invoice
write path that calls them owns the transaction.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from exceptions import (
    InsufficientStock,
    NoMatchingInventory,
    SaleLinesNotInInventory,
    SaleLinesShortOfStock,
    SaleValidationError,
)
from models.inventory import InventoryRecord
from models.inventory_audit import InventoryAudit
from utils.matching import (
    InventoryKey,
    SaleKey,
    canonical_price,
    canonical_text,
    record_inventory_key,
    record_sale_key,
    sale_key,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

RECEIPT = "receipt"
SALE = "sale"
SALE_REVERSAL = "sale_reversal"


def _decimal(value) -> Decimal:
    value = canonical_price(value)
    return value if value is not None else ZERO


def _recompute(record: InventoryRecord):
    quantity = _decimal(record.quantity)
    sold = _decimal(record.sold_quantity)
    price = _decimal(record.unit_price)
    record.balance = quantity - sold
    record.balance_amount = record.balance * price
    record.total_price = quantity * price


def _audit(db: Session, record: InventoryRecord, change_type: str, change_amount: Decimal,
           old_balance: Decimal, changed_by: Optional[str], note: Optional[str]):
    db.add(InventoryAudit(
        inventory_id=record.id,
        change_type=change_type,
        change_amount=change_amount,
        old_quantity=old_balance,
        new_quantity=_decimal(record.balance),
        changed_by=changed_by,
        note=note,
    ))


def _candidates(db: Session, part_no: str, lock: bool = True) -> List[InventoryRecord]:
    # part_no narrows in SQL; the remaining key fields are compared in Python so
    # null/blank collapsing and Decimal equality behave the same on every backend
    query = db.query(InventoryRecord).filter(InventoryRecord.part_no == part_no)
    if lock:
        query = query.with_for_update()
    return query.order_by(InventoryRecord.created_at.asc(), InventoryRecord.id.asc()).all()


def find_by_inventory_key(db: Session, key: InventoryKey, lock: bool = True) -> Optional[InventoryRecord]:
    for record in _candidates(db, key.part_no, lock=lock):
        if record_inventory_key(record) == key:
            return record
    return None


def find_by_sale_key(db: Session, key: SaleKey, lock: bool = True) -> List[InventoryRecord]:
    """All records of a sale key, oldest first."""
    return [r for r in _candidates(db, key.part_no, lock=lock) if record_sale_key(r) == key]


def select_fifo_record(records: List[InventoryRecord]) -> Optional[InventoryRecord]:
    """The oldest record of the key. An exhausted oldest record is not skipped, so the sale is rejected."""
    return records[0] if records else None


def receive(
    db: Session,
    key: InventoryKey,
    incoming_quantity,
    received_fields: Optional[Dict[str, Any]] = None,
    changed_by: Optional[str] = None,
    note: Optional[str] = None,
) -> InventoryRecord:
    """Add a supplier receipt to the record with the same key, or start a new lineage.

    received_fields (serial_no, material_no, uom, date_po) are only used when a
    record is created; an existing record keeps its original descriptive fields.
    """
    incoming = _decimal(incoming_quantity)
    record = find_by_inventory_key(db, key)

    if record is not None:
        old_balance = _decimal(record.balance)
        record.quantity = _decimal(record.quantity) + incoming
        _recompute(record)
        if changed_by:
            record.updated_by = changed_by
        logger.info(
            f"Inventory record {record.id} received {incoming} of part {key.part_no}; "
            f"quantity now {record.quantity}, balance {record.balance}"
        )
    else:
        fields = dict(received_fields or {})
        record = InventoryRecord(
            serial_no=fields.get("serial_no"),
            project_no=key.project_no or None,
            date_po=fields.get("date_po") or date.today(),
            part_no=key.part_no,
            material_no=canonical_text(fields.get("material_no")) or None,
            description=key.description or None,
            uom=fields.get("uom"),
            quantity=incoming,
            unit_price=key.unit_price,
            sold_quantity=ZERO,
            created_by=changed_by,
            updated_by=changed_by,
        )
        _recompute(record)
        db.add(record)
        db.flush()
        old_balance = ZERO
        logger.info(
            f"Inventory record {record.id} created for part {key.part_no} "
            f"(project {key.project_no or '-'}, unit price {key.unit_price}) with quantity {incoming}"
        )

    _audit(db, record, RECEIPT, incoming, old_balance, changed_by, note)
    db.flush()
    return record


def consume(
    db: Session,
    key: SaleKey,
    requested_quantity,
    changed_by: Optional[str] = None,
    note: Optional[str] = None,
) -> InventoryRecord:
    """Take a sale from exactly one record. The request is never split across lineages."""
    requested = _decimal(requested_quantity)
    record = select_fifo_record(find_by_sale_key(db, key))
    if record is None:
        raise NoMatchingInventory(key)

    available = _decimal(record.balance)
    if requested > available:
        raise InsufficientStock(key, requested, available, inventory_id=record.id)

    record.sold_quantity = _decimal(record.sold_quantity) + requested
    _recompute(record)
    if changed_by:
        record.updated_by = changed_by
    _audit(db, record, SALE, -requested, available, changed_by, note)
    db.flush()
    logger.info(f"Inventory record {record.id} sold {requested} of part {key.part_no}; balance now {record.balance}")
    return record


def release(
    db: Session,
    key: SaleKey,
    quantity,
    inventory_id: Optional[int] = None,
    changed_by: Optional[str] = None,
    note: Optional[str] = None,
) -> Optional[InventoryRecord]:
    """Give back a previously consumed quantity.

    The record the sale was taken from is used when known; otherwise the oldest
    record of the key that has sold stock. sold_quantity never drops below zero.
    """
    amount = _decimal(quantity)
    record = None
    if inventory_id is not None:
        record = db.query(InventoryRecord).filter(InventoryRecord.id == inventory_id).with_for_update().first()
    if record is None:
        records = find_by_sale_key(db, key)
        record = next((r for r in records if _decimal(r.sold_quantity) > ZERO), records[0] if records else None)
    if record is None:
        logger.warning(f"No inventory record to release {amount} of part {key.part_no} into; skipping")
        return None

    old_balance = _decimal(record.balance)
    old_sold = _decimal(record.sold_quantity)
    record.sold_quantity = max(ZERO, old_sold - amount)
    _recompute(record)
    if changed_by:
        record.updated_by = changed_by
    _audit(db, record, SALE_REVERSAL, old_sold - _decimal(record.sold_quantity), old_balance, changed_by, note)
    db.flush()
    logger.info(f"Inventory record {record.id} released {amount} of part {key.part_no}; balance now {record.balance}")
    return record


def validate_sale_lines(db: Session, lines: Iterable[Any]) -> None:
    """Check every sale line against stock before anything is written.

    Lines naming the same sale key are checked against their combined request.
    Raises SaleValidationError listing every failing line; when every failure is
    of one kind the raised error is also a NoMatchingInventory or InsufficientStock.
    """
    lines = list(lines)
    combined: Dict[SaleKey, Decimal] = {}
    for line in lines:
        if canonical_text(getattr(line, "part_no", None)):
            key = sale_key(line.project_no, line.part_no, line.description)
            combined[key] = combined.get(key, ZERO) + _decimal(line.quantity)

    errors: List[Dict[str, Any]] = []
    first_failure = {}
    for index, line in enumerate(lines):
        requested = _decimal(getattr(line, "quantity", None))
        error = {
            "item_index": index,
            "part_no": getattr(line, "part_no", None),
            "project_no": getattr(line, "project_no", None),
            "description": getattr(line, "description", None),
            "requested_quantity": str(requested),
            "available_balance": "0",
        }
        if not canonical_text(getattr(line, "part_no", None)):
            error["code"] = "MISSING_PART_NO"
            error["error"] = "Part number is required"
            errors.append(error)
            continue

        key = sale_key(line.project_no, line.part_no, line.description)
        record = select_fifo_record(find_by_sale_key(db, key, lock=False))
        if record is None:
            error["code"] = NoMatchingInventory.code
            error["error"] = "Item not found in inventory"
            errors.append(error)
            first_failure.setdefault(NoMatchingInventory.code, (key, None))
            continue

        available = _decimal(record.balance)
        error["available_balance"] = str(available)
        if available <= ZERO:
            error["code"] = InsufficientStock.code
            error["error"] = "No stock available"
            errors.append(error)
            first_failure.setdefault(InsufficientStock.code, (key, record.id))
        elif combined[key] > available:
            error["code"] = InsufficientStock.code
            if combined[key] != requested:
                error["error"] = f"Insufficient stock. Requested {combined[key]} across lines, available {available}"
            else:
                error["error"] = f"Insufficient stock. Requested {requested}, available {available}"
            errors.append(error)
            first_failure.setdefault(InsufficientStock.code, (key, record.id))

    if errors:
        logger.warning(f"Sale rejected by inventory validation: {len(errors)} failing line(s)")
        codes = {error["code"] for error in errors}
        if codes == {NoMatchingInventory.code}:
            raise SaleLinesNotInInventory(errors, key=first_failure[NoMatchingInventory.code][0])
        if codes == {InsufficientStock.code}:
            key, inventory_id = first_failure[InsufficientStock.code]
            raise SaleLinesShortOfStock(errors, key=key, inventory_id=inventory_id)
        raise SaleValidationError(errors)


def get_inventory_record(db: Session, inventory_id: int):
    return db.query(InventoryRecord).filter(InventoryRecord.id == inventory_id).first()


def get_inventory_records(db: Session, skip: int = 0, limit: int = 100, part_no: Optional[str] = None,
                          project_no: Optional[str] = None, in_stock_only: bool = False):
    query = db.query(InventoryRecord)
    if part_no:
        query = query.filter(InventoryRecord.part_no == part_no)
    if project_no:
        query = query.filter(InventoryRecord.project_no == project_no)
    if in_stock_only:
        query = query.filter(InventoryRecord.balance > 0)
    return query.order_by(InventoryRecord.created_at.asc(), InventoryRecord.id.asc()).offset(skip).limit(limit).all()


def get_inventory_audits(db: Session, inventory_id: int, start_date: Optional[date] = None,
                         end_date: Optional[date] = None):
    query = db.query(InventoryAudit).filter(InventoryAudit.inventory_id == inventory_id)
    if start_date:
        query = query.filter(InventoryAudit.timestamp >= start_date)
    if end_date:
        query = query.filter(InventoryAudit.timestamp <= end_date)
    return query.order_by(InventoryAudit.id.asc()).all()

from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

class InventoryRecord(BaseModel):
    id: int
    serial_no: Optional[str] = None
    project_no: Optional[str] = None
    date_po: Optional[date] = None
    part_no: str
    material_no: Optional[str] = None
    description: Optional[str] = None
    uom: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal
    sold_quantity: Decimal
    balance: Decimal
    balance_amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class InventoryAudit(BaseModel):
    id: int
    inventory_id: int
    change_type: str
    change_amount: Decimal
    old_quantity: Decimal
    new_quantity: Decimal
    changed_by: Optional[str] = None
    timestamp: datetime
    note: Optional[str] = None

    class Config:
        from_attributes = True

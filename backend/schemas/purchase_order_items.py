from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

class PurchaseOrderItemBase(BaseModel):
    serial_no: Optional[str] = None
    project_no: Optional[str] = None
    part_no: str
    material_no: Optional[str] = None
    description: Optional[str] = None
    uom: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    due_date: Optional[date] = None
    comments: Optional[str] = None
    penalty_percentage: Optional[Decimal] = None

class PurchaseOrderItemCreateRequest(PurchaseOrderItemBase):
    # Used when creating a PO or replacing its items; total_price defaults to quantity * unit_price
    total_price: Optional[Decimal] = None

class PurchaseOrderItem(PurchaseOrderItemBase):
    id: int
    purchase_order_id: int
    total_price: Decimal
    # Derived by reconciliation
    delivered_quantity: Optional[Decimal] = None
    delivered_unit_price: Optional[Decimal] = None
    delivered_total_price: Optional[Decimal] = None
    balance_quantity_undelivered: Optional[Decimal] = None
    penalty_amount: Optional[Decimal] = None
    invoice_no: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

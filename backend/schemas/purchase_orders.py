from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from models.purchase_orders import OrderType, PurchaseOrderStatus # Import the enums
from schemas.purchase_order_items import PurchaseOrderItem, PurchaseOrderItemCreateRequest

class PurchaseOrderBase(BaseModel):
    order_type: OrderType
    customer_supplier_name: Optional[str] = None
    notes: Optional[str] = None

class PurchaseOrderCreate(PurchaseOrderBase):
    po_number: Optional[str] = None # generated as PO-<year>-NNN when omitted
    # Plain string so values from older systems (draft, pending, completed...) can be normalized
    status: Optional[str] = None
    linked_customer_po_id: Optional[int] = None
    items: List[PurchaseOrderItemCreateRequest] = []

class PurchaseOrderUpdate(BaseModel):
    customer_supplier_name: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    # Applied to every item of the order, then the order is reconciled
    penalty_percentage: Optional[Decimal] = None

class PurchaseOrderItemsReplace(BaseModel):
    items: List[PurchaseOrderItemCreateRequest]

class PurchaseOrderLinkRequest(BaseModel):
    # None removes the link
    customer_po_id: Optional[int] = None

class NextPONumber(BaseModel):
    po_number: str

class PurchaseOrder(PurchaseOrderBase):
    id: int
    po_number: str
    status: PurchaseOrderStatus
    total_amount: Decimal
    linked_customer_po_id: Optional[int] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[PurchaseOrderItem] = []

    class Config:
        from_attributes = True

class PurchaseOrderSummary(PurchaseOrderBase):
    id: int
    po_number: str
    status: PurchaseOrderStatus
    total_amount: Decimal
    linked_customer_po_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True

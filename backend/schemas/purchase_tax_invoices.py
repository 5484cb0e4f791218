from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

class PurchaseTaxInvoiceItemBase(BaseModel):
    serial_no: Optional[str] = None
    project_no: Optional[str] = None # falls back to the invoice's project_number
    part_no: str
    material_no: Optional[str] = None
    description: Optional[str] = None
    uom: Optional[str] = None
    quantity: Decimal = Field(..., ge=0)
    supplier_unit_price: Optional[Decimal] = Field(None, ge=0)

class PurchaseTaxInvoiceItemCreate(PurchaseTaxInvoiceItemBase):
    pass

class PurchaseTaxInvoiceItem(PurchaseTaxInvoiceItemBase):
    id: int
    invoice_id: int
    total_price: Decimal

    class Config:
        from_attributes = True

class PurchaseTaxInvoiceBase(BaseModel):
    invoice_number: str
    invoice_date: date
    supplier_name: Optional[str] = None
    po_number: Optional[str] = None
    project_number: Optional[str] = None
    claim_percentage: Decimal = Field(Decimal("100"), ge=0, le=100)
    amount_paid: Decimal = Decimal("0")

class PurchaseTaxInvoiceCreate(PurchaseTaxInvoiceBase):
    items: List[PurchaseTaxInvoiceItemCreate]

class PurchaseTaxInvoiceUpdate(BaseModel):
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    supplier_name: Optional[str] = None
    po_number: Optional[str] = None
    project_number: Optional[str] = None
    claim_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    amount_paid: Optional[Decimal] = None
    # When present the invoice's lines are replaced wholesale
    items: Optional[List[PurchaseTaxInvoiceItemCreate]] = None

class PurchaseTaxInvoice(PurchaseTaxInvoiceBase):
    id: int
    subtotal: Decimal
    claim_amount: Decimal
    vat_amount: Decimal
    gross_total: Decimal
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[PurchaseTaxInvoiceItem] = []

    class Config:
        from_attributes = True

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

class SalesTaxInvoiceItemBase(BaseModel):
    project_no: Optional[str] = None
    part_no: Optional[str] = None # checked during stock validation so every failing line is reported
    material_no: Optional[str] = None
    description: Optional[str] = None
    quantity: Decimal = Field(..., ge=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)

class SalesTaxInvoiceItemCreate(SalesTaxInvoiceItemBase):
    pass

class SalesTaxInvoiceItem(SalesTaxInvoiceItemBase):
    id: int
    invoice_id: int
    total_amount: Decimal
    inventory_id: Optional[int] = None

    class Config:
        from_attributes = True

class SalesTaxInvoiceBase(BaseModel):
    invoice_date: date
    customer_name: Optional[str] = None
    customer_po_number: Optional[str] = None
    customer_po_date: Optional[date] = None
    payment_terms: Optional[str] = None
    contract_number: Optional[str] = None
    delivery_terms: Optional[str] = None
    claim_percentage: Decimal = Field(Decimal("100"), ge=0, le=100)
    amount_paid: Decimal = Decimal("0")

class SalesTaxInvoiceCreate(SalesTaxInvoiceBase):
    invoice_number: Optional[str] = None # generated as AT-INV-<year>-NNN when omitted
    items: List[SalesTaxInvoiceItemCreate]

class SalesTaxInvoiceUpdate(BaseModel):
    invoice_date: Optional[date] = None
    customer_name: Optional[str] = None
    customer_po_number: Optional[str] = None
    customer_po_date: Optional[date] = None
    payment_terms: Optional[str] = None
    contract_number: Optional[str] = None
    delivery_terms: Optional[str] = None
    claim_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    amount_paid: Optional[Decimal] = None
    # When present the invoice's lines are replaced wholesale and stock is re-consumed
    items: Optional[List[SalesTaxInvoiceItemCreate]] = None

class SalesTaxInvoice(SalesTaxInvoiceBase):
    id: int
    invoice_number: str
    subtotal: Decimal
    claim_amount: Decimal
    vat_amount: Decimal
    gross_total: Decimal
    amount_in_words: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[SalesTaxInvoiceItem] = []

    class Config:
        from_attributes = True

from sqlalchemy import Column, Integer, String, Text, Numeric, Date
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class SalesTaxInvoice(Base, TimestampMixin):
    """Customer-facing invoice. Referenced PO is matched by customer_po_number value."""
    __tablename__ = "sales_tax_invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(100), unique=True, nullable=False, index=True) # AT-INV-<year>-<seq>
    invoice_date = Column(Date, nullable=False)
    customer_name = Column(String(255), nullable=True)
    customer_po_number = Column(String(100), nullable=True, index=True)
    customer_po_date = Column(Date, nullable=True)
    payment_terms = Column(Text, nullable=True)
    contract_number = Column(String(255), nullable=True)
    delivery_terms = Column(String(100), nullable=True)
    claim_percentage = Column(Numeric(5, 2), default=100, nullable=False)
    subtotal = Column(Numeric(14, 3), default=0, nullable=False)
    claim_amount = Column(Numeric(14, 3), default=0, nullable=False)
    vat_amount = Column(Numeric(14, 3), default=0, nullable=False)
    gross_total = Column(Numeric(14, 3), default=0, nullable=False)
    amount_paid = Column(Numeric(14, 3), default=0, nullable=False)
    amount_in_words = Column(Text, nullable=True)

    # Relationships
    items = relationship(
        "SalesTaxInvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="SalesTaxInvoiceItem.id",
    )

from sqlalchemy import Column, Integer, String, Numeric, Date
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class PurchaseTaxInvoice(Base, TimestampMixin):
    """Supplier-facing invoice. Referenced PO is matched by po_number value, not by foreign key."""
    __tablename__ = "purchase_tax_invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(100), unique=True, nullable=False, index=True)
    invoice_date = Column(Date, nullable=False)
    supplier_name = Column(String(255), nullable=True)
    po_number = Column(String(100), nullable=True, index=True)
    project_number = Column(String(100), nullable=True)
    claim_percentage = Column(Numeric(5, 2), default=100, nullable=False)
    subtotal = Column(Numeric(14, 3), default=0, nullable=False)
    claim_amount = Column(Numeric(14, 3), default=0, nullable=False)
    vat_amount = Column(Numeric(14, 3), default=0, nullable=False)
    gross_total = Column(Numeric(14, 3), default=0, nullable=False)
    amount_paid = Column(Numeric(14, 3), default=0, nullable=False)

    # Relationships
    items = relationship(
        "PurchaseTaxInvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="PurchaseTaxInvoiceItem.id",
    )

from sqlalchemy import Column, Integer, Numeric, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from database import Base

class PurchaseTaxInvoiceItem(Base):
    __tablename__ = "purchase_tax_invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("purchase_tax_invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    serial_no = Column(String(100), nullable=True)
    project_no = Column(String(100), nullable=True)
    part_no = Column(String(100), nullable=False)
    material_no = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    uom = Column(String(50), nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    supplier_unit_price = Column(Numeric(12, 3), nullable=True)
    total_price = Column(Numeric(14, 3), nullable=False)

    # Relationships
    invoice = relationship("PurchaseTaxInvoice", back_populates="items")

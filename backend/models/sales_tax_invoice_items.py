from sqlalchemy import Column, Integer, Numeric, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from database import Base

class SalesTaxInvoiceItem(Base):
    __tablename__ = "sales_tax_invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("sales_tax_invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    project_no = Column(String(100), nullable=True)
    part_no = Column(String(100), nullable=False)
    material_no = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit_price = Column(Numeric(12, 3), nullable=True)
    total_amount = Column(Numeric(14, 3), nullable=False)
    # Stock record the sale was consumed from, so edits and deletes release the same lineage
    inventory_id = Column(Integer, ForeignKey("inventory.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    invoice = relationship("SalesTaxInvoice", back_populates="items")
    inventory_record = relationship("InventoryRecord")

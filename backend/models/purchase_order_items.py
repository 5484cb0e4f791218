from sqlalchemy import Column, Integer, Numeric, ForeignKey, String, Text, Date
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class PurchaseOrderItem(Base, TimestampMixin):
    __tablename__ = "purchase_order_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    serial_no = Column(String(100), nullable=True)
    project_no = Column(String(100), nullable=True)
    part_no = Column(String(100), nullable=False)
    material_no = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    uom = Column(String(50), nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit_price = Column(Numeric(12, 3), nullable=False)
    total_price = Column(Numeric(14, 3), nullable=False) # quantity * unit_price unless entered explicitly
    due_date = Column(Date, nullable=True)
    comments = Column(Text, nullable=True)

    # Manually entered
    penalty_percentage = Column(Numeric(5, 2), nullable=True)

    # Derived by the delivered rollup, never written by callers
    delivered_quantity = Column(Numeric(12, 3), nullable=True)
    delivered_unit_price = Column(Numeric(12, 3), nullable=True)
    delivered_total_price = Column(Numeric(14, 3), nullable=True)
    balance_quantity_undelivered = Column(Numeric(12, 3), nullable=True)
    penalty_amount = Column(Numeric(14, 3), nullable=True)
    invoice_no = Column(Text, nullable=True) # comma-joined contributing invoice numbers

    # Relationships
    purchase_order = relationship("PurchaseOrder", back_populates="items")

from sqlalchemy import Column, Integer, String, Text, Numeric, Date
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class InventoryRecord(Base, TimestampMixin):
    """One stock lineage, identified by (project_no, part_no, description, unit_price).

    balance = quantity - sold_quantity and balance_amount = balance * unit_price are
    kept in step by crud.inventory; nothing else writes these columns.
    """
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    serial_no = Column(String(100), nullable=True)
    project_no = Column(String(100), nullable=True)
    date_po = Column(Date, nullable=True) # date of the first receipt
    part_no = Column(String(100), nullable=False, index=True)
    material_no = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    uom = Column(String(50), nullable=True)
    quantity = Column(Numeric(12, 3), default=0, nullable=False) # cumulative received
    unit_price = Column(Numeric(12, 3), default=0, nullable=False)
    total_price = Column(Numeric(14, 3), default=0, nullable=False)
    sold_quantity = Column(Numeric(12, 3), default=0, nullable=False) # cumulative consumed
    balance = Column(Numeric(12, 3), default=0, nullable=False)
    balance_amount = Column(Numeric(14, 3), default=0, nullable=False)

    # Relationships
    audits = relationship("InventoryAudit", back_populates="inventory_record", order_by="InventoryAudit.id")

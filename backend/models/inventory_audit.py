from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from utils import local_now

class InventoryAudit(Base):
    __tablename__ = "inventory_audit"

    id = Column(Integer, primary_key=True, index=True)
    inventory_id = Column(Integer, ForeignKey("inventory.id"), nullable=False, index=True)
    change_type = Column(String, nullable=False)  # "receipt", "sale", "sale_reversal"
    change_amount = Column(Numeric(12, 3), nullable=False) # Positive or negative
    old_quantity = Column(Numeric(12, 3), nullable=False) # balance before the movement
    new_quantity = Column(Numeric(12, 3), nullable=False) # balance after the movement
    changed_by = Column(String, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=local_now)
    note = Column(String, nullable=True)

    inventory_record = relationship("InventoryRecord", back_populates="audits")

from sqlalchemy import Column, Integer, String, DateTime, JSON
from database import Base
from utils import local_now

class AuditLog(Base):
    """Before/after snapshots of purchase order, invoice and setting changes."""
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, index=True)
    table_name = Column(String(100), nullable=False, index=True) # purchase_orders, purchase_tax_invoices, ...
    record_id = Column(Integer, nullable=False, index=True)
    changed_at = Column(DateTime(timezone=True), default=local_now)
    changed_by = Column(String, nullable=False) # X-User-Id of the caller, or 'system'
    action = Column(String(16), nullable=False)  # 'CREATE', 'UPDATE', 'DELETE'
    old_values = Column(JSON)
    new_values = Column(JSON) # null on DELETE

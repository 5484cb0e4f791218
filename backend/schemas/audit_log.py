from pydantic import BaseModel
from typing import Optional, Dict, Any, Literal
from datetime import datetime

AuditAction = Literal['CREATE', 'UPDATE', 'DELETE']

class AuditLogCreate(BaseModel):
    table_name: str
    record_id: int
    changed_by: str
    action: AuditAction
    old_values: Optional[Dict[str, Any]] = None # JSON snapshot from sqlalchemy_to_dict, items included
    new_values: Optional[Dict[str, Any]] = None

class AuditLogEntry(AuditLogCreate):
    id: int
    changed_at: datetime

    class Config:
        from_attributes = True

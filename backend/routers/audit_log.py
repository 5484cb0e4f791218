from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from crud.audit_log import get_audit_logs
from schemas.audit_log import AuditLogEntry

router = APIRouter(prefix="/audit-log", tags=["Audit Log"])


@router.get("/{table_name}", response_model=List[AuditLogEntry])
def read_audit_log(
    table_name: str,
    record_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """Change history of a table, optionally narrowed to one record."""
    return get_audit_logs(db, table_name, record_id=record_id, skip=skip, limit=limit)

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from database import get_db
from crud import inventory as crud_inventory
from schemas.inventory import InventoryAudit, InventoryRecord

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("/", response_model=List[InventoryRecord])
def read_inventory(
    skip: int = 0,
    limit: int = 100,
    part_no: Optional[str] = None,
    project_no: Optional[str] = None,
    in_stock_only: bool = False,
    db: Session = Depends(get_db),
):
    """Stock records, oldest lineage first."""
    return crud_inventory.get_inventory_records(
        db, skip=skip, limit=limit, part_no=part_no, project_no=project_no, in_stock_only=in_stock_only
    )

@router.get("/{inventory_id}", response_model=InventoryRecord)
def read_inventory_record(inventory_id: int, db: Session = Depends(get_db)):
    record = crud_inventory.get_inventory_record(db, inventory_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Inventory record not found")
    return record

@router.get("/{inventory_id}/audit", response_model=List[InventoryAudit])
def read_inventory_audit(
    inventory_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    if crud_inventory.get_inventory_record(db, inventory_id) is None:
        raise HTTPException(status_code=404, detail="Inventory record not found")
    return crud_inventory.get_inventory_audits(db, inventory_id, start_date=start_date, end_date=end_date)

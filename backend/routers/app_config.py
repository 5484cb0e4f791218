from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from schemas.app_config import AppConfigCreate, AppConfigUpdate, AppConfigOut
from crud import app_config as crud_app_config
from utils.actor import get_actor

router = APIRouter(tags=["Configurations"])
logger = logging.getLogger(__name__)

@router.post("/configurations/", response_model=AppConfigOut)
def create_config(config: AppConfigCreate, db: Session = Depends(get_db), user_id: str = Depends(get_actor)):
    if crud_app_config.get_config(db, name=config.name):
        raise HTTPException(status_code=409, detail=f"Configuration {config.name} already exists")
    return crud_app_config.create_config(db, config, user_id=user_id)


@router.get("/configurations/", response_model=List[AppConfigOut])
def get_configs(name: Optional[str] = None, db: Session = Depends(get_db)):
    configs = crud_app_config.get_config(db, name=name)
    # Always return a list, even if empty
    return [configs] if name and configs else configs or []

@router.patch("/configurations/{name}/", response_model=AppConfigOut)
def update_config(name: str, config: AppConfigUpdate, db: Session = Depends(get_db), user_id: str = Depends(get_actor)):
    updated = crud_app_config.update_config_by_name(db, name, config, user_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Configuration not found")
    logger.info(f"Configuration {name} set to {updated.value} by user {user_id}")
    return updated

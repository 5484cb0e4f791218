from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class AppConfigBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., max_length=255)

class AppConfigCreate(AppConfigBase):
    pass

class AppConfigUpdate(BaseModel):
    # The column is NOT NULL, so an update always carries a value
    value: str = Field(..., max_length=255)

class AppConfigOut(AppConfigBase):
    id: int
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

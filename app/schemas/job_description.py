from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# -- Request --

class JobDescriptionCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=200, description="직무명")
    description: str = Field(..., min_length=20, max_length=2000, description="JD 원문")
    active: bool = True

class JobDescriptionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    description: Optional[str] = Field(None, min_length=20, max_length=2000)
    active: Optional[bool] = None


# -- Response --

class JobDescriptionOut(BaseModel):
    id: int
    title: str
    description: str
    active: bool
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

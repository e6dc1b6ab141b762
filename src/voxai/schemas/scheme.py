"""Pydantic schemas for government schemes."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SchemeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    url: Optional[str] = Field(None, max_length=500)


class SchemeRead(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}

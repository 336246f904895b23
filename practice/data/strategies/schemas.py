"""Pydantic schemas for therapy strategies."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class StrategyCreate(BaseModel):
    """Schema for creating a strategy."""
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1)
    description: Optional[str] = None
    effectiveness: Optional[int] = Field(default=None, ge=1, le=10)
    goal_id: Optional[str] = None


class StrategyResponse(BaseModel):
    """Schema for strategy response."""
    id: str
    name: str
    category: str
    description: Optional[str] = None
    effectiveness: Optional[int] = None
    goal_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}

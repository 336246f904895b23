"""Pydantic schemas for goal and subgoal validation."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Literal

from practice.data.schemas import UpdateSchema


ImportanceLevel = Literal["high", "medium", "low"]


class GoalCreate(BaseModel):
    """Schema for creating a goal."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    importance_level: ImportanceLevel
    status: str = "in_progress"


class GoalUpdate(UpdateSchema):
    """Schema for updating a goal."""
    required_if_set = ("title", "description", "importance_level", "status")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    importance_level: Optional[ImportanceLevel] = None
    status: Optional[str] = None


class GoalResponse(BaseModel):
    """Schema for goal response."""
    id: str
    client_id: str
    title: str
    description: str
    importance_level: str
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SubgoalCreate(BaseModel):
    """Schema for creating a subgoal."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    status: Literal["pending", "in_progress", "complete", "completed"] = "pending"
    completion_date: Optional[datetime] = None


class SubgoalUpdate(UpdateSchema):
    """Schema for updating a subgoal."""
    required_if_set = ("title", "description", "status")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    status: Optional[Literal["pending", "in_progress", "complete", "completed"]] = None
    completion_date: Optional[datetime] = None


class SubgoalResponse(BaseModel):
    """Schema for subgoal response."""
    id: str
    goal_id: str
    title: str
    description: str
    status: str
    completion_date: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}

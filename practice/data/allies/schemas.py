"""Pydantic schemas for ally validation."""
from pydantic import BaseModel, Field, EmailStr, model_validator
from datetime import datetime
from typing import Optional

from practice.data.schemas import UpdateSchema


class AllyCreate(BaseModel):
    """Schema for creating an ally. At least one access permission is required."""
    name: str = Field(..., min_length=1, max_length=255)
    relationship: str = Field(..., min_length=1)
    preferred_language: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    notes: Optional[str] = None
    access_therapeutics: bool = False
    access_financials: bool = False

    @model_validator(mode="after")
    def require_some_access(self) -> "AllyCreate":
        if not (self.access_therapeutics or self.access_financials):
            raise ValueError("Select at least one access permission")
        return self


class AllyUpdate(UpdateSchema):
    """Schema for updating an ally."""
    required_if_set = (
        "name", "relationship", "preferred_language", "email",
        "access_therapeutics", "access_financials",
    )

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    relationship: Optional[str] = Field(default=None, min_length=1)
    preferred_language: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    access_therapeutics: Optional[bool] = None
    access_financials: Optional[bool] = None


class AllyArchive(BaseModel):
    """Schema for archiving or restoring an ally."""
    archived: bool = Field(..., strict=True)


class AllyResponse(BaseModel):
    """Schema for ally response."""
    id: str
    client_id: str
    name: str
    relationship: str = Field(validation_alias="relationship_type")
    preferred_language: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    access_therapeutics: bool
    access_financials: bool
    archived: bool

    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

"""Pydantic schemas for client validation."""
from pydantic import BaseModel, Field, EmailStr, field_validator
from datetime import date, datetime
from typing import Optional, Literal
from decimal import Decimal

from practice.data.schemas import UpdateSchema


FundsManagement = Literal["Self-Managed", "Advisor-Managed", "Custodian-Managed"]


class ClientCreate(BaseModel):
    """Schema for creating a client."""
    name: str = Field(..., min_length=1, max_length=255)
    date_of_birth: date
    gender: Optional[str] = None
    preferred_language: Optional[str] = None

    # Contact
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None

    # Clinical background
    medical_history: Optional[str] = None
    communication_needs: Optional[str] = None
    therapy_preferences: Optional[str] = None

    # Funding
    funds_management: Optional[FundsManagement] = None
    ndis_funds: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)

    onboarding_status: Literal["incomplete", "complete"] = "incomplete"

    @field_validator("date_of_birth")
    @classmethod
    def date_of_birth_not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class ClientUpdate(UpdateSchema):
    """Schema for updating a client."""
    required_if_set = ("name", "date_of_birth", "ndis_funds", "onboarding_status")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    preferred_language: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None
    communication_needs: Optional[str] = None
    therapy_preferences: Optional[str] = None
    funds_management: Optional[FundsManagement] = None
    ndis_funds: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    onboarding_status: Optional[Literal["incomplete", "complete"]] = None

    @field_validator("date_of_birth")
    @classmethod
    def date_of_birth_not_in_future(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class ClientResponse(BaseModel):
    """Schema for client response."""
    id: str
    name: str
    original_name: Optional[str] = None
    unique_identifier: Optional[str] = None
    date_of_birth: date
    gender: Optional[str] = None
    preferred_language: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None
    communication_needs: Optional[str] = None
    therapy_preferences: Optional[str] = None
    funds_management: Optional[str] = None
    ndis_funds: Decimal
    onboarding_status: str

    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

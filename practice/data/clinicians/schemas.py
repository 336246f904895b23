"""Pydantic schemas for clinicians and client assignments."""
from pydantic import BaseModel, Field, EmailStr
from datetime import datetime
from typing import Optional, Literal


ClinicianRole = Literal["Primary Therapist", "Secondary Therapist", "Supervisor", "Support Staff"]


class ClinicianCreate(BaseModel):
    """Schema for creating a clinician."""
    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = None
    email: EmailStr
    specialization: Optional[str] = None
    active: bool = True
    notes: Optional[str] = None


class ClinicianResponse(BaseModel):
    """Schema for clinician response."""
    id: str
    name: str
    title: Optional[str] = None
    email: str
    specialization: Optional[str] = None
    active: bool
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ClientClinicianCreate(BaseModel):
    """Schema for assigning a clinician to a client."""
    clinician_id: str
    role: ClinicianRole
    notes: Optional[str] = None


class ClientClinicianResponse(BaseModel):
    """Schema for a client-clinician assignment, with the clinician inlined."""
    id: str
    client_id: str
    clinician_id: str
    role: str
    assigned_date: datetime
    notes: Optional[str] = None
    clinician: Optional[ClinicianResponse] = None

    model_config = {"from_attributes": True}

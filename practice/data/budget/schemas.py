"""Pydantic schemas for budget plans, items and the item catalog."""
from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime
from typing import Optional
from decimal import Decimal

from practice.data.schemas import UpdateSchema


# ============================================================================
# BUDGET SETTINGS (PLAN) SCHEMAS
# ============================================================================

class BudgetSettingsCreate(BaseModel):
    """Schema for creating a budget plan."""
    plan_serial_number: Optional[str] = None
    plan_code: Optional[str] = None
    is_active: bool = True
    ndis_funds: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    start_date: Optional[date] = None
    end_of_plan: Optional[date] = None


class BudgetSettingsUpdate(UpdateSchema):
    """Schema for updating a budget plan."""
    required_if_set = ("is_active", "ndis_funds")

    plan_serial_number: Optional[str] = None
    plan_code: Optional[str] = None
    is_active: Optional[bool] = None
    ndis_funds: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    start_date: Optional[date] = None
    end_of_plan: Optional[date] = None


class BudgetSettingsResponse(BaseModel):
    """Schema for budget plan response."""
    id: str
    client_id: str
    plan_serial_number: Optional[str] = None
    plan_code: Optional[str] = None
    is_active: bool
    ndis_funds: Decimal
    start_date: Optional[date] = None
    end_of_plan: Optional[date] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ============================================================================
# BUDGET ITEM SCHEMAS
# ============================================================================

class BudgetItemCreate(BaseModel):
    """Schema for adding a funded item to a plan."""
    item_code: str = Field(..., min_length=1)
    name: Optional[str] = None
    description: str = Field(..., min_length=1)
    unit_price: Decimal = Field(..., ge=Decimal("0.01"), decimal_places=2)
    quantity: int = Field(..., ge=1)
    used_quantity: int = Field(default=0, ge=0)
    category: Optional[str] = None
    budget_settings_id: Optional[str] = None  # Defaults to the active plan

    @model_validator(mode="after")
    def used_within_quantity(self) -> "BudgetItemCreate":
        if self.used_quantity > self.quantity:
            raise ValueError("Used quantity cannot exceed quantity")
        return self


class BudgetItemUpdate(UpdateSchema):
    """Schema for updating a budget item."""
    required_if_set = ("item_code", "description", "unit_price", "quantity", "used_quantity")

    item_code: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = None
    description: Optional[str] = Field(default=None, min_length=1)
    unit_price: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), decimal_places=2)
    quantity: Optional[int] = Field(default=None, ge=1)
    used_quantity: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None


class BudgetItemResponse(BaseModel):
    """Schema for budget item response."""
    id: str
    client_id: str
    budget_settings_id: str
    item_code: str
    name: Optional[str] = None
    description: str
    unit_price: Decimal
    quantity: int
    used_quantity: int
    category: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ============================================================================
# CATALOG SCHEMAS
# ============================================================================

class BudgetItemCatalogCreate(BaseModel):
    """Schema for a catalog entry."""
    item_code: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    default_unit_price: Decimal = Field(..., ge=Decimal("0.01"), decimal_places=2)
    category: Optional[str] = None
    is_active: bool = True


class BudgetItemCatalogUpdate(UpdateSchema):
    """Schema for updating a catalog entry."""
    required_if_set = ("description", "default_unit_price", "is_active")

    description: Optional[str] = Field(default=None, min_length=1)
    default_unit_price: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), decimal_places=2)
    category: Optional[str] = None
    is_active: Optional[bool] = None


class BudgetItemCatalogResponse(BaseModel):
    """Schema for catalog entry response."""
    id: str
    item_code: str
    description: str
    default_unit_price: Decimal
    category: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}

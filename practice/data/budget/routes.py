"""Budget plan, budget item and catalog API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import List

from practice.database import get_db
from practice.data import models
from practice.data.budget.schemas import (
    BudgetItemCatalogCreate,
    BudgetItemCatalogResponse,
    BudgetItemCatalogUpdate,
    BudgetItemCreate,
    BudgetItemResponse,
    BudgetItemUpdate,
    BudgetSettingsCreate,
    BudgetSettingsResponse,
    BudgetSettingsUpdate,
)
from practice.data.client_utils import get_active_plan, get_client_or_404

logger = logging.getLogger(__name__)

router = APIRouter()


async def _deactivate_other_plans(db: AsyncSession, client_id: str, keep_id: str | None = None):
    """Only one plan per client may be active."""
    query = (
        update(models.BudgetSettings)
        .where(
            models.BudgetSettings.client_id == client_id,
            models.BudgetSettings.is_active.is_(True),
        )
        .values(is_active=False)
    )
    if keep_id:
        query = query.where(models.BudgetSettings.id != keep_id)
    await db.execute(query)


# ============================================================================
# BUDGET SETTINGS ROUTES
# ============================================================================

@router.get("/clients/{client_id}/budget-settings", response_model=BudgetSettingsResponse)
async def get_budget_settings(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get the client's active budget plan."""
    await get_client_or_404(db, client_id)
    plan = await get_active_plan(db, client_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Budget settings not found")
    return plan


@router.get("/clients/{client_id}/budget-settings/all", response_model=List[BudgetSettingsResponse])
async def get_all_budget_settings(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get every plan of a client, newest first."""
    await get_client_or_404(db, client_id)
    result = await db.execute(
        select(models.BudgetSettings)
        .where(models.BudgetSettings.client_id == client_id)
        .order_by(models.BudgetSettings.created_at.desc())
    )
    return result.scalars().all()


@router.post("/clients/{client_id}/budget-settings", response_model=BudgetSettingsResponse, status_code=201)
async def create_budget_settings(
    client_id: str,
    data: BudgetSettingsCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a plan. A new active plan deactivates the previous one."""
    await get_client_or_404(db, client_id)

    if data.is_active:
        await _deactivate_other_plans(db, client_id)

    plan = models.BudgetSettings(client_id=client_id, **data.model_dump())
    db.add(plan)
    await db.commit()
    await db.refresh(plan)

    logger.info(f"Created budget plan {plan.id} for client {client_id}")
    return plan


@router.put("/budget-settings/{settings_id}", response_model=BudgetSettingsResponse)
async def update_budget_settings(
    settings_id: str,
    data: BudgetSettingsUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a plan. Activating it deactivates the client's other plans."""
    result = await db.execute(
        select(models.BudgetSettings).where(models.BudgetSettings.id == settings_id)
    )
    plan = result.scalar_one_or_none()
    if not plan:
        raise HTTPException(status_code=404, detail="Budget settings not found")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("is_active"):
        await _deactivate_other_plans(db, plan.client_id, keep_id=plan.id)

    for field, value in update_data.items():
        setattr(plan, field, value)

    await db.commit()
    await db.refresh(plan)
    return plan


# ============================================================================
# BUDGET ITEM ROUTES
# ============================================================================

@router.get("/clients/{client_id}/budget-items", response_model=List[BudgetItemResponse])
async def get_budget_items(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get all budget items of a client."""
    await get_client_or_404(db, client_id)
    result = await db.execute(
        select(models.BudgetItem)
        .where(models.BudgetItem.client_id == client_id)
        .order_by(models.BudgetItem.created_at)
    )
    return result.scalars().all()


@router.post("/clients/{client_id}/budget-items", response_model=BudgetItemResponse, status_code=201)
async def create_budget_item(
    client_id: str,
    data: BudgetItemCreate,
    db: AsyncSession = Depends(get_db)
):
    """Add an item to a plan (the active one unless budget_settings_id is given)."""
    await get_client_or_404(db, client_id)

    if data.budget_settings_id:
        result = await db.execute(
            select(models.BudgetSettings).where(
                models.BudgetSettings.id == data.budget_settings_id,
                models.BudgetSettings.client_id == client_id,
            )
        )
        plan = result.scalar_one_or_none()
    else:
        plan = await get_active_plan(db, client_id)

    if not plan:
        raise HTTPException(
            status_code=404,
            detail="Budget settings not found. Please create budget settings first."
        )

    item = models.BudgetItem(
        client_id=client_id,
        budget_settings_id=plan.id,
        **data.model_dump(exclude={"budget_settings_id"}),
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


@router.put("/budget-items/{item_id}", response_model=BudgetItemResponse)
async def update_budget_item(
    item_id: str,
    data: BudgetItemUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a budget item."""
    result = await db.execute(
        select(models.BudgetItem).where(models.BudgetItem.id == item_id)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Budget item not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(item, field, value)

    if item.quantity < item.used_quantity:
        raise HTTPException(
            status_code=400,
            detail=f"Quantity cannot be less than {item.used_quantity} unit(s) already used in sessions"
        )

    await db.commit()
    await db.refresh(item)
    return item


@router.delete("/budget-items/{item_id}")
async def delete_budget_item(
    item_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a budget item."""
    result = await db.execute(
        select(models.BudgetItem).where(models.BudgetItem.id == item_id)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Budget item not found")

    await db.delete(item)
    await db.commit()
    return {"message": "Budget item deleted successfully"}


# ============================================================================
# CATALOG ROUTES
# ============================================================================

@router.get("/budget-catalog", response_model=List[BudgetItemCatalogResponse])
async def get_catalog(
    active_only: bool = Query(default=False),
    db: AsyncSession = Depends(get_db)
):
    """Get catalog entries."""
    query = select(models.BudgetItemCatalog).order_by(models.BudgetItemCatalog.item_code)
    if active_only:
        query = query.where(models.BudgetItemCatalog.is_active.is_(True))
    result = await db.execute(query)
    return result.scalars().all()


@router.post("/budget-catalog", response_model=BudgetItemCatalogResponse, status_code=201)
async def create_catalog_item(
    data: BudgetItemCatalogCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a catalog entry. Item codes are unique."""
    result = await db.execute(
        select(models.BudgetItemCatalog).where(models.BudgetItemCatalog.item_code == data.item_code)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Item code already exists")

    entry = models.BudgetItemCatalog(**data.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


@router.get("/budget-catalog/{item_code}", response_model=BudgetItemCatalogResponse)
async def get_catalog_item(
    item_code: str,
    db: AsyncSession = Depends(get_db)
):
    """Look up a catalog entry by its item code."""
    result = await db.execute(
        select(models.BudgetItemCatalog).where(models.BudgetItemCatalog.item_code == item_code)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Catalog item not found")
    return entry


@router.put("/budget-catalog/{catalog_id}", response_model=BudgetItemCatalogResponse)
async def update_catalog_item(
    catalog_id: str,
    data: BudgetItemCatalogUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a catalog entry."""
    result = await db.execute(
        select(models.BudgetItemCatalog).where(models.BudgetItemCatalog.id == catalog_id)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(status_code=404, detail="Catalog item not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(entry, field, value)

    await db.commit()
    await db.refresh(entry)
    return entry

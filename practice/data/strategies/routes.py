"""Strategy API routes."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional

from practice.database import get_db
from practice.data import models
from practice.data.strategies.schemas import StrategyCreate, StrategyResponse

router = APIRouter()


@router.get("/strategies", response_model=List[StrategyResponse])
async def get_strategies(
    category: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db)
):
    """Get strategies, optionally filtered by category."""
    query = select(models.Strategy).order_by(models.Strategy.name)
    if category:
        query = query.where(models.Strategy.category == category)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/strategies/{strategy_id}", response_model=StrategyResponse)
async def get_strategy(
    strategy_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a single strategy."""
    result = await db.execute(
        select(models.Strategy).where(models.Strategy.id == strategy_id)
    )
    strategy = result.scalar_one_or_none()
    if not strategy:
        raise HTTPException(status_code=404, detail="Strategy not found")
    return strategy


@router.post("/strategies", response_model=StrategyResponse, status_code=201)
async def create_strategy(
    data: StrategyCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a strategy, optionally linked to a goal."""
    if data.goal_id:
        result = await db.execute(
            select(models.Goal.id).where(models.Goal.id == data.goal_id)
        )
        if result.scalar_one_or_none() is None:
            raise HTTPException(status_code=404, detail="Goal not found")

    strategy = models.Strategy(**data.model_dump())
    db.add(strategy)
    await db.commit()
    await db.refresh(strategy)
    return strategy

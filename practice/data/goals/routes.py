"""Goal and subgoal API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, update
from typing import List

from practice.config import settings
from practice.database import get_db
from practice.data import models
from practice.data.client_utils import delete_goal_records, get_client_or_404
from practice.data.goals.schemas import (
    GoalCreate,
    GoalResponse,
    GoalUpdate,
    SubgoalCreate,
    SubgoalResponse,
    SubgoalUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_goal_or_404(db: AsyncSession, goal_id: str) -> models.Goal:
    result = await db.execute(
        select(models.Goal).where(models.Goal.id == goal_id)
    )
    goal = result.scalar_one_or_none()
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


# ============================================================================
# GOAL ROUTES
# ============================================================================

@router.get("/clients/{client_id}/goals", response_model=List[GoalResponse])
async def get_goals(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get all goals of a client."""
    await get_client_or_404(db, client_id)
    result = await db.execute(
        select(models.Goal)
        .where(models.Goal.client_id == client_id)
        .order_by(models.Goal.created_at)
    )
    return result.scalars().all()


@router.post("/clients/{client_id}/goals", response_model=GoalResponse, status_code=201)
async def create_goal(
    client_id: str,
    data: GoalCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a goal, up to the configured limit per client."""
    await get_client_or_404(db, client_id)

    result = await db.execute(
        select(func.count(models.Goal.id)).where(models.Goal.client_id == client_id)
    )
    if (result.scalar() or 0) >= settings.MAX_GOALS_PER_CLIENT:
        raise HTTPException(
            status_code=409,
            detail=f"A client can have at most {settings.MAX_GOALS_PER_CLIENT} goals"
        )

    goal = models.Goal(client_id=client_id, **data.model_dump())
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal


@router.get("/goals/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a single goal."""
    return await _get_goal_or_404(db, goal_id)


@router.put("/goals/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: str,
    data: GoalUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a goal."""
    goal = await _get_goal_or_404(db, goal_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(goal, field, value)

    await db.commit()
    await db.refresh(goal)
    return goal


@router.delete("/goals/{goal_id}")
async def delete_goal(
    goal_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a goal together with its subgoals and their assessments."""
    await _get_goal_or_404(db, goal_id)

    await delete_goal_records(db, [goal_id])
    await db.commit()

    logger.info(f"Deleted goal {goal_id}")
    return {"message": "Goal deleted successfully"}


# ============================================================================
# SUBGOAL ROUTES
# ============================================================================

@router.get("/goals/{goal_id}/subgoals", response_model=List[SubgoalResponse])
async def get_subgoals(
    goal_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get the subgoals of a goal."""
    await _get_goal_or_404(db, goal_id)
    result = await db.execute(
        select(models.Subgoal)
        .where(models.Subgoal.goal_id == goal_id)
        .order_by(models.Subgoal.created_at)
    )
    return result.scalars().all()


@router.post("/goals/{goal_id}/subgoals", response_model=SubgoalResponse, status_code=201)
async def create_subgoal(
    goal_id: str,
    data: SubgoalCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a subgoal under a goal."""
    await _get_goal_or_404(db, goal_id)

    subgoal = models.Subgoal(goal_id=goal_id, **data.model_dump())
    db.add(subgoal)
    await db.commit()
    await db.refresh(subgoal)
    return subgoal


@router.put("/subgoals/{subgoal_id}", response_model=SubgoalResponse)
async def update_subgoal(
    subgoal_id: str,
    data: SubgoalUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a subgoal."""
    result = await db.execute(
        select(models.Subgoal).where(models.Subgoal.id == subgoal_id)
    )
    subgoal = result.scalar_one_or_none()
    if not subgoal:
        raise HTTPException(status_code=404, detail="Subgoal not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(subgoal, field, value)

    await db.commit()
    await db.refresh(subgoal)
    return subgoal


@router.delete("/subgoals/{subgoal_id}")
async def delete_subgoal(
    subgoal_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a subgoal and its milestone assessments."""
    result = await db.execute(
        select(models.Subgoal).where(models.Subgoal.id == subgoal_id)
    )
    subgoal = result.scalar_one_or_none()
    if not subgoal:
        raise HTTPException(status_code=404, detail="Subgoal not found")

    await db.execute(
        delete(models.MilestoneAssessment).where(models.MilestoneAssessment.milestone_id == subgoal_id)
    )
    await db.execute(
        update(models.GoalAssessment)
        .where(models.GoalAssessment.subgoal_id == subgoal_id)
        .values(subgoal_id=None)
    )
    await db.execute(
        delete(models.Subgoal).where(models.Subgoal.id == subgoal_id)
    )
    await db.commit()
    return {"message": "Subgoal deleted successfully"}

"""Ally API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update
from typing import List

from practice.config import settings
from practice.database import get_db
from practice.data import models
from practice.data.allies.schemas import AllyArchive, AllyCreate, AllyResponse, AllyUpdate
from practice.data.client_utils import get_client_or_404

logger = logging.getLogger(__name__)

router = APIRouter()


async def _count_active_allies(db: AsyncSession, client_id: str) -> int:
    result = await db.execute(
        select(func.count(models.Ally.id)).where(
            models.Ally.client_id == client_id,
            models.Ally.archived.is_(False),
        )
    )
    return result.scalar() or 0


async def _get_ally_or_404(db: AsyncSession, client_id: str, ally_id: str) -> models.Ally:
    result = await db.execute(
        select(models.Ally).where(
            models.Ally.id == ally_id,
            models.Ally.client_id == client_id,
        )
    )
    ally = result.scalar_one_or_none()
    if not ally:
        raise HTTPException(status_code=404, detail="Ally not found")
    return ally


@router.get("/clients/{client_id}/allies", response_model=List[AllyResponse])
async def get_allies(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get all allies of a client, archived ones included."""
    await get_client_or_404(db, client_id)
    result = await db.execute(
        select(models.Ally)
        .where(models.Ally.client_id == client_id)
        .order_by(models.Ally.created_at)
    )
    return result.scalars().all()


@router.post("/clients/{client_id}/allies", response_model=AllyResponse, status_code=201)
async def create_ally(
    client_id: str,
    data: AllyCreate,
    db: AsyncSession = Depends(get_db)
):
    """Add an ally to a client, up to the configured limit of active allies."""
    await get_client_or_404(db, client_id)

    if await _count_active_allies(db, client_id) >= settings.MAX_ALLIES_PER_CLIENT:
        raise HTTPException(
            status_code=409,
            detail=f"A client can have at most {settings.MAX_ALLIES_PER_CLIENT} active allies"
        )

    payload = data.model_dump(exclude={"relationship"})
    ally = models.Ally(
        client_id=client_id,
        relationship_type=data.relationship,
        **payload,
    )
    db.add(ally)
    await db.commit()
    await db.refresh(ally)
    return ally


@router.put("/clients/{client_id}/allies/{ally_id}", response_model=AllyResponse)
async def update_ally(
    client_id: str,
    ally_id: str,
    data: AllyUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update an ally."""
    ally = await _get_ally_or_404(db, client_id, ally_id)

    update_data = data.model_dump(exclude_unset=True)
    if "relationship" in update_data:
        update_data["relationship_type"] = update_data.pop("relationship")

    for field, value in update_data.items():
        setattr(ally, field, value)

    if not (ally.access_therapeutics or ally.access_financials):
        raise HTTPException(status_code=400, detail="Select at least one access permission")

    await db.commit()
    await db.refresh(ally)
    return ally


@router.put("/clients/{client_id}/allies/{ally_id}/archive", response_model=AllyResponse)
async def archive_ally(
    client_id: str,
    ally_id: str,
    data: AllyArchive,
    db: AsyncSession = Depends(get_db)
):
    """Archive or restore an ally."""
    archived = data.archived

    ally = await _get_ally_or_404(db, client_id, ally_id)

    # Restoring counts against the active-ally limit again
    if ally.archived and not archived:
        if await _count_active_allies(db, client_id) >= settings.MAX_ALLIES_PER_CLIENT:
            raise HTTPException(
                status_code=409,
                detail=f"A client can have at most {settings.MAX_ALLIES_PER_CLIENT} active allies"
            )

    ally.archived = archived
    await db.commit()
    await db.refresh(ally)
    return ally


@router.delete("/clients/{client_id}/allies/{ally_id}")
async def delete_ally(
    client_id: str,
    ally_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete an ally. Sessions they ran keep their record without a therapist."""
    ally = await _get_ally_or_404(db, client_id, ally_id)

    await db.execute(
        update(models.Session)
        .where(models.Session.therapist_id == ally_id)
        .values(therapist_id=None)
    )
    await db.delete(ally)
    await db.commit()

    logger.info(f"Deleted ally {ally_id} of client {client_id}")
    return {"message": "Ally deleted successfully"}

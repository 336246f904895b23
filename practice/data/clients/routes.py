"""Client API routes."""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from practice.database import get_db
from practice.data import models
from practice.data.client_utils import (
    delete_client_records,
    display_name,
    generate_unique_identifier,
    get_client_or_404,
)
from practice.data.clients.schemas import ClientCreate, ClientResponse, ClientUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/clients", response_model=List[ClientResponse])
async def get_clients(
    include_incomplete: bool = Query(default=False, description="Include clients still onboarding"),
    db: AsyncSession = Depends(get_db)
):
    """Get clients. Only onboarded clients unless include_incomplete is set."""
    query = select(models.Client).order_by(models.Client.created_at)
    if not include_incomplete:
        query = query.where(models.Client.onboarding_status == "complete")
    result = await db.execute(query)
    return result.scalars().all()


@router.post("/clients", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a client and assign its 6-digit identifier."""
    unique_identifier = await generate_unique_identifier(db)

    client = models.Client(
        **data.model_dump(exclude={"name"}),
        original_name=data.name,
        unique_identifier=unique_identifier,
        name=display_name(data.name, unique_identifier),
    )
    db.add(client)
    await db.commit()
    await db.refresh(client)

    logger.info(f"Created client {client.id}")
    return client


@router.get("/clients/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a single client."""
    return await get_client_or_404(db, client_id)


@router.put("/clients/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a client. A new name keeps the client's identifier suffix."""
    client = await get_client_or_404(db, client_id)

    update_data = data.model_dump(exclude_unset=True)
    new_name = update_data.pop("name", None)
    if new_name:
        client.original_name = new_name
        client.name = display_name(new_name, client.unique_identifier)

    for field, value in update_data.items():
        setattr(client, field, value)

    await db.commit()
    await db.refresh(client)
    return client


@router.post("/clients/{client_id}/complete-onboarding", response_model=ClientResponse)
async def complete_client_onboarding(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Mark a client's onboarding as complete."""
    client = await get_client_or_404(db, client_id)
    client.onboarding_status = "complete"

    await db.commit()
    await db.refresh(client)
    return client


@router.delete("/clients/{client_id}")
async def delete_client(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a client and all of its records."""
    await get_client_or_404(db, client_id)

    await delete_client_records(db, client_id)
    await db.commit()

    logger.info(f"Deleted client {client_id} and dependent records")
    return {"message": "Client deleted successfully"}

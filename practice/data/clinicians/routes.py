"""Clinician API routes."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from practice.database import get_db
from practice.data import models
from practice.data.client_utils import get_client_or_404
from practice.data.clinicians.schemas import (
    ClientClinicianCreate,
    ClientClinicianResponse,
    ClinicianCreate,
    ClinicianResponse,
)

router = APIRouter()


@router.get("/clinicians", response_model=List[ClinicianResponse])
async def get_clinicians(db: AsyncSession = Depends(get_db)):
    """Get all clinicians."""
    result = await db.execute(
        select(models.Clinician).order_by(models.Clinician.name)
    )
    return result.scalars().all()


@router.post("/clinicians", response_model=ClinicianResponse, status_code=201)
async def create_clinician(
    data: ClinicianCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a clinician."""
    clinician = models.Clinician(**data.model_dump())
    db.add(clinician)
    await db.commit()
    await db.refresh(clinician)
    return clinician


@router.get("/clients/{client_id}/clinicians", response_model=List[ClientClinicianResponse])
async def get_client_clinicians(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get the clinicians assigned to a client."""
    await get_client_or_404(db, client_id)
    result = await db.execute(
        select(models.ClientClinician, models.Clinician)
        .join(models.Clinician, models.Clinician.id == models.ClientClinician.clinician_id)
        .where(models.ClientClinician.client_id == client_id)
        .order_by(models.ClientClinician.assigned_date)
    )
    return [
        ClientClinicianResponse(
            **ClientClinicianResponse.model_validate(assignment).model_dump(exclude={"clinician"}),
            clinician=ClinicianResponse.model_validate(clinician),
        )
        for assignment, clinician in result.all()
    ]


@router.post("/clients/{client_id}/clinicians", response_model=ClientClinicianResponse, status_code=201)
async def assign_clinician(
    client_id: str,
    data: ClientClinicianCreate,
    db: AsyncSession = Depends(get_db)
):
    """Assign a clinician to a client."""
    await get_client_or_404(db, client_id)

    result = await db.execute(
        select(models.Clinician).where(models.Clinician.id == data.clinician_id)
    )
    clinician = result.scalar_one_or_none()
    if not clinician:
        raise HTTPException(status_code=404, detail="Clinician not found")

    result = await db.execute(
        select(models.ClientClinician.id).where(
            models.ClientClinician.client_id == client_id,
            models.ClientClinician.clinician_id == data.clinician_id,
        )
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Clinician already assigned to this client")

    assignment = models.ClientClinician(client_id=client_id, **data.model_dump())
    db.add(assignment)
    await db.commit()
    await db.refresh(assignment)

    return ClientClinicianResponse(
        **ClientClinicianResponse.model_validate(assignment).model_dump(exclude={"clinician"}),
        clinician=ClinicianResponse.model_validate(clinician),
    )


@router.delete("/client-clinicians/{assignment_id}")
async def remove_clinician_assignment(
    assignment_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Remove a clinician from a client."""
    result = await db.execute(
        select(models.ClientClinician).where(models.ClientClinician.id == assignment_id)
    )
    assignment = result.scalar_one_or_none()
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")

    await db.delete(assignment)
    await db.commit()
    return {"message": "Clinician assignment removed successfully"}

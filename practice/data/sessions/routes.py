"""Session, session note and assessment API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from typing import List, Optional

from practice.database import get_db
from practice.data import models
from practice.data.client_utils import delete_session_records, get_client_or_404
from practice.data.sessions.schemas import (
    GoalAssessmentCreate,
    GoalAssessmentFullCreate,
    GoalAssessmentResponse,
    GoalAssessmentUpdate,
    GoalAssessmentWithMilestones,
    MilestoneAssessmentCreate,
    MilestoneAssessmentResponse,
    MilestoneAssessmentUpdate,
    SessionCreate,
    SessionFullCreate,
    SessionFullResponse,
    SessionNoteComplete,
    SessionNoteCreate,
    SessionNoteResponse,
    SessionNoteUpdate,
    SessionResponse,
    SessionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# LOOKUPS AND VALIDATION
# ============================================================================

async def _get_session_or_404(db: AsyncSession, session_id: str) -> models.Session:
    result = await db.execute(
        select(models.Session).where(models.Session.id == session_id)
    )
    session = result.scalar_one_or_none()
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


async def _get_note_or_404(db: AsyncSession, note_id: str) -> models.SessionNote:
    result = await db.execute(
        select(models.SessionNote).where(models.SessionNote.id == note_id)
    )
    note = result.scalar_one_or_none()
    if not note:
        raise HTTPException(status_code=404, detail="Session note not found")
    return note


async def _get_assessment_or_404(db: AsyncSession, assessment_id: str) -> models.GoalAssessment:
    result = await db.execute(
        select(models.GoalAssessment).where(models.GoalAssessment.id == assessment_id)
    )
    assessment = result.scalar_one_or_none()
    if not assessment:
        raise HTTPException(status_code=404, detail="Performance assessment not found")
    return assessment


async def _validate_therapist(db: AsyncSession, client_id: str, therapist_id: Optional[str]):
    """A session's therapist must be one of the client's allies."""
    if not therapist_id:
        return
    result = await db.execute(
        select(models.Ally.id).where(
            models.Ally.id == therapist_id,
            models.Ally.client_id == client_id,
        )
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=400, detail="Therapist not found among client's allies")


async def _validate_goal(db: AsyncSession, client_id: str, goal_id: str, subgoal_id: Optional[str]):
    result = await db.execute(
        select(models.Goal.id).where(
            models.Goal.id == goal_id,
            models.Goal.client_id == client_id,
        )
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    if subgoal_id:
        await _validate_milestone(db, goal_id, subgoal_id)


async def _validate_milestone(db: AsyncSession, goal_id: str, milestone_id: str):
    result = await db.execute(
        select(models.Subgoal.id).where(
            models.Subgoal.id == milestone_id,
            models.Subgoal.goal_id == goal_id,
        )
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="Milestone not found")


async def _build_note_complete(db: AsyncSession, note: models.SessionNote) -> SessionNoteComplete:
    """Assemble a note with its assessments and their milestone ratings."""
    result = await db.execute(
        select(models.GoalAssessment)
        .where(models.GoalAssessment.session_note_id == note.id)
        .order_by(models.GoalAssessment.created_at)
    )
    assessments = result.scalars().all()

    milestones_by_assessment = {a.id: [] for a in assessments}
    if assessments:
        result = await db.execute(
            select(models.MilestoneAssessment)
            .where(models.MilestoneAssessment.goal_assessment_id.in_(list(milestones_by_assessment)))
            .order_by(models.MilestoneAssessment.created_at)
        )
        for milestone in result.scalars().all():
            milestones_by_assessment[milestone.goal_assessment_id].append(
                MilestoneAssessmentResponse.model_validate(milestone)
            )

    return SessionNoteComplete(
        **SessionNoteResponse.model_validate(note).model_dump(),
        performance_assessments=[
            GoalAssessmentWithMilestones(
                **GoalAssessmentResponse.model_validate(a).model_dump(),
                milestones=milestones_by_assessment[a.id],
            )
            for a in assessments
        ],
    )


# ============================================================================
# SESSION ROUTES
# ============================================================================

@router.get("/sessions", response_model=List[SessionResponse])
async def get_sessions(
    client_id: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db)
):
    """Get sessions, newest first, optionally for one client."""
    query = select(models.Session).order_by(models.Session.session_date.desc())
    if client_id:
        query = query.where(models.Session.client_id == client_id)
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/clients/{client_id}/sessions", response_model=List[SessionResponse])
async def get_client_sessions(
    client_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get all sessions of a client, newest first."""
    await get_client_or_404(db, client_id)
    result = await db.execute(
        select(models.Session)
        .where(models.Session.client_id == client_id)
        .order_by(models.Session.session_date.desc())
    )
    return result.scalars().all()


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    data: SessionCreate,
    db: AsyncSession = Depends(get_db)
):
    """Schedule a session for a client."""
    await get_client_or_404(db, data.client_id)
    await _validate_therapist(db, data.client_id, data.therapist_id)

    session = models.Session(**data.model_dump())
    db.add(session)
    await db.commit()
    await db.refresh(session)

    logger.info(f"Created session {session.id} for client {data.client_id}")
    return session


@router.post("/sessions/full", response_model=SessionFullResponse, status_code=201)
async def create_full_session(
    data: SessionFullCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a session, its note and all assessments in one transaction.

    Any failure rolls back everything, so a session is never left without the
    note or assessments that were submitted with it.
    """
    client_id = data.session.client_id
    try:
        await get_client_or_404(db, client_id)
        await _validate_therapist(db, client_id, data.session.therapist_id)

        session = models.Session(**data.session.model_dump())
        db.add(session)
        await db.flush()

        note = None
        if data.note is not None:
            note = models.SessionNote(
                session_id=session.id,
                client_id=client_id,
                **data.note.model_dump(mode="json"),
            )
            db.add(note)
            await db.flush()

            for assessment_data in data.assessments:
                await _validate_goal(db, client_id, assessment_data.goal_id, assessment_data.subgoal_id)
                assessment = models.GoalAssessment(
                    session_note_id=note.id,
                    **assessment_data.model_dump(exclude={"milestones"}),
                )
                db.add(assessment)
                await db.flush()

                for milestone_data in assessment_data.milestones:
                    await _validate_milestone(db, assessment_data.goal_id, milestone_data.milestone_id)
                    db.add(models.MilestoneAssessment(
                        goal_assessment_id=assessment.id,
                        **milestone_data.model_dump(),
                    ))
        elif data.assessments:
            raise HTTPException(status_code=400, detail="Assessments require a session note")

        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning(f"Rolled back full session creation for client {client_id}")
        raise

    await db.refresh(session)
    note_complete = None
    if note is not None:
        await db.refresh(note)
        note_complete = await _build_note_complete(db, note)

    logger.info(
        f"Created session {session.id} with {len(data.assessments)} assessments for client {client_id}"
    )
    return SessionFullResponse(
        session=SessionResponse.model_validate(session),
        note=note_complete,
    )


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a single session."""
    return await _get_session_or_404(db, session_id)


@router.put("/sessions/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    data: SessionUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a session."""
    session = await _get_session_or_404(db, session_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("therapist_id"):
        await _validate_therapist(db, session.client_id, update_data["therapist_id"])

    for field, value in update_data.items():
        setattr(session, field, value)

    await db.commit()
    await db.refresh(session)
    return session


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a session with its note and assessments."""
    await _get_session_or_404(db, session_id)

    await delete_session_records(db, [session_id])
    await db.commit()
    return {"message": "Session deleted successfully"}


# ============================================================================
# SESSION NOTE ROUTES
# ============================================================================

@router.post("/sessions/{session_id}/notes", response_model=SessionNoteResponse, status_code=201)
async def create_session_note(
    session_id: str,
    data: SessionNoteCreate,
    db: AsyncSession = Depends(get_db)
):
    """Record the note for a session. A session has at most one note."""
    session = await _get_session_or_404(db, session_id)

    result = await db.execute(
        select(models.SessionNote.id).where(models.SessionNote.session_id == session_id)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Session already has a note")

    note = models.SessionNote(
        session_id=session_id,
        client_id=session.client_id,
        **data.model_dump(mode="json"),
    )
    db.add(note)
    await db.commit()
    await db.refresh(note)
    return note


@router.get("/sessions/{session_id}/notes", response_model=SessionNoteResponse)
async def get_session_note(
    session_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get the note of a session."""
    result = await db.execute(
        select(models.SessionNote).where(models.SessionNote.session_id == session_id)
    )
    note = result.scalar_one_or_none()
    if not note:
        raise HTTPException(status_code=404, detail="Session note not found")
    return note


@router.get("/sessions/{session_id}/notes/complete", response_model=SessionNoteComplete)
async def get_complete_session_note(
    session_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get a session's note with performance assessments and milestones."""
    result = await db.execute(
        select(models.SessionNote).where(models.SessionNote.session_id == session_id)
    )
    note = result.scalar_one_or_none()
    if not note:
        raise HTTPException(status_code=404, detail="Session note not found")
    return await _build_note_complete(db, note)


@router.put("/session-notes/{note_id}", response_model=SessionNoteResponse)
async def update_session_note(
    note_id: str,
    data: SessionNoteUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a session note."""
    note = await _get_note_or_404(db, note_id)

    for field, value in data.model_dump(mode="json", exclude_unset=True).items():
        setattr(note, field, value)

    await db.commit()
    await db.refresh(note)
    return note


@router.delete("/session-notes/{note_id}")
async def delete_session_note(
    note_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a session note and its assessments."""
    await _get_note_or_404(db, note_id)

    assessment_ids = select(models.GoalAssessment.id).where(
        models.GoalAssessment.session_note_id == note_id
    )
    await db.execute(
        delete(models.MilestoneAssessment).where(
            models.MilestoneAssessment.goal_assessment_id.in_(assessment_ids)
        )
    )
    await db.execute(
        delete(models.GoalAssessment).where(models.GoalAssessment.session_note_id == note_id)
    )
    await db.execute(
        delete(models.SessionNote).where(models.SessionNote.id == note_id)
    )
    await db.commit()
    return {"message": "Session note deleted successfully"}


# ============================================================================
# PERFORMANCE ASSESSMENT ROUTES
# ============================================================================

@router.post(
    "/session-notes/{note_id}/performance",
    response_model=GoalAssessmentResponse,
    status_code=201,
)
async def create_performance_assessment(
    note_id: str,
    data: GoalAssessmentCreate,
    db: AsyncSession = Depends(get_db)
):
    """Assess performance against one of the client's goals."""
    note = await _get_note_or_404(db, note_id)
    await _validate_goal(db, note.client_id, data.goal_id, data.subgoal_id)

    assessment = models.GoalAssessment(session_note_id=note_id, **data.model_dump())
    db.add(assessment)
    await db.commit()
    await db.refresh(assessment)
    return assessment


@router.get("/session-notes/{note_id}/performance", response_model=List[GoalAssessmentResponse])
async def get_performance_assessments(
    note_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get the performance assessments of a note."""
    await _get_note_or_404(db, note_id)
    result = await db.execute(
        select(models.GoalAssessment)
        .where(models.GoalAssessment.session_note_id == note_id)
        .order_by(models.GoalAssessment.created_at)
    )
    return result.scalars().all()


@router.put("/performance-assessments/{assessment_id}", response_model=GoalAssessmentResponse)
async def update_performance_assessment(
    assessment_id: str,
    data: GoalAssessmentUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a performance assessment."""
    assessment = await _get_assessment_or_404(db, assessment_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("subgoal_id"):
        await _validate_milestone(db, assessment.goal_id, update_data["subgoal_id"])

    for field, value in update_data.items():
        setattr(assessment, field, value)

    await db.commit()
    await db.refresh(assessment)
    return assessment


@router.delete("/performance-assessments/{assessment_id}")
async def delete_performance_assessment(
    assessment_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a performance assessment and its milestone ratings."""
    await _get_assessment_or_404(db, assessment_id)

    await db.execute(
        delete(models.MilestoneAssessment).where(
            models.MilestoneAssessment.goal_assessment_id == assessment_id
        )
    )
    await db.execute(
        delete(models.GoalAssessment).where(models.GoalAssessment.id == assessment_id)
    )
    await db.commit()
    return {"message": "Performance assessment deleted successfully"}


# ============================================================================
# MILESTONE ASSESSMENT ROUTES
# ============================================================================

@router.post(
    "/performance-assessments/{assessment_id}/milestones",
    response_model=MilestoneAssessmentResponse,
    status_code=201,
)
async def create_milestone_assessment(
    assessment_id: str,
    data: MilestoneAssessmentCreate,
    db: AsyncSession = Depends(get_db)
):
    """Rate a milestone of the assessed goal."""
    assessment = await _get_assessment_or_404(db, assessment_id)
    await _validate_milestone(db, assessment.goal_id, data.milestone_id)

    milestone = models.MilestoneAssessment(goal_assessment_id=assessment_id, **data.model_dump())
    db.add(milestone)
    await db.commit()
    await db.refresh(milestone)
    return milestone


@router.get(
    "/performance-assessments/{assessment_id}/milestones",
    response_model=List[MilestoneAssessmentResponse],
)
async def get_milestone_assessments(
    assessment_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Get the milestone ratings of an assessment."""
    await _get_assessment_or_404(db, assessment_id)
    result = await db.execute(
        select(models.MilestoneAssessment)
        .where(models.MilestoneAssessment.goal_assessment_id == assessment_id)
        .order_by(models.MilestoneAssessment.created_at)
    )
    return result.scalars().all()


@router.put("/milestone-assessments/{milestone_assessment_id}", response_model=MilestoneAssessmentResponse)
async def update_milestone_assessment(
    milestone_assessment_id: str,
    data: MilestoneAssessmentUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update a milestone rating."""
    result = await db.execute(
        select(models.MilestoneAssessment).where(models.MilestoneAssessment.id == milestone_assessment_id)
    )
    milestone = result.scalar_one_or_none()
    if not milestone:
        raise HTTPException(status_code=404, detail="Milestone assessment not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(milestone, field, value)

    await db.commit()
    await db.refresh(milestone)
    return milestone


@router.delete("/milestone-assessments/{milestone_assessment_id}")
async def delete_milestone_assessment(
    milestone_assessment_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete a milestone rating."""
    result = await db.execute(
        select(models.MilestoneAssessment).where(models.MilestoneAssessment.id == milestone_assessment_id)
    )
    milestone = result.scalar_one_or_none()
    if not milestone:
        raise HTTPException(status_code=404, detail="Milestone assessment not found")

    await db.delete(milestone)
    await db.commit()
    return {"message": "Milestone assessment deleted successfully"}

"""
Client utility functions shared by the entity routes.

Lookups that every nested resource needs (a client must exist before its goals,
allies, plans or sessions can be touched) and the ordered delete of a client's
records.
"""
import secrets

from fastapi import HTTPException
from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from practice.data import models


async def generate_unique_identifier(db: AsyncSession) -> str:
    """Pick a 6-digit identifier not yet used by another client."""
    while True:
        candidate = str(100000 + secrets.randbelow(900000))
        result = await db.execute(
            select(models.Client.id).where(models.Client.unique_identifier == candidate)
        )
        if result.scalar_one_or_none() is None:
            return candidate


def display_name(original_name: str, unique_identifier: str | None) -> str:
    """Client display name, "<name>-<identifier>"."""
    if not unique_identifier:
        return original_name
    return f"{original_name}-{unique_identifier}"


async def get_client_or_404(db: AsyncSession, client_id: str) -> models.Client:
    """Load a client or raise 404."""
    result = await db.execute(
        select(models.Client).where(models.Client.id == client_id)
    )
    client = result.scalar_one_or_none()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


async def get_active_plan(db: AsyncSession, client_id: str) -> models.BudgetSettings | None:
    """Return the client's active budget plan, if any."""
    result = await db.execute(
        select(models.BudgetSettings)
        .where(
            models.BudgetSettings.client_id == client_id,
            models.BudgetSettings.is_active.is_(True),
        )
        .order_by(models.BudgetSettings.created_at.desc())
    )
    return result.scalars().first()


async def delete_goal_records(db: AsyncSession, goal_ids) -> None:
    """
    Delete goals with their subgoals and the assessments that reference them.

    `goal_ids` may be a list or a select of ids. Does not commit.
    """
    subgoal_ids = select(models.Subgoal.id).where(models.Subgoal.goal_id.in_(goal_ids))
    assessment_ids = select(models.GoalAssessment.id).where(
        models.GoalAssessment.goal_id.in_(goal_ids)
    )

    await db.execute(
        delete(models.MilestoneAssessment).where(
            models.MilestoneAssessment.goal_assessment_id.in_(assessment_ids)
        )
    )
    await db.execute(
        delete(models.MilestoneAssessment).where(
            models.MilestoneAssessment.milestone_id.in_(subgoal_ids)
        )
    )
    await db.execute(
        delete(models.GoalAssessment).where(models.GoalAssessment.goal_id.in_(goal_ids))
    )
    await db.execute(
        update(models.Strategy)
        .where(models.Strategy.goal_id.in_(goal_ids))
        .values(goal_id=None)
    )
    await db.execute(
        delete(models.Subgoal).where(models.Subgoal.goal_id.in_(goal_ids))
    )
    await db.execute(
        delete(models.Goal).where(models.Goal.id.in_(goal_ids))
    )


async def delete_session_records(db: AsyncSession, session_ids) -> None:
    """Delete sessions with their notes and assessments. Does not commit."""
    note_ids = select(models.SessionNote.id).where(models.SessionNote.session_id.in_(session_ids))
    assessment_ids = select(models.GoalAssessment.id).where(
        models.GoalAssessment.session_note_id.in_(note_ids)
    )

    await db.execute(
        delete(models.MilestoneAssessment).where(
            models.MilestoneAssessment.goal_assessment_id.in_(assessment_ids)
        )
    )
    await db.execute(
        delete(models.GoalAssessment).where(models.GoalAssessment.session_note_id.in_(note_ids))
    )
    await db.execute(
        delete(models.SessionNote).where(models.SessionNote.session_id.in_(session_ids))
    )
    await db.execute(
        delete(models.Session).where(models.Session.id.in_(session_ids))
    )


async def delete_client_records(db: AsyncSession, client_id: str) -> None:
    """
    Delete everything that belongs to a client, children before parents.

    Does not commit; the caller owns the transaction.
    """
    await delete_session_records(
        db, select(models.Session.id).where(models.Session.client_id == client_id)
    )
    # Notes are keyed by client as well as session
    await db.execute(
        delete(models.SessionNote).where(models.SessionNote.client_id == client_id)
    )
    goal_ids = [
        row[0] for row in (
            await db.execute(select(models.Goal.id).where(models.Goal.client_id == client_id))
        ).fetchall()
    ]
    if goal_ids:
        await delete_goal_records(db, goal_ids)

    await db.execute(
        delete(models.Ally).where(models.Ally.client_id == client_id)
    )
    await db.execute(
        delete(models.BudgetItem).where(models.BudgetItem.client_id == client_id)
    )
    await db.execute(
        delete(models.BudgetSettings).where(models.BudgetSettings.client_id == client_id)
    )
    await db.execute(
        delete(models.ClientClinician).where(models.ClientClinician.client_id == client_id)
    )
    await db.execute(
        delete(models.Client).where(models.Client.id == client_id)
    )

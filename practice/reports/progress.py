"""Progress analysis: attendance and goal completion for a client."""
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practice.data.models import Goal, MilestoneAssessment, Session, Subgoal

COMPLETED_RATING = 4
COMPLETED_SUBGOAL_STATUSES = ("complete", "completed")


def calculate_attendance(sessions: Sequence[Session]) -> Dict[str, Any]:
    """
    Attendance over sessions that were held or cancelled.

    Completed and billed sessions count as attended. Drafts are not counted.
    """
    completed = sum(1 for s in sessions if s.status in ("completed", "billed"))
    cancelled = sum(1 for s in sessions if s.status == "cancelled")
    scheduled = completed + cancelled

    return {
        "sessions_completed": completed,
        "sessions_cancelled": cancelled,
        "attendance_rate": round(completed / scheduled * 100, 1) if scheduled else 0.0,
    }


def latest_ratings(milestone_assessments: Sequence[MilestoneAssessment]) -> Dict[str, Optional[int]]:
    """Most recent rating per milestone (subgoal) id."""
    latest: Dict[str, MilestoneAssessment] = {}
    for assessment in milestone_assessments:
        current = latest.get(assessment.milestone_id)
        if current is None or assessment.created_at >= current.created_at:
            latest[assessment.milestone_id] = assessment
    return {milestone_id: a.rating for milestone_id, a in latest.items()}


def is_subgoal_completed(subgoal: Subgoal, rating: Optional[int]) -> bool:
    if rating is not None and rating >= COMPLETED_RATING:
        return True
    return (subgoal.status or "").lower() in COMPLETED_SUBGOAL_STATUSES


def calculate_goal_progress(
    goals: Sequence[Goal],
    subgoals: Sequence[Subgoal],
    ratings: Dict[str, Optional[int]],
) -> List[Dict[str, Any]]:
    """Share of completed subgoals per goal, with milestone detail."""
    subgoals_by_goal: Dict[str, List[Subgoal]] = {}
    for subgoal in subgoals:
        subgoals_by_goal.setdefault(subgoal.goal_id, []).append(subgoal)

    progress = []
    for goal in goals:
        milestones = [
            {
                "milestone_id": subgoal.id,
                "title": subgoal.title,
                "latest_rating": ratings.get(subgoal.id),
                "completed": is_subgoal_completed(subgoal, ratings.get(subgoal.id)),
            }
            for subgoal in subgoals_by_goal.get(goal.id, [])
        ]
        completed = sum(1 for m in milestones if m["completed"])
        progress.append({
            "goal_id": goal.id,
            "goal_title": goal.title,
            "progress": round(completed / len(milestones) * 100, 1) if milestones else 0.0,
            "milestones": milestones,
        })
    return progress


def progress_assessment(progress: float) -> str:
    """Qualitative wording for a progress percentage."""
    if progress >= 90:
        return "Excellent progress has been made!"
    if progress >= 75:
        return "Very good progress has been made."
    if progress >= 50:
        return "Good progress is being made."
    if progress >= 25:
        return "Some progress has been made, but there's room for improvement."
    return "Progress has been limited. Additional interventions may be needed."


def overall_assessment(progress: float, attendance: float) -> str:
    """Advice combining overall progress and attendance."""
    if progress < 30 and attendance < 70:
        return (
            "Low attendance may be impacting progress. "
            "Consider discussing attendance challenges with the client."
        )
    if progress < 30:
        return "Despite good attendance, progress has been limited. Consider reviewing the therapy approach."
    if progress >= 70 and attendance >= 80:
        return "Excellent progress and attendance! The current therapy approach is working well."
    if progress >= 50:
        return "Good progress is being made on the established goals."
    return "Progress is ongoing. Regular reassessment of goals and strategies may be beneficial."


def build_progress_analysis(
    sessions: Sequence[Session],
    goals: Sequence[Goal],
    subgoals: Sequence[Subgoal],
    milestone_assessments: Sequence[MilestoneAssessment],
) -> Dict[str, Any]:
    attendance = calculate_attendance(sessions)
    goal_progress = calculate_goal_progress(goals, subgoals, latest_ratings(milestone_assessments))

    overall = (
        round(sum(g["progress"] for g in goal_progress) / len(goal_progress), 1)
        if goal_progress else 0.0
    )

    return {
        **attendance,
        "overall_progress": overall,
        "goal_progress": goal_progress,
        "progress_assessment": progress_assessment(overall),
        "overall_assessment": overall_assessment(overall, attendance["attendance_rate"]),
    }


async def get_progress_analysis(db: AsyncSession, client_id: str) -> Dict[str, Any]:
    """Load a client's sessions, goals and milestone ratings and analyse them."""
    result = await db.execute(
        select(Session).where(Session.client_id == client_id)
    )
    sessions = result.scalars().all()

    result = await db.execute(
        select(Goal).where(Goal.client_id == client_id).order_by(Goal.created_at)
    )
    goals = result.scalars().all()
    goal_ids = [goal.id for goal in goals]

    subgoals = []
    milestone_assessments = []
    if goal_ids:
        result = await db.execute(
            select(Subgoal).where(Subgoal.goal_id.in_(goal_ids)).order_by(Subgoal.created_at)
        )
        subgoals = result.scalars().all()

    if subgoals:
        result = await db.execute(
            select(MilestoneAssessment)
            .where(MilestoneAssessment.milestone_id.in_([s.id for s in subgoals]))
            .order_by(MilestoneAssessment.created_at)
        )
        milestone_assessments = result.scalars().all()

    return build_progress_analysis(sessions, goals, subgoals, milestone_assessments)

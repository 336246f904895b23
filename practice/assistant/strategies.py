"""Therapy strategy recommendations.

Ranks the strategy library for each of a client's goals. Low-progress goals
favour foundational strategies, high-progress goals favour advanced ones, and
strategies suited to the client's age group move up. All sorts are stable, so
ties keep library order.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practice.data.models import Client, Goal, Strategy
from practice.reports.comparison import calculate_age
from practice.reports.progress import get_progress_analysis

GENERAL_APPROACHES = "General Approaches"
STRATEGIES_PER_GOAL = 5
GENERAL_STRATEGY_COUNT = 3

LOW_PROGRESS = 30
HIGH_PROGRESS = 70

FOUNDATIONAL_CATEGORIES = ("Foundational", "Basic")
FOUNDATIONAL_TERMS = ["basic", "foundational", "beginner", "initial", "first step"]

ADVANCED_CATEGORIES = ("Advanced", "Expert")
ADVANCED_TERMS = ["advanced", "expert", "sophisticated", "complex", "next step"]

AGE_GROUP_TERMS: Dict[str, List[str]] = {
    "early_childhood": ["toddler", "preschool", "early childhood", "young child", "pediatric"],
    "child": ["child", "elementary", "school-age", "pediatric"],
    "adolescent": ["adolescent", "teen", "teenage", "youth", "high school"],
    "adult": ["adult", "mature", "elder", "professional", "workplace"],
}


def age_group(age: Optional[int]) -> Optional[str]:
    if age is None:
        return None
    if age < 5:
        return "early_childhood"
    if age < 12:
        return "child"
    if age < 18:
        return "adolescent"
    return "adult"


def _description(strategy: Strategy) -> str:
    return (strategy.description or "").lower()


def is_general(strategy: Strategy) -> bool:
    if strategy.category in ("General", "Foundational"):
        return True
    text = _description(strategy)
    return "general approach" in text or "widely applicable" in text


def is_foundational(strategy: Strategy) -> bool:
    if strategy.category in FOUNDATIONAL_CATEGORIES:
        return True
    return any(term in _description(strategy) for term in FOUNDATIONAL_TERMS)


def is_advanced(strategy: Strategy) -> bool:
    if strategy.category in ADVANCED_CATEGORIES:
        return True
    return any(term in _description(strategy) for term in ADVANCED_TERMS)


def suits_age_group(strategy: Strategy, group: str) -> bool:
    text = _description(strategy)
    category = (strategy.category or "").lower()
    return any(term in text or term in category for term in AGE_GROUP_TERMS[group])


def prioritize_for_progress(strategies: Sequence[Strategy], progress: Optional[float]) -> List[Strategy]:
    """Foundational first below 30% progress, advanced first above 70%."""
    if progress is None:
        return list(strategies)
    if progress < LOW_PROGRESS:
        return sorted(strategies, key=lambda s: not is_foundational(s))
    if progress > HIGH_PROGRESS:
        return sorted(strategies, key=lambda s: not is_advanced(s))
    return list(strategies)


def personalize_for_client(
    strategies: Sequence[Strategy],
    age: Optional[int],
    preferred_language: Optional[str] = None,
) -> List[Strategy]:
    """Move age-appropriate strategies (and ones mentioning the client's language) up."""
    group = age_group(age)
    language = (preferred_language or "").lower()

    def score(strategy: Strategy) -> int:
        points = 0
        if group and suits_age_group(strategy, group):
            points += 3
        if language and language in _description(strategy):
            points += 2
        return points

    return sorted(strategies, key=score, reverse=True)


def recommend_strategies(
    goals: Sequence[Goal],
    strategies: Sequence[Strategy],
    progress_by_goal: Dict[str, float],
    age: Optional[int] = None,
    preferred_language: Optional[str] = None,
) -> Dict[str, List[Strategy]]:
    """
    Top strategies per goal title, plus a "General Approaches" bucket.

    A goal draws from the strategies linked to it, or from the whole library
    when none are linked.
    """
    if not goals:
        return {}

    recommendations: Dict[str, List[Strategy]] = {}
    for goal in goals:
        linked = [s for s in strategies if s.goal_id == goal.id]
        candidates = linked or list(strategies)
        ranked = prioritize_for_progress(candidates, progress_by_goal.get(goal.id))
        ranked = personalize_for_client(ranked, age, preferred_language)
        recommendations[goal.title] = ranked[:STRATEGIES_PER_GOAL]

    general = [s for s in strategies if is_general(s)]
    if general:
        recommendations[GENERAL_APPROACHES] = general[:GENERAL_STRATEGY_COUNT]

    return recommendations


def serialize_strategy(strategy: Strategy) -> Dict[str, Any]:
    return {
        "id": strategy.id,
        "name": strategy.name,
        "category": strategy.category,
        "description": strategy.description,
        "effectiveness": strategy.effectiveness,
    }


async def get_all_strategies(db: AsyncSession) -> List[Strategy]:
    result = await db.execute(select(Strategy).order_by(Strategy.created_at, Strategy.name))
    return list(result.scalars().all())


async def get_strategies_for_goal(db: AsyncSession, goal_id: str) -> List[Strategy]:
    """Strategies for one goal: linked ones, else the whole library."""
    strategies = await get_all_strategies(db)
    linked = [s for s in strategies if s.goal_id == goal_id]
    return linked or strategies


async def get_client_recommendations(
    db: AsyncSession,
    client_id: str,
    today: Optional[date] = None,
) -> Dict[str, List[Strategy]]:
    """Recommendations for each of a client's goals."""
    result = await db.execute(select(Client).where(Client.id == client_id))
    client = result.scalar_one_or_none()
    if client is None:
        return {}

    result = await db.execute(
        select(Goal).where(Goal.client_id == client_id).order_by(Goal.created_at)
    )
    goals = result.scalars().all()
    if not goals:
        return {}

    progress = await get_progress_analysis(db, client_id)
    progress_by_goal = {g["goal_id"]: g["progress"] for g in progress["goal_progress"]}

    return recommend_strategies(
        goals,
        await get_all_strategies(db),
        progress_by_goal,
        age=calculate_age(client.date_of_birth, today or date.today()),
        preferred_language=client.preferred_language,
    )

"""Assistant intent classification.

Keyword classification of free-text questions into one of four intents, with
an optional sub-category. Matching is a lowercase substring test against fixed
term lists, checked in priority order: budget, progress, strategy, general.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class Intent(str, Enum):
    """Question categories the assistant can answer."""
    BUDGET_ANALYSIS = "BUDGET_ANALYSIS"
    PROGRESS_TRACKING = "PROGRESS_TRACKING"
    STRATEGY_RECOMMENDATION = "STRATEGY_RECOMMENDATION"
    GENERAL_QUESTION = "GENERAL_QUESTION"


class SubCategory(str, Enum):
    """Narrower question types within an intent."""
    # Budget
    REMAINING = "REMAINING"
    FORECAST = "FORECAST"
    UTILIZATION = "UTILIZATION"

    # Progress
    ATTENDANCE = "ATTENDANCE"

    # Progress and strategy
    GOAL_SPECIFIC = "GOAL_SPECIFIC"

    # Strategy
    GENERAL = "GENERAL"


BUDGET_TERMS = [
    "budget", "funds", "money", "spending", "cost", "expense", "financial",
    "allocation", "remaining", "balance", "plan", "available", "afford",
]

BUDGET_REMAINING_TERMS = [
    "remaining", "left", "available", "balance", "how much", "current",
]

BUDGET_FORECAST_TERMS = [
    "forecast", "prediction", "estimate", "projected", "when", "depletion",
    "run out", "exhaust", "future",
]

BUDGET_UTILIZATION_TERMS = [
    "utilization", "usage", "spent", "spending", "used", "allocation", "category",
]

PROGRESS_TERMS = [
    "progress", "improvement", "growth", "development", "advancement",
    "achievement", "goal", "milestone", "performance", "assessment",
]

PROGRESS_ATTENDANCE_TERMS = ["attendance", "cancel", "missed", "show up"]

STRATEGY_TERMS = [
    "strategy", "approach", "technique", "method", "recommendation", "suggest",
    "idea", "advice", "therapy", "intervention", "activity", "exercise",
]

# Topics a general question can be about
GENERAL_TOPICS = [
    "session planning", "report writing", "billing", "autism",
    "child development", "speech therapy", "occupational therapy",
]


@dataclass
class QueryIntent:
    """Result of classifying one query."""
    type: Intent
    sub_category: Optional[SubCategory] = None
    client_id: Optional[str] = None
    goal_id: Optional[str] = None
    topic: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "sub_category": self.sub_category.value if self.sub_category else None,
            "client_id": self.client_id,
            "goal_id": self.goal_id,
            "topic": self.topic,
        }


def contains_any(text: str, terms: Sequence[str]) -> bool:
    return any(term in text for term in terms)


def classify_query(query: str, context: Optional[Dict[str, Any]] = None) -> QueryIntent:
    """
    Classify a question.

    Args:
        query: The user's question
        context: Optional {"active_client_id", "active_goal_id"}

    Returns:
        QueryIntent carrying the context's client (and goal) ids
    """
    context = context or {}
    text = query.lower()
    client_id = context.get("active_client_id")
    goal_id = context.get("active_goal_id")

    if contains_any(text, BUDGET_TERMS):
        sub_category = None
        if contains_any(text, BUDGET_REMAINING_TERMS):
            sub_category = SubCategory.REMAINING
        elif contains_any(text, BUDGET_FORECAST_TERMS):
            sub_category = SubCategory.FORECAST
        elif contains_any(text, BUDGET_UTILIZATION_TERMS):
            sub_category = SubCategory.UTILIZATION
        return QueryIntent(Intent.BUDGET_ANALYSIS, sub_category, client_id=client_id)

    if contains_any(text, PROGRESS_TERMS) or contains_any(text, PROGRESS_ATTENDANCE_TERMS):
        sub_category = None
        if contains_any(text, PROGRESS_ATTENDANCE_TERMS):
            sub_category = SubCategory.ATTENDANCE
        elif goal_id:
            sub_category = SubCategory.GOAL_SPECIFIC
        return QueryIntent(Intent.PROGRESS_TRACKING, sub_category, client_id=client_id, goal_id=goal_id)

    if contains_any(text, STRATEGY_TERMS):
        sub_category = SubCategory.GOAL_SPECIFIC if goal_id else SubCategory.GENERAL
        return QueryIntent(Intent.STRATEGY_RECOMMENDATION, sub_category, client_id=client_id, goal_id=goal_id)

    topic = next((t for t in GENERAL_TOPICS if t in text), None)
    return QueryIntent(Intent.GENERAL_QUESTION, topic=topic)


def needs_client_context(intent: QueryIntent) -> bool:
    """Budget and progress questions, and goal-specific strategy questions, need a client."""
    if intent.type in (Intent.BUDGET_ANALYSIS, Intent.PROGRESS_TRACKING):
        return True
    return intent.type == Intent.STRATEGY_RECOMMENDATION and intent.sub_category != SubCategory.GENERAL


def get_intent_description(intent: QueryIntent) -> str:
    """Human-readable description of what the user asked for."""
    descriptions = {
        Intent.BUDGET_ANALYSIS: "budget analysis",
        Intent.PROGRESS_TRACKING: "progress tracking",
        Intent.STRATEGY_RECOMMENDATION: "therapy strategy recommendations",
    }
    if intent.type == Intent.GENERAL_QUESTION:
        return f"information about {intent.topic}" if intent.topic else "general information"
    return descriptions.get(intent.type, "information")


def matched_terms(query: str) -> List[str]:
    """All classifier terms found in a query, for debugging classifications."""
    text = query.lower()
    all_terms = BUDGET_TERMS + PROGRESS_TERMS + PROGRESS_ATTENDANCE_TERMS + STRATEGY_TERMS
    return sorted({term for term in all_terms if term in text})

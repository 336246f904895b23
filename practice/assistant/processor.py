"""Assistant query processor.

Classifies a question, then answers it from stored data: budget questions from
the budget summary, progress questions from the progress analysis and strategy
questions from the recommendations. Analysis failures become a polite error
response and are never raised to the caller.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from practice.assistant.intent import (
    Intent,
    QueryIntent,
    SubCategory,
    classify_query,
    get_intent_description,
    needs_client_context,
)
from practice.assistant.strategies import (
    get_all_strategies,
    get_client_recommendations,
    get_strategies_for_goal,
    serialize_strategy,
)
from practice.reports.progress import get_progress_analysis, overall_assessment, progress_assessment
from practice.reports.utilization import forecast_depletion_date, load_client_budget, build_budget_summary

logger = logging.getLogger(__name__)

BUBBLE_CHART = "BUBBLE_CHART"
PROGRESS_CHART = "PROGRESS_CHART"
NO_VISUALIZATION = "NONE"

SELECT_CLIENT_MESSAGE = (
    "I'd need to know which client you're asking about. "
    "Please select a client first, or ask a general question."
)

HELP_MESSAGE = (
    "I can help you manage client information, track goals and progress, analyze budgets, "
    "and provide therapy strategy recommendations. How can I assist you today?"
)

ERROR_MESSAGES: Dict[Intent, str] = {
    Intent.BUDGET_ANALYSIS: "I'm having trouble analyzing the budget information. Please try again later.",
    Intent.PROGRESS_TRACKING: "I'm having trouble analyzing the progress information. Please try again later.",
    Intent.STRATEGY_RECOMMENDATION: "I'm having trouble finding appropriate therapy strategies. Please try again later.",
    Intent.GENERAL_QUESTION: "I'm having trouble answering that right now. Please try again later.",
}

FOLLOW_UPS: Dict[Intent, List[str]] = {
    Intent.BUDGET_ANALYSIS: [
        "How much budget is remaining?",
        "When will the funds run out?",
        "Which category has the highest spending?",
    ],
    Intent.PROGRESS_TRACKING: [
        "What is the client's attendance rate?",
        "Which goal needs the most attention?",
        "How is the client progressing overall?",
    ],
    Intent.STRATEGY_RECOMMENDATION: [
        "Suggest strategies for the client's goals",
        "What general approaches work well?",
    ],
    Intent.GENERAL_QUESTION: [
        "How much budget does the client have left?",
        "How is the client progressing?",
        "What strategies would you recommend?",
    ],
}


def _response(
    content: str,
    confidence: float,
    data: Optional[Dict[str, Any]] = None,
    visualization_hint: str = NO_VISUALIZATION,
    intent: Optional[QueryIntent] = None,
) -> Dict[str, Any]:
    return {
        "content": content,
        "confidence": confidence,
        "data": data,
        "visualization_hint": visualization_hint,
        "suggested_follow_ups": FOLLOW_UPS.get(intent.type, []) if intent else [],
        "intent": intent.to_dict() if intent else None,
    }


def _format_date(value: date) -> str:
    """e.g. "March 5, 2026"."""
    return f"{value:%B} {value.day}, {value.year}"


def _money(amount: float) -> str:
    return f"${amount:,.2f}"


# ============================================================================
# BUDGET
# ============================================================================

async def _answer_budget(db: AsyncSession, intent: QueryIntent, today: date) -> Dict[str, Any]:
    plan, items, events = await load_client_budget(db, intent.client_id)
    summary = build_budget_summary(plan, items, events, today)
    if summary is None:
        return _response(
            "I couldn't find an active budget plan with items for this client.",
            0.7,
            intent=intent,
        )

    total = summary["total_budget"]
    spent = summary["used_budget"]
    remaining = summary["remaining_budget"]
    utilization = summary["utilization_percentage"]
    depletion = forecast_depletion_date(remaining, events, today)

    if intent.sub_category == SubCategory.REMAINING:
        content = f"The client has {_money(remaining)} remaining out of a total budget of {_money(total)}."
        if utilization > 0:
            content += f" That's about {100 - utilization:.1f}% of the budget remaining."
    elif intent.sub_category == SubCategory.FORECAST:
        content = f"At the current rate of spending, the budget will be depleted by {_format_date(depletion)}."
        content += f" The client has spent {_money(spent)} so far out of a total budget of {_money(total)}."
        if summary["projected_overspend"]:
            content += f" Spending is on track to exceed the plan by {_money(summary['projected_overspend'])}."
    elif intent.sub_category == SubCategory.UTILIZATION:
        content = f"The client has utilized {utilization:.1f}% of their budget."
        if summary["top_category"]:
            content += f" The highest spending is in the {summary['top_category']} category."
    else:
        content = f"The client has a total budget of {_money(total)}, with {_money(spent)} spent so far."
        content += f" That leaves {_money(remaining)} remaining ({100 - utilization:.1f}%)."
        content += f" At the current rate, the budget will be depleted by {_format_date(depletion)}."

    data = {
        "total_budget": total,
        "total_spent": spent,
        "remaining": remaining,
        "utilization_rate": utilization,
        "forecasted_depletion": depletion,
        "spending_by_category": summary["spending_by_category"],
        "top_category": summary["top_category"],
    }
    return _response(content, 0.95, data, BUBBLE_CHART, intent)


# ============================================================================
# PROGRESS
# ============================================================================

async def _answer_progress(db: AsyncSession, intent: QueryIntent) -> Dict[str, Any]:
    analysis = await get_progress_analysis(db, intent.client_id)
    confidence = 0.9
    overall = analysis["overall_progress"]
    attendance = analysis["attendance_rate"]

    if intent.sub_category == SubCategory.ATTENDANCE:
        content = f"The client has an attendance rate of {attendance:.1f}%."
        content += f" They have completed {analysis['sessions_completed']} sessions"
        if analysis["sessions_cancelled"] > 0:
            content += f" and cancelled {analysis['sessions_cancelled']} sessions"
        content += "."
    elif intent.sub_category == SubCategory.GOAL_SPECIFIC:
        goal = next((g for g in analysis["goal_progress"] if g["goal_id"] == intent.goal_id), None)
        if goal:
            achieved = sum(1 for m in goal["milestones"] if m["completed"])
            content = f"Progress on the goal \"{goal['goal_title']}\" is at {goal['progress']:.1f}%."
            content += f" {progress_assessment(goal['progress'])}"
            content += f" {achieved} out of {len(goal['milestones'])} milestones have been achieved."
        else:
            content = "I couldn't find progress information for that specific goal."
            confidence = 0.7
    else:
        content = f"The client has achieved {overall:.1f}% overall progress toward their goals."
        content += f" They have an attendance rate of {attendance:.1f}%."
        ranked = sorted(analysis["goal_progress"], key=lambda g: g["progress"], reverse=True)
        if ranked:
            best = ranked[0]
            content += f" The most progress has been made on \"{best['goal_title']}\" ({best['progress']:.1f}%)."
            worst = ranked[-1]
            if len(ranked) > 1 and worst["progress"] < 50:
                content += (
                    f" The goal \"{worst['goal_title']}\" might need additional attention"
                    f" ({worst['progress']:.1f}%)."
                )
        content += f" {overall_assessment(overall, attendance)}"

    return _response(content, confidence, analysis, PROGRESS_CHART, intent)


# ============================================================================
# STRATEGY
# ============================================================================

async def _answer_strategy(db: AsyncSession, intent: QueryIntent) -> Dict[str, Any]:
    if intent.sub_category == SubCategory.GOAL_SPECIFIC and intent.goal_id:
        strategies = await get_strategies_for_goal(db, intent.goal_id)
        if not strategies:
            return _response(
                "I don't have any specific strategies to recommend for this goal at the moment.",
                0.7,
                intent=intent,
            )

        content = "Here are some recommended strategies that may be helpful:"
        for i, strategy in enumerate(strategies[:3], start=1):
            content += f"\n\n{i}. **{strategy.name}**: {strategy.description or ''}"
        if len(strategies) > 3:
            content += f"\n\nThere are {len(strategies) - 3} additional strategies available."
        data = {"strategies": [serialize_strategy(s) for s in strategies]}
        return _response(content, 0.85, data, intent=intent)

    if intent.client_id:
        recommendations = await get_client_recommendations(db, intent.client_id)
        if not recommendations:
            return _response(
                "I don't have enough information to recommend specific strategies for this client. "
                "Please ensure they have defined goals.",
                0.7,
                intent=intent,
            )

        content = "Here are some therapy strategies recommended based on the client's goals:"
        for goal_title, strategies in list(recommendations.items())[:2]:
            if not strategies:
                continue
            content += f"\n\nFor goal \"{goal_title}\":"
            for strategy in strategies[:2]:
                description = strategy.description or ""
                if len(description) > 100:
                    description = description[:100] + "..."
                content += f"\n- **{strategy.name}**: {description}"

        data = {
            "recommendations_by_goal": {
                title: [serialize_strategy(s) for s in strategies]
                for title, strategies in recommendations.items()
            }
        }
        return _response(content, 0.85, data, intent=intent)

    strategies = await get_all_strategies(db)
    if strategies:
        categories = {s.category for s in strategies if s.category}
        content = (
            "I can provide therapy strategy recommendations based on client goals. "
            f"We have {len(strategies)} strategies across {len(categories)} categories. "
            "Please select a client to get personalized recommendations."
        )
    else:
        content = "I can provide therapy strategy recommendations once you select a client and review their goals."
    return _response(content, 0.85, intent=intent)


# ============================================================================
# GENERAL
# ============================================================================

def _answer_general(intent: QueryIntent) -> Dict[str, Any]:
    topic = intent.topic
    if topic == "session planning":
        content = (
            "Session planning is a critical part of effective therapy. Consider using the calendar "
            "to schedule upcoming sessions and reviewing past session notes for continuity."
        )
    elif topic == "report writing":
        content = (
            "You can create comprehensive reports from session notes, which track performance "
            "assessments and milestone achievements."
        )
    elif topic == "billing":
        content = (
            "For billing inquiries, you can review budget utilization in client profiles. Each "
            "session can record the budget items it used for accurate tracking."
        )
    elif topic:
        content = (
            f"The practice supports managing therapy for clients with {topic} needs. You can track "
            "goals, monitor progress, and get strategy recommendations specific to this area."
        )
    else:
        return _response(HELP_MESSAGE, 0.6, intent=intent)
    return _response(content, 0.7, intent=intent)


async def process_query(
    db: AsyncSession,
    query: str,
    context: Optional[Dict[str, Any]] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Answer a free-text question.

    Args:
        db: Database session
        query: The question
        context: Optional {"active_client_id", "active_goal_id"}
        today: Reference date for projections

    Returns:
        Response dict with content, confidence, data, visualization_hint and
        suggested_follow_ups
    """
    intent = classify_query(query, context)

    if needs_client_context(intent) and not intent.client_id:
        return _response(SELECT_CLIENT_MESSAGE, 0.8, intent=intent)

    try:
        if intent.type == Intent.BUDGET_ANALYSIS:
            return await _answer_budget(db, intent, today or date.today())
        if intent.type == Intent.PROGRESS_TRACKING:
            return await _answer_progress(db, intent)
        if intent.type == Intent.STRATEGY_RECOMMENDATION:
            return await _answer_strategy(db, intent)
        return _answer_general(intent)
    except Exception:
        logger.exception(f"Assistant {get_intent_description(intent)} failed for client {intent.client_id}")
        return _response(ERROR_MESSAGES.get(intent.type, ERROR_MESSAGES[Intent.GENERAL_QUESTION]), 0.5, intent=intent)

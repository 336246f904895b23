"""Tests for assistant query classification."""
import pytest

from practice.assistant.intent import (
    Intent,
    SubCategory,
    classify_query,
    get_intent_description,
    matched_terms,
    needs_client_context,
)


CONTEXT = {"active_client_id": "client_abc123", "active_goal_id": None}


# ============================================================================
# BUDGET
# ============================================================================

class TestBudgetClassification:
    """Budget questions and their sub-categories."""

    def test_remaining_question(self):
        intent = classify_query("How much budget is left?", CONTEXT)

        assert intent.type == Intent.BUDGET_ANALYSIS
        assert intent.sub_category == SubCategory.REMAINING
        assert intent.client_id == "client_abc123"

    def test_forecast_question(self):
        intent = classify_query("When will the funds run out?", CONTEXT)

        assert intent.type == Intent.BUDGET_ANALYSIS
        assert intent.sub_category == SubCategory.FORECAST

    def test_utilization_question(self):
        intent = classify_query("Which category has the highest spending?", CONTEXT)

        assert intent.type == Intent.BUDGET_ANALYSIS
        assert intent.sub_category == SubCategory.UTILIZATION

    def test_remaining_checked_before_forecast(self):
        """"remaining" and "when" both match; remaining wins."""
        intent = classify_query("When is the remaining budget projected to end?", CONTEXT)

        assert intent.sub_category == SubCategory.REMAINING

    def test_no_sub_category(self):
        intent = classify_query("Tell me about the budget", CONTEXT)

        assert intent.type == Intent.BUDGET_ANALYSIS
        assert intent.sub_category is None

    def test_matching_is_case_insensitive(self):
        intent = classify_query("BUDGET OVERVIEW", CONTEXT)

        assert intent.type == Intent.BUDGET_ANALYSIS

    def test_budget_wins_over_progress(self):
        intent = classify_query("Is spending on track for the goal?", CONTEXT)

        assert intent.type == Intent.BUDGET_ANALYSIS


# ============================================================================
# PROGRESS AND STRATEGY
# ============================================================================

class TestProgressClassification:
    """Progress questions."""

    def test_general_progress(self):
        intent = classify_query("How is the client progressing?", CONTEXT)

        assert intent.type == Intent.PROGRESS_TRACKING
        assert intent.sub_category is None

    def test_attendance(self):
        intent = classify_query("What is the attendance rate?", CONTEXT)

        assert intent.type == Intent.PROGRESS_TRACKING
        assert intent.sub_category == SubCategory.ATTENDANCE

    def test_missed_sessions_counts_as_attendance(self):
        intent = classify_query("Has the client missed many milestone reviews?", CONTEXT)

        assert intent.type == Intent.PROGRESS_TRACKING
        assert intent.sub_category == SubCategory.ATTENDANCE

    def test_goal_specific_with_active_goal(self):
        intent = classify_query(
            "What progress has been made?",
            {"active_client_id": "client_abc123", "active_goal_id": "goal_xyz"},
        )

        assert intent.sub_category == SubCategory.GOAL_SPECIFIC
        assert intent.goal_id == "goal_xyz"


class TestStrategyClassification:
    """Strategy questions."""

    def test_general_strategy_without_goal(self):
        intent = classify_query("Can you suggest a technique?", CONTEXT)

        assert intent.type == Intent.STRATEGY_RECOMMENDATION
        assert intent.sub_category == SubCategory.GENERAL

    def test_goal_specific_strategy(self):
        intent = classify_query(
            "Any technique ideas?",
            {"active_client_id": "client_abc123", "active_goal_id": "goal_xyz"},
        )

        assert intent.sub_category == SubCategory.GOAL_SPECIFIC


class TestGeneralClassification:
    """Anything else is a general question."""

    def test_no_terms(self):
        intent = classify_query("Hello there", CONTEXT)

        assert intent.type == Intent.GENERAL_QUESTION
        assert intent.client_id is None
        assert intent.topic is None

    def test_topic_detected(self):
        intent = classify_query("Where do I find billing details?", CONTEXT)

        assert intent.type == Intent.GENERAL_QUESTION
        assert intent.topic == "billing"

    def test_no_context(self):
        intent = classify_query("Hello")

        assert intent.type == Intent.GENERAL_QUESTION


# ============================================================================
# HELPERS
# ============================================================================

class TestHelpers:
    """Client-context requirement, descriptions and matched terms."""

    @pytest.mark.parametrize("query,expected", [
        ("How much budget is left?", True),
        ("How is the client progressing?", True),
        ("Can you suggest a technique?", False),
        ("Hello there", False),
    ])
    def test_needs_client_context(self, query, expected):
        assert needs_client_context(classify_query(query)) is expected

    def test_goal_specific_strategy_needs_client(self):
        intent = classify_query("Any technique ideas?", {"active_goal_id": "goal_xyz"})

        assert needs_client_context(intent) is True

    def test_descriptions(self):
        assert get_intent_description(classify_query("budget")) == "budget analysis"
        assert get_intent_description(classify_query("billing")) == "information about billing"
        assert get_intent_description(classify_query("hi")) == "general information"

    def test_matched_terms(self):
        assert matched_terms("How much budget is remaining?") == ["budget", "remaining"]

    def test_to_dict(self):
        data = classify_query("How much budget is left?", CONTEXT).to_dict()

        assert data["type"] == "BUDGET_ANALYSIS"
        assert data["sub_category"] == "REMAINING"
        assert data["client_id"] == "client_abc123"

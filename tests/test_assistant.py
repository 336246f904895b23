"""API tests for the assistant endpoints."""
from unittest.mock import patch

import pytest
import pytest_asyncio

from practice.assistant.processor import HELP_MESSAGE, SELECT_CLIENT_MESSAGE


@pytest_asyncio.fixture
async def funded_client(client, created_client) -> dict:
    client_id = created_client["id"]
    response = await client.post(
        f"/api/clients/{client_id}/budget-settings",
        json={"ndis_funds": 20000, "start_date": "2026-01-01", "end_of_plan": "2026-12-31"},
    )
    assert response.status_code == 201
    response = await client.post(f"/api/clients/{client_id}/budget-items", json={
        "item_code": "15_056_0128_1_3",
        "name": "Speech therapy",
        "description": "Therapy session (1 hour)",
        "unit_price": 193.99,
        "quantity": 20,
        "used_quantity": 5,
        "category": "Capacity Building",
    })
    assert response.status_code == 201
    return created_client


def ask(query, client_id=None, goal_id=None):
    return {
        "query": query,
        "context": {"active_client_id": client_id, "active_goal_id": goal_id},
    }


# ============================================================================
# CLASSIFY
# ============================================================================

class TestClassifyApi:

    @pytest.mark.asyncio
    async def test_budget_question(self, client):
        response = await client.post("/api/assistant/classify", json=ask("How much budget is left?", "client_1"))

        assert response.status_code == 200
        data = response.json()
        assert data["intent"]["type"] == "BUDGET_ANALYSIS"
        assert data["intent"]["sub_category"] == "REMAINING"
        assert data["intent"]["client_id"] == "client_1"
        assert data["description"] == "budget analysis"
        assert data["needs_client"] is True
        assert "budget" in data["matched_terms"]

    @pytest.mark.asyncio
    async def test_general_question(self, client):
        response = await client.post("/api/assistant/classify", json={"query": "Tell me about billing"})

        data = response.json()
        assert data["intent"]["type"] == "GENERAL_QUESTION"
        assert data["intent"]["topic"] == "billing"
        assert data["needs_client"] is False

    @pytest.mark.asyncio
    async def test_empty_query(self, client):
        response = await client.post("/api/assistant/classify", json={"query": ""})

        assert response.status_code == 422


# ============================================================================
# QUERY
# ============================================================================

class TestQueryApi:

    @pytest.mark.asyncio
    async def test_client_required(self, client):
        response = await client.post("/api/assistant/query", json=ask("How is progress going?"))

        assert response.status_code == 200
        data = response.json()
        assert data["content"] == SELECT_CLIENT_MESSAGE
        assert data["confidence"] == 0.8
        assert data["visualization_hint"] == "NONE"

    @pytest.mark.asyncio
    async def test_remaining_budget(self, client, funded_client):
        response = await client.post(
            "/api/assistant/query",
            json=ask("How much budget is remaining?", funded_client["id"]),
        )

        data = response.json()
        assert data["content"].startswith(
            "The client has $2,909.85 remaining out of a total budget of $3,879.80."
        )
        assert data["confidence"] == 0.95
        assert data["visualization_hint"] == "BUBBLE_CHART"
        assert data["data"]["total_budget"] == 3879.8
        assert data["data"]["top_category"] == "Capacity Building"
        assert data["suggested_follow_ups"]

    @pytest.mark.asyncio
    async def test_budget_without_plan(self, client, created_client):
        response = await client.post(
            "/api/assistant/query",
            json=ask("What is the budget?", created_client["id"]),
        )

        data = response.json()
        assert data["content"] == "I couldn't find an active budget plan with items for this client."
        assert data["confidence"] == 0.7

    @pytest.mark.asyncio
    async def test_attendance(self, client, created_client):
        response = await client.post(
            "/api/assistant/query",
            json=ask("What is the attendance like?", created_client["id"]),
        )

        data = response.json()
        assert data["intent"]["sub_category"] == "ATTENDANCE"
        assert data["content"] == "The client has an attendance rate of 0.0%. They have completed 0 sessions."
        assert data["visualization_hint"] == "PROGRESS_CHART"
        assert data["confidence"] == 0.9

    @pytest.mark.asyncio
    async def test_general_strategy_without_client(self, client):
        response = await client.post("/api/assistant/query", json=ask("Any techniques you suggest?"))

        data = response.json()
        assert data["intent"]["type"] == "STRATEGY_RECOMMENDATION"
        assert data["content"].startswith("I can provide therapy strategy recommendations")
        assert data["confidence"] == 0.85

    @pytest.mark.asyncio
    async def test_help(self, client):
        response = await client.post("/api/assistant/query", json=ask("Hello there"))

        data = response.json()
        assert data["content"] == HELP_MESSAGE
        assert data["confidence"] == 0.6

    @pytest.mark.asyncio
    async def test_analysis_failure_is_answered(self, client):
        with patch(
            "practice.assistant.processor.get_progress_analysis",
            side_effect=RuntimeError("database unavailable"),
        ):
            response = await client.post(
                "/api/assistant/query",
                json=ask("How is the client progressing?", "client_1"),
            )

        assert response.status_code == 200
        data = response.json()
        assert data["content"] == (
            "I'm having trouble analyzing the progress information. Please try again later."
        )
        assert data["confidence"] == 0.5

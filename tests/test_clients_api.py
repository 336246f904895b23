"""API tests for clients, allies, goals and clinicians."""
import pytest


ALLY_PAYLOAD = {
    "name": "Jordan Taylor",
    "relationship": "Parent",
    "preferred_language": "English",
    "email": "jordan@family.org",
    "access_therapeutics": True,
}

GOAL_PAYLOAD = {
    "title": "Clear speech",
    "description": "Produce target sounds in words",
    "importance_level": "high",
}


# ============================================================================
# CLIENTS
# ============================================================================

class TestClientsApi:

    @pytest.mark.asyncio
    async def test_create_assigns_identifier(self, client, client_payload):
        response = await client.post("/api/clients", json=client_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("client_")
        assert len(data["unique_identifier"]) == 6
        assert data["unique_identifier"].isdigit()
        assert data["original_name"] == "Sam Taylor"
        assert data["name"] == f"Sam Taylor-{data['unique_identifier']}"
        assert data["onboarding_status"] == "incomplete"

    @pytest.mark.asyncio
    async def test_future_date_of_birth_rejected(self, client, client_payload):
        response = await client.post("/api/clients", json={**client_payload, "date_of_birth": "2999-01-01"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_funds_management_rejected(self, client, client_payload):
        response = await client.post("/api/clients", json={**client_payload, "funds_management": "Unknown"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_hides_incomplete_clients(self, client, created_client):
        response = await client.get("/api/clients")
        assert response.json() == []

        response = await client.get("/api/clients", params={"include_incomplete": True})
        assert [c["id"] for c in response.json()] == [created_client["id"]]

        await client.post(f"/api/clients/{created_client['id']}/complete-onboarding")
        response = await client.get("/api/clients")
        assert response.json()[0]["onboarding_status"] == "complete"

    @pytest.mark.asyncio
    async def test_rename_keeps_identifier(self, client, created_client):
        response = await client.put(f"/api/clients/{created_client['id']}", json={"name": "Samuel Taylor"})

        assert response.status_code == 200
        data = response.json()
        assert data["original_name"] == "Samuel Taylor"
        assert data["name"] == f"Samuel Taylor-{created_client['unique_identifier']}"

    @pytest.mark.asyncio
    async def test_name_cannot_be_nulled(self, client, created_client):
        response = await client.put(f"/api/clients/{created_client['id']}", json={"name": None})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_client(self, client):
        response = await client.get("/api/clients/client_missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"

    @pytest.mark.asyncio
    async def test_delete_removes_dependent_records(self, client, created_client):
        client_id = created_client["id"]
        await client.post(f"/api/clients/{client_id}/allies", json=ALLY_PAYLOAD)
        goal = (await client.post(f"/api/clients/{client_id}/goals", json=GOAL_PAYLOAD)).json()
        await client.post(f"/api/goals/{goal['id']}/subgoals", json={"title": "Sounds", "description": "/s/"})
        await client.post(f"/api/clients/{client_id}/budget-settings", json={"ndis_funds": 1000})

        response = await client.delete(f"/api/clients/{client_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Client deleted successfully"}
        assert (await client.get(f"/api/clients/{client_id}")).status_code == 404
        assert (await client.get(f"/api/goals/{goal['id']}")).status_code == 404


# ============================================================================
# ALLIES
# ============================================================================

class TestAlliesApi:

    @pytest.mark.asyncio
    async def test_create_and_list(self, client, created_client):
        client_id = created_client["id"]

        response = await client.post(f"/api/clients/{client_id}/allies", json=ALLY_PAYLOAD)

        assert response.status_code == 201
        assert response.json()["relationship"] == "Parent"
        assert response.json()["archived"] is False
        allies = (await client.get(f"/api/clients/{client_id}/allies")).json()
        assert len(allies) == 1

    @pytest.mark.asyncio
    async def test_access_permission_required(self, client, created_client):
        payload = {**ALLY_PAYLOAD, "access_therapeutics": False}

        response = await client.post(f"/api/clients/{created_client['id']}/allies", json=payload)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_cannot_remove_all_access(self, client, created_client):
        client_id = created_client["id"]
        ally = (await client.post(f"/api/clients/{client_id}/allies", json=ALLY_PAYLOAD)).json()

        response = await client.put(
            f"/api/clients/{client_id}/allies/{ally['id']}",
            json={"access_therapeutics": False},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_active_ally_cap(self, client, created_client):
        client_id = created_client["id"]
        allies = []
        for i in range(5):
            response = await client.post(
                f"/api/clients/{client_id}/allies",
                json={**ALLY_PAYLOAD, "name": f"Ally {i}"},
            )
            assert response.status_code == 201
            allies.append(response.json())

        response = await client.post(f"/api/clients/{client_id}/allies", json=ALLY_PAYLOAD)
        assert response.status_code == 409

        # Archiving frees a slot; restoring at the cap is refused
        archive_url = f"/api/clients/{client_id}/allies/{allies[0]['id']}/archive"
        response = await client.put(archive_url, json={"archived": True})
        assert response.status_code == 200
        assert response.json()["archived"] is True

        response = await client.post(f"/api/clients/{client_id}/allies", json=ALLY_PAYLOAD)
        assert response.status_code == 201

        response = await client.put(archive_url, json={"archived": False})
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_archive_requires_boolean(self, client, created_client):
        client_id = created_client["id"]
        ally = (await client.post(f"/api/clients/{client_id}/allies", json=ALLY_PAYLOAD)).json()

        response = await client.put(
            f"/api/clients/{client_id}/allies/{ally['id']}/archive",
            json={"archived": "yes"},
        )

        assert response.status_code == 422

        response = await client.put(
            f"/api/clients/{client_id}/allies/{ally['id']}/archive",
            json={},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete(self, client, created_client):
        client_id = created_client["id"]
        ally = (await client.post(f"/api/clients/{client_id}/allies", json=ALLY_PAYLOAD)).json()

        response = await client.delete(f"/api/clients/{client_id}/allies/{ally['id']}")

        assert response.status_code == 200
        assert (await client.get(f"/api/clients/{client_id}/allies")).json() == []


# ============================================================================
# GOALS AND SUBGOALS
# ============================================================================

class TestGoalsApi:

    @pytest.mark.asyncio
    async def test_goal_defaults(self, client, created_client):
        response = await client.post(f"/api/clients/{created_client['id']}/goals", json=GOAL_PAYLOAD)

        assert response.status_code == 201
        assert response.json()["status"] == "in_progress"

    @pytest.mark.asyncio
    async def test_goal_cap(self, client, created_client):
        url = f"/api/clients/{created_client['id']}/goals"
        for i in range(5):
            assert (await client.post(url, json={**GOAL_PAYLOAD, "title": f"Goal {i}"})).status_code == 201

        response = await client.post(url, json=GOAL_PAYLOAD)

        assert response.status_code == 409
        assert len((await client.get(url)).json()) == 5

    @pytest.mark.asyncio
    async def test_subgoal_lifecycle(self, client, created_client):
        goal = (await client.post(f"/api/clients/{created_client['id']}/goals", json=GOAL_PAYLOAD)).json()

        response = await client.post(
            f"/api/goals/{goal['id']}/subgoals",
            json={"title": "Sounds", "description": "Produce /s/ in isolation"},
        )
        assert response.status_code == 201
        subgoal = response.json()
        assert subgoal["status"] == "pending"

        response = await client.put(f"/api/subgoals/{subgoal['id']}", json={"status": "completed"})
        assert response.json()["status"] == "completed"

        response = await client.delete(f"/api/subgoals/{subgoal['id']}")
        assert response.status_code == 200
        assert (await client.get(f"/api/goals/{goal['id']}/subgoals")).json() == []

    @pytest.mark.asyncio
    async def test_delete_goal_deletes_subgoals(self, client, created_client):
        goal = (await client.post(f"/api/clients/{created_client['id']}/goals", json=GOAL_PAYLOAD)).json()
        subgoal = (await client.post(
            f"/api/goals/{goal['id']}/subgoals",
            json={"title": "Sounds", "description": "/s/"},
        )).json()

        response = await client.delete(f"/api/goals/{goal['id']}")

        assert response.status_code == 200
        assert (await client.put(f"/api/subgoals/{subgoal['id']}", json={"title": "x"})).status_code == 404

    @pytest.mark.asyncio
    async def test_goal_for_missing_client(self, client):
        response = await client.post("/api/clients/client_missing/goals", json=GOAL_PAYLOAD)

        assert response.status_code == 404


# ============================================================================
# CLINICIANS AND STRATEGIES
# ============================================================================

class TestCliniciansApi:

    @pytest.mark.asyncio
    async def test_assign_clinician(self, client, created_client):
        clinician = (await client.post(
            "/api/clinicians",
            json={"name": "Dr Lee", "email": "lee@practice.org", "specialization": "Speech"},
        )).json()
        url = f"/api/clients/{created_client['id']}/clinicians"

        response = await client.post(url, json={"clinician_id": clinician["id"], "role": "Primary Therapist"})
        assert response.status_code == 201
        assignment = response.json()
        assert assignment["clinician"]["name"] == "Dr Lee"

        duplicate = await client.post(url, json={"clinician_id": clinician["id"], "role": "Supervisor"})
        assert duplicate.status_code == 400

        listed = (await client.get(url)).json()
        assert [a["clinician"]["id"] for a in listed] == [clinician["id"]]

        response = await client.delete(f"/api/client-clinicians/{assignment['id']}")
        assert response.status_code == 200
        assert (await client.get(url)).json() == []

    @pytest.mark.asyncio
    async def test_invalid_role(self, client, created_client):
        response = await client.post(
            f"/api/clients/{created_client['id']}/clinicians",
            json={"clinician_id": "clin_x", "role": "Receptionist"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_clinician(self, client, created_client):
        response = await client.post(
            f"/api/clients/{created_client['id']}/clinicians",
            json={"clinician_id": "clin_missing", "role": "Supervisor"},
        )

        assert response.status_code == 404


class TestStrategiesApi:

    @pytest.mark.asyncio
    async def test_create_and_filter(self, client):
        for name, category in [("Visual schedule", "Foundational"), ("Peer modeling", "Social")]:
            response = await client.post("/api/strategies", json={"name": name, "category": category})
            assert response.status_code == 201

        response = await client.get("/api/strategies", params={"category": "Social"})

        assert [s["name"] for s in response.json()] == ["Peer modeling"]

    @pytest.mark.asyncio
    async def test_unknown_goal(self, client):
        response = await client.post(
            "/api/strategies",
            json={"name": "x", "category": "General", "goal_id": "goal_missing"},
        )

        assert response.status_code == 404

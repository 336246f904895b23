"""API tests for budget plans, items and the item catalog."""
import pytest
import pytest_asyncio


ITEM_PAYLOAD = {
    "item_code": "15_056_0128_1_3",
    "name": "Speech therapy",
    "description": "Therapy session (1 hour)",
    "unit_price": 193.99,
    "quantity": 20,
    "category": "Capacity Building",
}


@pytest_asyncio.fixture
async def plan(client, created_client) -> dict:
    response = await client.post(
        f"/api/clients/{created_client['id']}/budget-settings",
        json={
            "plan_serial_number": "NDIS-2026",
            "ndis_funds": 20000,
            "start_date": "2026-01-01",
            "end_of_plan": "2026-12-31",
        },
    )
    assert response.status_code == 201
    return response.json()


# ============================================================================
# PLANS
# ============================================================================

class TestBudgetSettingsApi:

    @pytest.mark.asyncio
    async def test_no_plan(self, client, created_client):
        response = await client.get(f"/api/clients/{created_client['id']}/budget-settings")

        assert response.status_code == 404
        assert response.json()["detail"] == "Budget settings not found"

    @pytest.mark.asyncio
    async def test_new_plan_deactivates_previous(self, client, created_client, plan):
        client_id = created_client["id"]

        response = await client.post(
            f"/api/clients/{client_id}/budget-settings",
            json={"plan_serial_number": "NDIS-2027", "ndis_funds": 25000},
        )
        assert response.status_code == 201

        active = (await client.get(f"/api/clients/{client_id}/budget-settings")).json()
        assert active["plan_serial_number"] == "NDIS-2027"

        plans = (await client.get(f"/api/clients/{client_id}/budget-settings/all")).json()
        assert len(plans) == 2
        assert sum(1 for p in plans if p["is_active"]) == 1

    @pytest.mark.asyncio
    async def test_reactivating_plan(self, client, created_client, plan):
        client_id = created_client["id"]
        await client.post(f"/api/clients/{client_id}/budget-settings", json={"ndis_funds": 1})

        response = await client.put(f"/api/budget-settings/{plan['id']}", json={"is_active": True})

        assert response.status_code == 200
        active = (await client.get(f"/api/clients/{client_id}/budget-settings")).json()
        assert active["id"] == plan["id"]


# ============================================================================
# ITEMS
# ============================================================================

class TestBudgetItemsApi:

    @pytest.mark.asyncio
    async def test_item_requires_plan(self, client, created_client):
        response = await client.post(f"/api/clients/{created_client['id']}/budget-items", json=ITEM_PAYLOAD)

        assert response.status_code == 404
        assert response.json()["detail"] == "Budget settings not found. Please create budget settings first."

    @pytest.mark.asyncio
    async def test_item_added_to_active_plan(self, client, created_client, plan):
        response = await client.post(f"/api/clients/{created_client['id']}/budget-items", json=ITEM_PAYLOAD)

        assert response.status_code == 201
        item = response.json()
        assert item["budget_settings_id"] == plan["id"]
        assert item["used_quantity"] == 0

        items = (await client.get(f"/api/clients/{created_client['id']}/budget-items")).json()
        assert [i["id"] for i in items] == [item["id"]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("override", [
        {"unit_price": 0},
        {"quantity": 0},
        {"used_quantity": 21},
    ])
    async def test_item_validation(self, client, created_client, plan, override):
        response = await client.post(
            f"/api/clients/{created_client['id']}/budget-items",
            json={**ITEM_PAYLOAD, **override},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_quantity_cannot_drop_below_used(self, client, created_client, plan):
        item = (await client.post(
            f"/api/clients/{created_client['id']}/budget-items",
            json={**ITEM_PAYLOAD, "used_quantity": 5},
        )).json()

        response = await client.put(f"/api/budget-items/{item['id']}", json={"quantity": 4})

        assert response.status_code == 400
        assert response.json()["detail"] == "Quantity cannot be less than 5 unit(s) already used in sessions"

        response = await client.put(f"/api/budget-items/{item['id']}", json={"quantity": 5})
        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["quantity", "unit_price", "description", "used_quantity"])
    async def test_required_field_cannot_be_nulled(self, client, created_client, plan, field):
        item = (await client.post(f"/api/clients/{created_client['id']}/budget-items", json=ITEM_PAYLOAD)).json()

        response = await client.put(f"/api/budget-items/{item['id']}", json={field: None})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_optional_field_can_be_cleared(self, client, created_client, plan):
        item = (await client.post(f"/api/clients/{created_client['id']}/budget-items", json=ITEM_PAYLOAD)).json()

        response = await client.put(f"/api/budget-items/{item['id']}", json={"category": None})

        assert response.status_code == 200
        assert response.json()["category"] is None

    @pytest.mark.asyncio
    async def test_delete_item(self, client, created_client, plan):
        item = (await client.post(f"/api/clients/{created_client['id']}/budget-items", json=ITEM_PAYLOAD)).json()

        assert (await client.delete(f"/api/budget-items/{item['id']}")).status_code == 200
        assert (await client.delete(f"/api/budget-items/{item['id']}")).status_code == 404


# ============================================================================
# CATALOG
# ============================================================================

class TestBudgetCatalogApi:

    @pytest.mark.asyncio
    async def test_catalog(self, client):
        payload = {
            "item_code": "01_011_0107_1_1",
            "description": "Assistance with self-care",
            "default_unit_price": 67.56,
            "category": "Core Supports",
        }

        response = await client.post("/api/budget-catalog", json=payload)
        assert response.status_code == 201
        entry = response.json()

        duplicate = await client.post("/api/budget-catalog", json=payload)
        assert duplicate.status_code == 400
        assert duplicate.json()["detail"] == "Item code already exists"

        fetched = await client.get(f"/api/budget-catalog/{payload['item_code']}")
        assert fetched.json()["id"] == entry["id"]

        await client.put(f"/api/budget-catalog/{entry['id']}", json={"is_active": False})
        assert (await client.get("/api/budget-catalog", params={"active_only": True})).json() == []
        assert len((await client.get("/api/budget-catalog")).json()) == 1

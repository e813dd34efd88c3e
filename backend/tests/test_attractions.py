"""
Wildwood Zoo Backend — Attraction Tests
=========================================

What:  Attraction CRUD, time-range checks and staff assignments.
"""

import pytest

ATTRACTION_BODY = {
    "title": "Penguin Parade",
    "description": "The colony waddles to the feeding pool",
    "location": "Polar Pavilion",
    "picture": "https://example.org/penguins.jpg",
    "start_time": "2025-07-01T14:00:00Z",
    "end_time": "2025-07-01T14:30:00Z",
}


class TestAttractionCrud:

    @pytest.mark.asyncio
    async def test_create_update_delete(self, test_client, seed, auth_headers):
        manager = await seed.staff(name="Mara Okafor")
        headers = auth_headers(manager)

        created = await test_client.post(
            "/api/attractions", json=dict(ATTRACTION_BODY, staff_id=manager.id), headers=headers,
        )
        assert created.status_code == 201
        attraction = created.json()["attraction"]
        assert attraction["staff_name"] == "Mara Okafor"

        patched = await test_client.patch(
            f"/api/attractions/{attraction['id']}", json={"end_time": None}, headers=headers,
        )
        assert patched.status_code == 200
        assert patched.json()["attraction"]["end_time"] is None

        listing = await test_client.get("/api/attractions")
        assert [a["title"] for a in listing.json()["attractions"]] == ["Penguin Parade"]

        deleted = await test_client.delete(f"/api/attractions/{attraction['id']}", headers=headers)
        assert deleted.status_code == 200
        assert (await test_client.get(f"/api/attractions/{attraction['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        headers = auth_headers(manager)

        inverted = await test_client.post(
            "/api/attractions",
            json=dict(ATTRACTION_BODY, end_time="2025-07-01T13:00:00Z"),
            headers=headers,
        )
        assert inverted.status_code == 400

        created = await test_client.post("/api/attractions", json=ATTRACTION_BODY, headers=headers)
        attraction_id = created.json()["attraction"]["id"]
        moved = await test_client.patch(
            f"/api/attractions/{attraction_id}", json={"start_time": "2025-07-01T15:00:00Z"}, headers=headers,
        )
        assert moved.status_code == 400
        assert moved.json()["error"] == "end_time must not be before start_time"

    @pytest.mark.asyncio
    async def test_only_managers_create(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        response = await test_client.post("/api/attractions", json=ATTRACTION_BODY, headers=auth_headers(keeper))
        assert response.status_code == 403


class TestAttractionAssignments:

    @pytest.mark.asyncio
    async def test_assign_list_and_remove(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper", name="Kim Keeper")
        headers = auth_headers(manager)
        created = await test_client.post("/api/attractions", json=ATTRACTION_BODY, headers=headers)
        attraction_id = created.json()["attraction"]["id"]
        path = f"/api/attractions/{attraction_id}/assign-staff"

        first = await test_client.post(path, json={"staff_id": keeper.id}, headers=headers)
        assert first.status_code == 201
        duplicate = await test_client.post(path, json={"staff_id": keeper.id}, headers=headers)
        assert duplicate.status_code == 400

        assigned = await test_client.get(
            f"/api/attractions/{attraction_id}/assigned-staff", headers=auth_headers(keeper),
        )
        assert [s["name"] for s in assigned.json()["staff"]] == ["Kim Keeper"]

        schedule = await test_client.get(
            f"/api/attractions/staff/{keeper.id}/assignments", headers=auth_headers(keeper),
        )
        assert [a["title"] for a in schedule.json()["assignments"]] == ["Penguin Parade"]

        removed = await test_client.delete(f"/api/attractions/{attraction_id}/staff/{keeper.id}", headers=headers)
        assert removed.status_code == 200
        missing = await test_client.delete(f"/api/attractions/{attraction_id}/staff/{keeper.id}", headers=headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_assign_to_unknown_attraction(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        response = await test_client.post(
            "/api/attractions/404/assign-staff", json={"staff_id": manager.id}, headers=auth_headers(manager),
        )
        assert response.status_code == 404

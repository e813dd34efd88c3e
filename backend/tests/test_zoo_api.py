"""
Wildwood Zoo Backend — Zoo Resource API Tests
===============================================

What:  Endpoint tests for animals, enclosures, staff, visitors, observations,
       notifications and the health check.
How:   HTTPX AsyncClient against create_app(database=<in-memory SQLite>).
"""

from datetime import date, datetime, timezone
from typing import get_args

import pytest
from sqlalchemy import func, select

from wildwood.exceptions import ValidationError
from wildwood.models import Animal, Attraction, Enclosure, Product, Staff
from wildwood.models.visitor import MEMBERSHIP_TIERS
from wildwood.schemas.visitor import MembershipTier
from wildwood.services.enclosure_service import EnclosureService


async def _row_counts(database) -> dict:
    async with database.session_factory() as session:
        return {
            model.__tablename__: (await session.execute(select(func.count(model.id)))).scalar_one()
            for model in (Animal, Attraction, Enclosure, Product, Staff)
        }


ANIMAL_BODY = {
    "name": "Kibo",
    "species": "Giraffe",
    "date_of_birth": "2018-09-30",
    "gender": "Male",
    "health_status": "Healthy",
    "last_vet_checkup": "2025-01-15",
    "danger_level": "Low",
}


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed_and_trimmed(self, test_client):
        echoed = await test_client.get("/health", headers={"X-Request-ID": "gate-7"})
        assert echoed.headers["X-Request-ID"] == "gate-7"

        long_id = await test_client.get("/health", headers={"X-Request-ID": "x" * 500})
        assert len(long_id.headers["X-Request-ID"]) == 64


class TestAnimals:

    @pytest.mark.asyncio
    async def test_create_read_update_delete(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        enclosure = await seed.enclosure()
        headers = auth_headers(keeper)

        created = await test_client.post(
            "/api/animals", json=dict(ANIMAL_BODY, enclosure_id=enclosure.id), headers=headers,
        )
        assert created.status_code == 201
        animal = created.json()["animal"]
        assert animal["enclosure_name"] == "Savannah"

        patched = await test_client.patch(
            f"/api/animals/{animal['id']}", json={"health_status": "Under Observation"}, headers=headers,
        )
        assert patched.status_code == 200
        assert patched.json()["animal"]["health_status"] == "Under Observation"
        assert patched.json()["animal"]["species"] == "Giraffe"

        listed = await test_client.get("/api/animals", params={"health_status": "Under Observation"})
        assert [a["name"] for a in listed.json()["animals"]] == ["Kibo"]

        deleted = await test_client.delete(f"/api/animals/{animal['id']}", headers=headers)
        assert deleted.status_code == 200
        assert (await test_client.get(f"/api/animals/{animal['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_empty_patch_is_400(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        enclosure = await seed.enclosure()
        animal = await seed.animal(enclosure.id)

        empty = await test_client.patch(f"/api/animals/{animal.id}", json={}, headers=auth_headers(keeper))
        assert empty.status_code == 400
        assert empty.json()["error"] == "No valid fields provided for update"

        null_name = await test_client.patch(
            f"/api/animals/{animal.id}", json={"name": None}, headers=auth_headers(keeper),
        )
        assert null_name.status_code == 400

    @pytest.mark.asyncio
    async def test_patch_unknown_animal_is_404(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        response = await test_client.patch(
            "/api/animals/999", json={"name": "Ghost"}, headers=auth_headers(keeper),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_visitor_cannot_add_animals(self, test_client, seed, auth_headers):
        visitor = await seed.visitor()
        enclosure = await seed.enclosure()
        response = await test_client.post(
            "/api/animals", json=dict(ANIMAL_BODY, enclosure_id=enclosure.id), headers=auth_headers(visitor),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_animals_of_unknown_enclosure(self, test_client):
        response = await test_client.get("/api/animals/enclosure/404")
        assert response.status_code == 404


class TestEnclosures:

    @pytest.mark.asyncio
    async def test_detail_includes_animals_and_usage(self, test_client, seed):
        manager = await seed.staff(name="Mara Okafor")
        enclosure = await seed.enclosure(capacity=4, staff_id=manager.id)
        await seed.animal(enclosure.id, name="Zuri")

        response = await test_client.get(f"/api/enclosures/{enclosure.id}")

        body = response.json()
        assert body["staff_name"] == "Mara Okafor"
        assert body["animal_count"] == 1
        assert body["capacity_usage"] == 25.0
        assert [a["name"] for a in body["animals"]] == ["Zuri"]

    @pytest.mark.asyncio
    async def test_delete_cascades_to_animals(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        enclosure = await seed.enclosure()
        lion = await seed.animal(enclosure.id, name="Zuri")
        cub = await seed.animal(enclosure.id, name="Jabari")

        response = await test_client.delete(f"/api/enclosures/{enclosure.id}", headers=auth_headers(manager))

        assert response.status_code == 200
        for animal in (lion, cub):
            assert (await test_client.get(f"/api/animals/{animal.id}")).status_code == 404
        assert (await test_client.get(f"/api/enclosures/{enclosure.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_create_requires_manager(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        manager = await seed.staff()
        body = {"name": "Aviary", "type": "Bird", "capacity": 30, "location": "East Wing"}

        denied = await test_client.post("/api/enclosures", json=body, headers=auth_headers(keeper))
        assert denied.status_code == 403

        created = await test_client.post("/api/enclosures", json=body, headers=auth_headers(manager))
        assert created.status_code == 201
        assert created.json()["enclosure"]["capacity_usage"] == 0.0

    @pytest.mark.asyncio
    async def test_assign_and_unassign_staff(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        enclosure = await seed.enclosure()
        headers = auth_headers(manager)

        assigned = await test_client.post(
            f"/api/enclosures/{enclosure.id}/assign-staff", json={"staff_id": keeper.id}, headers=headers,
        )
        assert assigned.status_code == 200

        mine = await test_client.get(f"/api/enclosures/staff/{keeper.id}")
        assert [e["id"] for e in mine.json()] == [enclosure.id]

        keepers = await test_client.get(f"/api/staff/enclosure/{enclosure.id}", headers=auth_headers(keeper))
        assert [s["id"] for s in keepers.json()] == [keeper.id]

        removed = await test_client.delete(f"/api/enclosures/{enclosure.id}/assign-staff", headers=headers)
        assert removed.status_code == 200
        again = await test_client.delete(f"/api/enclosures/{enclosure.id}/assign-staff", headers=headers)
        assert again.status_code == 400

    @pytest.mark.asyncio
    async def test_assign_unknown_staff_is_404(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        enclosure = await seed.enclosure()
        response = await test_client.post(
            f"/api/enclosures/{enclosure.id}/assign-staff", json={"staff_id": 999}, headers=auth_headers(manager),
        )
        assert response.status_code == 404


class TestEnclosureReport:

    @pytest.mark.asyncio
    async def test_report_breakdown_and_filters(self, test_client, test_db, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        savannah = await seed.enclosure(name="Savannah", type="Grassland", capacity=2)
        aviary = await seed.enclosure(name="Aviary", type="Bird", capacity=10)
        await seed.animal(savannah.id, name="Zuri", health_status="Healthy", last_vet_checkup=date(2025, 1, 10))
        await seed.animal(savannah.id, name="Jabari", health_status="Sick", last_vet_checkup=date(2025, 4, 2))
        await seed.animal(aviary.id, name="Polly", species="Parrot", last_vet_checkup=date(2024, 11, 5))

        report = await test_client.get("/api/enclosures/report", headers=auth_headers(keeper))
        body = report.json()
        assert body["total_enclosures"] == 2
        assert body["total_animals"] == 3
        savannah_entry = next(e for e in body["enclosures"] if e["name"] == "Savannah")
        assert savannah_entry["capacity_usage"] == 100.0
        assert savannah_entry["health_breakdown"] == {"Healthy": 1, "Sick": 1}
        assert savannah_entry["last_vet_checkup"] == "2025-04-02"

        full = await test_client.get(
            "/api/enclosures/report", params={"min_capacity": 50}, headers=auth_headers(keeper),
        )
        assert [e["name"] for e in full.json()["enclosures"]] == ["Savannah"]

        recent = await test_client.get(
            "/api/enclosures/report", params={"vet_after": "2025-01-01"}, headers=auth_headers(keeper),
        )
        assert [e["name"] for e in recent.json()["enclosures"]] == ["Savannah"]

    @pytest.mark.asyncio
    async def test_report_needs_staff(self, test_client, seed, auth_headers):
        visitor = await seed.visitor()
        response = await test_client.get("/api/enclosures/report", headers=auth_headers(visitor))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_inverted_capacity_range(self, test_db):
        async with test_db.session_factory() as session:
            with pytest.raises(ValidationError):
                await EnclosureService().report(session, min_capacity=80, max_capacity=20)


class TestStaff:

    @pytest.mark.asyncio
    async def test_self_update_limited_to_address(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        headers = auth_headers(keeper)

        address = await test_client.patch(
            f"/api/staff/{keeper.id}", json={"address": "9 Elephant Walk"}, headers=headers,
        )
        assert address.status_code == 200
        assert address.json()["staff"]["address"] == "9 Elephant Walk"

        promotion = await test_client.patch(f"/api/staff/{keeper.id}", json={"role": "Manager"}, headers=headers)
        assert promotion.status_code == 403

    @pytest.mark.asyncio
    async def test_manager_updates_and_lists(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")

        response = await test_client.patch(
            f"/api/staff/{keeper.id}",
            json={"staff_type": "Vet", "supervisor_id": manager.id},
            headers=auth_headers(manager),
        )
        assert response.status_code == 200
        assert response.json()["staff"]["supervisor_id"] == manager.id

        listing = await test_client.get("/api/staff", headers=auth_headers(manager))
        assert {s["username"] for s in listing.json()["staff"]} == {"manager", "keeper"}
        assert "ssn" not in listing.json()["staff"][0]
        assert "password_hash" not in listing.json()["staff"][0]

        denied = await test_client.get("/api/staff", headers=auth_headers(keeper))
        assert denied.status_code == 403

    @pytest.mark.asyncio
    async def test_zookeeper_listing(self, test_client, seed):
        await seed.staff()
        await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        response = await test_client.get("/api/staff/zookeepers")
        assert [s["staff_type"] for s in response.json()] == ["Zookeeper"]

    @pytest.mark.asyncio
    async def test_cannot_delete_enclosure_owner(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        await seed.enclosure(staff_id=keeper.id)

        response = await test_client.delete(f"/api/staff/{keeper.id}", headers=auth_headers(manager))

        assert response.status_code == 400
        assert "Reassign enclosures first" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_password_change(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        headers = auth_headers(keeper)

        short = await test_client.put(
            f"/api/staff/{keeper.id}/password",
            json={"current_password": "secret123", "new_password": "abc"},
            headers=headers,
        )
        assert short.status_code == 400

        wrong = await test_client.put(
            f"/api/staff/{keeper.id}/password",
            json={"current_password": "guess", "new_password": "abcdef"},
            headers=headers,
        )
        assert wrong.status_code == 401

        ok = await test_client.put(
            f"/api/staff/{keeper.id}/password",
            json={"current_password": "secret123", "new_password": "abcdef"},
            headers=headers,
        )
        assert ok.status_code == 200
        login = await test_client.post("/api/auth/login", json={"username": "keeper", "password": "abcdef"})
        assert login.status_code == 200


class TestVisitors:

    def test_membership_tiers_match_model(self):
        assert get_args(MembershipTier) == MEMBERSHIP_TIERS

    @pytest.mark.asyncio
    async def test_update_and_membership(self, test_client, seed, auth_headers):
        visitor = await seed.visitor()
        headers = auth_headers(visitor)

        patched = await test_client.patch(
            f"/api/visitors/{visitor.id}", json={"billing_address": None}, headers=headers,
        )
        assert patched.status_code == 200
        assert patched.json()["visitor"]["billing_address"] is None

        tier = await test_client.put(
            f"/api/visitors/{visitor.id}/membership", json={"membership": "Family"}, headers=headers,
        )
        assert tier.json()["visitor"]["membership"] == "Family"

        bogus = await test_client.put(
            f"/api/visitors/{visitor.id}/membership", json={"membership": "Platinum"}, headers=headers,
        )
        assert bogus.status_code == 400

    @pytest.mark.asyncio
    async def test_staff_may_read_visitor(self, test_client, seed, auth_headers):
        visitor = await seed.visitor()
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        other = await seed.visitor(username="other")

        assert (await test_client.get(f"/api/visitors/{visitor.id}", headers=auth_headers(keeper))).status_code == 200
        assert (await test_client.get(f"/api/visitors/{visitor.id}", headers=auth_headers(other))).status_code == 403

    @pytest.mark.asyncio
    async def test_delete_account_anonymises(self, test_client, seed, auth_headers):
        visitor = await seed.visitor(username="leaving")
        headers = auth_headers(visitor)

        wrong = await test_client.request(
            "DELETE", f"/api/visitors/{visitor.id}", json={"password": "nope"}, headers=headers,
        )
        assert wrong.status_code == 401

        deleted = await test_client.request(
            "DELETE", f"/api/visitors/{visitor.id}", json={"password": "secret123"}, headers=headers,
        )
        assert deleted.status_code == 200

        profile = (await test_client.get(f"/api/visitors/{visitor.id}", headers=headers)).json()
        assert (profile["first_name"], profile["last_name"]) == ("Deleted", "User")
        assert profile["username"].startswith(f"deleted_{visitor.id}_")
        assert profile["billing_address"] is None

        login = await test_client.post("/api/auth/login", json={"username": "leaving", "password": "secret123"})
        assert login.status_code == 404


class TestObservations:

    @pytest.mark.asyncio
    async def test_record_and_acknowledge(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper", name="Kim Keeper")
        vet = await seed.staff(username="vet", role="Vet Lead", staff_type="Vet", name="Val Vet")
        enclosure = await seed.enclosure()
        animal = await seed.animal(enclosure.id, name="Zuri")

        created = await test_client.post(
            "/api/observations",
            json={"animal_id": animal.id, "title": "Limping", "content": "Favouring the left foreleg"},
            headers=auth_headers(keeper),
        )
        assert created.status_code == 201
        observation = created.json()["observation"]
        assert observation["staff_name"] == "Kim Keeper"
        assert observation["animal_name"] == "Zuri"

        ack = await test_client.put(
            f"/api/observations/{observation['id']}/acknowledge", headers=auth_headers(vet),
        )
        assert ack.status_code == 200
        again = await test_client.put(
            f"/api/observations/{observation['id']}/acknowledge", headers=auth_headers(vet),
        )
        assert again.status_code == 404

        listing = await test_client.get(f"/api/observations/animal/{animal.id}", headers=auth_headers(keeper))
        entry = listing.json()["observations"][0]
        assert entry["acknowledged"] is True
        assert entry["acknowledged_by_name"] == "Val Vet"

    @pytest.mark.asyncio
    async def test_observation_on_unknown_animal(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        response = await test_client.post(
            "/api/observations",
            json={"animal_id": 77, "title": "?", "content": "?"},
            headers=auth_headers(keeper),
        )
        assert response.status_code == 404


class TestNotifications:

    @pytest.mark.asyncio
    async def test_targeted_by_staff_type(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        vet = await seed.staff(username="vet", role="Staff", staff_type="Vet")

        for body in (
            {"message": "Feeding schedule moved to 9am", "staff_type": "Zookeeper"},
            {"message": "Zoo closes early today"},
        ):
            created = await test_client.post("/api/notifications", json=body, headers=auth_headers(manager))
            assert created.status_code == 201

        keeper_view = await test_client.get("/api/notifications", headers=auth_headers(keeper))
        vet_view = await test_client.get("/api/notifications", headers=auth_headers(vet))
        assert len(keeper_view.json()["notifications"]) == 2
        assert [n["message"] for n in vet_view.json()["notifications"]] == ["Zoo closes early today"]

        zookeeper_only = next(
            n for n in keeper_view.json()["notifications"] if n["staff_type"] == "Zookeeper"
        )
        hidden = await test_client.put(
            f"/api/notifications/{zookeeper_only['id']}/acknowledge", headers=auth_headers(vet),
        )
        assert hidden.status_code == 404
        seen = await test_client.put(
            f"/api/notifications/{zookeeper_only['id']}/acknowledge", headers=auth_headers(keeper),
        )
        assert seen.status_code == 200

    @pytest.mark.asyncio
    async def test_only_managers_broadcast(self, test_client, seed, auth_headers):
        keeper = await seed.staff(username="keeper", role="Staff", staff_type="Zookeeper")
        response = await test_client.post(
            "/api/notifications", json={"message": "hi"}, headers=auth_headers(keeper),
        )
        assert response.status_code == 403


class TestMissingIds:
    """Writes against an id that does not exist leave every table untouched."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/api/animals/9999",
        "/api/enclosures/9999",
        "/api/attractions/9999",
        "/api/staff/9999",
        "/api/products/9999",
    ])
    async def test_delete_unknown_id_is_404(self, test_client, test_db, seed, auth_headers, path):
        # Manager of the gift shop passes every delete rule exercised here
        boss = await seed.staff(username="shopboss", role="Manager", staff_type="Gift Shop Clerk")
        enclosure = await seed.enclosure(staff_id=boss.id)
        await seed.animal(enclosure.id)
        await seed.product()
        async with test_db.session_factory() as session:
            session.add(Attraction(
                title="Penguin Parade",
                description="The colony waddles to the feeding pool",
                location="Polar Pavilion",
                picture="https://example.org/penguins.jpg",
                start_time=datetime(2025, 7, 1, 14, 0, tzinfo=timezone.utc),
            ))
            await session.commit()
        before = await _row_counts(test_db)

        response = await test_client.delete(path, headers=auth_headers(boss))

        assert response.status_code == 404
        assert "9999" in response.json()["error"]
        assert await _row_counts(test_db) == before

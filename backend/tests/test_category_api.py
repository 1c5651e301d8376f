"""
Tourlist Backend - Attraction Category API Tests
=================================================

What we test:
    ✅ Create: trimming, blank optionals → null, duplicate names
    ✅ Unique constraint path (pre-check bypassed) → same 400
    ✅ Mutations need an admin session (guest and user → 401)
    ✅ List ordering and attraction counts
    ✅ Detail with attractions, 404 on unknown id
    ✅ Update rename rules, delete blocked by attractions
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from app.models import Attraction
from app.services.category_service import DUPLICATE_NAME_MESSAGE, category_service

URL = "/attraction-categories"


class TestCreateCategory:

    @pytest.mark.asyncio
    async def test_create_trims_name_and_nulls_blank_optionals(self, client, admin_headers):
        response = await client.post(
            URL,
            json={"name": "  Beach  ", "description": "", "color": "   "},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Beach"
        assert body["description"] is None
        assert body["color"] is None
        assert "createdAt" in body

    @pytest.mark.asyncio
    async def test_duplicate_name_rejected(self, client, admin_headers):
        first = await client.post(URL, json={"name": "Beach"}, headers=admin_headers)
        second = await client.post(URL, json={"name": " Beach "}, headers=admin_headers)

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json()["error"] == DUPLICATE_NAME_MESSAGE
        assert second.json()["code"] == "conflict"

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, client, admin_headers):
        await client.post(URL, json={"name": "Beach"}, headers=admin_headers)
        response = await client.post(URL, json={"name": "beach"}, headers=admin_headers)
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_unique_constraint_maps_to_same_error(self, client, admin_headers):
        await client.post(URL, json={"name": "Beach"}, headers=admin_headers)

        # Two racing creates both pass the lookup; the constraint catches the second
        with patch.object(category_service, "_find_by_name", AsyncMock(return_value=None)):
            response = await client.post(URL, json={"name": "Beach"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == DUPLICATE_NAME_MESSAGE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}])
    async def test_name_required(self, client, admin_headers, body):
        response = await client.post(URL, json=body, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Category name is required"
        assert response.json()["details"] == {"field": "name"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, field",
        [({"name": "x" * 101}, "name"), ({"name": "Beach", "color": "#" * 33}, "color")],
    )
    async def test_value_longer_than_column_rejected(self, client, admin_headers, body, field):
        response = await client.post(URL, json=body, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert response.json()["details"]["field"] == field

    @pytest.mark.asyncio
    async def test_name_at_column_length_accepted(self, client, admin_headers):
        response = await client.post(URL, json={"name": "x" * 100}, headers=admin_headers)
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_guest_rejected(self, client):
        response = await client.post(URL, json={"name": "Beach"})

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"
        assert response.json()["code"] == "unauthenticated"

    @pytest.mark.asyncio
    async def test_user_rejected_with_forbidden_code(self, client, user_headers):
        response = await client.post(URL, json={"name": "Beach"}, headers=user_headers)

        assert response.status_code == 401
        assert response.json()["code"] == "forbidden"
        assert "details" not in response.json()

    @pytest.mark.asyncio
    async def test_auth_checked_before_body(self, client):
        response = await client.post(URL, json={"name": 42})
        assert response.status_code == 401


class TestListAndDetail:

    @pytest.mark.asyncio
    async def test_list_is_public_and_ordered_by_name(self, client, admin_headers):
        for name in ("Wildlife", "Beach", "Historic"):
            await client.post(URL, json={"name": name}, headers=admin_headers)

        response = await client.get(URL)

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Beach", "Historic", "Wildlife"]

    @pytest.mark.asyncio
    async def test_list_counts_attractions(self, client, db, category):
        db.add_all([
            Attraction(name="Kakum", category_id=category.id),
            Attraction(name="Mole", category_id=category.id),
        ])
        await db.commit()

        response = await client.get(URL)

        assert response.json()[0]["attractionCount"] == 2

    @pytest.mark.asyncio
    async def test_detail_lists_attractions(self, client, db, category):
        db.add(Attraction(name="Kakum", location="Central Region", category_id=category.id, rating=4.5))
        await db.commit()

        response = await client.get(f"{URL}/{category.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Natural"
        assert body["attractionCount"] == 1
        assert body["attractions"][0]["name"] == "Kakum"
        assert body["attractions"][0]["rating"] == 4.5

    @pytest.mark.asyncio
    async def test_detail_unknown_id(self, client):
        response = await client.get(f"{URL}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    @pytest.mark.asyncio
    async def test_detail_malformed_id(self, client):
        response = await client.get(f"{URL}/not-a-uuid")
        assert response.status_code == 400


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_update_keeps_own_name(self, client, admin_headers, category):
        response = await client.put(
            f"{URL}/{category.id}",
            json={"name": "Natural", "color": "#00FF00"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["color"] == "#00FF00"

    @pytest.mark.asyncio
    async def test_update_to_taken_name_rejected(self, client, admin_headers, category):
        await client.post(URL, json={"name": "Beach"}, headers=admin_headers)

        response = await client.put(
            f"{URL}/{category.id}", json={"name": "Beach"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == DUPLICATE_NAME_MESSAGE

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, client, admin_headers):
        response = await client.put(
            f"{URL}/{uuid.uuid4()}", json={"name": "Beach"}, headers=admin_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_empty_category(self, client, admin_headers, category):
        response = await client.delete(f"{URL}/{category.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Category deleted successfully"}
        assert (await client.get(f"{URL}/{category.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_blocked_by_attractions(self, client, db, admin_headers, category):
        db.add(Attraction(name="Kakum", category_id=category.id))
        await db.commit()

        response = await client.delete(f"{URL}/{category.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Cannot delete category that has attractions")
        assert (await client.get(f"{URL}/{category.id}")).status_code == 200

    @pytest.mark.asyncio
    async def test_delete_requires_admin(self, client, user_headers, category):
        response = await client.delete(f"{URL}/{category.id}", headers=user_headers)
        assert response.status_code == 401

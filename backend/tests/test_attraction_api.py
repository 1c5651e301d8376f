"""
Tourlist Backend - Attraction API Tests
========================================

What we test:
    ✅ Create defaults (availableSlots ← maxVisitors, rating 0, images [])
    ✅ Unknown category, slots above capacity, non-positive price → 400
    ✅ Wrongly typed field → 400 naming the field (never 500)
    ✅ Public list and detail (category + reviews with author)
    ✅ Partial update keeps untouched columns
    ✅ Delete removes the attraction and its reviews
"""

import uuid

import pytest

from app.models import Attraction, Review

URL = "/attractions"


class TestCreateAttraction:

    @pytest.mark.asyncio
    async def test_slots_default_to_max_visitors(self, client, admin_headers, category):
        response = await client.post(
            URL,
            json={
                "name": "Kakum National Park",
                "categoryId": str(category.id),
                "maxVisitors": 50,
                "price": 60,
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["maxVisitors"] == 50
        assert body["availableSlots"] == 50
        assert body["rating"] == 0
        assert body["images"] == []
        assert body["categoryId"] == str(category.id)

    @pytest.mark.asyncio
    async def test_without_category(self, client, admin_headers):
        response = await client.post(URL, json={"name": "Cape Coast Castle"}, headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["categoryId"] is None

    @pytest.mark.asyncio
    async def test_unknown_category(self, client, admin_headers):
        response = await client.post(
            URL,
            json={"name": "Kakum", "categoryId": str(uuid.uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid category"
        assert response.json()["details"] == {"field": "categoryId"}

    @pytest.mark.asyncio
    async def test_slots_above_capacity(self, client, admin_headers):
        response = await client.post(
            URL,
            json={"name": "Kakum", "maxVisitors": 10, "availableSlots": 20},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "availableSlots"

    @pytest.mark.asyncio
    async def test_non_positive_price(self, client, admin_headers):
        response = await client.post(
            URL, json={"name": "Kakum", "price": 0}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Price must be a positive number"

    @pytest.mark.asyncio
    async def test_wrong_type_is_400(self, client, admin_headers):
        response = await client.post(
            URL, json={"name": "Kakum", "maxVisitors": "many"}, headers=admin_headers
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validation_error"
        assert body["details"] == {"field": "maxVisitors"}

    @pytest.mark.asyncio
    async def test_blank_name(self, client, admin_headers):
        response = await client.post(URL, json={"name": "  "}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Attraction name is required"

    @pytest.mark.asyncio
    async def test_user_cannot_create(self, client, user_headers):
        response = await client.post(URL, json={"name": "Kakum"}, headers=user_headers)

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"


class TestReadAttractions:

    @pytest.mark.asyncio
    async def test_list_includes_category_and_reviews(self, client, db, category, regular_user):
        attraction = Attraction(name="Kakum", category_id=category.id, max_visitors=5, available_slots=5)
        db.add(attraction)
        await db.flush()
        db.add(Review(user_id=regular_user.id, attraction_id=attraction.id, rating=5, comment="Canopy walk!"))
        await db.commit()

        response = await client.get(URL)

        assert response.status_code == 200
        [item] = response.json()
        assert item["category"] == {"id": str(category.id), "name": "Natural", "color": "#228B22"}
        assert item["reviews"][0]["rating"] == 5
        assert item["reviews"][0]["userId"] == str(regular_user.id)

    @pytest.mark.asyncio
    async def test_detail_reviews_carry_author(self, client, db, regular_user):
        attraction = Attraction(name="Kakum")
        db.add(attraction)
        await db.flush()
        db.add(Review(user_id=regular_user.id, attraction_id=attraction.id, rating=4))
        await db.commit()

        response = await client.get(f"{URL}/{attraction.id}")

        assert response.status_code == 200
        review = response.json()["reviews"][0]
        assert review["user"] == {"name": "Kofi", "email": "kofi@tourlist.test"}
        assert review["comment"] is None

    @pytest.mark.asyncio
    async def test_detail_unknown(self, client):
        response = await client.get(f"{URL}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "Attraction not found"


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, client, admin_headers):
        created = await client.post(
            URL,
            json={"name": "Kakum", "location": "Central Region", "maxVisitors": 40},
            headers=admin_headers,
        )
        attraction_id = created.json()["id"]

        response = await client.put(
            f"{URL}/{attraction_id}", json={"price": 25.5}, headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 25.5
        assert body["location"] == "Central Region"
        assert body["availableSlots"] == 40

    @pytest.mark.asyncio
    async def test_update_checks_stored_capacity(self, client, admin_headers):
        created = await client.post(
            URL, json={"name": "Kakum", "maxVisitors": 40}, headers=admin_headers
        )

        response = await client.put(
            f"{URL}/{created.json()['id']}",
            json={"availableSlots": 41},
            headers=admin_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_unknown(self, client, admin_headers):
        response = await client.put(
            f"{URL}/{uuid.uuid4()}", json={"price": 10}, headers=admin_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_removes_reviews(self, client, db, admin_headers, regular_user):
        attraction = Attraction(name="Kakum")
        db.add(attraction)
        await db.flush()
        db.add(Review(user_id=regular_user.id, attraction_id=attraction.id, rating=3))
        await db.commit()

        response = await client.delete(f"{URL}/{attraction.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Attraction deleted successfully"}
        assert (await client.get(f"{URL}/{attraction.id}")).status_code == 404

        admin_view = await client.get("/reviews", headers=admin_headers)
        assert admin_view.json() == []

    @pytest.mark.asyncio
    async def test_delete_requires_session(self, client):
        response = await client.delete(f"{URL}/{uuid.uuid4()}")
        assert response.status_code == 401

"""
Tourlist Backend - Hotel API Tests
===================================

What we test:
    ✅ Create defaults (availableRooms 0, amenities [], rating 0)
    ✅ Unknown destination and non-positive price → 400
    ✅ Public list with destination, detail with review authors
    ✅ Partial update, delete
    ✅ Admin session required for every mutation
"""

import uuid

import pytest

from app.models import Destination, Hotel, Review

URL = "/hotels"


@pytest.fixture
def destination_factory(db):
    async def factory(name: str = "Accra") -> Destination:
        item = Destination(name=name, location="Greater Accra", image_url="https://img.test/accra.jpg")
        db.add(item)
        await db.commit()
        return item
    return factory


class TestCreateHotel:

    @pytest.mark.asyncio
    async def test_defaults(self, client, admin_headers):
        response = await client.post(
            URL,
            json={"name": "Labadi Beach Hotel", "pricePerNight": 180, "amenities": ["Pool", " ", "Wifi"]},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["availableRooms"] == 0
        assert body["amenities"] == ["Pool", "Wifi"]
        assert body["rating"] == 0
        assert body["pricePerNight"] == 180

    @pytest.mark.asyncio
    async def test_with_destination(self, client, admin_headers, destination_factory):
        destination = await destination_factory()

        response = await client.post(
            URL,
            json={"name": "Kempinski", "destinationId": str(destination.id), "availableRooms": 12},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["destinationId"] == str(destination.id)
        assert response.json()["availableRooms"] == 12

    @pytest.mark.asyncio
    async def test_unknown_destination(self, client, admin_headers):
        response = await client.post(
            URL,
            json={"name": "Kempinski", "destinationId": str(uuid.uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid destination"

    @pytest.mark.asyncio
    async def test_non_positive_price(self, client, admin_headers):
        response = await client.post(
            URL, json={"name": "Kempinski", "pricePerNight": -1}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "pricePerNight"}

    @pytest.mark.asyncio
    async def test_long_name_rejected(self, client, admin_headers):
        response = await client.post(URL, json={"name": "x" * 201}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert response.json()["details"]["field"] == "name"

    @pytest.mark.asyncio
    async def test_missing_name(self, client, admin_headers):
        response = await client.post(URL, json={"location": "Accra"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Hotel name is required"

    @pytest.mark.asyncio
    async def test_guest_cannot_create(self, client):
        response = await client.post(URL, json={"name": "Kempinski"})
        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"

    @pytest.mark.asyncio
    async def test_user_cannot_create(self, client, user_headers):
        response = await client.post(URL, json={"name": "Kempinski"}, headers=user_headers)
        assert response.status_code == 401
        assert response.json()["code"] == "forbidden"


class TestReadHotels:

    @pytest.mark.asyncio
    async def test_list_nests_destination(self, client, db, destination_factory):
        destination = await destination_factory()
        db.add(Hotel(name="Kempinski", destination_id=destination.id))
        await db.commit()

        response = await client.get(URL)

        assert response.status_code == 200
        [hotel] = response.json()
        assert hotel["destination"]["name"] == "Accra"
        assert hotel["destination"]["imageUrl"] == "https://img.test/accra.jpg"
        assert hotel["reviews"] == []

    @pytest.mark.asyncio
    async def test_detail_with_reviews(self, client, db, regular_user):
        hotel = Hotel(name="Kempinski")
        db.add(hotel)
        await db.flush()
        db.add(Review(user_id=regular_user.id, hotel_id=hotel.id, rating=5, comment="Great breakfast"))
        await db.commit()

        response = await client.get(f"{URL}/{hotel.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["destination"] is None
        assert body["reviews"][0]["user"]["email"] == "kofi@tourlist.test"
        assert body["reviews"][0]["comment"] == "Great breakfast"

    @pytest.mark.asyncio
    async def test_detail_unknown(self, client):
        response = await client.get(f"{URL}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "Hotel not found"


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_partial_update(self, client, admin_headers):
        created = await client.post(
            URL,
            json={"name": "Kempinski", "location": "Accra", "amenities": ["Spa"]},
            headers=admin_headers,
        )

        response = await client.put(
            f"{URL}/{created.json()['id']}",
            json={"availableRooms": 3},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["availableRooms"] == 3
        assert response.json()["amenities"] == ["Spa"]
        assert response.json()["location"] == "Accra"

    @pytest.mark.asyncio
    async def test_update_requires_admin(self, client, user_headers):
        response = await client.put(f"{URL}/{uuid.uuid4()}", json={"name": "X"}, headers=user_headers)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_delete(self, client, admin_headers):
        created = await client.post(URL, json={"name": "Kempinski"}, headers=admin_headers)
        hotel_id = created.json()["id"]

        response = await client.delete(f"{URL}/{hotel_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Hotel deleted successfully"}
        assert (await client.get(f"{URL}/{hotel_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, client, admin_headers):
        response = await client.delete(f"{URL}/{uuid.uuid4()}", headers=admin_headers)
        assert response.status_code == 404

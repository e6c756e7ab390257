from unittest.mock import patch

from tourdir.core.directory import DirectoryService


def create_user(client, username="tendai", email="tendai@example.com"):
    res = client.post(
        "/api/users",
        json={"username": username, "email": email, "password": "secret123"},
    )
    assert res.status_code == 201
    return res.json()


def create_category(client, name="Dining"):
    res = client.post("/api/categories", json={"name": name, "icon": "utensils"})
    assert res.status_code == 201
    return res.json()


def create_business(client, category_id, **kwargs):
    body = {
        "name": "Boma Restaurant",
        "latitude": -17.8252,
        "longitude": 31.0335,
        "categoryId": category_id,
        "rating": 4.6,
        "priceLevel": 45,
        "amenities": ["Live Music", "Bar"],
    }
    body.update(kwargs)
    res = client.post("/api/businesses", json=body)
    assert res.status_code == 201, res.json()
    return res.json()


def create_itinerary(client, user_id, **kwargs):
    body = {
        "userId": user_id,
        "title": "Falls Trip",
        "startDate": "2025-05-01",
        "endDate": "2025-05-05",
        "totalBudget": 1000,
    }
    body.update(kwargs)
    res = client.post("/api/itineraries", json=body)
    assert res.status_code == 201, res.json()
    return res.json()


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_user_never_exposes_password(client):
    user = create_user(client)
    assert user["username"] == "tendai"
    assert "password" not in user
    assert "hashedPassword" not in user

    dup = client.post(
        "/api/users",
        json={"username": "tendai", "email": "x@example.com", "password": "secret123"},
    )
    assert dup.status_code == 400
    assert dup.json()["message"] == "Username already exists"


def test_validation_errors_are_400(client):
    res = client.post("/api/categories", json={"name": ""})
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation error"
    fields = {e["field"] for e in body["errors"]}
    assert {"name", "icon"} <= fields


def test_categories(client):
    created = create_category(client)
    assert client.get("/api/categories").json() == [created]
    assert client.get(f"/api/categories/{created['id']}").json()["name"] == "Dining"

    missing = client.get("/api/categories/999")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Category not found"}


def test_business_search(client):
    dining = create_category(client)
    create_business(client, dining["id"])
    create_business(
        client,
        dining["id"],
        name="Indaba Cafe",
        latitude=-17.8282,
        longitude=31.0426,
        rating=4.5,
        priceLevel=15,
        amenities=["WiFi"],
    )

    res = client.get("/api/businesses", params={"rating": 4.6})
    assert [b["name"] for b in res.json()] == ["Boma Restaurant"]

    res = client.get("/api/businesses", params=[("priceLevel", "15"), ("priceLevel", "45")])
    assert len(res.json()) == 2

    res = client.get("/api/businesses", params={"amenities": '["WiFi"]'})
    assert [b["name"] for b in res.json()] == ["Indaba Cafe"]

    res = client.get(
        "/api/businesses",
        params={"latitude": -17.8282, "longitude": 31.0426, "radius": 5},
    )
    assert [b["name"] for b in res.json()] == ["Indaba Cafe", "Boma Restaurant"]


def test_business_search_rejects_bad_query(client):
    res = client.get("/api/businesses", params={"latitude": -17.8})
    assert res.status_code == 400
    assert res.json()["message"] == "Validation error"

    res = client.get("/api/businesses", params={"rating": "high"})
    assert res.status_code == 400


def test_business_update_and_owner_listing(client):
    user = create_user(client)
    dining = create_category(client)
    business = create_business(client, dining["id"])

    res = client.put(
        f"/api/businesses/{business['id']}",
        json={"ownerId": user["id"], "claimed": True},
    )
    assert res.status_code == 200
    assert res.json()["claimed"] is True

    owned = client.get(f"/api/businesses/owner/{user['id']}").json()
    assert [b["id"] for b in owned] == [business["id"]]

    assert client.get("/api/businesses/999").status_code == 404


def test_claim_flow(client):
    user = create_user(client)
    dining = create_category(client)
    business = create_business(client, dining["id"])

    res = client.post(
        "/api/claim-requests", json={"businessId": business["id"], "userId": user["id"]}
    )
    assert res.status_code == 201
    claim = res.json()
    assert claim["status"] == "pending"

    res = client.put(f"/api/claim-requests/{claim['id']}", json={"status": "approved"})
    assert res.status_code == 200
    assert res.json()["status"] == "approved"

    refreshed = client.get(f"/api/businesses/{business['id']}").json()
    assert refreshed["claimed"] is True
    assert refreshed["ownerId"] == user["id"]

    again = client.put(f"/api/claim-requests/{claim['id']}", json={"status": "rejected"})
    assert again.status_code == 400

    listed = client.get(f"/api/claim-requests/user/{user['id']}").json()
    assert [c["id"] for c in listed] == [claim["id"]]

    bad = client.put(f"/api/claim-requests/{claim['id']}", json={"status": "maybe"})
    assert bad.status_code == 400


def test_itinerary_flow(client):
    user = create_user(client)
    itinerary = create_itinerary(client, user["id"])
    itinerary_id = itinerary["id"]

    res = client.post(f"/api/itineraries/{itinerary_id}/days", json={"date": "2025-05-04"})
    assert res.status_code == 201
    day = res.json()
    assert day["dayNumber"] == 4

    res = client.post(
        f"/api/itinerary-days/{day['id']}/items",
        json={"type": "activity", "title": "Game drive", "startTime": "06:00", "cost": 150},
    )
    assert res.status_code == 201
    item = res.json()

    res = client.put(f"/api/itinerary-items/{item['id']}", json={"cost": 120})
    assert res.json()["cost"] == 120

    summary = client.get(f"/api/itineraries/{itinerary_id}/summary").json()
    assert summary["totalCost"] == 120
    assert summary["remainingBudget"] == 880
    assert summary["days"][0]["items"][0]["title"] == "Game drive"

    updated = client.get(f"/api/itineraries/{itinerary_id}").json()
    assert updated["updatedAt"] > itinerary["updatedAt"]

    res = client.delete(f"/api/itineraries/{itinerary_id}")
    assert res.status_code == 200
    assert res.json() == {"message": "Itinerary deleted successfully"}
    assert client.get(f"/api/itineraries/{itinerary_id}").status_code == 404
    assert client.get(f"/api/itinerary-items/{item['id']}").status_code == 404


def test_day_before_start_is_400(client):
    user = create_user(client)
    itinerary = create_itinerary(client, user["id"])
    res = client.post(
        f"/api/itineraries/{itinerary['id']}/days", json={"date": "2025-04-30"}
    )
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "date"


def test_itinerary_with_bad_dates(client):
    user = create_user(client)
    res = client.post(
        "/api/itineraries",
        json={
            "userId": user["id"],
            "title": "Backwards",
            "startDate": "2025-05-05",
            "endDate": "2025-05-01",
        },
    )
    assert res.status_code == 400


def test_public_and_user_itineraries(client):
    user = create_user(client)
    private = create_itinerary(client, user["id"])
    public = create_itinerary(client, user["id"], title="Open", isPublic=True)

    assert [i["id"] for i in client.get("/api/itineraries").json()] == [public["id"]]
    mine = client.get(f"/api/itineraries/user/{user['id']}").json()
    assert [i["id"] for i in mine] == [private["id"], public["id"]]


def test_collaborators(client):
    user = create_user(client)
    itinerary = create_itinerary(client, user["id"])
    base = f"/api/itineraries/{itinerary['id']}/collaborators"

    res = client.post(base, json={"email": "amy@example.com", "name": "Amy"})
    assert res.status_code == 201
    assert res.json()["accessLevel"] == "view"

    assert client.post(base, json={"email": "amy@example.com"}).status_code == 400

    res = client.put(f"{base}/amy@example.com", json={"accessLevel": "edit"})
    assert res.json()["accessLevel"] == "edit"

    res = client.delete(f"{base}/amy@example.com")
    assert res.status_code == 200
    assert client.get(base).json() == []


def test_transport_booking_flow(client):
    user = create_user(client)
    itinerary = create_itinerary(client, user["id"])
    res = client.post(
        "/api/transport-bookings",
        json={
            "userId": user["id"],
            "itineraryId": itinerary["id"],
            "serviceType": "taxi",
            "bookingDate": "2025-05-01",
            "pickupTime": "07:30",
            "pickupLocation": "Airport",
            "dropoffLocation": "Hotel",
            "cost": 40,
        },
    )
    assert res.status_code == 201
    booking = res.json()
    assert booking["status"] == "pending"

    res = client.put(f"/api/transport-bookings/{booking['id']}", json={"status": "completed"})
    assert res.status_code == 400

    res = client.put(f"/api/transport-bookings/{booking['id']}", json={"status": "confirmed"})
    assert res.json()["status"] == "confirmed"

    linked = client.get(f"/api/itineraries/{itinerary['id']}/transport-bookings").json()
    assert [b["id"] for b in linked] == [booking["id"]]
    assert len(client.get(f"/api/transport-bookings/user/{user['id']}").json()) == 1

    client.delete(f"/api/itineraries/{itinerary['id']}")
    detached = client.get(f"/api/transport-bookings/{booking['id']}").json()
    assert detached["itineraryId"] is None

    res = client.delete(f"/api/transport-bookings/{booking['id']}")
    assert res.json() == {"message": "Booking deleted successfully"}


def test_calendar_export(client):
    user = create_user(client)
    itinerary = create_itinerary(client, user["id"])
    client.post(f"/api/itineraries/{itinerary['id']}/days", json={"date": "2025-05-01"})

    res = client.get(f"/api/itineraries/{itinerary['id']}/calendar")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/calendar")
    assert "attachment" in res.headers["content-disposition"]
    assert "SUMMARY:Day 1: Falls Trip" in res.text


def test_seed_and_maps_config(client):
    res = client.get("/api/seed-data")
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Data seeded successfully"
    assert body["count"] == 10
    assert len(body["categories"]) == 6

    again = client.get("/api/seed-data").json()
    assert again["count"] == 10

    boma = client.get("/api/businesses", params={"keyword": "boma"}).json()
    assert boma[0]["rating"] == 4.6
    filtered = client.get(
        "/api/businesses", params={"rating": 4.5, "categoryId": boma[0]["categoryId"]}
    ).json()
    assert "Boma Restaurant" in [b["name"] for b in filtered]

    assert client.get("/api/config/maps").json() == {"apiKey": "test-key"}


def test_unhandled_errors_are_500(client):
    with patch.object(DirectoryService, "list_categories", side_effect=RuntimeError("boom")):
        res = client.get("/api/categories")
    assert res.status_code == 500
    assert res.json() == {"message": "Internal server error"}

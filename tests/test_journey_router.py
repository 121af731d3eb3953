import pytest
from fastapi.testclient import TestClient

from journeyapi.database.session import get_db
from journeyapi.main import create_app

V1 = {"latitude": 61.2176, "longitude": -149.8953}
FIVE_MILES_NORTH_OF_V2 = {"latitude": 61.1424 + 5 / 69.09, "longitude": -149.8663}


@pytest.fixture
def client(db):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/v1/auth/device", json={"device_id": "device-abc-12345"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def start_journey(client, headers, vendor_ids, **extra):
    return client.post(
        "/api/v1/journeys",
        json={
            "deal_type": "birthday",
            "vendor_ids": vendor_ids,
            "start_location": V1,
            **extra,
        },
        headers=headers,
    )


class TestAuth:
    def test_device_registration_is_create_or_get(self, client):
        first = client.post("/api/v1/auth/device", json={"device_id": "device-xyz-99999"}).json()
        again = client.post("/api/v1/auth/device", json={"device_id": "device-xyz-99999"}).json()

        assert first["is_new_user"] is True
        assert again["is_new_user"] is False
        assert again["user_id"] == first["user_id"]

    def test_missing_token(self, client):
        response = client.get("/api/v1/points/balance")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_001"

    def test_garbage_token(self, client):
        response = client.get(
            "/api/v1/journeys/active", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "database": "ok"}


class TestJourneyFlow:
    def test_full_journey(self, client, auth_headers):
        created = start_journey(client, auth_headers, ["v2", "v1"])
        assert created.status_code == 201
        journey = created.json()
        assert [s["vendor_id"] for s in journey["stops"]] == ["v1", "v2"]

        first = client.post(
            f"/api/v1/journeys/{journey['id']}/check-in",
            json={"qr_payload": "lootsganja://checkin/v1"},
            headers=auth_headers,
        )
        assert first.status_code == 200
        assert first.json()["points_earned"] == 10

        advanced = client.post(f"/api/v1/journeys/{journey['id']}/advance", headers=auth_headers)
        assert advanced.json()["current_vendor_index"] == 1

        last = client.post(
            f"/api/v1/journeys/{journey['id']}/check-in",
            json={"location": {"latitude": 61.1424, "longitude": -149.8663}},
            headers=auth_headers,
        ).json()
        assert last["journey_completed"] is True
        assert last["completion_bonus"] == 10
        assert last["points_balance"] == 30

        assert client.get("/api/v1/points/balance", headers=auth_headers).json() == {"balance": 30}
        assert client.get("/api/v1/journeys/active", headers=auth_headers).json() is None

        stats = client.get("/api/v1/journeys/stats", headers=auth_headers).json()
        assert stats["completed_journeys"] == 1

        integrity = client.get("/api/v1/points/integrity/my", headers=auth_headers).json()
        assert integrity["status"] == "OK"
        assert integrity["entry_count"] == 3

    def test_second_journey_conflicts(self, client, auth_headers):
        start_journey(client, auth_headers, ["v1"])

        response = start_journey(client, auth_headers, ["v2"])

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT_001"

    def test_unknown_vendor_is_404(self, client, auth_headers):
        response = start_journey(client, auth_headers, ["v1", "ghost"])

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND_001"

    def test_wrong_qr_is_400(self, client, auth_headers):
        journey = start_journey(client, auth_headers, ["v1"]).json()

        response = client.post(
            f"/api/v1/journeys/{journey['id']}/check-in",
            json={"qr_payload": "wrongscheme://x"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CHECKIN_001"

    def test_too_far_then_forced(self, client, auth_headers):
        journey = start_journey(client, auth_headers, ["v2"]).json()
        url = f"/api/v1/journeys/{journey['id']}/check-in"

        too_far = client.post(url, json={"location": FIVE_MILES_NORTH_OF_V2}, headers=auth_headers)
        assert too_far.status_code == 409
        error = too_far.json()["error"]
        assert error["code"] == "CHECKIN_002"
        assert error["details"]["can_force"] is True
        assert error["details"]["distance_miles"] == pytest.approx(5, rel=0.01)

        forced = client.post(
            url, json={"location": FIVE_MILES_NORTH_OF_V2, "force": True}, headers=auth_headers
        )
        assert forced.status_code == 200
        check_in = forced.json()["check_in"]
        assert check_in["proximity_overridden"] is True
        assert check_in["distance_miles"] == pytest.approx(5, rel=0.01)

    def test_skip_without_body(self, client, auth_headers):
        journey = start_journey(client, auth_headers, ["v1", "v2"]).json()

        response = client.post(f"/api/v1/journeys/{journey['id']}/skip", headers=auth_headers)

        assert response.status_code == 200
        assert [s["vendor_id"] for s in response.json()["stops"]] == ["v2"]

    def test_cancelled_journey_rejects_advance(self, client, auth_headers):
        journey = start_journey(client, auth_headers, ["v1", "v2"]).json()
        client.post(f"/api/v1/journeys/{journey['id']}/cancel", headers=auth_headers)

        response = client.post(f"/api/v1/journeys/{journey['id']}/advance", headers=auth_headers)

        assert response.status_code == 409

    def test_invalid_body_is_422(self, client, auth_headers):
        response = client.post(
            "/api/v1/journeys",
            json={"deal_type": "weekly", "vendor_ids": [], "start_location": V1},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_001"


class TestVendorRoutes:
    def test_list_and_get(self, client, auth_headers):
        listing = client.get("/api/v1/vendors", headers=auth_headers).json()
        assert listing["total_count"] == 5

        assert client.get("/api/v1/vendors/v1", headers=auth_headers).json()["name"] == (
            "Northern Lights Cannabis"
        )
        assert client.get("/api/v1/vendors/ghost", headers=auth_headers).status_code == 404

    def test_standalone_check_in(self, client, auth_headers):
        response = client.post(
            "/api/v1/vendors/v1/check-in",
            json={"qr_payload": "lootsganja://checkin/v1"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["points_balance"] == 10

        recent = client.get("/api/v1/users/me/recent-vendors", headers=auth_headers).json()
        assert recent[0]["vendor_id"] == "v1"

    def test_route_estimate(self, client, auth_headers):
        response = client.post(
            "/api/v1/routes/estimate",
            json={"vendor_ids": ["v2", "v1"], "start_location": V1},
            headers=auth_headers,
        )

        body = response.json()
        assert [s["vendor_id"] for s in body["stops"]] == ["v1", "v2"]
        assert body["estimated_time"] == pytest.approx(body["total_distance"] * 2.88)

    def test_favorites_roundtrip(self, client, auth_headers):
        assert client.post("/api/v1/favorites/v3", headers=auth_headers).status_code == 201
        assert client.post("/api/v1/favorites/v3", headers=auth_headers).status_code == 409

        profile = client.get("/api/v1/users/me", headers=auth_headers).json()
        assert profile["favorites"] == ["v3"]

        assert client.delete("/api/v1/favorites/v3", headers=auth_headers).status_code == 204
        check = client.get("/api/v1/favorites/check/v3", headers=auth_headers).json()
        assert check["is_favorited"] is False

"""
HTTP API tests through FastAPI's TestClient, backed by the seeded
in-memory store.
"""
import pytest

from app.core.config import settings

API = settings.API_PREFIX


class TestAuth:

    def test_login_success(self, api_client):
        response = api_client.post(
            f"{API}/auth/login",
            json={"email": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["is_admin"] is True

    def test_login_wrong_password(self, api_client):
        response = api_client.post(
            f"{API}/auth/login",
            json={"email": settings.ADMIN_EMAIL, "password": "wrong-password"},
        )

        assert response.status_code == 401

    @pytest.mark.parametrize("password", [
        settings.ADMIN_PASSWORD + " ",
        " " + settings.ADMIN_PASSWORD,
    ])
    def test_login_password_compared_exactly(self, api_client, password):
        response = api_client.post(
            f"{API}/auth/login",
            json={"email": settings.ADMIN_EMAIL, "password": password},
        )

        assert response.status_code == 401

    def test_login_rejects_malformed_email(self, api_client):
        response = api_client.post(f"{API}/auth/login", json={"email": "admin", "password": "x"})

        assert response.status_code == 422

    def test_me(self, api_client, auth_headers):
        response = api_client.get(f"{API}/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == settings.ADMIN_EMAIL

    @pytest.mark.parametrize("method,path", [
        ("get", "/customers"),
        ("post", "/check-in/scan"),
        ("delete", "/gift-redemption/reg-1"),
        ("get", "/event-locations"),
        ("get", "/survey-responses"),
    ])
    def test_routes_require_token(self, api_client, method, path):
        response = getattr(api_client, method)(f"{API}{path}")

        assert response.status_code == 401

    def test_garbage_token_rejected(self, api_client):
        response = api_client.get(f"{API}/customers", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401


class TestHealth:

    def test_health(self, api_client):
        response = api_client.get(f"{API}/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, api_client):
        response = api_client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "operational"


class TestCheckInEndpoints:

    def test_scan_check_in_and_repeat(self, api_client, auth_headers):
        first = api_client.post(
            f"{API}/check-in/scan",
            json={"qr_code": "aux-training-950920086687"},
            headers=auth_headers,
        )
        again = api_client.post(
            f"{API}/check-in/scan",
            json={"qr_code": "950920-08-6687"},
            headers=auth_headers,
        )

        assert first.status_code == 200
        assert first.json()["success"] is True
        assert first.json()["message"] == "Check-in successful"
        assert first.json()["customer"]["status"] == "checked-in"
        assert again.json()["success"] is False
        assert again.json()["outcome"] == "already_applied"
        assert "already checked in" in again.json()["message"]

    def test_repeat_scan_shows_prior_local_time(self, api_client, auth_headers):
        response = api_client.post(
            f"{API}/check-in/scan", json={"qr_code": "880101145522"}, headers=auth_headers
        )

        assert response.json()["outcome"] == "already_applied"
        assert response.json()["message"] == "User has already checked in at 18/05/2025, 09:30:00 AM"

    def test_scan_unknown_and_invalid(self, api_client, auth_headers):
        unknown = api_client.post(
            f"{API}/check-in/scan", json={"qr_code": "000000-00-0000"}, headers=auth_headers
        )
        invalid = api_client.post(
            f"{API}/check-in/scan", json={"qr_code": "12345"}, headers=auth_headers
        )

        assert "No customer found" in unknown.json()["message"]
        assert unknown.json()["customer"] is None
        assert invalid.json()["outcome"] == "invalid_format"

    def test_clear_and_stats(self, api_client, auth_headers):
        before = api_client.get(f"{API}/check-in/stats", headers=auth_headers).json()
        cleared = api_client.delete(f"{API}/check-in/reg-2", headers=auth_headers)
        after = api_client.get(f"{API}/check-in/stats", headers=auth_headers).json()

        assert before["applied"] == 1
        assert cleared.status_code == 200
        assert cleared.json()["success"] is True
        assert after["applied"] == 0

    def test_clear_unknown_record(self, api_client, auth_headers):
        response = api_client.delete(f"{API}/check-in/missing", headers=auth_headers)

        assert response.status_code == 500

    def test_table_filters(self, api_client, auth_headers):
        response = api_client.get(
            f"{API}/check-in",
            params={"state": "checked-in"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == ["reg-2"]


class TestGiftRedemptionEndpoints:

    def test_scan_redeem(self, api_client, auth_headers):
        response = api_client.post(
            f"{API}/gift-redemption/scan", json={"qr_code": "950920086687"}, headers=auth_headers
        )

        assert response.json()["success"] is True
        assert response.json()["customer"]["redeemed_gift"] is True

    def test_already_redeemed(self, api_client, auth_headers):
        response = api_client.post(
            f"{API}/gift-redemption/scan", json={"qr_code": "770707-07-7007"}, headers=auth_headers
        )

        assert response.json()["success"] is False
        assert response.json()["message"].startswith("Gift has already been redeemed at")

    def test_table_and_stats_by_location(self, api_client, auth_headers):
        table = api_client.get(
            f"{API}/gift-redemption",
            params={"state": "not-redeemed", "location_id": "melaka"},
            headers=auth_headers,
        )
        stats = api_client.get(
            f"{API}/gift-redemption/stats", params={"location_id": "melaka"}, headers=auth_headers
        )

        assert [c["id"] for c in table.json()] == ["reg-1"]
        assert stats.json() == {
            "workflow": "redemption",
            "location_id": "melaka",
            "total": 2,
            "applied": 1,
            "pending": 1,
        }


class TestCustomerEndpoints:

    def test_list_search_sort(self, api_client, auth_headers):
        response = api_client.get(
            f"{API}/customers",
            params={"sort_key": "full_name", "direction": "desc"},
            headers=auth_headers,
        )

        assert [c["full_name"] for c in response.json()] == ["Tan Mei Ling", "Siti Aminah", "Ahmad Zaki"]

    def test_get_and_delete(self, api_client, auth_headers):
        assert api_client.get(f"{API}/customers/reg-1", headers=auth_headers).status_code == 200
        assert api_client.delete(f"{API}/customers/reg-1", headers=auth_headers).status_code == 200
        assert api_client.get(f"{API}/customers/reg-1", headers=auth_headers).status_code == 404
        assert api_client.delete(f"{API}/customers/reg-1", headers=auth_headers).status_code == 404


class TestEventLocationEndpoints:

    def test_upload_update_delete(self, api_client, auth_headers):
        upload = api_client.post(
            f"{API}/event-locations",
            json=[{"location": "Kuching"}, {"location": "Kelantan", "status": "walk-in"}],
            headers=auth_headers,
        )
        assert upload.status_code == 201
        new_id = upload.json()["ids"][0]

        patched = api_client.patch(
            f"{API}/event-locations/{new_id}",
            json={"venue": "Pullman Kuching", "pos": 3},
            headers=auth_headers,
        )
        assert patched.status_code == 200
        assert patched.json()["venue"] == "Pullman Kuching"

        assert api_client.delete(f"{API}/event-locations/{new_id}", headers=auth_headers).status_code == 200
        assert api_client.delete(f"{API}/event-locations/{new_id}", headers=auth_headers).status_code == 404

    def test_upload_validation(self, api_client, auth_headers):
        empty = api_client.post(f"{API}/event-locations", json=[], headers=auth_headers)
        bad_status = api_client.post(
            f"{API}/event-locations",
            json=[{"location": "Ipoh", "status": "postponed"}],
            headers=auth_headers,
        )

        assert empty.status_code == 400
        assert bad_status.status_code == 422

    def test_status_filter(self, api_client, auth_headers):
        response = api_client.get(
            f"{API}/event-locations",
            params={"status": "closed"},
            headers=auth_headers,
        )

        assert [loc["id"] for loc in response.json()] == ["taiping"]


class TestSurveyResponseEndpoints:

    def test_list_get_display_delete(self, api_client, auth_headers):
        listed = api_client.get(
            f"{API}/survey-responses", params={"event_location_id": "taiping"}, headers=auth_headers
        )
        display = api_client.get(f"{API}/survey-responses/survey-2/display", headers=auth_headers)

        assert [r["id"] for r in listed.json()] == ["survey-2"]
        assert display.json()["marketing"] == "No"
        assert display.json()["ratings"]["session-app"] == "★★★★☆"
        assert api_client.delete(f"{API}/survey-responses/survey-2", headers=auth_headers).status_code == 200
        assert api_client.get(f"{API}/survey-responses/survey-2", headers=auth_headers).status_code == 404

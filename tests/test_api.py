# tests/test_api.py
"""End-to-end tests through the HTTP API."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.database import get_db
from app.services.code_map import CodeMap, get_code_map
from app.utils.security import create_access_token, decode_token

REGISTRATION = {
    "name": "Ravi",
    "phone": "9999999999",
    "password": "secret123",
    "vehicleType": "Auto",
    "vehicleNumber": "UP78 AB 1234",
}


def register(client, **overrides):
    return client.post("/api/register", json={**REGISTRATION, **overrides})


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token(client):
    return register(client).json()["token"]


class TestRegisterAndLogin:
    def test_register_issues_token_for_phone(self, client):
        res = register(client)
        assert res.status_code == 201
        body = res.json()
        assert body["success"] is True
        assert body["message"] == "Welcome!"
        assert body["driver"] == {"name": "Ravi", "phone": "9999999999"}
        assert decode_token(body["token"])["phone"] == "9999999999"

    def test_duplicate_phone_rejected_without_token(self, client):
        register(client)
        res = register(client, name="Other")
        assert res.status_code == 409
        body = res.json()
        assert body["success"] is False
        assert "token" not in body

    def test_missing_fields(self, client):
        res = client.post("/api/register", json={"phone": "9999999999", "password": "x"})
        assert res.status_code == 422
        assert res.json()["success"] is False

    def test_unknown_vehicle_type(self, client):
        assert register(client, vehicleType="Bus").status_code == 422

    def test_phone_without_digits_rejected(self, client):
        res = register(client, phone="abc")
        assert res.status_code == 400
        assert res.json() == {"success": False, "message": "Invalid phone number."}
        assert "token" not in res.json()

        # a second non-digit phone is rejected the same way, not as a duplicate
        assert register(client, phone="xyz").status_code == 400

    def test_login_phone_without_digits(self, client):
        res = client.post("/api/login", json={"phone": "abc", "password": "x"})
        assert res.status_code == 400

    def test_login(self, client):
        register(client)
        res = client.post("/api/login", json={"phone": "9999999999", "password": "secret123"})
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["driver"]["vehicleNumber"] == "UP78 AB 1234"
        assert "password_hash" not in body["driver"]
        assert decode_token(body["token"])["phone"] == "9999999999"

    def test_login_bad_password(self, client):
        register(client)
        res = client.post("/api/login", json={"phone": "9999999999", "password": "wrong"})
        assert res.status_code == 401
        assert res.json() == {"success": False, "message": "Invalid Password"}

    def test_login_unknown_phone(self, client):
        res = client.post("/api/login", json={"phone": "1234567890", "password": "x"})
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "User not found"}


class TestWebUpdate:
    def test_update_to_location(self, client, token):
        res = client.post("/api/update", json={"code": "14"}, headers=auth_header(token))
        assert res.status_code == 200
        assert res.json()["message"] == "Updated: Library"

        riders = client.get("/api/riders").json()
        assert len(riders) == 1
        assert riders[0]["phone"] == "9999999999"
        assert riders[0]["status"] == "AVAILABLE"
        assert riders[0]["location"] == "Library"

    def test_offline_leaves_board(self, client, token):
        client.post("/api/update", json={"code": "14"}, headers=auth_header(token))
        res = client.post("/api/update", json={"code": "0"}, headers=auth_header(token))
        assert res.json()["message"] == "You are Offline."
        assert client.get("/api/riders").json() == []

        driver = client.get("/api/driver/9999999999").json()["driver"]
        assert driver["status"] == "OFFLINE"
        assert driver["location"] is None

    def test_numeric_code_accepted(self, client, token):
        res = client.post("/api/update", json={"code": 12}, headers=auth_header(token))
        assert res.json()["message"] == "Updated: Hall 5"

    def test_invalid_code(self, client, token):
        res = client.post("/api/update", json={"code": "??"}, headers=auth_header(token))
        assert res.status_code == 400
        assert res.json() == {"success": False, "message": "Invalid Code."}

    def test_phone_in_body_is_ignored(self, client, token):
        register(client, phone="8888888888")
        client.post("/api/update", json={"code": "10", "phone": "8888888888"}, headers=auth_header(token))

        other = client.get("/api/driver/8888888888").json()["driver"]
        me = client.get("/api/driver/9999999999").json()["driver"]
        assert other["status"] == "OFFLINE"
        assert me["location"] == "Main Gate"

    def test_missing_token(self, client):
        res = client.post("/api/update", json={"code": "14"})
        assert res.status_code == 401
        assert res.headers["WWW-Authenticate"] == "Bearer"

    def test_malformed_header(self, client, token):
        res = client.post("/api/update", json={"code": "14"}, headers={"Authorization": token})
        assert res.status_code == 401

    def test_invalid_token(self, client):
        res = client.post("/api/update", json={"code": "14"}, headers=auth_header("not.a.token"))
        assert res.status_code == 403

    def test_expired_token(self, client):
        register(client)
        expired = create_access_token({"phone": "9999999999"}, expires_delta=timedelta(minutes=-1))
        res = client.post("/api/update", json={"code": "14"}, headers=auth_header(expired))
        assert res.status_code == 403

    def test_token_for_unregistered_phone(self, client):
        stray = create_access_token({"phone": "5555555555"})
        res = client.post("/api/update", json={"code": "14"}, headers=auth_header(stray))
        assert res.status_code == 404
        assert res.json()["message"] == "Driver not registered."

    def test_store_outage(self, client, token):
        from app.main import app

        def broken_db():
            db = MagicMock()
            db.query.side_effect = OperationalError("SELECT drivers", {}, Exception("database is locked"))
            yield db

        app.dependency_overrides[get_db] = broken_db
        res = client.post("/api/update", json={"code": "14"}, headers=auth_header(token))
        assert res.status_code == 500
        assert res.json() == {"success": False, "message": "Server error while reading drivers."}

    def test_injected_code_table(self, client, token):
        from app.main import app

        app.dependency_overrides[get_code_map] = lambda: CodeMap({"42": "Boat Club"})
        res = client.post("/api/update", json={"code": "42"}, headers=auth_header(token))
        assert res.json()["message"] == "Updated: Boat Club"
        assert client.get("/api/codes").json()["locations"] == {"42": "Boat Club"}


class TestSMS:
    def test_form_encoded_sms(self, client):
        register(client)
        res = client.post("/api/sms", data={"From": "+91 99999 99999", "Body": " 13 "})
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Updated: Health Centre"}
        assert client.get("/api/riders").json()[0]["location"] == "Health Centre"

    def test_json_sms(self, client):
        register(client)
        res = client.post("/api/sms", json={"sender": "919999999999", "content": "9"})
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Status: Busy."}

    def test_missing_fields_acknowledged(self, client):
        res = client.post("/api/sms", json={"text": "14"})
        assert res.status_code == 200
        assert res.json() == {"error": "Missing data"}

    def test_empty_body_acknowledged(self, client):
        res = client.post("/api/sms", content=b"", headers={"Content-Type": "application/json"})
        assert res.status_code == 200
        assert res.json() == {"error": "Missing data"}

    def test_garbage_body_acknowledged(self, client):
        res = client.post("/api/sms", content=b"{not json", headers={"Content-Type": "application/json"})
        assert res.status_code == 200
        assert res.json() == {"error": "Missing data"}

    def test_store_outage_acknowledged(self, client):
        from app.main import app

        def broken_db():
            db = MagicMock()
            db.query.side_effect = OperationalError("SELECT drivers", {}, Exception("database is locked"))
            yield db

        app.dependency_overrides[get_db] = broken_db
        res = client.post("/api/sms", data={"From": "9999999999", "Body": "14"})
        assert res.status_code == 200
        assert res.json() == {"error": "Server error while reading drivers."}

    def test_unregistered_sender(self, client):
        res = client.post("/api/sms", data={"From": "+917777777777", "Body": "14"})
        assert res.status_code == 200
        assert res.json() == {"success": False, "message": "Driver not registered."}

    def test_invalid_code(self, client):
        register(client)
        res = client.post("/api/sms", data={"From": "9999999999", "Body": "where are you"})
        assert res.status_code == 200
        assert res.json() == {"success": False, "message": "Invalid Code."}


class TestDriverProfile:
    def test_lookup(self, client):
        register(client)
        body = client.get("/api/driver/9999999999").json()
        assert body["exists"] is True
        assert body["driver"]["vehicleType"] == "Auto"
        assert "password_hash" not in body["driver"]
        assert "password" not in body["driver"]

    def test_lookup_non_digit_phone(self, client):
        res = client.get("/api/driver/nothing")
        assert res.status_code == 400
        assert res.json()["success"] is False

    def test_lookup_unknown(self, client):
        assert client.get("/api/driver/1234567890").json() == {"exists": False, "driver": None}

    def test_edit_profile(self, client, token):
        client.post("/api/update", json={"code": "15"}, headers=auth_header(token))
        res = client.put("/api/driver/profile", headers=auth_header(token), json={
            "phone": "9999999999", "name": "Ravi K", "vehicleType": "Rickshaw", "vehicleNumber": "UP78 R 1"
        })
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Profile Updated Successfully!"
        assert body["driver"]["name"] == "Ravi K"
        assert body["driver"]["vehicleType"] == "Rickshaw"
        assert body["driver"]["status"] == "AVAILABLE"
        assert body["driver"]["location"] == "Airstrip"

    def test_edit_profile_without_phone_in_body(self, client, token):
        res = client.put("/api/driver/profile", headers=auth_header(token), json={
            "name": "Ravi K", "vehicleType": "Auto", "vehicleNumber": "UP78 R 1"
        })
        assert res.status_code == 200

    def test_edit_profile_requires_token(self, client):
        register(client)
        res = client.put("/api/driver/profile", json={
            "phone": "9999999999", "name": "Mallory", "vehicleType": "Auto", "vehicleNumber": "X"
        })
        assert res.status_code == 401
        assert client.get("/api/driver/9999999999").json()["driver"]["name"] == "Ravi"

    def test_cannot_edit_someone_else(self, client, token):
        register(client, phone="8888888888", name="Asha")
        res = client.put("/api/driver/profile", headers=auth_header(token), json={
            "phone": "8888888888", "name": "Mallory", "vehicleType": "Auto", "vehicleNumber": "X"
        })
        assert res.status_code == 403
        assert client.get("/api/driver/8888888888").json()["driver"]["name"] == "Asha"


class TestServiceEndpoints:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_code_sheet(self, client):
        sheet = client.get("/api/codes").json()
        assert sheet["offline"] == "0"
        assert sheet["busy"] == "9"
        assert sheet["locations"]["14"] == "Library"

    def test_riders_empty(self, client):
        assert client.get("/api/riders").json() == []

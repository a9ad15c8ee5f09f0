import logging

import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework.test import APIClient, APIRequestFactory, APITestCase
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from care.exceptions import NotFoundError, StoreError, api_exception_handler
from care.models import User

from .conftest import bearer

pytestmark = pytest.mark.django_db


class LoginTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="asha", password="P@ssw0rd1", role=User.ROLE_PATIENT)

    def test_login_returns_token_pair(self):
        r = self.client.post(reverse("login_view"), {"username": "asha", "password": "P@ssw0rd1"}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.data["success"])
        self.assertIn("access", r.data)
        self.assertIn("refresh", r.data)
        self.assertEqual(r.data["user"]["role"], "patient")

    def test_wrong_password(self):
        r = self.client.post(reverse("login_view"), {"username": "asha", "password": "nope"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data, {"success": False, "message": "Invalid username or password."})

    def test_missing_username_reports_field(self):
        r = self.client.post(reverse("login_view"), {"password": "x"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("username", r.data["errors"])
        self.assertTrue(r.data["message"].startswith("username:"))

    def test_refresh_then_logout_revokes_refresh_token(self):
        r = self.client.post(reverse("login_view"), {"username": "asha", "password": "P@ssw0rd1"}, format="json")
        access, refresh = r.data["access"], r.data["refresh"]

        r = self.client.post(reverse("jwt_refresh"), {"refresh": refresh}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertIn("access", r.data)
        refresh = r.data.get("refresh", refresh)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        r = self.client.post(reverse("jwt_logout"), {"refresh": refresh}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["blacklisted"], 1)

        self.client.credentials()
        r = self.client.post(reverse("jwt_refresh"), {"refresh": refresh}, format="json")
        self.assertEqual(r.status_code, 401)
        self.assertFalse(r.data["success"])


def test_logout_without_token_blacklists_everything(patient_user):
    client = bearer(APIClient(), patient_user)
    r = client.post(reverse("jwt_logout"), {}, format="json")
    assert r.status_code == 200
    assert r.data["blacklisted"] >= 1
    assert BlacklistedToken.objects.filter(token__user=patient_user).count() == r.data["blacklisted"]


def test_logout_rejects_someone_elses_token(patient_user, admin_user):
    from rest_framework_simplejwt.tokens import RefreshToken

    foreign = str(RefreshToken.for_user(admin_user))
    r = bearer(APIClient(), patient_user).post(reverse("jwt_logout"), {"refresh": foreign}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Invalid refresh token."


def test_profile_read_and_update(patient_user, desk_user):
    client = bearer(APIClient(), patient_user)
    r = client.get(reverse("users_me"))
    assert r.status_code == 200
    assert r.data["user"]["username"] == "patient1"

    r = client.put(reverse("users_me"), {"phone_number": "9000012345", "email": "p1@example.com"}, format="json")
    assert r.status_code == 200
    assert r.data["user"]["phone_number"] == "9000012345"

    r = client.put(reverse("users_me"), {"username": desk_user.username}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Username is already taken."

    r = client.put(reverse("users_me"), {}, format="json")
    assert r.status_code == 400


def test_profile_requires_authentication():
    r = APIClient().get(reverse("users_me"))
    assert r.status_code == 401
    assert r.data["success"] is False


def test_health_check():
    r = APIClient().get(reverse("healthz"))
    assert r.status_code == 200
    assert r.json() == {"success": True, "db": True}


# ---------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------
def _context():
    return {"request": APIRequestFactory().get("/api/anything"), "view": None}


def test_handler_wraps_service_errors():
    resp = api_exception_handler(NotFoundError("Hospital not found"), _context())
    assert resp.status_code == 404
    assert resp.data == {"success": False, "message": "Hospital not found"}


def test_handler_hides_store_details():
    resp = api_exception_handler(StoreError(), _context())
    assert resp.status_code == 500
    assert resp.data == {"success": False, "message": "Server error."}


def test_handler_turns_unexpected_errors_into_500(caplog, monkeypatch):
    monkeypatch.setattr(logging.getLogger("care"), "propagate", True)
    resp = api_exception_handler(DatabaseError("disk I/O error"), _context())
    assert resp.status_code == 500
    assert resp.data == {"success": False, "message": "Server error."}
    assert "Unhandled error" in caplog.text

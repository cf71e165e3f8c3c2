"""
Tests for bearer-token identity and session endpoints.
"""

from datetime import timedelta

from kguardian.core.security import create_access_token
from kguardian.routers.auth import user_from_claims


class TestClaims:

    def test_first_name_from_full_name(self):
        user = user_from_claims({"sub": "u1", "user_metadata": {"full_name": "Asha Menon"}})
        assert user.first_name == "Asha"

    def test_display_name_used_when_full_name_missing(self):
        user = user_from_claims({"sub": "u1", "user_metadata": {"display_name": "Ravi K"}})
        assert user.first_name == "Ravi"

    def test_name_used_last(self):
        user = user_from_claims({"sub": "u1", "user_metadata": {"name": "Meera"}})
        assert user.first_name == "Meera"

    def test_fallback_first_name(self):
        assert user_from_claims({"sub": "u1"}).first_name == "User"

    def test_missing_subject_yields_no_user(self):
        assert user_from_claims({"email": "x@example.edu"}) is None


class TestEndpoints:

    def test_me_returns_profile(self, client, auth_headers):
        response = client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"id": "user-1", "email": "asha@example.edu", "first_name": "Asha"}

    def test_me_without_token_is_unauthorized(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Could not validate credentials"

    def test_me_with_tampered_token_is_unauthorized(self, client, token_for):
        token = token_for() + "x"
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_expired_token_is_unauthorized(self, client):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(minutes=-5))
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_email_placeholder_when_claim_missing(self, client, token_for):
        headers = {"Authorization": f"Bearer {token_for(email=None, full_name=None)}"}
        response = client.get("/auth/me", headers=headers)
        assert response.json() == {"id": "user-1", "email": "Unknown Email", "first_name": "User"}

    def test_session_signed_out(self, client):
        response = client.get("/auth/session")
        assert response.status_code == 200
        assert response.json() == {"authenticated": False, "user": None}

    def test_session_signed_in(self, client, auth_headers):
        body = client.get("/auth/session", headers=auth_headers).json()
        assert body["authenticated"] is True
        assert body["user"]["first_name"] == "Asha"

    def test_logout(self, client):
        response = client.post("/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}

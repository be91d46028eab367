"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.core.errors import (
    AuthenticationRequiredError,
    ForbiddenError,
    GroupNotFoundError,
    InvalidRequestError,
    ProfileNotFoundError,
    StorageFailureError,
    UpstreamUnavailableError,
)
from app.db.base import get_db
from app.main import app


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_invalid_request_error(self):
        err = InvalidRequestError("Username required")
        assert err.http_status == 400
        assert err.code == "INVALID_REQUEST"
        assert err.to_dict() == {"error": "Username required", "code": "INVALID_REQUEST"}

    def test_profile_not_found_error(self):
        err = ProfileNotFoundError("ghost")
        assert err.http_status == 404
        assert err.code == "PROFILE_NOT_FOUND"
        d = err.to_dict()
        assert d["error"] == "User not found"
        assert d["details"]["username"] == "ghost"

    def test_upstream_unavailable_error(self):
        err = UpstreamUnavailableError(source="leetcode")
        assert err.http_status == 500
        assert err.code == "UPSTREAM_UNAVAILABLE"
        assert err.details == {"source": "leetcode"}

    def test_upstream_unavailable_without_source(self):
        assert "details" not in UpstreamUnavailableError().to_dict()

    def test_storage_failure_error(self):
        err = StorageFailureError("Failed to fetch members")
        assert err.http_status == 500
        assert err.code == "STORAGE_FAILURE"

    def test_group_not_found_error(self):
        err = GroupNotFoundError("g1")
        assert err.http_status == 404
        assert err.details["group_id"] == "g1"

    def test_forbidden_error(self):
        assert ForbiddenError("g1").http_status == 403

    def test_authentication_required_error(self):
        assert AuthenticationRequiredError().http_status == 401


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestValidationErrors:
    def test_missing_member_fields(self, client, owner_headers, fake_leetcode):
        group_id = client.post(
            "/groups", json={"name": "club"}, headers=owner_headers
        ).json()["group"]["id"]
        r = client.post(f"/groups/{group_id}/members", json={"name": "A"}, headers=owner_headers)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "error" in body
        fields = [e["field"] for e in body["details"]["errors"]]
        assert any("username" in f for f in fields)

    def test_import_row_limit(self, client, owner_headers, fake_leetcode):
        group_id = client.post(
            "/groups", json={"name": "club"}, headers=owner_headers
        ).json()["group"]["id"]
        rows = [{"name": f"n{i}", "username": f"u{i}"} for i in range(501)]
        r = client.post(
            f"/groups/{group_id}/members/import", json={"rows": rows}, headers=owner_headers
        )
        assert r.status_code == 422
        assert fake_leetcode.profile_calls == []


class TestUnhandledErrors:
    def test_unexpected_exception_is_500_envelope(self, session_factory):
        def override_get_db():
            db = session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        try:
            with patch("app.routers.public.get_group_by_public_link", side_effect=RuntimeError("boom")):
                with TestClient(app, raise_server_exceptions=False) as c:
                    r = c.get("/public/anything")
        finally:
            app.dependency_overrides.clear()

        assert r.status_code == 500
        assert r.json() == {"error": "An unexpected error occurred.", "code": "INTERNAL_ERROR"}


@pytest.mark.parametrize("path", ["/groups", "/groups/abc", "/groups/abc/leaderboard"])
def test_owner_routes_require_identity(client, path):
    r = client.get(path)
    assert r.status_code == 401
    assert r.json()["error"] == "Sign in required."

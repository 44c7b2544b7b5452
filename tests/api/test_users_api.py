"""Tests for the user management API."""

import pytest
from httpx import AsyncClient

from civic_admin.domain.entities import AppUser, Issue
from civic_admin.domain.enums import IssueStatus, UserRole, UserSource, UserStatus
from tests.fakes import FakeStore


@pytest.fixture(autouse=True)
def seed_users(store: FakeStore) -> None:
    for user in (
        AppUser(id="c1", email="asha@example.com", display_name="Asha", phone="98450"),
        AppUser(
            id="c2",
            email="ravi@example.com",
            display_name="Ravi",
            status=UserStatus.BLOCKED,
            push_token="ExponentPushToken[c2]",
        ),
        AppUser(
            id="m1",
            email="mod@city.gov",
            display_name="Meera",
            role=UserRole.MODERATOR,
            source=UserSource.WEB_PORTAL,
        ),
    ):
        store.users.users[user.id] = user
    store.issues.issues["i1"] = Issue(id="i1", reported_by_id="c1")
    store.issues.issues["i2"] = Issue(id="i2", reported_by_id="c1", status=IssueStatus.RESOLVED)


class TestReads:
    async def test_mobile_view_with_counters(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.get(
            "/api/v1/users", params={"view": "mobile"}, headers=moderator_headers
        )
        assert response.status_code == 200
        users = {u["id"]: u for u in response.json()}
        assert set(users) == {"c1", "c2"}
        assert users["c1"]["total_issues"] == 2
        assert users["c1"]["resolved_issues"] == 1
        assert users["c1"]["open_issues"] == 1
        assert users["c2"]["has_push_token"] is True

    async def test_staff_view_and_search(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        staff = await client.get("/api/v1/users", params={"view": "staff"}, headers=moderator_headers)
        assert [u["id"] for u in staff.json()] == ["m1"]

        found = await client.get("/api/v1/users", params={"search": "9845"}, headers=moderator_headers)
        assert [u["id"] for u in found.json()] == ["c1"]

    async def test_unknown_view_is_422(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/v1/users", params={"view": "all"}, headers=moderator_headers)
        assert response.status_code == 422

    async def test_summary(self, client: AsyncClient, moderator_headers: dict[str, str]) -> None:
        response = await client.get("/api/v1/users/summary", headers=moderator_headers)
        assert response.json() == {
            "total": 3,
            "active": 2,
            "blocked": 1,
            "mobile": 2,
            "staff": 1,
            "with_push_tokens": 1,
            "by_role": {"citizen": 2, "moderator": 1},
        }

    async def test_get_missing_is_404(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/v1/users/ghost", headers=moderator_headers)
        assert response.status_code == 404


class TestAdminMutations:
    async def test_create_user(self, client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await client.post(
            "/api/v1/users",
            json={"email": "New.Head@City.gov", "display_name": "Head", "role": "department_head"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.head@city.gov"
        assert data["role"] == "department_head"
        assert data["source"] == "admin_created"

    async def test_duplicate_email_is_400(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/v1/users",
            json={"email": "ASHA@example.com", "display_name": "Asha again"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_moderator_cannot_create(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/v1/users",
            json={"email": "x@example.com", "display_name": "X"},
            headers=moderator_headers,
        )
        assert response.status_code == 403

    async def test_toggle_status_round_trip(
        self, client: AsyncClient, admin_headers: dict[str, str], store: FakeStore
    ) -> None:
        response = await client.post("/api/v1/users/c2/toggle-status", headers=admin_headers)
        assert response.json()["status"] == "active"
        response = await client.post("/api/v1/users/c2/toggle-status", headers=admin_headers)
        assert response.json()["status"] == "blocked"
        assert store.users.users["c2"].status == UserStatus.BLOCKED

    async def test_update_role(
        self, client: AsyncClient, admin_headers: dict[str, str], store: FakeStore
    ) -> None:
        response = await client.patch(
            "/api/v1/users/c1",
            json={"role": "moderator", "department": "Electrical"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert store.users.users["c1"].role == UserRole.MODERATOR
        assert store.users.users["c1"].display_name == "Asha"

    async def test_push_token(
        self, client: AsyncClient, admin_headers: dict[str, str], store: FakeStore
    ) -> None:
        response = await client.put(
            "/api/v1/users/c1/push-token",
            json={"push_token": "ExponentPushToken[c1]"},
            headers=admin_headers,
        )
        assert response.status_code == 204
        assert store.users.users["c1"].push_token == "ExponentPushToken[c1]"

        response = await client.put(
            "/api/v1/users/c1/push-token",
            json={"push_token": None, "notifications_enabled": False},
            headers=admin_headers,
        )
        assert response.status_code == 204
        assert store.users.users["c1"].push_token is None
        assert store.users.users["c1"].notifications_enabled is False

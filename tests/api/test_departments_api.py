"""Tests for the department and assignment-rule APIs."""

from httpx import AsyncClient

from civic_admin.domain.entities import AutoAssignmentRule, Department, Issue
from civic_admin.domain.enums import IssuePriority, IssueStatus
from tests.fakes import FakeStore


class TestDepartments:
    async def test_create_with_comma_keywords(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/v1/departments",
            json={"name": " Parks ", "keywords": "Tree, park ,tree"},
            headers=moderator_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Parks"
        assert data["keywords"] == ["tree", "park"]
        assert data["active"] is True

    async def test_duplicate_name_is_409(
        self, client: AsyncClient, moderator_headers: dict[str, str], store: FakeStore
    ) -> None:
        store.departments.departments["d1"] = Department(id="d1", name="Electrical")
        response = await client.post(
            "/api/v1/departments", json={"name": "Electrical"}, headers=moderator_headers
        )
        assert response.status_code == 409
        assert response.json()["error"] == "DEPARTMENT_ALREADY_EXISTS"

    async def test_missing_name_is_422(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.post("/api/v1/departments", json={}, headers=moderator_headers)
        assert response.status_code == 422

    async def test_update_and_get(
        self, client: AsyncClient, moderator_headers: dict[str, str], store: FakeStore
    ) -> None:
        store.departments.departments["d1"] = Department(id="d1", name="Electrical")
        response = await client.patch(
            "/api/v1/departments/d1",
            json={"head": "R. Rao", "keywords": ["Lamp"]},
            headers=moderator_headers,
        )
        assert response.status_code == 200
        fetched = await client.get("/api/v1/departments/d1", headers=moderator_headers)
        assert fetched.json()["head"] == "R. Rao"
        assert fetched.json()["keywords"] == ["lamp"]

    async def test_get_missing_is_404(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/v1/departments/ghost", headers=moderator_headers)
        assert response.status_code == 404

    async def test_seed_is_idempotent(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        first = await client.post("/api/v1/departments/seed", headers=admin_headers)
        assert "Public Works" in first.json()["created"]
        assert first.json()["skipped"] == []

        second = await client.post("/api/v1/departments/seed", headers=admin_headers)
        assert second.json()["created"] == []
        assert len(second.json()["skipped"]) == len(first.json()["created"])

    async def test_delete_needs_admin(
        self,
        client: AsyncClient,
        moderator_headers: dict[str, str],
        admin_headers: dict[str, str],
        store: FakeStore,
    ) -> None:
        store.departments.departments["d1"] = Department(id="d1", name="Electrical")
        response = await client.delete("/api/v1/departments/d1", headers=moderator_headers)
        assert response.status_code == 403
        response = await client.delete("/api/v1/departments/d1", headers=admin_headers)
        assert response.status_code == 204
        assert store.departments.departments == {}

    async def test_stats(
        self, client: AsyncClient, moderator_headers: dict[str, str], store: FakeStore
    ) -> None:
        store.departments.departments["d1"] = Department(id="d1", name="Electrical")
        store.issues.issues["i1"] = Issue(id="i1", assigned_department="Electrical")
        store.issues.issues["i2"] = Issue(
            id="i2", assigned_department="Electrical", status=IssueStatus.RESOLVED
        )
        store.issues.issues["i3"] = Issue(id="i3", assigned_department="Public Works")

        response = await client.get("/api/v1/departments/d1/stats", headers=moderator_headers)
        data = response.json()
        assert data["department"] == "Electrical"
        assert data["total"] == 2
        assert data["open"] == 1
        assert data["resolved"] == 1
        assert data["resolve_rate"] == 50

        response = await client.get("/api/v1/departments/stats", headers=moderator_headers)
        assert [s["department"] for s in response.json()] == ["Electrical"]


class TestAssignmentRules:
    async def test_create_and_toggle(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/v1/assignment-rules",
            json={"category": "Roads", "department": "Public Works", "priority": "High"},
            headers=moderator_headers,
        )
        assert response.status_code == 201
        rule = response.json()
        assert rule["priority"] == "High"
        assert rule["enabled"] is True

        response = await client.patch(
            f"/api/v1/assignment-rules/{rule['id']}",
            json={"enabled": False},
            headers=moderator_headers,
        )
        assert response.json()["enabled"] is False

    async def test_toggle_missing_is_404(
        self, client: AsyncClient, moderator_headers: dict[str, str]
    ) -> None:
        response = await client.patch(
            "/api/v1/assignment-rules/ghost", json={"enabled": True}, headers=moderator_headers
        )
        assert response.status_code == 404

    async def test_seed_rules(self, client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await client.post("/api/v1/assignment-rules/seed", headers=admin_headers)
        assert "Roads" in response.json()["created"]

        listing = await client.get("/api/v1/assignment-rules", headers=admin_headers)
        assert {r["category"] for r in listing.json()} >= {"Roads", "Garbage", "Other"}

    async def test_run_bulk_assign(
        self, client: AsyncClient, moderator_headers: dict[str, str], store: FakeStore
    ) -> None:
        store.departments.departments["d1"] = Department(
            id="d1", name="Electrical", keywords=["light"]
        )
        store.assignment_rules.rules["r1"] = AutoAssignmentRule(
            id="r1", category="Garbage", department="Water & Sanitation", priority=IssuePriority.MEDIUM
        )
        store.issues.issues["i1"] = Issue(id="i1", title="Street light broken")
        store.issues.issues["i2"] = Issue(id="i2", title="Bins", category="Garbage")
        store.issues.issues["i3"] = Issue(id="i3", title="Strange noise", category="Other")

        response = await client.post("/api/v1/assignment-rules/run", headers=moderator_headers)
        assert response.json() == {"assigned": 2, "scanned": 3}
        assert store.issues.issues["i1"].assigned_department == "Electrical"
        assert store.issues.issues["i2"].assigned_department == "Water & Sanitation"
        assert store.issues.issues["i3"].assigned_department == ""

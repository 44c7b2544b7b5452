"""Tests for DepartmentService: CRUD, stats, assignment rules and seeding."""

import pytest

from civic_admin.application.dtos.department import (
    AssignmentRuleCreate,
    DepartmentCreate,
    DepartmentUpdate,
)
from civic_admin.application.use_cases.departments import DEFAULT_DEPARTMENTS, DEFAULT_RULES
from civic_admin.domain.entities import Issue
from civic_admin.domain.enums import IssueStatus
from civic_admin.domain.exceptions import (
    DepartmentAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import FakeStore, build_fake_services


class TestDepartments:
    async def test_create_normalizes_name_and_keywords(self) -> None:
        services = build_fake_services(FakeStore())
        department = await services.departments.create_department(
            DepartmentCreate(name="  Parks ", keywords=["Tree", " GARDEN", "tree", ""])
        )
        assert department.name == "Parks"
        assert department.keywords == ["tree", "garden"]

    async def test_duplicate_name_conflicts(self) -> None:
        services = build_fake_services(FakeStore())
        await services.departments.create_department(DepartmentCreate(name="Parks"))
        with pytest.raises(DepartmentAlreadyExistsException):
            await services.departments.create_department(DepartmentCreate(name="Parks"))

    async def test_blank_name_rejected(self) -> None:
        services = build_fake_services(FakeStore())
        with pytest.raises(ValidationException):
            await services.departments.create_department(DepartmentCreate(name="  "))

    async def test_rename_into_existing_name_conflicts(self) -> None:
        services = build_fake_services(FakeStore())
        await services.departments.create_department(DepartmentCreate(name="Parks"))
        roads = await services.departments.create_department(DepartmentCreate(name="Roads"))
        with pytest.raises(DepartmentAlreadyExistsException):
            await services.departments.update_department(roads.id, DepartmentUpdate(name="Parks"))

    async def test_update_keeps_unset_fields(self) -> None:
        services = build_fake_services(FakeStore())
        parks = await services.departments.create_department(
            DepartmentCreate(name="Parks", head="R. Rao", keywords=["tree"])
        )
        updated = await services.departments.update_department(
            parks.id, DepartmentUpdate(keywords=["Bench"], active=False)
        )
        assert updated.head == "R. Rao"
        assert updated.keywords == ["bench"]
        assert not updated.active

    async def test_get_and_delete_missing(self) -> None:
        services = build_fake_services(FakeStore())
        with pytest.raises(ResourceNotFoundException):
            await services.departments.get_department("nope")
        with pytest.raises(ResourceNotFoundException):
            await services.departments.delete_department("nope")

    async def test_stats(self) -> None:
        store = FakeStore()
        store.issues.issues["i1"] = Issue(
            id="i1", assigned_department="Parks", status=IssueStatus.RESOLVED
        )
        store.issues.issues["i2"] = Issue(id="i2", assigned_department="Parks")
        services = build_fake_services(store)
        parks = await services.departments.create_department(DepartmentCreate(name="Parks"))
        stats = await services.departments.stats(parks.id)
        assert (stats.total, stats.resolved, stats.open, stats.resolve_rate) == (2, 1, 1, 50)
        assert [s.department for s in await services.departments.all_stats()] == ["Parks"]


class TestSeeding:
    async def test_seed_departments_skips_existing(self) -> None:
        services = build_fake_services(FakeStore())
        await services.departments.create_department(DepartmentCreate(name="Electrical"))
        result = await services.departments.seed_default_departments()
        assert result.skipped == ["Electrical"]
        assert len(result.created) == len(DEFAULT_DEPARTMENTS) - 1
        again = await services.departments.seed_default_departments()
        assert again.created == []

    async def test_seed_rules(self) -> None:
        services = build_fake_services(FakeStore())
        result = await services.departments.seed_default_rules()
        assert len(result.created) == len(DEFAULT_RULES)
        assert (await services.departments.seed_default_rules()).created == []


class TestAssignmentRules:
    async def test_create_strips_and_validates(self) -> None:
        services = build_fake_services(FakeStore())
        rule = await services.departments.create_rule(
            AssignmentRuleCreate(category=" Roads ", department=" Public Works ")
        )
        assert (rule.category, rule.department) == ("Roads", "Public Works")
        with pytest.raises(ValidationException):
            await services.departments.create_rule(AssignmentRuleCreate(category="", department="x"))

    async def test_toggle(self) -> None:
        services = build_fake_services(FakeStore())
        rule = await services.departments.create_rule(
            AssignmentRuleCreate(category="Roads", department="Public Works")
        )
        assert not (await services.departments.toggle_rule(rule.id, False)).enabled
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await services.departments.toggle_rule("nope", True)
        assert exc_info.value.details["resource_type"] == "assignment_rule"

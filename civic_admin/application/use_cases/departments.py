"""Department and auto-assignment rule management, including default seeding."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from civic_admin.application.dtos.department import (
    AssignmentRuleCreate,
    DepartmentCreate,
    DepartmentUpdate,
    SeedResult,
)
from civic_admin.application.services.analytics import department_stats
from civic_admin.application.services.department_matcher import normalize_keywords
from civic_admin.domain.enums import IssuePriority
from civic_admin.domain.exceptions import (
    DepartmentAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from civic_admin.shared.logging import get_logger

if TYPE_CHECKING:
    from civic_admin.application.dtos.department import DepartmentStats
    from civic_admin.application.interfaces.repositories import (
        IAssignmentRuleRepository,
        IDepartmentRepository,
        IIssueRepository,
    )
    from civic_admin.domain.entities import AutoAssignmentRule, Department

logger = get_logger(__name__)

DEFAULT_DEPARTMENTS: tuple[DepartmentCreate, ...] = (
    DepartmentCreate(
        name="Public Works",
        description="Handles road maintenance, construction, and infrastructure repairs",
        keywords=["pothole", "road", "street", "pavement", "traffic"],
        categories=["Roads"],
    ),
    DepartmentCreate(
        name="Water & Sanitation",
        description="Manages water supply, sewage, drainage, and waste collection",
        keywords=[
            "water", "drain", "pipe", "leak", "flood", "sewer",
            "garbage", "waste", "trash", "dirty", "sweeping",
        ],
        categories=["Water Leak", "Garbage"],
    ),
    DepartmentCreate(
        name="Electrical",
        description="Manages street lighting, power supply, and electrical infrastructure",
        keywords=["light", "electricity", "power", "lamp", "bulb", "wire"],
        categories=["Streetlight"],
    ),
    DepartmentCreate(
        name="Environment",
        description="Handles pollution, green cover, and environmental compliance",
        keywords=[
            "park", "tree", "garden", "environment", "green", "plants", "pollution", "smoke",
        ],
        categories=["Pollution"],
    ),
    DepartmentCreate(
        name="General Administration",
        description="Handles miscellaneous civic issues and general inquiries",
        categories=["Other"],
    ),
)

DEFAULT_RULES: tuple[AssignmentRuleCreate, ...] = (
    AssignmentRuleCreate("Roads", "Public Works", IssuePriority.MEDIUM),
    AssignmentRuleCreate("Water Leak", "Water & Sanitation", IssuePriority.HIGH),
    AssignmentRuleCreate("Garbage", "Water & Sanitation", IssuePriority.MEDIUM),
    AssignmentRuleCreate("Streetlight", "Electrical", IssuePriority.MEDIUM),
    AssignmentRuleCreate("Pollution", "Environment", IssuePriority.HIGH),
    AssignmentRuleCreate("Other", "General Administration", IssuePriority.LOW),
)


class DepartmentService:
    """CRUD for departments and category routing rules."""

    def __init__(
        self,
        department_repo: IDepartmentRepository,
        rule_repo: IAssignmentRuleRepository,
        issue_repo: IIssueRepository,
    ) -> None:
        self.department_repo = department_repo
        self.rule_repo = rule_repo
        self.issue_repo = issue_repo

    async def list_departments(self) -> list[Department]:
        return await self.department_repo.list_all()

    async def get_department(self, department_id: str) -> Department:
        department = await self.department_repo.get_by_id(department_id)
        if department is None:
            raise ResourceNotFoundException("department", department_id)
        return department

    async def create_department(self, data: DepartmentCreate) -> Department:
        name = data.name.strip()
        if not name:
            raise ValidationException("Department name is required", field="name")
        if await self.department_repo.get_by_name(name) is not None:
            raise DepartmentAlreadyExistsException(name)
        department = await self.department_repo.create(
            replace(data, name=name, keywords=normalize_keywords(data.keywords))
        )
        logger.info("Created department %s (%s)", department.name, department.id)
        return department

    async def update_department(self, department_id: str, changes: DepartmentUpdate) -> Department:
        current = await self.get_department(department_id)
        if changes.name is not None:
            name = changes.name.strip()
            if not name:
                raise ValidationException("Department name cannot be blank", field="name")
            if name != current.name:
                existing = await self.department_repo.get_by_name(name)
                if existing is not None and existing.id != department_id:
                    raise DepartmentAlreadyExistsException(name)
            changes = replace(changes, name=name)
        if changes.keywords is not None:
            changes = replace(changes, keywords=normalize_keywords(changes.keywords))
        updated = await self.department_repo.update(department_id, changes)
        if updated is None:
            raise ResourceNotFoundException("department", department_id)
        return updated

    async def delete_department(self, department_id: str) -> None:
        department = await self.get_department(department_id)
        await self.department_repo.delete(department_id)
        logger.info("Deleted department %s (%s)", department.name, department_id)

    async def stats(self, department_id: str) -> DepartmentStats:
        department = await self.get_department(department_id)
        return department_stats(department.name, await self.issue_repo.list_all())

    async def all_stats(self) -> list[DepartmentStats]:
        issues = await self.issue_repo.list_all()
        return [department_stats(d.name, issues) for d in await self.department_repo.list_all()]

    async def seed_default_departments(self) -> SeedResult:
        """Create the default departments whose names are not taken yet."""
        existing = {d.name for d in await self.department_repo.list_all()}
        created: list[str] = []
        skipped: list[str] = []
        for data in DEFAULT_DEPARTMENTS:
            if data.name in existing:
                skipped.append(data.name)
                continue
            await self.department_repo.create(data)
            created.append(data.name)
        logger.info("Seeded %d departments (%d already present)", len(created), len(skipped))
        return SeedResult(created=created, skipped=skipped)

    # Assignment rules

    async def list_rules(self) -> list[AutoAssignmentRule]:
        return await self.rule_repo.list_all()

    async def create_rule(self, data: AssignmentRuleCreate) -> AutoAssignmentRule:
        category = data.category.strip()
        department = data.department.strip()
        if not category:
            raise ValidationException("Category is required", field="category")
        if not department:
            raise ValidationException("Department is required", field="department")
        return await self.rule_repo.create(
            replace(data, category=category, department=department)
        )

    async def toggle_rule(self, rule_id: str, enabled: bool) -> AutoAssignmentRule:
        rule = await self.rule_repo.set_enabled(rule_id, enabled)
        if rule is None:
            raise ResourceNotFoundException("assignment_rule", rule_id)
        return rule

    async def delete_rule(self, rule_id: str) -> None:
        await self.rule_repo.delete(rule_id)

    async def seed_default_rules(self) -> SeedResult:
        """Create the default category rules for categories without one."""
        existing = {r.category for r in await self.rule_repo.list_all()}
        created: list[str] = []
        skipped: list[str] = []
        for data in DEFAULT_RULES:
            if data.category in existing:
                skipped.append(data.category)
                continue
            await self.rule_repo.create(data)
            created.append(data.category)
        logger.info("Seeded %d assignment rules (%d already present)", len(created), len(skipped))
        return SeedResult(created=created, skipped=skipped)

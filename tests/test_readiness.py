"""프로젝트 준비도 테스트 — 상태 계산, 확정/해제, 할 일, 기능 게이트, 배정 진행률."""

import uuid
from decimal import Decimal

import pytest
from fastapi import HTTPException
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.daily_assignment import GroupDailyAssignment, TalentDailyAssignment
from talentops.models.project import ProjectRoleTemplate, TeamAssignment
from talentops.models.readiness import ProjectReadiness
from talentops.services.readiness_service import (
    AssignmentProgress,
    build_feature_availability,
    build_todo_items,
    location_or_role_status,
    overall_status,
    readiness_service,
    team_or_talent_status,
)
from tests.conftest import add_locations, auth_header, day


def make_readiness(**overrides) -> ProjectReadiness:
    """세션 없이 준비도 행 구성 (Readiness row built in memory)."""
    values = {
        "custom_location_count": 0,
        "custom_role_count": 0,
        "total_staff_assigned": 0,
        "supervisor_count": 0,
        "escort_count": 0,
        "coordinator_count": 0,
        "total_talent": 0,
        "locations_finalized": False,
        "roles_finalized": False,
        "team_finalized": False,
        "talent_finalized": False,
        "locations_status": "default-only",
        "roles_status": "default-only",
        "team_status": "none",
        "talent_status": "none",
        "overall_status": "getting-started",
    }
    values.update(overrides)
    return ProjectReadiness(**values)


def todo_ids(items: list[dict]) -> list[str]:
    return [item["id"] for item in items]


class TestStatusRules:
    """영역/전체 상태 규칙 테스트"""

    def test_location_or_role_status(self):
        assert location_or_role_status(False, 0) == "default-only"
        assert location_or_role_status(False, 2) == "configured"
        assert location_or_role_status(True, 0) == "finalized"

    def test_team_or_talent_status(self):
        assert team_or_talent_status(False, 0) == "none"
        assert team_or_talent_status(False, 1) == "partial"
        assert team_or_talent_status(True, 5) == "finalized"

    def test_production_ready_needs_every_area(self):
        finalized = {area: "finalized" for area in ("locations", "roles", "team", "talent")}
        assert overall_status(finalized, 0, 0, 0) == "production-ready"
        assert overall_status({**finalized, "talent": "partial"}, 3, 1, 1) == "operational"

    def test_operational_needs_escort(self):
        statuses = {"locations": "configured", "roles": "configured", "team": "partial", "talent": "partial"}
        assert overall_status(statuses, 3, 2, 1) == "operational"
        assert overall_status(statuses, 3, 2, 0) == "getting-started"
        assert overall_status(statuses, 0, 2, 0) == "getting-started"


class TestTodoItems:
    """할 일 목록 테스트"""

    def test_empty_project(self):
        assert todo_ids(build_todo_items(make_readiness())) == [
            "assign-team", "add-talent", "configure-roles", "configure-locations",
        ]

    def test_talent_without_escorts(self):
        readiness = make_readiness(total_staff_assigned=1, supervisor_count=1, total_talent=2,
                                   team_status="partial", talent_status="partial")
        ids = todo_ids(build_todo_items(readiness))
        assert ids[0] == "assign-escorts"
        assert "assign-supervisor" not in ids

    def test_missing_supervisor(self):
        readiness = make_readiness(total_staff_assigned=2, escort_count=2, team_status="partial")
        assert "assign-supervisor" in todo_ids(build_todo_items(readiness))

    def test_optional_finalize_items(self):
        readiness = make_readiness(
            custom_location_count=1, custom_role_count=1, total_staff_assigned=2, supervisor_count=1,
            escort_count=1, total_talent=1, locations_status="configured", roles_status="configured",
            team_status="partial", talent_status="partial", overall_status="operational",
        )
        items = build_todo_items(readiness)
        assert todo_ids(items) == ["finalize-roles", "finalize-locations", "finalize-team", "finalize-talent"]
        assert {item["priority"] for item in items} == {"optional"}

    def test_assignment_items(self):
        readiness = make_readiness(
            custom_location_count=1, custom_role_count=1, total_staff_assigned=2, supervisor_count=1,
            escort_count=1, total_talent=1, locations_status="finalized", roles_status="finalized",
            team_status="finalized", talent_status="finalized", locations_finalized=True,
            roles_finalized=True, team_finalized=True, talent_finalized=True,
        )
        progress = AssignmentProgress(
            total_assignments=10, completed_assignments=4, urgent_issues=2, assignment_rate=40,
            upcoming_deadlines=[{"date": "2026-03-03", "missingAssignments": 2, "daysFromNow": 1}],
        )
        items = {item["id"]: item for item in build_todo_items(readiness, progress)}
        assert items["urgent-assignments"]["description"] == "2 assignments needed for tomorrow"
        assert items["urgent-assignments"]["priority"] == "critical"
        assert items["upcoming-assignments"]["description"] == "2 assignments needed tomorrow"
        assert items["complete-assignments"]["description"] == "40% of assignments completed"
        assert items["complete-assignments"]["actionRoute"] == "/assignments"

    def test_single_urgent_assignment(self):
        progress = AssignmentProgress(urgent_issues=1)
        items = {item["id"]: item for item in build_todo_items(make_readiness(), progress)}
        assert items["urgent-assignments"]["description"] == "1 assignment needed for tomorrow"

    def test_critical_before_important(self):
        priorities = [item["priority"] for item in build_todo_items(make_readiness())]
        assert priorities == sorted(priorities, key=["critical", "important", "optional"].index)


class TestFeatureAvailability:
    """기능 사용 가능 여부 테스트"""

    def test_empty_project_blocks_everything(self):
        features = build_feature_availability(make_readiness())
        assert not any(feature["available"] for feature in features.values())
        assert features["timeTracking"]["actionRoute"] == "/roles-team"
        assert features["assignments"]["guidance"] == "Add talent to enable assignments"
        assert features["locationTracking"]["guidance"] == "Add custom locations to enable tracking"
        assert features["projectOperations"]["guidance"] == "Complete basic setup to enable operations dashboard"

    def test_operational_project(self):
        readiness = make_readiness(
            custom_location_count=1, total_staff_assigned=3, supervisor_count=1, escort_count=2,
            total_talent=1, locations_status="configured", team_status="partial",
            talent_status="partial", overall_status="operational",
        )
        features = build_feature_availability(readiness, has_assignments=False)
        assert features["timeTracking"]["available"] is True
        assert features["assignments"]["available"] is True
        assert features["supervisorCheckout"]["available"] is True
        assert features["projectOperations"]["available"] is True
        assert features["projectOperations"]["guidance"] is None
        assert features["locationTracking"]["available"] is False
        assert features["locationTracking"]["guidance"] == "Make escort assignments to enable location tracking"

        features = build_feature_availability(readiness, has_assignments=True)
        assert features["locationTracking"]["available"] is True
        assert features["locationTracking"]["actionRoute"] is None

    def test_checkout_needs_supervisor(self):
        readiness = make_readiness(total_staff_assigned=2, escort_count=2)
        checkout = build_feature_availability(readiness)["supervisorCheckout"]
        assert checkout["available"] is False
        assert checkout["guidance"] == "Assign a supervisor to enable checkout controls"

    def test_notifications_need_anyone(self):
        assert build_feature_availability(make_readiness(total_talent=1))["notifications"]["available"] is True


class TestRecalculate:
    """준비도 재계산 테스트"""

    async def test_counts_and_statuses(self, db: AsyncSession, project, team, role_templates, talent_assignment):
        await add_locations(db, project, custom=2)
        readiness = await readiness_service.recalculate(db, project.id)

        assert readiness.custom_location_count == 2
        assert readiness.custom_role_count == 0
        assert readiness.total_staff_assigned == 3
        assert readiness.supervisor_count == 1
        assert readiness.escort_count == 2
        assert readiness.coordinator_count == 0
        assert readiness.total_talent == 1
        assert readiness.locations_status == "configured"
        assert readiness.roles_status == "default-only"
        assert readiness.team_status == "partial"
        assert readiness.talent_status == "partial"
        assert readiness.overall_status == "operational"

    async def test_getting_started_without_escorts(self, db: AsyncSession, project, supervisor, talent_assignment):
        db.add(TeamAssignment(project_id=project.id, user_id=supervisor.id, role="supervisor"))
        await db.flush()
        readiness = await readiness_service.recalculate(db, project.id)
        assert readiness.overall_status == "getting-started"

    async def test_custom_role_counts(self, db: AsyncSession, project, role_templates):
        db.add(ProjectRoleTemplate(project_id=project.id, role="talent_escort", display_name="Senior Escort",
                                   base_pay_rate=Decimal("28"), is_default=False))
        await db.flush()
        readiness = await readiness_service.recalculate(db, project.id)
        assert readiness.custom_role_count == 1
        assert readiness.roles_status == "configured"

    async def test_statuses_follow_counts_down(self, db: AsyncSession, project, team):
        readiness = await readiness_service.recalculate(db, project.id)
        assert readiness.team_status == "partial"
        for row in team:
            await db.delete(row)
        await db.flush()
        readiness = await readiness_service.recalculate(db, project.id)
        assert readiness.team_status == "none"
        assert readiness.total_staff_assigned == 0

    async def test_unknown_project(self, db: AsyncSession):
        with pytest.raises(HTTPException) as exc_info:
            await readiness_service.recalculate(db, uuid.uuid4())
        assert exc_info.value.status_code == 404

    async def test_recalculate_all(self, db: AsyncSession, project):
        assert await readiness_service.recalculate_all(db) == 1


class TestFinalize:
    """영역 확정/해제 테스트"""

    async def test_in_house_finalizes_locations(
        self, client: AsyncClient, db: AsyncSession, project, in_house, in_house_token
    ):
        await add_locations(db, project)
        response = await client.post(
            f"/api/projects/{project.id}/readiness/finalize",
            json={"area": "locations"},
            headers=auth_header(in_house_token),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Project locations finalized successfully"
        assert body["data"]["locations_finalized"] is True
        assert body["data"]["locations_status"] == "finalized"
        assert "finalize-locations" not in [item["id"] for item in body["data"]["todoItems"]]

        readiness = await db.get(ProjectReadiness, project.id)
        assert readiness.locations_finalized_by == in_house.id
        assert readiness.locations_finalized_at is not None

    async def test_default_only_cannot_be_finalized(
        self, client: AsyncClient, project, admin_token
    ):
        response = await client.post(
            f"/api/projects/{project.id}/readiness/finalize",
            json={"area": "locations"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Cannot finalize locations with default setup only. Add custom locations first."
        )

    async def test_empty_team_cannot_be_finalized(self, client: AsyncClient, project, admin_token):
        response = await client.post(
            f"/api/projects/{project.id}/readiness/finalize",
            json={"area": "team"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Cannot finalize team with no staff assigned")

    async def test_supervisor_cannot_finalize(self, client: AsyncClient, db: AsyncSession, project, supervisor_token):
        await add_locations(db, project)
        response = await client.post(
            f"/api/projects/{project.id}/readiness/finalize",
            json={"area": "locations"},
            headers=auth_header(supervisor_token),
        )
        assert response.status_code == 403

    async def test_invalid_area(self, client: AsyncClient, project, admin_token):
        response = await client.post(
            f"/api/projects/{project.id}/readiness/finalize",
            json={"area": "catering"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 422

    async def test_finalize_keeps_first_timestamp(self, db: AsyncSession, project, admin, in_house):
        await add_locations(db, project)
        first = await readiness_service.finalize(db, project.id, "locations", admin)
        stamped_at = first.locations_finalized_at
        again = await readiness_service.finalize(db, project.id, "locations", in_house)
        assert again.locations_finalized_at == stamped_at
        assert again.locations_finalized_by == admin.id

    async def test_unfinalize_is_admin_only(
        self, client: AsyncClient, db: AsyncSession, project, admin, in_house_token, admin_token
    ):
        await add_locations(db, project)
        await readiness_service.finalize(db, project.id, "locations", admin)

        forbidden = await client.request(
            "DELETE", f"/api/projects/{project.id}/readiness/finalize",
            json={"area": "locations"}, headers=auth_header(in_house_token),
        )
        assert forbidden.status_code == 403

        response = await client.request(
            "DELETE", f"/api/projects/{project.id}/readiness/finalize",
            json={"area": "locations"}, headers=auth_header(admin_token),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["locations_finalized"] is False
        assert data["locations_status"] == "configured"

        readiness = await db.get(ProjectReadiness, project.id)
        assert readiness.locations_finalized_at is None
        assert readiness.locations_finalized_by is None

    async def test_all_areas_finalized_is_production_ready(
        self, db: AsyncSession, project, team, talent_assignment, admin
    ):
        await add_locations(db, project)
        db.add(ProjectRoleTemplate(project_id=project.id, role="coordinator", display_name="Lead Coordinator",
                                   base_pay_rate=Decimal("31"), is_default=False))
        await db.flush()
        for area in ("locations", "roles", "team"):
            readiness = await readiness_service.finalize(db, project.id, area, admin)
            assert readiness.overall_status == "operational"
        readiness = await readiness_service.finalize(db, project.id, "talent", admin)
        assert readiness.overall_status == "production-ready"

        readiness = await readiness_service.unfinalize(db, project.id, "team", admin)
        assert readiness.overall_status == "operational"


class TestDashboard:
    """준비도 대시보드 테스트"""

    async def test_get_readiness(self, client: AsyncClient, db: AsyncSession, project, team, talent_assignment, escort_token):
        response = await client.get(f"/api/projects/{project.id}/readiness", headers=auth_header(escort_token))
        assert response.status_code == 200
        data = response.json()
        assert data["overall_status"] == "operational"
        assert data["total_talent"] == 1
        assert set(data["featureAvailability"]) == {
            "timeTracking", "assignments", "locationTracking", "supervisorCheckout",
            "talentManagement", "projectOperations", "notifications",
        }
        assert data["assignmentProgress"]["totalEntities"] == 1
        assert data["assignmentProgress"]["projectDays"] == 7

    async def test_unknown_project(self, client: AsyncClient, admin_token):
        response = await client.get(
            "/api/projects/00000000-0000-0000-0000-000000000000/readiness", headers=auth_header(admin_token)
        )
        assert response.status_code == 404

    async def test_invalidate(self, client: AsyncClient, db: AsyncSession, project, admin_token):
        await add_locations(db, project, custom=3)
        response = await client.post(
            f"/api/projects/{project.id}/readiness/invalidate", headers=auth_header(admin_token)
        )
        assert response.status_code == 200
        assert response.json()["custom_location_count"] == 3

    async def test_requires_auth(self, client: AsyncClient, project):
        response = await client.get(f"/api/projects/{project.id}/readiness")
        assert response.status_code in (401, 403)


class TestAssignmentProgress:
    """일별 배정 진행률 테스트"""

    async def test_empty_project(self, db: AsyncSession, project):
        progress = await readiness_service.build_assignment_progress(db, project.id, today=day(0))
        assert progress.total_assignments == 0
        assert progress.assignment_rate == 0

    async def test_progress_and_deadlines(
        self, db: AsyncSession, project, escort, talent_assignment, group
    ):
        db.add(TalentDailyAssignment(
            talent_id=talent_assignment.talent_id, project_id=project.id,
            assignment_date=day(1), escort_id=escort.id,
        ))
        db.add(GroupDailyAssignment(
            group_id=group.id, project_id=project.id, assignment_date=day(3), escort_id=escort.id,
        ))
        await db.flush()

        progress = await readiness_service.build_assignment_progress(db, project.id, today=day(0))
        assert progress.total_entities == 2
        assert progress.project_days == 7
        assert progress.total_assignments == 14
        assert progress.completed_assignments == 2
        assert progress.assignment_rate == 14
        assert progress.urgent_issues == 1
        assert progress.upcoming_deadlines == [
            {"date": day(1).isoformat(), "missingAssignments": 1, "daysFromNow": 1},
            {"date": day(2).isoformat(), "missingAssignments": 2, "daysFromNow": 2},
            {"date": day(3).isoformat(), "missingAssignments": 1, "daysFromNow": 3},
        ]

    async def test_days_past_project_end_are_skipped(self, db: AsyncSession, project, talent_assignment):
        progress = await readiness_service.build_assignment_progress(db, project.id, today=day(5))
        assert progress.urgent_issues == 1
        assert [deadline["daysFromNow"] for deadline in progress.upcoming_deadlines] == [1]

    async def test_dashboard_location_tracking_needs_assignments(
        self, db: AsyncSession, project, team, escort, talent_assignment
    ):
        await add_locations(db, project)
        dashboard = await readiness_service.get_dashboard(db, project.id, today=day(0))
        assert dashboard["featureAvailability"]["locationTracking"]["available"] is False

        db.add(TalentDailyAssignment(
            talent_id=talent_assignment.talent_id, project_id=project.id,
            assignment_date=day(2), escort_id=escort.id,
        ))
        await db.flush()
        dashboard = await readiness_service.get_dashboard(db, project.id, today=day(0))
        assert dashboard["featureAvailability"]["locationTracking"]["available"] is True
        assert "urgent-assignments" in [item["id"] for item in dashboard["todoItems"]]

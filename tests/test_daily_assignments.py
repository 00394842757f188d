"""일별 에스코트 배정 테스트 — 탤런트/그룹 배정, scheduled_dates 동기화, 기간 검사, 가용 현황."""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.daily_assignment import GroupDailyAssignment, TalentDailyAssignment
from talentops.models.project import Project
from talentops.models.talent import TalentGroup, TalentProjectAssignment
from talentops.services.daily_assignment_service import daily_assignment_service
from tests.conftest import PROJECT_END, PROJECT_START, auth_header, day


def talent_url(project, assignment_date, talent_id) -> str:
    return f"/api/projects/{project.id}/assignments/{assignment_date.isoformat()}/talent/{talent_id}"


def group_url(project, assignment_date, group) -> str:
    return f"/api/projects/{project.id}/assignments/{assignment_date.isoformat()}/groups/{group.id}"


async def row_count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar()


class TestTalentAssignment:
    """탤런트 일별 배정 테스트"""

    async def test_assign_syncs_scheduled_dates(
        self, client: AsyncClient, db: AsyncSession, project, team, escort, talent_assignment, supervisor_token
    ):
        response = await client.put(
            talent_url(project, day(1), talent_assignment.talent_id),
            json={"escort_id": str(escort.id)},
            headers=auth_header(supervisor_token),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["date"] == day(1).isoformat()
        assert data["talent"] == [{
            "talent_id": str(talent_assignment.talent_id),
            "escort_id": str(escort.id),
            "escort_name": escort.full_name,
        }]
        assert talent_assignment.scheduled_dates == [day(1)]

    async def test_reassign_same_day_upserts(
        self, db: AsyncSession, project, escort, second_escort, talent_assignment
    ):
        first = await daily_assignment_service.assign_talent_escort(
            db, project.id, talent_assignment.talent_id, day(2), escort.id
        )
        second = await daily_assignment_service.assign_talent_escort(
            db, project.id, talent_assignment.talent_id, day(2), second_escort.id
        )
        assert first.id == second.id
        assert second.escort_id == second_escort.id
        assert await row_count(db, TalentDailyAssignment) == 1
        assert talent_assignment.scheduled_dates == [day(2)]

    async def test_scheduled_dates_sorted_and_distinct(self, db: AsyncSession, project, escort, talent_assignment):
        for offset in (4, 0, 2, 4):
            await daily_assignment_service.assign_talent_escort(
                db, project.id, talent_assignment.talent_id, day(offset), escort.id
            )
        assert talent_assignment.scheduled_dates == [day(0), day(2), day(4)]

    @pytest.mark.parametrize("assignment_date", [PROJECT_START - timedelta(days=1), PROJECT_END + timedelta(days=1)])
    async def test_date_outside_project(
        self, client: AsyncClient, db: AsyncSession, project, escort, talent_assignment, admin_token, assignment_date
    ):
        response = await client.put(
            talent_url(project, assignment_date, talent_assignment.talent_id),
            json={"escort_id": str(escort.id)},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400
        assert "outside project range" in response.json()["detail"]
        assert await row_count(db, TalentDailyAssignment) == 0

    async def test_project_bounds_are_inclusive(self, db: AsyncSession, project, escort, talent_assignment):
        for assignment_date in (PROJECT_START, PROJECT_END):
            await daily_assignment_service.assign_talent_escort(
                db, project.id, talent_assignment.talent_id, assignment_date, escort.id
            )
        assert talent_assignment.scheduled_dates == [PROJECT_START, PROJECT_END]

    async def test_unknown_escort(self, client: AsyncClient, project, talent_assignment, admin_token):
        response = await client.put(
            talent_url(project, day(1), talent_assignment.talent_id),
            json={"escort_id": "00000000-0000-0000-0000-000000000000"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 404

    async def test_malformed_escort_id(self, client: AsyncClient, project, talent_assignment, admin_token):
        response = await client.put(
            talent_url(project, day(1), talent_assignment.talent_id),
            json={"escort_id": "not-a-uuid"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400

    async def test_talent_not_in_project(self, client: AsyncClient, project, escort, admin_token):
        response = await client.put(
            talent_url(project, day(1), "00000000-0000-0000-0000-000000000000"),
            json={"escort_id": str(escort.id)},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 404

    async def test_same_day_in_other_project(self, db: AsyncSession, project, escort, talent_assignment):
        other = Project(name="Other Show", start_date=PROJECT_START, end_date=PROJECT_END)
        db.add(other)
        await db.flush()
        db.add(TalentProjectAssignment(talent_id=talent_assignment.talent_id, project_id=other.id, scheduled_dates=[]))
        await db.flush()
        await daily_assignment_service.assign_talent_escort(
            db, other.id, talent_assignment.talent_id, day(1), escort.id
        )

        with pytest.raises(HTTPException) as exc_info:
            await daily_assignment_service.assign_talent_escort(
                db, project.id, talent_assignment.talent_id, day(1), escort.id
            )
        assert exc_info.value.status_code == 409

    async def test_escort_role_cannot_assign(
        self, client: AsyncClient, project, escort, talent_assignment, escort_token
    ):
        response = await client.put(
            talent_url(project, day(1), talent_assignment.talent_id),
            json={"escort_id": str(escort.id)},
            headers=auth_header(escort_token),
        )
        assert response.status_code == 403

    async def test_unassign(
        self, client: AsyncClient, db: AsyncSession, project, escort, talent_assignment, admin_token
    ):
        for offset in (1, 3):
            await daily_assignment_service.assign_talent_escort(
                db, project.id, talent_assignment.talent_id, day(offset), escort.id
            )
        response = await client.delete(
            talent_url(project, day(1), talent_assignment.talent_id), headers=auth_header(admin_token)
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Assignment removed"
        assert talent_assignment.scheduled_dates == [day(3)]

        again = await client.delete(
            talent_url(project, day(1), talent_assignment.talent_id), headers=auth_header(admin_token)
        )
        assert again.status_code == 404


class TestGroupAssignment:
    """그룹 일별 배정 테스트"""

    async def test_multiple_escorts_per_day(
        self, client: AsyncClient, db: AsyncSession, project, escort, second_escort, group, admin_token
    ):
        response = await client.put(
            group_url(project, day(2), group),
            json={"escort_ids": [str(escort.id), str(second_escort.id), str(escort.id)]},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 200
        groups = response.json()["groups"]
        assert len(groups) == 1
        assert {item["escort_id"] for item in groups[0]["escorts"]} == {str(escort.id), str(second_escort.id)}
        assert await row_count(db, GroupDailyAssignment) == 2
        assert group.scheduled_dates == [day(2)]

    async def test_replace_escorts_for_day(self, db: AsyncSession, project, escort, second_escort, group):
        await daily_assignment_service.assign_group_escorts(db, project.id, group.id, day(2), [escort.id])
        rows = await daily_assignment_service.assign_group_escorts(
            db, project.id, group.id, day(2), [second_escort.id]
        )
        assert [row.escort_id for row in rows] == [second_escort.id]
        assert await row_count(db, GroupDailyAssignment) == 1

    async def test_empty_list_removes_day(self, db: AsyncSession, project, escort, group):
        await daily_assignment_service.assign_group_escorts(db, project.id, group.id, day(2), [escort.id])
        await daily_assignment_service.assign_group_escorts(db, project.id, group.id, day(3), [escort.id])
        rows = await daily_assignment_service.assign_group_escorts(db, project.id, group.id, day(2), [])
        assert rows == []
        assert group.scheduled_dates == [day(3)]

    async def test_date_outside_project(self, client: AsyncClient, project, escort, group, admin_token):
        response = await client.put(
            group_url(project, PROJECT_END + timedelta(days=1), group),
            json={"escort_ids": [str(escort.id)]},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400


class TestGroupSchedule:
    """그룹 일정 교체 테스트"""

    async def test_schedule_creates_row_per_date_and_escort(
        self, client: AsyncClient, db: AsyncSession, project, escort, second_escort, group, admin_token
    ):
        response = await client.put(
            f"/api/projects/{project.id}/talent-groups/{group.id}/schedule",
            json={
                "scheduled_dates": [day(3).isoformat(), day(1).isoformat(), day(1).isoformat()],
                "escort_ids": [str(escort.id), str(second_escort.id)],
            },
            headers=auth_header(admin_token),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["scheduled_dates"] == [day(1).isoformat(), day(3).isoformat()]
        assert set(data["escort_ids"]) == {str(escort.id), str(second_escort.id)}
        assert await row_count(db, GroupDailyAssignment) == 4

    async def test_schedule_replaces_previous(self, db: AsyncSession, project, escort, second_escort, group):
        await daily_assignment_service.set_group_schedule(db, project.id, group.id, [day(0), day(1)], [escort.id])
        await daily_assignment_service.set_group_schedule(db, project.id, group.id, [day(1), day(2)], [second_escort.id])
        rows = (await db.execute(select(GroupDailyAssignment))).scalars().all()
        assert {(row.assignment_date, row.escort_id) for row in rows} == {
            (day(1), second_escort.id), (day(2), second_escort.id),
        }
        assert group.scheduled_dates == [day(1), day(2)]

    async def test_out_of_range_rejects_whole_request(self, db: AsyncSession, project, escort, group):
        await daily_assignment_service.set_group_schedule(db, project.id, group.id, [day(0)], [escort.id])
        with pytest.raises(HTTPException) as exc_info:
            await daily_assignment_service.set_group_schedule(
                db, project.id, group.id, [day(1), PROJECT_END + timedelta(days=2)], [escort.id]
            )
        assert exc_info.value.status_code == 400
        assert group.scheduled_dates == [day(0)]
        assert await row_count(db, GroupDailyAssignment) == 1

    async def test_dates_without_escorts(self, db: AsyncSession, project, group):
        with pytest.raises(HTTPException) as exc_info:
            await daily_assignment_service.set_group_schedule(db, project.id, group.id, [day(0)], [])
        assert exc_info.value.status_code == 400

    async def test_empty_schedule_clears(self, db: AsyncSession, project, escort, group):
        await daily_assignment_service.set_group_schedule(db, project.id, group.id, [day(0), day(1)], [escort.id])
        await daily_assignment_service.set_group_schedule(db, project.id, group.id, [], [])
        assert group.scheduled_dates == []
        assert await row_count(db, GroupDailyAssignment) == 0


class TestUpdateGroup:
    """그룹 정보 수정 테스트"""

    async def test_update_name_members_and_contact(
        self, client: AsyncClient, project, group, admin_token
    ):
        response = await client.put(
            f"/api/projects/{project.id}/talent-groups/{group.id}",
            json={
                "group_name": "  The New Harmonics ",
                "members": [{"name": "Morgan", "role": "Lead Vocal"}, {"name": "Quinn"}],
                "point_of_contact_name": "Morgan",
                "point_of_contact_phone": "555-0100",
            },
            headers=auth_header(admin_token),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["group_name"] == "The New Harmonics"
        assert data["members"] == [{"name": "Morgan", "role": "Lead Vocal"}, {"name": "Quinn", "role": None}]
        assert data["point_of_contact_phone"] == "555-0100"

    async def test_duplicate_name(self, client: AsyncClient, db: AsyncSession, project, group, admin_token):
        db.add(TalentGroup(project_id=project.id, group_name="Taken", assigned_escort_ids=[], scheduled_dates=[]))
        await db.flush()
        response = await client.put(
            f"/api/projects/{project.id}/talent-groups/{group.id}",
            json={"group_name": "Taken"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 409

    async def test_scheduled_dates_reuse_current_escorts(
        self, db: AsyncSession, project, escort, group
    ):
        await daily_assignment_service.set_group_schedule(db, project.id, group.id, [day(0)], [escort.id])
        await daily_assignment_service.update_group(db, project.id, group.id, {"scheduled_dates": [day(4), day(5)]})
        rows = (await db.execute(select(GroupDailyAssignment))).scalars().all()
        assert {(row.assignment_date, row.escort_id) for row in rows} == {(day(4), escort.id), (day(5), escort.id)}
        assert group.scheduled_dates == [day(4), day(5)]

    async def test_get_group(self, client: AsyncClient, db: AsyncSession, project, escort, group, escort_token):
        await daily_assignment_service.set_group_schedule(db, project.id, group.id, [day(2)], [escort.id])
        response = await client.get(
            f"/api/projects/{project.id}/talent-groups/{group.id}", headers=auth_header(escort_token)
        )
        assert response.status_code == 200
        assert response.json()["scheduled_dates"] == [day(2).isoformat()]
        assert response.json()["escort_ids"] == [str(escort.id)]

    async def test_unknown_group(self, client: AsyncClient, project, admin_token):
        response = await client.get(
            f"/api/projects/{project.id}/talent-groups/00000000-0000-0000-0000-000000000000",
            headers=auth_header(admin_token),
        )
        assert response.status_code == 404


class TestDayViews:
    """하루 단위 조회/정리 테스트"""

    async def test_clear_day(
        self, client: AsyncClient, db: AsyncSession, project, escort, second_escort, talent_assignment, group, admin_token
    ):
        await daily_assignment_service.assign_talent_escort(db, project.id, talent_assignment.talent_id, day(1), escort.id)
        await daily_assignment_service.assign_talent_escort(db, project.id, talent_assignment.talent_id, day(2), escort.id)
        await daily_assignment_service.assign_group_escorts(
            db, project.id, group.id, day(1), [escort.id, second_escort.id]
        )

        response = await client.delete(
            f"/api/projects/{project.id}/assignments/{day(1).isoformat()}", headers=auth_header(admin_token)
        )
        assert response.status_code == 200
        assert response.json() == {"date": day(1).isoformat(), "removed": 3}
        assert talent_assignment.scheduled_dates == [day(2)]
        assert group.scheduled_dates == []

    async def test_clear_empty_day(self, db: AsyncSession, project):
        assert await daily_assignment_service.clear_day(db, project.id, day(0)) == 0

    async def test_get_day_assignments(
        self, client: AsyncClient, db: AsyncSession, project, escort, talent_assignment, group, escort_token
    ):
        await daily_assignment_service.assign_talent_escort(db, project.id, talent_assignment.talent_id, day(1), escort.id)
        await daily_assignment_service.assign_group_escorts(db, project.id, group.id, day(1), [escort.id])

        response = await client.get(
            f"/api/projects/{project.id}/assignments/{day(1).isoformat()}", headers=auth_header(escort_token)
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["talent"]) == 1
        assert data["groups"] == [{
            "group_id": str(group.id),
            "escorts": [{"escort_id": str(escort.id), "escort_name": escort.full_name}],
        }]

    async def test_get_day_outside_project(self, client: AsyncClient, project, admin_token):
        response = await client.get(
            f"/api/projects/{project.id}/assignments/{(PROJECT_END + timedelta(days=1)).isoformat()}",
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400

    async def test_available_escorts(
        self, client: AsyncClient, db: AsyncSession, project, team, escort, second_escort, talent_assignment, group,
        supervisor_token,
    ):
        await daily_assignment_service.assign_talent_escort(db, project.id, talent_assignment.talent_id, day(1), escort.id)
        await daily_assignment_service.assign_group_escorts(db, project.id, group.id, day(1), [escort.id])

        response = await client.get(
            f"/api/projects/{project.id}/available-escorts/{day(1).isoformat()}", headers=auth_header(supervisor_token)
        )
        assert response.status_code == 200
        by_id = {item["escort_id"]: item for item in response.json()}
        assert set(by_id) == {str(escort.id), str(second_escort.id)}
        assert by_id[str(escort.id)]["assigned"] is True
        assert by_id[str(escort.id)]["assignment_count"] == 2
        assert by_id[str(second_escort.id)]["assigned"] is False
        assert by_id[str(second_escort.id)]["assignment_count"] == 0

"""일별 배정 서비스 — 탤런트/그룹 일별 에스코트 배정 비즈니스 로직.

Daily Assignment Service — Business logic for per-day escort assignments
of talent and talent groups.

Invariants kept here rather than in database triggers:
    - every daily row falls inside the project's [start_date, end_date]
    - a parent's ``scheduled_dates`` equals the distinct, sorted dates of
      its daily rows; it is rewritten after every insert/update/delete
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.daily_assignment import GroupDailyAssignment, TalentDailyAssignment
from talentops.models.profile import Profile
from talentops.models.project import Project
from talentops.models.talent import TalentGroup, TalentGroupMember, TalentProjectAssignment
from talentops.repositories.daily_assignment_repository import group_daily_repository, talent_daily_repository
from talentops.repositories.project_repository import (
    profile_repository,
    project_repository,
    team_assignment_repository,
)
from talentops.repositories.talent_repository import talent_assignment_repository, talent_group_repository
from talentops.utils.exceptions import BadRequestError, DateRangeError, DuplicateError, NotFoundError


class DailyAssignmentService:
    """일별 배정 서비스.

    Daily assignment service. Callers commit; every method flushes so the
    derived ``scheduled_dates`` are visible to the next query in the session.
    """

    # === 공통 검증 (Shared checks) ===

    async def get_project(self, db: AsyncSession, project_id: UUID) -> Project:
        """프로젝트 조회 (Fetch a project or raise 404)."""
        project: Project | None = await project_repository.get_by_id(db, project_id)
        if project is None:
            raise NotFoundError("프로젝트를 찾을 수 없습니다 (Project not found)")
        return project

    def check_date_in_range(self, project: Project, assignment_date: date) -> None:
        """프로젝트 기간 검사 (Raise DateRangeError when the date is outside the project range)."""
        if not project.contains(assignment_date):
            raise DateRangeError(assignment_date, project.start_date, project.end_date)

    async def check_escort(self, db: AsyncSession, escort_id: UUID) -> Profile:
        """에스코트 프로필 존재 검사 (Escort must reference an existing profile)."""
        escort: Profile | None = await profile_repository.get_by_id(db, escort_id)
        if escort is None:
            raise NotFoundError(f"에스코트를 찾을 수 없습니다 (Escort {escort_id} not found)")
        return escort

    async def get_talent_assignment(
        self,
        db: AsyncSession,
        project_id: UUID,
        talent_id: UUID,
    ) -> TalentProjectAssignment:
        """탤런트 프로젝트 배정 조회 (Talent must be linked to the project)."""
        assignment: TalentProjectAssignment | None = await talent_assignment_repository.get_for_talent(
            db, project_id, talent_id
        )
        if assignment is None:
            raise NotFoundError("프로젝트에 배정된 탤런트가 아닙니다 (Talent is not assigned to this project)")
        return assignment

    async def get_group(self, db: AsyncSession, project_id: UUID, group_id: UUID) -> TalentGroup:
        """프로젝트 내 그룹 조회 (Fetch a group of the project or raise 404)."""
        group: TalentGroup | None = await talent_group_repository.get_in_project(db, project_id, group_id)
        if group is None:
            raise NotFoundError("탤런트 그룹을 찾을 수 없습니다 (Talent group not found)")
        return group

    # === scheduled_dates 동기화 (scheduled_dates sync) ===

    async def sync_talent_scheduled_dates(
        self,
        db: AsyncSession,
        assignment: TalentProjectAssignment,
    ) -> list[date]:
        """탤런트 배정의 scheduled_dates를 일별 행에서 다시 계산합니다.

        Recompute a talent assignment's scheduled dates from its daily rows.

        Returns:
            list[date]: 새 날짜 목록 (New scheduled dates)
        """
        await db.flush()
        dates: list[date] = await talent_daily_repository.get_dates(db, assignment.talent_id, assignment.project_id)
        assignment.scheduled_dates = list(dates)
        await db.flush()
        return dates

    async def sync_group_scheduled_dates(self, db: AsyncSession, group: TalentGroup) -> list[date]:
        """그룹의 scheduled_dates를 일별 행에서 다시 계산합니다 (Recompute a group's scheduled dates)."""
        await db.flush()
        dates: list[date] = await group_daily_repository.get_dates(db, group.id)
        group.scheduled_dates = list(dates)
        await db.flush()
        return dates

    # === 탤런트 일별 배정 (Talent daily assignments) ===

    async def assign_talent_escort(
        self,
        db: AsyncSession,
        project_id: UUID,
        talent_id: UUID,
        assignment_date: date,
        escort_id: UUID,
    ) -> TalentDailyAssignment:
        """탤런트의 하루 에스코트를 지정합니다 (탤런트+날짜 기준 upsert).

        Set the escort of a talent for one day, upserting on (talent, date).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            project_id: 프로젝트 UUID (Project UUID)
            talent_id: 탤런트 UUID (Talent UUID)
            assignment_date: 배정 날짜 (Assignment date)
            escort_id: 에스코트 프로필 UUID (Escort profile UUID)

        Returns:
            TalentDailyAssignment: 생성/수정된 행 (Created or updated row)

        Raises:
            NotFoundError: 프로젝트/탤런트/에스코트 없음 (Unknown project, talent or escort)
            DateRangeError: 날짜가 프로젝트 기간 밖 (Date outside the project range)
        """
        project: Project = await self.get_project(db, project_id)
        self.check_date_in_range(project, assignment_date)
        assignment: TalentProjectAssignment = await self.get_talent_assignment(db, project_id, talent_id)
        await self.check_escort(db, escort_id)

        row: TalentDailyAssignment | None = await talent_daily_repository.get_for_day(db, talent_id, assignment_date)
        if row is None:
            row = await talent_daily_repository.create(db, {
                "talent_id": talent_id,
                "project_id": project_id,
                "assignment_date": assignment_date,
                "escort_id": escort_id,
            })
        elif row.project_id != project_id:
            raise DuplicateError(
                "탤런트가 같은 날짜에 다른 프로젝트에 배정되어 있습니다 "
                "(Talent already has an assignment on this date in another project)"
            )
        else:
            row.escort_id = escort_id

        await self.sync_talent_scheduled_dates(db, assignment)
        return row

    async def unassign_talent(
        self,
        db: AsyncSession,
        project_id: UUID,
        talent_id: UUID,
        assignment_date: date,
    ) -> bool:
        """탤런트의 하루 배정을 삭제합니다 (Remove a talent's row for one day; False when absent)."""
        assignment: TalentProjectAssignment = await self.get_talent_assignment(db, project_id, talent_id)
        row: TalentDailyAssignment | None = await talent_daily_repository.get_for_day(db, talent_id, assignment_date)
        if row is None or row.project_id != project_id:
            return False
        await talent_daily_repository.delete(db, row)
        await self.sync_talent_scheduled_dates(db, assignment)
        return True

    # === 그룹 일별 배정 (Group daily assignments) ===

    async def assign_group_escorts(
        self,
        db: AsyncSession,
        project_id: UUID,
        group_id: UUID,
        assignment_date: date,
        escort_ids: list[UUID],
    ) -> list[GroupDailyAssignment]:
        """그룹의 하루 에스코트 목록을 교체합니다. 빈 목록이면 그날 배정을 제거합니다.

        Replace the escorts of a group for one day. An empty list removes the day.

        Returns:
            list[GroupDailyAssignment]: 그날의 현재 행 (Rows of that day after the change)
        """
        project: Project = await self.get_project(db, project_id)
        self.check_date_in_range(project, assignment_date)
        group: TalentGroup = await self.get_group(db, project_id, group_id)

        wanted: list[UUID] = list(dict.fromkeys(escort_ids))
        for escort_id in wanted:
            await self.check_escort(db, escort_id)

        existing: Sequence[GroupDailyAssignment] = await group_daily_repository.get_for_day(db, group_id, assignment_date)
        kept: list[GroupDailyAssignment] = []
        for row in existing:
            if row.escort_id in wanted:
                kept.append(row)
            else:
                await db.delete(row)
        present: set[UUID] = {row.escort_id for row in kept}
        for escort_id in wanted:
            if escort_id not in present:
                kept.append(await group_daily_repository.create(db, {
                    "group_id": group_id,
                    "project_id": project_id,
                    "assignment_date": assignment_date,
                    "escort_id": escort_id,
                }))

        await self.sync_group_scheduled_dates(db, group)
        return kept

    async def set_group_schedule(
        self,
        db: AsyncSession,
        project_id: UUID,
        group_id: UUID,
        dates: list[date],
        escort_ids: list[UUID],
    ) -> TalentGroup:
        """그룹 일정 전체를 교체합니다 — (날짜, 에스코트)마다 한 행.

        Replace a group's whole schedule with one row per (date, escort).
        The request is rejected as a whole when any date is outside the
        project range. Duplicates in the request are collapsed.

        Raises:
            DateRangeError: 날짜가 프로젝트 기간 밖 (A date is outside the project range)
            BadRequestError: 날짜는 있는데 에스코트가 없음 (Dates given without escorts)
        """
        project: Project = await self.get_project(db, project_id)
        group: TalentGroup = await self.get_group(db, project_id, group_id)

        wanted_dates: list[date] = sorted(set(dates))
        wanted_escorts: list[UUID] = list(dict.fromkeys(escort_ids))
        for assignment_date in wanted_dates:
            self.check_date_in_range(project, assignment_date)
        if wanted_dates and not wanted_escorts:
            raise BadRequestError("에스코트를 한 명 이상 지정해야 합니다 (At least one escort is required)")
        for escort_id in wanted_escorts:
            await self.check_escort(db, escort_id)

        wanted_pairs: set[tuple[date, UUID]] = {(d, e) for d in wanted_dates for e in wanted_escorts}
        existing_pairs: set[tuple[date, UUID]] = set()
        for row in await group_daily_repository.get_for_group(db, group_id):
            pair: tuple[date, UUID] = (row.assignment_date, row.escort_id)
            if pair in wanted_pairs:
                existing_pairs.add(pair)
            else:
                await db.delete(row)
        for assignment_date, escort_id in sorted(wanted_pairs - existing_pairs, key=lambda p: (p[0], str(p[1]))):
            await group_daily_repository.create(db, {
                "group_id": group_id,
                "project_id": project_id,
                "assignment_date": assignment_date,
                "escort_id": escort_id,
            })

        await self.sync_group_scheduled_dates(db, group)
        return group

    async def update_group(
        self,
        db: AsyncSession,
        project_id: UUID,
        group_id: UUID,
        data: dict,
    ) -> TalentGroup:
        """그룹 정보 수정 — 이름, 구성원, 담당자.

        Update a group's name, members and point of contact. Members are
        replaced as a whole when given.

        Raises:
            DuplicateError: 프로젝트 내 그룹 이름 중복 (Group name already used in the project)
        """
        group: TalentGroup = await self.get_group(db, project_id, group_id)

        group_name: str | None = data.get("group_name")
        if group_name is not None:
            group_name = group_name.strip()
            if not group_name:
                raise BadRequestError("그룹 이름이 필요합니다 (Group name is required)")
            if await talent_group_repository.name_taken(db, project_id, group_name, exclude_id=group_id):
                raise DuplicateError("같은 이름의 그룹이 이미 있습니다 (A group with this name already exists)")
            group.group_name = group_name

        if "point_of_contact_name" in data:
            group.point_of_contact_name = data["point_of_contact_name"]
        if "point_of_contact_phone" in data:
            group.point_of_contact_phone = data["point_of_contact_phone"]

        if data.get("members") is not None:
            group.members = [
                TalentGroupMember(name=member["name"], role=member.get("role"), sort_order=index)
                for index, member in enumerate(data["members"])
            ]

        await db.flush()
        if data.get("scheduled_dates") is not None:
            escort_ids: list[UUID] = data.get("escort_ids") or await self.get_group_escort_ids(db, group)
            await self.set_group_schedule(db, project_id, group_id, data["scheduled_dates"], escort_ids)
        return group

    async def get_group_escort_ids(self, db: AsyncSession, group: TalentGroup) -> list[UUID]:
        """그룹의 현재 일별 에스코트 목록 (Escorts used by the group's daily rows, first-seen order)."""
        escorts: list[UUID] = []
        for row in await group_daily_repository.get_for_group(db, group.id):
            if row.escort_id not in escorts:
                escorts.append(row.escort_id)
        return escorts

    async def build_group_response(self, db: AsyncSession, group: TalentGroup) -> dict:
        """그룹 응답 딕셔너리 구성 (Build the talent group response dict)."""
        return {
            "id": str(group.id),
            "project_id": str(group.project_id),
            "group_name": group.group_name,
            "members": [{"name": member.name, "role": member.role} for member in group.members],
            "point_of_contact_name": group.point_of_contact_name,
            "point_of_contact_phone": group.point_of_contact_phone,
            "scheduled_dates": list(group.scheduled_dates),
            "escort_ids": [str(escort_id) for escort_id in await self.get_group_escort_ids(db, group)],
        }

    # === 날짜 단위 조회/정리 (Per-day read and clear) ===

    async def clear_day(self, db: AsyncSession, project_id: UUID, assignment_date: date) -> int:
        """프로젝트 하루치 배정을 모두 제거합니다.

        Remove every talent and group row of one project date and resync
        each affected parent.

        Returns:
            int: 삭제된 행 수 (Number of rows removed)
        """
        await self.get_project(db, project_id)
        removed: int = 0

        talent_ids: set[UUID] = set()
        for row in await talent_daily_repository.get_for_project_day(db, project_id, assignment_date):
            talent_ids.add(row.talent_id)
            await db.delete(row)
            removed += 1
        group_ids: set[UUID] = set()
        for row in await group_daily_repository.get_for_project_day(db, project_id, assignment_date):
            group_ids.add(row.group_id)
            await db.delete(row)
            removed += 1
        await db.flush()

        for talent_id in talent_ids:
            assignment: TalentProjectAssignment | None = await talent_assignment_repository.get_for_talent(
                db, project_id, talent_id
            )
            if assignment is not None:
                await self.sync_talent_scheduled_dates(db, assignment)
        for group_id in group_ids:
            group: TalentGroup | None = await talent_group_repository.get_by_id(db, group_id)
            if group is not None:
                await self.sync_group_scheduled_dates(db, group)
        return removed

    async def get_day_assignments(self, db: AsyncSession, project_id: UUID, assignment_date: date) -> dict:
        """하루치 배정 조회 — 에스코트 이름 포함.

        Talent and group assignments of one project date with escort names.
        """
        project: Project = await self.get_project(db, project_id)
        self.check_date_in_range(project, assignment_date)

        talent_rows: Sequence[TalentDailyAssignment] = await talent_daily_repository.get_for_project_day(
            db, project_id, assignment_date
        )
        group_rows: Sequence[GroupDailyAssignment] = await group_daily_repository.get_for_project_day(
            db, project_id, assignment_date
        )
        names: dict[UUID, str] = await profile_repository.get_names(
            db, {row.escort_id for row in talent_rows} | {row.escort_id for row in group_rows}
        )

        groups: dict[UUID, list[dict]] = {}
        for row in group_rows:
            groups.setdefault(row.group_id, []).append(
                {"escort_id": str(row.escort_id), "escort_name": names.get(row.escort_id)}
            )

        return {
            "date": assignment_date,
            "talent": [
                {
                    "talent_id": str(row.talent_id),
                    "escort_id": str(row.escort_id),
                    "escort_name": names.get(row.escort_id),
                }
                for row in sorted(talent_rows, key=lambda r: str(r.talent_id))
            ],
            "groups": [
                {"group_id": str(group_id), "escorts": escorts}
                for group_id, escorts in sorted(groups.items(), key=lambda item: str(item[0]))
            ],
        }

    async def get_available_escorts(self, db: AsyncSession, project_id: UUID, assignment_date: date) -> list[dict]:
        """하루 기준 에스코트 가용 현황.

        Escort-role team members of the project and whether each already has
        a talent or group assignment on the date.
        """
        project: Project = await self.get_project(db, project_id)
        self.check_date_in_range(project, assignment_date)

        busy: dict[UUID, int] = {}
        for row in await talent_daily_repository.get_for_project_day(db, project_id, assignment_date):
            busy[row.escort_id] = busy.get(row.escort_id, 0) + 1
        for row in await group_daily_repository.get_for_project_day(db, project_id, assignment_date):
            busy[row.escort_id] = busy.get(row.escort_id, 0) + 1

        return [
            {
                "escort_id": str(escort_id),
                "escort_name": name,
                "assigned": escort_id in busy,
                "assignment_count": busy.get(escort_id, 0),
            }
            for escort_id, name in await team_assignment_repository.get_escorts(db, project_id)
        ]


# 싱글턴 인스턴스 — Singleton instance
daily_assignment_service: DailyAssignmentService = DailyAssignmentService()

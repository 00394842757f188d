"""준비도 서비스 — 프로젝트 준비도 계산, 확정, 할 일 목록 비즈니스 로직.

Readiness Service — Derives per-area statuses and the overall tier from
fresh counts, handles area finalization, and builds the to-do list and
feature gates shown on the project dashboard.

Statuses are always recomputed from counts, never patched incrementally.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.daily_assignment import GroupDailyAssignment, TalentDailyAssignment
from talentops.models.profile import Profile
from talentops.models.project import Project
from talentops.models.readiness import READINESS_AREAS, ProjectReadiness
from talentops.models.talent import TalentGroup, TalentProjectAssignment
from talentops.repositories.project_repository import project_repository
from talentops.repositories.readiness_repository import ReadinessCounts, readiness_repository
from talentops.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError

# 확정 권한 — Roles allowed to finalize / unfinalize an area
FINALIZE_ROLES: frozenset[str] = frozenset({"admin", "in_house"})
UNFINALIZE_ROLES: frozenset[str] = frozenset({"admin"})

# 다가오는 배정 마감 확인 일수 — Days ahead checked for missing assignments
UPCOMING_DAYS: int = 3

FINALIZE_BLOCKERS: dict[str, tuple[str, str]] = {
    "locations": ("default-only", "Cannot finalize locations with default setup only. Add custom locations first."),
    "roles": ("default-only", "Cannot finalize roles with default setup only. Configure custom roles first."),
    "team": ("none", "Cannot finalize team with no staff assigned. Assign team members first."),
    "talent": ("none", "Cannot finalize talent with no talent assigned. Add talent to roster first."),
}


# === 순수 함수 (Pure status functions) ===

def location_or_role_status(finalized: bool, custom_count: int) -> str:
    """장소/역할 상태 (Locations and roles: finalized, configured or default-only)."""
    if finalized:
        return "finalized"
    return "configured" if custom_count > 0 else "default-only"


def team_or_talent_status(finalized: bool, count: int) -> str:
    """팀/탤런트 상태 (Team and talent: finalized, partial or none)."""
    if finalized:
        return "finalized"
    return "partial" if count > 0 else "none"


def overall_status(area_statuses: dict[str, str], total_staff: int, total_talent: int, escort_count: int) -> str:
    """전체 준비도 단계.

    Overall tier: production-ready when every area is finalized, otherwise
    operational when staff, talent and at least one escort are present,
    otherwise getting-started.
    """
    if area_statuses and all(status == "finalized" for status in area_statuses.values()):
        return "production-ready"
    if total_staff > 0 and total_talent > 0 and escort_count > 0:
        return "operational"
    return "getting-started"


def apply_counts(readiness: ProjectReadiness, counts: ReadinessCounts) -> ProjectReadiness:
    """집계를 준비도 행에 반영하고 모든 상태를 다시 계산 (Write counts and rederive every status)."""
    readiness.custom_location_count = counts.custom_location_count
    readiness.custom_role_count = counts.custom_role_count
    readiness.total_staff_assigned = counts.total_staff_assigned
    readiness.supervisor_count = counts.supervisor_count
    readiness.escort_count = counts.escort_count
    readiness.coordinator_count = counts.coordinator_count
    readiness.total_talent = counts.total_talent

    readiness.locations_status = location_or_role_status(readiness.locations_finalized, counts.custom_location_count)
    readiness.roles_status = location_or_role_status(readiness.roles_finalized, counts.custom_role_count)
    readiness.team_status = team_or_talent_status(readiness.team_finalized, counts.total_staff_assigned)
    readiness.talent_status = team_or_talent_status(readiness.talent_finalized, counts.total_talent)
    readiness.overall_status = overall_status(
        {area: getattr(readiness, f"{area}_status") for area in READINESS_AREAS},
        counts.total_staff_assigned,
        counts.total_talent,
        counts.escort_count,
    )
    readiness.last_updated = datetime.now(timezone.utc)
    return readiness


@dataclass
class AssignmentProgress:
    """배정 진행률 (Daily escort assignment progress for a project)."""

    total_assignments: int = 0
    completed_assignments: int = 0
    urgent_issues: int = 0
    upcoming_deadlines: list[dict[str, Any]] = field(default_factory=list)
    assignment_rate: int = 0
    total_entities: int = 0
    project_days: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "totalAssignments": self.total_assignments,
            "completedAssignments": self.completed_assignments,
            "urgentIssues": self.urgent_issues,
            "upcomingDeadlines": self.upcoming_deadlines,
            "assignmentRate": self.assignment_rate,
            "totalEntities": self.total_entities,
            "projectDays": self.project_days,
        }


def _todo(item_id: str, area: str, priority: str, title: str, description: str, action_text: str, route: str) -> dict[str, str]:
    return {
        "id": item_id,
        "area": area,
        "priority": priority,
        "title": title,
        "description": description,
        "actionText": action_text,
        "actionRoute": route,
    }


def build_todo_items(readiness: ProjectReadiness, progress: AssignmentProgress | None = None) -> list[dict[str, str]]:
    """할 일 목록 생성.

    Build the dashboard to-do list, ordered critical → important → optional.

    Args:
        readiness: 최신 준비도 행 (Freshly recalculated readiness row)
        progress: 배정 진행률, 없으면 배정 항목 생략 (Assignment progress; assignment items are skipped when None)

    Returns:
        list[dict]: id/area/priority/title/description/actionText/actionRoute 항목
    """
    items: list[dict[str, str]] = []
    roles_team: tuple[str, str] = ("Go to Roles & Team", "/roles-team")
    roster: tuple[str, str] = ("Go to Talent Roster", "/talent-roster")
    info: tuple[str, str] = ("Go to Info Tab", "/info")
    assignments: tuple[str, str] = ("Go to Assignments", "/assignments")

    # 필수 — Critical: blocks core functionality
    if readiness.total_staff_assigned == 0:
        items.append(_todo("assign-team", "team", "critical", "Assign team members",
                           "No staff assigned to this project", *roles_team))
    if readiness.total_talent == 0:
        items.append(_todo("add-talent", "talent", "critical", "Add talent to roster",
                           "No talent assigned to this project", *roster))
    if readiness.escort_count == 0 and readiness.total_talent > 0:
        items.append(_todo("assign-escorts", "team", "critical", "Assign talent escorts",
                           "Talent needs escort assignments", *roles_team))
    if progress is not None and progress.urgent_issues > 0:
        noun: str = "assignment" if progress.urgent_issues == 1 else "assignments"
        items.append(_todo("urgent-assignments", "assignments", "critical", "Complete urgent assignments",
                           f"{progress.urgent_issues} {noun} needed for tomorrow", *assignments))

    # 중요 — Important: should be addressed soon
    if readiness.roles_status == "default-only":
        items.append(_todo("configure-roles", "roles", "important", "Configure custom roles",
                           "Using default roles only", *roles_team))
    if readiness.locations_status == "default-only":
        items.append(_todo("configure-locations", "locations", "important", "Add custom locations",
                           "Using default locations only", *info))
    if progress is not None and progress.upcoming_deadlines:
        deadline: dict[str, Any] = progress.upcoming_deadlines[0]
        when: str = "tomorrow" if deadline["daysFromNow"] == 1 else f"in {deadline['daysFromNow']} days"
        items.append(_todo("upcoming-assignments", "assignments", "important", "Complete upcoming assignments",
                           f"{deadline['missingAssignments']} assignments needed {when}", *assignments))
    if readiness.supervisor_count == 0 and readiness.total_staff_assigned > 0:
        items.append(_todo("assign-supervisor", "team", "important", "Assign a supervisor",
                           "No supervisor assigned for team oversight", *roles_team))

    # 선택 — Optional: nice to have
    if not readiness.roles_finalized and readiness.roles_status != "default-only":
        items.append(_todo("finalize-roles", "roles", "optional", "Finalize role configuration",
                           "Mark roles as complete when ready", *roles_team))
    if not readiness.locations_finalized and readiness.locations_status != "default-only":
        items.append(_todo("finalize-locations", "locations", "optional", "Finalize location setup",
                           "Mark locations as complete when ready", *info))
    if not readiness.team_finalized and readiness.team_status != "none":
        items.append(_todo("finalize-team", "team", "optional", "Finalize team assignments",
                           "Mark team setup as complete when ready", *roles_team))
    if not readiness.talent_finalized and readiness.talent_status != "none":
        items.append(_todo("finalize-talent", "talent", "optional", "Finalize talent roster",
                           "Mark talent roster as complete when ready", *roster))
    if progress is not None and 0 < progress.assignment_rate < 100:
        items.append(_todo("complete-assignments", "assignments", "optional", "Complete remaining assignments",
                           f"{progress.assignment_rate}% of assignments completed", *assignments))

    return items


def _feature(available: bool, requirement: str, guidance: str | None = None, route: str | None = None) -> dict[str, Any]:
    return {"available": available, "requirement": requirement, "guidance": guidance, "actionRoute": route}


def build_feature_availability(readiness: ProjectReadiness, has_assignments: bool = False) -> dict[str, dict[str, Any]]:
    """기능 사용 가능 여부.

    Feature gates derived from the readiness counts. ``guidance`` and
    ``actionRoute`` are only set when the feature is blocked.
    """
    staff: int = readiness.total_staff_assigned
    talent: int = readiness.total_talent
    escorts: int = readiness.escort_count
    supervisors: int = readiness.supervisor_count
    default_locations: bool = readiness.locations_status == "default-only"

    assignment_guidance: str | None = None
    assignment_route: str | None = None
    if talent == 0:
        assignment_guidance, assignment_route = "Add talent to enable assignments", "/talent-roster"
    elif escorts == 0:
        assignment_guidance, assignment_route = "Assign escorts to enable assignments", "/roles-team"

    tracking_guidance: str | None = None
    tracking_route: str | None = None
    if default_locations:
        tracking_guidance, tracking_route = "Add custom locations to enable tracking", "/info"
    elif not has_assignments:
        tracking_guidance, tracking_route = "Make escort assignments to enable location tracking", "/assignments"

    checkout_guidance: str | None = None
    if supervisors == 0:
        checkout_guidance = "Assign a supervisor to enable checkout controls"
    elif escorts == 0:
        checkout_guidance = "Assign escorts to enable checkout controls"

    operations_route: str | None = None
    if staff == 0:
        operations_route = "/roles-team"
    elif talent == 0:
        operations_route = "/talent-roster"
    elif escorts == 0:
        operations_route = "/roles-team"

    nobody: bool = staff == 0 and talent == 0
    return {
        "timeTracking": _feature(
            staff > 0, "At least one staff member assigned",
            "Assign team members to enable time tracking" if staff == 0 else None,
            "/roles-team" if staff == 0 else None,
        ),
        "assignments": _feature(
            talent > 0 and escorts > 0, "Both talent and escorts assigned", assignment_guidance, assignment_route,
        ),
        "locationTracking": _feature(
            not default_locations and has_assignments, "Custom locations and assignments configured",
            tracking_guidance, tracking_route,
        ),
        "supervisorCheckout": _feature(
            supervisors > 0 and escorts > 0, "Supervisor and escorts assigned",
            checkout_guidance, "/roles-team" if checkout_guidance else None,
        ),
        "talentManagement": _feature(
            talent > 0, "At least one talent assigned",
            "Add talent to enable talent management features" if talent == 0 else None,
            "/talent-roster" if talent == 0 else None,
        ),
        "projectOperations": _feature(
            readiness.overall_status in ("operational", "production-ready"),
            "Project must be operational (staff, talent, and escorts assigned)",
            "Complete basic setup to enable operations dashboard"
            if readiness.overall_status == "getting-started" else None,
            operations_route,
        ),
        "notifications": _feature(
            not nobody, "Staff or talent assigned to receive notifications",
            "Assign staff or talent to enable notifications" if nobody else None,
            "/roles-team" if nobody else None,
        ),
    }


class ReadinessService:
    """프로젝트 준비도 서비스 (Project readiness service)."""

    async def _get_project(self, db: AsyncSession, project_id: UUID) -> Project:
        project: Project | None = await project_repository.get_by_id(db, project_id)
        if project is None:
            raise NotFoundError("프로젝트를 찾을 수 없습니다 (Project not found)")
        return project

    async def recalculate(self, db: AsyncSession, project_id: UUID) -> ProjectReadiness:
        """현재 집계로 준비도를 다시 계산합니다.

        Recompute every count and status of a project, creating the readiness
        row when it does not exist yet.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            project_id: 프로젝트 UUID (Project UUID)

        Returns:
            ProjectReadiness: 갱신된 준비도 행 (Updated readiness row)

        Raises:
            NotFoundError: 프로젝트 없음 (Project not found)
        """
        await self._get_project(db, project_id)
        readiness: ProjectReadiness = await readiness_repository.get_or_create(db, project_id)
        counts: ReadinessCounts = await readiness_repository.collect_counts(db, project_id)
        apply_counts(readiness, counts)
        await db.flush()
        return readiness

    async def recalculate_all(self, db: AsyncSession) -> int:
        """모든 프로젝트 재계산 (Recompute every project, returns the project count)."""
        project_ids: list[UUID] = await project_repository.get_all_ids(db)
        for project_id in project_ids:
            await self.recalculate(db, project_id)
        return len(project_ids)

    def _check_area(self, area: str) -> None:
        if area not in READINESS_AREAS:
            raise BadRequestError(
                f"잘못된 영역입니다 (Invalid area. Must be one of: {', '.join(READINESS_AREAS)})"
            )

    async def finalize(self, db: AsyncSession, project_id: UUID, area: str, actor: Profile) -> ProjectReadiness:
        """영역 확정 — admin/in_house 전용.

        Mark an area as finalized. Areas still at their empty status
        (default-only or none) cannot be finalized.

        Raises:
            ForbiddenError: 권한 없음 (Not admin or in_house)
            BadRequestError: 잘못된 영역 또는 확정 불가 상태 (Invalid area or nothing to finalize)
        """
        if actor.role not in FINALIZE_ROLES:
            raise ForbiddenError(
                "프로젝트 영역 확정 권한이 없습니다 (Insufficient permissions to finalize project areas)"
            )
        self._check_area(area)

        readiness: ProjectReadiness = await self.recalculate(db, project_id)
        empty_status, message = FINALIZE_BLOCKERS[area]
        if getattr(readiness, f"{area}_status") == empty_status:
            raise BadRequestError(message)

        if not getattr(readiness, f"{area}_finalized"):
            await readiness_repository.update(db, readiness, {
                f"{area}_finalized": True,
                f"{area}_finalized_at": datetime.now(timezone.utc),
                f"{area}_finalized_by": actor.id,
            })
        return await self.recalculate(db, project_id)

    async def unfinalize(self, db: AsyncSession, project_id: UUID, area: str, actor: Profile) -> ProjectReadiness:
        """영역 확정 해제 — admin 전용 (Clear an area's finalization; admin only)."""
        if actor.role not in UNFINALIZE_ROLES:
            raise ForbiddenError(
                "프로젝트 영역 확정 해제 권한이 없습니다 (Insufficient permissions to unfinalize project areas)"
            )
        self._check_area(area)

        await self._get_project(db, project_id)
        readiness: ProjectReadiness = await readiness_repository.get_or_create(db, project_id)
        await readiness_repository.update(db, readiness, {
            f"{area}_finalized": False,
            f"{area}_finalized_at": None,
            f"{area}_finalized_by": None,
        })
        return await self.recalculate(db, project_id)

    # === 배정 진행률 (Assignment progress) ===

    async def _count(self, db: AsyncSession, query: Any) -> int:
        return (await db.execute(query)).scalar() or 0

    async def _missing_on(self, db: AsyncSession, project_id: UUID, day: date) -> int:
        """해당 날짜에 에스코트 없는 탤런트+그룹 수 (Talent and groups without an escort on a date)."""
        assigned_talent = select(TalentDailyAssignment.talent_id).where(
            TalentDailyAssignment.project_id == project_id,
            TalentDailyAssignment.assignment_date == day,
        )
        assigned_groups = select(GroupDailyAssignment.group_id).where(
            GroupDailyAssignment.project_id == project_id,
            GroupDailyAssignment.assignment_date == day,
        )
        talent: int = await self._count(db, select(func.count()).select_from(TalentProjectAssignment).where(
            TalentProjectAssignment.project_id == project_id,
            TalentProjectAssignment.talent_id.not_in(assigned_talent),
        ))
        groups: int = await self._count(db, select(func.count()).select_from(TalentGroup).where(
            TalentGroup.project_id == project_id,
            TalentGroup.id.not_in(assigned_groups),
        ))
        return talent + groups

    async def build_assignment_progress(
        self,
        db: AsyncSession,
        project_id: UUID,
        today: date | None = None,
    ) -> AssignmentProgress:
        """일별 배정 진행률 계산.

        Expected assignments are (talent + groups) × project days; completed
        ones are the daily rows. Urgent issues are tomorrow's unassigned
        entities, and upcoming deadlines cover the next three days.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            project_id: 프로젝트 UUID (Project UUID)
            today: 기준 날짜, 기본값 오늘 UTC (Reference date, defaults to today in UTC)
        """
        project: Project = await self._get_project(db, project_id)
        today = today or datetime.now(timezone.utc).date()

        total_talent: int = await self._count(db, select(func.count()).select_from(TalentProjectAssignment).where(
            TalentProjectAssignment.project_id == project_id
        ))
        total_groups: int = await self._count(db, select(func.count()).select_from(TalentGroup).where(
            TalentGroup.project_id == project_id
        ))
        total_entities: int = total_talent + total_groups
        if total_entities == 0:
            return AssignmentProgress()

        project_days: int = (project.end_date - project.start_date).days + 1
        total_assignments: int = total_entities * project_days
        completed: int = await self._count(db, select(func.count()).select_from(TalentDailyAssignment).where(
            TalentDailyAssignment.project_id == project_id
        )) + await self._count(db, select(func.count()).select_from(GroupDailyAssignment).where(
            GroupDailyAssignment.project_id == project_id
        ))

        urgent: int = 0
        deadlines: list[dict[str, Any]] = []
        for days_ahead in range(1, UPCOMING_DAYS + 1):
            day: date = today + timedelta(days=days_ahead)
            if not project.contains(day):
                continue
            missing: int = await self._missing_on(db, project_id, day)
            if days_ahead == 1:
                urgent = missing
            if missing > 0:
                deadlines.append({"date": day.isoformat(), "missingAssignments": missing, "daysFromNow": days_ahead})

        return AssignmentProgress(
            total_assignments=total_assignments,
            completed_assignments=completed,
            urgent_issues=urgent,
            upcoming_deadlines=deadlines,
            assignment_rate=round(completed / total_assignments * 100) if total_assignments else 0,
            total_entities=total_entities,
            project_days=project_days,
        )

    def build_response(self, readiness: ProjectReadiness) -> dict[str, Any]:
        """준비도 행 응답 딕셔너리 (Readiness row as a response dict)."""
        data: dict[str, Any] = {
            "project_id": str(readiness.project_id),
            "custom_location_count": readiness.custom_location_count,
            "custom_role_count": readiness.custom_role_count,
            "total_staff_assigned": readiness.total_staff_assigned,
            "supervisor_count": readiness.supervisor_count,
            "escort_count": readiness.escort_count,
            "coordinator_count": readiness.coordinator_count,
            "total_talent": readiness.total_talent,
            "overall_status": readiness.overall_status,
            "last_updated": readiness.last_updated,
        }
        for area in READINESS_AREAS:
            data[f"{area}_finalized"] = getattr(readiness, f"{area}_finalized")
            data[f"{area}_status"] = getattr(readiness, f"{area}_status")
        return data

    async def get_dashboard(self, db: AsyncSession, project_id: UUID, today: date | None = None) -> dict[str, Any]:
        """준비도 + 할 일 + 기능 + 진행률 (Readiness row plus to-dos, feature gates and progress)."""
        readiness: ProjectReadiness = await self.recalculate(db, project_id)
        progress: AssignmentProgress = await self.build_assignment_progress(db, project_id, today)
        return {
            **self.build_response(readiness),
            "todoItems": build_todo_items(readiness, progress),
            "featureAvailability": build_feature_availability(readiness, progress.completed_assignments > 0),
            "assignmentProgress": progress.as_dict(),
        }


# 싱글턴 인스턴스 — Singleton instance
readiness_service: ReadinessService = ReadinessService()

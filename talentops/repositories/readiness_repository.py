"""준비도 레포지토리 — 프로젝트 준비도 및 집계 쿼리 담당.

Readiness Repository — Project readiness row and the count queries it is
derived from.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.project import ProjectLocation, ProjectRoleTemplate, TeamAssignment
from talentops.models.readiness import ProjectReadiness
from talentops.models.talent import TalentProjectAssignment
from talentops.repositories.base import BaseRepository


@dataclass
class ReadinessCounts:
    """준비도 집계 (Counts a readiness row is derived from)."""

    custom_location_count: int = 0
    custom_role_count: int = 0
    total_staff_assigned: int = 0
    supervisor_count: int = 0
    escort_count: int = 0
    coordinator_count: int = 0
    total_talent: int = 0


class ReadinessRepository(BaseRepository[ProjectReadiness]):
    """프로젝트 준비도 레포지토리 (Project readiness repository)."""

    def __init__(self) -> None:
        super().__init__(ProjectReadiness)

    async def get_or_create(self, db: AsyncSession, project_id: UUID) -> ProjectReadiness:
        """준비도 행 조회, 없으면 생성 (Fetch the readiness row, creating it when missing)."""
        readiness: ProjectReadiness | None = await db.get(ProjectReadiness, project_id)
        if readiness is None:
            readiness = ProjectReadiness(project_id=project_id)
            db.add(readiness)
            await db.flush()
        return readiness

    async def collect_counts(self, db: AsyncSession, project_id: UUID) -> ReadinessCounts:
        """현재 집계를 새로 계산합니다.

        Run the count queries for one project.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            project_id: 프로젝트 UUID (Project UUID)

        Returns:
            ReadinessCounts: 집계 결과 (Fresh counts)
        """
        custom_locations: int = (await db.execute(
            select(func.count()).select_from(ProjectLocation).where(
                ProjectLocation.project_id == project_id,
                ProjectLocation.is_default.is_(False),
            )
        )).scalar() or 0

        custom_roles: int = (await db.execute(
            select(func.count()).select_from(ProjectRoleTemplate).where(
                ProjectRoleTemplate.project_id == project_id,
                ProjectRoleTemplate.is_default.is_(False),
            )
        )).scalar() or 0

        # 역할별 팀 인원 — Team members per role
        role_rows = (await db.execute(
            select(TeamAssignment.role, func.count())
            .where(TeamAssignment.project_id == project_id)
            .group_by(TeamAssignment.role)
        )).all()
        by_role: dict[str, int] = {role: count for role, count in role_rows}

        total_talent: int = (await db.execute(
            select(func.count()).select_from(TalentProjectAssignment).where(
                TalentProjectAssignment.project_id == project_id
            )
        )).scalar() or 0

        return ReadinessCounts(
            custom_location_count=custom_locations,
            custom_role_count=custom_roles,
            total_staff_assigned=sum(by_role.values()),
            supervisor_count=by_role.get("supervisor", 0),
            escort_count=by_role.get("talent_escort", 0),
            coordinator_count=by_role.get("coordinator", 0),
            total_talent=total_talent,
        )


# 싱글턴 인스턴스 — Singleton instance
readiness_repository: ReadinessRepository = ReadinessRepository()

"""프로젝트 레포지토리 — 프로젝트, 프로필, 팀 배정 관련 DB 쿼리 담당.

Project Repository — Project, profile and team assignment queries.
"""

from decimal import Decimal
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.profile import Profile
from talentops.models.project import Project, ProjectRoleTemplate, TeamAssignment
from talentops.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """프로젝트 레포지토리 (Project repository)."""

    def __init__(self) -> None:
        super().__init__(Project)

    async def get_all_ids(self, db: AsyncSession) -> list[UUID]:
        """모든 프로젝트 ID (All project ids, oldest first)."""
        result = await db.execute(select(Project.id).order_by(Project.created_at))
        return list(result.scalars().all())


class ProfileRepository(BaseRepository[Profile]):
    """프로필 레포지토리 (Profile repository)."""

    def __init__(self) -> None:
        super().__init__(Profile)

    async def get_names(self, db: AsyncSession, profile_ids: set[UUID]) -> dict[UUID, str]:
        """프로필 이름 조회 (Map profile id → full name)."""
        if not profile_ids:
            return {}
        result = await db.execute(
            select(Profile.id, Profile.full_name).where(Profile.id.in_(profile_ids))
        )
        return {row.id: row.full_name for row in result.all()}


class TeamAssignmentRepository(BaseRepository[TeamAssignment]):
    """팀 배정 레포지토리 (Team assignment repository)."""

    def __init__(self) -> None:
        super().__init__(TeamAssignment)

    async def get_for_user(
        self,
        db: AsyncSession,
        project_id: UUID,
        user_id: UUID,
    ) -> TeamAssignment | None:
        """프로젝트 내 사용자 배정 조회 (Team assignment of a user on a project)."""
        result = await db.execute(
            select(TeamAssignment).where(
                TeamAssignment.project_id == project_id,
                TeamAssignment.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_escorts(
        self,
        db: AsyncSession,
        project_id: UUID,
    ) -> Sequence[tuple[UUID, str]]:
        """프로젝트 에스코트 목록 (Escort-role team members as (id, name), by name)."""
        result = await db.execute(
            select(Profile.id, Profile.full_name)
            .join(TeamAssignment, TeamAssignment.user_id == Profile.id)
            .where(
                TeamAssignment.project_id == project_id,
                TeamAssignment.role == "talent_escort",
            )
            .order_by(Profile.full_name)
        )
        return [(row.id, row.full_name) for row in result.all()]

    async def get_role_base_rate(
        self,
        db: AsyncSession,
        project_id: UUID,
        role: str,
    ) -> Decimal | None:
        """역할 템플릿 기본 시급 (Base pay rate of the role template; custom before default)."""
        result = await db.execute(
            select(ProjectRoleTemplate.base_pay_rate)
            .where(
                ProjectRoleTemplate.project_id == project_id,
                ProjectRoleTemplate.role == role,
            )
            .order_by(ProjectRoleTemplate.is_default)
            .limit(1)
        )
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instances
project_repository: ProjectRepository = ProjectRepository()
profile_repository: ProfileRepository = ProfileRepository()
team_assignment_repository: TeamAssignmentRepository = TeamAssignmentRepository()

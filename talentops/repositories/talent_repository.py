"""탤런트 레포지토리 — 탤런트 배정 및 그룹 관련 DB 쿼리 담당.

Talent Repository — Talent project assignment and talent group queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.talent import TalentGroup, TalentProjectAssignment
from talentops.repositories.base import BaseRepository


class TalentAssignmentRepository(BaseRepository[TalentProjectAssignment]):
    """탤런트-프로젝트 배정 레포지토리 (Talent project assignment repository)."""

    def __init__(self) -> None:
        super().__init__(TalentProjectAssignment)

    async def get_for_talent(
        self,
        db: AsyncSession,
        project_id: UUID,
        talent_id: UUID,
    ) -> TalentProjectAssignment | None:
        """탤런트의 프로젝트 배정 조회 (Assignment of a talent on a project)."""
        result = await db.execute(
            select(TalentProjectAssignment).where(
                TalentProjectAssignment.project_id == project_id,
                TalentProjectAssignment.talent_id == talent_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_in_scope(
        self,
        db: AsyncSession,
        project_id: UUID | None = None,
    ) -> Sequence[TalentProjectAssignment]:
        """범위 내 모든 배정 (All assignments, optionally for one project, in stable order)."""
        query: Select = select(TalentProjectAssignment).order_by(
            TalentProjectAssignment.project_id, TalentProjectAssignment.id
        )
        if project_id is not None:
            query = query.where(TalentProjectAssignment.project_id == project_id)
        result = await db.execute(query)
        return result.scalars().all()

    async def count_for_project(self, db: AsyncSession, project_id: UUID) -> int:
        """프로젝트 탤런트 수 (Number of talent assigned to the project)."""
        result = await db.execute(
            select(func.count()).select_from(TalentProjectAssignment).where(
                TalentProjectAssignment.project_id == project_id
            )
        )
        return result.scalar() or 0


class TalentGroupRepository(BaseRepository[TalentGroup]):
    """탤런트 그룹 레포지토리 (Talent group repository)."""

    def __init__(self) -> None:
        super().__init__(TalentGroup)

    async def get_in_project(
        self,
        db: AsyncSession,
        project_id: UUID,
        group_id: UUID,
    ) -> TalentGroup | None:
        """프로젝트 내 그룹 조회 (Group by id, scoped to a project)."""
        result = await db.execute(
            select(TalentGroup).where(
                TalentGroup.id == group_id,
                TalentGroup.project_id == project_id,
            )
        )
        return result.scalar_one_or_none()

    async def name_taken(
        self,
        db: AsyncSession,
        project_id: UUID,
        group_name: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """그룹 이름 중복 여부 (Whether another group in the project uses the name)."""
        query: Select = select(TalentGroup.id).where(
            TalentGroup.project_id == project_id,
            TalentGroup.group_name == group_name,
        )
        if exclude_id is not None:
            query = query.where(TalentGroup.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def get_in_scope(
        self,
        db: AsyncSession,
        project_id: UUID | None = None,
    ) -> Sequence[TalentGroup]:
        """범위 내 모든 그룹 (All groups, optionally for one project, in stable order)."""
        query: Select = select(TalentGroup).order_by(TalentGroup.project_id, TalentGroup.id)
        if project_id is not None:
            query = query.where(TalentGroup.project_id == project_id)
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
talent_assignment_repository: TalentAssignmentRepository = TalentAssignmentRepository()
talent_group_repository: TalentGroupRepository = TalentGroupRepository()

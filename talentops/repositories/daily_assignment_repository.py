"""일별 배정 레포지토리 — 일별 에스코트 배정 및 마이그레이션 스냅샷 DB 쿼리 담당.

Daily Assignment Repository — Daily escort assignment and migration snapshot queries.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.daily_assignment import (
    AssignmentMigrationSnapshot,
    GroupDailyAssignment,
    TalentDailyAssignment,
)
from talentops.repositories.base import BaseRepository


class TalentDailyAssignmentRepository(BaseRepository[TalentDailyAssignment]):
    """탤런트 일별 배정 레포지토리 (Talent daily assignment repository)."""

    def __init__(self) -> None:
        super().__init__(TalentDailyAssignment)

    async def get_for_day(
        self,
        db: AsyncSession,
        talent_id: UUID,
        assignment_date: date,
    ) -> TalentDailyAssignment | None:
        """탤런트+날짜 행 조회 — 자연 키 (Row for the natural key talent+date)."""
        result = await db.execute(
            select(TalentDailyAssignment).where(
                TalentDailyAssignment.talent_id == talent_id,
                TalentDailyAssignment.assignment_date == assignment_date,
            )
        )
        return result.scalar_one_or_none()

    async def get_dates(
        self,
        db: AsyncSession,
        talent_id: UUID,
        project_id: UUID,
    ) -> list[date]:
        """배정된 날짜 목록, 중복 없이 정렬 (Distinct sorted dates with a daily row)."""
        result = await db.execute(
            select(TalentDailyAssignment.assignment_date)
            .where(
                TalentDailyAssignment.talent_id == talent_id,
                TalentDailyAssignment.project_id == project_id,
            )
            .distinct()
            .order_by(TalentDailyAssignment.assignment_date)
        )
        return list(result.scalars().all())

    async def get_for_project_day(
        self,
        db: AsyncSession,
        project_id: UUID,
        assignment_date: date,
    ) -> Sequence[TalentDailyAssignment]:
        """프로젝트 하루치 행 (All talent rows of one project date)."""
        result = await db.execute(
            select(TalentDailyAssignment).where(
                TalentDailyAssignment.project_id == project_id,
                TalentDailyAssignment.assignment_date == assignment_date,
            )
        )
        return result.scalars().all()

    async def count_in_scope(self, db: AsyncSession, project_id: UUID | None = None) -> int:
        """범위 내 행 수 (Row count, optionally for one project)."""
        query: Select = select(func.count()).select_from(TalentDailyAssignment)
        if project_id is not None:
            query = query.where(TalentDailyAssignment.project_id == project_id)
        return (await db.execute(query)).scalar() or 0

    async def get_parents_in_scope(
        self,
        db: AsyncSession,
        project_id: UUID | None = None,
    ) -> list[tuple[UUID, UUID]]:
        """행이 있는 (project_id, talent_id) 목록 (Distinct parents that own rows in scope)."""
        query: Select = select(TalentDailyAssignment.project_id, TalentDailyAssignment.talent_id).distinct()
        if project_id is not None:
            query = query.where(TalentDailyAssignment.project_id == project_id)
        result = await db.execute(query)
        return [(row.project_id, row.talent_id) for row in result.all()]

    async def delete_in_scope(self, db: AsyncSession, project_id: UUID | None = None) -> int:
        """범위 내 행 일괄 삭제 (Bulk delete, returns deleted row count)."""
        stmt = delete(TalentDailyAssignment)
        if project_id is not None:
            stmt = stmt.where(TalentDailyAssignment.project_id == project_id)
        result = await db.execute(stmt)
        return result.rowcount or 0


class GroupDailyAssignmentRepository(BaseRepository[GroupDailyAssignment]):
    """그룹 일별 배정 레포지토리 (Group daily assignment repository)."""

    def __init__(self) -> None:
        super().__init__(GroupDailyAssignment)

    async def get_for_day(
        self,
        db: AsyncSession,
        group_id: UUID,
        assignment_date: date,
    ) -> Sequence[GroupDailyAssignment]:
        """그룹 하루치 행 (All escort rows of a group on one date)."""
        result = await db.execute(
            select(GroupDailyAssignment).where(
                GroupDailyAssignment.group_id == group_id,
                GroupDailyAssignment.assignment_date == assignment_date,
            )
        )
        return result.scalars().all()

    async def get_for_group(
        self,
        db: AsyncSession,
        group_id: UUID,
    ) -> Sequence[GroupDailyAssignment]:
        """그룹의 모든 행 (All rows of a group)."""
        result = await db.execute(
            select(GroupDailyAssignment)
            .where(GroupDailyAssignment.group_id == group_id)
            .order_by(GroupDailyAssignment.assignment_date)
        )
        return result.scalars().all()

    async def exists_row(
        self,
        db: AsyncSession,
        group_id: UUID,
        assignment_date: date,
        escort_id: UUID,
    ) -> bool:
        """자연 키 행 존재 여부 (Whether the group+date+escort row exists)."""
        result = await db.execute(
            select(GroupDailyAssignment.id).where(
                GroupDailyAssignment.group_id == group_id,
                GroupDailyAssignment.assignment_date == assignment_date,
                GroupDailyAssignment.escort_id == escort_id,
            )
        )
        return result.scalar_one_or_none() is not None

    async def get_dates(self, db: AsyncSession, group_id: UUID) -> list[date]:
        """배정된 날짜 목록, 중복 없이 정렬 (Distinct sorted dates with a daily row)."""
        result = await db.execute(
            select(GroupDailyAssignment.assignment_date)
            .where(GroupDailyAssignment.group_id == group_id)
            .distinct()
            .order_by(GroupDailyAssignment.assignment_date)
        )
        return list(result.scalars().all())

    async def get_for_project_day(
        self,
        db: AsyncSession,
        project_id: UUID,
        assignment_date: date,
    ) -> Sequence[GroupDailyAssignment]:
        """프로젝트 하루치 행 (All group rows of one project date)."""
        result = await db.execute(
            select(GroupDailyAssignment).where(
                GroupDailyAssignment.project_id == project_id,
                GroupDailyAssignment.assignment_date == assignment_date,
            )
        )
        return result.scalars().all()

    async def count_in_scope(self, db: AsyncSession, project_id: UUID | None = None) -> int:
        """범위 내 행 수 (Row count, optionally for one project)."""
        query: Select = select(func.count()).select_from(GroupDailyAssignment)
        if project_id is not None:
            query = query.where(GroupDailyAssignment.project_id == project_id)
        return (await db.execute(query)).scalar() or 0

    async def get_group_ids_in_scope(self, db: AsyncSession, project_id: UUID | None = None) -> list[UUID]:
        """행이 있는 그룹 ID 목록 (Distinct groups that own rows in scope)."""
        query: Select = select(GroupDailyAssignment.group_id).distinct()
        if project_id is not None:
            query = query.where(GroupDailyAssignment.project_id == project_id)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def delete_in_scope(self, db: AsyncSession, project_id: UUID | None = None) -> int:
        """범위 내 행 일괄 삭제 (Bulk delete, returns deleted row count)."""
        stmt = delete(GroupDailyAssignment)
        if project_id is not None:
            stmt = stmt.where(GroupDailyAssignment.project_id == project_id)
        result = await db.execute(stmt)
        return result.rowcount or 0


class MigrationSnapshotRepository(BaseRepository[AssignmentMigrationSnapshot]):
    """마이그레이션 스냅샷 레포지토리 (Migration snapshot repository)."""

    def __init__(self) -> None:
        super().__init__(AssignmentMigrationSnapshot)

    async def get_for_entity(
        self,
        db: AsyncSession,
        entity_type: str,
        entity_id: UUID,
    ) -> AssignmentMigrationSnapshot | None:
        """엔티티 스냅샷 조회 (Snapshot of one parent row)."""
        result = await db.execute(
            select(AssignmentMigrationSnapshot).where(
                AssignmentMigrationSnapshot.entity_type == entity_type,
                AssignmentMigrationSnapshot.entity_id == entity_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_in_scope(
        self,
        db: AsyncSession,
        project_id: UUID | None = None,
    ) -> Sequence[AssignmentMigrationSnapshot]:
        """범위 내 스냅샷 (All snapshots, optionally for one project)."""
        query: Select = select(AssignmentMigrationSnapshot).order_by(AssignmentMigrationSnapshot.created_at)
        if project_id is not None:
            query = query.where(AssignmentMigrationSnapshot.project_id == project_id)
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
talent_daily_repository: TalentDailyAssignmentRepository = TalentDailyAssignmentRepository()
group_daily_repository: GroupDailyAssignmentRepository = GroupDailyAssignmentRepository()
snapshot_repository: MigrationSnapshotRepository = MigrationSnapshotRepository()

"""타임카드 레포지토리 — 타임카드 헤더, 일별 항목, 감사 로그 DB 쿼리 담당.

Timecard Repository — Timecard header, daily entry and audit log queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.models.timecard import TimecardAuditLog, TimecardHeader
from talentops.repositories.base import BaseRepository


class TimecardRepository(BaseRepository[TimecardHeader]):
    """타임카드 헤더 레포지토리.

    Timecard header repository. Entries are loaded with the header
    (``selectin``), so every returned header carries its entries.
    """

    def __init__(self) -> None:
        super().__init__(TimecardHeader)

    async def get_by_ids(
        self,
        db: AsyncSession,
        timecard_ids: list[UUID],
    ) -> Sequence[TimecardHeader]:
        """여러 타임카드 조회 (Headers for the given ids)."""
        if not timecard_ids:
            return []
        result = await db.execute(
            select(TimecardHeader).where(TimecardHeader.id.in_(timecard_ids))
        )
        return result.scalars().all()

    async def get_by_filters(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        project_id: UUID | None = None,
        status: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[TimecardHeader], int]:
        """필터 조건에 맞는 타임카드를 페이지네이션하여 조회합니다.

        Retrieve paginated timecards matching the given filters,
        newest period first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유자 필터, 선택 (Optional owner filter)
            project_id: 프로젝트 필터, 선택 (Optional project filter)
            status: 상태 필터, 선택 (Optional status filter)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[TimecardHeader], int]: (타임카드 목록, 전체 개수)
        """
        query: Select = select(TimecardHeader)
        if user_id is not None:
            query = query.where(TimecardHeader.user_id == user_id)
        if project_id is not None:
            query = query.where(TimecardHeader.project_id == project_id)
        if status is not None:
            query = query.where(TimecardHeader.status == status)
        query = query.order_by(TimecardHeader.period_start_date.desc(), TimecardHeader.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def period_taken(
        self,
        db: AsyncSession,
        user_id: UUID,
        project_id: UUID,
        period_start_date,
    ) -> bool:
        """같은 기간 타임카드 존재 여부 (Whether a header exists for user+project+period start)."""
        result = await db.execute(
            select(TimecardHeader.id).where(
                TimecardHeader.user_id == user_id,
                TimecardHeader.project_id == project_id,
                TimecardHeader.period_start_date == period_start_date,
            )
        )
        return result.scalar_one_or_none() is not None

    async def get_all_ids(self, db: AsyncSession) -> list[UUID]:
        """모든 타임카드 ID (All header ids, oldest first)."""
        result = await db.execute(select(TimecardHeader.id).order_by(TimecardHeader.created_at))
        return list(result.scalars().all())


class TimecardAuditRepository(BaseRepository[TimecardAuditLog]):
    """타임카드 감사 로그 레포지토리 (Timecard audit log repository)."""

    def __init__(self) -> None:
        super().__init__(TimecardAuditLog)

    async def add_many(self, db: AsyncSession, rows: list[TimecardAuditLog]) -> None:
        """감사 행 일괄 추가 (Add audit rows and flush)."""
        if not rows:
            return
        db.add_all(rows)
        await db.flush()

    async def get_for_timecard(
        self,
        db: AsyncSession,
        timecard_id: UUID,
        action_type: str | None = None,
        field_name: str | None = None,
    ) -> Sequence[TimecardAuditLog]:
        """타임카드 감사 로그, 최신순 (Audit rows of a timecard, newest first)."""
        query: Select = select(TimecardAuditLog).where(TimecardAuditLog.timecard_id == timecard_id)
        if action_type is not None:
            query = query.where(TimecardAuditLog.action_type == action_type)
        if field_name is not None:
            query = query.where(TimecardAuditLog.field_name == field_name)
        query = query.order_by(TimecardAuditLog.changed_at.desc(), TimecardAuditLog.field_name)
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
timecard_repository: TimecardRepository = TimecardRepository()
timecard_audit_repository: TimecardAuditRepository = TimecardAuditRepository()

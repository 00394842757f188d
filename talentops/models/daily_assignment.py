"""일별 에스코트 배정 SQLAlchemy ORM 모델 정의.

Daily escort assignment SQLAlchemy ORM model definitions.

Tables:
    - talent_daily_assignments: 탤런트 일별 배정 (One escort per talent per day)
    - group_daily_assignments: 그룹 일별 배정 (One row per group, day and escort)
    - assignment_migration_snapshots: 마이그레이션 전 스냅샷 (Pre-migration backup for rollback)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talentops.database import Base
from talentops.models.types import DateList, UuidList


class TalentDailyAssignment(Base):
    """탤런트 일별 배정 모델.

    Talent daily assignment model.

    Constraints:
        uq_talent_daily_assignment: 탤런트+날짜당 1행 (At most one row per talent per day)
    """

    __tablename__ = "talent_daily_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    talent_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("talent.id", ondelete="CASCADE"), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    # 배정 날짜 — Must fall inside the project date range
    assignment_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 에스코트 FK — Escort for the day
    escort_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("talent_id", "assignment_date", name="uq_talent_daily_assignment"),
    )


class GroupDailyAssignment(Base):
    """그룹 일별 배정 모델.

    Group daily assignment model. Several rows per (group, date) are allowed,
    one for each escort.

    Constraints:
        uq_group_daily_assignment: 그룹+날짜+에스코트 고유 (Unique per group, day and escort)
    """

    __tablename__ = "group_daily_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("talent_groups.id", ondelete="CASCADE"), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    assignment_date: Mapped[date] = mapped_column(Date, nullable=False)
    escort_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("group_id", "assignment_date", "escort_id", name="uq_group_daily_assignment"),
    )


class AssignmentMigrationSnapshot(Base):
    """마이그레이션 스냅샷 모델 — 롤백용 백업.

    Pre-migration snapshot of a parent's scheduled dates and escorts.
    The first snapshot per entity is kept; rollback consumes and deletes it.

    Attributes:
        entity_type: "talent" 또는 "group" (Which parent table)
        entity_id: 부모 행 ID (talent_project_assignments.id or talent_groups.id)
        scheduled_dates: 마이그레이션 전 날짜 (Scheduled dates before migration)
        escort_ids: 마이그레이션 전 에스코트 (Legacy escorts before migration)
    """

    __tablename__ = "assignment_migration_snapshots"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    entity_type: Mapped[str] = mapped_column(String(10), nullable=False)
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    scheduled_dates: Mapped[list[date]] = mapped_column(DateList, nullable=False, default=list)
    escort_ids: Mapped[list[uuid.UUID]] = mapped_column(UuidList, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", name="uq_assignment_migration_snapshot"),
    )

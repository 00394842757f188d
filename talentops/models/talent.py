"""탤런트 및 탤런트 그룹 SQLAlchemy ORM 모델 정의.

Talent and talent group SQLAlchemy ORM model definitions.
``scheduled_dates`` on both parents is derived from the daily assignment
rows and is rewritten by the daily assignment service after every change.
``escort_id`` / ``assigned_escort_id`` / ``assigned_escort_ids`` are the
legacy period-level escort fields read by the assignment migration.

Tables:
    - talent: 탤런트 (Individual talent)
    - talent_project_assignments: 탤런트-프로젝트 배정 (Talent linked to a project)
    - talent_groups: 탤런트 그룹 (Groups handled as a single unit)
    - talent_group_members: 그룹 구성원 (Group members, one row each)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from talentops.database import Base
from talentops.models.types import DateList, UuidList


class Talent(Base):
    """탤런트 모델 (Individual talent)."""

    __tablename__ = "talent"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class TalentProjectAssignment(Base):
    """탤런트-프로젝트 배정 모델 (기간 단위).

    Period-level talent assignment. ``scheduled_dates`` equals the distinct
    dates that have a ``talent_daily_assignments`` row for this talent and project.

    Attributes:
        talent_id: 탤런트 FK (Talent)
        project_id: 프로젝트 FK (Project)
        escort_id: 레거시 기간 단위 에스코트 (Legacy period-level escort)
        scheduled_dates: 배정 날짜 집합 (Derived set of scheduled dates)
        status: 상태 (active, inactive)

    Constraints:
        uq_talent_project_assignment: 프로젝트당 탤런트 1회 (One row per talent per project)
    """

    __tablename__ = "talent_project_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    talent_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("talent.id", ondelete="CASCADE"), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    # 레거시 에스코트 — Single escort for the whole project (pre daily assignments)
    escort_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    # 배정 날짜 — Derived from talent_daily_assignments
    scheduled_dates: Mapped[list[date]] = mapped_column(DateList, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("talent_id", "project_id", name="uq_talent_project_assignment"),
    )

    talent = relationship("Talent", lazy="joined")


class TalentGroup(Base):
    """탤런트 그룹 모델.

    Talent group model. Groups may be escorted by several escorts on the same
    day, so ``group_daily_assignments`` holds one row per (date, escort).

    Attributes:
        group_name: 그룹 이름 (Unique per project)
        assigned_escort_id: 레거시 단일 에스코트 (Legacy single escort)
        assigned_escort_ids: 레거시 다중 에스코트 (Legacy escort id list)
        scheduled_dates: 배정 날짜 집합 (Derived set of scheduled dates)
        point_of_contact_name: 담당자 이름 (Point of contact name)
        point_of_contact_phone: 담당자 전화 (Point of contact phone)

    Constraints:
        uq_talent_group_project_name: 프로젝트 내 그룹 이름 고유 (Unique group name per project)
    """

    __tablename__ = "talent_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    group_name: Mapped[str] = mapped_column(String(200), nullable=False)
    # 레거시 에스코트 필드 — Legacy escort fields read by the assignment migration
    assigned_escort_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    assigned_escort_ids: Mapped[list[uuid.UUID]] = mapped_column(UuidList, nullable=False, default=list)
    # 배정 날짜 — Derived from group_daily_assignments
    scheduled_dates: Mapped[list[date]] = mapped_column(DateList, nullable=False, default=list)
    point_of_contact_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    point_of_contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("project_id", "group_name", name="uq_talent_group_project_name"),
    )

    members = relationship(
        "TalentGroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="TalentGroupMember.sort_order",
        lazy="selectin",
    )

    def legacy_escort_ids(self) -> list[uuid.UUID]:
        """레거시 에스코트 합집합, 순서 유지 (Union of legacy escort fields, order kept, nulls dropped)."""
        ordered: list[uuid.UUID] = []
        for escort_id in [self.assigned_escort_id, *self.assigned_escort_ids]:
            if escort_id is not None and escort_id not in ordered:
                ordered.append(escort_id)
        return ordered


class TalentGroupMember(Base):
    """그룹 구성원 모델 — 구성원당 한 행 (One row per group member)."""

    __tablename__ = "talent_group_members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("talent_groups.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)

    group = relationship("TalentGroup", back_populates="members")

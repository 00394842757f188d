"""프로젝트 준비도 SQLAlchemy ORM 모델 정의.

Project readiness SQLAlchemy ORM model definition.
Counts and statuses are fully recomputed by the readiness service; only
the ``*_finalized*`` columns are set directly, by finalize/unfinalize.

Tables:
    - project_readiness: 프로젝트 준비도 (One row per project)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talentops.database import Base

READINESS_AREAS: tuple[str, ...] = ("locations", "roles", "team", "talent")


class ProjectReadiness(Base):
    """프로젝트 준비도 모델.

    Project readiness model.

    Area statuses:
        locations/roles: default-only → configured → finalized
        team/talent: none → partial → finalized
    Overall status: getting-started → operational → production-ready
    """

    __tablename__ = "project_readiness"

    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)

    # 집계 — Counts
    custom_location_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    custom_role_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_staff_assigned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    supervisor_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    escort_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    coordinator_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_talent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # 확정 플래그 — Finalization flags set by an admin action
    locations_finalized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    locations_finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    locations_finalized_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    roles_finalized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    roles_finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    roles_finalized_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    team_finalized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    team_finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    team_finalized_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    talent_finalized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    talent_finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    talent_finalized_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    # 파생 상태 — Derived statuses
    locations_status: Mapped[str] = mapped_column(String(20), nullable=False, default="default-only")
    roles_status: Mapped[str] = mapped_column(String(20), nullable=False, default="default-only")
    team_status: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    talent_status: Mapped[str] = mapped_column(String(20), nullable=False, default="none")
    overall_status: Mapped[str] = mapped_column(String(20), nullable=False, default="getting-started")

    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint(
            "locations_status IN ('default-only', 'configured', 'finalized')",
            name="ck_project_readiness_locations_status",
        ),
        CheckConstraint(
            "roles_status IN ('default-only', 'configured', 'finalized')",
            name="ck_project_readiness_roles_status",
        ),
        CheckConstraint(
            "team_status IN ('none', 'partial', 'finalized')",
            name="ck_project_readiness_team_status",
        ),
        CheckConstraint(
            "talent_status IN ('none', 'partial', 'finalized')",
            name="ck_project_readiness_talent_status",
        ),
        CheckConstraint(
            "overall_status IN ('getting-started', 'operational', 'production-ready')",
            name="ck_project_readiness_overall_status",
        ),
    )

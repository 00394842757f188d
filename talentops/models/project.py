"""프로젝트 및 프로젝트 구성 SQLAlchemy ORM 모델 정의.

Project and project configuration SQLAlchemy ORM model definitions.

Tables:
    - projects: 프로젝트 (Productions with a start/end date range)
    - project_locations: 프로젝트 위치 (Tracking locations, default or custom)
    - project_role_templates: 역할 템플릿 (Role templates with base pay rate)
    - team_assignments: 팀 배정 (Staff assigned to a project with a role)
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from talentops.database import Base


class Project(Base):
    """프로젝트 모델.

    Project model. Every daily assignment and timecard belongs to one project
    and daily assignments must fall inside ``[start_date, end_date]``.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 프로젝트 이름 (Project name)
        start_date: 시작일 (First production date, inclusive)
        end_date: 종료일 (Last production date, inclusive)
        status: 상태 (prep, active, archived)
    """

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 프로젝트 이름 — Project display name
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # 시작일/종료일 — Inclusive production date range
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 상태 — "prep" → "active" → "archived"
    status: Mapped[str] = mapped_column(String(20), default="prep")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_projects_date_range"),
    )

    def contains(self, day: date) -> bool:
        """날짜가 프로젝트 기간에 포함되는지 (Whether the date is inside the project range)."""
        return self.start_date <= day <= self.end_date


class ProjectLocation(Base):
    """프로젝트 위치 모델 — is_default가 False인 행이 커스텀 위치.

    Project location model. Rows with ``is_default = False`` count as
    custom locations for readiness.
    """

    __tablename__ = "project_locations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    # 위치 이름 — Location name (e.g. "House", "Holding", "Stage")
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 기본 위치 여부 — Seeded default location
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class ProjectRoleTemplate(Base):
    """프로젝트 역할 템플릿 모델.

    Project role template model. Carries the base pay rate used when a team
    assignment has no explicit rate. Non-default rows count as custom roles.
    """

    __tablename__ = "project_role_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    # 역할 — Application role this template applies to
    role: Mapped[str] = mapped_column(String(30), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 기본 시급 — Base hourly pay rate
    base_pay_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class TeamAssignment(Base):
    """팀 배정 모델 — 프로젝트별 스태프와 역할.

    Team assignment model — One row per staff member per project.

    Constraints:
        uq_team_assignment_project_user: 프로젝트당 사용자 1회 배정
            (A user is assigned to a project at most once)
    """

    __tablename__ = "team_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    # 프로젝트 내 역할 — Role on this project (supervisor, coordinator, talent_escort)
    role: Mapped[str] = mapped_column(String(30), nullable=False)
    # 개별 시급 — Per-person hourly rate, overrides the role template rate
    pay_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_team_assignment_project_user"),
    )

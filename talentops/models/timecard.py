"""타임카드 관련 SQLAlchemy ORM 모델 정의.

Timecard SQLAlchemy ORM model definitions.
A header covers one pay period for one user on one project; each worked
day is a daily entry. Header totals are always the sum of the entries and
are rewritten by the timecard service in the same unit of work as any
entry change.

Status flow: draft → submitted → approved | rejected (rejected/submitted → draft on return)

Tables:
    - timecard_headers: 타임카드 헤더 (Period header with totals and workflow state)
    - timecard_daily_entries: 일별 항목 (Per-day times and derived hours/pay)
    - timecard_audit_log: 수정 감사 로그 (One row per changed field)
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
    JSON,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from talentops.database import Base

TIMECARD_STATUSES: tuple[str, ...] = ("draft", "submitted", "approved", "rejected")
AUDIT_ACTION_TYPES: tuple[str, ...] = ("user_edit", "admin_edit", "rejection_edit")


class TimecardHeader(Base):
    """타임카드 헤더 모델.

    Timecard header model — one per (user, project, period start).

    Attributes:
        user_id: 소유자 FK (Timecard owner)
        project_id: 프로젝트 FK (Project)
        status: 상태 (draft, submitted, approved, rejected)
        period_start_date: 기간 시작일 (Pay period start, inclusive)
        period_end_date: 기간 종료일 (Pay period end, inclusive)
        total_hours: 총 근무 시간 (Sum of entry hours_worked)
        total_break_duration: 총 휴식 시간 (Sum of entry break_duration, hours)
        total_pay: 총 급여 (Sum of entry daily_pay)
        pay_rate: 시급 (Hourly rate applied to every entry)
        rejected_fields: 반려 대상 필드 (Fields flagged on rejection)
        admin_edited: 관리자 수정 여부 (Edited by an approver)
        edit_type: 수정 유형 (user_correction, admin_adjustment)

    Constraints:
        uq_timecard_header_user_project_period: 사용자+프로젝트+기간 시작일 고유
        ck_timecard_headers_period: 종료일 >= 시작일
    """

    __tablename__ = "timecard_headers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    # 상태 — "draft" → "submitted" → "approved" | "rejected"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    period_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    period_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 합계 — Totals, always equal to the sum of the daily entries
    total_hours: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("0"))
    total_break_duration: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=Decimal("0"))
    total_pay: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    pay_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    # 워크플로 — Workflow timestamps and actors
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejected_fields: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # 수정 메타데이터 — Edit metadata
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)  # 비공개 관리자 메모 (Private admin note)
    edit_comments: Mapped[str | None] = mapped_column(Text, nullable=True)  # 사용자에게 보이는 설명 (User-facing explanation)
    admin_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_edited_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    edit_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "project_id", "period_start_date", name="uq_timecard_header_user_project_period"),
        CheckConstraint("period_end_date >= period_start_date", name="ck_timecard_headers_period"),
        CheckConstraint(
            "status IN ('draft', 'submitted', 'approved', 'rejected')",
            name="ck_timecard_headers_status",
        ),
    )

    entries = relationship(
        "TimecardDailyEntry",
        back_populates="header",
        cascade="all, delete-orphan",
        order_by="TimecardDailyEntry.work_date",
        lazy="selectin",
    )

    def entry_for(self, work_date: date) -> "TimecardDailyEntry | None":
        """근무일의 항목 (Entry for the given work date, if any)."""
        for entry in self.entries:
            if entry.work_date == work_date:
                return entry
        return None


class TimecardDailyEntry(Base):
    """타임카드 일별 항목 모델.

    Timecard daily entry model. ``break_duration`` is stored in hours.

    Constraints:
        uq_timecard_entry_header_date: 헤더+근무일 고유 (One entry per header per day)
        ck_timecard_entries_non_negative: 파생 값은 음수 불가 (Derived values are never negative)
    """

    __tablename__ = "timecard_daily_entries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    timecard_header_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("timecard_headers.id", ondelete="CASCADE"), nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_in_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    check_out_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    break_start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    break_end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 파생 값 — Derived by the calculator on every write
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    break_duration: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("0"))
    daily_pay: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("timecard_header_id", "work_date", name="uq_timecard_entry_header_date"),
        CheckConstraint(
            "hours_worked >= 0 AND break_duration >= 0 AND daily_pay >= 0",
            name="ck_timecard_entries_non_negative",
        ),
    )

    header = relationship("TimecardHeader", back_populates="entries")


class TimecardAuditLog(Base):
    """타임카드 감사 로그 모델 — 변경된 필드당 한 행.

    Timecard audit log model — one row per changed field. Rows written by a
    single edit action share ``change_id``.

    Attributes:
        timecard_id: 타임카드 FK (Timecard header)
        change_id: 변경 묶음 ID (Groups the rows of one edit action)
        field_name: 필드 이름 (Changed field, e.g. "check_in_time", "status")
        old_value: 이전 값 (Previous value, normalized string or null)
        new_value: 새 값 (New value, normalized string or null)
        changed_by: 수정자 FK (Acting profile)
        changed_at: 수정 일시 UTC (When the change happened)
        action_type: 동작 유형 (user_edit, admin_edit, rejection_edit)
        work_date: 대상 근무일 (Affected work date; null for header fields)
    """

    __tablename__ = "timecard_audit_log"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    timecard_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("timecard_headers.id", ondelete="CASCADE"), nullable=False)
    change_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    field_name: Mapped[str] = mapped_column(String(50), nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    action_type: Mapped[str] = mapped_column(String(20), nullable=False)
    work_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "action_type IN ('user_edit', 'admin_edit', 'rejection_edit')",
            name="ck_timecard_audit_action_type",
        ),
    )

"""타임카드 관련 Pydantic 요청/응답 스키마 정의.

Timecard Pydantic request/response schema definitions.
Covers the calculation preview, creation, edits with audit, the
submit/approve/reject workflow and audit log reads.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


# === 일별 항목 (Daily entry) 스키마 ===

class DailyEntryInput(BaseModel):
    """일별 시간 입력 스키마.

    Daily time input. All four timestamps are optional; naive values are
    interpreted as UTC.

    Attributes:
        work_date: 근무일 (Work date)
        check_in_time: 출근 시각 (Check-in time)
        check_out_time: 퇴근 시각 (Check-out time)
        break_start_time: 휴식 시작 (Break start)
        break_end_time: 휴식 종료 (Break end)
    """

    work_date: date  # 근무일 (Work date)
    check_in_time: datetime | None = None  # 출근 시각 (Check-in time)
    check_out_time: datetime | None = None  # 퇴근 시각 (Check-out time)
    break_start_time: datetime | None = None  # 휴식 시작 (Break start)
    break_end_time: datetime | None = None  # 휴식 종료 (Break end)


class DailyEntryUpdate(DailyEntryInput):
    """일별 시간 수정 스키마 — 보낸 키만 반영 (Only the keys actually sent are applied)."""


class DailyEntryPatch(BaseModel):
    """하루치 항목 부분 수정 스키마 — 근무일은 경로에서 (Partial update of one entry; the work date comes from the path)."""

    model_config = {"extra": "forbid"}

    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    break_start_time: datetime | None = None
    break_end_time: datetime | None = None


class DailyEntryResponse(DailyEntryInput):
    """일별 항목 응답 스키마 — 파생 값 포함 (Entry with derived values)."""

    hours_worked: Decimal  # 근무 시간 (Worked hours)
    break_duration: Decimal  # 휴식 시간(시간 단위) (Break length in hours)
    daily_pay: Decimal  # 일급 (Daily pay)


# === 계산 미리보기 (Calculation preview) ===

class CalculateRequest(BaseModel):
    """계산 미리보기 요청 스키마 (Preview request; nothing is stored)."""

    pay_rate: Decimal = Field(default=Decimal("0"), ge=0)  # 시급 (Hourly pay rate)
    entries: list[DailyEntryInput] = Field(..., min_length=1)  # 일별 입력 (Daily entries)


class CalculatedDay(BaseModel):
    """일별 계산 결과 스키마 (Per-day calculation result)."""

    work_date: date  # 근무일 (Work date)
    hours_worked: Decimal  # 근무 시간 (Worked hours)
    break_duration: Decimal  # 휴식 시간 (Break hours)
    daily_pay: Decimal  # 일급 (Daily pay)
    warnings: list[str] = []  # 시간 순서 경고 (Time sequence warnings)


class CalculateResponse(BaseModel):
    """계산 미리보기 응답 스키마 (Preview response with totals)."""

    days: list[CalculatedDay]  # 날짜순 일별 결과 (Per-day results by date)
    total_hours: Decimal  # 총 근무 시간 (Total hours)
    total_break_duration: Decimal  # 총 휴식 시간 (Total break hours)
    total_pay: Decimal  # 총 급여 (Total pay)
    warnings: list[str] = []  # 전체 경고 (All warnings, prefixed by date)


# === 생성/조회 (Create / read) ===

class TimecardCreate(BaseModel):
    """타임카드 생성 요청 스키마.

    Timecard creation request. ``user_id`` and ``pay_rate`` may only be set
    by approvers; otherwise the caller's own timecard is created with the
    rate resolved from the project team assignment or role template.

    Attributes:
        project_id: 프로젝트 UUID (Project)
        period_start_date: 기간 시작일 (Period start)
        period_end_date: 기간 종료일 (Period end)
        entries: 일별 입력 (Daily entries, optional)
        user_id: 대상 사용자 UUID (Owner, approvers only)
        pay_rate: 시급 재정의 (Rate override, approvers only)
    """

    project_id: str  # 프로젝트 UUID (Project UUID)
    period_start_date: date  # 기간 시작일 (Period start)
    period_end_date: date  # 기간 종료일 (Period end)
    entries: list[DailyEntryInput] = []  # 일별 입력 (Daily entries)
    user_id: str | None = None  # 대상 사용자 — 승인자 전용 (Owner, approvers only)
    pay_rate: Decimal | None = Field(default=None, ge=0)  # 시급 재정의 — 승인자 전용 (Rate override)

    @model_validator(mode="after")
    def _check_period(self) -> "TimecardCreate":
        if self.period_end_date < self.period_start_date:
            raise ValueError("period_end_date must not be before period_start_date")
        return self


class TimecardResponse(BaseModel):
    """타임카드 응답 스키마 (Timecard with its daily entries)."""

    id: str  # 타임카드 UUID (Timecard UUID)
    user_id: str  # 소유자 UUID (Owner UUID)
    project_id: str  # 프로젝트 UUID (Project UUID)
    status: str  # 상태 — "draft"|"submitted"|"approved"|"rejected"
    period_start_date: date  # 기간 시작일 (Period start)
    period_end_date: date  # 기간 종료일 (Period end)
    total_hours: Decimal  # 총 근무 시간 (Total hours)
    total_break_duration: Decimal  # 총 휴식 시간 (Total break hours)
    total_pay: Decimal  # 총 급여 (Total pay)
    pay_rate: Decimal  # 시급 (Hourly rate)
    submitted_at: datetime | None  # 제출 일시 (Submission time)
    approved_at: datetime | None  # 승인 일시 (Approval time)
    approved_by: str | None  # 승인자 UUID (Approver UUID)
    rejection_reason: str | None  # 반려 사유 (Rejection reason)
    rejected_fields: list[str] = []  # 반려 대상 필드 (Fields flagged on rejection)
    edit_comments: str | None  # 수정 설명 (User-facing edit explanation)
    admin_edited: bool  # 관리자 수정 여부 (Edited by an approver)
    edit_type: str | None  # 수정 유형 (Edit type)
    entries: list[DailyEntryResponse] = []  # 일별 항목 (Daily entries)


# === 수정 + 감사 (Edit + audit) ===

class TimecardEditRequest(BaseModel):
    """타임카드 수정 요청 스키마.

    Timecard edit request. Within each update only the keys that were sent
    are compared and written.

    Attributes:
        timecard_id: 타임카드 UUID (Timecard UUID)
        updates: 일별 변경 목록 (Per-day changes)
        admin_note: 관리자 메모 (Private admin note)
        edit_comment: 수정 설명 (User-facing edit comment)
        return_to_draft: 초안으로 되돌림 (Move back to draft)
    """

    timecard_id: str  # 타임카드 UUID (Timecard UUID)
    updates: list[DailyEntryUpdate] = []  # 일별 변경 목록 (Per-day changes)
    admin_note: str | None = None  # 관리자 메모 — 승인자만 저장 (Stored for approvers only)
    edit_comment: str | None = None  # 수정 설명 (Edit comment)
    return_to_draft: bool = False  # 초안으로 되돌림 (Return to draft)


class AuditLogResponse(BaseModel):
    """감사 로그 행 응답 스키마 (One audit row)."""

    id: str  # 감사 행 UUID (Audit row UUID)
    change_id: str  # 수정 묶음 UUID (Edit action UUID)
    field_name: str  # 변경 필드 (Changed field)
    old_value: str | None  # 이전 값 (Old value)
    new_value: str | None  # 새 값 (New value)
    changed_by: str | None  # 수정자 UUID (Actor UUID)
    changed_at: datetime  # 수정 일시 (Change time)
    action_type: str  # 동작 유형 — "user_edit"|"admin_edit"|"rejection_edit"
    work_date: date | None  # 근무일 (Work date for entry fields)


class AuditChange(BaseModel):
    """묶음 내 필드 변경 (One field change inside a grouped entry)."""

    field_name: str
    old_value: str | None
    new_value: str | None
    work_date: date | None


class AuditGroupResponse(BaseModel):
    """change_id별 감사 묶음 응답 스키마 (Audit rows grouped by change id)."""

    change_id: str  # 수정 묶음 UUID (Edit action UUID)
    changed_by: str | None  # 수정자 UUID (Actor UUID)
    changed_by_name: str | None  # 수정자 이름 (Actor name)
    changed_at: datetime  # 수정 일시 (Change time)
    action_type: str  # 동작 유형 (Action type)
    changes: list[AuditChange]  # 필드 변경 목록 (Field changes)


class TimecardEditResponse(BaseModel):
    """타임카드 수정 응답 스키마 (Edited timecard and the audit rows written)."""

    timecard: TimecardResponse  # 수정된 타임카드 (Updated timecard)
    audit_entries: list[AuditLogResponse]  # 생성된 감사 행 (Audit rows written)
    change_id: str | None  # 수정 묶음 UUID, 변경 없으면 None (None when nothing changed)


# === 워크플로 (Workflow) ===

class TimecardApproveRequest(BaseModel):
    """승인 요청 스키마 — 단건 또는 일괄 (Single or bulk approval)."""

    timecard_id: str | None = None  # 단건 승인 대상 (Single timecard)
    timecard_ids: list[str] = []  # 일괄 승인 대상 (Bulk timecards)


class TimecardRejectRequest(BaseModel):
    """반려 요청 스키마 (Rejection request; the reason is required)."""

    timecard_id: str  # 타임카드 UUID (Timecard UUID)
    reason: str = Field(..., min_length=1)  # 반려 사유 (Rejection reason)
    rejected_fields: list[str] = []  # 반려 대상 필드 (Flagged fields)

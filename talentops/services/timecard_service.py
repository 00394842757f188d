"""타임카드 서비스 — 타임카드 작성, 수정 감사, 승인 워크플로 비즈니스 로직.

Timecard Service — Business logic for timecard creation, edits with a
field-level audit trail, and the submit/approve/reject workflow.

Every operation that touches a daily entry recomputes the entry values and
the header totals before returning, inside the caller's unit of work.
"""

import json
import logging
import uuid
from collections.abc import Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from talentops.config import Settings, settings as default_settings
from talentops.models.profile import Profile
from talentops.models.project import Project
from talentops.models.timecard import TimecardAuditLog, TimecardDailyEntry, TimecardHeader
from talentops.repositories.project_repository import (
    profile_repository,
    project_repository,
    team_assignment_repository,
)
from talentops.repositories.timecard_repository import timecard_audit_repository, timecard_repository
from talentops.services.timecard_calculator import (
    PeriodResult,
    ZERO,
    as_utc,
    calculate_day,
    calculate_period,
)
from talentops.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    ForbiddenError,
    InvalidStatusError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# 수정 가능한 시간 필드 — Time fields an edit may change
TIME_FIELDS: tuple[str, ...] = ("check_in_time", "check_out_time", "break_start_time", "break_end_time")


def _audit_value(value: Any) -> str | None:
    """감사 로그용 값 정규화 (Normalize a value for audit storage and comparison)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value))
    return str(value)


class AuditTrail:
    """한 번의 수정 동작에 대한 감사 행 수집기.

    Collects audit rows for one edit action. All rows share one change id
    and one timestamp; unchanged fields are skipped.
    """

    def __init__(self, timecard_id: UUID, actor_id: UUID, action_type: str) -> None:
        self.change_id: UUID = uuid.uuid4()
        self.changed_at: datetime = datetime.now(timezone.utc)
        self.timecard_id: UUID = timecard_id
        self.actor_id: UUID = actor_id
        self.action_type: str = action_type
        self.rows: list[TimecardAuditLog] = []

    def record(self, field_name: str, old: Any, new: Any, work_date: date | None = None) -> bool:
        """값이 바뀐 경우에만 기록 (Record the field only if its value changed)."""
        old_value: str | None = _audit_value(old)
        new_value: str | None = _audit_value(new)
        if old_value == new_value:
            return False
        self.rows.append(
            TimecardAuditLog(
                timecard_id=self.timecard_id,
                change_id=self.change_id,
                field_name=field_name,
                old_value=old_value,
                new_value=new_value,
                changed_by=self.actor_id,
                changed_at=self.changed_at,
                action_type=self.action_type,
                work_date=work_date,
            )
        )
        return True


class TimecardService:
    """타임카드 서비스.

    Timecard service. Permission checks use the actor's profile role and
    the approver roles from settings.
    """

    def __init__(self, config: Settings = default_settings) -> None:
        self.config: Settings = config

    # === 권한 (Permissions) ===

    def can_approve(self, actor: Profile) -> bool:
        """승인 권한 여부 (Whether the actor may approve timecards)."""
        return actor.role in self.config.approver_roles

    def _check_can_view(self, header: TimecardHeader, actor: Profile) -> None:
        if header.user_id != actor.id and not self.can_approve(actor):
            raise ForbiddenError("타임카드 조회 권한이 없습니다 (Insufficient permissions to view this timecard)")

    def _check_approver(self, actor: Profile) -> None:
        if not self.can_approve(actor):
            raise ForbiddenError("타임카드 승인 권한이 없습니다 (Insufficient permissions to approve timecards)")

    # === 계산 (Calculation) ===

    def apply_totals(self, header: TimecardHeader) -> PeriodResult:
        """항목 값과 헤더 합계를 다시 계산합니다.

        Recompute every entry's derived values and the header totals from the
        entries currently attached to the header.

        Args:
            header: 타임카드 헤더, entries 로드됨 (Header with entries loaded)

        Returns:
            PeriodResult: 계산 결과 (Calculation result)
        """
        pay_rate: Decimal = header.pay_rate or ZERO
        for entry in header.entries:
            day = calculate_day(entry, pay_rate)
            entry.hours_worked = day.hours_worked
            entry.break_duration = day.break_duration
            entry.daily_pay = day.daily_pay
        result: PeriodResult = calculate_period(header.entries, pay_rate)
        header.total_hours = result.total_hours
        header.total_break_duration = result.total_break_duration
        header.total_pay = result.total_pay
        return result

    async def recalculate_totals(self, db: AsyncSession, header: TimecardHeader) -> PeriodResult:
        """합계 재계산 후 flush (Recompute totals and flush in the current unit of work)."""
        result: PeriodResult = self.apply_totals(header)
        await db.flush()
        return result

    async def recalculate_all(self, db: AsyncSession) -> tuple[int, int]:
        """전체 타임카드 합계 복구.

        Recompute every timecard and report how many had drifted totals.

        Returns:
            tuple[int, int]: (검사한 수, 수정된 수) (Checked count, corrected count)
        """
        checked: int = 0
        corrected: int = 0
        for timecard_id in await timecard_repository.get_all_ids(db):
            header: TimecardHeader | None = await timecard_repository.get_by_id(db, timecard_id)
            if header is None:
                continue
            before: tuple[Decimal, Decimal, Decimal] = (
                Decimal(header.total_hours), Decimal(header.total_break_duration), Decimal(header.total_pay),
            )
            result: PeriodResult = self.apply_totals(header)
            checked += 1
            if before != (result.total_hours, result.total_break_duration, result.total_pay):
                corrected += 1
                logger.info("Corrected totals for timecard %s", header.id)
        await db.flush()
        return checked, corrected

    async def resolve_pay_rate(self, db: AsyncSession, project_id: UUID, user_id: UUID) -> Decimal:
        """시급 결정 — 팀 배정 시급, 없으면 역할 템플릿 기본 시급, 없으면 0.

        Resolve the hourly rate: the team assignment's rate, then the role
        template's base rate, else zero.
        """
        assignment = await team_assignment_repository.get_for_user(db, project_id, user_id)
        if assignment is None:
            return ZERO
        if assignment.pay_rate is not None:
            return Decimal(assignment.pay_rate)
        base_rate: Decimal | None = await team_assignment_repository.get_role_base_rate(db, project_id, assignment.role)
        return Decimal(base_rate) if base_rate is not None else ZERO

    # === 작성/조회 (Create / Read) ===

    async def create_timecard(
        self,
        db: AsyncSession,
        actor: Profile,
        project_id: UUID,
        period_start_date: date,
        period_end_date: date,
        entries: Sequence[dict[str, Any]],
        user_id: UUID | None = None,
        pay_rate: Decimal | None = None,
    ) -> TimecardHeader:
        """타임카드를 생성합니다.

        Create a draft timecard with its daily entries and computed totals.
        Approvers may create timecards for another user and set the rate.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            actor: 요청자 프로필 (Acting profile)
            project_id: 프로젝트 UUID (Project UUID)
            period_start_date: 기간 시작일 (Period start)
            period_end_date: 기간 종료일 (Period end)
            entries: 일별 항목 딕셔너리 목록 (Daily entries: work_date + time fields)
            user_id: 소유자 UUID, 기본은 요청자 (Owner, defaults to the actor)
            pay_rate: 시급, 선택 (Explicit hourly rate, approvers only)

        Returns:
            TimecardHeader: 생성된 타임카드 (Created timecard)

        Raises:
            NotFoundError: 프로젝트가 없을 때 (Project not found)
            ForbiddenError: 타인 타임카드 생성 권한 없음 (Creating for another user without approval rights)
            BadRequestError: 기간/항목 오류 (Invalid period or entries)
            DuplicateError: 같은 기간 타임카드 존재 (Timecard for the period already exists)
        """
        owner_id: UUID = user_id or actor.id
        if owner_id != actor.id or pay_rate is not None:
            self._check_approver(actor)

        project: Project | None = await project_repository.get_by_id(db, project_id)
        if project is None:
            raise NotFoundError("프로젝트를 찾을 수 없습니다 (Project not found)")
        if period_end_date < period_start_date:
            raise BadRequestError("기간 종료일이 시작일보다 빠릅니다 (Period end date is before start date)")
        if await timecard_repository.period_taken(db, owner_id, project_id, period_start_date):
            raise DuplicateError("해당 기간의 타임카드가 이미 있습니다 (A timecard already exists for this period)")

        seen: set[date] = set()
        for item in entries:
            work_date: date = item["work_date"]
            if work_date in seen:
                raise BadRequestError(f"근무일이 중복되었습니다 (Duplicate work date {work_date})")
            if not period_start_date <= work_date <= period_end_date:
                raise BadRequestError(f"근무일이 기간을 벗어났습니다 (Work date {work_date} is outside the period)")
            seen.add(work_date)

        rate: Decimal = pay_rate if pay_rate is not None else await self.resolve_pay_rate(db, project_id, owner_id)
        header: TimecardHeader = TimecardHeader(
            user_id=owner_id,
            project_id=project_id,
            status="draft",
            period_start_date=period_start_date,
            period_end_date=period_end_date,
            pay_rate=rate,
            rejected_fields=[],
            entries=[],
        )
        for item in entries:
            header.entries.append(
                TimecardDailyEntry(
                    work_date=item["work_date"],
                    **{name: item.get(name) for name in TIME_FIELDS},
                )
            )
        db.add(header)
        await self.recalculate_totals(db, header)
        return header

    async def get_timecard(self, db: AsyncSession, timecard_id: UUID, actor: Profile) -> TimecardHeader:
        """타임카드 조회 (Fetch a timecard the actor may see)."""
        header: TimecardHeader | None = await timecard_repository.get_by_id(db, timecard_id)
        if header is None:
            raise NotFoundError("타임카드를 찾을 수 없습니다 (Timecard not found)")
        self._check_can_view(header, actor)
        return header

    async def list_timecards(
        self,
        db: AsyncSession,
        actor: Profile,
        project_id: UUID | None = None,
        status: str | None = None,
        user_id: UUID | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[TimecardHeader], int]:
        """타임카드 목록 — 승인자가 아니면 본인 것만 (Non-approvers only see their own)."""
        if not self.can_approve(actor):
            user_id = actor.id
        return await timecard_repository.get_by_filters(
            db, user_id=user_id, project_id=project_id, status=status, page=page, per_page=per_page,
        )

    # === 수정 + 감사 (Edit + audit) ===

    def _edit_action_type(self, header: TimecardHeader, actor: Profile, return_to_draft: bool) -> str:
        """수정 권한 검사 후 감사 동작 유형 반환.

        Check edit permission for the current status and return the audit
        action type ("user_edit" for the owner, "admin_edit" for an approver
        editing someone else's timecard).
        """
        is_owner: bool = header.user_id == actor.id
        can_approve: bool = self.can_approve(actor)
        if not is_owner and not can_approve:
            raise ForbiddenError("타임카드 수정 권한이 없습니다 (Insufficient permissions to edit this timecard)")

        if return_to_draft:
            if header.status == "submitted":
                if not can_approve:
                    raise ForbiddenError(
                        "초안으로 되돌릴 권한이 없습니다 (Insufficient permissions to return timecard to draft)"
                    )
            elif header.status != "rejected":
                raise InvalidStatusError(header.status, "return to draft")
        elif header.status == "approved":
            raise InvalidStatusError(header.status, "edit")
        elif header.status == "submitted" and not can_approve:
            raise InvalidStatusError(header.status, "edit")

        return "user_edit" if is_owner else "admin_edit"

    def _apply_entry_update(
        self,
        header: TimecardHeader,
        update: dict[str, Any],
        trail: AuditTrail,
    ) -> None:
        work_date: date = update["work_date"]
        if not header.period_start_date <= work_date <= header.period_end_date:
            raise BadRequestError(f"근무일이 기간을 벗어났습니다 (Work date {work_date} is outside the period)")

        entry: TimecardDailyEntry | None = header.entry_for(work_date)
        if entry is None:
            entry = TimecardDailyEntry(work_date=work_date)
            header.entries.append(entry)

        for name in TIME_FIELDS:
            if name not in update:
                continue
            new_value: datetime | None = update[name]
            if trail.record(name, getattr(entry, name), new_value, work_date=work_date):
                setattr(entry, name, new_value)

    async def edit_timecard(
        self,
        db: AsyncSession,
        actor: Profile,
        timecard_id: UUID,
        updates: Sequence[dict[str, Any]],
        admin_note: str | None = None,
        edit_comment: str | None = None,
        return_to_draft: bool = False,
    ) -> tuple[TimecardHeader, list[TimecardAuditLog]]:
        """타임카드 일별 시간을 수정하고 변경된 필드만 감사 로그에 기록합니다.

        Edit daily time fields. Only keys present in each update are
        considered, and one audit row is written per field whose value
        actually changed, all sharing one change id. A missing entry for the
        work date is created. Totals are recomputed before returning.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            actor: 요청자 프로필 (Acting profile)
            timecard_id: 타임카드 UUID (Timecard UUID)
            updates: 일별 변경 목록, 각 항목에 work_date 필수 (Per-day changes; work_date required)
            admin_note: 비공개 관리자 메모 (Private admin note, approvers only)
            edit_comment: 사용자에게 보이는 수정 설명 (User-facing edit explanation)
            return_to_draft: 초안으로 되돌림 (Also move the timecard back to draft)

        Returns:
            tuple[TimecardHeader, list[TimecardAuditLog]]: (수정된 타임카드, 생성된 감사 행)

        Raises:
            NotFoundError: 타임카드 없음 (Timecard not found)
            ForbiddenError: 권한 없음 (Insufficient permissions)
            InvalidStatusError: 현재 상태에서 수정 불가 (Not editable in its current status)
            BadRequestError: 근무일이 기간 밖 (Work date outside the period)
        """
        header: TimecardHeader | None = await timecard_repository.get_by_id(db, timecard_id)
        if header is None:
            raise NotFoundError("타임카드를 찾을 수 없습니다 (Timecard not found)")

        action_type: str = self._edit_action_type(header, actor, return_to_draft)
        is_owner: bool = header.user_id == actor.id
        can_approve: bool = self.can_approve(actor)
        trail: AuditTrail = AuditTrail(header.id, actor.id, action_type)

        for update in updates:
            self._apply_entry_update(header, update, trail)

        if return_to_draft:
            trail.record("status", header.status, "draft")
            header.status = "draft"
            header.submitted_at = None

        if edit_comment:
            header.edit_comments = edit_comment
        if admin_note and can_approve:
            header.admin_notes = admin_note

        if trail.rows or return_to_draft:
            if not is_owner and can_approve:
                header.admin_edited = True
                header.last_edited_by = actor.id
                header.edit_type = "admin_adjustment"
            else:
                header.edit_type = "user_correction"

        await self.recalculate_totals(db, header)
        await timecard_audit_repository.add_many(db, trail.rows)
        return header, trail.rows

    async def upsert_daily_entry(
        self,
        db: AsyncSession,
        actor: Profile,
        timecard_id: UUID,
        work_date: date,
        fields: dict[str, Any],
    ) -> tuple[TimecardHeader, list[TimecardAuditLog]]:
        """하루치 항목 생성 또는 수정 (Create or update the entry of one work date)."""
        unknown: set[str] = set(fields) - set(TIME_FIELDS)
        if unknown:
            raise BadRequestError(f"알 수 없는 필드 (Unknown fields: {', '.join(sorted(unknown))})")
        return await self.edit_timecard(db, actor, timecard_id, [{"work_date": work_date, **fields}])

    async def delete_daily_entry(
        self,
        db: AsyncSession,
        actor: Profile,
        timecard_id: UUID,
        work_date: date,
    ) -> tuple[TimecardHeader, list[TimecardAuditLog]]:
        """일별 항목 삭제 — 값이 있던 시간 필드마다 감사 행 기록.

        Delete the entry for one work date. Each time field that held a value
        gets an audit row with a null new value. Totals are recomputed.
        """
        header: TimecardHeader | None = await timecard_repository.get_by_id(db, timecard_id)
        if header is None:
            raise NotFoundError("타임카드를 찾을 수 없습니다 (Timecard not found)")
        action_type: str = self._edit_action_type(header, actor, return_to_draft=False)

        entry: TimecardDailyEntry | None = header.entry_for(work_date)
        if entry is None:
            raise NotFoundError(f"해당 근무일 항목이 없습니다 (No entry for {work_date})")

        trail: AuditTrail = AuditTrail(header.id, actor.id, action_type)
        for name in TIME_FIELDS:
            trail.record(name, getattr(entry, name), None, work_date=work_date)
        header.entries.remove(entry)

        await self.recalculate_totals(db, header)
        await timecard_audit_repository.add_many(db, trail.rows)
        return header, trail.rows

    # === 워크플로 (Workflow) ===

    async def submit(self, db: AsyncSession, actor: Profile, timecard_id: UUID) -> TimecardHeader:
        """타임카드 제출 — 소유자 전용, draft/rejected에서 (Owner submits a draft or rejected timecard)."""
        header: TimecardHeader | None = await timecard_repository.get_by_id(db, timecard_id)
        if header is None:
            raise NotFoundError("타임카드를 찾을 수 없습니다 (Timecard not found)")
        if header.user_id != actor.id:
            raise ForbiddenError("본인 타임카드만 제출할 수 있습니다 (Only the owner can submit a timecard)")
        if header.status not in ("draft", "rejected"):
            raise InvalidStatusError(header.status, "submit")
        if not header.entries:
            raise BadRequestError("근무 기록이 없는 타임카드는 제출할 수 없습니다 (Timecard has no entries)")

        trail: AuditTrail = AuditTrail(header.id, actor.id, "user_edit")
        trail.record("status", header.status, "submitted")
        header.status = "submitted"
        header.submitted_at = trail.changed_at
        await self.recalculate_totals(db, header)
        await timecard_audit_repository.add_many(db, trail.rows)
        return header

    async def approve(
        self,
        db: AsyncSession,
        actor: Profile,
        timecard_ids: list[UUID],
    ) -> Sequence[TimecardHeader]:
        """타임카드 승인 — 단건/일괄, 하나라도 submitted가 아니면 전체 실패.

        Approve one or many submitted timecards. The whole request fails when
        any id is missing or not submitted.
        """
        self._check_approver(actor)
        headers: Sequence[TimecardHeader] = await timecard_repository.get_by_ids(db, timecard_ids)
        found: set[UUID] = {header.id for header in headers}
        missing: list[str] = [str(timecard_id) for timecard_id in timecard_ids if timecard_id not in found]
        if missing:
            raise NotFoundError(f"타임카드를 찾을 수 없습니다 (Timecards not found: {', '.join(missing)})")
        for header in headers:
            if header.status != "submitted":
                raise InvalidStatusError(header.status, "approve")

        rows: list[TimecardAuditLog] = []
        for header in headers:
            trail: AuditTrail = AuditTrail(header.id, actor.id, "admin_edit")
            trail.record("status", header.status, "approved")
            header.status = "approved"
            header.approved_at = trail.changed_at
            header.approved_by = actor.id
            rows.extend(trail.rows)
        await db.flush()
        await timecard_audit_repository.add_many(db, rows)
        return headers

    async def reject(
        self,
        db: AsyncSession,
        actor: Profile,
        timecard_id: UUID,
        reason: str,
        rejected_fields: list[str] | None = None,
    ) -> TimecardHeader:
        """타임카드 반려 — submitted에서만, 사유 필수.

        Reject a submitted timecard. Status, reason and flagged fields are
        written to the audit log as ``rejection_edit`` rows.
        """
        self._check_approver(actor)
        if not reason or not reason.strip():
            raise BadRequestError("반려 사유가 필요합니다 (Rejection reason is required)")
        header: TimecardHeader | None = await timecard_repository.get_by_id(db, timecard_id)
        if header is None:
            raise NotFoundError("타임카드를 찾을 수 없습니다 (Timecard not found)")
        if header.status != "submitted":
            raise InvalidStatusError(header.status, "reject")

        fields: list[str] = list(rejected_fields or [])
        trail: AuditTrail = AuditTrail(header.id, actor.id, "rejection_edit")
        trail.record("status", header.status, "rejected")
        trail.record("rejection_reason", header.rejection_reason, reason.strip())
        trail.record("rejected_fields", header.rejected_fields or [], fields)
        header.status = "rejected"
        header.rejection_reason = reason.strip()
        header.rejected_fields = fields
        await db.flush()
        await timecard_audit_repository.add_many(db, trail.rows)
        return header

    # === 감사 조회 (Audit read) ===

    async def get_audit_log(
        self,
        db: AsyncSession,
        actor: Profile,
        timecard_id: UUID,
        action_type: str | None = None,
        field_name: str | None = None,
    ) -> Sequence[TimecardAuditLog]:
        """감사 로그 조회, 최신순 (Audit rows, newest first)."""
        await self.get_timecard(db, timecard_id, actor)
        return await timecard_audit_repository.get_for_timecard(db, timecard_id, action_type, field_name)

    async def build_audit_groups(
        self,
        db: AsyncSession,
        rows: Sequence[TimecardAuditLog],
    ) -> list[dict]:
        """change_id별로 감사 행을 묶습니다 (Group audit rows by change id, newest first)."""
        names: dict[UUID, str] = await profile_repository.get_names(
            db, {row.changed_by for row in rows if row.changed_by is not None}
        )
        groups: dict[UUID, dict] = {}
        for row in rows:
            group: dict | None = groups.get(row.change_id)
            if group is None:
                group = {
                    "change_id": str(row.change_id),
                    "changed_by": str(row.changed_by) if row.changed_by else None,
                    "changed_by_name": names.get(row.changed_by) if row.changed_by else None,
                    "changed_at": row.changed_at,
                    "action_type": row.action_type,
                    "changes": [],
                }
                groups[row.change_id] = group
            group["changes"].append({
                "field_name": row.field_name,
                "old_value": row.old_value,
                "new_value": row.new_value,
                "work_date": row.work_date,
            })
        return list(groups.values())

    def build_audit_response(self, row: TimecardAuditLog) -> dict:
        """감사 행 응답 딕셔너리 (Build the response dict of one audit row)."""
        return {
            "id": str(row.id),
            "change_id": str(row.change_id),
            "field_name": row.field_name,
            "old_value": row.old_value,
            "new_value": row.new_value,
            "changed_by": str(row.changed_by) if row.changed_by else None,
            "changed_at": row.changed_at,
            "action_type": row.action_type,
            "work_date": row.work_date,
        }

    def build_response(self, header: TimecardHeader) -> dict:
        """타임카드 응답 딕셔너리 구성 (Build the timecard response dict)."""
        return {
            "id": str(header.id),
            "user_id": str(header.user_id),
            "project_id": str(header.project_id),
            "status": header.status,
            "period_start_date": header.period_start_date,
            "period_end_date": header.period_end_date,
            "total_hours": header.total_hours,
            "total_break_duration": header.total_break_duration,
            "total_pay": header.total_pay,
            "pay_rate": header.pay_rate,
            "submitted_at": header.submitted_at,
            "approved_at": header.approved_at,
            "approved_by": str(header.approved_by) if header.approved_by else None,
            "rejection_reason": header.rejection_reason,
            "rejected_fields": header.rejected_fields or [],
            "edit_comments": header.edit_comments,
            "admin_edited": header.admin_edited,
            "edit_type": header.edit_type,
            "entries": [
                {
                    "work_date": entry.work_date,
                    "check_in_time": entry.check_in_time,
                    "check_out_time": entry.check_out_time,
                    "break_start_time": entry.break_start_time,
                    "break_end_time": entry.break_end_time,
                    "hours_worked": entry.hours_worked,
                    "break_duration": entry.break_duration,
                    "daily_pay": entry.daily_pay,
                }
                for entry in header.entries
            ],
        }


# 싱글턴 인스턴스 — Singleton instance
timecard_service: TimecardService = TimecardService()

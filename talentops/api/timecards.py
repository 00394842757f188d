"""타임카드 라우터 — 계산, 작성, 수정 감사, 승인 워크플로 API.

Timecard Router — Calculation preview, creation, audited edits and the
submit/approve/reject workflow.
"""

from datetime import date
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.api.deps import get_current_profile, parse_uuid
from talentops.database import get_db
from talentops.models.profile import Profile
from talentops.models.timecard import TimecardHeader
from talentops.schemas.common import PaginatedResponse
from talentops.schemas.timecard import (
    AuditGroupResponse,
    AuditLogResponse,
    CalculateRequest,
    CalculateResponse,
    DailyEntryPatch,
    TimecardApproveRequest,
    TimecardCreate,
    TimecardEditRequest,
    TimecardEditResponse,
    TimecardRejectRequest,
    TimecardResponse,
)
from talentops.services.timecard_calculator import PeriodResult, calculate_period
from talentops.services.timecard_service import timecard_service
from talentops.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


@router.post("/calculate", response_model=CalculateResponse)
async def calculate_timecard(
    data: CalculateRequest,
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """저장 없이 근무 시간/급여를 미리 계산합니다.

    Preview hours, breaks and pay for a list of entries without storing
    anything. Time sequence warnings are returned, never raised.
    """
    result: PeriodResult = calculate_period(data.entries, data.pay_rate)
    return {
        "days": [
            {
                "work_date": day.work_date,
                "hours_worked": day.hours_worked,
                "break_duration": day.break_duration,
                "daily_pay": day.daily_pay,
                "warnings": day.warnings,
            }
            for day in result.days
        ],
        "total_hours": result.total_hours,
        "total_break_duration": result.total_break_duration,
        "total_pay": result.total_pay,
        "warnings": result.warnings,
    }


@router.post("", response_model=TimecardResponse, status_code=201)
async def create_timecard(
    data: TimecardCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """타임카드를 생성합니다 (Create a draft timecard)."""
    header: TimecardHeader = await timecard_service.create_timecard(
        db,
        actor=current_profile,
        project_id=parse_uuid(data.project_id, "project_id"),
        period_start_date=data.period_start_date,
        period_end_date=data.period_end_date,
        entries=[entry.model_dump() for entry in data.entries],
        user_id=parse_uuid(data.user_id, "user_id") if data.user_id else None,
        pay_rate=data.pay_rate,
    )
    await db.commit()
    return timecard_service.build_response(header)


@router.get("", response_model=PaginatedResponse)
async def list_timecards(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
    project_id: Annotated[UUID | None, Query()] = None,
    user_id: Annotated[UUID | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """타임카드 목록을 조회합니다.

    List timecards, newest period first. Non-approvers only see their own.
    """
    headers, total = await timecard_service.list_timecards(
        db,
        actor=current_profile,
        project_id=project_id,
        status=status,
        user_id=user_id,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [timecard_service.build_response(header) for header in headers],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.post("/edit", response_model=TimecardEditResponse)
async def edit_timecard(
    data: TimecardEditRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """타임카드 일별 시간을 수정하고 감사 로그를 남깁니다.

    Edit daily times. Only the keys sent in each update are compared, and
    one audit row is written per field that actually changed.
    """
    updates: list[dict[str, Any]] = [update.model_dump(exclude_unset=True) for update in data.updates]
    header, rows = await timecard_service.edit_timecard(
        db,
        actor=current_profile,
        timecard_id=parse_uuid(data.timecard_id, "timecard_id"),
        updates=updates,
        admin_note=data.admin_note,
        edit_comment=data.edit_comment,
        return_to_draft=data.return_to_draft,
    )
    await db.commit()
    return {
        "timecard": timecard_service.build_response(header),
        "audit_entries": [timecard_service.build_audit_response(row) for row in rows],
        "change_id": str(rows[0].change_id) if rows else None,
    }


@router.post("/approve", response_model=list[TimecardResponse])
async def approve_timecards(
    data: TimecardApproveRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
    bulk: bool = False,
) -> list[dict]:
    """타임카드를 승인합니다 — ?bulk=true면 timecard_ids 전체.

    Approve one timecard, or every id in ``timecard_ids`` with ``?bulk=true``.
    A bulk request fails as a whole when any timecard is not submitted.
    """
    raw_ids: list[str] = data.timecard_ids if bulk else ([data.timecard_id] if data.timecard_id else [])
    if not raw_ids:
        raise BadRequestError("승인할 타임카드가 없습니다 (No timecards to approve)")
    headers = await timecard_service.approve(
        db, actor=current_profile, timecard_ids=[parse_uuid(value, "timecard_id") for value in raw_ids]
    )
    await db.commit()
    return [timecard_service.build_response(header) for header in headers]


@router.post("/reject", response_model=TimecardResponse)
async def reject_timecard(
    data: TimecardRejectRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """제출된 타임카드를 반려합니다 (Reject a submitted timecard; a reason is required)."""
    header: TimecardHeader = await timecard_service.reject(
        db,
        actor=current_profile,
        timecard_id=parse_uuid(data.timecard_id, "timecard_id"),
        reason=data.reason,
        rejected_fields=data.rejected_fields,
    )
    await db.commit()
    return timecard_service.build_response(header)


@router.get("/{timecard_id}", response_model=TimecardResponse)
async def get_timecard(
    timecard_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """타임카드 상세를 조회합니다 (Timecard detail with entries)."""
    header: TimecardHeader = await timecard_service.get_timecard(db, timecard_id, current_profile)
    return timecard_service.build_response(header)


@router.post("/{timecard_id}/submit", response_model=TimecardResponse)
async def submit_timecard(
    timecard_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """타임카드를 제출합니다 (Owner submits a draft or rejected timecard)."""
    header: TimecardHeader = await timecard_service.submit(db, current_profile, timecard_id)
    await db.commit()
    return timecard_service.build_response(header)


@router.get("/{timecard_id}/audit", response_model=list[AuditLogResponse] | list[AuditGroupResponse])
async def get_timecard_audit(
    timecard_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
    action_type: Annotated[str | None, Query()] = None,
    field_name: Annotated[str | None, Query()] = None,
    grouped: bool = False,
) -> list[dict]:
    """타임카드 감사 로그를 조회합니다.

    Audit log of a timecard, newest first. ``?grouped=true`` groups the rows
    of each edit action by change id.
    """
    rows = await timecard_service.get_audit_log(
        db, current_profile, timecard_id, action_type=action_type, field_name=field_name
    )
    if grouped:
        return await timecard_service.build_audit_groups(db, rows)
    return [timecard_service.build_audit_response(row) for row in rows]


@router.delete("/{timecard_id}/entries/{work_date}", response_model=TimecardEditResponse)
async def delete_timecard_entry(
    timecard_id: UUID,
    work_date: date,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """하루치 항목을 삭제합니다 (Delete one work date; cleared fields are audited)."""
    header, rows = await timecard_service.delete_daily_entry(db, current_profile, timecard_id, work_date)
    await db.commit()
    return {
        "timecard": timecard_service.build_response(header),
        "audit_entries": [timecard_service.build_audit_response(row) for row in rows],
        "change_id": str(rows[0].change_id) if rows else None,
    }


@router.put("/{timecard_id}/entries/{work_date}", response_model=TimecardEditResponse)
async def upsert_timecard_entry(
    timecard_id: UUID,
    work_date: date,
    data: DailyEntryPatch,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """하루치 항목을 생성하거나 수정합니다 (Create or update one work date; changed fields are audited)."""
    header, rows = await timecard_service.upsert_daily_entry(
        db, current_profile, timecard_id, work_date, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    return {
        "timecard": timecard_service.build_response(header),
        "audit_entries": [timecard_service.build_audit_response(row) for row in rows],
        "change_id": str(rows[0].change_id) if rows else None,
    }

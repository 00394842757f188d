"""일별 에스코트 배정 라우터 — 날짜 단위 탤런트/그룹 배정 API.

Daily Escort Assignment Router — Per-date talent and group escort
assignments, day clearing and escort availability.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.api.deps import get_current_profile, parse_uuid, require_manager
from talentops.database import get_db
from talentops.models.daily_assignment import TalentDailyAssignment
from talentops.models.profile import Profile
from talentops.schemas.assignment import (
    AvailableEscortResponse,
    ClearDayResponse,
    DayAssignmentsResponse,
    GroupEscortsAssign,
    TalentEscortAssign,
)
from talentops.schemas.common import MessageResponse
from talentops.services.daily_assignment_service import daily_assignment_service
from talentops.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


@router.get("/{project_id}/assignments/{assignment_date}", response_model=DayAssignmentsResponse)
async def get_day_assignments(
    project_id: UUID,
    assignment_date: date,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """하루치 배정을 조회합니다 (Talent and group escorts of one project date)."""
    return await daily_assignment_service.get_day_assignments(db, project_id, assignment_date)


@router.put("/{project_id}/assignments/{assignment_date}/talent/{talent_id}", response_model=DayAssignmentsResponse)
async def assign_talent_escort(
    project_id: UUID,
    assignment_date: date,
    talent_id: UUID,
    data: TalentEscortAssign,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(require_manager)],
) -> dict:
    """탤런트의 하루 에스코트를 지정합니다.

    Set a talent's escort for one date. Dates outside the project range
    are rejected with 400.
    """
    row: TalentDailyAssignment = await daily_assignment_service.assign_talent_escort(
        db, project_id, talent_id, assignment_date, parse_uuid(data.escort_id, "escort_id")
    )
    await db.commit()
    return await daily_assignment_service.get_day_assignments(db, project_id, row.assignment_date)


@router.delete("/{project_id}/assignments/{assignment_date}/talent/{talent_id}", response_model=MessageResponse)
async def unassign_talent(
    project_id: UUID,
    assignment_date: date,
    talent_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(require_manager)],
) -> dict:
    """탤런트의 하루 배정을 삭제합니다 (Remove a talent's escort for one date)."""
    removed: bool = await daily_assignment_service.unassign_talent(db, project_id, talent_id, assignment_date)
    if not removed:
        raise NotFoundError("해당 날짜의 배정이 없습니다 (No assignment on this date)")
    await db.commit()
    return {"message": "Assignment removed"}


@router.put("/{project_id}/assignments/{assignment_date}/groups/{group_id}", response_model=DayAssignmentsResponse)
async def assign_group_escorts(
    project_id: UUID,
    assignment_date: date,
    group_id: UUID,
    data: GroupEscortsAssign,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(require_manager)],
) -> dict:
    """그룹의 하루 에스코트를 교체합니다 (Replace a group's escorts for one date; empty removes the day)."""
    await daily_assignment_service.assign_group_escorts(
        db, project_id, group_id, assignment_date,
        [parse_uuid(value, "escort_id") for value in data.escort_ids],
    )
    await db.commit()
    return await daily_assignment_service.get_day_assignments(db, project_id, assignment_date)


@router.delete("/{project_id}/assignments/{assignment_date}", response_model=ClearDayResponse)
async def clear_day(
    project_id: UUID,
    assignment_date: date,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(require_manager)],
) -> dict:
    """하루치 배정을 모두 제거합니다 (Clear every assignment of one project date)."""
    removed: int = await daily_assignment_service.clear_day(db, project_id, assignment_date)
    await db.commit()
    return {"date": assignment_date, "removed": removed}


@router.get("/{project_id}/available-escorts/{assignment_date}", response_model=list[AvailableEscortResponse])
async def get_available_escorts(
    project_id: UUID,
    assignment_date: date,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> list[dict]:
    """하루 기준 에스코트 가용 현황 (Project escorts and whether each is already assigned on the date)."""
    return await daily_assignment_service.get_available_escorts(db, project_id, assignment_date)

"""탤런트 그룹 라우터 — 그룹 조회/수정 및 일정 교체 API.

Talent Group Router — Group detail, updates and schedule replacement.
A group's ``scheduled_dates`` is always derived from its daily rows.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.api.deps import get_current_profile, parse_uuid, require_manager
from talentops.database import get_db
from talentops.models.profile import Profile
from talentops.models.talent import TalentGroup
from talentops.schemas.assignment import GroupScheduleUpdate, TalentGroupResponse, TalentGroupUpdate
from talentops.services.daily_assignment_service import daily_assignment_service

router: APIRouter = APIRouter()


@router.get("/{project_id}/talent-groups/{group_id}", response_model=TalentGroupResponse)
async def get_talent_group(
    project_id: UUID,
    group_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """탤런트 그룹을 조회합니다 (Talent group with members and schedule)."""
    group: TalentGroup = await daily_assignment_service.get_group(db, project_id, group_id)
    return await daily_assignment_service.build_group_response(db, group)


@router.put("/{project_id}/talent-groups/{group_id}", response_model=TalentGroupResponse)
async def update_talent_group(
    project_id: UUID,
    group_id: UUID,
    data: TalentGroupUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(require_manager)],
) -> dict:
    """탤런트 그룹을 수정합니다.

    Update a group's name, members and contact. ``scheduled_dates`` replaces
    the schedule through the daily rows; out-of-range dates reject the
    whole request.
    """
    update_data: dict = data.model_dump(exclude_unset=True)
    if update_data.get("escort_ids") is not None:
        update_data["escort_ids"] = [parse_uuid(value, "escort_id") for value in update_data["escort_ids"]]
    group: TalentGroup = await daily_assignment_service.update_group(db, project_id, group_id, update_data)
    await db.commit()
    return await daily_assignment_service.build_group_response(db, group)


@router.put("/{project_id}/talent-groups/{group_id}/schedule", response_model=TalentGroupResponse)
async def update_group_schedule(
    project_id: UUID,
    group_id: UUID,
    data: GroupScheduleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(require_manager)],
) -> dict:
    """그룹 일정 전체를 교체합니다 (Replace a group's schedule: one row per date and escort)."""
    group: TalentGroup = await daily_assignment_service.set_group_schedule(
        db, project_id, group_id, data.scheduled_dates,
        [parse_uuid(value, "escort_id") for value in data.escort_ids],
    )
    await db.commit()
    return await daily_assignment_service.build_group_response(db, group)

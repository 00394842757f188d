"""프로젝트 준비도 라우터 — 준비도 조회, 영역 확정/해제, 강제 재계산 API.

Project Readiness Router — Readiness dashboard, area finalization and
forced recalculation.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.api.deps import get_current_profile
from talentops.database import get_db
from talentops.models.profile import Profile
from talentops.models.readiness import ProjectReadiness
from talentops.schemas.readiness import FinalizeRequest, FinalizeResponse, ReadinessResponse
from talentops.services.readiness_service import (
    build_feature_availability,
    build_todo_items,
    readiness_service,
)

router: APIRouter = APIRouter()


def _finalize_payload(readiness: ProjectReadiness, message: str) -> dict:
    data: dict = readiness_service.build_response(readiness)
    data["todoItems"] = build_todo_items(readiness)
    data["featureAvailability"] = build_feature_availability(readiness)
    return {"data": data, "message": message}


@router.get("/{project_id}/readiness", response_model=ReadinessResponse)
async def get_readiness(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """프로젝트 준비도를 조회합니다.

    Recalculate and return the project's readiness with the to-do list,
    feature gates and daily assignment progress.

    Args:
        project_id: 프로젝트 UUID (Project UUID)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_profile: 인증된 프로필 (Authenticated profile)

    Returns:
        dict: 준비도 + todoItems + featureAvailability + assignmentProgress
    """
    dashboard: dict = await readiness_service.get_dashboard(db, project_id)
    await db.commit()
    return dashboard


@router.post("/{project_id}/readiness/finalize", response_model=FinalizeResponse)
async def finalize_area(
    project_id: UUID,
    data: FinalizeRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """준비도 영역을 확정합니다 (Finalize an area; admin and in_house only)."""
    readiness: ProjectReadiness = await readiness_service.finalize(db, project_id, data.area, current_profile)
    await db.commit()
    return _finalize_payload(readiness, f"Project {data.area} finalized successfully")


@router.delete("/{project_id}/readiness/finalize", response_model=FinalizeResponse)
async def unfinalize_area(
    project_id: UUID,
    data: FinalizeRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """준비도 영역 확정을 해제합니다 (Clear an area's finalization; admin only)."""
    readiness: ProjectReadiness = await readiness_service.unfinalize(db, project_id, data.area, current_profile)
    await db.commit()
    return _finalize_payload(readiness, f"Project {data.area} unfinalized successfully")


@router.post("/{project_id}/readiness/invalidate", response_model=ReadinessResponse)
async def invalidate_readiness(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> dict:
    """준비도를 강제로 다시 계산합니다 (Force a recalculation and return the fresh readiness)."""
    readiness: ProjectReadiness = await readiness_service.recalculate(db, project_id)
    await db.commit()
    return readiness_service.build_response(readiness)

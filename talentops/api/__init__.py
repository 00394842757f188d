"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router for
inclusion in the FastAPI application under ``/api``.

Included routers:
    - timecards: 타임카드 계산/작성/수정/승인 (Timecard calculation, edits and workflow)
    - readiness: 프로젝트 준비도 (Project readiness and finalization)
    - assignments: 일별 에스코트 배정 (Daily escort assignments)
    - talent_groups: 탤런트 그룹 (Talent groups and schedules)
"""

from fastapi import APIRouter

from talentops.api.assignments import router as assignments_router
from talentops.api.readiness import router as readiness_router
from talentops.api.talent_groups import router as talent_groups_router
from talentops.api.timecards import router as timecards_router

api_router: APIRouter = APIRouter()

# 타임카드: /timecards 하위 (Timecards)
api_router.include_router(timecards_router, prefix="/timecards", tags=["Timecards"])

# 프로젝트 하위 리소스: /projects/{project_id}/... (nested under projects)
api_router.include_router(readiness_router, prefix="/projects", tags=["Readiness"])
api_router.include_router(assignments_router, prefix="/projects", tags=["Daily Assignments"])
api_router.include_router(talent_groups_router, prefix="/projects", tags=["Talent Groups"])

"""프로젝트 준비도 Pydantic 요청/응답 스키마 정의.

Project readiness Pydantic request/response schema definitions.
The readiness row uses snake_case columns; the dashboard extras
(todoItems, featureAvailability, assignmentProgress) keep the camelCase
keys the project dashboard reads.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

ReadinessArea = Literal["locations", "roles", "team", "talent"]


class FinalizeRequest(BaseModel):
    """영역 확정/해제 요청 스키마 (Area to finalize or unfinalize)."""

    area: ReadinessArea  # 대상 영역 (Target area)


class TodoItem(BaseModel):
    """할 일 항목 스키마 (One dashboard to-do item)."""

    id: str  # 항목 ID — 예: "assign-team" (Stable item id)
    area: str  # 영역 — "team"|"talent"|"roles"|"locations"|"assignments"
    priority: Literal["critical", "important", "optional"]  # 우선순위 (Priority)
    title: str  # 제목 (Title)
    description: str  # 설명 (Description)
    actionText: str  # 버튼 문구 (Action label)
    actionRoute: str  # 이동 경로 (Action route)


class FeatureStatus(BaseModel):
    """기능 사용 가능 여부 스키마 (One feature gate)."""

    available: bool  # 사용 가능 여부 (Whether the feature is enabled)
    requirement: str  # 조건 설명 (Requirement text)
    guidance: str | None = None  # 안내 문구 — 막혔을 때만 (Only when blocked)
    actionRoute: str | None = None  # 이동 경로 — 막혔을 때만 (Only when blocked)


class UpcomingDeadline(BaseModel):
    """다가오는 배정 마감 (Upcoming day with missing assignments)."""

    date: str  # 날짜 ISO 문자열 (ISO date)
    missingAssignments: int  # 누락 배정 수 (Entities without an escort)
    daysFromNow: int  # 오늘로부터 일수 (Days ahead)


class AssignmentProgressResponse(BaseModel):
    """배정 진행률 스키마 (Daily assignment progress)."""

    totalAssignments: int
    completedAssignments: int
    urgentIssues: int
    upcomingDeadlines: list[UpcomingDeadline] = []
    assignmentRate: int
    totalEntities: int
    projectDays: int


class ReadinessResponse(BaseModel):
    """프로젝트 준비도 응답 스키마.

    Project readiness response: counts, finalization flags, derived
    statuses and the dashboard extras.
    """

    project_id: str  # 프로젝트 UUID (Project UUID)

    # 집계 — Counts
    custom_location_count: int
    custom_role_count: int
    total_staff_assigned: int
    supervisor_count: int
    escort_count: int
    coordinator_count: int
    total_talent: int

    # 확정 플래그 — Finalization flags
    locations_finalized: bool
    roles_finalized: bool
    team_finalized: bool
    talent_finalized: bool

    # 파생 상태 — Derived statuses
    locations_status: str  # "default-only"|"configured"|"finalized"
    roles_status: str  # "default-only"|"configured"|"finalized"
    team_status: str  # "none"|"partial"|"finalized"
    talent_status: str  # "none"|"partial"|"finalized"
    overall_status: str  # "getting-started"|"operational"|"production-ready"
    last_updated: datetime | None

    todoItems: list[TodoItem] = []  # 할 일 목록 (To-do list)
    featureAvailability: dict[str, FeatureStatus] = {}  # 기능 게이트 (Feature gates)
    assignmentProgress: AssignmentProgressResponse | None = None  # 배정 진행률 (Assignment progress)


class FinalizeResponse(BaseModel):
    """영역 확정/해제 응답 스키마 (Updated readiness plus a confirmation message)."""

    data: ReadinessResponse
    message: str

"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the metadata,
which Alembic and relationship resolution rely on.

Modules:
    profile: 사용자 프로필 (Profiles with application role)
    project: 프로젝트, 위치, 역할 템플릿, 팀 배정 (Project configuration)
    talent: 탤런트, 프로젝트 배정, 그룹, 그룹 구성원 (Talent and groups)
    daily_assignment: 일별 에스코트 배정, 마이그레이션 스냅샷 (Daily escort assignments)
    timecard: 타임카드 헤더, 일별 항목, 감사 로그 (Timecards and audit trail)
    readiness: 프로젝트 준비도 (Project readiness)
"""

from talentops.models.profile import Profile
from talentops.models.project import Project, ProjectLocation, ProjectRoleTemplate, TeamAssignment
from talentops.models.talent import Talent, TalentProjectAssignment, TalentGroup, TalentGroupMember
from talentops.models.daily_assignment import TalentDailyAssignment, GroupDailyAssignment, AssignmentMigrationSnapshot
from talentops.models.timecard import TimecardHeader, TimecardDailyEntry, TimecardAuditLog
from talentops.models.readiness import ProjectReadiness

__all__ = [
    "Profile",
    "Project", "ProjectLocation", "ProjectRoleTemplate", "TeamAssignment",
    "Talent", "TalentProjectAssignment", "TalentGroup", "TalentGroupMember",
    "TalentDailyAssignment", "GroupDailyAssignment", "AssignmentMigrationSnapshot",
    "TimecardHeader", "TimecardDailyEntry", "TimecardAuditLog",
    "ProjectReadiness",
]

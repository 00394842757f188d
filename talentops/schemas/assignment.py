"""일별 에스코트 배정 및 탤런트 그룹 Pydantic 요청/응답 스키마 정의.

Daily escort assignment and talent group Pydantic request/response schema
definitions.
"""

from datetime import date

from pydantic import BaseModel, Field


# === 일별 배정 (Daily assignment) 스키마 ===

class TalentEscortAssign(BaseModel):
    """탤런트 하루 에스코트 지정 요청 스키마 (Escort for one talent on one day)."""

    escort_id: str  # 에스코트 프로필 UUID (Escort profile UUID)


class GroupEscortsAssign(BaseModel):
    """그룹 하루 에스코트 교체 요청 스키마 (Escorts for one group on one day; empty removes the day)."""

    escort_ids: list[str] = []  # 에스코트 UUID 목록 (Escort UUIDs)


class TalentDayResponse(BaseModel):
    """탤런트 하루 배정 응답 (A talent's escort on the day)."""

    talent_id: str  # 탤런트 UUID (Talent UUID)
    escort_id: str  # 에스코트 UUID (Escort UUID)
    escort_name: str | None = None  # 에스코트 이름 (Escort name)


class GroupEscort(BaseModel):
    """그룹 에스코트 (One escort of a group on the day)."""

    escort_id: str
    escort_name: str | None = None


class GroupDayResponse(BaseModel):
    """그룹 하루 배정 응답 (A group's escorts on the day)."""

    group_id: str  # 그룹 UUID (Group UUID)
    escorts: list[GroupEscort] = []  # 에스코트 목록 (Escorts)


class DayAssignmentsResponse(BaseModel):
    """하루 배정 전체 응답 스키마 (All assignments of one project date)."""

    date: date  # 배정 날짜 (Assignment date)
    talent: list[TalentDayResponse] = []  # 탤런트 배정 (Talent rows)
    groups: list[GroupDayResponse] = []  # 그룹 배정 (Group rows)


class AvailableEscortResponse(BaseModel):
    """에스코트 가용 현황 응답 스키마 (Escort availability on a date)."""

    escort_id: str  # 에스코트 UUID (Escort UUID)
    escort_name: str  # 에스코트 이름 (Escort name)
    assigned: bool  # 당일 배정 여부 (Already assigned on the date)
    assignment_count: int  # 당일 배정 수 (Assignments on the date)


class ClearDayResponse(BaseModel):
    """하루 배정 제거 응답 (Number of rows removed)."""

    date: date
    removed: int


# === 탤런트 그룹 (Talent group) 스키마 ===

class GroupMember(BaseModel):
    """그룹 구성원 스키마 (One member of a talent group)."""

    name: str = Field(..., min_length=1)  # 구성원 이름 (Member name)
    role: str | None = None  # 역할 — 예: "Lead vocals" (Member role)


class TalentGroupUpdate(BaseModel):
    """탤런트 그룹 수정 요청 스키마 (부분 업데이트).

    Talent group update (partial). ``scheduled_dates`` replaces the whole
    schedule; without ``escort_ids`` the group's current escorts are used.

    Attributes:
        group_name: 그룹 이름 (Group name)
        members: 구성원 전체 교체 (Members, replaced as a whole)
        point_of_contact_name: 담당자 이름 (Point of contact name)
        point_of_contact_phone: 담당자 연락처 (Point of contact phone)
        scheduled_dates: 일정 전체 교체 (Schedule, replaced as a whole)
        escort_ids: 일정에 쓸 에스코트 (Escorts for the schedule)
    """

    group_name: str | None = None  # 변경할 그룹 이름 (New name, optional)
    members: list[GroupMember] | None = None  # 구성원 교체 (Members, optional)
    point_of_contact_name: str | None = None  # 담당자 이름 (Contact name, optional)
    point_of_contact_phone: str | None = None  # 담당자 연락처 (Contact phone, optional)
    scheduled_dates: list[date] | None = None  # 일정 교체 (Schedule, optional)
    escort_ids: list[str] | None = None  # 일정 에스코트 (Schedule escorts, optional)


class GroupScheduleUpdate(BaseModel):
    """그룹 일정 교체 요청 스키마 (Replace a group's schedule)."""

    scheduled_dates: list[date] = []  # 일정 날짜 (Dates)
    escort_ids: list[str] = []  # 각 날짜의 에스코트 (Escorts for every date)


class TalentGroupResponse(BaseModel):
    """탤런트 그룹 응답 스키마 (Talent group with members and derived schedule)."""

    id: str  # 그룹 UUID (Group UUID)
    project_id: str  # 프로젝트 UUID (Project UUID)
    group_name: str  # 그룹 이름 (Group name)
    members: list[GroupMember] = []  # 구성원 (Members)
    point_of_contact_name: str | None = None  # 담당자 이름 (Contact name)
    point_of_contact_phone: str | None = None  # 담당자 연락처 (Contact phone)
    scheduled_dates: list[date] = []  # 일별 행에서 파생된 일정 (Dates derived from daily rows)
    escort_ids: list[str] = []  # 현재 일별 에스코트 (Escorts in the daily rows)

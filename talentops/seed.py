"""개발용 시드 스크립트 — 프로필, 프로젝트, 팀, 탤런트 생성.

Seed script — Creates development profiles, one project with its team,
talent and a talent group, then prints a bearer token for the admin.

Usage:
    python -m talentops.seed

Creates:
    - 5개 프로필: admin, in_house, supervisor, coordinator, talent_escort (5 profiles)
    - 1개 프로젝트 (1 project, 7 days starting today) + 기본/커스텀 위치, 역할 템플릿
    - 팀 배정, 탤런트 2명, 탤런트 그룹 1개 (Team assignments, 2 talent, 1 group)
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.database import Base, async_session, engine
from talentops.models import (
    Profile,
    Project,
    ProjectLocation,
    ProjectRoleTemplate,
    Talent,
    TalentGroup,
    TalentGroupMember,
    TalentProjectAssignment,
    TeamAssignment,
)
from talentops.services.readiness_service import readiness_service
from talentops.utils.jwt import create_access_token


async def seed_data(db: AsyncSession, start: date | None = None) -> tuple[Project, Profile] | None:
    """개발 데이터를 세션에 추가합니다 (커밋은 호출자 담당).

    Add development data through the given session. Period-level escort data
    is written the legacy way so the assignment migration has something to
    convert. The caller commits.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        start: 프로젝트 시작일, 기본값은 오늘 (Project start date, defaults to today)

    Returns:
        (project, admin) 또는 이미 시드된 경우 None (None when profiles already exist)
    """
    existing = await db.execute(select(Profile).limit(1))
    if existing.scalar_one_or_none():
        return None

    # 프로필 — One profile per application role
    profiles: dict[str, Profile] = {}
    for role, name in [
        ("admin", "Avery Admin"),
        ("in_house", "Indy House"),
        ("supervisor", "Sam Supervisor"),
        ("coordinator", "Casey Coordinator"),
        ("talent_escort", "Eli Escort"),
    ]:
        profile: Profile = Profile(full_name=name, email=f"{role}@talentops.dev", role=role)
        db.add(profile)
        profiles[role] = profile
    await db.flush()

    start = start or date.today()
    project: Project = Project(name="Spring Showcase", start_date=start, end_date=start + timedelta(days=6))
    db.add(project)
    await db.flush()

    # 위치 — Default locations plus one custom location
    for order, (name, is_default) in enumerate([
        ("Holding Area", True),
        ("On Set", True),
        ("Green Room B", False),
    ]):
        db.add(ProjectLocation(project_id=project.id, name=name, is_default=is_default, sort_order=order))

    # 역할 템플릿 — Role templates with base pay rates
    for role, display_name, rate, is_default in [
        ("supervisor", "Supervisor", Decimal("35.00"), True),
        ("coordinator", "Coordinator", Decimal("30.00"), True),
        ("talent_escort", "Talent Escort", Decimal("25.00"), True),
        ("talent_escort", "Senior Escort", Decimal("28.00"), False),
    ]:
        db.add(ProjectRoleTemplate(
            project_id=project.id, role=role, display_name=display_name,
            base_pay_rate=rate, is_default=is_default,
        ))

    # 팀 배정 — Team assignments (escort uses the template rate)
    db.add(TeamAssignment(project_id=project.id, user_id=profiles["supervisor"].id, role="supervisor", pay_rate=Decimal("36.50")))
    db.add(TeamAssignment(project_id=project.id, user_id=profiles["coordinator"].id, role="coordinator"))
    db.add(TeamAssignment(project_id=project.id, user_id=profiles["talent_escort"].id, role="talent_escort"))

    # 탤런트 — Talent with legacy period-level escort assignments
    schedule: list[date] = [start, start + timedelta(days=1), start + timedelta(days=2)]
    for first_name, last_name in [("Jordan", "Lee"), ("Riley", "Park")]:
        talent: Talent = Talent(first_name=first_name, last_name=last_name)
        db.add(talent)
        await db.flush()
        db.add(TalentProjectAssignment(
            talent_id=talent.id,
            project_id=project.id,
            escort_id=profiles["talent_escort"].id,
            scheduled_dates=schedule,
        ))

    group: TalentGroup = TalentGroup(
        project_id=project.id,
        group_name="The Harmonics",
        assigned_escort_id=profiles["talent_escort"].id,
        assigned_escort_ids=[profiles["talent_escort"].id],
        scheduled_dates=[start + timedelta(days=3)],
        point_of_contact_name="Morgan Harmon",
        point_of_contact_phone="555-0100",
        members=[
            TalentGroupMember(name="Morgan Harmon", role="Lead Vocal", sort_order=0),
            TalentGroupMember(name="Quinn Harmon", role="Guitar", sort_order=1),
        ],
    )
    db.add(group)
    await db.flush()

    await readiness_service.recalculate(db, project.id)
    return project, profiles["admin"]


async def seed() -> None:
    """데이터베이스를 개발 데이터로 시드합니다.

    Seed the database with development data.
    Creates tables if they don't exist.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    # 테이블 생성 — Create all tables from ORM metadata (development only; use alembic elsewhere)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        seeded: tuple[Project, Profile] | None = await seed_data(db)
        if seeded is None:
            print("Already seeded. Skipping.")
            return
        await db.commit()

    project, admin = seeded
    token: str = create_access_token({"sub": str(admin.id)}, expires_minutes=60 * 24)
    print(f"Seeded: project={project.id}, admin profile={admin.id}")
    print(f"Admin bearer token (24h): {token}")
    print("Next: python -m talentops.scripts.migrate_assignments --dry-run")


if __name__ == "__main__":
    asyncio.run(seed())

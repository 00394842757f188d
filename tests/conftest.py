"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Each test gets a fresh schema on a single shared connection (StaticPool).
pysqlite's implicit transaction handling is turned off and BEGIN is emitted
explicitly so SAVEPOINTs behave like they do on PostgreSQL.
"""

from collections.abc import AsyncGenerator
from datetime import date, timedelta
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from talentops.database import Base, get_db
from talentops.main import app
from talentops.models import (
    Profile,
    Project,
    ProjectLocation,
    ProjectRoleTemplate,
    Talent,
    TalentGroup,
    TalentProjectAssignment,
    TeamAssignment,
)
from talentops.utils.jwt import create_access_token

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# 프로젝트 기간 — 7일 (Project runs for seven days)
PROJECT_START = date(2026, 3, 2)
PROJECT_END = date(2026, 3, 8)


def day(offset: int) -> date:
    """프로젝트 시작일 기준 날짜 (Project start date plus offset days)."""
    return PROJECT_START + timedelta(days=offset)


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 매 테스트마다 스키마를 새로 만듭니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _on_connect(dbapi_conn, _record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(eng.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_profile(db: AsyncSession, role: str, name: str) -> Profile:
    """역할별 프로필을 생성합니다."""
    profile = Profile(full_name=name, email=f"{name.lower().replace(' ', '.')}@test.dev", role=role)
    db.add(profile)
    await db.flush()
    return profile


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> Profile:
    return await make_profile(db, "admin", "Ada Admin")


@pytest_asyncio.fixture
async def in_house(db: AsyncSession) -> Profile:
    return await make_profile(db, "in_house", "Ivy House")


@pytest_asyncio.fixture
async def supervisor(db: AsyncSession) -> Profile:
    return await make_profile(db, "supervisor", "Sol Supervisor")


@pytest_asyncio.fixture
async def coordinator(db: AsyncSession) -> Profile:
    return await make_profile(db, "coordinator", "Cy Coordinator")


@pytest_asyncio.fixture
async def escort(db: AsyncSession) -> Profile:
    return await make_profile(db, "talent_escort", "Eve Escort")


@pytest_asyncio.fixture
async def second_escort(db: AsyncSession) -> Profile:
    return await make_profile(db, "talent_escort", "Finn Escort")


@pytest_asyncio.fixture
async def project(db: AsyncSession) -> Project:
    """7일짜리 테스트 프로젝트를 생성합니다."""
    p = Project(name="Test Showcase", start_date=PROJECT_START, end_date=PROJECT_END)
    db.add(p)
    await db.flush()
    return p


@pytest_asyncio.fixture
async def role_templates(db: AsyncSession, project: Project) -> list[ProjectRoleTemplate]:
    """기본 역할 템플릿 (Default role templates with base pay rates)."""
    templates = [
        ProjectRoleTemplate(project_id=project.id, role="supervisor", display_name="Supervisor",
                            base_pay_rate=Decimal("35.00"), is_default=True),
        ProjectRoleTemplate(project_id=project.id, role="talent_escort", display_name="Talent Escort",
                            base_pay_rate=Decimal("25.00"), is_default=True),
    ]
    db.add_all(templates)
    await db.flush()
    return templates


@pytest_asyncio.fixture
async def team(
    db: AsyncSession, project: Project, supervisor: Profile, escort: Profile, second_escort: Profile
) -> list[TeamAssignment]:
    """감독자 1명, 에스코트 2명을 프로젝트에 배정합니다."""
    rows = [
        TeamAssignment(project_id=project.id, user_id=supervisor.id, role="supervisor", pay_rate=Decimal("40.00")),
        TeamAssignment(project_id=project.id, user_id=escort.id, role="talent_escort"),
        TeamAssignment(project_id=project.id, user_id=second_escort.id, role="talent_escort"),
    ]
    db.add_all(rows)
    await db.flush()
    return rows


@pytest_asyncio.fixture
async def talent_assignment(db: AsyncSession, project: Project) -> TalentProjectAssignment:
    """프로젝트에 배정된 탤런트 1명 (One talent linked to the project, no escort yet)."""
    talent = Talent(first_name="Jordan", last_name="Lee")
    db.add(talent)
    await db.flush()
    assignment = TalentProjectAssignment(talent_id=talent.id, project_id=project.id, scheduled_dates=[])
    assignment.talent = talent
    db.add(assignment)
    await db.flush()
    return assignment


@pytest_asyncio.fixture
async def group(db: AsyncSession, project: Project) -> TalentGroup:
    """멤버 없는 탤런트 그룹 (Talent group without legacy escorts)."""
    g = TalentGroup(project_id=project.id, group_name="The Harmonics", assigned_escort_ids=[], scheduled_dates=[], members=[])
    db.add(g)
    await db.flush()
    return g


async def add_locations(db: AsyncSession, project: Project, custom: int = 1) -> None:
    """기본 위치 1개와 커스텀 위치를 추가합니다."""
    db.add(ProjectLocation(project_id=project.id, name="Holding", is_default=True, sort_order=0))
    for index in range(custom):
        db.add(ProjectLocation(project_id=project.id, name=f"Custom {index}", is_default=False, sort_order=index + 1))
    await db.flush()


def make_token(profile: Profile) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(profile.id)})


@pytest_asyncio.fixture
async def admin_token(admin: Profile) -> str:
    return make_token(admin)


@pytest_asyncio.fixture
async def in_house_token(in_house: Profile) -> str:
    return make_token(in_house)


@pytest_asyncio.fixture
async def supervisor_token(supervisor: Profile) -> str:
    return make_token(supervisor)


@pytest_asyncio.fixture
async def escort_token(escort: Profile) -> str:
    return make_token(escort)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}

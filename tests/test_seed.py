"""시드 데이터 테스트 — 레거시 배정이 마이그레이션 가능한지 확인."""

from sqlalchemy import select

from talentops.config import Settings
from talentops.models import ProjectReadiness
from talentops.services.assignment_migration_service import AssignmentMigrationService
from talentops.seed import seed_data
from tests.conftest import PROJECT_START


class TestSeedData:
    """시드 데이터 테스트"""

    async def test_seeds_once(self, db):
        assert await seed_data(db, start=PROJECT_START) is not None
        assert await seed_data(db, start=PROJECT_START) is None

    async def test_readiness_row_created(self, db):
        project, _admin = await seed_data(db, start=PROJECT_START)

        readiness = (await db.execute(
            select(ProjectReadiness).where(ProjectReadiness.project_id == project.id)
        )).scalar_one()
        assert readiness.total_talent == 2
        assert readiness.custom_location_count == 1

    async def test_legacy_data_migrates_cleanly(self, db):
        project, _admin = await seed_data(db, start=PROJECT_START)
        service = AssignmentMigrationService(Settings(MIGRATION_BATCH_DELAY_SECONDS=0))

        report = await service.migrate(db, project.id)

        # 탤런트 2명 x 3일 + 그룹 1일 (Two talent for three days plus one group day)
        assert report.rows_created == 7
        assert report.succeeded
        assert (await service.validate(db, project.id)).is_consistent

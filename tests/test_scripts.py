"""운영 스크립트 테스트 — 종료 코드와 출력."""

import argparse
import asyncio
import uuid

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from talentops.config import Settings
from talentops.database import Base
from talentops.scripts import (
    migrate_assignments,
    recalculate_readiness,
    recalculate_timecards,
    rollback_assignments,
    validate_assignments,
)
from talentops.scripts.common import EXIT_FATAL, EXIT_OK, resolve_config


def create_schema(url: str) -> None:
    async def _create() -> None:
        engine = create_async_engine(url)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(_create())


@pytest.fixture
def database_url(tmp_path) -> str:
    """스키마가 있는 빈 파일 DB (Empty file database with the schema)."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'ops.db'}"
    create_schema(url)
    return url


class TestExitCodes:
    """종료 코드 테스트"""

    def test_migrate_empty_database(self, database_url, capsys):
        assert migrate_assignments.main(["--database-url", database_url]) == EXIT_OK
        assert "Migration completed without errors" in capsys.readouterr().out

    def test_migrate_dry_run(self, database_url, capsys):
        assert migrate_assignments.main(["--database-url", database_url, "--dry-run"]) == EXIT_OK
        assert "DRY RUN" in capsys.readouterr().out

    def test_validate_empty_database(self, database_url, capsys):
        assert validate_assignments.main(["--database-url", database_url]) == EXIT_OK
        assert "Scheduled dates match the daily rows" in capsys.readouterr().out

    def test_rollback_empty_database(self, database_url):
        assert rollback_assignments.main(["--database-url", database_url, "--yes"]) == EXIT_OK

    def test_recalculate_scripts(self, database_url, capsys):
        assert recalculate_timecards.main(["--database-url", database_url]) == EXIT_OK
        assert "Checked 0 timecards" in capsys.readouterr().out
        assert recalculate_readiness.main(["--database-url", database_url]) == EXIT_OK

    def test_unknown_project_is_fatal(self, database_url, capsys):
        code = recalculate_readiness.main(["--database-url", database_url, "--project-id", str(uuid.uuid4())])
        assert code == EXIT_FATAL
        assert "ERROR:" in capsys.readouterr().err

    def test_rollback_aborted_without_confirmation(self, database_url, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda _prompt: "n")
        assert rollback_assignments.main(["--database-url", database_url]) == EXIT_OK
        assert "Aborted." in capsys.readouterr().out

    def test_unreachable_database_is_fatal(self, tmp_path, capsys):
        url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'ops.db'}"
        assert validate_assignments.main(["--database-url", url]) == EXIT_FATAL
        assert "ERROR: Database operation failed" in capsys.readouterr().err

    def test_missing_schema_is_fatal(self, tmp_path, capsys):
        url = f"sqlite+aiosqlite:///{tmp_path / 'blank.db'}"
        assert migrate_assignments.main(["--database-url", url]) == EXIT_FATAL
        assert "Batches committed before the failure are kept" in capsys.readouterr().err


class TestArguments:
    """인자 파싱 테스트"""

    def test_invalid_project_id(self):
        with pytest.raises(SystemExit) as exc_info:
            validate_assignments.main(["--project-id", "not-a-uuid"])
        assert exc_info.value.code == 2

    def test_timecard_recalculation_rejects_project_scope(self):
        with pytest.raises(SystemExit) as exc_info:
            recalculate_timecards.main(["--project-id", str(uuid.uuid4())])
        assert exc_info.value.code == 2

    def test_missing_database_url_is_fatal(self, monkeypatch, capsys):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setattr("talentops.scripts.common.settings", Settings(_env_file=None))

        assert validate_assignments.main([]) == EXIT_FATAL
        assert "DATABASE_URL is not set" in capsys.readouterr().err

    def test_database_url_from_environment_is_used(self, database_url, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", database_url)
        monkeypatch.setattr("talentops.scripts.common.settings", Settings(_env_file=None))

        config = resolve_config(argparse.Namespace(database_url=None))

        assert config.DATABASE_URL == database_url

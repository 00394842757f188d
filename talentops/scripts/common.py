"""운영 스크립트 공통 헬퍼 — 인자 파싱, DB 연결, 종료 코드.

Shared helpers for the operational scripts: common arguments, a
connectivity-checked session, and exit codes.

Exit codes:
    0: 성공 (Success)
    1: 일부 항목 실패 (Finished with per-item errors)
    2: 설정 누락 또는 DB 연결 실패 (Missing configuration or unreachable database)
"""

import argparse
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from talentops.config import Settings, settings
from talentops.database import build_engine

EXIT_OK: int = 0
EXIT_ITEM_ERRORS: int = 1
EXIT_FATAL: int = 2


class ScriptConfigError(Exception):
    """스크립트 실행 전 설정 오류 (Configuration problem detected before any work starts)."""


def base_parser(description: str) -> argparse.ArgumentParser:
    """공통 인자 파서 (Parser with --database-url and --project-id)."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--database-url",
        default=None,
        help="비동기 DB URL, 기본값은 DATABASE_URL 설정 (Async database URL; defaults to DATABASE_URL)",
    )
    parser.add_argument(
        "--project-id",
        type=UUID,
        default=None,
        help="대상 프로젝트 UUID, 생략 시 전체 (Limit to one project)",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> Settings:
    """명령행 재정의를 반영한 설정.

    Settings with command-line overrides applied. The built-in localhost
    default is not accepted: the URL must come from --database-url, the
    environment or the .env file.
    """
    database_url: str | None = getattr(args, "database_url", None)
    if not database_url and "DATABASE_URL" in settings.model_fields_set:
        database_url = settings.DATABASE_URL
    if not database_url:
        raise ScriptConfigError("DATABASE_URL is not set. Export it or pass --database-url.")
    return settings.model_copy(update={"DATABASE_URL": database_url})


@asynccontextmanager
async def script_session(config: Settings) -> AsyncIterator[AsyncSession]:
    """연결 확인 후 세션 제공 (Yield a session after checking the database answers)."""
    engine: AsyncEngine = build_engine(config.DATABASE_URL, echo=config.DEBUG)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            yield session
    finally:
        await engine.dispose()


def fatal(message: str, hint: str | None = None) -> int:
    """치명적 오류 출력 후 종료 코드 반환 (Print a fatal error and return the exit code)."""
    print(f"ERROR: {message}", file=sys.stderr)
    if hint:
        print(f"  -> {hint}", file=sys.stderr)
    return EXIT_FATAL


def connection_error(exc: Exception) -> int:
    """DB 연결/쿼리 실패 처리 (Report a connection or database failure)."""
    detail: str = str(exc.orig) if isinstance(exc, DBAPIError) and exc.orig is not None else str(exc)
    return fatal(
        f"Database operation failed: {detail}",
        "Check DATABASE_URL, network access and credentials, then re-run.",
    )


# 스크립트에서 잡는 DB/네트워크 오류 — Failures that abort a script run
FATAL_ERRORS: tuple[type[Exception], ...] = (OSError, SQLAlchemyError)

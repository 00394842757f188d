"""프로젝트 준비도 재계산 스크립트.

Recompute the readiness row of every project (or one with --project-id).

Usage:
    python -m talentops.scripts.recalculate_readiness [--project-id ID]
"""

import argparse
import asyncio
import sys

from fastapi import HTTPException

from talentops.config import Settings
from talentops.models.readiness import ProjectReadiness
from talentops.scripts.common import (
    EXIT_OK,
    FATAL_ERRORS,
    ScriptConfigError,
    base_parser,
    connection_error,
    fatal,
    resolve_config,
    script_session,
)
from talentops.services.readiness_service import readiness_service


async def run(config: Settings, args: argparse.Namespace) -> int:
    async with script_session(config) as db:
        if args.project_id is not None:
            readiness: ProjectReadiness = await readiness_service.recalculate(db, args.project_id)
            await db.commit()
            print(f"Project {args.project_id}: overall={readiness.overall_status}")
            return EXIT_OK
        count: int = await readiness_service.recalculate_all(db)
        await db.commit()
    print(f"Recalculated readiness for {count} projects.")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser: argparse.ArgumentParser = base_parser("Recalculate project readiness.")
    args: argparse.Namespace = parser.parse_args(argv)
    try:
        config: Settings = resolve_config(args)
        return asyncio.run(run(config, args))
    except ScriptConfigError as exc:
        return fatal(str(exc))
    except HTTPException as exc:
        return fatal(str(exc.detail))
    except FATAL_ERRORS as exc:
        return connection_error(exc)


if __name__ == "__main__":
    sys.exit(main())

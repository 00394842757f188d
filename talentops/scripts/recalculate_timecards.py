"""타임카드 합계 복구 스크립트.

Recompute every timecard's daily values and totals, and report how many
had drifted.

Usage:
    python -m talentops.scripts.recalculate_timecards
"""

import argparse
import asyncio
import sys

from talentops.config import Settings
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
from talentops.services.timecard_service import TimecardService


async def run(config: Settings) -> int:
    service: TimecardService = TimecardService(config)
    async with script_session(config) as db:
        checked, corrected = await service.recalculate_all(db)
        await db.commit()
    print(f"Checked {checked} timecards, corrected {corrected}.")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser: argparse.ArgumentParser = base_parser("Recalculate timecard totals.")
    args: argparse.Namespace = parser.parse_args(argv)
    if args.project_id is not None:
        parser.error("--project-id is not supported; every timecard is recalculated")
    try:
        config: Settings = resolve_config(args)
        return asyncio.run(run(config))
    except ScriptConfigError as exc:
        return fatal(str(exc))
    except FATAL_ERRORS as exc:
        return connection_error(exc)


if __name__ == "__main__":
    sys.exit(main())

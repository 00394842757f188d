"""일별 배정 롤백 스크립트 — 일별 행 삭제 및 scheduled_dates 복원.

Daily assignment rollback script.
Deletes the daily rows in scope and restores each parent's scheduled dates
from its pre-migration snapshot. Asks for confirmation unless ``--yes``.

Usage:
    python -m talentops.scripts.rollback_assignments [--project-id ID] [--yes]
"""

import argparse
import asyncio
import sys

from talentops.config import Settings
from talentops.scripts.common import (
    EXIT_ITEM_ERRORS,
    EXIT_OK,
    FATAL_ERRORS,
    ScriptConfigError,
    base_parser,
    connection_error,
    fatal,
    resolve_config,
    script_session,
)
from talentops.services.assignment_migration_service import AssignmentMigrationService, RollbackReport


def confirm(args: argparse.Namespace) -> bool:
    """삭제 전 확인 (Ask before deleting, unless --yes was given)."""
    if args.yes:
        return True
    scope: str = f"project {args.project_id}" if args.project_id else "ALL projects"
    answer: str = input(f"Delete every daily assignment row for {scope}? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def print_report(report: RollbackReport) -> None:
    """롤백 요약 출력 (Print the rollback summary)."""
    print("\n=== Daily assignment rollback ===")
    print(f"Talent daily rows deleted: {report.talent_rows_deleted}")
    print(f"Group daily rows deleted: {report.group_rows_deleted}")
    print(f"Talent schedules restored: {report.talent_restored}")
    print(f"Group schedules restored: {report.groups_restored}")
    print(f"Snapshots consumed: {report.snapshots_consumed}")
    print(f"Schedules resynced without snapshot: {report.parents_resynced}")
    if report.is_noop:
        print("\nNothing to roll back.")
    if report.missing_parents:
        print(f"\nSnapshots whose parent no longer exists ({len(report.missing_parents)}):")
        for entity_id in report.missing_parents:
            print(f"  - {entity_id}")
        print("These parents were deleted after migration; no schedule could be restored for them.")


async def run(config: Settings, args: argparse.Namespace) -> int:
    """롤백 실행 (Run the rollback and return the exit code)."""
    service: AssignmentMigrationService = AssignmentMigrationService(config)
    async with script_session(config) as db:
        report: RollbackReport = await service.rollback(db, project_id=args.project_id)
        await db.commit()
    print_report(report)
    return EXIT_ITEM_ERRORS if report.missing_parents else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser: argparse.ArgumentParser = base_parser("Roll back the daily assignment migration.")
    parser.add_argument("--yes", action="store_true", help="확인 생략 (Skip the confirmation prompt)")
    args: argparse.Namespace = parser.parse_args(argv)

    try:
        config: Settings = resolve_config(args)
        if not confirm(args):
            print("Aborted.")
            return EXIT_OK
        return asyncio.run(run(config, args))
    except ScriptConfigError as exc:
        return fatal(str(exc))
    except FATAL_ERRORS as exc:
        code: int = connection_error(exc)
        print("  -> The rollback runs in one transaction; nothing was changed.", file=sys.stderr)
        return code


if __name__ == "__main__":
    sys.exit(main())

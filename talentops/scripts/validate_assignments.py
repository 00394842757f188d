"""일별 배정 검증 스크립트 — scheduled_dates와 일별 행 일치 확인.

Daily assignment validation script. Read-only.

Usage:
    python -m talentops.scripts.validate_assignments [--project-id ID]
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
from talentops.services.assignment_migration_service import AssignmentMigrationService, ValidationReport


def _dates(values: list) -> str:
    return ", ".join(day.isoformat() for day in values) or "-"


def print_report(report: ValidationReport) -> None:
    """검증 요약 출력 (Print the validation summary)."""
    print("\n=== Daily assignment validation ===")
    print(f"Talent daily rows: {report.talent_daily_rows}")
    print(f"Group daily rows: {report.group_daily_rows}")
    print(f"Pending rollback snapshots: {report.pending_snapshots}")

    if report.unmigrated_talent or report.unmigrated_groups:
        print(
            f"\nNot migrated yet: {len(report.unmigrated_talent)} talent, "
            f"{len(report.unmigrated_groups)} groups"
        )
        print("  -> Run: python -m talentops.scripts.migrate_assignments")

    if report.mismatches:
        print(f"\nSchedule mismatches ({len(report.mismatches)}):")
        for mismatch in report.mismatches:
            print(f"  - {mismatch.entity_type} {mismatch.entity_id}")
            print(f"      scheduled: {_dates(mismatch.scheduled_dates)}")
            print(f"      daily:     {_dates(mismatch.daily_dates)}")
        print("\nNext steps:")
        print("  * Re-run migrate_assignments; it re-derives scheduled dates from the daily rows.")
        print("  * If the daily rows themselves are wrong, run rollback_assignments and migrate again.")
    else:
        print("\nScheduled dates match the daily rows.")


async def run(config: Settings, args: argparse.Namespace) -> int:
    service: AssignmentMigrationService = AssignmentMigrationService(config)
    async with script_session(config) as db:
        report: ValidationReport = await service.validate(db, project_id=args.project_id)
    print_report(report)
    return EXIT_OK if report.is_consistent else EXIT_ITEM_ERRORS


def main(argv: list[str] | None = None) -> int:
    parser: argparse.ArgumentParser = base_parser("Validate daily assignments against scheduled dates.")
    args: argparse.Namespace = parser.parse_args(argv)
    try:
        config: Settings = resolve_config(args)
        return asyncio.run(run(config, args))
    except ScriptConfigError as exc:
        return fatal(str(exc))
    except FATAL_ERRORS as exc:
        return connection_error(exc)


if __name__ == "__main__":
    sys.exit(main())

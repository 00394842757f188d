"""일별 배정 마이그레이션 스크립트 — 기간 단위 에스코트 배정을 일별 행으로 변환.

Daily assignment migration script.
Converts every period-level escort assignment into per-day rows. Safe to
re-run: rows that already exist are left alone.

Usage:
    python -m talentops.scripts.migrate_assignments [--project-id ID] [--dry-run]
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
from talentops.services.assignment_migration_service import (
    AssignmentMigrationService,
    EntityStats,
    MigrationReport,
)


def print_report(report: MigrationReport) -> None:
    """마이그레이션 요약 출력 (Print the migration summary)."""
    mode: str = "DRY RUN (nothing written)" if report.dry_run else "APPLIED"
    print(f"\n=== Daily assignment migration: {mode} ===")
    for label, stats in (("Talent", report.talent), ("Groups", report.groups)):
        _print_stats(label, stats)
    verb: str = "would be created" if report.dry_run else "created"
    print(f"Daily rows {verb}: {report.rows_created}")
    print(f"Daily rows already present: {report.rows_existing}")
    if not report.dry_run:
        print(f"Snapshots taken: {report.snapshots_taken}")

    if report.issues:
        print(f"\nIssues ({len(report.issues)}):")
        for issue in report.issues:
            day: str = f" {issue.assignment_date.isoformat()}" if issue.assignment_date else ""
            escort: str = f" escort={issue.escort_id}" if issue.escort_id else ""
            print(f"  - {issue.entity_type} {issue.entity_id}{day}{escort}: {issue.reason}")
        print("\nNext steps:")
        print("  * Check the error messages above, fix the data, then re-run this script.")
        print("    Rows that were already created are skipped on the next run.")
        print("  * To undo everything, run: python -m talentops.scripts.rollback_assignments")
    elif not report.dry_run:
        print("\nMigration completed without errors.")
        print("Verify with: python -m talentops.scripts.validate_assignments")


def _print_stats(label: str, stats: EntityStats) -> None:
    print(
        f"{label}: processed={stats.processed} migrated={stats.migrated} "
        f"skipped={stats.skipped} errors={stats.errors}"
    )


async def run(config: Settings, args: argparse.Namespace) -> int:
    """마이그레이션 실행 (Run the migration and return the exit code)."""
    service: AssignmentMigrationService = AssignmentMigrationService(config)
    async with script_session(config) as db:
        report: MigrationReport = await service.migrate(
            db, project_id=args.project_id, dry_run=args.dry_run, commit_batches=True,
        )
        if args.dry_run:
            await db.rollback()
        else:
            await db.commit()
    print_report(report)
    return EXIT_OK if report.succeeded else EXIT_ITEM_ERRORS


def main(argv: list[str] | None = None) -> int:
    parser: argparse.ArgumentParser = base_parser("Migrate period escort assignments to daily rows.")
    parser.add_argument("--dry-run", action="store_true", help="변경 없이 결과만 출력 (Report without writing)")
    args: argparse.Namespace = parser.parse_args(argv)

    try:
        config: Settings = resolve_config(args)
        return asyncio.run(run(config, args))
    except ScriptConfigError as exc:
        return fatal(str(exc))
    except FATAL_ERRORS as exc:
        code: int = connection_error(exc)
        print("  -> Batches committed before the failure are kept. Re-run to continue,", file=sys.stderr)
        print("     or run rollback_assignments to undo them.", file=sys.stderr)
        return code


if __name__ == "__main__":
    sys.exit(main())

"""배정 마이그레이션 서비스 — 기간 단위 에스코트 배정을 일별 행으로 변환.

Assignment Migration Service — Converts period-level escort assignments
into per-day rows, validates the result and rolls it back.

Forward migration:
    - talent: one row per scheduled date with the assignment's escort
    - group: one row per (scheduled date, escort) for the union of the
      legacy ``assigned_escort_id`` / ``assigned_escort_ids`` fields
    - existing rows (same natural key) are left alone, so re-runs are no-ops
    - out-of-range dates, dates the talent already has in another project
      and failed rows are reported and skipped; each
      row is inserted inside a SAVEPOINT so one failure never aborts the batch
    - a snapshot of each parent is taken before its first migration

Rollback deletes every daily row in scope, restores scheduled dates
from the snapshots and resyncs parents that had rows but no snapshot,
then deletes the snapshots.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Sequence
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentops.config import Settings, settings as default_settings
from talentops.models.daily_assignment import AssignmentMigrationSnapshot, TalentDailyAssignment
from talentops.models.project import Project
from talentops.models.talent import TalentGroup, TalentProjectAssignment
from talentops.repositories.daily_assignment_repository import (
    group_daily_repository,
    snapshot_repository,
    talent_daily_repository,
)
from talentops.repositories.project_repository import profile_repository, project_repository
from talentops.repositories.talent_repository import talent_assignment_repository, talent_group_repository
from talentops.services.daily_assignment_service import daily_assignment_service
from talentops.utils.batching import RateLimiter
from talentops.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ReconcileIssue:
    """마이그레이션 중 거부/실패한 항목 (A rejected date or failed row)."""

    entity_type: str
    entity_id: UUID
    reason: str
    assignment_date: date | None = None
    escort_id: UUID | None = None


@dataclass
class EntityStats:
    """엔티티 유형별 집계 (Per entity type counters)."""

    processed: int = 0
    migrated: int = 0
    skipped: int = 0
    errors: int = 0


@dataclass
class MigrationReport:
    """마이그레이션 결과 (Forward migration result)."""

    dry_run: bool = False
    talent: EntityStats = field(default_factory=EntityStats)
    groups: EntityStats = field(default_factory=EntityStats)
    rows_created: int = 0
    rows_existing: int = 0
    snapshots_taken: int = 0
    issues: list[ReconcileIssue] = field(default_factory=list)

    @property
    def rows_failed(self) -> int:
        return sum(1 for issue in self.issues if issue.assignment_date is not None)

    @property
    def succeeded(self) -> bool:
        return not self.issues

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = asdict(self)
        data["rows_failed"] = self.rows_failed
        return data


@dataclass
class RollbackReport:
    """롤백 결과 (Rollback result)."""

    talent_rows_deleted: int = 0
    group_rows_deleted: int = 0
    talent_restored: int = 0
    groups_restored: int = 0
    snapshots_consumed: int = 0
    parents_resynced: int = 0
    missing_parents: list[UUID] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not (self.talent_rows_deleted or self.group_rows_deleted or self.snapshots_consumed)


@dataclass
class ScheduleMismatch:
    """scheduled_dates와 일별 행 불일치 (Parent whose scheduled dates disagree with its rows)."""

    entity_type: str
    entity_id: UUID
    scheduled_dates: list[date]
    daily_dates: list[date]


@dataclass
class ValidationReport:
    """검증 결과 (Validation result)."""

    talent_daily_rows: int = 0
    group_daily_rows: int = 0
    pending_snapshots: int = 0
    mismatches: list[ScheduleMismatch] = field(default_factory=list)
    unmigrated_talent: list[UUID] = field(default_factory=list)
    unmigrated_groups: list[UUID] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.mismatches


class AssignmentMigrationService:
    """배정 마이그레이션 서비스.

    Assignment migration service. Batch pacing comes from the given settings.
    """

    def __init__(self, config: Settings = default_settings) -> None:
        self.config: Settings = config

    def _limiter(self) -> RateLimiter:
        return RateLimiter(self.config.MIGRATION_BATCH_SIZE, self.config.MIGRATION_BATCH_DELAY_SECONDS)

    async def _project(self, db: AsyncSession, cache: dict[UUID, Project | None], project_id: UUID) -> Project | None:
        if project_id not in cache:
            cache[project_id] = await project_repository.get_by_id(db, project_id)
        return cache[project_id]

    async def _snapshot(
        self,
        db: AsyncSession,
        report: MigrationReport,
        entity_type: str,
        entity_id: UUID,
        project_id: UUID,
        scheduled_dates: list[date],
        escort_ids: list[UUID],
    ) -> None:
        """첫 마이그레이션 전에만 스냅샷 (Snapshot a parent unless one already exists)."""
        if await snapshot_repository.get_for_entity(db, entity_type, entity_id) is not None:
            return
        db.add(AssignmentMigrationSnapshot(
            entity_type=entity_type,
            entity_id=entity_id,
            project_id=project_id,
            scheduled_dates=list(scheduled_dates),
            escort_ids=list(escort_ids),
        ))
        await db.flush()
        report.snapshots_taken += 1

    async def _insert_row(self, db: AsyncSession, repository: Any, data: dict[str, Any]) -> None:
        """SAVEPOINT 안에서 한 행 삽입 (Insert one row inside a savepoint)."""
        async with db.begin_nested():
            if await profile_repository.get_by_id(db, data["escort_id"]) is None:
                raise NotFoundError(f"Escort {data['escort_id']} not found")
            await repository.create(db, data)

    # === 정방향 마이그레이션 (Forward migration) ===

    async def migrate(
        self,
        db: AsyncSession,
        project_id: UUID | None = None,
        dry_run: bool = False,
        commit_batches: bool = False,
    ) -> MigrationReport:
        """기간 단위 배정을 일별 행으로 변환합니다.

        Convert period-level escort assignments into daily rows.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            project_id: 대상 프로젝트, None이면 전체 (Scope; None means every project)
            dry_run: True면 쓰기 없이 결과만 계산 (Report only, write nothing)
            commit_batches: 배치마다 커밋 (Commit after every batch, for long runs)

        Returns:
            MigrationReport: 집계와 문제 목록 (Counters and reported issues)
        """
        report: MigrationReport = MigrationReport(dry_run=dry_run)
        projects: dict[UUID, Project | None] = {}

        assignments: Sequence[TalentProjectAssignment] = await talent_assignment_repository.get_in_scope(db, project_id)
        limiter: RateLimiter = self._limiter()
        async for batch in limiter.batches(assignments):
            for assignment in batch:
                await self._migrate_talent(db, report, projects, assignment)
            if commit_batches and not dry_run:
                await db.commit()

        groups: Sequence[TalentGroup] = await talent_group_repository.get_in_scope(db, project_id)
        async for batch in limiter.batches(groups):
            for group in batch:
                await self._migrate_group(db, report, projects, group)
            if commit_batches and not dry_run:
                await db.commit()

        logger.info(
            "Assignment migration finished: created=%d existing=%d issues=%d dry_run=%s",
            report.rows_created, report.rows_existing, len(report.issues), dry_run,
        )
        return report

    async def _migrate_talent(
        self,
        db: AsyncSession,
        report: MigrationReport,
        projects: dict[UUID, Project | None],
        assignment: TalentProjectAssignment,
    ) -> None:
        stats: EntityStats = report.talent
        stats.processed += 1
        if assignment.escort_id is None or not assignment.scheduled_dates:
            stats.skipped += 1
            return

        project: Project | None = await self._project(db, projects, assignment.project_id)
        if project is None:
            stats.errors += 1
            report.issues.append(ReconcileIssue("talent", assignment.id, "Project not found"))
            return

        original_dates: list[date] = list(assignment.scheduled_dates)
        if not report.dry_run:
            await self._snapshot(
                db, report, "talent", assignment.id, assignment.project_id, original_dates, [assignment.escort_id]
            )

        issues_before: int = len(report.issues)
        created: int = 0
        for assignment_date in original_dates:
            if not project.contains(assignment_date):
                report.issues.append(ReconcileIssue(
                    "talent", assignment.id,
                    f"Date outside project range {project.start_date} to {project.end_date}",
                    assignment_date, assignment.escort_id,
                ))
                continue
            existing: TalentDailyAssignment | None = await talent_daily_repository.get_for_day(
                db, assignment.talent_id, assignment_date
            )
            if existing is not None:
                if existing.project_id != assignment.project_id:
                    report.issues.append(ReconcileIssue(
                        "talent", assignment.id,
                        "Talent already assigned on this date in another project",
                        assignment_date, assignment.escort_id,
                    ))
                else:
                    report.rows_existing += 1
                continue
            if report.dry_run:
                created += 1
                continue
            try:
                await self._insert_row(db, talent_daily_repository, {
                    "talent_id": assignment.talent_id,
                    "project_id": assignment.project_id,
                    "assignment_date": assignment_date,
                    "escort_id": assignment.escort_id,
                })
                created += 1
            except (SQLAlchemyError, HTTPException) as exc:
                detail: str = exc.detail if isinstance(exc, HTTPException) else str(exc.__cause__ or exc)
                logger.warning("Talent assignment %s on %s failed: %s", assignment.id, assignment_date, detail)
                report.issues.append(ReconcileIssue(
                    "talent", assignment.id, detail, assignment_date, assignment.escort_id,
                ))

        report.rows_created += created
        if created:
            stats.migrated += 1
        if len(report.issues) > issues_before:
            stats.errors += 1
        if not report.dry_run:
            await daily_assignment_service.sync_talent_scheduled_dates(db, assignment)

    async def _migrate_group(
        self,
        db: AsyncSession,
        report: MigrationReport,
        projects: dict[UUID, Project | None],
        group: TalentGroup,
    ) -> None:
        stats: EntityStats = report.groups
        stats.processed += 1
        escort_ids: list[UUID] = group.legacy_escort_ids()
        if not escort_ids or not group.scheduled_dates:
            stats.skipped += 1
            return

        project: Project | None = await self._project(db, projects, group.project_id)
        if project is None:
            stats.errors += 1
            report.issues.append(ReconcileIssue("group", group.id, "Project not found"))
            return

        original_dates: list[date] = list(group.scheduled_dates)
        if not report.dry_run:
            await self._snapshot(db, report, "group", group.id, group.project_id, original_dates, escort_ids)

        issues_before: int = len(report.issues)
        created: int = 0
        for assignment_date in original_dates:
            if not project.contains(assignment_date):
                report.issues.append(ReconcileIssue(
                    "group", group.id,
                    f"Date outside project range {project.start_date} to {project.end_date}",
                    assignment_date,
                ))
                continue
            for escort_id in escort_ids:
                if await group_daily_repository.exists_row(db, group.id, assignment_date, escort_id):
                    report.rows_existing += 1
                    continue
                if report.dry_run:
                    created += 1
                    continue
                try:
                    await self._insert_row(db, group_daily_repository, {
                        "group_id": group.id,
                        "project_id": group.project_id,
                        "assignment_date": assignment_date,
                        "escort_id": escort_id,
                    })
                    created += 1
                except (SQLAlchemyError, HTTPException) as exc:
                    detail: str = exc.detail if isinstance(exc, HTTPException) else str(exc.__cause__ or exc)
                    logger.warning("Group %s on %s with escort %s failed: %s", group.id, assignment_date, escort_id, detail)
                    report.issues.append(ReconcileIssue("group", group.id, detail, assignment_date, escort_id))

        report.rows_created += created
        if created:
            stats.migrated += 1
        if len(report.issues) > issues_before:
            stats.errors += 1
        if not report.dry_run:
            await daily_assignment_service.sync_group_scheduled_dates(db, group)

    # === 롤백 (Rollback) ===

    async def rollback(self, db: AsyncSession, project_id: UUID | None = None) -> RollbackReport:
        """마이그레이션을 되돌립니다.

        Delete every daily row in scope and restore each parent's scheduled
        dates from its snapshot. Parents that had daily rows but no snapshot
        are resynced from the (now empty) rows. Consumed snapshots are
        deleted, so running it again changes nothing.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            project_id: 대상 프로젝트, None이면 전체 (Scope; None means every project)

        Returns:
            RollbackReport: 삭제/복원 집계 (Deleted and restored counters)
        """
        report: RollbackReport = RollbackReport()
        snapshots: Sequence[AssignmentMigrationSnapshot] = await snapshot_repository.get_in_scope(db, project_id)
        talent_parents: list[tuple[UUID, UUID]] = await talent_daily_repository.get_parents_in_scope(db, project_id)
        group_parents: list[UUID] = await group_daily_repository.get_group_ids_in_scope(db, project_id)
        snapshotted: set[UUID] = {snapshot.entity_id for snapshot in snapshots}

        report.talent_rows_deleted = await talent_daily_repository.delete_in_scope(db, project_id)
        report.group_rows_deleted = await group_daily_repository.delete_in_scope(db, project_id)

        async for batch in self._limiter().batches(snapshots):
            for snapshot in batch:
                parent: TalentProjectAssignment | TalentGroup | None
                if snapshot.entity_type == "talent":
                    parent = await talent_assignment_repository.get_by_id(db, snapshot.entity_id)
                else:
                    parent = await talent_group_repository.get_by_id(db, snapshot.entity_id)

                if parent is None:
                    report.missing_parents.append(snapshot.entity_id)
                else:
                    parent.scheduled_dates = list(snapshot.scheduled_dates)
                    if snapshot.entity_type == "talent":
                        report.talent_restored += 1
                    else:
                        report.groups_restored += 1
                await db.delete(snapshot)
                report.snapshots_consumed += 1
            await db.flush()

        # 스냅샷 없이 일별 행만 있던 부모는 빈 행 집합으로 재계산 (Parents with rows but no snapshot)
        for parent_project_id, talent_id in talent_parents:
            assignment: TalentProjectAssignment | None = await talent_assignment_repository.get_for_talent(
                db, parent_project_id, talent_id
            )
            if assignment is not None and assignment.id not in snapshotted:
                await daily_assignment_service.sync_talent_scheduled_dates(db, assignment)
                report.parents_resynced += 1
        for group_id in group_parents:
            if group_id in snapshotted:
                continue
            group: TalentGroup | None = await talent_group_repository.get_by_id(db, group_id)
            if group is not None:
                await daily_assignment_service.sync_group_scheduled_dates(db, group)
                report.parents_resynced += 1

        logger.info(
            "Assignment rollback finished: talent_rows=%d group_rows=%d restored=%d resynced=%d",
            report.talent_rows_deleted, report.group_rows_deleted,
            report.talent_restored + report.groups_restored, report.parents_resynced,
        )
        return report

    # === 검증 (Validation) ===

    async def validate(self, db: AsyncSession, project_id: UUID | None = None) -> ValidationReport:
        """일별 행과 scheduled_dates의 일치 여부를 검사합니다.

        Compare every parent's scheduled dates with its daily rows and list
        parents that still only have legacy escort data.
        """
        report: ValidationReport = ValidationReport(
            talent_daily_rows=await talent_daily_repository.count_in_scope(db, project_id),
            group_daily_rows=await group_daily_repository.count_in_scope(db, project_id),
            pending_snapshots=len(await snapshot_repository.get_in_scope(db, project_id)),
        )

        for assignment in await talent_assignment_repository.get_in_scope(db, project_id):
            daily_dates: list[date] = await talent_daily_repository.get_dates(db, assignment.talent_id, assignment.project_id)
            scheduled: list[date] = list(assignment.scheduled_dates)
            if not daily_dates and scheduled:
                # 에스코트 없는 일정은 마이그레이션 대상이 아님 (Escort-less schedules have nothing to migrate)
                if assignment.escort_id is not None:
                    report.unmigrated_talent.append(assignment.id)
            elif daily_dates != scheduled:
                report.mismatches.append(ScheduleMismatch("talent", assignment.id, scheduled, daily_dates))

        for group in await talent_group_repository.get_in_scope(db, project_id):
            daily_dates = await group_daily_repository.get_dates(db, group.id)
            scheduled = list(group.scheduled_dates)
            if not daily_dates and scheduled:
                if group.legacy_escort_ids():
                    report.unmigrated_groups.append(group.id)
            elif daily_dates != scheduled:
                report.mismatches.append(ScheduleMismatch("group", group.id, scheduled, daily_dates))

        return report


# 싱글턴 인스턴스 — Singleton instance
assignment_migration_service: AssignmentMigrationService = AssignmentMigrationService()

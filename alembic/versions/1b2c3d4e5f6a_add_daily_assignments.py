"""add_daily_assignments

Revision ID: 1b2c3d4e5f6a
Revises: 0a1b2c3d4e5f
Create Date: 2026-09-08 10:00:00.000000

일별 에스코트 배정 테이블 및 마이그레이션 스냅샷 생성.
Add per-day escort assignment tables and the migration snapshot table.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '1b2c3d4e5f6a'
down_revision: Union[str, None] = '0a1b2c3d4e5f'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # talent_daily_assignments — 탤런트당 하루 에스코트 1명 (one escort per talent per day)
    op.create_table(
        'talent_daily_assignments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('talent_id', UUID(as_uuid=True), sa.ForeignKey('talent.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('assignment_date', sa.Date(), nullable=False),
        sa.Column('escort_id', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('talent_id', 'assignment_date', name='uq_talent_daily_assignment'),
    )
    op.create_index('ix_talent_daily_project_date', 'talent_daily_assignments', ['project_id', 'assignment_date'])
    op.create_index('ix_talent_daily_escort_date', 'talent_daily_assignments', ['escort_id', 'assignment_date'])

    # group_daily_assignments — (그룹, 날짜, 에스코트)당 1행 (one row per group, day and escort)
    op.create_table(
        'group_daily_assignments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('group_id', UUID(as_uuid=True), sa.ForeignKey('talent_groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('assignment_date', sa.Date(), nullable=False),
        sa.Column('escort_id', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('group_id', 'assignment_date', 'escort_id', name='uq_group_daily_assignment'),
    )
    op.create_index('ix_group_daily_project_date', 'group_daily_assignments', ['project_id', 'assignment_date'])
    op.create_index('ix_group_daily_escort_date', 'group_daily_assignments', ['escort_id', 'assignment_date'])

    # assignment_migration_snapshots — 롤백용 원본 일정 (pre-migration schedule for rollback)
    op.create_table(
        'assignment_migration_snapshots',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('entity_type', sa.String(10), nullable=False),
        sa.Column('entity_id', UUID(as_uuid=True), nullable=False),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('scheduled_dates', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('escort_ids', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('entity_type', 'entity_id', name='uq_assignment_migration_snapshot'),
    )


def downgrade() -> None:
    op.drop_table('assignment_migration_snapshots')
    op.drop_index('ix_group_daily_escort_date', table_name='group_daily_assignments')
    op.drop_index('ix_group_daily_project_date', table_name='group_daily_assignments')
    op.drop_table('group_daily_assignments')
    op.drop_index('ix_talent_daily_escort_date', table_name='talent_daily_assignments')
    op.drop_index('ix_talent_daily_project_date', table_name='talent_daily_assignments')
    op.drop_table('talent_daily_assignments')

"""add_project_readiness

Revision ID: 3d4e5f6a7b8c
Revises: 2c3d4e5f6a7b
Create Date: 2026-09-22 11:00:00.000000

프로젝트 준비도 테이블 생성 (project당 1행).
Add the project readiness table (one row per project).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '3d4e5f6a7b8c'
down_revision: Union[str, None] = '2c3d4e5f6a7b'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

AREAS: tuple[str, ...] = ('locations', 'roles', 'team', 'talent')


def upgrade() -> None:
    columns: list[sa.Column] = [
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('custom_location_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('custom_role_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_staff_assigned', sa.Integer(), server_default='0', nullable=False),
        sa.Column('supervisor_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('escort_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('coordinator_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_talent', sa.Integer(), server_default='0', nullable=False),
    ]
    # 영역별 확정 플래그/시각/확정자 — Finalization flag, time and actor per area
    for area in AREAS:
        columns += [
            sa.Column(f'{area}_finalized', sa.Boolean(), server_default=sa.text('false'), nullable=False),
            sa.Column(f'{area}_finalized_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column(f'{area}_finalized_by', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        ]
    columns += [
        sa.Column('locations_status', sa.String(20), server_default='default-only', nullable=False),
        sa.Column('roles_status', sa.String(20), server_default='default-only', nullable=False),
        sa.Column('team_status', sa.String(20), server_default='none', nullable=False),
        sa.Column('talent_status', sa.String(20), server_default='none', nullable=False),
        sa.Column('overall_status', sa.String(20), server_default='getting-started', nullable=False),
        sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]

    op.create_table(
        'project_readiness',
        *columns,
        sa.CheckConstraint(
            "locations_status IN ('default-only', 'configured', 'finalized')",
            name='ck_project_readiness_locations_status',
        ),
        sa.CheckConstraint(
            "roles_status IN ('default-only', 'configured', 'finalized')",
            name='ck_project_readiness_roles_status',
        ),
        sa.CheckConstraint(
            "team_status IN ('none', 'partial', 'finalized')",
            name='ck_project_readiness_team_status',
        ),
        sa.CheckConstraint(
            "talent_status IN ('none', 'partial', 'finalized')",
            name='ck_project_readiness_talent_status',
        ),
        sa.CheckConstraint(
            "overall_status IN ('getting-started', 'operational', 'production-ready')",
            name='ck_project_readiness_overall_status',
        ),
    )


def downgrade() -> None:
    op.drop_table('project_readiness')

"""base_schema

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-09-01 09:00:00.000000

기본 스키마: 프로필, 프로젝트 구성, 탤런트, 탤런트 그룹.
Base schema: profiles, project configuration, talent and talent groups.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '0a1b2c3d4e5f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # profiles — 호스팅 인증 사용자와 1:1 (one row per authenticated user)
    op.create_table(
        'profiles',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('role', sa.String(30), server_default='talent_escort', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "role IN ('admin', 'in_house', 'supervisor', 'coordinator', 'talent_escort')",
            name='ck_profiles_role',
        ),
    )

    # projects — 프로덕션 기간 (production date range)
    op.create_table(
        'projects',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), server_default='prep'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('end_date >= start_date', name='ck_projects_date_range'),
    )

    op.create_table(
        'project_locations',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('is_default', sa.Boolean(), server_default=sa.text('false')),
        sa.Column('sort_order', sa.Integer(), server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_project_locations_project', 'project_locations', ['project_id'])

    op.create_table(
        'project_role_templates',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(30), nullable=False),
        sa.Column('display_name', sa.String(100), nullable=False),
        sa.Column('base_pay_rate', sa.Numeric(10, 2), server_default='0'),
        sa.Column('is_default', sa.Boolean(), server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_project_role_templates_project', 'project_role_templates', ['project_id'])

    # team_assignments — 프로젝트별 스태프 역할 및 시급 (staff role and pay rate per project)
    op.create_table(
        'team_assignments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(30), nullable=False),
        sa.Column('pay_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('project_id', 'user_id', name='uq_team_assignment_project_user'),
    )

    op.create_table(
        'talent',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # talent_project_assignments — 기간 단위 에스코트 배정 (legacy period-level escort)
    op.create_table(
        'talent_project_assignments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('talent_id', UUID(as_uuid=True), sa.ForeignKey('talent.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('escort_id', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('scheduled_dates', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('status', sa.String(20), server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('talent_id', 'project_id', name='uq_talent_project_assignment'),
    )
    op.create_index('ix_talent_project_assignments_project', 'talent_project_assignments', ['project_id'])

    op.create_table(
        'talent_groups',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('group_name', sa.String(200), nullable=False),
        sa.Column('assigned_escort_id', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('assigned_escort_ids', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('scheduled_dates', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('point_of_contact_name', sa.String(200), nullable=True),
        sa.Column('point_of_contact_phone', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('project_id', 'group_name', name='uq_talent_group_project_name'),
    )

    op.create_table(
        'talent_group_members',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('group_id', UUID(as_uuid=True), sa.ForeignKey('talent_groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('sort_order', sa.Integer(), server_default='0'),
    )
    op.create_index('ix_talent_group_members_group', 'talent_group_members', ['group_id'])


def downgrade() -> None:
    op.drop_table('talent_group_members')
    op.drop_table('talent_groups')
    op.drop_table('talent_project_assignments')
    op.drop_table('talent')
    op.drop_table('team_assignments')
    op.drop_table('project_role_templates')
    op.drop_table('project_locations')
    op.drop_table('projects')
    op.drop_table('profiles')

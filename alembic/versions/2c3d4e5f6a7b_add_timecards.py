"""add_timecards

Revision ID: 2c3d4e5f6a7b
Revises: 1b2c3d4e5f6a
Create Date: 2026-09-15 14:00:00.000000

정규화된 타임카드: 헤더, 일별 항목, 필드 단위 감사 로그.
Normalized timecards: headers, daily entries and the per-field audit log.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '2c3d4e5f6a7b'
down_revision: Union[str, None] = '1b2c3d4e5f6a'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # timecard_headers — 기간 단위 타임카드 (one timecard per user, project and period start)
    op.create_table(
        'timecard_headers',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', UUID(as_uuid=True), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), server_default='draft', nullable=False),
        sa.Column('period_start_date', sa.Date(), nullable=False),
        sa.Column('period_end_date', sa.Date(), nullable=False),
        sa.Column('total_hours', sa.Numeric(8, 2), server_default='0', nullable=False),
        sa.Column('total_break_duration', sa.Numeric(8, 2), server_default='0', nullable=False),
        sa.Column('total_pay', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('pay_rate', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_by', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('rejected_fields', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('edit_comments', sa.Text(), nullable=True),
        sa.Column('admin_edited', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('last_edited_by', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('edit_type', sa.String(30), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'project_id', 'period_start_date', name='uq_timecard_header_user_project_period'),
        sa.CheckConstraint('period_end_date >= period_start_date', name='ck_timecard_headers_period'),
        sa.CheckConstraint(
            "status IN ('draft', 'submitted', 'approved', 'rejected')",
            name='ck_timecard_headers_status',
        ),
    )
    op.create_index('ix_timecard_headers_project_status', 'timecard_headers', ['project_id', 'status'])

    # timecard_daily_entries — 근무일당 1행 (one row per work date)
    op.create_table(
        'timecard_daily_entries',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('timecard_header_id', UUID(as_uuid=True), sa.ForeignKey('timecard_headers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('check_in_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('check_out_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('break_start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('break_end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hours_worked', sa.Numeric(6, 2), server_default='0', nullable=False),
        sa.Column('break_duration', sa.Numeric(6, 2), server_default='0', nullable=False),
        sa.Column('daily_pay', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('timecard_header_id', 'work_date', name='uq_timecard_entry_header_date'),
        sa.CheckConstraint(
            'hours_worked >= 0 AND break_duration >= 0 AND daily_pay >= 0',
            name='ck_timecard_entries_non_negative',
        ),
    )

    # timecard_audit_log — 변경 필드당 1행, change_id로 묶음 (one row per changed field)
    op.create_table(
        'timecard_audit_log',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('timecard_id', UUID(as_uuid=True), sa.ForeignKey('timecard_headers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('change_id', UUID(as_uuid=True), nullable=False),
        sa.Column('field_name', sa.String(50), nullable=False),
        sa.Column('old_value', sa.Text(), nullable=True),
        sa.Column('new_value', sa.Text(), nullable=True),
        sa.Column('changed_by', UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('action_type', sa.String(20), nullable=False),
        sa.Column('work_date', sa.Date(), nullable=True),
        sa.CheckConstraint(
            "action_type IN ('user_edit', 'admin_edit', 'rejection_edit')",
            name='ck_timecard_audit_action_type',
        ),
    )
    op.create_index('ix_timecard_audit_log_timecard_changed', 'timecard_audit_log', ['timecard_id', 'changed_at'])


def downgrade() -> None:
    op.drop_index('ix_timecard_audit_log_timecard_changed', table_name='timecard_audit_log')
    op.drop_table('timecard_audit_log')
    op.drop_table('timecard_daily_entries')
    op.drop_index('ix_timecard_headers_project_status', table_name='timecard_headers')
    op.drop_table('timecard_headers')

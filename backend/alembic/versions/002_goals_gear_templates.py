"""Add goals, gear, plan templates, profile details and message reactions

Revision ID: 002_goals_gear_templates
Revises: 001_initial
Create Date: 2026-10-19

Adds:
- User: birth_date, gender, weight, height, bio, location, heart-rate settings
- Message: reactions
- New tables: plan_templates, template_sessions, goals, gear, activity_gear
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '002_goals_gear_templates'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

HR_COLUMNS = ('hr_max', 'hr_rest', 'hr_zone1', 'hr_zone2', 'hr_zone3', 'hr_zone4', 'hr_zone5')


def upgrade() -> None:
    # === User table: profile details ===
    op.add_column('users', sa.Column('birth_date', sa.DateTime(), nullable=True))
    op.add_column('users', sa.Column('gender', sa.String(10), nullable=True))
    op.add_column('users', sa.Column('weight', sa.Float(), nullable=True))
    op.add_column('users', sa.Column('height', sa.Float(), nullable=True))
    op.add_column('users', sa.Column('bio', sa.Text(), nullable=True))
    op.add_column('users', sa.Column('location', sa.String(100), nullable=True))
    for column in HR_COLUMNS:
        op.add_column('users', sa.Column(column, sa.Integer(), nullable=True))

    # === Messages: reactions ===
    op.add_column('messages', sa.Column('reactions', sa.JSON(), nullable=False, server_default='[]'))

    # === Plan templates ===
    op.create_table(
        'plan_templates',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('coach_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_plan_templates_coach_id', 'plan_templates', ['coach_id'])

    op.create_table(
        'template_sessions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('template_id', sa.String(36), sa.ForeignKey('plan_templates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_offset', sa.Integer(), nullable=False),
        sa.Column('session_type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('target_distance', sa.Float(), nullable=True),
        sa.Column('target_duration', sa.Integer(), nullable=True),
        sa.Column('target_pace', sa.Float(), nullable=True),
    )
    op.create_index('ix_template_sessions_template_id', 'template_sessions', ['template_id'])

    # === Goals ===
    op.create_table(
        'goals',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('goal_type', sa.String(20), nullable=False),
        sa.Column('period', sa.String(10), nullable=False),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('target_value', sa.Float(), nullable=False),
        sa.Column('current_value', sa.Float(), nullable=False, server_default='0'),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('notify_at_50', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notify_at_75', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('notify_at_100', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_milestone', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_goals_user_id', 'goals', ['user_id'])
    op.create_index('ix_goals_status', 'goals', ['status'])

    # === Gear ===
    op.create_table(
        'gear',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('gear_type', sa.String(20), nullable=False),
        sa.Column('brand', sa.String(50), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('max_distance', sa.Float(), nullable=True),
        sa.Column('purchase_date', sa.DateTime(), nullable=True),
        sa.Column('retired_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_gear_user_id', 'gear', ['user_id'])
    op.create_index('ix_gear_status', 'gear', ['status'])

    op.create_table(
        'activity_gear',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('activity_id', sa.String(36), sa.ForeignKey('activities.id', ondelete='CASCADE'), nullable=False),
        sa.Column('gear_id', sa.String(36), sa.ForeignKey('gear.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('activity_id', 'gear_id', name='uq_activity_gear'),
    )
    op.create_index('ix_activity_gear_activity_id', 'activity_gear', ['activity_id'])
    op.create_index('ix_activity_gear_gear_id', 'activity_gear', ['gear_id'])


def downgrade() -> None:
    op.drop_table('activity_gear')
    op.drop_table('gear')
    op.drop_table('goals')
    op.drop_table('template_sessions')
    op.drop_table('plan_templates')

    op.drop_column('messages', 'reactions')

    for column in reversed(HR_COLUMNS):
        op.drop_column('users', column)
    for column in ('location', 'bio', 'height', 'weight', 'gender', 'birth_date'):
        op.drop_column('users', column)

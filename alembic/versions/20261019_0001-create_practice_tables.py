"""create_practice_tables

Revision ID: 3f1c9a7d2b01
Revises:
Create Date: 2026-10-19 00:01:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b01'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True):
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True))
    return columns


def upgrade() -> None:
    # Clients and the people around them
    op.create_table(
        'clients',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('original_name', sa.String(), nullable=True),
        sa.Column('unique_identifier', sa.String(length=6), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('preferred_language', sa.String(), nullable=True),
        sa.Column('contact_email', sa.String(), nullable=True),
        sa.Column('contact_phone', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('medical_history', sa.Text(), nullable=True),
        sa.Column('communication_needs', sa.Text(), nullable=True),
        sa.Column('therapy_preferences', sa.Text(), nullable=True),
        sa.Column('funds_management', sa.String(), nullable=True),
        sa.Column('ndis_funds', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('onboarding_status', sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clients_unique_identifier', 'clients', ['unique_identifier'])

    op.create_table(
        'allies',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('relationship_type', sa.String(), nullable=False),
        sa.Column('preferred_language', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('access_therapeutics', sa.Boolean(), nullable=False),
        sa.Column('access_financials', sa.Boolean(), nullable=False),
        sa.Column('archived', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_allies_client_id', 'allies', ['client_id'])

    op.create_table(
        'clinicians',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('specialization', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'client_clinicians',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('clinician_id', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('assigned_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['clinician_id'], ['clinicians.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('client_id', 'clinician_id', name='uq_client_clinician')
    )
    op.create_index('ix_client_clinicians_client_id', 'client_clinicians', ['client_id'])
    op.create_index('ix_client_clinicians_clinician_id', 'client_clinicians', ['clinician_id'])

    # Goals
    op.create_table(
        'goals',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('importance_level', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_goals_client_id', 'goals', ['client_id'])

    op.create_table(
        'subgoals',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('goal_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('completion_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['goal_id'], ['goals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_subgoals_goal_id', 'subgoals', ['goal_id'])

    op.create_table(
        'strategies',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('effectiveness', sa.Integer(), nullable=True),
        sa.Column('goal_id', sa.String(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['goal_id'], ['goals.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_strategies_goal_id', 'strategies', ['goal_id'])

    # Budget
    op.create_table(
        'budget_settings',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('plan_serial_number', sa.String(), nullable=True),
        sa.Column('plan_code', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('ndis_funds', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_of_plan', sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_budget_settings_client_id', 'budget_settings', ['client_id'])

    op.create_table(
        'budget_items',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('budget_settings_id', sa.String(), nullable=False),
        sa.Column('item_code', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('used_quantity', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['budget_settings_id'], ['budget_settings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_budget_items_client_id', 'budget_items', ['client_id'])
    op.create_index('ix_budget_items_budget_settings_id', 'budget_items', ['budget_settings_id'])
    op.create_index('ix_budget_items_item_code', 'budget_items', ['item_code'])

    op.create_table(
        'budget_item_catalog',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('item_code', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('default_unit_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_budget_item_catalog_item_code', 'budget_item_catalog', ['item_code'], unique=True)

    # Sessions, notes and assessments
    op.create_table(
        'sessions',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('therapist_id', sa.String(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('session_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['therapist_id'], ['allies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sessions_client_id', 'sessions', ['client_id'])
    op.create_index('ix_sessions_session_date', 'sessions', ['session_date'])

    op.create_table(
        'session_notes',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('session_id', sa.String(), nullable=False),
        sa.Column('client_id', sa.String(), nullable=False),
        sa.Column('present_allies', postgresql.JSONB(), nullable=False),
        sa.Column('mood_rating', sa.Integer(), nullable=True),
        sa.Column('physical_activity_rating', sa.Integer(), nullable=True),
        sa.Column('focus_rating', sa.Integer(), nullable=True),
        sa.Column('cooperation_rating', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('products', postgresql.JSONB(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_session_notes_session_id', 'session_notes', ['session_id'], unique=True)
    op.create_index('ix_session_notes_client_id', 'session_notes', ['client_id'])

    op.create_table(
        'goal_assessments',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('session_note_id', sa.String(), nullable=False),
        sa.Column('goal_id', sa.String(), nullable=False),
        sa.Column('subgoal_id', sa.String(), nullable=True),
        sa.Column('achievement_level', sa.Integer(), nullable=True),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('strategies', postgresql.JSONB(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['session_note_id'], ['session_notes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['goal_id'], ['goals.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['subgoal_id'], ['subgoals.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_goal_assessments_session_note_id', 'goal_assessments', ['session_note_id'])
    op.create_index('ix_goal_assessments_goal_id', 'goal_assessments', ['goal_id'])

    op.create_table(
        'milestone_assessments',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('goal_assessment_id', sa.String(), nullable=False),
        sa.Column('milestone_id', sa.String(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('strategies', postgresql.JSONB(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completion_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['goal_assessment_id'], ['goal_assessments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['milestone_id'], ['subgoals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_milestone_assessments_goal_assessment_id', 'milestone_assessments', ['goal_assessment_id'])
    op.create_index('ix_milestone_assessments_milestone_id', 'milestone_assessments', ['milestone_id'])


def downgrade() -> None:
    op.drop_table('milestone_assessments')
    op.drop_table('goal_assessments')
    op.drop_table('session_notes')
    op.drop_table('sessions')
    op.drop_table('budget_item_catalog')
    op.drop_table('budget_items')
    op.drop_table('budget_settings')
    op.drop_table('strategies')
    op.drop_table('subgoals')
    op.drop_table('goals')
    op.drop_table('client_clinicians')
    op.drop_table('clinicians')
    op.drop_table('allies')
    op.drop_table('clients')

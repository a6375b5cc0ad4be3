"""baseline_workhub_tables

Revision ID: 3c1d9e7a5b20
Revises: 
Create Date: 2026-01-12 09:14:41.120553

Creates employers, students, jobs, subscription_payments and notifications.
Tables that already exist are left untouched.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3c1d9e7a5b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('employers'):
        op.create_table('employers',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('company_name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('br_number', sa.String(), nullable=True),
            sa.Column('industry', sa.String(), nullable=True),
            sa.Column('address', sa.Text(), nullable=True),
            sa.Column('city', sa.String(), nullable=True),
            sa.Column('logo_url', sa.String(), nullable=True),
            sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('otp_code', sa.String(length=10), nullable=True),
            sa.Column('otp_created_at', sa.DateTime(), nullable=True),
            sa.Column('verification_status', sa.String(), nullable=False, server_default='pending'),
            sa.Column('verified_by', sa.String(), nullable=True),
            sa.Column('rejection_reason', sa.Text(), nullable=True),
            sa.Column('current_plan', sa.String(), nullable=False, server_default='free'),
            sa.Column('boosts_remaining', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('subscription_expires_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.CheckConstraint('boosts_remaining >= 0', name='ck_employers_boosts_non_negative'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_employers_id'), 'employers', ['id'], unique=False)
        op.create_index(op.f('ix_employers_email'), 'employers', ['email'], unique=True)
        op.create_index(op.f('ix_employers_current_plan'), 'employers', ['current_plan'], unique=False)
        op.create_index(op.f('ix_employers_subscription_expires_at'), 'employers', ['subscription_expires_at'], unique=False)

    if not table_exists('students'):
        op.create_table('students',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('first_name', sa.String(), nullable=False),
            sa.Column('last_name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('city', sa.String(), nullable=True),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('cv_url', sa.String(), nullable=True),
            sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('otp_code', sa.String(length=10), nullable=True),
            sa.Column('otp_created_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_students_id'), 'students', ['id'], unique=False)
        op.create_index(op.f('ix_students_email'), 'students', ['email'], unique=True)

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('employer_email', sa.String(), nullable=False),
            sa.Column('company_name', sa.String(), nullable=True),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('location', sa.String(), nullable=True),
            sa.Column('schedule', sa.String(), nullable=True),
            sa.Column('hours_per_day', sa.Integer(), nullable=True),
            sa.Column('pay_amount', sa.Numeric(precision=10, scale=2), nullable=True),
            sa.Column('pay_frequency', sa.String(), nullable=True),
            sa.Column('category', sa.String(), nullable=True),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('status', sa.String(), nullable=False, server_default='Active'),
            sa.Column('is_premium', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('promoted_at', sa.DateTime(), nullable=True),
            sa.Column('deadline', sa.Date(), nullable=False),
            sa.Column('posted_date', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_jobs_id'), 'jobs', ['id'], unique=False)
        op.create_index(op.f('ix_jobs_employer_email'), 'jobs', ['employer_email'], unique=False)
        op.create_index(op.f('ix_jobs_status'), 'jobs', ['status'], unique=False)
        op.create_index(op.f('ix_jobs_posted_date'), 'jobs', ['posted_date'], unique=False)
        op.create_index('idx_jobs_employer_status', 'jobs', ['employer_email', 'status'], unique=False)

    if not table_exists('subscription_payments'):
        op.create_table('subscription_payments',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('employer_email', sa.String(), nullable=False),
            sa.Column('plan_type', sa.String(), nullable=False),
            sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('receipt_url', sa.String(), nullable=True),
            sa.Column('status', sa.String(), nullable=False, server_default='pending'),
            sa.Column('submitted_at', sa.DateTime(), nullable=False),
            sa.Column('reviewed_by', sa.String(), nullable=True),
            sa.Column('reviewed_at', sa.DateTime(), nullable=True),
            sa.Column('decline_reason', sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_subscription_payments_id'), 'subscription_payments', ['id'], unique=False)
        op.create_index(op.f('ix_subscription_payments_employer_email'), 'subscription_payments', ['employer_email'], unique=False)
        op.create_index(op.f('ix_subscription_payments_status'), 'subscription_payments', ['status'], unique=False)
        op.create_index(
            'uq_subscription_payments_one_pending',
            'subscription_payments',
            ['employer_email'],
            unique=True,
            sqlite_where=sa.text("status = 'pending'"),
            postgresql_where=sa.text("status = 'pending'"),
        )

    if not table_exists('notifications'):
        op.create_table('notifications',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_email', sa.String(), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('type', sa.String(), nullable=False, server_default='info'),
            sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_notifications_id'), 'notifications', ['id'], unique=False)
        op.create_index(op.f('ix_notifications_user_email'), 'notifications', ['user_email'], unique=False)
        op.create_index(op.f('ix_notifications_created_at'), 'notifications', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('notifications')
    op.drop_table('subscription_payments')
    op.drop_table('jobs')
    op.drop_table('students')
    op.drop_table('employers')

"""add_applications

Revision ID: 8f4a2b6c1d93
Revises: 3c1d9e7a5b20
Create Date: 2026-02-03 16:27:09.481302

Student job applications with the CV each was submitted with.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '8f4a2b6c1d93'
down_revision: Union[str, None] = '3c1d9e7a5b20'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    if 'applications' in inspect(op.get_bind()).get_table_names():
        return

    op.create_table('applications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('job_id', sa.Integer(), nullable=False),
        sa.Column('student_email', sa.String(), nullable=False),
        sa.Column('cv_url', sa.String(), nullable=False),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id', 'student_email', name='uq_applications_job_student')
    )
    op.create_index(op.f('ix_applications_id'), 'applications', ['id'], unique=False)
    op.create_index(op.f('ix_applications_job_id'), 'applications', ['job_id'], unique=False)
    op.create_index(op.f('ix_applications_student_email'), 'applications', ['student_email'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_applications_student_email'), table_name='applications')
    op.drop_index(op.f('ix_applications_job_id'), table_name='applications')
    op.drop_index(op.f('ix_applications_id'), table_name='applications')
    op.drop_table('applications')

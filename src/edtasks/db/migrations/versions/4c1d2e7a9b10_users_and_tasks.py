"""users and tasks

Creates the two tables the service needs. Email uniqueness, the
student/teacher association rule and the progress values are enforced by
the database, not only by the API.

Revision ID: 4c1d2e7a9b10
Revises:
Create Date: 2026-10-19 09:12:40.118204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('teacher_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("role IN ('student', 'teacher')", name='ck_users_role'),
        sa.CheckConstraint(
            "(role = 'student' AND teacher_id IS NOT NULL)"
            " OR (role = 'teacher' AND teacher_id IS NULL)",
            name='ck_users_teacher_association',
        ),
        sa.ForeignKeyConstraint(['teacher_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('idx_users_teacher', 'users', ['teacher_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('progress', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "progress IN ('not-started', 'in-progress', 'completed')",
            name='ck_tasks_progress',
        ),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_tasks_owner_created', 'tasks', ['owner_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('idx_tasks_owner_created', table_name='tasks')
    op.drop_table('tasks')
    op.drop_index('idx_users_teacher', table_name='users')
    op.drop_table('users')

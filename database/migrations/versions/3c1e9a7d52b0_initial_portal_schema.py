"""initial portal schema

Revision ID: 3c1e9a7d52b0
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1e9a7d52b0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'articles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('date', sa.BigInteger(), nullable=False),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('archived', sa.Boolean(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_table(
        'rumors',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('date', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('archived', sa.Boolean(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_table(
        'discussions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author', sa.String(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('archived', sa.Boolean(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('content_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author', sa.String(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sa.Column('archived', sa.Boolean(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_comments_content_id', 'comments', ['content_id'])
    op.create_table(
        'trending',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('content_id', sa.Integer(), nullable=False),
        sa.Column('content_type', sa.String(), nullable=False),
        sa.Column('timestamp', sa.BigInteger(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_table(
        'groups',
        sa.Column('name', sa.String(), primary_key=True),
        sa.Column('member_count', sa.Integer(), nullable=False),
        sa.Column('formation_date', sa.BigInteger(), nullable=False),
        sa.Column('base_location', sa.String(), nullable=False),
        sa.Column('theater_location', sa.String(), nullable=False),
        sa.Column('members', sa.JSON(), nullable=False),
        sa.Column('schedules', sa.JSON(), nullable=False),
        sa.Column('news', sa.JSON(), nullable=False),
        sa.Column('discography', sa.JSON(), nullable=False),
        sa.Column('setlists', sa.JSON(), nullable=False),
    )
    op.create_table(
        'user_roles',
        sa.Column('principal', sa.String(), primary_key=True),
        sa.Column('role', sa.String(), nullable=False),
    )
    op.create_table(
        'user_profiles',
        sa.Column('principal', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
    )
    op.create_table(
        'settings',
        sa.Column('key', sa.String(), primary_key=True),
        sa.Column('value', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in ('settings', 'user_profiles', 'user_roles', 'groups', 'trending'):
        op.drop_table(table)
    op.drop_index('ix_comments_content_id', table_name='comments')
    for table in ('comments', 'discussions', 'rumors', 'articles'):
        op.drop_table(table)

"""Folio schema: users, books, logs, followers, lists.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('picture', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('is_guest', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('guest_session_id', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('guest_session_id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'books',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('authors', postgresql.ARRAY(sa.Text()), nullable=False, server_default='{}'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cover_url', sa.Text(), nullable=True),
        sa.Column('published_date', sa.String(20), nullable=True),
        sa.Column('page_count', sa.Integer(), nullable=True),
        sa.Column('categories', postgresql.ARRAY(sa.Text()), nullable=False, server_default='{}'),
        sa.Column('isbn_10', sa.String(10), nullable=True),
        sa.Column('isbn_13', sa.String(13), nullable=True),
        sa.Column('language', sa.String(10), nullable=True),
        sa.Column('publisher', sa.String(255), nullable=True),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('ratings_count', sa.Integer(), nullable=True),
        sa.Column('raw_data', postgresql.JSONB(), nullable=True),
        sa.Column('api_source', sa.String(20), nullable=False, server_default='google'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_books_title', 'books', ['title'])

    op.create_table(
        'logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('book_id', sa.String(64), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='want_to_read'),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('review', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('finish_date', sa.Date(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('spoiler_flag', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_logs_user_book'),
        sa.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='check_log_rating'),
        sa.CheckConstraint(
            "status IN ('want_to_read', 'reading', 'read', 'dnf')",
            name='check_log_status',
        ),
    )
    op.create_index('ix_logs_user_id', 'logs', ['user_id'])
    op.create_index('ix_logs_book_id', 'logs', ['book_id'])
    op.create_index('idx_logs_book_status', 'logs', ['book_id', 'status'])

    op.create_table(
        'followers',
        sa.Column('follower_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('following_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['follower_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['following_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('follower_id', 'following_id'),
        sa.CheckConstraint('follower_id <> following_id', name='check_no_self_follow'),
    )
    op.create_index('idx_followers_following', 'followers', ['following_id'])

    op.create_table(
        'lists',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('header_image_url', sa.Text(), nullable=True),
        sa.Column('theme_color', sa.String(20), nullable=True),
        sa.Column('items_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_lists_user_id', 'lists', ['user_id'])
    op.create_index('idx_lists_public_items', 'lists', ['is_public', 'items_count'])


def downgrade() -> None:
    op.drop_table('lists')
    op.drop_table('followers')
    op.drop_table('logs')
    op.drop_table('books')
    op.drop_table('users')

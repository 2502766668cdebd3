"""create_cms_tables

Revision ID: 0001_create_cms_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_cms_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CONTENT_TABLES = {
    'cms_pages': [sa.Column('title', sa.String(255), nullable=True)],
    'cms_products': [sa.Column('name', sa.String(255), nullable=True)],
    'cms_blog_posts': [
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('publish_date', sa.String(40), nullable=True),
    ],
    'cms_forms': [
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('success_message', sa.Text(), nullable=True),
    ],
    'cms_form_submissions': [
        sa.Column('form_id', sa.String(32), nullable=True),
        sa.Column('form_name', sa.String(255), nullable=True),
        sa.Column('data', sa.JSON(), nullable=True),
    ],
}


def _common_columns():
    return [
        sa.Column('id', sa.String(32), nullable=False),
        sa.Column('tenant_id', sa.String(64), nullable=False),
        sa.Column('slug', sa.String(255), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('attributes', sa.JSON(), nullable=False),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_date', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('api_keys',
        sa.Column('key_id', sa.String(32), nullable=False),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('tenant_id', sa.String(64), nullable=False),
        sa.Column('key_hash', sa.String(128), nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_used', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('key_id'),
        sa.UniqueConstraint('tenant_id', 'key_hash', name='uq_api_keys_tenant_hash'),
    )
    op.create_index('ix_api_keys_tenant_id', 'api_keys', ['tenant_id'])

    for table, extra in CONTENT_TABLES.items():
        op.create_table(table, *_common_columns(), *extra, sa.PrimaryKeyConstraint('id'))
        op.create_index(f'ix_{table}_tenant_id', table, ['tenant_id'])

    op.create_index('ix_cms_pages_tenant_slug', 'cms_pages', ['tenant_id', 'slug'])
    op.create_index('ix_cms_products_tenant_slug', 'cms_products', ['tenant_id', 'slug'])
    op.create_index('ix_cms_blog_posts_tenant_slug', 'cms_blog_posts', ['tenant_id', 'slug'])
    op.create_index('ix_cms_blog_posts_publish_date', 'cms_blog_posts', ['publish_date'])
    op.create_index('ix_cms_forms_tenant_slug', 'cms_forms', ['tenant_id', 'slug'])
    op.create_index('ix_cms_form_submissions_form_id', 'cms_form_submissions', ['form_id'])
    op.create_index('ix_cms_form_submissions_tenant_created', 'cms_form_submissions', ['tenant_id', 'created_date'])


def downgrade() -> None:
    """Downgrade schema."""
    for table in reversed(list(CONTENT_TABLES)):
        op.drop_table(table)
    op.drop_index('ix_api_keys_tenant_id', 'api_keys')
    op.drop_table('api_keys')

"""create engines and onboarding_status tables

Revision ID: 3f1a7c9e2b10
Revises:
Create Date: 2026-09-02 10:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision = '3f1a7c9e2b10'
down_revision = None
branch_labels = None
depends_on = None

ENGINE_CATEGORIES = ('operations', 'sales', 'business', 'system', 'admin')


def _table_exists(table_name: str) -> bool:
    """检查表是否存在"""
    return table_name in inspect(op.get_bind()).get_table_names()


def upgrade() -> None:
    if not _table_exists('engines'):
        op.create_table(
            'engines',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('company_id', sa.String(length=36), nullable=False),
            sa.Column('key', sa.String(length=64), nullable=False),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('icon', sa.String(length=64), nullable=False, server_default='Package'),
            sa.Column(
                'category',
                sa.Enum(*ENGINE_CATEGORIES, name='enginecategory'),
                nullable=False,
            ),
            sa.Column('is_core', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_installed', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('depends_on', sa.JSON(), nullable=False),
            sa.Column('workspace_route', sa.String(length=200), nullable=True),
            sa.Column('settings_route', sa.String(length=200), nullable=True),
            sa.Column('sort_order', sa.Integer(), nullable=False, server_default='100'),
            sa.Column('version', sa.String(length=32), nullable=False, server_default='1.0.0'),
            sa.Column('revision', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('company_id', 'key', name='uq_engines_company_key'),
        )
        op.create_index('ix_engines_company_id', 'engines', ['company_id'])
        op.create_index('idx_engines_company_sort', 'engines', ['company_id', 'sort_order'])

    if not _table_exists('onboarding_status'):
        op.create_table(
            'onboarding_status',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('company_id', sa.String(length=36), nullable=False),
            sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('modules_selected', sa.JSON(), nullable=False),
            sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(
            'ix_onboarding_status_company_id', 'onboarding_status', ['company_id'], unique=True
        )


def downgrade() -> None:
    op.drop_index('ix_onboarding_status_company_id', table_name='onboarding_status')
    op.drop_table('onboarding_status')
    op.drop_index('idx_engines_company_sort', table_name='engines')
    op.drop_index('ix_engines_company_id', table_name='engines')
    op.drop_table('engines')
    sa.Enum(name='enginecategory').drop(op.get_bind(), checkfirst=True)

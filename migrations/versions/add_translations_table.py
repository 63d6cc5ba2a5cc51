"""Add translations table for per-locale attribute values

Revision ID: add_translations_table
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'add_translations_table'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'translations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('owner_type', sa.String(100), nullable=False),
        sa.Column('attribute', sa.String(100), nullable=False),
        sa.Column('locale', sa.String(10), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('owner_type', 'owner_id', 'attribute', 'locale', name='unique_translation'),
    )

    op.create_index('ix_translations_locale', 'translations', ['locale'])
    op.create_index('ix_translations_owner', 'translations', ['owner_type', 'owner_id'])


def downgrade():
    op.drop_index('ix_translations_owner', table_name='translations')
    op.drop_index('ix_translations_locale', table_name='translations')
    op.drop_table('translations')

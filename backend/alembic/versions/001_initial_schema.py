"""Create tag, tagged_bookmark and bookmark tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create tag table
    op.create_table(
        'tag',
        sa.Column('id', sa.String(26), primary_key=True),
        sa.Column('path', sa.String(1024), nullable=False),
        sa.Column('prefix', sa.String(1024), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('label', sa.String(255)),
        sa.Column('parent_id', sa.String(26)),
        sa.Column('depth', sa.Integer(), nullable=False),
        sa.Column('value_type', sa.String(50)),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        # Resolve-or-create relies on this to reject concurrent duplicates
        sa.UniqueConstraint('user_id', 'path', name='uq_tag_user_path'),
    )
    op.create_index('ix_tag_user_id', 'tag', ['user_id'])
    op.create_index('idx_tag_parent_id', 'tag', ['parent_id'])

    # Create tagged_bookmark association table
    op.create_table(
        'tagged_bookmark',
        sa.Column('id', sa.String(26), primary_key=True),
        sa.Column('ref_id', sa.String(26), nullable=False),
        sa.Column('tag_id', sa.String(26), nullable=False),
        sa.Column('value', sa.Text()),
        sa.UniqueConstraint('tag_id', 'ref_id', name='uq_tagged_bookmark_tag_ref'),
    )
    op.create_index('idx_tagged_bookmark_ref_id', 'tagged_bookmark', ['ref_id'])

    # Create bookmark table
    op.create_table(
        'bookmark',
        sa.Column('id', sa.String(26), primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('title', sa.String(500)),
        sa.Column('url', sa.Text()),
        sa.Column('description', sa.Text()),
        sa.Column('resource_id', sa.String(26)),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_bookmark_user_id', 'bookmark', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_bookmark_user_id', table_name='bookmark')
    op.drop_table('bookmark')
    op.drop_index('idx_tagged_bookmark_ref_id', table_name='tagged_bookmark')
    op.drop_table('tagged_bookmark')
    op.drop_index('idx_tag_parent_id', table_name='tag')
    op.drop_index('ix_tag_user_id', table_name='tag')
    op.drop_table('tag')

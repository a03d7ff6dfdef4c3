"""create building collection and load marker

Revision ID: 0001_building_collection
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_building_collection'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'building',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('bin', sa.String(length=32), nullable=False),
        sa.Column('construct_yr', sa.String(length=16), nullable=True),
        sa.Column('height_roof', sa.String(length=32), nullable=True),
        sa.Column('shape_area', sa.String(length=64), nullable=True),
        sa.Column('feat_code', sa.String(length=16), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('building', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_building_bin'), ['bin'], unique=False)
        batch_op.create_index(batch_op.f('ix_building_construct_yr'), ['construct_yr'], unique=False)

    op.create_table(
        'dataset_load',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dataset', sa.String(length=64), nullable=False),
        sa.Column('source_url', sa.String(length=512), nullable=False),
        sa.Column('record_count', sa.Integer(), nullable=False),
        sa.Column('skipped_count', sa.Integer(), nullable=False),
        sa.Column('loaded_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('dataset'),
    )


def downgrade():
    op.drop_table('dataset_load')
    with op.batch_alter_table('building', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_building_construct_yr'))
        batch_op.drop_index(batch_op.f('ix_building_bin'))
    op.drop_table('building')

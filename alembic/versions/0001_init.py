"""jobs and user profiles

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table('job',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('app_id', sa.String(length=128), nullable=False),
        sa.Column('garment_type', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sizing', sa.JSON(), nullable=False),
        sa.Column('fabric_type', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('deadline', sa.String(length=32), nullable=True),
        sa.Column('budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('design_files', sa.JSON(), nullable=True),
        sa.Column('brand_id', sa.String(length=128), nullable=False),
        sa.Column('brand_name', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='Pending Match'),
        sa.Column('escrow_status', sa.String(length=32), nullable=False, server_default='Unpaid'),
        sa.Column('tailor_id', sa.String(length=128), nullable=True),
        sa.Column('tailor_name', sa.Text(), nullable=True),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_job_app_created', 'job', ['app_id', 'created_at'])
    op.create_index('ix_job_app_brand', 'job', ['app_id', 'brand_id'])
    op.create_table('user_profile',
        sa.Column('app_id', sa.String(length=128), primary_key=True),
        sa.Column('uid', sa.String(length=128), primary_key=True),
        sa.Column('data', sa.JSON(), nullable=False),
    )

def downgrade() -> None:
    op.drop_table('user_profile')
    op.drop_index('ix_job_app_brand', table_name='job')
    op.drop_index('ix_job_app_created', table_name='job')
    op.drop_table('job')

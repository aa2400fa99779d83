"""create_vendors_table

Revision ID: a1c4e7f20b3d
Revises:
Create Date: 2026-10-19 10:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f20b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'vendors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.Text(), nullable=True),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('password', sa.Text(), nullable=True),
        sa.Column('fcm_tokens', sa.JSON(), nullable=True),
        sa.Column('business_name', sa.Text(), nullable=True),
        sa.Column('vendor_type', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('onboarding_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('address_line1', sa.Text(), nullable=True),
        sa.Column('address_line2', sa.Text(), nullable=True),
        sa.Column('village', sa.Text(), nullable=True),
        sa.Column('mandal', sa.Text(), nullable=True),
        sa.Column('city', sa.Text(), nullable=True),
        sa.Column('state', sa.Text(), nullable=True),
        sa.Column('pincode', sa.Text(), nullable=True),
        sa.Column('maps_link', sa.Text(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('min_price', sa.Float(), nullable=True),
        sa.Column('max_price', sa.Float(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_sponsored', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('promoted_until', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.CheckConstraint('latitude IS NULL OR (latitude >= -90 AND latitude <= 90)'),
        sa.CheckConstraint('longitude IS NULL OR (longitude >= -180 AND longitude <= 180)'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_vendors_id', 'vendors', ['id'])
    op.create_index('ix_vendors_vendor_type', 'vendors', ['vendor_type'])
    op.create_index('ix_vendors_is_verified', 'vendors', ['is_verified'])
    op.create_index('ix_vendors_min_price', 'vendors', ['min_price'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_vendors_min_price', table_name='vendors')
    op.drop_index('ix_vendors_is_verified', table_name='vendors')
    op.drop_index('ix_vendors_vendor_type', table_name='vendors')
    op.drop_index('ix_vendors_id', table_name='vendors')
    op.drop_table('vendors')

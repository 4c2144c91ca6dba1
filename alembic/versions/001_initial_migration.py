"""Initial migration - create offers table

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OFFER_TYPES = ('BUY_X_GET_Y', 'BUNDLE_DISCOUNT', 'PERCENTAGE_OFF', 'FIXED_AMOUNT_OFF')


def upgrade() -> None:
    op.create_table(
        'offers',
        sa.Column('offer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('offer_type', sa.Enum(*OFFER_TYPES, name='offer_type'), nullable=False),
        sa.Column('rules', postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column('product_ids', postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column('category_ids', postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column('subcategory_ids', postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column('gender_ids', postgresql.JSON(astext_type=sa.Text()), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('offer_id'),
        sa.CheckConstraint('end_date > start_date', name='ck_offers_time_window'),
        sa.CheckConstraint('priority >= 1', name='ck_offers_priority_positive'),
    )

    op.create_index('idx_offers_active_window', 'offers', ['is_active', 'start_date', 'end_date'])
    op.create_index('idx_offers_priority_created', 'offers', ['priority', 'created_at'])
    op.create_index(op.f('ix_offers_offer_type'), 'offers', ['offer_type'])
    op.create_index(op.f('ix_offers_is_active'), 'offers', ['is_active'])


def downgrade() -> None:
    op.drop_index(op.f('ix_offers_is_active'), table_name='offers')
    op.drop_index(op.f('ix_offers_offer_type'), table_name='offers')
    op.drop_index('idx_offers_priority_created', table_name='offers')
    op.drop_index('idx_offers_active_window', table_name='offers')
    op.drop_table('offers')

    op.execute("DROP TYPE offer_type")

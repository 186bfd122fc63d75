"""
Initial migration - Create cards table

Revision ID: 001_initial
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        'cards',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('card_id', sa.String(14), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('network', sa.String(50), nullable=False),
        sa.Column('language', sa.String(10), nullable=False),
        sa.Column('received', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('received_at', sa.DateTime()),
        sa.Column('disaster_type', sa.String(50)),
        sa.Column('report_type', sa.String(50)),
        sa.Column('card_data', sa.JSON()),
        sa.Column('flood_depth', sa.Integer()),
        sa.Column('text', sa.Text()),
        sa.Column('lat', sa.Float()),
        sa.Column('lng', sa.Float()),
        sa.Column('created_at', sa.DateTime(timezone=True)),
        sa.Column('image_url', sa.String(500)),
        sa.Column('image_status', sa.String(20), nullable=False, server_default='none'),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )

    # Card ids are generated without a lookup, so uniqueness lives here
    op.create_index('idx_cards_card_id', 'cards', ['card_id'], unique=True)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('idx_cards_card_id', table_name='cards')
    op.drop_table('cards')

"""Create locations, machines, sales and commission payouts

Revision ID: 001_commission_schema
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001_commission_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create operational and commission tables"""

    # ====================
    # LOCATIONS TABLE
    # ====================
    op.create_table(
        'locations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('address_line1', sa.String(255), nullable=True),
        sa.Column('address_line2', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('contact_name', sa.String(200), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('contact_phone', sa.String(30), nullable=True),
        sa.Column('commission_model', sa.String(30), server_default='none', nullable=True),
        sa.Column('commission_pct_bps', sa.Integer, nullable=True),
        sa.Column('commission_flat_cents', sa.Integer, nullable=True),
        sa.Column('commission_min_cents', sa.Integer, nullable=True),
        sa.Column('commission_notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_locations_name', 'locations', ['name'])
    op.create_index('ix_locations_commission_model', 'locations', ['commission_model'])

    # ====================
    # MACHINES TABLE
    # ====================
    op.create_table(
        'machines',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('serial_number', sa.String(100), unique=True, nullable=True),
        sa.Column('manufacturer', sa.String(100), nullable=True),
        sa.Column('status', sa.String(30), server_default='ACTIVE', nullable=False),
        sa.Column('location_id', sa.Uuid(), sa.ForeignKey('locations.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_machines_location_id', 'machines', ['location_id'])

    # ====================
    # SALES TABLE
    # ====================
    op.create_table(
        'sales',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('machine_id', sa.Uuid(), sa.ForeignKey('machines.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('product_name', sa.String(200), nullable=True),
        sa.Column('qty', sa.Integer, nullable=False),
        sa.Column('unit_price_cents', sa.Integer, nullable=False),
        sa.Column('unit_cost_cents', sa.Integer, nullable=True),
        sa.Column('payment_method', sa.String(30), nullable=True),
        sa.Column('source', sa.String(30), nullable=True),
        sa.Column('occurred_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_sales_machine_id', 'sales', ['machine_id'])
    op.create_index('ix_sales_occurred_at', 'sales', ['occurred_at'])
    op.create_index('ix_sales_machine_occurred', 'sales', ['machine_id', 'occurred_at'])

    # ====================
    # COMMISSION PAYOUTS TABLE
    # ====================
    op.create_table(
        'commission_payouts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('location_id', sa.Uuid(), sa.ForeignKey('locations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('period_start', sa.Date, nullable=False),
        sa.Column('period_end', sa.Date, nullable=False),
        sa.Column('window_days', sa.Integer, nullable=False),
        sa.Column('commission_model', sa.String(30), nullable=False),
        sa.Column('gross_revenue', sa.Numeric(14, 2), server_default='0', nullable=False),
        sa.Column('amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('paid', sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('calculated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('location_id', 'period_start', 'period_end', name='uq_payout_location_period'),
    )
    op.create_index('ix_commission_payouts_location_id', 'commission_payouts', ['location_id'])


def downgrade():
    """Drop all tables"""
    op.drop_table('commission_payouts')
    op.drop_table('sales')
    op.drop_table('machines')
    op.drop_table('locations')

# backend/alembic/versions/001_initial_schema.py
"""Billing core schema

Revision ID: 001
Revises: 
Create Date: 2026-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    ]


def upgrade() -> None:
    # Create companies table
    op.create_table(
        'companies',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean, server_default=sa.text('true'), nullable=False),
        *_timestamps(),
    )

    # Create profiles table
    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('full_name', sa.String(255)),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('companies.id'), index=True),
        sa.Column('role', sa.String(50), server_default=sa.text("'user'"), nullable=False),
        sa.Column('is_active', sa.Boolean, server_default=sa.text('true'), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("role IN ('super_admin', 'company_admin', 'user')", name='profiles_role_check'),
    )

    # Create courses table
    op.create_table(
        'courses',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('is_active', sa.Boolean, server_default=sa.text('true'), nullable=False),
        *_timestamps(),
    )

    # Create course_pricing table
    op.create_table(
        'course_pricing',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('course_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('courses.id', ondelete='CASCADE'), unique=True, nullable=False),
        sa.Column('setup_fee', sa.Numeric(12, 2), server_default=sa.text('0'), nullable=False),
        sa.Column('reactivation_fee', sa.Numeric(12, 2), server_default=sa.text('0'), nullable=False),
        sa.Column('seat_fee', sa.Numeric(12, 2), server_default=sa.text('0'), nullable=False),
        sa.Column('currency', sa.String(3), server_default=sa.text("'USD'"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            'setup_fee >= 0 AND reactivation_fee >= 0 AND seat_fee >= 0',
            name='course_pricing_non_negative',
        ),
    )

    # Create company_pricing_overrides table
    op.create_table(
        'company_pricing_overrides',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('course_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('courses.id', ondelete='CASCADE'), index=True),
        sa.Column('setup_fee_override', sa.Numeric(12, 2)),
        sa.Column('reactivation_fee_override', sa.Numeric(12, 2)),
        sa.Column('seat_fee_override', sa.Numeric(12, 2)),
        *_timestamps(),
        sa.UniqueConstraint('company_id', 'course_id', name='uq_company_course_override'),
        sa.CheckConstraint(
            '(setup_fee_override IS NULL OR setup_fee_override >= 0) AND '
            '(reactivation_fee_override IS NULL OR reactivation_fee_override >= 0) AND '
            '(seat_fee_override IS NULL OR seat_fee_override >= 0)',
            name='company_pricing_overrides_non_negative',
        ),
    )
    op.create_index(
        'uq_company_wide_override',
        'company_pricing_overrides',
        ['company_id'],
        unique=True,
        postgresql_where=sa.text('course_id IS NULL'),
    )

    # Create course_activations table
    op.create_table(
        'course_activations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('companies.id'), nullable=False, index=True),
        sa.Column('course_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('courses.id'), nullable=False, index=True),
        sa.Column('activated_at', sa.DateTime, nullable=False),
        sa.Column('expires_at', sa.DateTime, nullable=False),
        sa.Column('is_renewal', sa.Boolean, server_default=sa.text('false'), nullable=False),
        sa.Column('status', sa.String(32), server_default=sa.text("'pending_payment'"), nullable=False, index=True),
        sa.Column('seat_count', sa.Integer, nullable=False),
        sa.Column('setup_fee_paid', sa.Numeric(12, 2), nullable=False),
        sa.Column('seat_fee_paid', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_paid', sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending_payment', 'active', 'expired', 'cancelled')",
            name='course_activations_status_check',
        ),
        sa.CheckConstraint('seat_count >= 1', name='course_activations_seat_count_check'),
    )
    op.create_index(
        'ix_course_activations_company_course_expiry',
        'course_activations',
        ['company_id', 'course_id', 'expires_at'],
    )

    # Create invoices table
    op.create_table(
        'invoices',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('invoice_number', sa.String(32), unique=True, nullable=False, index=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('companies.id'), nullable=False, index=True),
        sa.Column('course_activation_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('course_activations.id'), nullable=False, index=True),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('tax_rate', sa.Numeric(5, 2), server_default=sa.text('0'), nullable=False),
        sa.Column('tax_amount', sa.Numeric(12, 2), server_default=sa.text('0'), nullable=False),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(3), server_default=sa.text("'USD'"), nullable=False),
        sa.Column('status', sa.String(32), server_default=sa.text("'sent'"), nullable=False, index=True),
        sa.Column('due_date', sa.Date, nullable=False),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id')),
        sa.Column('paid_at', sa.DateTime),
        sa.Column('payment_method', sa.String(50)),
        sa.Column('payment_reference', sa.String(255)),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft', 'sent', 'paid', 'cancelled')",
            name='invoices_status_check',
        ),
    )

    # Create invoice_items table
    op.create_table(
        'invoice_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('invoice_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('invoices.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('quantity', sa.Integer, server_default=sa.text('1'), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('item_type', sa.String(32), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "item_type IN ('setup_fee', 'reactivation_fee', 'seat_fee', 'tax')",
            name='invoice_items_type_check',
        ),
    )

    # Per-year invoice number counter
    op.create_table(
        'invoice_sequences',
        sa.Column('year', sa.Integer, primary_key=True, autoincrement=False),
        sa.Column('last_value', sa.Integer, server_default=sa.text('0'), nullable=False),
    )

    # Create payments table
    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('company_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('companies.id'), nullable=False, index=True),
        sa.Column('course_activation_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('course_activations.id'), index=True),
        sa.Column('payment_type', sa.String(50), server_default=sa.text("'course_activation'"), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(3), server_default=sa.text("'USD'"), nullable=False),
        sa.Column('user_count', sa.Integer),
        sa.Column('status', sa.String(32), server_default=sa.text("'pending'"), nullable=False, index=True),
        sa.Column('order_id', sa.String(64), unique=True, nullable=False, index=True),
        sa.Column('gateway_transaction_id', sa.String(255)),
        sa.Column('gateway_response_description', sa.String(500)),
        sa.Column('processed_at', sa.DateTime),
        sa.Column('paid_at', sa.DateTime),
        sa.Column('details', postgresql.JSON, server_default=sa.text("'{}'::json")),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name='payments_status_check',
        ),
    )


def downgrade() -> None:
    op.drop_table('payments')
    op.drop_table('invoice_sequences')
    op.drop_table('invoice_items')
    op.drop_table('invoices')
    op.drop_index('ix_course_activations_company_course_expiry', table_name='course_activations')
    op.drop_table('course_activations')
    op.drop_index('uq_company_wide_override', table_name='company_pricing_overrides')
    op.drop_table('company_pricing_overrides')
    op.drop_table('course_pricing')
    op.drop_table('courses')
    op.drop_table('profiles')
    op.drop_table('companies')

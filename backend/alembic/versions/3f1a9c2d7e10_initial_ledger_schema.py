"""Initial ledger schema: brands, stock entries, transactions, audit log

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-19 13:20:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f1a9c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Catalog: one row per (name, type), quantity never negative
    op.create_table(
        'brands',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('price > 0', name='ck_brands_price_positive'),
        sa.CheckConstraint('quantity >= 0', name='ck_brands_quantity_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', 'type', name='uq_brands_name_type'),
    )
    op.create_index(op.f('ix_brands_id'), 'brands', ['id'], unique=False)
    op.create_index(op.f('ix_brands_name'), 'brands', ['name'], unique=False)
    op.create_index(op.f('ix_brands_type'), 'brands', ['type'], unique=False)

    # Append-only stock addition history
    op.create_table(
        'stock_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        sa.Column('brand_name', sa.String(), nullable=False),
        sa.Column('brand_type', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_per_bottle', sa.Float(), nullable=False),
        sa.Column('total_value', sa.Float(), nullable=False),
        sa.Column('added_date', sa.DateTime(), nullable=False),
        sa.Column('week_of_year', sa.String(length=8), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_stock_entries_id'), 'stock_entries', ['id'], unique=False)
    op.create_index(op.f('ix_stock_entries_brand_id'), 'stock_entries', ['brand_id'], unique=False)
    op.create_index(op.f('ix_stock_entries_added_date'), 'stock_entries', ['added_date'], unique=False)
    op.create_index(op.f('ix_stock_entries_week_of_year'), 'stock_entries', ['week_of_year'], unique=False)

    # Sales, single-item payload inline and cart lines in transaction_items
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('transaction_type', sa.String(length=10), nullable=True),
        sa.Column('brand_id', sa.Integer(), nullable=True),
        sa.Column('brand_name', sa.String(), nullable=True),
        sa.Column('brand_type', sa.String(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('price_per_bottle', sa.Float(), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=10), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=True),
        sa.Column('customer_phone', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("payment_method IN ('cash', 'upi')", name='ck_transactions_payment_method'),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_transactions_id'), 'transactions', ['id'], unique=False)
    op.create_index(op.f('ix_transactions_brand_id'), 'transactions', ['brand_id'], unique=False)
    op.create_index(op.f('ix_transactions_payment_method'), 'transactions', ['payment_method'], unique=False)
    op.create_index(op.f('ix_transactions_created_at'), 'transactions', ['created_at'], unique=False)

    op.create_table(
        'transaction_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('transaction_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        sa.Column('brand_name', sa.String(), nullable=False),
        sa.Column('brand_type', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_per_bottle', sa.Float(), nullable=False),
        sa.Column('item_total', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['brand_id'], ['brands.id']),
        sa.ForeignKeyConstraint(['transaction_id'], ['transactions.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_transaction_items_id'), 'transaction_items', ['id'], unique=False)
    op.create_index(op.f('ix_transaction_items_transaction_id'), 'transaction_items', ['transaction_id'], unique=False)
    op.create_index(op.f('ix_transaction_items_brand_id'), 'transaction_items', ['brand_id'], unique=False)

    # Audit log and one-time job markers
    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ts', sa.DateTime(), nullable=True),
        sa.Column('actor', sa.String(length=50), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_logs_id'), 'logs', ['id'], unique=False)
    op.create_index(op.f('ix_logs_ts'), 'logs', ['ts'], unique=False)
    op.create_index(op.f('ix_logs_action'), 'logs', ['action'], unique=False)
    op.create_index(op.f('ix_logs_resource'), 'logs', ['resource'], unique=False)
    op.create_index(op.f('ix_logs_status'), 'logs', ['status'], unique=False)

    op.create_table(
        'migration_markers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=False),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_migration_markers_id'), 'migration_markers', ['id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_migration_markers_id'), table_name='migration_markers')
    op.drop_table('migration_markers')

    for ix in ('ix_logs_status', 'ix_logs_resource', 'ix_logs_action', 'ix_logs_ts', 'ix_logs_id'):
        op.drop_index(op.f(ix), table_name='logs')
    op.drop_table('logs')

    for ix in ('ix_transaction_items_brand_id', 'ix_transaction_items_transaction_id', 'ix_transaction_items_id'):
        op.drop_index(op.f(ix), table_name='transaction_items')
    op.drop_table('transaction_items')

    for ix in ('ix_transactions_created_at', 'ix_transactions_payment_method', 'ix_transactions_brand_id', 'ix_transactions_id'):
        op.drop_index(op.f(ix), table_name='transactions')
    op.drop_table('transactions')

    for ix in ('ix_stock_entries_week_of_year', 'ix_stock_entries_added_date', 'ix_stock_entries_brand_id', 'ix_stock_entries_id'):
        op.drop_index(op.f(ix), table_name='stock_entries')
    op.drop_table('stock_entries')

    for ix in ('ix_brands_type', 'ix_brands_name', 'ix_brands_id'):
        op.drop_index(op.f(ix), table_name='brands')
    op.drop_table('brands')

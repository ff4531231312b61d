"""create_order_import_tables

Revision ID: 3f1a2b9c7d10
Revises:
Create Date: 2026-10-19 09:12:41.118304

"""
from alembic import op
import sqlalchemy as sa


revision = '3f1a2b9c7d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'stores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('country_id', sa.String(length=2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_stores_code', 'stores', ['code'], unique=True)

    op.create_table(
        'config_values',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('path', sa.String(length=255), nullable=False),
        sa.Column('store_id', sa.Integer(), nullable=False),
        sa.Column('value', sa.String(length=255), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('path', 'store_id', name='_config_path_store_uc'),
    )
    op.create_index('ix_config_values_path', 'config_values', ['path'])

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sku', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type_id', sa.String(length=32), nullable=False),
        sa.Column('tax_class_id', sa.Integer(), nullable=True),
        sa.Column('price', sa.Numeric(20, 4), nullable=False),
        sa.Column('is_enabled', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)

    op.create_table(
        'stock_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False, unique=True),
        sa.Column('qty', sa.Numeric(12, 4), nullable=False),
        sa.Column('is_in_stock', sa.Boolean(), nullable=False),
        sa.Column('manage_stock', sa.Boolean(), nullable=False),
        sa.Column('use_config_backorders', sa.Boolean(), nullable=False),
        sa.Column('backorders', sa.Boolean(), nullable=False),
    )

    op.create_table(
        'tax_rates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tax_class_id', sa.Integer(), nullable=False),
        sa.Column('country_id', sa.String(length=2), nullable=False),
        sa.Column('rate', sa.Numeric(12, 4), nullable=False),
    )
    op.create_index('ix_tax_rates_tax_class_id', 'tax_rates', ['tax_class_id'])
    op.create_index('ix_tax_rates_country_id', 'tax_rates', ['country_id'])

    op.create_table(
        'weee_tax',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('entity_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('country', sa.String(length=2), nullable=False),
        sa.Column('website_id', sa.Integer(), nullable=False),
        sa.Column('value', sa.Numeric(12, 4), nullable=False),
    )
    op.create_index('ix_weee_tax_entity_id', 'weee_tax', ['entity_id'])

    op.create_table(
        'quotes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('channable_id', sa.Integer(), nullable=True),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('stores.id'), nullable=False),
        sa.Column('channel_name', sa.String(length=64), nullable=True),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('billing_country', sa.String(length=2), nullable=True),
        sa.Column('shipping_country', sa.String(length=2), nullable=True),
        sa.Column('is_lvb', sa.Boolean(), nullable=False),
        sa.Column('skip_qty_check', sa.Boolean(), nullable=False),
        sa.Column('skip_reservation', sa.Boolean(), nullable=False),
        sa.Column('items_qty', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_quotes_channable_id', 'quotes', ['channable_id'], unique=True)
    op.create_index('ix_quotes_store_id', 'quotes', ['store_id'])

    op.create_table(
        'quote_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('quote_id', sa.Integer(), sa.ForeignKey('quotes.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('sku', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(20, 4), nullable=False),
        sa.Column('original_custom_price', sa.Numeric(20, 4), nullable=True),
    )
    op.create_index('ix_quote_items_quote_id', 'quote_items', ['quote_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('entity', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('audit_data', sa.JSON(), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_timestamp', 'audit_logs', ['timestamp'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('quote_items')
    op.drop_table('quotes')
    op.drop_table('weee_tax')
    op.drop_table('tax_rates')
    op.drop_table('stock_items')
    op.drop_table('products')
    op.drop_table('config_values')
    op.drop_table('stores')

"""initial order, invoice and inventory schema

Revision ID: 1a2f6c0d9e41
Revises:
Create Date: 2026-09-28 10:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '1a2f6c0d9e41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'app_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('value', sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_app_config_id', 'app_config', ['id'])
    op.create_index('ix_app_config_name', 'app_config', ['name'], unique=True)

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('table_name', sa.String(length=100), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('changed_by', sa.String(), nullable=False),
        sa.Column('action', sa.String(length=16), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
    )
    op.create_index('ix_audit_log_id', 'audit_log', ['id'])
    op.create_index('ix_audit_log_table_name', 'audit_log', ['table_name'])
    op.create_index('ix_audit_log_record_id', 'audit_log', ['record_id'])

    op.create_table(
        'purchase_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('po_number', sa.String(length=100), nullable=False),
        sa.Column('order_type', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='approved'),
        sa.Column('customer_supplier_name', sa.String(length=255), nullable=True),
        sa.Column('total_amount', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('linked_customer_po_id', sa.Integer(),
                  sa.ForeignKey('purchase_orders.id', ondelete='SET NULL'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_purchase_orders_id', 'purchase_orders', ['id'])
    op.create_index('ix_purchase_orders_po_number', 'purchase_orders', ['po_number'], unique=True)
    op.create_index('ix_purchase_orders_linked_customer_po_id', 'purchase_orders', ['linked_customer_po_id'])

    op.create_table(
        'purchase_order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('purchase_order_id', sa.Integer(),
                  sa.ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('serial_no', sa.String(length=100), nullable=True),
        sa.Column('project_no', sa.String(length=100), nullable=True),
        sa.Column('part_no', sa.String(length=100), nullable=False),
        sa.Column('material_no', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('uom', sa.String(length=50), nullable=True),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 3), nullable=False),
        sa.Column('total_price', sa.Numeric(14, 3), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('penalty_percentage', sa.Numeric(5, 2), nullable=True),
        sa.Column('delivered_quantity', sa.Numeric(12, 3), nullable=True),
        sa.Column('delivered_unit_price', sa.Numeric(12, 3), nullable=True),
        sa.Column('delivered_total_price', sa.Numeric(14, 3), nullable=True),
        sa.Column('balance_quantity_undelivered', sa.Numeric(12, 3), nullable=True),
        sa.Column('penalty_amount', sa.Numeric(14, 3), nullable=True),
        sa.Column('invoice_no', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_purchase_order_items_id', 'purchase_order_items', ['id'])
    op.create_index('ix_purchase_order_items_purchase_order_id', 'purchase_order_items', ['purchase_order_id'])

    op.create_table(
        'purchase_tax_invoices',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('invoice_number', sa.String(length=100), nullable=False),
        sa.Column('invoice_date', sa.Date(), nullable=False),
        sa.Column('supplier_name', sa.String(length=255), nullable=True),
        sa.Column('po_number', sa.String(length=100), nullable=True),
        sa.Column('project_number', sa.String(length=100), nullable=True),
        sa.Column('claim_percentage', sa.Numeric(5, 2), nullable=False, server_default='100'),
        sa.Column('subtotal', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('claim_amount', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('vat_amount', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('gross_total', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('amount_paid', sa.Numeric(14, 3), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_purchase_tax_invoices_id', 'purchase_tax_invoices', ['id'])
    op.create_index('ix_purchase_tax_invoices_invoice_number', 'purchase_tax_invoices', ['invoice_number'], unique=True)
    op.create_index('ix_purchase_tax_invoices_po_number', 'purchase_tax_invoices', ['po_number'])

    op.create_table(
        'purchase_tax_invoice_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('invoice_id', sa.Integer(),
                  sa.ForeignKey('purchase_tax_invoices.id', ondelete='CASCADE'), nullable=False),
        sa.Column('serial_no', sa.String(length=100), nullable=True),
        sa.Column('project_no', sa.String(length=100), nullable=True),
        sa.Column('part_no', sa.String(length=100), nullable=False),
        sa.Column('material_no', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('uom', sa.String(length=50), nullable=True),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('supplier_unit_price', sa.Numeric(12, 3), nullable=True),
        sa.Column('total_price', sa.Numeric(14, 3), nullable=False),
    )
    op.create_index('ix_purchase_tax_invoice_items_id', 'purchase_tax_invoice_items', ['id'])
    op.create_index('ix_purchase_tax_invoice_items_invoice_id', 'purchase_tax_invoice_items', ['invoice_id'])

    op.create_table(
        'inventory',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('serial_no', sa.String(length=100), nullable=True),
        sa.Column('project_no', sa.String(length=100), nullable=True),
        sa.Column('date_po', sa.Date(), nullable=True),
        sa.Column('part_no', sa.String(length=100), nullable=False),
        sa.Column('material_no', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('uom', sa.String(length=50), nullable=True),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False, server_default='0'),
        sa.Column('unit_price', sa.Numeric(12, 3), nullable=False, server_default='0'),
        sa.Column('total_price', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('sold_quantity', sa.Numeric(12, 3), nullable=False, server_default='0'),
        sa.Column('balance', sa.Numeric(12, 3), nullable=False, server_default='0'),
        sa.Column('balance_amount', sa.Numeric(14, 3), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_inventory_id', 'inventory', ['id'])
    op.create_index('ix_inventory_part_no', 'inventory', ['part_no'])

    op.create_table(
        'inventory_audit',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('inventory_id', sa.Integer(), sa.ForeignKey('inventory.id'), nullable=False),
        sa.Column('change_type', sa.String(), nullable=False),
        sa.Column('change_amount', sa.Numeric(12, 3), nullable=False),
        sa.Column('old_quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('new_quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('changed_by', sa.String(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.Column('note', sa.String(), nullable=True),
    )
    op.create_index('ix_inventory_audit_id', 'inventory_audit', ['id'])
    op.create_index('ix_inventory_audit_inventory_id', 'inventory_audit', ['inventory_id'])

    op.create_table(
        'sales_tax_invoices',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('invoice_number', sa.String(length=100), nullable=False),
        sa.Column('invoice_date', sa.Date(), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('customer_po_number', sa.String(length=100), nullable=True),
        sa.Column('customer_po_date', sa.Date(), nullable=True),
        sa.Column('payment_terms', sa.Text(), nullable=True),
        sa.Column('contract_number', sa.String(length=255), nullable=True),
        sa.Column('delivery_terms', sa.String(length=100), nullable=True),
        sa.Column('claim_percentage', sa.Numeric(5, 2), nullable=False, server_default='100'),
        sa.Column('subtotal', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('claim_amount', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('vat_amount', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('gross_total', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('amount_paid', sa.Numeric(14, 3), nullable=False, server_default='0'),
        sa.Column('amount_in_words', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_sales_tax_invoices_id', 'sales_tax_invoices', ['id'])
    op.create_index('ix_sales_tax_invoices_invoice_number', 'sales_tax_invoices', ['invoice_number'], unique=True)
    op.create_index('ix_sales_tax_invoices_customer_po_number', 'sales_tax_invoices', ['customer_po_number'])

    op.create_table(
        'sales_tax_invoice_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('invoice_id', sa.Integer(),
                  sa.ForeignKey('sales_tax_invoices.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_no', sa.String(length=100), nullable=True),
        sa.Column('part_no', sa.String(length=100), nullable=False),
        sa.Column('material_no', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('quantity', sa.Numeric(12, 3), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 3), nullable=True),
        sa.Column('total_amount', sa.Numeric(14, 3), nullable=False),
        sa.Column('inventory_id', sa.Integer(),
                  sa.ForeignKey('inventory.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_index('ix_sales_tax_invoice_items_id', 'sales_tax_invoice_items', ['id'])
    op.create_index('ix_sales_tax_invoice_items_invoice_id', 'sales_tax_invoice_items', ['invoice_id'])


def downgrade() -> None:
    for table in (
        'sales_tax_invoice_items',
        'sales_tax_invoices',
        'inventory_audit',
        'inventory',
        'purchase_tax_invoice_items',
        'purchase_tax_invoices',
        'purchase_order_items',
        'purchase_orders',
        'audit_log',
        'app_config',
    ):
        op.drop_table(table)

"""normalize legacy purchase order statuses

Older order screens stored draft / pending / rejected / completed / delivered.
Only approved, partially_delivered and delivered_completed are valid now.

Revision ID: 7c3e91b5a2d8
Revises: 1a2f6c0d9e41
Create Date: 2026-09-28 10:31:05.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7c3e91b5a2d8'
down_revision: Union[str, None] = '1a2f6c0d9e41'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


STATUS_MAP = {
    'draft': 'approved',
    'pending': 'approved',
    'rejected': 'approved',
    'completed': 'delivered_completed',
    'delivered': 'delivered_completed',
}


def upgrade() -> None:
    """Rewrite legacy status values in place. Idempotent."""
    purchase_orders = sa.table('purchase_orders', sa.column('status', sa.String))
    for legacy, current in STATUS_MAP.items():
        op.execute(
            purchase_orders.update()
            .where(sa.func.lower(purchase_orders.c.status) == legacy)
            .values(status=current)
        )


def downgrade() -> None:
    # Many-to-one mapping; the original values cannot be restored
    pass

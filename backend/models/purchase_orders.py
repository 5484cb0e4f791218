from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class OrderType(enum.Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class PurchaseOrderStatus(enum.Enum):
    APPROVED = "approved"
    PARTIALLY_DELIVERED = "partially_delivered"
    DELIVERED_COMPLETED = "delivered_completed"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class PurchaseOrder(Base, TimestampMixin):
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, index=True)
    po_number = Column(String(100), unique=True, nullable=False, index=True)  # PO-<year>-<seq> when auto-generated
    order_type = Column(Enum(OrderType, native_enum=False, length=16, values_callable=_enum_values), nullable=False)
    # Stored as plain strings so the legacy-status data migration can rewrite old values in place
    status = Column(
        Enum(PurchaseOrderStatus, native_enum=False, create_constraint=False, length=32, values_callable=_enum_values),
        default=PurchaseOrderStatus.APPROVED,
        nullable=False,
    )
    customer_supplier_name = Column(String(255), nullable=True)
    total_amount = Column(Numeric(14, 3), default=0, nullable=False)
    linked_customer_po_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="SET NULL"), nullable=True, index=True)
    notes = Column(Text, nullable=True)

    # Relationships
    items = relationship(
        "PurchaseOrderItem",
        back_populates="purchase_order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.id",
    )
    linked_customer_po = relationship("PurchaseOrder", remote_side=[id], foreign_keys=[linked_customer_po_id])

import enum
from decimal import Decimal
from typing import Iterable, Optional, Union

from models.purchase_orders import PurchaseOrderStatus
from utils.matching import canonical_price

ZERO = Decimal("0")

# Values written by earlier versions of the order screens
LEGACY_STATUS_MAP = {
    "draft": PurchaseOrderStatus.APPROVED,
    "pending": PurchaseOrderStatus.APPROVED,
    "rejected": PurchaseOrderStatus.APPROVED,
    "completed": PurchaseOrderStatus.DELIVERED_COMPLETED,
    "delivered": PurchaseOrderStatus.DELIVERED_COMPLETED,
}


class ItemDeliveryState(enum.Enum):
    UNDELIVERED = "undelivered"
    PARTIAL = "partial"
    FULLY_DELIVERED = "fully_delivered"


def classify_item(quantity, delivered_quantity) -> ItemDeliveryState:
    delivered = canonical_price(delivered_quantity) or ZERO
    ordered = canonical_price(quantity) or ZERO
    if delivered == ZERO:
        return ItemDeliveryState.UNDELIVERED
    if delivered >= ordered:
        return ItemDeliveryState.FULLY_DELIVERED
    return ItemDeliveryState.PARTIAL


def derive_po_status(current: Optional[PurchaseOrderStatus], items: Iterable) -> Optional[PurchaseOrderStatus]:
    """Status implied by the items' delivery state.

    Every item fully delivered -> delivered_completed; any delivery at all ->
    partially_delivered; nothing delivered -> current status unchanged.
    """
    states = [classify_item(item.quantity, item.delivered_quantity) for item in items]
    if states and all(state == ItemDeliveryState.FULLY_DELIVERED for state in states):
        return PurchaseOrderStatus.DELIVERED_COMPLETED
    if any(state != ItemDeliveryState.UNDELIVERED for state in states):
        return PurchaseOrderStatus.PARTIALLY_DELIVERED
    return current


def normalize_legacy_status(value: Union[str, PurchaseOrderStatus, None]) -> Optional[PurchaseOrderStatus]:
    """Map a stored or submitted status onto the three-state enum; None for anything unrecognised."""
    if value is None:
        return None
    if isinstance(value, PurchaseOrderStatus):
        return value
    text = str(value).strip().lower()
    try:
        return PurchaseOrderStatus(text)
    except ValueError:
        return LEGACY_STATUS_MAP.get(text)

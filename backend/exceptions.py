"""
Typed exceptions raised by the reconciliation engine and its write paths.

CRUD functions raise these; routers translate them into HTTP responses.
Every exception carries a machine-readable ``code`` plus the structured data
needed to report it, so callers never have to parse messages.

    ReconciliationError
    |
    +-- InventoryError
    |   +-- NoMatchingInventory
    |   +-- InsufficientStock
    |   +-- SaleValidationError      (pre-validation, one entry per failing line)
    |       +-- SaleLinesNotInInventory   (also a NoMatchingInventory)
    |       +-- SaleLinesShortOfStock     (also an InsufficientStock)
    |
    +-- InvalidLinkage
    +-- ClaimLimitExceeded
    +-- InvalidStatus
    +-- DuplicateNumber
    +-- ReconciliationFailure        (logged and swallowed, never reaches a caller)
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional


class ReconciliationError(Exception):
    code: str = "RECONCILIATION_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InventoryError(ReconciliationError):
    code = "INVENTORY_ERROR"


class NoMatchingInventory(InventoryError):
    """A sale line whose key resolves to no inventory record. Sales never create stock."""
    code = "NO_MATCHING_INVENTORY"

    def __init__(self, key):
        self.key = key
        super().__init__(
            f"Item not found in inventory: project_no={key.project_no!r}, "
            f"part_no={key.part_no!r}, description={key.description!r}"
        )


class InsufficientStock(InventoryError):
    """Requested quantity exceeds the balance of the single FIFO-selected record."""
    code = "INSUFFICIENT_STOCK"

    def __init__(self, key, requested: Decimal, available: Decimal, inventory_id: Optional[int] = None):
        self.key = key
        self.requested = requested
        self.available = available
        self.inventory_id = inventory_id
        super().__init__(
            f"Insufficient stock for part_no={key.part_no!r}. "
            f"Requested: {requested}, Available: {available}"
        )


class SaleValidationError(InventoryError):
    """Raised before any write when one or more sale lines fail stock pre-validation."""
    code = "INVENTORY_VALIDATION_FAILED"

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = errors
        super().__init__("Inventory validation failed. Cannot create sales invoice.")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["validation_errors"] = self.errors
        return data


class SaleLinesNotInInventory(NoMatchingInventory, SaleValidationError):
    """Pre-validation failure where every failing line has no inventory record."""

    def __init__(self, errors: List[Dict[str, Any]], key=None):
        self.errors = errors
        self.key = key
        ReconciliationError.__init__(self, "Inventory validation failed. Item not found in inventory.")


class SaleLinesShortOfStock(InsufficientStock, SaleValidationError):
    """Pre-validation failure where every failing line asks for more than its FIFO record holds.

    key, requested, available and inventory_id describe the first failing line.
    """

    def __init__(self, errors: List[Dict[str, Any]], key=None, inventory_id: Optional[int] = None):
        self.errors = errors
        self.key = key
        self.requested = Decimal(errors[0]["requested_quantity"])
        self.available = Decimal(errors[0]["available_balance"])
        self.inventory_id = inventory_id
        ReconciliationError.__init__(self, "Inventory validation failed. Insufficient stock.")


class InvalidLinkage(ReconciliationError):
    code = "INVALID_LINKAGE"


class ClaimLimitExceeded(ReconciliationError):
    code = "CLAIM_LIMIT_EXCEEDED"

    def __init__(self, po_number: str, already_claimed: Decimal, requested: Decimal):
        self.po_number = po_number
        self.already_claimed = already_claimed
        self.requested = requested
        super().__init__(
            f"Total claim percentage cannot exceed 100%. "
            f"Already claimed: {already_claimed}%, attempting to claim: {requested}%"
        )


class InvalidStatus(ReconciliationError):
    code = "INVALID_STATUS"


class DuplicateNumber(ReconciliationError):
    code = "DUPLICATE_NUMBER"


class ReconciliationFailure(ReconciliationError):
    code = "RECONCILIATION_FAILURE"

    def __init__(self, po_id: int, cause: Exception):
        self.po_id = po_id
        self.cause = cause
        super().__init__(f"Reconciliation of purchase order {po_id} failed: {cause}")


def http_status_for(exc: ReconciliationError) -> int:
    """HTTP status a router should answer with for a domain error."""
    if isinstance(exc, DuplicateNumber):
        return 409
    return 400

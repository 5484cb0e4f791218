"""
Compound identity keys used to decide whether two independently entered
records are "the same" stock lineage or "the same" order line.

Keys are typed tuples compared field by field. Null and empty optional text
fields collapse to one canonical empty value so two postings that both leave
the field blank match each other, while a blank never matches a filled-in
value. Prices are compared as Decimal values, never as formatted strings.
"""
from decimal import Decimal
from typing import NamedTuple, Optional

EMPTY = ""


def canonical_text(value) -> str:
    """Map None / empty / whitespace-only to EMPTY, otherwise return the value unchanged."""
    if value is None:
        return EMPTY
    value = str(value)
    if not value.strip():
        return EMPTY
    return value


def canonical_price(value) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value (12.1, not 12.0999...)
    return Decimal(str(value))


class SaleKey(NamedTuple):
    """Stock identity without price: a sale line carries the selling price, not the cost basis."""
    project_no: str
    part_no: str
    description: str


class InventoryKey(NamedTuple):
    project_no: str
    part_no: str
    description: str
    unit_price: Decimal

    @property
    def sale_key(self) -> SaleKey:
        return SaleKey(self.project_no, self.part_no, self.description)


class DeliveryKey(NamedTuple):
    po_number: str
    part_no: str
    material_no: str


def inventory_key(project_no, part_no, description, unit_price) -> InventoryKey:
    price = canonical_price(unit_price)
    return InventoryKey(
        project_no=canonical_text(project_no),
        part_no=canonical_text(part_no),
        description=canonical_text(description),
        unit_price=price if price is not None else Decimal("0"),
    )


def sale_key(project_no, part_no, description) -> SaleKey:
    return SaleKey(
        project_no=canonical_text(project_no),
        part_no=canonical_text(part_no),
        description=canonical_text(description),
    )


def delivery_key(po_number, part_no, material_no) -> DeliveryKey:
    return DeliveryKey(
        po_number=canonical_text(po_number),
        part_no=canonical_text(part_no),
        material_no=canonical_text(material_no),
    )


def record_inventory_key(record) -> InventoryKey:
    """Key of a stored inventory record."""
    return inventory_key(record.project_no, record.part_no, record.description, record.unit_price)


def record_sale_key(record) -> SaleKey:
    return sale_key(record.project_no, record.part_no, record.description)

"""
Pytest configuration and shared fixtures for the order ledger test suite.

Every test gets a fresh SQLite database built from the SQLAlchemy models.
The environment is prepared before anything from the backend is imported,
since database.py reads DATABASE_URL at import time.
"""
import os
import shutil
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Generator

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="order_ledger_test_"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["LOG_DIR"] = str(_TMP_DIR / "logs")
for _setting in ("PENALTY_AMOUNT_ENABLED", "VAT_RATE", "RECONCILE_LOCK_ORDERS"):
    os.environ.pop(_setting, None)

from database import Base, SessionLocal, engine, get_db  # noqa: E402
import models  # noqa: E402,F401


@pytest.fixture
def db() -> Generator:
    """Provide a session on an empty schema."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    """FastAPI TestClient sharing the test database."""
    from fastapi.testclient import TestClient
    from main import app

    def override_get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_order(db):
    """Create a purchase order through the CRUD layer."""
    from crud.purchase_orders import create_purchase_order
    from models.purchase_orders import OrderType
    from schemas.purchase_orders import PurchaseOrderCreate

    def _make(po_number="PO-2026-001", order_type=OrderType.SUPPLIER, items=None, **fields):
        if items is None:
            items = [{"part_no": "P-100", "material_no": "M-1", "quantity": "100", "unit_price": "10"}]
        payload = PurchaseOrderCreate(po_number=po_number, order_type=order_type, items=items, **fields)
        return create_purchase_order(db, payload, user_id="tester")

    return _make


@pytest.fixture
def post_supplier_invoice(db):
    """Create a supplier invoice through the CRUD layer."""
    from crud.purchase_tax_invoices import create_purchase_tax_invoice
    from schemas.purchase_tax_invoices import PurchaseTaxInvoiceCreate

    def _post(invoice_number, items, po_number="PO-2026-001", **fields):
        payload = PurchaseTaxInvoiceCreate(
            invoice_number=invoice_number,
            invoice_date=fields.pop("invoice_date", date(2026, 3, 1)),
            po_number=po_number,
            items=items,
            **fields,
        )
        return create_purchase_tax_invoice(db, payload, user_id="tester")

    return _post


@pytest.fixture
def post_sales_invoice(db):
    """Create a sales invoice through the CRUD layer."""
    from crud.sales_tax_invoices import create_sales_tax_invoice
    from schemas.sales_tax_invoices import SalesTaxInvoiceCreate

    def _post(items, customer_po_number="CPO-1", **fields):
        payload = SalesTaxInvoiceCreate(
            invoice_date=fields.pop("invoice_date", date(2026, 3, 5)),
            customer_po_number=customer_po_number,
            items=items,
            **fields,
        )
        return create_sales_tax_invoice(db, payload, user_id="tester")

    return _post


@pytest.fixture
def stock(db):
    """Receive stock straight into the ledger and commit."""
    from crud.inventory import receive
    from utils.matching import inventory_key

    def _stock(part_no, quantity, unit_price="10", project_no=None, description=None):
        record = receive(db, inventory_key(project_no, part_no, description, unit_price), Decimal(str(quantity)))
        db.commit()
        return record

    return _stock


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests against a SQLite database")
    config.addinivalue_line("markers", "api: API tests through the FastAPI TestClient")


def pytest_sessionfinish(session, exitstatus):
    engine.dispose()
    shutil.rmtree(_TMP_DIR, ignore_errors=True)

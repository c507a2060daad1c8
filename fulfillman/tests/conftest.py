"""
Shared fixtures for the Fulfillman test suite.

Catalog scenario: one shop, one customer, a tote bag made of canvas
(3 m per bag) and thread (0.5 spool per bag).
"""

from decimal import Decimal

import pytest

from fulfillman.conf import reset_inventory_backend, reset_notifier
from fulfillman.models import BOMEntry, Customer, Material, Product, Shop, Supplier
from fulfillman.services import ledger


@pytest.fixture(autouse=True)
def _reset_backends():
    """Backend singletons are rebuilt per test (settings may be overridden)."""
    reset_inventory_backend()
    reset_notifier()
    yield
    reset_inventory_backend()
    reset_notifier()


@pytest.fixture
def shop(db):
    return Shop.objects.create(
        name="Atelier Test",
        shop_domain="atelier-test.myshopify.com",
        access_token="shpat_test",
    )


@pytest.fixture
def customer(db, shop):
    return Customer.objects.create(shop=shop, company_name="Acme Retail")


@pytest.fixture
def supplier(db, shop):
    return Supplier.objects.create(shop=shop, name="Fabric Co.")


@pytest.fixture
def tote_bag(db, shop):
    return Product.objects.create(
        shop=shop,
        external_id=1001,
        title="Tote Bag",
        sku="TOTE-01",
        price=Decimal("3000"),
    )


@pytest.fixture
def pouch(db, shop):
    return Product.objects.create(
        shop=shop,
        external_id=1002,
        title="Pouch",
        sku="POUCH-01",
        price=Decimal("1200"),
    )


@pytest.fixture
def canvas(db, shop):
    return Material.objects.create(
        shop=shop,
        name="Canvas",
        unit="m",
        unit_price=Decimal("400"),
        safety_stock=Decimal("5"),
    )


@pytest.fixture
def thread(db, shop):
    return Material.objects.create(
        shop=shop,
        name="Thread",
        unit="spool",
        unit_price=Decimal("120"),
    )


@pytest.fixture
def tote_bom(db, tote_bag, canvas, thread):
    return [
        BOMEntry.objects.create(product=tote_bag, material=canvas, quantity_per_unit=Decimal("3")),
        BOMEntry.objects.create(product=tote_bag, material=thread, quantity_per_unit=Decimal("0.5")),
    ]


@pytest.fixture
def stocked(db, canvas, thread):
    """Canvas 10 m, thread 10 spools."""
    ledger.receive(canvas, Decimal("10"), notes="Opening stock")
    ledger.receive(thread, Decimal("10"), notes="Opening stock")
    canvas.refresh_from_db()
    thread.refresh_from_db()
    return canvas, thread

"""
Tests for the material allocator (fulfillman.services.allocation).

Verifies all-or-nothing consumption: every shortage is reported and no
ledger entry is written unless every material is covered.
"""

from decimal import Decimal
from unittest.mock import patch

import pytest

from fulfillman.exceptions import (
    BomNotConfigured,
    InsufficientMaterials,
    InsufficientStock,
    InvalidQuantity,
)
from fulfillman.models import BOMEntry, Material, MaterialTransaction, Order, Product
from fulfillman.services import bom, ledger
from fulfillman.services.allocation import allocate


@pytest.fixture
def single_material_product(db, shop):
    """Product P with BOM (M, 3) and M stock 10."""
    material = Material.objects.create(shop=shop, name="M", unit="kg")
    product = Product.objects.create(shop=shop, title="P", sku="P-1", price=Decimal("100"))
    BOMEntry.objects.create(product=product, material=material, quantity_per_unit=Decimal("3"))
    ledger.receive(material, 10)
    return product, material


class TestAllocate:
    """Tests for allocate()."""

    def test_scenario_allocate_until_short(self, single_material_product):
        """Stock 10, BOM 3/unit: max 3; allocate 3 leaves 1; allocate 1 fails."""
        product, material = single_material_product

        assert bom.max_producible(product).quantity == 3

        allocate(product, 3)
        material.refresh_from_db()
        assert material.current_stock == Decimal("1")

        with pytest.raises(InsufficientMaterials):
            allocate(product, 1)

        material.refresh_from_db()
        assert material.current_stock == Decimal("1")

    def test_writes_one_out_entry_per_bom_line(self, tote_bag, tote_bom, stocked, customer):
        order = Order.objects.create(shop=customer.shop, customer=customer)

        created = allocate(tote_bag, 2, order=order)

        assert len(created) == 2
        assert {t.type for t in created} == {"out"}
        assert {t.material.name: t.quantity for t in created} == {
            "Canvas": Decimal("6"),
            "Thread": Decimal("1.0"),
        }
        assert all(t.order == order for t in created)
        assert all(order.order_number in t.notes for t in created)

        canvas, thread = stocked
        canvas.refresh_from_db()
        thread.refresh_from_db()
        assert canvas.current_stock == Decimal("4")
        assert thread.current_stock == Decimal("9")

    def test_reports_every_shortage(self, tote_bag, tote_bom, canvas, thread):
        """Both short materials are listed, not just the first."""
        ledger.receive(canvas, 1)

        with pytest.raises(InsufficientMaterials) as exc:
            allocate(tote_bag, 2)

        shortages = {s["material"]: s for s in exc.value.shortages}
        assert set(shortages) == {"Canvas", "Thread"}
        assert shortages["Canvas"]["required"] == Decimal("6")
        assert shortages["Canvas"]["available"] == Decimal("1")
        assert shortages["Canvas"]["shortage"] == Decimal("5")
        assert shortages["Thread"]["available"] == Decimal("0")

    def test_nothing_written_when_one_material_short(self, tote_bag, tote_bom, canvas, thread):
        """Canvas covered, thread short → canvas is untouched too."""
        ledger.receive(canvas, 100)
        before = MaterialTransaction.objects.count()

        with pytest.raises(InsufficientMaterials) as exc:
            allocate(tote_bag, 1)

        assert [s["material"] for s in exc.value.shortages] == ["Thread"]
        assert MaterialTransaction.objects.count() == before
        canvas.refresh_from_db()
        assert canvas.current_stock == Decimal("100")

    def test_no_bom(self, pouch):
        with pytest.raises(BomNotConfigured):
            allocate(pouch, 1)

    @pytest.mark.parametrize("quantity", [0, -2, "x", "NaN", "Infinity", "-Infinity"])
    def test_invalid_quantity(self, tote_bag, tote_bom, quantity):
        with pytest.raises(InvalidQuantity):
            allocate(tote_bag, quantity)

    def test_ledger_invariant_holds_after_runs(self, tote_bag, tote_bom, stocked):
        allocate(tote_bag, 1)
        allocate(tote_bag, 2)
        with pytest.raises(InsufficientMaterials):
            allocate(tote_bag, 1)

        for material in stocked:
            material.refresh_from_db()
            assert ledger.ledger_balance(material) == material.current_stock


class TestAllocateAtomicity:
    """A failure after some ledger writes leaves no partial effect."""

    def test_failed_second_write_rolls_back_first(self, tote_bag, tote_bom, stocked):
        real_record = ledger.record
        calls = []

        def failing_record(*args, **kwargs):
            calls.append(args[0])
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return real_record(*args, **kwargs)

        with patch.object(ledger, "record", side_effect=failing_record):
            with pytest.raises(RuntimeError):
                allocate(tote_bag, 1)

        assert len(calls) == 2
        assert not MaterialTransaction.objects.filter(type="out").exists()
        for material in stocked:
            material.refresh_from_db()
            assert material.current_stock == Decimal("10")
            assert ledger.ledger_balance(material) == material.current_stock

    def test_stock_drained_after_check_is_rejected(self, tote_bag, tote_bom, stocked):
        """
        Stock that drops between the sufficiency check and the debit is
        caught by the conditional UPDATE and every line is rolled back.
        """
        real_record = ledger.record
        calls = []

        def drain_then_record(material, *args, **kwargs):
            calls.append(material)
            if len(calls) == 1:
                Material.objects.filter(pk__in=[m.pk for m in stocked]).exclude(
                    pk=material.pk
                ).update(current_stock=Decimal("0.1"))
            return real_record(material, *args, **kwargs)

        with patch.object(ledger, "record", side_effect=drain_then_record):
            with pytest.raises(InsufficientStock):
                allocate(tote_bag, 1)

        assert len(calls) == 2
        assert not MaterialTransaction.objects.filter(type="out").exists()
        for material in stocked:
            material.refresh_from_db()
            assert material.current_stock == Decimal("10")

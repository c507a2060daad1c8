"""
BOM resolver -- costing and producibility from a product's Bill of Materials.

Read-only: nothing here mutates stock.
"""

from decimal import ROUND_HALF_UP, Decimal

from fulfillman.models import BOMEntry
from fulfillman.results import MaterialProducibility, Producibility, ProductCost

ZERO = Decimal("0")


def entries(product):
    """BOM entries of a product with their materials."""
    return BOMEntry.objects.filter(product=product).select_related("material").order_by(
        "material_id"
    )


def cost(product) -> ProductCost:
    """
    Manufacturing cost of ONE unit of ``product``.

    cost = Σ material.unit_price × quantity_per_unit (no unit price counts as 0)
    gross_profit_rate = gross_profit / price × 100, one decimal; 0 if price is 0
    """
    manufacturing_cost = ZERO
    for entry in entries(product):
        unit_price = entry.material.unit_price or ZERO
        manufacturing_cost += unit_price * entry.quantity_per_unit

    manufacturing_cost = manufacturing_cost.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    selling_price = product.price or ZERO
    gross_profit = selling_price - manufacturing_cost

    if selling_price > 0:
        rate = (gross_profit / selling_price * 100).quantize(
            Decimal("0.1"), rounding=ROUND_HALF_UP
        )
    else:
        rate = ZERO

    return ProductCost(
        product_id=product.pk,
        manufacturing_cost=manufacturing_cost,
        selling_price=selling_price,
        gross_profit=gross_profit,
        gross_profit_rate=rate,
    )


def max_producible(product) -> Producibility:
    """
    How many units of ``product`` current material stock allows.

    Per entry: floor(current_stock / quantity_per_unit); result is the min.
    A product without BOM entries returns ``quantity=None`` (not configured),
    never 0.
    """
    materials = []
    for entry in entries(product):
        material = entry.material
        producible = int(material.current_stock // entry.quantity_per_unit)
        materials.append(
            MaterialProducibility(
                material_id=material.pk,
                material=material.name,
                unit=material.unit,
                current_stock=material.current_stock,
                required_per_unit=entry.quantity_per_unit,
                producible_quantity=max(producible, 0),
            )
        )

    if not materials:
        return Producibility(product_id=product.pk, quantity=None)

    return Producibility(
        product_id=product.pk,
        quantity=min(m.producible_quantity for m in materials),
        materials=materials,
    )


def requirements(product, quantity) -> list[tuple[BOMEntry, Decimal]]:
    """(entry, quantity_per_unit × quantity) for every BOM entry."""
    quantity = Decimal(str(quantity))
    return [(entry, entry.quantity_per_unit * quantity) for entry in entries(product)]

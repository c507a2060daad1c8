"""
Fulfillman Result Types.

Structured results for costing, producibility, inventory sync and alerts.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class MaterialShortage:
    """A material that cannot cover a manufacturing run."""

    material_id: int
    material: str
    unit: str
    required: Decimal
    available: Decimal

    @property
    def shortage(self) -> Decimal:
        return self.required - self.available

    def as_dict(self) -> dict:
        return {**asdict(self), "shortage": self.shortage}


@dataclass(frozen=True)
class ProductCost:
    """Manufacturing cost breakdown for one unit of a product."""

    product_id: int
    manufacturing_cost: Decimal
    selling_price: Decimal
    gross_profit: Decimal
    gross_profit_rate: Decimal


@dataclass(frozen=True)
class MaterialProducibility:
    """How many units a single BOM line allows."""

    material_id: int
    material: str
    unit: str
    current_stock: Decimal
    required_per_unit: Decimal
    producible_quantity: int


@dataclass(frozen=True)
class Producibility:
    """
    Maximum producible quantity for a product.

    ``quantity is None`` means the product has no BOM ("not configured"),
    which is not the same as ``quantity == 0`` ("cannot produce").
    """

    product_id: int
    quantity: int | None
    materials: list[MaterialProducibility] = field(default_factory=list)

    @property
    def configured(self) -> bool:
        return self.quantity is not None


@dataclass(frozen=True)
class StockAdjustment:
    """Finished-goods delta applied to a product by an order transition."""

    product_id: int
    sku: str
    delta: int
    cached_before: int
    cached_after: int

    @property
    def clamped(self) -> bool:
        return self.cached_before + self.delta != self.cached_after


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one push to the external inventory system."""

    product_id: int
    delta: int
    external_before: int

    @property
    def external_after(self) -> int:
        return self.external_before + self.delta


@dataclass(frozen=True)
class LowStockAlert:
    """Material at or below its safety stock."""

    material_id: int
    material: str
    unit: str
    current_stock: Decimal
    safety_stock: Decimal
    severity: str  # critical | warning | info

    @property
    def shortage(self) -> Decimal:
        return max(Decimal("0"), self.safety_stock - self.current_stock)

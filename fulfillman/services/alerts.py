"""
Low-stock alerts for materials at or below their safety stock.
"""

from decimal import Decimal

from django.db.models import F

from fulfillman.models import Material
from fulfillman.results import LowStockAlert

SEVERITY_ORDER = {"critical": 0, "warning": 1, "info": 2}


def _severity(current: Decimal, safety: Decimal) -> str:
    if current <= 0:
        return "critical"
    if current / safety <= Decimal("0.5"):
        return "warning"
    return "info"


def low_stock_alerts(shop) -> list[LowStockAlert]:
    """
    Materials of ``shop`` with current_stock <= safety_stock (> 0).

    Sorted critical → warning → info, then by material name.
    """
    materials = Material.objects.filter(
        shop=shop,
        safety_stock__gt=0,
        current_stock__lte=F("safety_stock"),
    )

    alerts = [
        LowStockAlert(
            material_id=m.pk,
            material=m.name,
            unit=m.unit,
            current_stock=m.current_stock,
            safety_stock=m.safety_stock,
            severity=_severity(m.current_stock, m.safety_stock),
        )
        for m in materials
    ]
    return sorted(alerts, key=lambda a: (SEVERITY_ORDER[a.severity], a.material))

"""
Django Atelier - Production Order & Inventory Costing Engine.

Tracks raw material consumed by artisans and costs what they produce.

Usage:
    from atelier import atelier, AtelierError, MaterialRequest, OutputTarget

    order = atelier.create_order(
        date(2026, 3, 2),
        spinning,
        fatima,
        materials=[MaterialRequest(raw_red, Decimal("100"), Decimal("95"))],
    )

    for line in atelier.list_pending_lines(order):
        atelier.complete_line(order, line, Decimal("90"), OutputTarget(store, yarn))

    order.refresh_from_db()
    print(order.status, order.total_cost, order.unit_cost)
"""

from atelier.exceptions import AtelierError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("atelier", "Atelier"):
        from atelier.service import Atelier

        return Atelier
    if name in ("MaterialRequest", "OutputTarget", "LineCompletion"):
        from atelier import service

        return getattr(service, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "atelier",
    "Atelier",
    "AtelierError",
    "MaterialRequest",
    "OutputTarget",
    "LineCompletion",
]
__version__ = "0.1.0"

"""
Atelier Models.

Core models for production costing:
- CodeSequence: Atomic per-category code counter
- Warehouse, ProductType, ColorCode: Stock line identity catalogs
- ServiceType, Artisan, ArtisanService: Service overhead and artisan rates
- StockLine: Inventory bucket with weighted-average unit cost
- StockMovement: Audit of every debit/credit
- ProductionOrder: Outsourced production job
- MaterialConsumption: Material line of an order
- OrderOutput: Stock produced by a completed line
"""

from atelier.models.catalog import (
    Artisan,
    ArtisanService,
    ColorCode,
    ProductType,
    ServiceType,
    Warehouse,
)
from atelier.models.order import (
    LineStatus,
    MaterialConsumption,
    OrderOutput,
    OrderStatus,
    ProductionOrder,
)
from atelier.models.sequence import CODE_CATEGORIES, CodeSequence
from atelier.models.stock import MovementType, StockLine, StockMovement

__all__ = [
    "CODE_CATEGORIES",
    "CodeSequence",
    "Warehouse",
    "ProductType",
    "ColorCode",
    "ServiceType",
    "Artisan",
    "ArtisanService",
    "StockLine",
    "StockMovement",
    "MovementType",
    "ProductionOrder",
    "OrderStatus",
    "MaterialConsumption",
    "LineStatus",
    "OrderOutput",
]

"""
Inventory Ledger.

Debit/credit of stock lines with weighted-average costing.

Every function runs inside transaction.atomic() and locks the stock
line with SELECT FOR UPDATE before reading its balance, so the balance
check and the write are atomic together. Called from inside another
atomic block (order creation, line completion) they join that
transaction and roll back with it.

Usage:
    from atelier import ledger
    from atelier.colors import CatalogColor

    line = ledger.receive(wh, yarn, CatalogColor(red), 10, Decimal("5"))
    ledger.credit(line, 10, Decimal("7"))   # → 20 @ 6
    ledger.debit(line, 5)                   # → 15 @ 6
"""

import logging
from decimal import Decimal

from django.db import transaction

from atelier.colors import (
    NO_COLOR,
    CatalogColor,
    FreeformColor,
    NewColor,
    NoColor,
)
from atelier.costing import quantize_money, quantize_quantity, weighted_average
from atelier.exceptions import InsufficientStock, NotFound, ValidationError
from atelier.models import (
    ColorCode,
    MovementType,
    ProductType,
    StockLine,
    StockMovement,
    Warehouse,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════
# LOOKUPS
# ══════════════════════════════════════════════════════════════


def _resolve(model, value, lock: bool = False):
    """Instance or primary key → fresh instance (optionally row-locked)."""
    pk = value.pk if isinstance(value, model) else value
    qs = model.objects.select_for_update() if lock else model.objects.all()
    try:
        return qs.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFound(entity=model.__name__, id=pk)


def lock_stock_line(stock_line) -> StockLine:
    """Fetch and row-lock a stock line. Caller must be inside a transaction."""
    return _resolve(StockLine, stock_line, lock=True)


def resolve_color(identity) -> tuple[ColorCode | None, str]:
    """
    Map a color identity variant to (color_code, color_description).

    NewColor creates the catalog entry when its code is unknown.
    """
    if identity is None or isinstance(identity, NoColor):
        return None, ""

    if isinstance(identity, CatalogColor):
        return _resolve(ColorCode, identity.color_code), ""

    if isinstance(identity, FreeformColor):
        description = (identity.description or "").strip()
        if not description:
            raise ValidationError("INVALID_COLOR", reason="empty description")
        return None, description

    if isinstance(identity, NewColor):
        if not identity.main_color:
            raise ValidationError("INVALID_COLOR", reason="main_color required")
        if identity.code:
            color, created = ColorCode.objects.get_or_create(
                code=identity.code,
                defaults={"main_color": identity.main_color, "shade": identity.shade},
            )
        else:
            color = ColorCode.objects.create(
                main_color=identity.main_color, shade=identity.shade
            )
            created = True
        if created:
            logger.info(
                f"Color {color.code} added to catalog",
                extra={"color_code": color.code, "main_color": color.main_color},
            )
        return color, ""

    raise ValidationError("INVALID_COLOR", identity=repr(identity))


# ══════════════════════════════════════════════════════════════
# STOCK LINES
# ══════════════════════════════════════════════════════════════


def get_or_create_line(warehouse, product_type, color=NO_COLOR) -> StockLine:
    """
    Return the stock line for (warehouse, product type, color), creating
    an empty one when the combination does not exist yet.
    """
    with transaction.atomic():
        warehouse = _resolve(Warehouse, warehouse)
        product_type = _resolve(ProductType, product_type)
        color_code, color_description = resolve_color(color)

        line, created = StockLine.objects.select_for_update().get_or_create(
            warehouse=warehouse,
            product_type=product_type,
            color_code=color_code,
            color_description=color_description,
        )

    if created:
        logger.info(
            f"Stock line created: {line}",
            extra={"stock_line": line.pk, "color": line.display_color},
        )
    return line


def receive(
    warehouse,
    product_type,
    color,
    quantity,
    unit_cost,
    unit_price=None,
    note: str = "",
    created_by: str = "",
) -> StockLine:
    """
    Manual/opening stock entry.

    Merges into an existing line through weighted average instead of
    overwriting its cost.
    """
    quantity = quantize_quantity(quantity)
    if quantity < 0:
        raise ValidationError("INVALID_QUANTITY", quantity=str(quantity))

    with transaction.atomic():
        line = get_or_create_line(warehouse, product_type, color)

        if unit_price is not None:
            line.unit_price = quantize_money(unit_price)
            line.save(update_fields=["unit_price", "updated_at"])

        if quantity > 0:
            line = credit(
                line,
                quantity,
                unit_cost,
                note=note or "stock entry",
                created_by=created_by,
            )

    return line


# ══════════════════════════════════════════════════════════════
# DEBIT / CREDIT
# ══════════════════════════════════════════════════════════════


def debit(
    stock_line,
    quantity,
    order=None,
    note: str = "",
    created_by: str = "",
) -> StockLine:
    """
    Consume stock. Unit cost is unaffected.

    Raises:
        ValidationError: quantity <= 0
        InsufficientStock: quantity exceeds the current balance
    """
    quantity = quantize_quantity(quantity)
    if quantity <= 0:
        raise ValidationError("INVALID_QUANTITY", quantity=str(quantity))

    with transaction.atomic():
        line = lock_stock_line(stock_line)

        if quantity > line.quantity:
            logger.warning(
                f"Debit rejected on stock line {line.pk}: {quantity} > {line.quantity}",
                extra={
                    "stock_line": line.pk,
                    "requested": float(quantity),
                    "available": float(line.quantity),
                },
            )
            raise InsufficientStock(
                stock_line=line.pk,
                requested=str(quantity),
                available=str(line.quantity),
            )

        line.quantity = line.quantity - quantity
        line.save(update_fields=["quantity", "updated_at"])

        StockMovement.objects.create(
            stock_line=line,
            movement_type=MovementType.OUT,
            quantity=quantity,
            unit_cost=line.unit_cost,
            order=order,
            note=note,
            created_by=created_by,
        )

    logger.info(
        f"Stock line {line.pk}: -{quantity} (balance {line.quantity})",
        extra={"stock_line": line.pk, "quantity": float(quantity)},
    )
    return line


def credit(
    stock_line,
    quantity,
    unit_cost,
    order=None,
    note: str = "",
    created_by: str = "",
) -> StockLine:
    """
    Add stock and blend its cost into the line:

        new_unit_cost = (old_qty × old_cost + qty × unit_cost) / (old_qty + qty)

    Raises:
        ValidationError: quantity <= 0 or unit_cost < 0
    """
    quantity = quantize_quantity(quantity)
    unit_cost = quantize_money(unit_cost)
    if quantity <= 0:
        raise ValidationError("INVALID_QUANTITY", quantity=str(quantity))
    if unit_cost < 0:
        raise ValidationError("INVALID_UNIT_COST", unit_cost=str(unit_cost))

    with transaction.atomic():
        line = lock_stock_line(stock_line)

        old_quantity = line.quantity
        line.unit_cost = weighted_average(old_quantity, line.unit_cost, quantity, unit_cost)
        line.quantity = old_quantity + quantity
        line.save(update_fields=["quantity", "unit_cost", "updated_at"])

        StockMovement.objects.create(
            stock_line=line,
            movement_type=MovementType.IN,
            quantity=quantity,
            unit_cost=unit_cost,
            order=order,
            note=note,
            created_by=created_by,
        )

    logger.info(
        f"Stock line {line.pk}: +{quantity} @ {unit_cost} "
        f"(balance {line.quantity} @ {line.unit_cost})",
        extra={
            "stock_line": line.pk,
            "quantity": float(quantity),
            "unit_cost": float(unit_cost),
            "average_cost": float(line.unit_cost),
        },
    )
    return line


def balance(stock_line) -> Decimal:
    """Current quantity of a stock line."""
    return _resolve(StockLine, stock_line).quantity

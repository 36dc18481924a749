"""
Cost Allocation.

Pure functions, no ORM and no I/O, so they can be tested without a
database. All arithmetic is Decimal and results are quantized to the
storage precision of the models:

    quantities → 3 decimal places
    money      → 4 decimal places
    rates      → 4 decimal places

Per completed material line:

    labor_cost    = labor_rate × actual_output
    overhead_cost = labor_cost × overhead_rate
    total_cost    = material_cost + labor_cost + overhead_cost
    unit_cost     = total_cost / actual_output      (0 when nothing produced)

Waste is absorbed by the produced quantity: a line that yields less
carries the whole material cost on fewer units.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

QUANTITY_PLACES = 3
MONEY_PLACES = 4
RATE_PLACES = 4

_QUANTITY_EXP = Decimal(1).scaleb(-QUANTITY_PLACES)
_MONEY_EXP = Decimal(1).scaleb(-MONEY_PLACES)
_RATE_EXP = Decimal(1).scaleb(-RATE_PLACES)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Largest values the model fields can hold
MAX_QUANTITY = Decimal("99999999999.999")  # DecimalField(14, 3)
MAX_MONEY = Decimal("999999999999.9999")  # DecimalField(16, 4)
MAX_RATE = MAX_MONEY  # extraction_rate, DecimalField(16, 4)


def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_quantity(value) -> Decimal:
    return to_decimal(value).quantize(_QUANTITY_EXP, rounding=ROUND_HALF_UP)


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(_MONEY_EXP, rounding=ROUND_HALF_UP)


def quantize_rate(value) -> Decimal:
    return to_decimal(value).quantize(_RATE_EXP, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CostAllocation:
    """Cost of one completed material line."""

    material_cost: Decimal
    labor_cost: Decimal
    overhead_cost: Decimal
    total_cost: Decimal
    unit_cost: Decimal

    def as_dict(self) -> dict:
        return {
            "material_cost": self.material_cost,
            "labor_cost": self.labor_cost,
            "overhead_cost": self.overhead_cost,
            "total_cost": self.total_cost,
            "unit_cost": self.unit_cost,
        }


def allocate(material_cost, labor_rate, overhead_rate, actual_output_quantity) -> CostAllocation:
    """
    Allocate material, labor and overhead to the output of one line.

    Args:
        material_cost: Cost locked when the material was debited
        labor_rate: Labor cost per produced unit
        overhead_rate: Fraction of labor cost (0.10 = 10%)
        actual_output_quantity: Units actually produced (>= 0)

    Returns:
        CostAllocation. unit_cost is 0 for a waste-only outcome.

    Example:
        allocate(Decimal("500"), Decimal("6"), Decimal("0.10"), Decimal("90"))
        # labor 540, overhead 54, total 1094, unit_cost 12.1556
    """
    material_cost = quantize_money(material_cost)
    labor_rate = to_decimal(labor_rate)
    overhead_rate = to_decimal(overhead_rate)
    actual = to_decimal(actual_output_quantity)

    if actual < 0:
        raise ValueError("actual_output_quantity must be >= 0")
    if labor_rate < 0 or overhead_rate < 0:
        raise ValueError("rates must be >= 0")

    labor_cost = quantize_money(labor_rate * actual)
    overhead_cost = quantize_money(labor_cost * overhead_rate)
    total_cost = material_cost + labor_cost + overhead_cost

    if actual == 0:
        unit_cost = quantize_money(ZERO)
    else:
        unit_cost = quantize_money(total_cost / actual)

    return CostAllocation(
        material_cost=material_cost,
        labor_cost=labor_cost,
        overhead_cost=overhead_cost,
        total_cost=total_cost,
        unit_cost=unit_cost,
    )


def extraction_rate(actual_output_quantity, expected_output_quantity) -> Decimal | None:
    """
    Yield of a material line in percent.

    None (not zero) when no positive expectation was recorded.
    """
    if expected_output_quantity is None:
        return None
    expected = to_decimal(expected_output_quantity)
    if expected <= 0:
        return None
    return quantize_rate(to_decimal(actual_output_quantity) / expected * HUNDRED)


def weighted_average(old_quantity, old_unit_cost, quantity, unit_cost) -> Decimal:
    """
    Unit cost after adding ``quantity`` at ``unit_cost`` to existing stock.

    (10 @ 5) + (10 @ 7) → 6
    """
    old_quantity = to_decimal(old_quantity)
    quantity = to_decimal(quantity)
    total_quantity = old_quantity + quantity
    if total_quantity <= 0:
        raise ValueError("resulting quantity must be > 0")
    value = old_quantity * to_decimal(old_unit_cost) + quantity * to_decimal(unit_cost)
    return quantize_money(value / total_quantity)

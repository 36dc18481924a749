"""
Tests for cost allocation arithmetic (atelier.costing).

Pure functions, no database.
"""

import pytest
from decimal import Decimal

from atelier.costing import (
    CostAllocation,
    allocate,
    extraction_rate,
    quantize_money,
    quantize_quantity,
    quantize_rate,
    to_decimal,
    weighted_average,
)


class TestQuantize:
    def test_quantity_three_places_half_up(self):
        assert quantize_quantity("1.2345") == Decimal("1.235")
        assert quantize_quantity(Decimal("1.2344")) == Decimal("1.234")

    def test_money_four_places_half_up(self):
        assert quantize_money(Decimal("0.00005")) == Decimal("0.0001")
        assert quantize_money(10) == Decimal("10.0000")

    def test_rate_four_places(self):
        assert quantize_rate(Decimal("93.684210")) == Decimal("93.6842")

    def test_float_goes_through_str(self):
        """0.1 must not carry binary noise."""
        assert to_decimal(0.1) == Decimal("0.1")


class TestAllocate:
    """Tests for allocate()."""

    def test_material_labor_overhead(self):
        result = allocate(Decimal("500"), Decimal("6"), Decimal("0.10"), Decimal("90"))

        assert isinstance(result, CostAllocation)
        assert result.material_cost == Decimal("500")
        assert result.labor_cost == Decimal("540")
        assert result.overhead_cost == Decimal("54")
        assert result.total_cost == Decimal("1094")
        assert result.unit_cost == Decimal("12.1556")

    def test_total_is_sum_of_parts(self):
        result = allocate(Decimal("123.4567"), Decimal("1.75"), Decimal("0.15"), Decimal("33.3"))
        assert result.total_cost == result.material_cost + result.labor_cost + result.overhead_cost

    def test_waste_only_outcome(self):
        """Zero output: no labor, no overhead, unit cost 0, material still counted."""
        result = allocate(Decimal("500"), Decimal("6"), Decimal("0.10"), Decimal("0"))

        assert result.labor_cost == 0
        assert result.overhead_cost == 0
        assert result.total_cost == Decimal("500")
        assert result.unit_cost == 0

    def test_zero_overhead_rate(self):
        result = allocate(Decimal("100"), Decimal("2"), Decimal("0"), Decimal("10"))
        assert result.overhead_cost == 0
        assert result.unit_cost == Decimal("12")

    def test_negative_output_rejected(self):
        with pytest.raises(ValueError):
            allocate(Decimal("100"), Decimal("2"), Decimal("0.1"), Decimal("-1"))

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError):
            allocate(Decimal("100"), Decimal("-2"), Decimal("0.1"), Decimal("10"))

    def test_as_dict(self):
        data = allocate(Decimal("10"), Decimal("1"), Decimal("0.1"), Decimal("10")).as_dict()
        assert set(data) == {
            "material_cost",
            "labor_cost",
            "overhead_cost",
            "total_cost",
            "unit_cost",
        }


class TestExtractionRate:
    def test_ninety_percent(self):
        assert extraction_rate(Decimal("90"), Decimal("100")) == Decimal("90.0")

    def test_above_expectation(self):
        assert extraction_rate(Decimal("110"), Decimal("100")) == Decimal("110")

    def test_no_expectation_is_none(self):
        assert extraction_rate(Decimal("90"), None) is None

    def test_zero_expectation_is_none(self):
        assert extraction_rate(Decimal("90"), Decimal("0")) is None

    def test_zero_output(self):
        assert extraction_rate(Decimal("0"), Decimal("50")) == Decimal("0")


class TestWeightedAverage:
    def test_blend(self):
        """(10 @ 5) + (10 @ 7) → 6."""
        assert weighted_average(10, Decimal("5"), 10, Decimal("7")) == Decimal("6.0")

    def test_empty_line_takes_incoming_cost(self):
        assert weighted_average(0, Decimal("0"), 25, Decimal("3.3333")) == Decimal("3.3333")

    def test_uneven_quantities(self):
        # (30 × 4 + 10 × 8) / 40 = 5
        assert weighted_average(30, Decimal("4"), 10, Decimal("8")) == Decimal("5")

    def test_zero_result_rejected(self):
        with pytest.raises(ValueError):
            weighted_average(0, Decimal("5"), 0, Decimal("7"))

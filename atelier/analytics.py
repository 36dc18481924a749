"""
Atelier Analytics.

Production cost and yield reporting.
Uses aggregate() so every report is a single SQL query.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from atelier.costing import HUNDRED, ZERO, quantize_money, quantize_rate
from atelier.exceptions import NotFound
from atelier.models import (
    Artisan,
    LineStatus,
    MaterialConsumption,
    OrderStatus,
    ProductionOrder,
)


def _sum(field: str, **kwargs):
    return Coalesce(
        Sum(field, **kwargs),
        Value(Decimal("0")),
        output_field=DecimalField(max_digits=20, decimal_places=4),
    )


class ProductionAnalytics:
    """Analytics for production data."""

    @classmethod
    def cost_summary(cls, date_from: date = None, date_to: date = None) -> dict[str, Any]:
        """
        Cost totals over completed orders.

        Returns:
            {
                'orders': 12,
                'total_material_cost': Decimal('5400.0000'),
                'total_labor_cost': Decimal('1080.0000'),
                'overhead_cost': Decimal('108.0000'),
                'total_cost': Decimal('6588.0000'),
                'total_output_quantity': Decimal('1180.000'),
                'average_unit_cost': Decimal('5.5831'),
            }
        """
        qs = ProductionOrder.objects.filter(status=OrderStatus.COMPLETED)

        if date_from:
            qs = qs.filter(date__gte=date_from)
        if date_to:
            qs = qs.filter(date__lte=date_to)

        stats = qs.aggregate(
            orders=Count("id", distinct=True),
            total_material_cost=_sum("total_material_cost"),
            total_labor_cost=_sum("total_labor_cost"),
            overhead_cost=_sum("overhead_cost"),
            total_cost=_sum("total_cost"),
        )

        output = MaterialConsumption.objects.filter(order__in=qs).aggregate(
            total=_sum("actual_output_quantity")
        )["total"]

        stats["total_output_quantity"] = output
        stats["average_unit_cost"] = (
            quantize_money(stats["total_cost"] / output) if output > 0 else None
        )
        return stats

    @classmethod
    def yield_by_artisan(
        cls, artisan, service_type=None, date_from: date = None, date_to: date = None
    ) -> dict[str, Any]:
        """
        Yield of an artisan's completed lines.

        Extraction rate only counts lines that declared an expected output.

        Args:
            artisan: Artisan or pk
            service_type: ServiceType or pk (optional)

        Returns:
            {
                'artisan': 'ART7000',
                'lines': 8,
                'quantity_used': Decimal('800.000'),
                'produced': Decimal('712.000'),
                'waste': Decimal('64.000'),
                'extraction_rate': Decimal('93.6842'),
                'labor_cost': Decimal('712.0000'),
            }
        """
        if not isinstance(artisan, Artisan):
            try:
                artisan = Artisan.objects.get(pk=artisan)
            except (Artisan.DoesNotExist, ValueError, TypeError):
                raise NotFound(entity="Artisan", id=artisan)

        qs = MaterialConsumption.objects.filter(
            order__artisan=artisan, status=LineStatus.COMPLETED
        )

        if service_type is not None:
            qs = qs.filter(order__service_type=service_type)
        if date_from:
            qs = qs.filter(order__date__gte=date_from)
        if date_to:
            qs = qs.filter(order__date__lte=date_to)

        with_expected = Q(expected_output_quantity__gt=0)
        stats = qs.aggregate(
            lines=Count("id"),
            quantity_used=_sum("quantity_used"),
            produced=_sum("actual_output_quantity"),
            waste=_sum("waste_quantity"),
            labor_cost=_sum("labor_cost"),
            expected_basis=_sum("expected_output_quantity", filter=with_expected),
            actual_basis=_sum("actual_output_quantity", filter=with_expected),
        )

        expected_basis = stats.pop("expected_basis")
        actual_basis = stats.pop("actual_basis")

        stats["artisan"] = artisan.code
        stats["extraction_rate"] = (
            quantize_rate(actual_basis / expected_basis * HUNDRED)
            if expected_basis > ZERO
            else None
        )
        return stats

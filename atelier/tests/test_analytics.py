"""
Tests for ProductionAnalytics (atelier.analytics).
"""

import pytest
from datetime import date
from decimal import Decimal

from atelier import atelier, ledger
from atelier.analytics import ProductionAnalytics
from atelier.colors import NO_COLOR
from atelier.exceptions import NotFound
from atelier.models import (
    Artisan,
    ArtisanService,
    ProductType,
    ServiceType,
    Warehouse,
)
from atelier.service import LineCompletion, MaterialRequest, OutputTarget


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def warehouse(db):
    return Warehouse.objects.create(name="Analytics")


@pytest.fixture
def raw(db):
    return ProductType.objects.create(name="Raw silk")


@pytest.fixture
def finished(db):
    return ProductType.objects.create(name="Silk thread")


@pytest.fixture
def spinning(db):
    return ServiceType.objects.create(name="Spinning", overhead_rate=Decimal("0.10"))


@pytest.fixture
def artisan(db, spinning):
    a = Artisan.objects.create(name="Zineb")
    ArtisanService.objects.create(artisan=a, service_type=spinning, rate=Decimal("6"))
    return a


@pytest.fixture
def stock_line(warehouse, raw):
    return ledger.receive(warehouse, raw, NO_COLOR, Decimal("200"), Decimal("5"))


@pytest.fixture
def completed_order(spinning, artisan, stock_line, warehouse, finished):
    """
    line 1: 100 @ 5, expected 100, produced 90, waste 8
    line 2: 50 @ 5, no expectation, produced 45
    """
    order = atelier.create_order(
        date(2026, 4, 10),
        spinning,
        artisan,
        materials=[
            MaterialRequest(stock_line, Decimal("100"), Decimal("100")),
            MaterialRequest(stock_line, Decimal("50")),
        ],
    )
    first, second = atelier.list_pending_lines(order)
    target = OutputTarget(warehouse, finished)
    atelier.complete_lines(
        order,
        [
            LineCompletion(first, Decimal("90"), target, Decimal("8")),
            LineCompletion(second, Decimal("45"), target),
        ],
    )
    order.refresh_from_db()
    return order


@pytest.fixture
def open_order(spinning, artisan, stock_line):
    return atelier.create_order(
        date(2026, 4, 12),
        spinning,
        artisan,
        materials=[MaterialRequest(stock_line, Decimal("10"), Decimal("10"))],
    )


# ═══════════════════════════════════════════════════════════════════
# cost_summary
# ═══════════════════════════════════════════════════════════════════


class TestCostSummary:
    def test_totals_of_completed_orders(self, completed_order, open_order):
        summary = ProductionAnalytics.cost_summary()

        assert summary["orders"] == 1
        assert summary["total_material_cost"] == Decimal("750")
        assert summary["total_labor_cost"] == Decimal("810")
        assert summary["overhead_cost"] == Decimal("81")
        assert summary["total_cost"] == Decimal("1641")
        assert summary["total_output_quantity"] == Decimal("135")
        # 1641 / 135
        assert summary["average_unit_cost"] == Decimal("12.1556")

    def test_date_filter_excludes(self, completed_order):
        summary = ProductionAnalytics.cost_summary(date_from=date(2026, 5, 1))

        assert summary["orders"] == 0
        assert summary["total_cost"] == 0
        assert summary["average_unit_cost"] is None

    def test_date_filter_includes(self, completed_order):
        summary = ProductionAnalytics.cost_summary(
            date_from=date(2026, 4, 1), date_to=date(2026, 4, 30)
        )
        assert summary["orders"] == 1

    def test_empty(self, db):
        summary = ProductionAnalytics.cost_summary()

        assert summary["orders"] == 0
        assert summary["total_output_quantity"] == 0


# ═══════════════════════════════════════════════════════════════════
# yield_by_artisan
# ═══════════════════════════════════════════════════════════════════


class TestYieldByArtisan:
    def test_yield_of_completed_lines(self, completed_order, open_order, artisan):
        stats = ProductionAnalytics.yield_by_artisan(artisan)

        assert stats["artisan"] == artisan.code
        assert stats["lines"] == 2
        assert stats["quantity_used"] == Decimal("150")
        assert stats["produced"] == Decimal("135")
        assert stats["waste"] == Decimal("8")
        assert stats["labor_cost"] == Decimal("810")
        # only line 1 declared an expectation: 90 / 100
        assert stats["extraction_rate"] == Decimal("90")

    def test_no_expectation_no_rate(self, artisan, spinning, stock_line, warehouse, finished):
        order = atelier.create_order(
            date(2026, 4, 10),
            spinning,
            artisan,
            materials=[MaterialRequest(stock_line, Decimal("10"))],
        )
        line = order.lines.get()
        atelier.complete_line(order, line, Decimal("9"), OutputTarget(warehouse, finished))

        stats = ProductionAnalytics.yield_by_artisan(artisan)
        assert stats["extraction_rate"] is None

    def test_other_artisan_empty(self, completed_order, spinning):
        other = Artisan.objects.create(name="Other")
        stats = ProductionAnalytics.yield_by_artisan(other)

        assert stats["lines"] == 0
        assert stats["produced"] == 0
        assert stats["extraction_rate"] is None

    def test_service_filter(self, completed_order, artisan):
        dyeing = ServiceType.objects.create(name="Dyeing")
        assert ProductionAnalytics.yield_by_artisan(artisan, service_type=dyeing)["lines"] == 0

    def test_accepts_artisan_pk(self, completed_order, artisan):
        stats = ProductionAnalytics.yield_by_artisan(artisan.pk)

        assert stats["artisan"] == artisan.code
        assert stats["lines"] == 2

    def test_unknown_artisan(self, db):
        with pytest.raises(NotFound) as exc:
            ProductionAnalytics.yield_by_artisan(99999)

        assert exc.value.details["entity"] == "Artisan"

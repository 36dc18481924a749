"""
Tests for Atelier signals and handlers (atelier.signals.handlers).

Verifies that:
- accrue_artisan_labor reports labor of each completed line
- Waste-only lines and disabled accrual report nothing
- A failing backend rolls the completion back
- order_created / line_completed / order_completed fire once each
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

from atelier import atelier, ledger
from atelier.adapters.noop import NoopArtisanLedger
from atelier.colors import NO_COLOR
from atelier.conf import get_artisan_ledger_backend, reset_artisan_ledger_backend
from atelier.models import (
    Artisan,
    ArtisanService,
    LineStatus,
    MaterialConsumption,
    OrderOutput,
    ProductType,
    ServiceType,
    Warehouse,
)
from atelier.protocols import ArtisanLedgerBackend, LaborAccrual
from atelier.service import MaterialRequest, OutputTarget
from atelier.signals import line_completed, order_completed, order_created


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture(autouse=True)
def fresh_backend():
    reset_artisan_ledger_backend()
    yield
    reset_artisan_ledger_backend()


@pytest.fixture
def warehouse(db):
    return Warehouse.objects.create(name="Signals")


@pytest.fixture
def product_type(db):
    return ProductType.objects.create(name="Cotton")


@pytest.fixture
def service_type(db):
    return ServiceType.objects.create(name="Weaving", overhead_rate=Decimal("0.20"))


@pytest.fixture
def artisan(db, service_type):
    a = Artisan.objects.create(name="Khadija")
    ArtisanService.objects.create(artisan=a, service_type=service_type, rate=Decimal("2"))
    return a


@pytest.fixture
def stock_line(warehouse, product_type):
    return ledger.receive(warehouse, product_type, NO_COLOR, Decimal("100"), Decimal("3"))


@pytest.fixture
def order(service_type, artisan, stock_line):
    return atelier.create_order(
        date(2026, 5, 4),
        service_type,
        artisan,
        materials=[
            MaterialRequest(stock_line, Decimal("40")),
            MaterialRequest(stock_line, Decimal("10")),
        ],
    )


@pytest.fixture
def target(warehouse, product_type):
    return OutputTarget(warehouse, product_type)


@pytest.fixture
def backend():
    mock_backend = MagicMock()
    with patch(
        "atelier.signals.handlers.get_artisan_ledger_backend",
        return_value=mock_backend,
    ):
        yield mock_backend


# ═══════════════════════════════════════════════════════════════════
# accrue_artisan_labor
# ═══════════════════════════════════════════════════════════════════


class TestAccrueArtisanLabor:
    """Tests for accrue_artisan_labor handler."""

    def test_accrues_labor_of_completed_line(self, order, target, artisan, backend):
        line = order.lines.get(position=1)
        atelier.complete_line(order, line, Decimal("35"), target)

        backend.accrue.assert_called_once()
        called_artisan, accrual = backend.accrue.call_args.args

        assert called_artisan == artisan
        assert isinstance(accrual, LaborAccrual)
        assert accrual.artisan_code == artisan.code
        assert accrual.amount == Decimal("70")
        assert accrual.reference == f"{order.code}#1"
        assert accrual.metadata["order_uuid"] == str(order.uuid)

    def test_one_accrual_per_line(self, order, target, backend):
        for line in atelier.list_pending_lines(order):
            atelier.complete_line(order, line, Decimal("5"), target)

        assert backend.accrue.call_count == 2

    def test_waste_only_line_accrues_nothing(self, order, target, backend):
        line = order.lines.get(position=1)
        atelier.complete_line(order, line, Decimal("0"), target, waste_quantity=Decimal("40"))

        backend.accrue.assert_not_called()

    def test_disabled_by_setting(self, order, target, backend, settings):
        settings.ATELIER = {"ACCRUE_LABOR_ON_COMPLETION": False}

        line = order.lines.get(position=1)
        atelier.complete_line(order, line, Decimal("35"), target)

        backend.accrue.assert_not_called()

    def test_no_backend_configured(self, order, target, settings):
        settings.ATELIER = {"ARTISAN_LEDGER_BACKEND": None}

        line = order.lines.get(position=1)
        atelier.complete_line(order, line, Decimal("35"), target)

        assert MaterialConsumption.objects.get(pk=line.pk).status == LineStatus.COMPLETED

    def test_backend_failure_rolls_back_completion(self, order, target, backend):
        backend.accrue.side_effect = RuntimeError("payroll down")
        line = order.lines.get(position=1)

        with pytest.raises(RuntimeError):
            atelier.complete_line(order, line, Decimal("35"), target)

        assert MaterialConsumption.objects.get(pk=line.pk).status == LineStatus.PENDING
        assert not OrderOutput.objects.exists()


# ═══════════════════════════════════════════════════════════════════
# Backend configuration
# ═══════════════════════════════════════════════════════════════════


class TestArtisanLedgerBackend:
    def test_default_is_noop(self, settings):
        settings.ATELIER = {}
        backend = get_artisan_ledger_backend()

        assert isinstance(backend, NoopArtisanLedger)
        assert isinstance(backend, ArtisanLedgerBackend)

    def test_singleton(self):
        assert get_artisan_ledger_backend() is get_artisan_ledger_backend()

    def test_noop_accepts_accruals(self, artisan):
        NoopArtisanLedger().accrue(
            artisan,
            LaborAccrual(
                artisan_code=artisan.code,
                amount=Decimal("1"),
                date=date(2026, 5, 4),
                reference="MO-2026-00001#1",
            ),
        )

    def test_flat_setting(self, settings):
        settings.ATELIER = {}
        settings.ATELIER_ARTISAN_LEDGER_BACKEND = "atelier.adapters.NoopArtisanLedger"

        assert isinstance(get_artisan_ledger_backend(), NoopArtisanLedger)


# ═══════════════════════════════════════════════════════════════════
# Signals
# ═══════════════════════════════════════════════════════════════════


class TestSignals:
    @pytest.fixture
    def received(self):
        """Connect a recording receiver to a signal for one test."""
        connected = []

        def connect(signal):
            calls = []

            def handler(sender, **kwargs):
                calls.append(kwargs)

            signal.connect(handler, weak=False)
            connected.append((signal, handler))
            return calls

        yield connect

        for signal, handler in connected:
            signal.disconnect(handler)

    def test_order_created(self, service_type, artisan, stock_line, received):
        calls = received(order_created)

        order = atelier.create_order(
            date(2026, 5, 4),
            service_type,
            artisan,
            materials=[MaterialRequest(stock_line, Decimal("1"))],
        )

        assert len(calls) == 1
        assert calls[0]["order"] == order

    def test_line_completed_carries_allocation(self, order, target, received):
        calls = received(line_completed)

        line = order.lines.get(position=1)
        atelier.complete_line(order, line, Decimal("35"), target)

        assert len(calls) == 1
        # material 120, labor 70, overhead 14
        assert calls[0]["allocation"].total_cost == Decimal("204")
        assert calls[0]["consumption"].pk == line.pk

    def test_order_completed_fires_once(self, order, target, received):
        calls = received(order_completed)

        first, second = atelier.list_pending_lines(order)
        atelier.complete_line(order, first, Decimal("35"), target)
        assert calls == []

        atelier.complete_line(order, second, Decimal("8"), target)

        assert len(calls) == 1
        assert calls[0]["order"].pk == order.pk

"""
Tests for Atelier API ViewSets (atelier.api.views).

Verifies DRF endpoints for StockLine and ProductionOrder, and the
mapping of AtelierError to HTTP status codes.
"""

import pytest

pytestmark = pytest.mark.urls("atelier.tests.test_api_urls")
import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from atelier import ledger
from atelier.colors import CatalogColor
from atelier.models import (
    Artisan,
    ArtisanService,
    ColorCode,
    LineStatus,
    MaterialConsumption,
    OrderStatus,
    ProductionOrder,
    ProductType,
    ServiceType,
    StockLine,
    Warehouse,
)

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def api_client(db):
    user = User.objects.create_user(username="api_user", password="test123")
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def warehouse(db):
    return Warehouse.objects.create(name="API Store")


@pytest.fixture
def raw(db):
    return ProductType.objects.create(name="Raw wool")


@pytest.fixture
def yarn(db):
    return ProductType.objects.create(name="Yarn")


@pytest.fixture
def red(db):
    return ColorCode.objects.create(main_color="Red")


@pytest.fixture
def service_type(db):
    return ServiceType.objects.create(name="Spinning", overhead_rate=Decimal("0.10"))


@pytest.fixture
def artisan(db, service_type):
    a = Artisan.objects.create(name="Fatima")
    ArtisanService.objects.create(artisan=a, service_type=service_type, rate=Decimal("6"))
    return a


@pytest.fixture
def stock_line(warehouse, raw, red):
    return ledger.receive(warehouse, raw, CatalogColor(red), Decimal("200"), Decimal("5"))


@pytest.fixture
def order_payload(service_type, artisan, stock_line):
    return {
        "date": "2026-03-02",
        "service_type": service_type.pk,
        "artisan": artisan.pk,
        "materials": [
            {
                "stock_line": stock_line.pk,
                "quantity_used": "100",
                "expected_output_quantity": "100",
            },
            {"stock_line": stock_line.pk, "quantity_used": "50"},
        ],
    }


@pytest.fixture
def order(api_client, order_payload):
    response = api_client.post("/api/atelier/orders/", order_payload, format="json")
    assert response.status_code == 201
    return ProductionOrder.objects.get(uuid=response.data["uuid"])


# ═══════════════════════════════════════════════════════════════════
# StockLineViewSet
# ═══════════════════════════════════════════════════════════════════


class TestStockLineAPI:
    def test_list(self, api_client, stock_line):
        response = api_client.get("/api/atelier/stock-lines/")

        assert response.status_code == 200
        assert len(response.data) == 1
        assert response.data[0]["color"] == "CLR3000"

    def test_retrieve(self, api_client, stock_line):
        response = api_client.get(f"/api/atelier/stock-lines/{stock_line.pk}/")

        assert response.status_code == 200
        assert Decimal(response.data["quantity"]) == Decimal("200")
        assert Decimal(response.data["unit_cost"]) == Decimal("5")

    def test_read_only(self, api_client, stock_line):
        response = api_client.post("/api/atelier/stock-lines/", {}, format="json")
        assert response.status_code == 405

    def test_requires_authentication(self, db, stock_line):
        response = APIClient().get("/api/atelier/stock-lines/")
        assert response.status_code in (401, 403)

    def test_movements(self, api_client, stock_line, order):
        response = api_client.get(f"/api/atelier/stock-lines/{stock_line.pk}/movements/")

        assert response.status_code == 200
        assert [m["movement_type"] for m in response.data] == ["out", "out", "in"]
        assert response.data[0]["order_code"] == order.code
        assert response.data[-1]["order_code"] is None

    def test_movements_unknown_line(self, api_client, db):
        response = api_client.get("/api/atelier/stock-lines/99999/movements/")
        assert response.status_code == 404


# ═══════════════════════════════════════════════════════════════════
# ArtisanViewSet
# ═══════════════════════════════════════════════════════════════════


class TestArtisanAPI:
    def test_list(self, api_client, artisan):
        response = api_client.get("/api/atelier/artisans/")

        assert response.status_code == 200
        assert [a["code"] for a in response.data] == [artisan.code]

    def test_qualified(self, api_client, artisan, service_type):
        cheaper = Artisan.objects.create(name="Amal")
        ArtisanService.objects.create(artisan=cheaper, service_type=service_type, rate=Decimal("4"))

        response = api_client.get(
            "/api/atelier/artisans/qualified/", {"service_type": service_type.pk}
        )

        assert response.status_code == 200
        assert [a["name"] for a in response.data] == ["Amal", "Fatima"]
        assert Decimal(response.data[1]["rate"]) == Decimal("6")
        assert response.data[1]["id"] == artisan.pk
        assert response.data[1]["service_name"] == "Spinning"

    def test_qualified_requires_service_type(self, api_client, db):
        response = api_client.get("/api/atelier/artisans/qualified/")

        assert response.status_code == 400
        assert response.data["field"] == "service_type"

    def test_qualified_unknown_service_type(self, api_client, db):
        response = api_client.get("/api/atelier/artisans/qualified/", {"service_type": 99999})

        assert response.status_code == 404
        assert response.data["entity"] == "ServiceType"


# ═══════════════════════════════════════════════════════════════════
# ProductionOrderViewSet
# ═══════════════════════════════════════════════════════════════════


class TestCreateOrderAPI:
    def test_create(self, api_client, order_payload, stock_line):
        response = api_client.post("/api/atelier/orders/", order_payload, format="json")

        assert response.status_code == 201
        assert response.data["status"] == OrderStatus.OPEN
        assert response.data["code"] == "MO-2026-00001"
        assert len(response.data["lines"]) == 2
        assert Decimal(response.data["total_material_cost"]) == Decimal("750")
        assert response.data["created_by"] == "user:api_user"

        stock_line.refresh_from_db()
        assert stock_line.quantity == Decimal("50")

    def test_insufficient_stock_is_409(self, api_client, order_payload, stock_line):
        order_payload["materials"][1]["quantity_used"] = "101"

        response = api_client.post("/api/atelier/orders/", order_payload, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "INSUFFICIENT_STOCK"
        assert response.data["line"] == 2
        assert ProductionOrder.objects.count() == 0

        stock_line.refresh_from_db()
        assert stock_line.quantity == Decimal("200")

    def test_missing_artisan_is_404(self, api_client, order_payload):
        order_payload["artisan"] = 99999

        response = api_client.post("/api/atelier/orders/", order_payload, format="json")

        assert response.status_code == 404
        assert response.data == {"code": "NOT_FOUND", "entity": "Artisan", "id": 99999}

    def test_empty_materials_is_400(self, api_client, order_payload):
        order_payload["materials"] = []

        response = api_client.post("/api/atelier/orders/", order_payload, format="json")

        assert response.status_code == 400
        assert response.data["code"] == "EMPTY_ORDER"

    def test_malformed_payload_is_400(self, api_client):
        response = api_client.post("/api/atelier/orders/", {"date": "nope"}, format="json")
        assert response.status_code == 400


class TestOrderQueriesAPI:
    def test_list(self, api_client, order):
        response = api_client.get("/api/atelier/orders/")

        assert response.status_code == 200
        assert len(response.data) == 1

    def test_retrieve_by_uuid(self, api_client, order):
        response = api_client.get(f"/api/atelier/orders/{order.uuid}/")

        assert response.status_code == 200
        assert response.data["code"] == order.code
        assert response.data["artisan_code"] == order.artisan.code

    def test_pending_lines(self, api_client, order):
        response = api_client.get(f"/api/atelier/orders/{order.uuid}/pending-lines/")

        assert response.status_code == 200
        assert [line["position"] for line in response.data] == [1, 2]

    def test_pending_lines_unknown_order(self, api_client, db):
        response = api_client.get(f"/api/atelier/orders/{uuid.uuid4()}/pending-lines/")

        assert response.status_code == 404
        assert response.data["entity"] == "ProductionOrder"


class TestCompletionAPI:
    def test_complete_line(self, api_client, order, warehouse, yarn, red):
        line = order.lines.get(position=1)

        response = api_client.post(
            f"/api/atelier/orders/{order.uuid}/complete-line/",
            {
                "consumption": line.pk,
                "actual_output_quantity": "90",
                "waste_quantity": "8",
                "warehouse": warehouse.pk,
                "product_type": yarn.pk,
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == OrderStatus.PARTIALLY_COMPLETED
        assert Decimal(response.data["outputs"][0]["unit_cost"]) == Decimal("12.1556")
        # the pending second line does not weigh on the order unit cost
        assert Decimal(response.data["order"]["unit_cost"]) == Decimal("12.1556")
        assert Decimal(response.data["order"]["total_waste_quantity"]) == Decimal("8")

        target = StockLine.objects.get(warehouse=warehouse, product_type=yarn)
        assert target.color_code == red
        assert target.quantity == Decimal("90")

    def test_complete_line_with_freeform_color(self, api_client, order, warehouse, yarn):
        line = order.lines.get(position=1)

        response = api_client.post(
            f"/api/atelier/orders/{order.uuid}/complete-line/",
            {
                "consumption": line.pk,
                "actual_output_quantity": "90",
                "warehouse": warehouse.pk,
                "product_type": yarn.pk,
                "color": {"kind": "freeform", "description": "rose"},
            },
            format="json",
        )

        assert response.status_code == 200
        target = StockLine.objects.get(warehouse=warehouse, product_type=yarn)
        assert target.color_description == "rose"

    def test_twice_is_409(self, api_client, order, stock_line):
        line = order.lines.get(position=1)
        payload = {
            "consumption": line.pk,
            "actual_output_quantity": "90",
            "stock_line": stock_line.pk,
        }
        url = f"/api/atelier/orders/{order.uuid}/complete-line/"

        assert api_client.post(url, payload, format="json").status_code == 200
        response = api_client.post(url, payload, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "ALREADY_COMPLETED"

    def test_target_required(self, api_client, order):
        line = order.lines.get(position=1)

        response = api_client.post(
            f"/api/atelier/orders/{order.uuid}/complete-line/",
            {"consumption": line.pk, "actual_output_quantity": "90"},
            format="json",
        )

        assert response.status_code == 400

    def test_negative_output_is_400(self, api_client, order, stock_line):
        line = order.lines.get(position=1)

        response = api_client.post(
            f"/api/atelier/orders/{order.uuid}/complete-line/",
            {
                "consumption": line.pk,
                "actual_output_quantity": "-1",
                "stock_line": stock_line.pk,
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_QUANTITY"

    def test_batch_complete(self, api_client, order, stock_line):
        first, second = order.lines.order_by("position")

        response = api_client.post(
            f"/api/atelier/orders/{order.uuid}/complete/",
            {
                "lines": [
                    {
                        "consumption": first.pk,
                        "actual_output_quantity": "90",
                        "stock_line": stock_line.pk,
                    },
                    {
                        "consumption": second.pk,
                        "actual_output_quantity": "0",
                        "waste_quantity": "50",
                        "stock_line": stock_line.pk,
                    },
                ]
            },
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == OrderStatus.COMPLETED
        assert len(response.data["outputs"]) == 2

    def test_batch_rolls_back(self, api_client, order, stock_line):
        first = order.lines.get(position=1)
        entry = {
            "consumption": first.pk,
            "actual_output_quantity": "90",
            "stock_line": stock_line.pk,
        }

        response = api_client.post(
            f"/api/atelier/orders/{order.uuid}/complete/",
            {"lines": [entry, entry]},
            format="json",
        )

        assert response.status_code == 409
        assert MaterialConsumption.objects.get(pk=first.pk).status == LineStatus.PENDING

    def test_completed_order_is_409(self, api_client, order, stock_line):
        url = f"/api/atelier/orders/{order.uuid}/complete/"
        lines = [
            {"consumption": line.pk, "actual_output_quantity": "1", "stock_line": stock_line.pk}
            for line in order.lines.order_by("position")
        ]
        assert api_client.post(url, {"lines": lines}, format="json").status_code == 200

        response = api_client.post(url, {"lines": lines[:1]}, format="json")

        assert response.status_code == 409
        assert response.data["code"] == "ORDER_COMPLETED"

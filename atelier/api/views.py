"""
Atelier API ViewSets.
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from atelier.exceptions import AtelierError, NotFound, ValidationError
from atelier.models import Artisan, ProductionOrder, StockLine
from atelier.service import Atelier

from .serializers import (
    ArtisanSerializer,
    BatchCompletionSerializer,
    LineCompletionSerializer,
    MaterialConsumptionSerializer,
    OrderOutputSerializer,
    ProductionOrderCreateSerializer,
    ProductionOrderSerializer,
    QualifiedArtisanSerializer,
    StockLineSerializer,
    StockMovementSerializer,
)


def error_response(exc: AtelierError) -> Response:
    """AtelierError → Response with its as_dict() body."""
    if isinstance(exc, ValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFound):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_409_CONFLICT
    return Response(exc.as_dict(), status=code)


class StockLineViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for StockLine (read-only).

    list: List active stock lines
    retrieve: Get a specific stock line
    movements: Ledger movements of a stock line, newest first
    """

    permission_classes = [IsAuthenticated]
    queryset = StockLine.objects.filter(is_active=True).select_related(
        "warehouse", "product_type", "color_code"
    )
    serializer_class = StockLineSerializer

    @action(detail=True, methods=["get"])
    def movements(self, request, pk=None):
        """
        Ledger movements of a stock line.

        GET /api/atelier/stock-lines/{id}/movements/
        """
        stock_line = self.get_object()
        movements = stock_line.movements.select_related("order")
        return Response(StockMovementSerializer(movements, many=True).data)


class ArtisanViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Artisan (read-only).

    list: List active artisans
    retrieve: Get a specific artisan
    qualified: Artisans qualified for a service, cheapest first
    """

    permission_classes = [IsAuthenticated]
    queryset = Artisan.objects.filter(is_active=True)
    serializer_class = ArtisanSerializer

    @action(detail=False, methods=["get"])
    def qualified(self, request):
        """
        Artisans qualified for a service type.

        GET /api/atelier/artisans/qualified/?service_type=1
        """
        service_type = request.query_params.get("service_type")
        if not service_type:
            return error_response(ValidationError("INVALID_INPUT", field="service_type"))

        try:
            rates = Atelier.qualified_artisans(service_type)
        except AtelierError as e:
            return error_response(e)

        return Response(QualifiedArtisanSerializer(rates, many=True).data)


class ProductionOrderViewSet(
    mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet
):
    """
    ViewSet for ProductionOrder.

    list: List all orders
    create: Create an order (debits its materials)
    retrieve: Get a specific order by UUID
    pending_lines: Pending material lines
    complete_line: Complete one material line
    complete: Complete several material lines atomically
    """

    permission_classes = [IsAuthenticated]
    queryset = ProductionOrder.objects.select_related("service_type", "artisan").prefetch_related(
        "lines", "outputs"
    )
    serializer_class = ProductionOrderSerializer
    lookup_field = "uuid"

    def create(self, request):
        """
        Create a production order.

        POST /api/atelier/orders/
        {
            "date": "2026-03-02",
            "service_type": 1,
            "artisan": 1,
            "labor_rate": "1.50",  // optional
            "materials": [
                {"stock_line": 7, "quantity_used": "100", "expected_output_quantity": "95"}
            ]
        }
        """
        serializer = ProductionOrderCreateSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            order = Atelier.create_order(
                date=data["date"],
                service_type=data["service_type"],
                artisan=data["artisan"],
                materials=serializer.to_materials(),
                labor_rate=data.get("labor_rate"),
                notes=data.get("notes", ""),
                user=request.user,
            )
        except AtelierError as e:
            return error_response(e)

        order = Atelier.get_order(order)
        return Response(ProductionOrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="pending-lines")
    def pending_lines(self, request, uuid=None):
        """
        Pending material lines.

        GET /api/atelier/orders/{uuid}/pending-lines/
        """
        try:
            lines = Atelier.list_pending_lines(uuid)
        except AtelierError as e:
            return error_response(e)

        return Response(MaterialConsumptionSerializer(lines, many=True).data)

    @action(detail=True, methods=["post"], url_path="complete-line")
    def complete_line(self, request, uuid=None):
        """
        Complete one material line.

        POST /api/atelier/orders/{uuid}/complete-line/
        {
            "consumption": 12,
            "actual_output_quantity": "90",
            "waste_quantity": "8",       // optional
            "warehouse": 2,
            "product_type": 4,
            "color": {"kind": "none"}    // optional, inherited when omitted
        }
        """
        serializer = LineCompletionSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        completion = LineCompletionSerializer.to_completion(serializer.validated_data)
        return self._complete(request, uuid, [completion])

    @action(detail=True, methods=["post"])
    def complete(self, request, uuid=None):
        """
        Complete several material lines atomically.

        POST /api/atelier/orders/{uuid}/complete/
        {
            "lines": [
                {"consumption": 12, "actual_output_quantity": "90", "stock_line": 9},
                {"consumption": 13, "actual_output_quantity": "0", "waste_quantity": "50",
                 "stock_line": 9}
            ]
        }
        """
        serializer = BatchCompletionSerializer(data=request.data)

        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        return self._complete(request, uuid, serializer.to_completions())

    def _complete(self, request, uuid, completions):
        try:
            outputs = Atelier.complete_lines(uuid, completions, user=request.user)
            order = Atelier.get_order(uuid)
        except AtelierError as e:
            return error_response(e)

        return Response(
            {
                "status": order.status,
                "outputs": OrderOutputSerializer(outputs, many=True).data,
                "order": ProductionOrderSerializer(order).data,
            }
        )

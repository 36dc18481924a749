"""
Atelier API Serializers.
"""

from rest_framework import serializers

from atelier.colors import NO_COLOR, CatalogColor, FreeformColor, NewColor
from atelier.models import (
    Artisan,
    ArtisanService,
    MaterialConsumption,
    OrderOutput,
    ProductionOrder,
    StockLine,
    StockMovement,
)
from atelier.service import LineCompletion, MaterialRequest, OutputTarget


class StockLineSerializer(serializers.ModelSerializer):
    """Serializer for StockLine model."""

    warehouse_code = serializers.CharField(source="warehouse.code", read_only=True)
    product_type_code = serializers.CharField(source="product_type.code", read_only=True)
    color = serializers.CharField(source="display_color", read_only=True)
    stock_value = serializers.DecimalField(max_digits=24, decimal_places=4, read_only=True)
    is_low = serializers.BooleanField(read_only=True)

    class Meta:
        model = StockLine
        fields = [
            "id",
            "warehouse",
            "warehouse_code",
            "product_type",
            "product_type_code",
            "color_code",
            "color_description",
            "color",
            "quantity",
            "unit_cost",
            "unit_price",
            "min_quantity",
            "stock_value",
            "is_low",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class StockMovementSerializer(serializers.ModelSerializer):
    """Serializer for StockMovement model."""

    order_code = serializers.CharField(source="order.code", read_only=True, default=None)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "movement_type",
            "quantity",
            "unit_cost",
            "order",
            "order_code",
            "note",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class ArtisanSerializer(serializers.ModelSerializer):
    """Serializer for Artisan model."""

    class Meta:
        model = Artisan
        fields = ["id", "code", "name", "phone", "craft_type", "is_active"]
        read_only_fields = fields


class QualifiedArtisanSerializer(serializers.ModelSerializer):
    """An artisan with the agreed rate for one service."""

    id = serializers.IntegerField(source="artisan.id", read_only=True)
    code = serializers.CharField(source="artisan.code", read_only=True)
    name = serializers.CharField(source="artisan.name", read_only=True)
    phone = serializers.CharField(source="artisan.phone", read_only=True)
    craft_type = serializers.CharField(source="artisan.craft_type", read_only=True)
    service_name = serializers.CharField(source="service_type.name", read_only=True)

    class Meta:
        model = ArtisanService
        fields = ["id", "code", "name", "phone", "craft_type", "service_name", "rate", "rate_unit"]
        read_only_fields = fields


class MaterialConsumptionSerializer(serializers.ModelSerializer):
    """Serializer for MaterialConsumption model."""

    class Meta:
        model = MaterialConsumption
        fields = [
            "id",
            "position",
            "stock_line",
            "quantity_used",
            "unit_cost",
            "material_cost",
            "expected_output_quantity",
            "actual_output_quantity",
            "waste_quantity",
            "extraction_rate",
            "labor_cost",
            "overhead_cost",
            "status",
            "completed_at",
        ]
        read_only_fields = fields


class OrderOutputSerializer(serializers.ModelSerializer):
    """Serializer for OrderOutput model."""

    class Meta:
        model = OrderOutput
        fields = ["id", "consumption", "stock_line", "quantity", "unit_cost", "created_at"]
        read_only_fields = fields


class ProductionOrderSerializer(serializers.ModelSerializer):
    """Serializer for ProductionOrder model."""

    service_type_code = serializers.CharField(source="service_type.code", read_only=True)
    artisan_code = serializers.CharField(source="artisan.code", read_only=True)
    lines = MaterialConsumptionSerializer(many=True, read_only=True)
    outputs = OrderOutputSerializer(many=True, read_only=True)
    unit_cost = serializers.DecimalField(max_digits=24, decimal_places=4, read_only=True)
    total_output_quantity = serializers.DecimalField(
        max_digits=20, decimal_places=3, read_only=True
    )
    total_waste_quantity = serializers.DecimalField(
        max_digits=20, decimal_places=3, read_only=True
    )

    class Meta:
        model = ProductionOrder
        fields = [
            "uuid",
            "code",
            "date",
            "service_type",
            "service_type_code",
            "artisan",
            "artisan_code",
            "labor_cost_per_unit",
            "overhead_rate",
            "status",
            "total_material_cost",
            "total_labor_cost",
            "overhead_cost",
            "total_cost",
            "unit_cost",
            "total_output_quantity",
            "total_waste_quantity",
            "notes",
            "lines",
            "outputs",
            "created_by",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ══════════════════════════════════════════════════════════════
# INPUT
# ══════════════════════════════════════════════════════════════


class MaterialInputSerializer(serializers.Serializer):
    """One material line of a new order."""

    stock_line = serializers.IntegerField()
    quantity_used = serializers.DecimalField(max_digits=14, decimal_places=3)
    expected_output_quantity = serializers.DecimalField(
        max_digits=14, decimal_places=3, required=False, allow_null=True
    )


class ProductionOrderCreateSerializer(serializers.Serializer):
    """Serializer for order creation."""

    date = serializers.DateField()
    service_type = serializers.IntegerField()
    artisan = serializers.IntegerField()
    labor_rate = serializers.DecimalField(
        max_digits=16,
        decimal_places=4,
        required=False,
        allow_null=True,
        help_text="Labor cost per unit (optional, defaults to the artisan's rate)",
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    materials = MaterialInputSerializer(many=True)

    def to_materials(self) -> list[MaterialRequest]:
        return [MaterialRequest(**m) for m in self.validated_data["materials"]]


class ColorSerializer(serializers.Serializer):
    """
    Color identity of an output line.

    kind: none | catalog (color_code) | new (main_color, code, shade) |
    freeform (description)
    """

    KINDS = ("none", "catalog", "new", "freeform")

    kind = serializers.ChoiceField(choices=KINDS)
    color_code = serializers.IntegerField(required=False)
    main_color = serializers.CharField(required=False, allow_blank=True, default="")
    code = serializers.CharField(required=False, allow_blank=True, default="")
    shade = serializers.CharField(required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        kind = attrs["kind"]
        if kind == "catalog" and attrs.get("color_code") is None:
            raise serializers.ValidationError({"color_code": "Required for catalog colors."})
        if kind == "new" and not attrs.get("main_color"):
            raise serializers.ValidationError({"main_color": "Required for new colors."})
        if kind == "freeform" and not attrs.get("description"):
            raise serializers.ValidationError({"description": "Required for freeform colors."})
        return attrs

    @staticmethod
    def to_identity(data):
        kind = data["kind"]
        if kind == "catalog":
            return CatalogColor(data["color_code"])
        if kind == "new":
            return NewColor(data["main_color"], code=data["code"], shade=data["shade"])
        if kind == "freeform":
            return FreeformColor(data["description"])
        return NO_COLOR


class LineCompletionSerializer(serializers.Serializer):
    """
    Outcome of one material line.

    Target is either an existing stock_line, or warehouse + product_type
    (+ optional color, inherited from the consumed line when omitted).
    """

    consumption = serializers.IntegerField()
    actual_output_quantity = serializers.DecimalField(max_digits=14, decimal_places=3)
    waste_quantity = serializers.DecimalField(
        max_digits=14, decimal_places=3, required=False, allow_null=True
    )
    stock_line = serializers.IntegerField(required=False)
    warehouse = serializers.IntegerField(required=False)
    product_type = serializers.IntegerField(required=False)
    color = ColorSerializer(required=False)

    def validate(self, attrs):
        has_line = attrs.get("stock_line") is not None
        has_target = attrs.get("warehouse") is not None and attrs.get("product_type") is not None
        if has_line == has_target:
            raise serializers.ValidationError(
                "Provide either stock_line, or warehouse and product_type."
            )
        return attrs

    @staticmethod
    def to_completion(data) -> LineCompletion:
        if data.get("stock_line") is not None:
            target = data["stock_line"]
        else:
            color = data.get("color")
            target = OutputTarget(
                warehouse=data["warehouse"],
                product_type=data["product_type"],
                color=ColorSerializer.to_identity(color) if color else None,
            )
        return LineCompletion(
            consumption=data["consumption"],
            actual_output_quantity=data["actual_output_quantity"],
            target=target,
            waste_quantity=data.get("waste_quantity"),
        )


class BatchCompletionSerializer(serializers.Serializer):
    """Serializer for batch completion."""

    lines = LineCompletionSerializer(many=True, allow_empty=False)

    def to_completions(self) -> list[LineCompletion]:
        return [
            LineCompletionSerializer.to_completion(line)
            for line in self.validated_data["lines"]
        ]

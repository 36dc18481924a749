"""
Initial migration for Atelier.

Creates:
- CodeSequence
- Catalogs: Warehouse, ProductType, ColorCode, ServiceType, Artisan, ArtisanService
- StockLine, StockMovement
- ProductionOrder, MaterialConsumption, OrderOutput
- History tracking for StockLine and ProductionOrder
"""

import django.core.validators
import django.db.models.deletion
import simple_history.models
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models

import atelier.conf


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "category",
                    models.CharField(max_length=50, unique=True, verbose_name="Category"),
                ),
                (
                    "last_value",
                    models.PositiveIntegerField(default=0, verbose_name="Last value"),
                ),
            ],
            options={
                "verbose_name": "Code Sequence",
                "verbose_name_plural": "Code Sequences",
                "db_table": "atelier_code_sequence",
            },
        ),
        migrations.CreateModel(
            name="Warehouse",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=30,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                (
                    "location",
                    models.CharField(blank=True, max_length=200, verbose_name="Location"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Warehouse",
                "verbose_name_plural": "Warehouses",
                "db_table": "atelier_warehouse",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="ProductType",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=30,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                (
                    "category",
                    models.CharField(blank=True, max_length=50, verbose_name="Category"),
                ),
                (
                    "unit",
                    models.CharField(default="kg", max_length=20, verbose_name="Unit"),
                ),
            ],
            options={
                "verbose_name": "Product Type",
                "verbose_name_plural": "Product Types",
                "db_table": "atelier_product_type",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ColorCode",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=30,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("main_color", models.CharField(max_length=50, verbose_name="Main color")),
                ("shade", models.CharField(blank=True, max_length=50, verbose_name="Shade")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Color Code",
                "verbose_name_plural": "Color Codes",
                "db_table": "atelier_color_code",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="ServiceType",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=30,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                (
                    "overhead_rate",
                    models.DecimalField(
                        decimal_places=4,
                        default=atelier.conf.get_default_overhead_rate,
                        help_text="Fraction of labor cost, e.g. 0.10",
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Overhead rate",
                    ),
                ),
            ],
            options={
                "verbose_name": "Service Type",
                "verbose_name_plural": "Service Types",
                "db_table": "atelier_service_type",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Artisan",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=30,
                        unique=True,
                        verbose_name="Code",
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("phone", models.CharField(blank=True, max_length=30, verbose_name="Phone")),
                (
                    "craft_type",
                    models.CharField(blank=True, max_length=50, verbose_name="Craft"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Artisan",
                "verbose_name_plural": "Artisans",
                "db_table": "atelier_artisan",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ArtisanService",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "rate",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Labor cost per produced unit",
                        max_digits=16,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Rate",
                    ),
                ),
                (
                    "rate_unit",
                    models.CharField(default="kg", max_length=20, verbose_name="Rate unit"),
                ),
                (
                    "artisan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="service_rates",
                        to="atelier.artisan",
                        verbose_name="Artisan",
                    ),
                ),
                (
                    "service_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="artisan_rates",
                        to="atelier.servicetype",
                        verbose_name="Service",
                    ),
                ),
            ],
            options={
                "verbose_name": "Artisan Service",
                "verbose_name_plural": "Artisan Services",
                "db_table": "atelier_artisan_service",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("artisan", "service_type"),
                        name="atelier_unique_artisan_service",
                    )
                ],
            },
        ),
        migrations.AddField(
            model_name="artisan",
            name="services",
            field=models.ManyToManyField(
                related_name="artisans",
                through="atelier.ArtisanService",
                to="atelier.servicetype",
                verbose_name="Services",
            ),
        ),
        migrations.CreateModel(
            name="StockLine",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "color_description",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Free-text color when not cataloged",
                        max_length=200,
                        verbose_name="Color description",
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0"),
                        max_digits=14,
                        verbose_name="Quantity",
                    ),
                ),
                (
                    "unit_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Weighted average, recomputed on every credit",
                        max_digits=16,
                        verbose_name="Unit cost",
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Unit price",
                    ),
                ),
                (
                    "min_quantity",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0"),
                        max_digits=14,
                        verbose_name="Minimum quantity",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created at"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "color_code",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_lines",
                        to="atelier.colorcode",
                        verbose_name="Color code",
                    ),
                ),
                (
                    "product_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_lines",
                        to="atelier.producttype",
                        verbose_name="Product type",
                    ),
                ),
                (
                    "warehouse",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_lines",
                        to="atelier.warehouse",
                        verbose_name="Warehouse",
                    ),
                ),
            ],
            options={
                "verbose_name": "Stock Line",
                "verbose_name_plural": "Stock Lines",
                "db_table": "atelier_stock_line",
                "ordering": ["warehouse", "product_type", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 0)),
                        name="atelier_stock_line_quantity_gte_0",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("unit_cost__gte", 0)),
                        name="atelier_stock_line_unit_cost_gte_0",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("color_code__isnull", True),
                            ("color_description", ""),
                            _connector="OR",
                        ),
                        name="atelier_stock_line_single_color_identity",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("color_code__isnull", False)),
                        fields=("warehouse", "product_type", "color_code"),
                        name="atelier_unique_stock_line_cataloged_color",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("color_code__isnull", True)),
                        fields=("warehouse", "product_type", "color_description"),
                        name="atelier_unique_stock_line_uncataloged_color",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductionOrder",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "uuid",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=50,
                        unique=True,
                        verbose_name="Order number",
                    ),
                ),
                ("date", models.DateField(verbose_name="Date")),
                (
                    "labor_cost_per_unit",
                    models.DecimalField(
                        decimal_places=4, max_digits=16, verbose_name="Labor cost per unit"
                    ),
                ),
                (
                    "overhead_rate",
                    models.DecimalField(
                        decimal_places=4, max_digits=6, verbose_name="Overhead rate"
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "Open"),
                            ("partially_completed", "Partially completed"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="open",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "total_material_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Material cost",
                    ),
                ),
                (
                    "total_labor_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Labor cost",
                    ),
                ),
                (
                    "overhead_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Overhead cost",
                    ),
                ),
                (
                    "total_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Total cost",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="Ex: 'user:amina', 'system', 'api:pos-01'",
                        max_length=255,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "completed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Completed at"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created at"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                (
                    "artisan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_orders",
                        to="atelier.artisan",
                        verbose_name="Artisan",
                    ),
                ),
                (
                    "service_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="atelier.servicetype",
                        verbose_name="Service",
                    ),
                ),
            ],
            options={
                "verbose_name": "Production Order",
                "verbose_name_plural": "Production Orders",
                "db_table": "atelier_production_order",
                "ordering": ["-date", "-id"],
                "indexes": [
                    models.Index(
                        fields=["status", "date"], name="atelier_order_status_date_idx"
                    ),
                    models.Index(
                        fields=["artisan", "status"], name="atelier_order_artisan_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MaterialConsumption",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("position", models.PositiveSmallIntegerField(default=1, verbose_name="Line")),
                (
                    "quantity_used",
                    models.DecimalField(
                        decimal_places=3, max_digits=14, verbose_name="Quantity used"
                    ),
                ),
                (
                    "unit_cost",
                    models.DecimalField(
                        decimal_places=4, max_digits=16, verbose_name="Unit cost at debit"
                    ),
                ),
                (
                    "material_cost",
                    models.DecimalField(
                        decimal_places=4, max_digits=16, verbose_name="Material cost"
                    ),
                ),
                (
                    "expected_output_quantity",
                    models.DecimalField(
                        blank=True,
                        decimal_places=3,
                        max_digits=14,
                        null=True,
                        verbose_name="Expected output",
                    ),
                ),
                (
                    "actual_output_quantity",
                    models.DecimalField(
                        blank=True,
                        decimal_places=3,
                        max_digits=14,
                        null=True,
                        verbose_name="Actual output",
                    ),
                ),
                (
                    "waste_quantity",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0"),
                        max_digits=14,
                        verbose_name="Waste",
                    ),
                ),
                (
                    "extraction_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=4,
                        help_text="Actual ÷ expected × 100; empty when no expectation",
                        max_digits=9,
                        null=True,
                        verbose_name="Extraction rate (%)",
                    ),
                ),
                (
                    "labor_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Labor cost",
                    ),
                ),
                (
                    "overhead_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Overhead cost",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("completed", "Completed")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "completed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Completed at"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created at"),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="atelier.productionorder",
                        verbose_name="Order",
                    ),
                ),
                (
                    "stock_line",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="consumptions",
                        to="atelier.stockline",
                        verbose_name="Source stock line",
                    ),
                ),
            ],
            options={
                "verbose_name": "Material Consumption",
                "verbose_name_plural": "Material Consumptions",
                "db_table": "atelier_material_consumption",
                "ordering": ["order", "position"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_used__gt", 0)),
                        name="atelier_consumption_quantity_used_gt_0",
                    ),
                    models.UniqueConstraint(
                        fields=("order", "position"),
                        name="atelier_unique_consumption_position",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderOutput",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(decimal_places=3, max_digits=14, verbose_name="Quantity"),
                ),
                (
                    "unit_cost",
                    models.DecimalField(decimal_places=4, max_digits=16, verbose_name="Unit cost"),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created at"),
                ),
                (
                    "consumption",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="output",
                        to="atelier.materialconsumption",
                        verbose_name="Material line",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="outputs",
                        to="atelier.productionorder",
                        verbose_name="Order",
                    ),
                ),
                (
                    "stock_line",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_outputs",
                        to="atelier.stockline",
                        verbose_name="Target stock line",
                    ),
                ),
            ],
            options={
                "verbose_name": "Order Output",
                "verbose_name_plural": "Order Outputs",
                "db_table": "atelier_order_output",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "movement_type",
                    models.CharField(
                        choices=[("in", "In"), ("out", "Out")],
                        max_length=3,
                        verbose_name="Type",
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(decimal_places=3, max_digits=14, verbose_name="Quantity"),
                ),
                (
                    "unit_cost",
                    models.DecimalField(decimal_places=4, max_digits=16, verbose_name="Unit cost"),
                ),
                ("note", models.CharField(blank=True, max_length=255, verbose_name="Note")),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="Ex: 'user:amina', 'system', 'api:pos-01'",
                        max_length=255,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created at"),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_movements",
                        to="atelier.productionorder",
                        verbose_name="Production order",
                    ),
                ),
                (
                    "stock_line",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movements",
                        to="atelier.stockline",
                        verbose_name="Stock line",
                    ),
                ),
            ],
            options={
                "verbose_name": "Stock Movement",
                "verbose_name_plural": "Stock Movements",
                "db_table": "atelier_stock_movement",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["stock_line", "created_at"],
                        name="atelier_movement_line_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoricalStockLine",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        auto_created=True, blank=True, db_index=True, verbose_name="ID"
                    ),
                ),
                (
                    "color_description",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Free-text color when not cataloged",
                        max_length=200,
                        verbose_name="Color description",
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0"),
                        max_digits=14,
                        verbose_name="Quantity",
                    ),
                ),
                (
                    "unit_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Weighted average, recomputed on every credit",
                        max_digits=16,
                        verbose_name="Unit cost",
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Unit price",
                    ),
                ),
                (
                    "min_quantity",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0"),
                        max_digits=14,
                        verbose_name="Minimum quantity",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "created_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="Created at"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="Updated at"),
                ),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "color_code",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="atelier.colorcode",
                        verbose_name="Color code",
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "product_type",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="atelier.producttype",
                        verbose_name="Product type",
                    ),
                ),
                (
                    "warehouse",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="atelier.warehouse",
                        verbose_name="Warehouse",
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Stock Line",
                "verbose_name_plural": "historical Stock Lines",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalProductionOrder",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        auto_created=True, blank=True, db_index=True, verbose_name="ID"
                    ),
                ),
                (
                    "uuid",
                    models.UUIDField(
                        db_index=True, default=uuid.uuid4, editable=False, verbose_name="UUID"
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Unique identifier (auto-generated if empty)",
                        max_length=50,
                        verbose_name="Order number",
                    ),
                ),
                ("date", models.DateField(verbose_name="Date")),
                (
                    "labor_cost_per_unit",
                    models.DecimalField(
                        decimal_places=4, max_digits=16, verbose_name="Labor cost per unit"
                    ),
                ),
                (
                    "overhead_rate",
                    models.DecimalField(
                        decimal_places=4, max_digits=6, verbose_name="Overhead rate"
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "Open"),
                            ("partially_completed", "Partially completed"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="open",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "total_material_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Material cost",
                    ),
                ),
                (
                    "total_labor_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Labor cost",
                    ),
                ),
                (
                    "overhead_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Overhead cost",
                    ),
                ),
                (
                    "total_cost",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=16,
                        verbose_name="Total cost",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="Ex: 'user:amina', 'system', 'api:pos-01'",
                        max_length=255,
                        verbose_name="Created by",
                    ),
                ),
                (
                    "completed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Completed at"),
                ),
                (
                    "created_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="Created at"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="Updated at"),
                ),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(
                        choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                        max_length=1,
                    ),
                ),
                (
                    "artisan",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="atelier.artisan",
                        verbose_name="Artisan",
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "service_type",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="atelier.servicetype",
                        verbose_name="Service",
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Production Order",
                "verbose_name_plural": "historical Production Orders",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]

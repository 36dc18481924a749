"""
StockLine and StockMovement models.

StockLine = inventory bucket (warehouse × product type × color identity)
with a running weighted-average unit cost.
StockMovement = immutable audit row written by every debit/credit.

Quantity and unit cost are only changed through atelier.ledger.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from atelier.colors import identity_from_fields


class StockLine(models.Model):
    """
    One (warehouse, product type, color) inventory bucket.

    Color identity is stored in two columns that are never both set:
    color_code (cataloged) or color_description (free text).
    """

    warehouse = models.ForeignKey(
        "atelier.Warehouse",
        on_delete=models.PROTECT,
        related_name="stock_lines",
        verbose_name=_("Warehouse"),
    )
    product_type = models.ForeignKey(
        "atelier.ProductType",
        on_delete=models.PROTECT,
        related_name="stock_lines",
        verbose_name=_("Product type"),
    )
    color_code = models.ForeignKey(
        "atelier.ColorCode",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="stock_lines",
        verbose_name=_("Color code"),
    )
    color_description = models.CharField(
        max_length=200,
        blank=True,
        default="",
        verbose_name=_("Color description"),
        help_text=_("Free-text color when not cataloged"),
    )

    quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0"),
        verbose_name=_("Quantity"),
    )
    unit_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=Decimal("0"),
        verbose_name=_("Unit cost"),
        help_text=_("Weighted average, recomputed on every credit"),
    )
    unit_price = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=Decimal("0"),
        verbose_name=_("Unit price"),
    )
    min_quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0"),
        verbose_name=_("Minimum quantity"),
    )
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "atelier_stock_line"
        verbose_name = _("Stock Line")
        verbose_name_plural = _("Stock Lines")
        ordering = ["warehouse", "product_type", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name="atelier_stock_line_quantity_gte_0",
            ),
            models.CheckConstraint(
                condition=Q(unit_cost__gte=0),
                name="atelier_stock_line_unit_cost_gte_0",
            ),
            models.CheckConstraint(
                condition=Q(color_code__isnull=True) | Q(color_description=""),
                name="atelier_stock_line_single_color_identity",
            ),
            models.UniqueConstraint(
                fields=["warehouse", "product_type", "color_code"],
                condition=Q(color_code__isnull=False),
                name="atelier_unique_stock_line_cataloged_color",
            ),
            models.UniqueConstraint(
                fields=["warehouse", "product_type", "color_description"],
                condition=Q(color_code__isnull=True),
                name="atelier_unique_stock_line_uncataloged_color",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_type} / {self.display_color} @ {self.warehouse}"

    @property
    def display_color(self) -> str:
        """Catalog code, else free-text description, else a dash."""
        if self.color_code_id is not None:
            return self.color_code.code
        return self.color_description or "—"

    @property
    def color_identity(self):
        return identity_from_fields(self.color_code, self.color_description)

    @property
    def stock_value(self) -> Decimal:
        return self.quantity * self.unit_cost

    @property
    def is_low(self) -> bool:
        return self.quantity <= self.min_quantity


class MovementType(models.TextChoices):
    """Direction of a stock movement."""

    IN = "in", _("In")
    OUT = "out", _("Out")


class StockMovement(models.Model):
    """Immutable record of one ledger debit or credit."""

    stock_line = models.ForeignKey(
        StockLine,
        on_delete=models.PROTECT,
        related_name="movements",
        verbose_name=_("Stock line"),
    )
    movement_type = models.CharField(
        max_length=3,
        choices=MovementType.choices,
        verbose_name=_("Type"),
    )
    quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        verbose_name=_("Quantity"),
    )
    unit_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        verbose_name=_("Unit cost"),
    )
    order = models.ForeignKey(
        "atelier.ProductionOrder",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
        verbose_name=_("Production order"),
    )
    note = models.CharField(max_length=255, blank=True, verbose_name=_("Note"))
    created_by = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Created by"),
        help_text=_("Ex: 'user:amina', 'system', 'api:pos-01'"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))

    class Meta:
        db_table = "atelier_stock_movement"
        verbose_name = _("Stock Movement")
        verbose_name_plural = _("Stock Movements")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["stock_line", "created_at"], name="atelier_movement_line_idx"),
        ]

    def __str__(self) -> str:
        sign = "+" if self.movement_type == MovementType.IN else "-"
        return f"{sign}{self.quantity} {self.stock_line}"

"""
ProductionOrder, MaterialConsumption and OrderOutput models.

ProductionOrder = outsourced production job for one artisan and service.
MaterialConsumption = one material line consumed by the order.
OrderOutput = stock produced by one completed material line.

Status is derived from the lines:

    open ──(some lines completed)──▶ partially_completed ──(all)──▶ completed

Locking and ledger calls live in atelier.service; the models own the
derived state (aggregates, status, extraction rate).
"""

import logging
import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Count, DecimalField, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from atelier.conf import get_setting
from atelier.costing import quantize_money
from atelier.models.sequence import CodeSequence

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


class OrderStatus(models.TextChoices):
    """ProductionOrder lifecycle status (derived from lines)."""

    OPEN = "open", _("Open")
    PARTIALLY_COMPLETED = "partially_completed", _("Partially completed")
    COMPLETED = "completed", _("Completed")


class LineStatus(models.TextChoices):
    """MaterialConsumption status. pending → completed is one-way."""

    PENDING = "pending", _("Pending")
    COMPLETED = "completed", _("Completed")


class ProductionOrder(models.Model):
    """
    Production order sent to an outsourced artisan.

    Material cost is locked at creation (quantity_used × unit cost at
    debit time). Labor and overhead accrue as lines complete:

        total_cost = total_material_cost + total_labor_cost + overhead_cost
    """

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )

    # Identification
    code = models.CharField(
        unique=True,
        max_length=50,
        blank=True,
        verbose_name=_("Order number"),
        help_text=_("Unique identifier (auto-generated if empty)"),
    )

    date = models.DateField(verbose_name=_("Date"))

    service_type = models.ForeignKey(
        "atelier.ServiceType",
        on_delete=models.PROTECT,
        related_name="orders",
        verbose_name=_("Service"),
    )
    artisan = models.ForeignKey(
        "atelier.Artisan",
        on_delete=models.PROTECT,
        related_name="production_orders",
        verbose_name=_("Artisan"),
    )

    # Rates (snapshotted at creation)
    labor_cost_per_unit = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        verbose_name=_("Labor cost per unit"),
    )
    overhead_rate = models.DecimalField(
        max_digits=6,
        decimal_places=4,
        verbose_name=_("Overhead rate"),
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.OPEN,
        db_index=True,
        verbose_name=_("Status"),
    )

    # Aggregates
    total_material_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=_ZERO,
        verbose_name=_("Material cost"),
    )
    total_labor_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=_ZERO,
        verbose_name=_("Labor cost"),
    )
    overhead_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=_ZERO,
        verbose_name=_("Overhead cost"),
    )
    total_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=_ZERO,
        verbose_name=_("Total cost"),
    )

    notes = models.TextField(blank=True, verbose_name=_("Notes"))

    created_by = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Created by"),
        help_text=_("Ex: 'user:amina', 'system', 'api:pos-01'"),
    )
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Completed at"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "atelier_production_order"
        verbose_name = _("Production Order")
        verbose_name_plural = _("Production Orders")
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["status", "date"], name="atelier_order_status_date_idx"),
            models.Index(fields=["artisan", "status"], name="atelier_order_artisan_idx"),
        ]

    def __str__(self) -> str:
        return self.code or f"MO-{self.pk}"

    def save(self, *args, **kwargs):
        """Override save to auto-generate code."""
        if not self.code:
            self.code = self._generate_code()
        super().save(*args, **kwargs)

    def _generate_code(self) -> str:
        """Generate unique order number in format MO-YYYY-NNNNN."""
        year = (self.date or timezone.now().date()).year
        prefix = f"{get_setting('ORDER_CODE_PREFIX')}-{year}"
        seq = CodeSequence.next_value(prefix, start=1)
        return f"{prefix}-{seq:05d}"

    # ══════════════════════════════════════════════════════════════
    # DERIVED STATE
    # ══════════════════════════════════════════════════════════════

    @staticmethod
    def derive_status(pending: int, completed: int) -> str:
        """Status from line counts."""
        if pending == 0 and completed > 0:
            return OrderStatus.COMPLETED
        if completed > 0:
            return OrderStatus.PARTIALLY_COMPLETED
        return OrderStatus.OPEN

    def recalculate(self, save: bool = True) -> None:
        """
        Recompute aggregates and status from the lines.

        Idempotent: calling it twice yields the same values.
        """
        completed = Q(status=LineStatus.COMPLETED)
        money = DecimalField(max_digits=16, decimal_places=4)

        stats = self.lines.aggregate(
            material=Coalesce(Sum("material_cost"), _ZERO, output_field=money),
            labor=Coalesce(Sum("labor_cost", filter=completed), _ZERO, output_field=money),
            overhead=Coalesce(
                Sum("overhead_cost", filter=completed), _ZERO, output_field=money
            ),
            pending=Count("id", filter=Q(status=LineStatus.PENDING)),
            completed=Count("id", filter=completed),
        )

        previous_status = self.status

        self.total_material_cost = stats["material"]
        self.total_labor_cost = stats["labor"]
        self.overhead_cost = stats["overhead"]
        self.total_cost = stats["material"] + stats["labor"] + stats["overhead"]
        self.status = self.derive_status(stats["pending"], stats["completed"])

        if self.status == OrderStatus.COMPLETED and self.completed_at is None:
            self.completed_at = timezone.now()

        if save:
            self.save(
                update_fields=[
                    "total_material_cost",
                    "total_labor_cost",
                    "overhead_cost",
                    "total_cost",
                    "status",
                    "completed_at",
                    "updated_at",
                ]
            )

        if previous_status != self.status:
            logger.info(
                f"ProductionOrder {self.code}: {previous_status} → {self.status}",
                extra={"order": self.pk, "code": self.code, "status": self.status},
            )

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def is_terminal(self) -> bool:
        return self.status == OrderStatus.COMPLETED

    @property
    def pending_lines(self):
        return self.lines.filter(status=LineStatus.PENDING).order_by("position")

    @property
    def total_output_quantity(self) -> Decimal:
        """Units produced so far across completed lines."""
        return sum(
            (line.actual_output_quantity or _ZERO for line in self.lines.all()),
            _ZERO,
        )

    @property
    def total_waste_quantity(self) -> Decimal:
        return sum((line.waste_quantity for line in self.lines.all()), _ZERO)

    @property
    def unit_cost(self) -> Decimal | None:
        """
        Average cost per produced unit, None until something is produced.

        Only completed lines count: pending lines carry material cost but
        no output yet.
        """
        completed = [line for line in self.lines.all() if not line.is_pending]
        produced = sum((line.actual_output_quantity for line in completed), _ZERO)
        if produced > 0:
            return quantize_money(sum((line.line_cost for line in completed), _ZERO) / produced)
        return None


class MaterialConsumption(models.Model):
    """
    Material line of a production order.

    quantity_used, unit_cost, material_cost and expected_output_quantity
    are fixed at creation. The outcome fields are set exactly once, when
    the line is completed.
    """

    order = models.ForeignKey(
        ProductionOrder,
        on_delete=models.CASCADE,
        related_name="lines",
        verbose_name=_("Order"),
    )
    position = models.PositiveSmallIntegerField(
        default=1,
        verbose_name=_("Line"),
    )
    stock_line = models.ForeignKey(
        "atelier.StockLine",
        on_delete=models.PROTECT,
        related_name="consumptions",
        verbose_name=_("Source stock line"),
    )

    # Fixed at creation
    quantity_used = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        verbose_name=_("Quantity used"),
    )
    unit_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        verbose_name=_("Unit cost at debit"),
    )
    material_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        verbose_name=_("Material cost"),
    )
    expected_output_quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name=_("Expected output"),
    )

    # Set at completion
    actual_output_quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name=_("Actual output"),
    )
    waste_quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=_ZERO,
        verbose_name=_("Waste"),
    )
    extraction_rate = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name=_("Extraction rate (%)"),
        help_text=_("Actual ÷ expected × 100; empty when no expectation"),
    )
    labor_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=_ZERO,
        verbose_name=_("Labor cost"),
    )
    overhead_cost = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=_ZERO,
        verbose_name=_("Overhead cost"),
    )

    status = models.CharField(
        max_length=20,
        choices=LineStatus.choices,
        default=LineStatus.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )
    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Completed at"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))

    class Meta:
        db_table = "atelier_material_consumption"
        verbose_name = _("Material Consumption")
        verbose_name_plural = _("Material Consumptions")
        ordering = ["order", "position"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_used__gt=0),
                name="atelier_consumption_quantity_used_gt_0",
            ),
            models.UniqueConstraint(
                fields=["order", "position"],
                name="atelier_unique_consumption_position",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}#{self.position} {self.quantity_used} × {self.stock_line_id}"

    @property
    def is_pending(self) -> bool:
        return self.status == LineStatus.PENDING

    @property
    def line_cost(self) -> Decimal:
        """Material + labor + overhead allocated to this line so far."""
        return self.material_cost + self.labor_cost + self.overhead_cost

    def mark_completed(
        self,
        actual_output_quantity: Decimal,
        waste_quantity: Decimal,
        extraction_rate: Decimal | None,
        labor_cost: Decimal,
        overhead_cost: Decimal,
    ) -> None:
        """Record the outcome. Callers hold the row lock and check status."""
        self.actual_output_quantity = actual_output_quantity
        self.waste_quantity = waste_quantity
        self.extraction_rate = extraction_rate
        self.labor_cost = labor_cost
        self.overhead_cost = overhead_cost
        self.status = LineStatus.COMPLETED
        self.completed_at = timezone.now()
        self.save(
            update_fields=[
                "actual_output_quantity",
                "waste_quantity",
                "extraction_rate",
                "labor_cost",
                "overhead_cost",
                "status",
                "completed_at",
            ]
        )


class OrderOutput(models.Model):
    """Stock produced by one completed material line."""

    order = models.ForeignKey(
        ProductionOrder,
        on_delete=models.CASCADE,
        related_name="outputs",
        verbose_name=_("Order"),
    )
    consumption = models.OneToOneField(
        MaterialConsumption,
        on_delete=models.CASCADE,
        related_name="output",
        verbose_name=_("Material line"),
    )
    stock_line = models.ForeignKey(
        "atelier.StockLine",
        on_delete=models.PROTECT,
        related_name="production_outputs",
        verbose_name=_("Target stock line"),
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
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Created at"))

    class Meta:
        db_table = "atelier_order_output"
        verbose_name = _("Order Output")
        verbose_name_plural = _("Order Outputs")
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return f"{self.quantity} @ {self.unit_cost} → {self.stock_line_id}"

    @property
    def total_cost(self) -> Decimal:
        return self.quantity * self.unit_cost

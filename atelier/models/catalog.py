"""
Reference catalogs consumed by the costing engine.

Warehouse, ProductType and ColorCode identify stock lines.
ServiceType carries the overhead rate; Artisan + ArtisanService carry
the qualified labor rates. The engine only reads these tables.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from atelier.conf import get_default_overhead_rate
from atelier.models.sequence import CodedModel


class Warehouse(CodedModel):
    """Physical storage location."""

    code_category = "warehouse"

    name = models.CharField(max_length=100, verbose_name=_("Name"))
    location = models.CharField(max_length=200, blank=True, verbose_name=_("Location"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        db_table = "atelier_warehouse"
        verbose_name = _("Warehouse")
        verbose_name_plural = _("Warehouses")
        ordering = ["code"]

    def __str__(self) -> str:
        return self.name


class ProductType(CodedModel):
    """Kind of stocked material or product (raw yarn, bobbin, spun thread...)."""

    code_category = "product_type"

    name = models.CharField(max_length=100, verbose_name=_("Name"))
    category = models.CharField(max_length=50, blank=True, verbose_name=_("Category"))
    unit = models.CharField(max_length=20, default="kg", verbose_name=_("Unit"))

    class Meta:
        db_table = "atelier_product_type"
        verbose_name = _("Product Type")
        verbose_name_plural = _("Product Types")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class ColorCode(CodedModel):
    """Cataloged color."""

    code_category = "color_code"

    main_color = models.CharField(max_length=50, verbose_name=_("Main color"))
    shade = models.CharField(max_length=50, blank=True, verbose_name=_("Shade"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        db_table = "atelier_color_code"
        verbose_name = _("Color Code")
        verbose_name_plural = _("Color Codes")
        ordering = ["code"]

    def __str__(self) -> str:
        if self.shade:
            return f"{self.code} ({self.main_color} {self.shade})"
        return f"{self.code} ({self.main_color})"


class ServiceType(CodedModel):
    """
    Outsourced service (dyeing, spinning, weaving...).

    overhead_rate is a fraction applied to the labor cost of every
    order of this service (0.10 → 10% of labor).
    """

    code_category = "service_type"

    name = models.CharField(max_length=100, verbose_name=_("Name"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    overhead_rate = models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=get_default_overhead_rate,
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("Overhead rate"),
        help_text=_("Fraction of labor cost, e.g. 0.10"),
    )

    class Meta:
        db_table = "atelier_service_type"
        verbose_name = _("Service Type")
        verbose_name_plural = _("Service Types")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Artisan(CodedModel):
    """Outsourced craftsperson. Balances live in the artisan ledger backend."""

    code_category = "artisan"

    name = models.CharField(max_length=100, verbose_name=_("Name"))
    phone = models.CharField(max_length=30, blank=True, verbose_name=_("Phone"))
    craft_type = models.CharField(max_length=50, blank=True, verbose_name=_("Craft"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    services = models.ManyToManyField(
        ServiceType,
        through="atelier.ArtisanService",
        related_name="artisans",
        verbose_name=_("Services"),
    )

    class Meta:
        db_table = "atelier_artisan"
        verbose_name = _("Artisan")
        verbose_name_plural = _("Artisans")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def rate_for(self, service_type) -> Decimal | None:
        """Qualified rate for a service, or None if not qualified."""
        rate = (
            self.service_rates.filter(service_type=service_type)
            .values_list("rate", flat=True)
            .first()
        )
        return rate


class ArtisanService(models.Model):
    """Qualification of an artisan for a service, with the agreed rate."""

    artisan = models.ForeignKey(
        Artisan,
        on_delete=models.CASCADE,
        related_name="service_rates",
        verbose_name=_("Artisan"),
    )
    service_type = models.ForeignKey(
        ServiceType,
        on_delete=models.CASCADE,
        related_name="artisan_rates",
        verbose_name=_("Service"),
    )
    rate = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("Rate"),
        help_text=_("Labor cost per produced unit"),
    )
    rate_unit = models.CharField(max_length=20, default="kg", verbose_name=_("Rate unit"))

    class Meta:
        db_table = "atelier_artisan_service"
        verbose_name = _("Artisan Service")
        verbose_name_plural = _("Artisan Services")
        constraints = [
            models.UniqueConstraint(
                fields=["artisan", "service_type"],
                name="atelier_unique_artisan_service",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.artisan} · {self.service_type} @ {self.rate}/{self.rate_unit}"

"""
Code sequence for atomic human-readable code generation.

One counter row per category, mutated only through an atomic
increment-and-read under SELECT FOR UPDATE.
"""

from django.db import models, transaction
from django.utils.translation import gettext_lazy as _

from atelier.exceptions import ValidationError


# category → (prefix, first value)
# Seeds are distinct so codes of different categories never collide.
CODE_CATEGORIES = {
    "client": ("CLI", 1000),
    "supplier": ("SUP", 2000),
    "color_code": ("CLR", 3000),
    "warehouse": ("WH", 4000),
    "product_type": ("PRD", 5000),
    "service_type": ("SRV", 6000),
    "artisan": ("ART", 7000),
}


class CodeSequence(models.Model):
    """
    Atomic counter for generating sequential codes.

    One row per category, e.g. "artisan" → last_value = 7042.
    Thread-safe via SELECT FOR UPDATE.

    Usage:
        CodeSequence.next_value("artisan")   # 7000, 7001, ...
        CodeSequence.next_code("artisan")    # "ART7002"
    """

    category = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_("Category"),
    )
    last_value = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Last value"),
    )

    class Meta:
        db_table = "atelier_code_sequence"
        verbose_name = _("Code Sequence")
        verbose_name_plural = _("Code Sequences")

    def __str__(self) -> str:
        return f"{self.category} → {self.last_value}"

    @classmethod
    def next_value(cls, category: str, start: int | None = None) -> int:
        """
        Atomically increment and return the next value for a category.

        Known categories start at their configured seed. Ad-hoc categories
        (e.g. per-year order prefixes) must pass ``start``.
        """
        if start is None:
            if category not in CODE_CATEGORIES:
                raise ValidationError("UNKNOWN_CODE_CATEGORY", category=category)
            start = CODE_CATEGORIES[category][1]

        with transaction.atomic():
            seq, created = cls.objects.select_for_update().get_or_create(
                category=category, defaults={"last_value": start - 1}
            )
            seq.last_value += 1
            seq.save(update_fields=["last_value"])
            return seq.last_value

    @classmethod
    def next_code(cls, category: str) -> str:
        """Next formatted code for a known category, e.g. "WH4000"."""
        if category not in CODE_CATEGORIES:
            raise ValidationError("UNKNOWN_CODE_CATEGORY", category=category)
        prefix = CODE_CATEGORIES[category][0]
        return f"{prefix}{cls.next_value(category)}"


class CodedModel(models.Model):
    """
    Abstract base for master tables with an auto-generated code.

    Subclasses set ``code_category`` to one of CODE_CATEGORIES.
    """

    code_category: str = ""

    code = models.CharField(
        unique=True,
        max_length=30,
        blank=True,
        verbose_name=_("Code"),
        help_text=_("Unique identifier (auto-generated if empty)"),
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        """Override save to auto-generate code."""
        if not self.code:
            self.code = CodeSequence.next_code(self.code_category)
        super().save(*args, **kwargs)

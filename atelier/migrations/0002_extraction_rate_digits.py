"""
Widen extraction_rate to the money precision.
A small expected output can yield a rate far above 99999%.
"""

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("atelier", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="materialconsumption",
            name="extraction_rate",
            field=models.DecimalField(
                blank=True,
                decimal_places=4,
                help_text="Actual ÷ expected × 100; empty when no expectation",
                max_digits=16,
                null=True,
                verbose_name="Extraction rate (%)",
            ),
        ),
    ]

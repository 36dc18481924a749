"""
Atelier Signal Handlers.

Connects Atelier signals to the artisan ledger backend: labor earned on
each completed line is accrued to the artisan's balance.

This module is imported in apps.py to register handlers.
"""

import logging

from django.dispatch import receiver
from django.utils import timezone

from atelier.conf import get_artisan_ledger_backend, get_setting
from atelier.protocols.artisan import LaborAccrual
from atelier.signals import line_completed, order_completed

logger = logging.getLogger(__name__)


@receiver(line_completed)
def accrue_artisan_labor(sender, order, consumption, output, allocation, user=None, **kwargs):
    """
    When a line completes, report the labor earned to the artisan ledger.

    Labor is paid on actual output, so waste-only lines accrue nothing.
    """
    if not get_setting("ACCRUE_LABOR_ON_COMPLETION"):
        return

    if allocation.labor_cost <= 0:
        return

    backend = get_artisan_ledger_backend()
    if backend is None:
        logger.info(f"No artisan ledger configured, skipping accrual for {order.code}")
        return

    accrual = LaborAccrual(
        artisan_code=order.artisan.code,
        amount=allocation.labor_cost,
        date=timezone.localdate(),
        reference=f"{order.code}#{consumption.position}",
        description=f"Production labor - order {order.code}",
        metadata={
            "order_uuid": str(order.uuid),
            "quantity": str(consumption.actual_output_quantity),
            "rate": str(order.labor_cost_per_unit),
        },
    )
    backend.accrue(order.artisan, accrual)

    logger.info(
        f"Accrued {allocation.labor_cost} to artisan {order.artisan.code} for {order.code}",
        extra={
            "order": order.code,
            "artisan": order.artisan.code,
            "amount": float(allocation.labor_cost),
        },
    )


@receiver(order_completed)
def log_order_completed(sender, order, user=None, **kwargs):
    """Record the final cost of a completed order."""
    logger.info(
        f"ProductionOrder {order.code} completed: total cost {order.total_cost}",
        extra={
            "order": order.code,
            "total_material_cost": float(order.total_material_cost),
            "total_labor_cost": float(order.total_labor_cost),
            "overhead_cost": float(order.overhead_cost),
            "total_cost": float(order.total_cost),
        },
    )

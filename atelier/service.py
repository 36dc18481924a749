"""
Atelier Service - Production Order Engine.

Orchestrates the ledger, the cost allocation and the order models.
Every operation is one transaction: it either fully commits or raises
an AtelierError and leaves the database untouched.

Usage:
    from atelier import atelier, MaterialRequest, OutputTarget

    order = atelier.create_order(
        date(2026, 3, 2),
        spinning,
        fatima,
        materials=[
            MaterialRequest(raw_red, Decimal("100"), expected_output_quantity=Decimal("95")),
            MaterialRequest(raw_blue, Decimal("50")),
        ],
    )

    line = atelier.list_pending_lines(order)[0]
    output = atelier.complete_line(
        order, line, Decimal("90"), OutputTarget(main_store, spun_yarn)
    )
"""

import logging
import uuid as uuid_lib
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db import transaction

from atelier import costing, ledger
from atelier.colors import ColorIdentity
from atelier.costing import (
    quantize_money,
    quantize_quantity,
    quantize_rate,
    to_decimal,
)
from atelier.exceptions import (
    AlreadyCompleted,
    CompletionOnTerminalOrder,
    InsufficientStock,
    NotFound,
    ValidationError,
)
from atelier.models import (
    Artisan,
    ArtisanService,
    MaterialConsumption,
    OrderOutput,
    ProductionOrder,
    ServiceType,
    StockLine,
)
from atelier.signals import line_completed, order_completed, order_created

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════
# REQUEST TYPES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class MaterialRequest:
    """Material line requested at order creation."""

    stock_line: Any  # StockLine or pk
    quantity_used: Decimal
    expected_output_quantity: Decimal | None = None


@dataclass(frozen=True)
class OutputTarget:
    """
    Stock line to receive production, created on demand.

    color=None inherits the color identity of the consumed stock line.
    """

    warehouse: Any
    product_type: Any
    color: ColorIdentity | None = None


@dataclass(frozen=True)
class LineCompletion:
    """Outcome of one material line, for batch completion."""

    consumption: Any  # MaterialConsumption or pk
    actual_output_quantity: Decimal
    target: Any  # StockLine, pk or OutputTarget
    waste_quantity: Decimal | None = None


def _pk(value):
    value = getattr(value, "pk", value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


def _actor(user) -> str:
    if user is not None and user.is_authenticated:
        return f"user:{user.username}"
    return "system"


def _quantity(value, field: str, **context) -> Decimal:
    """Quantize user input, rejecting non-numeric and out-of-range values."""
    try:
        quantity = quantize_quantity(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("INVALID_QUANTITY", **context, **{field: str(value)})
    if not quantity.is_finite() or abs(quantity) > costing.MAX_QUANTITY:
        raise ValidationError("INVALID_QUANTITY", **context, **{field: str(value)})
    return quantity


class Atelier:
    """
    Main API for Atelier.

    Thin orchestration over the models; derived state (aggregates,
    status) lives on ProductionOrder.
    """

    # ══════════════════════════════════════════════════════════════
    # ORDER CREATION
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_order(
        cls,
        date: date,
        service_type,
        artisan,
        materials: list,
        labor_rate: Decimal | int | float | None = None,
        notes: str = "",
        user=None,
    ) -> ProductionOrder:
        """
        Create a production order and debit all its materials.

        Args:
            date: Order date
            service_type: ServiceType or pk
            artisan: Artisan or pk
            materials: MaterialRequest list (dicts with the same keys accepted)
            labor_rate: Labor cost per produced unit; defaults to the
                artisan's qualified rate for the service
            notes: Free text
            user: User creating the order (optional)

        Returns:
            ProductionOrder with status=open

        Raises:
            ValidationError: Empty/invalid materials, negative rate,
                artisan not qualified and no rate given
            NotFound: Service type, artisan or stock line missing
            InsufficientStock: Any line exceeds its stock (nothing debited)
        """
        requests = cls._validate_materials(materials)

        if date is None:
            raise ValidationError("INVALID_INPUT", field="date")

        if labor_rate is not None:
            try:
                labor_rate = to_decimal(labor_rate)
            except (InvalidOperation, TypeError, ValueError):
                raise ValidationError("INVALID_LABOR_RATE", labor_rate=str(labor_rate))
            if not labor_rate.is_finite() or not 0 <= labor_rate <= costing.MAX_MONEY:
                raise ValidationError("INVALID_LABOR_RATE", labor_rate=str(labor_rate))

        service_type = cls._get(ServiceType, service_type)
        artisan = cls._get(Artisan, artisan)

        if labor_rate is None:
            labor_rate = artisan.rate_for(service_type)
            if labor_rate is None:
                raise ValidationError(
                    "ARTISAN_NOT_QUALIFIED",
                    artisan=artisan.code,
                    service_type=service_type.code,
                )

        actor = _actor(user)

        with transaction.atomic():
            locked = cls._lock_stock_lines([req.stock_line for req in requests])
            cls._check_availability(requests, locked)

            order = ProductionOrder.objects.create(
                date=date,
                service_type=service_type,
                artisan=artisan,
                labor_cost_per_unit=quantize_money(labor_rate),
                overhead_rate=quantize_rate(service_type.overhead_rate),
                notes=notes,
                created_by=actor,
            )

            for position, req in enumerate(requests, start=1):
                stock_line = locked[_pk(req.stock_line)]
                # Cost locked at debit time; later average drift does not re-price it
                unit_cost = stock_line.unit_cost

                MaterialConsumption.objects.create(
                    order=order,
                    position=position,
                    stock_line=stock_line,
                    quantity_used=req.quantity_used,
                    unit_cost=unit_cost,
                    material_cost=quantize_money(req.quantity_used * unit_cost),
                    expected_output_quantity=req.expected_output_quantity,
                )

                locked[stock_line.pk] = ledger.debit(
                    stock_line,
                    req.quantity_used,
                    order=order,
                    note=f"Production order {order.code}",
                    created_by=actor,
                )

            order.recalculate()
            order_created.send(sender=cls, order=order, user=user)

        logger.info(
            f"Created ProductionOrder {order.code} with {len(requests)} material lines",
            extra={
                "order": order.code,
                "artisan": artisan.code,
                "service_type": service_type.code,
                "lines": len(requests),
                "total_material_cost": float(order.total_material_cost),
            },
        )

        return order

    @classmethod
    def _validate_materials(cls, materials) -> list[MaterialRequest]:
        """Normalize and validate material lines before touching the database."""
        if not materials:
            raise ValidationError("EMPTY_ORDER")

        requests = []
        for index, material in enumerate(materials, start=1):
            if isinstance(material, dict):
                stock_line = material.get("stock_line", material.get("stock_line_id"))
                quantity_used = material.get("quantity_used")
                expected = material.get("expected_output_quantity")
            else:
                stock_line = material.stock_line
                quantity_used = material.quantity_used
                expected = material.expected_output_quantity

            if stock_line is None or quantity_used is None:
                raise ValidationError("INVALID_INPUT", line=index, field="stock_line/quantity_used")

            quantity_used = _quantity(quantity_used, "quantity_used", line=index)
            if quantity_used <= 0:
                raise ValidationError(
                    "INVALID_QUANTITY", line=index, quantity_used=str(quantity_used)
                )

            if expected is not None:
                expected = _quantity(expected, "expected_output_quantity", line=index)
                if expected < 0:
                    raise ValidationError(
                        "INVALID_QUANTITY",
                        line=index,
                        expected_output_quantity=str(expected),
                    )

            requests.append(MaterialRequest(stock_line, quantity_used, expected))

        return requests

    @classmethod
    def _lock_stock_lines(cls, stock_lines) -> dict:
        """Row-lock every referenced stock line, in pk order."""
        ids = {_pk(value) for value in stock_lines}
        try:
            lines = StockLine.objects.select_for_update().filter(pk__in=ids).order_by("pk")
            locked = {line.pk: line for line in lines}
        except (ValueError, TypeError):
            raise NotFound(entity="StockLine", id=sorted(map(str, ids)))

        for pk in ids:
            if pk not in locked:
                raise NotFound(entity="StockLine", id=pk)
        return locked

    @classmethod
    def _check_availability(cls, requests: list[MaterialRequest], locked: dict) -> None:
        """
        All-or-nothing stock check, under lock, before any debit.

        Lines drawing on the same stock line are checked cumulatively.
        """
        running: dict = defaultdict(Decimal)

        for index, req in enumerate(requests, start=1):
            stock_line = locked[_pk(req.stock_line)]
            running[stock_line.pk] += req.quantity_used

            if running[stock_line.pk] > stock_line.quantity:
                logger.warning(
                    f"Order rejected: stock line {stock_line.pk} has {stock_line.quantity}, "
                    f"requested {running[stock_line.pk]}",
                    extra={
                        "stock_line": stock_line.pk,
                        "line": index,
                        "requested": float(running[stock_line.pk]),
                        "available": float(stock_line.quantity),
                    },
                )
                raise InsufficientStock(
                    line=index,
                    stock_line=stock_line.pk,
                    description=str(stock_line),
                    requested=str(running[stock_line.pk]),
                    available=str(stock_line.quantity),
                )

    # ══════════════════════════════════════════════════════════════
    # COMPLETION
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def complete_line(
        cls,
        order,
        consumption,
        actual_output_quantity: Decimal | int | float,
        target,
        waste_quantity: Decimal | int | float | None = None,
        user=None,
    ) -> OrderOutput:
        """
        Complete one material line.

        Args:
            order: ProductionOrder, pk or uuid
            consumption: MaterialConsumption or pk (must belong to order)
            actual_output_quantity: Units produced (0 = waste-only)
            target: StockLine, pk or OutputTarget receiving the output
            waste_quantity: Waste (default 0)
            user: User registering the outcome (optional)

        Returns:
            OrderOutput

        Raises:
            ValidationError: Negative or out-of-range quantities, invalid target
            NotFound: Order, line or target stock line missing
            CompletionOnTerminalOrder: Order already completed
            AlreadyCompleted: Line already completed
        """
        outputs = cls.complete_lines(
            order,
            [LineCompletion(consumption, actual_output_quantity, target, waste_quantity)],
            user=user,
        )
        return outputs[0]

    @classmethod
    def complete_lines(cls, order, completions: list, user=None) -> list[OrderOutput]:
        """
        Complete several lines of one order atomically.

        Either every line completes and every credit lands, or nothing
        changes.
        """
        if not completions:
            raise ValidationError("EMPTY_COMPLETION")

        completions = [cls._validate_completion(c) for c in completions]
        actor = _actor(user)

        with transaction.atomic():
            order = cls._lock_order(order)
            was_terminal = order.is_terminal

            outputs = [
                cls._complete_locked(order, completion, user, actor)
                for completion in completions
            ]

            if order.is_terminal and not was_terminal:
                order_completed.send(sender=cls, order=order, user=user)

        return outputs

    @classmethod
    def _validate_completion(cls, completion) -> LineCompletion:
        if isinstance(completion, dict):
            completion = LineCompletion(
                consumption=completion.get("consumption", completion.get("consumption_id")),
                actual_output_quantity=completion.get("actual_output_quantity"),
                target=completion.get("target"),
                waste_quantity=completion.get("waste_quantity"),
            )

        if completion.consumption is None or completion.target is None:
            raise ValidationError("INVALID_INPUT", field="consumption/target")

        if completion.actual_output_quantity is None:
            raise ValidationError("INVALID_INPUT", field="actual_output_quantity")

        actual = _quantity(completion.actual_output_quantity, "actual_output_quantity")
        if actual < 0:
            raise ValidationError("INVALID_QUANTITY", actual_output_quantity=str(actual))

        waste = _quantity(
            completion.waste_quantity if completion.waste_quantity is not None else 0,
            "waste_quantity",
        )
        if waste < 0:
            raise ValidationError("INVALID_QUANTITY", waste_quantity=str(waste))

        return LineCompletion(completion.consumption, actual, completion.target, waste)

    @classmethod
    def _complete_locked(
        cls, order: ProductionOrder, completion: LineCompletion, user, actor: str
    ) -> OrderOutput:
        """Per-line completion contract. Caller holds the order lock."""
        if order.is_terminal:
            raise CompletionOnTerminalOrder(order=order.code)

        consumption_pk = _pk(completion.consumption)
        try:
            consumption = (
                MaterialConsumption.objects.select_for_update()
                .select_related("stock_line")
                .get(pk=consumption_pk, order=order)
            )
        except (MaterialConsumption.DoesNotExist, ValueError, TypeError):
            raise NotFound(entity="MaterialConsumption", id=consumption_pk, order=order.code)

        if not consumption.is_pending:
            raise AlreadyCompleted(order=order.code, line=consumption.position)

        actual = completion.actual_output_quantity
        rate = costing.extraction_rate(actual, consumption.expected_output_quantity)
        allocation = costing.allocate(
            consumption.material_cost,
            order.labor_cost_per_unit,
            order.overhead_rate,
            actual,
        )

        if rate is not None and rate > costing.MAX_RATE:
            raise ValidationError(
                "INVALID_QUANTITY",
                order=order.code,
                line=consumption.position,
                extraction_rate=str(rate),
            )
        if allocation.total_cost > costing.MAX_MONEY:
            raise ValidationError(
                "AMOUNT_OUT_OF_RANGE",
                order=order.code,
                line=consumption.position,
                total_cost=str(allocation.total_cost),
            )

        target_line = cls._resolve_target(completion.target, consumption.stock_line)

        output = OrderOutput.objects.create(
            order=order,
            consumption=consumption,
            stock_line=target_line,
            quantity=actual,
            unit_cost=allocation.unit_cost,
        )

        if actual > 0:
            ledger.credit(
                target_line,
                actual,
                allocation.unit_cost,
                order=order,
                note=f"Production order {order.code} line {consumption.position}",
                created_by=actor,
            )

        consumption.mark_completed(
            actual_output_quantity=actual,
            waste_quantity=completion.waste_quantity,
            extraction_rate=rate,
            labor_cost=allocation.labor_cost,
            overhead_cost=allocation.overhead_cost,
        )

        order.recalculate()

        line_completed.send(
            sender=cls,
            order=order,
            consumption=consumption,
            output=output,
            allocation=allocation,
            user=user,
        )

        logger.info(
            f"ProductionOrder {order.code}: line {consumption.position} completed, "
            f"{actual} units @ {allocation.unit_cost}",
            extra={
                "order": order.code,
                "line": consumption.position,
                "actual_output_quantity": float(actual),
                "waste_quantity": float(completion.waste_quantity),
                "extraction_rate": float(rate) if rate is not None else None,
                "unit_cost": float(allocation.unit_cost),
                "status": order.status,
            },
        )

        return output

    @classmethod
    def _resolve_target(cls, target, source_line: StockLine) -> StockLine:
        """StockLine / pk / OutputTarget → locked or newly created stock line."""
        if isinstance(target, OutputTarget):
            color = target.color if target.color is not None else source_line.color_identity
            return ledger.get_or_create_line(target.warehouse, target.product_type, color)

        if isinstance(target, (StockLine, int, str)):
            return ledger.lock_stock_line(target)

        raise ValidationError("INVALID_TARGET", target=repr(target))

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get_order(cls, order) -> ProductionOrder:
        """Order with lines, outputs and catalogs prefetched."""
        qs = ProductionOrder.objects.select_related("service_type", "artisan").prefetch_related(
            "lines__stock_line__warehouse",
            "lines__stock_line__product_type",
            "lines__stock_line__color_code",
            "outputs__stock_line",
        )
        try:
            return qs.get(**cls._order_lookup(order))
        except (ProductionOrder.DoesNotExist, ValueError, TypeError):
            raise NotFound(entity="ProductionOrder", id=str(_pk(order)))

    @classmethod
    def list_pending_lines(cls, order) -> list[MaterialConsumption]:
        """Pending material lines, in line order."""
        order = cls.get_order(order)
        return list(order.pending_lines.select_related("stock_line"))

    @classmethod
    def qualified_artisans(cls, service_type) -> list[ArtisanService]:
        """Active artisans qualified for a service, cheapest first."""
        service_type = cls._get(ServiceType, service_type)
        return list(
            ArtisanService.objects.filter(service_type=service_type, artisan__is_active=True)
            .select_related("artisan", "service_type")
            .order_by("rate", "artisan__name")
        )

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _order_lookup(cls, order) -> dict:
        if isinstance(order, ProductionOrder):
            return {"pk": order.pk}
        if isinstance(order, uuid_lib.UUID):
            return {"uuid": order}
        if isinstance(order, str) and not order.isdigit():
            return {"uuid": uuid_lib.UUID(order)}
        return {"pk": order}

    @classmethod
    def _lock_order(cls, order) -> ProductionOrder:
        try:
            return ProductionOrder.objects.select_for_update().select_related("artisan").get(
                **cls._order_lookup(order)
            )
        except (ProductionOrder.DoesNotExist, ValueError, TypeError):
            raise NotFound(entity="ProductionOrder", id=str(_pk(order)))

    @classmethod
    def _get(cls, model, value):
        pk = _pk(value)
        try:
            return model.objects.get(pk=pk)
        except (model.DoesNotExist, ValueError, TypeError):
            raise NotFound(entity=model.__name__, id=pk)

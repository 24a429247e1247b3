"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's async QuerySet API.  Each
call is a single statement against the database, so it either applies
as a whole or raises; there are no cross-call transactions and no
locking.  Concurrent writers to the same row are last-write-wins.

Reporting aggregates coalesce missing SUM/AVG values to zero in Python,
so an empty window never yields ``None``.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.db.models import Avg, Count, QuerySet, Sum

from modules.core.timestamps import from_millis
from modules.orders.constants import (
    EXCLUDED_FROM_SALES,
    ORDER_NUMBER_MAX_RETRIES,
    PENDING_STATUSES,
    TOTAL_DECIMAL_PLACES,
    OrderStatus,
)
from modules.orders.dtos import (
    DailySalesSummary,
    HourlySales,
    OrderStatusCount,
    OrderTypeStats,
)
from modules.orders.exceptions import InvalidOrder, InvalidOrderTotal, OrderConflict
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

CENT = Decimal(1).scaleb(-TOTAL_DECIMAL_PLACES)

NEWEST_FIRST = ("-created_at", "-id")
OLDEST_FIRST = ("created_at", "id")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_all(self) -> List[Order]:
        return await _fetch(Order.objects.order_by(*NEWEST_FIRST))

    async def get_by_id(self, id: int) -> Optional[Order]:
        """Return the order with primary key ``id``, or ``None``."""
        return await Order.objects.filter(pk=id).afirst()

    async def get_by_order_number(self, order_number: str) -> Optional[Order]:
        return await Order.objects.filter(order_number=order_number).afirst()

    async def get_by_status(self, statuses: Iterable[str]) -> List[Order]:
        """Orders in any of ``statuses``, oldest first (kitchen FIFO).

        A single status string is treated as a one-element set.  An empty
        ``statuses`` returns ``[]`` without touching the database.
        """
        if isinstance(statuses, str):
            statuses = [statuses]
        wanted = {str(status) for status in statuses}
        if not wanted:
            return []
        return await _fetch(
            Order.objects.filter(status__in=wanted).order_by(*OLDEST_FIRST)
        )

    async def get_by_customer_id(self, customer_id: int) -> List[Order]:
        return await _fetch(
            Order.objects.filter(customer_id=customer_id).order_by(*NEWEST_FIRST)
        )

    async def get_by_type(self, order_type: str) -> List[Order]:
        return await _fetch(
            Order.objects.filter(type=order_type).order_by(*NEWEST_FIRST)
        )

    async def get_by_date_range(self, start: int, end: int) -> List[Order]:
        return await _fetch(_window(start, end).order_by(*NEWEST_FIRST))

    async def get_order_count(self, start: int, end: int) -> int:
        return await _window(start, end).acount()

    async def get_todays_orders(
        self, start_of_day: int, end_of_day: int
    ) -> List[Order]:
        return await self.get_by_date_range(start_of_day, end_of_day)

    async def get_pending_orders(self) -> List[Order]:
        return await self.get_by_status(PENDING_STATUSES)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def insert(self, entity: Order) -> int:
        """Insert ``entity`` and return its new primary key.

        Never overwrites: a duplicate primary key or order number raises
        ``OrderConflict`` and leaves the stored row as it was.  Invalid
        fields raise ``InvalidOrder`` before anything is written.  Any
        other ``IntegrityError`` propagates unchanged.

        A generated order number that loses a race with a concurrent
        insert is regenerated, up to ``ORDER_NUMBER_MAX_RETRIES`` times.
        """
        _validate(entity, exclude=["order_number"], event="order.insert_invalid")
        generated = not entity.order_number
        attempt = 0
        while True:
            attempt += 1
            try:
                await entity.asave(force_insert=True)
                break
            except IntegrityError as exc:
                field = await _insert_collision(entity)
                if field is None:
                    raise
                if (
                    generated
                    and field == "order_number"
                    and attempt < ORDER_NUMBER_MAX_RETRIES
                ):
                    logger.info(
                        "order.number_retry",
                        order_number=entity.order_number,
                        attempt=attempt,
                    )
                    entity.order_number = ""
                    continue
                logger.warning(
                    "order.insert_conflict",
                    order_id=entity.pk,
                    order_number=entity.order_number,
                    field=field,
                    error=str(exc),
                )
                raise OrderConflict(
                    f"Order {field} {getattr(entity, field)!r} is already taken."
                ) from exc

        logger.info(
            "order.inserted",
            order_id=entity.pk,
            order_number=entity.order_number,
            order_type=entity.type,
            total=str(entity.total),
        )
        return entity.pk

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update(self, entity: Order) -> int:
        """Replace every column of the stored order except ``created_at``."""
        _validate(entity, event="order.update_invalid")
        try:
            affected = await Order.objects.filter(pk=entity.pk).aupdate(
                order_number=entity.order_number,
                customer_id=entity.customer_id,
                type=entity.type,
                status=entity.status,
                total=entity.total,
            )
        except IntegrityError as exc:
            taken = (
                await Order.objects.filter(order_number=entity.order_number)
                .exclude(pk=entity.pk)
                .aexists()
            )
            if not taken:
                raise
            logger.warning(
                "order.update_conflict",
                order_id=entity.pk,
                order_number=entity.order_number,
                error=str(exc),
            )
            raise OrderConflict(
                f"Order order_number {entity.order_number!r} is already taken."
            ) from exc

        logger.info("order.updated", order_id=entity.pk, affected=affected)
        return affected

    async def update_status(self, id: int, new_status: str) -> int:
        """Overwrite the status of order ``id``; no transition rules apply.

        Raises ``ValueError`` for a value that is not an ``OrderStatus``.
        """
        status = OrderStatus(new_status)
        affected = await Order.objects.filter(pk=id).aupdate(status=status)
        logger.info(
            "order.status_updated", order_id=id, status=status.value, affected=affected
        )
        return affected

    async def update_total(self, id: int, new_total: Decimal) -> int:
        total = _amount(new_total)
        affected = await Order.objects.filter(pk=id).aupdate(total=total)
        logger.info(
            "order.total_updated", order_id=id, total=str(total), affected=affected
        )
        return affected

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, entity: Order) -> int:
        return await self.delete_by_id(entity.pk)

    async def delete_by_id(self, id: int) -> int:
        deleted, _ = await Order.objects.filter(pk=id).adelete()
        logger.info("order.deleted", order_id=id, affected=deleted)
        return deleted

    async def delete_all(self) -> int:
        """Remove every order.  Irreversible; meant for resets and tests."""
        deleted, _ = await Order.objects.all().adelete()
        logger.warning("order.deleted_all", affected=deleted)
        return deleted

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    async def get_daily_sales_summary(self, start: int, end: int) -> DailySalesSummary:
        totals = await _sales_window(start, end).aaggregate(
            total_orders=Count("id"),
            total_revenue=Sum("total"),
            average_order_value=Avg("total"),
        )
        if not totals["total_orders"]:
            return DailySalesSummary.empty()
        return DailySalesSummary(
            total_orders=totals["total_orders"],
            total_revenue=_coalesce(totals["total_revenue"]),
            average_order_value=_coalesce(totals["average_order_value"]),
        )

    async def get_order_status_counts(
        self, start: int, end: int
    ) -> List[OrderStatusCount]:
        """Ties on ``count`` are broken by status name, ascending."""
        rows = (
            _window(start, end)
            .values("status")
            .annotate(count=Count("id"))
            .order_by("-count", "status")
        )
        return [
            OrderStatusCount(status=row["status"], count=row["count"])
            async for row in rows
        ]

    async def get_order_type_counts(self, start: int, end: int) -> List[OrderTypeStats]:
        """Ties on ``revenue`` are broken by type name, ascending."""
        rows = (
            _sales_window(start, end)
            .values("type")
            .annotate(count=Count("id"), revenue=Sum("total"))
            .order_by("-revenue", "type")
        )
        return [
            OrderTypeStats(
                type=row["type"],
                count=row["count"],
                revenue=_coalesce(row["revenue"]),
            )
            async for row in rows
        ]

    async def get_hourly_sales(self, start: int, end: int) -> List[HourlySales]:
        """Sales per local hour of day; hours without orders are omitted.

        The hour is taken in the configured ``TIME_ZONE``.  Bucketing is
        done here rather than in SQL because hour extraction from epoch
        milliseconds is not portable across database backends.
        """
        counts: Dict[str, int] = defaultdict(int)
        revenue: Dict[str, Decimal] = defaultdict(Decimal)
        rows = _sales_window(start, end).order_by().values_list("created_at", "total")
        async for created_at, total in rows:
            hour = f"{from_millis(created_at).hour:02d}"
            counts[hour] += 1
            revenue[hour] += total or Decimal(0)

        return [
            HourlySales(
                hour=hour,
                order_count=counts[hour],
                revenue=_coalesce(revenue[hour]),
            )
            for hour in sorted(counts)
        ]


def _window(start: int, end: int) -> QuerySet:
    return Order.objects.filter(created_at__range=(start, end))


def _sales_window(start: int, end: int) -> QuerySet:
    return _window(start, end).exclude(status__in=EXCLUDED_FROM_SALES)


async def _fetch(queryset: QuerySet) -> List[Order]:
    return [order async for order in queryset]


def _validate(
    entity: Order, event: str, exclude: Optional[List[str]] = None
) -> None:
    """Normalise ``total`` and run field validation on ``entity``.

    Uniqueness and table constraints are left to the database, so no
    query is issued here.
    """
    try:
        entity.total = _amount(entity.total)
        entity.full_clean(
            exclude=exclude, validate_unique=False, validate_constraints=False
        )
    except (InvalidOrder, ValidationError) as exc:
        logger.warning(
            event,
            order_id=entity.pk,
            order_number=entity.order_number,
            error=str(exc),
        )
        if isinstance(exc, InvalidOrder):
            raise
        raise InvalidOrder(
            f"Invalid order fields: {', '.join(sorted(exc.message_dict))}",
            errors=exc.message_dict,
        ) from exc


async def _insert_collision(entity: Order) -> Optional[str]:
    """Name of the unique field a failed insert collided on, if any."""
    if entity.pk is not None and await Order.objects.filter(pk=entity.pk).aexists():
        return "pk"
    if (
        entity.order_number
        and await Order.objects.filter(order_number=entity.order_number).aexists()
    ):
        return "order_number"
    return None


def _amount(value: Any) -> Decimal:
    """Validate and normalise a money amount to two decimal places."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidOrderTotal(f"Invalid order total: {value!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise InvalidOrderTotal(f"Order total must be a non-negative amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _coalesce(value: Any) -> Decimal:
    """Aggregate result as a two-place ``Decimal``; ``None`` becomes zero."""
    if value is None:
        return Decimal("0").quantize(CENT)
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)

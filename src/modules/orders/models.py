"""Order model.

One table, ``orders``, holding every order the point of sale has taken.

- ``order_number`` is the human-facing identifier printed on tickets,
  auto-generated on first save when left blank; the integer ``id`` is
  assigned by the database on insert.
- ``customer_id`` is an optional reference to a customer owned by
  another system, so it is a plain integer column and not a foreign key.
- ``total`` is fixed-point (two decimal places) and never negative.
- ``created_at`` is epoch milliseconds, set once on creation.  It is the
  only ordering and time-range key.
"""

from __future__ import annotations

import secrets
from datetime import datetime
from decimal import Decimal
from typing import Any

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.timestamps import from_millis, now_millis
from modules.orders.constants import (
    ORDER_NUMBER_MAX_RETRIES,
    PENDING_STATUSES,
    TOTAL_DECIMAL_PLACES,
    TOTAL_MAX_DIGITS,
    OrderStatus,
    OrderType,
)


class Order(models.Model):
    """A single customer transaction, from creation to completion or cancellation."""

    order_number: models.CharField = models.CharField(
        max_length=32, unique=True, db_column="order_no"
    )
    customer_id: models.PositiveIntegerField = models.PositiveIntegerField(
        null=True, blank=True, default=None
    )
    type: models.CharField = models.CharField(
        max_length=16,
        choices=OrderType.choices,
        default=OrderType.DINE_IN,
    )
    status: models.CharField = models.CharField(
        max_length=16,
        choices=OrderStatus.choices,
        default=OrderStatus.NEW,
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=TOTAL_MAX_DIGITS,
        decimal_places=TOTAL_DECIMAL_PLACES,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    created_at: models.BigIntegerField = models.BigIntegerField(
        default=now_millis, editable=False
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["customer_id"], name="orders_customer_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total__gte=0),
                name="orders_total_non_negative",
            ),
        ]

    @property
    def is_pending(self) -> bool:
        """``True`` while the order is new, preparing or ready."""
        return self.status in PENDING_STATUSES

    @property
    def created_at_local(self) -> datetime:
        """``created_at`` as an aware datetime in the local time zone."""
        return from_millis(self.created_at)

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        """Generate a ticket number: ``ORD-YYYYMMDD-XXXXXX`` (local date)."""
        now = timezone.localtime()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    @staticmethod
    def order_number_taken(candidate: str) -> bool:
        return Order.objects.filter(order_number=candidate).exists()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        """Assign a generated ``order_number`` when blank, then save.

        The free-number check and the insert are separate statements, so a
        concurrent writer can still claim the same number in between.  The
        repository's ``insert`` retries with a fresh number in that case.
        """
        if not self.order_number:
            for _ in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not self.order_number_taken(candidate):
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"

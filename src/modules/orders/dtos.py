"""Order reporting DTOs.

Framework-agnostic projections returned by the repository's reporting
queries, using Pydantic v2.  DTOs are immutable (``frozen=True``) and
carry money as ``Decimal``.

- ``DailySalesSummary``: order count, revenue and average ticket.
- ``OrderStatusCount``: number of orders per status.
- ``OrderTypeStats``: number of orders and revenue per order type.
- ``HourlySales``: number of orders and revenue per local hour of day.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ZERO = Decimal("0.00")


class DailySalesSummary(BaseModel):
    """Totals over non-cancelled orders in a reporting window.

    An empty window yields ``(0, 0, 0)``, see :meth:`empty`.
    """

    model_config = ConfigDict(frozen=True)

    total_orders: int = Field(ge=0)
    total_revenue: Decimal = ZERO
    average_order_value: Decimal = ZERO

    @classmethod
    def empty(cls) -> DailySalesSummary:
        return cls(total_orders=0, total_revenue=ZERO, average_order_value=ZERO)


class OrderStatusCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    count: int = Field(ge=0)


class OrderTypeStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    count: int = Field(ge=0)
    revenue: Decimal = ZERO


class HourlySales(BaseModel):
    """Sales within one local hour of day (``"00"`` to ``"23"``)."""

    model_config = ConfigDict(frozen=True)

    hour: str
    order_count: int = Field(ge=0)
    revenue: Decimal = ZERO

    @field_validator("hour")
    @classmethod
    def hour_must_be_two_digits(cls, v: str) -> str:
        if len(v) != 2 or not v.isdigit() or int(v) > 23:
            raise ValueError("Hour must be a two-digit string between 00 and 23.")
        return v

"""Order repository interface.

Extends ``IRepository[Order]`` with the look-ups the kitchen and the
front of house need, targeted status/total updates, and the reporting
projections behind the sales dashboard.

All time windows are inclusive ``[start, end]`` bounds in epoch
milliseconds applied to ``Order.created_at``.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import (
        DailySalesSummary,
        HourlySales,
        OrderStatusCount,
        OrderTypeStats,
    )
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for restaurant orders."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @abstractmethod
    async def get_by_order_number(self, order_number: str) -> Optional[Order]:
        """Exact (case-sensitive) look-up by ticket number."""

    @abstractmethod
    async def get_by_status(self, statuses: Iterable[str]) -> List[Order]:
        """Orders whose status is in ``statuses``, oldest first.

        An empty ``statuses`` matches nothing.
        """

    @abstractmethod
    async def get_by_customer_id(self, customer_id: int) -> List[Order]:
        """Orders of one customer, newest first."""

    @abstractmethod
    async def get_by_type(self, order_type: str) -> List[Order]:
        """Orders of one type, newest first."""

    @abstractmethod
    async def get_by_date_range(self, start: int, end: int) -> List[Order]:
        """Orders created within the window, newest first."""

    @abstractmethod
    async def get_order_count(self, start: int, end: int) -> int:
        """Number of orders created within the window."""

    @abstractmethod
    async def get_todays_orders(
        self, start_of_day: int, end_of_day: int
    ) -> List[Order]:
        """Orders of one day; the caller computes the day boundaries."""

    @abstractmethod
    async def get_pending_orders(self) -> List[Order]:
        """New, preparing and ready orders, oldest first."""

    # ------------------------------------------------------------------
    # Targeted updates
    # ------------------------------------------------------------------

    @abstractmethod
    async def update_status(self, id: int, new_status: str) -> int:
        """Set the status only; returns the affected-row count."""

    @abstractmethod
    async def update_total(self, id: int, new_total: Decimal) -> int:
        """Set the total only; returns the affected-row count."""

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    @abstractmethod
    async def get_daily_sales_summary(self, start: int, end: int) -> DailySalesSummary:
        """Count, revenue and average ticket of non-cancelled orders."""

    @abstractmethod
    async def get_order_status_counts(
        self, start: int, end: int
    ) -> List[OrderStatusCount]:
        """Orders per status (cancelled included), most frequent first."""

    @abstractmethod
    async def get_order_type_counts(self, start: int, end: int) -> List[OrderTypeStats]:
        """Orders and revenue per type (cancelled excluded), highest revenue first."""

    @abstractmethod
    async def get_hourly_sales(self, start: int, end: int) -> List[HourlySales]:
        """Orders and revenue per local hour (cancelled excluded), by hour."""

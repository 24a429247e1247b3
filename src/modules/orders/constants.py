"""Order domain constants.

Defines type and status choices for restaurant orders.  Status changes
are driven by the caller: there is no transition table, any status may
replace any other.
"""

from django.db import models


class OrderType(models.TextChoices):
    DINE_IN = "dine_in", "Dine in"
    TAKEAWAY = "takeaway", "Takeaway"
    DELIVERY = "delivery", "Delivery"


class OrderStatus(models.TextChoices):
    NEW = "new", "New"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


# Orders still on their way through the kitchen.
PENDING_STATUSES: frozenset[str] = frozenset(
    {OrderStatus.NEW, OrderStatus.PREPARING, OrderStatus.READY}
)

# Statuses left out of revenue reporting.
EXCLUDED_FROM_SALES: frozenset[str] = frozenset({OrderStatus.CANCELLED})

ORDER_NUMBER_MAX_RETRIES = 5

TOTAL_MAX_DIGITS = 10
TOTAL_DECIMAL_PLACES = 2

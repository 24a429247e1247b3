from __future__ import annotations

import random
from datetime import datetime, time, timedelta
from decimal import Decimal

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from modules.core.timestamps import to_millis
from modules.orders.constants import OrderStatus, OrderType
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository


class Command(BaseCommand):
    help = "Seed the orders table with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=50)
        parser.add_argument(
            "--days", type=int, default=7, help="Spread orders over the last N days."
        )
        parser.add_argument("--seed", type=int, default=42)
        parser.add_argument(
            "--clear", action="store_true", help="Delete every order first."
        )

    def handle(self, *args, **options):
        count = options["count"]
        days = options["days"]
        if count < 0:
            raise CommandError("--count must not be negative.")
        if days < 1:
            raise CommandError("--days must be at least 1.")

        random.seed(options["seed"])
        repo = OrderDjangoRepository()

        if options["clear"]:
            removed = async_to_sync(repo.delete_all)()
            self.stdout.write(self.style.WARNING(f"Deleted {removed} orders."))

        self.stdout.write("Creating orders...")
        created = 0
        for _ in range(count):
            async_to_sync(repo.insert)(self._random_order(days))
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Seed completed: orders={created}"))

    def _random_order(self, days: int) -> Order:
        status_weights = [
            (OrderStatus.COMPLETED, 0.50),
            (OrderStatus.NEW, 0.10),
            (OrderStatus.PREPARING, 0.10),
            (OrderStatus.READY, 0.10),
            (OrderStatus.CANCELLED, 0.20),
        ]
        statuses = [s for s, _ in status_weights]
        weights = [w for _, w in status_weights]

        # Service hours only: 11:00 to 22:59 local time.
        day = timezone.localdate() - timedelta(days=random.randint(0, days - 1))
        created_at = datetime.combine(day, time.min) + timedelta(
            hours=random.randint(11, 22), minutes=random.randint(0, 59)
        )

        return Order(
            customer_id=random.choice([None, *range(1, 21)]),
            type=random.choice(OrderType.values),
            status=random.choices(statuses, weights=weights, k=1)[0],
            total=Decimal(random.randint(800, 25000)) / 100,
            created_at=to_millis(created_at),
        )

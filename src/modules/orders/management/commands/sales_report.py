from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from modules.core.timestamps import local_day_bounds
from modules.orders.repositories import IOrderRepository, OrderDjangoRepository


class Command(BaseCommand):
    help = "Print the sales report of one local calendar day as JSON."

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            dest="day",
            default=None,
            help="Day to report on (YYYY-MM-DD). Defaults to today.",
        )

    def handle(self, *args, **options):
        if options["day"]:
            try:
                day = date.fromisoformat(options["day"])
            except ValueError as exc:
                raise CommandError(f"Invalid --date: {options['day']!r}") from exc
        else:
            day = timezone.localdate()

        report = async_to_sync(build_report)(OrderDjangoRepository(), day)
        self.stdout.write(json.dumps(report, indent=2))


async def build_report(repo: IOrderRepository, day: date) -> Dict[str, Any]:
    start, end = local_day_bounds(day)
    summary = await repo.get_daily_sales_summary(start, end)
    by_status = await repo.get_order_status_counts(start, end)
    by_type = await repo.get_order_type_counts(start, end)
    hourly = await repo.get_hourly_sales(start, end)
    return {
        "date": day.isoformat(),
        "summary": summary.model_dump(mode="json"),
        "by_status": [row.model_dump(mode="json") for row in by_status],
        "by_type": [row.model_dump(mode="json") for row in by_type],
        "hourly": [row.model_dump(mode="json") for row in hourly],
    }

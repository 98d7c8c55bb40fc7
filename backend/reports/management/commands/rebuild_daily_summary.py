from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from tabulate import tabulate

from reports.services import DailySummaryService


class Command(BaseCommand):
    help = "Recompute DailySummary rows from the orders table"

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            type=str,
            help="Day to rebuild (YYYY-MM-DD). Defaults to today.",
        )
        parser.add_argument(
            "--start-date",
            type=str,
            help="First day of a range to rebuild (YYYY-MM-DD)",
        )
        parser.add_argument(
            "--end-date",
            type=str,
            help="Last day of a range to rebuild (YYYY-MM-DD). Defaults to today.",
        )

    def _parse(self, value, option):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise CommandError(f"--{option} must be a date in YYYY-MM-DD format, got '{value}'")

    def handle(self, *args, **options):
        today = timezone.localdate()
        if options["start_date"]:
            start = self._parse(options["start_date"], "start-date")
            end = self._parse(options["end_date"], "end-date") if options["end_date"] else today
        else:
            start = end = self._parse(options["date"], "date") if options["date"] else today

        if start > end:
            raise CommandError("--start-date must not be after --end-date")

        summaries = DailySummaryService.rebuild_range(start, end)

        rows = [[s.date.isoformat(), s.total_sales, s.transaction_count] for s in summaries]
        self.stdout.write(tabulate(rows, headers=["Date", "Total sales", "Transactions"], tablefmt="simple"))
        self.stdout.write(self.style.SUCCESS(f"Rebuilt {len(summaries)} daily summar{'y' if len(summaries) == 1 else 'ies'}."))

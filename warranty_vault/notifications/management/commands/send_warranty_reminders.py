"""
notifications/management/commands/send_warranty_reminders.py

Scheduled command (runs daily, see notifications/scheduler.py).

Safe to re-run: warranties notified within the suppression
window are not picked up again.
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from notifications.services.reminders import send_warranty_expiry_reminders
from warranties.exceptions import PersistenceError


class Command(BaseCommand):
    help = "Send warranty expiry reminders (1 day, 1 week and 1 month before expiry)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the warranties that would be notified without sending anything",
        )
        parser.add_argument(
            "--at",
            help="Run as if it were this ISO-8601 datetime (default: now)",
        )

    def handle(self, *args, **options):
        now = self._parse_at(options.get("at"))

        self.stdout.write(
            self.style.NOTICE(
                f"[{now:%Y-%m-%d %H:%M:%S}] Starting warranty expiry reminders"
            )
        )

        try:
            report = send_warranty_expiry_reminders(
                now=now,
                dry_run=options["dry_run"],
            )
        except PersistenceError as exc:
            raise CommandError(f"Warranty reminder run aborted: {exc}") from exc

        if report.dry_run:
            self.stdout.write(
                self.style.WARNING(
                    f"Dry run: {report.eligible} of {report.found} due warranties "
                    f"would be notified"
                )
            )
            return

        self.stdout.write(
            self.style.SUCCESS(
                f"[{now:%Y-%m-%d %H:%M:%S}] Completed: {report.summary()}"
            )
        )

    def _parse_at(self, value):
        if not value:
            return timezone.now()

        parsed = parse_datetime(value)
        if parsed is None:
            raise CommandError(f"Invalid --at datetime: {value!r}")

        if timezone.is_naive(parsed):
            parsed = timezone.make_aware(parsed)
        return parsed

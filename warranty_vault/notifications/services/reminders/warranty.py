"""
notifications/services/reminders/warranty.py

Daily expiry scan for warranties.

A warranty is due when it expires exactly one horizon from today
and has not been notified within the suppression window. Each due
warranty is handed to the dispatcher on its own; a failing record
never stops the batch.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from time import monotonic

from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.utils import timezone

from notifications.conf import reminder_setting, reminder_timezone
from notifications.services.dispatch import DispatchStatus, send_warranty_reminder
from warranties.exceptions import PersistenceError
from warranties.models import Warranty

logger = logging.getLogger(__name__)


# ============================================================
# REMINDER HORIZONS (TIME BEFORE EXPIRY)
# ============================================================

# TODO: filter by Warranty.reminder_preference once per-warranty
# horizons are confirmed; every warranty currently gets all three.
REMINDER_HORIZONS = {
    "1 day left": relativedelta(days=1),
    "1 week left": relativedelta(days=7),
    "1 month left": relativedelta(months=1),
}


@dataclass
class ReminderRunReport:
    today: date
    target_dates: list
    found: int = 0
    eligible: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    deferred: int = 0
    dry_run: bool = False

    def summary(self):
        return (
            f"{self.found} due, {self.sent} sent, {self.skipped} skipped, "
            f"{self.failed} failed, {self.deferred} deferred"
        )


# ============================================================
# DATE HELPERS
# ============================================================

def reminder_today(now=None):
    """Today's date in the reminder timezone, not the server's."""
    return timezone.localdate(now or timezone.now(), timezone=reminder_timezone())


def reminder_target_dates(today):
    """
    Expiry dates that trigger a reminder today.
    Month offsets clamp to the last valid day (Jan 31 -> Feb 28/29).
    """
    return sorted({today + offset for offset in REMINDER_HORIZONS.values()})


def suppression_threshold(now):
    return now - timedelta(hours=reminder_setting("SUPPRESSION_HOURS"))


# ============================================================
# STORE ACCESS
# ============================================================

def fetch_due_warranties(target_dates, not_before):
    try:
        return list(Warranty.objects.due_for_reminder(target_dates, not_before))
    except DatabaseError as exc:
        raise PersistenceError("Could not query warranties due for reminder") from exc


def resolve_owners(warranties):
    """
    Map owner id -> active user for the given warranties.
    Deleted or deactivated owners are simply absent from the result.
    """
    owner_ids = {w.owner_id for w in warranties}
    if not owner_ids:
        return {}

    User = get_user_model()
    try:
        return User.objects.filter(is_active=True).in_bulk(owner_ids)
    except DatabaseError as exc:
        raise PersistenceError("Could not resolve warranty owners") from exc


# ============================================================
# SEND WARRANTY EXPIRY REMINDERS
# ============================================================

def send_warranty_expiry_reminders(*, now=None, dry_run=False):
    """
    Run one expiry scan and return a ReminderRunReport.

    Raises PersistenceError when the store cannot be queried at all;
    per-warranty failures are logged and counted instead.
    """
    now = now or timezone.now()
    today = reminder_today(now)
    target_dates = reminder_target_dates(today)
    not_before = suppression_threshold(now)

    report = ReminderRunReport(
        today=today,
        target_dates=target_dates,
        dry_run=dry_run,
    )

    logger.info(
        "Running warranty expiry scan for %s (targets: %s)",
        today, ", ".join(f"{d:%Y-%m-%d}" for d in target_dates),
    )

    warranties = fetch_due_warranties(target_dates, not_before)
    owners = resolve_owners(warranties)
    report.found = len(warranties)

    logger.info("Found %d warranties due for notification.", report.found)

    max_seconds = reminder_setting("MAX_RUN_SECONDS")
    started = monotonic()

    for index, warranty in enumerate(warranties):
        if max_seconds and monotonic() - started > max_seconds:
            report.deferred = len(warranties) - index
            logger.warning(
                "Reminder run exceeded %ss; %d warranties left for the next run.",
                max_seconds, report.deferred,
            )
            break

        owner = owners.get(warranty.owner_id)
        if owner is None:
            report.skipped += 1
            logger.warning(
                "Skipping notification for warranty %s: owner %s not found or inactive.",
                warranty.pk, warranty.owner_id,
            )
            continue

        report.eligible += 1

        if dry_run:
            logger.info(
                "[dry-run] Would notify %s about %s (expires %s)",
                owner.delivery_email or owner.pk, warranty.product_name, warranty.expiry_date,
            )
            continue

        logger.info(
            "Triggering notification for %s (user %s, expires %s)",
            warranty.product_name, owner.pk, warranty.expiry_date,
        )

        try:
            result = send_warranty_reminder(warranty, owner, now=now)
        except PersistenceError:
            # mail went out; the record stays eligible and may be re-sent
            report.failed += 1
            logger.exception(
                "Reminder for warranty %s sent but not recorded.", warranty.pk
            )
            continue
        except Exception:
            report.failed += 1
            logger.exception(
                "Unexpected error while notifying warranty %s; continuing.", warranty.pk
            )
            continue

        if result.status is DispatchStatus.SENT:
            report.sent += 1
        elif result.status is DispatchStatus.SKIPPED:
            report.skipped += 1
        else:
            report.failed += 1

    logger.info("Finished warranty expiry scan: %s", report.summary())
    return report

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from django.conf import settings
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone
import logging

from notifications.conf import reminder_run_at, reminder_timezone

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """
    Owns the APScheduler instance that triggers the daily reminder run.

    - Respects ENABLE_SCHEDULER setting
    - start() is a no-op when already running
    - One instance per process, held by NotificationsConfig
    """

    job_id = "send_warranty_reminders"

    def __init__(self):
        self._scheduler = None

    @property
    def running(self):
        return self._scheduler is not None and self._scheduler.running

    def get_job(self):
        if self._scheduler is None:
            return None
        return self._scheduler.get_job(self.job_id)

    def start(self):
        # --------------------------------------------
        # DEV / PROD TOGGLE
        # --------------------------------------------
        if not getattr(settings, "ENABLE_SCHEDULER", False):
            logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=False)")
            return False

        # --------------------------------------------
        # NO DOUBLE START
        # --------------------------------------------
        if self.running:
            logger.info("APScheduler already running, skipping initialization")
            return False

        tz = reminder_timezone()
        hour, minute = reminder_run_at()

        logger.info("Starting APScheduler...")

        self._scheduler = BackgroundScheduler(timezone=tz)

        # --------------------------------------------
        # SCHEDULE: ONCE DAILY AT RUN_AT (REMINDER TZ)
        # --------------------------------------------
        self._scheduler.add_job(
            run_warranty_reminders,
            trigger=CronTrigger(hour=hour, minute=minute, timezone=tz),
            id=self.job_id,
            replace_existing=True,
            max_instances=1,      # Prevent overlapping runs
            coalesce=True,        # Merge missed runs if server was down
        )

        self._scheduler.start()

        logger.info(
            "APScheduler started: warranty reminders scheduled daily at %02d:%02d (%s)",
            hour, minute, tz.key,
        )
        return True

    def shutdown(self, wait=False):
        if not self.running:
            return

        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("APScheduler stopped")


def run_warranty_reminders():
    """
    Wrapper job that calls the Django management command.
    Keeps all business logic out of the scheduler.
    """
    now = timezone.now()
    logger.info(f"Running scheduled warranty reminders at {now:%Y-%m-%d %H:%M:%S}")

    try:
        call_command("send_warranty_reminders")
    except CommandError as exc:
        # next trigger retries
        logger.error("Scheduled warranty reminders failed: %s", exc)

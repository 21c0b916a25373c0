from django.apps import AppConfig
import atexit
import os
import sys


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"

    scheduler = None

    def ready(self):
        from .scheduler import ReminderScheduler

        self.scheduler = ReminderScheduler()

        # --------------------------------------------------
        # Start APScheduler SAFELY
        # --------------------------------------------------
        # One-off manage.py commands never schedule
        if os.path.basename(sys.argv[0]) == "manage.py" and "runserver" not in sys.argv:
            return

        # The runserver autoreloader parent must not schedule too
        if "runserver" in sys.argv and os.environ.get("RUN_MAIN") != "true":
            return

        if self.scheduler.start():
            atexit.register(self.scheduler.shutdown)

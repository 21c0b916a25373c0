from zoneinfo import ZoneInfo

from django.conf import settings


DEFAULTS = {
    "TIME_ZONE": "Asia/Kolkata",
    "RUN_AT": "07:07",
    "SUPPRESSION_HOURS": 12,
    "MAX_RUN_SECONDS": 3600,
    "MESSAGE_ID_DOMAIN": "warrantyvault.local",
}


def reminder_setting(name):
    """Read one WARRANTY_REMINDERS value, falling back to DEFAULTS."""
    overrides = getattr(settings, "WARRANTY_REMINDERS", {})
    return overrides.get(name, DEFAULTS[name])


def reminder_timezone():
    return ZoneInfo(reminder_setting("TIME_ZONE"))


def reminder_run_at():
    """Parse RUN_AT ("HH:MM") into (hour, minute)."""
    hour, minute = str(reminder_setting("RUN_AT")).split(":", 1)
    return int(hour), int(minute)

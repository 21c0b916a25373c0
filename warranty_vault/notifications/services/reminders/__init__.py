"""
Reminder notification service layer.

Time-based reminder emitters triggered by schedulers
(management commands, APScheduler jobs).

Reminder logic is:
- service-layer only
- date-based
- deduplicated through Warranty.last_notified_at
"""

from .warranty import (
    REMINDER_HORIZONS,
    ReminderRunReport,
    reminder_target_dates,
    reminder_today,
    send_warranty_expiry_reminders,
)

__all__ = [
    "REMINDER_HORIZONS",
    "ReminderRunReport",
    "reminder_target_dates",
    "reminder_today",
    "send_warranty_expiry_reminders",
]

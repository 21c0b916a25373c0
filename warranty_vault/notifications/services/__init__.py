"""
Notification service layer.

- dispatch:  delivers a single warranty reminder email
- reminders: scheduled scans that decide what is due
"""

# =====================================================
# DISPATCH
# =====================================================
from .dispatch import (
    DispatchResult,
    DispatchStatus,
    send_warranty_reminder,
)

# =====================================================
# REMINDERS
# =====================================================
from .reminders import (
    send_warranty_expiry_reminders,
)

# =====================================================
# PUBLIC EXPORTS
# =====================================================
__all__ = [
    # Dispatch
    "DispatchResult",
    "DispatchStatus",
    "send_warranty_reminder",

    # Reminders
    "send_warranty_expiry_reminders",
]

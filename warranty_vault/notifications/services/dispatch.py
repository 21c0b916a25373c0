"""
notifications/services/dispatch.py

Delivers ONE warranty expiry reminder.

Side effects are limited to:
- one email attempt
- one update of Warranty.last_notified_at, only after the email went out
"""

import enum
import logging
import smtplib
from dataclasses import dataclass
from email.utils import make_msgid

from django.conf import settings
from django.core.mail import BadHeaderError, EmailMessage
from django.utils import timezone

from notifications.conf import reminder_setting, reminder_timezone
from notifications.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class DispatchStatus(enum.Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DispatchResult:
    status: DispatchStatus
    warranty_id: object
    recipient: str = ""
    message_id: str = ""
    reason: str = ""
    error: "DeliveryError | None" = None

    @property
    def sent(self):
        return self.status is DispatchStatus.SENT


# ============================================================
# MESSAGE
# ============================================================

def build_reminder_email(warranty, user, today):
    """Return (subject, body) for a warranty expiry reminder."""
    subject = f"Warranty Expiry Reminder: {warranty.product_name}"

    product = f'"{warranty.product_name}"'
    if warranty.brand:
        product = f"{product} (Brand: {warranty.brand})"

    days_left = warranty.days_until_expiry(today)
    day_word = "day" if days_left == 1 else "days"

    body = (
        f"Hi {user.display_name or 'there'},\n\n"
        f"This is a reminder that the warranty for your product {product} "
        f"is expiring on {warranty.expiry_date:%A, %d %B %Y}.\n"
        f"Time remaining before it expires: {days_left} {day_word}.\n\n"
        "If you need to make a claim or arrange a repair, "
        "please do so before the expiry date.\n\n"
        "Regards,\n"
        "Warranty Vault"
    )
    return subject, body


# ============================================================
# SEND
# ============================================================

def send_warranty_reminder(warranty, user, *, now=None, connection=None):
    """
    Send a reminder for `warranty` to its owner `user`.

    - user missing / no delivery address -> SKIPPED, nothing touched
    - transport failure                  -> FAILED, last_notified_at untouched
    - success                            -> SENT, last_notified_at = now

    PersistenceError from the final update is left to the caller.
    """
    recipient = getattr(user, "delivery_email", "") if user else ""

    if not recipient:
        logger.warning(
            "Skipping reminder for warranty %s (%s): owner or notification email missing.",
            warranty.pk, warranty.product_name,
        )
        return DispatchResult(
            status=DispatchStatus.SKIPPED,
            warranty_id=warranty.pk,
            reason="no delivery address",
        )

    now = now or timezone.now()
    today = timezone.localdate(now, timezone=reminder_timezone())
    subject, body = build_reminder_email(warranty, user, today)
    message_id = make_msgid(domain=reminder_setting("MESSAGE_ID_DOMAIN"))

    message = EmailMessage(
        subject=subject,
        body=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
        headers={"Message-ID": message_id},
        connection=connection,
    )

    try:
        message.send(fail_silently=False)
    # malformed stored addresses surface as ValueError / UnicodeError
    except (BadHeaderError, ValueError, smtplib.SMTPException, OSError) as exc:
        logger.error(
            "Failed to send reminder for warranty %s to %s: %s",
            warranty.pk, recipient, exc,
        )
        error = DeliveryError(
            f"Could not deliver reminder for {warranty.product_name} to {recipient}",
            recipient=recipient,
        )
        error.__cause__ = exc
        return DispatchResult(
            status=DispatchStatus.FAILED,
            warranty_id=warranty.pk,
            recipient=recipient,
            reason=str(exc),
            error=error,
        )

    logger.info(
        "Reminder sent for %s to %s: %s",
        warranty.product_name, recipient, message_id,
    )

    warranty.mark_notified(now)

    return DispatchResult(
        status=DispatchStatus.SENT,
        warranty_id=warranty.pk,
        recipient=recipient,
        message_id=message_id,
    )

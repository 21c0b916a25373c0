import uuid

from django.conf import settings
from django.db import DatabaseError, models
from django.utils import timezone

from .exceptions import PersistenceError


class WarrantyQuerySet(models.QuerySet):

    # =====================================================
    # OWNER-SCOPED ACCESS
    # =====================================================
    def for_owner(self, owner):
        return self.filter(owner=owner).order_by("expiry_date")

    def get_for_owner(self, pk, owner, /):
        """
        Fetch one warranty by id, scoped to its owner.
        Raises Warranty.DoesNotExist for another user's record.
        """
        return self.get(pk=pk, owner=owner)

    def update_for_owner(self, pk, owner, /, **fields):
        """
        Apply field changes to one of the owner's warranties.
        Ownership is immutable, so owner keys are dropped.
        """
        fields.pop("owner", None)
        fields.pop("owner_id", None)

        warranty = self.get_for_owner(pk, owner)
        for name, value in fields.items():
            setattr(warranty, name, value)

        warranty.full_clean()
        warranty.save()
        return warranty

    def delete_for_owner(self, pk, owner, /):
        deleted, _ = self.filter(pk=pk, owner=owner).delete()
        return deleted > 0

    # =====================================================
    # REMINDER SCAN
    # =====================================================
    def due_for_reminder(self, target_dates, not_before):
        """
        Warranties expiring on one of `target_dates` that were never
        notified, or last notified strictly before `not_before`.
        """
        never_or_stale = (
            models.Q(last_notified_at__isnull=True)
            | models.Q(last_notified_at__lt=not_before)
        )
        return (
            self.filter(expiry_date__in=list(target_dates))
            .filter(never_or_stale)
            .order_by("expiry_date", "created_at")
        )


class Warranty(models.Model):
    """
    A tracked product purchase, owned by exactly one user.
    """

    class ReminderPreference(models.TextChoices):
        ONE_DAY = "1d", "1 day before"
        ONE_WEEK = "7d", "1 week before"
        ONE_MONTH = "30d", "1 month before"
        NONE = "none", "No reminder"

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="warranties",
        db_index=True,
    )

    # =====================================================
    # PRODUCT
    # =====================================================
    product_name = models.CharField(max_length=200)
    brand = models.CharField(max_length=120, blank=True)
    category = models.CharField(max_length=120, blank=True)
    retailer = models.CharField(max_length=120, blank=True)
    serial_number = models.CharField(max_length=120, blank=True)
    notes = models.TextField(blank=True)
    image = models.TextField(
        blank=True,
        help_text="Image URL or data URI",
    )

    # =====================================================
    # DATES
    # =====================================================
    purchase_date = models.DateField()
    expiry_date = models.DateField(db_index=True)

    # =====================================================
    # REMINDERS
    # =====================================================
    reminder_preference = models.CharField(
        max_length=10,
        choices=ReminderPreference.choices,
        default=ReminderPreference.ONE_WEEK,
    )

    last_notified_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the last expiry reminder was sent",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = WarrantyQuerySet.as_manager()

    class Meta:
        ordering = ["expiry_date"]
        indexes = [
            models.Index(fields=["owner", "expiry_date"], name="warranty_owner_expiry_idx"),
            models.Index(fields=["expiry_date", "last_notified_at"], name="warranty_due_idx"),
        ]

    def __str__(self):
        return f"{self.product_name} (expires {self.expiry_date:%Y-%m-%d})"

    # =====================================================
    # INSTANCE HELPERS
    # =====================================================
    def days_until_expiry(self, today=None):
        today = today or timezone.localdate()
        return (self.expiry_date - today).days

    def is_expired(self, today=None):
        return self.days_until_expiry(today) < 0

    def mark_notified(self, when=None):
        """Record a sent reminder. Only last_notified_at is written."""
        self.last_notified_at = when or timezone.now()
        try:
            self.save(update_fields=["last_notified_at", "updated_at"])
        except DatabaseError as exc:
            raise PersistenceError(
                f"Could not record notification for warranty {self.pk}"
            ) from exc

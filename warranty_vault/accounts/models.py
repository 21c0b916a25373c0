from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    notification_email = models.EmailField(
        blank=True,
        help_text="Where warranty reminders are delivered (defaults to the login email)",
    )

    def __str__(self):
        full = self.get_full_name()
        return f"{full} ({self.username})" if full else self.username

    @property
    def display_name(self):
        return self.get_full_name() or self.username

    @property
    def delivery_email(self):
        """Address reminders go to; falls back to the login email."""
        return self.notification_email or self.email

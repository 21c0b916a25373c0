class ReminderRunError(Exception):
    """Base class for reminder pipeline errors."""


class DeliveryError(ReminderRunError):
    """The mail transport rejected or failed to send one reminder."""

    def __init__(self, message, *, recipient=None):
        super().__init__(message)
        self.recipient = recipient

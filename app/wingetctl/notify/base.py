"""Abstract base class for notifiers.

This module defines the Notifier interface the orchestrator hands
notification requests to. Rendering (toast, RMM alert, console) is the
notifier's concern.
"""

from abc import ABC, abstractmethod

from wingetctl.models.notification import Notification


class Notifier(ABC):
    """Abstract base class for all notifiers.

    Example:
        >>> notifier = ConsoleNotifier()
        >>> notifier.notify(
        ...     Notification(
        ...         title="Firefox updated",
        ...         body="Mozilla.Firefox is now at 131.0",
        ...         severity=NotificationSeverity.SUCCESS,
        ...         app_name="Mozilla Firefox",
        ...     )
        ... )
    """

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver a notification.

        Implementations must not raise for delivery problems; a failed
        notification never fails the operation it describes.

        Args:
            notification: The notification request.
        """


class NullNotifier(Notifier):
    """Notifier that discards everything."""

    def notify(self, notification: Notification) -> None:
        """Discard the notification."""


class RecordingNotifier(Notifier):
    """Notifier that keeps every notification in memory.

    The CLI uses it in --json mode, where notifications are reported in
    the output document instead of printed.

    Attributes:
        notifications: Notifications received, in order.
    """

    def __init__(self) -> None:
        """Initialize with an empty record."""
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        """Store the notification."""
        self.notifications.append(notification)

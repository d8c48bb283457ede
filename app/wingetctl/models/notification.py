"""Notification request model.

Notifications are produced by the orchestrator on significant state
transitions and handed to a Notifier; rendering them (toasts, RMM
alerts) happens outside this package.
"""

from dataclasses import dataclass
from enum import Enum


class NotificationSeverity(str, Enum):
    """Severity of a notification, used for styling and filtering."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class NotificationButton:
    """Optional action button attached to a notification.

    Attributes:
        label: Button caption.
        url: Target opened when the button is clicked.
    """

    label: str
    url: str


@dataclass(frozen=True, slots=True)
class Notification:
    """A request to notify the user about an operation.

    Attributes:
        title: Short headline.
        body: Message text.
        severity: How the notification should be styled.
        app_name: Application the notification is about.
        button: Optional action button (e.g., release notes link).
    """

    title: str
    body: str
    severity: NotificationSeverity
    app_name: str
    button: NotificationButton | None = None

    def __post_init__(self) -> None:
        """Validate notification data after initialization."""
        if not self.title:
            msg = "Notification title cannot be empty"
            raise ValueError(msg)

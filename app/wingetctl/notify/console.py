"""Console notifier.

Writes notifications to the log and, colour-tagged by severity, to the
rich console.
"""

import logging

from rich.console import Console

from wingetctl.models.notification import Notification, NotificationSeverity
from wingetctl.notify.base import Notifier

logger = logging.getLogger(__name__)

_SEVERITY_STYLES: dict[NotificationSeverity, str] = {
    NotificationSeverity.INFO: "info",
    NotificationSeverity.SUCCESS: "success",
    NotificationSeverity.WARNING: "warning",
    NotificationSeverity.ERROR: "error",
}

_SEVERITY_LEVELS: dict[NotificationSeverity, int] = {
    NotificationSeverity.INFO: logging.INFO,
    NotificationSeverity.SUCCESS: logging.INFO,
    NotificationSeverity.WARNING: logging.WARNING,
    NotificationSeverity.ERROR: logging.ERROR,
}


class ConsoleNotifier(Notifier):
    """Renders notifications on a rich console.

    Attributes:
        console: Target console. Defaults to the shared stdout console.
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the notifier.

        Args:
            console: Console to print to. If None, the shared console is used.
        """
        if console is None:
            from wingetctl.utils.formatting import console as shared_console

            console = shared_console
        self._console = console

    def notify(self, notification: Notification) -> None:
        """Log the notification and print it."""
        logger.log(
            _SEVERITY_LEVELS[notification.severity],
            "[%s] %s: %s",
            notification.app_name,
            notification.title,
            notification.body,
        )

        style = _SEVERITY_STYLES[notification.severity]
        self._console.print(f"[{style}]{notification.title}[/] [muted]{notification.body}[/]")
        if notification.button is not None:
            self._console.print(
                f"  [muted]{notification.button.label}:[/] [info]{notification.button.url}[/]"
            )

"""Notifiers for operation outcomes.

This module exports the Notifier interface and its implementations.
"""

from wingetctl.notify.base import Notifier, NullNotifier, RecordingNotifier
from wingetctl.notify.console import ConsoleNotifier

__all__ = [
    "ConsoleNotifier",
    "Notifier",
    "NullNotifier",
    "RecordingNotifier",
]

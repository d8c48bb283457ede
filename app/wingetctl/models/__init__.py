"""Data models for wingetctl.

This module exports the core data structures used throughout the application.
"""

from wingetctl.models.notification import (
    Notification,
    NotificationButton,
    NotificationSeverity,
)
from wingetctl.models.operation import (
    OperationOutcome,
    OperationType,
    OutcomeStatus,
    RunSummary,
)
from wingetctl.models.package import PackageRecord

__all__ = [
    "Notification",
    "NotificationButton",
    "NotificationSeverity",
    "OperationOutcome",
    "OperationType",
    "OutcomeStatus",
    "PackageRecord",
    "RunSummary",
]

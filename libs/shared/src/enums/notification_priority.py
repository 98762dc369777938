"""Notification Priority"""

from enum import Enum


class NotificationPriority(Enum):
    """Priority of a rating notification"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

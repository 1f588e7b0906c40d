"""Controlled enumerations for the case-alerts domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are not acceptable for classification fields.
"""

from __future__ import annotations

from enum import Enum


class NotificationKind(str, Enum):
    """What a notification is about."""

    PAYMENT_REMINDER = "payment_reminder"
    SILENCE_EXPIRING = "silence_expiring"
    SILENCE_EXPIRED = "silence_expired"
    DOCUMENTS_PENDING = "documents_pending"
    STANDALONE_REMINDER = "standalone_reminder"


class Priority(str, Enum):
    """Urgency of a notification."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, most urgent first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class SubjectType(str, Enum):
    """Which kind of record a notification points at."""

    CLIENT = "client"
    REMINDER = "reminder"

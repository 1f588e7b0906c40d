"""DeadlineEngine — deterministic deadline and reminder evaluation.

Design principles:
    1. Pure function: accepts "now" and a snapshot, returns notification events.
    2. No side effects, no state mutation, no I/O.
    3. A single "now" is fixed per evaluation and shared by every rule.
    4. All thresholds are explicit and configurable.
    5. One bad record never hides the others: a failing client or
       reminder is logged and skipped.

Rules, evaluated independently per client (a client may raise several):

    payment_reminder   custom reminder date set, fee outstanding,
                       0 <= days until date <= window (2)
    silence_expired    submitted, application date + silence days has passed
    silence_expiring   submitted, silence ends within warning window (7)
    documents_pending  not submitted, required documents outstanding,
                       last activity + interval is at most lead days (2) away

and per standalone reminder:

    standalone_reminder  due within the gate (3 days, full timestamp
                         precision) and no more than the horizon (7 days)
                         overdue

Client rules compare calendar dates (both sides at midnight in the office
time zone).  Standalone reminders compare raw timestamps and round the
difference up to whole days.

Output order: clients in input order (payment, silence, documents for
each), then standalone reminders in input order.  Callers that want
urgency order use ``sort_by_priority``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Union

from case_alerts.core import messages
from case_alerts.domain.client import ClientSnapshot
from case_alerts.domain.enums import NotificationKind, Priority
from case_alerts.domain.notification import (
    ClientNotification,
    DismissalKey,
    ReminderNotification,
)
from case_alerts.domain.reminder import StandaloneReminder
from case_alerts.foundation.calendar import (
    calendar_date,
    ceil_days,
    days_between,
    localize,
    shift_days,
)

logger = logging.getLogger(__name__)

Notification = Union[ClientNotification, ReminderNotification]

# Errors that mean "this record cannot be evaluated", e.g. a date pushed
# past datetime.max or an unvalidated record with a string where a date
# belongs.
_RECORD_ERRORS = (ArithmeticError, AttributeError, TypeError, ValueError)


@dataclass(frozen=True)
class PaymentPolicy:
    """When to surface a payment follow-up ahead of the custom reminder date."""

    window_days: int = 2


@dataclass(frozen=True)
class SilencePolicy:
    """Administrative-silence thresholds."""

    default_days: int = 60
    warning_days: int = 7
    urgent_days: int = 3


@dataclass(frozen=True)
class DocumentPolicy:
    """Pending-document nudges."""

    default_interval_days: int = 10
    lead_days: int = 2
    overdue_medium_days: int = 3
    overdue_high_days: int = 7


@dataclass(frozen=True)
class StandalonePolicy:
    """Standalone-reminder visibility and escalation."""

    gate_days: int = 3
    horizon_days: int = 7
    overdue_medium_days: int = 3
    overdue_high_days: int = 7


def _overdue_priority(days: int, medium_after: int, high_after: int) -> Priority:
    if days <= -high_after:
        return Priority.HIGH
    if days <= -medium_after:
        return Priority.MEDIUM
    return Priority.LOW


class DeadlineEngine:
    """Deterministic evaluation of client deadlines and reminders.

    This engine is stateless: it accepts a snapshot and produces a list of
    notification events.  It never mutates the snapshot.
    """

    def __init__(
        self,
        payment: PaymentPolicy | None = None,
        silence: SilencePolicy | None = None,
        documents: DocumentPolicy | None = None,
        standalone: StandalonePolicy | None = None,
        calendar_tz: tzinfo = timezone.utc,
    ) -> None:
        self._payment = payment or PaymentPolicy()
        self._silence = silence or SilencePolicy()
        self._documents = documents or DocumentPolicy()
        self._standalone = standalone or StandalonePolicy()
        self._tz = calendar_tz

    # ── Public API ───────────────────────────────────────────────────────

    def evaluate(
        self,
        now: datetime,
        clients: Iterable[ClientSnapshot],
        reminders: Iterable[StandaloneReminder] = (),
        dismissed: Optional[Iterable[DismissalKey]] = None,
    ) -> list[Notification]:
        """Return every notification that is currently relevant.

        Args:
            now: The evaluation instant.  Naive values are read in the
                office time zone.
            clients: Client snapshots.
            reminders: Standalone reminder snapshots.
            dismissed: Optional caller-owned ``(subject_id, kind)`` pairs
                to leave out of the result.
        """
        now = localize(now, self._tz)
        today = now.date()
        events: list[Notification] = []

        for client in clients:
            try:
                events.extend(self.evaluate_client(client, today))
            except _RECORD_ERRORS as exc:
                logger.warning(
                    "Skipping client %s: %s", getattr(client, "id", "?"), exc
                )

        for reminder in reminders:
            try:
                event = self.evaluate_reminder(reminder, now)
            except _RECORD_ERRORS as exc:
                logger.warning(
                    "Skipping reminder %s: %s", getattr(reminder, "id", "?"), exc
                )
                continue
            if event is not None:
                events.append(event)

        if dismissed is not None:
            hidden = set(dismissed)
            events = [e for e in events if e.key not in hidden]

        logger.debug("Evaluated snapshot at %s → %d notification(s)", now, len(events))
        return events

    def evaluate_client(self, client: ClientSnapshot, today: date) -> list[ClientNotification]:
        """All events for one client, in rule order."""
        candidates = (
            self._payment_reminder(client, today),
            self._administrative_silence(client, today),
            self._pending_documents(client, today),
        )
        return [e for e in candidates if e is not None]

    def evaluate_reminder(
        self, reminder: StandaloneReminder, now: datetime
    ) -> ReminderNotification | None:
        """The event for one standalone reminder, if it is within its window."""
        policy = self._standalone
        diff = localize(reminder.reminder_date, self._tz) - localize(now, self._tz)
        if diff > timedelta(days=policy.gate_days):
            return None

        days = ceil_days(diff)
        if abs(days) > policy.horizon_days:
            return None

        if diff < timedelta(0):
            priority = _overdue_priority(
                days, policy.overdue_medium_days, policy.overdue_high_days
            )
        elif days <= 1:
            priority = Priority.HIGH
        else:
            priority = Priority.MEDIUM

        return ReminderNotification(
            subject_id=reminder.subject_id,
            kind=NotificationKind.STANDALONE_REMINDER,
            message=messages.standalone_message(
                reminder.display_name, days, reminder.reminder_type
            ),
            priority=priority,
            days_remaining=days,
            reminder_id=reminder.id,
            client_name=reminder.display_name,
            phone=reminder.phone,
            notes=reminder.notes,
            reminder_type=reminder.reminder_type,
            reminder_date=reminder.reminder_date,
        )

    # ── Client rules ─────────────────────────────────────────────────────

    def _payment_reminder(
        self, client: ClientSnapshot, today: date
    ) -> ClientNotification | None:
        if client.custom_reminder_date is None:
            return None
        remaining = client.payment.remaining
        if remaining <= 0:
            return None

        days = days_between(today, calendar_date(client.custom_reminder_date, self._tz))
        # Overdue or still far off: nothing to nag about yet
        if not 0 <= days <= self._payment.window_days:
            return None

        if days == 0:
            priority = Priority.HIGH
        elif days == 1:
            priority = Priority.MEDIUM
        else:
            priority = Priority.LOW

        return self._client_event(
            client,
            NotificationKind.PAYMENT_REMINDER,
            messages.payment_message(client.display_name, remaining, days),
            priority,
            days,
        )

    def _administrative_silence(
        self, client: ClientSnapshot, today: date
    ) -> ClientNotification | None:
        if not client.submitted_to_immigration or client.application_date is None:
            return None

        policy = self._silence
        silence_days = client.administrative_silence_days or policy.default_days
        end = shift_days(calendar_date(client.application_date, self._tz), silence_days)
        days = days_between(today, end)

        if days < 0:
            return self._client_event(
                client,
                NotificationKind.SILENCE_EXPIRED,
                messages.silence_expired_message(client.display_name, abs(days)),
                Priority.HIGH,
                days,
            )
        if days <= policy.warning_days:
            return self._client_event(
                client,
                NotificationKind.SILENCE_EXPIRING,
                messages.silence_expiring_message(client.display_name, days),
                Priority.HIGH if days <= policy.urgent_days else Priority.MEDIUM,
                days,
            )
        return None

    def _pending_documents(
        self, client: ClientSnapshot, today: date
    ) -> ClientNotification | None:
        if client.submitted_to_immigration:
            return None
        pending = client.pending_documents
        if not pending:
            return None

        policy = self._documents
        submitted = client.submitted_documents
        uploads = [
            localize(d.uploaded_at, self._tz) for d in submitted if d.uploaded_at is not None
        ]
        baseline = max(uploads) if uploads else localize(client.created_at, self._tz)
        interval = client.reminder_interval_days or policy.default_interval_days
        days = days_between(today, shift_days(baseline.date(), interval))

        if days > policy.lead_days:
            return None

        if days < 0:
            priority = _overdue_priority(
                days, policy.overdue_medium_days, policy.overdue_high_days
            )
        elif days == 0:
            priority = Priority.MEDIUM
        else:
            priority = Priority.LOW

        return self._client_event(
            client,
            NotificationKind.DOCUMENTS_PENDING,
            messages.documents_message(
                client.display_name,
                len(pending),
                len(submitted),
                len(client.required_documents),
            ),
            priority,
            days,
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _client_event(
        client: ClientSnapshot,
        kind: NotificationKind,
        message: str,
        priority: Priority,
        days_remaining: int,
    ) -> ClientNotification:
        return ClientNotification(
            subject_id=client.id,
            kind=kind,
            message=message,
            priority=priority,
            days_remaining=days_remaining,
            client_id=client.id,
            client_name=client.display_name,
            case_type=client.case_type,
        )


# ── Module-level conveniences ────────────────────────────────────────────────

_default_engine = DeadlineEngine()


def evaluate(
    now: datetime,
    clients: Iterable[ClientSnapshot],
    reminders: Iterable[StandaloneReminder] = (),
    dismissed: Optional[Iterable[DismissalKey]] = None,
) -> list[Notification]:
    """Evaluate with the default thresholds in UTC."""
    return _default_engine.evaluate(now, clients, reminders, dismissed)


def sort_by_priority(events: Sequence[Notification]) -> list[Notification]:
    """Most urgent first; ties keep evaluation order."""
    return sorted(events, key=lambda e: e.priority.rank)


def popup_candidates(events: Sequence[Notification], limit: int = 3) -> list[Notification]:
    """The first *limit* high-priority events, for pop-up display."""
    return [e for e in events if e.priority is Priority.HIGH][:limit]

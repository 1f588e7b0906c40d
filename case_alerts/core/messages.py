"""Default English wording for notification events.

These are reference renderings.  The presentation layer is free to
localize from ``kind`` and ``days_remaining`` instead.
"""

from __future__ import annotations

from case_alerts.domain.enums import NotificationKind
from case_alerts.domain.notification import ClientNotification, ReminderNotification


def _days(n: int) -> str:
    return "1 day" if n == 1 else f"{n} days"


def payment_message(name: str, remaining: float, days_until: int) -> str:
    amount = f"{remaining:,.2f}"
    if days_until == 0:
        return f"Payment follow-up due today for {name} ({amount} outstanding)"
    if days_until == 1:
        return f"Payment follow-up due tomorrow for {name} ({amount} outstanding)"
    return f"Payment follow-up in {_days(days_until)} for {name} ({amount} outstanding)"


def silence_expired_message(name: str, days_elapsed: int) -> str:
    return f"Administrative silence period expired {_days(days_elapsed)} ago for {name}"


def silence_expiring_message(name: str, days_remaining: int) -> str:
    if days_remaining == 0:
        return f"Administrative silence period expires today for {name}"
    return f"Administrative silence period expiring in {_days(days_remaining)} for {name}"


def documents_message(name: str, pending: int, submitted: int, total: int) -> str:
    return (
        f"{pending} document(s) still pending for {name}. "
        f"Last activity: {submitted}/{total} documents submitted."
    )


def standalone_message(name: str, days_until: int, reminder_type: str | None = None) -> str:
    label = f"{reminder_type.title()} reminder" if reminder_type else "Reminder"
    if days_until < 0:
        return f"{label} for {name} overdue by {_days(-days_until)}"
    if days_until == 0:
        return f"{label} for {name} is due today"
    return f"{label} for {name} due in {_days(days_until)}"


def due_label(event: ClientNotification | ReminderNotification) -> str | None:
    """Secondary status line shown under a notification.

    Silence events talk about expiry; everything else about being due.
    """
    d = event.days_remaining
    if d is None:
        return None
    if event.kind in (NotificationKind.SILENCE_EXPIRED, NotificationKind.SILENCE_EXPIRING):
        if d < 0:
            return f"Expired {_days(-d)} ago"
        return f"{_days(d)} remaining"
    if d < 0:
        return f"Overdue by {_days(-d)}"
    if d == 0:
        return "Due today"
    return f"{_days(d)} until due"

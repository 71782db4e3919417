"""Leave notifications.

The lifecycle engine builds a :class:`LeaveNotification` for each transition
and publishes it to a :class:`NotificationSink` after its transaction commits.
:class:`NotificationDispatcher` is the production sink: it hands the message
to the email channel and logs, but never raises, when delivery fails.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Protocol

from leaveflow.core.config import settings
from leaveflow.core.exceptions import NotificationError
from leaveflow.models.employee import Employee
from leaveflow.models.leave_application import LeaveApplication
from leaveflow.services.channels.email import EmailService, email_service

logger = logging.getLogger(__name__)

SUBMITTED = "submitted"
APPROVED = "approved"
REJECTED = "rejected"

DEFAULT_REJECTION_REASON = "No reason provided"


@dataclass(frozen=True)
class LeaveNotification:
    kind: str  # submitted, approved, rejected
    application_id: int
    recipient_email: str
    subject: str
    body_text: str
    body_html: str


class NotificationSink(Protocol):
    async def publish(self, notification: LeaveNotification) -> bool:
        ...


def _detail_rows(application: LeaveApplication) -> list[tuple[str, str]]:
    return [
        ("Leave Type", application.leave_type),
        ("Start Date", application.start_date.isoformat()),
        ("End Date", application.end_date.isoformat()),
        ("Duration", f"{application.days_requested} day(s)"),
        ("Reason", application.reason or "-"),
    ]


def _render(heading: str, intro: str, rows: list[tuple[str, str]], footer: str) -> tuple[str, str]:
    text_lines = [heading, "", intro, ""]
    text_lines += [f"{label}: {value}" for label, value in rows]
    text_lines += ["", footer, settings.FRONTEND_URL]
    body_text = "\n".join(text_lines)

    table = "".join(
        f"<tr><td><strong>{html.escape(label)}:</strong></td>"
        f"<td>{html.escape(value)}</td></tr>"
        for label, value in rows
    )
    body_html = (
        f"<h2>{html.escape(heading)}</h2>"
        f"<p>{html.escape(intro)}</p>"
        f"<table>{table}</table>"
        f"<p>{html.escape(footer)}</p>"
        f'<p><a href="{html.escape(settings.FRONTEND_URL, quote=True)}">'
        f"{html.escape(settings.APP_NAME)}</a></p>"
    )
    return body_text, body_html


def submission_notice(
    application: LeaveApplication, employee: Employee, manager: Employee
) -> LeaveNotification:
    rows = [("Employee", employee.full_name), ("Email", employee.email)]
    rows += _detail_rows(application)
    body_text, body_html = _render(
        "New Leave Request",
        f"{employee.full_name} has submitted a leave request that requires your approval.",
        rows,
        "Please log in to the leave management system to approve or reject this request.",
    )
    return LeaveNotification(
        kind=SUBMITTED,
        application_id=application.id,
        recipient_email=manager.email,
        subject=f"New Leave Request from {employee.full_name}",
        body_text=body_text,
        body_html=body_html,
    )


def approval_notice(
    application: LeaveApplication, employee: Employee, approver: Employee
) -> LeaveNotification:
    body_text, body_html = _render(
        "Leave Request Approved",
        f"Good news! Your leave request has been approved by {approver.full_name}.",
        _detail_rows(application),
        "You can view the details in your leave management dashboard.",
    )
    return LeaveNotification(
        kind=APPROVED,
        application_id=application.id,
        recipient_email=employee.email,
        subject="Leave Request Approved",
        body_text=body_text,
        body_html=body_html,
    )


def rejection_notice(
    application: LeaveApplication, employee: Employee, approver: Employee
) -> LeaveNotification:
    rows = _detail_rows(application)
    rows.append(("Rejection Reason", application.rejection_reason or DEFAULT_REJECTION_REASON))
    body_text, body_html = _render(
        "Leave Request Not Approved",
        f"Your leave request has been reviewed by {approver.full_name}.",
        rows,
        "If you have any questions, please contact your manager directly.",
    )
    return LeaveNotification(
        kind=REJECTED,
        application_id=application.id,
        recipient_email=employee.email,
        subject="Leave Request Rejected",
        body_text=body_text,
        body_html=body_html,
    )


class NotificationDispatcher:
    """Best-effort, at-most-once delivery over the email channel."""

    def __init__(self, email: EmailService = email_service):
        self.email = email

    async def publish(self, notification: LeaveNotification) -> bool:
        try:
            await self._deliver(notification)
        except NotificationError as e:
            logger.warning(
                "Notification '%s' for application %s not delivered: %s",
                notification.kind,
                notification.application_id,
                e.message,
            )
            return False
        except Exception:
            logger.exception(
                "Unexpected error delivering '%s' notification for application %s",
                notification.kind,
                notification.application_id,
            )
            return False

        logger.info(
            "Notification '%s' for application %s sent to %s",
            notification.kind,
            notification.application_id,
            notification.recipient_email,
        )
        return True

    async def _deliver(self, notification: LeaveNotification) -> None:
        sent = await self.email.send_email(
            to=notification.recipient_email,
            subject=notification.subject,
            body_text=notification.body_text,
            body_html=notification.body_html,
        )
        if not sent:
            raise NotificationError(
                f"email to {notification.recipient_email} was not accepted",
                details={"kind": notification.kind},
            )


# Module-level singleton
notification_dispatcher = NotificationDispatcher()

# techserve/services/notifier.py
import logging
from typing import Optional

import asyncpg

from ..config import settings
from ..queries import notification_queries

logger = logging.getLogger(__name__)


class EmailSender:
    """
    Outgoing mail. Delivery is not wired to a provider; messages are logged
    so the links can be picked up from the server log in development.
    """

    def send(self, recipient: str, subject: str, body: str) -> None:
        logger.info(f"E-mail to {recipient}: {subject}\n{body}")

    def send_verification(self, recipient: str, username: str, token: str, path: str) -> None:
        link = f"{settings.base_url.rstrip('/')}{path}?token={token}"
        self.send(
            recipient,
            "Verify Your Email",
            f"Hi {username}, please verify your email address: {link}"
        )

    def send_password_reset(self, recipient: str, token: str) -> None:
        link = f"{settings.base_url.rstrip('/')}/reset-password?token={token}"
        self.send(
            recipient,
            "Password Reset Request",
            f"You requested a password reset. Use this link within "
            f"{settings.reset_token_expire_minutes} minutes: {link}"
        )


email_sender = EmailSender()


class PushSender:
    """Device push. Like mail, only logged until a provider is configured."""

    def send(self, token: str, title: str, body: str, data: Optional[dict] = None) -> dict:
        logger.info(f"Push to device {token}: {title} - {body}")
        return {"success": True, "token": token, "title": title, "body": body, "data": data or {}}


push_sender = PushSender()


async def notify_admins_for_review(conn: asyncpg.Connection, technician_id: str, username: str) -> None:
    """Fire-and-forget: a failure is logged and the KYC update still stands."""
    try:
        written = await notification_queries.notify_all_admins(conn, f"Technician {username} needs KYC review")
        logger.info(f"Admin review requested for technician {technician_id} ({written} admins notified)")
    except asyncpg.PostgresError as e:
        logger.error(f"Could not notify admins about technician {technician_id}: {str(e)}")


async def notify_technician_of_decision(
    conn: asyncpg.Connection,
    technician_id: str,
    decision: str,
    notes: Optional[str] = None
) -> None:
    message = f"Your verification has been {decision}d"
    if notes:
        message += f": {notes}"
    try:
        await notification_queries.create_notification(conn, technician_id, message)
        logger.info(f"Technician {technician_id} has been {decision}d")
    except asyncpg.PostgresError as e:
        logger.error(f"Could not notify technician {technician_id}: {str(e)}")

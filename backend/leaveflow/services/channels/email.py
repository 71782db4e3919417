"""Email channel: SendGrid and SMTP.

Outbound only. SendGrid is used when an API key is configured, SMTP when an
SMTP user is configured; otherwise the message is logged and reported as not
sent.
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import httpx

from leaveflow.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Send emails via SendGrid or SMTP."""

    SENDGRID_API_BASE = "https://api.sendgrid.com/v3"

    @property
    def provider(self) -> Optional[str]:
        if settings.SENDGRID_API_KEY:
            return "sendgrid"
        if settings.SMTP_USER:
            return "smtp"
        return None

    async def send_email(
        self,
        to: str,
        subject: str,
        body_text: str,
        body_html: Optional[str] = None,
    ) -> bool:
        """Send an email. Prefers SendGrid if configured, falls back to SMTP."""
        if settings.SENDGRID_API_KEY:
            return await self._send_via_sendgrid(to, subject, body_text, body_html)
        if settings.SMTP_USER:
            return await asyncio.to_thread(
                self._send_via_smtp, to, subject, body_text, body_html
            )

        logger.warning(
            "Email not configured, would send '%s' to %s", subject, to
        )
        return False

    async def _send_via_sendgrid(
        self,
        to: str,
        subject: str,
        body_text: str,
        body_html: Optional[str] = None,
    ) -> bool:
        """Send email via SendGrid v3 API."""
        url = f"{self.SENDGRID_API_BASE}/mail/send"
        content = [{"type": "text/plain", "value": body_text}]
        if body_html:
            content.append({"type": "text/html", "value": body_html})

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": settings.SENDER_EMAIL},
            "subject": subject,
            "content": content,
        }

        async with httpx.AsyncClient() as client:
            try:
                resp = await client.post(
                    url,
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {settings.SENDGRID_API_KEY}",
                        "Content-Type": "application/json",
                    },
                    timeout=30.0,
                )
                resp.raise_for_status()
                logger.info("Email sent via SendGrid to %s", to)
                return True
            except httpx.HTTPStatusError as e:
                logger.error(
                    "SendGrid error: %s %s", e.response.status_code, e.response.text
                )
                return False
            except httpx.HTTPError as e:
                logger.error("Failed to reach SendGrid for %s: %s", to, e)
                return False

    def _send_via_smtp(
        self,
        to: str,
        subject: str,
        body_text: str,
        body_html: Optional[str] = None,
    ) -> bool:
        """Send email via SMTP (blocking, run in a worker thread)."""
        msg = MIMEMultipart("alternative")
        msg["From"] = settings.SENDER_EMAIL
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(body_text, "plain"))
        if body_html:
            msg.attach(MIMEText(body_html, "html"))

        try:
            server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT)
            try:
                if settings.SMTP_USE_TLS:
                    server.starttls()
                if settings.SMTP_USER and settings.SMTP_PASSWORD:
                    server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.sendmail(settings.SENDER_EMAIL, to, msg.as_string())
            finally:
                server.quit()
            logger.info("Email sent via SMTP to %s", to)
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email via SMTP to %s: %s", to, e)
            return False


# Module-level singleton
email_service = EmailService()

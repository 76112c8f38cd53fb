"""Email dispatcher for activation and password reset links."""

import asyncio
import logging
import secrets
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from src.core.config import Settings
from src.domain.errors import MailDeliveryError

logger = logging.getLogger(__name__)

# Joins a reset token and its account id inside one query parameter
TOKEN_DELIMITER = "_._"


def generate_token() -> str:
    """Generate a secure URL-safe token.

    Returns:
        URL-safe token string (32 bytes = ~43 chars)
    """
    return secrets.token_urlsafe(32)


class MailDispatcher:
    """Sends a one-link mail and returns the token embedded in the link.

    The link is ``{link_base}={token}``, or ``{link_base}={token}_._{extra}``
    when extra is given. Only the token part is returned.
    """

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_user: str = "",
        smtp_password: str = "",
        email_from: str = "noreply@shorturl.local",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.email_from = email_from

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailDispatcher":
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            email_from=settings.email_from,
        )

    async def send_and_generate(
        self,
        message: str,
        recipient: str,
        link_base: str,
        extra: str | None = None,
    ) -> str:
        """Generate a token, mail the link carrying it, return the token.

        Raises:
            MailDeliveryError: if the SMTP exchange fails
        """
        token = generate_token()
        value = token if extra is None else f"{token}{TOKEN_DELIMITER}{extra}"
        link = f"{link_base}={value}"

        # If SMTP not configured, just log (for development)
        if not self.smtp_user:
            logger.info("[DEV] Mail for %s: %s %s", recipient, message, link)
            return token

        msg = self._build_message(message, recipient, link)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send mail to %s: %s", recipient, e)
            raise MailDeliveryError() from e

        logger.info("Mail sent to %s", recipient)
        return token

    def _build_message(self, message: str, recipient: str, link: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = "Short URL - Account"
        msg["From"] = self.email_from
        msg["To"] = recipient

        text_body = f"""
{message}

{link}
"""

        html_body = f"""
<html>
<body>
<p>{message}</p>
<p><a href="{link}">{link}</a></p>
</body>
</html>
"""

        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
            server.starttls()
            server.login(self.smtp_user, self.smtp_password)
            server.send_message(msg)

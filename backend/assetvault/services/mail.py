"""
Outbound email over SMTP
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formatdate
from typing import Optional, Tuple

from assetvault.core.config import Settings
from assetvault.core.exceptions import DeliveryError

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "no-reply@asset-vault.local"


class MailService:
    """
    Sends plain-text mail through an SMTP relay

    Port 465 uses implicit TLS; other ports upgrade with STARTTLS when
    credentials are configured.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username or DEFAULT_SENDER
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailService":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            sender=settings.FROM_EMAIL,
        )

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg["Date"] = formatdate(localtime=True)
        msg.set_content(body)
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        ctx = ssl.create_default_context()
        if self.port == 465:
            with smtplib.SMTP_SSL(self.host, self.port, context=ctx, timeout=self.timeout) as s:
                if self.username:
                    s.login(self.username, self.password or "")
                s.send_message(msg)
            return

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as s:
            if self.username:
                s.ehlo()
                s.starttls(context=ctx)
                s.login(self.username, self.password or "")
            s.send_message(msg)

    def send_or_raise(self, to: str, subject: str, body: str) -> None:
        """
        Send one message

        Raises:
            DeliveryError: if the relay rejects the message or is unreachable
        """
        try:
            self._deliver(self._build_message(to, subject, body))
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"Failed to send mail to {to}: {e}") from e
        logger.info(f"Sent mail '{subject}' to {to}")

    def send(self, to: str, subject: str, body: str) -> bool:
        """
        Send one message

        Returns:
            True on success, False if delivery failed (the failure is logged)
        """
        try:
            self.send_or_raise(to, subject, body)
        except DeliveryError as e:
            logger.error(str(e))
            return False
        return True


def day_word(days: int) -> str:
    return "day" if days == 1 else "days"


def compose_expiration_email(
    name: str,
    asset_name: str,
    days_until_expiry: int,
    client_name: str,
    showroom_name: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Subject and body of an expiration reminder email

    Returns:
        (subject, body)
    """
    location = f' in showroom "{showroom_name}"' if showroom_name else ""

    if days_until_expiry == 0:
        subject = f'"{asset_name}" expires today'
        when = "is expiring today. Please take action to renew."
    else:
        subject = f'"{asset_name}" expires in {days_until_expiry} {day_word(days_until_expiry)}'
        when = (
            f"will expire in {days_until_expiry} {day_word(days_until_expiry)}. "
            "Please plan for renewal."
        )

    body = (
        f"Hi {name},\n\n"
        f'The asset "{asset_name}"{location} for {client_name} {when}\n\n'
        "You are receiving this email because expiration reminders are enabled for this asset."
    )
    return subject, body

"""Email notifier — delivers messages via async SMTP."""

from __future__ import annotations

import logging
from email.message import EmailMessage

import aiosmtplib

from catalog_otp.config import Settings, settings as default_settings
from catalog_otp.errors import DeliveryError
from catalog_otp.services.notifier import Notifier

logger = logging.getLogger(__name__)


class EmailNotifier(Notifier):
    """Sends transactional emails using the configured SMTP server."""

    def __init__(self, config: Settings | None = None) -> None:
        self._config = config or default_settings

    async def send(self, destination: str, subject: str, body: str) -> None:
        """Send a plain-text email to *destination*.

        Raises
        ------
        DeliveryError
            If the SMTP conversation fails for any reason.
        """
        cfg = self._config

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = cfg.email_from
        msg["To"] = destination
        msg.set_content(body)

        logger.info(
            "Sending email to %s via %s:%s", destination, cfg.smtp_host, cfg.smtp_port
        )

        try:
            await aiosmtplib.send(
                msg,
                hostname=cfg.smtp_host,
                port=cfg.smtp_port,
                username=cfg.smtp_username or None,
                password=cfg.smtp_password or None,
                start_tls=True,
                timeout=30,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", destination, exc)
            raise DeliveryError(f"Failed to send email: {exc}") from exc

        logger.info("Email sent to %s", destination)

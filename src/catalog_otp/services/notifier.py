"""Notifier — abstract interface for out-of-band code delivery."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Delivers a message to a destination (email address, phone, …).

    Implementations raise on failure; a normal return means the message
    was handed off for delivery.
    """

    @abstractmethod
    async def send(self, destination: str, subject: str, body: str) -> None:
        """Deliver *body* to *destination*.

        Parameters
        ----------
        destination:
            Where the message goes, e.g. the recipient's email address.
        subject:
            Short subject line.
        body:
            Plain-text message body.
        """


class LoggingNotifier(Notifier):
    """Development notifier — logs the message instead of sending it."""

    async def send(self, destination: str, subject: str, body: str) -> None:
        logger.info("📧 %s (would be sent to %s):\n%s", subject, destination, body)

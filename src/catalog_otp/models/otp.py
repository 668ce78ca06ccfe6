"""OTP challenge record stored in the cache."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class OTPRecord:
    """One outstanding verification challenge for an identity key.

    Records are immutable; a failed attempt stores a new record with the
    incremented counter and the same ``expires_at``.
    """

    code: str
    expires_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def __repr__(self) -> str:
        # Never leak the code into logs or tracebacks
        return f"<OTPRecord attempts={self.attempts} expires_at={self.expires_at.isoformat()}>"

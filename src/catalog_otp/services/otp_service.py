"""OTP verifier — issues and checks short-lived numeric codes.

Each identity key (normally an email address) has at most one live
challenge in the cache.  A challenge ends when it is used successfully,
when it is found expired, or when the attempt budget runs out.
"""

from __future__ import annotations

import dataclasses
import hmac
import logging
import secrets
import string
from datetime import timedelta

from catalog_otp.cache.expiring_cache import Clock, ExpiringCache, utcnow
from catalog_otp.errors import ConfigurationError
from catalog_otp.models.otp import OTPRecord
from catalog_otp.services.notifier import Notifier

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "OTP_"
EMAIL_SUBJECT = "Your Verification Code"


class OTPVerifier:
    """Generate / validate protocol on top of an :class:`ExpiringCache`.

    Parameters
    ----------
    cache:
        Store for outstanding challenges.  May be shared with other
        verifiers and with unrelated cache users; keys are namespaced.
    notifier:
        Delivers the code to the identity out-of-band.
    code_length:
        Number of digits in a generated code.
    expiry:
        How long a code stays valid after generation.
    max_attempts:
        Number of failed comparisons tolerated.  The call that pushes the
        counter past this value invalidates the challenge.
    clock:
        Source of "now"; injectable for tests.

    The per-key lock is a ``threading.RLock``: a caller on the event loop may
    briefly block while a worker thread holds the same key, never across an
    ``await``.
    """

    def __init__(
        self,
        cache: ExpiringCache[OTPRecord],
        notifier: Notifier,
        code_length: int,
        expiry: timedelta,
        max_attempts: int,
        clock: Clock = utcnow,
    ) -> None:
        if isinstance(code_length, bool) or not isinstance(code_length, int) or code_length <= 0:
            raise ConfigurationError(f"code_length must be a positive integer, got {code_length!r}")
        if not isinstance(expiry, timedelta) or expiry <= timedelta(0):
            raise ConfigurationError(f"expiry must be a positive timedelta, got {expiry!r}")
        if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts <= 0:
            raise ConfigurationError(f"max_attempts must be a positive integer, got {max_attempts!r}")

        self._cache = cache
        self._notifier = notifier
        self._code_length = code_length
        self._expiry = expiry
        self._max_attempts = max_attempts
        self._clock = clock

    @property
    def cache(self) -> ExpiringCache[OTPRecord]:
        return self._cache

    async def generate(self, identity_key: str) -> str:
        """Create a new challenge for *identity_key* and deliver its code.

        Any previous challenge for the same key is replaced.  If delivery
        fails the error propagates, but the stored challenge stays live.
        """
        code = self._new_code()
        expires_at = self._clock() + self._expiry
        key = self._cache_key(identity_key)

        with self._cache.lock(key):
            self._cache.set(key, OTPRecord(code=code, expires_at=expires_at), expires_at)
        logger.info("OTP generated for %s (expires %s)", identity_key, expires_at.isoformat())

        await self._notifier.send(identity_key, EMAIL_SUBJECT, self._message_body(code))
        return code

    async def validate(self, identity_key: str, submitted_code: str) -> bool:
        """Return ``True`` if *submitted_code* is the live code for *identity_key*.

        Every call against a live challenge consumes one attempt, even one
        that then finds the challenge expired or over budget.
        """
        key = self._cache_key(identity_key)

        # Fetch-through-write must not interleave with other calls on this key
        with self._cache.lock(key):
            record = self._cache.get(key)
            if record is None:
                logger.warning("OTP not found or expired for %s", identity_key)
                return False

            record = dataclasses.replace(record, attempts=record.attempts + 1)

            if record.attempts > self._max_attempts:
                self._cache.remove(key)
                logger.warning("Maximum OTP attempts exceeded for %s", identity_key)
                return False

            if record.is_expired(self._clock()):
                self._cache.remove(key)
                logger.warning("OTP expired for %s", identity_key)
                return False

            if not hmac.compare_digest(record.code.encode(), submitted_code.encode()):
                self._cache.set(key, record, record.expires_at)
                logger.warning(
                    "Invalid OTP attempt %d/%d for %s",
                    record.attempts,
                    self._max_attempts,
                    identity_key,
                )
                return False

            self._cache.remove(key)

        logger.info("OTP verified for %s", identity_key)
        return True

    # ── Private helpers ──────────────────────────────────

    @staticmethod
    def _cache_key(identity_key: str) -> str:
        return f"{CACHE_KEY_PREFIX}{identity_key}"

    def _new_code(self) -> str:
        return "".join(secrets.choice(string.digits) for _ in range(self._code_length))

    def _message_body(self, code: str) -> str:
        minutes = int(self._expiry.total_seconds() // 60)
        lifetime = f"{minutes} minutes" if minutes else f"{int(self._expiry.total_seconds())} seconds"
        return (
            "Email Verification\n\n"
            f"Your verification code is: {code}\n\n"
            f"This code will expire in {lifetime}.\n"
            "If you didn't request this code, please ignore this email."
        )

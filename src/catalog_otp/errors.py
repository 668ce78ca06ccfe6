"""Exception hierarchy for the OTP subsystem.

Verification outcomes (wrong code, expired, too many attempts) are *not*
exceptions — they are reported as ``False`` by ``OTPVerifier.validate``.
"""


class OTPError(Exception):
    """Base class for all OTP subsystem errors."""


class ConfigurationError(OTPError, ValueError):
    """Raised at construction time when a setting is missing or non-positive."""


class DeliveryError(OTPError):
    """Raised when a notifier fails to deliver a code."""

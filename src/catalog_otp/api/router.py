"""OTP router — HTTP adapter over :class:`OTPVerifier`.

Endpoints
---------
POST /api/otp/generate   → issue a code and email it
POST /api/otp/verify     → check a submitted code
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from catalog_otp.api.responses import envelope
from catalog_otp.errors import DeliveryError
from catalog_otp.services.otp_service import OTPVerifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/otp", tags=["otp"])

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ── Request models ───────────────────────────────────────

class GenerateOTPRequest(BaseModel):
    email: str = Field(..., max_length=256, pattern=EMAIL_PATTERN)


class VerifyOTPRequest(BaseModel):
    email: str = Field(..., max_length=256, pattern=EMAIL_PATTERN)
    otp: str = Field(..., min_length=1, max_length=32)


def get_verifier(request: Request) -> OTPVerifier:
    """Resolve the verifier wired onto the application at startup."""
    return request.app.state.otp_verifier


# ── Endpoints ────────────────────────────────────────────

@router.post("/generate")
async def generate_otp(
    body: GenerateOTPRequest, verifier: OTPVerifier = Depends(get_verifier)
) -> JSONResponse:
    """Generate a code for the given email and send it."""
    try:
        await verifier.generate(body.email)
    except DeliveryError as exc:
        return envelope(500, f"Failed to send OTP: {exc}")
    return envelope(200, "OTP sent successfully")


@router.post("/verify")
async def verify_otp(
    body: VerifyOTPRequest, verifier: OTPVerifier = Depends(get_verifier)
) -> JSONResponse:
    """Validate a code for the given email."""
    is_valid = await verifier.validate(body.email, body.otp)
    if not is_valid:
        return envelope(400, "Invalid or expired OTP")
    return envelope(200, "OTP verified successfully")

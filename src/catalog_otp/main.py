"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError

from catalog_otp.api.responses import envelope
from catalog_otp.api.router import router as otp_router
from catalog_otp.cache.expiring_cache import ExpiringCache
from catalog_otp.config import Settings, settings
from catalog_otp.models.otp import OTPRecord
from catalog_otp.services.email_service import EmailNotifier
from catalog_otp.services.notifier import LoggingNotifier, Notifier
from catalog_otp.services.otp_service import OTPVerifier

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


def build_verifier(config: Settings) -> OTPVerifier:
    """Wire a cache, a notifier and a verifier from *config*."""
    notifier: Notifier
    if config.smtp_host:
        notifier = EmailNotifier(config)
    else:
        logger.warning("SMTP_HOST not set — OTP codes will be logged, not emailed")
        notifier = LoggingNotifier()

    return OTPVerifier(
        cache=ExpiringCache[OTPRecord](),
        notifier=notifier,
        code_length=config.otp_length,
        expiry=config.otp_expiry,
        max_attempts=config.otp_allowed_attempts,
    )


async def sweep_expired_entries(cache: ExpiringCache, interval: float) -> None:
    """Purge expired cache entries every *interval* seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        cache.purge_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    logger.info("Starting %s …", settings.app_name)
    sweeper = asyncio.create_task(
        sweep_expired_entries(
            app.state.otp_verifier.cache, settings.cache_sweep_interval_seconds
        )
    )
    yield
    logger.info("Shutting down %s …", settings.app_name)
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return envelope(400, "Invalid request data", jsonable_encoder(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("An unhandled exception occurred on %s", request.url.path)
    return envelope(500, "An internal server error occurred")


def create_app(verifier: OTPVerifier | None = None) -> FastAPI:
    """Build the application; a verifier is wired from settings unless given."""
    app = FastAPI(
        title=settings.app_name,
        description="One-time-code issuance and verification for the product catalog",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.otp_verifier = verifier if verifier is not None else build_verifier(settings)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(otp_router)

    @app.get("/health")
    async def health_check():
        """Simple liveness probe."""
        return {"status": "healthy", "app": settings.app_name}

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn (``catalog-otp`` console script)."""
    import uvicorn

    uvicorn.run(
        "catalog_otp.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()

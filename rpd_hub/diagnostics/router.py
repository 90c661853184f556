import asyncio
import logging
from typing import Protocol

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from rpd_hub.config.settings import Settings, get_settings
from rpd_hub.diagnostics import urls
from rpd_hub.email_service import NotificationSenderBase, get_notification_sender
from rpd_hub.events.dtos import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

PROBE_TIMEOUT_SECONDS = 5.0


# =============================================================================
# Relay probe
# =============================================================================


class RelayProbe(Protocol):
    """Checks whether the mail relay accepts TCP connections."""

    async def __call__(self, host: str, port: int) -> str: ...


class TcpRelayProbe:
    """Opens and closes a raw TCP connection to the relay, nothing more.

    A reachable relay that then rejects the login shows up as "reachable" here
    and as an authentication error from the test-email endpoint.
    """

    def __init__(self, timeout: float = PROBE_TIMEOUT_SECONDS):
        self._timeout = timeout

    async def __call__(self, host: str, port: int) -> str:
        if not host:
            return "not configured"

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            return f"unreachable: timed out after {self._timeout:g}s"
        except OSError as e:
            return f"unreachable: {e.strerror or e}"

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"Relay probe close failed: {e}")
        return "reachable"


def get_relay_probe() -> RelayProbe:
    """Factory for the relay probe. Override in tests."""
    return TcpRelayProbe()


# =============================================================================
# Schemas
# =============================================================================


class DebugResponse(BaseModel):
    environment: str
    smtp_host: str | None
    smtp_port: int
    smtp_user_set: bool
    smtp_from: str
    smtp_configured: bool
    smtp_port_status: str


class EmailCheckRequest(BaseModel):
    email: str | None = None


class EmailCheckResult(BaseModel):
    success: bool
    message_id: str | None = None
    error: str | None = None


class EmailCheckResponse(BaseModel):
    message: str


# =============================================================================
# Endpoints
# =============================================================================


@router.get(urls.DEBUG_URL, response_model=DebugResponse)
async def debug(
    config: Settings = Depends(get_settings),
    probe: RelayProbe = Depends(get_relay_probe),
) -> DebugResponse:
    """
    Report mail configuration (never the password) and whether the relay
    host/port accepts connections.
    """
    return DebugResponse(
        environment=config.ENVIRONMENT,
        smtp_host=config.smtp_host or None,
        smtp_port=config.smtp_port,
        smtp_user_set=bool(config.smtp_user),
        smtp_from=config.sender_address,
        smtp_configured=config.smtp_configured,
        smtp_port_status=await probe(config.smtp_host, config.smtp_port),
    )


@router.post(urls.DEBUG_TEST_EMAIL_URL, response_model=EmailCheckResult)
async def debug_test_email(
    request: EmailCheckRequest,
    sender: NotificationSenderBase = Depends(get_notification_sender),
) -> EmailCheckResult:
    """Send a test email and report the relay's answer verbatim."""
    if not request.email:
        raise ValidationError("email", "Email required")

    result = await sender.send_test_email(request.email)
    return EmailCheckResult(
        success=result.success,
        message_id=result.message_id,
        error=result.error,
    )


@router.post(urls.TEST_EMAIL_URL, response_model=EmailCheckResponse)
async def send_test_email(
    request: EmailCheckRequest,
    sender: NotificationSenderBase = Depends(get_notification_sender),
):
    """Send a test email; 500 with the relay error when it fails."""
    if not request.email:
        raise ValidationError("email", "Email required")

    result = await sender.send_test_email(request.email)
    if not result.success:
        return JSONResponse(status_code=500, content={"error": result.error})
    return EmailCheckResponse(message="Test email sent successfully!")

from fastapi import APIRouter
from pydantic import BaseModel

from rpd_hub import __version__

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = __version__


@router.get("/", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running.
    """
    return HealthCheckResponse(status="healthy")

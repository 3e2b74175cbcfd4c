import time
import logging
from fastapi import APIRouter, Depends

from results_portal.config.settings import Settings, get_settings
from results_portal.health.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["health"]
)

@router.get("/health", response_model=HealthResponse)
def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint to verify the API is running"""
    missing = settings.missing_sheets_settings()
    if missing:
        logger.warning(f"Health check: Google Sheets settings missing: {', '.join(missing)}")

    return HealthResponse(
        status='healthy',
        environment=settings.APP_ENV,
        timestamp=time.time(),
        sheets_configured=not missing,
    )

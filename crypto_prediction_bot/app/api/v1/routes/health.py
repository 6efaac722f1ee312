"""Health check routes"""
from fastapi import APIRouter
from fastapi.responses import Response
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from ..... import __version__
from ....core.config import settings
from ....core.logging_config import get_logger
from ....schemas.prediction import HealthResponse

if TYPE_CHECKING:
    from ....core.scheduler import PredictionScheduler

logger = get_logger(__name__)

SERVICE_NAME = "crypto-prediction-bot"

router = APIRouter()

# Set during bot startup
_scheduler: Optional["PredictionScheduler"] = None


def set_scheduler(scheduler: Optional["PredictionScheduler"]):
    """Set global scheduler instance reported by the health check"""
    global _scheduler
    _scheduler = scheduler


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Service status, including the daily trigger state

    Always answers 200; a failed last run only marks the service degraded.
    """
    scheduler_status = None
    overall_status = "healthy"

    if _scheduler is not None:
        try:
            scheduler_status = _scheduler.get_status()
            if scheduler_status.last_error:
                overall_status = "degraded"
        except Exception as e:
            logger.warning(f"Could not read scheduler status: {e}")
            overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        service=SERVICE_NAME,
        version=__version__,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc).isoformat(),
        scheduler=scheduler_status,
    )


@router.head("/health")
async def health_check_head():
    """Handle HEAD requests to health endpoint"""
    return Response(status_code=200)

"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.dependencies import get_user_repo
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health(request: Request, user_repo: UserRepository = Depends(get_user_repo)):
    """Health check endpoint with storage status."""
    storage = request.app.state.storage
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    if user_repo.ping():
        health_status["services"]["database"] = {
            "backend": storage.backend,
            "status": "healthy",
            "message": "Connection successful"
        }
        status_code = status.HTTP_200_OK
    else:
        health_status["services"]["database"] = {
            "backend": storage.backend,
            "status": "unhealthy",
            "message": "Connection failed"
        }
        health_status["status"] = "degraded"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check degraded", extra={"backend": storage.backend})

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )

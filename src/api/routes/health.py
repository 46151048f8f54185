"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from adapter.mongodb.connection import get_mongodb_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Health check endpoint with MongoDB status."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    if get_mongodb_client() is not None:
        health_status["services"]["mongodb"] = {
            "status": "healthy",
            "message": "Connection successful"
        }
        return health_status

    logger.warning("Health check failed: MongoDB unavailable")
    health_status["status"] = "unhealthy"
    health_status["services"]["mongodb"] = {
        "status": "unhealthy",
        "message": "Connection failed or not configured"
    }
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status)

"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from adapter.mongodb.connection import get_mongodb_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Report service status along with MongoDB reachability."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    try:
        mongo_client = get_mongodb_client()
        if mongo_client:
            mongo_client.admin.command('ping')
            mongodb = {"status": "healthy", "message": "Connection successful"}
        else:
            mongodb = {"status": "unhealthy", "message": "Connection failed or not configured"}
    except PyMongoError as e:
        mongodb = {"status": "unhealthy", "message": f"Connection error: {str(e)[:200]}"}

    health_status["services"]["mongodb"] = mongodb
    healthy = mongodb["status"] == "healthy"
    if not healthy:
        health_status["status"] = "degraded"
        logger.warning("Health check degraded", extra={"mongodb": mongodb["message"]})

    return JSONResponse(
        content=health_status,
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )

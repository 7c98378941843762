# app/api/v1/routes/system.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from datetime import datetime, timezone
import logging

from app.api.deps import get_settings, verify_backup_token
from app.core.database import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])

@router.get("/health")
async def health_check(request: Request):
    """Liveness check, including a round trip to the database."""
    settings = get_settings(request)
    database: Database = request.app.state.database
    try:
        await database.ping()
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Service unhealthy")

    return {
        "status": "ok",
        "message": f"{settings.APP_NAME} is running",
        "version": settings.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }

@router.post("/backup", dependencies=[Depends(verify_backup_token)])
async def create_backup(request: Request):
    """Snapshot the database into a timestamped copy next to it."""
    database: Database = request.app.state.database
    try:
        backup_path = await database.backup()
    except Exception as e:
        logger.error(f"Failed to create database backup: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create backup")

    return {
        "status": "success",
        "message": "Database backup created",
        "path": str(backup_path),
    }

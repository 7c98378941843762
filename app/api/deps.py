# app/api/deps.py
import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request, status

from app.core.config import Settings

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def verify_backup_token(
    request: Request,
    x_backup_token: Optional[str] = Header(default=None),
) -> None:
    """
    Guard for the backup endpoint.

    A configured BACKUP_TOKEN must be presented in the x-backup-token header.
    Without one the endpoint stays open in development and is refused in production.
    """
    settings = get_settings(request)
    expected = settings.BACKUP_TOKEN

    if expected:
        if not x_backup_token or not secrets.compare_digest(x_backup_token, expected):
            client = request.client.host if request.client else "unknown"
            logger.warning(f"Unauthorized backup attempt from {client}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
        return

    if settings.is_production:
        logger.error("Backup endpoint misconfigured: BACKUP_TOKEN is required in production")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Backup endpoint is not configured",
        )

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_active_user
from app.api.profile.models import User
from app.core.config import settings
from app.database.database import get_db
from app.websocket.websocket_manager import get_connection_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(db: Session = Depends(get_db)):
    """Service and database liveness."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected", "version": settings.APP_VERSION}
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e)
        }


@router.get("/websocket/stats")
async def websocket_stats(current_user: User = Depends(get_current_active_user)):
    return get_connection_stats()

from fastapi import APIRouter, Depends
import logging
from app.api.deps import get_store
from app.store.base import DocumentStore, StoreError

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/health")
async def health_check(store: DocumentStore = Depends(get_store)):
    """Health check endpoint"""
    try:
        await store.ping()

        return {
            "status": "healthy",
            "store": type(store).__name__,
            "service": "event-admin"
        }
    except StoreError as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "error": "Document store unavailable"
        }

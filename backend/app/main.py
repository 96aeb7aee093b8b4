from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

# Import routers
from app.api.routes import auth, customers, event_locations, health, scans, survey_responses
from app.core.config import settings
from app.core.logging import setup_logging
from app.store.base import DocumentStore, StoreError
from app.store.memory import MemoryDocumentStore

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def build_store() -> DocumentStore:
    """Pick the document store backend from settings"""
    if settings.STORE_BACKEND == "memory":
        logger.warning("⚠️ Using in-memory document store; data is lost on restart")
        return MemoryDocumentStore()

    from app.db.session import engine
    from app.store.sql import SQLDocumentStore
    return SQLDocumentStore(engine)


def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    store = store or build_store()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan events for startup and shutdown"""
        # Startup
        logger.info(f"🚀 Starting {settings.PROJECT_NAME} ({type(store).__name__})...")

        create_schema = getattr(store, "create_schema", None)
        if create_schema is not None:
            logger.info("📦 Creating database tables...")
            create_schema()

        # Test store connection
        try:
            await store.ping()
            logger.info("✅ Document store connection successful")
        except StoreError as e:
            logger.error(f"❌ Document store connection failed: {e}")
            raise

        yield

        # Shutdown
        logger.info("👋 Shutting down...")
        store.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Event administration: customers, event locations, survey responses, check-in and gift redemption",
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.store = store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.DEBUG else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"❌ Store error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Document store unavailable. Please try again."},
        )

    # Include routers
    prefix = settings.API_PREFIX
    app.include_router(health.router, prefix=prefix, tags=["Health"])
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Auth"])
    app.include_router(scans.check_in_router, prefix=f"{prefix}/check-in", tags=["Check-in"])
    app.include_router(scans.gift_redemption_router, prefix=f"{prefix}/gift-redemption", tags=["Gift Redemption"])
    app.include_router(customers.router, prefix=f"{prefix}/customers", tags=["Customers"])
    app.include_router(event_locations.router, prefix=f"{prefix}/event-locations", tags=["Event Locations"])
    app.include_router(survey_responses.router, prefix=f"{prefix}/survey-responses", tags=["Survey Responses"])

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "operational",
            "docs": "/docs",
            "endpoints": {
                "health": f"{prefix}/health",
                "login": f"{prefix}/auth/login",
                "check_in_scan": f"{prefix}/check-in/scan",
                "gift_redemption_scan": f"{prefix}/gift-redemption/scan",
                "customers": f"{prefix}/customers",
                "event_locations": f"{prefix}/event-locations",
                "survey_responses": f"{prefix}/survey-responses"
            }
        }

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)

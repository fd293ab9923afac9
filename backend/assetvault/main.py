"""
FastAPI main application module for Asset Vault
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from typing import Optional
import time
import logging

from assetvault import __version__
from assetvault.core.config import settings
from assetvault.core.database import SessionLocal, create_tables
from assetvault.core.database_utils import check_database_connection
from assetvault.core.encryption import FieldEncryption
from assetvault.core.exceptions import CryptoError, NotFoundError, ScopeError, ValidationError
from assetvault.services.file_storage import LocalFileStorage
from assetvault.api.api_v1.api import api_router
from assetvault.api.api_v1.endpoints import files

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    session_factory: Optional[sessionmaker] = None,
    encryption: Optional[FieldEncryption] = None,
    storage: Optional[LocalFileStorage] = None,
) -> FastAPI:
    """
    Build the application

    The encryption engine is constructed here so that a missing or malformed
    ENCRYPTION_KEY stops the process before it serves any request.

    Args:
        session_factory: Session factory; defaults to the configured database
        encryption: Field encryption engine; defaults to one built from ENCRYPTION_KEY
        storage: Upload store; defaults to UPLOADS_DIR
    """
    app = FastAPI(
        title="Asset Vault API",
        description="Multi-tenant credential and asset vault with expiration reminders",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.session_factory = session_factory or SessionLocal
    app.state.encryption = encryption or FieldEncryption.from_settings(settings.ENCRYPTION_KEY)
    app.state.storage = storage or LocalFileStorage(settings.UPLOADS_DIR)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request timing middleware
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    # Include API routes
    app.include_router(api_router, prefix="/api/v1")

    # Attachment downloads, at the prefix used in stored file urls
    app.include_router(files.router, prefix=app.state.storage.url_prefix, tags=["files"])

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring"""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": __version__
        }

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Asset Vault API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health"
        }

    # Store errors: no message reveals whether an entity exists in another tenant
    @app.exception_handler(ScopeError)
    async def scope_error_handler(request: Request, exc: ScopeError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(CryptoError)
    async def crypto_error_handler(request: Request, exc: CryptoError):
        logger.error(f"Decryption failed on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Decryption failed", "message": "A stored secret could not be decrypted"},
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )

    # Startup event
    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup"""
        logger.info("Starting Asset Vault API...")

        # Check database connection
        if not check_database_connection(app.state.session_factory):
            logger.error("Failed to connect to database")
            raise Exception("Database connection failed")

        # Create database tables in development
        # Note: In production, use migrations instead
        if settings.ENVIRONMENT == "development":
            create_tables(app.state.session_factory.kw["bind"])
            logger.info("Database tables created/verified successfully")

        logger.info("Application startup complete")

    # Shutdown event
    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on application shutdown"""
        logger.info("Shutting down Asset Vault API...")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "assetvault.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )

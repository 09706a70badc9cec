"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nutriscan_api.api.dependencies import get_identity_provider
from nutriscan_api.api.routes import auth, food, nutrition
from nutriscan_api.core.config import get_settings
from nutriscan_api.core.exceptions import APIError
from nutriscan_api.db.mongo import MongoDB
from nutriscan_api.services.food_analysis import get_food_analysis_pipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Connects MongoDB on startup; closes it and the outbound HTTP clients on
    shutdown.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.api_version}")
    logger.info(f"Connecting to MongoDB at {settings.mongo_uri[:20]}...")

    MongoDB.connect(settings.mongo_uri, settings.db_name)
    logger.info("MongoDB connected")

    yield

    logger.info("Shutting down...")
    await get_food_analysis_pipeline().close()
    await get_identity_provider().close()
    MongoDB.close()
    logger.info("MongoDB connection closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    log_level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        description="Meal photo nutrition analysis with per-user history",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle custom API errors."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed ({exc.kind}): {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": exc.message,
                "kind": exc.kind,
                "details": exc.details,
            },
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.api_version,
            "mongodb": MongoDB.is_connected(),
            "analysis_configured": settings.is_analysis_configured,
            "vision_model": settings.mistral_model,
        }

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(food.router, prefix="/food", tags=["Food Analysis"])
    app.include_router(nutrition.router, prefix="/nutrition", tags=["Nutrition"])

    return app


app = create_app()

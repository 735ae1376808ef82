"""
Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logfire

from config import settings
from database import Base, check_db_connection, engine, get_db_info
from observability.logfire_config import LogfireConfig
from api.exception_handlers import setup_exception_handlers
from api.routes import ai_router, pipeline_router, user_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Initialize Logfire first so we can use structured logging
    LogfireConfig.initialize(token=settings.logfire_token)

    logfire.info(
        "Starting Text Pipeline API Server",
        environment=settings.environment,
        debug=settings.debug,
        llm_model=settings.llm_model,
    )

    # Check database connection on startup
    db_info = get_db_info()
    if db_info['status'] == 'connected':
        logfire.info(
            "Database connection successful",
            url=db_info['url'],
            status=db_info['status'],
        )
    else:
        logfire.error(
            "Database connection failed",
            url=db_info['url'],
            status=db_info['status'],
        )

    # Local SQLite databases are created on the fly; PostgreSQL uses Alembic
    if settings.is_development and engine.dialect.name == "sqlite":
        import models  # noqa: F401  (registers tables on Base.metadata)
        Base.metadata.create_all(bind=engine)
        logfire.info("SQLite schema ensured", path=settings.sqlite_path)

    if not settings.anthropic_api_key:
        logfire.warning(
            "ANTHROPIC_API_KEY not set, pipeline steps will fail",
            hint="Set ANTHROPIC_API_KEY in .env file",
        )

    logfire.info("Text Pipeline API Server startup complete")

    yield

    # Shutdown
    logfire.info("Shutting down Text Pipeline API Server")


# Initialize FastAPI app
app = FastAPI(
    title="Text Pipeline API",
    description="Build, store and execute multi-step text transformation pipelines",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)


# ============================================================================
# Health Check Endpoints
# ============================================================================

@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, str]:
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
        dict: Health status of the application and database
    """
    db_connected = check_db_connection()

    return {
        "status": "healthy" if db_connected else "degraded",
        "service": "text-pipeline-api",
        "version": "1.0.0",
        "database": "connected" if db_connected else "disconnected",
        "environment": settings.environment,
    }


@app.get("/", tags=["Root"])
async def root() -> Dict[str, str]:
    """
    Root endpoint - API information.

    Returns:
        dict: Basic API information
    """
    return {
        "name": "Text Pipeline API",
        "version": "1.0.0",
        "description": "Multi-step text transformation pipelines",
        "docs": "/docs",
        "health": "/health",
    }


# ============================================================================
# API Routers
# ============================================================================

# Pipeline definitions, execution and history
app.include_router(pipeline_router)

# Ad-hoc execution (nothing persisted)
app.include_router(ai_router)

# Owner records
app.include_router(user_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )

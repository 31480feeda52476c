"""FastAPI application: main entry point."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from ottoway.config import get_settings
from ottoway.core.exceptions import setup_exception_handlers
from ottoway.core.logging import configure_logging
from ottoway.core.middleware import setup_middleware
from ottoway.infrastructure.database import build_engine, build_session_factory, create_tables

# Import all models so SQLAlchemy knows about them
from ottoway.domain.models.user import User  # noqa: F401
from ottoway.domain.models.project import Project  # noqa: F401
from ottoway.domain.models.contractor import Contractor  # noqa: F401

# Import routers
from ottoway.interfaces.api.auth import router as auth_router
from ottoway.interfaces.api.projects import router as projects_router
from ottoway.interfaces.api.contractors import router as contractors_router

SERVICE_NAME = "ottoway-backend"

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: owns the database engine."""
    logger.info("Starting Ottoway backend...", env=settings.ENVIRONMENT)

    engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    if settings.DATABASE_CREATE_ALL:
        await create_tables(engine)
        logger.info("Database tables created/verified")

    yield

    await engine.dispose()
    logger.info("Ottoway backend stopped")


app = FastAPI(
    title="Ottoway API",
    description="Construction projects and contractors, authenticated with Clerk",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)
setup_exception_handlers(app)

app.include_router(auth_router)
app.include_router(projects_router)
app.include_router(contractors_router)


@app.get("/")
async def root():
    return {
        "ok": True,
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health", response_class=PlainTextResponse)
async def health():
    return "OK"

"""
ActivityBookings API - Main Application Entry Point

Activities with capacity and price, bookings paid through a mock gateway:
- JSON file-backed entity stores with seed data and atomic writes
- Capacity-checked, charge-then-book transactions
- Structured logging with request correlation
- Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from activity_bookings.core.config import get_settings
from activity_bookings.core.logging import setup_logging, get_logger
from activity_bookings.core.metrics import metrics_endpoint
from activity_bookings.api.errors import register_exception_handlers
from activity_bookings.api.middleware import RequestLoggingMiddleware
from activity_bookings.api.router import api_router
from activity_bookings.services.container import build_container

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: load every entity family before serving."""
    setup_logging(settings)
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        data_dir=settings.DATA_DIR,
    )

    app.state.container = build_container(settings)

    yield

    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Activity booking API with capacity-limited, mock-paid bookings",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

# Routes
app.include_router(api_router)


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint. Reports `degraded` while a store write is failing."""
    container = getattr(app.state, "container", None)
    degraded = bool(container and container.degraded)
    return {
        "status": "degraded" if degraded else "ok",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/metrics", include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
def root():
    return {
        "status": "ok",
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }

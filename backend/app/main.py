# backend/app/main.py
"""
FastAPI application for the studio platform.

Every application router is mounted under /api/v1; health and Prometheus
metrics sit at the root for load balancers and scrapers.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .routes.v1 import (
    availability as availability_v1,
    bookings as bookings_v1,
    customers as customers_v1,
    deliveries as deliveries_v1,
    giftcards as giftcards_v1,
    health as health_v1,
    inquiries as inquiries_v1,
    instructors as instructors_v1,
    invoices as invoices_v1,
    notifications as notifications_v1,
    products as products_v1,
    prometheus as prometheus_v1,
    timecards as timecards_v1,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment} (timezone={settings.studio_timezone})")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    if settings.maintenance_secret is None and settings.is_production:
        logger.warning("MAINTENANCE_SECRET is not set; maintenance endpoints are open")
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)
# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

# Note: static paths (/range, /maintenance/...) are declared before /{id} inside each router
api_v1.include_router(products_v1.router, prefix="/products")
api_v1.include_router(instructors_v1.router, prefix="/instructors")
api_v1.include_router(availability_v1.router, prefix="/availability")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(customers_v1.router, prefix="/customers")
api_v1.include_router(invoices_v1.router, prefix="/invoices")
api_v1.include_router(inquiries_v1.router, prefix="/inquiries")
api_v1.include_router(giftcards_v1.router, prefix="/giftcards")
api_v1.include_router(timecards_v1.router, prefix="/timecards")
api_v1.include_router(deliveries_v1.router, prefix="/deliveries")
api_v1.include_router(notifications_v1.router, prefix="/notifications")

app.include_router(api_v1)
app.include_router(health_v1.router, prefix="/health")
app.include_router(prometheus_v1.router, prefix="/metrics")


@app.get("/", include_in_schema=False)
def root() -> dict[str, str]:
    return {"message": f"{BRAND_NAME} API", "version": API_VERSION, "docs": "/docs"}

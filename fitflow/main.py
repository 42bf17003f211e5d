# fitflow/main.py
"""
FitFlow API application.

``create_app`` wires settings, the storage handle and the payment gateway
onto ``app.state``; routes and dependencies read them from there, so tests
build a fresh app per database without touching globals.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .core.config import Settings, settings as default_settings
from .core.constants import BRAND_NAME
from .database import Database
from .errors import register_error_handlers
from .integrations.payment_gateway import PaymentGateway, build_payment_gateway
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import (
    admin,
    auth,
    bookings,
    community,
    health,
    newsletter,
    payments,
    reviews,
    trainers,
    users,
)

# Configure logging
logging.basicConfig(
    level=default_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    payment_gateway: Optional[PaymentGateway] = None,
) -> FastAPI:
    cfg = settings or default_settings
    owns_database = database is None
    db_handle = database or Database.from_settings(cfg)
    gateway = payment_gateway or build_payment_gateway(cfg.stripe_secret_key)

    @asynccontextmanager
    async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Handle application startup/shutdown."""
        logger.info(f"{BRAND_NAME} API starting up (environment: {cfg.environment})")
        db_handle.create_all()
        yield
        if owns_database:
            db_handle.dispose()
        logger.info(f"{BRAND_NAME} API shut down")

    app = FastAPI(
        title=f"{BRAND_NAME} API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    app.state.settings = cfg
    app.state.database = db_handle
    app.state.payment_gateway = gateway

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
    app.add_middleware(PrometheusMiddleware)
    logger.info("CORS allow_origins=%s allow_credentials=%s", cfg.cors_origin_list, True)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(trainers.router)
    app.include_router(bookings.router)
    app.include_router(payments.router)
    app.include_router(reviews.router)
    app.include_router(community.router)
    app.include_router(newsletter.router)
    app.include_router(admin.router)

    return app


app = create_app()

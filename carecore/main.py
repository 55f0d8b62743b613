"""
carecore: Application entry point.

This is the **only** file that assembles the app. The rules themselves
live in ``engine/`` as pure functions; ``api/`` is a stateless JSON
surface over them.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carecore.api.v1.api import api_router
from carecore.core.config import settings
from carecore.core.exceptions import register_exception_handlers

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info(
        "Rules: workload limit %.1fh, absence limit %d/month, support cap %d, "
        "discrepancy threshold %.2f, close %s (UTC%s)",
        settings.WORKLOAD_LIMIT_HOURS,
        settings.ABSENCE_MONTHLY_LIMIT,
        settings.ABSENCE_SUPPORT_LIMIT,
        settings.DISCREPANCY_THRESHOLD,
        settings.FACILITY_CLOSE_TIME,
        settings.FACILITY_UTC_OFFSET,
    )
    logger.info("🚀 %s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title="carecore",
        description="Scheduling and attendance-compliance rules engine",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()

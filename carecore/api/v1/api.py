"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from carecore.api.v1.endpoints import attendance, daily_care, schedules, settings

api_router = APIRouter()

# Drop / selection checks, workload warnings
api_router.include_router(schedules.router)

# Day-start rows, check-in / check-out / absence, discrepancies
api_router.include_router(attendance.router)

# Monthly service records, absence-support cap, summaries
api_router.include_router(daily_care.router)

# Effective rule settings, health
api_router.include_router(settings.router)

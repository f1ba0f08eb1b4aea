"""Top-level API router; mounted under /api/v1."""

from fastapi import APIRouter

from ai_adoption_assessment.api.routes import (
    analytics,
    anomalies,
    assessments,
    dashboards,
    entities,
    integrations,
    notifications,
    onboarding,
    platforms,
    reports,
    sessions,
    strategies,
)

router = APIRouter()

for module in (
    assessments,
    strategies,
    sessions,
    dashboards,
    notifications,
    onboarding,
    anomalies,
    reports,
    platforms,
    analytics,
    integrations,
    entities,
):
    router.include_router(module.router)

"""Business logic services for the AI Adoption Assessment service.

All services depend on repository and LLM interfaces (not concrete
implementations) and receive dependencies via constructor injection.
No framework code (FastAPI, SQLAlchemy) belongs here.
"""

from ai_adoption_assessment.core.services.analytics_service import AnalyticsService
from ai_adoption_assessment.core.services.anomaly_service import AnomalyService
from ai_adoption_assessment.core.services.assessment_service import AssessmentService
from ai_adoption_assessment.core.services.catalog_service import CatalogService
from ai_adoption_assessment.core.services.collaboration_service import CollaborationService
from ai_adoption_assessment.core.services.dashboard_service import DashboardService
from ai_adoption_assessment.core.services.notification_service import NotificationService
from ai_adoption_assessment.core.services.onboarding_service import OnboardingService
from ai_adoption_assessment.core.services.report_service import ReportService
from ai_adoption_assessment.core.services.strategy_service import StrategyService

__all__ = [
    "AnalyticsService",
    "AnomalyService",
    "AssessmentService",
    "CatalogService",
    "CollaborationService",
    "DashboardService",
    "NotificationService",
    "OnboardingService",
    "ReportService",
    "StrategyService",
]

"""Dependency factories wiring repositories, engines and services per request."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ai_adoption_assessment.adapters.repositories import EntityRepository
from ai_adoption_assessment.core.engines.assessment_scoring import AssessmentScoringEngine
from ai_adoption_assessment.core.engines.collaboration import CollaborativeStrategyEngine
from ai_adoption_assessment.core.engines.comparison import PlatformComparisonEngine
from ai_adoption_assessment.core.engines.compliance import ComplianceAnalysisEngine
from ai_adoption_assessment.core.engines.forecasting import ForecastingEngine
from ai_adoption_assessment.core.engines.notifications import NotificationRecommendationEngine
from ai_adoption_assessment.core.engines.onboarding import OnboardingEngine
from ai_adoption_assessment.core.engines.reports import AutomatedReportEngine
from ai_adoption_assessment.core.engines.semantic_search import SemanticSearchEngine
from ai_adoption_assessment.core.engines.strategy import StrategyAutomationEngine
from ai_adoption_assessment.core.interfaces import ILLMClient
from ai_adoption_assessment.core.models import (
    AdoptionStrategy,
    AIPlatform,
    Assessment,
    AutomatedReport,
    CustomDashboard,
    MetricAnomaly,
    Notification,
    OnboardingFlow,
    ReportTemplate,
    StrategySession,
    UserSettings,
)
from ai_adoption_assessment.core.services import (
    AnalyticsService,
    AnomalyService,
    AssessmentService,
    CatalogService,
    CollaborationService,
    DashboardService,
    NotificationService,
    OnboardingService,
    ReportService,
    StrategyService,
)
from ai_adoption_assessment.database import get_db_session
from ai_adoption_assessment.settings import Settings, get_settings


def get_llm_client(request: Request) -> ILLMClient:
    """The process-wide LLM client created in the application lifespan."""
    return request.app.state.llm_client


def get_assessment_service(
    session: AsyncSession = Depends(get_db_session),
    llm: ILLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> AssessmentService:
    """Build AssessmentService with injected dependencies."""
    return AssessmentService(
        assessment_repo=EntityRepository(session, Assessment),
        scoring_engine=AssessmentScoringEngine(llm),
        compliance_engine=ComplianceAnalysisEngine(llm),
        forecasting_engine=ForecastingEngine(llm),
        comparison_engine=PlatformComparisonEngine(llm),
        default_weights=settings.default_scoring_weights,
    )


def get_strategy_service(
    session: AsyncSession = Depends(get_db_session),
    llm: ILLMClient = Depends(get_llm_client),
) -> StrategyService:
    """Build StrategyService with injected dependencies."""
    return StrategyService(
        strategy_repo=EntityRepository(session, AdoptionStrategy),
        assessment_repo=EntityRepository(session, Assessment),
        engine=StrategyAutomationEngine(llm),
    )


def get_collaboration_service(
    session: AsyncSession = Depends(get_db_session),
    llm: ILLMClient = Depends(get_llm_client),
) -> CollaborationService:
    """Build CollaborationService with injected dependencies."""
    return CollaborationService(
        session_repo=EntityRepository(session, StrategySession),
        strategy_repo=EntityRepository(session, AdoptionStrategy),
        engine=CollaborativeStrategyEngine(llm),
    )


def get_dashboard_service(session: AsyncSession = Depends(get_db_session)) -> DashboardService:
    """Build DashboardService with injected dependencies."""
    return DashboardService(dashboard_repo=EntityRepository(session, CustomDashboard))


def get_notification_service(
    session: AsyncSession = Depends(get_db_session),
    llm: ILLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> NotificationService:
    """Build NotificationService with injected dependencies."""
    return NotificationService(
        notification_repo=EntityRepository(session, Notification),
        settings_repo=EntityRepository(session, UserSettings),
        strategy_repo=EntityRepository(session, AdoptionStrategy),
        onboarding_repo=EntityRepository(session, OnboardingFlow),
        engine=NotificationRecommendationEngine(
            llm, max_recommendations=settings.notification_max_ai_recommendations
        ),
        default_types=settings.notification_default_types,
        default_min_priority=settings.notification_default_min_priority,
    )


def get_onboarding_service(
    session: AsyncSession = Depends(get_db_session),
    llm: ILLMClient = Depends(get_llm_client),
) -> OnboardingService:
    """Build OnboardingService with injected dependencies."""
    return OnboardingService(
        flow_repo=EntityRepository(session, OnboardingFlow),
        assessment_repo=EntityRepository(session, Assessment),
        engine=OnboardingEngine(llm),
    )


def get_anomaly_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> AnomalyService:
    """Build AnomalyService with injected dependencies."""
    return AnomalyService(
        anomaly_repo=EntityRepository(session, MetricAnomaly),
        assessment_repo=EntityRepository(session, Assessment),
        min_baseline=settings.anomaly_min_baseline_assessments,
        recent_window=settings.anomaly_recent_window,
        sigma_threshold=settings.anomaly_sigma_threshold,
        high_sigma_threshold=settings.anomaly_high_sigma_threshold,
    )


def get_report_service(
    session: AsyncSession = Depends(get_db_session),
    llm: ILLMClient = Depends(get_llm_client),
) -> ReportService:
    """Build ReportService with injected dependencies."""
    return ReportService(
        report_repo=EntityRepository(session, AutomatedReport),
        template_repo=EntityRepository(session, ReportTemplate),
        assessment_repo=EntityRepository(session, Assessment),
        strategy_repo=EntityRepository(session, AdoptionStrategy),
        engine=AutomatedReportEngine(llm),
    )


def get_catalog_service(
    session: AsyncSession = Depends(get_db_session),
    llm: ILLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> CatalogService:
    """Build CatalogService with injected dependencies."""
    return CatalogService(
        platform_repo=EntityRepository(session, AIPlatform),
        search_engine=SemanticSearchEngine(llm, min_score=settings.search_min_score),
    )


def get_analytics_service(session: AsyncSession = Depends(get_db_session)) -> AnalyticsService:
    """Build AnalyticsService with injected dependencies."""
    return AnalyticsService(
        assessment_repo=EntityRepository(session, Assessment),
        strategy_repo=EntityRepository(session, AdoptionStrategy),
    )

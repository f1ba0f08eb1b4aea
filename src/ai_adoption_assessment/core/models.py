"""SQLAlchemy ORM models for the AI Adoption Assessment entity store.

All tables use the ``aaa_`` prefix and extend EntityModel, which supplies
id (UUID), created_by, created_date and updated_date columns.

Domain model:
  Assessment       : organisational intake plus computed platform scores
  AdoptionStrategy : roadmap, milestones and risk analysis for a platform rollout
  StrategySession  : collaborative discussion around a strategy
  CustomDashboard  : user-defined widget layout
  Notification     : in-app notification for a user
  OnboardingFlow   : personalised onboarding path for a user
  MetricAnomaly    : statistically unusual ROI, cost or compliance value
  AutomatedReport  : scheduled report definition and its last output
  AIPlatform       : catalogue entry for an AI platform
  ReportTemplate   : reusable report section layout
  UserSettings     : notification and display preferences per user

Concurrent updates are last-write-wins; no version columns are kept.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from ai_adoption_assessment.database import EntityModel


class Assessment(EntityModel):
    """An enterprise AI adoption assessment.

    Intake fields are captured while the assessment is a draft; the result
    fields (roi_calculations onward) are written when it is completed.

    Status transitions:
        draft → completed

    Table: aaa_assessments
    """

    __tablename__ = "aaa_assessments"

    organization_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    assessment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="draft",
        index=True,
        comment="draft | completed",
    )
    departments: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment="[{name, user_count, hourly_rate}]",
    )
    pain_points: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    compliance_requirements: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    desired_integrations: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    business_goals: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    budget_constraints: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    technical_constraints: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    scoring_weights: Mapped[dict | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Custom platform scoring weights; defaults apply when null",
    )

    roi_calculations: Mapped[dict | None] = mapped_column(
        JSONB, nullable=True, comment="platform id -> ROI result"
    )
    compliance_scores: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    integration_scores: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    pain_point_mappings: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    recommended_platforms: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Platform recommendations sorted by score descending"
    )
    executive_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    ai_assessment_score: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    ai_readiness_score: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    compliance_analysis: Mapped[dict | None] = mapped_column(JSONB, nullable=True)


class AdoptionStrategy(EntityModel):
    """An AI adoption strategy generated from a completed assessment.

    Table: aaa_adoption_strategies
    """

    __tablename__ = "aaa_adoption_strategies"

    assessment_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )
    organization_name: Mapped[str] = mapped_column(String(255), nullable=False)
    platform: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="draft",
        index=True,
        comment="draft | active | paused | completed",
    )
    roadmap: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    milestones: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    risk_analysis: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    progress_tracking: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    checkpoints: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class StrategySession(EntityModel):
    """A collaborative strategy discussion session.

    Table: aaa_strategy_sessions
    """

    __tablename__ = "aaa_strategy_sessions"

    strategy_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    session_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active", comment="active | ended"
    )
    participants: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    discussion_points: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    roadmap_edits: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    summary: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class CustomDashboard(EntityModel):
    """A user-defined dashboard layout.

    Table: aaa_custom_dashboards
    """

    __tablename__ = "aaa_custom_dashboards"

    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    widgets: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment="[{id, type, title, position, config}]",
    )
    filters: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Notification(EntityModel):
    """An in-app notification.

    Table: aaa_notifications
    """

    __tablename__ = "aaa_notifications"

    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        comment="alert | reminder | update | recommendation | achievement",
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default="medium", comment="low | medium | high | critical"
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    action_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    action_label: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class OnboardingFlow(EntityModel):
    """A personalised onboarding path.

    Table: aaa_onboarding_flows
    """

    __tablename__ = "aaa_onboarding_flows"

    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_role: Mapped[str] = mapped_column(String(50), nullable=False, default="user")
    assessment_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="in_progress",
        comment="in_progress | completed | skipped",
    )
    personalized_path: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    suggested_modules: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    interactive_tips: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    progress: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)


class MetricAnomaly(EntityModel):
    """A metric value that deviates from the assessment baseline.

    Table: aaa_metric_anomalies
    """

    __tablename__ = "aaa_metric_anomalies"

    user_email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    metric_type: Mapped[str] = mapped_column(
        String(30), nullable=False, comment="roi | cost | compliance"
    )
    metric_name: Mapped[str] = mapped_column(String(255), nullable=False)
    current_value: Mapped[float] = mapped_column(Float, nullable=False)
    expected_value: Mapped[float] = mapped_column(Float, nullable=False)
    deviation_percent: Mapped[float] = mapped_column(Float, nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False, comment="medium | high")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="new",
        index=True,
        comment="new | acknowledged | resolved",
    )
    detected_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    context: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)


class AutomatedReport(EntityModel):
    """A scheduled report and its most recent output.

    Table: aaa_automated_reports
    """

    __tablename__ = "aaa_automated_reports"

    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    report_name: Mapped[str] = mapped_column(String(255), nullable=False)
    report_type: Mapped[str] = mapped_column(String(50), nullable=False)
    template_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    assessment_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    strategy_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    frequency: Mapped[str] = mapped_column(
        String(20), nullable=False, default="once", comment="once | daily | weekly | monthly"
    )
    recipients: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    scheduled_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    next_run: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    last_run: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="scheduled",
        index=True,
        comment="scheduled | generated | failed | paused",
    )
    content: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)


class AIPlatform(EntityModel):
    """A catalogue entry describing an AI platform.

    Table: aaa_ai_platforms
    """

    __tablename__ = "aaa_ai_platforms"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    ecosystem: Mapped[str | None] = mapped_column(String(100), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    tier: Mapped[str | None] = mapped_column(String(50), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    use_cases: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    compliance_certifications: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    integration_options: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    deployment_options: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    pricing: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)


class ReportTemplate(EntityModel):
    """A reusable report layout.

    Table: aaa_report_templates
    """

    __tablename__ = "aaa_report_templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    report_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default="custom", comment="executive | technical | financial | custom"
    )
    sections: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)


class UserSettings(EntityModel):
    """Per-user preferences, one row per user.

    Table: aaa_user_settings
    """

    __tablename__ = "aaa_user_settings"

    user_email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    enabled_notification_types: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    minimum_priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    preferences: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)


ENTITY_MODELS: dict[str, type[EntityModel]] = {
    "Assessment": Assessment,
    "AdoptionStrategy": AdoptionStrategy,
    "StrategySession": StrategySession,
    "CustomDashboard": CustomDashboard,
    "Notification": Notification,
    "OnboardingFlow": OnboardingFlow,
    "MetricAnomaly": MetricAnomaly,
    "AutomatedReport": AutomatedReport,
    "AIPlatform": AIPlatform,
    "ReportTemplate": ReportTemplate,
    "UserSettings": UserSettings,
}

"""Pydantic request/response models for the AI Adoption Assessment API.

Typed models are used for every endpoint except the generic entity store,
whose shape depends on the entity named in the path.
"""

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EntityResponse(BaseModel):
    """Columns shared by every entity."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_by: str | None = None
    created_date: datetime
    updated_date: datetime


# ---------------------------------------------------------------------------
# Assessment schemas
# ---------------------------------------------------------------------------


class DepartmentInput(BaseModel):
    """One department in the assessment intake."""

    name: str = Field(..., min_length=1, max_length=100)
    user_count: int = Field(..., ge=0)
    hourly_rate: float = Field(..., ge=0.0)


class ScoringWeightsInput(BaseModel):
    """Platform scoring weights as fractions or percentage sliders."""

    roi_weight: float = Field(0.35, ge=0.0)
    compliance_weight: float = Field(0.25, ge=0.0)
    integration_weight: float = Field(0.25, ge=0.0)
    pain_point_weight: float = Field(0.15, ge=0.0)


class CreateAssessmentRequest(BaseModel):
    """Request body for creating a draft assessment."""

    organization_name: str = Field(..., min_length=1, max_length=255)
    assessment_date: datetime | None = None
    departments: list[DepartmentInput] = Field(default_factory=list)
    pain_points: list[str] = Field(default_factory=list)
    compliance_requirements: list[str] = Field(default_factory=list)
    desired_integrations: list[str] = Field(default_factory=list)
    business_goals: list[str] = Field(default_factory=list)
    budget_constraints: dict[str, Any] = Field(default_factory=dict)
    technical_constraints: dict[str, Any] = Field(default_factory=dict)
    scoring_weights: ScoringWeightsInput | None = None


class UpdateAssessmentRequest(BaseModel):
    """Partial update of a draft's intake fields."""

    organization_name: str | None = Field(None, min_length=1, max_length=255)
    assessment_date: datetime | None = None
    departments: list[DepartmentInput] | None = None
    pain_points: list[str] | None = None
    compliance_requirements: list[str] | None = None
    desired_integrations: list[str] | None = None
    business_goals: list[str] | None = None
    budget_constraints: dict[str, Any] | None = None
    technical_constraints: dict[str, Any] | None = None
    scoring_weights: ScoringWeightsInput | None = None


class CompleteAssessmentRequest(BaseModel):
    """Optional weights to score with; stored weights or defaults apply otherwise."""

    scoring_weights: ScoringWeightsInput | None = None


class ReadinessScoreRequest(BaseModel):
    infrastructure_score: float | None = Field(None, ge=0.0, le=100.0)


class ComplianceReportRequest(BaseModel):
    regulation_code: str = Field(..., min_length=1, max_length=50)


class ForecastRequest(BaseModel):
    kind: Literal["roi", "risk", "maturity"]
    market_trends: dict[str, Any] | None = None


class ScenarioRequest(BaseModel):
    """What-if intake changes. Omitted fields keep the assessment's values."""

    name: str | None = Field(None, max_length=255)
    departments: list[DepartmentInput] | None = None
    compliance_requirements: list[str] | None = None
    desired_integrations: list[str] | None = None
    pain_points: list[str] | None = None
    scoring_weights: ScoringWeightsInput | None = None


class ComparePlatformsRequest(BaseModel):
    platforms: list[str] = Field(..., min_length=2, max_length=4, description="Platform ids or names")


class AssessmentResponse(EntityResponse):
    """Response model for an assessment."""

    organization_name: str
    assessment_date: datetime | None
    status: str
    departments: list[dict[str, Any]]
    pain_points: list[str]
    compliance_requirements: list[str]
    desired_integrations: list[str]
    business_goals: list[str]
    budget_constraints: dict[str, Any]
    technical_constraints: dict[str, Any]
    scoring_weights: dict[str, float] | None
    roi_calculations: dict[str, Any] | None
    compliance_scores: dict[str, Any] | None
    integration_scores: dict[str, Any] | None
    pain_point_mappings: list[dict[str, Any]] | None
    recommended_platforms: list[dict[str, Any]] | None
    executive_summary: str | None
    ai_assessment_score: dict[str, Any] | None
    ai_readiness_score: dict[str, Any] | None
    compliance_analysis: dict[str, Any] | None


# ---------------------------------------------------------------------------
# Strategy schemas
# ---------------------------------------------------------------------------


class GenerateStrategyRequest(BaseModel):
    assessment_id: uuid.UUID


class StrategyStatusRequest(BaseModel):
    status: Literal["draft", "active", "paused", "completed"]


class MilestoneUpdateRequest(BaseModel):
    milestone_name: str = Field(..., min_length=1)
    status: Literal["not_started", "in_progress", "completed", "blocked"]


class ProgressUpdateRequest(BaseModel):
    current_phase: str | None = None
    achievements: list[str] | None = None
    blockers: list[str] | None = None


class MonitorRequest(BaseModel):
    recent_activity: str | None = None


class StrategyResponse(EntityResponse):
    """Response model for an adoption strategy."""

    assessment_id: uuid.UUID | None
    organization_name: str
    platform: str | None
    status: str
    roadmap: dict[str, Any]
    milestones: list[dict[str, Any]]
    risk_analysis: dict[str, Any]
    progress_tracking: dict[str, Any]
    checkpoints: list[dict[str, Any]]
    started_at: datetime | None


# ---------------------------------------------------------------------------
# Collaboration schemas
# ---------------------------------------------------------------------------


class StartSessionRequest(BaseModel):
    strategy_id: uuid.UUID
    session_name: str | None = Field(None, max_length=255)


class DiscussionPointRequest(BaseModel):
    content: str = Field(..., min_length=1)
    type: Literal["comment", "suggestion", "decision", "question", "action_item"] = "comment"


class VoteRequest(BaseModel):
    direction: Literal["up", "down"]


class ReplyRequest(BaseModel):
    content: str = Field(..., min_length=1)


class RoadmapEditRequest(BaseModel):
    phase: str = Field(..., min_length=1)
    change_description: str = Field(..., min_length=1)
    analyze: bool = True


class ReviewEditRequest(BaseModel):
    status: Literal["approved", "rejected"]


class SuggestionsRequest(BaseModel):
    current_topic: str | None = None


class SessionResponse(EntityResponse):
    """Response model for a strategy session."""

    strategy_id: uuid.UUID
    session_name: str
    status: str
    participants: list[dict[str, Any]]
    discussion_points: list[dict[str, Any]]
    roadmap_edits: list[dict[str, Any]]
    summary: dict[str, Any] | None
    started_at: datetime | None
    ended_at: datetime | None


# ---------------------------------------------------------------------------
# Dashboard schemas
# ---------------------------------------------------------------------------


class CreateDashboardRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    widget_types: list[str] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)
    is_default: bool = False


class UpdateDashboardRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    filters: dict[str, Any] | None = None
    is_default: bool | None = None


class AddWidgetRequest(BaseModel):
    widget_type: str
    title: str | None = None
    config: dict[str, Any] | None = None


class MoveWidgetRequest(BaseModel):
    direction: Literal["up", "down"]


class DashboardResponse(EntityResponse):
    """Response model for a custom dashboard."""

    user_email: str
    name: str
    description: str | None
    widgets: list[dict[str, Any]]
    filters: dict[str, Any]
    is_default: bool


# ---------------------------------------------------------------------------
# Notification schemas
# ---------------------------------------------------------------------------


class NotificationResponse(EntityResponse):
    """Response model for a notification."""

    user_email: str
    type: str
    priority: str
    title: str
    message: str
    action_url: str | None
    action_label: str | None
    is_read: bool
    read_at: datetime | None


class MarkAllReadResponse(BaseModel):
    updated: int


class UpdateUserSettingsRequest(BaseModel):
    enabled_notification_types: list[str] | None = None
    minimum_priority: Literal["low", "medium", "high", "critical"] | None = None


class UserSettingsResponse(EntityResponse):
    user_email: str
    enabled_notification_types: list[str]
    minimum_priority: str
    preferences: dict[str, Any]


# ---------------------------------------------------------------------------
# Onboarding schemas
# ---------------------------------------------------------------------------


class StartOnboardingRequest(BaseModel):
    assessment_id: uuid.UUID | None = None
    regenerate: bool = False


class CompleteStepRequest(BaseModel):
    module: str | None = None
    minutes_spent: int = Field(0, ge=0)


class GuidanceRequest(BaseModel):
    page: str = Field(..., min_length=1)


class OnboardingFlowResponse(EntityResponse):
    """Response model for an onboarding flow."""

    user_email: str
    user_role: str
    assessment_id: uuid.UUID | None
    status: str
    personalized_path: dict[str, Any]
    suggested_modules: list[dict[str, Any]]
    interactive_tips: list[dict[str, Any]]
    progress: dict[str, Any]


# ---------------------------------------------------------------------------
# Anomaly schemas
# ---------------------------------------------------------------------------


class AnomalyResponse(EntityResponse):
    """Response model for a metric anomaly."""

    user_email: str | None
    metric_type: str
    metric_name: str
    current_value: float
    expected_value: float
    deviation_percent: float
    severity: str
    status: str
    detected_at: datetime
    context: dict[str, Any]


# ---------------------------------------------------------------------------
# Report schemas
# ---------------------------------------------------------------------------


class TemplateSection(BaseModel):
    order: int = 0
    type: Literal[
        "overview",
        "recommendations",
        "roi",
        "compliance",
        "risks",
        "implementation",
        "technical_specs",
        "custom_text",
    ]
    title: str
    enabled: bool = True
    ai_enhanced: bool = False


class CreateTemplateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    report_type: Literal["executive", "technical", "financial", "custom"] = "custom"
    sections: list[TemplateSection] = Field(default_factory=list)


class TemplateResponse(EntityResponse):
    name: str
    description: str | None
    report_type: str
    sections: list[dict[str, Any]]


class ScheduleReportRequest(BaseModel):
    """Request body for scheduling a report."""

    report_name: str = Field(..., min_length=1, max_length=255)
    report_type: Literal[
        "executive",
        "technical",
        "financial",
        "custom",
        "performance_summary",
        "predictive",
        "compliance_gap",
    ]
    scheduled_date: datetime
    frequency: Literal["once", "daily", "weekly", "monthly"] = "once"
    recipients: list[str] = Field(default_factory=list)
    template_id: uuid.UUID | None = None
    assessment_id: uuid.UUID | None = None
    strategy_id: uuid.UUID | None = None


class RunDueReportsRequest(BaseModel):
    now: datetime | None = Field(None, description="Reference time; defaults to the current time")


class RunDueReportsResponse(BaseModel):
    generated: list[uuid.UUID]
    failed: list[uuid.UUID]


class ReportResponse(EntityResponse):
    """Response model for an automated report."""

    user_email: str
    report_name: str
    report_type: str
    template_id: uuid.UUID | None
    assessment_id: uuid.UUID | None
    strategy_id: uuid.UUID | None
    frequency: str
    recipients: list[str]
    scheduled_date: datetime
    next_run: datetime | None
    last_run: datetime | None
    status: str
    content: dict[str, Any] | None
    error_message: str | None


# ---------------------------------------------------------------------------
# Catalogue schemas
# ---------------------------------------------------------------------------


class PlatformResponse(EntityResponse):
    name: str
    ecosystem: str | None
    category: str | None
    tier: str | None
    description: str
    use_cases: list[str]
    compliance_certifications: list[str]
    integration_options: list[str]
    deployment_options: list[str]
    pricing: dict[str, Any]


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=1000)


class SearchResponse(BaseModel):
    query: str
    understanding: str | None
    extracted_criteria: dict[str, Any]
    recommendations_summary: str | None
    results: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Integration schemas
# ---------------------------------------------------------------------------


class InvokeLLMRequest(BaseModel):
    """Raw structured-output LLM call."""

    prompt: str = Field(..., min_length=1)
    response_json_schema: dict[str, Any] | None = None
    add_context_from_internet: bool = False

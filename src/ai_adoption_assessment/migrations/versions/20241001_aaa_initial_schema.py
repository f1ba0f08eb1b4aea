"""aaa initial schema: assessments, strategies, sessions, dashboards, notifications,
onboarding, anomalies, reports, platforms, templates and user settings.

Revision ID: aaa_001_initial
Revises:
Create Date: 2024-10-01 00:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "aaa_001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TABLES = [
    "aaa_assessments",
    "aaa_adoption_strategies",
    "aaa_strategy_sessions",
    "aaa_custom_dashboards",
    "aaa_notifications",
    "aaa_onboarding_flows",
    "aaa_metric_anomalies",
    "aaa_automated_reports",
    "aaa_ai_platforms",
    "aaa_report_templates",
    "aaa_user_settings",
]


def _entity_columns() -> list[sa.Column]:
    """Columns shared by every entity table."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column(
            "created_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _json_list(name: str) -> sa.Column:
    return sa.Column(name, postgresql.JSONB, nullable=False, server_default="[]")


def _json_dict(name: str) -> sa.Column:
    return sa.Column(name, postgresql.JSONB, nullable=False, server_default="{}")


def upgrade() -> None:
    """Create all aaa_ tables."""
    # aaa_assessments
    op.create_table(
        "aaa_assessments",
        *_entity_columns(),
        sa.Column("organization_name", sa.String(255), nullable=False),
        sa.Column("assessment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        _json_list("departments"),
        _json_list("pain_points"),
        _json_list("compliance_requirements"),
        _json_list("desired_integrations"),
        _json_list("business_goals"),
        _json_dict("budget_constraints"),
        _json_dict("technical_constraints"),
        sa.Column("scoring_weights", postgresql.JSONB, nullable=True),
        sa.Column("roi_calculations", postgresql.JSONB, nullable=True),
        sa.Column("compliance_scores", postgresql.JSONB, nullable=True),
        sa.Column("integration_scores", postgresql.JSONB, nullable=True),
        sa.Column("pain_point_mappings", postgresql.JSONB, nullable=True),
        sa.Column("recommended_platforms", postgresql.JSONB, nullable=True),
        sa.Column("executive_summary", sa.Text, nullable=True),
        sa.Column("ai_assessment_score", postgresql.JSONB, nullable=True),
        sa.Column("ai_readiness_score", postgresql.JSONB, nullable=True),
        sa.Column("compliance_analysis", postgresql.JSONB, nullable=True),
    )
    op.create_index("ix_aaa_assessments_organization_name", "aaa_assessments", ["organization_name"])
    op.create_index("ix_aaa_assessments_status", "aaa_assessments", ["status"])

    # aaa_adoption_strategies
    op.create_table(
        "aaa_adoption_strategies",
        *_entity_columns(),
        sa.Column("assessment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("organization_name", sa.String(255), nullable=False),
        sa.Column("platform", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        _json_dict("roadmap"),
        _json_list("milestones"),
        _json_dict("risk_analysis"),
        _json_dict("progress_tracking"),
        _json_list("checkpoints"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_aaa_adoption_strategies_assessment_id", "aaa_adoption_strategies", ["assessment_id"])
    op.create_index("ix_aaa_adoption_strategies_status", "aaa_adoption_strategies", ["status"])

    # aaa_strategy_sessions
    op.create_table(
        "aaa_strategy_sessions",
        *_entity_columns(),
        sa.Column("strategy_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("session_name", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        _json_list("participants"),
        _json_list("discussion_points"),
        _json_list("roadmap_edits"),
        sa.Column("summary", postgresql.JSONB, nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_aaa_strategy_sessions_strategy_id", "aaa_strategy_sessions", ["strategy_id"])

    # aaa_custom_dashboards
    op.create_table(
        "aaa_custom_dashboards",
        *_entity_columns(),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        _json_list("widgets"),
        _json_dict("filters"),
        sa.Column("is_default", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_aaa_custom_dashboards_user_email", "aaa_custom_dashboards", ["user_email"])

    # aaa_notifications
    op.create_table(
        "aaa_notifications",
        *_entity_columns(),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False, server_default=""),
        sa.Column("action_url", sa.String(500), nullable=True),
        sa.Column("action_label", sa.String(100), nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_aaa_notifications_user_email", "aaa_notifications", ["user_email"])
    op.create_index("ix_aaa_notifications_is_read", "aaa_notifications", ["is_read"])

    # aaa_onboarding_flows
    op.create_table(
        "aaa_onboarding_flows",
        *_entity_columns(),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("user_role", sa.String(50), nullable=False, server_default="user"),
        sa.Column("assessment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="in_progress"),
        _json_dict("personalized_path"),
        _json_list("suggested_modules"),
        _json_list("interactive_tips"),
        _json_dict("progress"),
    )
    op.create_index("ix_aaa_onboarding_flows_user_email", "aaa_onboarding_flows", ["user_email"])

    # aaa_metric_anomalies
    op.create_table(
        "aaa_metric_anomalies",
        *_entity_columns(),
        sa.Column("user_email", sa.String(255), nullable=True),
        sa.Column("metric_type", sa.String(30), nullable=False),
        sa.Column("metric_name", sa.String(255), nullable=False),
        sa.Column("current_value", sa.Float, nullable=False),
        sa.Column("expected_value", sa.Float, nullable=False),
        sa.Column("deviation_percent", sa.Float, nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="new"),
        sa.Column("detected_at", sa.DateTime(timezone=True), nullable=False),
        _json_dict("context"),
    )
    op.create_index("ix_aaa_metric_anomalies_user_email", "aaa_metric_anomalies", ["user_email"])
    op.create_index("ix_aaa_metric_anomalies_status", "aaa_metric_anomalies", ["status"])

    # aaa_automated_reports
    op.create_table(
        "aaa_automated_reports",
        *_entity_columns(),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("report_name", sa.String(255), nullable=False),
        sa.Column("report_type", sa.String(50), nullable=False),
        sa.Column("template_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("assessment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("strategy_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("frequency", sa.String(20), nullable=False, server_default="once"),
        _json_list("recipients"),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("next_run", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_run", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="scheduled"),
        sa.Column("content", postgresql.JSONB, nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
    )
    op.create_index("ix_aaa_automated_reports_user_email", "aaa_automated_reports", ["user_email"])
    op.create_index("ix_aaa_automated_reports_next_run", "aaa_automated_reports", ["next_run"])
    op.create_index("ix_aaa_automated_reports_status", "aaa_automated_reports", ["status"])

    # aaa_ai_platforms
    op.create_table(
        "aaa_ai_platforms",
        *_entity_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("ecosystem", sa.String(100), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("tier", sa.String(50), nullable=True),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        _json_list("use_cases"),
        _json_list("compliance_certifications"),
        _json_list("integration_options"),
        _json_list("deployment_options"),
        _json_dict("pricing"),
    )
    op.create_index("ix_aaa_ai_platforms_name", "aaa_ai_platforms", ["name"])

    # aaa_report_templates
    op.create_table(
        "aaa_report_templates",
        *_entity_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("report_type", sa.String(50), nullable=False, server_default="custom"),
        _json_list("sections"),
    )

    # aaa_user_settings
    op.create_table(
        "aaa_user_settings",
        *_entity_columns(),
        sa.Column("user_email", sa.String(255), nullable=False, unique=True),
        _json_list("enabled_notification_types"),
        sa.Column("minimum_priority", sa.String(20), nullable=False, server_default="medium"),
        _json_dict("preferences"),
    )

    for table in TABLES:
        op.create_index(f"ix_{table}_created_by", table, ["created_by"])
        op.create_index(f"ix_{table}_created_date", table, ["created_date"])


def downgrade() -> None:
    """Drop all aaa_ tables."""
    for table in reversed(TABLES):
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")

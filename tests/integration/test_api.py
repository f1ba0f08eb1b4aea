"""Integration tests for the HTTP API.

Each test overrides the service factory of the router under test with an
AsyncMock, so requests exercise routing, request validation, identity
headers, response serialisation and the domain error mapping without a
database or LLM endpoint.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI, status
from httpx import AsyncClient

from ai_adoption_assessment import __version__
from ai_adoption_assessment.api.dependencies import (
    get_analytics_service,
    get_assessment_service,
    get_catalog_service,
    get_collaboration_service,
    get_dashboard_service,
    get_llm_client,
    get_notification_service,
    get_report_service,
    get_strategy_service,
)
from ai_adoption_assessment.adapters.repositories import EntityRepository
from ai_adoption_assessment.api.routes.entities import get_entity_repository
from ai_adoption_assessment.core.models import Assessment, AutomatedReport
from ai_adoption_assessment.database import get_db_session
from ai_adoption_assessment.errors import (
    ConflictError,
    LLMInvocationError,
    NotFoundError,
    ValidationError,
)

_NOW = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)
_EMAIL = "ada@acme.com"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _record(**fields: Any) -> MagicMock:
    """Build an ORM-like record carrying the common entity columns."""
    record = MagicMock()
    record.id = uuid.uuid4()
    record.created_by = _EMAIL
    record.created_date = _NOW
    record.updated_date = _NOW
    for name, value in fields.items():
        setattr(record, name, value)
    return record


def _assessment_record(**overrides: Any) -> MagicMock:
    fields = {
        "organization_name": "Acme Corp",
        "assessment_date": None,
        "status": "draft",
        "departments": [{"name": "Sales", "user_count": 10, "hourly_rate": 50.0}],
        "pain_points": [],
        "compliance_requirements": ["SOC 2"],
        "desired_integrations": [],
        "business_goals": [],
        "budget_constraints": {},
        "technical_constraints": {},
        "scoring_weights": None,
        "roi_calculations": None,
        "compliance_scores": None,
        "integration_scores": None,
        "pain_point_mappings": None,
        "recommended_platforms": None,
        "executive_summary": None,
        "ai_assessment_score": None,
        "ai_readiness_score": None,
        "compliance_analysis": None,
    }
    fields.update(overrides)
    return _record(**fields)


def _session_record(**overrides: Any) -> MagicMock:
    fields = {
        "strategy_id": uuid.uuid4(),
        "session_name": "Kickoff",
        "status": "active",
        "participants": [],
        "discussion_points": [],
        "roadmap_edits": [],
        "summary": None,
        "started_at": _NOW,
        "ended_at": None,
    }
    fields.update(overrides)
    return _record(**fields)


def _dashboard_record(**overrides: Any) -> MagicMock:
    fields = {
        "user_email": _EMAIL,
        "name": "Exec view",
        "description": None,
        "widgets": [],
        "filters": {},
        "is_default": False,
    }
    fields.update(overrides)
    return _record(**fields)


def _override(app: FastAPI, factory: Any) -> AsyncMock:
    service = AsyncMock()
    app.dependency_overrides[factory] = lambda: service
    return service


# ---------------------------------------------------------------------------
# Health and identity
# ---------------------------------------------------------------------------


class TestHealthAndIdentity:
    @pytest.mark.asyncio()
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["status"] == "ok"
        assert body["version"] == __version__

    @pytest.mark.asyncio()
    async def test_missing_user_header_is_unauthorised(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)

        response = await client.get("/api/v1/assessments", headers={"X-User-Email": ""})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        service.list_assessments.assert_not_called()

    @pytest.mark.asyncio()
    async def test_caller_email_is_normalised(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)
        service.create_assessment.return_value = _assessment_record()

        response = await client.post("/api/v1/assessments", json={"organization_name": "Acme Corp"})

        assert response.status_code == status.HTTP_201_CREATED
        assert service.create_assessment.call_args.kwargs["created_by"] == _EMAIL


# ---------------------------------------------------------------------------
# Assessments and error mapping
# ---------------------------------------------------------------------------


class TestAssessmentRoutes:
    @pytest.mark.asyncio()
    async def test_create_returns_assessment(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)
        record = _assessment_record()
        service.create_assessment.return_value = record

        response = await client.post(
            "/api/v1/assessments",
            json={
                "organization_name": "Acme Corp",
                "departments": [{"name": "Sales", "user_count": 10, "hourly_rate": 50}],
                "compliance_requirements": ["SOC 2"],
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["id"] == str(record.id)
        assert body["status"] == "draft"
        data = service.create_assessment.call_args.args[0]
        assert data["departments"] == [{"name": "Sales", "user_count": 10, "hourly_rate": 50.0}]

    @pytest.mark.asyncio()
    async def test_request_validation_rejects_negative_users(
        self, app: FastAPI, client: AsyncClient
    ) -> None:
        service = _override(app, get_assessment_service)

        response = await client.post(
            "/api/v1/assessments",
            json={
                "organization_name": "Acme Corp",
                "departments": [{"name": "Sales", "user_count": -1, "hourly_rate": 50}],
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        service.create_assessment.assert_not_called()

    @pytest.mark.asyncio()
    async def test_not_found_body(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)
        missing = uuid.uuid4()
        service.get_assessment.side_effect = NotFoundError(message=f"Assessment {missing} not found.")

        response = await client.get(f"/api/v1/assessments/{missing}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {
            "error_code": "NOT_FOUND",
            "message": f"Assessment {missing} not found.",
        }

    @pytest.mark.asyncio()
    async def test_conflict_body(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)
        service.update_assessment.side_effect = ConflictError("Only drafts can be edited.")

        response = await client.patch(
            f"/api/v1/assessments/{uuid.uuid4()}", json={"organization_name": "Acme Group"}
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "INVALID_OPERATION"

    @pytest.mark.asyncio()
    async def test_update_sends_only_set_fields(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)
        service.update_assessment.return_value = _assessment_record(organization_name="Acme Group")

        await client.patch(f"/api/v1/assessments/{uuid.uuid4()}", json={"organization_name": "Acme Group"})

        assert service.update_assessment.call_args.args[1] == {"organization_name": "Acme Group"}

    @pytest.mark.asyncio()
    async def test_domain_validation_body(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)
        service.complete_assessment.side_effect = ValidationError(
            "At least one department is required to complete an assessment."
        )

        response = await client.post(f"/api/v1/assessments/{uuid.uuid4()}/complete")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_FAILED"

    @pytest.mark.asyncio()
    async def test_scenario_splits_changes_from_weights(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)
        service.run_scenario.return_value = {"name": "Lean", "score_changes": []}

        response = await client.post(
            f"/api/v1/assessments/{uuid.uuid4()}/scenarios",
            json={
                "name": "Lean",
                "compliance_requirements": ["SOC 2"],
                "scoring_weights": {"roi_weight": 1, "compliance_weight": 0},
            },
        )

        assert response.status_code == status.HTTP_200_OK
        _, changes = service.run_scenario.call_args.args
        assert changes == {"compliance_requirements": ["SOC 2"]}
        assert service.run_scenario.call_args.kwargs["name"] == "Lean"
        assert service.run_scenario.call_args.kwargs["scoring_weights"]["roi_weight"] == 1

    @pytest.mark.asyncio()
    async def test_compare_needs_two_platforms(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_assessment_service)

        response = await client.post(
            f"/api/v1/assessments/{uuid.uuid4()}/compare", json={"platforms": ["anthropic_claude"]}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        service.compare_platforms.assert_not_called()


# ---------------------------------------------------------------------------
# Strategies and sessions
# ---------------------------------------------------------------------------


class TestStrategyRoutes:
    @pytest.mark.asyncio()
    async def test_llm_failure_is_bad_gateway(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_strategy_service)
        service.generate_strategy.side_effect = LLMInvocationError("LLM request failed")

        response = await client.post("/api/v1/strategies", json={"assessment_id": str(uuid.uuid4())})

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json() == {"error_code": "LLM_UNAVAILABLE", "message": "LLM request failed"}

    @pytest.mark.asyncio()
    async def test_invalid_milestone_status_rejected(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_strategy_service)

        response = await client.put(
            f"/api/v1/strategies/{uuid.uuid4()}/milestones",
            json={"milestone_name": "Pilot", "status": "done-ish"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        service.update_milestone.assert_not_called()


class TestSessionRoutes:
    @pytest.mark.asyncio()
    async def test_vote_passes_caller(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_collaboration_service)
        session = _session_record()
        service.vote.return_value = session

        response = await client.post(
            f"/api/v1/sessions/{session.id}/points/dp_1/vote", json={"direction": "up"}
        )

        assert response.status_code == status.HTTP_200_OK
        session_id, point_id, user, direction = service.vote.call_args.args
        assert session_id == session.id
        assert point_id == "dp_1"
        assert user.email == _EMAIL
        assert direction == "up"

    @pytest.mark.asyncio()
    async def test_ended_session_conflict(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_collaboration_service)
        service.add_discussion_point.side_effect = ConflictError("Session has ended.")

        response = await client.post(
            f"/api/v1/sessions/{uuid.uuid4()}/points", json={"content": "Late idea"}
        )

        assert response.status_code == status.HTTP_409_CONFLICT


# ---------------------------------------------------------------------------
# Dashboards, notifications, reports
# ---------------------------------------------------------------------------


class TestDashboardRoutes:
    @pytest.mark.asyncio()
    async def test_widget_catalogue(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/dashboards/widgets")

        assert response.status_code == status.HTTP_200_OK
        assert "roi-overview" in {w["type"] for w in response.json()}

    @pytest.mark.asyncio()
    async def test_create_dashboard(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_dashboard_service)
        service.create_dashboard.return_value = _dashboard_record()

        response = await client.post(
            "/api/v1/dashboards", json={"name": "Exec view", "widget_types": ["roi-overview"]}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user_email"] == _EMAIL

    @pytest.mark.asyncio()
    async def test_delete_dashboard(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_dashboard_service)
        dashboard_id = uuid.uuid4()

        response = await client.delete(f"/api/v1/dashboards/{dashboard_id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        service.delete_dashboard.assert_awaited_once_with(dashboard_id, _EMAIL)


class TestNotificationRoutes:
    @pytest.mark.asyncio()
    async def test_read_all(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_notification_service)
        service.mark_all_read.return_value = 3

        response = await client.post("/api/v1/notifications/read-all")

        assert response.json() == {"updated": 3}

    @pytest.mark.asyncio()
    async def test_invalid_minimum_priority(self, app: FastAPI, client: AsyncClient) -> None:
        _override(app, get_notification_service)

        response = await client.put("/api/v1/notifications/settings", json={"minimum_priority": "urgent"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestReportRoutes:
    @pytest.mark.asyncio()
    async def test_run_due(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_report_service)
        generated, failed = uuid.uuid4(), uuid.uuid4()
        service.run_due_reports.return_value = {"generated": [generated], "failed": [failed]}

        response = await client.post("/api/v1/reports/run-due", json={"now": _NOW.isoformat()})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"generated": [str(generated)], "failed": [str(failed)]}
        assert service.run_due_reports.call_args.kwargs["now"] == _NOW

    @pytest.mark.asyncio()
    async def test_report_lookup_is_scoped_to_caller(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_report_service)
        report_id = uuid.uuid4()
        service.get_report.side_effect = NotFoundError(message=f"AutomatedReport {report_id} not found.")

        response = await client.get(f"/api/v1/reports/{report_id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert service.get_report.call_args.args == (report_id, _EMAIL)


# ---------------------------------------------------------------------------
# Catalogue, analytics, integrations
# ---------------------------------------------------------------------------


class TestCatalogueRoutes:
    @pytest.mark.asyncio()
    async def test_search(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_catalog_service)
        service.search.return_value = {
            "query": "secure assistant",
            "understanding": "Looking for a secure assistant",
            "extracted_criteria": {},
            "recommendations_summary": None,
            "results": [],
        }

        response = await client.post("/api/v1/platforms/search", json={"query": "secure assistant"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["understanding"] == "Looking for a secure assistant"

    @pytest.mark.asyncio()
    async def test_intake_options(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/platforms/intake-options")

        assert response.status_code == status.HTTP_200_OK
        assert "SOC 2" in response.json()["compliance_standards"]

    @pytest.mark.asyncio()
    async def test_analytics_overview(self, app: FastAPI, client: AsyncClient) -> None:
        service = _override(app, get_analytics_service)
        service.overview.return_value = {"total_assessments": 0}

        response = await client.get("/api/v1/analytics/overview", params={"time_range": "30d"})

        assert response.json() == {"total_assessments": 0}
        service.overview.assert_awaited_once_with("30d")

    @pytest.mark.asyncio()
    async def test_invoke_llm(self, app: FastAPI, client: AsyncClient) -> None:
        llm = AsyncMock()
        llm.invoke.return_value = {"answer": 42}
        app.dependency_overrides[get_llm_client] = lambda: llm

        response = await client.post(
            "/api/v1/integrations/invoke-llm",
            json={"prompt": "Answer", "response_json_schema": {"type": "object"}},
        )

        assert response.json() == {"answer": 42}
        llm.invoke.assert_awaited_once_with(
            "Answer",
            response_json_schema={"type": "object"},
            add_context_from_internet=False,
        )


# ---------------------------------------------------------------------------
# Generic entity store
# ---------------------------------------------------------------------------


class TestEntityRoutes:
    @pytest.mark.asyncio()
    async def test_unknown_entity(self, app: FastAPI, client: AsyncClient) -> None:
        async def _session() -> AsyncGenerator[MagicMock, None]:
            yield MagicMock()

        app.dependency_overrides[get_db_session] = _session

        response = await client.get("/api/v1/entities/Spaceship")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error_code"] == "NOT_FOUND"

    @pytest.mark.asyncio()
    async def test_query_params_become_filters(self, app: FastAPI, client: AsyncClient) -> None:
        repo = AsyncMock()
        repo.model = Assessment
        repo.filter.return_value = [MagicMock(to_dict=MagicMock(return_value={"status": "completed"}))]
        app.dependency_overrides[get_entity_repository] = lambda: repo

        response = await client.get(
            "/api/v1/entities/Assessment", params={"status": "completed", "limit": 5}
        )

        assert response.json() == [{"status": "completed"}]
        repo.filter.assert_awaited_once_with(
            {"status": "completed"}, sort="-created_date", limit=5, offset=0
        )

    @pytest.mark.asyncio()
    async def test_unknown_filter_field(self, app: FastAPI, client: AsyncClient) -> None:
        repo = AsyncMock()
        repo.model = Assessment
        app.dependency_overrides[get_entity_repository] = lambda: repo

        response = await client.get("/api/v1/entities/Assessment", params={"colour": "teal"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio()
    async def test_create_defaults_created_by(self, app: FastAPI, client: AsyncClient) -> None:
        repo = AsyncMock()
        repo.create.return_value = MagicMock(to_dict=MagicMock(return_value={"name": "x"}))
        app.dependency_overrides[get_entity_repository] = lambda: repo

        response = await client.post("/api/v1/entities/AIPlatform", json={"name": "x"})

        assert response.status_code == status.HTTP_201_CREATED
        repo.create.assert_awaited_once_with({"created_by": _EMAIL, "name": "x"})

    @pytest.mark.asyncio()
    async def test_create_parses_datetime_strings(self, app: FastAPI, client: AsyncClient) -> None:
        session = AsyncMock()
        session.add = MagicMock()
        app.dependency_overrides[get_entity_repository] = lambda: EntityRepository(session, AutomatedReport)

        response = await client.post(
            "/api/v1/entities/AutomatedReport",
            json={
                "user_email": _EMAIL,
                "report_name": "Weekly exec",
                "report_type": "executive",
                "scheduled_date": "2024-06-01T09:00:00Z",
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        stored = session.add.call_args.args[0]
        assert stored.scheduled_date == datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)
        assert response.json()["scheduled_date"] == "2024-06-01T09:00:00+00:00"

    @pytest.mark.asyncio()
    async def test_create_rejects_unparseable_datetime(self, app: FastAPI, client: AsyncClient) -> None:
        session = AsyncMock()
        session.add = MagicMock()
        app.dependency_overrides[get_entity_repository] = lambda: EntityRepository(session, AutomatedReport)

        response = await client.post(
            "/api/v1/entities/AutomatedReport",
            json={"report_name": "Weekly exec", "scheduled_date": "next tuesday"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_FAILED"
        session.add.assert_not_called()

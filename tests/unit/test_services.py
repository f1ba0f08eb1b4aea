"""Unit tests for the core services.

Repositories and engines are AsyncMocks; entities come from make_entity.
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from ai_adoption_assessment.core.identity import UserContext
from ai_adoption_assessment.core.services.analytics_service import AnalyticsService
from ai_adoption_assessment.core.services.anomaly_service import AnomalyService
from ai_adoption_assessment.core.services.assessment_service import AssessmentService
from ai_adoption_assessment.core.services.catalog_service import CatalogService
from ai_adoption_assessment.core.services.collaboration_service import (
    CollaborationService,
    apply_vote,
)
from ai_adoption_assessment.core.services.dashboard_service import DashboardService
from ai_adoption_assessment.core.services.notification_service import NotificationService
from ai_adoption_assessment.core.services.onboarding_service import OnboardingService
from ai_adoption_assessment.core.services.report_service import ReportService
from ai_adoption_assessment.core.services.strategy_service import (
    StrategyService,
    milestone_progress,
)
from ai_adoption_assessment.errors import (
    ConflictError,
    LLMInvocationError,
    NotFoundError,
    ValidationError,
)
from tests.unit.conftest import echo_create, echo_update, make_entity

_NOW = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)
_SALES = {"name": "Sales", "user_count": 10, "hourly_rate": 50.0}


def _assessment(**overrides):
    fields = {
        "organization_name": "Acme Corp",
        "status": "completed",
        "departments": [_SALES],
        "pain_points": [],
        "compliance_requirements": ["SOC 2"],
        "desired_integrations": ["Slack"],
        "scoring_weights": None,
        "assessment_date": _NOW,
        "compliance_analysis": {},
        "recommended_platforms": [],
    }
    fields.update(overrides)
    return make_entity(**fields)


# ---------------------------------------------------------------------------
# AssessmentService
# ---------------------------------------------------------------------------


class TestAssessmentService:
    @pytest.fixture()
    def repo(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        return repo

    @pytest.fixture()
    def scoring(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def compliance(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def forecasting(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def comparison(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def service(self, repo, scoring, compliance, forecasting, comparison) -> AssessmentService:
        return AssessmentService(repo, scoring, compliance, forecasting, comparison)

    @pytest.mark.asyncio()
    async def test_create_starts_as_draft(self, service: AssessmentService) -> None:
        created = await service.create_assessment(
            {"organization_name": "Acme Corp", "departments": [_SALES]}, created_by="ada@acme.com"
        )

        assert created.status == "draft"
        assert created.created_by == "ada@acme.com"

    @pytest.mark.asyncio()
    async def test_create_rejects_unknown_fields(self, service: AssessmentService, repo: AsyncMock) -> None:
        with pytest.raises(ValidationError, match="favourite_colour"):
            await service.create_assessment({"favourite_colour": "teal"}, created_by=None)
        repo.create.assert_not_called()

    @pytest.mark.asyncio()
    async def test_create_rejects_invalid_weights(self, service: AssessmentService) -> None:
        with pytest.raises(ValidationError):
            await service.create_assessment({"scoring_weights": {"speed_weight": 1.0}}, created_by=None)

    @pytest.mark.asyncio()
    async def test_list_rejects_unknown_status(self, service: AssessmentService) -> None:
        with pytest.raises(ValidationError):
            await service.list_assessments(status="archived")

    @pytest.mark.asyncio()
    async def test_update_completed_assessment_conflicts(
        self, service: AssessmentService, repo: AsyncMock
    ) -> None:
        repo.get.return_value = _assessment()

        with pytest.raises(ConflictError):
            await service.update_assessment(uuid.uuid4(), {"organization_name": "Other"})

    @pytest.mark.asyncio()
    async def test_complete_scores_and_stamps_date(
        self, service: AssessmentService, repo: AsyncMock
    ) -> None:
        draft = _assessment(status="draft", assessment_date=None)
        repo.get.return_value = draft
        echo_update(repo, draft)

        completed = await service.complete_assessment(draft.id)

        assert completed.status == "completed"
        assert completed.recommended_platforms
        assert completed.executive_summary.startswith("# Executive Summary")
        assert completed.assessment_date is not None
        changes = repo.update.call_args.args[1]
        assert "scoring_weights" not in changes

    @pytest.mark.asyncio()
    async def test_complete_with_weights_stores_them(
        self, service: AssessmentService, repo: AsyncMock
    ) -> None:
        draft = _assessment(status="draft")
        repo.get.return_value = draft
        echo_update(repo, draft)
        weights = {"compliance_weight": 1.0}

        completed = await service.complete_assessment(draft.id, scoring_weights=weights)

        assert completed.scoring_weights == weights
        assert completed.recommended_platforms[0]["score"] == pytest.approx(100.0)

    @pytest.mark.asyncio()
    async def test_complete_requires_departments(self, service: AssessmentService, repo: AsyncMock) -> None:
        repo.get.return_value = _assessment(status="draft", departments=[])

        with pytest.raises(ValidationError):
            await service.complete_assessment(uuid.uuid4())
        repo.update.assert_not_called()

    @pytest.mark.asyncio()
    async def test_ai_score_requires_completed(
        self, service: AssessmentService, repo: AsyncMock, scoring: AsyncMock
    ) -> None:
        repo.get.return_value = _assessment(status="draft")

        with pytest.raises(ConflictError):
            await service.generate_ai_score(uuid.uuid4())
        scoring.score_assessment.assert_not_called()

    @pytest.mark.asyncio()
    async def test_ai_score_stored(self, service: AssessmentService, repo: AsyncMock, scoring: AsyncMock) -> None:
        assessment = _assessment()
        repo.get.return_value = assessment
        echo_update(repo, assessment)
        scoring.score_assessment.return_value = {"overall_score": 71}

        updated = await service.generate_ai_score(assessment.id)

        assert updated.ai_assessment_score == {"overall_score": 71}

    @pytest.mark.asyncio()
    async def test_analyze_compliance_requires_requirements(
        self, service: AssessmentService, repo: AsyncMock
    ) -> None:
        repo.get.return_value = _assessment(compliance_requirements=[])

        with pytest.raises(ValidationError):
            await service.analyze_compliance(uuid.uuid4())

    @pytest.mark.asyncio()
    async def test_compliance_report_analyses_first_when_missing(
        self, service: AssessmentService, repo: AsyncMock, compliance: AsyncMock
    ) -> None:
        assessment = _assessment()
        repo.get.return_value = assessment
        echo_update(repo, assessment)
        compliance.analyze.return_value = {"overall_compliance_score": 64}
        compliance.generate_report.return_value = {"regulation": "GDPR"}

        report = await service.compliance_report(assessment.id, "GDPR")

        assert report == {"regulation": "GDPR"}
        compliance.analyze.assert_awaited_once()
        _, analysis, code = compliance.generate_report.call_args.args
        assert analysis == {"overall_compliance_score": 64}
        assert code == "GDPR"

    @pytest.mark.asyncio()
    async def test_forecast_unknown_kind(self, service: AssessmentService) -> None:
        with pytest.raises(ValidationError):
            await service.forecast(uuid.uuid4(), "weather")

    @pytest.mark.asyncio()
    async def test_roi_forecast_uses_other_completed_assessments(
        self, service: AssessmentService, repo: AsyncMock, forecasting: AsyncMock
    ) -> None:
        current = _assessment()
        earlier = _assessment(organization_name="Acme Corp")
        repo.get.return_value = current
        repo.filter.return_value = [earlier, current]
        forecasting.predict_future_roi.return_value = {"confidence_score": 80}

        result = await service.forecast(current.id, "roi")

        assert result == {"confidence_score": 80}
        criteria = repo.filter.call_args.args[0]
        assert criteria == {"organization_name": "Acme Corp", "status": "completed"}
        _, history, _ = forecasting.predict_future_roi.call_args.args
        assert [h["id"] for h in history] == [earlier.id]

    @pytest.mark.asyncio()
    async def test_risk_forecast_skips_history(
        self, service: AssessmentService, repo: AsyncMock, forecasting: AsyncMock
    ) -> None:
        repo.get.return_value = _assessment()

        await service.forecast(uuid.uuid4(), "risk", market_trends={"regulation": "tightening"})

        repo.filter.assert_not_called()
        forecasting.predict_risks_and_compliance.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_scenario_leaves_assessment_untouched(
        self, service: AssessmentService, repo: AsyncMock
    ) -> None:
        repo.get.return_value = _assessment()
        doubled = [{**_SALES, "user_count": 20}]

        result = await service.run_scenario(uuid.uuid4(), {"departments": doubled}, name="Double sales")

        assert result["name"] == "Double sales"
        assert result["inputs"]["departments"] == doubled
        assert result["inputs"]["compliance_requirements"] == ["SOC 2"]
        assert result["roi_calculations"]["anthropic_claude"]["total_cost"] == pytest.approx(6_000.0)
        assert len(result["score_changes"]) == 4
        repo.update.assert_not_called()

    @pytest.mark.asyncio()
    async def test_scenario_requires_completed(self, service: AssessmentService, repo: AsyncMock) -> None:
        repo.get.return_value = _assessment(status="draft")

        with pytest.raises(ConflictError):
            await service.run_scenario(uuid.uuid4(), {"pain_points": []})

    @pytest.mark.asyncio()
    async def test_scenario_needs_departments(self, service: AssessmentService, repo: AsyncMock) -> None:
        repo.get.return_value = _assessment()

        with pytest.raises(ValidationError):
            await service.run_scenario(uuid.uuid4(), {"departments": []})

    @pytest.mark.asyncio()
    async def test_suggest_scenarios(self, service: AssessmentService, repo: AsyncMock) -> None:
        repo.get.return_value = _assessment()

        suggestions = await service.suggest_scenarios(uuid.uuid4())

        assert len(suggestions) == 4
        assert suggestions[0]["changes"]["departments"][0]["user_count"] == 5

    @pytest.mark.asyncio()
    async def test_compare_platforms(
        self, service: AssessmentService, repo: AsyncMock, comparison: AsyncMock
    ) -> None:
        repo.get.return_value = _assessment()
        comparison.compare.return_value = {"executive_summary": "Copilot fits Microsoft shops"}

        result = await service.compare_platforms(uuid.uuid4(), ["microsoft_copilot", "Anthropic Claude"])

        assert [row["platform"] for row in result["platforms"]] == ["microsoft_copilot", "anthropic_claude"]
        assert result["analysis"] == {"executive_summary": "Copilot fits Microsoft shops"}
        assessment_data, rows = comparison.compare.call_args.args
        assert assessment_data["organization_name"] == "Acme Corp"
        assert rows == result["platforms"]

    @pytest.mark.asyncio()
    async def test_compare_rejects_single_platform(
        self, service: AssessmentService, repo: AsyncMock, comparison: AsyncMock
    ) -> None:
        repo.get.return_value = _assessment()

        with pytest.raises(ValidationError):
            await service.compare_platforms(uuid.uuid4(), ["microsoft_copilot"])
        comparison.compare.assert_not_called()


# ---------------------------------------------------------------------------
# StrategyService
# ---------------------------------------------------------------------------


class TestMilestoneProgress:
    def test_no_milestones(self) -> None:
        assert milestone_progress([]) == 0

    def test_rounds_half_up(self) -> None:
        milestones = [{"status": "completed"}] + [{"status": "in_progress"}] * 7

        # 1/8 = 12.5%
        assert milestone_progress(milestones) == 13

    def test_two_of_three(self) -> None:
        milestones = [{"status": "completed"}, {"status": "completed"}, {"status": "blocked"}]

        assert milestone_progress(milestones) == 67


class TestStrategyService:
    @pytest.fixture()
    def strategies(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        return repo

    @pytest.fixture()
    def assessments(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def engine(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def service(self, strategies, assessments, engine) -> StrategyService:
        return StrategyService(strategies, assessments, engine)

    def _strategy(self, **overrides):
        fields = {
            "organization_name": "Acme Corp",
            "assessment_id": None,
            "platform": "Anthropic Claude",
            "status": "active",
            "milestones": [
                {"milestone_name": "Pilot", "status": "in_progress", "progress_percentage": 40},
                {"milestone_name": "Rollout", "status": "not_started", "progress_percentage": 0},
            ],
            "progress_tracking": {"current_phase": "pilot"},
            "checkpoints": [],
        }
        fields.update(overrides)
        return make_entity(**fields)

    @pytest.mark.asyncio()
    async def test_generate_requires_completed_assessment(
        self, service: StrategyService, assessments: AsyncMock, engine: AsyncMock
    ) -> None:
        assessments.get.return_value = _assessment(status="draft")

        with pytest.raises(ConflictError):
            await service.generate_strategy(uuid.uuid4(), created_by="ada@acme.com")
        engine.generate_adoption_strategy.assert_not_called()

    @pytest.mark.asyncio()
    async def test_generate_persists_engine_fields(
        self, service: StrategyService, assessments: AsyncMock, engine: AsyncMock
    ) -> None:
        assessments.get.return_value = _assessment()
        engine.generate_adoption_strategy.return_value = {
            "organization_name": "Acme Corp",
            "platform": "Anthropic Claude",
            "status": "draft",
        }

        strategy = await service.generate_strategy(uuid.uuid4(), created_by="ada@acme.com")

        assert strategy.platform == "Anthropic Claude"
        assert strategy.created_by == "ada@acme.com"

    @pytest.mark.asyncio()
    async def test_update_status_validates(self, service: StrategyService) -> None:
        with pytest.raises(ValidationError):
            await service.update_status(uuid.uuid4(), "abandoned")

    @pytest.mark.asyncio()
    async def test_completing_milestone_recomputes_progress(
        self, service: StrategyService, strategies: AsyncMock
    ) -> None:
        strategy = self._strategy()
        strategies.get.return_value = strategy
        echo_update(strategies, strategy)

        updated = await service.update_milestone(strategy.id, "Pilot", "completed")

        pilot = updated.milestones[0]
        assert pilot["status"] == "completed"
        assert pilot["progress_percentage"] == 100
        assert updated.progress_tracking == {"current_phase": "pilot", "overall_progress": 50}

    @pytest.mark.asyncio()
    async def test_unknown_milestone(self, service: StrategyService, strategies: AsyncMock) -> None:
        strategies.get.return_value = self._strategy()

        with pytest.raises(NotFoundError):
            await service.update_milestone(uuid.uuid4(), "Launch Party", "completed")

    @pytest.mark.asyncio()
    async def test_invalid_milestone_status(self, service: StrategyService, strategies: AsyncMock) -> None:
        with pytest.raises(ValidationError):
            await service.update_milestone(uuid.uuid4(), "Pilot", "done-ish")
        strategies.get.assert_not_called()

    @pytest.mark.asyncio()
    async def test_update_progress_keeps_unset_fields(
        self, service: StrategyService, strategies: AsyncMock
    ) -> None:
        strategy = self._strategy(progress_tracking={"current_phase": "pilot", "blockers": ["budget"]})
        strategies.get.return_value = strategy
        echo_update(strategies, strategy)

        updated = await service.update_progress(strategy.id, achievements=["Pilot launched"])

        assert updated.progress_tracking == {
            "current_phase": "pilot",
            "blockers": ["budget"],
            "achievements": ["Pilot launched"],
            "overall_progress": 0,
        }

    @pytest.mark.asyncio()
    async def test_identify_risks_loads_linked_assessment(
        self,
        service: StrategyService,
        strategies: AsyncMock,
        assessments: AsyncMock,
        engine: AsyncMock,
    ) -> None:
        assessment = _assessment()
        strategy = self._strategy(assessment_id=assessment.id)
        strategies.get.return_value = strategy
        assessments.get.return_value = assessment
        echo_update(strategies, strategy)
        engine.identify_risks.return_value = {"identified_risks": [{"risk_title": "Shadow AI"}]}

        updated = await service.identify_risks(strategy.id)

        assessments.get.assert_awaited_once_with(assessment.id)
        assert engine.identify_risks.call_args.args[0]["organization_name"] == "Acme Corp"
        assert updated.risk_analysis["identified_risks"][0]["risk_title"] == "Shadow AI"

    @pytest.mark.asyncio()
    async def test_checkpoint_appended(
        self, service: StrategyService, strategies: AsyncMock, engine: AsyncMock
    ) -> None:
        strategy = self._strategy(checkpoints=[{"checkpoint_date": "2024-05-01"}])
        strategies.get.return_value = strategy
        echo_update(strategies, strategy)
        engine.create_checkpoint.return_value = {"checkpoint_date": "2024-06-01"}

        updated = await service.create_checkpoint(strategy.id)

        assert [c["checkpoint_date"] for c in updated.checkpoints] == ["2024-05-01", "2024-06-01"]


# ---------------------------------------------------------------------------
# CollaborationService
# ---------------------------------------------------------------------------


class TestApplyVote:
    def test_vote_added(self) -> None:
        point = apply_vote({"id": "dp_1", "votes": {"up": [], "down": []}}, "a@x.com", "up")

        assert point["votes"] == {"up": ["a@x.com"], "down": []}

    def test_same_vote_twice_withdraws(self) -> None:
        point = apply_vote({"votes": {"up": ["a@x.com"], "down": []}}, "a@x.com", "up")

        assert point["votes"]["up"] == []

    def test_opposite_vote_moves(self) -> None:
        point = apply_vote({"votes": {"up": ["a@x.com", "b@x.com"], "down": []}}, "a@x.com", "down")

        assert point["votes"] == {"down": ["a@x.com"], "up": ["b@x.com"]}

    def test_original_point_untouched(self) -> None:
        original = {"votes": {"up": [], "down": []}}

        apply_vote(original, "a@x.com", "up")

        assert original["votes"]["up"] == []


class TestCollaborationService:
    @pytest.fixture()
    def sessions(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        return repo

    @pytest.fixture()
    def strategies(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def engine(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def service(self, sessions, strategies, engine) -> CollaborationService:
        return CollaborationService(sessions, strategies, engine)

    def _session(self, **overrides):
        fields = {
            "strategy_id": uuid.uuid4(),
            "status": "active",
            "participants": [{"email": "ada@acme.com", "role": "facilitator"}],
            "discussion_points": [
                {"id": "dp_1", "content": "Start with Sales", "votes": {"up": [], "down": []}, "replies": []}
            ],
            "roadmap_edits": [{"id": "edit_1", "status": "proposed"}],
        }
        fields.update(overrides)
        return make_entity(**fields)

    @pytest.mark.asyncio()
    async def test_start_makes_caller_facilitator(
        self, service: CollaborationService, user: UserContext
    ) -> None:
        session = await service.start_session(uuid.uuid4(), user)

        assert session.status == "active"
        assert session.session_name.startswith("Strategy Session - ")
        [facilitator] = session.participants
        assert facilitator["email"] == user.email
        assert facilitator["role"] == "facilitator"

    @pytest.mark.asyncio()
    async def test_join_is_idempotent(
        self, service: CollaborationService, sessions: AsyncMock, user: UserContext
    ) -> None:
        session = self._session()
        sessions.get.return_value = session

        joined = await service.join_session(session.id, user)

        assert joined is session
        sessions.update.assert_not_called()

    @pytest.mark.asyncio()
    async def test_join_adds_participant(self, service: CollaborationService, sessions: AsyncMock) -> None:
        session = self._session()
        sessions.get.return_value = session
        echo_update(sessions, session)
        guest = UserContext(email="grace@acme.com", full_name="Grace Hopper", role="user")

        joined = await service.join_session(session.id, guest)

        assert [p["email"] for p in joined.participants] == ["ada@acme.com", "grace@acme.com"]
        assert joined.participants[1]["role"] == "participant"

    @pytest.mark.asyncio()
    async def test_add_point(
        self, service: CollaborationService, sessions: AsyncMock, user: UserContext
    ) -> None:
        session = self._session()
        sessions.get.return_value = session
        echo_update(sessions, session)

        updated = await service.add_discussion_point(session.id, user, "  Pilot in Q3  ", "decision")

        point = updated.discussion_points[-1]
        assert point["id"].startswith("dp_")
        assert point["content"] == "Pilot in Q3"
        assert point["type"] == "decision"
        assert point["resolved"] is False

    @pytest.mark.asyncio()
    @pytest.mark.parametrize(("content", "point_type"), [("   ", "comment"), ("Fine", "rant")])
    async def test_add_point_validation(
        self, service: CollaborationService, user: UserContext, content: str, point_type: str
    ) -> None:
        with pytest.raises(ValidationError):
            await service.add_discussion_point(uuid.uuid4(), user, content, point_type)

    @pytest.mark.asyncio()
    async def test_ended_session_rejects_changes(
        self, service: CollaborationService, sessions: AsyncMock, user: UserContext
    ) -> None:
        sessions.get.return_value = self._session(status="ended")

        with pytest.raises(ConflictError):
            await service.add_discussion_point(uuid.uuid4(), user, "Too late")

    @pytest.mark.asyncio()
    async def test_vote_on_point(
        self, service: CollaborationService, sessions: AsyncMock, user: UserContext
    ) -> None:
        session = self._session()
        sessions.get.return_value = session
        echo_update(sessions, session)

        updated = await service.vote(session.id, "dp_1", user, "up")

        assert updated.discussion_points[0]["votes"]["up"] == [user.email]

    @pytest.mark.asyncio()
    async def test_vote_on_missing_point(
        self, service: CollaborationService, sessions: AsyncMock, user: UserContext
    ) -> None:
        sessions.get.return_value = self._session()

        with pytest.raises(NotFoundError):
            await service.vote(uuid.uuid4(), "dp_missing", user, "up")

    @pytest.mark.asyncio()
    async def test_review_edit(self, service: CollaborationService, sessions: AsyncMock) -> None:
        session = self._session()
        sessions.get.return_value = session
        echo_update(sessions, session)

        updated = await service.review_roadmap_edit(session.id, "edit_1", "approved")

        assert updated.roadmap_edits[0]["status"] == "approved"

    @pytest.mark.asyncio()
    async def test_propose_edit_with_analysis(
        self,
        service: CollaborationService,
        sessions: AsyncMock,
        strategies: AsyncMock,
        engine: AsyncMock,
        user: UserContext,
    ) -> None:
        session = self._session(roadmap_edits=[])
        sessions.get.return_value = session
        strategies.get.return_value = make_entity(organization_name="Acme Corp")
        echo_update(sessions, session)
        engine.analyze_roadmap_edit.return_value = {"impact_level": "medium"}

        updated = await service.propose_roadmap_edit(session.id, user, "Pilot", "Add Finance team")

        [edit] = updated.roadmap_edits
        assert edit["status"] == "proposed"
        assert edit["ai_analysis"] == {"impact_level": "medium"}

    @pytest.mark.asyncio()
    async def test_suggestions_not_stored(
        self,
        service: CollaborationService,
        sessions: AsyncMock,
        strategies: AsyncMock,
        engine: AsyncMock,
    ) -> None:
        sessions.get.return_value = self._session()
        strategies.get.return_value = make_entity(organization_name="Acme Corp")
        engine.generate_suggestions.return_value = {"suggestions": []}

        result = await service.suggestions(uuid.uuid4(), current_topic="budget")

        assert result == {"suggestions": []}
        sessions.update.assert_not_called()

    @pytest.mark.asyncio()
    async def test_end_session(self, service: CollaborationService, sessions: AsyncMock) -> None:
        session = self._session()
        sessions.get.return_value = session
        echo_update(sessions, session)

        ended = await service.end_session(session.id)

        assert ended.status == "ended"
        assert ended.ended_at is not None


# ---------------------------------------------------------------------------
# DashboardService
# ---------------------------------------------------------------------------


class TestDashboardService:
    @pytest.fixture()
    def repo(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        repo.filter.return_value = []
        return repo

    @pytest.fixture()
    def service(self, repo) -> DashboardService:
        return DashboardService(repo)

    @pytest.mark.asyncio()
    async def test_create_with_widgets(self, service: DashboardService) -> None:
        dashboard = await service.create_dashboard(
            "ada@acme.com", " Exec view ", widget_types=["roi-overview", "strategy-progress"]
        )

        assert dashboard.name == "Exec view"
        assert [w["position"] for w in dashboard.widgets] == [0, 1]
        assert dashboard.widgets[0]["type"] == "roi-overview"

    @pytest.mark.asyncio()
    async def test_create_rejects_unknown_widget(self, service: DashboardService, repo: AsyncMock) -> None:
        with pytest.raises(ValidationError):
            await service.create_dashboard("ada@acme.com", "Board", widget_types=["lava_lamp"])
        repo.create.assert_not_called()

    @pytest.mark.asyncio()
    async def test_new_default_clears_previous(self, service: DashboardService, repo: AsyncMock) -> None:
        previous = make_entity(user_email="ada@acme.com", is_default=True)
        repo.filter.return_value = [previous]

        await service.create_dashboard("ada@acme.com", "Main", is_default=True)

        repo.update.assert_awaited_once_with(previous.id, {"is_default": False})

    @pytest.mark.asyncio()
    async def test_other_users_dashboard_is_missing(self, service: DashboardService, repo: AsyncMock) -> None:
        repo.get.return_value = make_entity(user_email="grace@acme.com")

        with pytest.raises(NotFoundError):
            await service.get_dashboard(uuid.uuid4(), "ada@acme.com")

    @pytest.mark.asyncio()
    async def test_update_rejects_unknown_fields(self, service: DashboardService) -> None:
        with pytest.raises(ValidationError):
            await service.update_dashboard(uuid.uuid4(), "ada@acme.com", {"user_email": "x@y.com"})

    @pytest.mark.asyncio()
    async def test_move_widget(self, service: DashboardService, repo: AsyncMock) -> None:
        dashboard = make_entity(
            user_email="ada@acme.com",
            widgets=[
                {"id": "a", "type": "roi-overview", "position": 0},
                {"id": "b", "type": "strategy-progress", "position": 1},
            ],
        )
        repo.get.return_value = dashboard
        echo_update(repo, dashboard)

        updated = await service.move_widget(dashboard.id, "ada@acme.com", "b", "up")

        assert [(w["id"], w["position"]) for w in updated.widgets] == [("b", 0), ("a", 1)]

    @pytest.mark.asyncio()
    async def test_delete_checks_owner(self, service: DashboardService, repo: AsyncMock) -> None:
        repo.get.return_value = make_entity(user_email="ada@acme.com")
        dashboard_id = uuid.uuid4()

        await service.delete_dashboard(dashboard_id, "ada@acme.com")

        repo.delete.assert_awaited_once_with(dashboard_id)


# ---------------------------------------------------------------------------
# NotificationService
# ---------------------------------------------------------------------------


class TestNotificationService:
    @pytest.fixture()
    def notifications(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        return repo

    @pytest.fixture()
    def user_settings(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        repo.filter.return_value = []
        return repo

    @pytest.fixture()
    def strategies(self) -> AsyncMock:
        repo = AsyncMock()
        repo.filter.return_value = []
        return repo

    @pytest.fixture()
    def flows(self) -> AsyncMock:
        repo = AsyncMock()
        repo.filter.return_value = []
        return repo

    @pytest.fixture()
    def engine(self) -> AsyncMock:
        engine = AsyncMock()
        engine.recommend.return_value = []
        return engine

    @pytest.fixture()
    def service(self, notifications, user_settings, strategies, flows, engine) -> NotificationService:
        return NotificationService(
            notifications,
            user_settings,
            strategies,
            flows,
            engine,
            default_types=["alert", "reminder", "update", "recommendation", "achievement"],
        )

    @pytest.mark.asyncio()
    async def test_settings_created_on_first_use(self, service: NotificationService) -> None:
        settings = await service.get_user_settings("ada@acme.com")

        assert settings.minimum_priority == "medium"
        assert "alert" in settings.enabled_notification_types

    @pytest.mark.asyncio()
    async def test_settings_reject_unknown_type(self, service: NotificationService) -> None:
        with pytest.raises(ValidationError):
            await service.update_user_settings("ada@acme.com", enabled_notification_types=["gossip"])

    @pytest.mark.asyncio()
    async def test_generate_filters_by_priority(
        self,
        service: NotificationService,
        user_settings: AsyncMock,
        strategies: AsyncMock,
        flows: AsyncMock,
        engine: AsyncMock,
        user: UserContext,
    ) -> None:
        user_settings.filter.return_value = [
            make_entity(
                user_email=user.email,
                enabled_notification_types=["alert", "reminder", "recommendation"],
                minimum_priority="high",
            )
        ]
        strategies.filter.return_value = [
            make_entity(
                organization_name="Acme Corp",
                milestones=[],
                risk_analysis={"identified_risks": [{"severity": "critical", "status": "open"}]},
            )
        ]
        flows.filter.return_value = [make_entity(progress={"steps_completed": 2, "total_steps": 5})]
        engine.recommend.return_value = [
            {"user_email": user.email, "type": "recommendation", "priority": "low", "title": "Tip"}
        ]

        created = await service.generate_contextual_notifications(user)

        # The medium reminder and low recommendation fall below 'high'
        assert [n.type for n in created] == ["alert"]
        assert created[0].title == "1 Critical Risk Detected"
        assert created[0].created_by == user.email
        assert engine.recommend.call_args.kwargs["critical_risks"] == 1

    @pytest.mark.asyncio()
    async def test_recommendations_skipped_when_disabled(
        self,
        service: NotificationService,
        user_settings: AsyncMock,
        engine: AsyncMock,
        user: UserContext,
    ) -> None:
        user_settings.filter.return_value = [
            make_entity(enabled_notification_types=["alert"], minimum_priority="low")
        ]

        created = await service.generate_contextual_notifications(user)

        assert created == []
        engine.recommend.assert_not_called()

    @pytest.mark.asyncio()
    async def test_mark_read_other_user(self, service: NotificationService, notifications: AsyncMock) -> None:
        notifications.get.return_value = make_entity(user_email="grace@acme.com", is_read=False)

        with pytest.raises(NotFoundError):
            await service.mark_read(uuid.uuid4(), "ada@acme.com")

    @pytest.mark.asyncio()
    async def test_mark_all_read_counts(self, service: NotificationService, notifications: AsyncMock) -> None:
        notifications.filter.return_value = [make_entity(is_read=False), make_entity(is_read=False)]

        assert await service.mark_all_read("ada@acme.com") == 2
        assert notifications.update.await_count == 2


# ---------------------------------------------------------------------------
# OnboardingService
# ---------------------------------------------------------------------------


class TestOnboardingService:
    @pytest.fixture()
    def flows(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        repo.filter.return_value = []
        return repo

    @pytest.fixture()
    def assessments(self) -> AsyncMock:
        repo = AsyncMock()
        repo.filter.return_value = []
        return repo

    @pytest.fixture()
    def engine(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def service(self, flows, assessments, engine) -> OnboardingService:
        return OnboardingService(flows, assessments, engine)

    def _flow(self, **overrides):
        fields = {
            "user_email": "ada@acme.com",
            "status": "in_progress",
            "progress": {"steps_completed": 4, "total_steps": 5, "modules_explored": ["intro"]},
            "interactive_tips": [{"tip_id": "tip_1", "completed": False}],
        }
        fields.update(overrides)
        return make_entity(**fields)

    @pytest.mark.asyncio()
    async def test_start_returns_existing_flow(
        self, service: OnboardingService, flows: AsyncMock, engine: AsyncMock, user: UserContext
    ) -> None:
        existing = self._flow()
        flows.filter.return_value = [existing]

        assert await service.start_flow(user) is existing
        engine.generate_flow.assert_not_called()

    @pytest.mark.asyncio()
    async def test_start_personalises_with_latest_assessment(
        self,
        service: OnboardingService,
        assessments: AsyncMock,
        engine: AsyncMock,
        user: UserContext,
    ) -> None:
        assessments.filter.return_value = [_assessment()]
        engine.generate_flow.return_value = {"user_email": user.email, "status": "in_progress"}

        flow = await service.start_flow(user)

        assert flow.created_by == user.email
        assessment = engine.generate_flow.call_args.args[3]
        assert assessment["organization_name"] == "Acme Corp"

    @pytest.mark.asyncio()
    async def test_last_step_completes_flow(self, service: OnboardingService, flows: AsyncMock) -> None:
        flow = self._flow()
        flows.get.return_value = flow
        echo_update(flows, flow)

        updated = await service.complete_step(flow.id, "ada@acme.com", module="roi", minutes_spent=7)

        assert updated.status == "completed"
        assert updated.progress["steps_completed"] == 5
        assert updated.progress["modules_explored"] == ["intro", "roi"]
        assert updated.progress["time_spent_minutes"] == 7

    @pytest.mark.asyncio()
    async def test_step_on_skipped_flow(self, service: OnboardingService, flows: AsyncMock) -> None:
        flows.get.return_value = self._flow(status="skipped")

        with pytest.raises(ConflictError):
            await service.complete_step(uuid.uuid4(), "ada@acme.com")

    @pytest.mark.asyncio()
    async def test_unknown_tip(self, service: OnboardingService, flows: AsyncMock) -> None:
        flows.get.return_value = self._flow()

        with pytest.raises(NotFoundError):
            await service.complete_tip(uuid.uuid4(), "ada@acme.com", "tip_404")

    @pytest.mark.asyncio()
    async def test_guidance_blank_page(self, service: OnboardingService, user: UserContext) -> None:
        with pytest.raises(ValidationError):
            await service.guidance("  ", user)


# ---------------------------------------------------------------------------
# AnomalyService
# ---------------------------------------------------------------------------


class TestAnomalyService:
    @pytest.mark.asyncio()
    async def test_below_baseline_creates_nothing(self) -> None:
        anomalies = AsyncMock()
        echo_create(anomalies)
        assessments = AsyncMock()
        assessments.filter.return_value = [_assessment(total_annual_savings=100.0)] * 3
        service = AnomalyService(anomalies, assessments)

        created = await service.detect("ada@acme.com", now=_NOW)

        assert created == []
        assert assessments.filter.call_args.args[0] == {"status": "completed"}

    @pytest.mark.asyncio()
    async def test_list_rejects_unknown_status(self) -> None:
        service = AnomalyService(AsyncMock(), AsyncMock())

        with pytest.raises(ValidationError):
            await service.list_anomalies(status="ignored")

    @pytest.mark.asyncio()
    async def test_acknowledge(self) -> None:
        anomalies = AsyncMock()
        service = AnomalyService(anomalies, AsyncMock())
        anomaly_id = uuid.uuid4()

        await service.acknowledge(anomaly_id)

        anomalies.update.assert_awaited_once_with(anomaly_id, {"status": "acknowledged"})


# ---------------------------------------------------------------------------
# ReportService
# ---------------------------------------------------------------------------


class TestReportService:
    @pytest.fixture()
    def reports(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        return repo

    @pytest.fixture()
    def templates(self) -> AsyncMock:
        repo = AsyncMock()
        echo_create(repo)
        return repo

    @pytest.fixture()
    def assessments(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def strategies(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def engine(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture()
    def service(self, reports, templates, assessments, strategies, engine) -> ReportService:
        return ReportService(reports, templates, assessments, strategies, engine)

    def _report(self, **overrides):
        fields = {
            "user_email": "ada@acme.com",
            "report_name": "Weekly exec",
            "report_type": "executive",
            "frequency": "weekly",
            "status": "scheduled",
            "next_run": _NOW,
            "template_id": None,
            "assessment_id": uuid.uuid4(),
            "strategy_id": None,
        }
        fields.update(overrides)
        return make_entity(**fields)

    @pytest.mark.asyncio()
    async def test_schedule_sets_first_run(self, service: ReportService) -> None:
        report = await service.schedule_report("ada@acme.com", "Exec", "executive", _NOW, "monthly")

        assert report.next_run == _NOW
        assert report.status == "scheduled"
        assert report.recipients == []

    @pytest.mark.asyncio()
    @pytest.mark.parametrize(("report_type", "frequency"), [("gossip", "once"), ("executive", "hourly")])
    async def test_schedule_validation(self, service: ReportService, report_type: str, frequency: str) -> None:
        with pytest.raises(ValidationError):
            await service.schedule_report("ada@acme.com", "X", report_type, _NOW, frequency)

    @pytest.mark.asyncio()
    async def test_template_rejects_unknown_section(self, service: ReportService) -> None:
        with pytest.raises(ValidationError):
            await service.create_template("T", "custom", [{"type": "horoscope"}])

    @pytest.mark.asyncio()
    async def test_run_advances_from_scheduled_slot(
        self, service: ReportService, reports: AsyncMock, assessments: AsyncMock
    ) -> None:
        report = self._report()
        reports.get.return_value = report
        assessments.get.return_value = _assessment()
        echo_update(reports, report)
        late = _NOW + timedelta(hours=5)

        updated = await service.run_report(report.id, "ada@acme.com", now=late)

        assert updated.next_run == _NOW + timedelta(days=7)
        assert updated.last_run == late
        assert updated.status == "scheduled"
        assert [s["type"] for s in updated.content["sections"]] == [
            "overview",
            "recommendations",
            "roi",
            "risks",
        ]

    @pytest.mark.asyncio()
    async def test_one_off_report_becomes_generated(
        self, service: ReportService, reports: AsyncMock, assessments: AsyncMock
    ) -> None:
        report = self._report(frequency="once")
        reports.get.return_value = report
        assessments.get.return_value = _assessment()
        echo_update(reports, report)

        updated = await service.run_report(report.id, "ada@acme.com", now=_NOW)

        assert updated.status == "generated"
        assert updated.next_run is None

    @pytest.mark.asyncio()
    async def test_local_report_needs_assessment(self, service: ReportService, reports: AsyncMock) -> None:
        reports.get.return_value = self._report(assessment_id=None)

        with pytest.raises(ValidationError):
            await service.run_report(uuid.uuid4(), "ada@acme.com", now=_NOW)

    @pytest.mark.asyncio()
    async def test_pause_requires_scheduled(self, service: ReportService, reports: AsyncMock) -> None:
        reports.get.return_value = self._report(status="generated")

        with pytest.raises(ConflictError):
            await service.pause(uuid.uuid4(), "ada@acme.com")

    @pytest.mark.asyncio()
    async def test_resume_failed_report(self, service: ReportService, reports: AsyncMock) -> None:
        report = self._report(status="failed", error_message="LLM down")
        reports.get.return_value = report
        echo_update(reports, report)

        resumed = await service.resume(report.id, "ada@acme.com")

        assert resumed.status == "scheduled"
        assert resumed.error_message is None

    @pytest.mark.asyncio()
    async def test_run_due_isolates_failures(
        self,
        service: ReportService,
        reports: AsyncMock,
        strategies: AsyncMock,
        assessments: AsyncMock,
        engine: AsyncMock,
    ) -> None:
        good = self._report(report_type="performance_summary")
        bad = self._report(report_type="performance_summary")
        future = self._report(next_run=_NOW + timedelta(days=1))
        reports.filter.return_value = [good, bad, future]
        strategies.filter.return_value = []
        assessments.filter.return_value = []
        engine.performance_summary.side_effect = [
            {"overall_health": "good"},
            LLMInvocationError("LLM request failed"),
        ]

        outcome = await service.run_due_reports(now=_NOW)

        assert outcome == {"generated": [good.id], "failed": [bad.id]}
        failed_call = reports.update.call_args_list[-1]
        assert failed_call.args[0] == bad.id
        assert failed_call.args[1]["status"] == "failed"
        assert failed_call.args[1]["error_message"] == "LLM request failed"

    @pytest.mark.asyncio()
    async def test_run_due_marks_bad_frequency_failed_and_continues(
        self,
        service: ReportService,
        reports: AsyncMock,
        strategies: AsyncMock,
        assessments: AsyncMock,
        engine: AsyncMock,
    ) -> None:
        hourly = self._report(report_type="performance_summary", frequency="hourly")
        daily = self._report(report_type="performance_summary", frequency="daily")
        reports.filter.return_value = [hourly, daily]
        strategies.filter.return_value = []
        assessments.filter.return_value = []
        engine.performance_summary.return_value = {"overall_health": "good"}

        outcome = await service.run_due_reports(now=_NOW)

        assert outcome == {"generated": [daily.id], "failed": [hourly.id]}
        hourly_call = reports.update.call_args_list[0]
        assert hourly_call.args[0] == hourly.id
        assert hourly_call.args[1]["status"] == "failed"
        assert "hourly" in hourly_call.args[1]["error_message"]

    @pytest.mark.asyncio()
    async def test_run_due_survives_unexpected_error(
        self,
        service: ReportService,
        reports: AsyncMock,
        strategies: AsyncMock,
        assessments: AsyncMock,
        engine: AsyncMock,
    ) -> None:
        broken = self._report(report_type="performance_summary")
        good = self._report(report_type="performance_summary")
        reports.filter.return_value = [broken, good]
        strategies.filter.return_value = []
        assessments.filter.return_value = []
        engine.performance_summary.side_effect = [RuntimeError("socket closed"), {"overall_health": "good"}]

        outcome = await service.run_due_reports(now=_NOW)

        assert outcome == {"generated": [good.id], "failed": [broken.id]}
        assert reports.update.call_args_list[0].args[1]["error_message"] == "socket closed"

    @pytest.mark.asyncio()
    async def test_run_due_reads_naive_now_as_utc(
        self,
        service: ReportService,
        reports: AsyncMock,
        strategies: AsyncMock,
        assessments: AsyncMock,
        engine: AsyncMock,
    ) -> None:
        report = self._report(report_type="performance_summary")
        reports.filter.return_value = [report]
        strategies.filter.return_value = []
        assessments.filter.return_value = []
        engine.performance_summary.return_value = {"overall_health": "good"}

        outcome = await service.run_due_reports(now=datetime(2024, 6, 1, 9, 0))

        assert outcome == {"generated": [report.id], "failed": []}
        changes = reports.update.call_args.args[1]
        assert changes["last_run"] == _NOW
        assert changes["last_run"].tzinfo is not None
        assert changes["next_run"] == _NOW + timedelta(days=7)

    @pytest.mark.asyncio()
    async def test_early_run_keeps_upcoming_slot(
        self, service: ReportService, reports: AsyncMock, assessments: AsyncMock
    ) -> None:
        upcoming = _NOW + timedelta(days=2)
        report = self._report(next_run=upcoming)
        reports.get.return_value = report
        assessments.get.return_value = _assessment()
        echo_update(reports, report)

        updated = await service.run_report(report.id, "ada@acme.com", now=_NOW)

        assert updated.next_run == upcoming
        assert updated.last_run == _NOW
        assert updated.status == "scheduled"

    @pytest.mark.asyncio()
    async def test_early_run_of_one_off_report_completes_it(
        self, service: ReportService, reports: AsyncMock, assessments: AsyncMock
    ) -> None:
        report = self._report(frequency="once", next_run=_NOW + timedelta(days=2))
        reports.get.return_value = report
        assessments.get.return_value = _assessment()
        echo_update(reports, report)

        updated = await service.run_report(report.id, "ada@acme.com", now=_NOW)

        assert updated.status == "generated"
        assert updated.next_run is None

    @pytest.mark.asyncio()
    async def test_schedule_reads_naive_date_as_utc(self, service: ReportService) -> None:
        report = await service.schedule_report("ada@acme.com", "Exec", "executive", datetime(2024, 6, 1, 9, 0))

        assert report.scheduled_date == _NOW
        assert report.next_run.tzinfo is not None

    @pytest.mark.asyncio()
    async def test_other_users_report_is_not_found(self, service: ReportService, reports: AsyncMock) -> None:
        reports.get.return_value = self._report(user_email="grace@acme.com")

        with pytest.raises(NotFoundError):
            await service.get_report(uuid.uuid4(), "ada@acme.com")
        with pytest.raises(NotFoundError):
            await service.run_report(uuid.uuid4(), "ada@acme.com", now=_NOW)
        with pytest.raises(NotFoundError):
            await service.pause(uuid.uuid4(), "ada@acme.com")
        with pytest.raises(NotFoundError):
            await service.resume(uuid.uuid4(), "ada@acme.com")
        reports.update.assert_not_awaited()


# ---------------------------------------------------------------------------
# CatalogService / AnalyticsService
# ---------------------------------------------------------------------------


class TestCatalogService:
    @pytest.mark.asyncio()
    async def test_list_filters_by_category(self) -> None:
        repo = AsyncMock()
        repo.filter.return_value = []
        service = CatalogService(repo, AsyncMock())

        await service.list_platforms(category="llm", limit=10)

        repo.filter.assert_awaited_once_with({"category": "llm"}, sort="name", limit=10)

    @pytest.mark.asyncio()
    async def test_search_passes_catalogue(self) -> None:
        repo = AsyncMock()
        repo.list_all.return_value = [make_entity(name="Claude")]
        engine = AsyncMock()
        engine.search.return_value = {"results": []}
        service = CatalogService(repo, engine)

        result = await service.search("secure chat assistant")

        assert result == {"results": []}
        query, platforms = engine.search.call_args.args
        assert query == "secure chat assistant"
        assert platforms[0]["name"] == "Claude"

    def test_intake_options(self) -> None:
        options = CatalogService.intake_options()

        assert {p["platform_id"] for p in options["platforms"]} >= {"anthropic_claude", "microsoft_copilot"}
        assert "SOC 2" in options["compliance_standards"]


class TestAnalyticsService:
    @pytest.mark.asyncio()
    async def test_overview_uses_all_entities(self) -> None:
        assessments = AsyncMock()
        assessments.list_all.return_value = []
        strategies = AsyncMock()
        strategies.list_all.return_value = []
        service = AnalyticsService(assessments, strategies)

        overview = await service.overview("30d", now=_NOW)

        assert isinstance(overview, dict)
        assessments.list_all.assert_awaited_once()
        strategies.list_all.assert_awaited_once()

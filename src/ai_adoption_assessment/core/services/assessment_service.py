"""Assessment lifecycle: intake, local scoring, and LLM-backed analyses.

Key invariants:
- Intake fields can only be edited while the assessment is a draft.
- Completing runs the local scoring pipeline; completed assessments may be
  completed again with different weights to re-rank platforms.
- LLM analyses require a completed assessment and are stored on it.
- What-if scenarios and platform comparisons read a completed assessment
  and store nothing.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.core import calculation
from ai_adoption_assessment.core.calculation import normalize_weights, run_assessment
from ai_adoption_assessment.core.engines.assessment_scoring import AssessmentScoringEngine
from ai_adoption_assessment.core.engines.comparison import PlatformComparisonEngine
from ai_adoption_assessment.core.engines.compliance import ComplianceAnalysisEngine
from ai_adoption_assessment.core.engines.forecasting import ForecastingEngine
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import Assessment
from ai_adoption_assessment.errors import ConflictError, ErrorCode, ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

VALID_ASSESSMENT_STATUSES: frozenset[str] = frozenset({"draft", "completed"})

FORECAST_KINDS: frozenset[str] = frozenset({"roi", "risk", "maturity"})

# Fields a caller may set on intake
INTAKE_FIELDS: frozenset[str] = frozenset(
    {
        "organization_name",
        "assessment_date",
        "departments",
        "pain_points",
        "compliance_requirements",
        "desired_integrations",
        "business_goals",
        "budget_constraints",
        "technical_constraints",
        "scoring_weights",
    }
)


class AssessmentService:
    """Orchestrates assessment intake, scoring and analysis."""

    def __init__(
        self,
        assessment_repo: IEntityRepository,
        scoring_engine: AssessmentScoringEngine,
        compliance_engine: ComplianceAnalysisEngine,
        forecasting_engine: ForecastingEngine,
        comparison_engine: PlatformComparisonEngine,
        default_weights: dict[str, float] | None = None,
    ) -> None:
        """Initialise with injected dependencies.

        Args:
            assessment_repo: Assessment persistence.
            scoring_engine: AI assessment and readiness scoring.
            compliance_engine: Regulation analysis.
            forecasting_engine: ROI, risk and maturity predictions.
            comparison_engine: Side-by-side platform comparison.
            default_weights: Scoring weights used when an assessment has none.
        """
        self._assessments = assessment_repo
        self._scoring = scoring_engine
        self._compliance = compliance_engine
        self._forecasting = forecasting_engine
        self._comparison = comparison_engine
        self._default_weights = default_weights

    def _intake(self, data: dict[str, Any]) -> dict[str, Any]:
        unknown = set(data) - INTAKE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown assessment field(s): {', '.join(sorted(unknown))}")
        if data.get("scoring_weights") is not None:
            normalize_weights(data["scoring_weights"])
        return dict(data)

    async def create_assessment(self, data: dict[str, Any], created_by: str | None) -> Assessment:
        """Create a draft assessment from intake fields.

        Raises:
            ValidationError: On unknown fields or invalid scoring weights.
        """
        fields = self._intake(data)
        assessment = await self._assessments.create(
            {**fields, "status": "draft", "created_by": created_by}
        )
        logger.info(
            "Assessment created",
            assessment_id=str(assessment.id),
            organization_name=assessment.organization_name,
        )
        return assessment

    async def get_assessment(self, assessment_id: uuid.UUID) -> Assessment:
        return await self._assessments.get(assessment_id)

    async def list_assessments(
        self,
        status: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Assessment]:
        if status is not None and status not in VALID_ASSESSMENT_STATUSES:
            raise ValidationError(f"Invalid assessment status '{status}'.")
        criteria = {"status": status} if status else {}
        return await self._assessments.filter(criteria, limit=limit, offset=offset)

    async def update_assessment(self, assessment_id: uuid.UUID, data: dict[str, Any]) -> Assessment:
        """Edit intake fields of a draft.

        Raises:
            ConflictError: If the assessment is already completed.
        """
        assessment = await self._assessments.get(assessment_id)
        if assessment.status != "draft":
            raise ConflictError(
                message=f"Assessment {assessment_id} is {assessment.status}; only drafts can be edited.",
                error_code=ErrorCode.INVALID_OPERATION,
            )
        return await self._assessments.update(assessment_id, self._intake(data))

    async def complete_assessment(
        self,
        assessment_id: uuid.UUID,
        scoring_weights: dict[str, float] | None = None,
    ) -> Assessment:
        """Run the local scoring pipeline and mark the assessment completed.

        Weight precedence: the explicit argument, then the assessment's stored
        scoring_weights, then the configured defaults.

        Raises:
            ValidationError: If the assessment has no departments or weights are invalid.
        """
        assessment = await self._assessments.get(assessment_id)
        if not assessment.departments:
            raise ValidationError("At least one department is required to complete an assessment.")

        weights = self._weights(assessment, scoring_weights)
        results = run_assessment(assessment.to_dict(), weights)

        changes: dict[str, Any] = {**results, "status": "completed"}
        if scoring_weights is not None:
            changes["scoring_weights"] = scoring_weights
        if assessment.assessment_date is None:
            changes["assessment_date"] = datetime.now(tz=timezone.utc)

        updated = await self._assessments.update(assessment_id, changes)
        top = results["recommended_platforms"][0] if results["recommended_platforms"] else None
        logger.info(
            "Assessment completed",
            assessment_id=str(assessment_id),
            top_platform=top["platform"] if top else None,
            top_score=round(top["score"], 2) if top else None,
        )
        return updated

    async def _completed(self, assessment_id: uuid.UUID) -> Assessment:
        assessment = await self._assessments.get(assessment_id)
        if assessment.status != "completed":
            raise ConflictError(
                message=f"Assessment {assessment_id} must be completed first.",
                error_code=ErrorCode.INVALID_OPERATION,
            )
        return assessment

    def _weights(self, assessment: Assessment, override: dict[str, float] | None) -> dict[str, float]:
        return normalize_weights(override or assessment.scoring_weights or self._default_weights)

    async def generate_ai_score(self, assessment_id: uuid.UUID) -> Assessment:
        assessment = await self._completed(assessment_id)
        score = await self._scoring.score_assessment(assessment.to_dict())
        return await self._assessments.update(assessment_id, {"ai_assessment_score": score})

    async def generate_readiness_score(
        self,
        assessment_id: uuid.UUID,
        infrastructure_score: float | None = None,
    ) -> Assessment:
        assessment = await self._completed(assessment_id)
        score = await self._scoring.score_readiness(assessment.to_dict(), infrastructure_score)
        return await self._assessments.update(assessment_id, {"ai_readiness_score": score})

    async def analyze_compliance(self, assessment_id: uuid.UUID) -> Assessment:
        """Run the regulation analysis and store it on the assessment.

        Raises:
            ValidationError: If the assessment lists no compliance requirements.
        """
        assessment = await self._completed(assessment_id)
        if not assessment.compliance_requirements:
            raise ValidationError("Assessment has no compliance requirements to analyse.")
        analysis = await self._compliance.analyze(assessment.to_dict())
        return await self._assessments.update(assessment_id, {"compliance_analysis": analysis})

    async def compliance_report(self, assessment_id: uuid.UUID, regulation_code: str) -> dict[str, Any]:
        """Formal report for one regulation, analysing first if needed."""
        assessment = await self._completed(assessment_id)
        if not assessment.compliance_analysis:
            assessment = await self.analyze_compliance(assessment_id)
        return await self._compliance.generate_report(
            assessment.to_dict(), assessment.compliance_analysis, regulation_code
        )

    async def flag_compliance_risks(self, assessment_id: uuid.UUID) -> dict[str, Any]:
        # Works on drafts too: flags are meant to catch problems during intake
        assessment = await self._assessments.get(assessment_id)
        return await self._compliance.flag_risks(assessment.to_dict())

    async def forecast(
        self,
        assessment_id: uuid.UUID,
        kind: str,
        market_trends: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Predict ROI, risks, or the maturity roadmap for an assessment.

        History is the organisation's other completed assessments.

        Raises:
            ValidationError: If kind is not one of FORECAST_KINDS.
        """
        if kind not in FORECAST_KINDS:
            raise ValidationError(f"Unknown forecast kind '{kind}'.")
        assessment = await self._completed(assessment_id)
        data = assessment.to_dict()

        if kind == "risk":
            return await self._forecasting.predict_risks_and_compliance(data, market_trends)

        past = await self._assessments.filter(
            {"organization_name": assessment.organization_name, "status": "completed"},
            sort="created_date",
        )
        history = [a.to_dict() for a in past if a.id != assessment.id]
        if kind == "roi":
            return await self._forecasting.predict_future_roi(data, history, market_trends)
        return await self._forecasting.predict_maturity_roadmap(data, history, market_trends)

    # ------------------------------------------------------------------
    # What-if scenarios and comparison
    # ------------------------------------------------------------------

    async def suggest_scenarios(self, assessment_id: uuid.UUID) -> list[dict[str, Any]]:
        assessment = await self._completed(assessment_id)
        return calculation.suggest_scenarios(assessment.to_dict())

    async def run_scenario(
        self,
        assessment_id: uuid.UUID,
        changes: dict[str, Any],
        scoring_weights: dict[str, float] | None = None,
        name: str | None = None,
    ) -> dict[str, Any]:
        """Re-score a completed assessment with some intake fields replaced.

        Weights follow the same precedence as complete_assessment. The
        assessment itself is not modified.

        Raises:
            ConflictError: If the assessment is not completed.
            ValidationError: On an unknown field, no departments, or invalid weights.
        """
        assessment = await self._completed(assessment_id)
        if "departments" in changes and not changes["departments"]:
            raise ValidationError("A scenario needs at least one department.")

        result = calculation.run_scenario(
            assessment.to_dict(), changes, self._weights(assessment, scoring_weights)
        )
        top = result["score_changes"][0] if result["score_changes"] else None
        logger.info(
            "Scenario scored",
            assessment_id=str(assessment_id),
            scenario=name,
            changed_fields=sorted(changes),
            top_platform=top["platform"] if top else None,
        )
        return {"name": name, **result}

    async def compare_platforms(self, assessment_id: uuid.UUID, platforms: list[str]) -> dict[str, Any]:
        """Metrics rows plus an LLM side-by-side analysis of the chosen platforms.

        Raises:
            ConflictError: If the assessment is not completed.
            ValidationError: If fewer than two or unknown platforms are given.
        """
        assessment = await self._completed(assessment_id)
        data = assessment.to_dict()
        rows = calculation.comparison_rows(data, platforms)
        analysis = await self._comparison.compare(data, rows)
        return {"platforms": rows, "analysis": analysis}

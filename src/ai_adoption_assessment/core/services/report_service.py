"""Report templates, scheduling and generation.

Report types:
- executive, technical, financial, custom: assembled locally from an
  assessment using the report's template (or the type's default layout),
  with optional AI insights on sections marked ``ai_enhanced``.
- performance_summary, predictive, compliance_gap: written by the LLM.

Schedule invariants:
- next_run starts at scheduled_date.
- After a run, one-off reports become 'generated' with no next_run;
  recurring reports stay 'scheduled' and advance by their frequency.
- A manual run before next_run leaves the upcoming slot in place.
- A failed scheduled run marks the report 'failed' and does not stop the batch.
- Naive datetimes are read as UTC.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.core import reports, scheduling
from ai_adoption_assessment.core.engines.reports import AutomatedReportEngine
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import AutomatedReport, ReportTemplate
from ai_adoption_assessment.errors import (
    AdoptionError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

REPORT_TYPES: tuple[str, ...] = reports.LOCAL_REPORT_TYPES + reports.LLM_REPORT_TYPES

# Assessments summarised by a performance report
_RECENT_ASSESSMENT_LIMIT = 5


class ReportService:
    """Schedules and generates automated reports."""

    def __init__(
        self,
        report_repo: IEntityRepository,
        template_repo: IEntityRepository,
        assessment_repo: IEntityRepository,
        strategy_repo: IEntityRepository,
        engine: AutomatedReportEngine,
    ) -> None:
        """Initialise with injected dependencies.

        Args:
            report_repo: AutomatedReport persistence.
            template_repo: ReportTemplate persistence.
            assessment_repo: Assessment persistence.
            strategy_repo: AdoptionStrategy persistence.
            engine: LLM report engine.
        """
        self._reports = report_repo
        self._templates = template_repo
        self._assessments = assessment_repo
        self._strategies = strategy_repo
        self._engine = engine

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    async def create_template(
        self,
        name: str,
        report_type: str,
        sections: list[dict[str, Any]],
        description: str | None = None,
        created_by: str | None = None,
    ) -> ReportTemplate:
        """Create a report template.

        Raises:
            ValidationError: On an unknown report type or section type.
        """
        if report_type not in reports.LOCAL_REPORT_TYPES:
            raise ValidationError(f"Invalid template report type '{report_type}'.")
        unknown = {s.get("type") for s in sections} - set(reports.SECTION_TYPES)
        if unknown:
            raise ValidationError(f"Unknown section type(s): {', '.join(sorted(map(str, unknown)))}")

        return await self._templates.create(
            {
                "name": name,
                "description": description,
                "report_type": report_type,
                "sections": sections,
                "created_by": created_by,
            }
        )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def schedule_report(
        self,
        user_email: str,
        report_name: str,
        report_type: str,
        scheduled_date: datetime,
        frequency: str = "once",
        recipients: list[str] | None = None,
        template_id: uuid.UUID | None = None,
        assessment_id: uuid.UUID | None = None,
        strategy_id: uuid.UUID | None = None,
    ) -> AutomatedReport:
        """Schedule a report; its first run is scheduled_date.

        Raises:
            ValidationError: On an unknown report type or frequency.
            NotFoundError: If a referenced template does not exist.
        """
        if report_type not in REPORT_TYPES:
            raise ValidationError(f"Invalid report type '{report_type}'.")
        if frequency not in scheduling.FREQUENCIES:
            raise ValidationError(f"Invalid report frequency '{frequency}'.")
        if template_id is not None:
            await self._templates.get(template_id)
        scheduled_date = scheduling.as_utc(scheduled_date)

        report = await self._reports.create(
            {
                "user_email": user_email,
                "report_name": report_name,
                "report_type": report_type,
                "template_id": template_id,
                "assessment_id": assessment_id,
                "strategy_id": strategy_id,
                "frequency": frequency,
                "recipients": recipients or [],
                "scheduled_date": scheduled_date,
                "next_run": scheduled_date,
                "status": "scheduled",
                "created_by": user_email,
            }
        )
        logger.info(
            "Report scheduled",
            report_id=str(report.id),
            report_type=report_type,
            frequency=frequency,
            next_run=scheduled_date.isoformat(),
        )
        return report

    async def list_reports(self, user_email: str, status: str | None = None) -> list[AutomatedReport]:
        criteria: dict[str, Any] = {"user_email": user_email}
        if status:
            criteria["status"] = status
        return await self._reports.filter(criteria)

    async def _owned(self, report_id: uuid.UUID, user_email: str) -> AutomatedReport:
        report = await self._reports.get(report_id)
        if report.user_email != user_email:
            raise NotFoundError(message=f"AutomatedReport {report_id} not found.")
        return report

    async def get_report(self, report_id: uuid.UUID, user_email: str) -> AutomatedReport:
        return await self._owned(report_id, user_email)

    async def pause(self, report_id: uuid.UUID, user_email: str) -> AutomatedReport:
        report = await self._owned(report_id, user_email)
        if report.status != "scheduled":
            raise ConflictError(
                message=f"Only scheduled reports can be paused; report is {report.status}.",
                error_code=ErrorCode.INVALID_OPERATION,
            )
        return await self._reports.update(report_id, {"status": "paused"})

    async def resume(self, report_id: uuid.UUID, user_email: str) -> AutomatedReport:
        """Put a paused or failed report back on its schedule."""
        report = await self._owned(report_id, user_email)
        if report.status not in ("paused", "failed"):
            raise ConflictError(
                message=f"Only paused or failed reports can be resumed; report is {report.status}.",
                error_code=ErrorCode.INVALID_OPERATION,
            )
        changes: dict[str, Any] = {"status": "scheduled", "error_message": None}
        if report.next_run is None:
            changes["next_run"] = datetime.now(tz=timezone.utc)
        return await self._reports.update(report_id, changes)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def _assessment_for(self, report: AutomatedReport) -> dict[str, Any]:
        if report.assessment_id is None:
            raise ValidationError(f"Report type {report.report_type} requires an assessment.")
        return (await self._assessments.get(report.assessment_id)).to_dict()

    async def generate_content(self, report: AutomatedReport) -> dict[str, Any]:
        """Produce the report body for the report's type.

        Raises:
            ValidationError: If a required assessment or strategy is not set.
            NotFoundError: If a referenced entity does not exist.
            LLMInvocationError: If an LLM-written report fails.
        """
        report_type = report.report_type

        if report_type in reports.LOCAL_REPORT_TYPES:
            assessment = await self._assessment_for(report)
            template = None
            if report.template_id is not None:
                template = (await self._templates.get(report.template_id)).to_dict()
            sections = reports.resolve_sections(report_type, template)
            content = reports.assemble_report(report.report_name, report_type, sections, assessment)
            if any(s.get("ai_enhanced") for s in sections):
                content = await self._engine.enhance_sections(content, sections, assessment)
            return content

        if report_type == "performance_summary":
            strategies = await self._strategies.filter({"status": "active"})
            assessments = await self._assessments.filter(
                {"status": "completed"}, limit=_RECENT_ASSESSMENT_LIMIT
            )
            return await self._engine.performance_summary(
                [s.to_dict() for s in strategies],
                [a.to_dict() for a in assessments],
            )

        if report_type == "predictive":
            if report.strategy_id is None:
                raise ValidationError("Predictive reports require a strategy.")
            strategy = (await self._strategies.get(report.strategy_id)).to_dict()
            assessment = None
            if strategy.get("assessment_id") is not None:
                assessment = (await self._assessments.get(strategy["assessment_id"])).to_dict()
            return await self._engine.predictive(strategy, assessment)

        if report_type == "compliance_gap":
            assessment = await self._assessment_for(report)
            platform = None
            if report.strategy_id is not None:
                platform = (await self._strategies.get(report.strategy_id)).platform
            else:
                recommendations = assessment.get("recommended_platforms") or []
                platform = recommendations[0].get("platform_name") if recommendations else None
            return await self._engine.compliance_gap(assessment, platform)

        raise ValidationError(f"Invalid report type '{report_type}'.")

    async def _run(self, report: AutomatedReport, run_at: datetime) -> AutomatedReport:
        content = await self.generate_content(report)

        slot = scheduling.as_utc(report.next_run) if report.next_run is not None else run_at
        next_run = scheduling.compute_next_run(report.frequency, slot)
        if next_run is not None and slot > run_at:
            # run ahead of schedule; the pending slot still fires
            next_run = slot

        changes: dict[str, Any] = {
            "content": content,
            "last_run": run_at,
            "next_run": next_run,
            "error_message": None,
        }
        if next_run is None:
            changes["status"] = "generated"
        elif report.status == "failed":
            changes["status"] = "scheduled"

        updated = await self._reports.update(report.id, changes)
        logger.info(
            "Report generated",
            report_id=str(report.id),
            report_type=report.report_type,
            next_run=next_run.isoformat() if next_run else None,
        )
        return updated

    async def run_report(
        self,
        report_id: uuid.UUID,
        user_email: str,
        now: datetime | None = None,
    ) -> AutomatedReport:
        """Generate a report now and advance its schedule.

        The next run is computed from the slot being run (next_run), so
        recurring reports do not drift when the runner is late. Running a
        recurring report before its next_run keeps that slot.

        Raises:
            NotFoundError: If the report does not exist or belongs to another user.
        """
        run_at = scheduling.as_utc(now) if now else datetime.now(tz=timezone.utc)
        report = await self._owned(report_id, user_email)
        return await self._run(report, run_at)

    async def run_due_reports(self, now: datetime | None = None) -> dict[str, list[uuid.UUID]]:
        """Generate every scheduled report whose next run has arrived.

        A report that fails is marked 'failed' and the batch moves on.

        Returns:
            Dict with the ids of 'generated' and 'failed' reports.
        """
        run_at = scheduling.as_utc(now) if now else datetime.now(tz=timezone.utc)
        scheduled = await self._reports.filter({"status": "scheduled"}, sort="next_run")
        due = [r for r in scheduled if scheduling.is_due(r.next_run, r.status, run_at)]

        outcome: dict[str, list[uuid.UUID]] = {"generated": [], "failed": []}
        for report in due:
            try:
                await self._run(report, run_at)
            except AdoptionError as exc:
                logger.error(
                    "Scheduled report failed",
                    report_id=str(report.id),
                    error_code=exc.error_code.value,
                    error=exc.message,
                )
                error_message = exc.message
            except Exception as exc:
                logger.exception("Scheduled report crashed", report_id=str(report.id))
                error_message = str(exc) or type(exc).__name__
            else:
                outcome["generated"].append(report.id)
                continue

            await self._reports.update(
                report.id,
                {"status": "failed", "last_run": run_at, "error_message": error_message},
            )
            outcome["failed"].append(report.id)

        logger.info(
            "Due reports processed",
            due_count=len(due),
            generated=len(outcome["generated"]),
            failed=len(outcome["failed"]),
        )
        return outcome

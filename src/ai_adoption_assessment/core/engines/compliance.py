"""Regulation-aware compliance analysis.

Known regulations are described to the LLM from ``REGULATIONS``; anything
else is passed through by name as a custom regulation.
"""

from dataclasses import dataclass
from typing import Any

from ai_adoption_assessment.core.engines.schema import (
    PRIORITY,
    array,
    boolean,
    number,
    obj,
    string,
    string_list,
)
from ai_adoption_assessment.core.interfaces import ILLMClient
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Regulation:
    name: str
    region: str
    key_requirements: tuple[str, ...]
    ai_platform_requirements: tuple[str, ...]


REGULATIONS: dict[str, Regulation] = {
    "GDPR": Regulation(
        name="General Data Protection Regulation",
        region="EU",
        key_requirements=(
            "Data encryption",
            "Right to be forgotten",
            "Data portability",
            "Consent management",
            "Data breach notification",
            "Privacy by design",
        ),
        ai_platform_requirements=(
            "Data residency controls",
            "Audit logs",
            "Access controls",
            "Data retention policies",
        ),
    ),
    "HIPAA": Regulation(
        name="Health Insurance Portability and Accountability Act",
        region="US",
        key_requirements=(
            "PHI protection",
            "Access controls",
            "Audit controls",
            "Encryption",
            "Business associate agreements",
        ),
        ai_platform_requirements=(
            "HIPAA-compliant infrastructure",
            "BAA support",
            "PHI isolation",
            "Audit trails",
        ),
    ),
    "PCI-DSS": Regulation(
        name="Payment Card Industry Data Security Standard",
        region="Global",
        key_requirements=(
            "Network security",
            "Cardholder data protection",
            "Vulnerability management",
            "Access control",
            "Monitoring",
        ),
        ai_platform_requirements=(
            "PCI-certified hosting",
            "Data tokenization",
            "Network segmentation",
            "Security monitoring",
        ),
    ),
    "SOC 2": Regulation(
        name="Service Organization Control 2",
        region="Global",
        key_requirements=(
            "Security",
            "Availability",
            "Processing integrity",
            "Confidentiality",
            "Privacy",
        ),
        ai_platform_requirements=(
            "SOC 2 Type II certification",
            "Security controls",
            "Incident response",
            "Change management",
        ),
    ),
    "ISO 27001": Regulation(
        name="Information Security Management",
        region="Global",
        key_requirements=(
            "Risk assessment",
            "Security policies",
            "Asset management",
            "Access control",
            "Incident management",
        ),
        ai_platform_requirements=(
            "ISO 27001 certification",
            "ISMS implementation",
            "Security documentation",
            "Regular audits",
        ),
    ),
    "CCPA": Regulation(
        name="California Consumer Privacy Act",
        region="California, US",
        key_requirements=(
            "Data disclosure",
            "Right to deletion",
            "Opt-out rights",
            "Non-discrimination",
            "Data security",
        ),
        ai_platform_requirements=(
            "Consumer data rights",
            "Data inventory",
            "Opt-out mechanisms",
            "Privacy notices",
        ),
    ),
    "FERPA": Regulation(
        name="Family Educational Rights and Privacy Act",
        region="US",
        key_requirements=(
            "Student records protection",
            "Consent requirements",
            "Access rights",
            "Record amendment",
        ),
        ai_platform_requirements=(
            "Educational data protection",
            "Parental consent",
            "Student data isolation",
            "Access logs",
        ),
    ),
}

COMPLIANCE_ANALYSIS_SCHEMA: dict[str, Any] = obj(
    overall_compliance_score=number("Overall compliance readiness score 0-100"),
    compliance_status=string(["compliant", "partially_compliant", "non_compliant", "needs_review"]),
    regulation_analysis=array(
        obj(
            regulation=string(),
            compliance_level=string(["full", "partial", "none"]),
            coverage_percentage=number(),
            met_requirements=string_list(),
            unmet_requirements=string_list(),
        )
    ),
    identified_risks=array(
        obj(
            risk_id=string(),
            regulation=string(),
            risk_type=string(),
            severity=string(PRIORITY),
            description=string(),
            affected_platforms=string_list(),
            potential_impact=string(),
            likelihood=string(["high", "medium", "low"]),
            mitigation_steps=array(
                obj(step=string(), priority=string(), effort=string(), timeline=string())
            ),
        )
    ),
    compliance_gaps=array(
        obj(
            gap_area=string(),
            regulation=string(),
            description=string(),
            priority=string(PRIORITY),
            remediation_plan=string(),
            estimated_effort=string(),
            dependencies=string_list(),
        )
    ),
    platform_compliance_ratings=array(
        obj(
            platform=string(),
            overall_rating=number(),
            certifications=string_list(),
            strengths=string_list(),
            weaknesses=string_list(),
            recommended_for=string_list(),
        )
    ),
    immediate_actions=array(
        obj(
            action=string(),
            urgency=string(["immediate", "within_30_days", "within_90_days"]),
            responsible_party=string(),
            success_criteria=string(),
        )
    ),
    long_term_recommendations=string_list(),
    audit_readiness=obj(
        current_readiness=string(["ready", "partially_ready", "not_ready"]),
        estimated_time_to_ready=string(),
        critical_requirements=string_list(),
    ),
)

COMPLIANCE_REPORT_SCHEMA: dict[str, Any] = obj(
    report_metadata=obj(
        report_title=string(),
        regulation=string(),
        organization=string(),
        report_date=string(),
        version=string(),
    ),
    executive_summary=string(),
    scope_and_methodology=string(),
    compliance_status=obj(
        overall_assessment=string(),
        compliance_percentage=number(),
        key_findings=string_list(),
        certification_status=string(),
    ),
    detailed_requirements=array(
        obj(
            requirement_id=string(),
            requirement_name=string(),
            status=string(["met", "partially_met", "not_met", "not_applicable"]),
            evidence=string(),
            notes=string(),
        )
    ),
    gap_analysis=obj(
        identified_gaps=string_list(),
        impact_assessment=string(),
        priority_ranking=string_list(),
    ),
    remediation_plan=array(
        obj(
            gap_addressed=string(),
            remediation_actions=string_list(),
            timeline=string(),
            responsible_party=string(),
            success_criteria=string(),
        )
    ),
    recommendations=string_list(),
)

RISK_FLAGS_SCHEMA: dict[str, Any] = obj(
    flagged_risks=array(
        obj(
            flag_type=string(
                [
                    "data_residency",
                    "integration_risk",
                    "certification_gap",
                    "use_case_risk",
                    "insufficient_controls",
                ]
            ),
            severity=string(PRIORITY),
            regulation=string(),
            description=string(),
            recommendation=string(),
            blocking=boolean(),
        )
    ),
    warnings=array(obj(warning=string(), suggestion=string())),
    missing_information=string_list(),
)


def describe_regulation(code: str) -> str:
    """Render a regulation's requirements, or mark it as custom."""
    regulation = REGULATIONS.get(code)
    if regulation is None:
        return f"{code}: Custom regulation"
    return (
        f"{code} ({regulation.name}):\n"
        f"- Region: {regulation.region}\n"
        f"- Key Requirements: {', '.join(regulation.key_requirements)}\n"
        f"- AI Platform Requirements: {', '.join(regulation.ai_platform_requirements)}"
    )


def build_compliance_analysis_prompt(assessment: dict[str, Any]) -> str:
    regulations = assessment.get("compliance_requirements") or []
    departments = assessment.get("departments") or []
    technical = assessment.get("technical_constraints") or {}
    platforms = "\n".join(
        f"- {p.get('platform_name')} (Score: {p.get('score', 0):.1f})"
        for p in assessment.get("recommended_platforms") or []
    )
    standards = "\n".join(
        f"- {code}: {REGULATIONS[code].name if code in REGULATIONS else code}" for code in regulations
    )
    details = "\n\n".join(describe_regulation(code) for code in regulations)
    residency = ", ".join(technical.get("data_residency") or []) or "Not specified"
    pain_points = "\n".join(f"- {p}" for p in assessment.get("pain_points") or [])

    return f"""You are an expert compliance analyst specializing in AI platform deployments. Analyze this organization's AI assessment for compliance risks and requirements.

Organization Profile:
- Name: {assessment.get("organization_name")}
- Departments: {", ".join(d.get("name", "") for d in departments)}
- Total Users: {sum(d.get("user_count") or 0 for d in departments)}

Required Compliance Standards:
{standards}

Recommended AI Platforms:
{platforms}

Technical Constraints:
- Cloud Preference: {technical.get("cloud_preference") or "Any"}
- Data Residency: {residency}
- Existing Infrastructure: {technical.get("existing_infrastructure") or "Not specified"}

Pain Points & Use Cases:
{pain_points}

Required Integrations:
{", ".join(assessment.get("desired_integrations") or [])}

Compliance Regulation Details:
{details}

Task: conduct a comprehensive compliance analysis covering
1. Regulation coverage of each required standard by the recommended platforms
2. Specific compliance risks based on use cases, data types, and platform capabilities
3. Gaps between the current assessment and full compliance
4. Actionable mitigation steps for each risk
5. Each recommended platform's compliance posture

Reference specific regulations throughout."""


def build_compliance_report_prompt(
    assessment: dict[str, Any],
    analysis: dict[str, Any],
    regulation_code: str,
) -> str:
    regulation = REGULATIONS.get(regulation_code)
    risks = [r for r in analysis.get("identified_risks") or [] if r.get("regulation") == regulation_code]
    gaps = [g for g in analysis.get("compliance_gaps") or [] if g.get("regulation") == regulation_code]
    coverage = next(
        (
            r.get("coverage_percentage", 0)
            for r in analysis.get("regulation_analysis") or []
            if r.get("regulation") == regulation_code
        ),
        0,
    )
    risk_lines = "\n".join(
        f"- {r.get('risk_type')} ({r.get('severity')}): {r.get('description')}" for r in risks
    )
    gap_lines = "\n".join(
        f"- {g.get('gap_area')} ({g.get('priority')}): {g.get('description')}" for g in gaps
    )
    platform_names = ", ".join(
        p.get("platform_name", "") for p in assessment.get("recommended_platforms") or []
    )

    return f"""Generate a formal compliance report for {regulation_code} ({regulation.name if regulation else regulation_code}) for regulatory submission or audit purposes.

Organization: {assessment.get("organization_name")}
Assessment Date: {assessment.get("assessment_date")}

Compliance Status:
- Overall Score: {analysis.get("overall_compliance_score")}/100
- Status: {analysis.get("compliance_status")}
- {regulation_code} Coverage: {coverage}%

Identified Risks ({len(risks)}):
{risk_lines}

Compliance Gaps ({len(gaps)}):
{gap_lines}

Recommended Platforms: {platform_names}

Produce an audit-ready report with an executive summary, scope and methodology, compliance status, detailed requirements, gap analysis, remediation plan, and recommendations. Use formal, precise language."""


def build_risk_flag_prompt(assessment: dict[str, Any]) -> str:
    technical = assessment.get("technical_constraints") or {}
    return f"""As a compliance risk detection system, analyze this in-progress AI assessment for potential compliance issues.

Current Assessment Data:
- Departments: {", ".join(d.get("name", "") for d in assessment.get("departments") or [])}
- Pain Points: {", ".join(assessment.get("pain_points") or [])}
- Integrations: {", ".join(assessment.get("desired_integrations") or [])}
- Compliance Requirements: {", ".join(assessment.get("compliance_requirements") or [])}
- Cloud Preference: {technical.get("cloud_preference")}
- Data Residency: {", ".join(technical.get("data_residency") or [])}

Scan for compliance red flags and risks that should be addressed before finalizing the assessment."""


class ComplianceAnalysisEngine:
    """Compliance analysis, regulation reports, and draft risk flagging."""

    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def analyze(self, assessment: dict[str, Any]) -> dict[str, Any]:
        """Analyse an assessment against its required regulations.

        Returns:
            Parsed LLM response following COMPLIANCE_ANALYSIS_SCHEMA.
        """
        result = await self._llm.invoke(
            build_compliance_analysis_prompt(assessment),
            response_json_schema=COMPLIANCE_ANALYSIS_SCHEMA,
        )
        logger.info(
            "Compliance analysis generated",
            assessment_id=str(assessment.get("id")),
            compliance_status=result.get("compliance_status"),
        )
        return result

    async def generate_report(
        self,
        assessment: dict[str, Any],
        analysis: dict[str, Any],
        regulation_code: str,
    ) -> dict[str, Any]:
        """Generate a formal report for one regulation from an existing analysis."""
        return await self._llm.invoke(
            build_compliance_report_prompt(assessment, analysis, regulation_code),
            response_json_schema=COMPLIANCE_REPORT_SCHEMA,
        )

    async def flag_risks(self, assessment: dict[str, Any]) -> dict[str, Any]:
        """Scan a draft assessment for compliance red flags."""
        return await self._llm.invoke(
            build_risk_flag_prompt(assessment),
            response_json_schema=RISK_FLAGS_SCHEMA,
        )

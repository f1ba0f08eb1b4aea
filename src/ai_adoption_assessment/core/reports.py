"""Local report assembly from assessment results.

A report is a list of sections built from a ReportTemplate, or from the
default layout of its report type when no template is given. Section
content is derived from the assessment alone; AI enhancement is applied
afterwards by the report engine for sections marked ``ai_enhanced``.
"""

from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.errors import ValidationError

LOCAL_REPORT_TYPES: tuple[str, ...] = ("executive", "technical", "financial", "custom")
LLM_REPORT_TYPES: tuple[str, ...] = ("performance_summary", "predictive", "compliance_gap")

SECTION_TYPES: tuple[str, ...] = (
    "overview",
    "recommendations",
    "roi",
    "compliance",
    "risks",
    "implementation",
    "technical_specs",
    "custom_text",
)

_SUMMARY_PREVIEW_CHARS = 500


def _section(order: int, section_type: str, title: str, ai_enhanced: bool = False) -> dict[str, Any]:
    return {
        "order": order,
        "type": section_type,
        "title": title,
        "enabled": True,
        "ai_enhanced": ai_enhanced,
    }


DEFAULT_SECTIONS: dict[str, list[dict[str, Any]]] = {
    "executive": [
        _section(0, "overview", "Executive Overview"),
        _section(1, "recommendations", "Platform Recommendations"),
        _section(2, "roi", "Financial Impact"),
        _section(3, "risks", "Key Risks"),
    ],
    "technical": [
        _section(0, "overview", "Overview"),
        _section(1, "technical_specs", "Technical Requirements"),
        _section(2, "compliance", "Compliance Coverage"),
        _section(3, "implementation", "Implementation Plan"),
    ],
    "financial": [
        _section(0, "overview", "Overview"),
        _section(1, "roi", "Return on Investment"),
        _section(2, "recommendations", "Platform Recommendations"),
    ],
    "custom": [
        _section(0, "overview", "Overview"),
    ],
}


def _statuses(details: dict[str, str], wanted: str) -> list[str]:
    return [name for name, status in details.items() if status == wanted]


def build_section_content(section_type: str, assessment: dict[str, Any]) -> dict[str, Any]:
    """Derive one section's content from assessment results.

    Unknown section types produce empty content.
    """
    departments = assessment.get("departments") or []

    if section_type == "overview":
        summary = assessment.get("executive_summary") or ""
        assessed_on = assessment.get("assessment_date")
        return {
            "organization": assessment.get("organization_name"),
            "date": assessed_on.isoformat() if isinstance(assessed_on, datetime) else assessed_on,
            "departments": len(departments),
            "summary": summary[:_SUMMARY_PREVIEW_CHARS] if summary else "No summary available",
        }

    if section_type == "recommendations":
        return {
            "platforms": [
                {
                    "name": p.get("platform_name"),
                    "score": p.get("score"),
                    "justification": p.get("justification"),
                }
                for p in assessment.get("recommended_platforms") or []
            ]
        }

    if section_type == "roi":
        return {
            "platforms": [
                {
                    "platform": roi.get("platform"),
                    "annual_savings": roi.get("net_annual_savings"),
                    "one_year_roi": roi.get("one_year_roi"),
                    "three_year_roi": roi.get("three_year_roi"),
                }
                for roi in (assessment.get("roi_calculations") or {}).values()
            ]
        }

    if section_type == "compliance":
        return {
            "requirements": assessment.get("compliance_requirements") or [],
            "scores": assessment.get("compliance_scores") or {},
        }

    if section_type == "risks":
        compliance_gaps = []
        for platform, data in (assessment.get("compliance_scores") or {}).items():
            gaps = _statuses(data.get("status_details") or {}, "not_certified")
            if gaps:
                compliance_gaps.append({"platform": platform, "gaps": gaps})
        integration_challenges = []
        for platform, data in (assessment.get("integration_scores") or {}).items():
            challenges = _statuses(data.get("integration_details") or {}, "not_supported")
            if challenges:
                integration_challenges.append({"platform": platform, "challenges": challenges})
        return {
            "compliance_gaps": compliance_gaps,
            "integration_challenges": integration_challenges,
        }

    if section_type == "implementation":
        return {
            "departments": departments,
            "timeline": "Estimated 3-6 months",
            "phases": ["Planning", "Pilot", "Rollout", "Optimization"],
        }

    if section_type == "technical_specs":
        return {
            "integrations": assessment.get("desired_integrations") or [],
            "compliance": assessment.get("compliance_requirements") or [],
            "user_count": sum(d.get("user_count") or 0 for d in departments),
        }

    if section_type == "custom_text":
        return {"text": ""}

    return {}


def resolve_sections(
    report_type: str,
    template: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Enabled sections of the template, or the report type's defaults, in order.

    Raises:
        ValidationError: If there is no template and report_type has no default layout.
    """
    if template is not None:
        sections = template.get("sections") or []
    elif report_type in DEFAULT_SECTIONS:
        sections = DEFAULT_SECTIONS[report_type]
    else:
        raise ValidationError(f"Report type {report_type} has no default layout.")

    enabled = [s for s in sections if s.get("enabled", True)]
    return sorted(enabled, key=lambda s: s.get("order", 0))


def assemble_report(
    title: str,
    report_type: str,
    sections: list[dict[str, Any]],
    assessment: dict[str, Any],
) -> dict[str, Any]:
    """Build a structured report from resolved sections and an assessment."""
    return {
        "title": title,
        "report_type": report_type,
        "generated_at": datetime.now(tz=timezone.utc).isoformat(),
        "organization_name": assessment.get("organization_name"),
        "sections": [
            {
                "title": section.get("title"),
                "type": section.get("type"),
                "order": section.get("order", 0),
                "content": build_section_content(section.get("type", ""), assessment),
            }
            for section in sections
        ],
    }

"""Unit tests for local report assembly."""

from datetime import datetime, timezone

import pytest

from ai_adoption_assessment.core.reports import (
    DEFAULT_SECTIONS,
    assemble_report,
    build_section_content,
    resolve_sections,
)
from ai_adoption_assessment.errors import ValidationError

_ASSESSMENT = {
    "organization_name": "Acme Corp",
    "assessment_date": datetime(2024, 3, 15, tzinfo=timezone.utc),
    "departments": [
        {"name": "Sales", "user_count": 10, "hourly_rate": 50.0},
        {"name": "Finance", "user_count": 5, "hourly_rate": 70.0},
    ],
    "compliance_requirements": ["SOC 2", "FedRAMP"],
    "desired_integrations": ["Slack", "ADP"],
    "executive_summary": "s" * 600,
    "recommended_platforms": [
        {"platform": "anthropic_claude", "platform_name": "Anthropic Claude", "score": 81.2, "justification": "Good"}
    ],
    "roi_calculations": {
        "anthropic_claude": {
            "platform": "anthropic_claude",
            "net_annual_savings": 92_000.0,
            "one_year_roi": 3066.7,
            "three_year_roi": 9200.0,
        }
    },
    "compliance_scores": {
        "anthropic_claude": {"status_details": {"SOC 2": "certified", "FedRAMP": "not_certified"}},
        "microsoft_copilot": {"status_details": {"SOC 2": "certified", "FedRAMP": "certified"}},
    },
    "integration_scores": {
        "google_gemini": {"integration_details": {"Slack": "api", "ADP": "not_supported"}},
    },
}


class TestSectionContent:
    def test_overview(self) -> None:
        content = build_section_content("overview", _ASSESSMENT)

        assert content["organization"] == "Acme Corp"
        assert content["date"] == "2024-03-15T00:00:00+00:00"
        assert content["departments"] == 2
        assert len(content["summary"]) == 500

    def test_overview_without_summary(self) -> None:
        assert build_section_content("overview", {})["summary"] == "No summary available"

    def test_roi_uses_net_savings(self) -> None:
        [row] = build_section_content("roi", _ASSESSMENT)["platforms"]

        assert row == {
            "platform": "anthropic_claude",
            "annual_savings": 92_000.0,
            "one_year_roi": 3066.7,
            "three_year_roi": 9200.0,
        }

    def test_risks_collect_gaps_and_unsupported_integrations(self) -> None:
        content = build_section_content("risks", _ASSESSMENT)

        assert content["compliance_gaps"] == [{"platform": "anthropic_claude", "gaps": ["FedRAMP"]}]
        assert content["integration_challenges"] == [{"platform": "google_gemini", "challenges": ["ADP"]}]

    def test_technical_specs_sum_users(self) -> None:
        assert build_section_content("technical_specs", _ASSESSMENT)["user_count"] == 15

    def test_unknown_section_is_empty(self) -> None:
        assert build_section_content("horoscope", _ASSESSMENT) == {}


class TestResolveSections:
    def test_defaults_for_report_type(self) -> None:
        assert resolve_sections("executive") == DEFAULT_SECTIONS["executive"]

    def test_template_sections_filtered_and_ordered(self) -> None:
        template = {
            "sections": [
                {"order": 2, "type": "roi", "title": "ROI"},
                {"order": 0, "type": "overview", "title": "Overview"},
                {"order": 1, "type": "risks", "title": "Risks", "enabled": False},
            ]
        }

        sections = resolve_sections("custom", template)

        assert [s["type"] for s in sections] == ["overview", "roi"]

    def test_unknown_type_without_template(self) -> None:
        with pytest.raises(ValidationError):
            resolve_sections("predictive")


def test_assemble_report() -> None:
    report = assemble_report("Q1 Review", "financial", resolve_sections("financial"), _ASSESSMENT)

    assert report["title"] == "Q1 Review"
    assert report["organization_name"] == "Acme Corp"
    assert [s["type"] for s in report["sections"]] == ["overview", "roi", "recommendations"]
    assert report["sections"][2]["content"]["platforms"][0]["name"] == "Anthropic Claude"
    datetime.fromisoformat(report["generated_at"])

"""Platform benchmark reference data.

Static benchmarks used by the local calculation engine: hours saved per
user per week by department and platform, per-user monthly pricing,
compliance certification status, integration support level, and the
pain-point to platform solution mapping.

Platforms:
    google_gemini     : Google Gemini
    microsoft_copilot : Microsoft Copilot
    anthropic_claude  : Anthropic Claude
    openai_chatgpt    : OpenAI ChatGPT
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """A platform covered by the benchmark data.

    Attributes:
        platform_id: Stable identifier used as the key in every table.
        name: Display name.
        color: Brand colour hex used by chart consumers.
    """

    platform_id: str
    name: str
    color: str


AI_PLATFORMS: list[PlatformInfo] = [
    PlatformInfo(platform_id="google_gemini", name="Google Gemini", color="#4285F4"),
    PlatformInfo(platform_id="microsoft_copilot", name="Microsoft Copilot", color="#00A4EF"),
    PlatformInfo(platform_id="anthropic_claude", name="Anthropic Claude", color="#D97757"),
    PlatformInfo(platform_id="openai_chatgpt", name="OpenAI ChatGPT", color="#10A37F"),
]

PLATFORM_IDS: list[str] = [p.platform_id for p in AI_PLATFORMS]

PLATFORMS_BY_ID: dict[str, PlatformInfo] = {p.platform_id: p for p in AI_PLATFORMS}

DEPARTMENTS: list[str] = [
    "Sales",
    "Marketing",
    "Finance",
    "HR",
    "Customer Service",
    "Legal",
    "IT",
    "Operations",
    "Product",
    "Engineering",
]

COMPLIANCE_STANDARDS: list[str] = [
    "SOC 2",
    "ISO 27001",
    "HIPAA",
    "GDPR",
    "FedRAMP",
    "PCI DSS",
    "CCPA",
    "NIST",
    "HITRUST",
]

INTEGRATION_CATEGORIES: dict[str, list[str]] = {
    "CRM": ["Salesforce", "HubSpot", "Dynamics 365", "Zoho"],
    "ERP": ["SAP", "Oracle", "NetSuite", "Workday"],
    "HRIS": ["Workday", "BambooHR", "ADP", "UKG"],
    "Productivity": ["Microsoft 365", "Google Workspace", "Slack", "Zoom"],
    "Development": ["GitHub", "GitLab", "Jira", "Azure DevOps"],
    "Security": ["Okta", "Azure AD", "CrowdStrike", "Palo Alto"],
    "Marketing": ["Marketo", "Pardot", "Mailchimp", "Hootsuite"],
    "Analytics": ["Tableau", "Power BI", "Looker", "Qlik"],
}

PAIN_POINTS: list[str] = [
    "Manual data entry and processing",
    "Long proposal and document creation cycles",
    "Multilingual communication barriers",
    "Inefficient customer support workflows",
    "Complex contract review processes",
    "Time-consuming research and analysis",
    "Repetitive email and communication tasks",
    "Data synthesis from multiple sources",
    "Content creation bottlenecks",
    "Meeting transcription and summarization",
]

# Hours saved per user per week, by department then platform
ROI_BENCHMARKS: dict[str, dict[str, float]] = {
    "Sales": {
        "google_gemini": 4.2,
        "microsoft_copilot": 5.1,
        "anthropic_claude": 3.8,
        "openai_chatgpt": 4.5,
    },
    "Marketing": {
        "google_gemini": 5.5,
        "microsoft_copilot": 4.8,
        "anthropic_claude": 5.2,
        "openai_chatgpt": 6.1,
    },
    "Finance": {
        "google_gemini": 3.9,
        "microsoft_copilot": 5.8,
        "anthropic_claude": 4.2,
        "openai_chatgpt": 3.7,
    },
    "HR": {
        "google_gemini": 4.1,
        "microsoft_copilot": 5.3,
        "anthropic_claude": 4.6,
        "openai_chatgpt": 4.0,
    },
    "Customer Service": {
        "google_gemini": 6.2,
        "microsoft_copilot": 5.5,
        "anthropic_claude": 5.9,
        "openai_chatgpt": 6.5,
    },
    "Legal": {
        "google_gemini": 5.0,
        "microsoft_copilot": 4.5,
        "anthropic_claude": 6.8,
        "openai_chatgpt": 5.2,
    },
    "IT": {
        "google_gemini": 4.8,
        "microsoft_copilot": 6.5,
        "anthropic_claude": 4.1,
        "openai_chatgpt": 5.5,
    },
    "Operations": {
        "google_gemini": 4.3,
        "microsoft_copilot": 5.0,
        "anthropic_claude": 4.7,
        "openai_chatgpt": 4.2,
    },
    "Product": {
        "google_gemini": 5.1,
        "microsoft_copilot": 4.6,
        "anthropic_claude": 5.4,
        "openai_chatgpt": 5.8,
    },
    "Engineering": {
        "google_gemini": 5.5,
        "microsoft_copilot": 5.2,
        "anthropic_claude": 4.9,
        "openai_chatgpt": 6.2,
    },
}

# Monthly price per user (USD)
PLATFORM_PRICING: dict[str, float] = {
    "google_gemini": 20.0,
    "microsoft_copilot": 30.0,
    "anthropic_claude": 25.0,
    "openai_chatgpt": 20.0,
}

DEFAULT_MONTHLY_PRICE: float = 20.0

# certified | in_progress | not_certified; anything missing is "unknown"
COMPLIANCE_DATA: dict[str, dict[str, str]] = {
    "google_gemini": {
        "SOC 2": "certified",
        "ISO 27001": "certified",
        "HIPAA": "in_progress",
        "GDPR": "certified",
        "FedRAMP": "not_certified",
        "PCI DSS": "certified",
        "CCPA": "certified",
        "NIST": "in_progress",
        "HITRUST": "not_certified",
    },
    "microsoft_copilot": {
        "SOC 2": "certified",
        "ISO 27001": "certified",
        "HIPAA": "certified",
        "GDPR": "certified",
        "FedRAMP": "certified",
        "PCI DSS": "certified",
        "CCPA": "certified",
        "NIST": "certified",
        "HITRUST": "certified",
    },
    "anthropic_claude": {
        "SOC 2": "certified",
        "ISO 27001": "certified",
        "HIPAA": "certified",
        "GDPR": "certified",
        "FedRAMP": "not_certified",
        "PCI DSS": "in_progress",
        "CCPA": "certified",
        "NIST": "in_progress",
        "HITRUST": "not_certified",
    },
    "openai_chatgpt": {
        "SOC 2": "certified",
        "ISO 27001": "certified",
        "HIPAA": "in_progress",
        "GDPR": "certified",
        "FedRAMP": "not_certified",
        "PCI DSS": "in_progress",
        "CCPA": "certified",
        "NIST": "in_progress",
        "HITRUST": "not_certified",
    },
}


def _support(
    native: tuple[str, ...] = (),
    limited: tuple[str, ...] = (),
    not_supported: tuple[str, ...] = (),
) -> dict[str, str]:
    """Build a full integration support row; unlisted tools are "api"."""
    row: dict[str, str] = {}
    for tools in INTEGRATION_CATEGORIES.values():
        for tool in tools:
            row[tool] = "api"
    row.update({tool: "native" for tool in native})
    row.update({tool: "limited" for tool in limited})
    row.update({tool: "not_supported" for tool in not_supported})
    return row


# native | api | limited | not_supported
INTEGRATION_SUPPORT: dict[str, dict[str, str]] = {
    "google_gemini": _support(
        native=("Google Workspace",),
        limited=(
            "Dynamics 365",
            "Zoho",
            "NetSuite",
            "BambooHR",
            "Microsoft 365",
            "Azure DevOps",
            "Azure AD",
            "Marketo",
            "Pardot",
            "Hootsuite",
            "Power BI",
            "Qlik",
        ),
        not_supported=("ADP", "UKG", "CrowdStrike", "Palo Alto"),
    ),
    "microsoft_copilot": _support(
        native=("Dynamics 365", "Microsoft 365", "Azure DevOps", "Azure AD", "Power BI"),
        limited=("Zoho", "ADP", "UKG", "Pardot", "Hootsuite"),
    ),
    "anthropic_claude": _support(
        native=("Slack",),
        limited=("CrowdStrike", "Palo Alto"),
    ),
    "openai_chatgpt": _support(
        native=("GitHub",),
        limited=("ADP", "UKG", "CrowdStrike", "Palo Alto"),
    ),
}

INTEGRATION_WEIGHTS: dict[str, float] = {
    "native": 1.0,
    "api": 0.8,
    "limited": 0.4,
    "not_supported": 0.0,
}


@dataclass(frozen=True)
class PainPointSolution:
    """How AI addresses a pain point, with platforms ranked best first."""

    solution: str
    platforms: tuple[str, ...]


PAIN_POINT_SOLUTIONS: dict[str, PainPointSolution] = {
    "Manual data entry and processing": PainPointSolution(
        solution="Automated data extraction and structured output",
        platforms=("microsoft_copilot", "google_gemini", "openai_chatgpt"),
    ),
    "Long proposal and document creation cycles": PainPointSolution(
        solution="AI-assisted content generation and templates",
        platforms=("anthropic_claude", "openai_chatgpt", "microsoft_copilot"),
    ),
    "Multilingual communication barriers": PainPointSolution(
        solution="Real-time translation and localization",
        platforms=("google_gemini", "openai_chatgpt", "anthropic_claude"),
    ),
    "Inefficient customer support workflows": PainPointSolution(
        solution="Automated response generation and ticket routing",
        platforms=("openai_chatgpt", "google_gemini", "anthropic_claude"),
    ),
    "Complex contract review processes": PainPointSolution(
        solution="Document analysis and risk identification",
        platforms=("anthropic_claude", "openai_chatgpt", "microsoft_copilot"),
    ),
    "Time-consuming research and analysis": PainPointSolution(
        solution="Information synthesis and summarization",
        platforms=("anthropic_claude", "google_gemini", "openai_chatgpt"),
    ),
    "Repetitive email and communication tasks": PainPointSolution(
        solution="Email drafting and response automation",
        platforms=("microsoft_copilot", "openai_chatgpt", "google_gemini"),
    ),
    "Data synthesis from multiple sources": PainPointSolution(
        solution="Multi-source data aggregation and insights",
        platforms=("google_gemini", "anthropic_claude", "microsoft_copilot"),
    ),
    "Content creation bottlenecks": PainPointSolution(
        solution="AI content generation and editing",
        platforms=("openai_chatgpt", "anthropic_claude", "google_gemini"),
    ),
    "Meeting transcription and summarization": PainPointSolution(
        solution="Automated meeting notes and action items",
        platforms=("microsoft_copilot", "google_gemini", "openai_chatgpt"),
    ),
}

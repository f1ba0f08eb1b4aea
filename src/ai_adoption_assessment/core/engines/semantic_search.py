"""Natural-language platform search.

The LLM extracts structured criteria from the query and scores the
catalogue; ``core.search`` then combines that with local matching.
"""

from typing import Any

from ai_adoption_assessment.core.engines.schema import array, number, obj, string, string_list
from ai_adoption_assessment.core.interfaces import ILLMClient
from ai_adoption_assessment.core.search import DEFAULT_MIN_SCORE, score_and_filter_platforms
from ai_adoption_assessment.errors import ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

SEARCH_SCHEMA: dict[str, Any] = obj(
    understanding=string(),
    extracted_criteria=obj(
        categories=string_list(),
        use_cases=string_list(),
        compliance_requirements=string_list(),
        integrations_needed=string_list(),
        deployment_preference=string(),
        budget_level=string(),
        key_features=string_list(),
    ),
    platform_scores=array(
        obj(
            platform_name=string(),
            score=number(),
            match_reasons=string_list(),
            concerns=string_list(),
        )
    ),
    recommendations_summary=string(),
)


def _distinct(platforms: list[dict[str, Any]], field: str) -> str:
    values = sorted({str(p[field]) for p in platforms if p.get(field)})
    return ", ".join(values) or "Not specified"


def build_search_prompt(query: str, platforms: list[dict[str, Any]]) -> str:
    names = ", ".join(p.get("name", "") for p in platforms)
    return f"""You are an AI platform recommendation expert. Analyze this natural language query and extract structured search criteria.

User Query: "{query}"

Available platforms: {names}
- Categories: {_distinct(platforms, "category")}
- Tiers: {_distinct(platforms, "tier")}
- Ecosystems: {_distinct(platforms, "ecosystem")}
- Common compliance: HIPAA, GDPR, SOC2, ISO27001
- Common integrations: Slack, Microsoft Teams, Salesforce, Google Workspace, Zapier

Based on the query, identify:
1. Which categories might be relevant
2. Industry or use case mentioned
3. Compliance requirements
4. Budget indicators (enterprise, affordable, small team, etc.)
5. Deployment preferences
6. Integration needs
7. Specific features or capabilities

Then score each platform (1-100) on how well it matches the query, weighing direct feature matches highest, then compliance alignment, use case fit, ecosystem compatibility, and pricing tier.

Return a scoring rationale and the top matching platforms."""


class SemanticSearchEngine:
    def __init__(self, llm: ILLMClient, min_score: float = DEFAULT_MIN_SCORE) -> None:
        self._llm = llm
        self._min_score = min_score

    async def search(self, query: str, platforms: list[dict[str, Any]]) -> dict[str, Any]:
        """Rank catalogue platforms against a natural-language query.

        Args:
            query: Free-text search.
            platforms: AIPlatform dicts to rank.

        Returns:
            Dict with the query, the LLM's understanding and criteria,
            its summary, and the filtered, scored platforms.

        Raises:
            ValidationError: If the query is blank or there are no platforms.
        """
        if not query or not query.strip():
            raise ValidationError("Please enter a search query.")
        if not platforms:
            raise ValidationError("No platforms available to search.")

        response = await self._llm.invoke(
            build_search_prompt(query.strip(), platforms),
            response_json_schema=SEARCH_SCHEMA,
            add_context_from_internet=False,
        )
        results = score_and_filter_platforms(platforms, response, self._min_score)

        logger.info(
            "Semantic search completed",
            platform_count=len(platforms),
            match_count=len(results),
        )
        return {
            "query": query.strip(),
            "understanding": response.get("understanding"),
            "extracted_criteria": response.get("extracted_criteria") or {},
            "recommendations_summary": response.get("recommendations_summary"),
            "results": results,
        }

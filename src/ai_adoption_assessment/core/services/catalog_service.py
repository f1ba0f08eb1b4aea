"""Platform catalogue browsing and natural-language search."""

from typing import Any

from ai_adoption_assessment.core import reference_data
from ai_adoption_assessment.core.engines.semantic_search import SemanticSearchEngine
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import AIPlatform


class CatalogService:
    def __init__(self, platform_repo: IEntityRepository, search_engine: SemanticSearchEngine) -> None:
        self._platforms = platform_repo
        self._search = search_engine

    async def list_platforms(
        self,
        category: str | None = None,
        limit: int | None = None,
    ) -> list[AIPlatform]:
        criteria = {"category": category} if category else {}
        return await self._platforms.filter(criteria, sort="name", limit=limit)

    async def search(self, query: str) -> dict[str, Any]:
        """Rank the whole catalogue against a free-text query.

        Raises:
            ValidationError: If the query is blank or the catalogue is empty.
        """
        platforms = await self._platforms.list_all(sort="name")
        return await self._search.search(query, [p.to_dict() for p in platforms])

    @staticmethod
    def intake_options() -> dict[str, Any]:
        """Choices offered by the assessment intake forms."""
        return {
            "platforms": [
                {"platform_id": p.platform_id, "name": p.name, "color": p.color}
                for p in reference_data.AI_PLATFORMS
            ],
            "departments": reference_data.DEPARTMENTS,
            "compliance_standards": reference_data.COMPLIANCE_STANDARDS,
            "integration_categories": reference_data.INTEGRATION_CATEGORIES,
            "pain_points": reference_data.PAIN_POINTS,
        }

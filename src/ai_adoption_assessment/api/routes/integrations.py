"""Direct LLM invocation for clients that build their own prompts.

API prefix: /api/v1/integrations
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from ai_adoption_assessment.api.dependencies import get_llm_client
from ai_adoption_assessment.api.schemas import InvokeLLMRequest
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.interfaces import ILLMClient

router = APIRouter(prefix="/integrations", tags=["Integrations"])


@router.post("/invoke-llm")
async def invoke_llm(
    body: InvokeLLMRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    llm: ILLMClient = Depends(get_llm_client),
) -> dict[str, Any]:
    return await llm.invoke(
        body.prompt,
        response_json_schema=body.response_json_schema,
        add_context_from_internet=body.add_context_from_internet,
    )

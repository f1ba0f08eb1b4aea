"""Test fixtures for ai-adoption-assessment.

API tests run the FastAPI app in-process through httpx's ASGITransport.
The lifespan does not run, so no database or LLM client is created:
tests override the service dependencies they exercise.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from ai_adoption_assessment.main import create_app

USER_HEADERS = {
    "X-User-Email": "Ada@Acme.com",
    "X-User-Name": "Ada Lovelace",
    "X-User-Role": "admin",
}


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """A fresh application per test so overrides never leak."""
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client sending the gateway identity headers."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=USER_HEADERS,
    ) as http_client:
        yield http_client

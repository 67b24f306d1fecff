"""Integration test fixtures (service checks and prerequisites).

Provides fixtures for checking if the Gemini API is reachable with a real key.
Live tests are skipped when GEMINI_API_KEY is unset or the API cannot be reached.
"""

import os

import httpx
import pytest
import pytest_asyncio

from lesson_generation.llm.gemini_client import GeminiClient

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"


@pytest.fixture(scope="session")
def gemini_api_key() -> str:
    """Real API key from the environment; skips the test when absent."""
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        pytest.skip("GEMINI_API_KEY not set")
    return api_key


@pytest.fixture(scope="session")
def check_gemini(gemini_api_key):
    """Check if the Gemini API answers a model listing.

    Skips tests if the API is not reachable.
    """
    try:
        response = httpx.get(
            f"{GEMINI_BASE_URL}/v1beta/models",
            headers={"x-goog-api-key": gemini_api_key},
            timeout=10,
        )
    except httpx.HTTPError as e:
        pytest.skip(f"Gemini API not available: {e}")
    if response.status_code != 200:
        pytest.skip(f"Gemini API not available (status {response.status_code})")


@pytest_asyncio.fixture
async def real_gemini_client(check_gemini, gemini_api_key):
    """Real GeminiClient instance for integration tests.

    Requires network access and a valid key (checked by check_gemini fixture).
    """
    client = GeminiClient(api_key=gemini_api_key, timeout=60)
    yield client
    await client.close()


@pytest.fixture
def integration_settings(test_settings, gemini_api_key):
    """Settings for integration tests against the real Gemini API."""
    test_settings.GEMINI_API_KEY = gemini_api_key
    test_settings.GEMINI_BASE_URL = GEMINI_BASE_URL
    test_settings.MODEL_SWITCH_DELAY_SECONDS = 0.3
    test_settings.RETRY_DELAY_SECONDS = 1.0
    test_settings.PROMETHEUS_ENABLED = False

    return test_settings

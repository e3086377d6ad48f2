"""
Fixtures compartidas para todos los tests.
"""
import os

# =============================================================================
# CRITICAL: Set env vars BEFORE any callkit imports
# =============================================================================
os.environ.setdefault("CALLING_MOCK_MODE", "false")
os.environ.setdefault("VAPI_API_KEY", "test_vapi_key")
os.environ.setdefault("ELEVENLABS_API_KEY", "test_elevenlabs_key")
os.environ.setdefault("OPENAI_API_KEY", "sk-test-openai")
os.environ.setdefault("GROQ_API_KEY", "gsk_test_groq")
os.environ.setdefault("DEEPGRAM_API_KEY", "test_deepgram_key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import httpx
import pytest

from callkit.infrastructure.adapter_factory import reset_adapter_bundle
from tests.mocks.fake_redis import FakeRedis

PROVIDER_ENV_VARS = (
    "CALLING_MOCK_MODE",
    "TELEPHONY_PROVIDER",
    "VOICE_PROVIDER",
    "LLM_PROVIDER",
    "STT_PROVIDER",
)


# =============================================================================
# Environment Setup
# =============================================================================

@pytest.fixture(autouse=True)
def clean_adapter_state(monkeypatch):
    """Every test starts with no cached bundle and default provider selection."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_adapter_bundle()
    yield
    reset_adapter_bundle()


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def fake_redis():
    """In-memory Redis with a manual clock."""
    return FakeRedis()


@pytest.fixture
def http_recorder():
    """
    httpx client backed by MockTransport.

    Usage:
        client, requests = http_recorder(lambda request: httpx.Response(200, json={...}))
    """
    def _make(handler):
        requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return client, requests

    return _make

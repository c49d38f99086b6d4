"""Unit tests for the availability-based backend factory."""

from typing import Any, Iterator
from unittest.mock import MagicMock, patch

import pytest

from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.paths.router import FoodImageAnalysisService
from infrastructure.config import AnalyzerSettings
from infrastructure.food_analysis.backends.factory import (
    build_backend_chain,
    create_edge_pipeline,
    create_priors_store,
)
from infrastructure.food_analysis.backends.managed_backend import (
    ManagedAnalyzerBackend,
)
from infrastructure.food_analysis.priors.in_memory_priors_store import (
    InMemoryFoodPriorsStore,
)

FACTORY = "infrastructure.food_analysis.backends.factory"


@pytest.fixture
def mock_openai_client() -> Iterator[Any]:
    with patch("infrastructure.ai.openai.client.AsyncOpenAI") as mock:
        yield mock


def _ids(backends: Any) -> list:
    return [b.backend_id for b in backends]


def test_stub_only_without_credentials():
    backends = build_backend_chain(AnalyzerSettings())

    assert _ids(backends) == [BackendId.STUB]


def test_managed_needs_both_url_and_key():
    settings = AnalyzerSettings(supabase_url="https://xyz.supabase.co")

    assert _ids(build_backend_chain(settings)) == [BackendId.STUB]


def test_full_chain_order(mock_openai_client):
    settings = AnalyzerSettings(
        supabase_url="https://xyz.supabase.co",
        supabase_anon_key="anon",
        openai_api_key="sk-test",
        openai_vision_model="gpt-4o",
        managed_timeout_s=5,
    )

    backends = build_backend_chain(settings)

    assert _ids(backends) == [BackendId.MANAGED, BackendId.VISION, BackendId.STUB]
    assert isinstance(backends[0], ManagedAnalyzerBackend)
    assert backends[0].endpoint == "https://xyz.supabase.co/functions/v1/analyze_food"
    mock_openai_client.assert_called_once_with(
        api_key="sk-test", base_url=None, timeout=12.0, max_retries=0
    )


def test_vision_only(mock_openai_client):
    backends = build_backend_chain(AnalyzerSettings(openai_api_key="sk-test"))

    assert _ids(backends) == [BackendId.VISION, BackendId.STUB]


def test_edge_pipeline_needs_classifier_key():
    assert create_edge_pipeline(AnalyzerSettings()) is None


def test_edge_pipeline_uses_classifier_endpoint(mock_openai_client):
    settings = AnalyzerSettings(
        classifier_api_key="sk-edge",
        classifier_endpoint="https://llm.example.com/v1",
        classifier_model="vision-small",
    )

    pipeline = create_edge_pipeline(settings)

    assert isinstance(pipeline, FoodImageAnalysisService)
    mock_openai_client.assert_called_once_with(
        api_key="sk-edge",
        base_url="https://llm.example.com/v1",
        timeout=12.0,
        max_retries=0,
    )


def test_priors_store_defaults_to_memory():
    store = create_priors_store(AnalyzerSettings(supabase_anon_key="anon"))

    assert isinstance(store, InMemoryFoodPriorsStore)


def test_priors_store_uses_service_role_key():
    settings = AnalyzerSettings(
        supabase_url="https://xyz.supabase.co", supabase_service_role_key="service"
    )
    sentinel = MagicMock()

    with patch(
        f"{FACTORY}.SupabaseFoodPriorsStore.from_credentials", return_value=sentinel
    ) as from_credentials:
        store = create_priors_store(settings)

    assert store is sentinel
    from_credentials.assert_called_once_with("https://xyz.supabase.co", "service")

"""Shared test fixtures.

Unit tests never touch the network: every external service is replaced by
a fake, a mock or an httpx.MockTransport.
"""

from __future__ import annotations

from typing import Generator

import pytest

from metrics.food_analysis import reset_all

ANALYZER_ENV_VARS = (
    "CLASSIFIER_ENDPOINT",
    "CLASSIFIER_API_KEY",
    "CLASSIFIER_MODEL",
    "OPENAI_API_KEY",
    "OPENAI_VISION_MODEL",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
    "DEFAULT_PORTION_GRAMS",
    "DEFAULT_WEIGHT_RELATIVE_SIGMA",
    "ANALYZER_TIMEOUT_S",
    "INFERENCE_TIMEOUT_S",
    "MANAGED_TIMEOUT_S",
)


@pytest.fixture(autouse=True)
def _clear_analyzer_env(
    request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Pulisce le variabili dell'analyzer prima di ogni test.

    Evita che valori presenti in .env (es. OPENAI_API_KEY) aggiungano
    backend reali alla catena. I test che necessitano di un valore
    specifico lo impostano con monkeypatch.setenv.
    """
    if request.node.get_closest_marker("integration_real"):
        yield
        return
    for name in ANALYZER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_metrics() -> Generator[None, None, None]:
    """Reset metriche prima e dopo ogni test per isolamento."""
    reset_all()
    yield
    reset_all()

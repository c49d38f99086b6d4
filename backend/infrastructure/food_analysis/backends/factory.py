"""Backend factory for the food analyzer.

Availability-based construction from ``AnalyzerSettings``:
- managed backend only if SUPABASE_URL + SUPABASE_ANON_KEY are set
- direct vision backend only if OPENAI_API_KEY is set
- stub backend always, always last

Usage:
    settings = AnalyzerSettings.from_env()
    priors = create_priors_store(settings)
    chain = AnalyzerFallbackChain(build_backend_chain(settings, priors))
"""

import logging
from typing import List, Optional

from domain.food_analysis.core.ports.analyzer_backend import IAnalyzerBackend
from domain.food_analysis.nutrition.ports.priors_store import IFoodPriorsStore
from domain.food_analysis.nutrition.services.macro_calculator import MacroCalculator
from domain.food_analysis.paths.router import FoodImageAnalysisService
from infrastructure.ai.openai.client import OpenAIInferenceClient
from infrastructure.config import AnalyzerSettings
from infrastructure.food_analysis.backends.managed_backend import (
    ManagedAnalyzerBackend,
)
from infrastructure.food_analysis.backends.stub_backend import StubAnalyzerBackend
from infrastructure.food_analysis.backends.vision_backend import (
    VisionAnalyzerBackend,
)
from infrastructure.food_analysis.priors.in_memory_priors_store import (
    InMemoryFoodPriorsStore,
)
from infrastructure.food_analysis.priors.supabase_priors_store import (
    SupabaseFoodPriorsStore,
)

logger = logging.getLogger(__name__)


def create_priors_store(settings: AnalyzerSettings) -> IFoodPriorsStore:
    """Supabase store when the service role key is set, else empty in-memory store."""
    if settings.priors_store_configured:
        assert settings.supabase_url and settings.supabase_service_role_key
        return SupabaseFoodPriorsStore.from_credentials(
            settings.supabase_url, settings.supabase_service_role_key
        )
    return InMemoryFoodPriorsStore()


def create_pipeline(
    settings: AnalyzerSettings,
    api_key: str,
    model: str,
    priors_store: Optional[IFoodPriorsStore] = None,
    base_url: Optional[str] = None,
) -> FoodImageAnalysisService:
    """Classifier + evidence paths around one OpenAI-compatible client."""
    inference = OpenAIInferenceClient(
        api_key=api_key,
        model=model,
        base_url=base_url,
        timeout_s=settings.inference_timeout_s,
    )
    return FoodImageAnalysisService.create(
        inference,
        MacroCalculator(priors_store),
        default_portion_grams=settings.default_portion_grams,
        weight_relative_sigma=settings.default_weight_relative_sigma,
    )


def create_edge_pipeline(
    settings: AnalyzerSettings, priors_store: Optional[IFoodPriorsStore] = None
) -> Optional[FoodImageAnalysisService]:
    """Pipeline behind the managed edge endpoint; None without CLASSIFIER_API_KEY."""
    if not settings.classifier_api_key:
        return None
    return create_pipeline(
        settings,
        api_key=settings.classifier_api_key,
        model=settings.classifier_model,
        priors_store=priors_store,
        base_url=settings.classifier_endpoint,
    )


def build_backend_chain(
    settings: AnalyzerSettings, priors_store: Optional[IFoodPriorsStore] = None
) -> List[IAnalyzerBackend]:
    """
    Ordered backend list for the fallback chain.

    Missing credentials silently drop a backend; the stub is always last.

    Example:
        >>> [b.backend_id.value for b in build_backend_chain(AnalyzerSettings())]
        ['stub']
    """
    backends: List[IAnalyzerBackend] = []

    if settings.managed_configured:
        assert settings.supabase_url and settings.supabase_anon_key
        backends.append(
            ManagedAnalyzerBackend(
                settings.supabase_url,
                settings.supabase_anon_key,
                timeout_s=settings.managed_timeout_s,
            )
        )

    if settings.vision_configured:
        assert settings.openai_api_key
        pipeline = create_pipeline(
            settings,
            api_key=settings.openai_api_key,
            model=settings.openai_vision_model,
            priors_store=priors_store,
        )
        backends.append(VisionAnalyzerBackend(pipeline))

    backends.append(StubAnalyzerBackend())

    logger.info(
        "Analyzer chain built",
        extra={"backends": [b.backend_id.value for b in backends]},
    )
    return backends

"""Analyzer backend adapters and factory."""

from infrastructure.food_analysis.backends.factory import (
    build_backend_chain,
    create_edge_pipeline,
    create_pipeline,
    create_priors_store,
)
from infrastructure.food_analysis.backends.managed_backend import (
    ManagedAnalyzerBackend,
)
from infrastructure.food_analysis.backends.stub_backend import StubAnalyzerBackend
from infrastructure.food_analysis.backends.vision_backend import (
    VisionAnalyzerBackend,
)

__all__ = [
    "ManagedAnalyzerBackend",
    "StubAnalyzerBackend",
    "VisionAnalyzerBackend",
    "build_backend_chain",
    "create_edge_pipeline",
    "create_pipeline",
    "create_priors_store",
]

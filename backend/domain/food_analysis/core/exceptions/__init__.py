"""Domain exceptions for the Food Analysis bounded context."""

from domain.food_analysis.core.exceptions.domain_errors import (
    AllBackendsFailedError,
    AnalysisTimeoutError,
    BackendError,
    ClassificationError,
    FoodAnalysisError,
    InputError,
    PathExecutionError,
    PriorsStoreError,
)

__all__ = [
    "FoodAnalysisError",
    "InputError",
    "ClassificationError",
    "PathExecutionError",
    "BackendError",
    "PriorsStoreError",
    "AllBackendsFailedError",
    "AnalysisTimeoutError",
]

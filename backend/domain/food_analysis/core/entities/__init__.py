"""Core entities for the food analysis domain."""

from .analysis import (
    MISSING_IMAGE_MESSAGE,
    AnalyzeInput,
    AnalyzeItem,
    AnalyzeMeta,
    AnalyzeOutput,
    FoodAnalysisResult,
    MenuItemInfo,
    NutritionLabelInfo,
)

__all__ = [
    "MISSING_IMAGE_MESSAGE",
    "AnalyzeInput",
    "AnalyzeItem",
    "AnalyzeMeta",
    "AnalyzeOutput",
    "FoodAnalysisResult",
    "MenuItemInfo",
    "NutritionLabelInfo",
]

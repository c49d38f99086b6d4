"""OpenAI client implementation for food image inference."""

from infrastructure.ai.openai.client import OpenAIInferenceClient
from infrastructure.ai.openai.models import (
    GeometryResponse,
    ImageTypeResponse,
    MenuItemResponse,
    NutritionLabelResponse,
)

__all__ = [
    "OpenAIInferenceClient",
    "GeometryResponse",
    "ImageTypeResponse",
    "MenuItemResponse",
    "NutritionLabelResponse",
]

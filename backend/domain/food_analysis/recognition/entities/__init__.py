"""Recognition domain entities."""

from domain.food_analysis.recognition.entities.evidence import (
    GeometryEstimate,
    ImageTypeResult,
    MenuItemReading,
    NutritionLabelReading,
)

__all__ = [
    "GeometryEstimate",
    "ImageTypeResult",
    "MenuItemReading",
    "NutritionLabelReading",
]

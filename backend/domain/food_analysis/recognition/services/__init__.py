"""Recognition domain services."""

from domain.food_analysis.recognition.services.image_type_classifier import (
    ImageTypeClassifier,
)
from domain.food_analysis.recognition.services.labels import (
    UNKNOWN_FOOD,
    derive_parent_label,
    sanitize_label,
)

__all__ = [
    "UNKNOWN_FOOD",
    "ImageTypeClassifier",
    "derive_parent_label",
    "sanitize_label",
]

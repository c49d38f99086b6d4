"""Evidence entities: structured readings returned by the inference service.

Each reading is the schema-validated answer to one question asked of the
vision model (what kind of image is this, what does the label say, which
menu item is it, how big is this portion).
"""

import math
from dataclasses import dataclass
from typing import Optional

from domain.food_analysis.core.value_objects.image_type import ImageType
from domain.food_analysis.core.value_objects.macros import Macros


def _check_confidence(confidence: float) -> None:
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"Confidence must be between 0.0 and 1.0, got {confidence}")


def _check_finite(name: str, value: Optional[float]) -> None:
    if value is not None and not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class ImageTypeResult:
    """
    Entity: output of the image-type classifier.

    Blank restaurant/brand names are normalized to None, so a
    ``restaurant`` result without ``restaurant_name`` means the chain
    could not be resolved.
    """

    image_type: ImageType
    confidence: float
    reasoning: str = ""
    restaurant_name: Optional[str] = None
    brand_name: Optional[str] = None

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)
        object.__setattr__(self, "image_type", ImageType(self.image_type))
        object.__setattr__(
            self, "restaurant_name", _blank_to_none(self.restaurant_name)
        )
        object.__setattr__(self, "brand_name", _blank_to_none(self.brand_name))


@dataclass(frozen=True)
class NutritionLabelReading:
    """Entity: nutrition facts panel read from a packaged product."""

    label: str
    confidence: float
    calories: float
    serving_size: str
    calories_per_serving: float
    total_servings: Optional[float] = None

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)
        for name in ("calories", "calories_per_serving", "total_servings"):
            _check_finite(name, getattr(self, name))
        if self.calories < 0:
            raise ValueError(f"Calories must be non-negative, got {self.calories}")
        if self.calories_per_serving < 0:
            raise ValueError(
                "Calories per serving must be non-negative, "
                f"got {self.calories_per_serving}"
            )
        if self.total_servings is not None and self.total_servings <= 0:
            raise ValueError(
                f"Total servings must be positive, got {self.total_servings}"
            )


@dataclass(frozen=True)
class MenuItemReading:
    """Entity: chain menu item matched against published nutrition."""

    restaurant: str
    item_name: str
    calories: float
    confidence: float

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)
        _check_finite("calories", self.calories)
        if self.calories < 0:
            raise ValueError(f"Calories must be non-negative, got {self.calories}")


@dataclass(frozen=True)
class GeometryEstimate:
    """
    Entity: visual portion estimate of a prepared dish.

    Attributes:
        label: Food name
        confidence: Recognition confidence (0.0 - 1.0)
        density_g_ml: Mass density mean (g/mL), positive
        kcal_per_g: Energy density mean (kcal/g), positive
        parent_label: Broader category (e.g. "fruit" for "apple")
        estimated_volume_ml: Portion volume, when the model estimated one
        estimated_weight_g: Portion weight, when the model estimated one
        total_calories: Model's single-pass calorie guess for the portion
        macros: Model's per-macro guesses for the portion
    """

    label: str
    confidence: float
    density_g_ml: float
    kcal_per_g: float
    parent_label: Optional[str] = None
    estimated_volume_ml: Optional[float] = None
    estimated_weight_g: Optional[float] = None
    total_calories: Optional[float] = None
    macros: Optional[Macros] = None

    def __post_init__(self) -> None:
        _check_confidence(self.confidence)
        for name in (
            "density_g_ml",
            "kcal_per_g",
            "estimated_volume_ml",
            "estimated_weight_g",
            "total_calories",
        ):
            _check_finite(name, getattr(self, name))
        if self.density_g_ml <= 0:
            raise ValueError(f"Density must be positive, got {self.density_g_ml}")
        if self.kcal_per_g <= 0:
            raise ValueError(f"kcal/g must be positive, got {self.kcal_per_g}")
        for name in ("estimated_volume_ml", "estimated_weight_g", "total_calories"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        object.__setattr__(self, "parent_label", _blank_to_none(self.parent_label))

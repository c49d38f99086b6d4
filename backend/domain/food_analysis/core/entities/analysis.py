"""Analysis entities: request, candidate item and response contracts.

These entities are created fresh for every request and never mutated:
the pipeline builds new values with ``dataclasses.replace``.
"""

import base64
import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from domain.food_analysis.core.exceptions.domain_errors import InputError
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.macros import Macros
from domain.food_analysis.core.value_objects.priors import ItemPriors

MISSING_IMAGE_MESSAGE = "Provide imageUrl or imageBase64"

_URL_PREFIXES = ("http://", "https://", "data:")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class AnalyzeInput:
    """
    Entity: one image submitted for analysis.

    Exactly one image reference must be present. Empty strings count as
    absent.

    Attributes:
        image_url: http(s) or data: URL of the photo
        image_base64: Base64-encoded image bytes (optionally data:-prefixed)
        region: Optional locale hint (e.g. "US")

    Raises:
        InputError: If no image reference (or both) is provided

    Example:
        >>> AnalyzeInput(image_url="https://example.com/meal.jpg").image_data_url()
        'https://example.com/meal.jpg'
    """

    image_url: Optional[str] = None
    image_base64: Optional[str] = None
    region: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "image_url", _blank_to_none(self.image_url))
        object.__setattr__(self, "image_base64", _blank_to_none(self.image_base64))
        object.__setattr__(self, "region", _blank_to_none(self.region))

        if self.image_url is None and self.image_base64 is None:
            raise InputError(MISSING_IMAGE_MESSAGE)
        if self.image_url is not None and self.image_base64 is not None:
            raise InputError("Provide only one of imageUrl or imageBase64")

    @classmethod
    def from_request(cls, body: Mapping[str, Any]) -> "AnalyzeInput":
        """Build from a JSON body (``imageUrl``, ``imageBase64``, ``region``)."""
        if not isinstance(body, Mapping):
            raise InputError(MISSING_IMAGE_MESSAGE)

        def text(key: str) -> Optional[str]:
            value = body.get(key)
            if value is None:
                return None
            if not isinstance(value, str):
                raise InputError(f"{key} must be a string")
            return value

        return cls(
            image_url=text("imageUrl"),
            image_base64=text("imageBase64"),
            region=text("region"),
        )

    @classmethod
    def from_image(
        cls, image: Union[bytes, str], region: Optional[str] = None
    ) -> "AnalyzeInput":
        """
        Build from a raw upload or an opaque image string.

        Bytes are base64-encoded. Strings starting with ``http://``,
        ``https://`` or ``data:`` are treated as URLs, anything else as an
        already-encoded base64 payload.
        """
        if isinstance(image, (bytes, bytearray)):
            if not image:
                raise InputError(MISSING_IMAGE_MESSAGE)
            encoded = base64.b64encode(bytes(image)).decode("ascii")
            return cls(image_base64=encoded, region=region)

        if not isinstance(image, str):
            raise InputError(MISSING_IMAGE_MESSAGE)
        if image.strip().lower().startswith(_URL_PREFIXES):
            return cls(image_url=image, region=region)
        return cls(image_base64=image, region=region)

    def image_data_url(self) -> str:
        """URL form of the image, suitable for a vision model ``image_url`` part."""
        if self.image_url is not None:
            return self.image_url
        payload = self.image_base64 or ""
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]
        return f"data:image/jpeg;base64,{payload}"

    def reference_hash(self) -> str:
        """Stable short hash of the image reference (16 hex chars)."""
        reference = self.image_url or self.image_base64 or ""
        return hashlib.sha256(reference.encode("utf-8")).hexdigest()[:16]

    def to_payload(self) -> Dict[str, str]:
        """JSON body sent to the managed analyzer endpoint."""
        payload: Dict[str, str] = {}
        if self.image_url is not None:
            payload["imageUrl"] = self.image_url
        if self.image_base64 is not None:
            payload["imageBase64"] = self.image_base64
        if self.region is not None:
            payload["region"] = self.region
        return payload


@dataclass(frozen=True)
class NutritionLabelInfo:
    """Nutrition facts panel reading attached to label-path items."""

    serving_size: str
    calories_per_serving: float
    total_servings: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "servingSize": self.serving_size,
            "caloriesPerServing": self.calories_per_serving,
        }
        if self.total_servings is not None:
            data["totalServings"] = self.total_servings
        return data


@dataclass(frozen=True)
class MenuItemInfo:
    """Chain menu item attached to menu-path items."""

    restaurant: str
    item_name: str
    calories: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "restaurant": self.restaurant,
            "itemName": self.item_name,
            "calories": self.calories,
        }


@dataclass(frozen=True)
class AnalyzeItem:
    """
    Entity: one candidate food identification.

    Invariants:
    - label is non-empty
    - confidence in [0, 1]
    - calories, sigma_calories, weight_grams, volume_ml are non-negative
    """

    label: str
    confidence: float
    calories: int
    sigma_calories: float
    weight_grams: float
    volume_ml: float = 0.0
    path: Optional[EvidencePath] = None
    priors: Optional[ItemPriors] = None
    macros: Optional[Macros] = None
    evidence: Tuple[str, ...] = ()
    nutrition_label: Optional[NutritionLabelInfo] = None
    menu_item: Optional[MenuItemInfo] = None
    sigma_weight_grams: Optional[float] = None
    parent_label: Optional[str] = None
    emoji: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.label:
            raise ValueError("Label cannot be empty")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"Confidence must be between 0.0 and 1.0, got {self.confidence}"
            )
        for name in ("calories", "sigma_calories", "weight_grams", "volume_ml"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.sigma_weight_grams is not None and self.sigma_weight_grams < 0:
            raise ValueError(
                "sigma_weight_grams must be non-negative, "
                f"got {self.sigma_weight_grams}"
            )
        object.__setattr__(self, "evidence", tuple(self.evidence))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "label": self.label,
            "confidence": self.confidence,
            "calories": self.calories,
            "sigmaCalories": self.sigma_calories,
            "weightGrams": self.weight_grams,
            "volumeML": self.volume_ml,
            "evidence": list(self.evidence),
        }
        if self.path is not None:
            data["path"] = self.path.value
        if self.priors is not None:
            data["priors"] = self.priors.to_dict()
        if self.macros is not None:
            data["macros"] = self.macros.to_dict()
        if self.nutrition_label is not None:
            data["nutritionLabel"] = self.nutrition_label.to_dict()
        if self.menu_item is not None:
            data["menuItem"] = self.menu_item.to_dict()
        if self.sigma_weight_grams is not None:
            data["sigmaWeightGrams"] = self.sigma_weight_grams
        if self.parent_label is not None:
            data["parentLabel"] = self.parent_label
        if self.emoji is not None:
            data["emoji"] = self.emoji
        return data


@dataclass(frozen=True)
class AnalyzeMeta:
    """Provenance of a result: which backends were attempted, in order."""

    used: Tuple[BackendId, ...]
    latency_ms: Optional[int] = None
    is_fallback: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "used", tuple(BackendId(u) for u in self.used))

    @classmethod
    def for_attempts(
        cls, used: Tuple[BackendId, ...], latency_ms: Optional[int] = None
    ) -> "AnalyzeMeta":
        """Meta for a chain run; ``is_fallback`` is derived from ``used``."""
        return cls(used=tuple(used), latency_ms=latency_ms, is_fallback=len(used) > 1)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"used": [u.value for u in self.used]}
        if self.latency_ms is not None:
            data["latencyMs"] = self.latency_ms
        data["isFallback"] = self.is_fallback
        return data


@dataclass(frozen=True)
class AnalyzeOutput:
    """
    Entity: canonical analysis response.

    Invariant: items is non-empty.
    """

    items: Tuple[AnalyzeItem, ...]
    meta: Optional[AnalyzeMeta] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        if not self.items:
            raise ValueError("Analysis output must have at least one item")

    @property
    def top_item(self) -> AnalyzeItem:
        return self.items[0]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"items": [item.to_dict() for item in self.items]}
        if self.meta is not None:
            data["meta"] = self.meta.to_dict()
        return data


@dataclass(frozen=True)
class FoodAnalysisResult:
    """
    Client-facing summary of an analysis.

    Flattens the top item for display and records which backend produced
    the answer. The full canonical output is kept in ``analysis``.
    """

    food_type: str
    confidence: float
    calories: int
    weight: float
    emoji: str
    analyzer_source: BackendId
    used_fallback: bool
    analysis: AnalyzeOutput
    macros: Optional[Macros] = None
    evidence: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "foodType": self.food_type,
            "confidence": self.confidence,
            "calories": self.calories,
            "weight": self.weight,
            "emoji": self.emoji,
            "analyzerSource": self.analyzer_source.value,
            "usedFallback": self.used_fallback,
            "evidence": list(self.evidence),
            "analysis": self.analysis.to_dict(),
        }
        if self.macros is not None:
            data["macros"] = self.macros.to_dict()
        return data

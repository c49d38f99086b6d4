"""Stub analyzer backend for offline use and as the terminal fallback.

Returns a fixed food item chosen deterministically from the image
reference hash, so the same photo always yields the same answer. Never
calls external services and never raises.
"""

from typing import Tuple

from domain.food_analysis.core.entities.analysis import (
    AnalyzeInput,
    AnalyzeItem,
    AnalyzeOutput,
)
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.core.value_objects.macros import Macros

STUB_CONFIDENCE = 0.5
STUB_EVIDENCE = ("Stub",)


def _stub_item(label: str, weight_grams: float, macros: Macros) -> AnalyzeItem:
    calories = macros.atwater_calories()
    return AnalyzeItem(
        label=label,
        confidence=STUB_CONFIDENCE,
        calories=calories,
        sigma_calories=calories * 0.15,
        weight_grams=weight_grams,
        macros=macros,
        evidence=STUB_EVIDENCE,
    )


STUB_ITEMS: Tuple[AnalyzeItem, ...] = (
    _stub_item("apple", 182.0, Macros(protein_g=0.5, carbs_g=25.0, fat_g=0.3)),
    _stub_item("banana", 118.0, Macros(protein_g=1.3, carbs_g=27.0, fat_g=0.4)),
    _stub_item(
        "grilled chicken breast", 150.0, Macros(protein_g=46.5, carbs_g=0.0, fat_g=5.4)
    ),
    _stub_item("white rice", 158.0, Macros(protein_g=4.3, carbs_g=44.5, fat_g=0.4)),
    _stub_item("mixed salad", 120.0, Macros(protein_g=2.0, carbs_g=7.0, fat_g=0.3)),
)


class StubAnalyzerBackend:
    """
    Stub implementation of IAnalyzerBackend.

    Example:
        >>> backend = StubAnalyzerBackend()
        >>> out = await backend.analyze(AnalyzeInput(image_url="https://x/1.jpg"))
        >>> out.items[0] in STUB_ITEMS
        True
    """

    backend_id = BackendId.STUB

    def pick(self, image: AnalyzeInput) -> AnalyzeItem:
        index = int(image.reference_hash(), 16) % len(STUB_ITEMS)
        return STUB_ITEMS[index]

    async def analyze(self, image: AnalyzeInput) -> AnalyzeOutput:
        return AnalyzeOutput(items=(self.pick(image),))

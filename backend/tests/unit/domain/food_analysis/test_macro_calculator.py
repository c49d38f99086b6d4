"""Unit tests for MacroCalculator tier ordering."""

import pytest
from unittest.mock import AsyncMock

from domain.food_analysis.core.exceptions.domain_errors import PriorsStoreError
from domain.food_analysis.core.value_objects.macros import Macros
from domain.food_analysis.core.value_objects.priors import FoodPriors, GaussianPrior
from domain.food_analysis.nutrition.services.macro_calculator import (
    CARB_DOMINANT,
    DEFAULT_RATIO,
    PRODUCE,
    PROTEIN_DOMINANT,
    MacroCalculator,
    MacroTier,
    ratio_for,
)
from infrastructure.food_analysis.priors.in_memory_priors_store import (
    InMemoryFoodPriorsStore,
)
from metrics.core import registry

WHITE_RICE = FoodPriors(
    label="white rice",
    kcal_per_g=GaussianPrior(1.3, 0.13),
    density=GaussianPrior(0.85, 0.1),
    macros_per_100g=Macros(protein_g=2.7, carbs_g=28.0, fat_g=0.3),
)


@pytest.mark.parametrize(
    "label,ratio",
    [
        ("chicken breast", PROTEIN_DOMINANT),
        ("grilled fish", PROTEIN_DOMINANT),
        ("white rice", CARB_DOMINANT),
        ("garlic bread", CARB_DOMINANT),
        ("steamed broccoli", PRODUCE),
        ("ice cream", DEFAULT_RATIO),
    ],
)
def test_ratio_for(label, ratio):
    assert ratio_for(label) == ratio


@pytest.mark.asyncio
async def test_ratio_tier_protein_dominant():
    """chicken breast, 150 g, 231 kcal, not in the priors store."""
    calculator = MacroCalculator(InMemoryFoodPriorsStore())

    resolution = await calculator.resolve("chicken breast", 150, 231)

    assert resolution.tier == MacroTier.RATIO
    assert resolution.macros.protein_g == 17.3
    assert resolution.macros.carbs_g == 0.0
    assert resolution.macros.fat_g == 5.1


@pytest.mark.asyncio
async def test_priors_tier_wins():
    calculator = MacroCalculator(InMemoryFoodPriorsStore([WHITE_RICE]))

    resolution = await calculator.resolve("White Rice", 200, 260)

    assert resolution.tier == MacroTier.PRIORS
    assert resolution.macros == Macros(protein_g=5.4, carbs_g=56.0, fat_g=0.6)


@pytest.mark.asyncio
async def test_priors_without_macro_profile_falls_through():
    record = FoodPriors(
        label="white rice",
        kcal_per_g=GaussianPrior(1.3, 0.13),
        density=GaussianPrior(0.85, 0.1),
    )
    calculator = MacroCalculator(InMemoryFoodPriorsStore([record]))

    resolution = await calculator.resolve("white rice", 200, 260)

    assert resolution.tier == MacroTier.RATIO


@pytest.mark.asyncio
async def test_store_failure_falls_back_to_ratio():
    store = AsyncMock()
    store.find_by_label.side_effect = PriorsStoreError("connection refused")
    calculator = MacroCalculator(store)

    resolution = await calculator.resolve("chicken breast", 150, 231)

    assert resolution.tier == MacroTier.RATIO
    store.find_by_label.assert_awaited_once_with("chicken breast")


@pytest.mark.asyncio
async def test_zero_weight_skips_priors_and_ratio():
    store = AsyncMock()
    calculator = MacroCalculator(store)

    resolution = await calculator.resolve("white rice", 0, 260)

    assert resolution.tier == MacroTier.UNKNOWN
    assert resolution.macros is None
    store.find_by_label.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("calories", [None, 0, -5])
async def test_unknown_without_calories(calories):
    calculator = MacroCalculator()

    macros = await calculator.calculate("ice cream", 100, calories)

    assert macros is None


@pytest.mark.asyncio
async def test_tier_is_counted():
    calculator = MacroCalculator()

    await calculator.calculate("ice cream", 100, 200)
    await calculator.calculate("ice cream", 100, None)

    assert registry.counter_value("food_analysis_macro_tier_total", tier="ratio") == 1
    assert (
        registry.counter_value("food_analysis_macro_tier_total", tier="unknown") == 1
    )

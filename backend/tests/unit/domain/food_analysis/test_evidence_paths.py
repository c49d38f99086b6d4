"""Unit tests for the evidence path handlers and path routing."""

import pytest

from domain.food_analysis.core.exceptions.domain_errors import (
    ClassificationError,
    PathExecutionError,
)
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.image_type import ImageType
from domain.food_analysis.nutrition.services.calorie_reconciler import (
    CalorieReconciler,
)
from domain.food_analysis.nutrition.services.macro_calculator import MacroCalculator
from domain.food_analysis.paths.base import weight_from_calories
from domain.food_analysis.paths.geometry_path import GeometryPath
from domain.food_analysis.paths.label_path import (
    LabelPath,
    label_weight,
    serving_grams,
)
from domain.food_analysis.paths.menu_path import MenuPath
from domain.food_analysis.paths.router import FoodImageAnalysisService, select_path
from domain.food_analysis.recognition.entities.evidence import (
    GeometryEstimate,
    ImageTypeResult,
    NutritionLabelReading,
)


def _service(inference):
    return FoodImageAnalysisService.create(
        inference,
        MacroCalculator(),
        default_portion_grams=180,
        weight_relative_sigma=0.35,
    )


class TestHelpers:
    @pytest.mark.parametrize(
        "text,grams",
        [
            ("1 cup (30g)", 30.0),
            ("2 cookies (28 g)", 28.0),
            ("30 grams", 30.0),
            ("1.5g", 1.5),
            ("240mg", None),
            ("1 bar", None),
            ("", None),
        ],
    )
    def test_serving_grams(self, text, grams):
        assert serving_grams(text) == grams

    def test_label_weight_scales_servings(self):
        reading = NutritionLabelReading("granola", 0.9, 480, "60g", 240)

        assert label_weight(reading) == 120.0

    def test_label_weight_without_grams_uses_energy_density(self):
        reading = NutritionLabelReading("granola", 0.9, 250, "1 bar", 250)

        assert label_weight(reading) == 100.0

    def test_weight_from_calories(self):
        assert weight_from_calories(1200) == 480.0
        assert weight_from_calories(0) == 0.0


class TestSelectPath:
    def test_packaged_goes_to_label(self):
        result = ImageTypeResult(image_type=ImageType.PACKAGED, confidence=0.9)

        assert select_path(result) == EvidencePath.LABEL

    def test_resolved_restaurant_goes_to_menu(self):
        result = ImageTypeResult(
            image_type=ImageType.RESTAURANT, confidence=0.9, restaurant_name="Subway"
        )

        assert select_path(result) == EvidencePath.MENU

    def test_unresolved_restaurant_goes_to_geometry(self):
        result = ImageTypeResult(image_type=ImageType.RESTAURANT, confidence=0.9)

        assert select_path(result) == EvidencePath.GEOMETRY

    def test_prepared_goes_to_geometry(self):
        result = ImageTypeResult(image_type=ImageType.PREPARED, confidence=0.9)

        assert select_path(result) == EvidencePath.GEOMETRY


class TestLabelPath:
    @pytest.mark.asyncio
    async def test_packaged_cereal(self, packaged_inference, image):
        """Packaged product: nutrition label attached, sigma is 5 % of calories."""
        item = await _service(packaged_inference).analyze(image)

        assert packaged_inference.calls == [
            "classify_image_type",
            "extract_nutrition_label",
        ]
        assert item.path == EvidencePath.LABEL
        assert item.label == "honey oat cereal"
        assert item.calories == 1200
        assert item.sigma_calories == pytest.approx(0.05 * item.calories)
        assert item.weight_grams == 300.0
        assert item.nutrition_label.serving_size == "1 cup (30g)"
        assert item.nutrition_label.calories_per_serving == 120
        assert item.nutrition_label.total_servings == 10
        assert item.evidence == ("Classifier", "fake-vision", "Label")

    @pytest.mark.asyncio
    async def test_label_calories_match_macros(self, packaged_inference, image):
        item = await _service(packaged_inference).analyze(image)

        assert item.calories == item.macros.atwater_calories()

    @pytest.mark.asyncio
    async def test_missing_product_name(self, make_inference, image):
        inference = make_inference(
            label=NutritionLabelReading("  ", 0.9, 200, "1 bar (40g)", 200)
        )
        path = LabelPath(inference, MacroCalculator(), CalorieReconciler())

        item = await path.run(image)

        assert item.label == "packaged food"
        assert item.weight_grams == 40.0

    @pytest.mark.asyncio
    async def test_extraction_failure(self, make_inference, image):
        inference = make_inference(label=RuntimeError("model down"))
        path = LabelPath(inference, MacroCalculator(), CalorieReconciler())

        with pytest.raises(PathExecutionError, match="Label path failed"):
            await path.run(image)


class TestMenuPath:
    @pytest.mark.asyncio
    async def test_chain_restaurant(self, restaurant_inference, image):
        """Resolved chain: menu item attached, sigma is 10 % of calories."""
        item = await _service(restaurant_inference).analyze(image)

        assert restaurant_inference.restaurants == ["Chipotle"]
        assert item.path == EvidencePath.MENU
        assert item.menu_item.restaurant == "Chipotle"
        assert item.menu_item.item_name == "Burrito Bowl"
        assert item.label == "burrito bowl"
        assert item.calories == 1200
        assert item.sigma_calories == pytest.approx(0.10 * item.calories)
        assert item.weight_grams == 480.0

    @pytest.mark.asyncio
    async def test_blank_restaurant_rejected(self, restaurant_inference, image):
        path = MenuPath(restaurant_inference, MacroCalculator(), CalorieReconciler())

        with pytest.raises(PathExecutionError, match="restaurant name"):
            await path.run(image, "  ")

        assert restaurant_inference.calls == []


class TestGeometryPath:
    @pytest.mark.asyncio
    async def test_prepared_dish_reconciled(self, prepared_inference, image):
        """Macros 30/0/20 (300 kcal) override the raw 100 kcal guess."""
        item = await _service(prepared_inference).analyze(image)

        assert item.path == EvidencePath.GEOMETRY
        assert item.label == "pasta carbonara"
        assert item.calories == 300
        assert item.sigma_calories == pytest.approx(45.0)
        assert item.weight_grams == 250.0
        assert item.volume_ml == 230.0
        assert item.sigma_weight_grams == pytest.approx(87.5)
        assert item.parent_label == "pasta"
        assert item.priors.kcal_per_g.mu == 1.5
        assert item.priors.kcal_per_g.sigma == pytest.approx(0.3)
        assert item.priors.density.mu == 1.1
        assert item.priors.density.sigma == pytest.approx(0.165)

    @pytest.mark.asyncio
    async def test_defaults_without_portion_estimate(self, make_inference, image):
        inference = make_inference(
            geometry=GeometryEstimate(
                label="Chicken Salad",
                confidence=0.6,
                density_g_ml=0.6,
                kcal_per_g=1.5,
            )
        )
        path = GeometryPath(
            inference,
            MacroCalculator(),
            CalorieReconciler(),
            default_portion_grams=200,
            weight_relative_sigma=0.35,
        )

        item = await path.run(image)

        # 200 g * 1.5 kcal/g
        assert item.calories == 300
        assert item.weight_grams == 200.0
        assert item.volume_ml == 0.0
        assert item.parent_label == "salad"
        assert item.macros is not None

    @pytest.mark.asyncio
    async def test_model_parent_label_is_sanitized(self, make_inference, image):
        inference = make_inference(
            geometry=GeometryEstimate(
                label="Brown Rice",
                confidence=0.7,
                density_g_ml=0.8,
                kcal_per_g=1.1,
                parent_label="Grain_Products",
            )
        )

        path = GeometryPath(
            inference,
            MacroCalculator(),
            CalorieReconciler(),
            default_portion_grams=200,
            weight_relative_sigma=0.35,
        )

        item = await path.run(image)

        assert item.parent_label == "grain products"

    @pytest.mark.asyncio
    async def test_unresolved_restaurant_uses_geometry(
        self, make_inference, prepared_inference, image
    ):
        inference = make_inference(
            classification=ImageTypeResult(
                image_type=ImageType.RESTAURANT, confidence=0.6
            ),
            geometry=prepared_inference.geometry,
        )

        item = await _service(inference).analyze(image)

        assert item.path == EvidencePath.GEOMETRY
        assert "lookup_menu_item" not in inference.calls


class TestFoodImageAnalysisService:
    @pytest.mark.asyncio
    async def test_classification_failure_stops_pipeline(self, make_inference, image):
        inference = make_inference(classification=ClassificationError("bad json"))

        with pytest.raises(ClassificationError):
            await _service(inference).analyze(image)

        assert inference.calls == ["classify_image_type"]

    @pytest.mark.asyncio
    async def test_exactly_one_path_runs(self, packaged_inference, image):
        await _service(packaged_inference).analyze(image)

        assert "estimate_geometry" not in packaged_inference.calls
        assert "lookup_menu_item" not in packaged_inference.calls

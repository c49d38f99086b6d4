"""Unit tests for food analysis entities (request and response contracts)."""

import base64

import pytest

from domain.food_analysis.core.entities.analysis import (
    MISSING_IMAGE_MESSAGE,
    AnalyzeInput,
    AnalyzeItem,
    AnalyzeMeta,
    AnalyzeOutput,
    FoodAnalysisResult,
    MenuItemInfo,
    NutritionLabelInfo,
)
from domain.food_analysis.core.exceptions.domain_errors import InputError
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.core.value_objects.macros import Macros
from domain.food_analysis.core.value_objects.priors import GaussianPrior, ItemPriors


def _item(**overrides):
    data = dict(
        label="apple",
        confidence=0.9,
        calories=95,
        sigma_calories=14.25,
        weight_grams=150.0,
    )
    data.update(overrides)
    return AnalyzeItem(**data)


class TestAnalyzeInput:
    """Test image reference validation."""

    def test_url_only(self):
        image = AnalyzeInput(image_url="https://example.com/meal.jpg")

        assert image.image_url == "https://example.com/meal.jpg"
        assert image.image_base64 is None

    def test_missing_reference_raises(self):
        with pytest.raises(InputError) as exc_info:
            AnalyzeInput()

        assert str(exc_info.value) == MISSING_IMAGE_MESSAGE

    def test_blank_strings_count_as_absent(self):
        with pytest.raises(InputError):
            AnalyzeInput(image_url="  ", image_base64="")

    def test_both_references_rejected(self):
        with pytest.raises(InputError) as exc_info:
            AnalyzeInput(image_url="https://x/1.jpg", image_base64="aGVsbG8=")

        assert "only one" in str(exc_info.value)

    def test_blank_region_normalized(self):
        image = AnalyzeInput(image_url="https://x/1.jpg", region=" ")

        assert image.region is None

    def test_from_request(self):
        image = AnalyzeInput.from_request(
            {"imageBase64": "aGVsbG8=", "region": "US"}
        )

        assert image.image_base64 == "aGVsbG8="
        assert image.region == "US"

    def test_from_request_empty_body(self):
        with pytest.raises(InputError) as exc_info:
            AnalyzeInput.from_request({})

        assert str(exc_info.value) == MISSING_IMAGE_MESSAGE

    def test_from_request_non_string_value(self):
        with pytest.raises(InputError) as exc_info:
            AnalyzeInput.from_request({"imageUrl": 42})

        assert "imageUrl must be a string" in str(exc_info.value)

    def test_from_image_bytes_are_base64_encoded(self):
        image = AnalyzeInput.from_image(b"\xff\xd8\xff")

        assert image.image_base64 == base64.b64encode(b"\xff\xd8\xff").decode()
        assert image.image_url is None

    def test_from_image_empty_bytes(self):
        with pytest.raises(InputError):
            AnalyzeInput.from_image(b"")

    def test_from_image_url_string(self):
        image = AnalyzeInput.from_image("HTTPS://example.com/a.png")

        assert image.image_url == "HTTPS://example.com/a.png"

    def test_from_image_base64_string(self):
        image = AnalyzeInput.from_image("aGVsbG8=")

        assert image.image_base64 == "aGVsbG8="

    def test_image_data_url_wraps_base64(self):
        image = AnalyzeInput(image_base64="aGVsbG8=")

        assert image.image_data_url() == "data:image/jpeg;base64,aGVsbG8="

    def test_image_data_url_strips_existing_data_prefix(self):
        image = AnalyzeInput(image_base64="data:image/png;base64,aGVsbG8=")

        assert image.image_data_url() == "data:image/jpeg;base64,aGVsbG8="

    def test_reference_hash_is_stable(self):
        a = AnalyzeInput(image_url="https://x/1.jpg")
        b = AnalyzeInput(image_url="https://x/1.jpg", region="IT")

        assert a.reference_hash() == b.reference_hash()
        assert len(a.reference_hash()) == 16

    def test_to_payload(self):
        image = AnalyzeInput(image_url="https://x/1.jpg", region="US")

        assert image.to_payload() == {"imageUrl": "https://x/1.jpg", "region": "US"}


class TestAnalyzeItem:
    """Test AnalyzeItem invariants and serialization."""

    def test_empty_label_rejected(self):
        with pytest.raises(ValueError, match="Label cannot be empty"):
            _item(label="")

    @pytest.mark.parametrize("confidence", [-0.1, 1.1])
    def test_confidence_out_of_range(self, confidence):
        with pytest.raises(ValueError, match="Confidence"):
            _item(confidence=confidence)

    @pytest.mark.parametrize(
        "field", ["calories", "sigma_calories", "weight_grams", "volume_ml"]
    )
    def test_negative_quantities_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            _item(**{field: -1})

    def test_evidence_list_becomes_tuple(self):
        item = _item(evidence=["Classifier", "Label"])

        assert item.evidence == ("Classifier", "Label")

    def test_to_dict_minimal(self):
        assert _item().to_dict() == {
            "label": "apple",
            "confidence": 0.9,
            "calories": 95,
            "sigmaCalories": 14.25,
            "weightGrams": 150.0,
            "volumeML": 0.0,
            "evidence": [],
        }

    def test_to_dict_full(self):
        item = _item(
            path=EvidencePath.GEOMETRY,
            priors=ItemPriors(
                kcal_per_g=GaussianPrior(0.52, 0.1),
                density=GaussianPrior(0.8, 0.12),
            ),
            macros=Macros(protein_g=0.5, carbs_g=25.0, fat_g=0.3, fiber_g=4.4),
            sigma_weight_grams=52.5,
            parent_label="fruit",
            emoji="🍎",
        )

        data = item.to_dict()

        assert data["path"] == "geometry"
        assert data["priors"] == {
            "kcalPerG": {"mu": 0.52, "sigma": 0.1},
            "density": {"mu": 0.8, "sigma": 0.12},
        }
        assert data["macros"] == {
            "proteinG": 0.5,
            "carbsG": 25.0,
            "fatG": 0.3,
            "fiberG": 4.4,
        }
        assert data["sigmaWeightGrams"] == 52.5
        assert data["parentLabel"] == "fruit"
        assert data["emoji"] == "🍎"

    def test_to_dict_attachments(self):
        item = _item(
            nutrition_label=NutritionLabelInfo("1 cup (30g)", 120, 10),
            menu_item=MenuItemInfo("Chipotle", "Burrito Bowl", 1200),
        )

        data = item.to_dict()

        assert data["nutritionLabel"] == {
            "servingSize": "1 cup (30g)",
            "caloriesPerServing": 120,
            "totalServings": 10,
        }
        assert data["menuItem"] == {
            "restaurant": "Chipotle",
            "itemName": "Burrito Bowl",
            "calories": 1200,
        }


class TestAnalyzeOutput:
    """Test canonical output and provenance meta."""

    def test_empty_items_rejected(self):
        with pytest.raises(ValueError):
            AnalyzeOutput(items=())

    def test_top_item_is_first(self):
        first, second = _item(label="apple"), _item(label="pear")

        assert AnalyzeOutput(items=(first, second)).top_item is first

    def test_meta_for_single_attempt(self):
        meta = AnalyzeMeta.for_attempts((BackendId.MANAGED,), latency_ms=120)

        assert meta.is_fallback is False
        assert meta.to_dict() == {
            "used": ["supabase"],
            "latencyMs": 120,
            "isFallback": False,
        }

    def test_meta_for_fallback(self):
        meta = AnalyzeMeta.for_attempts(
            (BackendId.MANAGED, BackendId.VISION, BackendId.STUB)
        )

        assert meta.is_fallback is True
        assert meta.to_dict()["used"] == ["supabase", "openai", "stub"]

    def test_meta_accepts_raw_ids(self):
        meta = AnalyzeMeta(used=("openai",))

        assert meta.used == (BackendId.VISION,)

    def test_output_to_dict(self):
        output = AnalyzeOutput(
            items=(_item(),), meta=AnalyzeMeta.for_attempts((BackendId.STUB,))
        )

        data = output.to_dict()

        assert data["items"][0]["label"] == "apple"
        assert data["meta"]["used"] == ["stub"]


class TestFoodAnalysisResult:
    def test_to_dict(self):
        output = AnalyzeOutput(items=(_item(macros=Macros(0.5, 25.0, 0.3)),))
        result = FoodAnalysisResult(
            food_type="apple",
            confidence=0.9,
            calories=95,
            weight=150,
            emoji="🍎",
            analyzer_source=BackendId.VISION,
            used_fallback=True,
            analysis=output,
            macros=Macros(0.5, 25.0, 0.3),
            evidence=("Classifier",),
        )

        data = result.to_dict()

        assert data["foodType"] == "apple"
        assert data["analyzerSource"] == "openai"
        assert data["usedFallback"] is True
        assert data["evidence"] == ["Classifier"]
        assert data["macros"] == {"proteinG": 0.5, "carbsG": 25.0, "fatG": 0.3}
        assert data["analysis"] == output.to_dict()

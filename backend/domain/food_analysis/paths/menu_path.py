"""Menu path: known chain item looked up against published nutrition."""

import logging

from domain.food_analysis.core.entities.analysis import (
    AnalyzeInput,
    AnalyzeItem,
    MenuItemInfo,
)
from domain.food_analysis.core.exceptions.domain_errors import PathExecutionError
from domain.food_analysis.core.value_objects.evidence_path import EvidencePath
from domain.food_analysis.paths.base import EvidencePathHandler, weight_from_calories
from domain.food_analysis.recognition.services.labels import sanitize_label

logger = logging.getLogger(__name__)


class MenuPath(EvidencePathHandler):
    """Restaurant dishes of a resolved chain (sigma 10 %)."""

    evidence_tag = "Menu"

    async def run(self, image: AnalyzeInput, restaurant_name: str) -> AnalyzeItem:
        """
        Look up the dish on the chain's menu.

        Args:
            image: Photo of the dish
            restaurant_name: Chain name resolved by the classifier

        Raises:
            PathExecutionError: If no restaurant name is given or the lookup fails
        """
        restaurant_name = (restaurant_name or "").strip()
        if not restaurant_name:
            raise PathExecutionError("Menu path requires a restaurant name")

        reading = await self._ask(
            "lookup_menu_item",
            lambda: self._inference.lookup_menu_item(image, restaurant_name),
        )

        restaurant = reading.restaurant.strip() or restaurant_name
        label = sanitize_label(reading.item_name)
        weight = weight_from_calories(reading.calories)
        macros = await self._macros.calculate(label, weight, reading.calories)
        calories = self._reconciler.reconcile(label, reading.calories, macros).value

        logger.info(
            "Menu path complete",
            extra={"restaurant": restaurant, "label": label, "calories": calories},
        )
        return AnalyzeItem(
            label=label,
            confidence=reading.confidence,
            calories=calories,
            sigma_calories=EvidencePath.MENU.sigma_for(calories),
            weight_grams=weight,
            volume_ml=0.0,
            path=EvidencePath.MENU,
            macros=macros,
            evidence=self._evidence(),
            menu_item=MenuItemInfo(
                restaurant=restaurant,
                item_name=reading.item_name,
                calories=reading.calories,
            ),
        )

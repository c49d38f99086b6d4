"""Food analysis prompts for OpenAI."""

from infrastructure.ai.prompts.food_analysis import (
    GEOMETRY_SYSTEM_PROMPT,
    IMAGE_TYPE_SYSTEM_PROMPT,
    MENU_ITEM_SYSTEM_PROMPT,
    NUTRITION_LABEL_SYSTEM_PROMPT,
    menu_item_user_prompt,
    region_hint,
)

__all__ = [
    "GEOMETRY_SYSTEM_PROMPT",
    "IMAGE_TYPE_SYSTEM_PROMPT",
    "MENU_ITEM_SYSTEM_PROMPT",
    "NUTRITION_LABEL_SYSTEM_PROMPT",
    "menu_item_user_prompt",
    "region_hint",
]

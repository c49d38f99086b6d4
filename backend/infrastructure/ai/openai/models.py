"""Pydantic models for OpenAI structured outputs.

These models define the schema for structured outputs from OpenAI API.
Used with beta.chat.completions.parse() for native Pydantic support.
All fields are required (nullable where the model may not know), as
strict structured outputs demand.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class ImageTypeResponse(BaseModel):
    """Schema of the image-type classification. Maps to ImageTypeResult."""

    image_type: Literal["packaged", "restaurant", "prepared"] = Field(
        ..., description="Evidence regime of the photo"
    )
    confidence: Optional[float] = Field(..., description="Confidence 0.0 - 1.0")
    reasoning: str = Field(..., description="One short sentence")
    restaurant_name: Optional[str] = Field(
        ..., description="Chain name for restaurant photos"
    )
    brand_name: Optional[str] = Field(..., description="Brand for packaged photos")


class NutritionLabelResponse(BaseModel):
    """Schema of a nutrition facts panel reading. Maps to NutritionLabelReading."""

    label: Optional[str] = Field(..., description="Product name if visible")
    confidence: Optional[float] = Field(..., description="Confidence 0.0 - 1.0")
    calories: Optional[float] = Field(
        ..., description="Package calories, or calories of one serving"
    )
    serving_size: str = Field(..., description="Serving size as printed")
    calories_per_serving: float = Field(..., description="Calories of one serving")
    total_servings: Optional[float] = Field(
        ..., description="Servings per container if printed"
    )


class MenuItemResponse(BaseModel):
    """Schema of a chain menu item match. Maps to MenuItemReading."""

    restaurant: str = Field(..., description="Chain name")
    item_name: str = Field(..., description="Menu item as listed by the chain")
    calories: float = Field(..., description="Published calories of the item")
    confidence: Optional[float] = Field(..., description="Confidence 0.0 - 1.0")


class GeometryResponse(BaseModel):
    """Schema of a visual portion estimate. Maps to GeometryEstimate."""

    label: str = Field(..., description="Specific food name")
    confidence: Optional[float] = Field(..., description="Confidence 0.0 - 1.0")
    parent_label: Optional[str] = Field(..., description="Broad food category")
    density_g_ml: float = Field(..., description="Mass density in g/mL")
    kcal_per_g: float = Field(..., description="Energy density in kcal/g")
    estimated_volume_ml: Optional[float] = Field(..., description="Portion volume")
    estimated_weight_g: Optional[float] = Field(..., description="Portion weight")
    total_calories: Optional[float] = Field(..., description="Portion calories")
    protein_g: Optional[float] = Field(..., description="Portion protein grams")
    carbs_g: Optional[float] = Field(..., description="Portion carbohydrate grams")
    fat_g: Optional[float] = Field(..., description="Portion fat grams")

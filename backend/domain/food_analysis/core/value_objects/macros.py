"""Macronutrient value object and Atwater conversion.

Atwater factors: protein 4 kcal/g, carbs 4 kcal/g, fat 9 kcal/g.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

PROTEIN_KCAL_PER_G = 4.0
CARBS_KCAL_PER_G = 4.0
FAT_KCAL_PER_G = 9.0


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero for non-negative values.

    Python's built-in round() uses banker's rounding (round(2.5) == 2);
    nutrition figures are rounded half-up so 2.5 kcal becomes 3.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round1(value: float) -> float:
    """Round to one decimal place (half-up)."""
    return round_half_up(value, 1)


@dataclass(frozen=True)
class Macros:
    """Value object for macronutrient grams of a full portion.

    Attributes:
        protein_g: Protein in grams.
        carbs_g: Carbohydrates in grams.
        fat_g: Fat in grams.
        fiber_g: Fiber in grams (optional, not part of Atwater sum).

    Examples:
        >>> Macros(protein_g=30, carbs_g=0, fat_g=20).atwater_calories()
        300

    Raises:
        ValueError: If any field is negative or not finite.
    """

    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("protein_g", "carbs_g", "fat_g", "fiber_g"):
            value = getattr(self, name)
            if value is None:
                continue
            if not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    def atwater_calories(self) -> int:
        """Calories derived from macros: round(p×4 + c×4 + f×9)."""
        total = (
            self.protein_g * PROTEIN_KCAL_PER_G
            + self.carbs_g * CARBS_KCAL_PER_G
            + self.fat_g * FAT_KCAL_PER_G
        )
        return int(round_half_up(total))

    def rounded(self) -> "Macros":
        """Copy with every field rounded to one decimal."""
        return Macros(
            protein_g=round1(self.protein_g),
            carbs_g=round1(self.carbs_g),
            fat_g=round1(self.fat_g),
            fiber_g=round1(self.fiber_g) if self.fiber_g is not None else None,
        )

    def scaled(self, factor: float) -> "Macros":
        """Copy with every field multiplied by factor and rounded."""
        return Macros(
            protein_g=self.protein_g * factor,
            carbs_g=self.carbs_g * factor,
            fat_g=self.fat_g * factor,
            fiber_g=self.fiber_g * factor if self.fiber_g is not None else None,
        ).rounded()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "proteinG": self.protein_g,
            "carbsG": self.carbs_g,
            "fatG": self.fat_g,
        }
        if self.fiber_g is not None:
            data["fiberG"] = self.fiber_g
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Optional["Macros"]:
        """Build from a camelCase mapping, flooring negatives to zero.

        Returns None when any of protein/carbs/fat is missing or not a
        number: partial macros are treated as not computed.
        """
        values = []
        for key in ("proteinG", "carbsG", "fatG"):
            raw = data.get(key)
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                return None
            if not math.isfinite(raw):
                return None
            values.append(max(0.0, float(raw)))
        fiber_raw = data.get("fiberG")
        fiber: Optional[float] = None
        if isinstance(fiber_raw, (int, float)) and not isinstance(fiber_raw, bool):
            if math.isfinite(fiber_raw):
                fiber = max(0.0, float(fiber_raw))
        return cls(
            protein_g=values[0], carbs_g=values[1], fat_g=values[2], fiber_g=fiber
        )

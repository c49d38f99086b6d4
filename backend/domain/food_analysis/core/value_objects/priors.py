"""Prior distributions for physical food properties.

A prior is a mean and standard deviation describing an uncertain quantity.
Priors are carried forward so a downstream consumer (e.g. a depth-sensor
volume measurement) can combine them with its own evidence instead of
trusting the weight guess of this service.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from domain.food_analysis.core.value_objects.macros import Macros


@dataclass(frozen=True)
class GaussianPrior:
    """Mean (mu) and standard deviation (sigma) of a quantity."""

    mu: float
    sigma: float

    def __post_init__(self) -> None:
        if self.sigma < 0:
            raise ValueError(f"Sigma must be non-negative, got {self.sigma}")

    @classmethod
    def relative(cls, mu: float, relative_sigma: float) -> "GaussianPrior":
        """Prior whose sigma is a fixed fraction of its mean."""
        return cls(mu=mu, sigma=abs(mu) * relative_sigma)

    def to_dict(self) -> Dict[str, float]:
        return {"mu": self.mu, "sigma": self.sigma}


@dataclass(frozen=True)
class ItemPriors:
    """Energy density (kcal/g) and mass density (g/mL) priors of one item."""

    kcal_per_g: GaussianPrior
    density: GaussianPrior

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kcalPerG": self.kcal_per_g.to_dict(),
            "density": self.density.to_dict(),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Optional["ItemPriors"]:
        try:
            kcal = data["kcalPerG"]
            density = data["density"]
            return cls(
                kcal_per_g=GaussianPrior(float(kcal["mu"]), float(kcal["sigma"])),
                density=GaussianPrior(float(density["mu"]), float(density["sigma"])),
            )
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class FoodPriors:
    """Record of the food-priors store.

    Macro values, when present, are grams per 100 g of food.
    """

    label: str
    kcal_per_g: GaussianPrior
    density: GaussianPrior
    macros_per_100g: Optional[Macros] = None

    def item_priors(self) -> ItemPriors:
        return ItemPriors(kcal_per_g=self.kcal_per_g, density=self.density)

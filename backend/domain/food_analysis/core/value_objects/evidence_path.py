"""Evidence path value object.

Each path produces calories with a different reliability, expressed as a
fixed relative uncertainty on the calorie figure.
"""

from enum import Enum


class EvidencePath(str, Enum):
    LABEL = "label"
    MENU = "menu"
    GEOMETRY = "geometry"

    @property
    def sigma_fraction(self) -> float:
        """Relative standard deviation of calories for this path."""
        return _SIGMA_FRACTIONS[self]

    def sigma_for(self, calories: float) -> float:
        """Absolute calorie uncertainty for a given calorie figure."""
        return calories * self.sigma_fraction


_SIGMA_FRACTIONS = {
    EvidencePath.LABEL: 0.05,
    EvidencePath.MENU: 0.10,
    EvidencePath.GEOMETRY: 0.15,
}

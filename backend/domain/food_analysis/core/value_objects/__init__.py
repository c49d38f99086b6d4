"""Core value objects for the food analysis domain.

Immutable value objects shared by every component of the analysis pipeline.
"""

from .backend_id import BackendId
from .evidence_path import EvidencePath
from .image_type import ImageType
from .macros import Macros, round1, round_half_up
from .priors import FoodPriors, GaussianPrior, ItemPriors

__all__ = [
    "BackendId",
    "EvidencePath",
    "FoodPriors",
    "GaussianPrior",
    "ImageType",
    "ItemPriors",
    "Macros",
    "round1",
    "round_half_up",
]

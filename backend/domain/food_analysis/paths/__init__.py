"""Evidence path handlers: one estimation strategy per image type."""

from domain.food_analysis.paths.geometry_path import GeometryPath
from domain.food_analysis.paths.label_path import LabelPath
from domain.food_analysis.paths.menu_path import MenuPath
from domain.food_analysis.paths.router import FoodImageAnalysisService, select_path

__all__ = [
    "FoodImageAnalysisService",
    "GeometryPath",
    "LabelPath",
    "MenuPath",
    "select_path",
]

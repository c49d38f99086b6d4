"""Commands for the food analysis context."""

from .analyze_food import (
    AnalyzeFoodCommand,
    AnalyzeFoodCommandHandler,
    EdgeAnalysisCommandHandler,
)

__all__ = [
    "AnalyzeFoodCommand",
    "AnalyzeFoodCommandHandler",
    "EdgeAnalysisCommandHandler",
]

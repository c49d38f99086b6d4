"""Analyzer backend port (interface).

A backend runs the whole analysis pipeline for one image and returns its
native response. The fallback chain normalizes whatever comes back.
"""

from typing import Any, Mapping, Protocol, Union

from domain.food_analysis.core.entities.analysis import AnalyzeInput, AnalyzeOutput
from domain.food_analysis.core.value_objects.backend_id import BackendId

BackendResponse = Union[AnalyzeOutput, Mapping[str, Any]]


class IAnalyzerBackend(Protocol):
    """
    Interface for whole-pipeline analyzer backends.

    Implementations:
    - Managed edge function (remote HTTP)
    - Direct vision pipeline (classifier + evidence paths in-process)
    - Deterministic offline stub (never fails)

    Example implementation (infrastructure layer):
        >>> class EchoBackend:
        ...     backend_id = BackendId.STUB
        ...
        ...     async def analyze(self, image: AnalyzeInput) -> BackendResponse:
        ...         return {"items": [{"label": "apple", "calories": 95}]}
    """

    @property
    def backend_id(self) -> BackendId:
        """Identifier reported in ``meta.used``."""
        ...

    async def analyze(self, image: AnalyzeInput) -> BackendResponse:
        """
        Analyze one image.

        Args:
            image: Validated image reference

        Returns:
            AnalyzeOutput or a JSON mapping in the canonical or legacy shape

        Raises:
            Exception: Any failure; the fallback chain treats it as a
                backend failure and advances
        """
        ...

"""Recognition domain ports (interfaces)."""

from domain.food_analysis.recognition.ports.inference_service import IInferenceService

__all__ = ["IInferenceService"]

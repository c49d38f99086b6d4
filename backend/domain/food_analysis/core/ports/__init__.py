"""Core ports for the food analysis domain."""

from .analyzer_backend import BackendResponse, IAnalyzerBackend

__all__ = ["BackendResponse", "IAnalyzerBackend"]

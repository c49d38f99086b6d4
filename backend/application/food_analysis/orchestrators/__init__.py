"""Food analysis orchestrators."""

from .fallback_chain import AnalyzerFallbackChain

__all__ = ["AnalyzerFallbackChain"]

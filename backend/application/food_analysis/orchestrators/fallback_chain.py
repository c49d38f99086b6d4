"""Analyzer fallback chain.

Tries whole-pipeline backends strictly in order until one returns a
usable result. Backends are never raced: a concurrent call would spend
quota on results that get discarded as soon as one succeeds.
"""

import logging
import time
from typing import List, Optional, Sequence, Tuple

from domain.food_analysis.core.entities.analysis import (
    AnalyzeInput,
    AnalyzeMeta,
    AnalyzeOutput,
)
from domain.food_analysis.core.exceptions.domain_errors import (
    AllBackendsFailedError,
    InputError,
)
from domain.food_analysis.core.ports.analyzer_backend import IAnalyzerBackend
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.pipeline.normalizer import ResultNormalizer, with_meta
from metrics.food_analysis import record_fallback, time_backend

logger = logging.getLogger(__name__)


class AnalyzerFallbackChain:
    """
    Orchestrate an ordered list of analyzer backends.

    Flow per backend:
    1. Invoke ``backend.analyze(image)``
    2. Normalize the native response
    3. On success stop; on any failure record it and advance

    No backend is retried individually. ``meta.used`` lists every backend
    attempted (failures included) and ``meta.is_fallback`` is true when
    more than one was tried.

    Example:
        >>> chain = AnalyzerFallbackChain([managed, vision, stub])
        >>> output = await chain.analyze(AnalyzeInput(image_url=url))
        >>> [b.value for b in output.meta.used]
        ['supabase', 'openai', 'stub']
    """

    def __init__(
        self,
        backends: Sequence[IAnalyzerBackend],
        normalizer: Optional[ResultNormalizer] = None,
    ):
        """
        Initialize chain.

        Args:
            backends: Backends in priority order (stub last)
            normalizer: Result normalizer (default: new ResultNormalizer)

        Raises:
            ValueError: If no backend is given
        """
        if not backends:
            raise ValueError("Fallback chain needs at least one backend")
        self._backends = tuple(backends)
        self._normalizer = normalizer or ResultNormalizer()

    @property
    def backend_ids(self) -> Tuple[BackendId, ...]:
        return tuple(backend.backend_id for backend in self._backends)

    async def analyze(self, image: AnalyzeInput) -> AnalyzeOutput:
        """
        Run the chain for one image.

        Args:
            image: Validated image reference

        Returns:
            Normalized AnalyzeOutput with provenance meta

        Raises:
            InputError: Propagated immediately, never treated as backend failure
            AllBackendsFailedError: If every backend failed
        """
        start = time.perf_counter()
        used: List[BackendId] = []
        last_error: Optional[Exception] = None

        for backend in self._backends:
            backend_id = backend.backend_id
            used.append(backend_id)
            try:
                with time_backend(backend_id.value):
                    raw = await backend.analyze(image)
                    output = self._normalizer.normalize(raw)
            except InputError:
                raise
            except Exception as e:
                last_error = e
                record_fallback(type(e).__name__, source=backend_id.value)
                logger.warning(
                    "Analyzer backend failed, advancing chain",
                    extra={
                        "backend": backend_id.value,
                        "error_type": type(e).__name__,
                        "error": str(e),
                    },
                )
                continue

            latency_ms = int(round((time.perf_counter() - start) * 1000))
            meta = AnalyzeMeta.for_attempts(tuple(used), latency_ms=latency_ms)
            logger.info(
                "Analysis complete",
                extra={
                    "backend": backend_id.value,
                    "used": [u.value for u in used],
                    "is_fallback": meta.is_fallback,
                    "latency_ms": latency_ms,
                },
            )
            return with_meta(output, meta)

        message = str(last_error) if last_error is not None else "Unknown error"
        logger.error(
            "All analyzer backends failed",
            extra={"used": [u.value for u in used], "last_error": message},
        )
        raise AllBackendsFailedError(
            f"All analyzers failed. Last error: {message}",
            attempted=[u.value for u in used],
            last_error=message,
        ) from last_error

"""Analyze food command and handlers.

Two entry points share the same domain pipeline:

* AnalyzeFoodCommandHandler: client contract, full fallback chain under
  the caller deadline, returns the client-facing summary.
* EdgeAnalysisCommandHandler: managed edge function contract, runs the
  in-process vision pipeline once and reports itself as the managed
  backend.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from domain.food_analysis.core.entities.analysis import (
    AnalyzeInput,
    AnalyzeMeta,
    AnalyzeOutput,
    FoodAnalysisResult,
)
from domain.food_analysis.core.exceptions.domain_errors import (
    AnalysisTimeoutError,
    BackendError,
)
from domain.food_analysis.core.value_objects.backend_id import BackendId
from domain.food_analysis.paths.router import FoodImageAnalysisService
from domain.food_analysis.pipeline.normalizer import ResultNormalizer, with_meta
from ..orchestrators.fallback_chain import AnalyzerFallbackChain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzeFoodCommand:
    """
    Command: analyze one food photo.

    Attributes:
        image: Validated image reference
        timeout_s: Optional per-call deadline overriding the handler default
    """

    image: AnalyzeInput
    timeout_s: Optional[float] = None


class AnalyzeFoodCommandHandler:
    """Handler for AnalyzeFoodCommand."""

    def __init__(
        self,
        chain: AnalyzerFallbackChain,
        timeout_s: float,
        normalizer: Optional[ResultNormalizer] = None,
    ):
        """
        Initialize handler.

        Args:
            chain: Analyzer fallback chain
            timeout_s: Caller deadline for the whole chain
            normalizer: Used to build the client-facing summary
        """
        self._chain = chain
        self._timeout_s = timeout_s
        self._normalizer = normalizer or ResultNormalizer()

    @property
    def backend_ids(self) -> Tuple[BackendId, ...]:
        return self._chain.backend_ids

    async def handle(self, command: AnalyzeFoodCommand) -> FoodAnalysisResult:
        """
        Execute analysis under the caller deadline.

        Returns:
            FoodAnalysisResult wrapping the canonical AnalyzeOutput

        Raises:
            InputError: Malformed image reference
            AllBackendsFailedError: Every backend failed
            AnalysisTimeoutError: Deadline exceeded (retryable)
        """
        output = await self.analyze(command)
        return self._normalizer.summarize(output)

    async def analyze(self, command: AnalyzeFoodCommand) -> AnalyzeOutput:
        """Run the chain under the deadline and return the canonical output."""
        timeout_s = command.timeout_s or self._timeout_s
        logger.info(
            "Analyzing food photo",
            extra={
                "image_ref": command.image.reference_hash(),
                "has_url": command.image.image_url is not None,
                "timeout_s": timeout_s,
            },
        )
        try:
            return await asyncio.wait_for(
                self._chain.analyze(command.image), timeout=timeout_s
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                "Food analysis timed out",
                extra={
                    "image_ref": command.image.reference_hash(),
                    "timeout_s": timeout_s,
                },
            )
            raise AnalysisTimeoutError(timeout_s) from e


class EdgeAnalysisCommandHandler:
    """
    Handler serving the managed edge contract.

    Runs the classifier + evidence path pipeline once (no chain) and
    reports ``meta.used = ["supabase"]``.
    """

    def __init__(
        self,
        pipeline: Optional[FoodImageAnalysisService],
        normalizer: Optional[ResultNormalizer] = None,
    ):
        self._pipeline = pipeline
        self._normalizer = normalizer or ResultNormalizer()

    async def handle(self, command: AnalyzeFoodCommand) -> AnalyzeOutput:
        """
        Raises:
            InputError: Malformed image reference
            BackendError: Pipeline not configured or returned nothing usable
            ClassificationError, PathExecutionError: Pipeline failures
        """
        if self._pipeline is None:
            raise BackendError("CLASSIFIER_API_KEY not configured")

        start = time.perf_counter()
        item = await self._pipeline.analyze(command.image)
        output = self._normalizer.normalize(AnalyzeOutput(items=(item,)))
        latency_ms = int(round((time.perf_counter() - start) * 1000))
        meta = AnalyzeMeta.for_attempts((BackendId.MANAGED,), latency_ms=latency_ms)
        return with_meta(output, meta)

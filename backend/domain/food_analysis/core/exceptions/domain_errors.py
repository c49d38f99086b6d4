"""Domain exceptions for the Food Analysis bounded context.

All domain exceptions inherit from FoodAnalysisError. Only InputError,
AllBackendsFailedError and AnalysisTimeoutError ever reach the caller:
everything raised inside a single backend attempt is recovered by the
fallback chain.
"""

from typing import Optional, Sequence


class FoodAnalysisError(Exception):
    """Base exception for the food analysis domain."""

    pass


class InputError(FoodAnalysisError):
    """Raised when the image reference is missing or malformed.

    This is a caller error: it is surfaced immediately and never retried.
    """

    pass


class ClassificationError(FoodAnalysisError):
    """Raised when the image-type classifier is unreachable or returns
    a payload that does not conform to its schema.
    """

    pass


class PathExecutionError(FoodAnalysisError):
    """Raised when the selected evidence path fails.

    Examples:
    - Inference call failed (network, API error, timeout)
    - Response could not be parsed or violated the response schema
    """

    pass


class BackendError(FoodAnalysisError):
    """Raised when a whole-pipeline backend fails outside of the
    classifier/path steps (transport failure, empty or unknown payload).
    """

    pass


class PriorsStoreError(FoodAnalysisError):
    """Raised when the food-priors store cannot be queried."""

    pass


class AllBackendsFailedError(FoodAnalysisError):
    """Raised when every backend in the fallback chain failed.

    Attributes:
        attempted: Backend ids tried, in attempt order.
        last_error: Message of the last backend failure.
    """

    def __init__(
        self,
        message: str,
        attempted: Sequence[str] = (),
        last_error: Optional[str] = None,
    ):
        super().__init__(message)
        self.attempted = tuple(attempted)
        self.last_error = last_error


class AnalysisTimeoutError(FoodAnalysisError, TimeoutError):
    """Raised when the caller-imposed deadline expires.

    Retryable: the in-flight call was abandoned, nothing was produced.
    """

    def __init__(self, timeout_s: float):
        super().__init__(f"Analysis exceeded {timeout_s:g}s deadline")
        self.timeout_s = timeout_s

"""Managed analyzer backend - Implements IAnalyzerBackend port.

Calls the hosted ``analyze_food`` edge function, which runs the full
classifier + evidence path pipeline server side.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from domain.food_analysis.core.entities.analysis import AnalyzeInput
from domain.food_analysis.core.exceptions.domain_errors import BackendError
from domain.food_analysis.core.value_objects.backend_id import BackendId

logger = logging.getLogger(__name__)

FUNCTION_PATH = "/functions/v1/analyze_food"


class ManagedAnalyzerBackend:
    """
    Edge function client implementing IAnalyzerBackend port.

    Example:
        >>> async with ManagedAnalyzerBackend(url, anon_key) as backend:
        ...     data = await backend.analyze(AnalyzeInput(image_url=photo))
        ...     data["items"][0]["label"]
        'grilled chicken breast'
    """

    backend_id = BackendId.MANAGED

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout_s: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize backend.

        Args:
            base_url: Project URL (e.g. https://xyz.supabase.co)
            anon_key: Public anon key, sent as apikey and bearer token
            timeout_s: HTTP timeout of the whole call
            client: Shared HTTP client (default: one per context/call)
        """
        if not base_url or not anon_key:
            raise ValueError("Managed backend needs base_url and anon_key")
        self._endpoint = base_url.rstrip("/") + FUNCTION_PATH
        self._anon_key = anon_key
        self._timeout_s = timeout_s
        self._session = client
        self._owns_session = False

    async def __aenter__(self) -> "ManagedAnalyzerBackend":
        if self._session is None:
            self._session = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout_s))
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._owns_session and self._session is not None:
            await self._session.aclose()
            self._session = None
            self._owns_session = False

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._anon_key}",
        }

    async def analyze(self, image: AnalyzeInput) -> Dict[str, Any]:
        """
        POST the image reference to the edge function.

        Returns:
            Canonical AnalyzeOutput JSON (``meta.used`` defaults to supabase)

        Raises:
            BackendError: On transport failure, non-2xx status, invalid JSON
                or a payload without items
        """
        logger.debug("Calling managed analyzer", extra={"endpoint": self._endpoint})
        try:
            if self._session is not None:
                response = await self._session.post(
                    self._endpoint,
                    json=image.to_payload(),
                    headers=self._headers(),
                    timeout=self._timeout_s,
                )
            else:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self._timeout_s)
                ) as session:
                    response = await session.post(
                        self._endpoint, json=image.to_payload(), headers=self._headers()
                    )
        except httpx.HTTPError as e:
            raise BackendError(f"Supabase analyzer request failed: {e!r}") from e

        if response.is_error:
            raise BackendError(
                f"Supabase analyzer failed: {response.status_code} - {response.text}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise BackendError("Supabase analyzer returned invalid JSON") from e

        if not isinstance(data, dict) or not data.get("items"):
            raise BackendError("Supabase analyzer returned empty payload")

        meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}
        return {**data, "meta": {"used": [self.backend_id.value], **meta}}

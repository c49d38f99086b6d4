"""REST API endpoints for food image analysis.

Two contracts:

* ``POST /functions/v1/analyze_food``: managed edge function. JSON body
  ``{imageUrl?, imageBase64?, region?}``, returns AnalyzeOutput JSON.
* ``POST /api/analyze-food``: client contract. Multipart field ``image``
  (raw upload) or JSON ``{imageUrl | imageBase64 | image}``, runs the full
  fallback chain under the caller deadline and returns the summary.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi import APIRouter, Depends, Request, UploadFile
from fastapi.responses import JSONResponse

from application.food_analysis.commands.analyze_food import (
    AnalyzeFoodCommand,
    AnalyzeFoodCommandHandler,
    EdgeAnalysisCommandHandler,
)
from domain.food_analysis.core.entities.analysis import (
    MISSING_IMAGE_MESSAGE,
    AnalyzeInput,
)
from domain.food_analysis.core.exceptions.domain_errors import (
    AnalysisTimeoutError,
    InputError,
)
from infrastructure.config import AnalyzerSettings

logger = logging.getLogger(__name__)

# Maximum upload size: 10MB
MAX_UPLOAD_SIZE = 10 * 1024 * 1024

ALLOWED_MIME_PREFIX = "image/"


@dataclass(frozen=True)
class FoodAnalysisServices:
    """Request handlers wired at startup and stored on ``app.state``."""

    settings: AnalyzerSettings
    analyze_handler: AnalyzeFoodCommandHandler
    edge_handler: EdgeAnalysisCommandHandler


def get_services(request: Request) -> FoodAnalysisServices:
    """Dependency: services built by the application lifespan."""
    services: Optional[FoodAnalysisServices] = getattr(
        request.app.state, "food_analysis", None
    )
    if services is None:
        raise RuntimeError("Food analysis services not initialized")
    return services


def _error(status_code: int, error: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


async def _json_body(request: Request) -> Mapping[str, Any]:
    try:
        body = await request.json()
    except ValueError as e:
        raise InputError(MISSING_IMAGE_MESSAGE) from e
    if not isinstance(body, Mapping):
        raise InputError(MISSING_IMAGE_MESSAGE)
    return body


async def _upload_to_input(upload: UploadFile, region: Optional[str]) -> AnalyzeInput:
    if upload.content_type and not upload.content_type.startswith(ALLOWED_MIME_PREFIX):
        raise InputError(f"Invalid file type: {upload.content_type}")
    content = await upload.read()
    if len(content) > MAX_UPLOAD_SIZE:
        raise InputError(
            f"File too large. Maximum size: {MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
        )
    return AnalyzeInput.from_image(content, region=region)


async def parse_client_input(request: Request) -> AnalyzeInput:
    """
    Normalize any client request shape to AnalyzeInput.

    Raises:
        InputError: If no usable image reference is present
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        image = form.get("image")
        region = form.get("region")
        region = region if isinstance(region, str) else None
        if isinstance(image, str):
            return AnalyzeInput.from_image(image, region=region)
        if image is not None and hasattr(image, "read"):
            return await _upload_to_input(image, region)
        raise InputError(MISSING_IMAGE_MESSAGE)

    body = await _json_body(request)
    image = body.get("image")
    if isinstance(image, str) and image.strip():
        region = body.get("region")
        return AnalyzeInput.from_image(
            image, region=region if isinstance(region, str) else None
        )
    return AnalyzeInput.from_request(body)


router = APIRouter(tags=["food-analysis"])


@router.post("/functions/v1/analyze_food")
async def analyze_food_edge(
    request: Request, services: FoodAnalysisServices = Depends(get_services)
) -> JSONResponse:
    """Managed edge contract: classifier + evidence path, no fallback chain."""
    try:
        image = AnalyzeInput.from_request(await _json_body(request))
    except InputError as e:
        return _error(400, str(e))

    try:
        output = await services.edge_handler.handle(AnalyzeFoodCommand(image=image))
    except InputError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.error(
            "Edge analysis failed",
            extra={"image_ref": image.reference_hash(), "error": str(e)},
            exc_info=True,
        )
        return _error(500, "Analyzer error", details=str(e))

    return JSONResponse(status_code=200, content=output.to_dict())


@router.post("/api/analyze-food")
async def analyze_food(
    request: Request, services: FoodAnalysisServices = Depends(get_services)
) -> JSONResponse:
    """Client contract: full fallback chain under the caller deadline."""
    try:
        image = await parse_client_input(request)
        result = await services.analyze_handler.handle(AnalyzeFoodCommand(image=image))
    except InputError as e:
        return _error(400, str(e))
    except AnalysisTimeoutError as e:
        logger.warning("Analysis timed out", extra={"timeout_s": e.timeout_s})
        return _error(504, "Analyzer timeout", retryable=True)
    except Exception as e:
        logger.error(
            "Food analysis failed", extra={"error": str(e)}, exc_info=True
        )
        return _error(500, "Analyzer error", details=str(e))

    logger.info(
        "Food analysis served",
        extra={
            "food_type": result.food_type,
            "analyzer_source": result.analyzer_source.value,
            "used_fallback": result.used_fallback,
        },
    )
    return JSONResponse(status_code=200, content=result.to_dict())

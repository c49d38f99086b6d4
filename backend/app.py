from __future__ import annotations

# Standard library
import logging as _logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

# Third-party
from dotenv import load_dotenv
from fastapi import FastAPI

# Local application imports
from api.analyze_food import FoodAnalysisServices, router as analyze_food_router
from application.food_analysis.commands.analyze_food import (
    AnalyzeFoodCommandHandler,
    EdgeAnalysisCommandHandler,
)
from application.food_analysis.orchestrators.fallback_chain import (
    AnalyzerFallbackChain,
)
from infrastructure.config import AnalyzerSettings
from infrastructure.food_analysis.backends.factory import (
    build_backend_chain,
    create_edge_pipeline,
    create_priors_store,
)
from metrics.food_analysis import snapshot as metrics_snapshot

load_dotenv()

_SETTINGS = AnalyzerSettings.from_env()
# --- Basic logging configuration (minimal) ---
_logging.basicConfig(
    level=getattr(_logging, _SETTINGS.log_level, _logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


def _mask(secret: Optional[str]) -> Optional[str]:
    if not secret:
        return None
    if len(secret) > 8:
        return secret[:4] + "..." + secret[-4:]
    return "***"


async def build_services(
    settings: AnalyzerSettings, stack: AsyncExitStack
) -> FoodAnalysisServices:
    """
    Wire backends, command handlers and the edge pipeline.

    Backends exposing an async context manager (the managed HTTP client) are
    entered on ``stack`` so their sessions close with the application.
    """
    priors_store = create_priors_store(settings)
    backends = build_backend_chain(settings, priors_store)
    for backend in backends:
        if hasattr(backend, "__aenter__"):
            await stack.enter_async_context(backend)

    chain = AnalyzerFallbackChain(backends)
    return FoodAnalysisServices(
        settings=settings,
        analyze_handler=AnalyzeFoodCommandHandler(
            chain, timeout_s=settings.analyzer_timeout_s
        ),
        edge_handler=EdgeAnalysisCommandHandler(
            create_edge_pipeline(settings, priors_store)
        ),
    )


def create_app(
    settings: Optional[AnalyzerSettings] = None,
    services: Optional[FoodAnalysisServices] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Analyzer settings (default: read from environment)
        services: Prebuilt services; when given, the lifespan does not wire
            backends (used by tests)
    """
    settings = settings or _SETTINGS

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger = _logging.getLogger("startup")
        logger.info(
            "startup.config",
            extra={
                "managed_configured": settings.managed_configured,
                "vision_configured": settings.vision_configured,
                "edge_configured": settings.edge_configured,
                "priors_store_configured": settings.priors_store_configured,
                "openai_key_masked": _mask(settings.openai_api_key),
                "timeout_s": settings.analyzer_timeout_s,
            },
        )

        async with AsyncExitStack() as stack:
            if services is None:
                app.state.food_analysis = await build_services(settings, stack)
            logger.info(
                "lifespan.ready",
                extra={
                    "backends": [
                        b.value
                        for b in app.state.food_analysis.analyze_handler.backend_ids
                    ]
                },
            )
            yield
            logger.info("lifespan.shutdown", extra={"status": "cleanup"})

    app = FastAPI(
        title="Food Image Analyzer",
        version=settings.app_version,
        lifespan=lifespan,
    )
    if services is not None:
        app.state.food_analysis = services

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version() -> Dict[str, str]:
        return {"version": settings.app_version}

    @app.get("/metrics")
    async def metrics() -> Dict[str, Any]:
        return metrics_snapshot()

    app.include_router(analyze_food_router)
    return app


app = create_app()

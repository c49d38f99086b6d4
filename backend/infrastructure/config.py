"""Configuration utilities for infrastructure layer.

Settings are read once at startup (``AnalyzerSettings.from_env``) and
passed explicitly to the factories. Nothing reads the environment lazily.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_CLASSIFIER_ENDPOINT = "https://api.openai.com/v1"
DEFAULT_CLASSIFIER_MODEL = "gpt-4o-mini"


def _text(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _text(env, name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class AnalyzerSettings:
    """
    Runtime configuration of the food analyzer.

    Missing credentials are not an error: the corresponding backend is
    simply left out of the fallback chain.

    Example .env:
        CLASSIFIER_API_KEY=sk-...
        SUPABASE_URL=https://xyz.supabase.co
        SUPABASE_ANON_KEY=eyJ...
        DEFAULT_PORTION_GRAMS=180
    """

    classifier_endpoint: str = DEFAULT_CLASSIFIER_ENDPOINT
    classifier_api_key: Optional[str] = None
    classifier_model: str = DEFAULT_CLASSIFIER_MODEL
    openai_api_key: Optional[str] = None
    openai_vision_model: str = DEFAULT_CLASSIFIER_MODEL
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    default_portion_grams: float = 180.0
    default_weight_relative_sigma: float = 0.35
    analyzer_timeout_s: float = 30.0
    inference_timeout_s: float = 12.0
    managed_timeout_s: float = 20.0
    log_level: str = "INFO"
    app_version: str = "0.0.0-dev"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AnalyzerSettings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (default: os.environ)

        Raises:
            ValueError: If a numeric variable is not a positive number
        """
        env = os.environ if env is None else env
        classifier_model = _text(env, "CLASSIFIER_MODEL") or DEFAULT_CLASSIFIER_MODEL
        supabase_url = _text(env, "SUPABASE_URL")
        return cls(
            classifier_endpoint=(
                _text(env, "CLASSIFIER_ENDPOINT") or DEFAULT_CLASSIFIER_ENDPOINT
            ).rstrip("/"),
            classifier_api_key=_text(env, "CLASSIFIER_API_KEY"),
            classifier_model=classifier_model,
            openai_api_key=_text(env, "OPENAI_API_KEY"),
            openai_vision_model=_text(env, "OPENAI_VISION_MODEL") or classifier_model,
            supabase_url=supabase_url.rstrip("/") if supabase_url else None,
            supabase_anon_key=_text(env, "SUPABASE_ANON_KEY"),
            supabase_service_role_key=_text(env, "SUPABASE_SERVICE_ROLE_KEY"),
            default_portion_grams=_positive_float(env, "DEFAULT_PORTION_GRAMS", 180.0),
            default_weight_relative_sigma=_positive_float(
                env, "DEFAULT_WEIGHT_RELATIVE_SIGMA", 0.35
            ),
            analyzer_timeout_s=_positive_float(env, "ANALYZER_TIMEOUT_S", 30.0),
            inference_timeout_s=_positive_float(env, "INFERENCE_TIMEOUT_S", 12.0),
            managed_timeout_s=_positive_float(env, "MANAGED_TIMEOUT_S", 20.0),
            log_level=(_text(env, "LOG_LEVEL") or "INFO").upper(),
            app_version=_text(env, "APP_VERSION") or "0.0.0-dev",
        )

    @property
    def managed_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def vision_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def edge_configured(self) -> bool:
        return bool(self.classifier_api_key)

    @property
    def priors_store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)

from __future__ import annotations

import logging
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict

log = logging.getLogger(__name__)


# --- Defaults file ------------------------------------------------------------

# This file lives at: src/poshanix_proxy/core/config.py
# proxy.yml ships next to the package root: src/poshanix_proxy/proxy.yml
PACKAGE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CFG_PATH = PACKAGE_DIR / "proxy.yml"

# Legacy service sniffing (used only when api_type is "auto")
GOOGLE_API_HOST = "generativelanguage.googleapis.com"
GOOGLE_KEY_PREFIX = "AIzaSy"


class ApiType(str, Enum):
    auto = "auto"      # infer from endpoint / key (legacy behaviour)
    openai = "openai"
    google = "google"


class Settings(BaseModel):
    """
    Immutable proxy configuration. Built once at startup by load_settings()
    and handed to the dispatcher; nothing reads os.environ at call time.
    """

    model_config = ConfigDict(frozen=True)

    # upstream
    api_key: str = ""
    api_type: ApiType = ApiType.auto
    endpoint: Optional[str] = None
    model: Optional[str] = None
    openai_endpoint: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-3.5-turbo"
    google_endpoint_template: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    )
    google_model: str = "gemini-2.5-flash"
    max_tokens: int = 800
    request_timeout: Optional[float] = None

    # server
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: Tuple[str, ...] = ("*",)


_UPSTREAM_KEYS = (
    "api_type",
    "endpoint",
    "model",
    "openai_endpoint",
    "openai_model",
    "google_endpoint_template",
    "google_model",
    "max_tokens",
    "request_timeout",
)
_SERVER_KEYS = ("host", "port", "cors_origins")

# settings field -> environment variable (env wins over proxy.yml)
_ENV_OVERRIDES = {
    "api_key": "GEMINI_API_KEY",
    "endpoint": "GEMINI_API_ENDPOINT",
    "api_type": "GEMINI_API_TYPE",
    "model": "GEMINI_MODEL",
    "request_timeout": "UPSTREAM_TIMEOUT",
    "host": "HOST",
    "port": "PORT",
    "cors_origins": "CORS_ORIGINS",
}


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _pick(section: Mapping[str, Any], keys: Tuple[str, ...]) -> Dict[str, Any]:
    return {k: section[k] for k in keys if section.get(k) is not None}


def load_settings(
    env: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> Settings:
    """
    Build Settings from proxy.yml defaults overlaid with environment variables.

    - POSHANIX_CONFIG points at an alternative YAML file.
    - Empty environment values are ignored.
    - An unknown api_type (env or YAML) logs a warning and falls back to auto.
    """
    if env is None:
        env = os.environ
    if config_path is None:
        config_path = Path(env.get("POSHANIX_CONFIG") or DEFAULT_CFG_PATH)

    cfg = _load_yaml(config_path)
    values: Dict[str, Any] = {}
    values.update(_pick(cfg.get("upstream") or {}, _UPSTREAM_KEYS))
    values.update(_pick(cfg.get("server") or {}, _SERVER_KEYS))

    for field, var in _ENV_OVERRIDES.items():
        raw = (env.get(var) or "").strip()
        if not raw:
            continue
        if field == "cors_origins":
            values[field] = tuple(o.strip() for o in raw.split(",") if o.strip())
        else:
            values[field] = raw

    if isinstance(values.get("cors_origins"), list):
        values["cors_origins"] = tuple(values["cors_origins"])

    values["api_type"] = _api_type(values.get("api_type", ApiType.auto.value))

    return Settings(**values)


def _api_type(raw: Any) -> ApiType:
    try:
        return ApiType(str(raw).strip().lower())
    except ValueError:
        log.warning("unknown api_type %r; falling back to auto", raw)
        return ApiType.auto


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return load_settings()

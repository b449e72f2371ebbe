from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

T = TypeVar("T")


class ConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class ModelConfig:
    """Everything the model adapter needs. Built once at startup."""

    api_key: str
    model_name: str = "mistral-tiny"
    temperature: float = 0.7
    max_retries: int = 3          # total attempts per prompt
    timeout_ms: int = 10_000
    retry_backoff: float = 0.5    # seconds, doubled after each failure
    cache_responses: bool = False
    cache_size: int = 256         # max cached responses when caching is on


@dataclass(frozen=True)
class Settings:
    model: ModelConfig
    node_env: str = "production"
    port: int = 5000

    @property
    def is_development(self) -> bool:
        return self.node_env.lower() == "development"


def _read(env: Mapping[str, str], name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} has an invalid value: {raw!r}")


def load_config(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment (or the given mapping).

    Raises ConfigurationError when MISTRAL_API_KEY is missing or a value
    can't be parsed; the server must not start in that case.
    """
    env = os.environ if environ is None else environ

    api_key = (env.get("MISTRAL_API_KEY") or "").strip()
    if not api_key:
        raise ConfigurationError("MISTRAL_API_KEY not set. Please configure it in environment or .env")

    node_env = (env.get("NODE_ENV") or "production").strip()

    max_retries = _read(env, "MAX_RETRIES", 3, int)
    if max_retries < 1:
        raise ConfigurationError("MAX_RETRIES must be at least 1")

    cache_size = _read(env, "CACHE_SIZE", 256, int)
    if cache_size < 1:
        raise ConfigurationError("CACHE_SIZE must be at least 1")

    timeout_ms = _read(env, "TIMEOUT_MS", 10_000, int)
    if timeout_ms <= 0:
        raise ConfigurationError("TIMEOUT_MS must be positive")

    model = ModelConfig(
        api_key=api_key,
        model_name=(env.get("MODEL_NAME") or "mistral-tiny").strip(),
        temperature=_read(env, "TEMPERATURE", 0.7, float),
        max_retries=max_retries,
        timeout_ms=timeout_ms,
        retry_backoff=_read(env, "RETRY_BACKOFF", 0.5, float),
        cache_size=cache_size,
        # responses are only cached outside interactive development
        cache_responses=node_env.lower() != "development",
    )
    return Settings(model=model, node_env=node_env, port=_read(env, "PORT", 5000, int))

"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubemeter.models.config import (
    DEFAULT_MAX_DEPTH,
    MAX_DEPTH_LIMIT,
    APIConfig,
    CacheConfig,
    KubeAPIConfig,
    KubeMeterConfig,
    LogConfig,
    ResolverConfig,
)

_SOURCES = {"cache", "live"}


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEMETER_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float) -> float:
    return float(_env(key, str(default)))


def _validate_source(value: str) -> str:
    if value.lower() not in _SOURCES:
        raise ValueError(f"Invalid resolver source: {value}. Must be one of {_SOURCES}")
    return value.lower()


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> KubeMeterConfig:
    """Load configuration from KUBEMETER_* environment variables."""
    kube_defaults = KubeAPIConfig()
    return KubeMeterConfig(
        namespace=_env("NAMESPACE", ""),
        resolver=ResolverConfig(
            max_depth=_env_int("RESOLVER_MAX_DEPTH", DEFAULT_MAX_DEPTH, min_val=1, max_val=MAX_DEPTH_LIMIT),
            strict_cycles=_env_bool("RESOLVER_STRICT_CYCLES", False),
            source=_validate_source(_env("RESOLVER_SOURCE", "cache")),
        ),
        cache=CacheConfig(
            resync_seconds=_env_int("CACHE_RESYNC_SECONDS", 300, min_val=30, max_val=3600),
        ),
        kube_api=KubeAPIConfig(
            server=_env("KUBE_API_SERVER", kube_defaults.server),
            token_path=_env("KUBE_TOKEN_PATH", kube_defaults.token_path),
            ca_path=_env("KUBE_CA_PATH", kube_defaults.ca_path),
            timeout_seconds=_env_float("KUBE_TIMEOUT", kube_defaults.timeout_seconds),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )

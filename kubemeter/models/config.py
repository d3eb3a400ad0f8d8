"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MAX_DEPTH = 100
MAX_DEPTH_LIMIT = 1000


@dataclass
class ResolverConfig:
    """Dependency resolver configuration."""

    max_depth: int = DEFAULT_MAX_DEPTH
    strict_cycles: bool = False
    source: str = "cache"  # "cache" or "live"


@dataclass
class CacheConfig:
    """Resource store refresh configuration."""

    resync_seconds: int = 300


@dataclass
class KubeAPIConfig:
    """Kubernetes API server access for live reads."""

    server: str = "https://kubernetes.default.svc"
    token_path: str = "/var/run/secrets/kubernetes.io/serviceaccount/token"
    ca_path: str = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
    timeout_seconds: float = 10.0


@dataclass
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeMeterConfig:
    """Top-level kubemeter configuration."""

    namespace: str = ""
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    kube_api: KubeAPIConfig = field(default_factory=KubeAPIConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)

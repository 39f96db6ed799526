"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_float, optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging, resolve_log_level
from .lookup import get_lookup_uri, lookup_uri_env_name
from .snapshot import SnapshotConfig, get_snapshot_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SnapshotConfig",
    "configure_logging",
    "get_lookup_uri",
    "get_snapshot_config",
    "lookup_uri_env_name",
    "optional_env_float",
    "optional_env_var",
    "resolve_log_level",
]

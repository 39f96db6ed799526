"""Remote snapshot configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from curatorial import __version__

from .env import optional_env_float, optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SNAPSHOT_BASE_URL: Final[str] = (
    "https://raw.githubusercontent.com/sfomuseum/go-sfomuseum-curatorial/main/data"
)
DEFAULT_HTTP_TIMEOUT: Final[float] = 30.0


@dataclass(frozen=True, slots=True)
class SnapshotConfig:
    resilience: ResilienceConfig

    def url_for(self, kind: str) -> str:
        return f"{kind}.json"


def get_snapshot_config() -> SnapshotConfig:
    base_url = optional_env_var("CURATORIAL_SNAPSHOT_BASE_URL", DEFAULT_SNAPSHOT_BASE_URL)
    timeout = optional_env_float("CURATORIAL_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)

    resilience = ResilienceConfig(
        name="snapshot",
        base_url=base_url.rstrip("/") + "/",
        timeout_seconds=timeout,
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        cache=CacheConfig(enabled=True, backend="memory"),
        default_headers={"User-Agent": f"curatorial/{__version__}"},
    )
    return SnapshotConfig(resilience=resilience)

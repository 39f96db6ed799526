from __future__ import annotations

import asyncio

import httpx
import pytest

from curatorial.adapters.http_resilience import ResilientClient, build_retry
from curatorial.config import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy


def test_sqlite_cache_requires_a_path() -> None:
    config = ResilienceConfig(name="test", cache=CacheConfig(backend="sqlite"))

    with pytest.raises(ValueError, match="sqlite_path"):
        ResilientClient(config)


def test_build_retry_copies_policy() -> None:
    retry = build_retry(RetryPolicy(total=5, status_forcelist=frozenset({503})))

    assert retry.total == 5


def test_rate_limited_get_goes_through_the_transport() -> None:
    config = ResilienceConfig(
        name="test",
        base_url="https://example.test/",
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        cache=None,
    )
    seen: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[])

    async def run() -> int:
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
                base_url="https://example.test/", transport=httpx.MockTransport(handler)
            )
            response = await client.get("galleries.json")
            return response.status_code

    assert asyncio.run(run()) == 200
    assert seen == ["/galleries.json"]

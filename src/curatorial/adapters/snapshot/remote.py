"""Fetch precompiled snapshots over HTTP."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx

from curatorial.adapters.http_resilience import ResilientClient
from curatorial.config.snapshot import get_snapshot_config
from curatorial.domain.errors import IndexBuildFailure

from .schema import decode_snapshot

if TYPE_CHECKING:
    from collections.abc import Callable

    from curatorial.config.http_resilience import ResilienceConfig
    from curatorial.config.snapshot import SnapshotConfig
    from curatorial.domain.model import RecordKindName

log = getLogger(__name__)


class SnapshotClient:
    """Downloads ``{base_url}/{kind}.json`` and decodes it into records."""

    def __init__(
        self,
        *,
        config: SnapshotConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_snapshot_config()
        self._resilience = self._config.resilience
        self._client_factory = client_factory or ResilientClient

    def fetch_records(self, kind: RecordKindName) -> list[Any]:
        return asyncio.run(self._fetch_records_async(kind))

    async def _fetch_records_async(self, kind: RecordKindName) -> list[Any]:
        path = self._config.url_for(kind)
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.get(path)
                response.raise_for_status()
                payload = response.content
        except httpx.HTTPError as exc:
            raise IndexBuildFailure(f"Failed to load remote {kind} data: {exc}") from exc

        records = decode_snapshot(kind, payload)
        log.info("Fetched %s %s records from %s", len(records), kind, self._resilience.base_url)
        return records

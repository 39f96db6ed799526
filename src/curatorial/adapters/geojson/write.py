"""Write features back into a WOF-style corpus tree."""

from __future__ import annotations

import json
from collections.abc import Mapping
from logging import getLogger
from pathlib import Path
from typing import Any

from curatorial.domain.errors import MalformedRecord
from curatorial.domain.model.feature import ID_PROPERTY, require_int

log = getLogger(__name__)


def id_to_relpath(wof_id: int) -> Path:
    """``1746382277`` -> ``174/638/227/7/1746382277.geojson``."""

    if wof_id < 0:
        raise ValueError(f"Cannot derive a path for wof:id {wof_id}")
    digits = str(wof_id)
    chunks = [digits[i : i + 3] for i in range(0, len(digits), 3)]
    return Path(*chunks, f"{digits}.geojson")


def format_feature(feature: Mapping[str, Any]) -> str:
    return json.dumps(feature, indent=2, ensure_ascii=False) + "\n"


class GeoJSONDirectoryWriter:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def write(self, feature: Mapping[str, Any]) -> str:
        props = feature.get("properties")
        if not isinstance(props, Mapping):
            raise MalformedRecord("<feature>", "properties")
        wof_id = require_int(props, ID_PROPERTY, source="<feature>")

        path = self.root / id_to_relpath(wof_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(format_feature(feature), encoding="utf-8")
        tmp.replace(path)
        log.debug("Wrote %s", path)
        return str(path)

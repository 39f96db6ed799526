"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Currency(IntEnum):
    """Tri-state ``mz:is_current`` flag."""

    UNKNOWN = -1
    NOT_CURRENT = 0
    CURRENT = 1

    @classmethod
    def from_flag(cls, value: object) -> Currency:
        """Decode a raw flag; anything that is not 0 or 1 is unknown."""

        if isinstance(value, bool):
            return cls.UNKNOWN
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                return cls.UNKNOWN
        if value == 1:
            return cls.CURRENT
        if value == 0:
            return cls.NOT_CURRENT
        return cls.UNKNOWN


class ParentSentinel(IntEnum):
    """Reserved ``wof:parent_id`` values standing in for a concrete ancestor."""

    NONE = -1
    MULTIPLE = -4


class RecordKindName(StrEnum):
    GALLERIES = "galleries"
    EXHIBITIONS = "exhibitions"
    COLLECTION = "collection"
    PUBLICART = "publicart"

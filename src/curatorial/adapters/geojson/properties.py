"""Derive indexed records from GeoJSON feature properties."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Final

from curatorial.domain.errors import MalformedRecord
from curatorial.domain.model import (
    CollectionObject,
    Currency,
    Exhibition,
    Gallery,
    PublicArtWork,
    RecordKindName,
)
from curatorial.domain.model.feature import (
    CESSATION_PROPERTY,
    CURRENT_PROPERTY,
    ID_PROPERTY,
    INCEPTION_PROPERTY,
    NAME_PROPERTY,
    require_int,
)

GALLERY_ID_PROPERTY: Final[str] = "sfomuseum:gallery_id"
EXHIBITION_ID_PROPERTY: Final[str] = "sfomuseum:exhibition_id"
EXHIBITION_WWW_ID_PROPERTY: Final[str] = "sfomuseum_www:exhibition_id"
OBJECT_ID_PROPERTY: Final[str] = "sfomuseum:object_id"
ACCESSION_NUMBER_PROPERTY: Final[str] = "sfomuseum:accession_number"
CALL_NUMBER_PROPERTY: Final[str] = "sfomuseum:callnumber"
MAP_ID_PROPERTY: Final[str] = "sfomuseum:map_id"

type Decoder = Callable[[Mapping[str, Any], str], Any]


def feature_properties(feature: Mapping[str, Any], source: str) -> Mapping[str, Any]:
    props = feature.get("properties")
    if not isinstance(props, Mapping):
        raise MalformedRecord(source, "properties")
    return props


def _text(props: Mapping[str, Any], key: str) -> str:
    value = props.get(key)
    if value is None:
        return ""
    return str(value)


def _require_text(props: Mapping[str, Any], key: str, source: str) -> str:
    value = _text(props, key)
    if not value:
        raise MalformedRecord(source, key)
    return value


def _optional_int(props: Mapping[str, Any], key: str, source: str) -> int:
    if props.get(key) is None:
        return 0
    return require_int(props, key, source=source)


def gallery_from_feature(feature: Mapping[str, Any], source: str) -> Gallery:
    props = feature_properties(feature, source)
    return Gallery(
        wof_id=require_int(props, ID_PROPERTY, source=source),
        sfomuseum_id=require_int(props, GALLERY_ID_PROPERTY, source=source),
        name=_require_text(props, NAME_PROPERTY, source),
        map_id=_text(props, MAP_ID_PROPERTY),
        inception=_text(props, INCEPTION_PROPERTY),
        cessation=_text(props, CESSATION_PROPERTY),
        currency=Currency.from_flag(props.get(CURRENT_PROPERTY)),
    )


def exhibition_from_feature(feature: Mapping[str, Any], source: str) -> Exhibition:
    props = feature_properties(feature, source)
    return Exhibition(
        wof_id=require_int(props, ID_PROPERTY, source=source),
        sfomuseum_id=require_int(props, EXHIBITION_ID_PROPERTY, source=source),
        name=_text(props, NAME_PROPERTY),
        www_id=_optional_int(props, EXHIBITION_WWW_ID_PROPERTY, source),
        currency=Currency.from_flag(props.get(CURRENT_PROPERTY)),
    )


def object_from_feature(feature: Mapping[str, Any], source: str) -> CollectionObject:
    props = feature_properties(feature, source)
    return CollectionObject(
        wof_id=require_int(props, ID_PROPERTY, source=source),
        sfomuseum_id=require_int(props, OBJECT_ID_PROPERTY, source=source),
        name=_require_text(props, NAME_PROPERTY, source),
        accession_number=_require_text(props, ACCESSION_NUMBER_PROPERTY, source),
        call_number=_text(props, CALL_NUMBER_PROPERTY),
        currency=Currency.from_flag(props.get(CURRENT_PROPERTY)),
    )


def publicart_from_feature(feature: Mapping[str, Any], source: str) -> PublicArtWork:
    props = feature_properties(feature, source)
    return PublicArtWork(
        wof_id=require_int(props, ID_PROPERTY, source=source),
        sfomuseum_id=require_int(props, OBJECT_ID_PROPERTY, source=source),
        name=_text(props, NAME_PROPERTY),
        map_id=_text(props, MAP_ID_PROPERTY),
        currency=Currency.from_flag(props.get(CURRENT_PROPERTY)),
    )


DECODERS: Final[dict[RecordKindName, Decoder]] = {
    RecordKindName.GALLERIES: gallery_from_feature,
    RecordKindName.EXHIBITIONS: exhibition_from_feature,
    RecordKindName.COLLECTION: object_from_feature,
    RecordKindName.PUBLICART: publicart_from_feature,
}


def decoder_for(kind: RecordKindName) -> Decoder:
    return DECODERS[kind]

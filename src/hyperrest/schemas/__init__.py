"""Pydantic schemas for links and hypermedia documents."""

from hyperrest.schemas.collection_json import (
    CollectionJsonCollection,
    CollectionJsonDatum,
    CollectionJsonDocument,
    CollectionJsonItem,
    CollectionJsonLink,
)
from hyperrest.schemas.links import HalLink, Link, LinkTemplate

__all__ = [
    "CollectionJsonCollection",
    "CollectionJsonDatum",
    "CollectionJsonDocument",
    "CollectionJsonItem",
    "CollectionJsonLink",
    "HalLink",
    "Link",
    "LinkTemplate",
]

"""Collection+JSON document models using Pydantic v2.

Dump with ``exclude_unset=True`` so that absent hrefs and item links are
left out while explicit ``null`` data values survive.

Reference: http://amundsen.com/media-types/collection/format/
"""

from typing import Any

from pydantic import BaseModel


class CollectionJsonDatum(BaseModel):
    """One ``{name, value}`` pair of an item's ``data`` array."""

    name: str
    value: Any = None


class CollectionJsonLink(BaseModel):
    """A link object inside ``collection.links`` or ``item.links``."""

    rel: str
    href: str
    templated: bool | None = None


class CollectionJsonItem(BaseModel):
    """A flattened record plus its resolved self URI."""

    href: str | None = None
    data: list[CollectionJsonDatum]
    links: list[CollectionJsonLink] | None = None


class CollectionJsonCollection(BaseModel):
    """The ``collection`` object of a Collection+JSON document."""

    version: str
    href: str
    links: list[CollectionJsonLink]
    items: list[CollectionJsonItem]


class CollectionJsonDocument(BaseModel):
    """Collection+JSON envelope ``{ collection: {...} }``."""

    collection: CollectionJsonCollection

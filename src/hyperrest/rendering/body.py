"""Rendered body variants produced by the handler pipeline.

``Raw`` is final. ``PendingHal`` and ``PendingCollectionJson`` still need
the captured links merged in by ``hyperrest.rendering.finalize``.
``Unrendered`` means no renderer claimed the negotiated media type.
"""

from typing import Any

from pydantic import BaseModel, Field

from hyperrest.rendering.context import RenderResult
from hyperrest.schemas.collection_json import CollectionJsonItem
from hyperrest.schemas.links import Link, LinkTemplate


class Raw(BaseModel):
    content: bytes


class PendingHal(BaseModel):
    document: dict[str, Any]


class PendingCollectionJson(BaseModel):
    items: list[CollectionJsonItem]
    single: bool = False


class Unrendered(BaseModel):
    result: RenderResult


RenderedBody = Raw | PendingHal | PendingCollectionJson | Unrendered


class Rendered(BaseModel):
    """Pipeline output: a body plus the links captured from the context."""

    body: RenderedBody
    links: list[Link] = Field(default_factory=list)
    link_templates: list[LinkTemplate] = Field(default_factory=list)

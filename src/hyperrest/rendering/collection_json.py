"""Collection+JSON item shaping.

Every record becomes ``{href, data: [{name, value}, ...]}``. The envelope
with version, collection href and links is built by
``hyperrest.rendering.finalize.finalize_collection_json``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from hyperrest.rendering.body import PendingCollectionJson
from hyperrest.rendering.context import RenderContext, RenderResult
from hyperrest.schemas.collection_json import CollectionJsonDatum, CollectionJsonItem
from hyperrest.services.links import self_link, un_dotdot


def collection_item(ctx: RenderContext, data_key: str, record: Any) -> CollectionJsonItem:
    """Project ``record`` onto a Collection+JSON item.

    The href is the record's self link under the context's path prefix,
    with ``..`` segments resolved. It is left out when there is no self link.
    """
    if isinstance(record, Mapping):
        data = [CollectionJsonDatum(name=str(k), value=v) for k, v in record.items()]
    else:
        data = [CollectionJsonDatum(name=data_key, value=record)]
    href = self_link(ctx, data_key, record)
    if href is None:
        return CollectionJsonItem(data=data)
    return CollectionJsonItem(href=un_dotdot(ctx.path_prefix + href), data=data)


def assemble_collection_json(ctx: RenderContext, result: RenderResult) -> PendingCollectionJson:
    """Shape a single record as a one-item collection, a sequence as items."""
    dk, value = result.data_key, result.value
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return PendingCollectionJson(items=[collection_item(ctx, dk, r) for r in value])
    return PendingCollectionJson(items=[collection_item(ctx, dk, value)], single=True)

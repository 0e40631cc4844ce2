"""HAL document assembly.

Single records get their own ``self`` link and have embed-mapped fields
moved under ``_embedded``. Sequences become ``_embedded[data_key]`` with
every element linked and embedded the same way. Resource-level ``_links``
are merged later by ``hyperrest.rendering.finalize.finalize_hal``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from hyperrest.rendering.body import PendingHal
from hyperrest.rendering.context import RenderContext, RenderResult
from hyperrest.services.links import expand, prefixed, self_link, template_for_relation

logger = logging.getLogger(__name__)


def with_self_link(record: Mapping[str, Any], href: str | None) -> dict[str, Any]:
    """Return a copy of ``record`` with ``_links.self`` set, unless ``href`` is None."""
    if href is None:
        return dict(record)
    links = {**record.get("_links", {}), "self": {"href": href}}
    return {"_links": links, **{k: v for k, v in record.items() if k != "_links"}}


def embed(ctx: RenderContext, record: Mapping[str, Any]) -> dict[str, Any]:
    """Move embed-mapped fields of ``record`` into ``_embedded``.

    Each nested record is linked through its relation's template, expanded
    against the host's fields overridden by the nested record's own. A
    mapped field that the record lacks, or that holds neither a list nor a
    single nested record, yields an empty list.
    """
    if ctx.resource.embed_mapping is None:
        return dict(record)
    mapping = ctx.resource.embed_mapping()
    if not mapping:
        return dict(record)

    host = {k: v for k, v in record.items() if k not in mapping}
    embedded: dict[str, list[Any]] = {}
    for field, relation in mapping.items():
        template = template_for_relation(ctx.resource, relation)
        embedded[field] = [
            _nested(ctx.path_prefix, template, record, item)
            for item in _embeddable(record.get(field), field)
        ]
    host["_embedded"] = embedded
    return host


def _embeddable(value: Any, field: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    logger.debug("Not embedding field %s holding %s", field, type(value).__name__)
    return []


def _nested(prefix: str, template: str | None, host: Mapping[str, Any], item: Any) -> Any:
    if not isinstance(item, Mapping):
        return item
    if template is None:
        return with_self_link(item, None)
    return with_self_link(item, prefixed(prefix, expand(template, {**host, **item})))


def _present(ctx: RenderContext, data_key: str, record: Any) -> Any:
    if not isinstance(record, Mapping):
        return record
    href = self_link(ctx, data_key, record)
    if href is not None:
        href = prefixed(ctx.path_prefix, href)
    return embed(ctx, with_self_link(record, href))


def assemble_hal(ctx: RenderContext, result: RenderResult) -> PendingHal:
    """Shape a presented value as a HAL document without resource links."""
    dk, value = result.data_key, result.value
    if isinstance(value, Mapping):
        return PendingHal(document=_present(ctx, dk, value))
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return PendingHal(
            document={"_embedded": {dk: [_present(ctx, dk, r) for r in value]}}
        )
    return PendingHal(document={dk: value})

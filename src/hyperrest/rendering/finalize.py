"""Second pass over a rendered body: merge captured links and serialise.

Plain formats are already bytes. HAL and Collection+JSON bodies only get
their resource-level links here, because links are captured as the last
pipeline step. The internal link lists never reach the visible body except
through these envelopes.
"""

from __future__ import annotations

import logging
from typing import Any

from hyperrest.config import get_settings
from hyperrest.rendering.body import (
    PendingCollectionJson,
    PendingHal,
    Raw,
    Rendered,
    Unrendered,
)
from hyperrest.rendering.renderers import encode_json
from hyperrest.schemas.collection_json import (
    CollectionJsonCollection,
    CollectionJsonDocument,
    CollectionJsonItem,
    CollectionJsonLink,
)
from hyperrest.schemas.links import Link, LinkTemplate
from hyperrest.services.links import links_as_map, un_dotdot

logger = logging.getLogger(__name__)

# Relations that describe the collection itself rather than the single item.
_COLLECTION_RELATIONS = ("self", "listing")


def hal_document(
    document: dict[str, Any],
    links: list[Link],
    link_templates: list[LinkTemplate],
) -> dict[str, Any]:
    """Merge resource links over the document's own ``_links``, ``_links`` first.

    A resource link template does not override a relation the document
    already resolved, such as a record's concrete ``self`` link.
    """
    merged = dict(document.get("_links", {}))
    for rel, link in links_as_map(links, link_templates).items():
        # an unexpanded template never replaces a resolved link
        if link.templated and rel in merged:
            continue
        merged[rel] = link.model_dump(exclude_none=True)
    return {"_links": merged, **{k: v for k, v in document.items() if k != "_links"}}


def finalize_hal(rendered: Rendered) -> bytes:
    """Serialise a pending HAL body with its ``_links``."""
    if not isinstance(rendered.body, PendingHal):
        raise TypeError("finalize_hal expects a PendingHal body")
    return encode_json(
        hal_document(rendered.body.document, rendered.links, rendered.link_templates)
    )


def collection_json_document(
    pending: PendingCollectionJson,
    links: list[Link],
    link_templates: list[LinkTemplate],
    request_uri: str,
) -> CollectionJsonDocument:
    """Build the Collection+JSON envelope around the pending items.

    The collection href is the ``listing`` link, falling back to the request
    URI. A single-item collection carries its relations (other than ``self``
    and ``listing``) on the item and none at collection level.
    """
    link_map = links_as_map(links, link_templates)
    listing = link_map.get("listing")
    cj_links = [
        CollectionJsonLink(rel=rel, href=link.href, templated=link.templated)
        if link.templated
        else CollectionJsonLink(rel=rel, href=link.href)
        for rel, link in link_map.items()
    ]

    if pending.single:
        item = pending.items[0]
        self_ = link_map.get("self")
        href = item.href
        if self_ is not None and not self_.templated:
            href = self_.href
        fields: dict[str, Any] = {
            "data": item.data,
            "links": [link for link in cj_links if link.rel not in _COLLECTION_RELATIONS],
        }
        if href is not None:
            fields["href"] = un_dotdot(href)
        items = [CollectionJsonItem(**fields)]
        collection_links: list[CollectionJsonLink] = []
    else:
        items = pending.items
        collection_links = cj_links

    return CollectionJsonDocument(
        collection=CollectionJsonCollection(
            version=get_settings().collection_json_version,
            href=listing.href if listing is not None else request_uri,
            links=collection_links,
            items=items,
        )
    )


def finalize_collection_json(rendered: Rendered, request_uri: str) -> bytes:
    """Serialise a pending Collection+JSON body as a full document."""
    if not isinstance(rendered.body, PendingCollectionJson):
        raise TypeError("finalize_collection_json expects a PendingCollectionJson body")
    document = collection_json_document(
        rendered.body, rendered.links, rendered.link_templates, request_uri
    )
    return encode_json(document.model_dump(exclude_unset=True))


def finalize(rendered: Rendered, request_uri: str = "") -> bytes | None:
    """Turn pipeline output into response bytes.

    Returns:
        The body, or None when no renderer claimed the media type and the
        host should answer with 406 Not Acceptable.
    """
    body = rendered.body
    if isinstance(body, Raw):
        return body.content
    if isinstance(body, PendingHal):
        return finalize_hal(rendered)
    if isinstance(body, PendingCollectionJson):
        return finalize_collection_json(rendered, request_uri)
    if isinstance(body, Unrendered):
        logger.debug("Unrendered body for data key %s", body.result.data_key)
        return None
    raise TypeError(f"Unknown rendered body: {type(body).__name__}")

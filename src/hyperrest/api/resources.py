"""Resource mixins and their FastAPI endpoints.

``item_resource`` and ``collection_resource`` bundle the boilerplate of
the two common resource shapes: a presenter-driven entry handler composed
with every format renderer, the advertised media types, and the link
between an item and its collection. ``mount`` exposes a resource as a GET
route on an ``APIRouter``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response

from hyperrest.api.negotiation import negotiate
from hyperrest.config import get_settings
from hyperrest.rendering.context import MappingSource, RenderContext, ResourceConfig
from hyperrest.rendering.finalize import finalize
from hyperrest.rendering.handlers import Presenter, entry_handler, identity, list_handler
from hyperrest.rendering.pipeline import Handler, Pipeline, compose
from hyperrest.rendering.renderers import DEFAULT_RENDERERS, FormatRenderer
from hyperrest.services.links import discover_links

logger = logging.getLogger(__name__)

Loader = Callable[[Request], Awaitable[Any]]
HandlerFactory = Callable[[Presenter, str], Handler]


class HandledResource:
    """A resource's link configuration together with its composed pipeline.

    Args:
        config: URI templates and link/embed mappings of the resource.
        pipeline: Composed handler chain rendering the resource.
        data_key: Key under which the loaded data is handed to the pipeline.
        is_collection: Whether the resource renders a sequence of records.
    """

    def __init__(
        self,
        config: ResourceConfig,
        pipeline: Pipeline,
        data_key: str,
        is_collection: bool = False,
    ) -> None:
        self.config = config
        self.pipeline = pipeline
        self.data_key = data_key
        self.is_collection = is_collection

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def available_media_types(self) -> tuple[str, ...]:
        return self.pipeline.available_media_types

    def render(
        self,
        media_type: str,
        data: Any,
        *,
        path_params: Mapping[str, Any] | None = None,
        path_prefix: str = "",
        request_uri: str = "",
    ) -> bytes | None:
        """Render ``data`` as ``media_type`` with links discovered from the path.

        Returns:
            The response body, or None when no renderer claims the media type.
        """
        params = dict(path_params or {})
        links, link_templates = discover_links(self.config, params, path_prefix)
        ctx = RenderContext(
            media_type,
            self.config,
            data={self.data_key: data},
            links=links,
            link_templates=link_templates,
            path_prefix=path_prefix,
            request_uri=request_uri,
            path_params=params,
        )
        return finalize(self.pipeline(ctx), request_uri)


def handled_resource(
    name: str,
    *,
    handler_factory: HandlerFactory = entry_handler,
    presenter: Presenter = identity,
    data_key: str | None = None,
    renderers: Iterable[FormatRenderer] = DEFAULT_RENDERERS,
    uri_templates: Mapping[str, str] | None = None,
    link_mapping: MappingSource = None,
    embed_mapping: MappingSource = None,
    is_collection: bool = False,
) -> HandledResource:
    """Compose a handler for a resource from a presenter and its renderers."""
    data_key = data_key or get_settings().default_data_key
    config = ResourceConfig(
        name,
        uri_templates=uri_templates,
        link_mapping=link_mapping,
        embed_mapping=embed_mapping,
    )
    pipeline = compose(handler_factory(presenter, data_key), renderers)
    return HandledResource(config, pipeline, data_key, is_collection)


def item_resource(
    name: str,
    *,
    link_to_collection: str | None = None,
    uri_templates: Mapping[str, str] | None = None,
    link_mapping: MappingSource = None,
    data_key: str | None = None,
    **kwargs: Any,
) -> HandledResource:
    """A single-record resource.

    Its records link to themselves through the ``self`` template and, when
    ``link_to_collection`` is given, to their collection via ``collection``.
    """
    data_key = data_key or get_settings().default_data_key
    templates = dict(uri_templates or {})
    if link_to_collection is not None:
        templates["collection"] = link_to_collection
    return handled_resource(
        name,
        handler_factory=entry_handler,
        data_key=data_key,
        uri_templates=templates,
        link_mapping=link_mapping if link_mapping is not None else {data_key: "self"},
        **kwargs,
    )


def collection_resource(
    name: str,
    *,
    link_to_item: str | None = None,
    uri_templates: Mapping[str, str] | None = None,
    link_mapping: MappingSource = None,
    data_key: str | None = None,
    **kwargs: Any,
) -> HandledResource:
    """A resource listing many records.

    With ``link_to_item`` the resource advertises an ``item`` link template
    and every listed record gets its self link from that template.
    """
    data_key = data_key or get_settings().default_data_key
    templates = dict(uri_templates or {})
    if link_to_item is not None:
        templates["item"] = link_to_item
    if link_mapping is None:
        link_mapping = {data_key: "item"}
    return handled_resource(
        name,
        handler_factory=list_handler,
        data_key=data_key,
        uri_templates=templates,
        link_mapping=link_mapping,
        is_collection=True,
        **kwargs,
    )


def mount(
    router: APIRouter,
    path: str,
    resource: HandledResource,
    loader: Loader,
    **route_kwargs: Any,
) -> None:
    """Register a GET endpoint for ``resource`` on ``router``.

    The endpoint negotiates the media type from the Accept header, awaits
    ``loader`` for the data and renders it. Responds 406 when no available
    media type is acceptable and 404 when an item loader returns None.
    """

    async def endpoint(request: Request) -> Response:
        media_type = negotiate(
            request.headers.get("accept"), resource.available_media_types
        )
        if media_type is None:
            raise HTTPException(status_code=406, detail="Not Acceptable")

        data = await loader(request)
        if data is None and not resource.is_collection:
            raise HTTPException(status_code=404, detail=f"{resource.name} not found")

        body = resource.render(
            media_type,
            data,
            path_params=request.path_params,
            path_prefix=request.scope.get("root_path", ""),
            request_uri=request.url.path,
        )
        if body is None:
            raise HTTPException(status_code=406, detail="Not Acceptable")
        logger.debug("Rendered %s as %s", resource.name, media_type)
        return Response(content=body, media_type=media_type)

    router.add_api_route(
        path, endpoint, methods=["GET"], name=resource.name, **route_kwargs
    )

"""Handler composition: entry handler -> format renderer -> link capture.

``compose`` builds a ``Pipeline`` with a fixed stage order. The renderers
are resolved through a media type table built once, so exactly one of them
fires per request. Link capture is not a configurable stage: the pipeline
always runs it last, after the body is known.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from hyperrest.rendering.body import Rendered, RenderedBody, Unrendered
from hyperrest.rendering.context import RenderContext, RenderResult
from hyperrest.rendering.renderers import DEFAULT_RENDERERS, FormatRenderer

logger = logging.getLogger(__name__)

Handler = Callable[[RenderContext], RenderResult]


class Pipeline:
    """A composed, callable handler chain.

    Args:
        entry: Handler that applies the presenter and picks the data key.
        renderers: Format renderers; their media types must be disjoint.

    Raises:
        ValueError: If two renderers claim the same media type.
    """

    def __init__(
        self,
        entry: Handler,
        renderers: Iterable[FormatRenderer] = DEFAULT_RENDERERS,
    ) -> None:
        self.entry = entry
        self.renderers: tuple[FormatRenderer, ...] = tuple(renderers)
        self._table: dict[str, FormatRenderer] = {}
        for renderer in self.renderers:
            for media_type in renderer.media_types:
                claimed = self._table.get(media_type)
                if claimed is not None:
                    raise ValueError(
                        f"Media type {media_type!r} claimed by both {claimed!r} and {renderer!r}"
                    )
                self._table[media_type] = renderer
        self.available_media_types: tuple[str, ...] = tuple(self._table)

    def renderer_for(self, media_type: str | None) -> FormatRenderer | None:
        """Return the renderer claiming ``media_type``, if any."""
        if media_type is None:
            return None
        return self._table.get(media_type)

    def __call__(self, ctx: RenderContext) -> Rendered:
        result = self.entry(ctx)
        renderer = self.renderer_for(ctx.media_type)
        if renderer is None:
            logger.debug(
                "No renderer for media type %s on resource %s",
                ctx.media_type,
                ctx.resource.name,
            )
            body: RenderedBody = Unrendered(result=result)
        else:
            body = renderer.body(result, ctx)
        return capture_links(ctx, body)


def capture_links(ctx: RenderContext, body: RenderedBody) -> Rendered:
    """Attach the context's links and link templates to a rendered body."""
    return Rendered(
        body=body,
        links=list(ctx.links),
        link_templates=list(ctx.link_templates),
    )


def compose(
    entry: Handler,
    renderers: Iterable[FormatRenderer] = DEFAULT_RENDERERS,
) -> Pipeline:
    """Compose ``entry`` with format renderers and the link capture step."""
    return Pipeline(entry, renderers)

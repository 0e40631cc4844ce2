"""Per-request render context and the resource configuration it carries.

The context is owned by the host (see ``hyperrest.api.resources``) and is
read-mostly: handlers read their payload from ``data`` under a data key
and hand back a ``RenderResult`` instead of writing into the context.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from hyperrest.schemas.links import Link, LinkTemplate

MappingSource = Mapping[str, str] | Callable[[], Mapping[str, str]] | None


def _as_thunk(source: MappingSource) -> Callable[[], Mapping[str, str]] | None:
    if source is None or callable(source):
        return source
    return lambda: source


class ResourceConfig:
    """Link configuration of one resource.

    Args:
        name: Resource name, used in log records.
        uri_templates: URI template per relation name (``{"self": "/items/{id}"}``).
        link_mapping: Data key -> relation whose template yields a record's
            self link. A mapping or a zero-argument callable returning one.
        embed_mapping: Field -> relation for HAL embedding. Evaluated only
            when a HAL document is assembled.
    """

    def __init__(
        self,
        name: str,
        uri_templates: Mapping[str, str] | None = None,
        link_mapping: MappingSource = None,
        embed_mapping: MappingSource = None,
    ) -> None:
        self.name = name
        self.uri_templates: dict[str, str] = dict(uri_templates or {})
        self.link_mapping = _as_thunk(link_mapping)
        self.embed_mapping = _as_thunk(embed_mapping)

    def __repr__(self) -> str:
        return f"ResourceConfig(name={self.name!r})"


class RenderContext:
    """Everything a handler chain needs to render one response.

    ``links`` and ``link_templates`` are filled by link discovery before
    the chain runs; ``path_prefix`` is the mount prefix of the application
    and ``request_uri`` the path that was requested.
    """

    def __init__(
        self,
        media_type: str,
        resource: ResourceConfig,
        *,
        data: Mapping[str, Any] | None = None,
        links: Sequence[Link] = (),
        link_templates: Sequence[LinkTemplate] = (),
        path_prefix: str = "",
        request_uri: str = "",
        path_params: Mapping[str, Any] | None = None,
    ) -> None:
        self.media_type = media_type
        self.resource = resource
        self.data: dict[str, Any] = dict(data or {})
        self.links: list[Link] = list(links)
        self.link_templates: list[LinkTemplate] = list(link_templates)
        self.path_prefix = path_prefix
        self.request_uri = request_uri
        self.path_params: dict[str, Any] = dict(path_params or {})


class RenderResult(BaseModel):
    """Presented payload of a handler, stored under its data key."""

    data_key: str
    value: Any

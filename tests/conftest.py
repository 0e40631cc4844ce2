"""Shared fixtures: resource configurations and render contexts."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from hyperrest.rendering.context import RenderContext, ResourceConfig
from hyperrest.schemas.links import Link, LinkTemplate

ITEMS = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]


@pytest.fixture
def items() -> list[dict[str, Any]]:
    return [dict(item) for item in ITEMS]


@pytest.fixture
def item_config() -> ResourceConfig:
    return ResourceConfig(
        "items",
        uri_templates={"self": "/items/{id}", "listing": "/items"},
        link_mapping={"data": "self"},
    )


@pytest.fixture
def make_ctx() -> Callable[..., RenderContext]:
    """Build a RenderContext with sensible defaults for a media type."""

    def _make(
        media_type: str,
        resource: ResourceConfig,
        data: Any = None,
        *,
        key: str = "data",
        links: list[Link] | None = None,
        link_templates: list[LinkTemplate] | None = None,
        path_prefix: str = "",
        request_uri: str = "/items",
    ) -> RenderContext:
        return RenderContext(
            media_type,
            resource,
            data={key: data},
            links=links or [],
            link_templates=link_templates or [],
            path_prefix=path_prefix,
            request_uri=request_uri,
        )

    return _make

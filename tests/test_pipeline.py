"""Tests for handler composition and response finalisation."""

from __future__ import annotations

import json

import pytest
import yaml

from hyperrest.rendering.body import (
    PendingCollectionJson,
    PendingHal,
    Raw,
    Rendered,
    Unrendered,
)
from hyperrest.rendering.context import RenderContext, RenderResult, ResourceConfig
from hyperrest.rendering.finalize import finalize
from hyperrest.rendering.handlers import entry_handler, list_handler
from hyperrest.rendering.pipeline import Pipeline, compose
from hyperrest.rendering.renderers import (
    DEFAULT_RENDERERS,
    FormatRenderer,
    JsonRenderer,
    YamlRenderer,
)
from hyperrest.schemas.links import Link, LinkTemplate


class CountingRenderer(FormatRenderer):
    def __init__(self, media_type: str) -> None:
        self.media_types = (media_type,)
        self.calls = 0

    def render(self, value):
        self.calls += 1
        return self.media_types[0].encode()


ALL_MEDIA_TYPES = [mt for r in DEFAULT_RENDERERS for mt in r.media_types]


@pytest.mark.parametrize("media_type", ALL_MEDIA_TYPES)
def test_every_default_media_type_renders(make_ctx, item_config, media_type):
    pipeline = compose(entry_handler())
    rendered = pipeline(make_ctx(media_type, item_config, {"id": 1, "name": "a"}))
    assert not isinstance(rendered.body, Unrendered)
    assert finalize(rendered, "/items/1")


def test_exactly_one_renderer_fires(make_ctx, item_config):
    renderers = [CountingRenderer(f"application/x-{n}") for n in range(3)]
    pipeline = compose(entry_handler(), renderers)
    rendered = pipeline(make_ctx("application/x-1", item_config, {"id": 1}))
    assert [r.calls for r in renderers] == [0, 1, 0]
    assert rendered.body == Raw(content=b"application/x-1")


def test_unmatched_media_type_falls_through(make_ctx, item_config):
    pipeline = compose(entry_handler(), [JsonRenderer()])
    rendered = pipeline(make_ctx("text/html", item_config, {"id": 1}))
    assert rendered.body == Unrendered(result=RenderResult(data_key="data", value={"id": 1}))
    assert finalize(rendered) is None


def test_duplicate_media_type_claims_are_rejected():
    with pytest.raises(ValueError, match="application/json"):
        compose(entry_handler(), [JsonRenderer(), JsonRenderer()])


def test_available_media_types_follow_renderer_order():
    pipeline = compose(entry_handler(), [JsonRenderer(), YamlRenderer()])
    assert pipeline.available_media_types == (
        "application/json",
        "application/yaml",
        "application/x-yaml",
        "text/yaml",
        "text/x-yaml",
    )
    assert isinstance(pipeline, Pipeline)


def test_links_are_captured_after_rendering(make_ctx, item_config):
    links = [Link(rel="self", href="/items/1")]
    templates = [LinkTemplate(rel="search", href="/items{?q}")]
    pipeline = compose(entry_handler())
    rendered = pipeline(
        make_ctx(
            "application/json",
            item_config,
            {"id": 1},
            links=links,
            link_templates=templates,
        )
    )
    assert rendered.links == links
    assert rendered.link_templates == templates
    # plain formats never show the captured links
    assert json.loads(finalize(rendered)) == {"id": 1}


def test_json_scenario_without_links(make_ctx):
    pipeline = compose(entry_handler(lambda r: {"name": r["name"]}))
    rendered = pipeline(make_ctx("application/json", ResourceConfig("items"), {"id": 1, "name": "a"}))
    assert finalize(rendered) == b'{"name": "a"}'


def test_yaml_renders_presented_value(make_ctx, item_config, items):
    pipeline = compose(list_handler())
    rendered = pipeline(make_ctx("text/yaml", item_config, items))
    assert yaml.safe_load(finalize(rendered)) == items


def test_hal_list_scenario(make_ctx, item_config, items):
    pipeline = compose(list_handler())
    rendered = pipeline(
        make_ctx(
            "application/hal+json",
            item_config,
            items,
            links=[Link(rel="listing", href="/items")],
        )
    )
    assert isinstance(rendered.body, PendingHal)
    body = json.loads(finalize(rendered))
    assert body["_links"] == {"listing": {"href": "/items"}}
    assert body["_embedded"]["data"] == [
        {"_links": {"self": {"href": "/items/1"}}, "id": 1, "name": "a"},
        {"_links": {"self": {"href": "/items/2"}}, "id": 2, "name": "b"},
    ]


def test_collection_json_single_scenario(make_ctx, item_config):
    pipeline = compose(entry_handler())
    rendered = pipeline(
        make_ctx(
            "application/vnd.collection+json",
            item_config,
            {"id": 1},
            links=[Link(rel="self", href="/items/1"), Link(rel="next", href="/items/2")],
            request_uri="/items/1",
        )
    )
    assert isinstance(rendered.body, PendingCollectionJson)
    collection = json.loads(finalize(rendered, "/items/1"))["collection"]
    assert collection["links"] == []
    assert collection["items"][0]["href"] == "/items/1"
    assert collection["items"][0]["links"] == [{"rel": "next", "href": "/items/2"}]


def test_embed_mapping_untouched_by_plain_formats(make_ctx):
    calls = []

    def embed_mapping():
        calls.append(1)
        return {"lines": "line"}

    config = ResourceConfig("orders", {"line": "/lines/{line}"}, embed_mapping=embed_mapping)
    pipeline = compose(entry_handler())
    finalize(pipeline(make_ctx("application/json", config, {"id": 1, "lines": []})))
    assert calls == []
    finalize(pipeline(make_ctx("application/hal+json", config, {"id": 1, "lines": []})))
    assert calls == [1]


def test_data_keys_do_not_collide(item_config):
    ctx = RenderContext(
        "application/json",
        item_config,
        data={"data": {"id": 1}, "other": {"id": 2}},
    )
    first = compose(entry_handler(key="data"))(ctx)
    second = compose(entry_handler(key="other"))(ctx)
    assert json.loads(finalize(first)) == {"id": 1}
    assert json.loads(finalize(second)) == {"id": 2}
    assert ctx.data == {"data": {"id": 1}, "other": {"id": 2}}


def test_finalize_rejects_unknown_body():
    rendered = Rendered.model_construct(body=object(), links=[], link_templates=[])
    with pytest.raises(TypeError):
        finalize(rendered)

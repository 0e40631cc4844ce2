"""Tests for presenter-driven entry handlers."""

from __future__ import annotations

import json

from hyperrest.rendering.context import RenderContext, RenderResult
from hyperrest.rendering.finalize import finalize
from hyperrest.rendering.handlers import (
    default_entry_handler,
    default_list_handler,
    entry_handler,
    identity,
    list_handler,
)
from hyperrest.rendering.renderers import DEFAULT_RENDERERS


def public(record):
    return {"name": record["name"]}


def test_list_handler_maps_presenter(make_ctx, item_config, items):
    result = list_handler(public)(make_ctx("application/json", item_config, items))
    assert result == RenderResult(data_key="data", value=[{"name": "a"}, {"name": "b"}])


def test_list_handler_with_missing_data(item_config):
    ctx = RenderContext("application/json", item_config)
    assert list_handler()(ctx).value == []


def test_entry_handler_applies_presenter_once(make_ctx, item_config):
    result = entry_handler(public)(make_ctx("application/json", item_config, {"id": 1, "name": "a"}))
    assert result == RenderResult(data_key="data", value={"name": "a"})


def test_custom_key(make_ctx, item_config):
    ctx = make_ctx("application/json", item_config, {"id": 1, "name": "a"}, key="entry")
    result = entry_handler(public, "entry")(ctx)
    assert result.data_key == "entry"
    assert result.value == {"name": "a"}


def test_handlers_leave_context_untouched(make_ctx, item_config, items):
    ctx = make_ctx("application/json", item_config, items)
    list_handler(public)(ctx)
    assert ctx.data == {"data": items}


def test_identity():
    record = {"id": 1}
    assert identity(record) is record


def test_default_handlers_carry_every_renderer(make_ctx, item_config, items):
    pipeline = default_list_handler(public)
    assert pipeline.renderers == DEFAULT_RENDERERS
    body = finalize(pipeline(make_ctx("application/json", item_config, items)))
    assert json.loads(body) == [{"name": "a"}, {"name": "b"}]

    entry = default_entry_handler(public)
    body = finalize(entry(make_ctx("application/json", item_config, items[0])))
    assert json.loads(body) == {"name": "a"}

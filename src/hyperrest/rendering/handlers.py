"""Entry handlers built from presenters.

A presenter maps one stored record to its public representation; the
simplest one is ``identity``. Entry handlers read the payload from the
context under a data key, apply the presenter and return a
``RenderResult``. The ``default_*`` variants come composed with every
format renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from hyperrest.config import get_settings
from hyperrest.rendering.context import RenderContext, RenderResult
from hyperrest.rendering.pipeline import Handler, Pipeline, compose

Presenter = Callable[[Any], Any]


def identity(record: Any) -> Any:
    return record


def list_handler(presenter: Presenter = identity, key: str | None = None) -> Handler:
    """Make a handler mapping ``presenter`` over the sequence under ``key``."""
    data_key = key or get_settings().default_data_key

    def handler(ctx: RenderContext) -> RenderResult:
        records = ctx.data.get(data_key) or []
        return RenderResult(data_key=data_key, value=[presenter(r) for r in records])

    return handler


def entry_handler(presenter: Presenter = identity, key: str | None = None) -> Handler:
    """Make a handler applying ``presenter`` to the single value under ``key``."""
    data_key = key or get_settings().default_data_key

    def handler(ctx: RenderContext) -> RenderResult:
        return RenderResult(data_key=data_key, value=presenter(ctx.data.get(data_key)))

    return handler


def default_list_handler(presenter: Presenter = identity, key: str | None = None) -> Pipeline:
    """``list_handler`` composed with all format renderers."""
    return compose(list_handler(presenter, key))


def default_entry_handler(presenter: Presenter = identity, key: str | None = None) -> Pipeline:
    """``entry_handler`` composed with all format renderers."""
    return compose(entry_handler(presenter, key))

"""Format renderers: one strategy per wire format.

Each renderer declares the media types it claims as class-level data and
knows how to turn a ``RenderResult`` into a ``RenderedBody``. Plain formats
serialise immediately; HAL and Collection+JSON return a pending body that
is finished once the captured links are known.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID

import edn_format
import msgpack
import yaml

from hyperrest.config import get_settings
from hyperrest.rendering.body import Raw, RenderedBody
from hyperrest.rendering.collection_json import assemble_collection_json
from hyperrest.rendering.context import RenderContext, RenderResult
from hyperrest.rendering.hal import assemble_hal


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json(value: Any) -> bytes:
    """Serialise ``value`` as UTF-8 JSON using the configured indent."""
    return json.dumps(
        value, default=_json_default, indent=get_settings().json_indent
    ).encode("utf-8")


class FormatRenderer(ABC):
    """Base interface for a wire format.

    Subclasses set ``media_types`` to every media type string they claim.
    """

    media_types: ClassVar[tuple[str, ...]] = ()

    def applies(self, media_type: str | None) -> bool:
        """Return True if this renderer claims ``media_type``."""
        return media_type in self.media_types

    @abstractmethod
    def render(self, value: Any) -> bytes:
        """Serialise a presented value to bytes."""
        ...

    def body(self, result: RenderResult, ctx: RenderContext) -> RenderedBody:
        """Render the value stored under the result's data key."""
        return Raw(content=self.render(result.value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class JsonRenderer(FormatRenderer):
    media_types = ("application/json",)

    def render(self, value: Any) -> bytes:
        return encode_json(value)


class YamlRenderer(FormatRenderer):
    media_types = (
        "application/yaml",
        "application/x-yaml",
        "text/yaml",
        "text/x-yaml",
    )

    def render(self, value: Any) -> bytes:
        return yaml.safe_dump(
            value,
            default_flow_style=get_settings().yaml_default_flow_style,
            sort_keys=False,
            allow_unicode=True,
        ).encode("utf-8")


class MsgpackRenderer(FormatRenderer):
    media_types = ("application/x-msgpack",)

    def render(self, value: Any) -> bytes:
        return msgpack.packb(value, use_bin_type=True)


class EdnRenderer(FormatRenderer):
    """EDN text with string map keys written as keywords (``{:name "a"}``).

    Keys that are not valid keyword names (``"first name"``, ``"1st"``) stay
    strings so the output remains readable EDN.
    """

    media_types = ("application/edn",)

    def render(self, value: Any) -> bytes:
        return edn_format.dumps(_edn_value(value)).encode("utf-8")


_EDN_KEYWORD_NAME = re.compile(r"[A-Za-z*!_?$%&=<>][A-Za-z0-9*!_?$%&=<>.+\-]*")


def _edn_key(key: Any) -> Any:
    if isinstance(key, str) and _EDN_KEYWORD_NAME.fullmatch(key):
        return edn_format.Keyword(key)
    return key


def _edn_value(value: Any) -> Any:
    # tuples dump as EDN lists; sequences are written as vectors
    if isinstance(value, dict):
        return {_edn_key(k): _edn_value(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_edn_value(v) for v in value]
    if isinstance(value, list):
        return [_edn_value(v) for v in value]
    return value


class HalRenderer(FormatRenderer):
    """HAL+JSON. Produces a ``PendingHal`` body finished by ``finalize_hal``."""

    media_types = ("application/hal+json",)

    def render(self, value: Any) -> bytes:
        return encode_json(value)

    def body(self, result: RenderResult, ctx: RenderContext) -> RenderedBody:
        return assemble_hal(ctx, result)


class CollectionJsonRenderer(FormatRenderer):
    """Collection+JSON. Produces a ``PendingCollectionJson`` body."""

    media_types = ("application/vnd.collection+json",)

    def render(self, value: Any) -> bytes:
        return encode_json(value)

    def body(self, result: RenderResult, ctx: RenderContext) -> RenderedBody:
        return assemble_collection_json(ctx, result)


# JSON first so that ``*/*`` negotiates to plain JSON.
DEFAULT_RENDERERS: tuple[FormatRenderer, ...] = (
    JsonRenderer(),
    HalRenderer(),
    CollectionJsonRenderer(),
    YamlRenderer(),
    MsgpackRenderer(),
    EdnRenderer(),
)

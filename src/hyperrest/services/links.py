"""URI template lookup, expansion and link discovery for resources.

Templates are RFC 6570 URI templates expanded with ``uritemplate``. Missing
mappings or templates are not errors: a record without an addressable
identity simply has no self link.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from uritemplate import URITemplate

from hyperrest.schemas.links import HalLink, Link, LinkTemplate

if TYPE_CHECKING:
    from hyperrest.rendering.context import RenderContext, ResourceConfig

logger = logging.getLogger(__name__)


def template_for_relation(resource: ResourceConfig, relation: str | None) -> str | None:
    """Return the URI template registered on ``resource`` for ``relation``."""
    if relation is None:
        return None
    return resource.uri_templates.get(relation)


def expand(template: str, bindings: Mapping[str, Any]) -> str:
    """Expand ``template`` using the values in ``bindings`` it names.

    Args:
        template: RFC 6570 URI template, e.g. ``/items/{id}``.
        bindings: Field values; keys the template does not use are ignored.

    Returns:
        The expanded URI. Unbound variables expand to nothing.
    """
    uri_template = URITemplate(template)
    variables = {
        name: _binding_value(bindings[name])
        for name in uri_template.variable_names
        if name in bindings and bindings[name] is not None
    }
    return uri_template.expand(variables)


def _binding_value(value: Any) -> Any:
    if isinstance(value, (str, list, tuple, dict)):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def self_link(ctx: RenderContext, data_key: str, record: Any) -> str | None:
    """Resolve the self URI of ``record`` rendered under ``data_key``.

    The resource's link mapping names the relation for the data key; that
    relation's template is expanded against the record's fields. Returns
    ``None`` when the mapping, relation or template is missing, or when the
    record is not a mapping.
    """
    if ctx.resource.link_mapping is None or not isinstance(record, Mapping):
        return None
    relation = ctx.resource.link_mapping().get(data_key)
    template = template_for_relation(ctx.resource, relation)
    if template is None:
        logger.debug(
            "No self link template: resource=%s data_key=%s relation=%s",
            ctx.resource.name,
            data_key,
            relation,
        )
        return None
    return expand(template, record)


def discover_links(
    resource: ResourceConfig, path_params: Mapping[str, Any], prefix: str = ""
) -> tuple[list[Link], list[LinkTemplate]]:
    """Split the resource's templates into resolved links and link templates.

    A template whose variables are all bound by ``path_params`` becomes a
    plain ``Link``; any other template is advertised unexpanded. Both are
    placed under the mount ``prefix``.
    """
    links: list[Link] = []
    templates: list[LinkTemplate] = []
    for rel, template in resource.uri_templates.items():
        variables = URITemplate(template).variable_names
        if all(path_params.get(name) is not None for name in variables):
            links.append(Link(rel=rel, href=prefixed(prefix, expand(template, path_params))))
        else:
            templates.append(LinkTemplate(rel=rel, href=prefix + template))
    logger.debug(
        "Discovered links: resource=%s links=%d templates=%d",
        resource.name,
        len(links),
        len(templates),
    )
    return links, templates


def links_as_map(links: Iterable[Link], link_templates: Iterable[Link] = ()) -> dict[str, HalLink]:
    """Collapse links and link templates into ``rel -> HalLink``.

    Relation names are expected to be unique; on collision the last one wins.
    """
    result: dict[str, HalLink] = {}
    for link in [*links, *link_templates]:
        result[link.rel] = HalLink(
            href=link.href, templated=True if link.templated else None
        )
    return result


def un_dotdot(path: str) -> str:
    """Resolve ``..`` (and ``.``) segments, keeping leading and trailing slashes."""
    segments: list[str] = []
    parts = path.split("/")
    for segment in parts:
        if segment == "..":
            if len(segments) > 1 or (segments and segments[0] != ""):
                segments.pop()
        elif segment != ".":
            segments.append(segment)
    if parts and parts[-1] in ("..", ".") and segments and segments[-1] != "":
        segments.append("")
    resolved = "/".join(segments)
    if not resolved and path.startswith("/"):
        return "/"
    return resolved


def prefixed(prefix: str, href: str) -> str:
    """Join a mount prefix and an href, resolving ``..`` segments."""
    return un_dotdot(prefix + href) if prefix else href

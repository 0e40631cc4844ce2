"""Hypermedia link models shared by the HAL and Collection+JSON assemblers.

A ``Link`` is a resolved relation with a concrete ``href``. A
``LinkTemplate`` carries an unexpanded URI template and is always
``templated``; it is advertised as a capability rather than followed.
"""

from pydantic import BaseModel


class Link(BaseModel):
    """A named relation pointing at a concrete URI."""

    rel: str
    href: str
    templated: bool = False


class LinkTemplate(Link):
    """A relation whose ``href`` is an unexpanded URI template."""

    templated: bool = True


class HalLink(BaseModel):
    """A single entry of a HAL ``_links`` object."""

    href: str
    templated: bool | None = None

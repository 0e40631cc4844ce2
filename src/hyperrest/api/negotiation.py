"""Accept header negotiation against a resource's available media types."""

from __future__ import annotations

from collections.abc import Sequence


def parse_accept(header: str) -> list[tuple[str, float]]:
    """Parse an Accept header into ``(media_range, q)`` pairs in header order.

    Malformed q-values count as 0, i.e. not acceptable.
    """
    ranges: list[tuple[str, float]] = []
    for part in header.split(","):
        media_range, *params = (p.strip() for p in part.split(";"))
        if not media_range:
            continue
        q = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    q = float(value)
                except ValueError:
                    q = 0.0
        ranges.append((media_range.lower(), q))
    return ranges


def _specificity(media_range: str, media_type: str) -> int:
    if media_range == media_type:
        return 3
    main, _, sub = media_range.partition("/")
    if sub == "*" and media_type.startswith(f"{main}/"):
        return 2
    if media_range in ("*/*", "*"):
        return 1
    return 0


def negotiate(accept: str | None, available: Sequence[str]) -> str | None:
    """Pick the media type to render.

    Preference goes to the highest q-value, then the most specific matching
    range, then the earliest range in the header, then the order of
    ``available``. A missing or empty header selects ``available[0]``.

    Returns:
        The chosen media type, or None when nothing acceptable is available.
    """
    if not available:
        return None
    if accept is None or not accept.strip():
        return available[0]

    ranges = parse_accept(accept)
    best: str | None = None
    best_key: tuple[float, int, int, int] | None = None
    for type_index, media_type in enumerate(available):
        # the most specific matching range decides the q-value
        match: tuple[int, int, float] | None = None
        for range_index, (media_range, q) in enumerate(ranges):
            specificity = _specificity(media_range, media_type.lower())
            if specificity and (match is None or specificity > match[0]):
                match = (specificity, range_index, q)
        if match is None or match[2] <= 0:
            continue
        specificity, range_index, q = match
        key = (q, specificity, -range_index, -type_index)
        if best_key is None or key > best_key:
            best, best_key = media_type, key
    return best

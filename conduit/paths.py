"""Path template helpers.

A template is a literal path whose ``:name`` segments are placeholders,
e.g. ``/todos/:id/complete``. Generated path builders substitute each
value through ``encode_segment``; ``match_path`` reverses that.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

PLACEHOLDER_PREFIX = ":"


def is_placeholder(segment: str) -> bool:
    return segment.startswith(PLACEHOLDER_PREFIX)


def placeholder_names(template: str) -> list[str]:
    """Return placeholder names in template order, prefix stripped."""
    return [seg[1:] for seg in template.split("/") if is_placeholder(seg)]


def encode_segment(value: str) -> str:
    """Percent-encode one path segment value."""
    return quote(value, safe="")


def match_path(template: str, path: str) -> dict[str, str] | None:
    """Match a concrete path against ``template``.

    Returns the decoded placeholder values, or None if the literal
    segments or the segment count differ.
    """
    expected = template.split("/")
    actual = path.split("/")
    if len(expected) != len(actual):
        return None

    values: dict[str, str] = {}
    for pattern, seg in zip(expected, actual):
        if is_placeholder(pattern):
            values[pattern[1:]] = unquote(seg)
        elif pattern != seg:
            return None
    return values


def to_router_pattern(template: str) -> str:
    """Translate ``:name`` placeholders into ``{name}`` router syntax."""
    return "/".join(
        "{" + seg[1:] + "}" if is_placeholder(seg) else seg
        for seg in template.split("/")
    )

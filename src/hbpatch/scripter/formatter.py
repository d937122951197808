"""Render descriptor property maps as sorted, escaped entries."""

from collections.abc import Callable, Iterator, Mapping

__all__ = [
    "comment_lines",
    "escape_double_quotes",
    "has_line_break",
    "render_properties",
    "sorted_properties",
]


def escape_double_quotes(value: str) -> str:
    """Escape double quotes for Ruby double-quoted string literals."""
    return value.replace('"', '\\"')


def sorted_properties(properties: Mapping[str, str]) -> Iterator[tuple[str, str]]:
    """Yield (key, escaped value) pairs in ascending key order."""
    for key in sorted(properties):
        yield key, escape_double_quotes(properties[key])


def render_properties(
    properties: Mapping[str, str], render: Callable[[str, str], str]
) -> Iterator[str]:
    """Render each sorted property entry as one script line.

    ``render`` receives the key and the already escaped value.
    """
    for key, value in sorted_properties(properties):
        yield render(key, value)


def has_line_break(text: str) -> bool:
    """True if ``text`` would end a Ruby comment or statement line."""
    return "\n" in text or "\r" in text


def comment_lines(text: str, prefix: str = "# ") -> list[str]:
    """Render free text as comment lines, one per physical line."""
    return [f"{prefix}{line}".rstrip() for line in text.splitlines() or [""]]

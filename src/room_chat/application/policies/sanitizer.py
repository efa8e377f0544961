"""Markup stripping for free-text fields coming from clients."""
from __future__ import annotations

from html.parser import HTMLParser

_SKIPPED_TAGS = frozenset({"script", "style"})


class _TextExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIPPED_TAGS and self._skip_depth:
            self._skip_depth -= 1

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self._parts.append(data)

    def text(self) -> str:
        return "".join(self._parts)


def strip_markup(value: str) -> str:
    """Drop tags (and script/style bodies), decode entities, trim whitespace."""
    parser = _TextExtractor()
    parser.feed(value)
    parser.close()
    return parser.text().strip()

"""
Markdown Sandbox
================

Markdown to HTML conversion with sanitized output.

The converter runs with raw HTML disabled and its output is cleaned against a tag,
attribute and protocol allow-list before it is wrapped as trusted markup. Both are
configured once per process and only read afterwards.
"""

from functools import lru_cache
from typing import Dict, FrozenSet, List

import bleach
from markdown_it import MarkdownIt

from pagecraft.config.logging import get_logger
from .nodes import RawMarkup

logger = get_logger(__name__)

ALLOWED_TAGS: FrozenSet[str] = frozenset(
    {
        # Block
        "p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "pre", "hr", "br",
        # Lists
        "ul", "ol", "li",
        # Inline
        "a", "em", "strong", "code", "s", "del", "img",
        # Tables
        "table", "thead", "tbody", "tr", "th", "td",
    }
)

ALLOWED_ATTRIBUTES: Dict[str, List[str]] = {
    "a": ["href", "title"],
    "img": ["src", "alt", "title"],
    "code": ["class"],
    "ol": ["start"],
}

ALLOWED_PROTOCOLS: FrozenSet[str] = frozenset({"http", "https", "mailto", "tel"})


class MarkdownRenderer:
    """Converts Markdown source into sanitized HTML."""

    def __init__(self) -> None:
        self._parser = (
            MarkdownIt()
            .disable("html_block")
            .disable("html_inline")
            .enable(["table", "strikethrough"])
        )
        self.logger = logger.bind(component="markdown")

    def to_html(self, source: str) -> str:
        """
        Convert Markdown to HTML safe to embed in a page.

        Args:
            source: Markdown text, typically user supplied

        Returns:
            Sanitized HTML
        """
        converted = self._parser.render(source or "")
        cleaned = bleach.clean(
            converted,
            tags=ALLOWED_TAGS,
            attributes=ALLOWED_ATTRIBUTES,
            protocols=ALLOWED_PROTOCOLS,
            strip=True,
        )
        self.logger.debug("Markdown rendered", source_length=len(source or ""), html_length=len(cleaned))
        return cleaned


@lru_cache(maxsize=1)
def get_markdown_renderer() -> MarkdownRenderer:
    """Get the process-wide renderer."""
    return MarkdownRenderer()


def markdown(source: str) -> RawMarkup:
    """Convert Markdown into a trusted markup node."""
    return RawMarkup(get_markdown_renderer().to_html(source))

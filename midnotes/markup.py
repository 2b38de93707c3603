"""Markdown rendering and text helpers for notes."""

from __future__ import annotations

import re
from typing import Any, Iterable

import mistune

_HTML_TAG = re.compile(r"<[^>]*>")
_WIKI_LINK = re.compile(r"\[\[([^\]]+)\]\]")
_ELLIPSIS = "\u2026"

_renderer = mistune.create_markdown(
    escape=False,
    plugins=["table", "footnotes", "strikethrough", "task_lists"],
)
_parser = mistune.create_markdown(renderer=None)


def render_markdown(text: str) -> str:
    """Render markdown, with tables, footnotes, strikethrough and task lists, to HTML."""
    return _renderer(text)


def strip_html(text: str) -> str:
    """Remove HTML tags from text."""
    return _HTML_TAG.sub("", text)


def _text_events(tokens: Iterable[dict[str, Any]]) -> Iterable[tuple[bool, str]]:
    """Yield (is_code_span, text) for every piece of text in document order."""
    for token in tokens:
        kind = token.get("type")
        if kind in ("text", "block_code"):
            yield False, token.get("raw", "")
        elif kind == "codespan":
            yield True, token.get("raw", "")
        children = token.get("children")
        if children:
            yield from _text_events(children)


def plain_text_summary(text: str, max_chars: int) -> str:
    """Extract plain text from markdown for preview snippets, cut to max_chars."""
    clean = strip_html(text)
    out = ""
    for is_code, piece in _text_events(_parser(clean)):
        out += piece
        if not is_code and len(out) > max_chars:
            out = out[:max_chars] + _ELLIPSIS
            break
    if not out and clean:
        truncated = clean[:max_chars]
        if len(truncated) < len(clean):
            return truncated + _ELLIPSIS
        return truncated
    return out


def contains_math(text: str) -> bool:
    """Whether the text contains LaTeX math delimiters."""
    return "$" in text


def extract_wiki_links(text: str) -> list[str]:
    """Return the trimmed titles of all [[wiki-link]] references."""
    titles = (match.group(1).strip() for match in _WIKI_LINK.finditer(text))
    return [title for title in titles if title]
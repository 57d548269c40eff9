"""HTML to plain text reduction for question extraction."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")

# Structural and UI chrome elements that never carry question content.
_NON_CONTENT_SELECTORS = ", ".join(
    [
        "script",
        "style",
        "noscript",
        "template",
        "nav",
        "header",
        "footer",
        "button",
        "form",
        "input[type=hidden]",
        "iframe",
        "frame",
        "svg",
        "link",
        "meta",
        ".breadcrumb",
        ".drawer-toggles",
        ".notifications",
    ]
)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def normalize_html(markup: str) -> str:
    """Strip non-content elements and return the visible body text.

    Malformed or partial markup is accepted; ``html.parser`` recovers what it
    can. Every whitespace run in the result is a single space.
    """
    if not markup or not markup.strip():
        return ""

    soup = BeautifulSoup(markup, "html.parser")
    for node in soup.select(_NON_CONTENT_SELECTORS):
        node.decompose()

    root = soup.body or soup
    return collapse_whitespace(root.get_text(" "))


def combine_sources(primary: str, auxiliary: str | None = None) -> str:
    """Place the auxiliary document's text ahead of the primary one."""
    parts = [part for part in (auxiliary, primary) if part]
    return "\n\n".join(parts)


def truncate_text(text: str, limit: int = 6000) -> str:
    return text[: max(0, limit)]

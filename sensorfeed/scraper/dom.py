"""Static HTML parsing: turns server-rendered markup into a :class:`PageContent`."""

from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup, Tag

from sensorfeed.scraper.models import ElementRecord, PageContent

_HIDDEN_STYLE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden", re.IGNORECASE)
_NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "head"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    match = re.search(r"<title[^>]*>([^<]+)</title>", html, re.IGNORECASE)
    if match:
        return match.group(1).strip()
    return ""


def _is_hidden(tag: Tag) -> bool:
    """Return ``True`` if *tag* is hidden via the ``hidden`` attribute or inline style."""
    if tag.has_attr("hidden"):
        return True
    style = tag.get("style") or ""
    return bool(_HIDDEN_STYLE.search(style))


def _class_name(tag: Tag) -> str:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_html(html: str) -> PageContent:
    """Build a :class:`PageContent` from a static HTML document.

    Mirrors what the browser path collects: the title, the body's visible
    text (one line per block of text) and a record for every visible element
    that carries text.  Elements inside a hidden ancestor are skipped along
    with the ancestor.
    """
    soup = BeautifulSoup(html, "html.parser")
    # Drop hidden subtrees up front so neither the text nor the element
    # list sees them.  Nested matches are already gone with their parent.
    for tag in [*soup(_NON_CONTENT_TAGS), *soup.find_all(_is_hidden)]:
        if not tag.decomposed:
            tag.decompose()

    root = soup.body or soup
    full_text = root.get_text(separator="\n", strip=True)

    elements: List[ElementRecord] = []
    for tag in root.find_all(True):
        text = tag.get_text(separator=" ", strip=True)
        if not text:
            continue
        elements.append(
            ElementRecord(
                tag=tag.name.upper(),
                text=text,
                class_name=_class_name(tag),
                id=tag.get("id") or "",
            )
        )

    return PageContent(
        title=_extract_title(html),
        full_text=full_text,
        visible_elements=tuple(elements),
    )

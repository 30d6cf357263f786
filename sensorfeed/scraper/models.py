"""Data models for the page fetch layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class ElementRecord:
    """One visible element of the rendered page."""

    tag: str
    text: str
    class_name: str = ""
    id: str = ""


@dataclass(frozen=True)
class PageContent:
    """Normalised snapshot of a fetched page.

    ``full_text`` is the page's visible text as a browser would report it
    (``innerText``); ``visible_elements`` lists every visible element with
    non-empty text, in document order.
    """

    title: str
    full_text: str
    visible_elements: Tuple[ElementRecord, ...] = field(default_factory=tuple)

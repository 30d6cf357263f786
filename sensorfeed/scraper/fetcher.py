"""Page fetcher: plain HTTP first, headless Chromium for JS-rendered pages.

The dashboard is a client-rendered React app, so in practice the Playwright
path does the work; the static path keeps server-rendered pages (and tests)
free of a browser dependency.
"""

from __future__ import annotations

import logging
import re
import time

import httpx

from sensorfeed.config import settings
from sensorfeed.errors import FetchError
from sensorfeed.scraper.dom import parse_html
from sensorfeed.scraper.models import ElementRecord, PageContent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# SPA / JS-rendered page detection heuristics
# ---------------------------------------------------------------------------
_SPA_PATTERNS = [
    re.compile(r'<div[^>]+id=["\'](?:root|app)["\']', re.IGNORECASE),
    re.compile(r"window\.__NEXT_DATA__", re.IGNORECASE),
    re.compile(r"ng-version=", re.IGNORECASE),
    re.compile(r"data-reactroot", re.IGNORECASE),
]

_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

_DEFAULT_HEADERS = {
    "User-Agent": _USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "id,en-US;q=0.7,en;q=0.3",
}

# Runs inside the page.  Collects every element that is displayed and has
# text, in document order, plus the body's innerText.
_COLLECT_PAGE_JS = """
() => {
  const elements = [];
  for (const el of document.querySelectorAll('body *')) {
    const style = window.getComputedStyle(el);
    if (style.display === 'none' || style.visibility === 'hidden') continue;
    if (el.offsetParent === null && style.position !== 'fixed') continue;
    const text = (el.textContent || '').trim();
    if (!text) continue;
    elements.push({
      tag: el.tagName,
      text: text,
      className: el.getAttribute('class') || '',
      id: el.id || ''
    });
  }
  return {
    title: document.title,
    fullText: document.body ? document.body.innerText : '',
    elements: elements
  };
}
"""

_ROOT_RENDERED_JS = """
() => {
  const root = document.querySelector('#root') || document.body;
  return !!root && root.innerText.trim().length > 0;
}
"""


def _is_spa(html: str) -> bool:
    """Return ``True`` if *html* looks like a JavaScript SPA that needs rendering."""
    for pattern in _SPA_PATTERNS:
        if pattern.search(html):
            return True
    # Heuristic: very little visible text relative to total HTML size.
    # Strip <script> and <style> blocks first so their source code doesn't
    # count as visible text, then strip remaining tags.
    no_scripts = re.sub(r"<(script|style)[^>]*>.*?</(script|style)>", "", html, flags=re.IGNORECASE | re.DOTALL)
    stripped = re.sub(r"<[^>]+>", "", no_scripts).strip()
    if len(html) > 2000 and len(stripped) < 200:
        return True
    return False


def _page_from_payload(payload: dict) -> PageContent:
    """Convert the object returned by ``_COLLECT_PAGE_JS`` into a :class:`PageContent`."""
    elements = tuple(
        ElementRecord(
            tag=str(item.get("tag", "")),
            text=str(item.get("text", "")),
            class_name=str(item.get("className", "")),
            id=str(item.get("id", "")),
        )
        for item in payload.get("elements", [])
    )
    return PageContent(
        title=str(payload.get("title", "")),
        full_text=str(payload.get("fullText", "")),
        visible_elements=elements,
    )


def _remaining_ms(deadline: float, url: str) -> int:
    """Milliseconds left before *deadline*; raises once the budget is spent."""
    left = deadline - time.monotonic()
    if left <= 0:
        raise FetchError(f"Timed out fetching {url}")
    return max(1, int(left * 1000))


def _render_with_playwright(url: str, timeout: float) -> PageContent:
    """Render *url* with a headless Chromium browser and collect its content.

    *timeout* bounds the whole render, settle wait included; each step gets
    whatever is left of it.  Playwright is imported lazily so tests that
    don't exercise the SPA path don't need a browser installed.  The browser
    is closed on every exit path, including navigation timeouts.
    """
    from playwright.sync_api import Error as PlaywrightError  # noqa: PLC0415
    from playwright.sync_api import sync_playwright  # noqa: PLC0415

    deadline = time.monotonic() + timeout
    try:
        with sync_playwright() as pw:
            browser = pw.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"],
                timeout=_remaining_ms(deadline, url),
            )
            try:
                page = browser.new_page(
                    user_agent=_USER_AGENT,
                    viewport={"width": 1280, "height": 720},
                )
                page.goto(url, timeout=_remaining_ms(deadline, url), wait_until="networkidle")
                page.wait_for_function(_ROOT_RENDERED_JS, timeout=_remaining_ms(deadline, url))
                # Live values arrive after the first paint.
                settle_ms = int(settings.render_settle_delay * 1000)
                page.wait_for_timeout(min(settle_ms, _remaining_ms(deadline, url)))
                payload = page.evaluate(_COLLECT_PAGE_JS)
            finally:
                browser.close()
    except PlaywrightError as exc:
        raise FetchError(f"Rendering {url} failed: {exc}") from exc

    return _page_from_payload(payload)


def fetch_rendered_page(url: str, timeout: float) -> PageContent:
    """Fetch *url* and return its :class:`PageContent`.

    Uses ``httpx`` for the initial request.  Automatically switches to a
    headless Playwright browser when a JavaScript SPA fingerprint is detected
    in the response; otherwise the static HTML is parsed directly.
    *timeout* covers the whole fetch, browser render included.

    Raises:
        FetchError: On network errors, timeouts, 4xx/5xx statuses and browser
            failures.
    """
    deadline = time.monotonic() + timeout
    try:
        with httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            html = response.text
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"HTTP {exc.response.status_code} while fetching {url}"
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Request to {url} failed: {exc}") from exc

    if _is_spa(html):
        logger.info("SPA fingerprint detected for %s, rendering in browser", url)
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise FetchError(f"Timed out fetching {url}")
        page = _render_with_playwright(url, remaining)
    else:
        page = parse_html(html)

    logger.info(
        "Fetched %s: title=%r, %d visible elements, %d chars of text",
        url,
        page.title,
        len(page.visible_elements),
        len(page.full_text),
    )
    return page

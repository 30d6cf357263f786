"""Scraper package — page fetch & DOM collection."""

from sensorfeed.scraper.dom import parse_html
from sensorfeed.scraper.fetcher import fetch_rendered_page
from sensorfeed.scraper.models import ElementRecord, PageContent

__all__ = ["fetch_rendered_page", "parse_html", "PageContent", "ElementRecord"]

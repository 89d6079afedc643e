# services/readability/author.py
"""
Author detection.

Each strategy is a plain function ``(html) -> Optional[str]``; ``parse_author``
tries them in order and returns the first non-blank answer.
"""

from typing import Callable, List, Optional

from bs4 import BeautifulSoup


def meta_dc_creator(html: BeautifulSoup) -> Optional[str]:
    """
    ``<meta name="dc.creator" content="Finch - http://www.getfinch.com" />``
    """
    for element in html.select('meta[name="dc.creator"]'):
        content = element.get("content")
        if content is not None:
            return content.strip()
    return None


def vcard(html: BeautifulSoup) -> Optional[str]:
    """
    ``<span class="byline author vcard">By <cite class="fn">Austin Fonacier</cite></span>``
    """
    element = html.select_one('[class*="vcard"] [class*="fn"]')
    return element.get_text().strip() if element is not None else None


def rel_author(html: BeautifulSoup) -> Optional[str]:
    """``<a rel="author" href="http://dbanksdesign.com">Danny Banks</a>``"""
    element = html.select_one('a[rel="author"]')
    return element.get_text().strip() if element is not None else None


def id_author(html: BeautifulSoup) -> Optional[str]:
    element = html.select_one('[id="author"]')
    return element.get_text().strip() if element is not None else None


AUTHOR_STRATEGIES: List[Callable[[BeautifulSoup], Optional[str]]] = [
    meta_dc_creator,
    vcard,
    rel_author,
    id_author,
]


def parse_author(html: BeautifulSoup, strategies=AUTHOR_STRATEGIES) -> Optional[str]:
    """First non-empty author name found, or ``None``."""
    for strategy in strategies:
        author_name = strategy(html)
        if author_name:
            return author_name
    return None

# services/readability/parser.py
"""
Turns raw input into the mutable tree the scorer works on.

Decoding and parsing are delegated to BeautifulSoup (``UnicodeDammit`` and
the ``lxml`` tree builder); this module only applies the pre-parse markup
rewrites and the tree-level clean-ups that run before scoring.
"""

import copy
import re
from typing import Mapping, Optional, Tuple, Union

from bs4 import BeautifulSoup, Comment, UnicodeDammit
from loguru import logger

from models.options import ReadabilityOptions

from .weighting import attribute_string, is_unlikely_candidate

PARSER = "lxml"

REPLACE_BRS_RE = re.compile(r"(<br[^>]*>[ \n\r\t]*){2,}", re.IGNORECASE)
REPLACE_FONTS_RE = re.compile(r"<(/?)font[^>]*>", re.IGNORECASE)
DIV_TO_P_ELEMENTS_RE = re.compile(r"<(a|blockquote|dl|div|img|ol|p|pre|table|ul)", re.IGNORECASE)
CHARSET_RE = re.compile(r"charset=[\"']?([\w-]+)", re.IGNORECASE)


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------
def _header_charset(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    """Charset declared by a ``Content-Type`` HTTP header, if any."""
    if not headers:
        return None
    for name, value in headers.items():
        if name.lower() == "content-type" and value:
            match = CHARSET_RE.search(value)
            if match:
                return match.group(1)
    return None


def decode_input(raw: Union[str, bytes, None], options: ReadabilityOptions) -> Tuple[str, Optional[str]]:
    """
    Return ``(markup, encoding)`` for the raw input.

    * text input is used as is;
    * an explicit ``options.encoding`` always wins for bytes;
    * otherwise bytes are sniffed by ``UnicodeDammit`` (header charset first)
      when ``guess_encoding`` is on, or decoded as UTF-8.
    """
    if raw is None:
        return "", options.encoding
    if isinstance(raw, str):
        return raw, options.encoding

    if options.encoding:
        return raw.decode(options.encoding, "replace"), options.encoding

    if options.guess_encoding:
        hint = _header_charset(options.html_headers)
        dammit = UnicodeDammit(
            raw,
            known_definite_encodings=[hint] if hint else [],
            is_html=True,
        )
        if dammit.unicode_markup is not None:
            return dammit.unicode_markup, dammit.original_encoding

    return raw.decode("utf-8", "replace"), "utf-8"


def preprocess(markup: str) -> str:
    """Turn runs of ``<br>`` into paragraph breaks and ``<font>`` into ``<span>``."""
    markup = REPLACE_BRS_RE.sub("</p><p>", markup)
    return REPLACE_FONTS_RE.sub(r"<\1span>", markup)


# ----------------------------------------------------------------------
# Tree construction
# ----------------------------------------------------------------------
def empty_document() -> BeautifulSoup:
    return BeautifulSoup("<html><body></body></html>", PARSER)


def exclude(html: BeautifulSoup, options: ReadabilityOptions) -> BeautifulSoup:
    """Apply the caller's blacklist and whitelist selectors."""
    if options.blacklist:
        for element in html.select(options.blacklist):
            element.extract()

    if options.whitelist:
        matched = [copy.copy(element) for element in html.select(options.whitelist)]
        body = html.body
        if body is not None:
            body.clear()
            for element in matched:
                body.append(element)

    return html


def make_html(markup: str, options: ReadabilityOptions) -> BeautifulSoup:
    """
    Parse ``markup`` into a tree that always has a ``<body>``.

    Documents without a body (empty strings, redirects, bare text) fall back to
    an empty ``<body>``.
    """
    html = BeautifulSoup(markup, PARSER)
    if html.body is None:
        return empty_document()

    for comment in html.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for element in html.find_all(["script", "style"]):
        element.extract()

    exclude(html, options)

    # A blacklist may have taken the body with it.
    if html.body is None:
        return empty_document()
    return html


# ----------------------------------------------------------------------
# Pre-scoring clean-ups
# ----------------------------------------------------------------------
def remove_unlikely_candidates(html: BeautifulSoup, debug: bool = False) -> None:
    """Drop elements whose class/id mark them as navigation, comments, ads..."""
    for element in html.find_all(True):
        if is_unlikely_candidate(element):
            if debug:
                logger.debug(
                    f"Removing unlikely candidate - "
                    f"{attribute_string(element, 'class')}{attribute_string(element, 'id')}"
                )
            element.extract()


def transform_misused_divs_into_paragraphs(html: BeautifulSoup, debug: bool = False) -> None:
    """Rename ``<div>``s that hold no block-level markup to ``<p>``."""
    for element in html.find_all("div"):
        if not DIV_TO_P_ELEMENTS_RE.search(element.decode_contents()):
            if debug:
                logger.debug(
                    f"Altering div(#{attribute_string(element, 'id')}."
                    f"{attribute_string(element, 'class')}) to p"
                )
            element.name = "p"

# services/readability/document.py
"""
Entry point of the readability service.

``Document`` prepares and scores the tree as soon as it is built; title,
author, content and images are computed on first access and cached.

    >>> doc = Document(html)
    >>> doc.title, doc.author, doc.images
    >>> doc.content          # sanitized markup of the article
"""

from functools import cached_property
from typing import Any, List, Mapping, Optional, Union

from bs4 import Tag

from models.article import Article
from models.candidate import Candidate
from models.options import ReadabilityOptions

from . import parser
from .assembler import get_article
from .author import parse_author
from .cleaners import sanitize
from .density import get_link_density
from .images import ImageSelector, Probe
from .scorer import score_paragraphs, select_best_candidate
from .weighting import class_weight


class Document:
    """
    One extraction run over one HTML document.

    Args:
        input (str | bytes): The page source.
        options (ReadabilityOptions | Mapping | None): Base options.
        probe (Callable): Image dimension probe, ``url -> (width, height)``.
        **overrides: Individual options merged over ``options``.
    """

    def __init__(
        self,
        input: Union[str, bytes, None],
        options: Union[ReadabilityOptions, Mapping[str, Any], None] = None,
        probe: Optional[Probe] = None,
        **overrides: Any,
    ):
        self.options = ReadabilityOptions.merged(options, overrides)
        self.best_candidate_has_image = True
        self._image_selector = ImageSelector(self.options, probe)

        markup, self.encoding = parser.decode_input(input, self.options)
        self.html = parser.make_html(parser.preprocess(markup), self.options)

        debug = self.options.debug
        if self.options.remove_unlikely_candidates:
            parser.remove_unlikely_candidates(self.html, debug)
        parser.transform_misused_divs_into_paragraphs(self.html, debug)

        self.candidates = score_paragraphs(self.html, self.options)
        self.best_candidate: Candidate = select_best_candidate(self.candidates, self.html, debug)

    # ------------------------------------------------------------------
    # Heuristic helpers exposed for callers and tests
    # ------------------------------------------------------------------
    def class_weight(self, element: Tag) -> int:
        return class_weight(element, self.options.weight_classes)

    @staticmethod
    def get_link_density(element: Tag) -> float:
        return get_link_density(element)

    # ------------------------------------------------------------------
    # Extraction results
    # ------------------------------------------------------------------
    @cached_property
    def title(self) -> str:
        """Text of the document's ``<title>``; empty string if there is none."""
        return "".join(element.get_text() for element in self.html.find_all("title"))

    @cached_property
    def author(self) -> Optional[str]:
        """Author found by the strategy chain, ``None`` when nothing matched."""
        return parse_author(self.html)

    @cached_property
    def content(self) -> str:
        """The cleaned-up article markup."""
        return self.sanitize(self.get_article(self.best_candidate))

    @cached_property
    def images(self) -> List[str]:
        return self.get_images()

    def get_article(self, best_candidate: Candidate) -> Article:
        return get_article(best_candidate, self.candidates)

    def sanitize(self, article: Article) -> str:
        return sanitize(article, self.options)

    def get_images(self, content: Optional[Tag] = None, reload: bool = False) -> List[str]:
        """
        Qualifying image URLs under ``content`` (default: the best candidate).

        When nothing qualifies, the whole document is searched once instead.
        """
        if reload:
            self.best_candidate_has_image = False
        if content is None:
            content = self.best_candidate.node

        if content is None:
            return []

        urls = self._image_selector.select(content)
        if not urls and content is not self.html:
            return self.get_images(self.html, reload=True)
        return urls

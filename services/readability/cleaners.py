# services/readability/cleaners.py
"""
Sanitization passes applied to an assembled :class:`models.article.Article`.

Every pass is a callable taking a fragment and returning the fragment (which
may be a different node, see :class:`WhitelistFlatten`).  ``build_pipeline``
lists them in order; ``sanitize`` runs the list and serializes the result.
"""

import re
from typing import Callable, Dict, Iterable, List, Optional, Union

from bs4 import NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter
from loguru import logger

from models.article import Article
from models.candidate import CandidateMap
from models.options import ReadabilityOptions

from .density import get_link_density, strip_text, text_of
from .weighting import attribute_string, class_weight

Fragment = Union[Tag, NavigableString]
Cleaner = Callable[[Fragment], Fragment]

HEADER_SELECTOR = "h1, h2, h3, h4, h5, h6"
FORBIDDEN_SELECTOR = "form, object, iframe, embed"
CONDITIONAL_SELECTOR = "table, ul, div"

# Flattened into text padded with spaces, so ``a<br>b`` still reads "a b".
REPLACE_WITH_WHITESPACE = frozenset(
    ["br", "hr", "h1", "h2", "h3", "h4", "h5", "h6", "dl", "dd", "ol", "li",
     "ul", "address", "blockquote", "center"]
)
COLLAPSE_BREAKS_RE = re.compile(r"[\r\n\f]+")

# "minimal" escaping, with void elements written as ``<br>`` rather than ``<br/>``.
OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


def _elements(fragment: Fragment, selector: str) -> List[Tag]:
    if not isinstance(fragment, Tag):
        return []
    return fragment.select(selector)


# ----------------------------------------------------------------------
# Removal passes
# ----------------------------------------------------------------------
class RemoveHeaders:
    """Drop headings that are mostly links."""

    def __init__(self, max_link_density: float = 0.33):
        self.max_link_density = max_link_density

    def __call__(self, fragment: Fragment) -> Fragment:
        for header in _elements(fragment, HEADER_SELECTOR):
            if get_link_density(header) > self.max_link_density:
                header.extract()
        return fragment


class DeleteSelector:
    """Unconditionally remove everything matching ``selector``."""

    def __init__(self, selector: str):
        self.selector = selector

    def __call__(self, fragment: Fragment) -> Fragment:
        for element in _elements(fragment, self.selector):
            element.extract()
        return fragment


class EmptyParagraph:
    """Remove ``<p>``s without text; image-only paragraphs go too."""

    def __call__(self, fragment: Fragment) -> Fragment:
        for paragraph in _elements(fragment, "p"):
            if not strip_text(text_of(paragraph)):
                paragraph.extract()
        return fragment


class Conditional:
    """
    Remove structurally suspicious containers.

    Elements whose combined class weight and content score is negative go
    straight away.  Elements that do not read like prose (fewer than ten
    commas) are then checked against tag-count and link-density ratios; the
    first failing check is the reason reported in the debug log.
    """

    COUNTED_TAGS = ("p", "img", "li", "a", "embed", "input")

    def __init__(
        self,
        selector: str,
        candidates: CandidateMap,
        options: Optional[ReadabilityOptions] = None,
    ):
        self.selector = selector
        self.candidates = candidates
        self.options = options or ReadabilityOptions()

    def _counts(self, element: Tag) -> Dict[str, int]:
        counts = {kind: len(element.find_all(kind)) for kind in self.COUNTED_TAGS}
        counts["li"] -= 100
        # Images repeated inside <noscript> would otherwise be counted twice.
        counts["img"] -= sum(len(noscript.find_all("img")) for noscript in element.find_all("noscript"))
        return counts

    def reason(
        self,
        name: str,
        counts: Dict[str, int],
        content_length: int,
        weight: int,
        link_density: float,
    ) -> Optional[str]:
        """Why the element should be removed, or ``None`` to keep it."""
        if counts["img"] > counts["p"] and counts["img"] > 1:
            return "too many images"
        if counts["li"] > counts["p"] and name not in ("ul", "ol"):
            return "more <li>s than <p>s"
        if counts["input"] > counts["p"] // 3:
            return "less than 3x <p>s than <input>s"
        if content_length < self.options.min_text_length and counts["img"] != 1:
            return "too short a content length without a single image"
        if weight < 25 and link_density > 0.2:
            return f"too many links for its weight ({weight})"
        if weight >= 25 and link_density > 0.75:
            return f"too many links for its weight ({weight})"
        if (counts["embed"] == 1 and content_length < 75) or counts["embed"] > 1:
            return "<embed>s with too short a content length, or too many <embed>s"
        return None

    def __call__(self, fragment: Fragment) -> Fragment:
        debug = self.options.debug
        for element in _elements(fragment, self.selector):
            weight = class_weight(element, self.options.weight_classes)
            content_score = self.candidates.score_of(element)
            name = element.name.lower()
            label = f"{name}#{attribute_string(element, 'id')}.{attribute_string(element, 'class')}"

            if weight + content_score < 0:
                element.extract()
                if debug:
                    logger.debug(
                        f"Conditionally cleaned {label} with weight {weight} and content score "
                        f"{content_score} because score + content score was less than zero."
                    )
                continue

            text = text_of(element)
            if text.count(",") >= 10:
                continue

            reason = self.reason(
                name,
                self._counts(element),
                len(strip_text(text)),
                weight,
                get_link_density(element),
            )
            if reason:
                element.extract()
                if debug:
                    logger.debug(
                        f"Conditionally cleaned {label} with weight {weight} and content score "
                        f"{content_score} because it has {reason}."
                    )
        return fragment


# ----------------------------------------------------------------------
# Whitelist flattening & serialization
# ----------------------------------------------------------------------
class WhitelistFlatten:
    """
    Keep whitelisted tags (minus their attributes), turn everything else
    into plain text.
    """

    def __init__(self, tags: Iterable[str] = ("div", "p"), attributes: Optional[Iterable[str]] = None):
        self.whitelist = frozenset(tag.lower() for tag in tags)
        self.allowed_attributes = frozenset(attributes or ())

    def __call__(self, fragment: Fragment) -> Fragment:
        if not isinstance(fragment, Tag):
            return fragment

        for element in [fragment] + fragment.find_all(True):
            if element.name in self.whitelist:
                element.attrs = {
                    key: value
                    for key, value in element.attrs.items()
                    if key in self.allowed_attributes
                }
            elif element is fragment:
                # The root itself is not allowed: the whole fragment is text.
                return NavigableString(text_of(element))
            else:
                text = text_of(element)
                if element.name in REPLACE_WITH_WHITESPACE:
                    text = f" {text} "
                element.replace_with(NavigableString(text))
        return fragment


def serialize(fragment: Fragment) -> str:
    """Markup for ``fragment`` with line-break runs collapsed to one newline."""
    if isinstance(fragment, Tag):
        markup = fragment.decode(formatter=OUTPUT_FORMATTER)
    else:
        markup = fragment.output_ready(formatter=OUTPUT_FORMATTER)
    return COLLAPSE_BREAKS_RE.sub("\n", markup)


# ----------------------------------------------------------------------
# Pipeline
# ----------------------------------------------------------------------
def build_pipeline(options: ReadabilityOptions, candidates: CandidateMap) -> List[Cleaner]:
    """Ordered list of passes for ``options``."""
    pipeline: List[Cleaner] = [
        RemoveHeaders(),
        DeleteSelector(FORBIDDEN_SELECTOR),
    ]
    if options.remove_empty_nodes:
        pipeline.append(EmptyParagraph())
    if options.clean_conditionally:
        pipeline.append(Conditional(CONDITIONAL_SELECTOR, candidates, options))
    pipeline.append(WhitelistFlatten(options.tags, options.attributes))
    return pipeline


def sanitize(article: Article, options: ReadabilityOptions) -> str:
    """Run every pass over the article copy and serialize the result."""
    fragment: Fragment = article.content
    for cleaner in build_pipeline(options, article.candidates):
        fragment = cleaner(fragment)
    return serialize(fragment)

# services/readability/scorer.py
"""
Candidate scoring and selection.

Every ``<p>`` and ``<td>`` long enough to count contributes a content score to
its parent (in full) and grandparent (by half).  Once all contributions are in,
each candidate is discounted by its link density, exactly once.
"""

from typing import Dict, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from models.candidate import Candidate, CandidateMap
from models.options import ReadabilityOptions

from .density import get_link_density, text_of
from .weighting import attribute_string, class_weight

TAG_SCORES: Dict[str, int] = {
    "div": 5,
    "blockquote": 3,
    "form": -3,
    "th": -5,
}


def comma_segments(text: str) -> int:
    """Number of comma-separated pieces, trailing empty pieces not counted."""
    stripped = text.rstrip(",")
    if not stripped:
        return 0
    return len(stripped.split(","))


def content_score(text: str) -> float:
    """Score one paragraph: a point, plus its comma pieces, plus up to 3 for length."""
    return 1 + comma_segments(text) + min(len(text) // 100, 3)


def _element(node) -> Optional[Tag]:
    """``node`` if it is a real element (the document root does not count)."""
    if node is None or isinstance(node, BeautifulSoup):
        return None
    return node


def _seed(node: Tag, options: ReadabilityOptions) -> Candidate:
    score = class_weight(node, options.weight_classes) + TAG_SCORES.get(node.name.lower(), 0)
    return Candidate(node=node, score=score)


def score_paragraphs(html: BeautifulSoup, options: ReadabilityOptions) -> CandidateMap:
    """Build the candidate map for ``html``."""
    candidates = CandidateMap()

    for element in html.find_all(["p", "td"]):
        inner_text = text_of(element)
        # Short paragraphs are not worth counting.
        if len(inner_text) < options.min_text_length:
            continue

        parent = _element(element.parent)
        if parent is None:
            continue
        grand_parent = _element(parent.parent)

        score = content_score(inner_text)

        candidate = candidates.get(parent) or candidates.add(_seed(parent, options))
        candidate.score += score

        if grand_parent is not None:
            candidate = candidates.get(grand_parent) or candidates.add(_seed(grand_parent, options))
            candidate.score += score / 2.0

    # Good content should have a small link density and be mostly unaffected
    # by this scaling.
    for candidate in candidates:
        candidate.score = candidate.score * (1 - get_link_density(candidate.node))

    return candidates


def _describe(candidate: Candidate) -> str:
    node = candidate.node
    return (
        f"{node.name}#{attribute_string(node, 'id')}.{attribute_string(node, 'class')} "
        f"with score {candidate.score}"
    )


def select_best_candidate(
    candidates: CandidateMap,
    html: BeautifulSoup,
    debug: bool = False,
) -> Candidate:
    """
    Highest-scoring candidate; ties go to the first one scored.

    Falls back to ``<body>`` with a score of 0 when nothing was scored.
    """
    # sorted() is stable, so equal scores keep insertion order.
    ranked = sorted(candidates.values(), key=lambda c: c.score, reverse=True)

    if debug:
        logger.debug("Top 5 candidates:")
        for candidate in ranked[:5]:
            logger.debug(f"Candidate {_describe(candidate)}")

    best = ranked[0] if ranked else Candidate(node=html.body, score=0)
    if debug:
        logger.debug(f"Best candidate {_describe(best)}")
    return best

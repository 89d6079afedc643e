# services/readability/assembler.py
"""
Rebuilds the article around the best candidate.

Content is often split across siblings (preambles, paragraphs separated by
ads that were removed...), so qualifying siblings of the best node are
gathered too.  Everything is copied: the cleaning passes that follow must
never touch the document being processed.
"""

import copy
import re
from typing import List

from bs4 import BeautifulSoup, Tag

from models.article import Article
from models.candidate import Candidate, CandidateMap

from .density import get_link_density, text_of

SENTENCE_END_RE = re.compile(r"\.( |$)", re.MULTILINE)
KEEP_TAG_NAMES = ("div", "p")


def _siblings(node: Tag) -> List[Tag]:
    parent = node.parent
    if parent is None:
        return [node]
    return parent.find_all(True, recursive=False)


def _is_related_paragraph(sibling: Tag) -> bool:
    """A sibling ``<p>`` that reads like article text rather than chrome."""
    if sibling.name.lower() != "p":
        return False
    link_density = get_link_density(sibling)
    node_content = text_of(sibling)
    node_length = len(node_content)

    if node_length > 80 and link_density < 0.25:
        return True
    return (
        node_length < 80
        and link_density == 0
        and SENTENCE_END_RE.search(node_content) is not None
    )


def _carry_scores(original: Tag, duplicate: Tag, candidates: CandidateMap, scores: CandidateMap) -> None:
    """Register each copied node under the score of the node it was copied from."""
    originals = [original] + original.find_all(True)
    duplicates = [duplicate] + duplicate.find_all(True)
    for source, target in zip(originals, duplicates):
        candidate = candidates.get(source)
        if candidate is not None:
            scores.add(Candidate(node=target, score=candidate.score))


def get_article(best_candidate: Candidate, candidates: CandidateMap) -> Article:
    """Copy the best node and its qualifying siblings into a fresh ``<div>``."""
    sibling_score_threshold = max(10, best_candidate.score * 0.2)
    output = BeautifulSoup("", "lxml").new_tag("div")
    article = Article(content=output)

    if best_candidate.node is None:
        return article

    for sibling in _siblings(best_candidate.node):
        candidate = candidates.get(sibling)
        append = (
            sibling is best_candidate.node
            or (candidate is not None and candidate.score >= sibling_score_threshold)
            or _is_related_paragraph(sibling)
        )
        if not append:
            continue

        sibling_dup = copy.copy(sibling)
        _carry_scores(sibling, sibling_dup, candidates, article.candidates)
        if sibling_dup.name.lower() not in KEEP_TAG_NAMES:
            sibling_dup.name = "div"
        output.append(sibling_dup)

    return article

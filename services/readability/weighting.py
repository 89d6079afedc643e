# services/readability/weighting.py
"""
Class/id keyword patterns and the class-weight heuristic.
"""

import re

from bs4 import Tag

# ----------------------------------------------------------------------
# Keyword patterns
# ----------------------------------------------------------------------
UNLIKELY_CANDIDATES_RE = re.compile(
    r"combx|comment|community|disqus|extra|foot|header|menu|remark|rss|"
    r"shoutbox|sidebar|sponsor|ad-break|agegate|pagination|pager|popup",
    re.IGNORECASE,
)
OK_MAYBE_ITS_A_CANDIDATE_RE = re.compile(
    r"and|article|body|column|main|shadow",
    re.IGNORECASE,
)
POSITIVE_RE = re.compile(
    r"article|body|content|entry|hentry|main|page|pagination|post|text|blog|story",
    re.IGNORECASE,
)
NEGATIVE_RE = re.compile(
    r"combx|comment|com-|contact|foot|footer|footnote|masthead|media|meta|"
    r"outbrain|promo|related|scroll|shoutbox|sidebar|sponsor|shopping|tags|"
    r"tool|widget",
    re.IGNORECASE,
)

CLASS_WEIGHT = 25


def attribute_string(node: Tag, name: str) -> str:
    """
    Value of attribute ``name`` as a single string.

    BeautifulSoup stores multi-valued attributes such as ``class`` as lists;
    they are joined back with spaces.
    """
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def class_weight(node: Tag, enabled: bool = True) -> int:
    """
    Score ``node``'s ``class`` and ``id`` against the keyword patterns.

    Each attribute independently loses 25 when it matches the negative
    pattern and gains 25 when it matches the positive one.
    """
    if not enabled:
        return 0

    weight = 0
    for name in ("class", "id"):
        value = attribute_string(node, name)
        if not value:
            continue
        if NEGATIVE_RE.search(value):
            weight -= CLASS_WEIGHT
        if POSITIVE_RE.search(value):
            weight += CLASS_WEIGHT
    return weight


def is_unlikely_candidate(node: Tag) -> bool:
    """True when class+id look like page chrome and nothing redeems them."""
    if node.name in ("html", "body"):
        return False
    value = attribute_string(node, "class") + attribute_string(node, "id")
    return bool(
        UNLIKELY_CANDIDATES_RE.search(value)
        and not OK_MAYBE_ITS_A_CANDIDATE_RE.search(value)
    )

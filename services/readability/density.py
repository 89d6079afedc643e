# services/readability/density.py
"""
Text-length helpers shared by the scorer, the assembler and the cleaners.
"""

from bs4 import Tag


def text_of(node: Tag) -> str:
    """Full text content of ``node`` (all descendant strings, unmodified)."""
    return node.get_text()


ASCII_WHITESPACE = " \t\n\v\f\r\x00"


def strip_text(text: str) -> str:
    """Strip ASCII whitespace only; ``&nbsp;`` counts as content."""
    return text.strip(ASCII_WHITESPACE)


def get_link_density(node: Tag) -> float:
    """
    Fraction of the node's text that lives inside ``<a>`` descendants.

    A node without any text is treated as maximally link dense (``1.0``), so it
    always fails the "low density" checks instead of dividing by zero.
    """
    text_length = len(text_of(node))
    if text_length == 0:
        return 1.0
    link_length = sum(len(text_of(link)) for link in node.find_all("a"))
    return link_length / float(text_length)

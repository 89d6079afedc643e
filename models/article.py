# models/article.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .candidate import CandidateMap


@dataclass
class Article:
    """
    The assembled output fragment.

    ``content`` is a detached ``div`` holding copies of the best candidate and
    its qualifying siblings; ``candidates`` carries the scores of the copied
    nodes, keyed by the copies themselves.
    """

    content: Any
    candidates: CandidateMap = field(default_factory=CandidateMap)

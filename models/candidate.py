# models/candidate.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class Candidate:
    """A node considered as the article container, with its running score."""

    node: Any
    score: float = 0.0

    def __repr__(self) -> str:
        node = self.node
        if node is None:
            return f"<Candidate None score={self.score:.1f}>"
        node_id = node.get("id") or ""
        classes = " ".join(node.get("class") or [])
        return f"<Candidate {node.name}#{node_id}.{classes} score={self.score:.1f}>"


class CandidateMap:
    """
    Insertion-ordered map from tree node to :class:`Candidate`.

    Keyed by node identity: BeautifulSoup tags compare and hash by their
    markup, so two textually identical nodes would otherwise share an entry.
    Each stored Candidate holds its node, which keeps the ``id`` stable for as
    long as the map is alive.
    """

    def __init__(self) -> None:
        self._by_id: Dict[int, Candidate] = {}

    def __contains__(self, node: Any) -> bool:
        return id(node) in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._by_id.values())

    def get(self, node: Any) -> Optional[Candidate]:
        return self._by_id.get(id(node))

    def add(self, candidate: Candidate) -> Candidate:
        self._by_id[id(candidate.node)] = candidate
        return candidate

    def score_of(self, node: Any) -> float:
        """Score of ``node`` or 0 when it was never a candidate."""
        candidate = self.get(node)
        return candidate.score if candidate else 0

    def values(self) -> List[Candidate]:
        return list(self._by_id.values())

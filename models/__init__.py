from .article import Article
from .candidate import Candidate, CandidateMap
from .image import Image
from .options import ReadabilityOptions

__all__ = ['Article', 'Candidate', 'CandidateMap', 'Image', 'ReadabilityOptions',]

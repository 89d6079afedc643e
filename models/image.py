# models/image.py
from __future__ import annotations

import posixpath
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict


class Image(BaseModel):
    """
    An ``<img>`` found in the document.

    Two images are the same image when their URLs are equal, whatever
    dimensions were read or probed for them.
    """

    url: str
    format: str = ""
    width: int = 0
    height: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_url(cls, url: str, width: int = 0, height: int = 0) -> "Image":
        """Build an image whose ``format`` is the lowercased path extension."""
        try:
            path = urlparse(url).path
        except ValueError:
            # Malformed netloc (e.g. an unclosed IPv6 bracket): no known format.
            path = ""
        extension = posixpath.splitext(path)[1]
        return cls(
            url=url,
            format=extension.replace(".", "").lower(),
            width=width,
            height=height,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)

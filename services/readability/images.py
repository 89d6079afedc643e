# services/readability/images.py
"""
Image selection for an extracted article.

Dimensions come from the ``width``/``height`` attributes when present.  For
absolute HTTP(S) images missing one of them, the image header is fetched
and measured; a failed probe is never fatal, the image simply keeps its
unknown (zero) dimensions and will usually be filtered out.
"""

import re
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

import httpx
from bs4 import Tag
from loguru import logger
from PIL import Image as PILImage
from PIL import ImageFile
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from models.image import Image
from models.options import ReadabilityOptions

from .errors import UnknownImageSize

ABSOLUTE_HTTP_RE = re.compile(r"\Ahttps?://", re.IGNORECASE)
LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")
PROBE_CHUNK_SIZE = 1024

Probe = Callable[[str], Tuple[int, int]]


# ----------------------------------------------------------------------
# Dimension probe
# ----------------------------------------------------------------------
@retry(
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
def _read_image_size(url: str, timeout: float) -> Optional[Tuple[int, int]]:
    """Stream ``url`` until Pillow has parsed enough of the header to know its size."""
    parser = ImageFile.Parser()
    with httpx.stream("GET", url, timeout=timeout, follow_redirects=True) as response:
        response.raise_for_status()
        for chunk in response.iter_bytes(PROBE_CHUNK_SIZE):
            parser.feed(chunk)
            if parser.image is not None:
                return parser.image.size
    return None


def probe_image_dimensions(url: str, timeout: float = 10.0) -> Tuple[int, int]:
    """
    Return ``(width, height)`` of the remote image at ``url``.

    Raises
    ------
    UnknownImageSize
        When the image cannot be fetched or its header cannot be decoded.
    """
    try:
        size = _read_image_size(url, timeout)
    except (
        httpx.HTTPError,
        httpx.InvalidURL,
        PILImage.DecompressionBombError,
        OSError,
        ValueError,
    ) as exc:
        raise UnknownImageSize(url, str(exc)) from exc
    if size is None:
        raise UnknownImageSize(url, "unrecognised image data")
    return size


# ----------------------------------------------------------------------
# Selection
# ----------------------------------------------------------------------
def parse_dimension(value) -> int:
    """Leading integer of an attribute value (``"200px"`` -> 200), else 0."""
    if value is None:
        return 0
    match = LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else 0


def image_meets_criteria(image: Image, options: ReadabilityOptions) -> bool:
    if image.format in options.ignore_image_format:
        return False
    return image.width >= options.min_image_width and image.height >= options.min_image_height


class ImageSelector:
    """Collects, measures, filters and de-duplicates ``<img>`` elements."""

    def __init__(self, options: ReadabilityOptions, probe: Optional[Probe] = None):
        self.options = options
        self.probe = probe or (lambda url: probe_image_dimensions(url, options.image_probe_timeout))

    def _safe_probe(self, url: str) -> Optional[Tuple[int, int]]:
        try:
            return self.probe(url)
        except UnknownImageSize as exc:
            logger.debug(f"Image size probe failed: {exc}")
            return None

    def _probe_all(self, urls: List[str]) -> List[Optional[Tuple[int, int]]]:
        if not urls:
            return []
        workers = min(self.options.image_probe_workers, len(urls))
        if workers == 1:
            return [self._safe_probe(url) for url in urls]
        # map() yields results in submission order.
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._safe_probe, urls))

    def measure(self, content: Tag) -> List[Image]:
        """Every ``<img>`` with a ``src`` under ``content``, in document order."""
        images: List[Image] = []
        for element in content.find_all("img"):
            url = element.get("src")
            if not url:
                continue
            images.append(
                Image.from_url(
                    url,
                    width=parse_dimension(element.get("width")),
                    height=parse_dimension(element.get("height")),
                )
            )

        pending = [
            index
            for index, image in enumerate(images)
            if ABSOLUTE_HTTP_RE.match(image.url) and (image.width == 0 or image.height == 0)
        ]
        sizes = self._probe_all([images[index].url for index in pending])
        for index, size in zip(pending, sizes):
            if size is not None:
                width, height = size
                images[index] = images[index].model_copy(update={"width": width, "height": height})
        return images

    def select(self, content: Tag) -> List[str]:
        """URLs of the qualifying images under ``content``, first occurrence wins."""
        seen = set()
        urls: List[str] = []
        for image in self.measure(content):
            if not image_meets_criteria(image, self.options) or image in seen:
                continue
            seen.add(image)
            urls.append(image.url)
        return urls

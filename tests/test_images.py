# tests/test_images.py
"""
Tests for image selection.  Network probing is replaced by a fake probe or a
patched fetch; the malformed URLs at the end are rejected before any
connection is attempted.
"""

import threading

import httpx
import pytest
from bs4 import BeautifulSoup
from PIL import Image as PILImage

import services.readability.images as images_module
from models.image import Image
from models.options import ReadabilityOptions
from services.readability.document import Document
from services.readability.errors import UnknownImageSize
from services.readability.images import ImageSelector, parse_dimension, probe_image_dimensions

ARTICLE_TEXT = "This is the text of the article, long enough to be scored as content. " * 3


class FakeProbe:
    """Records the URLs it is asked about and answers from a table."""

    def __init__(self, sizes=None, fail=()):
        self.sizes = sizes or {}
        self.fail = set(fail)
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, url):
        with self._lock:
            self.calls.append(url)
        if url in self.fail:
            raise UnknownImageSize(url, "boom")
        return self.sizes.get(url, (0, 0))


def body_of(markup: str):
    return BeautifulSoup(f"<html><body>{markup}</body></html>", "lxml").body


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
@pytest.mark.parametrize(
    "value,expected",
    [("200", 200), ("200px", 200), (" 42 ", 42), ("auto", 0), ("", 0), (None, 0)],
)
def test_parse_dimension(value, expected):
    assert parse_dimension(value) == expected


def test_image_equality_is_by_url():
    assert Image(url="http://x/a.png", width=1) == Image(url="http://x/a.png", width=500)
    assert len({Image(url="http://x/a.png"), Image(url="http://x/a.png", height=3)}) == 1


@pytest.mark.parametrize(
    "url,fmt",
    [
        ("http://example.com/a/photo.JPG", "jpg"),
        ("http://example.com/photo.png?size=large", "png"),
        ("http://example.com/image", ""),
        ("/relative/pic.gif", "gif"),
    ],
)
def test_image_format_from_url_path(url, fmt):
    assert Image.from_url(url).format == fmt


def test_malformed_host_has_no_format():
    image = Image.from_url("http://[::1/a.jpg", width=10, height=10)
    assert image.format == ""
    assert image.url == "http://[::1/a.jpg"


# -------------------------------------------------------------------
# ImageSelector
# -------------------------------------------------------------------
def test_declared_dimensions_are_used_without_probing():
    probe = FakeProbe()
    selector = ImageSelector(ReadabilityOptions(), probe)
    content = body_of(
        '<img src="http://example.com/big.jpg" width="200" height="200">'
        '<img src="http://example.com/narrow.jpg" width="50" height="200">'
    )
    assert selector.select(content) == ["http://example.com/big.jpg"]
    assert probe.calls == []


def test_missing_dimensions_are_probed():
    probe = FakeProbe(sizes={"http://example.com/a.jpg": (640, 480)})
    selector = ImageSelector(ReadabilityOptions(), probe)
    content = body_of('<img src="http://example.com/a.jpg" width="640">')

    assert selector.select(content) == ["http://example.com/a.jpg"]
    assert probe.calls == ["http://example.com/a.jpg"]


def test_failed_probe_drops_the_image_quietly():
    probe = FakeProbe(
        sizes={"http://example.com/ok.jpg": (300, 300)},
        fail={"http://example.com/broken.jpg"},
    )
    selector = ImageSelector(ReadabilityOptions(image_probe_workers=1), probe)
    content = body_of(
        '<img src="http://example.com/broken.jpg">'
        '<img src="http://example.com/ok.jpg">'
    )
    assert selector.select(content) == ["http://example.com/ok.jpg"]


def test_relative_urls_are_never_probed():
    probe = FakeProbe()
    selector = ImageSelector(ReadabilityOptions(), probe)
    content = body_of('<img src="/local.jpg"><img src="data:image/png;base64,xx">')

    assert selector.select(content) == []
    assert probe.calls == []


def test_images_without_src_are_skipped():
    selector = ImageSelector(ReadabilityOptions(), FakeProbe())
    content = body_of('<img width="500" height="500"><img src="" width="500" height="500">')
    assert selector.measure(content) == []


def test_duplicate_urls_are_reported_once():
    selector = ImageSelector(ReadabilityOptions(), FakeProbe())
    content = body_of(
        '<img src="http://example.com/a.jpg" width="200" height="200">'
        '<img src="http://example.com/b.jpg" width="200" height="200">'
        '<img src="http://example.com/a.jpg" width="400" height="400">'
    )
    assert selector.select(content) == ["http://example.com/a.jpg", "http://example.com/b.jpg"]


def test_ignored_formats_are_filtered():
    options = ReadabilityOptions(ignore_image_format=["GIF", ".svg"])
    selector = ImageSelector(options, FakeProbe())
    content = body_of(
        '<img src="http://example.com/a.gif" width="200" height="200">'
        '<img src="http://example.com/b.svg" width="200" height="200">'
        '<img src="http://example.com/c.png" width="200" height="200">'
    )
    assert selector.select(content) == ["http://example.com/c.png"]


def test_size_thresholds_come_from_options():
    options = ReadabilityOptions(min_image_width=10, min_image_height=10)
    selector = ImageSelector(options, FakeProbe())
    content = body_of('<img src="http://example.com/icon.png" width="16" height="16">')
    assert selector.select(content) == ["http://example.com/icon.png"]


def test_parallel_probes_keep_document_order():
    urls = [f"http://example.com/{index}.jpg" for index in range(8)]
    probe = FakeProbe(sizes={url: (200, 200) for url in urls})
    selector = ImageSelector(ReadabilityOptions(image_probe_workers=4), probe)
    content = body_of("".join(f'<img src="{url}">' for url in urls))

    assert selector.select(content) == urls
    assert sorted(probe.calls) == sorted(urls)


# -------------------------------------------------------------------
# probe_image_dimensions
# -------------------------------------------------------------------
def test_probe_wraps_transport_errors(monkeypatch):
    def failing(url, timeout):
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(images_module, "_read_image_size", failing)
    with pytest.raises(UnknownImageSize) as excinfo:
        probe_image_dimensions("http://example.com/a.jpg")
    assert excinfo.value.url == "http://example.com/a.jpg"


def test_probe_rejects_undecodable_data(monkeypatch):
    monkeypatch.setattr(images_module, "_read_image_size", lambda url, timeout: None)
    with pytest.raises(UnknownImageSize):
        probe_image_dimensions("http://example.com/a.jpg")


def test_probe_returns_size(monkeypatch):
    monkeypatch.setattr(images_module, "_read_image_size", lambda url, timeout: (10, 20))
    assert probe_image_dimensions("http://example.com/a.jpg") == (10, 20)


@pytest.mark.parametrize(
    "error",
    [
        httpx.InvalidURL("Invalid non-printable ASCII character in URL"),
        PILImage.DecompressionBombError("image too large"),
    ],
)
def test_probe_wraps_url_and_decoder_errors(monkeypatch, error):
    def failing(url, timeout):
        raise error

    monkeypatch.setattr(images_module, "_read_image_size", failing)
    with pytest.raises(UnknownImageSize):
        probe_image_dimensions("http://example.com/a.jpg")


# -------------------------------------------------------------------
# Document.images
# -------------------------------------------------------------------
def test_document_images_from_best_candidate():
    html = (
        "<html><body>"
        f'<div id="story"><p>{ARTICLE_TEXT}</p>'
        '<img src="http://example.com/story.jpg" width="400" height="300"></div>'
        '<img src="http://example.com/elsewhere.jpg" width="400" height="300">'
        "</body></html>"
    )
    doc = Document(html, probe=FakeProbe())
    assert doc.images == ["http://example.com/story.jpg"]
    assert doc.best_candidate_has_image is True


def test_document_images_fall_back_to_whole_document():
    html = (
        "<html><body>"
        f'<div id="story"><p>{ARTICLE_TEXT}</p></div>'
        '<img src="http://example.com/elsewhere.jpg" width="400" height="300">'
        "</body></html>"
    )
    doc = Document(html, probe=FakeProbe())
    assert doc.images == ["http://example.com/elsewhere.jpg"]
    assert doc.best_candidate_has_image is False


def test_document_without_images():
    doc = Document(f"<html><body><div><p>{ARTICLE_TEXT}</p></div></body></html>", probe=FakeProbe())
    assert doc.images == []
    assert doc.best_candidate_has_image is False


@pytest.mark.parametrize(
    "src",
    ["http://[::1/a.jpg", "http://exa\tmple.com/a.jpg"],
)
def test_unusable_image_urls_never_break_extraction(src):
    html = f'<html><body><div><p>{ARTICLE_TEXT}</p><img src="{src}"></div></body></html>'
    doc = Document(html, image_probe_workers=1)
    assert doc.images == []
    assert doc.best_candidate_has_image is False

# tests/test_author.py
import pytest
from bs4 import BeautifulSoup

from services.readability.author import parse_author, rel_author, vcard


def soup_of(head: str = "", body: str = "") -> BeautifulSoup:
    return BeautifulSoup(f"<html><head>{head}</head><body>{body}</body></html>", "lxml")


@pytest.mark.parametrize(
    "head,body,expected",
    [
        ('<meta name="dc.creator" content="Finch - http://www.getfinch.com" />', "", "Finch - http://www.getfinch.com"),
        ("", '<span class="byline author vcard">By <cite class="fn">Austin Fonacier</cite></span>', "Austin Fonacier"),
        ("", '<a rel="author" href="http://dbanksdesign.com">Danny Banks</a>', "Danny Banks"),
        ("", '<span id="author"> Jane Doe </span>', "Jane Doe"),
    ],
)
def test_each_strategy(head, body, expected):
    assert parse_author(soup_of(head, body)) == expected


def test_meta_wins_over_markup():
    html = soup_of(
        '<meta name="dc.creator" content="Meta Author" />',
        '<a rel="author" href="#">Link Author</a>',
    )
    assert parse_author(html) == "Meta Author"


def test_vcard_wins_over_rel_author():
    html = soup_of(
        body='<a rel="author" href="#">Link Author</a>'
        '<div class="vcard"><span class="fn">Card Author</span></div>',
    )
    assert parse_author(html) == "Card Author"


def test_blank_answers_fall_through():
    html = soup_of(
        '<meta name="dc.creator" content="   " />',
        '<a rel="author" href="#">Danny Banks</a>',
    )
    assert parse_author(html) == "Danny Banks"


def test_no_author():
    assert parse_author(soup_of(body="<p>Nobody wrote this.</p>")) is None


def test_custom_strategy_order():
    html = soup_of(
        body='<a rel="author" href="#">Link Author</a>'
        '<div class="vcard"><span class="fn">Card Author</span></div>',
    )
    assert parse_author(html, strategies=[rel_author, vcard]) == "Link Author"

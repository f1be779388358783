"""Link extraction tests."""

from __future__ import annotations

from linkguard.engine.extract import extract_links
from linkguard.engine.types import ExtractedLink


def test_extracts_links_in_document_order_with_duplicates():
    html = (
        '<p>See <a href="https://bls.gov/data">BLS</a> and '
        '<a class="x" href=\'/about\'>About us</a>.</p>'
        '<p><a href="https://bls.gov/data">BLS again</a></p>'
    )

    assert extract_links(html) == [
        ExtractedLink(url="https://bls.gov/data", anchor_text="BLS"),
        ExtractedLink(url="/about", anchor_text="About us"),
        ExtractedLink(url="https://bls.gov/data", anchor_text="BLS again"),
    ]


def test_empty_and_missing_content_yield_nothing():
    assert extract_links("") == []
    assert extract_links(None) == []


def test_plain_text_has_no_links():
    assert extract_links("No markup here, just https://example.com in prose.") == []


def test_named_anchors_are_skipped_but_empty_href_is_kept():
    html = '<a name="top">Top</a><a href="">Empty</a>'

    assert extract_links(html) == [ExtractedLink(url="", anchor_text="Empty")]


def test_nested_markup_anchor_text_is_flattened():
    html = '<a href="https://apa.org">\n  <strong>American</strong>   Psychological\n</a>'

    assert extract_links(html) == [ExtractedLink(url="https://apa.org", anchor_text="American Psychological")]

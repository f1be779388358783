"""Per-link classification tests."""

from __future__ import annotations

import pytest

from linkguard.engine.classify import classify_link, parse_host
from linkguard.engine.types import LinkClassification

from .conftest import make_rule_set


@pytest.mark.parametrize("url", ["#section", "#", "/about", "/blog/post?x=1", "//cdn.example.com/a.js"])
def test_anchor_and_internal_links_never_violate(url):
    rules = make_rule_set(blocked=["example.com"])

    outcome = classify_link(url, "text", rules)

    assert outcome.is_valid
    assert outcome.violation is None
    assert outcome.category == ("anchor" if url.startswith("#") else "internal")


def test_empty_url_is_invalid():
    outcome = classify_link("", "empty", make_rule_set())

    assert outcome.category == "invalid"
    assert not outcome.is_valid
    assert outcome.violation.severity == "error"
    assert outcome.violation.rule_type == "blocked"
    assert outcome.violation.message == "Empty or invalid URL"
    assert outcome.violation.domain == ""


@pytest.mark.parametrize("url", ["not a url", "https://", "http://exa mple.com/", "https://example.com:notaport/"])
def test_unparseable_url_is_invalid(url):
    outcome = classify_link(url, "bad", make_rule_set())

    assert outcome.category == "invalid"
    assert outcome.violation.message == "Invalid URL format"
    assert outcome.violation.url == url


def test_edu_is_blocked_even_when_allowed():
    rules = make_rule_set(allowed=["school.edu"])

    outcome = classify_link("https://www.school.edu/page", "info", rules)

    assert outcome.category == "external"
    assert not outcome.is_valid
    assert outcome.violation.rule_type == "edu_restricted"
    assert outcome.violation.severity == "error"
    assert outcome.violation.domain == "www.school.edu"


def test_blocked_domain_covers_subdomains():
    rules = make_rule_set(blocked=["nytimes.com"])

    outcome = classify_link("https://www.nytimes.com/x", "read", rules)

    assert outcome.violation.rule_type == "blocked"
    assert outcome.violation.message == "Blocked domain: www.nytimes.com. This link violates content policy."
    assert outcome.violation.suggestion == "Remove this link or replace with an approved source"


def test_competitor_label_wins_over_plain_block():
    rules = make_rule_set(blocked=["rival.com"], competitor=["rival.com"])

    outcome = classify_link("https://rival.com/pricing", "pricing", rules)

    assert outcome.violation.rule_type == "competitor"
    assert outcome.violation.severity == "error"
    assert "Competitor link detected" in outcome.violation.message


def test_blocked_wins_over_allowed():
    rules = make_rule_set(blocked=["example.com"], allowed=["news.example.com"])

    outcome = classify_link("https://news.example.com/", "news", rules)

    assert not outcome.is_valid
    assert outcome.violation.rule_type == "blocked"


def test_allowed_domain_is_clean():
    outcome = classify_link("https://stats.bls.gov/data", "BLS", make_rule_set(allowed=["bls.gov"]))

    assert outcome == LinkClassification(category="external", is_valid=True)


def test_unknown_domain_gets_warning():
    outcome = classify_link("https://random-blog.example/post", "blog", make_rule_set(allowed=["bls.gov"]))

    assert outcome.is_valid
    assert outcome.violation.rule_type == "unapproved"
    assert outcome.violation.severity == "warning"
    assert outcome.violation.domain == "random-blog.example"


def test_host_comparison_is_case_insensitive():
    outcome = classify_link("HTTPS://WWW.NYTimes.COM/x", "read", make_rule_set(blocked=["nytimes.com"]))

    assert outcome.violation.rule_type == "blocked"
    assert outcome.violation.domain == "www.nytimes.com"


def test_parse_host():
    assert parse_host("https://Example.COM./path") == "example.com"
    assert parse_host("mailto:someone@example.com") == ""
    assert parse_host("relative/path") is None
    assert parse_host("https://") is None


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://school．edu/page", "school.edu"),
        ("https://nytimes。com/x", "nytimes.com"),
        ("https://ｎｙｔｉｍｅｓ.com/", "nytimes.com"),
        ("https://Bücher.de/", "xn--bcher-kva.de"),
    ],
)
def test_parse_host_maps_hosts_to_ascii(url, expected):
    assert parse_host(url) == expected


def test_fullwidth_dot_does_not_dodge_edu_rule():
    outcome = classify_link("https://school．edu/page", "info", make_rule_set(allowed=["school.edu"]))

    assert not outcome.is_valid
    assert outcome.violation.rule_type == "edu_restricted"
    assert outcome.violation.domain == "school.edu"


def test_ideographic_dot_does_not_dodge_block_list(default_rules):
    outcome = classify_link("https://nytimes。com/x", "read", default_rules)

    assert outcome.violation.rule_type == "blocked"
    assert outcome.violation.severity == "error"
    assert outcome.violation.domain == "nytimes.com"


def test_unicode_host_matches_punycode_rule():
    outcome = classify_link("https://www.bücher.de/", "books", make_rule_set(blocked=["xn--bcher-kva.de"]))

    assert outcome.violation.rule_type == "blocked"
    assert outcome.violation.domain == "www.xn--bcher-kva.de"


def test_unicode_rule_matches_punycode_link():
    outcome = classify_link("https://xn--bcher-kva.de/", "books", make_rule_set(blocked=["bücher.de"]))

    assert outcome.violation.rule_type == "blocked"


def test_unencodable_host_is_invalid():
    outcome = classify_link("https://ü" + "a" * 70 + ".com/", "bad", make_rule_set())

    assert outcome.category == "invalid"
    assert outcome.violation.message == "Invalid URL format"

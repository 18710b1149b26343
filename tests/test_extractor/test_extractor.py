"""Tests for URL extraction."""

from link_monitor.extractor import extract_urls


def test_empty_input():
    assert extract_urls("") == []
    assert extract_urls(None) == []


def test_no_urls():
    assert extract_urls("nothing to see here, ftp://files.example is not http") == []


def test_single_url_in_sentence():
    assert extract_urls("check https://good.example now") == ["https://good.example"]


def test_many_urls_in_order():
    text = "http://a.example https://b.example/path?q=1 and http://c.example#frag"
    assert extract_urls(text) == [
        "http://a.example",
        "https://b.example/path?q=1",
        "http://c.example#frag",
    ]


def test_greedy_until_whitespace():
    assert extract_urls("see https://x.example/a,b).\nnext") == ["https://x.example/a,b)."]


def test_duplicates_are_kept():
    assert extract_urls("https://a.example https://a.example") == [
        "https://a.example",
        "https://a.example",
    ]


def test_scheme_only_is_not_a_url():
    assert extract_urls("https:// alone") == []

# File: tests/test_link_extractor.py
from sitewatch.crawler.link_extractor import (
    extract_absolute_urls,
    extract_links,
    extract_relative_urls,
)

ROOT = "https://example.com"


def test_absolute_scan_keeps_same_site_only():
    text = (
        '<a href="https://example.com/about">About</a>\n'
        '<a href="https://other.org/page">Elsewhere</a>\n'
        "see https://www.google.com/search too"
    )
    assert extract_absolute_urls(text, ROOT) == ["https://example.com/about"]


def test_absolute_scan_strips_query():
    text = "<a href='https://example.com/item?id=3&x=1'>item</a>"
    assert extract_absolute_urls(text, ROOT) == ["https://example.com/item"]


def test_absolute_scan_handles_ports():
    root = "http://127.0.0.1:8080"
    text = '<a href="http://127.0.0.1:8080/next">n</a> <a href="http://127.0.0.1:8080">home</a>'
    assert extract_absolute_urls(text, root) == ["http://127.0.0.1:8080/next", root]


def test_relative_scan_concatenates_root():
    text = '<ul>\n<li><a href="/a">A</a></li>\n<li><a href="/b/../c">C</a></li>\n</ul>'
    assert extract_relative_urls(text, ROOT) == [ROOT + "/a", ROOT + "/b/../c"]


def test_relative_scan_ignores_lines_without_root_relative_href():
    text = '<a href="page.html">relative</a>\n<a HREF="/upper">upper</a>'
    assert extract_relative_urls(text, ROOT) == []


def test_relative_scan_finds_several_matches_per_line():
    text = '<a href="/one">1</a><a href="/two">2</a>'
    assert extract_relative_urls(text, ROOT) == [ROOT + "/one", ROOT + "/two"]


def test_extract_links_unions_and_dedups():
    text = (
        '<a href="https://example.com/a">A</a>\n'
        '<a href="/a">A again</a>\n'
        '<a href="/b">B</a>\n'
        '<a href="/b">B again</a>'
    )
    assert extract_links(text, ROOT) == [ROOT + "/a", ROOT + "/b"]


def test_extract_links_is_case_sensitive():
    text = '<a href="/Page">x</a>\n<a href="/page">y</a>'
    assert extract_links(text, ROOT) == [ROOT + "/Page", ROOT + "/page"]


def test_no_links():
    assert extract_links("plain text without anchors", ROOT) == []

import pytest

from seocrawl.utils.url_utils import (
    is_in_scope,
    is_valid_start_url,
    origin_of,
    page_identifier,
    resolve_link,
    strip_fragment,
)


def test_strip_fragment():
    assert strip_fragment("https://example.com/a#b") == "https://example.com/a"
    assert strip_fragment("https://example.com/a") == "https://example.com/a"


def test_origin_is_lowercased():
    assert origin_of("HTTPS://Example.COM/Path") == "https://example.com"
    assert origin_of("https://example.com:8443/x") == "https://example.com:8443"


@pytest.mark.parametrize("url", ["ftp://example.com/", "/relative", "mailto:a@b.c", "", "https://"])
def test_origin_of_rejects_non_http_urls(url):
    assert origin_of(url) is None


@pytest.mark.parametrize(
    "url,valid",
    [
        ("https://example.com", True),
        ("http://example.com/path?q=1", True),
        ("example.com", False),
        ("javascript:alert(1)", False),
        (None, False),
        ("", False),
    ],
)
def test_is_valid_start_url(url, valid):
    assert is_valid_start_url(url) is valid


def test_resolve_link_against_origin():
    assert resolve_link("https://example.com", "/about") == "https://example.com/about"
    assert resolve_link("https://example.com", "https://other.com/x") == "https://other.com/x"


def test_scope_is_origin_equality_not_prefix():
    base = "https://example.com"
    assert is_in_scope("https://example.com/a", base)
    assert is_in_scope("https://EXAMPLE.com/a", base)
    assert not is_in_scope("https://example.com.evil.net/a", base)
    assert not is_in_scope("http://example.com/a", base)
    assert not is_in_scope("https://sub.example.com/a", base)


def test_page_identifier_ignores_fragment():
    assert page_identifier("https://example.com/a#x") == page_identifier("https://example.com/a")
    assert page_identifier("https://example.com/a") != page_identifier("https://example.com/b")
    assert len(page_identifier("https://example.com/a")) == 64


def test_origin_drops_default_port_and_userinfo():
    assert origin_of("https://example.com:443/x") == "https://example.com"
    assert origin_of("http://example.com:80/x") == "http://example.com"
    assert origin_of("https://user:pw@Example.com/x") == "https://example.com"
    assert origin_of("http://example.com:443/x") == "http://example.com:443"
    assert origin_of("http://[::1]:8080/x") == "http://[::1]:8080"


def test_default_port_seed_keeps_links_in_scope():
    base = origin_of("https://example.com:443/")
    assert is_in_scope("https://example.com/a", base)
    assert is_in_scope("https://example.com:443/x", base)
    assert not is_in_scope("https://example.com:8443/x", base)


def test_origin_of_rejects_invalid_port():
    assert origin_of("https://example.com:notaport/") is None

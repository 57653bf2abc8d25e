import hashlib
from typing import Optional
from urllib.parse import urljoin, urlparse

ALLOWED_SCHEMES = {"http", "https"}
DEFAULT_PORTS = {"http": 80, "https": 443}


def strip_fragment(url: str) -> str:
    """Drop the ``#fragment`` so ``/page#a`` and ``/page`` compare equal."""
    return url.split("#", 1)[0]


def origin_of(url: str) -> Optional[str]:
    """Return ``scheme://host[:port]`` for an absolute http(s) URL, else None.

    Userinfo is dropped and the port is omitted when it is the scheme's
    default, so ``https://u@example.com:443/`` and ``https://example.com/``
    share an origin.
    """
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return None
    scheme = (parsed.scheme or "").lower()
    host = parsed.hostname
    if scheme not in ALLOWED_SCHEMES or not host:
        return None
    if ":" in host:
        host = f"[{host}]"
    if port is None or port == DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def is_valid_start_url(url: Optional[str]) -> bool:
    if not url or not isinstance(url, str):
        return False
    try:
        hostname = urlparse(url.strip()).hostname
    except ValueError:
        return False
    return origin_of(url.strip()) is not None and bool(hostname)


def resolve_link(base_origin: str, link: str) -> Optional[str]:
    """Resolve `link` against the crawl origin; None for unparseable links."""
    try:
        return urljoin(base_origin + "/", link.strip())
    except ValueError:
        return None


def is_in_scope(url: str, base_origin: str) -> bool:
    return origin_of(url) == base_origin


def page_identifier(url: str) -> str:
    """Stable page key: SHA-256 of the fragment-stripped URL."""
    return hashlib.sha256(strip_fragment(url).encode("utf-8")).hexdigest()

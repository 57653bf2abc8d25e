"""Custom exceptions for SEOCrawl services."""
from typing import Optional


class InvalidInputError(ValueError):
    """Raised when a crawl request is rejected before any work begins."""


class RenderError(Exception):
    """Raised by a page renderer when a URL cannot be loaded or extracted."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Render failed for {url}: {reason}")


class OptimizeError(Exception):
    """Raised when the content optimizer cannot produce optimized markup."""


class PageStoreError(Exception):
    """Raised when the page store cannot be read or written."""


class PersistenceError(PageStoreError):
    """Raised when a page record cannot be written to the page store."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Could not persist page {url}: {original}")


class SessionStoreError(Exception):
    """Raised when the crawl session store cannot be read or written."""


class SessionCreateError(SessionStoreError):
    """Raised when a crawl session record cannot be created."""


class ResourceAcquisitionError(Exception):
    """Raised when the rendering engine cannot be started."""


class CrawlFailedError(Exception):
    """Raised to the caller after a crawl was aborted by a fatal error."""

    def __init__(self, session_id: Optional[int], original: Exception):
        self.session_id = session_id
        self.original = original
        super().__init__(f"Crawl session {session_id} failed: {original}")

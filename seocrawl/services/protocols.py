"""Protocol (interface) definitions for the crawl collaborators."""

from typing import List, Optional, Protocol

from seocrawl.domain import PageRecord, RenderedPage


class PageRenderer(Protocol):
    """Loads a URL in a rendering engine; owns the engine between open() and close()."""

    def open(self) -> "PageRenderer": ...

    def close(self) -> None: ...

    def __enter__(self) -> "PageRenderer": ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    def render(self, url: str, timeout_ms: Optional[int] = None) -> RenderedPage:
        """Return the rendered page or raise `RenderError`."""
        ...


class Optimizer(Protocol):
    def optimize(self, raw_markup: str) -> str:
        """Return optimized markup or raise `OptimizeError`."""
        ...


class SessionStore(Protocol):
    def create(self, site_id: str, user_id: str, start_url: str) -> int: ...

    def append_visited_url(self, session_id: int, url: str) -> None: ...

    def append_failed_url(self, session_id: int, url: str) -> None: ...

    def record_scraped_page(self, session_id: int, page_id: int) -> None: ...

    def finalize(self, session_id: int, *, total_urls_scraped: int, visited_urls: List[str], failed_urls: List[str], scraped_page_ids: List[int]) -> bool: ...

    def mark_failed(self, session_id: int, error_message: str) -> bool: ...


class PageStore(Protocol):
    def upsert_page(self, page: PageRecord) -> PageRecord: ...

from typing import List

from seocrawl.domain.frontier import Frontier
from seocrawl.domain.visited_tracker import VisitedTracker
from seocrawl.utils.url_utils import strip_fragment


class CrawlContext:
    """Mutable traversal state owned by a single crawl invocation."""

    def __init__(self, *, session_id: int, site_id: str, user_id: str, start_url: str, base_origin: str, max_pages: int):
        self.session_id = session_id
        self.site_id = site_id
        self.user_id = user_id
        self.base_origin = base_origin
        self.max_pages = max_pages
        self.frontier = Frontier(start_url)
        self.visited = VisitedTracker()
        self.pages_crawled: int = 0
        self.failed_urls: List[str] = []
        self.scraped_page_ids: List[int] = []

    def has_budget(self) -> bool:
        return self.pages_crawled < self.max_pages

    def is_visited(self, url: str) -> bool:
        return self.visited.is_visited(url)

    def mark_visited(self, url: str) -> str:
        """Record a dequeued URL against the budget; returns its normalized form."""
        self.pages_crawled += 1
        return self.visited.mark(url)

    def record_failure(self, url: str) -> None:
        key = strip_fragment(url)
        if key not in self.failed_urls:
            self.failed_urls.append(key)

    def record_saved(self, page_id: int) -> None:
        if page_id not in self.scraped_page_ids:
            self.scraped_page_ids.append(page_id)

    @property
    def visited_urls(self) -> List[str]:
        return self.visited.urls()

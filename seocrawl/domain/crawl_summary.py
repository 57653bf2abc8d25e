"""Crawl summary returned to the caller."""
from typing import List, NamedTuple, Optional


class CrawlSummary(NamedTuple):
    session_id: Optional[int]
    total_urls_attempted: int
    """Number of URLs dequeued and handed to the renderer"""

    total_urls_scraped: int
    """Number of pages successfully persisted"""

    visited_urls: List[str]
    failed_urls: List[str]
    scraped_page_ids: List[int]

    @property
    def crawled_pages(self) -> int:
        """Distinct pages visited (fragment-stripped)."""
        return len(self.visited_urls)

from datetime import datetime
from typing import List, Optional

STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"

TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_FAILED)


class CrawlSession:
    """Durable record of one crawl invocation's progress and outcome."""

    def __init__(
        self,
        session_id: Optional[int],
        site_id: str,
        user_id: str,
        start_url: str,
        status: str = STATUS_IN_PROGRESS,
        total_urls_scraped: int = 0,
        visited_urls: Optional[List[str]] = None,
        failed_urls: Optional[List[str]] = None,
        scraped_page_ids: Optional[List[int]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
        error_message: Optional[str] = None,
    ):
        self.session_id = session_id
        self.site_id = site_id
        self.user_id = user_id
        self.start_url = start_url
        self.status = status
        self.total_urls_scraped = total_urls_scraped
        self.visited_urls = list(visited_urls or [])
        self.failed_urls = list(failed_urls or [])
        self.scraped_page_ids = list(scraped_page_ids or [])
        self.created_at = created_at
        self.updated_at = updated_at
        self.completed_at = completed_at
        self.error_message = error_message

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def __repr__(self):
        return (
            f"<CrawlSession id={self.session_id} site={self.site_id} "
            f"status={self.status} scraped={self.total_urls_scraped}>"
        )

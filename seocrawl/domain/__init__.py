"""Domain objects for SEOCrawl - explicit re-exports to satisfy linters."""
from .crawl_context import CrawlContext as CrawlContext
from .crawl_session import CrawlSession as CrawlSession
from .crawl_summary import CrawlSummary as CrawlSummary
from .frontier import Frontier as Frontier
from .page_outcome import PageFailed as PageFailed, PageSaved as PageSaved
from .page_record import PageRecord as PageRecord
from .rendered_page import RenderedPage as RenderedPage
from .visited_tracker import VisitedTracker as VisitedTracker

__all__ = [
    "CrawlContext",
    "CrawlSession",
    "CrawlSummary",
    "Frontier",
    "PageFailed",
    "PageSaved",
    "PageRecord",
    "RenderedPage",
    "VisitedTracker",
]

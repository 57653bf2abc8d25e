import logging
from typing import Callable, List, Optional

from seocrawl.domain import CrawlContext, CrawlSummary, PageFailed
from seocrawl.exceptions import CrawlFailedError, InvalidInputError
from seocrawl.services.page_processor import PageProcessor
from seocrawl.services.protocols import Optimizer, PageRenderer, PageStore, SessionStore
from seocrawl.utils.url_utils import is_in_scope, is_valid_start_url, origin_of, resolve_link, strip_fragment

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 10
DEFAULT_SITE_ID = "default-site"
DEFAULT_USER_ID = "default-user"


class CrawlOrchestrator:
    """Runs one breadth-first, same-origin crawl per `crawl()` call.

    This class owns the crawl control-flow (frontier, visited set, budget,
    session bookkeeping). It does NOT construct its collaborators (that
    stays in the DI layer). A fresh renderer is taken from
    `renderer_factory` for every crawl and released when the crawl ends.
    """

    def __init__(
        self,
        *,
        renderer_factory: Callable[[], PageRenderer],
        optimizer: Optimizer,
        sessions_repo: SessionStore,
        pages_repo: PageStore,
        default_max_pages: int = DEFAULT_MAX_PAGES,
        render_timeout_ms: Optional[int] = None,
    ):
        self.renderer_factory = renderer_factory
        self.optimizer = optimizer
        self.sessions_repo = sessions_repo
        self.pages_repo = pages_repo
        self.default_max_pages = int(default_max_pages)
        self.render_timeout_ms = render_timeout_ms

    def _validate(self, start_url: Optional[str], max_pages) -> tuple[str, int]:
        if not start_url:
            raise InvalidInputError("startUrl is required")
        if not is_valid_start_url(start_url):
            raise InvalidInputError(f"startUrl is not a valid absolute http(s) URL: {start_url!r}")
        if max_pages is None:
            max_pages = self.default_max_pages
        if isinstance(max_pages, bool) or not isinstance(max_pages, int) or max_pages < 1:
            raise InvalidInputError(f"maxPages must be a positive integer, got {max_pages!r}")
        return start_url.strip(), max_pages

    def crawl(
        self,
        start_url: Optional[str],
        max_pages: Optional[int] = None,
        site_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> CrawlSummary:
        """Crawl same-origin pages reachable from `start_url`.

        Raises `InvalidInputError` before any work, `ResourceAcquisitionError`
        if the renderer cannot start, `SessionCreateError` if the session
        record cannot be created, and `CrawlFailedError` when a fatal error
        aborts a running crawl (the session is then marked failed).
        """
        start_url, max_pages = self._validate(start_url, max_pages)
        site_id = site_id or DEFAULT_SITE_ID
        user_id = user_id or DEFAULT_USER_ID
        base_origin = origin_of(start_url)

        with self.renderer_factory() as renderer:
            session_id = self.sessions_repo.create(site_id, user_id, start_url)
            logger.info("Crawl session %s started: %s (max_pages=%s)", session_id, start_url, max_pages)
            context = CrawlContext(
                session_id=session_id,
                site_id=site_id,
                user_id=user_id,
                start_url=start_url,
                base_origin=base_origin,
                max_pages=max_pages,
            )
            processor = PageProcessor(
                renderer,
                self.optimizer,
                self.pages_repo,
                render_timeout_ms=self.render_timeout_ms,
            )
            try:
                self._run(context, processor)
                self.sessions_repo.finalize(
                    session_id,
                    total_urls_scraped=len(context.scraped_page_ids),
                    visited_urls=context.visited_urls,
                    failed_urls=context.failed_urls,
                    scraped_page_ids=context.scraped_page_ids,
                )
            except Exception as e:
                logger.error("Crawl session %s aborted: %s", session_id, e, exc_info=True)
                self._mark_failed(session_id, e)
                raise CrawlFailedError(session_id, e) from e

        logger.info(
            "Crawl session %s completed: attempted=%s scraped=%s failed=%s",
            session_id,
            context.pages_crawled,
            len(context.scraped_page_ids),
            len(context.failed_urls),
        )
        return CrawlSummary(
            session_id=session_id,
            total_urls_attempted=context.pages_crawled,
            total_urls_scraped=len(context.scraped_page_ids),
            visited_urls=context.visited_urls,
            failed_urls=list(context.failed_urls),
            scraped_page_ids=list(context.scraped_page_ids),
        )

    def _run(self, context: CrawlContext, processor: PageProcessor) -> None:
        session_id = context.session_id
        while context.frontier and context.has_budget():
            url = context.frontier.pop()
            if context.is_visited(url):
                logger.debug("Skipping (visited) %s", url)
                continue
            normalized = context.mark_visited(url)
            self.sessions_repo.append_visited_url(session_id, normalized)
            logger.info("Crawling %s (%s/%s)", url, context.pages_crawled, context.max_pages)

            outcome = processor.process(
                url,
                session_id=session_id,
                site_id=context.site_id,
                user_id=context.user_id,
            )
            if isinstance(outcome, PageFailed):
                logger.warning("Page %s failed at %s: %s", url, outcome.stage, outcome.reason)
                context.record_failure(url)
                self.sessions_repo.append_failed_url(session_id, strip_fragment(url))
                if outcome.links:
                    queued = self._enqueue_links(context, outcome.links)
                    logger.debug("Queued %d new links from unsaved page %s", queued, url)
                continue

            context.record_saved(outcome.page_id)
            self.sessions_repo.record_scraped_page(session_id, outcome.page_id)
            queued = self._enqueue_links(context, outcome.links)
            logger.debug("Queued %d new links from %s", queued, url)

    def _enqueue_links(self, context: CrawlContext, links: List[str]) -> int:
        queued = 0
        for link in links:
            absolute = resolve_link(context.base_origin, link)
            if absolute is None:
                continue
            candidate = strip_fragment(absolute)
            if not is_in_scope(candidate, context.base_origin):
                continue
            if context.is_visited(candidate) or context.frontier.contains(candidate):
                continue
            if context.frontier.push(candidate):
                queued += 1
        return queued

    def _mark_failed(self, session_id: int, error: Exception) -> None:
        message = str(error) or type(error).__name__
        try:
            self.sessions_repo.mark_failed(session_id, message)
        except Exception:
            logger.exception("Could not mark crawl session %s as failed", session_id)

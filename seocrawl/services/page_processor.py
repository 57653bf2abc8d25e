import logging
from datetime import datetime, timezone
from typing import Optional

from seocrawl.domain import PageFailed, PageRecord, PageSaved, RenderedPage
from seocrawl.domain.page_outcome import PageOutcome, STAGE_EXTRACT, STAGE_PERSIST, STAGE_RENDER
from seocrawl.domain.page_record import SEQUENCE_FIELDS
from seocrawl.exceptions import OptimizeError, PersistenceError, RenderError
from seocrawl.services.protocols import Optimizer, PageRenderer, PageStore
from seocrawl.utils.url_utils import page_identifier

logger = logging.getLogger(__name__)

EXTRACTION_METHOD = "headless_chromium"


class PageProcessor:
    """Renders, optimizes and persists a single URL.

    Per-page failures never raise: they come back as `PageFailed` so the
    crawl loop can record them and move on.
    """

    def __init__(
        self,
        renderer: PageRenderer,
        optimizer: Optimizer,
        pages_repo: PageStore,
        render_timeout_ms: Optional[int] = None,
        extraction_method: str = EXTRACTION_METHOD,
    ):
        self.renderer = renderer
        self.optimizer = optimizer
        self.pages_repo = pages_repo
        self.render_timeout_ms = render_timeout_ms
        self.extraction_method = extraction_method

    def _render(self, url: str):
        try:
            rendered = self.renderer.render(url, self.render_timeout_ms)
        except RenderError as e:
            return PageFailed(url, STAGE_RENDER, e.reason)
        except Exception as e:
            logger.error("Unexpected renderer error for %s: %s", url, e, exc_info=True)
            return PageFailed(url, STAGE_RENDER, str(e) or type(e).__name__)
        if not isinstance(rendered, RenderedPage):
            return PageFailed(url, STAGE_EXTRACT, "renderer returned a malformed result")
        if not rendered.raw_markup:
            return PageFailed(url, STAGE_EXTRACT, "rendered page has no markup")
        return rendered

    def _optimize(self, url: str, raw_markup: str) -> Optional[str]:
        try:
            logger.info("Optimizing markup for %s", url)
            return self.optimizer.optimize(raw_markup) or None
        except OptimizeError as e:
            logger.warning("Could not optimize markup for %s: %s", url, e)
        except Exception as e:
            logger.error("Unexpected optimizer error for %s: %s", url, e, exc_info=True)
        return None

    def build_record(self, url: str, rendered: RenderedPage, optimized_markup: Optional[str], *, session_id: int, site_id: str, user_id: str) -> PageRecord:
        sequences = {name: list(getattr(rendered, name) or []) for name in SEQUENCE_FIELDS}
        return PageRecord(
            page_identifier=page_identifier(url),
            session_id=session_id,
            url=url,
            site_id=site_id,
            user_id=user_id,
            title=rendered.title,
            meta_description=rendered.meta_description,
            author=rendered.author,
            raw_markup=rendered.raw_markup,
            optimized_markup=optimized_markup or rendered.raw_markup,
            file_size=len(rendered.raw_markup.encode("utf-8")),
            extraction_method=self.extraction_method,
            scraped_at=datetime.now(timezone.utc),
            **sequences,
        )

    def process(self, url: str, *, session_id: int, site_id: str, user_id: str) -> PageOutcome:
        result = self._render(url)
        if isinstance(result, PageFailed):
            return result
        rendered = result

        optimized = self._optimize(url, rendered.raw_markup)
        record = self.build_record(url, rendered, optimized, session_id=session_id, site_id=site_id, user_id=user_id)

        try:
            saved = self.pages_repo.upsert_page(record)
        except PersistenceError as e:
            logger.error("Storage error while saving %s: %s", url, e.original)
            return PageFailed(url, STAGE_PERSIST, str(e.original), rendered.link_urls())
        except Exception as e:
            logger.error("Storage error while saving %s: %s", url, e, exc_info=True)
            return PageFailed(url, STAGE_PERSIST, str(e) or type(e).__name__, rendered.link_urls())

        logger.info("Saved %s -> page_id=%s", url, saved.page_id)
        return PageSaved(url=url, page_id=saved.page_id, links=rendered.link_urls(), optimized=optimized is not None)

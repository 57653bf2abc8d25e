import logging
from typing import Callable, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from seocrawl.exceptions import (
    CrawlFailedError,
    InvalidInputError,
    PageStoreError,
    ResourceAcquisitionError,
    SessionStoreError,
)

logger = logging.getLogger(__name__)


class CrawlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_url: Optional[str] = Field(default=None, alias="startUrl")
    max_pages: Optional[int] = Field(default=None, alias="maxPages")
    site_id: Optional[str] = Field(default=None, alias="siteId")
    user_id: Optional[str] = Field(default=None, alias="userId")


def _error(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


def _summary_to_dict(summary) -> dict:
    return {
        "sessionId": summary.session_id,
        "totalUrlsAttempted": summary.total_urls_attempted,
        "totalUrlsScraped": summary.total_urls_scraped,
        "visitedUrls": list(summary.visited_urls),
        "failedUrls": list(summary.failed_urls),
        "scrapedPageIds": list(summary.scraped_page_ids),
        "crawledPages": summary.crawled_pages,
        "message": (
            f"Crawl completed: {summary.total_urls_scraped} of "
            f"{summary.total_urls_attempted} pages scraped"
        ),
    }


def create_crawls_router(orchestrator_factory: Callable, sessions_repo, pages_repo):
    """Create the crawl router.

    `orchestrator_factory` is called once per request so every crawl gets
    its own orchestrator (and with it its own renderer).
    """
    router = APIRouter(prefix="/crawl", tags=["Crawl"])

    # Sync endpoint: FastAPI runs it in the threadpool, which the sync
    # Playwright API requires (it refuses to run inside an event loop).
    @router.post("")
    def start_crawl(req: CrawlRequest):
        try:
            summary = orchestrator_factory().crawl(
                req.start_url,
                max_pages=req.max_pages,
                site_id=req.site_id,
                user_id=req.user_id,
            )
        except InvalidInputError as e:
            return _error(400, "Invalid crawl request", str(e))
        except ResourceAcquisitionError:
            logger.exception("Renderer unavailable")
            return _error(503, "Renderer unavailable", "the headless browser could not be started")
        except CrawlFailedError as e:
            logger.error("Crawl failed: %s", e)
            return _error(500, "Crawl failed", f"crawl session {e.session_id} was marked failed")
        except SessionStoreError:
            logger.exception("Session store error")
            return _error(500, "Crawl failed", "the crawl session could not be created")
        return _summary_to_dict(summary)

    @router.get("/sessions")
    def list_sessions(site_id: Optional[str] = None, user_id: Optional[str] = None, limit: Optional[int] = 20):
        try:
            sessions = sessions_repo.list_sessions(site_id=site_id, user_id=user_id, limit=limit or 20)
        except SessionStoreError:
            logger.exception("Could not list crawl sessions")
            return _error(500, "Session store error", "could not list crawl sessions")
        return {"sessions": [s.__dict__ for s in sessions], "limit": limit}

    @router.get("/sessions/{session_id}")
    def get_session(session_id: int):
        try:
            session = sessions_repo.get(session_id)
        except SessionStoreError:
            logger.exception("Could not load crawl session %s", session_id)
            return _error(500, "Session store error", "could not load crawl session")
        if not session:
            raise HTTPException(status_code=404, detail="session not found")
        return session.__dict__

    @router.get("/sessions/{session_id}/pages")
    def list_session_pages(session_id: int, include_markup: Optional[bool] = None, limit: Optional[int] = None, offset: Optional[int] = None):
        include = bool(include_markup)
        try:
            session = sessions_repo.get(session_id)
            if not session:
                raise HTTPException(status_code=404, detail="session not found")
            pages = pages_repo.list_pages_by_session(session_id, full=include, limit=limit, offset=offset)
        except SessionStoreError:
            logger.exception("Could not load crawl session %s", session_id)
            return _error(500, "Session store error", "could not load crawl session")
        except PageStoreError:
            logger.exception("Could not list pages of crawl session %s", session_id)
            return _error(500, "Page store error", "could not list session pages")
        return {
            "sessionId": session_id,
            "pages": [p.to_dict(include_markup=include) for p in pages],
            "limit": limit,
            "offset": offset,
        }

    return router

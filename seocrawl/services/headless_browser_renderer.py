from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from seocrawl.domain import RenderedPage
from seocrawl.exceptions import RenderError, ResourceAcquisitionError
from seocrawl.services.page_content_extractor import PageContentExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaywrightRenderOptions:
    timeout_ms: int = 30_000
    wait_until: str = "networkidle"  # domcontentloaded | load | networkidle


class PlaywrightPageRenderer:
    """Headless Chromium page renderer backed by Playwright's sync API.

    One browser is launched per crawl (`open()`), each `render()` gets its
    own browser context and page which are closed after use, and `close()`
    shuts the browser down. Use it as a context manager so the browser is
    released on every exit path.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        options: Optional[PlaywrightRenderOptions] = None,
        extractor: Optional[PageContentExtractor] = None,
        playwright_factory=sync_playwright,
    ):
        self._user_agent = user_agent
        self._options = options or PlaywrightRenderOptions()
        self._extractor = extractor or PageContentExtractor()
        self._playwright_factory = playwright_factory
        self._playwright = None
        self._browser = None

    def open(self) -> "PlaywrightPageRenderer":
        if self._browser is not None:
            return self
        try:
            self._playwright = self._playwright_factory().start()
            self._browser = self._playwright.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"],
            )
        except Exception as e:
            self.close()
            raise ResourceAcquisitionError(f"Could not start headless browser: {e}") from e
        return self

    def close(self) -> None:
        browser, self._browser = self._browser, None
        pw, self._playwright = self._playwright, None
        if browser is not None:
            try:
                browser.close()
            except Exception:
                logger.exception("Error closing headless browser")
        if pw is not None:
            try:
                pw.stop()
            except Exception:
                logger.exception("Error stopping Playwright")

    def __enter__(self) -> "PlaywrightPageRenderer":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def render(self, url: str, timeout_ms: Optional[int] = None) -> RenderedPage:
        """Load `url` and return the rendered document with its extracted content.

        Raises `RenderError` on navigation timeout, network or script errors,
        and when the document cannot be extracted.
        """
        if self._browser is None:
            raise RenderError(url, "renderer is not open")
        timeout = timeout_ms if timeout_ms is not None else self._options.timeout_ms
        try:
            context = self._browser.new_context(user_agent=self._user_agent)
        except PlaywrightError as e:
            raise RenderError(url, f"could not open browser context: {e}") from e
        try:
            page = context.new_page()
            try:
                page.goto(url, wait_until=self._options.wait_until, timeout=timeout)
                html = page.content()
                title = page.title()
                final_url = page.url or url
            finally:
                page.close()
        except PlaywrightTimeoutError as e:
            raise RenderError(url, f"navigation timeout after {timeout} ms") from e
        except PlaywrightError as e:
            raise RenderError(url, str(e)) from e
        finally:
            try:
                context.close()
            except Exception:
                logger.exception("Error closing browser context for %s", url)

        try:
            # links resolve against the final (post-redirect) URL, the record keeps the requested one
            rendered = self._extractor.extract(final_url, html, title=(title or "").strip() or None)
            return rendered._replace(url=url)
        except Exception as e:
            raise RenderError(url, f"could not extract content: {e}") from e

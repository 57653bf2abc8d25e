import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from seocrawl.exceptions import RenderError, ResourceAcquisitionError
from seocrawl.services.headless_browser_renderer import PlaywrightPageRenderer, PlaywrightRenderOptions

HTML = '<html><head><title>T</title></head><body><a href="next">n</a></body></html>'


class _FakePage:
    def __init__(self, browser, url):
        self.browser = browser
        self.url = url
        self.closed = False

    def goto(self, url, wait_until=None, timeout=None):
        self.browser.gotos.append((url, wait_until, timeout))
        if self.browser.goto_error is not None:
            raise self.browser.goto_error
        self.url = self.browser.redirect_to or url

    def content(self):
        return HTML

    def title(self):
        return "  T  "

    def close(self):
        self.closed = True


class _FakeContext:
    def __init__(self, browser):
        self.browser = browser
        self.closed = False

    def new_page(self):
        page = _FakePage(self.browser, "about:blank")
        self.browser.pages.append(page)
        return page

    def close(self):
        self.closed = True


class _FakeBrowser:
    def __init__(self):
        self.closed = False
        self.contexts = []
        self.pages = []
        self.gotos = []
        self.goto_error = None
        self.redirect_to = None
        self.user_agents = []

    def new_context(self, user_agent=None):
        self.user_agents.append(user_agent)
        ctx = _FakeContext(self)
        self.contexts.append(ctx)
        return ctx

    def close(self):
        self.closed = True


class _FakePlaywright:
    def __init__(self, launch_error=None):
        self.browser = _FakeBrowser()
        self.launch_error = launch_error
        self.stopped = False
        self.chromium = self

    def launch(self, headless=True, args=None):
        if self.launch_error is not None:
            raise self.launch_error
        return self.browser

    def stop(self):
        self.stopped = True


class _FakeFactory:
    def __init__(self, pw):
        self.pw = pw

    def __call__(self):
        return self

    def start(self):
        return self.pw


def _renderer(pw, **kwargs):
    return PlaywrightPageRenderer(user_agent="TestBot/1.0", playwright_factory=_FakeFactory(pw), **kwargs)


def test_render_returns_extracted_page_and_releases_page_and_context():
    pw = _FakePlaywright()
    with _renderer(pw, options=PlaywrightRenderOptions(timeout_ms=1234, wait_until="load")) as r:
        page = r.render("https://example.com/")
    assert page.url == "https://example.com/"
    assert page.title == "T"
    assert page.raw_markup == HTML
    assert page.link_urls() == ["https://example.com/next"]
    assert pw.browser.gotos == [("https://example.com/", "load", 1234)]
    assert pw.browser.user_agents == ["TestBot/1.0"]
    assert all(p.closed for p in pw.browser.pages)
    assert all(c.closed for c in pw.browser.contexts)
    assert pw.browser.closed and pw.stopped


def test_links_resolve_against_final_url_but_record_keeps_requested_url():
    pw = _FakePlaywright()
    pw.browser.redirect_to = "https://example.com/moved/"
    with _renderer(pw) as r:
        page = r.render("https://example.com/old")
    assert page.url == "https://example.com/old"
    assert page.link_urls() == ["https://example.com/moved/next"]


def test_navigation_timeout_raises_render_error_and_releases_resources():
    pw = _FakePlaywright()
    pw.browser.goto_error = PlaywrightTimeoutError("Timeout 10ms exceeded")
    with _renderer(pw) as r:
        with pytest.raises(RenderError, match="navigation timeout"):
            r.render("https://example.com/slow", timeout_ms=10)
    assert pw.browser.pages[0].closed
    assert pw.browser.contexts[0].closed
    assert pw.browser.closed


def test_network_error_raises_render_error():
    pw = _FakePlaywright()
    pw.browser.goto_error = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
    with _renderer(pw) as r:
        with pytest.raises(RenderError) as exc:
            r.render("https://example.com/")
    assert "ERR_NAME_NOT_RESOLVED" in exc.value.reason


def test_render_before_open_raises():
    with pytest.raises(RenderError, match="not open"):
        _renderer(_FakePlaywright()).render("https://example.com/")


def test_launch_failure_raises_resource_acquisition_error_and_stops_playwright():
    pw = _FakePlaywright(launch_error=RuntimeError("no chromium"))
    with pytest.raises(ResourceAcquisitionError):
        with _renderer(pw):
            pass
    assert pw.stopped


def test_browser_released_when_body_raises():
    pw = _FakePlaywright()
    with pytest.raises(ValueError):
        with _renderer(pw):
            raise ValueError("boom")
    assert pw.browser.closed and pw.stopped

from types import SimpleNamespace
from unittest.mock import Mock

from fastapi.testclient import TestClient

from seocrawl.api.server import create_app
from seocrawl.domain import CrawlSummary
from seocrawl.exceptions import InvalidInputError


def _client(orchestrator):
    container = SimpleNamespace(
        crawl_orchestrator=lambda: orchestrator,
        sessions_repository=lambda: Mock(get=Mock(return_value=None)),
        pages_repository=lambda: Mock(get_page=Mock(return_value=None)),
        config=lambda: {"USER_AGENT": "SEOCrawl/0.1"},
    )
    return TestClient(create_app(container))


def test_post_crawl_end_to_end():
    summary = CrawlSummary(1, 1, 1, ["https://example.com/"], [], [10])
    orchestrator = Mock(crawl=Mock(return_value=summary))

    resp = _client(orchestrator).post("/crawl", json={"startUrl": "https://example.com/", "maxPages": 1})

    assert resp.status_code == 200
    assert resp.json()["scrapedPageIds"] == [10]
    orchestrator.crawl.assert_called_once_with("https://example.com/", max_pages=1, site_id=None, user_id=None)


def test_post_crawl_invalid_input_is_400():
    orchestrator = Mock(crawl=Mock(side_effect=InvalidInputError("startUrl is required")))
    resp = _client(orchestrator).post("/crawl", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid crawl request", "details": "startUrl is required"}


def test_malformed_body_is_400():
    orchestrator = Mock()
    resp = _client(orchestrator).post("/crawl", json={"startUrl": "https://example.com/", "maxPages": "lots"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"
    orchestrator.crawl.assert_not_called()


def test_missing_resources_are_404():
    client = _client(Mock())
    assert client.get("/crawl/sessions/1").status_code == 404
    assert client.get("/pages/1").status_code == 404
    assert client.get("/systems/health").json() == {"status": "ok"}

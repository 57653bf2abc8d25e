from seocrawl.domain import CrawlContext, CrawlSummary


def _ctx(max_pages=2):
    return CrawlContext(
        session_id=1,
        site_id="site",
        user_id="user",
        start_url="https://example.com/",
        base_origin="https://example.com",
        max_pages=max_pages,
    )


def test_context_seeds_frontier_with_start_url():
    ctx = _ctx()
    assert ctx.frontier.pop() == "https://example.com/"


def test_budget_counts_attempted_pages():
    ctx = _ctx(max_pages=2)
    assert ctx.has_budget()
    ctx.mark_visited("https://example.com/")
    assert ctx.has_budget()
    ctx.mark_visited("https://example.com/a")
    assert not ctx.has_budget()
    assert ctx.pages_crawled == 2


def test_failures_and_saved_pages_are_deduplicated():
    ctx = _ctx()
    ctx.record_failure("https://example.com/a#x")
    ctx.record_failure("https://example.com/a")
    ctx.record_saved(7)
    ctx.record_saved(7)
    assert ctx.failed_urls == ["https://example.com/a"]
    assert ctx.scraped_page_ids == [7]


def test_summary_crawled_pages_counts_visited_urls():
    summary = CrawlSummary(
        session_id=1,
        total_urls_attempted=2,
        total_urls_scraped=1,
        visited_urls=["https://example.com/", "https://example.com/a"],
        failed_urls=["https://example.com/a"],
        scraped_page_ids=[1],
    )
    assert summary.crawled_pages == 2
